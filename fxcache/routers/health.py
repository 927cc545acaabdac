from __future__ import annotations

from fastapi import APIRouter, Depends

from fxcache.services.rates.cache_service import ExchangeRateCache
from .rates import get_cache_service

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness plus rate cache freshness")
async def health(svc: ExchangeRateCache = Depends(get_cache_service)):
    return {
        "status": "ok",
        "rates_age_ms": svc.age_ms(),
        "rates_stale": svc.is_stale(),
        "rates_source": svc.source,
    }
