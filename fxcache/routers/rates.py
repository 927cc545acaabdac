from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from fxcache.models.constants import BASE_CURRENCY, CurrencyCode
from fxcache.models.rates import ConversionOut, FormattedPriceOut, RateTableOut
from fxcache.services.money import currency_for_locale, format_base_price
from fxcache.services.rates.cache_service import ExchangeRateCache
from fxcache.services.rates.conversion import convert

"""Rates router for price-rendering collaborators.

Endpoints:
    - GET /rates              -> current cached table (never refreshes)
    - POST /rates/refresh     -> refresh if stale, or always with force=true
    - GET /rates/convert      -> convert an amount between supported currencies
    - GET /rates/format       -> base-currency amount formatted for a locale
                                 (optionally in an explicit display currency)

Conversions read whatever is cached; callers that need fresh numbers hit
/rates/refresh first.
"""

router = APIRouter(prefix="/rates", tags=["rates"])


def get_cache_service(request: Request) -> ExchangeRateCache:
    return request.app.state.rate_cache


def _table_out(svc: ExchangeRateCache) -> RateTableOut:
    return RateTableOut(
        base=BASE_CURRENCY,
        rates={code.value: rate for code, rate in svc.get_rates().items()},
        fetched_at_ms=svc.fetched_at_ms,
        age_ms=svc.age_ms(),
        stale=svc.is_stale(),
        source=svc.source,
    )


@router.get("", response_model=RateTableOut, summary="Current cached rates")
async def read_rates(svc: ExchangeRateCache = Depends(get_cache_service)):
    return _table_out(svc)


@router.post("/refresh", response_model=RateTableOut, summary="Refresh cached rates")
async def refresh_rates(
    force: bool = Query(False, description="Fetch even when the cache is fresh"),
    svc: ExchangeRateCache = Depends(get_cache_service),
):
    await svc.refresh_rates(force=force)
    return _table_out(svc)


@router.get("/convert", response_model=ConversionOut, summary="Convert an amount")
async def convert_amount(
    amount: float = Query(..., allow_inf_nan=False, description="Amount in from_currency"),
    from_currency: CurrencyCode = Query(BASE_CURRENCY),
    to_currency: CurrencyCode = Query(...),
    svc: ExchangeRateCache = Depends(get_cache_service),
):
    result = convert(amount, from_currency, to_currency, svc)
    return ConversionOut(
        original_amount=result.original_amount,
        from_currency=result.from_currency,
        to_currency=result.to_currency,
        rate=result.rate,
        converted_amount=result.converted_amount,
    )


@router.get(
    "/format", response_model=FormattedPriceOut, summary="Format a base price for a locale"
)
async def format_amount(
    amount: float = Query(..., allow_inf_nan=False, description="Amount in the base currency"),
    locale: str = Query("ja", min_length=2, max_length=10),
    currency: Optional[CurrencyCode] = Query(
        None, description="Display currency; defaults to the locale's currency"
    ),
    svc: ExchangeRateCache = Depends(get_cache_service),
):
    display = currency or currency_for_locale(locale)
    return FormattedPriceOut(
        amount=amount,
        locale=locale,
        currency=display,
        formatted=format_base_price(amount, locale, svc, currency=display),
    )
