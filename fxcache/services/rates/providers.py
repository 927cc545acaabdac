from __future__ import annotations

"""Concrete rate fetchers and factory.

'external-http' queries a public rate-lookup service for rates relative to
JPY; 'static' never touches the network and always reports failure, which
leaves the cache serving the fallback table.
"""
import logging
from typing import Callable, Dict, Optional, TYPE_CHECKING

import httpx

from fxcache.core.errors import RateParseError
from fxcache.services.http_client import HttpError, get_json
from .base import FetchResult, RateFetcher
from .extraction import extract_rate, matching_strategy

if TYPE_CHECKING:  # pragma: no cover
    from fxcache.core.config import Settings

logger = logging.getLogger("fxcache.rates")


class StaticRateFetcher(RateFetcher):
    name = "static"

    async def fetch(self) -> FetchResult:  # type: ignore[override]
        return FetchResult.failure("static provider performs no remote lookup")


class ExternalHTTPRateFetcher(RateFetcher):
    name = "external-http"

    def __init__(
        self,
        endpoint: str,
        *,
        api_key: Optional[str] = None,
        timeout: float = 5.0,
        retries: int = 1,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint
        self._api_key = api_key
        self._timeout = timeout
        self._retries = retries
        self._transport = transport

    def _params(self) -> Optional[Dict[str, str]]:
        if self._api_key:
            return {"access_key": self._api_key}
        return None

    def _parse(self, payload: object) -> float:
        rate = extract_rate(payload, self.quote_currency.value)
        if rate is None:
            raise RateParseError(
                f"no usable {self.quote_currency.value} rate in response from {self.endpoint}"
            )
        logger.debug(
            "rate extracted",
            extra={
                "currency": self.quote_currency.value,
                "shape": matching_strategy(payload, self.quote_currency.value),
            },
        )
        return rate

    async def fetch(self) -> FetchResult:  # type: ignore[override]
        try:
            payload = await get_json(
                self.endpoint,
                params=self._params(),
                timeout=self._timeout,
                retries=self._retries,
                transport=self._transport,
            )
            return FetchResult.success(self._parse(payload))
        except (HttpError, RateParseError) as e:
            return FetchResult.failure(str(e))
        except Exception as e:  # parsing must never take the cache down
            logger.exception("unexpected error parsing rate response")
            return FetchResult.failure(f"{type(e).__name__}: {e}")


_FETCHER_REGISTRY: Dict[str, Callable[["Settings"], RateFetcher]] = {
    "static": lambda settings: StaticRateFetcher(),
    "external-http": lambda settings: ExternalHTTPRateFetcher(
        settings.exchange_rate_endpoint,
        api_key=settings.exchange_rate_api_key,
        timeout=settings.http_timeout_seconds,
        retries=settings.http_retries,
    ),
}


def make_rate_fetcher(kind: str, settings: "Settings") -> RateFetcher:
    factory = _FETCHER_REGISTRY.get(kind)
    if not factory:
        raise ValueError(f"Unknown rate provider kind '{kind}'")
    return factory(settings)
