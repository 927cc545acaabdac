from __future__ import annotations

"""Rate fetcher abstraction.

A fetcher performs one remote lookup of the floating currency and reports the
outcome as a FetchResult instead of raising, so the cache can fall back
without a try/except around every call site.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from fxcache.models.constants import BASE_CURRENCY, FLOATING_CURRENCY, CurrencyCode


@dataclass(frozen=True)
class FetchResult:
    rate: Optional[float] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.rate is not None and self.error is None

    @classmethod
    def success(cls, rate: float) -> "FetchResult":
        return cls(rate=rate)

    @classmethod
    def failure(cls, error: str) -> "FetchResult":
        return cls(error=error)


class RateFetcher(ABC):
    base_currency: CurrencyCode = BASE_CURRENCY
    quote_currency: CurrencyCode = FLOATING_CURRENCY
    name: str = "abstract"

    @abstractmethod
    async def fetch(self) -> FetchResult:
        """Return units of quote_currency per 1 unit of base_currency."""
        raise NotImplementedError
