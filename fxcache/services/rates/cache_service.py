from __future__ import annotations

"""Exchange rate cache with TTL expiry and static fallback.

Holds the best known RateTable ("1 JPY = N units of quote") for the process.
Reads are synchronous and never touch the network; only refresh_rates()
awaits the remote lookup. Refreshes are serialised by an asyncio.Lock so the
stored table and its timestamp always change together.

Failure policy: any failed lookup resets the table to FALLBACK_RATES and stamps
it with the current time, so a broken upstream is retried at most once per
TTL instead of on every request. Nothing here raises to display code.
"""
import asyncio
import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, TYPE_CHECKING

from fxcache.models.constants import (
    BASE_CURRENCY,
    DEFAULT_TTL_SECONDS,
    FALLBACK_RATES,
    CurrencyCode,
)
from fxcache.models.rates import RateTable, validate_rate_table
from .base import FetchResult, RateFetcher
from .providers import make_rate_fetcher

if TYPE_CHECKING:  # pragma: no cover
    from fxcache.core.config import Settings

logger = logging.getLogger("fxcache.rates")

Clock = Callable[[], int]

SOURCE_INITIAL = "fallback-initial"
SOURCE_FETCHED = "fetched"
SOURCE_FALLBACK = "fallback-error"
SOURCE_SEEDED = "seeded"


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class _CacheState:
    table: RateTable
    fetched_at_ms: int
    source: str


class ExchangeRateCache:
    """Process-wide rate store; construct one and inject it where prices are shown."""

    def __init__(
        self,
        fetcher: RateFetcher,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Optional[Clock] = None,
    ):
        self._ttl_ms = int(ttl_seconds * 1000)
        if self._ttl_ms <= 0:
            raise ValueError("ttl_seconds must be at least one millisecond")
        self._fetcher = fetcher
        self._clock = clock or wall_clock_ms
        self._state: Optional[_CacheState] = None
        self._lock = asyncio.Lock()

    # Internal --------------------------------------------------
    def _ensure_state(self) -> _CacheState:
        if self._state is None:
            # Timestamp 0 means "immediately stale"
            self._state = _CacheState(dict(FALLBACK_RATES), 0, SOURCE_INITIAL)
        return self._state

    def _is_fresh(self, state: _CacheState) -> bool:
        return self._clock() - state.fetched_at_ms < self._ttl_ms

    async def _fetch(self) -> FetchResult:
        try:
            return await self._fetcher.fetch()
        except Exception as e:
            return FetchResult.failure(f"{type(e).__name__}: {e}")

    def _store(self, result: FetchResult) -> _CacheState:
        now = self._clock()
        quote = self._fetcher.quote_currency
        if result.ok:
            table = dict(FALLBACK_RATES)
            table[quote] = result.rate  # type: ignore[assignment]
            self._state = _CacheState(table, now, SOURCE_FETCHED)
            logger.info(
                "exchange rate refreshed",
                extra={"currency": quote.value, "rate": result.rate, "outcome": SOURCE_FETCHED},
            )
        else:
            self._state = _CacheState(dict(FALLBACK_RATES), now, SOURCE_FALLBACK)
            logger.warning(
                "exchange rate fetch failed, using fallback rates: %s",
                result.error,
                extra={"currency": quote.value, "outcome": SOURCE_FALLBACK},
            )
        return self._state

    # Public API -----------------------------------------------
    @property
    def ttl_ms(self) -> int:
        return self._ttl_ms

    @property
    def fetched_at_ms(self) -> int:
        return self._ensure_state().fetched_at_ms

    @property
    def source(self) -> str:
        return self._ensure_state().source

    def age_ms(self) -> int:
        return self._clock() - self.fetched_at_ms

    def is_stale(self) -> bool:
        return not self._is_fresh(self._ensure_state())

    def get_rates(self) -> RateTable:
        table = dict(self._ensure_state().table)
        table[BASE_CURRENCY] = 1.0
        return table

    def get_rate(self, code: CurrencyCode | str) -> float:
        currency = CurrencyCode.parse(code)
        if currency is None:
            return 1.0
        if currency == BASE_CURRENCY:
            return 1.0
        rate = self._ensure_state().table.get(currency)
        if rate is None or not math.isfinite(rate) or rate < 0:
            return 1.0
        return rate

    async def refresh_rates(self, force: bool = False) -> RateTable:
        if not force and self._is_fresh(self._ensure_state()):
            logger.debug("exchange rate cache hit", extra={"age_ms": self.age_ms()})
            return self.get_rates()
        async with self._lock:
            # Whoever held the lock may have refreshed already
            if not force and self._is_fresh(self._ensure_state()):
                return self.get_rates()
            result = await self._fetch()
            self._store(result)
            return self.get_rates()

    def convert_from_base(self, amount: float, to: CurrencyCode | str) -> float:
        if CurrencyCode.parse(to) == BASE_CURRENCY:
            return amount
        return amount * self.get_rate(to)

    def convert_to_base(self, amount: float, frm: CurrencyCode | str) -> float:
        if CurrencyCode.parse(frm) == BASE_CURRENCY:
            return amount
        rate = self.get_rate(frm)
        if rate == 0:
            return amount
        return amount / rate

    # Test support ---------------------------------------------
    def seed(
        self,
        table: Mapping[object, object],
        fetched_at_ms: Optional[int] = None,
        *,
        strict: bool = True,
    ) -> None:
        """Overwrite the cached table and timestamp, bypassing TTL and network.

        strict=False skips rate validation so degenerate tables (zero or
        negative rates) can be planted; unknown currency keys are dropped.
        """
        if strict:
            new_table = validate_rate_table(table)
        else:
            new_table = {}
            for key, value in table.items():
                code = CurrencyCode.parse(key)
                if code is not None:
                    new_table[code] = float(value)  # type: ignore[arg-type]
            new_table[BASE_CURRENCY] = 1.0
        stamp = self._clock() if fetched_at_ms is None else int(fetched_at_ms)
        self._state = _CacheState(new_table, stamp, SOURCE_SEEDED)

    def reset(self) -> None:
        """Drop cached state; the next access re-seeds from the fallback table."""
        self._state = None


def build_rate_cache(settings: "Settings", clock: Optional[Clock] = None) -> ExchangeRateCache:
    fetcher = make_rate_fetcher(settings.exchange_rate_provider, settings)
    return ExchangeRateCache(
        fetcher, ttl_seconds=settings.rates_cache_ttl_seconds, clock=clock
    )
