"""Root conftest: shared fixtures and fakes."""

import asyncio
import logging
import os

import pytest

# Never reach the real rate service from tests, and ignore any developer .env
os.environ["EXCHANGE_RATE_PROVIDER"] = "static"
os.environ["LOG_JSON"] = "true"

from fxcache.core.config import get_settings  # noqa: E402
from fxcache.services.rates.base import FetchResult, RateFetcher  # noqa: E402
from fxcache.services.rates.cache_service import ExchangeRateCache  # noqa: E402

NOW_MS = 1_700_000_000_000


class FakeClock:
    """Manually advanced epoch-millisecond clock."""

    def __init__(self, start: int = NOW_MS):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeFetcher(RateFetcher):
    """Scripted fetcher; each call consumes the next outcome, the last one repeats.

    An outcome may be a FetchResult or an exception instance to raise.
    """

    name = "fake"

    def __init__(self, *outcomes, delay: float = 0.0):
        self.outcomes = list(outcomes) or [FetchResult.success(0.0070)]
        self.delay = delay
        self.calls = 0
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self) -> FetchResult:
        self.calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
            if isinstance(outcome, BaseException):
                raise outcome
            return outcome
        finally:
            self.in_flight -= 1


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def restore_root_logging():
    """create_app() reconfigures the root logger; undo it after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def cache(fetcher, clock):
    return ExchangeRateCache(fetcher, ttl_seconds=3600, clock=clock)


@pytest.fixture
def make_cache(clock):
    """Build a cache around an arbitrary fetcher sharing the test clock."""

    def _make(fetcher: RateFetcher, ttl_seconds: float = 3600) -> ExchangeRateCache:
        return ExchangeRateCache(fetcher, ttl_seconds=ttl_seconds, clock=clock)

    return _make


@pytest.fixture
def fake_fetcher():
    """FakeFetcher factory: ``fake_fetcher(FetchResult.failure("x"), delay=0.01)``."""
    return FakeFetcher
