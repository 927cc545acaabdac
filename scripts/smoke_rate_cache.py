"""Smoke script for the exchange rate cache.

Demonstrates:
 1. First refresh goes to the configured provider (or falls back).
 2. A second non-forced refresh within TTL is served from cache (same timestamp).
 3. Backdating the timestamp past the TTL makes the next refresh fetch again.

NOTE: This is a lightweight diagnostic and not a formal test. With the
default 'external-http' provider it needs network access; set
EXCHANGE_RATE_PROVIDER=static to run offline.
"""

import asyncio
from pprint import pprint

from fxcache.core.config import get_settings
from fxcache.services.rates.cache_service import build_rate_cache


def _snapshot(svc):
    return {
        "rates": {c.value: r for c, r in svc.get_rates().items()},
        "fetched_at_ms": svc.fetched_at_ms,
        "source": svc.source,
    }


async def run():
    svc = build_rate_cache(get_settings())
    out = {}

    await svc.refresh_rates()
    out["initial"] = _snapshot(svc)

    await svc.refresh_rates()
    out["second"] = _snapshot(svc)

    # Force staleness by backdating fetched_at beyond TTL
    svc.seed(svc.get_rates(), svc.fetched_at_ms - svc.ttl_ms - 5000)
    await svc.refresh_rates()
    out["after_expiry"] = _snapshot(svc)

    pprint(out)


if __name__ == "__main__":
    asyncio.run(run())
