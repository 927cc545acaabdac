from __future__ import annotations

"""Async HTTP GET-JSON helper with timeout and limited retry.

Every failure mode (transport error, timeout, non-2xx status, body that is
not a JSON object) surfaces as HttpError so callers only handle one type.
Only transport errors and 5xx responses are retried; a 4xx or a bad body
will not improve on a second try.
"""
import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from fxcache.core.errors import RateFetchError

logger = logging.getLogger("fxcache.http")


class HttpError(RateFetchError):
    def __init__(self, message: str, *, retryable: bool = False):
        super().__init__(message)
        self.retryable = retryable


async def get_json(
    url: str,
    *,
    params: Optional[Mapping[str, str]] = None,
    timeout: float = 5.0,
    retries: int = 1,
    backoff: float = 0.5,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    last_err: Optional[Exception] = None
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        for attempt in range(retries + 1):
            try:
                resp = await client.get(url, params=params)
                if not resp.is_success:
                    # only server-side errors are worth another attempt
                    raise HttpError(
                        f"HTTP {resp.status_code} for {url}",
                        retryable=resp.is_server_error,
                    )
                data = resp.json()
                if not isinstance(data, dict):
                    raise HttpError(f"Expected JSON object from {url}")
                return data
            except (httpx.HTTPError, HttpError, ValueError) as e:  # ValueError for JSON decode
                last_err = e
                retryable = isinstance(e, httpx.TransportError) or (
                    isinstance(e, HttpError) and e.retryable
                )
                logger.debug(
                    "GET attempt failed",
                    extra={"endpoint": url, "attempt": attempt + 1, "error": str(e)},
                )
                if not retryable or attempt == retries:
                    break
                await asyncio.sleep(backoff * (2**attempt))
    raise HttpError(f"Failed to fetch JSON from {url}: {last_err}")
