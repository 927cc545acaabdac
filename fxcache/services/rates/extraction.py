from __future__ import annotations

"""Pull the quote rate out of a rate-lookup response.

Public services disagree on where the number lives, so each known layout is a
strategy and they are tried in order:

    {"USD": 0.0067}
    {"rates": {"USD": 0.0067}}
    {"data": {"rates": {"USD": 0.0067}}}

The first strategy yielding a numeric, finite, positive value wins. Running
out of strategies means the payload is unusable.
"""
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

from fxcache.models.rates import is_valid_rate

Strategy = Callable[[Mapping[str, Any], str], Any]


def _top_level(payload: Mapping[str, Any], code: str) -> Any:
    return payload.get(code)


def _nested(*path: str) -> Strategy:
    def pick(payload: Mapping[str, Any], code: str) -> Any:
        node: Any = payload
        for key in path:
            if not isinstance(node, Mapping):
                return None
            node = node.get(key)
        if not isinstance(node, Mapping):
            return None
        return node.get(code)

    return pick


STRATEGIES: Sequence[Tuple[str, Strategy]] = (
    ("top-level", _top_level),
    ("rates", _nested("rates")),
    ("data.rates", _nested("data", "rates")),
)


def extract_rate(
    payload: object,
    code: str,
    strategies: Sequence[Tuple[str, Strategy]] = STRATEGIES,
) -> Optional[float]:
    if not isinstance(payload, Mapping):
        return None
    for _name, strategy in strategies:
        value = strategy(payload, code)
        if is_valid_rate(value):
            return float(value)
    return None


def matching_strategy(payload: object, code: str) -> Optional[str]:
    """Name of the strategy extract_rate would use, for diagnostics."""
    if not isinstance(payload, Mapping):
        return None
    for name, strategy in STRATEGIES:
        if is_valid_rate(strategy(payload, code)):
            return name
    return None
