"""Domain constants for currency handling.

Rates are expressed as "1 unit of base currency = N units of quote".
JPY is the base and is never fetched; USD is the only floating currency.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class CurrencyCode(str, Enum):
    JPY = "JPY"
    USD = "USD"

    @classmethod
    def parse(cls, value: object) -> Optional["CurrencyCode"]:
        """Return the matching code, or None for anything unrecognised."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


BASE_CURRENCY = CurrencyCode.JPY
FLOATING_CURRENCY = CurrencyCode.USD

FALLBACK_RATES: Mapping[CurrencyCode, float] = MappingProxyType(
    {
        CurrencyCode.JPY: 1.0,  # base
        CurrencyCode.USD: 0.0067,
    }
)

DEFAULT_TTL_SECONDS = 3600  # 1 hour

# Minor units shown when rendering prices
FRACTION_DIGITS: Mapping[CurrencyCode, int] = MappingProxyType(
    {
        CurrencyCode.JPY: 0,
        CurrencyCode.USD: 2,
    }
)

CURRENCY_SYMBOLS: Mapping[CurrencyCode, str] = MappingProxyType(
    {
        CurrencyCode.JPY: "¥",
        CurrencyCode.USD: "$",
    }
)

LOCALE_CURRENCIES: Mapping[str, CurrencyCode] = MappingProxyType(
    {
        "ja": CurrencyCode.JPY,
        "en": CurrencyCode.USD,
    }
)
DEFAULT_LOCALE = "ja"
