from __future__ import annotations

import math
from typing import Dict, Mapping

from pydantic import BaseModel, Field, field_validator

from .constants import BASE_CURRENCY, CurrencyCode

RateTable = Dict[CurrencyCode, float]


def is_valid_rate(value: object) -> bool:
    """True for a real number (not bool) that is finite and strictly positive."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def validate_rate_table(table: Mapping[object, object]) -> RateTable:
    """Normalise a caller supplied table into a RateTable.

    Keys may be CurrencyCode members or their string values. Raises ValueError
    for unknown codes, non-positive / non-finite rates or a base entry other
    than 1.
    """
    out: RateTable = {}
    for key, value in table.items():
        code = CurrencyCode.parse(key)
        if code is None:
            raise ValueError(f"unsupported currency {key!r}")
        if not is_valid_rate(value):
            raise ValueError(f"invalid rate for {code.value}: {value!r}")
        out[code] = float(value)  # type: ignore[arg-type]
    if out.setdefault(BASE_CURRENCY, 1.0) != 1.0:
        raise ValueError(f"base currency {BASE_CURRENCY.value} rate must be 1")
    return out


class RateTableOut(BaseModel):
    base: CurrencyCode = BASE_CURRENCY
    rates: Dict[str, float]
    fetched_at_ms: int = Field(..., ge=0)
    age_ms: int
    stale: bool
    source: str

    @field_validator("rates")
    @classmethod
    def base_is_identity(cls, v: Dict[str, float]) -> Dict[str, float]:
        if v.get(BASE_CURRENCY.value) != 1.0:
            raise ValueError("base currency rate must be 1")
        return v


class ConversionOut(BaseModel):
    original_amount: float
    from_currency: CurrencyCode
    to_currency: CurrencyCode
    rate: float
    converted_amount: float


class FormattedPriceOut(BaseModel):
    amount: float
    locale: str
    currency: CurrencyCode
    formatted: str
