"""Pydantic and domain models for the storefront exchange-rate cache."""

from .constants import (
    BASE_CURRENCY,
    FALLBACK_RATES,
    FLOATING_CURRENCY,
    CurrencyCode,
)  # re-export
from .rates import ConversionOut, FormattedPriceOut, RateTableOut

__all__ = [
    "BASE_CURRENCY",
    "FALLBACK_RATES",
    "FLOATING_CURRENCY",
    "CurrencyCode",
    "ConversionOut",
    "FormattedPriceOut",
    "RateTableOut",
]
