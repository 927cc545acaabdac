"""Money / rounding / display helpers.

Centralized so conversion results, the HTTP surface and any price-rendering
caller use identical rounding semantics.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import TYPE_CHECKING, Optional

from fxcache.models.constants import (
    BASE_CURRENCY,
    CURRENCY_SYMBOLS,
    DEFAULT_LOCALE,
    FRACTION_DIGITS,
    LOCALE_CURRENCIES,
    CurrencyCode,
)

if TYPE_CHECKING:  # pragma: no cover
    from fxcache.services.rates.cache_service import ExchangeRateCache


def _quantize(value: float, digits: int) -> Decimal:
    exp = Decimal(1).scaleb(-digits)
    dec = Decimal(str(value))
    with localcontext() as ctx:
        # default 28 digits is too few for large amounts
        ctx.prec = max(ctx.prec, dec.adjusted() + digits + 2)
        return dec.quantize(exp, rounding=ROUND_HALF_UP)


def round_for_currency(value: float, currency: CurrencyCode | str) -> float:
    if not math.isfinite(value):
        return value
    code = CurrencyCode.parse(currency) or BASE_CURRENCY
    return float(_quantize(value, FRACTION_DIGITS[code]))


def currency_for_locale(locale: Optional[str]) -> CurrencyCode:
    if not locale:
        return LOCALE_CURRENCIES[DEFAULT_LOCALE]
    # "en-US" and "en_US" select the same currency as "en"
    lang = locale.replace("_", "-").split("-", 1)[0].lower()
    return LOCALE_CURRENCIES.get(lang, BASE_CURRENCY)


def format_price(amount: float, currency: CurrencyCode | str) -> str:
    """Render e.g. ``¥1,000`` or ``$9.10``; sign goes before the symbol."""
    if not math.isfinite(amount):
        raise ValueError(f"cannot format non-finite amount {amount!r}")
    code = CurrencyCode.parse(currency) or BASE_CURRENCY
    digits = FRACTION_DIGITS[code]
    value = _quantize(amount, digits)
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_SYMBOLS[code]}{value.copy_abs():,.{digits}f}"


def format_base_price(
    amount: float,
    locale: Optional[str],
    cache: "ExchangeRateCache",
    currency: CurrencyCode | str | None = None,
) -> str:
    """Format a base-currency amount for display.

    The display currency is the one the user picked, else the locale default.
    """
    currency = CurrencyCode.parse(currency) or currency_for_locale(locale)
    return format_price(cache.convert_from_base(amount, currency), currency)
