from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from fxcache.models.constants import BASE_CURRENCY, CurrencyCode
from fxcache.services.money import round_for_currency

"""Cross-currency conversion on top of the rate cache.

All conversions go through the base currency, so one cached multiplier per
currency is enough for every pair. Results carry the effective rate for
display and auditing; rounding to the target currency's minor unit happens
here and nowhere else.
"""


class SupportsBaseConversion(Protocol):
    def convert_from_base(self, amount: float, to: CurrencyCode | str) -> float: ...

    def convert_to_base(self, amount: float, frm: CurrencyCode | str) -> float: ...


@dataclass(frozen=True)
class ConversionResult:
    original_amount: float
    from_currency: CurrencyCode
    to_currency: CurrencyCode
    rate: float
    converted_amount: float


def convert(
    amount: float,
    from_currency: CurrencyCode,
    to_currency: CurrencyCode,
    cache: SupportsBaseConversion,
) -> ConversionResult:
    if from_currency == to_currency:
        rate = 1.0
        converted = amount
    else:
        base_amount = cache.convert_to_base(amount, from_currency)
        converted = cache.convert_from_base(base_amount, to_currency)
        # rate of a unit conversion, independent of amount (amount may be 0)
        rate = cache.convert_from_base(
            cache.convert_to_base(1.0, from_currency), to_currency
        )
    return ConversionResult(
        original_amount=amount,
        from_currency=from_currency,
        to_currency=to_currency,
        rate=rate,
        converted_amount=round_for_currency(converted, to_currency),
    )


def normalize_to_base(
    amount: float, currency: CurrencyCode | str, cache: SupportsBaseConversion
) -> int:
    """Seller price in any supported currency as whole base-currency units.

    Unknown currency codes are treated as already being in the base currency.
    """
    code = CurrencyCode.parse(currency) or BASE_CURRENCY
    return int(round_for_currency(cache.convert_to_base(amount, code), BASE_CURRENCY))
