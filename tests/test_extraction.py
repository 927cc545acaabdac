"""Rate extraction: ordered response-shape strategies.

Invariants:
    - shapes are tried top-level, then rates, then data.rates
    - the first numeric, finite, positive value wins
    - anything else (missing, string, bool, zero, NaN, inf) is skipped
"""

import math

import pytest

from fxcache.services.rates.extraction import (
    STRATEGIES,
    extract_rate,
    matching_strategy,
)


def test_strategy_order():
    assert [name for name, _ in STRATEGIES] == ["top-level", "rates", "data.rates"]


@pytest.mark.parametrize(
    "payload, shape",
    [
        ({"USD": 0.0068}, "top-level"),
        ({"rates": {"USD": 0.0068}}, "rates"),
        ({"data": {"rates": {"USD": 0.0068}}}, "data.rates"),
    ],
)
def test_each_shape_is_recognised(payload, shape):
    assert extract_rate(payload, "USD") == 0.0068
    assert matching_strategy(payload, "USD") == shape


def test_first_present_shape_wins():
    payload = {"USD": 0.005, "rates": {"USD": 0.006}, "data": {"rates": {"USD": 0.007}}}
    assert extract_rate(payload, "USD") == 0.005


@pytest.mark.parametrize("bad", ["0.0068", None, True, 0, -0.1, math.nan, math.inf, [0.1]])
def test_invalid_top_level_falls_through_to_rates(bad):
    payload = {"USD": bad, "rates": {"USD": 0.0069}}
    assert extract_rate(payload, "USD") == 0.0069


def test_integer_rate_is_accepted_as_float():
    value = extract_rate({"rates": {"USD": 2}}, "USD")
    assert value == 2.0
    assert isinstance(value, float)


@pytest.mark.parametrize(
    "payload",
    [
        {"foo": 1},
        {},
        {"rates": None},
        {"rates": [0.0068]},
        {"data": "rates"},
        {"data": {"rates": {"EUR": 0.006}}},
        {"rates": {"USD": "n/a"}},
    ],
)
def test_exhausted_strategies_yield_none(payload):
    assert extract_rate(payload, "USD") is None
    assert matching_strategy(payload, "USD") is None


@pytest.mark.parametrize("payload", [None, [], "USD", 0.0068])
def test_non_object_payload_yields_none(payload):
    assert extract_rate(payload, "USD") is None


def test_custom_strategy_list():
    only_top = STRATEGIES[:1]
    assert extract_rate({"rates": {"USD": 0.0068}}, "USD", only_top) is None
