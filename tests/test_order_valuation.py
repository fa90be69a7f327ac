from decimal import Decimal

import pytest

from khata.schemas.ledger_schemas import LineItem
from khata.services.ledger_services import (
    UNKNOWN_PRODUCT, build_price_map, calculate_order_total, product_label, unknown_product_ids,
)
from khata.utils.decimal_utils import to_decimal

PRICES = {"a": Decimal("100"), "b": Decimal("50")}


def test_total_multiplies_price_by_qty():
    lines = [{"productId": "a", "qty": 2}, {"productId": "b", "qty": 1}]
    assert calculate_order_total(lines, PRICES) == Decimal("250.00")


def test_empty_order_is_zero():
    assert calculate_order_total([], PRICES) == Decimal("0")
    assert calculate_order_total(None, PRICES) == Decimal("0")


def test_deleted_product_contributes_nothing():
    lines = [{"productId": "a", "qty": 1}, {"productId": "gone", "qty": 5}]
    assert calculate_order_total(lines, PRICES) == Decimal("100.00")
    assert unknown_product_ids(lines, PRICES) == ["gone"]
    assert product_label("gone", {"a": "Tile"}) == UNKNOWN_PRODUCT


def test_bad_quantities_count_as_zero():
    lines = [
        {"productId": "a", "qty": -3},
        {"productId": "a", "qty": "abc"},
        {"productId": "a", "qty": None},
        {"productId": "b", "qty": "2"},
    ]
    assert calculate_order_total(lines, PRICES) == Decimal("100.00")


def test_accepts_validated_line_items():
    lines = [LineItem(productId="a", qty=3)]
    assert calculate_order_total(lines, PRICES) == Decimal("300.00")


def test_monotonic_in_quantity_and_price():
    previous = Decimal("0")
    for qty in range(0, 6):
        total = calculate_order_total([{"productId": "a", "qty": qty}], PRICES)
        assert total >= previous
        previous = total

    previous = Decimal("0")
    for price in ("0", "0.50", "10", "99.99", "1000"):
        total = calculate_order_total([{"productId": "a", "qty": 2}], {"a": Decimal(price)})
        assert total >= previous
        previous = total


def test_build_price_map_from_dicts_and_objects():
    class Row:
        id = "x"
        price = "12.5"

    price_map = build_price_map([{"id": 1, "price": 3}, Row(), {"price": 9}])
    assert price_map == {"1": Decimal("3.00"), "x": Decimal("12.50")}


@pytest.mark.parametrize("qty", [10**27, "1e30", "9" * 40, "Infinity", "NaN", "-1e50"])
def test_extreme_quantities_never_raise(qty):
    total = calculate_order_total([{"productId": "a", "qty": qty}], {"a": Decimal("1")})
    assert total >= 0


@pytest.mark.parametrize("price", ["1e30", "Infinity", "-Infinity", "NaN", "sNaN", Decimal("1e26")])
def test_extreme_prices_never_raise(price):
    price_map = build_price_map([{"id": "a", "price": price}])
    total = calculate_order_total([{"productId": "a", "qty": 10**6}], price_map)
    assert total >= 0


def test_money_too_wide_for_two_places_is_zero():
    assert to_decimal("1e30") == Decimal("0")
    assert to_decimal(Decimal("12.345")) == Decimal("12.35")
