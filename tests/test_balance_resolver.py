import uuid
from datetime import date
from decimal import Decimal

import pytest

from khata.models.order_models import OrderStatus
from khata.schemas.ledger_schemas import CollectionSnapshot, OrderSnapshot
from khata.services.ledger_services import (
    BUCKET_HISTORY, BUCKET_PENDING, BUCKET_UDHAAR, aggregate_customer_pending, order_bucket,
    outstanding, quotation_total, resolve_order_balance, resolve_order_balances,
)

PRICES = {"a": Decimal("100"), "b": Decimal("50")}


def _order(lines, status=OrderStatus.PENDING, advance=0, customer_id=None):
    return OrderSnapshot(
        id=uuid.uuid4(),
        customer_id=customer_id or uuid.uuid4(),
        products=[{"productId": pid, "qty": qty} for pid, qty in lines],
        status=status,
        advance_amount=advance,
    )


def test_undelivered_order_reports_pending():
    balance = resolve_order_balance(_order([("a", 2), ("b", 1)]), PRICES)
    assert balance.total == Decimal("250.00")
    assert balance.pending == Decimal("250.00")
    assert balance.udhaar == Decimal("0")
    assert order_bucket(balance) == BUCKET_PENDING


def test_delivered_order_reports_udhaar_after_collections():
    order = _order([("a", 2), ("b", 1)], status=OrderStatus.DELIVERED)
    balance = resolve_order_balance(order, PRICES, Decimal("100"))
    assert balance.udhaar == Decimal("150.00")
    assert balance.pending == Decimal("0")
    assert order_bucket(balance) == BUCKET_UDHAAR


def test_overpayment_clamps_to_zero():
    assert outstanding(200, 50, 200) == Decimal("0")
    order = _order([("a", 2)], status=OrderStatus.DELIVERED, advance=50)
    balance = resolve_order_balance(order, PRICES, Decimal("200"))
    assert balance.udhaar == Decimal("0")
    assert order_bucket(balance) == BUCKET_HISTORY


@pytest.mark.parametrize("total", ["0", "10", "250.75"])
@pytest.mark.parametrize("advance", ["0", "5", "300"])
@pytest.mark.parametrize("collected", ["0", "1", "1000"])
def test_outstanding_is_never_negative(total, advance, collected):
    assert outstanding(Decimal(total), Decimal(advance), Decimal(collected)) >= 0


def test_resolver_is_idempotent():
    order = _order([("a", 1), ("b", 3)], status=OrderStatus.DELIVERED, advance=20)
    first = resolve_order_balance(order, PRICES, Decimal("30"))
    second = resolve_order_balance(order, PRICES, Decimal("30"))
    assert first == second


def test_quotation_conversion_figures():
    total = quotation_total(Decimal("75"), 4)
    assert total == Decimal("300.00")
    assert outstanding(total, Decimal("100"), Decimal("0")) == Decimal("200.00")


def test_customer_aggregate_sums_udhaar_across_orders():
    customer = uuid.uuid4()
    first = _order([("a", 2)], status=OrderStatus.DELIVERED, advance=50, customer_id=customer)
    second = _order([("b", 2)], status=OrderStatus.DELIVERED, advance=25, customer_id=customer)
    undelivered = _order([("a", 5)], customer_id=customer)
    balances = resolve_order_balances([first, second, undelivered], PRICES, [])

    rows = aggregate_customer_pending(balances)
    assert len(rows) == 1
    assert rows[0].pending == Decimal("225.00")
    assert rows[0].order_ids == [first.id, second.id]


def test_customer_aggregate_picks_earliest_due_date_and_skips_settled():
    owing = uuid.uuid4()
    settled = uuid.uuid4()
    order = _order([("a", 1)], status=OrderStatus.DELIVERED, customer_id=owing)
    paid = _order([("b", 1)], status=OrderStatus.DELIVERED, customer_id=settled)
    collections = [CollectionSnapshot(id=uuid.uuid4(), customer_id=settled, order_id=paid.id, amount="50")]
    balances = resolve_order_balances([order, paid], PRICES, collections)

    rows = aggregate_customer_pending(
        balances, {str(owing): [date(2026, 3, 9), None, date(2026, 3, 2)]}
    )
    assert [r.customer_id for r in rows] == [owing]
    assert rows[0].earliest_due_date == date(2026, 3, 2)


@pytest.mark.parametrize("products", ["not a list", None, [{"qty": 3}], [{"productId": None, "qty": 2}], [42, "a"]])
def test_malformed_products_column_values_to_zero(products):
    order = OrderSnapshot.model_validate({"id": uuid.uuid4(), "customer_id": uuid.uuid4(), "products": products})
    balance = resolve_order_balance(order, PRICES)
    assert balance.total == Decimal("0")
    assert balance.pending == Decimal("0")


def test_line_without_product_id_is_reported_unknown():
    order = OrderSnapshot.model_validate({
        "id": uuid.uuid4(),
        "customer_id": uuid.uuid4(),
        "products": [{"productId": "a", "qty": 1}, {"qty": 3}],
    })
    balance = resolve_order_balance(order, PRICES)
    assert balance.total == Decimal("100.00")
    assert balance.unknown_product_ids == [""]


@pytest.mark.parametrize("value", ["1e30", "9" * 40, "Infinity", "-Infinity", "NaN", Decimal("sNaN"), "abc", None])
def test_outstanding_never_raises_at_extremes(value):
    assert outstanding(value, 0, 0) >= 0
    assert outstanding(100, value, 0) >= 0
    assert outstanding(100, 0, value) >= 0


@pytest.mark.parametrize("collected", ["1e30", "NaN", "Infinity", Decimal("9.99e25")])
def test_resolver_handles_extreme_collections(collected):
    order = _order([("a", 10**6)], status=OrderStatus.DELIVERED, advance="1e40")
    balance = resolve_order_balance(order, PRICES, collected)
    assert balance.udhaar >= 0
    assert balance.pending == 0
