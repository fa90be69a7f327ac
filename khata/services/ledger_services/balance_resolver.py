# khata/services/ledger_services/balance_resolver.py
"""
Outstanding balance per order and per customer.

An order's outstanding amount is ``max(0, total - advance - collected)``.
Order status only decides the label: undelivered orders report it as
``pending``, delivered ones as ``udhaar`` (credit). Overpayment clamps to 0;
there is no customer credit/refund balance.
"""
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional

from khata.models.order_models import OrderStatus
from khata.schemas.ledger_schemas import CustomerPending, OrderBalance, OrderSnapshot
from khata.services.ledger_services.collection_aggregation import collections_by_order
from khata.services.ledger_services.order_valuation import calculate_order_total, unknown_product_ids
from khata.utils.decimal_utils import ZERO, compute_balance, to_decimal

BUCKET_PENDING = "pending"
BUCKET_UDHAAR = "udhaar"
BUCKET_HISTORY = "history"


def outstanding(total, advance, collected) -> Decimal:
    return compute_balance(total, advance, collected)


def resolve_order_balance(order: OrderSnapshot, price_map: Mapping[str, Decimal], collected=ZERO) -> OrderBalance:
    total = calculate_order_total(order.products, price_map)
    advance = to_decimal(order.advance_amount)
    collected = to_decimal(collected)
    due = outstanding(total, advance, collected)
    delivered = order.status == OrderStatus.DELIVERED

    return OrderBalance(
        order_id=order.id,
        customer_id=order.customer_id,
        status=order.status,
        total=total,
        advance=advance,
        collected=collected,
        pending=ZERO if delivered else due,
        udhaar=due if delivered else ZERO,
        unknown_product_ids=unknown_product_ids(order.products, price_map),
    )


def resolve_order_balances(
    orders: Iterable[OrderSnapshot],
    price_map: Mapping[str, Decimal],
    collections: Iterable,
) -> List[OrderBalance]:
    collected = collections_by_order(collections)
    return [resolve_order_balance(o, price_map, collected.get(str(o.id), ZERO)) for o in orders]


def order_bucket(balance: OrderBalance) -> str:
    """Tab an order belongs to: undelivered, delivered with credit, or settled history."""
    if balance.status != OrderStatus.DELIVERED:
        return BUCKET_PENDING
    return BUCKET_UDHAAR if balance.udhaar > ZERO else BUCKET_HISTORY


def aggregate_customer_pending(
    balances: Iterable[OrderBalance],
    due_dates: Optional[Mapping[str, Iterable[Optional[date]]]] = None,
) -> List[CustomerPending]:
    """
    One row per customer with delivered, unsettled orders: udhaar summed
    across those orders, plus the earliest known collection due date.
    Customers keep the order in which they first appear.
    """
    due_dates = due_dates or {}
    grouped: Dict[str, CustomerPending] = {}

    for b in balances:
        if b.status != OrderStatus.DELIVERED or b.udhaar <= ZERO:
            continue
        key = str(b.customer_id)
        row = grouped.get(key)
        if row is None:
            row = grouped[key] = CustomerPending(customer_id=b.customer_id, pending=ZERO)
        row.pending = to_decimal(row.pending + b.udhaar)
        row.order_ids.append(b.order_id)

    for key, row in grouped.items():
        candidates = [d for d in due_dates.get(key, ()) if d is not None]
        row.earliest_due_date = min(candidates) if candidates else None

    return list(grouped.values())


def quotation_total(unit_price, qty) -> Decimal:
    """A quotation is a single-line order; value it the same way."""
    return calculate_order_total([{"productId": "q", "qty": qty}], {"q": to_decimal(unit_price)})
