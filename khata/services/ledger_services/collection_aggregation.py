# khata/services/ledger_services/collection_aggregation.py
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable

from khata.utils.decimal_utils import ZERO, to_decimal


def _key(value):
    return None if value is None else str(value)


def sum_collections_for_order(collections: Iterable, order_id) -> Decimal:
    """Only collections linked to exactly this order; unlinked ones never count."""
    if order_id is None:
        return ZERO
    target = _key(order_id)
    return to_decimal(sum(
        (to_decimal(c.amount) for c in collections if _key(c.order_id) == target),
        ZERO,
    ))


def sum_collections_for_customer(collections: Iterable, customer_id) -> Decimal:
    """Everything the customer paid, linked to an order or not."""
    target = _key(customer_id)
    return to_decimal(sum(
        (to_decimal(c.amount) for c in collections if _key(c.customer_id) == target),
        ZERO,
    ))


def collections_by_order(collections: Iterable) -> Dict[str, Decimal]:
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for c in collections:
        if c.order_id is None:
            continue
        totals[_key(c.order_id)] += to_decimal(c.amount)
    return dict(totals)


def collections_by_customer(collections: Iterable) -> Dict[str, Decimal]:
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for c in collections:
        totals[_key(c.customer_id)] += to_decimal(c.amount)
    return dict(totals)
