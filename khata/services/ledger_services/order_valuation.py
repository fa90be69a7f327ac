# khata/services/ledger_services/order_valuation.py
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Union

from khata.schemas.ledger_schemas import LineItem
from khata.utils.decimal_utils import ZERO, to_decimal, to_quantity

UNKNOWN_PRODUCT = "(unknown product)"

LineLike = Union[LineItem, Mapping]


def build_price_map(products: Iterable) -> Dict[str, Decimal]:
    """productId -> current unit price. Accepts ORM rows, schemas or dicts."""
    price_map: Dict[str, Decimal] = {}
    for p in products:
        pid = p.get("id") if isinstance(p, Mapping) else getattr(p, "id", None)
        price = p.get("price") if isinstance(p, Mapping) else getattr(p, "price", None)
        if pid is None:
            continue
        price_map[str(pid)] = to_decimal(price)
    return price_map


def _line_parts(item: LineLike):
    if isinstance(item, LineItem):
        return item.product_id, item.qty
    if isinstance(item, Mapping):
        pid = item.get("productId", item.get("product_id"))
        return ("" if pid is None else str(pid)), item.get("qty")
    return "", 0


def calculate_order_total(line_items: Iterable[LineLike], price_map: Mapping[str, Decimal]) -> Decimal:
    total = ZERO
    for item in line_items or []:
        product_id, qty = _line_parts(item)
        price = to_decimal(price_map.get(product_id, ZERO))
        total += price * to_quantity(qty)
    return to_decimal(total)


def unknown_product_ids(line_items: Iterable[LineLike], price_map: Mapping[str, Decimal]) -> List[str]:
    """Product ids referenced by the order that are missing from the price map (deleted products)."""
    missing = []
    for item in line_items or []:
        product_id, _ = _line_parts(item)
        if product_id not in price_map and product_id not in missing:
            missing.append(product_id)
    return missing


def product_label(product_id: str, names: Mapping[str, str]) -> str:
    return names.get(str(product_id)) or UNKNOWN_PRODUCT
