# khata/services/order_service.py
import logging
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from khata.models.collection_models import Collection
from khata.models.order_models import Order, OrderStatus
from khata.models.product_models import Product
from khata.schemas.auth_schemas import CurrentUser
from khata.schemas.ledger_schemas import CollectionSnapshot, OrderBalance, OrderSnapshot
from khata.schemas.order_schema import (
    OrderCreate, OrderUpdate, OrderLineIn, OrderLineOut, OrderBalanceOut, OrderOut,
    OrderResponse, OrderListResponse,
)
from khata.services.customer_service import customer_directory, customer_name, get_customer_or_404
from khata.services.ledger_services import (
    build_price_map, calculate_order_total, product_label, resolve_order_balance,
    resolve_order_balances, order_bucket, sum_collections_for_order,
    BUCKET_PENDING, BUCKET_UDHAAR, BUCKET_HISTORY,
)
from khata.services.product_service import list_user_products
from khata.utils.activity_helpers import log_user_activity
from khata.utils.decimal_utils import to_decimal

logger = logging.getLogger(__name__)

ORDER_TABS = (BUCKET_PENDING, BUCKET_UDHAAR, BUCKET_HISTORY)


class PriceBook:
    """Current catalog of one user: prices for valuation, names/units for display."""

    def __init__(self, products: List[Product]):
        self.prices = build_price_map(products)
        self.names = {str(p.id): p.name for p in products}
        self.units = {str(p.id): p.unit for p in products}

    def missing(self, lines: List[OrderLineIn]) -> List[str]:
        return [str(line.product_id) for line in lines if str(line.product_id) not in self.prices]


async def load_price_book(db: AsyncSession, user_id: UUID) -> PriceBook:
    return PriceBook(await list_user_products(db, user_id))


async def load_collections(db: AsyncSession, user_id: UUID, order_id: UUID = None) -> List[CollectionSnapshot]:
    query = select(Collection).where(Collection.user_id == user_id)
    if order_id is not None:
        query = query.where(Collection.order_id == order_id)
    result = await db.execute(query)
    return [CollectionSnapshot.model_validate(c) for c in result.scalars().all()]


def serialize_lines(lines: List[OrderLineIn]) -> list:
    return [{"productId": str(line.product_id), "qty": line.qty} for line in lines]


def validate_advance(advance, lines, book: PriceBook) -> Decimal:
    """Advance may not exceed the order value computed from current prices."""
    total = calculate_order_total(lines, book.prices)
    if to_decimal(advance) > total:
        raise HTTPException(
            status_code=400,
            detail=f"Advance amount {to_decimal(advance)} exceeds order total {total}",
        )
    return total


def build_order_out(order: Order, balance: OrderBalance, book: PriceBook, customers: Dict) -> OrderOut:
    snapshot = OrderSnapshot.model_validate(order)
    lines = []
    for item in snapshot.products:
        unit_price = book.prices.get(item.product_id, Decimal("0"))
        lines.append(OrderLineOut(
            product_id=item.product_id,
            product_name=product_label(item.product_id, book.names),
            unit=book.units.get(item.product_id),
            qty=item.qty,
            unit_price=unit_price,
            line_total=unit_price * item.qty,
        ))

    return OrderOut(
        id=order.id,
        customer_id=order.customer_id,
        customer_name=customer_name(customers, order.customer_id),
        status=order.status,
        job_date=order.job_date,
        assigned_to=order.assigned_to,
        site_address=order.site_address,
        remarks=order.remarks,
        photo_url=order.photo_url,
        advance_amount=to_decimal(order.advance_amount),
        lines=lines,
        balance=OrderBalanceOut(
            total=balance.total,
            advance=balance.advance,
            collected=balance.collected,
            pending=balance.pending,
            udhaar=balance.udhaar,
            bucket=order_bucket(balance),
        ),
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


async def get_order_or_404(db: AsyncSession, order_id: UUID, user_id: UUID) -> Order:
    result = await db.execute(select(Order).where(Order.id == order_id, Order.user_id == user_id))
    order = result.scalars().first()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


async def order_out(db: AsyncSession, order: Order, user_id: UUID) -> OrderOut:
    book = await load_price_book(db, user_id)
    collections = await load_collections(db, user_id, order.id)
    balance = resolve_order_balance(
        OrderSnapshot.model_validate(order), book.prices, sum_collections_for_order(collections, order.id)
    )
    return build_order_out(order, balance, book, await customer_directory(db, user_id))


def new_order(user_id: UUID, customer_id: UUID, lines: list, **fields) -> Order:
    """Unsaved order row; callers add it to their own unit of work."""
    return Order(
        user_id=user_id,
        customer_id=customer_id,
        products=lines,
        status=fields.pop("status", None) or OrderStatus.PENDING,
        advance_amount=to_decimal(fields.pop("advance_amount", 0)),
        **fields,
    )


# =====================================================
# CREATE ORDER
# =====================================================
async def create_order(db: AsyncSession, data: OrderCreate, current_user: CurrentUser) -> OrderResponse:
    await get_customer_or_404(db, data.customer_id, current_user.id)

    book = await load_price_book(db, current_user.id)
    missing = book.missing(data.products)
    if missing:
        raise HTTPException(status_code=404, detail=f"Product(s) not found: {', '.join(missing)}")
    lines = serialize_lines(data.products)
    total = validate_advance(data.advance_amount, lines, book)

    order = new_order(
        current_user.id,
        data.customer_id,
        lines,
        **data.model_dump(exclude={"customer_id", "products"}),
    )
    db.add(order)
    await db.flush()

    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"Created order {order.id} worth {total} (advance {order.advance_amount})",
    )
    await db.commit()
    await db.refresh(order)

    return OrderResponse(message="Order created successfully", data=await order_out(db, order, current_user.id))


# =====================================================
# LIST ORDERS (pending / udhaar / history tabs)
# =====================================================
async def list_orders(
    db: AsyncSession,
    user_id: UUID,
    tab: Optional[str] = None,
    customer_id: Optional[UUID] = None,
) -> OrderListResponse:
    if tab and tab not in ORDER_TABS:
        raise HTTPException(status_code=400, detail=f"tab must be one of: {', '.join(ORDER_TABS)}")

    query = select(Order).where(Order.user_id == user_id)
    if customer_id:
        query = query.where(Order.customer_id == customer_id)
    result = await db.execute(query.order_by(Order.job_date.desc(), Order.created_at.desc()))
    orders = result.scalars().all()

    book = await load_price_book(db, user_id)
    collections = await load_collections(db, user_id)
    customers = await customer_directory(db, user_id)
    balances = resolve_order_balances(
        [OrderSnapshot.model_validate(o) for o in orders], book.prices, collections
    )

    data = [
        build_order_out(o, b, book, customers)
        for o, b in zip(orders, balances)
        if not tab or order_bucket(b) == tab
    ]
    return OrderListResponse(message="Orders retrieved successfully", total=len(data), data=data)


# =====================================================
# GET ORDER
# =====================================================
async def get_order(db: AsyncSession, order_id: UUID, user_id: UUID) -> OrderResponse:
    order = await get_order_or_404(db, order_id, user_id)
    return OrderResponse(message="Order retrieved successfully", data=await order_out(db, order, user_id))


# =====================================================
# UPDATE ORDER
# =====================================================
async def update_order(db: AsyncSession, order_id: UUID, data: OrderUpdate, current_user: CurrentUser) -> OrderResponse:
    order = await get_order_or_404(db, order_id, current_user.id)
    updates = data.model_dump(exclude_unset=True)

    if updates.get("status") == OrderStatus.PENDING and order.status == OrderStatus.DELIVERED:
        raise HTTPException(status_code=409, detail="A delivered order cannot be moved back to pending")
    if updates.get("customer_id"):
        await get_customer_or_404(db, updates["customer_id"], current_user.id)

    book = await load_price_book(db, current_user.id)
    if data.products is not None:
        missing = book.missing(data.products)
        if missing:
            raise HTTPException(status_code=404, detail=f"Product(s) not found: {', '.join(missing)}")
        lines = serialize_lines(data.products)
    else:
        lines = list(order.products or [])

    # Advance is only rechecked when it or the line items change
    if data.products is not None or data.advance_amount is not None:
        advance = order.advance_amount if data.advance_amount is None else data.advance_amount
        validate_advance(advance, lines, book)

    for key, value in updates.items():
        if key == "products":
            order.products = lines
        elif value is not None:
            setattr(order, key, value)

    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"Updated order {order.id}: {', '.join(sorted(updates)) or 'no changes'}",
    )
    await db.commit()
    await db.refresh(order)
    return OrderResponse(message="Order updated successfully", data=await order_out(db, order, current_user.id))


# =====================================================
# MARK DELIVERED
# =====================================================
async def mark_delivered(db: AsyncSession, order_id: UUID, current_user: CurrentUser) -> OrderResponse:
    order = await get_order_or_404(db, order_id, current_user.id)
    if order.status == OrderStatus.DELIVERED:
        raise HTTPException(status_code=409, detail="Order is already delivered")

    order.status = OrderStatus.DELIVERED
    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"Marked order {order.id} as delivered",
    )
    await db.commit()
    await db.refresh(order)
    return OrderResponse(message="Order marked as delivered", data=await order_out(db, order, current_user.id))


# =====================================================
# DELETE ORDER
# =====================================================
async def delete_order(db: AsyncSession, order_id: UUID, current_user: CurrentUser) -> OrderResponse:
    order = await get_order_or_404(db, order_id, current_user.id)
    out = await order_out(db, order, current_user.id)

    # Linked collections stay on the customer's account; only their order link is dropped
    await db.delete(order)
    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"Deleted order {out.id} for '{out.customer_name}'",
    )
    await db.commit()
    return OrderResponse(message="Order deleted successfully", data=out)
