# khata/services/collection_service.py
import logging
from collections import defaultdict
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from khata.core.config import DEFAULT_COLLECTION_OFFSET_DAYS
from khata.models.collection_models import Collection, CustomerCollectionPreference, Transaction, TransactionType
from khata.models.order_models import Order, OrderStatus
from khata.schemas.auth_schemas import CurrentUser
from khata.schemas.collection_schema import (
    CollectionCreate, CollectionUpdate, CollectionOut, CollectionResponse, CollectionListResponse,
    PendingCustomerOut, PendingCustomerListResponse, CollectionPreferenceIn, CollectionPreferenceOut,
    CollectionPreferenceResponse,
)
from khata.schemas.ledger_schemas import OrderSnapshot
from khata.services.customer_service import customer_directory, customer_name, get_customer_or_404
from khata.services.ledger_services import (
    aggregate_customer_pending, resolve_order_balance, resolve_order_balances, sum_collections_for_order,
)
from khata.services.order_service import get_order_or_404, load_collections, load_price_book
from khata.utils.activity_helpers import log_user_activity
from khata.utils.decimal_utils import ZERO, to_decimal
from khata.utils.due_dates import default_collection_date, due_date_info
from khata.utils.reminders import build_reminder_message, whatsapp_link

logger = logging.getLogger(__name__)


def _collection_out(c: Collection, customers: dict) -> CollectionOut:
    out = CollectionOut.model_validate(c)
    out.customer_name = customer_name(customers, c.customer_id)
    return out


async def _get_collection_or_404(db: AsyncSession, collection_id: UUID, user_id: UUID) -> Collection:
    result = await db.execute(
        select(Collection).where(Collection.id == collection_id, Collection.user_id == user_id)
    )
    collection = result.scalars().first()
    if not collection:
        raise HTTPException(status_code=404, detail="Collection not found")
    return collection


async def _remaining_on_order(db: AsyncSession, order: Order, user_id: UUID):
    book = await load_price_book(db, user_id)
    collections = await load_collections(db, user_id, order.id)
    balance = resolve_order_balance(
        OrderSnapshot.model_validate(order), book.prices, sum_collections_for_order(collections, order.id)
    )
    return balance.outstanding


# =====================================================
# RECORD COLLECTION (+ paired "paid" transaction)
# =====================================================
async def record_collection(db: AsyncSession, data: CollectionCreate, current_user: CurrentUser) -> CollectionResponse:
    """
    Save a collection together with its paired ``paid`` transaction and the
    back-link between them in a single database transaction: either all
    three writes land or none do.
    """
    await get_customer_or_404(db, data.customer_id, current_user.id)

    warning = None
    if data.order_id is not None:
        order = await get_order_or_404(db, data.order_id, current_user.id)
        if order.customer_id != data.customer_id:
            raise HTTPException(status_code=400, detail="Order does not belong to this customer")
        remaining = await _remaining_on_order(db, order, current_user.id)
        if data.amount > remaining:
            # Guidance only, overcollection is not blocked
            warning = f"Amount {data.amount} exceeds the {remaining} still due on this order"

    collection_date = data.collection_date or default_collection_date(offset_days=DEFAULT_COLLECTION_OFFSET_DAYS)

    try:
        collection = Collection(
            user_id=current_user.id,
            customer_id=data.customer_id,
            order_id=data.order_id,
            amount=data.amount,
            collection_date=collection_date,
            remarks=data.remarks or "",
        )
        db.add(collection)
        await db.flush()

        txn = Transaction(
            user_id=current_user.id,
            customer_id=data.customer_id,
            type=TransactionType.PAID,
            amount=data.amount,
            date=date.today(),
            note=data.remarks or "Collection received",
            collection_id=collection.id,
        )
        db.add(txn)
        await db.flush()

        collection.transaction_id = txn.id

        await log_user_activity(
            db,
            user_id=current_user.id,
            username=current_user.username,
            message=f"Recorded collection {collection.id} of {collection.amount} (transaction {txn.id})",
        )
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Recording collection for customer %s failed; nothing was saved", data.customer_id)
        raise HTTPException(status_code=500, detail="Failed to record collection")

    await db.refresh(collection)
    customers = await customer_directory(db, current_user.id)
    return CollectionResponse(
        message="Collection recorded successfully",
        data=_collection_out(collection, customers),
        warning=warning,
    )


# =====================================================
# LIST / GET
# =====================================================
async def list_collections(
    db: AsyncSession,
    user_id: UUID,
    customer_id: Optional[UUID] = None,
    order_id: Optional[UUID] = None,
    limit: int = 100,
    offset: int = 0,
) -> CollectionListResponse:
    query = select(Collection).where(Collection.user_id == user_id)
    if customer_id:
        query = query.where(Collection.customer_id == customer_id)
    if order_id:
        query = query.where(Collection.order_id == order_id)
    result = await db.execute(query.order_by(Collection.collected_at.desc()).limit(limit).offset(offset))
    collections = result.scalars().all()

    customers = await customer_directory(db, user_id)
    return CollectionListResponse(
        message="Collections retrieved successfully",
        total=len(collections),
        data=[_collection_out(c, customers) for c in collections],
    )


async def get_collection(db: AsyncSession, collection_id: UUID, user_id: UUID) -> CollectionResponse:
    collection = await _get_collection_or_404(db, collection_id, user_id)
    customers = await customer_directory(db, user_id)
    return CollectionResponse(message="Collection retrieved successfully", data=_collection_out(collection, customers))


# =====================================================
# UPDATE COLLECTION
# =====================================================
async def update_collection(
    db: AsyncSession, collection_id: UUID, data: CollectionUpdate, current_user: CurrentUser
) -> CollectionResponse:
    """
    Edits only the collection row. The paired transaction keeps its original
    amount; reconciling the ledger is left to the user.
    """
    collection = await _get_collection_or_404(db, collection_id, current_user.id)

    changes = []
    for key, value in data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        old_val = getattr(collection, key)
        if old_val != value:
            changes.append(f"{key}: {old_val} -> {value}")
            setattr(collection, key, value)

    warning = None
    if data.amount is not None and collection.transaction_id and any(c.startswith("amount:") for c in changes):
        warning = "Linked ledger transaction was not changed"

    if changes:
        await log_user_activity(
            db,
            user_id=current_user.id,
            username=current_user.username,
            message=f"Updated collection {collection.id}: {', '.join(changes)}",
        )
    await db.commit()
    await db.refresh(collection)

    customers = await customer_directory(db, current_user.id)
    return CollectionResponse(
        message="Collection updated successfully",
        data=_collection_out(collection, customers),
        warning=warning,
    )


# =====================================================
# DELETE COLLECTION
# =====================================================
async def delete_collection(db: AsyncSession, collection_id: UUID, current_user: CurrentUser) -> CollectionResponse:
    collection = await _get_collection_or_404(db, collection_id, current_user.id)
    customers = await customer_directory(db, current_user.id)
    out = _collection_out(collection, customers)

    # The paid transaction stays in the ledger, unlinked
    await db.execute(
        update(Transaction)
        .where(Transaction.collection_id == collection.id, Transaction.user_id == current_user.id)
        .values(collection_id=None)
    )
    await db.delete(collection)
    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"Deleted collection {out.id} of {out.amount} for '{out.customer_name}'",
    )
    await db.commit()
    return CollectionResponse(message="Collection deleted successfully", data=out)


# =====================================================
# PENDING COLLECTIONS (per customer)
# =====================================================
async def get_pending_customers(db: AsyncSession, user_id: UUID, today: Optional[date] = None) -> PendingCustomerListResponse:
    """
    Customers with udhaar on delivered orders, one row each, with the
    earliest collection due date taken from their preferred collection date
    and the due dates of collections against their unsettled orders.
    """
    result = await db.execute(
        select(Order).where(Order.user_id == user_id, Order.status == OrderStatus.DELIVERED)
    )
    orders = [OrderSnapshot.model_validate(o) for o in result.scalars().all()]

    book = await load_price_book(db, user_id)
    collections = await load_collections(db, user_id)
    balances = resolve_order_balances(orders, book.prices, collections)

    unsettled = {str(b.order_id) for b in balances if b.udhaar > ZERO}
    due_dates = defaultdict(list)
    for c in collections:
        if c.order_id is not None and str(c.order_id) in unsettled:
            due_dates[str(c.customer_id)].append(c.collection_date)

    prefs = await db.execute(
        select(CustomerCollectionPreference).where(CustomerCollectionPreference.user_id == user_id)
    )
    for pref in prefs.scalars().all():
        due_dates[str(pref.customer_id)].append(pref.preferred_collection_date)

    customers = await customer_directory(db, user_id)
    rows = []
    for agg in aggregate_customer_pending(balances, due_dates):
        customer = customers.get(str(agg.customer_id))
        name = customer_name(customers, agg.customer_id)
        message = build_reminder_message(name, agg.pending)
        info = due_date_info(agg.earliest_due_date, today) if agg.earliest_due_date else None
        rows.append(PendingCustomerOut(
            customer_id=agg.customer_id,
            customer_name=name,
            phone=customer.phone if customer else None,
            pending=agg.pending,
            order_ids=agg.order_ids,
            earliest_due_date=agg.earliest_due_date,
            due_label=info.text if info else None,
            is_urgent=info.is_urgent if info else False,
            reminder_message=message,
            reminder_link=whatsapp_link(customer.phone, message) if customer else None,
        ))

    return PendingCustomerListResponse(
        message="Pending collections retrieved successfully",
        total=len(rows),
        total_pending=sum((to_decimal(r.pending) for r in rows), ZERO),
        data=rows,
    )


# =====================================================
# COLLECTION DATE PREFERENCE
# =====================================================
async def set_collection_preference(
    db: AsyncSession, customer_id: UUID, data: CollectionPreferenceIn, current_user: CurrentUser
) -> CollectionPreferenceResponse:
    await get_customer_or_404(db, customer_id, current_user.id)

    result = await db.execute(
        select(CustomerCollectionPreference).where(
            CustomerCollectionPreference.user_id == current_user.id,
            CustomerCollectionPreference.customer_id == customer_id,
        )
    )
    pref = result.scalars().first()
    if pref is None:
        pref = CustomerCollectionPreference(user_id=current_user.id, customer_id=customer_id)
        db.add(pref)
    pref.preferred_collection_date = data.preferred_collection_date

    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"Set collection date {data.preferred_collection_date} for customer {customer_id}",
    )
    await db.commit()
    await db.refresh(pref)
    return CollectionPreferenceResponse(
        message="Collection date saved",
        data=CollectionPreferenceOut.model_validate(pref),
    )
