import logging
from typing import Dict
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy import asc, desc, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from khata.models.customer_models import Customer
from khata.models.collection_models import Transaction, TransactionType
from khata.schemas.auth_schemas import CurrentUser
from khata.schemas.customer_schema import (
    CustomerCreate, CustomerUpdate, CustomerOut, CustomerResponse, CustomerListResponse,
    CustomerLedger, CustomerLedgerResponse, LedgerEntryOut,
)
from khata.utils.activity_helpers import log_user_activity
from khata.utils.decimal_utils import ZERO, to_decimal

logger = logging.getLogger(__name__)

UNKNOWN_CUSTOMER = "Unknown Customer"


async def get_customer_or_404(db: AsyncSession, customer_id: UUID, user_id: UUID) -> Customer:
    result = await db.execute(
        select(Customer).where(Customer.id == customer_id, Customer.user_id == user_id)
    )
    customer = result.scalars().first()
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


async def customer_directory(db: AsyncSession, user_id: UUID) -> Dict[str, Customer]:
    """str(customer id) -> Customer, for resolving soft references in list views."""
    result = await db.execute(select(Customer).where(Customer.user_id == user_id))
    return {str(c.id): c for c in result.scalars().all()}


def customer_name(directory: Dict[str, Customer], customer_id) -> str:
    customer = directory.get(str(customer_id))
    return customer.name if customer else UNKNOWN_CUSTOMER


# CREATE CUSTOMER
async def create_customer(db: AsyncSession, data: CustomerCreate, current_user: CurrentUser) -> CustomerResponse:
    try:
        customer = Customer(user_id=current_user.id, **data.model_dump())
        db.add(customer)
        await db.flush()

        await log_user_activity(
            db,
            user_id=current_user.id,
            username=current_user.username,
            message=f"Created customer '{customer.name}' (ID: {customer.id})",
        )
        await db.commit()
        await db.refresh(customer)
    except IntegrityError as e:
        await db.rollback()
        raise HTTPException(status_code=400, detail=f"Integrity error: {e.orig}")

    return CustomerResponse(message="Customer created successfully", data=CustomerOut.model_validate(customer))


# GET SINGLE CUSTOMER
async def get_customer(db: AsyncSession, customer_id: UUID, user_id: UUID) -> CustomerResponse:
    customer = await get_customer_or_404(db, customer_id, user_id)
    return CustomerResponse(message="Customer retrieved successfully", data=CustomerOut.model_validate(customer))


# LIST / SEARCH CUSTOMERS
async def get_all_customers(
    db: AsyncSession,
    user_id: UUID,
    search: str = None,
    limit: int = 50,
    offset: int = 0,
    sort_by: str = "name",
    order: str = "asc",
) -> CustomerListResponse:
    query = select(Customer).where(Customer.user_id == user_id)
    if search:
        query = query.where(or_(Customer.name.ilike(f"%{search}%"), Customer.phone.ilike(f"%{search}%")))

    sort_col_map = {"name": Customer.name, "created_at": Customer.created_at}
    sort_col = sort_col_map.get(sort_by.lower(), Customer.name)
    query = query.order_by(asc(sort_col) if order.lower() == "asc" else desc(sort_col))

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar() or 0
    result = await db.execute(query.offset(offset).limit(limit))

    return CustomerListResponse(
        message="Customers retrieved successfully",
        total=total,
        data=[CustomerOut.model_validate(c) for c in result.scalars().all()],
    )


# UPDATE CUSTOMER
async def update_customer(db: AsyncSession, customer_id: UUID, data: CustomerUpdate, current_user: CurrentUser) -> CustomerResponse:
    customer = await get_customer_or_404(db, customer_id, current_user.id)

    changes = []
    for key, value in data.model_dump(exclude_unset=True).items():
        old_val = getattr(customer, key)
        if old_val != value:
            changes.append(f"{key}: {old_val} -> {value}")
            setattr(customer, key, value)

    if changes:
        await log_user_activity(
            db,
            user_id=current_user.id,
            username=current_user.username,
            message=f"Updated customer '{customer.name}' (ID: {customer.id}): {', '.join(changes)}",
        )
    await db.commit()
    await db.refresh(customer)
    return CustomerResponse(message="Customer updated successfully", data=CustomerOut.model_validate(customer))


# DELETE CUSTOMER
async def delete_customer(db: AsyncSession, customer_id: UUID, current_user: CurrentUser) -> CustomerResponse:
    """Hard delete. Orders, quotations and collections keep their (now dangling) reference."""
    customer = await get_customer_or_404(db, customer_id, current_user.id)
    out = CustomerOut.model_validate(customer)

    await db.delete(customer)
    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"Deleted customer '{out.name}' (ID: {out.id})",
    )
    await db.commit()
    logger.info("Customer %s deleted by %s", out.id, current_user.id)
    return CustomerResponse(message="Customer deleted successfully", data=out)


# CUSTOMER LEDGER
async def get_customer_ledger(db: AsyncSession, customer_id: UUID, user_id: UUID) -> CustomerLedgerResponse:
    customer = await get_customer_or_404(db, customer_id, user_id)
    result = await db.execute(
        select(Transaction)
        .where(Transaction.customer_id == customer_id, Transaction.user_id == user_id)
        .order_by(Transaction.date.desc(), Transaction.created_at.desc())
    )
    transactions = result.scalars().all()

    given = sum((to_decimal(t.amount) for t in transactions if t.type == TransactionType.UDHAAR), ZERO)
    received = sum((to_decimal(t.amount) for t in transactions if t.type == TransactionType.PAID), ZERO)

    return CustomerLedgerResponse(
        message="Customer ledger retrieved successfully",
        data=CustomerLedger(
            customer=CustomerOut.model_validate(customer),
            transactions=[LedgerEntryOut.model_validate(t) for t in transactions],
            total_udhaar=given,
            total_paid=received,
            balance=given - received,
        ),
    )
