# khata/services/quotation_service.py
import logging
from typing import Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from khata.models.quotation_models import Quotation, QuotationStatus
from khata.schemas.auth_schemas import CurrentUser
from khata.schemas.quotation_schema import (
    QuotationCreate, QuotationUpdate, QuotationConvert, QuotationOut,
    QuotationResponse, QuotationListResponse, QuotationConversionResponse,
)
from khata.services.customer_service import customer_directory, customer_name, get_customer_or_404
from khata.services.ledger_services import product_label, quotation_total
from khata.services.order_service import PriceBook, load_price_book, new_order, order_out
from khata.services.product_service import get_product_or_404
from khata.utils.activity_helpers import log_user_activity

logger = logging.getLogger(__name__)


def build_quotation_out(q: Quotation, book: PriceBook, customers: dict) -> QuotationOut:
    unit_price = book.prices.get(str(q.product_id), 0)
    return QuotationOut(
        id=q.id,
        customer_id=q.customer_id,
        customer_name=customer_name(customers, q.customer_id),
        product_id=q.product_id,
        product_name=product_label(str(q.product_id), book.names),
        qty=q.qty,
        unit_price=unit_price,
        total=quotation_total(unit_price, q.qty),
        status=q.status,
        converted_to_order=q.converted_to_order,
        job_date=q.job_date,
        assigned_to=q.assigned_to,
        site_address=q.site_address,
        remarks=q.remarks,
        terms=q.terms,
        valid_until=q.valid_until,
        created_at=q.created_at,
        updated_at=q.updated_at,
    )


async def quotation_out(db: AsyncSession, q: Quotation, user_id: UUID) -> QuotationOut:
    book = await load_price_book(db, user_id)
    return build_quotation_out(q, book, await customer_directory(db, user_id))


async def get_quotation_or_404(db: AsyncSession, quotation_id: UUID, user_id: UUID) -> Quotation:
    result = await db.execute(
        select(Quotation).where(Quotation.id == quotation_id, Quotation.user_id == user_id)
    )
    quotation = result.scalars().first()
    if not quotation:
        raise HTTPException(status_code=404, detail="Quotation not found")
    return quotation


# --------------------------
# CREATE QUOTATION
# --------------------------
async def create_quotation(db: AsyncSession, data: QuotationCreate, current_user: CurrentUser) -> QuotationResponse:
    await get_customer_or_404(db, data.customer_id, current_user.id)
    await get_product_or_404(db, data.product_id, current_user.id)

    quotation = Quotation(user_id=current_user.id, status=QuotationStatus.PENDING, **data.model_dump())
    db.add(quotation)
    await db.flush()

    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"Created quotation {quotation.id} for {quotation.qty} x product {quotation.product_id}",
    )
    await db.commit()
    await db.refresh(quotation)

    return QuotationResponse(
        message="Quotation created successfully",
        data=await quotation_out(db, quotation, current_user.id),
    )


# --------------------------
# LIST / GET
# --------------------------
async def list_quotations(
    db: AsyncSession,
    user_id: UUID,
    status: Optional[QuotationStatus] = None,
    converted: Optional[bool] = None,
) -> QuotationListResponse:
    query = select(Quotation).where(Quotation.user_id == user_id)
    if status is not None:
        query = query.where(Quotation.status == status)
    if converted is not None:
        query = query.where(Quotation.converted_to_order == converted)
    result = await db.execute(query.order_by(Quotation.created_at.desc()))
    quotations = result.scalars().all()

    book = await load_price_book(db, user_id)
    customers = await customer_directory(db, user_id)
    return QuotationListResponse(
        message="Quotations retrieved successfully",
        total=len(quotations),
        data=[build_quotation_out(q, book, customers) for q in quotations],
    )


async def get_quotation(db: AsyncSession, quotation_id: UUID, user_id: UUID) -> QuotationResponse:
    quotation = await get_quotation_or_404(db, quotation_id, user_id)
    return QuotationResponse(
        message="Quotation retrieved successfully",
        data=await quotation_out(db, quotation, user_id),
    )


# --------------------------
# UPDATE QUOTATION
# --------------------------
async def update_quotation(db: AsyncSession, quotation_id: UUID, data: QuotationUpdate, current_user: CurrentUser) -> QuotationResponse:
    quotation = await get_quotation_or_404(db, quotation_id, current_user.id)
    if quotation.status != QuotationStatus.PENDING:
        raise HTTPException(status_code=400, detail=f"Quotation is already {quotation.status.value}; cannot edit")

    updates = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    if "customer_id" in updates:
        await get_customer_or_404(db, updates["customer_id"], current_user.id)
    if "product_id" in updates:
        await get_product_or_404(db, updates["product_id"], current_user.id)

    for key, value in updates.items():
        setattr(quotation, key, value)

    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"Updated quotation {quotation.id}: {', '.join(sorted(updates)) or 'no changes'}",
    )
    await db.commit()
    await db.refresh(quotation)
    return QuotationResponse(
        message="Quotation updated successfully",
        data=await quotation_out(db, quotation, current_user.id),
    )


# --------------------------
# APPROVE / REJECT (one way, from pending only)
# --------------------------
async def set_quotation_status(
    db: AsyncSession, quotation_id: UUID, new_status: QuotationStatus, current_user: CurrentUser
) -> QuotationResponse:
    quotation = await get_quotation_or_404(db, quotation_id, current_user.id)
    if quotation.status != QuotationStatus.PENDING:
        raise HTTPException(
            status_code=409,
            detail=f"Quotation is already {quotation.status.value}",
        )

    quotation.status = new_status
    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"Quotation {quotation.id} {new_status.value}",
    )
    await db.commit()
    await db.refresh(quotation)
    return QuotationResponse(
        message=f"Quotation {new_status.value}",
        data=await quotation_out(db, quotation, current_user.id),
    )


# --------------------------
# CONVERT TO ORDER
# --------------------------
async def convert_to_order(
    db: AsyncSession, quotation_id: UUID, data: QuotationConvert, current_user: CurrentUser
) -> QuotationConversionResponse:
    """
    Turn an approved quotation into a fresh order. The quotation stays as a
    historical record flagged ``converted_to_order``; the order starts with
    the user-entered advance and no collections.
    """
    quotation = await get_quotation_or_404(db, quotation_id, current_user.id)
    if quotation.status != QuotationStatus.APPROVED:
        raise HTTPException(status_code=400, detail="Only approved quotations can be converted to an order")
    if quotation.converted_to_order:
        raise HTTPException(status_code=409, detail="Quotation already converted to an order")

    book = await load_price_book(db, current_user.id)
    if str(quotation.product_id) not in book.prices:
        raise HTTPException(status_code=404, detail="Quoted product no longer exists")

    total = quotation_total(book.prices[str(quotation.product_id)], quotation.qty)
    if data.advance_amount > total:
        raise HTTPException(
            status_code=400,
            detail=f"Advance amount {data.advance_amount} exceeds quotation total {total}",
        )

    order = new_order(
        current_user.id,
        quotation.customer_id,
        [{"productId": str(quotation.product_id), "qty": quotation.qty}],
        advance_amount=data.advance_amount,
        job_date=data.job_date or quotation.job_date,
        assigned_to=data.assigned_to if data.assigned_to is not None else quotation.assigned_to,
        site_address=data.site_address if data.site_address is not None else quotation.site_address,
        remarks=data.remarks if data.remarks is not None else quotation.remarks,
    )
    db.add(order)
    quotation.converted_to_order = True
    await db.flush()

    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"Converted quotation {quotation.id} to order {order.id} (advance {order.advance_amount})",
    )
    await db.commit()
    await db.refresh(order)
    await db.refresh(quotation)
    logger.info("Quotation %s converted to order %s", quotation.id, order.id)

    return QuotationConversionResponse(
        message="Quotation converted to order",
        quotation=build_quotation_out(quotation, book, await customer_directory(db, current_user.id)),
        order=await order_out(db, order, current_user.id),
    )


# --------------------------
# DELETE QUOTATION
# --------------------------
async def delete_quotation(db: AsyncSession, quotation_id: UUID, current_user: CurrentUser) -> QuotationResponse:
    quotation = await get_quotation_or_404(db, quotation_id, current_user.id)
    out = await quotation_out(db, quotation, current_user.id)

    await db.delete(quotation)
    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"Deleted quotation {out.id}",
    )
    await db.commit()
    return QuotationResponse(message="Quotation deleted successfully", data=out)
