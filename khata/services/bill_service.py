# khata/services/bill_service.py
import logging
from datetime import date
from decimal import Decimal
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from khata.models.bill_models import Bill
from khata.schemas.auth_schemas import CurrentUser
from khata.schemas.bill_schema import BillCreate, BillItemOut, BillOut, BillResponse, BillListResponse
from khata.utils.activity_helpers import log_user_activity
from khata.utils.amount_in_words import amount_in_words
from khata.utils.decimal_utils import ZERO, to_decimal, to_quantity

logger = logging.getLogger(__name__)


def bill_total(items) -> Decimal:
    return to_decimal(sum((to_decimal(i["price"]) * to_quantity(i["qty"]) for i in items), ZERO))


def _bill_out(bill: Bill) -> BillOut:
    items = [BillItemOut(name=i.get("name", ""), qty=int(to_quantity(i.get("qty"))), price=to_decimal(i.get("price")))
             for i in bill.items or []]
    return BillOut(
        id=bill.id,
        customer_name=bill.customer_name,
        customer_phone=bill.customer_phone,
        bill_date=bill.bill_date,
        items=items,
        total=to_decimal(bill.total),
        total_in_words=amount_in_words(bill.total),
        created_at=bill.created_at,
    )


async def _get_bill_or_404(db: AsyncSession, bill_id: UUID, user_id: UUID) -> Bill:
    result = await db.execute(select(Bill).where(Bill.id == bill_id, Bill.user_id == user_id))
    bill = result.scalars().first()
    if not bill:
        raise HTTPException(status_code=404, detail="Bill not found")
    return bill


async def create_bill(db: AsyncSession, data: BillCreate, current_user: CurrentUser) -> BillResponse:
    """Items are stored as snapshots and the total is computed once, here."""
    items = [{"name": i.name, "qty": i.qty, "price": str(i.price)} for i in data.items]
    bill = Bill(
        user_id=current_user.id,
        customer_name=data.customer_name,
        customer_phone=data.customer_phone,
        bill_date=data.bill_date or date.today(),
        items=items,
        total=bill_total(items),
    )
    db.add(bill)
    await db.flush()

    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"Created bill {bill.id} for '{bill.customer_name}' totalling {bill.total}",
    )
    await db.commit()
    await db.refresh(bill)
    return BillResponse(message="Bill created successfully", data=_bill_out(bill))


async def list_bills(db: AsyncSession, user_id: UUID) -> BillListResponse:
    result = await db.execute(
        select(Bill).where(Bill.user_id == user_id).order_by(Bill.bill_date.desc(), Bill.created_at.desc())
    )
    bills = result.scalars().all()
    return BillListResponse(message="Bills retrieved successfully", total=len(bills), data=[_bill_out(b) for b in bills])


async def get_bill(db: AsyncSession, bill_id: UUID, user_id: UUID) -> BillResponse:
    bill = await _get_bill_or_404(db, bill_id, user_id)
    return BillResponse(message="Bill retrieved successfully", data=_bill_out(bill))


async def delete_bill(db: AsyncSession, bill_id: UUID, current_user: CurrentUser) -> BillResponse:
    bill = await _get_bill_or_404(db, bill_id, current_user.id)
    out = _bill_out(bill)
    await db.delete(bill)
    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"Deleted bill {out.id} for '{out.customer_name}'",
    )
    await db.commit()
    return BillResponse(message="Bill deleted successfully", data=out)
