# khata/services/report_service.py
from datetime import date, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from khata.models.order_models import Order, OrderStatus
from khata.schemas.ledger_schemas import OrderSnapshot
from khata.schemas.report_schema import ReportSummary, ReportSummaryResponse
from khata.services.ledger_services import resolve_order_balances
from khata.services.order_service import load_collections, load_price_book
from khata.utils.decimal_utils import ZERO


async def get_summary(db: AsyncSession, user_id: UUID, today: Optional[date] = None) -> ReportSummaryResponse:
    """
    Sales count only delivered orders that are fully settled, bucketed by job
    date (weeks start on Monday). Credit is the udhaar still open on
    delivered orders.
    """
    today = today or date.today()
    start_of_week = today - timedelta(days=today.weekday())
    start_of_month = today.replace(day=1)

    result = await db.execute(
        select(Order).where(Order.user_id == user_id, Order.status == OrderStatus.DELIVERED)
    )
    delivered = [OrderSnapshot.model_validate(o) for o in result.scalars().all()]

    book = await load_price_book(db, user_id)
    balances = resolve_order_balances(delivered, book.prices, await load_collections(db, user_id))

    total_sales = day_sales = week_sales = month_sales = total_credit = ZERO
    for order, balance in zip(delivered, balances):
        total_credit += balance.udhaar
        if balance.udhaar > ZERO or order.job_date is None:
            continue
        total_sales += balance.total
        if order.job_date == today:
            day_sales += balance.total
        if order.job_date >= start_of_week:
            week_sales += balance.total
        if order.job_date >= start_of_month:
            month_sales += balance.total

    pending_count = await db.execute(
        select(func.count(Order.id)).where(Order.user_id == user_id, Order.status == OrderStatus.PENDING)
    )

    return ReportSummaryResponse(
        message="Report summary generated",
        data=ReportSummary(
            total_sales=total_sales,
            day_sales=day_sales,
            week_sales=week_sales,
            month_sales=month_sales,
            total_credit=total_credit,
            orders_pending=pending_count.scalar() or 0,
        ),
    )
