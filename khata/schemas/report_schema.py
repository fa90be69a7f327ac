from pydantic import BaseModel
from decimal import Decimal


class ReportSummary(BaseModel):
    total_sales: Decimal
    day_sales: Decimal
    week_sales: Decimal
    month_sales: Decimal
    total_credit: Decimal  # udhaar left on delivered orders after collections
    orders_pending: int


class ReportSummaryResponse(BaseModel):
    message: str
    data: ReportSummary
