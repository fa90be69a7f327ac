# khata/schemas/quotation_schema.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from khata.core.config import MAX_LINE_QTY
from khata.models.quotation_models import QuotationStatus
from khata.schemas.order_schema import OrderOut


class QuotationCreate(BaseModel):
    customer_id: UUID
    product_id: UUID
    qty: int = Field(gt=0, le=MAX_LINE_QTY)
    job_date: date
    assigned_to: str = ""
    site_address: Optional[str] = None
    remarks: Optional[str] = None
    terms: Optional[str] = None
    valid_until: Optional[date] = None


class QuotationUpdate(BaseModel):
    customer_id: Optional[UUID] = None
    product_id: Optional[UUID] = None
    qty: Optional[int] = Field(default=None, gt=0, le=MAX_LINE_QTY)
    job_date: Optional[date] = None
    assigned_to: Optional[str] = None
    site_address: Optional[str] = None
    remarks: Optional[str] = None
    terms: Optional[str] = None
    valid_until: Optional[date] = None


class QuotationConvert(BaseModel):
    """Details the user fills in when turning an approved quotation into an order."""
    advance_amount: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    job_date: Optional[date] = None
    assigned_to: Optional[str] = None
    site_address: Optional[str] = None
    remarks: Optional[str] = None


class QuotationOut(BaseModel):
    id: UUID
    customer_id: UUID
    customer_name: str
    product_id: UUID
    product_name: str
    qty: int
    unit_price: Decimal
    total: Decimal
    status: QuotationStatus
    converted_to_order: bool
    job_date: date
    assigned_to: Optional[str] = None
    site_address: Optional[str] = None
    remarks: Optional[str] = None
    terms: Optional[str] = None
    valid_until: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class QuotationResponse(BaseModel):
    message: str
    data: Optional[QuotationOut] = None


class QuotationListResponse(BaseModel):
    message: str
    total: int
    data: List[QuotationOut] = []


class QuotationConversionResponse(BaseModel):
    message: str
    quotation: QuotationOut
    order: OrderOut
