# khata/schemas/order_schema.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from khata.core.config import MAX_LINE_QTY
from khata.models.order_models import OrderStatus


class OrderLineIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: UUID = Field(alias="productId")
    qty: int = Field(gt=0, le=MAX_LINE_QTY)


class OrderCreate(BaseModel):
    customer_id: UUID
    products: List[OrderLineIn] = Field(min_length=1)
    job_date: date
    status: OrderStatus = OrderStatus.PENDING
    assigned_to: Optional[str] = None
    site_address: Optional[str] = None
    remarks: Optional[str] = None
    photo_url: Optional[str] = None
    advance_amount: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)


class OrderUpdate(BaseModel):
    customer_id: Optional[UUID] = None
    products: Optional[List[OrderLineIn]] = Field(default=None, min_length=1)
    job_date: Optional[date] = None
    status: Optional[OrderStatus] = None
    assigned_to: Optional[str] = None
    site_address: Optional[str] = None
    remarks: Optional[str] = None
    photo_url: Optional[str] = None
    advance_amount: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)


class OrderLineOut(BaseModel):
    product_id: str
    product_name: str
    unit: Optional[str] = None
    qty: int
    unit_price: Decimal
    line_total: Decimal


class OrderBalanceOut(BaseModel):
    total: Decimal
    advance: Decimal
    collected: Decimal
    pending: Decimal
    udhaar: Decimal
    bucket: str


class OrderOut(BaseModel):
    id: UUID
    customer_id: UUID
    customer_name: str
    status: OrderStatus
    job_date: date
    assigned_to: Optional[str] = None
    site_address: Optional[str] = None
    remarks: Optional[str] = None
    photo_url: Optional[str] = None
    advance_amount: Decimal
    lines: List[OrderLineOut] = []
    balance: OrderBalanceOut
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderResponse(BaseModel):
    message: str
    data: Optional[OrderOut] = None


class OrderListResponse(BaseModel):
    message: str
    total: int
    data: List[OrderOut]
