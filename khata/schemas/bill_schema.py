# khata/schemas/bill_schema.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID


class BillItem(BaseModel):
    name: str = Field(min_length=1)
    qty: int = Field(gt=0)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)


class BillCreate(BaseModel):
    customer_name: str = Field(min_length=1)
    customer_phone: Optional[str] = None
    bill_date: Optional[date] = None
    items: List[BillItem] = Field(min_length=1)


class BillItemOut(BaseModel):
    name: str
    qty: int
    price: Decimal


class BillOut(BaseModel):
    id: UUID
    customer_name: str
    customer_phone: Optional[str] = None
    bill_date: date
    items: List[BillItemOut]
    total: Decimal
    total_in_words: str
    created_at: Optional[datetime] = None


class BillResponse(BaseModel):
    message: str
    data: Optional[BillOut] = None


class BillListResponse(BaseModel):
    message: str
    total: int
    data: List[BillOut]
