# khata/schemas/collection_schema.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID


class CollectionCreate(BaseModel):
    customer_id: UUID
    order_id: Optional[UUID] = None
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    collection_date: Optional[date] = None  # defaults to tomorrow
    remarks: Optional[str] = None


class CollectionUpdate(BaseModel):
    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    collection_date: Optional[date] = None
    remarks: Optional[str] = None


class CollectionOut(BaseModel):
    id: UUID
    customer_id: UUID
    customer_name: str = "Unknown Customer"
    order_id: Optional[UUID] = None
    amount: Decimal
    collection_date: Optional[date] = None
    collected_at: Optional[datetime] = None
    remarks: Optional[str] = None
    transaction_id: Optional[UUID] = None

    class Config:
        from_attributes = True


class CollectionResponse(BaseModel):
    message: str
    data: Optional[CollectionOut] = None
    warning: Optional[str] = None  # e.g. amount exceeds what is still due on the order


class CollectionListResponse(BaseModel):
    message: str
    total: int
    data: List[CollectionOut]


class PendingCustomerOut(BaseModel):
    customer_id: UUID
    customer_name: str
    phone: Optional[str] = None
    pending: Decimal
    order_ids: List[UUID] = []
    earliest_due_date: Optional[date] = None
    due_label: Optional[str] = None
    is_urgent: bool = False
    reminder_message: str
    reminder_link: Optional[str] = None


class PendingCustomerListResponse(BaseModel):
    message: str
    total: int
    total_pending: Decimal
    data: List[PendingCustomerOut]


class CollectionPreferenceIn(BaseModel):
    preferred_collection_date: date


class CollectionPreferenceOut(BaseModel):
    customer_id: UUID
    preferred_collection_date: date

    class Config:
        from_attributes = True


class CollectionPreferenceResponse(BaseModel):
    message: str
    data: CollectionPreferenceOut
