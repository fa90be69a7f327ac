from pydantic import BaseModel, Field
from typing import List, Optional
import datetime as dt
from decimal import Decimal
from uuid import UUID


class CustomerBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    phone: Optional[str] = None


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    phone: Optional[str] = None


class CustomerOut(CustomerBase):
    id: UUID
    created_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True


class CustomerResponse(BaseModel):
    message: str
    data: Optional[CustomerOut] = None


class CustomerListResponse(BaseModel):
    message: str
    total: int
    data: List[CustomerOut]


class LedgerEntryOut(BaseModel):
    id: UUID
    type: str
    amount: Decimal
    date: dt.date
    note: Optional[str] = None
    collection_id: Optional[UUID] = None

    class Config:
        from_attributes = True


class CustomerLedger(BaseModel):
    customer: CustomerOut
    transactions: List[LedgerEntryOut]
    total_udhaar: Decimal
    total_paid: Decimal
    balance: Decimal  # udhaar given minus payments received


class CustomerLedgerResponse(BaseModel):
    message: str
    data: CustomerLedger
