from pydantic import BaseModel, Field
from typing import List, Optional
import datetime as dt
from decimal import Decimal
from uuid import UUID

from khata.models.collection_models import TransactionType


class TransactionCreate(BaseModel):
    customer_id: UUID
    type: TransactionType
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    date: Optional[dt.date] = None
    note: Optional[str] = None


class TransactionOut(BaseModel):
    id: UUID
    customer_id: UUID
    type: TransactionType
    amount: Decimal
    date: dt.date
    note: Optional[str] = None
    collection_id: Optional[UUID] = None
    created_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True


class TransactionResponse(BaseModel):
    message: str
    data: Optional[TransactionOut] = None


class TransactionListResponse(BaseModel):
    message: str
    total: int
    data: List[TransactionOut]
