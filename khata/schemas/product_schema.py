# khata/schemas/product_schema.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from uuid import UUID


class ProductCreate(BaseModel):
    """Schema for creating a catalog product"""
    name: str = Field(min_length=1, max_length=255)
    unit: str = Field(default="pcs", min_length=1, max_length=32)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    unit: Optional[str] = Field(default=None, min_length=1, max_length=32)
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)


class ProductOut(BaseModel):
    id: UUID
    name: str
    unit: str
    price: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductResponse(BaseModel):
    message: str
    data: Optional[ProductOut] = None


class ProductListResponse(BaseModel):
    message: str
    total: int
    data: List[ProductOut]
