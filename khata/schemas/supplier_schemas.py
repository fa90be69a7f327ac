# khata/schemas/supplier_schemas.py
from pydantic import BaseModel, Field
from typing import Optional, List
from uuid import UUID


class SupplierCreate(BaseModel):
    """Schema for creating a new supplier"""
    name: str = Field(min_length=1, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=20)


class SupplierUpdate(BaseModel):
    """Schema for updating an existing supplier"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=20)


class SupplierOut(SupplierCreate):
    """Schema for returning supplier data"""
    id: UUID

    class Config:
        from_attributes = True


class SupplierListResponse(BaseModel):
    message: str
    total: int
    data: List[SupplierOut]


class SupplierResponse(BaseModel):
    message: str
    data: SupplierOut
