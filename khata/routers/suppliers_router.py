# khata/routers/suppliers_router.py
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from khata.core.db import get_db
from khata.schemas.response_schemas import MessageResponse
from khata.schemas.supplier_schemas import SupplierCreate, SupplierUpdate, SupplierResponse, SupplierListResponse
from khata.services.supplier_service import (
    create_supplier, get_all_suppliers, get_supplier, update_supplier, delete_supplier,
)
from khata.utils.get_user import get_current_user

router = APIRouter(prefix="/suppliers", tags=["Suppliers CRUD"])


# -----------------------------------------------------------
# CREATE SUPPLIER
# -----------------------------------------------------------
@router.post("", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
async def create_supplier_route(
    data: SupplierCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await create_supplier(db, data, _user)


# -----------------------------------------------------------
# LIST ALL SUPPLIERS
# -----------------------------------------------------------
@router.get("", response_model=SupplierListResponse)
async def list_suppliers(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await get_all_suppliers(db, _user.id)


# -----------------------------------------------------------
# GET SUPPLIER BY ID
# -----------------------------------------------------------
@router.get("/{supplier_id}", response_model=SupplierResponse)
async def get_supplier_by_id(
    supplier_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await get_supplier(db, supplier_id, _user.id)


# -----------------------------------------------------------
# UPDATE SUPPLIER
# -----------------------------------------------------------
@router.put("/{supplier_id}", response_model=SupplierResponse)
async def update_supplier_route(
    supplier_id: UUID,
    data: SupplierUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await update_supplier(db, supplier_id, data, _user)


# -----------------------------------------------------------
# DELETE SUPPLIER
# -----------------------------------------------------------
@router.delete("/{supplier_id}", response_model=MessageResponse)
async def delete_supplier_route(
    supplier_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await delete_supplier(db, supplier_id, _user)
