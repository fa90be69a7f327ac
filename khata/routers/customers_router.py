# khata/routers/customers_router.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from khata.core.db import get_db
from khata.schemas.customer_schema import (
    CustomerCreate, CustomerUpdate, CustomerResponse, CustomerListResponse, CustomerLedgerResponse,
)
from khata.services.customer_service import (
    create_customer, get_customer, get_all_customers, update_customer, delete_customer, get_customer_ledger,
)
from khata.utils.get_user import get_current_user

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.post("/", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer_route(
    data: CustomerCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await create_customer(db, data, _user)


@router.get("/", response_model=CustomerListResponse)
async def list_customers(
    search: Optional[str] = Query(None, description="Search by name or phone"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    sort_by: str = Query("name"),
    order: str = Query("asc"),
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await get_all_customers(db, _user.id, search, limit, offset, sort_by, order)


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer_route(
    customer_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await get_customer(db, customer_id, _user.id)


@router.get("/{customer_id}/ledger", response_model=CustomerLedgerResponse)
async def get_customer_ledger_route(
    customer_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    """Udhaar/paid transactions of one customer with running totals."""
    return await get_customer_ledger(db, customer_id, _user.id)


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer_route(
    customer_id: UUID,
    data: CustomerUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await update_customer(db, customer_id, data, _user)


@router.delete("/{customer_id}", response_model=CustomerResponse)
async def delete_customer_route(
    customer_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await delete_customer(db, customer_id, _user)
