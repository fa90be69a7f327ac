# khata/routers/orders_router.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from khata.core.db import get_db
from khata.schemas.order_schema import OrderCreate, OrderUpdate, OrderResponse, OrderListResponse
from khata.services.order_service import (
    create_order, list_orders, get_order, update_order, mark_delivered, delete_order,
)
from khata.utils.get_user import get_current_user

router = APIRouter(prefix="/orders", tags=["Orders"])


# =====================================================
# CREATE ORDER
# =====================================================
@router.post("/", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order_route(
    data: OrderCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await create_order(db, data, _user)


# =====================================================
# LIST ORDERS
# =====================================================
@router.get("/", response_model=OrderListResponse)
async def list_orders_route(
    tab: Optional[str] = Query(None, description="pending, udhaar or history"),
    customer_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await list_orders(db, _user.id, tab, customer_id)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order_route(
    order_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await get_order(db, order_id, _user.id)


@router.put("/{order_id}", response_model=OrderResponse)
async def update_order_route(
    order_id: UUID,
    data: OrderUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await update_order(db, order_id, data, _user)


@router.post("/{order_id}/deliver", response_model=OrderResponse)
async def deliver_order_route(
    order_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await mark_delivered(db, order_id, _user)


@router.delete("/{order_id}", response_model=OrderResponse)
async def delete_order_route(
    order_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await delete_order(db, order_id, _user)
