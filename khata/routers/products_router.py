# khata/routers/products_router.py
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from khata.core.db import get_db
from khata.schemas.product_schema import ProductCreate, ProductUpdate, ProductResponse, ProductListResponse
from khata.services.product_service import (
    create_product, get_all_products, get_product, update_product, delete_product,
)
from khata.utils.get_user import get_current_user

router = APIRouter(prefix="/products", tags=["Products"])


@router.post("/", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product_route(
    data: ProductCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await create_product(db, data, _user)


@router.get("/", response_model=ProductListResponse)
async def list_products(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await get_all_products(db, _user.id)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product_route(
    product_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await get_product(db, product_id, _user.id)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product_route(
    product_id: UUID,
    data: ProductUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await update_product(db, product_id, data, _user)


@router.delete("/{product_id}", response_model=ProductResponse)
async def delete_product_route(
    product_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await delete_product(db, product_id, _user)
