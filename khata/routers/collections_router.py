# khata/routers/collections_router.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from khata.core.db import get_db
from khata.schemas.collection_schema import (
    CollectionCreate, CollectionUpdate, CollectionResponse, CollectionListResponse,
    PendingCustomerListResponse, CollectionPreferenceIn, CollectionPreferenceResponse,
)
from khata.services.collection_service import (
    record_collection, list_collections, get_collection, update_collection, delete_collection,
    get_pending_customers, set_collection_preference,
)
from khata.utils.get_user import get_current_user

router = APIRouter(prefix="/collections", tags=["Collections"])


# =====================================================
# RECORD COLLECTION
# =====================================================
@router.post("/", response_model=CollectionResponse, status_code=status.HTTP_201_CREATED)
async def record_collection_route(
    data: CollectionCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    """
    Records a collection and its paired ``paid`` ledger transaction together.
    """
    return await record_collection(db, data, _user)


# =====================================================
# PENDING COLLECTIONS PER CUSTOMER
# =====================================================
@router.get("/pending", response_model=PendingCustomerListResponse)
async def pending_collections_route(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await get_pending_customers(db, _user.id)


@router.put("/preferences/{customer_id}", response_model=CollectionPreferenceResponse)
async def set_collection_preference_route(
    customer_id: UUID,
    data: CollectionPreferenceIn,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await set_collection_preference(db, customer_id, data, _user)


# =====================================================
# LIST / GET / UPDATE / DELETE
# =====================================================
@router.get("/", response_model=CollectionListResponse)
async def list_collections_route(
    customer_id: Optional[UUID] = Query(None),
    order_id: Optional[UUID] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await list_collections(db, _user.id, customer_id, order_id, limit, offset)


@router.get("/{collection_id}", response_model=CollectionResponse)
async def get_collection_route(
    collection_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await get_collection(db, collection_id, _user.id)


@router.put("/{collection_id}", response_model=CollectionResponse)
async def update_collection_route(
    collection_id: UUID,
    data: CollectionUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await update_collection(db, collection_id, data, _user)


@router.delete("/{collection_id}", response_model=CollectionResponse)
async def delete_collection_route(
    collection_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await delete_collection(db, collection_id, _user)
