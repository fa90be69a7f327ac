# khata/routers/transactions_router.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from khata.core.db import get_db
from khata.models.collection_models import TransactionType
from khata.schemas.transaction_schema import TransactionCreate, TransactionResponse, TransactionListResponse
from khata.services.transaction_service import add_transaction, list_transactions, delete_transaction
from khata.utils.get_user import get_current_user

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post("/", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def add_transaction_route(
    data: TransactionCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await add_transaction(db, data, _user)


@router.get("/", response_model=TransactionListResponse)
async def list_transactions_route(
    customer_id: Optional[UUID] = Query(None),
    txn_type: Optional[TransactionType] = Query(None, alias="type"),
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await list_transactions(db, _user.id, customer_id, txn_type)


@router.delete("/{transaction_id}", response_model=TransactionResponse)
async def delete_transaction_route(
    transaction_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await delete_transaction(db, transaction_id, _user)
