# khata/routers/bills_router.py
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from khata.core.db import get_db
from khata.schemas.bill_schema import BillCreate, BillResponse, BillListResponse
from khata.services.bill_service import create_bill, list_bills, get_bill, delete_bill
from khata.utils.get_user import get_current_user

router = APIRouter(prefix="/bills", tags=["Bills"])


@router.post("/", response_model=BillResponse, status_code=status.HTTP_201_CREATED)
async def create_bill_route(
    data: BillCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await create_bill(db, data, _user)


@router.get("/", response_model=BillListResponse)
async def list_bills_route(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await list_bills(db, _user.id)


@router.get("/{bill_id}", response_model=BillResponse)
async def get_bill_route(
    bill_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await get_bill(db, bill_id, _user.id)


@router.delete("/{bill_id}", response_model=BillResponse)
async def delete_bill_route(
    bill_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await delete_bill(db, bill_id, _user)
