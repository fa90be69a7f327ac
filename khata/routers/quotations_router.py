# khata/routers/quotations_router.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from khata.core.db import get_db
from khata.models.quotation_models import QuotationStatus
from khata.schemas.quotation_schema import (
    QuotationCreate, QuotationUpdate, QuotationConvert,
    QuotationResponse, QuotationListResponse, QuotationConversionResponse,
)
from khata.services.quotation_service import (
    create_quotation, list_quotations, get_quotation, update_quotation,
    set_quotation_status, convert_to_order, delete_quotation,
)
from khata.utils.get_user import get_current_user

router = APIRouter(prefix="/quotations", tags=["Quotations"])


# --------------------------
# CREATE QUOTATION
# --------------------------
@router.post("/", response_model=QuotationResponse, status_code=status.HTTP_201_CREATED)
async def create_quotation_route(
    data: QuotationCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await create_quotation(db, data, _user)


# --------------------------
# LIST / GET
# --------------------------
@router.get("/", response_model=QuotationListResponse)
async def list_quotations_route(
    status_filter: Optional[QuotationStatus] = Query(None, alias="status"),
    converted: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await list_quotations(db, _user.id, status_filter, converted)


@router.get("/{quotation_id}", response_model=QuotationResponse)
async def get_quotation_route(
    quotation_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await get_quotation(db, quotation_id, _user.id)


# --------------------------
# UPDATE QUOTATION
# --------------------------
@router.put("/{quotation_id}", response_model=QuotationResponse)
async def update_quotation_route(
    quotation_id: UUID,
    data: QuotationUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await update_quotation(db, quotation_id, data, _user)


# --------------------------
# APPROVE / REJECT
# --------------------------
@router.post("/{quotation_id}/approve", response_model=QuotationResponse)
async def approve_quotation_route(
    quotation_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await set_quotation_status(db, quotation_id, QuotationStatus.APPROVED, _user)


@router.post("/{quotation_id}/reject", response_model=QuotationResponse)
async def reject_quotation_route(
    quotation_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await set_quotation_status(db, quotation_id, QuotationStatus.REJECTED, _user)


# --------------------------
# CONVERT TO ORDER
# --------------------------
@router.post("/{quotation_id}/convert", response_model=QuotationConversionResponse, status_code=status.HTTP_201_CREATED)
async def convert_quotation_route(
    quotation_id: UUID,
    data: QuotationConvert,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await convert_to_order(db, quotation_id, data, _user)


# --------------------------
# DELETE QUOTATION
# --------------------------
@router.delete("/{quotation_id}", response_model=QuotationResponse)
async def delete_quotation_route(
    quotation_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await delete_quotation(db, quotation_id, _user)
