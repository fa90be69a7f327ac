# khata/routers/profile_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from khata.core.db import get_db
from khata.schemas.profile_schema import ProfileUpdate, ProfileResponse, PinIn, PinVerifyResponse
from khata.services.profile_service import get_profile, update_profile, set_pin, check_pin
from khata.utils.get_user import get_current_user

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("/", response_model=ProfileResponse)
async def get_profile_route(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await get_profile(db, _user)


@router.put("/", response_model=ProfileResponse)
async def update_profile_route(
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await update_profile(db, data, _user)


@router.put("/pin", response_model=ProfileResponse)
async def set_pin_route(
    data: PinIn,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await set_pin(db, data, _user)


@router.post("/pin/verify", response_model=PinVerifyResponse)
async def verify_pin_route(
    data: PinIn,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await check_pin(db, data, _user)
