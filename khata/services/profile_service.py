# khata/services/profile_service.py
import logging

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from khata.core.security import hash_pin, verify_pin
from khata.models.profile_models import Profile
from khata.schemas.auth_schemas import CurrentUser
from khata.schemas.profile_schema import ProfileUpdate, ProfileOut, ProfileResponse, PinIn, PinVerifyResponse
from khata.utils.activity_helpers import log_user_activity

logger = logging.getLogger(__name__)


def _profile_out(profile: Profile) -> ProfileOut:
    return ProfileOut(
        id=profile.id,
        email=profile.email,
        name=profile.name,
        shop_name=profile.shop_name,
        profile_image_url=profile.profile_image_url,
        has_pin=bool(profile.pin_hash),
    )


async def _get_or_create_profile(db: AsyncSession, current_user: CurrentUser) -> Profile:
    profile = await db.get(Profile, current_user.id)
    if profile is None:
        profile = Profile(id=current_user.id, email=current_user.email or "")
        db.add(profile)
        await db.flush()
    return profile


async def get_profile(db: AsyncSession, current_user: CurrentUser) -> ProfileResponse:
    profile = await _get_or_create_profile(db, current_user)
    await db.commit()
    return ProfileResponse(message="Profile retrieved successfully", data=_profile_out(profile))


async def update_profile(db: AsyncSession, data: ProfileUpdate, current_user: CurrentUser) -> ProfileResponse:
    profile = await _get_or_create_profile(db, current_user)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(profile, key, value)
    await db.commit()
    await db.refresh(profile)
    return ProfileResponse(message="Profile updated successfully", data=_profile_out(profile))


async def set_pin(db: AsyncSession, data: PinIn, current_user: CurrentUser) -> ProfileResponse:
    profile = await _get_or_create_profile(db, current_user)
    profile.pin_hash = hash_pin(data.pin)
    await log_user_activity(db, user_id=current_user.id, username=current_user.username, message="App PIN set")
    await db.commit()
    await db.refresh(profile)
    return ProfileResponse(message="PIN set successfully", data=_profile_out(profile))


async def check_pin(db: AsyncSession, data: PinIn, current_user: CurrentUser) -> PinVerifyResponse:
    profile = await db.get(Profile, current_user.id)
    if profile is None or not profile.pin_hash:
        raise HTTPException(status_code=404, detail="No PIN set for this account")

    valid = verify_pin(data.pin, profile.pin_hash)
    if not valid:
        logger.warning("Wrong PIN entered for user %s", current_user.id)
    return PinVerifyResponse(message="PIN verified" if valid else "Incorrect PIN", valid=valid)
