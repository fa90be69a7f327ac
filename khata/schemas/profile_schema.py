from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID

from khata.core.config import PIN_LENGTH


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    shop_name: Optional[str] = None
    profile_image_url: Optional[str] = None


class ProfileOut(BaseModel):
    id: UUID
    email: str
    name: Optional[str] = None
    shop_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    has_pin: bool = False


class ProfileResponse(BaseModel):
    message: str
    data: ProfileOut


class PinIn(BaseModel):
    pin: str = Field(pattern=rf"^\d{{{PIN_LENGTH}}}$")


class PinVerifyResponse(BaseModel):
    message: str
    valid: bool
