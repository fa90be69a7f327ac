from sqlalchemy import Column, String, DateTime, Uuid
from sqlalchemy.sql import func
from khata.core.db import Base


class Profile(Base):
    __tablename__ = "profiles"

    # Same id as the Supabase auth user
    id = Column(Uuid, primary_key=True)
    email = Column(String, nullable=False)
    name = Column(String, nullable=True)
    shop_name = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)
    pin_hash = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
