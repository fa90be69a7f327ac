# khata/models/activity_models.py
from sqlalchemy import Column, Integer, String, DateTime, Uuid
from sqlalchemy.sql import func
from khata.core.db import Base


class UserActivity(Base):
    __tablename__ = "user_activity"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Uuid, nullable=True, index=True)
    username = Column(String, nullable=True)

    message = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
