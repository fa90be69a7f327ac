# khata/models/supplier_models.py
import uuid
from sqlalchemy import Column, String, DateTime, Uuid, func
from khata.core.db import Base


class Supplier(Base):
    __tablename__ = "suppliers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)

    name = Column(String(255), nullable=False, index=True)
    phone = Column(String(20), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Supplier(id={self.id}, name='{self.name}')>"
