# khata/models/product_models.py
import uuid
from decimal import Decimal
from sqlalchemy import Column, String, Numeric, CheckConstraint, Index, DateTime, Uuid, func
from khata.core.db import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    unit = Column(String(32), nullable=False, default="pcs")
    price = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(price >= 0, name="check_product_price_non_negative"),
        Index("ix_product_user_name", "user_id", "name"),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}')>"
