import uuid
from datetime import date
from decimal import Decimal
from sqlalchemy import Column, String, Numeric, Date, DateTime, JSON, Uuid, func
from khata.core.db import Base


class Bill(Base):
    __tablename__ = "bills"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)

    # Snapshot of the buyer, not a customer reference
    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=True)

    bill_date = Column(Date, nullable=False, default=date.today)
    items = Column(JSON, nullable=False, default=list)  # [{"name":..., "qty":..., "price":...}]
    total = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
