# khata/models/order_models.py
import enum
import uuid
from decimal import Decimal
from sqlalchemy import Column, String, Numeric, Date, DateTime, JSON, Enum, CheckConstraint, Uuid, func
from sqlalchemy.ext.mutable import MutableList
from khata.core.db import Base


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    DELIVERED = "delivered"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)

    # Soft reference: deleting a customer leaves the order in place
    customer_id = Column(Uuid, nullable=False, index=True)

    # [{"productId": "<uuid>", "qty": 2}, ...] - price is looked up at valuation time
    products = Column(MutableList.as_mutable(JSON), nullable=False, default=list)

    status = Column(
        Enum(OrderStatus, name="order_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=OrderStatus.PENDING,
    )
    job_date = Column(Date, nullable=False)
    assigned_to = Column(String, nullable=True)
    site_address = Column(String, nullable=True)
    remarks = Column(String, nullable=True)
    photo_url = Column(String, nullable=True)
    advance_amount = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(advance_amount >= 0, name="check_order_advance_non_negative"),
    )

    def __repr__(self):
        return f"<Order(id={self.id}, status='{self.status}')>"
