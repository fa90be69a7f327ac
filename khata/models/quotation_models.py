# khata/models/quotation_models.py
import enum
import uuid
from sqlalchemy import Column, String, Integer, Boolean, Date, DateTime, Enum, CheckConstraint, Uuid, func
from khata.core.db import Base


class QuotationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Quotation(Base):
    __tablename__ = "quotations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    customer_id = Column(Uuid, nullable=False, index=True)

    product_id = Column(Uuid, nullable=False)
    qty = Column(Integer, nullable=False)

    status = Column(
        Enum(QuotationStatus, name="quotation_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=QuotationStatus.PENDING,
    )
    converted_to_order = Column(Boolean, nullable=False, default=False)

    job_date = Column(Date, nullable=False)
    assigned_to = Column(String, nullable=False, default="")
    site_address = Column(String, nullable=True)
    remarks = Column(String, nullable=True)
    terms = Column(String, nullable=True)
    valid_until = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(qty > 0, name="check_quotation_qty_positive"),
    )
