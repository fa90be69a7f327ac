# khata/models/collection_models.py
import enum
import uuid
from datetime import date
from sqlalchemy import (
    Column, String, Numeric, Date, DateTime, Enum, ForeignKey, CheckConstraint,
    UniqueConstraint, Uuid, func
)
from khata.core.db import Base


class TransactionType(str, enum.Enum):
    UDHAAR = "udhaar"  # credit given to the customer
    PAID = "paid"      # payment received from the customer


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    customer_id = Column(Uuid, nullable=False, index=True)

    type = Column(
        Enum(TransactionType, name="transaction_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False, default=date.today)
    note = Column(String, nullable=True)

    # Back-link to the collection that produced this entry; cleared by the service on delete
    collection_id = Column(Uuid, nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Collection(Base):
    __tablename__ = "collections"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    customer_id = Column(Uuid, nullable=False, index=True)
    order_id = Column(Uuid, ForeignKey("orders.id", ondelete="SET NULL"), nullable=True, index=True)

    amount = Column(Numeric(12, 2), nullable=False)
    collection_date = Column(Date, nullable=True)  # due/target date, not the recording time
    collected_at = Column(DateTime(timezone=True), server_default=func.now())
    remarks = Column(String, nullable=True)

    transaction_id = Column(Uuid, ForeignKey("transactions.id", ondelete="SET NULL"), nullable=True)

    __table_args__ = (
        CheckConstraint(amount > 0, name="check_collection_amount_positive"),
    )


class CustomerCollectionPreference(Base):
    __tablename__ = "customer_collection_preferences"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    customer_id = Column(Uuid, nullable=False)
    preferred_collection_date = Column(Date, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "customer_id", name="uq_collection_pref_user_customer"),
    )
