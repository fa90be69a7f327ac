# khata/schemas/ledger_schemas.py
"""
Validated snapshots that feed the balance computations, and the figures
they produce. Rows are converted into these once, right after fetching.
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from khata.models.order_models import OrderStatus
from khata.utils.decimal_utils import to_decimal, to_quantity


class LineItem(BaseModel):
    """A stored order line: product reference plus quantity (no price)."""
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(default="", alias="productId")
    qty: int = 0

    @field_validator("product_id", mode="before")
    @classmethod
    def _stringify_id(cls, v):
        return "" if v is None else str(v)

    @field_validator("qty", mode="before")
    @classmethod
    def _clamp_qty(cls, v):
        return int(to_quantity(v))


class OrderSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    customer_id: UUID
    products: List[LineItem] = []
    status: OrderStatus = OrderStatus.PENDING
    advance_amount: Decimal = Decimal("0.00")
    job_date: Optional[date] = None

    @field_validator("products", mode="before")
    @classmethod
    def _lines(cls, v):
        if not isinstance(v, (list, tuple)):
            return []
        return [item for item in v if isinstance(item, (dict, LineItem))]

    @field_validator("advance_amount", mode="before")
    @classmethod
    def _money(cls, v):
        return to_decimal(v)


class CollectionSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    customer_id: UUID
    order_id: Optional[UUID] = None
    amount: Decimal = Decimal("0.00")
    collection_date: Optional[date] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _money(cls, v):
        return to_decimal(v)


class OrderBalance(BaseModel):
    order_id: UUID
    customer_id: UUID
    status: OrderStatus
    total: Decimal
    advance: Decimal
    collected: Decimal
    pending: Decimal       # outstanding on an undelivered order
    udhaar: Decimal        # outstanding credit on a delivered order
    unknown_product_ids: List[str] = []

    @property
    def outstanding(self) -> Decimal:
        return self.pending + self.udhaar


class CustomerPending(BaseModel):
    customer_id: UUID
    pending: Decimal
    order_ids: List[UUID] = []
    earliest_due_date: Optional[date] = None
