"""Domain events raised by the Sale aggregate.

Events are notifications, not a source of truth: the aggregate collects
them while it is mutated and the application layer drains and publishes
them once the sale has been saved.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    sale_id: str
    sale_number: str
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    occurred_on: datetime = field(default_factory=_utcnow)

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True, kw_only=True)
class SaleCreated(DomainEvent):
    customer_id: str
    branch_id: str
    sale_date: datetime
    total_amount: Decimal
    item_count: int


@dataclass(frozen=True, kw_only=True)
class SaleModified(DomainEvent):
    """Raised for item changes and for confirmation."""

    modification_type: str
    details: str
    total_amount: Decimal
    item_count: int


@dataclass(frozen=True, kw_only=True)
class SaleCancelled(DomainEvent):
    customer_id: str
    branch_id: str
    original_total_amount: Decimal
    original_item_count: int
    reason: str = ""


@dataclass(frozen=True, kw_only=True)
class ItemCancelled(DomainEvent):
    item_id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    discount_percentage: Decimal
    total_price: Decimal
    reason: str = ""
