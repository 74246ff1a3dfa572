from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel


class BudgetStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class LineItem(BaseModel):
    """One requested service entry. The price snapshot fields are filled once priced."""

    id: int | None = None
    service_id: int
    quantity: Decimal
    difficulty_factor: Decimal = Decimal("1")
    notes: str = ""
    included_items: list[str] = []
    service_name: str = ""
    unit: str = ""
    unit_price: Decimal | None = None
    total: Decimal | None = None
    sort_order: int = 0


class Budget(BaseModel):
    id: int | None = None
    uuid: str = ""
    number: int
    client_id: int
    project_name: str = ""
    items: list[LineItem] = []
    distance_km: Decimal = Decimal("0")
    global_difficulty_factor: Decimal = Decimal("1")
    adjustment: Decimal = Decimal("0")
    adjustment_reason: str = ""
    total_price: Decimal = Decimal("0")
    status: BudgetStatus = BudgetStatus.PENDING
    observations: str = ""
    created_at: datetime | None = None
    sent_at: datetime | None = None
