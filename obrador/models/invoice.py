from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel

from obrador.models.budget import LineItem


class InvoiceStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"


class Invoice(BaseModel):
    id: int | None = None
    uuid: str = ""
    invoice_number: int
    client_id: int
    project_name: str = ""
    items: list[LineItem] = []
    observations: str = ""
    subtotal: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    total_price: Decimal = Decimal("0")
    status: InvoiceStatus = InvoiceStatus.PENDING
    created_at: datetime | None = None
    sent_at: datetime | None = None
