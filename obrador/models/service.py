from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class Service(BaseModel):
    id: int | None = None
    uuid: str = ""
    name: str
    base_price: Decimal
    unit: str
    created_at: datetime | None = None
    deleted_at: datetime | None = None
