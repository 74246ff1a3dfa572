from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


def normalize_email(email: str) -> str:
    return email.strip().lower()


class Client(BaseModel):
    id: int | None = None
    uuid: str = ""
    name: str
    email: str
    phone: str = ""
    created_at: datetime | None = None

    @property
    def first_name(self) -> str:
        parts = self.name.split()
        return parts[0] if parts else self.name
