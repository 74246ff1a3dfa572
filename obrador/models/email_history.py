from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class DocumentType(str, Enum):
    BUDGET = "budget"
    INVOICE = "invoice"


class EmailType(str, Enum):
    PROPOSAL = "proposal"
    RESPONSE = "response"


class EmailHistoryEntry(BaseModel):
    id: int | None = None
    document_type: DocumentType
    document_id: int
    type: EmailType
    subject: str = ""
    content: str
    sent_at: datetime | None = None
