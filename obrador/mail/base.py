from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel


class EmailDeliveryError(Exception):
    """The backend accepted the call but the message was not delivered."""


class EmailNotConfiguredError(EmailDeliveryError):
    """No email backend is configured."""


class Attachment(BaseModel):
    filename: str
    content: bytes
    mime_type: str = "application/pdf"


class OutgoingEmail(BaseModel):
    to: str
    subject: str
    body: str
    attachments: list[Attachment] = []


class EmailSender(ABC):
    @abstractmethod
    def send(self, message: OutgoingEmail) -> None: ...


class DisabledEmailSender(EmailSender):
    def send(self, message: OutgoingEmail) -> None:
        raise EmailNotConfiguredError(
            "Email backend not configured. Set OBRADOR_EMAIL_BACKEND to 'smtp' or 'resend'."
        )
