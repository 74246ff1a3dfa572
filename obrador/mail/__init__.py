from obrador.mail.base import (
    Attachment,
    EmailDeliveryError,
    EmailNotConfiguredError,
    EmailSender,
    OutgoingEmail,
)

__all__ = [
    "Attachment",
    "EmailDeliveryError",
    "EmailNotConfiguredError",
    "EmailSender",
    "OutgoingEmail",
]
