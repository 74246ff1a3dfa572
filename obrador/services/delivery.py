import logging

from obrador.mail.base import Attachment, EmailDeliveryError, EmailSender, OutgoingEmail

logger = logging.getLogger(__name__)


def deliver(
    sender: EmailSender,
    to: str,
    subject: str,
    body: str,
    attachments: list[Attachment] | None = None,
) -> bool:
    """Send one email. Returns False instead of raising when delivery fails."""
    message = OutgoingEmail(to=to, subject=subject, body=body, attachments=attachments or [])
    try:
        sender.send(message)
    except EmailDeliveryError as exc:
        logger.warning("Email to %s not sent (%s): %s", to, subject, exc)
        return False
    return True
