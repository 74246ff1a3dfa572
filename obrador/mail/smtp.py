import asyncio
import logging
from email.message import EmailMessage

import aiosmtplib

from obrador.mail.base import EmailDeliveryError, EmailSender, OutgoingEmail

logger = logging.getLogger(__name__)


class SMTPEmailSender(EmailSender):
    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str = "",
        password: str = "",
        start_tls: bool = True,
    ) -> None:
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.start_tls = start_tls

    def build_message(self, message: OutgoingEmail) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = message.to
        msg["Subject"] = message.subject
        msg.set_content(message.body)
        for attachment in message.attachments:
            maintype, _, subtype = attachment.mime_type.partition("/")
            msg.add_attachment(
                attachment.content,
                maintype=maintype,
                subtype=subtype or "octet-stream",
                filename=attachment.filename,
            )
        return msg

    async def _send_async(self, msg: EmailMessage) -> None:
        await aiosmtplib.send(
            msg,
            hostname=self.host,
            port=self.port,
            username=self.username or None,
            password=self.password or None,
            start_tls=self.start_tls,
        )

    def send(self, message: OutgoingEmail) -> None:
        try:
            msg = self.build_message(message)
        except ValueError as exc:
            logger.error("Email to %s has an invalid header: %s", message.to, exc)
            raise EmailDeliveryError(f"Invalid email header: {exc}") from exc
        try:
            asyncio.run(self._send_async(msg))
        except aiosmtplib.SMTPException as exc:
            logger.error("SMTP delivery to %s failed: %s", message.to, exc)
            raise EmailDeliveryError(f"SMTP delivery failed: {exc}") from exc
        except OSError as exc:
            logger.error("SMTP server %s:%s unreachable: %s", self.host, self.port, exc)
            raise EmailDeliveryError(f"SMTP server unreachable: {exc}") from exc
        logger.info("Sent email to %s via SMTP", message.to)
