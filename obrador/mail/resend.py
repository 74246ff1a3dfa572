import base64
import logging

import httpx

from obrador.mail.base import EmailDeliveryError, EmailSender, OutgoingEmail

logger = logging.getLogger(__name__)


class ResendEmailSender(EmailSender):
    """Deliver through the Resend HTTP API."""

    def __init__(
        self,
        api_key: str,
        sender: str,
        api_url: str = "https://api.resend.com/emails",
        client: httpx.Client | None = None,
        timeout: float = 15.0,
    ) -> None:
        self.api_key = api_key
        self.sender = sender
        self.api_url = api_url
        self.client = client or httpx.Client(timeout=timeout)

    def build_payload(self, message: OutgoingEmail) -> dict:
        payload: dict = {
            "from": self.sender,
            "to": [message.to],
            "subject": message.subject,
            "text": message.body,
        }
        if message.attachments:
            payload["attachments"] = [
                {
                    "filename": attachment.filename,
                    "content": base64.b64encode(attachment.content).decode("ascii"),
                }
                for attachment in message.attachments
            ]
        return payload

    def send(self, message: OutgoingEmail) -> None:
        try:
            resp = self.client.post(
                self.api_url,
                json=self.build_payload(message),
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Resend rejected email to %s: %s %s",
                message.to,
                exc.response.status_code,
                exc.response.text,
            )
            raise EmailDeliveryError(f"Resend returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.error("Resend request failed: %s", exc)
            raise EmailDeliveryError("Resend unreachable") from exc
        logger.info("Sent email to %s via Resend", message.to)
