import logging

from obrador.mail.base import DisabledEmailSender, EmailSender
from obrador.settings import settings

logger = logging.getLogger(__name__)


def get_email_sender() -> EmailSender:
    backend = settings.email_backend

    if backend == "smtp":
        from obrador.mail.smtp import SMTPEmailSender

        logger.info("Using email backend: smtp host=%s", settings.smtp_host)
        return SMTPEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.email_from,
            username=settings.smtp_username,
            password=settings.smtp_password,
            start_tls=settings.smtp_start_tls,
        )

    if backend == "resend":
        from obrador.mail.resend import ResendEmailSender

        logger.info("Using email backend: resend")
        return ResendEmailSender(
            api_key=settings.resend_api_key,
            sender=settings.email_from,
            api_url=settings.resend_api_url,
        )

    if backend == "none":
        logger.info("Email backend disabled; documents will stay pending")
        return DisabledEmailSender()

    raise ValueError(f"Unsupported email backend: {backend}")
