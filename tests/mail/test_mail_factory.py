from unittest.mock import patch

import pytest

from obrador.mail.base import DisabledEmailSender, EmailNotConfiguredError, OutgoingEmail
from obrador.mail.factory import get_email_sender
from obrador.mail.resend import ResendEmailSender
from obrador.mail.smtp import SMTPEmailSender


class TestGetEmailSender:
    @patch("obrador.mail.factory.settings")
    def test_smtp(self, mock_settings):
        mock_settings.email_backend = "smtp"
        mock_settings.smtp_host = "smtp.example.com"
        mock_settings.smtp_port = 465
        mock_settings.email_from = "obras@example.com"

        sender = get_email_sender()

        assert isinstance(sender, SMTPEmailSender)
        assert sender.host == "smtp.example.com"
        assert sender.port == 465

    @patch("obrador.mail.factory.settings")
    def test_resend(self, mock_settings):
        mock_settings.email_backend = "resend"
        mock_settings.resend_api_key = "re_test"
        mock_settings.resend_api_url = "https://api.resend.com/emails"

        sender = get_email_sender()

        assert isinstance(sender, ResendEmailSender)
        assert sender.api_key == "re_test"

    @patch("obrador.mail.factory.settings")
    def test_none(self, mock_settings):
        mock_settings.email_backend = "none"

        sender = get_email_sender()

        assert isinstance(sender, DisabledEmailSender)
        with pytest.raises(EmailNotConfiguredError):
            sender.send(OutgoingEmail(to="a@b.c", subject="s", body="b"))

    @patch("obrador.mail.factory.settings")
    def test_unsupported(self, mock_settings):
        mock_settings.email_backend = "carrier-pigeon"

        with pytest.raises(ValueError, match="Unsupported email backend"):
            get_email_sender()
