"""Tests for SMTP settings normalization and the aiosmtplib relay client."""

from unittest.mock import AsyncMock, MagicMock, patch

import aiosmtplib
import pytest

from leadflow.infrastructure.smtp_client import (
    DEFAULT_SMTP_PORT,
    MailRelayError,
    OutboundEmail,
    SmtpRelayClient,
    SmtpSettings,
)


class TestSmtpSettings:
    """Normalization of stored credential objects."""

    def test_canonical_keys(self):
        smtp = SmtpSettings.from_settings({
            "SMTP_HOST": " smtp.acme.test ",
            "SMTP_PORT": 465,
            "SMTP_SECURE": True,
            "SMTP_USER": "mailer@acme.test",
            "SMTP_PASSWORD": "pw",
            "SMTP_FROM": "quotes@acme.test",
        })

        assert smtp.host == "smtp.acme.test"
        assert smtp.port == 465
        assert smtp.secure is True
        assert smtp.is_complete
        assert smtp.sender == "quotes@acme.test"

    def test_legacy_keys_and_defaults(self):
        smtp = SmtpSettings.from_settings({
            "host": "smtp.old.test",
            "user": "old@acme.test",
            "password": "pw",
            "secure": "TRUE",
        })

        assert smtp.host == "smtp.old.test"
        assert smtp.port == DEFAULT_SMTP_PORT
        assert smtp.secure is True
        assert smtp.sender == "old@acme.test"

    def test_canonical_key_wins_over_legacy(self):
        smtp = SmtpSettings.from_settings({"SMTP_HOST": "new.test", "host": "old.test"})
        assert smtp.host == "new.test"

    def test_bad_port_falls_back(self):
        assert SmtpSettings.from_settings({"SMTP_PORT": "abc"}).port == DEFAULT_SMTP_PORT

    def test_incomplete(self):
        assert not SmtpSettings.from_settings({"SMTP_HOST": "h", "SMTP_USER": "u"}).is_complete
        assert not SmtpSettings.from_settings(None).is_complete

    def test_repr_hides_password(self):
        smtp = SmtpSettings.from_settings({"SMTP_HOST": "h", "SMTP_USER": "u", "SMTP_PASSWORD": "secret"})
        assert "secret" not in repr(smtp)


def _mock_smtp():
    smtp = MagicMock()
    smtp.connect = AsyncMock()
    smtp.login = AsyncMock()
    smtp.send_message = AsyncMock()
    smtp.quit = AsyncMock()
    return smtp


SETTINGS = SmtpSettings(
    host="smtp.acme.test",
    port=465,
    secure=True,
    user="mailer@acme.test",
    password="pw",
    from_address="quotes@acme.test",
)


@pytest.mark.asyncio
async def test_verify_logs_in_and_quits():
    smtp = _mock_smtp()
    with patch("leadflow.infrastructure.smtp_client.aiosmtplib.SMTP", return_value=smtp) as smtp_cls:
        await SmtpRelayClient(SETTINGS, timeout=5).verify()

    smtp_cls.assert_called_once_with(
        hostname="smtp.acme.test", port=465, use_tls=True, start_tls=False, timeout=5
    )
    smtp.login.assert_awaited_once_with("mailer@acme.test", "pw")
    smtp.quit.assert_awaited_once()


@pytest.mark.asyncio
async def test_verify_rejected_login_raises_and_closes():
    smtp = _mock_smtp()
    smtp.login.side_effect = aiosmtplib.SMTPAuthenticationError(535, "authentication failed")

    with patch("leadflow.infrastructure.smtp_client.aiosmtplib.SMTP", return_value=smtp):
        with pytest.raises(MailRelayError):
            await SmtpRelayClient(SETTINGS, timeout=5).verify()

    smtp.close.assert_called_once()


@pytest.mark.asyncio
async def test_verify_unreachable_host():
    smtp = _mock_smtp()
    smtp.connect.side_effect = OSError("connection refused")

    with patch("leadflow.infrastructure.smtp_client.aiosmtplib.SMTP", return_value=smtp):
        with pytest.raises(MailRelayError, match="connection refused"):
            await SmtpRelayClient(SETTINGS, timeout=5).verify()


@pytest.mark.asyncio
async def test_send_builds_multipart_message():
    smtp = _mock_smtp()
    message = OutboundEmail(
        from_address="quotes@acme.test",
        to="john@example.com",
        subject="Your quote",
        html="<p>Hi John</p>",
        text="Hi John",
    )

    with patch("leadflow.infrastructure.smtp_client.aiosmtplib.SMTP", return_value=smtp):
        await SmtpRelayClient(SETTINGS, timeout=5).send(message)

    sent = smtp.send_message.await_args.args[0]
    assert sent["To"] == "john@example.com"
    assert sent["From"] == "quotes@acme.test"
    assert sent["Subject"] == "Your quote"
    assert sent.is_multipart()
    assert "<p>Hi John</p>" in sent.get_body(preferencelist=("html",)).get_content()
    smtp.quit.assert_awaited_once()


@pytest.mark.asyncio
async def test_send_rejected_recipient_raises():
    smtp = _mock_smtp()
    smtp.send_message.side_effect = aiosmtplib.SMTPRecipientsRefused([])

    with patch("leadflow.infrastructure.smtp_client.aiosmtplib.SMTP", return_value=smtp):
        with pytest.raises(MailRelayError):
            await SmtpRelayClient(SETTINGS, timeout=5).send(
                OutboundEmail(from_address="a@x.test", to="b@x.test", subject="s", html="<p>h</p>")
            )

    smtp.quit.assert_awaited_once()


@pytest.mark.asyncio
async def test_send_rejects_multiline_subject_without_connecting():
    smtp = _mock_smtp()
    message = OutboundEmail(
        from_address="quotes@acme.test",
        to="john@example.com",
        subject="New quote from John\nSmith",
        html="<p>Hi</p>",
    )

    with patch("leadflow.infrastructure.smtp_client.aiosmtplib.SMTP", return_value=smtp):
        with pytest.raises(MailRelayError, match="Invalid message headers"):
            await SmtpRelayClient(SETTINGS, timeout=5).send(message)

    smtp.connect.assert_not_awaited()
