"""Mail relay client interface and SMTP implementation."""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Any

import aiosmtplib

from leadflow.settings import settings

logger = logging.getLogger(__name__)

DEFAULT_SMTP_PORT = 587

# Legacy key -> canonical key, applied only when the canonical key is empty
_LEGACY_KEYS = {
    "SMTP_HOST": ("host",),
    "SMTP_PORT": ("port",),
    "SMTP_SECURE": ("secure",),
    "SMTP_USER": ("username", "user"),
    "SMTP_PASSWORD": ("password",),
    "SMTP_FROM": ("from_email", "from"),
}


class MailRelayError(Exception):
    """Raised when the mail relay rejects a connection or message."""
    pass


@dataclass
class OutboundEmail:
    """A single rendered message to one recipient."""

    from_address: str
    to: str
    subject: str
    html: str
    text: str | None = None


@dataclass
class SmtpSettings:
    """Normalized tenant mail-relay credentials."""

    host: str
    port: int
    secure: bool
    user: str
    password: str
    from_address: str

    @property
    def is_complete(self) -> bool:
        return bool(self.host and self.user and self.password)

    @property
    def sender(self) -> str:
        return self.from_address or self.user

    @classmethod
    def from_settings(cls, raw: dict[str, Any] | None) -> "SmtpSettings":
        """Normalize a decrypted settings object, accepting legacy key names."""
        raw = dict(raw or {})
        merged: dict[str, Any] = {}
        for key, legacy_keys in _LEGACY_KEYS.items():
            value = raw.get(key)
            if value in (None, ""):
                value = next(
                    (raw[legacy] for legacy in legacy_keys if raw.get(legacy) not in (None, "")),
                    None,
                )
            merged[key] = value

        port = merged["SMTP_PORT"]
        try:
            port = int(port) if port not in (None, "") else DEFAULT_SMTP_PORT
        except (TypeError, ValueError):
            port = DEFAULT_SMTP_PORT

        secure = merged["SMTP_SECURE"]
        if isinstance(secure, str):
            secure = secure.strip().lower() == "true"

        return cls(
            host=str(merged["SMTP_HOST"] or "").strip(),
            port=port,
            secure=bool(secure),
            user=str(merged["SMTP_USER"] or "").strip(),
            password=str(merged["SMTP_PASSWORD"] or ""),
            from_address=str(merged["SMTP_FROM"] or "").strip(),
        )

    def __repr__(self) -> str:
        return f"<SmtpSettings(host={self.host}, port={self.port}, user={self.user})>"


class MailRelayClient(ABC):
    """Interface for outbound mail relays."""

    @abstractmethod
    async def verify(self) -> None:
        """Check that the relay accepts the configured credentials.

        Raises:
            MailRelayError: If the relay is unreachable or rejects the login
        """
        pass

    @abstractmethod
    async def send(self, message: OutboundEmail) -> None:
        """Send one message.

        Raises:
            MailRelayError: If the relay does not accept the message
        """
        pass


class SmtpRelayClient(MailRelayClient):
    """SMTP relay client built on aiosmtplib.

    Opens one connection per operation: direct TLS when ``secure`` is set,
    otherwise STARTTLS if the server offers it.
    """

    def __init__(self, smtp_settings: SmtpSettings, timeout: float | None = None) -> None:
        self.smtp_settings = smtp_settings
        self.timeout = timeout or settings.smtp_connect_timeout_seconds

    def _client(self) -> aiosmtplib.SMTP:
        return aiosmtplib.SMTP(
            hostname=self.smtp_settings.host,
            port=self.smtp_settings.port,
            use_tls=self.smtp_settings.secure,
            start_tls=False if self.smtp_settings.secure else None,
            timeout=self.timeout,
        )

    async def _connect(self) -> aiosmtplib.SMTP:
        smtp = self._client()
        await asyncio.wait_for(smtp.connect(), timeout=self.timeout)
        try:
            await smtp.login(self.smtp_settings.user, self.smtp_settings.password)
        except aiosmtplib.SMTPException:
            smtp.close()
            raise
        return smtp

    async def verify(self) -> None:
        try:
            smtp = await self._connect()
        except (aiosmtplib.SMTPException, OSError, asyncio.TimeoutError) as e:
            raise MailRelayError(str(e) or e.__class__.__name__) from e
        try:
            await smtp.quit()
        except aiosmtplib.SMTPException as e:
            logger.debug(f"SMTP quit after verify failed: {e}")

    def _build(self, message: OutboundEmail) -> EmailMessage:
        email = EmailMessage()
        email["From"] = message.from_address
        email["To"] = message.to
        email["Subject"] = message.subject
        email.set_content(message.text or "")
        if message.html:
            email.add_alternative(message.html, subtype="html")
        return email

    async def send(self, message: OutboundEmail) -> None:
        try:
            email = self._build(message)
        except ValueError as e:
            raise MailRelayError(f"Invalid message headers: {e}") from e

        try:
            smtp = await self._connect()
            try:
                await smtp.send_message(email)
            finally:
                try:
                    await smtp.quit()
                except aiosmtplib.SMTPException as e:
                    logger.debug(f"SMTP quit after send failed: {e}")
        except (aiosmtplib.SMTPException, OSError, asyncio.TimeoutError) as e:
            raise MailRelayError(str(e) or e.__class__.__name__) from e
