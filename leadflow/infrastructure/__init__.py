"""Infrastructure adapters."""

from leadflow.infrastructure.smtp_client import (
    MailRelayClient,
    MailRelayError,
    OutboundEmail,
    SmtpRelayClient,
    SmtpSettings,
)

__all__ = [
    "MailRelayClient",
    "MailRelayError",
    "OutboundEmail",
    "SmtpRelayClient",
    "SmtpSettings",
]
