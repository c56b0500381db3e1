"""FastAPI dependencies."""

from leadflow.domain.services.dispatch_service import RelayFactory
from leadflow.infrastructure.smtp_client import SmtpRelayClient


def get_relay_factory() -> RelayFactory:
    """Mail relay client factory used for dispatch; overridden in tests."""
    return SmtpRelayClient
