"""Notification channel resolution per tenant, category and event type."""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.persistence.models.tenant import Tenant
from leadflow.persistence.repositories.notification_settings_repository import (
    NotificationSettingsRepository,
)
from leadflow.persistence.repositories.tenant_repository import TenantCategorySettingsRepository

logger = logging.getLogger(__name__)


@dataclass
class CustomerChannel:
    enabled: bool = True


@dataclass
class AdminChannel:
    enabled: bool = True
    emails: list[str] = field(default_factory=list)

    @property
    def should_send(self) -> bool:
        """Enabled alone is not enough; there must be someone to send to."""
        return self.enabled and bool(self.emails)


@dataclass
class CrmChannel:
    enabled: bool = True


@dataclass
class ChannelConfig:
    """Resolved delivery channels for one dispatch."""

    customer: CustomerChannel = field(default_factory=CustomerChannel)
    admin: AdminChannel = field(default_factory=AdminChannel)
    crm: CrmChannel = field(default_factory=CrmChannel)

    def to_dict(self) -> dict[str, Any]:
        return {
            "customer": asdict(self.customer),
            "admin": asdict(self.admin),
            "externalCrm": asdict(self.crm),
        }


def _clean_emails(values: Any) -> list[str]:
    if not isinstance(values, list):
        return []
    emails: list[str] = []
    for value in values:
        if isinstance(value, str) and value.strip() and value.strip() not in emails:
            emails.append(value.strip())
    return emails


class NotificationChannelResolver:
    """Decides which channels fire and who the admin recipients are."""

    def __init__(self, session: AsyncSession) -> None:
        self.settings_repo = NotificationSettingsRepository(session)
        self.category_settings_repo = TenantCategorySettingsRepository(session)

    async def fallback_admin_emails(self, tenant: Tenant, service_category_id: int) -> list[str]:
        """Category-level admin address, else the tenant's own."""
        category_settings = await self.category_settings_repo.get_for_category(
            tenant.id, service_category_id
        )
        if category_settings and category_settings.admin_email:
            return [category_settings.admin_email.strip()]
        if tenant.admin_email:
            return [tenant.admin_email.strip()]
        return []

    async def resolve(self, tenant: Tenant, service_category_id: int, event_type: str) -> ChannelConfig:
        """Resolve channel toggles and the admin recipient list.

        Without a settings row every channel is enabled.
        """
        row = await self.settings_repo.get_for_event(tenant.id, service_category_id, event_type)

        if row is None:
            config = ChannelConfig()
            explicit: list[str] = []
        else:
            config = ChannelConfig(
                customer=CustomerChannel(enabled=bool(row.customer_enabled)),
                admin=AdminChannel(enabled=bool(row.admin_enabled)),
                crm=CrmChannel(enabled=bool(row.crm_enabled)),
            )
            explicit = _clean_emails(row.admin_emails)

        config.admin.emails = explicit or await self.fallback_admin_emails(tenant, service_category_id)

        if config.admin.enabled and not config.admin.emails:
            logger.info(
                f"Admin channel enabled but no recipients for tenant_id={tenant.id}, "
                f"event_type={event_type}"
            )
        return config
