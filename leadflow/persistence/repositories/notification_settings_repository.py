"""Notification settings repository."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.persistence.models.notification_settings import NotificationSettings
from leadflow.persistence.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class NotificationSettingsRepository(BaseRepository[NotificationSettings]):
    """Repository for per-event notification settings."""

    def __init__(self, session: AsyncSession):
        """Initialize notification settings repository."""
        super().__init__(NotificationSettings, session)

    async def get_for_event(
        self, tenant_id: int, service_category_id: int, event_type: str
    ) -> NotificationSettings | None:
        """Get the settings row for an event type, if one exists."""
        stmt = select(NotificationSettings).where(
            NotificationSettings.tenant_id == tenant_id,
            NotificationSettings.service_category_id == service_category_id,
            NotificationSettings.event_type == event_type,
        )
        return await self.fetch_one(stmt)

    async def upsert_for_event(
        self,
        tenant_id: int,
        service_category_id: int,
        event_type: str,
        *,
        customer_enabled: bool | None = None,
        admin_enabled: bool | None = None,
        admin_emails: list[str] | None = None,
        crm_enabled: bool | None = None,
    ) -> NotificationSettings:
        """Update the toggles for one event type, creating the row if needed.

        Arguments left as None keep their current value (or the enabled
        default on creation).
        """
        changes = {
            "customer_enabled": customer_enabled,
            "admin_enabled": admin_enabled,
            "admin_emails": admin_emails,
            "crm_enabled": crm_enabled,
        }
        changes = {key: value for key, value in changes.items() if value is not None}

        existing = await self.get_for_event(tenant_id, service_category_id, event_type)
        if existing is None:
            logger.info(
                f"Creating notification settings for tenant_id={tenant_id}, event_type={event_type}"
            )
            return await self.create(
                tenant_id,
                service_category_id=service_category_id,
                event_type=event_type,
                **changes,
            )
        return await self.update(tenant_id, existing.id, **changes)
