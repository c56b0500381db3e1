"""Mapping registry: tenant-owned rule sets seeded lazily from system defaults."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.persistence.models.field_mapping import FieldMapping, RecipientRole
from leadflow.persistence.repositories.field_mapping_repository import FieldMappingRepository

logger = logging.getLogger(__name__)


class MappingRegistry:
    """Serves mapping rules per (tenant, category, event type, role)."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.mapping_repo = FieldMappingRepository(session)

    async def ensure_defaults(
        self, tenant_id: int, service_category_id: int, event_type: str
    ) -> bool:
        """Copy the default rule set for an event type on first use.

        Existing rules are never regenerated. The copy ignores conflicts on
        the target-variable unique key, so concurrent first uses are safe.

        Returns:
            True if defaults were copied, False if rules already existed
        """
        if await self.mapping_repo.has_rules(tenant_id, service_category_id, event_type):
            return False

        copied = await self.mapping_repo.copy_defaults(tenant_id, service_category_id, event_type)
        logger.info(
            f"Seeded {copied} default field mappings for tenant_id={tenant_id}, "
            f"category_id={service_category_id}, event_type={event_type}"
        )
        return copied > 0

    async def get_rules(
        self,
        tenant_id: int,
        service_category_id: int,
        event_type: str,
        recipient_role: RecipientRole | str,
    ) -> list[FieldMapping]:
        """Active rules for a recipient role, ordered by position."""
        role = RecipientRole(recipient_role).value
        return await self.mapping_repo.list_rules(tenant_id, service_category_id, event_type, role)
