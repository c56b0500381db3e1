"""Field mapping repository."""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.persistence.models.field_mapping import DefaultFieldMapping, FieldMapping
from leadflow.persistence.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

RULE_COLUMNS = (
    "position",
    "template_field_name",
    "source_path",
    "database_source",
    "formatter",
    "html_template",
)

_TARGET_KEY = [
    "tenant_id",
    "service_category_id",
    "event_type",
    "recipient_role",
    "template_field_name",
]
_DEFAULT_TARGET_KEY = ["event_type", "recipient_role", "template_field_name"]


class FieldMappingRepository(BaseRepository[FieldMapping]):
    """Repository for tenant field mappings and the system default rule set."""

    def __init__(self, session: AsyncSession):
        """Initialize field mapping repository."""
        super().__init__(FieldMapping, session)

    def _insert(self, model):
        """Dialect-specific INSERT supporting ON CONFLICT DO NOTHING."""
        if self.session.bind.dialect.name == "sqlite":
            return sqlite_insert(model)
        return pg_insert(model)

    async def has_rules(self, tenant_id: int, service_category_id: int, event_type: str) -> bool:
        """Check whether any rule exists for the tenant, category and event type."""
        stmt = (
            select(FieldMapping.id)
            .where(
                FieldMapping.tenant_id == tenant_id,
                FieldMapping.service_category_id == service_category_id,
                FieldMapping.event_type == event_type,
            )
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def list_rules(
        self,
        tenant_id: int,
        service_category_id: int,
        event_type: str,
        recipient_role: str,
    ) -> list[FieldMapping]:
        """Active rules for one recipient role, ordered by position then id."""
        stmt = (
            select(FieldMapping)
            .where(
                FieldMapping.tenant_id == tenant_id,
                FieldMapping.service_category_id == service_category_id,
                FieldMapping.event_type == event_type,
                FieldMapping.recipient_role == recipient_role,
                FieldMapping.is_active.is_(True),
            )
            .order_by(FieldMapping.position, FieldMapping.id)
        )
        return await self.fetch_all(stmt)

    async def list_defaults(self, event_type: str) -> list[DefaultFieldMapping]:
        """System default rules for an event type, both roles."""
        stmt = (
            select(DefaultFieldMapping)
            .where(DefaultFieldMapping.event_type == event_type)
            .order_by(
                DefaultFieldMapping.recipient_role,
                DefaultFieldMapping.position,
                DefaultFieldMapping.id,
            )
        )
        return await self.fetch_all(stmt)

    async def copy_defaults(
        self, tenant_id: int, service_category_id: int, event_type: str
    ) -> int:
        """Copy the default rule set into the tenant's namespace.

        Rows colliding with an existing target variable are skipped, so two
        simultaneous first uses cannot produce duplicates.

        Returns:
            Number of default rules offered for insertion
        """
        defaults = await self.list_defaults(event_type)
        if not defaults:
            logger.info(f"No default field mappings for event_type={event_type}")
            return 0

        rows = [
            {
                "tenant_id": tenant_id,
                "service_category_id": service_category_id,
                "event_type": event_type,
                "recipient_role": default.recipient_role,
                "is_active": True,
                **{column: getattr(default, column) for column in RULE_COLUMNS},
            }
            for default in defaults
        ]
        stmt = self._insert(FieldMapping).values(rows).on_conflict_do_nothing(
            index_elements=_TARGET_KEY
        )
        await self.session.execute(stmt)
        await self.session.commit()
        return len(rows)

    async def upsert_defaults(self, rows: list[dict[str, Any]]) -> int:
        """Insert default rules, leaving already-present targets untouched.

        Each row carries ``event_type``, ``recipient_role`` and the rule columns.
        """
        if not rows:
            return 0
        stmt = self._insert(DefaultFieldMapping).values(rows).on_conflict_do_nothing(
            index_elements=_DEFAULT_TARGET_KEY
        )
        await self.session.execute(stmt)
        await self.session.commit()
        return len(rows)
