"""Email template repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.persistence.models.email_template import EmailTemplate
from leadflow.persistence.repositories.base import BaseRepository


class EmailTemplateRepository(BaseRepository[EmailTemplate]):
    """Repository for EmailTemplate entities."""

    def __init__(self, session: AsyncSession):
        """Initialize email template repository."""
        super().__init__(EmailTemplate, session)

    async def get_active(
        self,
        tenant_id: int,
        service_category_id: int,
        event_type: str,
        recipient_role: str,
    ) -> EmailTemplate | None:
        """Get the active template for an event and recipient role."""
        stmt = select(EmailTemplate).where(
            EmailTemplate.tenant_id == tenant_id,
            EmailTemplate.service_category_id == service_category_id,
            EmailTemplate.event_type == event_type,
            EmailTemplate.recipient_role == recipient_role,
            EmailTemplate.is_active.is_(True),
        )
        return await self.fetch_one(stmt)
