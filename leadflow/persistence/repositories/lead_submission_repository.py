"""Lead submission repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.persistence.models.lead_submission import LeadSubmission
from leadflow.persistence.repositories.base import BaseRepository


class LeadSubmissionRepository(BaseRepository[LeadSubmission]):
    """Repository for LeadSubmission records, keyed by submission id."""

    def __init__(self, session: AsyncSession):
        """Initialize lead submission repository."""
        super().__init__(LeadSubmission, session)

    async def get_by_submission_id(
        self, tenant_id: int | None, submission_id: str
    ) -> LeadSubmission | None:
        """Get a submission by id, scoped to tenant."""
        stmt = select(LeadSubmission).where(LeadSubmission.submission_id == submission_id)
        return await self.fetch_one(self.scoped(stmt, tenant_id))
