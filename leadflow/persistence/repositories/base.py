"""Base repository with tenant-scoped queries."""

from typing import Any, Generic, Type, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Shared lookups for configuration tables.

    Most dispatch configuration belongs to one tenant; global tables
    (service categories, default mappings) pass ``tenant_id=None``.
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    def scoped(self, stmt: Select, tenant_id: int | None) -> Select:
        """Restrict a select to one tenant's rows when a tenant is given."""
        if tenant_id is not None:
            stmt = stmt.where(self.model.tenant_id == tenant_id)
        return stmt

    async def fetch_one(self, stmt: Select) -> ModelType | None:
        """Run a select expected to match at most one row."""
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def fetch_all(self, stmt: Select) -> list[ModelType]:
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, tenant_id: int | None, id: int) -> ModelType | None:
        """Get a row by primary key, scoped to tenant."""
        stmt = select(self.model).where(self.model.id == id)
        return await self.fetch_one(self.scoped(stmt, tenant_id))

    async def create(self, tenant_id: int | None, **data: Any) -> ModelType:
        """Insert and commit one row, stamping ``tenant_id`` when given."""
        if tenant_id is not None:
            data["tenant_id"] = tenant_id
        instance = self.model(**data)
        self.session.add(instance)
        await self.session.commit()
        await self.session.refresh(instance)
        return instance

    async def update(self, tenant_id: int | None, id: int, **data: Any) -> ModelType | None:
        """Apply column changes to an existing row; None if it is not the tenant's."""
        instance = await self.get_by_id(tenant_id, id)
        if instance is None:
            return None

        for key, value in data.items():
            setattr(instance, key, value)

        await self.session.commit()
        await self.session.refresh(instance)
        return instance
