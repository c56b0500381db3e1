"""Tenant and service category repositories."""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.persistence.models.tenant import ServiceCategory, Tenant, TenantCategorySettings
from leadflow.persistence.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    """Repository for Tenant entities."""

    def __init__(self, session: AsyncSession):
        """Initialize tenant repository."""
        super().__init__(Tenant, session)

    async def get_by_subdomain(self, subdomain: str) -> Tenant | None:
        """Get tenant by subdomain."""
        stmt = select(Tenant).where(Tenant.subdomain == subdomain)
        return await self.fetch_one(stmt)

    async def get_by_routing_key(self, hostname: str, subdomain: str | None) -> Tenant | None:
        """Get the active tenant owning a hostname.

        Matches ``custom_domain`` against the full hostname or ``subdomain``
        against its first label, in one query. A custom-domain hit wins.
        """
        routing = Tenant.custom_domain == hostname
        if subdomain:
            routing = or_(routing, Tenant.subdomain == subdomain)
        stmt = select(Tenant).where(Tenant.is_active.is_(True), routing)
        candidates = await self.fetch_all(stmt)
        for tenant in candidates:
            if tenant.custom_domain == hostname:
                return tenant
        return candidates[0] if candidates else None


class ServiceCategoryRepository(BaseRepository[ServiceCategory]):
    """Repository for ServiceCategory entities (global, not tenant-scoped)."""

    def __init__(self, session: AsyncSession):
        super().__init__(ServiceCategory, session)

    async def get_by_slug(self, slug: str) -> ServiceCategory | None:
        """Get an active service category by slug."""
        stmt = select(ServiceCategory).where(
            ServiceCategory.slug == slug,
            ServiceCategory.is_active.is_(True),
        )
        return await self.fetch_one(stmt)

    async def get_or_create(self, slug: str, name: str) -> ServiceCategory:
        """Get a category by slug, creating it when missing."""
        category = await self.get_by_slug(slug)
        if category is None:
            category = await self.create(None, slug=slug, name=name)
        return category


class TenantCategorySettingsRepository(BaseRepository[TenantCategorySettings]):
    """Repository for category-scoped tenant settings."""

    def __init__(self, session: AsyncSession):
        super().__init__(TenantCategorySettings, session)

    async def get_for_category(
        self, tenant_id: int, service_category_id: int
    ) -> TenantCategorySettings | None:
        """Get the active settings row for a tenant and category."""
        stmt = select(TenantCategorySettings).where(
            TenantCategorySettings.tenant_id == tenant_id,
            TenantCategorySettings.service_category_id == service_category_id,
            TenantCategorySettings.is_active.is_(True),
        )
        return await self.fetch_one(stmt)
