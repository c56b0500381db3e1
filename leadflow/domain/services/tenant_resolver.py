"""Tenant resolution by request hostname."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.core.errors import TenantNotFoundError
from leadflow.persistence.models.tenant import Tenant
from leadflow.persistence.repositories.tenant_repository import TenantRepository

logger = logging.getLogger(__name__)

# First labels that never name a tenant
RESERVED_LABELS = {"www", "localhost"}


def _clean_host(value: str | None) -> str | None:
    if not value:
        return None
    host = value.strip().lower()
    # Strip port, keeping bracketed IPv6 literals intact
    if host.startswith("["):
        host = host.split("]", 1)[0] + "]"
    else:
        host = host.split(":", 1)[0]
    return host.rstrip(".") or None


def effective_hostname(
    query_override: str | None,
    body_hint: str | None,
    host_header: str | None,
) -> str | None:
    """Pick the hostname a request should be resolved against.

    An explicit ``?subdomain=`` override wins (embedded flows are served from
    another origin), then a ``subdomain`` hint in the body, then the ``Host``
    header. A bare ``localhost`` means no tenant.
    """
    for candidate in (query_override, body_hint, host_header):
        host = _clean_host(candidate)
        if host:
            return None if host == "localhost" else host
    return None


class TenantResolver:
    """Maps a hostname or bare subdomain to an active tenant."""

    def __init__(self, session: AsyncSession) -> None:
        self.tenant_repo = TenantRepository(session)

    async def resolve(self, hostname: str | None) -> Tenant:
        """Resolve a hostname to its tenant.

        Raises:
            TenantNotFoundError: If no active tenant owns the hostname
        """
        host = _clean_host(hostname)
        if not host or host == "localhost":
            raise TenantNotFoundError(hostname)

        label = host.split(".", 1)[0]
        subdomain = None if label in RESERVED_LABELS else label

        tenant = await self.tenant_repo.get_by_routing_key(host, subdomain)
        if tenant is None:
            logger.info(f"No tenant for hostname={host}")
            raise TenantNotFoundError(host)

        logger.debug(f"Resolved hostname={host} to tenant_id={tenant.id}")
        return tenant

    async def resolve_by_id(self, tenant_id: int) -> Tenant:
        """Resolve an explicit tenant id.

        Raises:
            TenantNotFoundError: If the tenant does not exist or is inactive
        """
        tenant = await self.tenant_repo.get_by_id(None, tenant_id)
        if tenant is None or not tenant.is_active:
            raise TenantNotFoundError(f"id={tenant_id}")
        return tenant
