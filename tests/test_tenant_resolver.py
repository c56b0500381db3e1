"""Tests for hostname-based tenant resolution."""

import pytest

from leadflow.core.errors import TenantNotFoundError
from leadflow.domain.services.tenant_resolver import TenantResolver, effective_hostname
from leadflow.persistence.models.tenant import Tenant


def test_effective_hostname_precedence():
    assert effective_hostname("acme", "other", "shop.example.com") == "acme"
    assert effective_hostname(None, "other", "shop.example.com") == "other"
    assert effective_hostname(None, None, "Shop.Example.com:8443") == "shop.example.com"


def test_effective_hostname_localhost_is_no_tenant():
    assert effective_hostname(None, None, "localhost:3000") is None
    assert effective_hostname(None, None, None) is None
    assert effective_hostname("", "  ", "localhost") is None


@pytest.mark.asyncio
async def test_resolve_by_subdomain(db_session, tenant):
    resolver = TenantResolver(db_session)

    assert (await resolver.resolve("acme.leadflow.test")).id == tenant.id
    assert (await resolver.resolve("acme")).id == tenant.id


@pytest.mark.asyncio
async def test_resolve_by_custom_domain(db_session, tenant):
    resolved = await TenantResolver(db_session).resolve("quotes.acmeheating.co.uk")
    assert resolved.id == tenant.id


@pytest.mark.asyncio
async def test_custom_domain_wins_over_subdomain(db_session, tenant):
    other = Tenant(name="Shop Co", subdomain="shop", is_active=True)
    owner = Tenant(name="Domain Owner", subdomain="owner", custom_domain="shop.example.com", is_active=True)
    db_session.add_all([other, owner])
    await db_session.commit()

    resolved = await TenantResolver(db_session).resolve("shop.example.com")
    assert resolved.name == "Domain Owner"


@pytest.mark.asyncio
async def test_inactive_tenant_not_resolved(db_session):
    db_session.add(Tenant(name="Gone", subdomain="gone", is_active=False))
    await db_session.commit()

    with pytest.raises(TenantNotFoundError) as exc_info:
        await TenantResolver(db_session).resolve("gone.leadflow.test")

    assert exc_info.value.kind == "tenant_not_found"
    assert exc_info.value.detail == "Tenant not found for domain gone.leadflow.test"


@pytest.mark.asyncio
async def test_no_fuzzy_matching(db_session, tenant):
    with pytest.raises(TenantNotFoundError):
        await TenantResolver(db_session).resolve("acm.leadflow.test")


@pytest.mark.asyncio
async def test_www_and_localhost_are_not_subdomains(db_session):
    db_session.add(Tenant(name="No Subdomain", subdomain=None, is_active=True))
    await db_session.commit()
    resolver = TenantResolver(db_session)

    with pytest.raises(TenantNotFoundError):
        await resolver.resolve("www.example.com")
    with pytest.raises(TenantNotFoundError):
        await resolver.resolve("localhost")
    with pytest.raises(TenantNotFoundError):
        await resolver.resolve(None)
