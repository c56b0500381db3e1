"""Store encrypted mail-relay credentials on a tenant.

Usage:
    uv run python scripts/set_tenant_smtp.py \
        --subdomain "acme" \
        --host "smtp.example.com" \
        --port 587 \
        --user "mailer@acme.co.uk" \
        --password "app-password" \
        --from-address "quotes@acme.co.uk"

Requires FIELD_ENCRYPTION_KEY; pass --generate-key to print a new one.
"""

import argparse
import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from leadflow.core.encryption import encrypt_settings, generate_encryption_key, get_encryption_service
from leadflow.persistence.database import AsyncSessionLocal
from leadflow.persistence.repositories.tenant_repository import TenantRepository


async def set_tenant_smtp(
    subdomain: str,
    host: str,
    port: int,
    user: str,
    password: str,
    from_address: str | None,
    secure: bool,
) -> bool:
    """Encrypt and save SMTP settings for the tenant owning ``subdomain``."""
    if not get_encryption_service().is_enabled:
        print("FIELD_ENCRYPTION_KEY is not set; refusing to store plaintext credentials.")
        return False

    async with AsyncSessionLocal() as session:
        repo = TenantRepository(session)
        tenant = await repo.get_by_subdomain(subdomain)
        if tenant is None:
            print(f"Tenant not found for subdomain: {subdomain}")
            return False

        smtp_settings = encrypt_settings({
            "SMTP_HOST": host,
            "SMTP_PORT": port,
            "SMTP_SECURE": secure,
            "SMTP_USER": user,
            "SMTP_PASSWORD": password,
            "SMTP_FROM": from_address,
        })
        await repo.update(None, tenant.id, smtp_settings=smtp_settings)
        print(f"Saved SMTP settings for {tenant.name} (ID: {tenant.id})")
        return True


def main() -> None:
    parser = argparse.ArgumentParser(description="Store tenant SMTP settings")
    parser.add_argument("--generate-key", action="store_true", help="Print a new encryption key and exit")
    parser.add_argument("--subdomain")
    parser.add_argument("--host")
    parser.add_argument("--port", type=int, default=587)
    parser.add_argument("--user")
    parser.add_argument("--password")
    parser.add_argument("--from-address")
    parser.add_argument("--secure", action="store_true", help="Use direct TLS (port 465)")
    args = parser.parse_args()

    if args.generate_key:
        print(generate_encryption_key())
        return

    missing = [name for name in ("subdomain", "host", "user", "password") if not getattr(args, name)]
    if missing:
        parser.error(f"missing required arguments: {', '.join('--' + name for name in missing)}")

    ok = asyncio.run(set_tenant_smtp(
        args.subdomain,
        args.host,
        args.port,
        args.user,
        args.password,
        args.from_address,
        args.secure,
    ))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
