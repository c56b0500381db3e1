"""Load the system default field mappings and ensure a service category exists.

Safe to re-run: rules already present for an (event type, role, field) are
left untouched.

Usage:
    uv run python scripts/seed_defaults.py
    uv run python scripts/seed_defaults.py --category boiler --category-name "Boiler"
"""

import argparse
import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from leadflow.persistence.database import AsyncSessionLocal
from leadflow.persistence.repositories.field_mapping_repository import FieldMappingRepository
from leadflow.persistence.repositories.tenant_repository import ServiceCategoryRepository
from leadflow.persistence.seeds.default_mappings import EVENT_TYPES, all_default_rows


async def seed_defaults(category_slug: str, category_name: str) -> None:
    """Insert default mappings for every event type."""
    async with AsyncSessionLocal() as session:
        category = await ServiceCategoryRepository(session).get_or_create(
            category_slug, category_name
        )
        print(f"Service category: {category.slug} (ID: {category.id})")

        rows = all_default_rows()
        await FieldMappingRepository(session).upsert_defaults(rows)
        print(f"Offered {len(rows)} default mappings across {len(EVENT_TYPES)} event types")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed default field mappings")
    parser.add_argument("--category", default="boiler", help="Service category slug")
    parser.add_argument("--category-name", default="Boiler", help="Service category name")
    args = parser.parse_args()

    asyncio.run(seed_defaults(args.category, args.category_name))


if __name__ == "__main__":
    main()
