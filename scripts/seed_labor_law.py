"""Seed script for labor-law rule sets.

Run with:
    python scripts/seed_labor_law.py [rules.json]

Creates the labor_law_versions rows the salary engine selects by effective
date. Without an argument the file named by LABOR_LAW_RULES_PATH is seeded,
or the built-in 2025 and 2026 rule sets when that is unset.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Iterable
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from salary_engine.config import get_settings
from salary_engine.database import create_tables, dispose_db, get_session, init_db
from salary_engine.models import LaborLawVersion
from salary_engine.rules.registry import RuleSetRegistry


async def seed_rule_sets(session: AsyncSession, payloads: Iterable[dict[str, Any]]) -> int:
    """Insert rule-set versions that do not exist yet. Returns rows created."""
    registry = RuleSetRegistry.from_payloads(payloads)
    created = 0

    for version in registry.versions:
        rule_set = registry.get_version(version)
        result = await session.execute(
            select(LaborLawVersion).where(LaborLawVersion.version == rule_set.version)
        )
        if result.scalar_one_or_none():
            print(f"Rule set {rule_set.version} already exists, skipping...")
            continue

        session.add(
            LaborLawVersion(
                version=rule_set.version,
                effective_date=rule_set.effective_date,
                status="ACTIVE",
                source=rule_set.source,
                payload_json=rule_set.to_payload(),
            )
        )
        created += 1
        print(f"Created rule set {rule_set.version} effective {rule_set.effective_date}")

    await session.flush()
    return created


async def main(argv: list[str]) -> None:
    """Seed all rule sets."""
    print("Seeding labor-law rule sets...")

    if argv:
        registry = RuleSetRegistry.from_json_file(argv[0])
    else:
        registry = RuleSetRegistry.from_settings(get_settings())
    payloads = [registry.get_version(v).to_payload() for v in registry.versions]

    engine, _ = init_db()
    await create_tables(engine)
    try:
        async with get_session() as session:
            created = await seed_rule_sets(session, payloads)
    finally:
        await dispose_db()

    print(f"\nDone! {created} rule set(s) seeded.")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
