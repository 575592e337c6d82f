"""Integration test fixtures with a real (SQLite) database."""

from collections.abc import AsyncGenerator
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from salary_engine.database import create_session_factory, create_tables
from salary_engine.models import Attendance, Contract, LaborLawVersion
from tests.conftest import MONDAY, TEST_RULE_SET_PAYLOAD


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a throwaway database file with the engine's tables."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'salary.db'}", echo=False)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(db_engine)


def attendance_row(staff_id: str, work_date: date, start: int = 9, end: int = 18, **kwargs) -> Attendance:
    midnight = datetime.combine(work_date, datetime.min.time())
    return Attendance(
        staff_id=staff_id,
        work_date=work_date,
        actual_check_in=midnight + timedelta(hours=start),
        actual_check_out=midnight + timedelta(hours=end),
        **kwargs,
    )


@pytest_asyncio.fixture(scope="function")
async def seeded_db(
    session_factory: async_sessionmaker[AsyncSession],
) -> async_sessionmaker[AsyncSession]:
    """Seed contracts, one week of attendance and the test rule set."""
    async with session_factory() as session:
        session.add_all(
            [
                Contract(
                    staff_id="S1",
                    company_id="C1",
                    salary_type="HOURLY",
                    salary_amount=Decimal("9000"),
                    status="TERMINATED",
                    start_date=date(2024, 1, 1),
                ),
                Contract(
                    staff_id="S1",
                    company_id="C1",
                    salary_type="HOURLY",
                    salary_amount=Decimal("10000"),
                    status="ACTIVE",
                    start_date=date(2025, 1, 1),
                    meal_allowance=100000,
                    other_deductions={"union_dues": 5000},
                ),
                Contract(
                    staff_id="S2",
                    company_id="C1",
                    salary_type="MONTHLY",
                    salary_amount=Decimal("2090000"),
                    status="ACTIVE",
                    start_date=date(2025, 1, 1),
                    pays_weekly_holiday=False,
                    dependents=2,
                    standard_hours_per_day=Decimal("8"),
                ),
                Contract(
                    staff_id="S3",
                    company_id="C2",
                    salary_type="HOURLY",
                    salary_amount=Decimal("10000"),
                    status="ACTIVE",
                    start_date=date(2025, 1, 1),
                ),
            ]
        )
        session.add_all(
            [attendance_row("S1", MONDAY + timedelta(days=i)) for i in range(5)]
            + [attendance_row("S1", date(2025, 4, 1))]
            + [attendance_row("S2", MONDAY + timedelta(days=i)) for i in range(5)]
        )
        session.add(
            LaborLawVersion(
                version=TEST_RULE_SET_PAYLOAD["version"],
                effective_date=date(2025, 1, 1),
                status="ACTIVE",
                source=TEST_RULE_SET_PAYLOAD["source"],
                payload_json=TEST_RULE_SET_PAYLOAD,
            )
        )
        await session.commit()
    return session_factory
