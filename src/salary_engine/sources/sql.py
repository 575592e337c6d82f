"""SQLAlchemy-backed collaborators.

Each call opens its own session from the factory, so concurrent batch
workers never share a session.
"""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from salary_engine.calculators.attendance import month_bounds
from salary_engine.calculators.engine import PayrollOrchestrator
from salary_engine.calculators.types import AttendanceRecord, StaffContract
from salary_engine.config import Settings, get_settings
from salary_engine.database import init_db
from salary_engine.errors import ContractNotFoundError, RuleSetNotFoundError
from salary_engine.models import Attendance, Contract, LaborLawVersion
from salary_engine.rules.rule_set import LaborLawRuleSet

logger = logging.getLogger(__name__)


class SqlAttendanceSource:
    """Reads the attendances table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def fetch_attendance(
        self, staff_id: str, year: int, month: int
    ) -> list[AttendanceRecord]:
        period_start, period_end = month_bounds(year, month)
        async with self.session_factory() as session:
            result = await session.execute(
                select(Attendance)
                .where(
                    Attendance.staff_id == staff_id,
                    Attendance.work_date >= period_start,
                    Attendance.work_date <= period_end,
                )
                .order_by(Attendance.work_date)
            )
            return [row.to_record() for row in result.scalars().all()]


class SqlRuleSetSource:
    """Resolves ACTIVE labor_law_versions rows by effective date."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        self._rule_cache: dict[str, LaborLawRuleSet] = {}

    async def get_rule_set(self, as_of_date: date) -> LaborLawRuleSet:
        async with self.session_factory() as session:
            result = await session.execute(
                select(LaborLawVersion)
                .where(
                    LaborLawVersion.status == "ACTIVE",
                    LaborLawVersion.effective_date <= as_of_date,
                )
                .order_by(LaborLawVersion.effective_date.desc())
                .limit(1)
            )
            row = result.scalar_one_or_none()

        if row is None:
            raise RuleSetNotFoundError(as_of_date)

        cached = self._rule_cache.get(row.version)
        if cached is not None:
            return cached

        rule_set = row.to_rule_set()
        self._rule_cache[row.version] = rule_set
        logger.debug("Loaded labor-law rule set %s for %s", rule_set.version, as_of_date)
        return rule_set


class SqlContractSource:
    """Reads the latest ACTIVE contract per staff member."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_contract(self, staff_id: str) -> StaffContract:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Contract)
                .where(Contract.staff_id == staff_id, Contract.status == "ACTIVE")
                .order_by(Contract.start_date.desc())
                .limit(1)
            )
            row = result.scalar_one_or_none()

        if row is None:
            raise ContractNotFoundError(staff_id)
        return row.to_contract()


class SqlStaffDirectory:
    """Active staff of a company, from their ACTIVE contracts."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def list_active_staff(self, company_id: str) -> list[str]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Contract.staff_id)
                .where(Contract.company_id == company_id, Contract.status == "ACTIVE")
                .distinct()
                .order_by(Contract.staff_id)
            )
            return list(result.scalars().all())


def create_sql_orchestrator(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    settings: Settings | None = None,
) -> PayrollOrchestrator:
    """Wire a PayrollOrchestrator to the database.

    Uses the global session factory from init_db() unless one is given.
    """
    settings = settings or get_settings()
    if session_factory is None:
        _, session_factory = init_db(settings)

    return PayrollOrchestrator(
        attendance_source=SqlAttendanceSource(session_factory),
        rule_set_source=SqlRuleSetSource(session_factory),
        contract_source=SqlContractSource(session_factory),
        staff_directory=SqlStaffDirectory(session_factory),
        settings=settings,
    )
