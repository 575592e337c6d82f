"""Integration tests for the database-backed collaborators."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from salary_engine.calculators.types import SalaryBasis
from salary_engine.config import Settings
from salary_engine.errors import ContractNotFoundError, RuleSetNotFoundError
from salary_engine.models import Contract, LaborLawVersion
from salary_engine.rules.defaults import RULE_SET_2026
from salary_engine.sources.sql import (
    SqlAttendanceSource,
    SqlContractSource,
    SqlRuleSetSource,
    SqlStaffDirectory,
    create_sql_orchestrator,
)

pytestmark = pytest.mark.asyncio


class TestSqlAttendanceSource:
    """Attendance rows for one staff member and month."""

    async def test_fetches_month_only(self, seeded_db: async_sessionmaker[AsyncSession]):
        source = SqlAttendanceSource(seeded_db)

        records = await source.fetch_attendance("S1", 2025, 3)

        assert [r.work_date.day for r in records] == [3, 4, 5, 6, 7]
        assert records[0].status == "NORMAL"
        assert records[0].actual_check_in.hour == 9

    async def test_unknown_staff_is_empty(self, seeded_db):
        source = SqlAttendanceSource(seeded_db)

        assert await source.fetch_attendance("S9", 2025, 3) == []


class TestSqlContractSource:
    """Contract lookup."""

    async def test_latest_active_contract(self, seeded_db):
        source = SqlContractSource(seeded_db)

        contract = await source.get_contract("S1")

        assert contract.basis == SalaryBasis.HOURLY
        assert contract.amount == Decimal("10000")
        assert contract.allowances.meal == 100000
        assert contract.other_deductions == {"union_dues": 5000}
        assert contract.deductions.dependents == 1
        assert contract.standard_daily_hours is None

    async def test_flags_mapped(self, seeded_db):
        contract = await SqlContractSource(seeded_db).get_contract("S2")

        assert contract.basis == SalaryBasis.MONTHLY
        assert contract.premiums.weekly_holiday is False
        assert contract.premiums.overtime is True
        assert contract.deductions.dependents == 2
        assert contract.standard_daily_hours == Decimal("8")

    async def test_missing_contract(self, seeded_db):
        with pytest.raises(ContractNotFoundError):
            await SqlContractSource(seeded_db).get_contract("S9")


class TestSqlRuleSetSource:
    """Effective-dated rule-set resolution."""

    async def test_resolves_by_effective_date(self, seeded_db):
        source = SqlRuleSetSource(seeded_db)

        rule_set = await source.get_rule_set(date(2025, 3, 31))

        assert rule_set.version == "test.2025"
        assert rule_set.minimum_wage_hourly == 9860

    async def test_before_first_version(self, seeded_db):
        with pytest.raises(RuleSetNotFoundError):
            await SqlRuleSetSource(seeded_db).get_rule_set(date(2024, 12, 31))

    async def test_newer_version_wins(self, seeded_db):
        async with seeded_db() as session:
            session.add(
                LaborLawVersion(
                    version=RULE_SET_2026["version"],
                    effective_date=date(2026, 1, 1),
                    status="ACTIVE",
                    payload_json=RULE_SET_2026,
                )
            )
            await session.commit()

        source = SqlRuleSetSource(seeded_db)

        assert (await source.get_rule_set(date(2025, 12, 31))).version == "test.2025"
        assert (await source.get_rule_set(date(2026, 1, 31))).version == "2026.01"

    async def test_draft_versions_ignored(self, seeded_db):
        async with seeded_db() as session:
            session.add(
                LaborLawVersion(
                    version=RULE_SET_2026["version"],
                    effective_date=date(2026, 1, 1),
                    status="DRAFT",
                    payload_json=RULE_SET_2026,
                )
            )
            await session.commit()

        rule_set = await SqlRuleSetSource(seeded_db).get_rule_set(date(2026, 1, 31))

        assert rule_set.version == "test.2025"

    async def test_cached_per_version(self, seeded_db):
        source = SqlRuleSetSource(seeded_db)

        first = await source.get_rule_set(date(2025, 3, 31))
        second = await source.get_rule_set(date(2025, 4, 30))

        assert first is second


class TestSqlStaffDirectory:
    """Active staff listing."""

    async def test_lists_company_staff(self, seeded_db):
        directory = SqlStaffDirectory(seeded_db)

        assert await directory.list_active_staff("C1") == ["S1", "S2"]
        assert await directory.list_active_staff("C2") == ["S3"]
        assert await directory.list_active_staff("C9") == []


class TestSqlOrchestrator:
    """End-to-end calculation against the database."""

    async def test_company_run(self, seeded_db):
        orchestrator = create_sql_orchestrator(
            seeded_db, Settings(engine_version="test", batch_concurrency=2)
        )

        result = await orchestrator.calculate_company("C1", 2025, 3)

        assert result.failed_count == 0
        assert [r.staff_id for r in result.succeeded] == ["S1", "S2"]

        s1, s2 = result.succeeded
        # 40 hours at 10,000 plus weekly holiday pay and the meal allowance
        assert s1.wages.base_pay == 400000
        assert s1.wages.weekly_holiday_pay == 80000
        assert s1.wages.meal_allowance == 100000
        assert s1.deductions.other_deductions == {"union_dues": 5000}
        assert s1.rule_set_version == "test.2025"
        assert s1.work_days == 5

        # Monthly basis derives 10,000/h; weekly holiday pay opted out
        assert s2.wages.base_pay == 400000
        assert s2.wages.weekly_holiday_pay == 0

    async def test_matches_previous_run(self, seeded_db):
        settings = Settings(engine_version="test")
        first = await create_sql_orchestrator(seeded_db, settings).calculate("S1", 2025, 3)
        second = await create_sql_orchestrator(seeded_db, settings).calculate("S1", 2025, 3)

        assert first.calculation_id == second.calculation_id
        assert first.net_pay == second.net_pay


class TestModels:
    """Row helpers."""

    async def test_to_dict_and_created_at(self, seeded_db):
        async with seeded_db() as session:
            result = await session.execute(
                select(Contract).where(Contract.staff_id == "S1", Contract.status == "ACTIVE")
            )
            row = result.scalar_one()

        data = row.to_dict()

        assert data["salary_type"] == "HOURLY"
        assert data["meal_allowance"] == 100000
        assert data["created_at"] is not None
        assert repr(row) == f"<Contract contract_id={row.contract_id!r}>"
