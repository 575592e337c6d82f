"""Pytest fixtures for salary engine tests."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal

import pytest

from salary_engine.calculators.types import AttendanceRecord, SalaryBasis, StaffContract
from salary_engine.config import Settings
from salary_engine.rules.defaults import RULE_SET_2025
from salary_engine.rules.rule_set import LaborLawRuleSet

# 2025-03-03 is a Monday; 2025-03-01 (Sat) and 2025-03-02 (Sun) are holidays.
MONDAY = date(2025, 3, 3)

TEST_RULE_SET_PAYLOAD = {
    **RULE_SET_2025,
    "version": "test.2025",
    # Low enough for the round 10,000 won hourly rate used throughout
    "minimum_wage_hourly": 9860,
}


def shift(
    work_date: date,
    start: str = "09:00",
    end: str = "18:00",
    break_minutes: int | None = None,
    status: str = "NORMAL",
) -> AttendanceRecord:
    """Build a completed attendance record; an end before start runs past midnight."""
    check_in = datetime.combine(work_date, time.fromisoformat(start))
    check_out = datetime.combine(work_date, time.fromisoformat(end))
    if check_out <= check_in:
        check_out += timedelta(days=1)
    return AttendanceRecord(
        work_date=work_date,
        actual_check_in=check_in,
        actual_check_out=check_out,
        break_minutes=break_minutes,
        status=status,
    )


def weekdays(start: date, count: int) -> list[date]:
    """The first `count` Monday-Friday dates from start."""
    days: list[date] = []
    current = start
    while len(days) < count:
        if current.weekday() < 5:
            days.append(current)
        current += timedelta(days=1)
    return days


def hourly_contract(staff_id: str, rate: int = 10000, **kwargs) -> StaffContract:
    return StaffContract(
        staff_id=staff_id,
        basis=SalaryBasis.HOURLY,
        amount=Decimal(rate),
        **kwargs,
    )


@pytest.fixture
def rule_set() -> LaborLawRuleSet:
    """2025 statutory rates with a 9,860 won minimum wage."""
    return LaborLawRuleSet.from_payload(TEST_RULE_SET_PAYLOAD)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        engine_version="test",
        batch_concurrency=2,
    )
