"""Collaborator protocols consumed by the payroll orchestrator.

The orchestrator never reads storage directly. Attendance, contracts, the
labor-law rule sets and the staff directory are injected through these
protocols, so the calculation core can run against SQL tables, fixtures or a
remote service alike.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Protocol, runtime_checkable

from salary_engine.calculators.types import AttendanceRecord, StaffContract
from salary_engine.rules.rule_set import LaborLawRuleSet


@runtime_checkable
class AttendanceSource(Protocol):
    """Supplies attendance records for one staff member and month."""

    async def fetch_attendance(
        self, staff_id: str, year: int, month: int
    ) -> Sequence[AttendanceRecord]:
        """Return the month's records (empty when none exist)."""
        ...


@runtime_checkable
class RuleSetSource(Protocol):
    """Supplies the labor-law rule set active on a date."""

    async def get_rule_set(self, as_of_date: date) -> LaborLawRuleSet:
        """Return the rule set effective on as_of_date.

        Raises:
            RuleSetNotFoundError: If no rule set is effective yet
        """
        ...


@runtime_checkable
class ContractSource(Protocol):
    """Supplies the active contract for a staff member."""

    async def get_contract(self, staff_id: str) -> StaffContract:
        """Return the active contract.

        Raises:
            ContractNotFoundError: If the staff member has no active contract
        """
        ...


@runtime_checkable
class StaffDirectory(Protocol):
    """Lists the staff members a company pays."""

    async def list_active_staff(self, company_id: str) -> list[str]:
        """Return ids of active staff, in payroll order."""
        ...
