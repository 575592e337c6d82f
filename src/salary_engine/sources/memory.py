"""In-memory collaborators for tests, previews and one-off runs."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from datetime import date

from salary_engine.calculators.types import AttendanceRecord, StaffContract
from salary_engine.config import Settings, get_settings
from salary_engine.errors import ContractNotFoundError
from salary_engine.rules.registry import RuleSetRegistry
from salary_engine.rules.rule_set import LaborLawRuleSet


class InMemoryAttendanceSource:
    """Attendance held in a dict keyed by staff id."""

    def __init__(self, records: dict[str, Iterable[AttendanceRecord]] | None = None):
        self._records: dict[str, list[AttendanceRecord]] = defaultdict(list)
        for staff_id, staff_records in (records or {}).items():
            self._records[staff_id].extend(staff_records)

    def add(self, staff_id: str, *records: AttendanceRecord) -> None:
        self._records[staff_id].extend(records)

    async def fetch_attendance(
        self, staff_id: str, year: int, month: int
    ) -> list[AttendanceRecord]:
        return [
            r
            for r in self._records.get(staff_id, [])
            if r.work_date.year == year and r.work_date.month == month
        ]


class InMemoryRuleSetSource:
    """Rule sets resolved from a RuleSetRegistry."""

    def __init__(self, registry: RuleSetRegistry | Iterable[LaborLawRuleSet] | None = None):
        if registry is None:
            registry = RuleSetRegistry.default()
        elif not isinstance(registry, RuleSetRegistry):
            registry = RuleSetRegistry(registry)
        self.registry = registry

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> InMemoryRuleSetSource:
        """Source over the rule file named by LABOR_LAW_RULES_PATH, or the built-ins."""
        return cls(RuleSetRegistry.from_settings(settings or get_settings()))

    async def get_rule_set(self, as_of_date: date) -> LaborLawRuleSet:
        return self.registry.resolve(as_of_date)


class InMemoryContractSource:
    """Active contracts keyed by staff id."""

    def __init__(self, contracts: Iterable[StaffContract] = ()):
        self._contracts = {c.staff_id: c for c in contracts}

    def add(self, contract: StaffContract) -> None:
        self._contracts[contract.staff_id] = contract

    async def get_contract(self, staff_id: str) -> StaffContract:
        contract = self._contracts.get(staff_id)
        if contract is None:
            raise ContractNotFoundError(staff_id)
        return contract


class InMemoryStaffDirectory:
    """Active staff per company, built from their contracts."""

    def __init__(self, contracts: Iterable[StaffContract] = ()):
        self._staff: dict[str, list[str]] = defaultdict(list)
        for contract in contracts:
            if contract.company_id is not None:
                self._staff[contract.company_id].append(contract.staff_id)

    async def list_active_staff(self, company_id: str) -> list[str]:
        return list(self._staff.get(company_id, []))
