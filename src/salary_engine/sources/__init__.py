"""Collaborators supplying attendance, contracts, rule sets and staff lists."""

from salary_engine.sources.base import (
    AttendanceSource,
    ContractSource,
    RuleSetSource,
    StaffDirectory,
)
from salary_engine.sources.memory import (
    InMemoryAttendanceSource,
    InMemoryContractSource,
    InMemoryRuleSetSource,
    InMemoryStaffDirectory,
)

__all__ = [
    "AttendanceSource",
    "ContractSource",
    "RuleSetSource",
    "StaffDirectory",
    "InMemoryAttendanceSource",
    "InMemoryContractSource",
    "InMemoryRuleSetSource",
    "InMemoryStaffDirectory",
]
