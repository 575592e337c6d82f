"""Statutory salary calculation engine."""

from salary_engine.calculators import (
    AttendanceAggregator,
    PayrollOrchestrator,
    StatutoryDeductionCalculator,
    WageComponentCalculator,
)
from salary_engine.calculators.types import (
    Allowances,
    AttendanceRecord,
    BatchResult,
    DeductionComponents,
    DeductionOptions,
    PremiumOptions,
    SalaryBasis,
    SalaryRecord,
    StaffContract,
    StaffFailure,
    WageComponents,
    WorkHoursSummary,
)
from salary_engine.config import Settings, get_settings
from salary_engine.rules import LaborLawRuleSet, RuleSetRegistry

__all__ = [
    "Allowances",
    "AttendanceAggregator",
    "AttendanceRecord",
    "BatchResult",
    "DeductionComponents",
    "DeductionOptions",
    "LaborLawRuleSet",
    "PayrollOrchestrator",
    "PremiumOptions",
    "RuleSetRegistry",
    "SalaryBasis",
    "SalaryRecord",
    "Settings",
    "StaffContract",
    "StaffFailure",
    "StatutoryDeductionCalculator",
    "WageComponentCalculator",
    "WageComponents",
    "WorkHoursSummary",
    "get_settings",
]
