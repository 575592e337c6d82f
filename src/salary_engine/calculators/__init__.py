"""Salary calculation engine."""

from salary_engine.calculators.attendance import AttendanceAggregator
from salary_engine.calculators.deductions import StatutoryDeductionCalculator
from salary_engine.calculators.engine import PayrollOrchestrator
from salary_engine.calculators.wages import WageComponentCalculator

__all__ = [
    "AttendanceAggregator",
    "PayrollOrchestrator",
    "StatutoryDeductionCalculator",
    "WageComponentCalculator",
]
