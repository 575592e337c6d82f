"""Type definitions for the salary calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from salary_engine.calculators.money import display_hours, minutes_to_hours
from salary_engine.errors import ValidationError
from salary_engine.schemas import BatchSummary, FailureDetail, SalaryRecordSchema
from salary_engine.services.state_machine import SalaryStatus

# Attendance statuses that never contribute to pay
EXCLUDED_ATTENDANCE_STATUSES = frozenset({"ABSENT", "UNSCHEDULED"})


# ===== Inputs =====


@dataclass(frozen=True)
class AttendanceRecord:
    """One staff member's attendance for one work date (read-only input)."""

    work_date: date
    actual_check_in: datetime | None = None
    actual_check_out: datetime | None = None
    scheduled_check_in: datetime | None = None
    scheduled_check_out: datetime | None = None
    break_minutes: int | None = None  # None = derive from statutory break tiers
    status: str = "NORMAL"

    @property
    def is_complete(self) -> bool:
        return self.actual_check_in is not None and self.actual_check_out is not None

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "work_date": self.work_date.isoformat(),
            "actual_check_in": self.actual_check_in.isoformat() if self.actual_check_in else None,
            "actual_check_out": self.actual_check_out.isoformat() if self.actual_check_out else None,
            "break_minutes": self.break_minutes,
            "status": self.status,
        }


class SalaryBasis(str, Enum):
    """How a contract states its base wage."""

    HOURLY = "HOURLY"
    DAILY = "DAILY"
    MONTHLY = "MONTHLY"


@dataclass(frozen=True)
class Allowances:
    """Pass-through allowances supplied by the caller (not computed here)."""

    meal: int = 0
    transport: int = 0
    position: int = 0
    other: dict[str, int] = field(default_factory=dict)

    def validate(self) -> None:
        for name, amount in (
            ("meal", self.meal),
            ("transport", self.transport),
            ("position", self.position),
            *self.other.items(),
        ):
            if not isinstance(amount, int) or amount < 0:
                raise ValidationError(f"Allowance '{name}' must be a non-negative integer, got {amount!r}")


@dataclass(frozen=True)
class PremiumOptions:
    """Which premium components a contract pays."""

    overtime: bool = True
    night: bool = True
    holiday: bool = True
    weekly_holiday: bool = True


@dataclass(frozen=True)
class DeductionOptions:
    """Which statutory deductions a contract withholds."""

    national_pension: bool = True
    health_insurance: bool = True  # also governs long-term care
    employment_insurance: bool = True
    income_tax: bool = True  # also governs local income tax
    dependents: int = 1  # for the income-tax dependent deduction


@dataclass(frozen=True)
class StaffContract:
    """Active employment contract terms used for pay."""

    staff_id: str
    basis: SalaryBasis
    amount: Decimal
    company_id: str | None = None
    allowances: Allowances = field(default_factory=Allowances)
    premiums: PremiumOptions = field(default_factory=PremiumOptions)
    deductions: DeductionOptions = field(default_factory=DeductionOptions)
    other_deductions: dict[str, int] = field(default_factory=dict)
    standard_daily_hours: Decimal | None = None  # None = rule set standard

    def to_canonical_dict(self) -> dict[str, Any]:
        return {
            "staff_id": self.staff_id,
            "basis": self.basis.value,
            "amount": str(self.amount),
            "standard_daily_hours": (
                str(self.standard_daily_hours) if self.standard_daily_hours is not None else None
            ),
            "allowances": {
                "meal": self.allowances.meal,
                "transport": self.allowances.transport,
                "position": self.allowances.position,
                "other": dict(sorted(self.allowances.other.items())),
            },
            "premiums": vars(self.premiums),
            "deductions": vars(self.deductions),
            "other_deductions": dict(sorted(self.other_deductions.items())),
        }


# ===== Hours =====


@dataclass(frozen=True)
class DailyHours:
    """Decomposition of one working day, in minutes."""

    work_date: date
    elapsed_minutes: int
    break_minutes: int
    worked_minutes: int
    regular_minutes: int
    overtime_minutes: int
    night_minutes: int
    holiday_minutes: int

    @property
    def is_holiday(self) -> bool:
        return self.holiday_minutes > 0


@dataclass(frozen=True)
class WeeklyHours:
    """Worked time for one week bucket."""

    week_start: date
    minutes: int
    qualifies: bool  # eligible for weekly holiday pay

    @property
    def hours(self) -> Decimal:
        return minutes_to_hours(self.minutes)


@dataclass(frozen=True)
class WorkHoursSummary:
    """Hours worked by one staff member over one pay period."""

    work_days: int = 0
    total_minutes: int = 0
    regular_minutes: int = 0
    overtime_minutes: int = 0
    night_minutes: int = 0
    holiday_minutes: int = 0
    weeks: tuple[WeeklyHours, ...] = ()
    days: tuple[DailyHours, ...] = ()
    incomplete_dates: tuple[date, ...] = ()

    @property
    def regular_hours(self) -> Decimal:
        return minutes_to_hours(self.regular_minutes)

    @property
    def overtime_hours(self) -> Decimal:
        return minutes_to_hours(self.overtime_minutes)

    @property
    def night_hours(self) -> Decimal:
        return minutes_to_hours(self.night_minutes)

    @property
    def holiday_hours(self) -> Decimal:
        return minutes_to_hours(self.holiday_minutes)

    @property
    def total_hours(self) -> Decimal:
        """Total worked hours, rounded to two decimals for reporting."""
        return display_hours(self.total_minutes)

    @property
    def qualifying_weeks(self) -> list[WeeklyHours]:
        return [w for w in self.weeks if w.qualifies]


# ===== Components =====


@dataclass(frozen=True)
class WageComponents:
    """Gross pay components in whole won."""

    base_pay: int = 0
    overtime_pay: int = 0
    night_pay: int = 0
    holiday_pay: int = 0
    weekly_holiday_pay: int = 0
    meal_allowance: int = 0
    transport_allowance: int = 0
    position_allowance: int = 0
    other_allowances: dict[str, int] = field(default_factory=dict)

    @property
    def total_gross_pay(self) -> int:
        return (
            self.base_pay
            + self.overtime_pay
            + self.night_pay
            + self.holiday_pay
            + self.weekly_holiday_pay
            + self.meal_allowance
            + self.transport_allowance
            + self.position_allowance
            + sum(self.other_allowances.values())
        )


@dataclass(frozen=True)
class DeductionComponents:
    """Statutory and other deductions in whole won."""

    national_pension: int = 0
    health_insurance: int = 0
    long_term_care: int = 0
    employment_insurance: int = 0
    income_tax: int = 0
    local_income_tax: int = 0
    other_deductions: dict[str, int] = field(default_factory=dict)

    @property
    def statutory_total(self) -> int:
        return (
            self.national_pension
            + self.health_insurance
            + self.long_term_care
            + self.employment_insurance
            + self.income_tax
            + self.local_income_tax
        )

    @property
    def total_deductions(self) -> int:
        return self.statutory_total + sum(self.other_deductions.values())


# ===== Results =====


@dataclass(frozen=True)
class SalaryRecord:
    """Monthly salary for one staff member; persisted by the caller.

    Identity is (staff_id, year, month). Totals and net pay are always
    derived from the embedded components.
    """

    staff_id: str
    year: int
    month: int
    wages: WageComponents
    deductions: DeductionComponents
    work_days: int
    total_hours: Decimal
    rule_set_version: str
    calculation_id: str
    status: SalaryStatus = SalaryStatus.DRAFT
    warnings: tuple[str, ...] = ()

    @property
    def total_gross_pay(self) -> int:
        return self.wages.total_gross_pay

    @property
    def total_deductions(self) -> int:
        return self.deductions.total_deductions

    @property
    def net_pay(self) -> int:
        return self.total_gross_pay - self.total_deductions

    def to_dict(self) -> dict[str, Any]:
        """Flat JSON-serializable representation for the salary ledger."""
        w = self.wages
        d = self.deductions
        return {
            "staff_id": self.staff_id,
            "year": self.year,
            "month": self.month,
            "base_salary": w.base_pay,
            "overtime_pay": w.overtime_pay,
            "night_pay": w.night_pay,
            "holiday_pay": w.holiday_pay,
            "weekly_holiday_pay": w.weekly_holiday_pay,
            "meal_allowance": w.meal_allowance,
            "transport_allowance": w.transport_allowance,
            "position_allowance": w.position_allowance,
            "other_allowances": dict(sorted(w.other_allowances.items())),
            "total_gross_pay": self.total_gross_pay,
            "national_pension": d.national_pension,
            "health_insurance": d.health_insurance,
            "long_term_care": d.long_term_care,
            "employment_insurance": d.employment_insurance,
            "income_tax": d.income_tax,
            "local_income_tax": d.local_income_tax,
            "other_deductions": dict(sorted(d.other_deductions.items())),
            "total_deductions": self.total_deductions,
            "net_pay": self.net_pay,
            "work_days": self.work_days,
            "total_hours": str(self.total_hours),
            "status": self.status.value,
            "rule_set_version": self.rule_set_version,
            "calculation_id": self.calculation_id,
        }

    def to_schema(self) -> SalaryRecordSchema:
        return SalaryRecordSchema.model_validate(self.to_dict())


@dataclass(frozen=True)
class StaffFailure:
    """A staff member whose calculation failed within a batch."""

    staff_id: str
    error: Exception

    @property
    def reason(self) -> str:
        return str(self.error)

    @property
    def error_type(self) -> str:
        return getattr(self.error, "category", "calculation")


@dataclass
class BatchResult:
    """Cumulative outcome of a batch run.

    Entries are appended as each staff member finishes, so a cancelled run
    still holds every completed result.
    """

    year: int
    month: int
    succeeded: list[SalaryRecord] = field(default_factory=list)
    failed: list[StaffFailure] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    cancelled: bool = False
    rule_set_version: str | None = None

    @property
    def succeeded_count(self) -> int:
        return len(self.succeeded)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def total_gross_pay(self) -> int:
        return sum(r.total_gross_pay for r in self.succeeded)

    @property
    def total_net_pay(self) -> int:
        return sum(r.net_pay for r in self.succeeded)

    def order_by(self, staff_ids: list[str]) -> None:
        """Sort entries to follow the requested staff order."""
        position = {staff_id: i for i, staff_id in enumerate(staff_ids)}
        self.succeeded.sort(key=lambda r: position.get(r.staff_id, len(position)))
        self.failed.sort(key=lambda f: position.get(f.staff_id, len(position)))
        self.skipped.sort(key=lambda s: position.get(s, len(position)))

    def to_summary(self) -> BatchSummary:
        """Summary for administrators: counts plus who needs attention."""
        return BatchSummary(
            year=self.year,
            month=self.month,
            succeeded_count=self.succeeded_count,
            failed_count=self.failed_count,
            skipped_count=len(self.skipped),
            cancelled=self.cancelled,
            rule_set_version=self.rule_set_version,
            failures=[
                FailureDetail(staff_id=f.staff_id, reason=f.reason, error_type=f.error_type)
                for f in self.failed
            ],
        )
