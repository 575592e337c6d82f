"""Error taxonomy for salary calculation.

Propagation:
- ValidationError: bad input for one staff member; isolated per staff in batches.
- DataUnavailableError: missing data (contract, attendance when required).
- ConfigurationError: no usable rule set; aborts an entire batch.
- CalculationError: unexpected faults; isolated per staff in batches.
"""

from __future__ import annotations

from datetime import date


class PayrollError(Exception):
    """Base class for all salary engine errors."""

    category = "payroll"


# ===== Validation =====


class ValidationError(PayrollError):
    """Raised when caller-supplied input is invalid."""

    category = "validation"


class InvalidPeriodError(ValidationError):
    """Raised when a pay period (year/month) is invalid."""

    def __init__(self, message: str, year: int | None = None, month: int | None = None):
        self.year = year
        self.month = month
        super().__init__(message)


class InvalidStaffError(ValidationError):
    """Raised when a staff or company identifier is blank or not a string."""

    def __init__(self, field: str, value: object):
        self.field = field
        self.value = value
        super().__init__(f"{field} must be a non-empty string, got {value!r}")


class MinimumWageError(ValidationError):
    """Raised when an hourly rate is below the statutory minimum wage."""

    def __init__(self, hourly_rate, minimum_wage, rule_set_version: str):
        self.hourly_rate = hourly_rate
        self.minimum_wage = minimum_wage
        self.rule_set_version = rule_set_version
        super().__init__(
            f"Hourly rate {hourly_rate} is below the minimum wage {minimum_wage} "
            f"(rule set {rule_set_version})"
        )


class InvalidAttendanceError(ValidationError):
    """Raised when an attendance record is internally inconsistent."""

    def __init__(self, work_date: date, reason: str):
        self.work_date = work_date
        self.reason = reason
        super().__init__(f"Invalid attendance on {work_date}: {reason}")


class AttendanceOutOfPeriodError(ValidationError):
    """Raised when an attendance record falls outside the pay period."""

    def __init__(self, work_date: date, year: int, month: int, reason: str):
        self.work_date = work_date
        self.year = year
        self.month = month
        super().__init__(
            f"Attendance on {work_date} is outside {year:04d}-{month:02d}: {reason}"
        )


class DuplicateRecordError(ValidationError):
    """Raised when attendance records share a date or overlap in time."""

    def __init__(self, work_date: date, other_date: date | None = None):
        self.work_date = work_date
        self.other_date = other_date
        if other_date is None or other_date == work_date:
            msg = f"Duplicate attendance records for {work_date}"
        else:
            msg = f"Attendance on {work_date} overlaps attendance on {other_date}"
        super().__init__(msg)


# ===== Missing data =====


class DataUnavailableError(PayrollError):
    """Raised when data required for a calculation does not exist."""

    category = "data_unavailable"


class ContractNotFoundError(DataUnavailableError):
    """Raised when a staff member has no active contract."""

    def __init__(self, staff_id: str):
        self.staff_id = staff_id
        super().__init__(f"No active contract found for staff {staff_id}")


class AttendanceNotFoundError(DataUnavailableError):
    """Raised when attendance is required but none exists for the period."""

    def __init__(self, staff_id: str, year: int, month: int):
        self.staff_id = staff_id
        self.year = year
        self.month = month
        super().__init__(
            f"No attendance records for staff {staff_id} in {year:04d}-{month:02d}"
        )


# ===== Configuration =====


class ConfigurationError(PayrollError):
    """Raised when the system itself is unusable for a calculation."""

    category = "configuration"


class RuleSetNotFoundError(ConfigurationError):
    """Raised when no labor-law rule set is active on a date."""

    def __init__(self, as_of_date: date):
        self.as_of_date = as_of_date
        super().__init__(f"No labor-law rule set effective on {as_of_date}")


class InvalidRuleSetError(ConfigurationError):
    """Raised when a rule-set payload cannot be parsed."""

    def __init__(self, version: str | None, reason: str):
        self.version = version
        self.reason = reason
        super().__init__(f"Invalid labor-law rule set {version or '<unknown>'}: {reason}")


# ===== Unexpected faults =====


class CalculationError(PayrollError):
    """Raised for unexpected arithmetic or logic faults."""

    category = "calculation"

    def __init__(self, message: str, staff_id: str | None = None):
        self.staff_id = staff_id
        super().__init__(message)


class AttendanceSourceError(CalculationError):
    """Raised when the attendance collaborator fails."""

    def __init__(self, staff_id: str, cause: Exception):
        self.cause = cause
        super().__init__(
            f"Failed to fetch attendance for staff {staff_id}: {cause}",
            staff_id=staff_id,
        )
