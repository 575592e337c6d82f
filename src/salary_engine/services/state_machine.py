"""Salary record status state machine with transition validation."""

from __future__ import annotations

from enum import Enum


class SalaryStatus(str, Enum):
    """Salary record status values."""

    DRAFT = "DRAFT"
    CONFIRMED = "CONFIRMED"
    PAID = "PAID"


class InvalidTransitionError(Exception):
    """Raised when an invalid status transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class SalaryStateMachine:
    """State machine for salary record status transitions.

    The engine only ever produces DRAFT records. Later transitions are driven
    by administrators through the surrounding application, which uses this
    class to validate them.

    Allowed transitions:
    - DRAFT → CONFIRMED
    - CONFIRMED → PAID
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        SalaryStatus.DRAFT: [SalaryStatus.CONFIRMED],
        SalaryStatus.CONFIRMED: [SalaryStatus.PAID],
        SalaryStatus.PAID: [],  # Terminal state
    }

    # Statuses where a recalculation would silently replace reviewed figures
    RECALCULATION_NEEDS_POLICY = {
        SalaryStatus.CONFIRMED,
        SalaryStatus.PAID,
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(SalaryStatus(from_status), [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(SalaryStatus(current_status), [])

    @classmethod
    def is_recalculation_guarded(cls, status: str) -> bool:
        """Check if overwriting a record in this status is a caller policy decision."""
        return SalaryStatus(status) in cls.RECALCULATION_NEEDS_POLICY
