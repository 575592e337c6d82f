"""Salary engine services."""

from salary_engine.services.state_machine import (
    InvalidTransitionError,
    SalaryStateMachine,
    SalaryStatus,
)

__all__ = [
    "SalaryStateMachine",
    "SalaryStatus",
    "InvalidTransitionError",
]
