"""SQLAlchemy ORM models for the tables the salary engine reads."""

from salary_engine.models.attendance import Attendance
from salary_engine.models.base import Base, TimestampMixin
from salary_engine.models.contract import Contract
from salary_engine.models.labor_law import LaborLawVersion

__all__ = [
    "Attendance",
    "Base",
    "Contract",
    "LaborLawVersion",
    "TimestampMixin",
]
