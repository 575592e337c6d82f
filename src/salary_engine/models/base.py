"""Declarative base shared by the attendance, contract and labor-law tables."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, MetaData, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Constraint names stay stable across SQLite and PostgreSQL
NAMING_CONVENTION = {
    "ix": "%(table_name)s_%(column_0_N_name)s_idx",
    "uq": "%(table_name)s_%(column_0_N_name)s_key",
    "pk": "%(table_name)s_pkey",
}


class Base(DeclarativeBase):
    """Base class for the engine's read-side tables."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    # Check-in/check-out instants keep their offset where the backend allows it
    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }

    def to_dict(self) -> dict[str, Any]:
        """Column values keyed by column name, for logging and fixtures."""
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}

    def __repr__(self) -> str:
        keys = ", ".join(f"{c.name}={getattr(self, c.name)!r}" for c in self.__table__.primary_key)
        return f"<{type(self).__name__} {keys}>"


class TimestampMixin:
    """Row creation time, filled by the database."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
