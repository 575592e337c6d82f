"""Versioned labor-law rule sets stored as JSON payloads."""

from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import JSON, CheckConstraint, Date, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from salary_engine.models.base import Base, TimestampMixin
from salary_engine.rules.rule_set import LaborLawRuleSet


class LaborLawVersion(Base, TimestampMixin):
    """One effective-dated rule-set version.

    payload_json holds the LaborLawRuleSet payload; version and
    effective_date columns take precedence over the payload's own keys.
    """

    __tablename__ = "labor_law_versions"

    labor_law_version_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    version: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    effective_date: Mapped[date] = mapped_column(Date, nullable=False, unique=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="ACTIVE")
    source: Mapped[str | None] = mapped_column(Text)
    payload_json: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "status IN ('DRAFT', 'ACTIVE', 'ARCHIVED')",
            name="labor_law_versions_status_check",
        ),
    )

    def to_rule_set(self) -> LaborLawRuleSet:
        payload = dict(self.payload_json)
        payload["version"] = self.version
        payload["effective_date"] = self.effective_date.isoformat()
        if self.source is not None:
            payload["source"] = self.source
        return LaborLawRuleSet.from_payload(payload)
