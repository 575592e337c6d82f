"""Versioned, effective-dated labor-law rule sets."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from salary_engine.errors import InvalidRuleSetError


class NightHoursPolicy(str, Enum):
    """How night-premium hours are detected for a working day."""

    # Night hours only when check-out falls in the night window,
    # capped at min(overtime, night_cap_hours).
    CHECKOUT_CAPPED = "checkout_capped"
    # Actual overlap of the worked interval with the night window,
    # capped by the day's overtime.
    INTERVAL_OVERLAP = "interval_overlap"


@dataclass(frozen=True)
class IncomeTaxBracket:
    """Simplified withholding bracket selected by gross pay.

    tax = rate * max(0, gross - dependents * dependent deduction)
    """

    min_amount: Decimal
    max_amount: Decimal | None  # inclusive; None = no upper limit
    rate: Decimal

    def contains(self, amount: Decimal) -> bool:
        if amount < self.min_amount:
            return False
        return self.max_amount is None or amount <= self.max_amount


@dataclass(frozen=True)
class BreakTier:
    """Break deducted once raw elapsed time reaches a threshold."""

    min_elapsed_minutes: int
    break_minutes: int


@dataclass(frozen=True)
class LaborLawRuleSet:
    """Immutable bundle of statutory rates and thresholds.

    Rates are fractions (0.045 for 4.5%). A rule set is selected once per
    calculation and passed explicitly into every calculator.
    """

    version: str
    effective_date: date
    minimum_wage_hourly: Decimal

    # Working time
    standard_daily_hours: Decimal = Decimal("8")
    standard_weekly_hours: Decimal = Decimal("40")
    monthly_standard_hours: Decimal = Decimal("209")
    break_tiers: tuple[BreakTier, ...] = (
        BreakTier(min_elapsed_minutes=480, break_minutes=60),
        BreakTier(min_elapsed_minutes=240, break_minutes=30),
    )

    # Premiums
    overtime_multiplier: Decimal = Decimal("1.5")
    night_multiplier: Decimal = Decimal("0.5")
    holiday_multiplier: Decimal = Decimal("1.5")
    night_start_hour: int = 22
    night_end_hour: int = 6
    night_cap_hours: Decimal = Decimal("2")
    night_hours_policy: NightHoursPolicy = NightHoursPolicy.CHECKOUT_CAPPED
    weekly_holiday_min_hours: Decimal = Decimal("15")

    # Holidays
    holiday_weekdays: frozenset[int] = frozenset({6})  # date.weekday(): 6 = Sunday
    public_holidays: frozenset[date] = frozenset()

    # Social insurance
    national_pension_rate: Decimal = Decimal("0.045")
    national_pension_floor: Decimal = Decimal("350000")
    national_pension_ceiling: Decimal = Decimal("5530000")
    health_insurance_rate: Decimal = Decimal("0.03545")
    long_term_care_rate: Decimal = Decimal("0.1281")
    employment_insurance_rate: Decimal = Decimal("0.009")

    # Income tax
    income_tax_brackets: tuple[IncomeTaxBracket, ...] = field(default_factory=tuple)
    income_tax_dependent_deduction: Decimal = Decimal("150000")
    local_income_tax_rate: Decimal = Decimal("0.1")

    source: str | None = None

    def break_minutes_for(self, elapsed_minutes: int) -> int:
        """Statutory break for a day's raw elapsed time."""
        for tier in sorted(self.break_tiers, key=lambda t: t.min_elapsed_minutes, reverse=True):
            if elapsed_minutes >= tier.min_elapsed_minutes:
                return tier.break_minutes
        return 0

    def is_holiday(self, work_date: date) -> bool:
        """Check if a date is a weekly or public holiday."""
        return work_date.weekday() in self.holiday_weekdays or work_date in self.public_holidays

    def is_night_hour(self, hour: int) -> bool:
        """Check if an hour of day falls in the night window."""
        if self.night_start_hour <= self.night_end_hour:
            return self.night_start_hour <= hour < self.night_end_hour
        return hour >= self.night_start_hour or hour < self.night_end_hour

    def income_tax_bracket_for(self, amount: Decimal) -> IncomeTaxBracket | None:
        """First bracket containing the amount; adjacent bounds belong to the lower one."""
        for bracket in self.income_tax_brackets:
            if bracket.contains(amount):
                return bracket
        return None

    # === Serialization ===

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> LaborLawRuleSet:
        """Build a rule set from a JSON-compatible payload.

        Payload keys mirror field names; dates are ISO strings, numbers may be
        given as strings or numbers. Omitted keys fall back to field defaults.
        """
        version = payload.get("version")
        if not version:
            raise InvalidRuleSetError(None, "missing 'version'")

        try:
            kwargs: dict[str, Any] = {
                "version": str(version),
                "effective_date": _parse_date(payload["effective_date"]),
                "minimum_wage_hourly": _dec(payload["minimum_wage_hourly"]),
            }

            for name in _DECIMAL_FIELDS:
                if name in payload:
                    kwargs[name] = _dec(payload[name])
            for name in ("night_start_hour", "night_end_hour"):
                if name in payload:
                    kwargs[name] = int(payload[name])

            if "night_hours_policy" in payload:
                kwargs["night_hours_policy"] = NightHoursPolicy(payload["night_hours_policy"])
            if "break_tiers" in payload:
                kwargs["break_tiers"] = tuple(
                    BreakTier(
                        min_elapsed_minutes=int(t["min_elapsed_minutes"]),
                        break_minutes=int(t["break_minutes"]),
                    )
                    for t in payload["break_tiers"]
                )
            if "holiday_weekdays" in payload:
                kwargs["holiday_weekdays"] = frozenset(int(d) for d in payload["holiday_weekdays"])
            if "public_holidays" in payload:
                kwargs["public_holidays"] = frozenset(
                    _parse_date(d) for d in payload["public_holidays"]
                )

            brackets = []
            for b in payload.get("income_tax_brackets", []):
                brackets.append(
                    IncomeTaxBracket(
                        min_amount=_dec(b["min"]),
                        max_amount=_dec(b["max"]) if b.get("max") is not None else None,
                        rate=_dec(b["rate"]),
                    )
                )
            kwargs["income_tax_brackets"] = tuple(sorted(brackets, key=lambda b: b.min_amount))
            kwargs["source"] = payload.get("source")
        except KeyError as e:
            raise InvalidRuleSetError(str(version), f"missing {e}") from e
        except (InvalidOperation, TypeError, ValueError) as e:
            raise InvalidRuleSetError(str(version), str(e)) from e

        rule_set = cls(**kwargs)
        rule_set.validate()
        return rule_set

    def validate(self) -> None:
        """Check internal consistency, raising InvalidRuleSetError."""
        if self.minimum_wage_hourly <= 0:
            raise InvalidRuleSetError(self.version, "minimum wage must be positive")
        if self.national_pension_floor > self.national_pension_ceiling:
            raise InvalidRuleSetError(self.version, "pension floor exceeds ceiling")
        if self.standard_weekly_hours <= 0 or self.standard_daily_hours <= 0:
            raise InvalidRuleSetError(self.version, "standard hours must be positive")
        for name in _DECIMAL_FIELDS:
            if getattr(self, name) < 0:
                raise InvalidRuleSetError(self.version, f"{name} must not be negative")
        if not (0 <= self.night_start_hour < 24 and 0 <= self.night_end_hour < 24):
            raise InvalidRuleSetError(self.version, "night window hours must be 0-23")

    def to_payload(self) -> dict[str, Any]:
        """Return canonical JSON-compatible payload (deterministic ordering)."""
        payload: dict[str, Any] = {
            "version": self.version,
            "effective_date": self.effective_date.isoformat(),
            "minimum_wage_hourly": str(self.minimum_wage_hourly),
            "night_start_hour": self.night_start_hour,
            "night_end_hour": self.night_end_hour,
            "night_hours_policy": self.night_hours_policy.value,
            "break_tiers": [
                {"min_elapsed_minutes": t.min_elapsed_minutes, "break_minutes": t.break_minutes}
                for t in self.break_tiers
            ],
            "holiday_weekdays": sorted(self.holiday_weekdays),
            "public_holidays": sorted(d.isoformat() for d in self.public_holidays),
            "income_tax_brackets": [
                {
                    "min": str(b.min_amount),
                    "max": str(b.max_amount) if b.max_amount is not None else None,
                    "rate": str(b.rate),
                }
                for b in self.income_tax_brackets
            ],
            "source": self.source,
        }
        for name in _DECIMAL_FIELDS:
            payload[name] = str(getattr(self, name))
        return payload

    @property
    def fingerprint(self) -> str:
        """Hash of the canonical payload, stable across processes."""
        json_str = json.dumps(self.to_payload(), sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]


_DECIMAL_FIELDS = (
    "standard_daily_hours",
    "standard_weekly_hours",
    "monthly_standard_hours",
    "overtime_multiplier",
    "night_multiplier",
    "holiday_multiplier",
    "night_cap_hours",
    "weekly_holiday_min_hours",
    "national_pension_rate",
    "national_pension_floor",
    "national_pension_ceiling",
    "health_insurance_rate",
    "long_term_care_rate",
    "employment_insurance_rate",
    "income_tax_dependent_deduction",
    "local_income_tax_rate",
)


def _dec(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise TypeError(f"expected a number, got {value!r}")
    return Decimal(str(value))


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))
