"""Gross pay components from worked minutes."""

from __future__ import annotations

from decimal import Decimal

from salary_engine.calculators.money import (
    MINUTES_PER_HOUR,
    pay_for_minutes,
    round_won,
    to_decimal,
)
from salary_engine.calculators.types import (
    Allowances,
    PremiumOptions,
    SalaryBasis,
    WageComponents,
    WorkHoursSummary,
)
from salary_engine.errors import MinimumWageError, ValidationError
from salary_engine.rules.rule_set import LaborLawRuleSet

# Bounds for a contract's own standard working day
MIN_DAILY_HOURS = Decimal("1")
MAX_DAILY_HOURS = Decimal("12")


class WageComponentCalculator:
    """Computes wage components with the rates of one rule set.

    Formulas take minute counts and round half-up to a whole won where they
    are computed:
    - base = regular_minutes / 60 * rate
    - overtime = overtime_minutes / 60 * rate * overtime_multiplier
    - night = night_minutes / 60 * rate * night_multiplier (premium portion only)
    - holiday = holiday_minutes / 60 * rate * holiday_multiplier
    - weekly holiday = min(weekly_hours / 40, 1) * daily_hours * rate per
      qualifying week

    daily_hours is the contract's standard working day when it has one,
    otherwise the rule set's.
    """

    def __init__(self, rule_set: LaborLawRuleSet):
        self.rule_set = rule_set

    def calculate(
        self,
        summary: WorkHoursSummary,
        hourly_rate: Decimal | int,
        allowances: Allowances | None = None,
        premiums: PremiumOptions | None = None,
        standard_daily_hours: Decimal | None = None,
    ) -> WageComponents:
        """Compute all wage components for a period.

        Raises:
            MinimumWageError: If hourly_rate is below the rule set's minimum wage
        """
        rate = to_decimal(hourly_rate)
        self.check_minimum_wage(rate)

        allowances = allowances or Allowances()
        allowances.validate()
        premiums = premiums or PremiumOptions()

        weekly_holiday = 0
        if premiums.weekly_holiday:
            weekly_holiday = sum(
                self.weekly_holiday_pay(week.minutes, rate, standard_daily_hours)
                for week in summary.weeks
            )

        return WageComponents(
            base_pay=self.base_pay(summary.regular_minutes, rate),
            overtime_pay=self.overtime_pay(summary.overtime_minutes, rate) if premiums.overtime else 0,
            night_pay=self.night_pay(summary.night_minutes, rate) if premiums.night else 0,
            holiday_pay=self.holiday_pay(summary.holiday_minutes, rate) if premiums.holiday else 0,
            weekly_holiday_pay=weekly_holiday,
            meal_allowance=allowances.meal,
            transport_allowance=allowances.transport,
            position_allowance=allowances.position,
            other_allowances=dict(allowances.other),
        )

    def check_minimum_wage(self, hourly_rate: Decimal) -> None:
        if hourly_rate < self.rule_set.minimum_wage_hourly:
            raise MinimumWageError(
                hourly_rate, self.rule_set.minimum_wage_hourly, self.rule_set.version
            )

    def daily_hours(self, standard_daily_hours: Decimal | int | None = None) -> Decimal:
        """Standard working day: the contract's if given, else the rule set's."""
        if standard_daily_hours is None:
            return self.rule_set.standard_daily_hours
        hours = to_decimal(standard_daily_hours)
        if not MIN_DAILY_HOURS <= hours <= MAX_DAILY_HOURS:
            raise ValidationError(
                f"Standard daily hours must be between {MIN_DAILY_HOURS} and "
                f"{MAX_DAILY_HOURS}, got {hours}"
            )
        return hours

    # === Formulas ===

    def base_pay(self, regular_minutes: int, hourly_rate: Decimal) -> int:
        return pay_for_minutes(regular_minutes, hourly_rate)

    def overtime_pay(
        self,
        overtime_minutes: int,
        hourly_rate: Decimal,
        multiplier: Decimal | None = None,
    ) -> int:
        if multiplier is None:
            multiplier = self.rule_set.overtime_multiplier
        return pay_for_minutes(overtime_minutes, hourly_rate, multiplier)

    def night_pay(self, night_minutes: int, hourly_rate: Decimal) -> int:
        return pay_for_minutes(night_minutes, hourly_rate, self.rule_set.night_multiplier)

    def holiday_pay(self, holiday_minutes: int, hourly_rate: Decimal) -> int:
        return pay_for_minutes(holiday_minutes, hourly_rate, self.rule_set.holiday_multiplier)

    def weekly_holiday_pay(
        self,
        weekly_minutes: int,
        hourly_rate: Decimal,
        standard_daily_hours: Decimal | None = None,
    ) -> int:
        """Paid weekly rest-day allowance for one week.

        Zero below the weekly threshold (15h); otherwise proportional to the
        40h standard week and capped at one standard day.
        """
        if weekly_minutes < self.rule_set.weekly_holiday_min_hours * MINUTES_PER_HOUR:
            return 0

        daily = self.daily_hours(standard_daily_hours)
        week_minutes = self.rule_set.standard_weekly_hours * MINUTES_PER_HOUR
        paid_minutes = min(Decimal(weekly_minutes), week_minutes)
        return round_won(paid_minutes * daily * to_decimal(hourly_rate) / week_minutes)

    # === Rate derivation ===

    def hourly_rate_for(
        self,
        basis: SalaryBasis | str,
        amount: Decimal | int,
        standard_daily_hours: Decimal | None = None,
    ) -> int:
        """Hourly rate implied by a contract's salary basis.

        Daily wages divide by the standard daily hours, monthly wages by the
        monthly standard hours (209); the result is rounded to a whole won.
        """
        basis = SalaryBasis(basis)
        amount = to_decimal(amount)
        if amount < 0:
            raise ValidationError(f"Contract amount must not be negative, got {amount}")

        if basis == SalaryBasis.HOURLY:
            return round_won(amount)
        if basis == SalaryBasis.DAILY:
            return round_won(amount / self.daily_hours(standard_daily_hours))
        return round_won(amount / self.rule_set.monthly_standard_hours)
