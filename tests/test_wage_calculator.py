"""Unit tests for WageComponentCalculator."""

from datetime import date
from decimal import Decimal

import pytest

from salary_engine.calculators.attendance import AttendanceAggregator
from salary_engine.calculators.types import (
    Allowances,
    PremiumOptions,
    SalaryBasis,
    WeeklyHours,
    WorkHoursSummary,
)
from salary_engine.calculators.wages import WageComponentCalculator
from salary_engine.errors import MinimumWageError, ValidationError
from tests.conftest import MONDAY, shift

RATE = Decimal("10000")


@pytest.fixture
def calc(rule_set) -> WageComponentCalculator:
    return WageComponentCalculator(rule_set)


@pytest.fixture
def month_summary() -> WorkHoursSummary:
    """160h regular, 10h overtime (4h night), 8h holiday; one full and one short week."""
    return WorkHoursSummary(
        work_days=21,
        total_minutes=9600 + 600 + 480,
        regular_minutes=9600,
        overtime_minutes=600,
        night_minutes=240,
        holiday_minutes=480,
        weeks=(
            WeeklyHours(week_start=MONDAY, minutes=2400, qualifies=True),
            WeeklyHours(week_start=date(2025, 3, 10), minutes=840, qualifies=False),
        ),
    )


class TestPremiumFormulas:
    """Each formula in isolation."""

    def test_base_pay(self, calc):
        assert calc.base_pay(450, RATE) == 75000

    def test_overtime_pay(self, calc):
        """10h overtime at 10,000 won is 150,000 won."""
        assert calc.overtime_pay(600, RATE) == 150000

    def test_zero_overtime(self, calc):
        assert calc.overtime_pay(0, RATE) == 0

    def test_overtime_custom_multiplier(self, calc):
        assert calc.overtime_pay(600, RATE, multiplier=Decimal("2")) == 200000

    def test_night_pay_is_premium_only(self, calc):
        """4 night hours add 0.5x on top of pay already counted: 20,000 won."""
        assert calc.night_pay(240, RATE) == 20000

    def test_holiday_pay(self, calc):
        """8 holiday hours at 1.5x: 120,000 won."""
        assert calc.holiday_pay(480, RATE) == 120000

    def test_rounds_half_up_to_won(self, calc):
        """3 minutes (0.05h) at 10,010 won is 500.5, rounded to 501."""
        assert calc.base_pay(3, Decimal("10010")) == 501

    def test_rounds_down_below_half(self, calc):
        # 1 minute at 10,030 won = 167.166...
        assert calc.base_pay(1, Decimal("10030")) == 167

    @pytest.mark.parametrize(
        "minutes,rate,expected",
        [
            (11, "9860", 2712),  # 11 / 60 * 9,860 * 1.5 = 2,711.5
            (20, "10001", 5001),  # 20 / 60 * 10,001 * 1.5 = 5,000.5
            (7, "10030", 1755),  # 7 / 60 * 10,030 * 1.5 = 1,755.25
        ],
    )
    def test_overtime_exact_half_won(self, calc, minutes, rate, expected):
        assert calc.overtime_pay(minutes, Decimal(rate)) == expected

    def test_night_exact_half_won(self, calc):
        # 1 / 60 * 9,900 * 0.5 = 82.5
        assert calc.night_pay(1, Decimal("9900")) == 83


class TestWeeklyHolidayPay:
    """Weekly paid rest-day allowance."""

    @pytest.mark.parametrize(
        "minutes,expected",
        [
            (840, 0),  # 14h
            (899, 0),  # 14h59m
            (900, 30000),  # 15h
            (1200, 40000),  # 20h
            (2400, 80000),  # 40h
            (3000, 80000),  # 50h, capped at one day
        ],
    )
    def test_weekly_holiday_pay(self, calc, minutes, expected):
        assert calc.weekly_holiday_pay(minutes, RATE) == expected

    def test_contract_standard_day(self, calc):
        """A 4h contract day pays at most 4h per qualifying week."""
        assert calc.weekly_holiday_pay(2400, RATE, Decimal("4")) == 40000
        assert calc.weekly_holiday_pay(1200, RATE, Decimal("4")) == 20000

    def test_partial_week_rounds_half_up(self, calc):
        # 17h30m: 1050 / 2400 * 8h * 10,001 won = 35,003.5
        assert calc.weekly_holiday_pay(1050, Decimal("10001")) == 35004


class TestCalculate:
    """Full component calculation."""

    def test_all_components(self, calc, month_summary):
        wages = calc.calculate(
            month_summary,
            RATE,
            allowances=Allowances(meal=100000, transport=50000, other={"childcare": 30000}),
        )

        assert wages.base_pay == 1600000
        assert wages.overtime_pay == 150000
        assert wages.night_pay == 20000
        assert wages.holiday_pay == 120000
        assert wages.weekly_holiday_pay == 80000
        assert wages.meal_allowance == 100000
        assert wages.transport_allowance == 50000
        assert wages.position_allowance == 0
        assert wages.other_allowances == {"childcare": 30000}
        assert wages.total_gross_pay == 2150000

    def test_premium_opt_outs(self, calc, month_summary):
        wages = calc.calculate(
            month_summary,
            RATE,
            premiums=PremiumOptions(overtime=False, night=False, holiday=False, weekly_holiday=False),
        )

        assert wages.base_pay == 1600000
        assert wages.overtime_pay == 0
        assert wages.night_pay == 0
        assert wages.holiday_pay == 0
        assert wages.weekly_holiday_pay == 0
        assert wages.total_gross_pay == 1600000

    def test_empty_summary_is_zero(self, calc):
        wages = calc.calculate(WorkHoursSummary(), RATE)

        assert wages.total_gross_pay == 0

    def test_rejects_rate_below_minimum_wage(self, calc, month_summary):
        with pytest.raises(MinimumWageError) as exc_info:
            calc.calculate(month_summary, Decimal("9859"))

        assert exc_info.value.minimum_wage == Decimal("9860")
        assert exc_info.value.rule_set_version == "test.2025"

    def test_minimum_wage_itself_accepted(self, calc, month_summary):
        wages = calc.calculate(month_summary, Decimal("9860"))

        assert wages.base_pay == 160 * 9860

    def test_minimum_wage_is_a_validation_error(self, calc):
        with pytest.raises(ValidationError):
            calc.calculate(WorkHoursSummary(), 5000)

    def test_negative_allowance_rejected(self, calc):
        with pytest.raises(ValidationError):
            calc.calculate(WorkHoursSummary(), RATE, allowances=Allowances(meal=-1))


class TestHourlyRateDerivation:
    """Hourly rate from the contract's salary basis."""

    def test_hourly(self, calc):
        assert calc.hourly_rate_for(SalaryBasis.HOURLY, Decimal("10030")) == 10030

    def test_daily(self, calc):
        assert calc.hourly_rate_for(SalaryBasis.DAILY, Decimal("80000")) == 10000

    def test_monthly(self, calc):
        """Monthly wages divide by the 209h monthly standard."""
        assert calc.hourly_rate_for(SalaryBasis.MONTHLY, Decimal("2090000")) == 10000

    def test_monthly_rounds_half_up(self, calc):
        # 2,100,000 / 209 = 10,047.85
        assert calc.hourly_rate_for("MONTHLY", Decimal("2100000")) == 10048

    def test_negative_amount_rejected(self, calc):
        with pytest.raises(ValidationError):
            calc.hourly_rate_for(SalaryBasis.HOURLY, Decimal("-1"))


class TestAttendanceToPay:
    """Aggregated minutes flow into the formulas unrounded."""

    def test_odd_minute_overtime_from_attendance(self, calc, rule_set):
        """09:00-18:11 leaves 11 overtime minutes; 2,711.5 won rounds up."""
        summary = AttendanceAggregator(rule_set).aggregate([shift(MONDAY, "09:00", "18:11")], 2025, 3)

        wages = calc.calculate(summary, Decimal("9860"))

        assert summary.overtime_minutes == 11
        assert wages.base_pay == 78880
        assert wages.overtime_pay == 2712


class TestContractStandardDay:
    """Contract standard working day."""

    def test_daily_rate_uses_contract_day(self, calc):
        assert calc.hourly_rate_for(SalaryBasis.DAILY, Decimal("60000"), Decimal("6")) == 10000

    def test_defaults_to_rule_set(self, calc):
        assert calc.daily_hours() == Decimal("8")

    @pytest.mark.parametrize("hours", ["0.5", "12.5"])
    def test_out_of_range_rejected(self, calc, hours):
        with pytest.raises(ValidationError):
            calc.daily_hours(Decimal(hours))
