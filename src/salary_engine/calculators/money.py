"""Rounding and unit helpers shared by the calculators.

Rounding contract: every monetary formula is rounded half-up to a whole won
at the end of that formula, never at the end of the pipeline.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

WON = Decimal("1")
HOURS_PRECISION = Decimal("0.01")
MINUTES_PER_HOUR = Decimal("60")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert a number to Decimal without binary float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_won(amount: Decimal | int | float | str) -> int:
    """Round an amount half-up to a whole currency unit."""
    return int(to_decimal(amount).quantize(WON, rounding=ROUND_HALF_UP))


def minutes_to_hours(minutes: int) -> Decimal:
    """Hours for a minute count (reporting views; formulas use pay_for_minutes)."""
    return Decimal(minutes) / MINUTES_PER_HOUR


def pay_for_minutes(
    minutes: int,
    hourly_rate: Decimal | int | str,
    multiplier: Decimal | int | str = 1,
) -> int:
    """Pay for a minute count at an hourly rate, rounded half-up to a whole won.

    The division by 60 comes last: minutes * rate * multiplier is exact, so a
    true half won is never truncated to just below .5 before rounding.
    """
    amount = Decimal(minutes) * to_decimal(hourly_rate) * to_decimal(multiplier)
    return round_won(amount / MINUTES_PER_HOUR)


def display_hours(minutes: int) -> Decimal:
    """Hours rounded to two decimals for reporting."""
    return minutes_to_hours(minutes).quantize(HOURS_PRECISION, rounding=ROUND_HALF_UP)


def hours_to_minutes(hours: Decimal | int | float | str) -> int:
    """Convert hours to whole minutes (half-up)."""
    minutes = (to_decimal(hours) * MINUTES_PER_HOUR).quantize(WON, rounding=ROUND_HALF_UP)
    return int(minutes)
