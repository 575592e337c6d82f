"""Attendance aggregation into monthly working-hour summaries."""

from __future__ import annotations

import calendar
import logging
from collections import defaultdict
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

from salary_engine.calculators.types import (
    EXCLUDED_ATTENDANCE_STATUSES,
    AttendanceRecord,
    DailyHours,
    WeeklyHours,
    WorkHoursSummary,
)
from salary_engine.errors import (
    AttendanceOutOfPeriodError,
    CalculationError,
    DuplicateRecordError,
    InvalidAttendanceError,
    InvalidPeriodError,
)
from salary_engine.rules.rule_set import LaborLawRuleSet, NightHoursPolicy

logger = logging.getLogger(__name__)

MAX_SHIFT = timedelta(hours=24)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a calendar month."""
    if not 1 <= month <= 12:
        raise InvalidPeriodError(f"Month must be between 1 and 12, got {month}", year, month)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


class AttendanceAggregator:
    """Reduces one staff member's monthly attendance to a WorkHoursSummary.

    Per completed day (check-in and check-out present):
    1) elapsed = check-out - check-in
    2) break = recorded break, else the rule set's break tier for elapsed
    3) worked = elapsed - break
    4) holiday dates: all worked time is holiday time
    5) otherwise regular = min(worked, standard day), overtime = the rest
    6) night time per the rule set's night-hours policy, never above overtime

    Days with a check-in but no check-out count zero hours and are reported
    in ``incomplete_dates``.
    """

    def __init__(
        self,
        rule_set: LaborLawRuleSet,
        tz: str = "Asia/Seoul",
        week_start: int = 0,
        excluded_statuses: Iterable[str] = EXCLUDED_ATTENDANCE_STATUSES,
        standard_daily_hours: Decimal | None = None,
    ):
        self.rule_set = rule_set
        # Contract standard day overrides the rule set's
        if standard_daily_hours is None:
            standard_daily_hours = rule_set.standard_daily_hours
        self.standard_daily_minutes = int(standard_daily_hours * 60)
        self.tz = ZoneInfo(tz)
        self.week_start = week_start % 7
        self.excluded_statuses = frozenset(excluded_statuses)

    def aggregate(
        self, records: Iterable[AttendanceRecord], year: int, month: int
    ) -> WorkHoursSummary:
        """Aggregate attendance for one calendar month.

        Raises:
            DuplicateRecordError: Two records share a date or overlap in time
            InvalidAttendanceError: Check-out before check-in, or shift too long
            AttendanceOutOfPeriodError: Record outside the month
        """
        period_start, period_end = month_bounds(year, month)
        records = [r for r in records if r.status.upper() not in self.excluded_statuses]
        records.sort(key=lambda r: r.work_date)

        seen_dates: set[date] = set()
        for record in records:
            if record.work_date in seen_dates:
                raise DuplicateRecordError(record.work_date)
            seen_dates.add(record.work_date)
            if not period_start <= record.work_date <= period_end:
                raise AttendanceOutOfPeriodError(record.work_date, year, month, "work date")

        days: list[DailyHours] = []
        incomplete: list[date] = []
        intervals: list[tuple[datetime, datetime, date]] = []

        for record in records:
            if not record.is_complete:
                if record.actual_check_in is not None or record.actual_check_out is not None:
                    logger.warning(
                        "Attendance on %s is missing a check-in or check-out; counted as zero hours",
                        record.work_date,
                    )
                    incomplete.append(record.work_date)
                continue

            check_in = self._to_local(record.actual_check_in)
            check_out = self._to_local(record.actual_check_out)
            self._validate_interval(record.work_date, check_in, check_out, period_start, period_end)
            intervals.append((check_in, check_out, record.work_date))
            days.append(self._decompose_day(record, check_in, check_out))

        self._check_overlaps(intervals)
        summary = self._summarize(days, incomplete)
        self._check_invariants(summary)
        return summary

    # === Validation ===

    def _validate_interval(
        self,
        work_date: date,
        check_in: datetime,
        check_out: datetime,
        period_start: date,
        period_end: date,
    ) -> None:
        if check_out < check_in:
            raise InvalidAttendanceError(work_date, "check-out is before check-in")
        if _utc(check_out) - _utc(check_in) > MAX_SHIFT:
            raise InvalidAttendanceError(work_date, "shift is longer than 24 hours")

        if not period_start <= check_in.date() <= period_end:
            raise AttendanceOutOfPeriodError(
                work_date, period_start.year, period_start.month, "check-in"
            )
        out_date = check_out.date()
        overnight_continuation = (
            check_in.date() == period_end and out_date == period_end + timedelta(days=1)
        )
        if not (period_start <= out_date <= period_end or overnight_continuation):
            raise AttendanceOutOfPeriodError(
                work_date, period_start.year, period_start.month, "check-out"
            )

    def _check_overlaps(self, intervals: list[tuple[datetime, datetime, date]]) -> None:
        ordered = sorted(intervals, key=lambda i: _utc(i[0]))
        for prev, current in zip(ordered, ordered[1:]):
            if _utc(current[0]) < _utc(prev[1]):
                raise DuplicateRecordError(current[2], prev[2])

    def _check_invariants(self, summary: WorkHoursSummary) -> None:
        if summary.regular_minutes + summary.overtime_minutes + summary.holiday_minutes != summary.total_minutes:
            raise CalculationError("Hour decomposition does not add up to total worked time")
        if summary.night_minutes > summary.overtime_minutes:
            raise CalculationError("Night time exceeds overtime")

    # === Daily decomposition ===

    def _decompose_day(
        self, record: AttendanceRecord, check_in: datetime, check_out: datetime
    ) -> DailyHours:
        elapsed = int((_utc(check_out) - _utc(check_in)).total_seconds() // 60)

        if record.break_minutes is not None:
            if record.break_minutes < 0:
                raise InvalidAttendanceError(record.work_date, "break minutes must not be negative")
            break_minutes = record.break_minutes
        else:
            break_minutes = self.rule_set.break_minutes_for(elapsed)
        worked = max(0, elapsed - break_minutes)

        if self.rule_set.is_holiday(record.work_date):
            return DailyHours(
                work_date=record.work_date,
                elapsed_minutes=elapsed,
                break_minutes=break_minutes,
                worked_minutes=worked,
                regular_minutes=0,
                overtime_minutes=0,
                night_minutes=0,
                holiday_minutes=worked,
            )

        regular = min(worked, self.standard_daily_minutes)
        overtime = worked - regular

        return DailyHours(
            work_date=record.work_date,
            elapsed_minutes=elapsed,
            break_minutes=break_minutes,
            worked_minutes=worked,
            regular_minutes=regular,
            overtime_minutes=overtime,
            night_minutes=self._night_minutes(check_in, check_out, overtime),
            holiday_minutes=0,
        )

    def _night_minutes(self, check_in: datetime, check_out: datetime, overtime: int) -> int:
        if overtime <= 0:
            return 0

        if self.rule_set.night_hours_policy == NightHoursPolicy.CHECKOUT_CAPPED:
            if not self.rule_set.is_night_hour(check_out.hour):
                return 0
            cap = int(self.rule_set.night_cap_hours * 60)
            return min(overtime, cap)

        return min(overtime, self._night_overlap_minutes(check_in, check_out))

    def _night_overlap_minutes(self, check_in: datetime, check_out: datetime) -> int:
        """Minutes of [check_in, check_out) inside any night window."""
        start_hour = self.rule_set.night_start_hour
        end_hour = self.rule_set.night_end_hour
        wraps = start_hour > end_hour

        total = timedelta()
        day = check_in.date() - timedelta(days=1)
        while day <= check_out.date():
            window_start = datetime.combine(day, time(start_hour), tzinfo=self.tz)
            end_day = day + timedelta(days=1) if wraps else day
            window_end = datetime.combine(end_day, time(end_hour), tzinfo=self.tz)

            overlap_start = max(_utc(check_in), _utc(window_start))
            overlap_end = min(_utc(check_out), _utc(window_end))
            if overlap_end > overlap_start:
                total += overlap_end - overlap_start
            day += timedelta(days=1)

        return int(total.total_seconds() // 60)

    # === Aggregation ===

    def _summarize(self, days: list[DailyHours], incomplete: list[date]) -> WorkHoursSummary:
        weekly: dict[date, int] = defaultdict(int)
        for day in days:
            weekly[self._week_start_of(day.work_date)] += day.worked_minutes

        threshold = int(self.rule_set.weekly_holiday_min_hours * 60)
        weeks = tuple(
            WeeklyHours(week_start=start, minutes=minutes, qualifies=minutes >= threshold)
            for start, minutes in sorted(weekly.items())
        )

        return WorkHoursSummary(
            work_days=sum(1 for d in days if d.worked_minutes > 0),
            total_minutes=sum(d.worked_minutes for d in days),
            regular_minutes=sum(d.regular_minutes for d in days),
            overtime_minutes=sum(d.overtime_minutes for d in days),
            night_minutes=sum(d.night_minutes for d in days),
            holiday_minutes=sum(d.holiday_minutes for d in days),
            weeks=weeks,
            days=tuple(days),
            incomplete_dates=tuple(incomplete),
        )

    def _week_start_of(self, work_date: date) -> date:
        offset = (work_date.weekday() - self.week_start) % 7
        return work_date - timedelta(days=offset)

    def _to_local(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=self.tz)
        return value.astimezone(self.tz)


def _utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc)
