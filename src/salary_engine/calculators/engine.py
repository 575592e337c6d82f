"""Salary calculation engine - main orchestrator."""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any
from uuid import UUID

from salary_engine.calculators.attendance import AttendanceAggregator, month_bounds
from salary_engine.calculators.deductions import StatutoryDeductionCalculator
from salary_engine.calculators.types import (
    AttendanceRecord,
    BatchResult,
    SalaryRecord,
    StaffContract,
    StaffFailure,
    WorkHoursSummary,
)
from salary_engine.calculators.wages import WageComponentCalculator
from salary_engine.config import Settings, get_settings
from salary_engine.errors import (
    AttendanceNotFoundError,
    AttendanceSourceError,
    CalculationError,
    ConfigurationError,
    InvalidPeriodError,
    InvalidStaffError,
    PayrollError,
)
from salary_engine.rules.rule_set import LaborLawRuleSet
from salary_engine.services.state_machine import SalaryStatus

if TYPE_CHECKING:
    from salary_engine.sources.base import (
        AttendanceSource,
        ContractSource,
        RuleSetSource,
        StaffDirectory,
    )

logger = logging.getLogger(__name__)


class PayrollOrchestrator:
    """Monthly salary calculation for one staff member or a batch.

    Calculation pipeline (stable order per staff member):
    1) Select the rule set effective on the last day of the month
    2) Load the active contract and the month's attendance
    3) Aggregate attendance into worked hours
    4) Compute wage components and gross pay
    5) Compute statutory deductions
    6) Assemble a DRAFT SalaryRecord with net = gross - deductions

    Identical inputs (attendance, contract, rule set, engine version) always
    produce the same record, including its calculation_id.
    """

    def __init__(
        self,
        attendance_source: AttendanceSource,
        rule_set_source: RuleSetSource,
        contract_source: ContractSource,
        staff_directory: StaffDirectory | None = None,
        settings: Settings | None = None,
    ):
        self.attendance_source = attendance_source
        self.rule_set_source = rule_set_source
        self.contract_source = contract_source
        self.staff_directory = staff_directory
        self.settings = settings or get_settings()

    async def calculate(
        self,
        staff_id: str,
        year: int,
        month: int,
        require_attendance: bool | None = None,
    ) -> SalaryRecord:
        """Calculate one staff member's salary for a month.

        Raises:
            ValidationError: Invalid request or attendance
            DataUnavailableError: No contract, or no attendance when required
            ConfigurationError: No rule set effective for the month
            CalculationError: Collaborator or arithmetic fault
        """
        self._validate_staff_id(staff_id)
        rule_set = await self._load_rule_set(year, month)
        return await self._calculate_staff(staff_id, year, month, rule_set, require_attendance)

    async def calculate_batch(
        self,
        staff_ids: Iterable[str],
        year: int,
        month: int,
        *,
        result: BatchResult | None = None,
        cancel_event: asyncio.Event | None = None,
        require_attendance: bool | None = None,
    ) -> BatchResult:
        """Calculate salaries for many staff members concurrently.

        One staff member's failure never affects another: ValidationError,
        DataUnavailableError and CalculationError are collected as
        StaffFailure entries. A ConfigurationError aborts the whole batch.

        The result is filled in as staff members finish. Pass ``result`` to
        keep completed entries even if the awaiting task is cancelled;
        setting ``cancel_event`` stops new work, abandons in-flight staff
        members (reported as skipped) and returns the partial result.
        """
        staff_ids = list(dict.fromkeys(staff_ids))
        if result is None:
            result = BatchResult(year=year, month=month)

        rule_set = await self._load_rule_set(year, month)
        result.rule_set_version = rule_set.version
        logger.info(
            "Calculating salaries for %d staff for %04d-%02d with rule set %s",
            len(staff_ids),
            year,
            month,
            rule_set.version,
        )

        semaphore = asyncio.Semaphore(self.settings.batch_concurrency)

        async def run_one(staff_id: str) -> None:
            async with semaphore:
                if cancel_event is not None and cancel_event.is_set():
                    return
                await self._run_batch_entry(
                    staff_id, year, month, rule_set, require_attendance, result
                )

        tasks = [asyncio.create_task(run_one(staff_id)) for staff_id in staff_ids]
        watcher = asyncio.create_task(cancel_event.wait()) if cancel_event is not None else None

        try:
            pending = set(tasks)
            while pending:
                waiting = pending | {watcher} if watcher is not None else pending
                done, _ = await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    if task is watcher:
                        continue
                    pending.discard(task)
                    task.result()
                if watcher is not None and watcher.done():
                    result.cancelled = True
                    break
        except asyncio.CancelledError:
            result.cancelled = True
            await self._abandon(tasks)
            self._mark_skipped(result, staff_ids)
            raise
        except ConfigurationError:
            await self._abandon(tasks)
            logger.error("Batch for %04d-%02d aborted by configuration error", year, month)
            raise
        finally:
            if watcher is not None:
                watcher.cancel()

        if result.cancelled:
            await self._abandon(tasks)
            self._mark_skipped(result, staff_ids)
            logger.warning(
                "Batch for %04d-%02d cancelled: %d succeeded, %d failed, %d skipped",
                year,
                month,
                result.succeeded_count,
                result.failed_count,
                len(result.skipped),
            )

        result.order_by(staff_ids)
        logger.info(
            "Batch for %04d-%02d finished: %d succeeded, %d failed",
            year,
            month,
            result.succeeded_count,
            result.failed_count,
        )
        return result

    async def calculate_company(
        self,
        company_id: str,
        year: int,
        month: int,
        *,
        result: BatchResult | None = None,
        cancel_event: asyncio.Event | None = None,
        require_attendance: bool | None = None,
    ) -> BatchResult:
        """Calculate salaries for every active staff member of a company."""
        if self.staff_directory is None:
            raise ConfigurationError("No staff directory configured for company batches")
        if not isinstance(company_id, str) or not company_id.strip():
            raise InvalidStaffError("company_id", company_id)

        staff_ids = await self.staff_directory.list_active_staff(company_id)
        logger.info("Company %s has %d active staff", company_id, len(staff_ids))
        return await self.calculate_batch(
            staff_ids,
            year,
            month,
            result=result,
            cancel_event=cancel_event,
            require_attendance=require_attendance,
        )

    # === Per-staff pipeline ===

    async def _run_batch_entry(
        self,
        staff_id: str,
        year: int,
        month: int,
        rule_set: LaborLawRuleSet,
        require_attendance: bool | None,
        result: BatchResult,
    ) -> None:
        try:
            self._validate_staff_id(staff_id)
            record = await self._calculate_staff(
                staff_id, year, month, rule_set, require_attendance
            )
        except ConfigurationError:
            raise
        except PayrollError as e:
            logger.error("Salary calculation failed for staff %s: %s", staff_id, e)
            result.failed.append(StaffFailure(staff_id=staff_id, error=e))
            return
        except Exception as e:
            logger.exception("Unexpected error calculating salary for staff %s", staff_id)
            error = CalculationError(f"Unexpected error: {e}", staff_id=staff_id)
            result.failed.append(StaffFailure(staff_id=staff_id, error=error))
            return

        result.succeeded.append(record)

    async def _calculate_staff(
        self,
        staff_id: str,
        year: int,
        month: int,
        rule_set: LaborLawRuleSet,
        require_attendance: bool | None,
    ) -> SalaryRecord:
        contract = await self.contract_source.get_contract(staff_id)
        records = await self._fetch_attendance(staff_id, year, month)

        wage_calculator = WageComponentCalculator(rule_set)
        daily_hours = wage_calculator.daily_hours(contract.standard_daily_hours)

        aggregator = AttendanceAggregator(
            rule_set,
            tz=self.settings.timezone,
            week_start=self.settings.week_start,
            standard_daily_hours=daily_hours,
        )
        summary = aggregator.aggregate(records, year, month)

        if require_attendance is None:
            require_attendance = self.settings.require_attendance
        if require_attendance and not summary.days and not summary.incomplete_dates:
            raise AttendanceNotFoundError(staff_id, year, month)

        hourly_rate = wage_calculator.hourly_rate_for(contract.basis, contract.amount, daily_hours)
        wages = wage_calculator.calculate(
            summary, hourly_rate, contract.allowances, contract.premiums, daily_hours
        )

        deductions = StatutoryDeductionCalculator(rule_set).calculate(
            wages.total_gross_pay, contract.deductions, contract.other_deductions
        )

        return SalaryRecord(
            staff_id=staff_id,
            year=year,
            month=month,
            wages=wages,
            deductions=deductions,
            work_days=summary.work_days,
            total_hours=summary.total_hours,
            rule_set_version=rule_set.version,
            calculation_id=self._generate_calculation_id(
                staff_id, year, month, records, contract, rule_set
            ),
            status=SalaryStatus.DRAFT,
            warnings=self._collect_warnings(summary, wages.total_gross_pay, deductions.total_deductions),
        )

    async def _fetch_attendance(
        self, staff_id: str, year: int, month: int
    ) -> list[AttendanceRecord]:
        try:
            records = await self.attendance_source.fetch_attendance(staff_id, year, month)
        except PayrollError:
            raise
        except Exception as e:
            raise AttendanceSourceError(staff_id, e) from e
        return list(records)

    async def _load_rule_set(self, year: int, month: int) -> LaborLawRuleSet:
        self._validate_period(year, month)
        _, period_end = month_bounds(year, month)
        return await self.rule_set_source.get_rule_set(period_end)

    # === Validation ===

    @staticmethod
    def _validate_period(year: Any, month: Any) -> None:
        if not isinstance(year, int) or isinstance(year, bool) or not 1000 <= year <= 9999:
            raise InvalidPeriodError(f"Year must be a 4-digit integer, got {year!r}", year, month)
        if not isinstance(month, int) or isinstance(month, bool) or not 1 <= month <= 12:
            raise InvalidPeriodError(f"Month must be between 1 and 12, got {month!r}", year, month)

    @staticmethod
    def _validate_staff_id(staff_id: Any) -> None:
        if not isinstance(staff_id, str) or not staff_id.strip():
            raise InvalidStaffError("staff_id", staff_id)

    @staticmethod
    def _collect_warnings(
        summary: WorkHoursSummary, gross_pay: int, total_deductions: int
    ) -> tuple[str, ...]:
        warnings = []
        if summary.incomplete_dates:
            dates = ", ".join(d.isoformat() for d in summary.incomplete_dates)
            warnings.append(f"Incomplete attendance counted as zero hours: {dates}")
        if total_deductions > 0 and total_deductions >= gross_pay:
            warnings.append(
                f"Total deductions {total_deductions} meet or exceed gross pay {gross_pay}"
            )
        return tuple(warnings)

    # === Batch helpers ===

    @staticmethod
    async def _abandon(tasks: Sequence[asyncio.Task]) -> None:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    @staticmethod
    def _mark_skipped(result: BatchResult, staff_ids: list[str]) -> None:
        finished = {r.staff_id for r in result.succeeded} | {f.staff_id for f in result.failed}
        finished.update(result.skipped)
        result.skipped.extend(s for s in staff_ids if s not in finished)

    # === Fingerprints ===

    def _generate_calculation_id(
        self,
        staff_id: str,
        year: int,
        month: int,
        records: Sequence[AttendanceRecord],
        contract: StaffContract,
        rule_set: LaborLawRuleSet,
    ) -> str:
        """Generate deterministic calculation ID."""
        data = {
            "staff_id": staff_id,
            "year": year,
            "month": month,
            "engine_version": self.settings.engine_version,
            "inputs_fingerprint": self._compute_inputs_fingerprint(records, contract),
            "rules_fingerprint": rule_set.fingerprint,
        }
        json_str = json.dumps(data, sort_keys=True)
        hash_bytes = hashlib.sha256(json_str.encode()).digest()
        return str(UUID(bytes=hash_bytes[:16]))

    @staticmethod
    def _compute_inputs_fingerprint(
        records: Sequence[AttendanceRecord], contract: StaffContract
    ) -> str:
        """Compute fingerprint of attendance and contract inputs."""
        attendance = sorted(
            (r.to_canonical_dict() for r in records),
            key=lambda r: (r["work_date"], r["actual_check_in"] or ""),
        )
        data = {"attendance": attendance, "contract": contract.to_canonical_dict()}
        json_str = json.dumps(data, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]
