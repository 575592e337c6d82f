"""Salary engine command line interface.

Provides operational tools for:
- Calculating one staff member's monthly salary
- Batch runs for a company or a list of staff
- Inspecting labor-law rule sets

Usage:
    python -m salary_engine calculate --staff-id S1 --year 2025 --month 3
    python -m salary_engine batch --company-id C1 --year 2025 --month 3
    python -m salary_engine batch --staff-ids S1,S2 --year 2025 --month 3
    python -m salary_engine rules --as-of 2025-03-31
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Awaitable
from datetime import date
from typing import Any, Callable

import pydantic

from salary_engine.calculators.engine import PayrollOrchestrator
from salary_engine.config import Settings, get_settings
from salary_engine.database import dispose_db
from salary_engine.errors import PayrollError
from salary_engine.rules.registry import RuleSetRegistry
from salary_engine.schemas import BatchCalculateRequest, CalculateRequest

logger = logging.getLogger(__name__)

OrchestratorFactory = Callable[[Settings], PayrollOrchestrator]


def parse_date(s: str) -> date:
    """Parse ISO date string."""
    return date.fromisoformat(s)


def _sql_orchestrator(settings: Settings) -> PayrollOrchestrator:
    from salary_engine.sources.sql import create_sql_orchestrator

    return create_sql_orchestrator(settings=settings)


class SalaryCli:
    """Salary engine command line interface."""

    def __init__(
        self,
        orchestrator_factory: OrchestratorFactory | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.orchestrator_factory = orchestrator_factory or _sql_orchestrator
        self.settings = settings
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m salary_engine",
            description="Monthly salary calculation tools",
        )
        parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        calculate = subparsers.add_parser("calculate", help="Calculate one staff member's salary")
        calculate.add_argument("--staff-id", required=True, help="Staff identifier")
        self._add_period_arguments(calculate)

        batch = subparsers.add_parser("batch", help="Calculate salaries for many staff")
        target = batch.add_mutually_exclusive_group(required=True)
        target.add_argument("--company-id", help="Calculate every active staff member")
        target.add_argument("--staff-ids", help="Comma-separated staff identifiers")
        self._add_period_arguments(batch)

        rules = subparsers.add_parser("rules", help="List labor-law rule sets")
        rules.add_argument(
            "--as-of",
            type=parse_date,
            help="Show the rule set effective on this date (YYYY-MM-DD)",
        )
        rules.add_argument(
            "--rules-file",
            help="JSON file of rule-set payloads (default: LABOR_LAW_RULES_PATH or built-ins)",
        )

        return parser

    @staticmethod
    def _add_period_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--year", type=int, required=True, help="Pay year (YYYY)")
        parser.add_argument("--month", type=int, required=True, help="Pay month (1-12)")
        parser.add_argument(
            "--require-attendance",
            action="store_true",
            default=None,
            help="Fail staff members with no attendance instead of paying zero",
        )

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        logging.basicConfig(
            level=logging.DEBUG if parsed.verbose else logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

        handlers: dict[str, Callable[..., int]] = {
            "calculate": self._cmd_calculate,
            "batch": self._cmd_batch,
            "rules": self._cmd_rules,
        }

        handler = handlers.get(parsed.command)
        if handler:
            return handler(parsed)

        print(f"Unknown command: {parsed.command}", file=sys.stderr)
        return 1

    def _get_settings(self) -> Settings:
        return self.settings or get_settings()

    def _run_async(self, coro: Awaitable[Any]) -> Any:
        async def runner() -> Any:
            try:
                return await coro
            finally:
                await dispose_db()

        return asyncio.run(runner())

    def _cmd_calculate(self, args: argparse.Namespace) -> int:
        """Calculate and print one salary record."""
        try:
            request = CalculateRequest(staff_id=args.staff_id, year=args.year, month=args.month)
        except pydantic.ValidationError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

        orchestrator = self.orchestrator_factory(self._get_settings())
        try:
            record = self._run_async(
                orchestrator.calculate(
                    request.staff_id,
                    request.year,
                    request.month,
                    require_attendance=args.require_attendance,
                )
            )
        except PayrollError as e:
            print(f"ERROR [{e.category}]: {e}", file=sys.stderr)
            return 1

        print(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))
        for warning in record.warnings:
            print(f"WARNING: {warning}", file=sys.stderr)
        return 0

    def _cmd_batch(self, args: argparse.Namespace) -> int:
        """Run a batch and print its summary."""
        staff_ids = None
        if args.staff_ids is not None:
            staff_ids = [s.strip() for s in args.staff_ids.split(",")]

        try:
            request = BatchCalculateRequest(
                year=args.year,
                month=args.month,
                company_id=args.company_id,
                staff_ids=staff_ids,
            )
        except pydantic.ValidationError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

        orchestrator = self.orchestrator_factory(self._get_settings())
        if request.company_id is not None:
            coro = orchestrator.calculate_company(
                request.company_id,
                request.year,
                request.month,
                require_attendance=args.require_attendance,
            )
        else:
            coro = orchestrator.calculate_batch(
                request.staff_ids,
                request.year,
                request.month,
                require_attendance=args.require_attendance,
            )

        try:
            result = self._run_async(coro)
        except PayrollError as e:
            print(f"ERROR [{e.category}]: {e}", file=sys.stderr)
            return 1

        print(result.to_summary().model_dump_json(indent=2))
        return 0 if result.failed_count == 0 else 2

    def _cmd_rules(self, args: argparse.Namespace) -> int:
        """List rule sets, or show the one effective on a date."""
        try:
            if args.rules_file:
                registry = RuleSetRegistry.from_json_file(args.rules_file)
            else:
                registry = RuleSetRegistry.from_settings(self._get_settings())

            if args.as_of is not None:
                rule_set = registry.resolve(args.as_of)
                print(json.dumps(rule_set.to_payload(), indent=2, ensure_ascii=False))
                return 0
        except PayrollError as e:
            print(f"ERROR [{e.category}]: {e}", file=sys.stderr)
            return 1

        for version in registry.versions:
            rule_set = registry.get_version(version)
            print(
                f"{rule_set.version}\teffective {rule_set.effective_date}"
                f"\tminimum wage {rule_set.minimum_wage_hourly}"
            )
        return 0


def main() -> int:
    """CLI entry point."""
    cli = SalaryCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
