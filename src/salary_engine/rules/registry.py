"""Rule-set selection by effective date."""

from __future__ import annotations

import json
import logging
from bisect import bisect_right
from collections.abc import Iterable
from datetime import date
from pathlib import Path
from typing import Any

from salary_engine.config import Settings
from salary_engine.errors import InvalidRuleSetError, RuleSetNotFoundError
from salary_engine.rules.defaults import DEFAULT_RULE_SETS
from salary_engine.rules.rule_set import LaborLawRuleSet

logger = logging.getLogger(__name__)


class RuleSetRegistry:
    """Holds rule-set versions and resolves the one active on a date.

    The active rule set for a date is the one with the latest effective date
    on or before it. Versions and effective dates must both be unique.
    """

    def __init__(self, rule_sets: Iterable[LaborLawRuleSet] = ()):
        self._rule_sets: list[LaborLawRuleSet] = []
        for rule_set in rule_sets:
            self.add(rule_set)

    def add(self, rule_set: LaborLawRuleSet) -> None:
        """Register a rule-set version."""
        for existing in self._rule_sets:
            if existing.version == rule_set.version:
                raise InvalidRuleSetError(rule_set.version, "duplicate version")
            if existing.effective_date == rule_set.effective_date:
                raise InvalidRuleSetError(
                    rule_set.version,
                    f"effective date {rule_set.effective_date} already used by {existing.version}",
                )
        self._rule_sets.append(rule_set)
        self._rule_sets.sort(key=lambda r: r.effective_date)

    def resolve(self, as_of_date: date) -> LaborLawRuleSet:
        """Get the rule set effective on a date.

        Raises:
            RuleSetNotFoundError: If no rule set is effective yet
        """
        dates = [r.effective_date for r in self._rule_sets]
        index = bisect_right(dates, as_of_date)
        if index == 0:
            raise RuleSetNotFoundError(as_of_date)
        return self._rule_sets[index - 1]

    def get_version(self, version: str) -> LaborLawRuleSet | None:
        return next((r for r in self._rule_sets if r.version == version), None)

    @property
    def versions(self) -> list[str]:
        return [r.version for r in self._rule_sets]

    def __len__(self) -> int:
        return len(self._rule_sets)

    @classmethod
    def from_payloads(cls, payloads: Iterable[dict[str, Any]]) -> RuleSetRegistry:
        return cls(LaborLawRuleSet.from_payload(p) for p in payloads)

    @classmethod
    def from_json_file(cls, path: str | Path) -> RuleSetRegistry:
        """Load rule sets from a JSON file holding a list of payloads."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise InvalidRuleSetError(None, f"cannot read {path}: {e}") from e

        if isinstance(data, dict):
            data = data.get("rule_sets", [data])
        registry = cls.from_payloads(data)
        logger.info("Loaded %d labor-law rule sets from %s", len(registry), path)
        return registry

    @classmethod
    def default(cls) -> RuleSetRegistry:
        """Registry with the built-in rule sets."""
        return cls.from_payloads(DEFAULT_RULE_SETS)

    @classmethod
    def from_settings(cls, settings: Settings) -> RuleSetRegistry:
        """Rule sets from settings.rules_path, or the built-ins when unset."""
        if settings.rules_path:
            return cls.from_json_file(settings.rules_path)
        return cls.default()
