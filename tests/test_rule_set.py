"""Tests for labor-law rule sets and their selection."""

import dataclasses
import json
from datetime import date
from decimal import Decimal

import pytest

from salary_engine.config import Settings
from salary_engine.errors import ConfigurationError, InvalidRuleSetError, RuleSetNotFoundError
from salary_engine.rules.defaults import RULE_SET_2025, RULE_SET_2026
from salary_engine.rules.registry import RuleSetRegistry
from salary_engine.rules.rule_set import LaborLawRuleSet, NightHoursPolicy
from salary_engine.sources import InMemoryRuleSetSource
from tests.conftest import TEST_RULE_SET_PAYLOAD


class TestRuleSetHelpers:
    """Lookups on a single rule set."""

    def test_break_tiers(self, rule_set):
        assert rule_set.break_minutes_for(239) == 0
        assert rule_set.break_minutes_for(240) == 30
        assert rule_set.break_minutes_for(479) == 30
        assert rule_set.break_minutes_for(480) == 60
        assert rule_set.break_minutes_for(720) == 60

    def test_night_window_wraps_midnight(self, rule_set):
        assert rule_set.is_night_hour(22) is True
        assert rule_set.is_night_hour(23) is True
        assert rule_set.is_night_hour(0) is True
        assert rule_set.is_night_hour(5) is True
        assert rule_set.is_night_hour(6) is False
        assert rule_set.is_night_hour(21) is False

    def test_holidays(self, rule_set):
        assert rule_set.is_holiday(date(2025, 3, 9)) is True  # Sunday
        assert rule_set.is_holiday(date(2025, 3, 1)) is True  # Independence Movement Day
        assert rule_set.is_holiday(date(2025, 3, 3)) is False

    def test_bracket_lookup(self, rule_set):
        bracket = rule_set.income_tax_bracket_for(Decimal("2000000"))

        assert bracket.rate == Decimal("0.15")
        assert rule_set.income_tax_dependent_deduction == Decimal("150000")

    @pytest.mark.parametrize(
        "amount,rate",
        [("1060000", "0"), ("1060001", "0.06"), ("1500000", "0.06"), ("8800000", "0.35"), ("8800001", "0.38")],
    )
    def test_bracket_upper_bound_inclusive(self, rule_set, amount, rate):
        assert rule_set.income_tax_bracket_for(Decimal(amount)).rate == Decimal(rate)


class TestFromPayload:
    """Building rule sets from JSON-compatible payloads."""

    def test_defaults_fill_omitted_keys(self):
        rule_set = LaborLawRuleSet.from_payload(
            {"version": "min", "effective_date": "2025-01-01", "minimum_wage_hourly": "10030"}
        )

        assert rule_set.standard_daily_hours == Decimal("8")
        assert rule_set.overtime_multiplier == Decimal("1.5")
        assert rule_set.night_hours_policy == NightHoursPolicy.CHECKOUT_CAPPED
        assert rule_set.income_tax_brackets == ()

    def test_brackets_sorted(self):
        payload = {**TEST_RULE_SET_PAYLOAD, "income_tax_brackets": list(reversed(RULE_SET_2025["income_tax_brackets"]))}
        rule_set = LaborLawRuleSet.from_payload(payload)

        mins = [b.min_amount for b in rule_set.income_tax_brackets]
        assert mins == sorted(mins)

    def test_payload_round_trip(self, rule_set):
        assert LaborLawRuleSet.from_payload(rule_set.to_payload()) == rule_set

    def test_missing_version(self):
        with pytest.raises(InvalidRuleSetError):
            LaborLawRuleSet.from_payload({"effective_date": "2025-01-01", "minimum_wage_hourly": 1})

    def test_missing_minimum_wage(self):
        with pytest.raises(InvalidRuleSetError) as exc_info:
            LaborLawRuleSet.from_payload({"version": "x", "effective_date": "2025-01-01"})

        assert exc_info.value.version == "x"

    def test_unparseable_number(self):
        with pytest.raises(InvalidRuleSetError):
            LaborLawRuleSet.from_payload({**TEST_RULE_SET_PAYLOAD, "health_insurance_rate": "abc"})

    def test_unknown_night_policy(self):
        with pytest.raises(InvalidRuleSetError):
            LaborLawRuleSet.from_payload({**TEST_RULE_SET_PAYLOAD, "night_hours_policy": "sometimes"})

    def test_negative_rate(self):
        with pytest.raises(InvalidRuleSetError):
            LaborLawRuleSet.from_payload({**TEST_RULE_SET_PAYLOAD, "employment_insurance_rate": "-0.009"})

    def test_pension_floor_above_ceiling(self):
        with pytest.raises(InvalidRuleSetError):
            LaborLawRuleSet.from_payload({**TEST_RULE_SET_PAYLOAD, "national_pension_floor": 9000000})

    def test_invalid_rule_set_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            LaborLawRuleSet.from_payload({**TEST_RULE_SET_PAYLOAD, "minimum_wage_hourly": 0})


class TestFingerprint:
    """Rule-set fingerprints feed the calculation id."""

    def test_stable(self, rule_set):
        again = LaborLawRuleSet.from_payload(TEST_RULE_SET_PAYLOAD)

        assert again.fingerprint == rule_set.fingerprint
        assert len(rule_set.fingerprint) == 32

    def test_changes_with_rates(self, rule_set):
        changed = dataclasses.replace(rule_set, health_insurance_rate=Decimal("0.036"))

        assert changed.fingerprint != rule_set.fingerprint


class TestRegistry:
    """Selection of the rule set effective on a date."""

    def test_selects_latest_effective(self):
        registry = RuleSetRegistry.default()

        assert registry.resolve(date(2025, 3, 31)).version == "2025.01"
        assert registry.resolve(date(2025, 12, 31)).version == "2025.01"
        assert registry.resolve(date(2026, 1, 1)).version == "2026.01"
        assert registry.resolve(date(2030, 6, 30)).version == "2026.01"

    def test_no_rule_set_yet(self):
        registry = RuleSetRegistry.default()

        with pytest.raises(RuleSetNotFoundError) as exc_info:
            registry.resolve(date(2024, 12, 31))

        assert exc_info.value.as_of_date == date(2024, 12, 31)

    def test_default_versions(self):
        registry = RuleSetRegistry.default()

        assert registry.versions == ["2025.01", "2026.01"]
        assert len(registry) == 2
        assert registry.get_version("2026.01").minimum_wage_hourly == Decimal("10320")
        assert registry.get_version("1999.01") is None

    def test_duplicate_version_rejected(self, rule_set):
        registry = RuleSetRegistry([rule_set])
        duplicate = dataclasses.replace(rule_set, effective_date=date(2027, 1, 1))

        with pytest.raises(InvalidRuleSetError):
            registry.add(duplicate)

    def test_duplicate_effective_date_rejected(self, rule_set):
        registry = RuleSetRegistry([rule_set])
        duplicate = dataclasses.replace(rule_set, version="other")

        with pytest.raises(InvalidRuleSetError):
            registry.add(duplicate)

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"rule_sets": [RULE_SET_2026, RULE_SET_2025]}), encoding="utf-8")

        registry = RuleSetRegistry.from_json_file(path)

        assert registry.versions == ["2025.01", "2026.01"]

    def test_from_json_file_unreadable(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(InvalidRuleSetError):
            RuleSetRegistry.from_json_file(path)

    def test_from_settings_reads_rules_path(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps([TEST_RULE_SET_PAYLOAD]), encoding="utf-8")

        registry = RuleSetRegistry.from_settings(Settings(rules_path=str(path)))

        assert registry.versions == ["test.2025"]

    def test_from_settings_without_path_uses_builtins(self):
        registry = RuleSetRegistry.from_settings(Settings())

        assert registry.versions == ["2025.01", "2026.01"]

    def test_memory_source_from_settings(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"rule_sets": [RULE_SET_2026]}), encoding="utf-8")

        source = InMemoryRuleSetSource.from_settings(Settings(rules_path=str(path)))

        assert source.registry.resolve(date(2026, 3, 31)).version == "2026.01"
        with pytest.raises(RuleSetNotFoundError):
            source.registry.resolve(date(2025, 3, 31))

    def test_missing_rules_path_is_configuration_error(self, tmp_path):
        settings = Settings(rules_path=str(tmp_path / "absent.json"))

        with pytest.raises(InvalidRuleSetError) as exc_info:
            RuleSetRegistry.from_settings(settings)

        assert exc_info.value.category == "configuration"
