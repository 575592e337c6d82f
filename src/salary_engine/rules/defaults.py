"""Built-in labor-law rule-set payloads.

These are the seed values for the labor_law_versions table and the fallback
registry when no rules file is configured. Amounts are in KRW; rates are
employee shares.
"""

from __future__ import annotations

from typing import Any

# Simplified monthly withholding rates by gross pay; upper bounds are inclusive.
SIMPLIFIED_WITHHOLDING_BRACKETS: list[dict[str, Any]] = [
    {"min": 0, "max": 1060000, "rate": "0"},
    {"min": 1060000, "max": 1500000, "rate": "0.06"},
    {"min": 1500000, "max": 3000000, "rate": "0.15"},
    {"min": 3000000, "max": 4500000, "rate": "0.24"},
    {"min": 4500000, "max": 8800000, "rate": "0.35"},
    {"min": 8800000, "max": None, "rate": "0.38"},
]

_FIXED_HOLIDAYS = ("01-01", "03-01", "05-05", "06-06", "08-15", "10-03", "10-09", "12-25")

RULE_SET_2025: dict[str, Any] = {
    "version": "2025.01",
    "effective_date": "2025-01-01",
    "source": "Minimum Wage Commission notice 2025; NHIS/NPS 2025 rates",
    "minimum_wage_hourly": 10030,
    "standard_daily_hours": 8,
    "standard_weekly_hours": 40,
    "monthly_standard_hours": 209,
    "overtime_multiplier": "1.5",
    "night_multiplier": "0.5",
    "holiday_multiplier": "1.5",
    "night_start_hour": 22,
    "night_end_hour": 6,
    "night_cap_hours": 2,
    "night_hours_policy": "checkout_capped",
    "weekly_holiday_min_hours": 15,
    "break_tiers": [
        {"min_elapsed_minutes": 480, "break_minutes": 60},
        {"min_elapsed_minutes": 240, "break_minutes": 30},
    ],
    "holiday_weekdays": [6],
    "public_holidays": [f"2025-{d}" for d in _FIXED_HOLIDAYS]
    + ["2025-01-28", "2025-01-29", "2025-01-30", "2025-05-06", "2025-10-06", "2025-10-07", "2025-10-08"],
    "national_pension_rate": "0.045",
    "national_pension_floor": 350000,
    "national_pension_ceiling": 5530000,
    "health_insurance_rate": "0.03545",
    "long_term_care_rate": "0.1281",
    "employment_insurance_rate": "0.009",
    "income_tax_brackets": SIMPLIFIED_WITHHOLDING_BRACKETS,
    "income_tax_dependent_deduction": 150000,
    "local_income_tax_rate": "0.1",
}

RULE_SET_2026: dict[str, Any] = {
    **RULE_SET_2025,
    "version": "2026.01",
    "effective_date": "2026-01-01",
    "source": "Minimum Wage Commission notice 2026; NHIS/NPS 2026 rates",
    "minimum_wage_hourly": 10320,
    "public_holidays": [f"2026-{d}" for d in _FIXED_HOLIDAYS]
    + ["2026-02-16", "2026-02-17", "2026-02-18", "2026-03-02", "2026-05-25", "2026-08-17",
       "2026-09-24", "2026-09-25", "2026-09-26", "2026-10-05"],
    "national_pension_rate": "0.0475",
    "national_pension_floor": 400000,
    "national_pension_ceiling": 6370000,
    "health_insurance_rate": "0.03595",
    "long_term_care_rate": "0.1314",
}

DEFAULT_RULE_SETS: tuple[dict[str, Any], ...] = (RULE_SET_2025, RULE_SET_2026)
