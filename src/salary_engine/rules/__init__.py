"""Labor-law rule sets."""

from salary_engine.rules.registry import RuleSetRegistry
from salary_engine.rules.rule_set import (
    BreakTier,
    IncomeTaxBracket,
    LaborLawRuleSet,
    NightHoursPolicy,
)

__all__ = [
    "BreakTier",
    "IncomeTaxBracket",
    "LaborLawRuleSet",
    "NightHoursPolicy",
    "RuleSetRegistry",
]
