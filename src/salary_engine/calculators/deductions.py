"""Statutory deductions from gross pay."""

from __future__ import annotations

import logging
from decimal import Decimal

from salary_engine.calculators.money import round_won, to_decimal
from salary_engine.calculators.types import DeductionComponents, DeductionOptions
from salary_engine.errors import ValidationError
from salary_engine.rules.rule_set import LaborLawRuleSet

logger = logging.getLogger(__name__)


class StatutoryDeductionCalculator:
    """Computes the four social insurances and withholding taxes.

    Deduction rules (employee share, each rounded half-up to a whole won):
    - National pension: rate * gross clamped to [floor, ceiling]
    - Health insurance: rate * gross
    - Long-term care: rate * health insurance premium
    - Employment insurance: rate * gross
    - Income tax: bracket rate (by gross) * max(0, gross - dependents * dependent
      deduction)
    - Local income tax: rate * income tax
    """

    def __init__(self, rule_set: LaborLawRuleSet):
        self.rule_set = rule_set

    def calculate(
        self,
        gross_pay: int,
        options: DeductionOptions | None = None,
        other_deductions: dict[str, int] | None = None,
    ) -> DeductionComponents:
        """Compute deductions for a period's gross pay."""
        if gross_pay < 0:
            raise ValidationError(f"Gross pay must not be negative, got {gross_pay}")
        options = options or DeductionOptions()
        other_deductions = dict(other_deductions or {})
        for name, amount in other_deductions.items():
            if amount < 0:
                raise ValidationError(f"Deduction '{name}' must not be negative, got {amount}")
        if options.dependents < 0:
            raise ValidationError(f"Dependents must not be negative, got {options.dependents}")

        pension = self.national_pension(gross_pay) if options.national_pension else 0
        health = self.health_insurance(gross_pay) if options.health_insurance else 0
        care = self.long_term_care(health) if options.health_insurance else 0
        employment = self.employment_insurance(gross_pay) if options.employment_insurance else 0
        income_tax = self.income_tax(gross_pay, options.dependents) if options.income_tax else 0
        local_tax = self.local_income_tax(income_tax) if options.income_tax else 0

        components = DeductionComponents(
            national_pension=pension,
            health_insurance=health,
            long_term_care=care,
            employment_insurance=employment,
            income_tax=income_tax,
            local_income_tax=local_tax,
            other_deductions=other_deductions,
        )

        if components.total_deductions > 0 and components.total_deductions >= gross_pay:
            logger.warning(
                "Deductions %s meet or exceed gross pay %s (rule set %s)",
                components.total_deductions,
                gross_pay,
                self.rule_set.version,
            )
        return components

    def national_pension(self, gross_pay: Decimal | int) -> int:
        gross = to_decimal(gross_pay)
        if gross <= 0:
            return 0
        base = min(
            max(gross, self.rule_set.national_pension_floor),
            self.rule_set.national_pension_ceiling,
        )
        return round_won(base * self.rule_set.national_pension_rate)

    def health_insurance(self, gross_pay: Decimal | int) -> int:
        return round_won(to_decimal(gross_pay) * self.rule_set.health_insurance_rate)

    def long_term_care(self, health_insurance: Decimal | int) -> int:
        return round_won(to_decimal(health_insurance) * self.rule_set.long_term_care_rate)

    def employment_insurance(self, gross_pay: Decimal | int) -> int:
        return round_won(to_decimal(gross_pay) * self.rule_set.employment_insurance_rate)

    def income_tax(self, gross_pay: Decimal | int, dependents: int = 1) -> int:
        gross = to_decimal(gross_pay)
        bracket = self.rule_set.income_tax_bracket_for(gross)
        if bracket is None:
            return 0
        taxable = max(Decimal("0"), gross - dependents * self.rule_set.income_tax_dependent_deduction)
        return round_won(taxable * bracket.rate)

    def local_income_tax(self, income_tax: Decimal | int) -> int:
        return round_won(to_decimal(income_tax) * self.rule_set.local_income_tax_rate)
