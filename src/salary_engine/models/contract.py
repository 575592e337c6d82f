"""Employment contract terms used for pay."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, Date, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from salary_engine.calculators.types import (
    Allowances,
    DeductionOptions,
    PremiumOptions,
    SalaryBasis,
    StaffContract,
)
from salary_engine.models.base import Base, TimestampMixin


class Contract(Base, TimestampMixin):
    """Staff contract with salary basis, allowances and opt-outs."""

    __tablename__ = "contracts"

    contract_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    staff_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    company_id: Mapped[str | None] = mapped_column(String(64), index=True)
    salary_type: Mapped[str] = mapped_column(String(16), nullable=False)
    salary_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="ACTIVE")
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date)
    # NULL = rule set standard day
    standard_hours_per_day: Mapped[Decimal | None] = mapped_column(Numeric(4, 2))

    # Pass-through allowances (won per month)
    meal_allowance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    transport_allowance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    position_allowance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    other_allowances: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    # Premium flags
    pays_overtime: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    pays_night: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    pays_holiday: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    pays_weekly_holiday: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Deduction flags
    deducts_national_pension: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    deducts_health_insurance: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    deducts_employment_insurance: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    deducts_income_tax: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    dependents: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    other_deductions: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    __table_args__ = (
        CheckConstraint(
            "salary_type IN ('HOURLY', 'DAILY', 'MONTHLY')",
            name="contracts_salary_type_check",
        ),
        CheckConstraint("salary_amount >= 0", name="contracts_salary_amount_check"),
        CheckConstraint("dependents >= 0", name="contracts_dependents_check"),
        CheckConstraint(
            "standard_hours_per_day IS NULL OR standard_hours_per_day BETWEEN 1 AND 12",
            name="contracts_standard_hours_check",
        ),
        CheckConstraint(
            "status IN ('ACTIVE', 'TERMINATED', 'DRAFT')",
            name="contracts_status_check",
        ),
    )

    def to_contract(self) -> StaffContract:
        return StaffContract(
            staff_id=self.staff_id,
            company_id=self.company_id,
            basis=SalaryBasis(self.salary_type),
            amount=Decimal(str(self.salary_amount)),
            allowances=Allowances(
                meal=self.meal_allowance,
                transport=self.transport_allowance,
                position=self.position_allowance,
                other={k: int(v) for k, v in (self.other_allowances or {}).items()},
            ),
            premiums=PremiumOptions(
                overtime=self.pays_overtime,
                night=self.pays_night,
                holiday=self.pays_holiday,
                weekly_holiday=self.pays_weekly_holiday,
            ),
            deductions=DeductionOptions(
                national_pension=self.deducts_national_pension,
                health_insurance=self.deducts_health_insurance,
                employment_insurance=self.deducts_employment_insurance,
                income_tax=self.deducts_income_tax,
                dependents=self.dependents,
            ),
            other_deductions={k: int(v) for k, v in (self.other_deductions or {}).items()},
            standard_daily_hours=(
                Decimal(str(self.standard_hours_per_day))
                if self.standard_hours_per_day is not None
                else None
            ),
        )
