"""Pydantic schemas for the JSON surface consumed by the API layer."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ============================================================================
# Requests
# ============================================================================


class PeriodRequest(BaseModel):
    """Pay period shared by single and batch requests."""

    year: int = Field(ge=1000, le=9999)
    month: int = Field(ge=1, le=12)


class CalculateRequest(PeriodRequest):
    """Schema for calculating one staff member's salary."""

    staff_id: str = Field(min_length=1)

    @field_validator("staff_id")
    @classmethod
    def staff_id_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("staff_id must not be blank")
        return v


class BatchCalculateRequest(PeriodRequest):
    """Schema for a batch run: either a company or explicit staff ids."""

    company_id: str | None = None
    staff_ids: list[str] | None = None

    @model_validator(mode="after")
    def exactly_one_target(self) -> BatchCalculateRequest:
        if (self.company_id is None) == (self.staff_ids is None):
            raise ValueError("Provide exactly one of company_id or staff_ids")
        if self.staff_ids is not None and any(not s.strip() for s in self.staff_ids):
            raise ValueError("staff_ids must not contain blank identifiers")
        return self


# ============================================================================
# Responses
# ============================================================================


class SalaryRecordSchema(BaseModel):
    """Serialized salary record (one row of the salary ledger)."""

    model_config = ConfigDict(frozen=True)

    staff_id: str
    year: int
    month: int

    base_salary: int = Field(ge=0)
    overtime_pay: int = Field(ge=0)
    night_pay: int = Field(ge=0)
    holiday_pay: int = Field(ge=0)
    weekly_holiday_pay: int = Field(ge=0)
    meal_allowance: int = Field(ge=0)
    transport_allowance: int = Field(ge=0)
    position_allowance: int = Field(ge=0)
    other_allowances: dict[str, int] = Field(default_factory=dict)
    total_gross_pay: int = Field(ge=0)

    national_pension: int = Field(ge=0)
    health_insurance: int = Field(ge=0)
    long_term_care: int = Field(ge=0)
    employment_insurance: int = Field(ge=0)
    income_tax: int = Field(ge=0)
    local_income_tax: int = Field(ge=0)
    other_deductions: dict[str, int] = Field(default_factory=dict)
    total_deductions: int = Field(ge=0)

    net_pay: int
    work_days: int = Field(ge=0)
    total_hours: Decimal
    status: str
    rule_set_version: str
    calculation_id: str


class FailureDetail(BaseModel):
    """A staff member that needs manual attention."""

    staff_id: str
    reason: str
    error_type: str


class BatchSummary(BaseModel):
    """Batch outcome surfaced to administrators."""

    year: int
    month: int
    succeeded_count: int
    failed_count: int
    skipped_count: int = 0
    cancelled: bool = False
    rule_set_version: str | None = None
    failures: list[FailureDetail] = Field(default_factory=list)
