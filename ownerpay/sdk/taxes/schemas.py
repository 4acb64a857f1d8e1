"""Pydantic schemas for tax rules and calculation results.

The rules schemas validate the tax_rules/*.yaml files and provide typed access
to bracket tables, CPP parameters and corporate rates. Result schemas are the
frozen value objects returned by the calculator.
"""

import math
from typing import Dict, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# Tax Rules - loaded from tax_rules/YYYY.yaml
# =============================================================================


class TaxBracket(BaseModel):
    """Single progressive tax bracket."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    min: float = Field(..., ge=0, allow_inf_nan=False, description="Lower bound (income above this is taxed here)")
    max: Optional[float] = Field(default=None, allow_inf_nan=False, description="Upper bound (None for the top bracket)")
    rate: float = Field(..., ge=0, le=1, description="Tax rate as decimal")

    @property
    def upper(self) -> float:
        """Upper bound with the top bracket treated as unbounded."""
        return math.inf if self.max is None else self.max

    def contains(self, income: float) -> bool:
        """True when income falls in the (min, max] interval."""
        return self.min < income <= self.upper


def validate_bracket_table(brackets: Sequence[TaxBracket], label: str) -> Sequence[TaxBracket]:
    """Check that a bracket table covers [0, inf) in ascending, progressive order."""
    if not brackets:
        raise ValueError(f"{label}: bracket table is empty")

    errors = []
    if brackets[0].min != 0:
        errors.append(f"first bracket must start at 0, got {brackets[0].min}")

    for i, (prev, cur) in enumerate(zip(brackets, brackets[1:]), start=1):
        if prev.max is None:
            errors.append(f"bracket {i - 1} is unbounded but is not the last bracket")
            continue
        if prev.max <= prev.min:
            errors.append(f"bracket {i - 1} max {prev.max} must exceed min {prev.min}")
        if cur.min != prev.max:
            errors.append(f"bracket {i} min {cur.min} does not match previous max {prev.max}")
        if cur.rate < prev.rate:
            errors.append(f"bracket {i} rate {cur.rate} is lower than previous rate {prev.rate}")

    if brackets[-1].max is not None:
        errors.append("last bracket must be unbounded (omit max)")

    if errors:
        raise ValueError(f"{label}: " + "; ".join(errors))
    return brackets


class CPPRules(BaseModel):
    """Canada Pension Plan contribution parameters."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    basic_exemption: float = Field(..., ge=0, description="Earnings below this contribute nothing")
    max_pensionable_earnings: float = Field(..., gt=0, description="Earnings ceiling (YMPE)")
    self_employed_rate: float = Field(..., ge=0, le=1, description="Employee + employer rate")
    employee_rate: float = Field(..., ge=0, le=1, description="Employee-only rate")

    @model_validator(mode="after")
    def check_ceiling(self) -> "CPPRules":
        if self.max_pensionable_earnings < self.basic_exemption:
            raise ValueError(
                f"max_pensionable_earnings ({self.max_pensionable_earnings}) "
                f"is below basic_exemption ({self.basic_exemption})"
            )
        return self


class CorporateRules(BaseModel):
    """Small business corporate tax rates."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    federal_rate: float = Field(..., ge=0, le=1)
    provincial_rate: float = Field(..., ge=0, le=1)


class TaxRules(BaseModel):
    """Complete tax rules for a year."""
    model_config = ConfigDict(extra="ignore", frozen=True)  # Allow unknown fields for forward compat

    year: str
    default_province: str = "ON"
    federal: Tuple[TaxBracket, ...]
    provincial: Dict[str, Tuple[TaxBracket, ...]]
    cpp: CPPRules
    corporate: CorporateRules

    @field_validator("year", mode="before")
    @classmethod
    def coerce_year(cls, value):
        return str(value)

    @field_validator("provincial", mode="before")
    @classmethod
    def upper_province_codes(cls, value):
        if isinstance(value, dict):
            return {str(code).upper(): table for code, table in value.items()}
        return value

    @model_validator(mode="after")
    def check_tables(self) -> "TaxRules":
        validate_bracket_table(self.federal, "federal")
        for code, table in self.provincial.items():
            validate_bracket_table(table, f"provincial[{code}]")
        if self.default_province.upper() not in self.provincial:
            raise ValueError(
                f"default_province '{self.default_province}' has no provincial bracket table"
            )
        return self


# =============================================================================
# Calculation Results
# =============================================================================


class MarginalRateResult(BaseModel):
    """Marginal and effective rates for an annual income."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    federal_rate: float = Field(..., description="Federal rate on the next dollar earned")
    provincial_rate: float = Field(..., description="Provincial rate on the next dollar earned")
    combined_rate: float = Field(..., description="federal_rate + provincial_rate")
    effective_federal_rate: float = Field(..., description="Federal tax / annual income")
    effective_provincial_rate: float = Field(..., description="Provincial tax / annual income")
    effective_combined_rate: float = Field(..., description="Sum of effective rates")


class GrossUpResult(BaseModel):
    """Gross salary needed to net a take-home amount, with its deductions."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    gross_amount: float
    federal_tax: float
    provincial_tax: float
    cpp_payment: float
    total_deductions: float

    # Inputs that produced this result
    net_amount: float
    annual_income: float
    province: str = Field(..., description="Province whose table was actually applied")
    total_deduction_rate: float
