"""Small business corporate tax estimate.

Client income less owner salary (a deductible expense) is taxed at the flat
federal and provincial small business rates from the year's tax rules.
"""

import math
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict

from .payroll import PayrollEntry
from .records import ClientIncome
from .taxes import DEFAULT_TAX_YEAR, InvalidInputError, TaxRules, load_tax_rules

OWNER_SALARY_TYPE = "owner_salary"


class CorporateTaxResult(BaseModel):
    """Corporate tax owed on income retained in the corporation."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    total_income: float
    total_owner_salary: float
    taxable_income: float
    federal_corporate_tax: float
    provincial_corporate_tax: float
    total_corporate_tax: float


def _require_amount(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be a finite number, got {value}")
    if value < 0:
        raise InvalidInputError(f"{name} must be >= 0, got {value}")


def calculate_corporate_tax(
    total_income: float,
    total_owner_salary: float,
    *,
    year: str = DEFAULT_TAX_YEAR,
    rules: Optional[TaxRules] = None,
) -> CorporateTaxResult:
    """Estimate corporate tax on client income after owner salary.

    Salary exceeding income leaves nothing taxable; it never produces a credit.
    """
    _require_amount("total_income", total_income)
    _require_amount("total_owner_salary", total_owner_salary)

    corporate = (rules if rules is not None else load_tax_rules(year)).corporate

    taxable_income = max(0.0, total_income - total_owner_salary)
    federal = taxable_income * corporate.federal_rate
    provincial = taxable_income * corporate.provincial_rate

    return CorporateTaxResult(
        total_income=total_income,
        total_owner_salary=total_owner_salary,
        taxable_income=taxable_income,
        federal_corporate_tax=federal,
        provincial_corporate_tax=provincial,
        total_corporate_tax=federal + provincial,
    )


def calculate_corporate_tax_from_records(
    income: Iterable[ClientIncome],
    payroll: Iterable[PayrollEntry],
    *,
    year: str = DEFAULT_TAX_YEAR,
    rules: Optional[TaxRules] = None,
) -> CorporateTaxResult:
    """Estimate corporate tax from income records and payroll entries.

    Income is summed in CAD. Only owner_salary entries count as salary, at
    their gross amount.
    """
    total_income = sum(record.cad_amount for record in income)
    total_owner_salary = sum(
        entry.amount for entry in payroll if entry.type == OWNER_SALARY_TYPE
    )
    return calculate_corporate_tax(
        float(total_income), float(total_owner_salary), year=year, rules=rules
    )
