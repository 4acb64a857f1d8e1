"""Progressive bracket tax, CPP and net-to-gross calculations.

All functions are pure: rules come from the static tax_rules/YYYY.yaml tables
(or an explicit TaxRules passed by the caller) and every input is a plain
parameter. Annual income and province are never read from settings here.

Two CPP models exist on purpose:
- calculate_cpp_contribution: exemption floor and earnings ceiling applied
- calculate_gross_from_net: self-employed rate applied flat on gross
"""

import logging
import math
from typing import Optional, Sequence

from .rules import DEFAULT_PROVINCE, DEFAULT_TAX_YEAR, get_bracket_table, load_tax_rules
from .schemas import GrossUpResult, MarginalRateResult, TaxBracket, TaxRules

logger = logging.getLogger(__name__)


class TaxCalculationError(ValueError):
    """Base class for calculator input errors."""
    pass


class InvalidInputError(TaxCalculationError):
    """Raised for negative or non-finite incomes or a non-positive net amount."""
    pass


class InvalidDeductionRateError(TaxCalculationError):
    """Raised when combined deductions reach 100% of gross."""

    def __init__(self, deduction_rate: float):
        self.deduction_rate = deduction_rate
        super().__init__(
            f"Combined deduction rate {deduction_rate:.4f} is >= 1; "
            f"no gross amount can produce a positive net"
        )


def _require_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be a finite number, got {value}")


def _require_non_negative(name: str, value: float) -> None:
    _require_finite(name, value)
    if value < 0:
        raise InvalidInputError(f"{name} must be >= 0, got {value}")


def _resolve_rules(rules: Optional[TaxRules], year: str) -> TaxRules:
    return rules if rules is not None else load_tax_rules(year)


def _find_bracket(income: float, brackets: Sequence[TaxBracket]) -> TaxBracket:
    """Bracket whose (min, max] interval holds income; first bracket if none does."""
    for bracket in brackets:
        if bracket.contains(income):
            return bracket
    return brackets[0]


def calculate_tax_amount(income: float, brackets: Sequence[TaxBracket]) -> float:
    """Calculate progressive tax on income.

    Only the portion of income inside each bracket is taxed at that bracket's
    rate. Income exactly on a boundary is taxed in the lower bracket only.

    Args:
        income: Annual income (>= 0)
        brackets: Ascending, contiguous bracket table

    Returns:
        Total tax owed
    """
    _require_non_negative("income", income)

    tax = 0.0
    for bracket in brackets:
        if income <= bracket.min:
            break

        taxable_in_bracket = min(income, bracket.upper) - bracket.min
        if taxable_in_bracket > 0:
            tax += taxable_in_bracket * bracket.rate

    return tax


def calculate_marginal_tax_rate(
    annual_income: float,
    province: str = DEFAULT_PROVINCE,
    *,
    year: str = DEFAULT_TAX_YEAR,
    rules: Optional[TaxRules] = None,
) -> MarginalRateResult:
    """Marginal and effective federal/provincial rates for an annual income.

    Unknown province codes use the Ontario table. Effective rates are 0 when
    annual_income is 0.
    """
    _require_non_negative("annual_income", annual_income)
    rules = _resolve_rules(rules, year)

    _, provincial_brackets = get_bracket_table(rules, province)

    federal_bracket = _find_bracket(annual_income, rules.federal)
    provincial_bracket = _find_bracket(annual_income, provincial_brackets)

    if annual_income > 0:
        federal_tax = calculate_tax_amount(annual_income, rules.federal)
        provincial_tax = calculate_tax_amount(annual_income, provincial_brackets)
        effective_federal_rate = federal_tax / annual_income
        effective_provincial_rate = provincial_tax / annual_income
    else:
        effective_federal_rate = 0.0
        effective_provincial_rate = 0.0

    return MarginalRateResult(
        federal_rate=federal_bracket.rate,
        provincial_rate=provincial_bracket.rate,
        combined_rate=federal_bracket.rate + provincial_bracket.rate,
        effective_federal_rate=effective_federal_rate,
        effective_provincial_rate=effective_provincial_rate,
        effective_combined_rate=effective_federal_rate + effective_provincial_rate,
    )


def calculate_cpp_contribution(
    income: float,
    is_self_employed: bool = True,
    *,
    year: str = DEFAULT_TAX_YEAR,
    rules: Optional[TaxRules] = None,
) -> float:
    """Calculate CPP contribution on pensionable earnings.

    Income below the basic exemption contributes nothing; income above the
    maximum pensionable earnings contributes no more than the ceiling allows.
    Self-employed contributors pay both the employee and employer portions.
    """
    _require_non_negative("income", income)
    cpp = _resolve_rules(rules, year).cpp

    pensionable_earnings = min(
        max(income - cpp.basic_exemption, 0),
        cpp.max_pensionable_earnings - cpp.basic_exemption,
    )
    rate = cpp.self_employed_rate if is_self_employed else cpp.employee_rate
    return pensionable_earnings * rate


def calculate_gross_from_net(
    net_amount: float,
    annual_income: float,
    province: str = DEFAULT_PROVINCE,
    *,
    year: str = DEFAULT_TAX_YEAR,
    rules: Optional[TaxRules] = None,
) -> GrossUpResult:
    """Calculate the gross salary that nets a take-home amount.

    Effective (average) rates for the projected annual income are applied as
    flat per-dollar deductions, along with the flat self-employed CPP rate:

        net = gross * (1 - total_deduction_rate)
        gross = net / (1 - total_deduction_rate)

    Args:
        net_amount: Desired take-home amount (> 0)
        annual_income: Projected annual income used to pick effective rates (>= 0)
        province: Two-letter province code (unknown codes use Ontario)
        year: Tax year of the rules to load
        rules: Explicit rules, overriding year

    Raises:
        InvalidInputError: net_amount <= 0, annual_income < 0, or either is NaN or infinite
        InvalidDeductionRateError: deductions add up to 100% or more of gross
    """
    _require_finite("net_amount", net_amount)
    if net_amount <= 0:
        raise InvalidInputError(f"net_amount must be > 0, got {net_amount}")
    _require_non_negative("annual_income", annual_income)
    rules = _resolve_rules(rules, year)

    applied_province, _ = get_bracket_table(rules, province)
    rates = calculate_marginal_tax_rate(annual_income, applied_province, rules=rules)
    cpp_rate = rules.cpp.self_employed_rate

    total_deduction_rate = (
        rates.effective_federal_rate + rates.effective_provincial_rate + cpp_rate
    )
    if total_deduction_rate >= 1:
        raise InvalidDeductionRateError(total_deduction_rate)

    gross_amount = net_amount / (1 - total_deduction_rate)

    federal_tax = gross_amount * rates.effective_federal_rate
    provincial_tax = gross_amount * rates.effective_provincial_rate
    cpp_payment = gross_amount * cpp_rate

    logger.debug(
        f"gross-up: net={net_amount:.2f} income={annual_income:.2f} "
        f"province={applied_province} rate={total_deduction_rate:.6f} gross={gross_amount:.2f}"
    )

    return GrossUpResult(
        gross_amount=gross_amount,
        federal_tax=federal_tax,
        provincial_tax=provincial_tax,
        cpp_payment=cpp_payment,
        total_deductions=federal_tax + provincial_tax + cpp_payment,
        net_amount=net_amount,
        annual_income=annual_income,
        province=applied_province,
        total_deduction_rate=total_deduction_rate,
    )
