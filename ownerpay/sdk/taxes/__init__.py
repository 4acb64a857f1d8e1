"""taxes - Canadian payroll tax calculation.

Scope:
- Federal and provincial progressive bracket tax
- Marginal and effective rates for a projected annual income
- CPP contributions (exemption floor, earnings ceiling)
- Net-to-gross salary gross-up

Constraints:
- Pure calculation - annual income and province are explicit parameters
- No settings or records access
- Year-specific rules loaded from ownerpay/tax_rules/{year}.yaml

Usage:
    from ownerpay.sdk.taxes import calculate_gross_from_net, load_tax_rules

    result = calculate_gross_from_net(1000, annual_income=50000, province="ON")
    rules = load_tax_rules("2024")
"""

from .schemas import (
    TaxBracket,
    CPPRules,
    CorporateRules,
    TaxRules,
    MarginalRateResult,
    GrossUpResult,
)

from .rules import (
    DEFAULT_TAX_YEAR,
    DEFAULT_PROVINCE,
    load_tax_rules,
    get_available_years,
    get_bracket_table,
    list_provinces,
)

from .calculator import (
    TaxCalculationError,
    InvalidInputError,
    InvalidDeductionRateError,
    calculate_tax_amount,
    calculate_marginal_tax_rate,
    calculate_cpp_contribution,
    calculate_gross_from_net,
)

__all__ = [
    # Schemas
    "TaxBracket",
    "CPPRules",
    "CorporateRules",
    "TaxRules",
    "MarginalRateResult",
    "GrossUpResult",
    # Rules
    "DEFAULT_TAX_YEAR",
    "DEFAULT_PROVINCE",
    "load_tax_rules",
    "get_available_years",
    "get_bracket_table",
    "list_provinces",
    # Calculator
    "TaxCalculationError",
    "InvalidInputError",
    "InvalidDeductionRateError",
    "calculate_tax_amount",
    "calculate_marginal_tax_rate",
    "calculate_cpp_contribution",
    "calculate_gross_from_net",
]
