"""Owner Pay SDK - Core functionality for owner salary tax calculations."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    unset_setting,
    validate_setting,
    get_calculation_defaults,
    resolve_calculation_inputs,
    SettingValidationError,
    SETTING_DEFAULTS,
)

from .taxes import (
    TaxBracket,
    TaxRules,
    MarginalRateResult,
    GrossUpResult,
    DEFAULT_TAX_YEAR,
    DEFAULT_PROVINCE,
    load_tax_rules,
    get_available_years,
    get_bracket_table,
    list_provinces,
    TaxCalculationError,
    InvalidInputError,
    InvalidDeductionRateError,
    calculate_tax_amount,
    calculate_marginal_tax_rate,
    calculate_cpp_contribution,
    calculate_gross_from_net,
)

from .corporate import (
    CorporateTaxResult,
    calculate_corporate_tax,
    calculate_corporate_tax_from_records,
)

from .payroll import (
    SalaryPayment,
    PayrollEntry,
    gross_up_payment,
    gross_up_payments,
    summarize_payroll,
    load_payments_csv,
    payroll_to_csv_string,
    write_payroll_csv,
)

from .records import (
    ClientIncome,
    EmployeeExpense,
    CURRENCIES,
    EXPENSE_TYPES,
    INCOME_CSV_HEADERS,
    EXPENSE_CSV_HEADERS,
    summarize_income,
    summarize_expenses,
    load_income_csv,
    load_expenses_csv,
    income_to_csv_string,
    expenses_to_csv_string,
    write_income_csv,
    write_expenses_csv,
)

__all__ = [
    # Settings
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "unset_setting",
    "validate_setting",
    "get_calculation_defaults",
    "resolve_calculation_inputs",
    "SettingValidationError",
    "SETTING_DEFAULTS",
    # Tax rules
    "TaxBracket",
    "TaxRules",
    "MarginalRateResult",
    "GrossUpResult",
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
    # Corporate
    "CorporateTaxResult",
    "calculate_corporate_tax",
    "calculate_corporate_tax_from_records",
    # Payroll
    "SalaryPayment",
    "PayrollEntry",
    "gross_up_payment",
    "gross_up_payments",
    "summarize_payroll",
    "load_payments_csv",
    "payroll_to_csv_string",
    "write_payroll_csv",
    # Income and expense records
    "ClientIncome",
    "EmployeeExpense",
    "CURRENCIES",
    "EXPENSE_TYPES",
    "INCOME_CSV_HEADERS",
    "EXPENSE_CSV_HEADERS",
    "summarize_income",
    "summarize_expenses",
    "load_income_csv",
    "load_expenses_csv",
    "income_to_csv_string",
    "expenses_to_csv_string",
    "write_income_csv",
    "write_expenses_csv",
]
