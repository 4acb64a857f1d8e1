"""Unit tests for the small business corporate tax estimate."""

import math
from datetime import date

import pytest

from ownerpay.sdk.corporate import calculate_corporate_tax, calculate_corporate_tax_from_records
from ownerpay.sdk.payroll import PayrollEntry, SalaryPayment, gross_up_payments
from ownerpay.sdk.records import ClientIncome
from ownerpay.sdk.taxes import InvalidInputError


def salary_entry(amount, entry_type="owner_salary"):
    return PayrollEntry(
        date=date(2024, 1, 15),
        type=entry_type,
        amount=amount,
        net_amount=amount,
        federal_tax=0,
        provincial_tax=0,
        cpp_payment=0,
    )


class TestCorporateTax:

    def test_income_less_salary(self):
        result = calculate_corporate_tax(100000, 40000)

        assert result.total_income == 100000
        assert result.total_owner_salary == 40000
        assert result.taxable_income == 60000
        assert result.federal_corporate_tax == pytest.approx(9000)
        assert result.provincial_corporate_tax == pytest.approx(1920)
        assert result.total_corporate_tax == pytest.approx(10920)

    def test_salary_exceeds_income(self):
        """Nothing is taxable; no negative tax."""
        result = calculate_corporate_tax(30000, 50000)

        assert result.taxable_income == 0
        assert result.total_corporate_tax == 0

    @pytest.mark.parametrize("income,salary", [(-1, 0), (100, -1)])
    def test_negative_inputs_rejected(self, income, salary):
        with pytest.raises(InvalidInputError):
            calculate_corporate_tax(income, salary)

    @pytest.mark.parametrize("income,salary", [(math.nan, 0), (math.inf, 0), (100, math.nan)])
    def test_non_finite_inputs_rejected(self, income, salary):
        with pytest.raises(InvalidInputError, match="finite"):
            calculate_corporate_tax(income, salary)


class TestCorporateTaxFromRecords:
    """Corporate estimate from income records and payroll entries."""

    def test_sums_cad_income_and_salary(self):
        income = [
            ClientIncome(date=date(2024, 1, 31), amount=50000, currency="USD", exchange_rate=1.35),
            ClientIncome(date=date(2024, 2, 29), amount=32500),
        ]
        payroll = [salary_entry(25000), salary_entry(15000)]

        result = calculate_corporate_tax_from_records(income, payroll)

        assert result.total_income == pytest.approx(100000)
        assert result.total_owner_salary == 40000
        assert result.total_corporate_tax == pytest.approx(10920)
        assert result == calculate_corporate_tax(result.total_income, 40000)

    def test_only_owner_salary_deducted(self):
        income = [ClientIncome(date=date(2024, 1, 31), amount=10000)]
        payroll = [salary_entry(4000), salary_entry(1000, entry_type="expense")]

        result = calculate_corporate_tax_from_records(income, payroll)

        assert result.total_owner_salary == 4000
        assert result.taxable_income == 6000

    def test_uses_gross_salary(self):
        """Salary is deducted at its grossed-up amount, not the take-home."""
        income = [ClientIncome(date=date(2024, 1, 31), amount=20000)]
        entries = gross_up_payments(
            [SalaryPayment(date=date(2024, 1, 15), net_amount=1000)], 50000, "ON"
        )

        result = calculate_corporate_tax_from_records(income, entries)

        assert result.total_owner_salary == pytest.approx(1470.87, abs=0.01)
        assert result.taxable_income == pytest.approx(20000 - entries[0].amount)

    def test_no_records(self):
        result = calculate_corporate_tax_from_records([], [])

        assert result.taxable_income == 0
        assert result.total_corporate_tax == 0
