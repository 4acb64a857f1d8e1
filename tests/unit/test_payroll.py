"""Unit tests for the owner salary payroll ledger."""

from datetime import date

import pytest

from ownerpay.sdk.payroll import (
    CSV_HEADERS,
    PayrollEntry,
    SalaryPayment,
    gross_up_payment,
    gross_up_payments,
    load_payments_csv,
    payroll_to_csv_string,
    summarize_payroll,
    write_payroll_csv,
)
from ownerpay.sdk.taxes import calculate_gross_from_net


@pytest.fixture
def payments():
    return [
        SalaryPayment(date=date(2024, 2, 15), net_amount=2000, notes="February"),
        SalaryPayment(date=date(2024, 1, 15), net_amount=1000, notes="January"),
    ]


class TestGrossUp:
    """Tests for converting net payments into payroll entries."""

    def test_matches_calculator(self):
        payment = SalaryPayment(date=date(2024, 1, 15), net_amount=1000)
        entry = gross_up_payment(payment, 50000, "ON")
        expected = calculate_gross_from_net(1000, 50000, "ON")

        assert entry.type == "owner_salary"
        assert entry.amount == expected.gross_amount
        assert entry.net_amount == 1000
        assert entry.federal_tax == expected.federal_tax
        assert entry.provincial_tax == expected.provincial_tax
        assert entry.cpp_payment == expected.cpp_payment
        assert entry.total_deductions == pytest.approx(expected.total_deductions)

    def test_sorted_by_date(self, payments):
        entries = gross_up_payments(payments, 50000, "ON")
        assert [e.notes for e in entries] == ["January", "February"]

    def test_implied_rates(self):
        payment = SalaryPayment(date=date(2024, 1, 15), net_amount=1000)
        entry = gross_up_payment(payment, 50000, "ON")
        expected = calculate_gross_from_net(1000, 50000, "ON")

        rates = entry.implied_rates()
        assert rates["federal"] == pytest.approx(0.15)
        assert rates["cpp"] == pytest.approx(0.119)
        assert rates["total"] == pytest.approx(expected.total_deduction_rate)

    def test_implied_rates_zero_amount(self):
        entry = PayrollEntry(
            date=date(2024, 1, 1), amount=0, net_amount=0,
            federal_tax=0, provincial_tax=0, cpp_payment=0,
        )
        assert entry.implied_rates() == {"federal": 0.0, "provincial": 0.0, "cpp": 0.0, "total": 0.0}

    def test_net_amount_must_be_positive(self):
        with pytest.raises(ValueError):
            SalaryPayment(date=date(2024, 1, 1), net_amount=0)


class TestSummarize:
    """Tests for running totals."""

    def test_totals(self, payments):
        entries = gross_up_payments(payments, 50000, "ON")
        totals = summarize_payroll(entries)

        assert totals["count"] == 2
        assert totals["net"] == pytest.approx(3000)
        assert totals["gross"] == pytest.approx(sum(e.amount for e in entries))
        assert totals["gross"] - totals["total_deductions"] == pytest.approx(3000)

    def test_empty(self):
        totals = summarize_payroll([])
        assert totals["count"] == 0
        assert totals["gross"] == 0


class TestLoadPaymentsCsv:
    """Tests for reading payments from CSV."""

    def test_loads_rows(self, tmp_path):
        path = tmp_path / "payments.csv"
        path.write_text(
            "date,net_amount,notes\n"
            "2024-01-15,1000,January\n"
            "\n"
            "2024-02-15,2000.50,\"Bonus, Q1\"\n"
        )

        payments = load_payments_csv(path)

        assert len(payments) == 2
        assert payments[0].date == date(2024, 1, 15)
        assert payments[1].net_amount == 2000.50
        assert payments[1].notes == "Bonus, Q1"

    def test_notes_column_optional(self, tmp_path):
        path = tmp_path / "payments.csv"
        path.write_text("date,net_amount\n2024-01-15,1000\n")

        assert load_payments_csv(path)[0].notes == ""

    def test_missing_column(self, tmp_path):
        path = tmp_path / "payments.csv"
        path.write_text("date,amount\n2024-01-15,1000\n")

        with pytest.raises(ValueError, match="net_amount"):
            load_payments_csv(path)

    def test_bad_row_reports_line(self, tmp_path):
        path = tmp_path / "payments.csv"
        path.write_text("date,net_amount\n2024-01-15,1000\n2024-02-15,-5\n")

        with pytest.raises(ValueError, match="line 3"):
            load_payments_csv(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_payments_csv(tmp_path / "nope.csv")


class TestCsvExport:
    """Tests for payroll CSV output."""

    def test_csv_string(self):
        payment = SalaryPayment(date=date(2024, 1, 15), net_amount=1000, notes="Bonus, Q1")
        entries = gross_up_payments([payment], 50000, "ON")

        lines = payroll_to_csv_string(entries).splitlines()

        assert lines[0] == ",".join(CSV_HEADERS)
        assert lines[1] == '2024-01-15,owner_salary,1470.87,220.63,75.21,175.03,"Bonus, Q1"'

    def test_write_file(self, tmp_path, payments):
        entries = gross_up_payments(payments, 50000, "ON")
        path = write_payroll_csv(entries, tmp_path / "out.csv")

        content = path.read_text().splitlines()
        assert content[0] == "Date,Type,Amount,Federal Tax,Provincial Tax,CPP Payment,Notes"
        assert len(content) == 3
