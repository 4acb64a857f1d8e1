"""Owner salary payroll ledger.

Each salary payment is entered as a take-home (net) amount and recorded
grossed up, with federal tax, provincial tax and CPP broken out. Rates come
from the projected annual income, not from the individual payment.
"""

import csv
import io
import logging
import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .csv_utils import iter_csv_rows, row_error
from .taxes import (
    DEFAULT_PROVINCE,
    DEFAULT_TAX_YEAR,
    TaxRules,
    calculate_gross_from_net,
)

logger = logging.getLogger(__name__)

CSV_HEADERS = ["Date", "Type", "Amount", "Federal Tax", "Provincial Tax", "CPP Payment", "Notes"]


class SalaryPayment(BaseModel):
    """A salary payment as entered: the amount the owner actually takes home."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    date: datetime.date
    net_amount: float = Field(..., gt=0, allow_inf_nan=False, description="Take-home amount")
    notes: str = ""


class PayrollEntry(BaseModel):
    """A grossed-up salary payment."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    date: datetime.date
    type: str = "owner_salary"
    amount: float = Field(..., description="Gross amount (before tax)")
    net_amount: float
    federal_tax: float
    provincial_tax: float
    cpp_payment: float
    notes: str = ""

    @property
    def total_deductions(self) -> float:
        return self.federal_tax + self.provincial_tax + self.cpp_payment

    def implied_rates(self) -> Dict[str, float]:
        """Deduction rates implied by the stored amounts."""
        if not self.amount:
            return {"federal": 0.0, "provincial": 0.0, "cpp": 0.0, "total": 0.0}
        federal = self.federal_tax / self.amount
        provincial = self.provincial_tax / self.amount
        cpp = self.cpp_payment / self.amount
        return {
            "federal": federal,
            "provincial": provincial,
            "cpp": cpp,
            "total": federal + provincial + cpp,
        }


def gross_up_payment(
    payment: SalaryPayment,
    annual_income: float,
    province: str = DEFAULT_PROVINCE,
    *,
    year: str = DEFAULT_TAX_YEAR,
    rules: Optional[TaxRules] = None,
) -> PayrollEntry:
    """Convert a net salary payment into a payroll entry."""
    result = calculate_gross_from_net(
        payment.net_amount, annual_income, province, year=year, rules=rules
    )
    return PayrollEntry(
        date=payment.date,
        amount=result.gross_amount,
        net_amount=payment.net_amount,
        federal_tax=result.federal_tax,
        provincial_tax=result.provincial_tax,
        cpp_payment=result.cpp_payment,
        notes=payment.notes,
    )


def gross_up_payments(
    payments: Iterable[SalaryPayment],
    annual_income: float,
    province: str = DEFAULT_PROVINCE,
    *,
    year: str = DEFAULT_TAX_YEAR,
    rules: Optional[TaxRules] = None,
) -> List[PayrollEntry]:
    """Gross up a batch of payments, ordered by date."""
    entries = [
        gross_up_payment(p, annual_income, province, year=year, rules=rules)
        for p in payments
    ]
    return sorted(entries, key=lambda e: e.date)


def summarize_payroll(entries: Iterable[PayrollEntry]) -> Dict[str, float]:
    """Running totals across payroll entries."""
    totals = {
        "count": 0,
        "gross": 0.0,
        "net": 0.0,
        "federal_tax": 0.0,
        "provincial_tax": 0.0,
        "cpp_payment": 0.0,
        "total_deductions": 0.0,
    }
    for entry in entries:
        totals["count"] += 1
        totals["gross"] += entry.amount
        totals["net"] += entry.net_amount
        totals["federal_tax"] += entry.federal_tax
        totals["provincial_tax"] += entry.provincial_tax
        totals["cpp_payment"] += entry.cpp_payment
        totals["total_deductions"] += entry.total_deductions
    return totals


def load_payments_csv(path: Union[str, Path]) -> List[SalaryPayment]:
    """Load salary payments from a CSV file.

    Expected header: date,net_amount[,notes]. Dates are YYYY-MM-DD.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the header is wrong or a row fails validation
    """
    payments = []
    for line_num, row in iter_csv_rows(path, required=("date", "net_amount")):
        try:
            payments.append(SalaryPayment(
                date=row["date"],
                net_amount=row["net_amount"],
                notes=row.get("notes", ""),
            ))
        except ValidationError as e:
            raise row_error(path, line_num, e) from e

    logger.debug(f"Loaded {len(payments)} payment(s) from {Path(path).name}")
    return payments


def _write_payroll_rows(writer, entries: Iterable[PayrollEntry]) -> None:
    writer.writerow(CSV_HEADERS)
    for entry in entries:
        writer.writerow([
            entry.date.isoformat(),
            entry.type,
            f"{entry.amount:.2f}",
            f"{entry.federal_tax:.2f}",
            f"{entry.provincial_tax:.2f}",
            f"{entry.cpp_payment:.2f}",
            entry.notes,
        ])


def payroll_to_csv_string(entries: Iterable[PayrollEntry]) -> str:
    """Render payroll entries as CSV text."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    _write_payroll_rows(writer, entries)
    return output.getvalue()


def write_payroll_csv(entries: Iterable[PayrollEntry], output_path: Path) -> Path:
    """Write payroll entries to a CSV file.

    Returns:
        Path to the written file
    """
    output_path = Path(output_path)
    with open(output_path, "w", newline="") as csvfile:
        writer = csv.writer(csvfile)
        _write_payroll_rows(writer, entries)

    return output_path
