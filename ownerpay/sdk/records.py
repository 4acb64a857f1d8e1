"""Corporate income and employee expense records.

Client income may be invoiced in CAD or USD. Each record keeps the exchange
rate used at entry time and the resulting CAD amount, which is what the
corporate tax estimate sums. Employee expenses are tracked per currency and
are never converted.

CSV files use the same columns for import and export:
- Income:   Date,Client,Amount,Currency,Exchange Rate,CAD Amount,Notes
- Expenses: Date,Type,Amount,Currency,Notes
"""

import csv
import datetime
import io
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .csv_utils import iter_csv_rows, row_error

logger = logging.getLogger(__name__)

Currency = Literal["CAD", "USD"]
ExpenseType = Literal["flight", "hotel", "meals", "technology"]

CURRENCIES = ("CAD", "USD")
EXPENSE_TYPES = ("flight", "hotel", "meals", "technology")

INCOME_CSV_HEADERS = ["Date", "Client", "Amount", "Currency", "Exchange Rate", "CAD Amount", "Notes"]
EXPENSE_CSV_HEADERS = ["Date", "Type", "Amount", "Currency", "Notes"]


# =============================================================================
# Models
# =============================================================================


class ClientIncome(BaseModel):
    """Income received from a client.

    cad_amount defaults to amount for CAD income and amount * exchange_rate
    for USD income. A stored cad_amount is kept as given.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    date: datetime.date
    amount: float = Field(..., gt=0, allow_inf_nan=False, description="Amount in the invoiced currency")
    currency: Currency = "CAD"
    exchange_rate: float = Field(default=1.0, gt=0, allow_inf_nan=False, description="CAD per unit of currency")
    cad_amount: float = Field(..., ge=0, allow_inf_nan=False, description="Amount converted to CAD")
    client_name: str = ""
    notes: str = ""

    @model_validator(mode="before")
    @classmethod
    def fill_cad_amount(cls, data):
        if not isinstance(data, dict) or data.get("cad_amount") not in (None, ""):
            return data

        data = dict(data)
        data.pop("cad_amount", None)
        try:
            amount = float(data["amount"])
            rate = float(data.get("exchange_rate", 1.0))
        except (KeyError, TypeError, ValueError):
            # Field validation reports the bad amount or rate
            return data
        data["cad_amount"] = amount if data.get("currency", "CAD") == "CAD" else amount * rate
        return data


class EmployeeExpense(BaseModel):
    """An expense paid by the employee, tracked in its original currency."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    date: datetime.date
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    currency: Currency = "CAD"
    type: ExpenseType
    notes: str = ""


# =============================================================================
# Totals
# =============================================================================


def summarize_income(records: Iterable[ClientIncome]) -> Dict[str, float]:
    """Income totals per currency plus the CAD total used for corporate tax."""
    totals = {"count": 0, "CAD": 0.0, "USD": 0.0, "total_cad": 0.0}
    for record in records:
        totals["count"] += 1
        totals[record.currency] += record.amount
        totals["total_cad"] += record.cad_amount
    return totals


def summarize_expenses(expenses: Iterable[EmployeeExpense]) -> Dict[str, Dict[str, float]]:
    """Expense totals by currency and type. Currencies are never mixed."""
    totals = {
        currency: {**{t: 0.0 for t in EXPENSE_TYPES}, "total": 0.0}
        for currency in CURRENCIES
    }
    for expense in expenses:
        totals[expense.currency][expense.type] += expense.amount
        totals[expense.currency]["total"] += expense.amount
    return totals


# =============================================================================
# CSV import
# =============================================================================


def load_income_csv(path: Union[str, Path]) -> List[ClientIncome]:
    """Load client income records from a CSV file.

    Required columns: Date, Amount. Currency defaults to CAD. A blank
    Exchange Rate means 1.0 and a blank CAD Amount is computed.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the header is wrong or a row fails validation
    """
    records = []
    for line_num, row in iter_csv_rows(path, required=("Date", "Amount")):
        data = {
            "date": row["Date"],
            "amount": row["Amount"],
            "currency": (row.get("Currency") or "CAD").upper(),
            "client_name": row.get("Client", ""),
            "notes": row.get("Notes", ""),
        }
        if row.get("Exchange Rate"):
            data["exchange_rate"] = row["Exchange Rate"]
        if row.get("CAD Amount"):
            data["cad_amount"] = row["CAD Amount"]
        try:
            records.append(ClientIncome(**data))
        except ValidationError as e:
            raise row_error(path, line_num, e) from e

    logger.debug(f"Loaded {len(records)} income record(s) from {Path(path).name}")
    return records


def load_expenses_csv(path: Union[str, Path]) -> List[EmployeeExpense]:
    """Load employee expenses from a CSV file.

    Required columns: Date, Type, Amount. Currency defaults to CAD.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the header is wrong or a row fails validation
    """
    expenses = []
    for line_num, row in iter_csv_rows(path, required=("Date", "Type", "Amount")):
        try:
            expenses.append(EmployeeExpense(
                date=row["Date"],
                type=row["Type"].lower(),
                amount=row["Amount"],
                currency=(row.get("Currency") or "CAD").upper(),
                notes=row.get("Notes", ""),
            ))
        except ValidationError as e:
            raise row_error(path, line_num, e) from e

    logger.debug(f"Loaded {len(expenses)} expense(s) from {Path(path).name}")
    return expenses


# =============================================================================
# CSV export
# =============================================================================


def _write_income_rows(writer, records: Iterable[ClientIncome]) -> None:
    writer.writerow(INCOME_CSV_HEADERS)
    for record in records:
        writer.writerow([
            record.date.isoformat(),
            record.client_name,
            f"{record.amount:.2f}",
            record.currency,
            f"{record.exchange_rate:.2f}",
            f"{record.cad_amount:.2f}",
            record.notes,
        ])


def _write_expense_rows(writer, expenses: Iterable[EmployeeExpense]) -> None:
    writer.writerow(EXPENSE_CSV_HEADERS)
    for expense in expenses:
        writer.writerow([
            expense.date.isoformat(),
            expense.type,
            f"{expense.amount:.2f}",
            expense.currency,
            expense.notes,
        ])


def income_to_csv_string(records: Iterable[ClientIncome]) -> str:
    """Render income records as CSV text."""
    output = io.StringIO()
    _write_income_rows(csv.writer(output, lineterminator="\n"), records)
    return output.getvalue()


def expenses_to_csv_string(expenses: Iterable[EmployeeExpense]) -> str:
    """Render employee expenses as CSV text."""
    output = io.StringIO()
    _write_expense_rows(csv.writer(output, lineterminator="\n"), expenses)
    return output.getvalue()


def write_income_csv(records: Iterable[ClientIncome], output_path: Path) -> Path:
    """Write income records to a CSV file."""
    output_path = Path(output_path)
    with open(output_path, "w", newline="") as csvfile:
        _write_income_rows(csv.writer(csvfile), records)
    return output_path


def write_expenses_csv(expenses: Iterable[EmployeeExpense], output_path: Path) -> Path:
    """Write employee expenses to a CSV file."""
    output_path = Path(output_path)
    with open(output_path, "w", newline="") as csvfile:
        _write_expense_rows(csv.writer(csvfile), expenses)
    return output_path
