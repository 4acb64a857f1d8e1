"""Client income, employee expense and records-based corporate tax commands."""

import json
from pathlib import Path

import click

from ownerpay.sdk import (
    CURRENCIES,
    EXPENSE_TYPES,
    calculate_corporate_tax_from_records,
    expenses_to_csv_string,
    gross_up_payments,
    income_to_csv_string,
    load_expenses_csv,
    load_income_csv,
    load_payments_csv,
    summarize_expenses,
    summarize_income,
    summarize_payroll,
    write_expenses_csv,
    write_income_csv,
)

from .common import (
    format_option,
    income_option,
    load_rules_or_fail,
    province_option,
    resolve_inputs,
    year_option,
)

csv_format_option = click.option("--format", "output_format", type=click.Choice(["text", "json", "csv"]),
                                 default="text", help="Output format (default: text)")
output_option = click.option("--output", "-o", type=click.Path(dir_okay=False),
                             help="Write CSV to this file instead of stdout")


def _format_income_text(records, totals) -> str:
    lines = []
    lines.append("CLIENT INCOME")
    lines.append("=" * 78)
    lines.append(f"  {'Date':<10} {'Client':<20} {'Amount':>12} {'Cur':<4} {'Rate':>6} {'CAD':>12}")
    lines.append("  " + "-" * 74)
    for r in records:
        rate = f"{r.exchange_rate:.2f}" if r.currency != "CAD" else "-"
        lines.append(
            f"  {r.date.isoformat():<10} {r.client_name[:20]:<20} {r.amount:>12,.2f} "
            f"{r.currency:<4} {rate:>6} {r.cad_amount:>12,.2f}"
        )
    lines.append("  " + "-" * 74)
    lines.append(f"  {totals['count']} record(s)")
    for currency in CURRENCIES:
        lines.append(f"  {'Total ' + currency:<20} ${totals[currency]:>12,.2f}")
    lines.append(f"  {'Total in CAD':<20} ${totals['total_cad']:>12,.2f}")
    return "\n".join(lines)


def _format_expenses_text(expenses, totals) -> str:
    lines = []
    lines.append("EMPLOYEE EXPENSES")
    lines.append("=" * 60)
    for e in expenses:
        lines.append(f"  {e.date.isoformat():<10} {e.type:<12} {e.amount:>12,.2f} {e.currency:<4} {e.notes}")
    lines.append("  " + "-" * 56)
    lines.append(f"  {'':<12} " + " ".join(f"{c:>12}" for c in CURRENCIES))
    for expense_type in (*EXPENSE_TYPES, "total"):
        amounts = " ".join(f"{totals[c][expense_type]:>12,.2f}" for c in CURRENCIES)
        lines.append(f"  {expense_type.capitalize():<12} {amounts}")
    return "\n".join(lines)


@click.command("income")
@click.argument("income_file", type=click.Path(exists=True, dir_okay=False))
@csv_format_option
@output_option
def income(income_file, output_format, output):
    """Show client income from INCOME_FILE with totals.

    INCOME_FILE is a CSV with columns
    Date,Client,Amount,Currency,Exchange Rate,CAD Amount,Notes. Only Date and
    Amount are required; a blank CAD Amount is computed from the exchange rate.
    """
    try:
        records = load_income_csv(income_file)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))

    if output:
        path = write_income_csv(records, Path(output))
        click.echo(f"Wrote {len(records)} income record(s) to {path}")
        return

    totals = summarize_income(records)
    if output_format == "csv":
        click.echo(income_to_csv_string(records), nl=False)
    elif output_format == "json":
        click.echo(json.dumps({
            "records": [r.model_dump(mode="json") for r in records],
            "totals": totals,
        }, indent=2))
    else:
        click.echo(_format_income_text(records, totals))


@click.command("expenses")
@click.argument("expenses_file", type=click.Path(exists=True, dir_okay=False))
@csv_format_option
@output_option
def expenses(expenses_file, output_format, output):
    """Show employee expenses from EXPENSES_FILE with totals by type.

    EXPENSES_FILE is a CSV with columns Date,Type,Amount,Currency,Notes.
    Type is one of flight, hotel, meals or technology. Totals are kept per
    currency.
    """
    try:
        records = load_expenses_csv(expenses_file)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))

    if output:
        path = write_expenses_csv(records, Path(output))
        click.echo(f"Wrote {len(records)} expense(s) to {path}")
        return

    totals = summarize_expenses(records)
    if output_format == "csv":
        click.echo(expenses_to_csv_string(records), nl=False)
    elif output_format == "json":
        click.echo(json.dumps({
            "expenses": [e.model_dump(mode="json") for e in records],
            "totals": totals,
        }, indent=2))
    else:
        click.echo(_format_expenses_text(records, totals))


@click.command("corporate-estimate")
@click.argument("income_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("payments_file", type=click.Path(exists=True, dir_okay=False))
@income_option
@province_option
@year_option
@format_option
def corporate_estimate(income_file, payments_file, income, province, year, output_format):
    """Estimate corporate tax from INCOME_FILE and PAYMENTS_FILE.

    Client income is summed in CAD. Salary payments (date,net_amount[,notes])
    are grossed up first and their gross amounts are deducted.
    """
    inputs = resolve_inputs(income, province, year)
    rules = load_rules_or_fail(inputs["year"])

    try:
        records = load_income_csv(income_file)
        payments = load_payments_csv(payments_file)
        entries = gross_up_payments(payments, inputs["annual_income"], inputs["province"], rules=rules)
        result = calculate_corporate_tax_from_records(records, entries, rules=rules)
    except (FileNotFoundError, ValueError) as e:
        # TaxCalculationError is a ValueError
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps({
            **inputs,
            "income": summarize_income(records),
            "payroll": summarize_payroll(entries),
            **result.model_dump(),
        }, indent=2))
        return

    click.echo(f"CORPORATE TAX ESTIMATE {inputs['year']}")
    click.echo("=" * 50)
    click.echo(f"  {'Client income (CAD)':<24} ${result.total_income:>12,.2f}  ({len(records)} record(s))")
    click.echo(f"  {'Owner salary (gross)':<24}-${result.total_owner_salary:>12,.2f}  ({len(entries)} payment(s))")
    click.echo(f"  {'Taxable income':<24} ${result.taxable_income:>12,.2f}")
    click.echo("  " + "-" * 38)
    click.echo(f"  {'Federal':<24} ${result.federal_corporate_tax:>12,.2f}")
    click.echo(f"  {'Provincial':<24} ${result.provincial_corporate_tax:>12,.2f}")
    click.echo(f"  {'Total':<24} ${result.total_corporate_tax:>12,.2f}")
