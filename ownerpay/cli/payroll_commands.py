"""Payroll ledger command."""

import json
from pathlib import Path

import click

from ownerpay.sdk import (
    gross_up_payments,
    load_payments_csv,
    payroll_to_csv_string,
    summarize_payroll,
    write_payroll_csv,
)

from .common import income_option, load_rules_or_fail, province_option, resolve_inputs, year_option


def _format_payroll_text(entries, totals, inputs) -> str:
    """Format payroll entries as an ASCII table."""
    lines = []
    lines.append(f"OWNER SALARY PAYROLL ({inputs['province']}, {inputs['year']}, "
                 f"annual income ${inputs['annual_income']:,.0f})")
    lines.append("=" * 78)
    lines.append(f"  {'Date':<10} {'Net':>11} {'Gross':>11} {'Federal':>10} "
                 f"{'Provincial':>10} {'CPP':>10}  Notes")
    lines.append("  " + "-" * 74)
    for e in entries:
        lines.append(
            f"  {e.date.isoformat():<10} {e.net_amount:>11,.2f} {e.amount:>11,.2f} "
            f"{e.federal_tax:>10,.2f} {e.provincial_tax:>10,.2f} {e.cpp_payment:>10,.2f}  {e.notes}"
        )
    lines.append("  " + "-" * 74)
    lines.append(
        f"  {'Total':<10} {totals['net']:>11,.2f} {totals['gross']:>11,.2f} "
        f"{totals['federal_tax']:>10,.2f} {totals['provincial_tax']:>10,.2f} "
        f"{totals['cpp_payment']:>10,.2f}"
    )
    lines.append(f"  {totals['count']} payment(s), total deductions ${totals['total_deductions']:,.2f}")
    return "\n".join(lines)


@click.command("payroll")
@click.argument("payments_file", type=click.Path(exists=True, dir_okay=False))
@income_option
@province_option
@year_option
@click.option("--format", "output_format", type=click.Choice(["text", "json", "csv"]), default="text",
              help="Output format (default: text)")
@click.option("--output", "-o", type=click.Path(dir_okay=False),
              help="Write CSV to this file instead of stdout")
def payroll(payments_file, income, province, year, output_format, output):
    """Gross up owner salary payments from PAYMENTS_FILE.

    PAYMENTS_FILE is a CSV with columns date,net_amount[,notes]. Each net
    (take-home) amount is grossed up using rates for the projected annual
    income.

    \b
    Output formats:
      --format=text  ASCII table with totals (default)
      --format=json  Entries and totals
      --format=csv   Date,Type,Amount,Federal Tax,Provincial Tax,CPP Payment,Notes
    """
    inputs = resolve_inputs(income, province, year)
    rules = load_rules_or_fail(inputs["year"])

    try:
        payments = load_payments_csv(payments_file)
        entries = gross_up_payments(payments, inputs["annual_income"], inputs["province"], rules=rules)
    except (FileNotFoundError, ValueError) as e:
        # TaxCalculationError is a ValueError
        raise click.ClickException(str(e))

    if output:
        path = write_payroll_csv(entries, Path(output))
        click.echo(f"Wrote {len(entries)} payment(s) to {path}")
        return

    if output_format == "csv":
        click.echo(payroll_to_csv_string(entries), nl=False)
    elif output_format == "json":
        click.echo(json.dumps({
            **inputs,
            "entries": [e.model_dump(mode="json") for e in entries],
            "totals": summarize_payroll(entries),
        }, indent=2))
    else:
        click.echo(_format_payroll_text(entries, summarize_payroll(entries), inputs))
