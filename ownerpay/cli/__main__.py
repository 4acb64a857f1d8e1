"""Owner Pay CLI - Command-line interface for owner salary tax calculations."""

import json
import logging
import os

import click

from ownerpay import __version__
from ownerpay.sdk import (
    TaxCalculationError,
    calculate_corporate_tax,
    calculate_cpp_contribution,
    calculate_gross_from_net,
    calculate_marginal_tax_rate,
    get_bracket_table,
    list_provinces,
)

from .common import (
    format_option,
    income_option,
    load_rules_or_fail,
    province_option,
    resolve_inputs,
    year_option,
)
from .payroll_commands import payroll as payroll_command
from .records_commands import corporate_estimate as corporate_estimate_command
from .records_commands import expenses as expenses_command
from .records_commands import income as income_command
from .settings_commands import settings as settings_group


def configure_logging() -> None:
    """Configure logging based on LOG_LEVEL environment variable."""
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def _format_rate(rate: float) -> str:
    return f"{rate * 100:.2f}%"


@click.group()
@click.version_option(version=__version__, prog_name="owner-pay")
def cli():
    """Owner Pay - Owner salary tax and gross-up calculations.

    Computes federal/provincial tax rates, CPP contributions and the gross
    salary needed to take home a given net amount.

    Annual income, province and tax year default to settings.json:

    \b
    1. OWNER_PAY_CONFIG_PATH environment variable
    2. ~/.config/owner-pay/settings.json (XDG default)

    Run 'owner-pay settings show' to see the current values.
    """
    pass


cli.add_command(settings_group)
cli.add_command(payroll_command)
cli.add_command(income_command)
cli.add_command(expenses_command)
cli.add_command(corporate_estimate_command)


@cli.command("rates")
@income_option
@province_option
@year_option
@format_option
def rates(income, province, year, output_format):
    """Show marginal and effective tax rates for an annual income.

    Provinces without a bracket table use the Ontario table.
    """
    inputs = resolve_inputs(income, province, year)
    rules = load_rules_or_fail(inputs["year"])
    applied, _ = get_bracket_table(rules, inputs["province"])

    try:
        result = calculate_marginal_tax_rate(inputs["annual_income"], inputs["province"], rules=rules)
    except TaxCalculationError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        payload = {**inputs, "applied_province": applied, **result.model_dump()}
        click.echo(json.dumps(payload, indent=2))
        return

    click.echo(f"TAX RATES FOR ${inputs['annual_income']:,.2f} ({applied}, {inputs['year']})")
    if applied != inputs["province"]:
        click.echo(f"  No table for {inputs['province']}, using {applied}")
    click.echo("=" * 50)
    click.echo(f"  {'':<12} {'Marginal':>12} {'Effective':>12}")
    click.echo(f"  {'Federal':<12} {_format_rate(result.federal_rate):>12} "
               f"{_format_rate(result.effective_federal_rate):>12}")
    click.echo(f"  {'Provincial':<12} {_format_rate(result.provincial_rate):>12} "
               f"{_format_rate(result.effective_provincial_rate):>12}")
    click.echo("  " + "-" * 38)
    click.echo(f"  {'Combined':<12} {_format_rate(result.combined_rate):>12} "
               f"{_format_rate(result.effective_combined_rate):>12}")


@cli.command("cpp")
@click.argument("income", type=float)
@click.option("--employee", is_flag=True, help="Employee portion only (default: self-employed)")
@year_option
@format_option
def cpp(income, employee, year, output_format):
    """Calculate CPP contribution on INCOME.

    Earnings below the basic exemption contribute nothing and earnings above
    the maximum pensionable earnings are not counted.
    """
    inputs = resolve_inputs(year=year)
    rules = load_rules_or_fail(inputs["year"])

    try:
        contribution = calculate_cpp_contribution(income, not employee, rules=rules)
    except TaxCalculationError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps({
            "income": income,
            "is_self_employed": not employee,
            "year": inputs["year"],
            "contribution": contribution,
        }, indent=2))
        return

    label = "employee" if employee else "self-employed"
    click.echo(f"CPP contribution ({label}, {inputs['year']}): ${contribution:,.2f}")


@cli.command("gross-up")
@click.argument("net", type=float)
@income_option
@province_option
@year_option
@format_option
def gross_up(net, income, province, year, output_format):
    """Calculate the gross salary that takes home NET.

    Uses effective rates for the projected annual income plus the flat
    self-employed CPP rate, not the rate of this individual payment.
    """
    inputs = resolve_inputs(income, province, year)
    rules = load_rules_or_fail(inputs["year"])

    try:
        result = calculate_gross_from_net(net, inputs["annual_income"], inputs["province"], rules=rules)
    except TaxCalculationError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(result.model_dump(), indent=2))
        return

    click.echo(f"GROSS-UP FOR NET ${net:,.2f}")
    click.echo(f"(annual income ${result.annual_income:,.2f}, {result.province}, {inputs['year']})")
    click.echo("=" * 50)
    click.echo(f"  {'Gross amount':<24} ${result.gross_amount:>12,.2f}")
    click.echo(f"  {'Federal tax':<24}-${result.federal_tax:>12,.2f}")
    click.echo(f"  {'Provincial tax':<24}-${result.provincial_tax:>12,.2f}")
    click.echo(f"  {'CPP':<24}-${result.cpp_payment:>12,.2f}")
    click.echo("  " + "-" * 38)
    click.echo(f"  {'Net amount':<24} ${result.net_amount:>12,.2f}")
    click.echo(f"  {'Total deductions':<24} ${result.total_deductions:>12,.2f}"
               f"  ({_format_rate(result.total_deduction_rate)})")


@cli.command("brackets")
@province_option
@year_option
@format_option
def brackets(province, year, output_format):
    """Show federal and provincial bracket tables."""
    inputs = resolve_inputs(province=province, year=year)
    rules = load_rules_or_fail(inputs["year"])
    applied, provincial = get_bracket_table(rules, inputs["province"])

    if output_format == "json":
        click.echo(json.dumps({
            "year": rules.year,
            "province": applied,
            "available_provinces": list_provinces(rules),
            "federal": [b.model_dump() for b in rules.federal],
            "provincial": [b.model_dump() for b in provincial],
        }, indent=2))
        return

    for title, table in (("FEDERAL", rules.federal), (f"PROVINCIAL ({applied})", provincial)):
        click.echo(f"{title} BRACKETS {rules.year}")
        click.echo("-" * 40)
        for b in table:
            upper = f"${b.max:>10,.0f}" if b.max is not None else f"{'and up':>11}"
            click.echo(f"  ${b.min:>10,.0f} - {upper}  {_format_rate(b.rate):>8}")
        click.echo()
    click.echo(f"Provinces with tables: {', '.join(list_provinces(rules))} (others use {rules.default_province})")


@cli.command("corporate")
@click.argument("income", type=float)
@click.argument("owner_salary", type=float)
@year_option
@format_option
def corporate(income, owner_salary, year, output_format):
    """Estimate small business corporate tax.

    INCOME is total client income; OWNER_SALARY is total gross owner salary
    paid, which is deducted before tax.
    """
    inputs = resolve_inputs(year=year)
    rules = load_rules_or_fail(inputs["year"])

    try:
        result = calculate_corporate_tax(income, owner_salary, rules=rules)
    except TaxCalculationError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(result.model_dump(), indent=2))
        return

    click.echo(f"CORPORATE TAX {inputs['year']}")
    click.echo("=" * 50)
    click.echo(f"  {'Client income':<24} ${income:>12,.2f}")
    click.echo(f"  {'Owner salary':<24}-${owner_salary:>12,.2f}")
    click.echo(f"  {'Taxable income':<24} ${result.taxable_income:>12,.2f}")
    click.echo("  " + "-" * 38)
    click.echo(f"  {'Federal':<24} ${result.federal_corporate_tax:>12,.2f}")
    click.echo(f"  {'Provincial':<24} ${result.provincial_corporate_tax:>12,.2f}")
    click.echo(f"  {'Total':<24} ${result.total_corporate_tax:>12,.2f}")


def main():
    """Entry point for the CLI."""
    configure_logging()
    cli()


if __name__ == "__main__":
    main()
