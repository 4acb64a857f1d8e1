"""Shared CLI options and input resolution."""

import click

from ownerpay.sdk import SettingValidationError, load_tax_rules, resolve_calculation_inputs


income_option = click.option("--income", type=float, default=None,
                             help="Projected annual income (default: settings annual_income)")
province_option = click.option("--province", type=str, default=None,
                               help="Two-letter province code (default: settings province)")
year_option = click.option("--year", type=str, default=None,
                           help="Tax rules year (default: settings tax_year)")
format_option = click.option("--format", "output_format", type=click.Choice(["text", "json"]),
                             default="text", help="Output format (default: text)")


def resolve_inputs(income=None, province=None, year=None) -> dict:
    """Fill unspecified calculation inputs from settings.json."""
    try:
        return resolve_calculation_inputs(income, province, year)
    except SettingValidationError as e:
        raise click.ClickException(f"{e}\nFix it with 'owner-pay settings set' or 'owner-pay settings unset'.")


def load_rules_or_fail(year: str):
    """Load tax rules, converting a missing year into a CLI error."""
    try:
        return load_tax_rules(year)
    except FileNotFoundError as e:
        raise click.ClickException(str(e))
