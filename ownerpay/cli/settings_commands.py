"""Settings CLI commands for Owner Pay.

Manages settings.json - projected annual income, province and tax year.
"""

import click

from ownerpay.sdk import (
    SETTING_DEFAULTS,
    SettingValidationError,
    get_settings_path,
    load_settings,
    set_setting,
    unset_setting,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    \b
    Available settings:
    - annual_income: projected annual income used to pick tax rates
    - province: two-letter province code (no table -> Ontario)
    - tax_year: year of the tax rules to apply
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their effective values."""
    settings_path = get_settings_path()
    try:
        current = load_settings()
    except SettingValidationError as e:
        raise click.ClickException(str(e))

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    click.echo("Effective values:")
    for key, default in SETTING_DEFAULTS.items():
        if key in current:
            click.echo(f"  {key}: {current[key]}")
        else:
            click.echo(f"  {key}: {default} (default)")


@settings.command("set")
@click.argument("key", type=click.Choice(list(SETTING_DEFAULTS)))
@click.argument("value")
def settings_set(key, value):
    """Set KEY to VALUE.

    Examples:
        owner-pay settings set annual_income 85000
        owner-pay settings set province BC
    """
    try:
        stored, path = set_setting(key, value)
    except SettingValidationError as e:
        raise click.ClickException(str(e))

    click.echo(f"Set {key}: {stored}")
    click.echo(f"Saved to: {path}")


@settings.command("unset")
@click.argument("key", type=click.Choice(list(SETTING_DEFAULTS)))
def settings_unset(key):
    """Clear KEY, reverting it to its default."""
    try:
        removed = unset_setting(key)
    except SettingValidationError as e:
        raise click.ClickException(str(e))

    if removed:
        click.echo(f"Cleared {key}. Now using default: {SETTING_DEFAULTS[key]}")
    else:
        click.echo(f"{key} was not set.")
