"""Configuration management for Owner Pay.

settings.json holds the user-entered values the calculator is driven by:
   - annual_income: projected annual income used to pick tax rates
   - province: two-letter province code
   - tax_year: year of the tax_rules/*.yaml tables to apply

The calculator never reads these itself. Callers (CLI, MCP server) resolve
them here and pass them in as explicit parameters.

Config directory resolution:
1. OWNER_PAY_CONFIG_PATH environment variable (if set)
2. ~/.config/owner-pay/ (XDG_CONFIG_HOME fallback)
"""

import json
import math
import os
from pathlib import Path
from typing import Any, Optional, Tuple

from .taxes import DEFAULT_PROVINCE, DEFAULT_TAX_YEAR, get_available_years


APP_NAME = "owner-pay"
SETTINGS_FILENAME = "settings.json"

DEFAULT_ANNUAL_INCOME = 50000.0

SETTING_DEFAULTS = {
    "annual_income": DEFAULT_ANNUAL_INCOME,
    "province": DEFAULT_PROVINCE,
    "tax_year": DEFAULT_TAX_YEAR,
}


class SettingValidationError(ValueError):
    """Raised when a setting key or value is not acceptable."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. OWNER_PAY_CONFIG_PATH environment variable
    2. ~/.config/owner-pay/ (XDG_CONFIG_HOME)
    """
    env_path = os.environ.get("OWNER_PAY_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)

    Raises:
        SettingValidationError: The file is not a JSON object
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        try:
            settings = json.load(f)
        except json.JSONDecodeError as e:
            raise SettingValidationError(f"{settings_file} is not valid JSON: {e}") from e

    if not isinstance(settings, dict):
        raise SettingValidationError(f"{settings_file} must contain a JSON object")
    return settings


def save_settings(settings: dict) -> Path:
    """Save settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    settings = load_settings()
    return settings.get(key, default)


def validate_setting(key: str, value: Any) -> Any:
    """Validate and normalize a setting value.

    Returns:
        The normalized value (float income, upper-case province, string year)

    Raises:
        SettingValidationError: Unknown key or invalid value
    """
    if key not in SETTING_DEFAULTS:
        raise SettingValidationError(
            f"Unknown setting '{key}'. Valid settings: {', '.join(SETTING_DEFAULTS)}"
        )

    if key == "annual_income":
        try:
            income = float(value)
        except (TypeError, ValueError):
            raise SettingValidationError(f"annual_income must be a number, got '{value}'")
        if not math.isfinite(income):
            raise SettingValidationError(f"annual_income must be a finite number, got '{value}'")
        if income < 0:
            raise SettingValidationError(f"annual_income must be >= 0, got {income}")
        return income

    if key == "province":
        code = str(value).strip().upper()
        if len(code) != 2 or not code.isalpha():
            raise SettingValidationError(f"province must be a 2-letter code, got '{value}'")
        return code

    # tax_year
    year = str(value).strip()
    available = get_available_years()
    if year not in available:
        raise SettingValidationError(
            f"No tax rules for year '{year}'. Available: {', '.join(available)}"
        )
    return year


def set_setting(key: str, value: Any) -> Tuple[Any, Path]:
    """Validate and set a setting value in settings.json.

    Returns:
        Tuple of (stored value, path to the saved settings file)
    """
    normalized = validate_setting(key, value)
    settings = load_settings()
    settings[key] = normalized
    return normalized, save_settings(settings)


def unset_setting(key: str) -> bool:
    """Remove a setting, reverting it to its default.

    Returns:
        True if the key was present
    """
    settings = load_settings()
    if key not in settings:
        return False
    del settings[key]
    save_settings(settings)
    return True


def get_calculation_defaults() -> dict:
    """Effective annual_income, province and tax_year (settings over defaults).

    Stored values are validated the same way 'settings set' validates them,
    so a hand-edited settings.json fails here rather than inside a calculation.

    Raises:
        SettingValidationError: A stored value is invalid
    """
    settings = load_settings()
    defaults = {}
    for key, default in SETTING_DEFAULTS.items():
        if key not in settings:
            defaults[key] = default
            continue
        try:
            defaults[key] = validate_setting(key, settings[key])
        except SettingValidationError as e:
            raise SettingValidationError(f"Invalid value in {get_settings_path()}: {e}") from e
    return defaults


def resolve_calculation_inputs(
    annual_income: Optional[float] = None,
    province: Optional[str] = None,
    year: Optional[str] = None,
) -> dict:
    """Fill unspecified calculation inputs from settings.json.

    Explicit values are passed through as given; the calculator validates
    income and falls back to Ontario for provinces without a table.

    Returns:
        Dict with annual_income (float), province (upper-case) and year (str)
    """
    defaults = get_calculation_defaults()
    return {
        "annual_income": float(annual_income if annual_income is not None else defaults["annual_income"]),
        "province": (province or defaults["province"]).strip().upper(),
        "year": str(year or defaults["tax_year"]),
    }
