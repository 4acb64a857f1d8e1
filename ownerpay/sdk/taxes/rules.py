"""Tax rules loading from tax_rules/YYYY.yaml."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Tuple

import yaml

from .schemas import TaxBracket, TaxRules

logger = logging.getLogger(__name__)

DEFAULT_TAX_YEAR = "2024"
DEFAULT_PROVINCE = "ON"


def _get_tax_rules_dir() -> Path:
    """Get the tax_rules directory path."""
    package_root = Path(__file__).parent.parent.parent  # taxes -> sdk -> ownerpay
    return package_root / "tax_rules"


def get_available_years() -> List[str]:
    """Get sorted list of available tax rule years (descending)."""
    rules_dir = _get_tax_rules_dir()
    years = [int(p.stem) for p in rules_dir.glob("*.yaml") if p.stem.isdigit()]
    return [str(y) for y in sorted(years, reverse=True)]


@lru_cache(maxsize=None)
def _load_validated_rules(year: str) -> TaxRules:
    config_file = _get_tax_rules_dir() / f"{year}.yaml"
    if not config_file.exists():
        raise FileNotFoundError(f"Tax rules file not found for year {year}: {config_file}")

    with open(config_file, "r") as f:
        raw = yaml.safe_load(f)

    rules = TaxRules.model_validate(raw)
    logger.debug(f"Loaded tax rules {year}: provinces={sorted(rules.provincial)}")
    return rules


def load_tax_rules(year: str = DEFAULT_TAX_YEAR) -> TaxRules:
    """Load and validate tax rules for a specific year from tax_rules/YYYY.yaml.

    The file is parsed once per year. Each caller gets its own copy, so
    changes to one copy never reach another caller's calculations.

    Raises:
        FileNotFoundError: If no rules file exists for the year
        pydantic.ValidationError: If the file breaks the bracket table invariants
    """
    return _load_validated_rules(str(year)).model_copy(deep=True)


def list_provinces(rules: TaxRules) -> List[str]:
    """Province codes with an explicit bracket table."""
    return sorted(rules.provincial)


def get_bracket_table(rules: TaxRules, province: str) -> Tuple[str, Tuple[TaxBracket, ...]]:
    """Resolve a province code to its bracket table.

    Provinces without a table use the default province's table (Ontario).
    This is a deliberate simplification, not an error.

    Returns:
        Tuple of (province code actually applied, bracket table)
    """
    code = (province or "").strip().upper()
    if code in rules.provincial:
        return code, rules.provincial[code]

    fallback = rules.default_province.upper()
    logger.debug(f"No {rules.year} bracket table for province '{province}', using {fallback}")
    return fallback, rules.provincial[fallback]
