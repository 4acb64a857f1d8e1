"""Tests for the MCP server tools.

The tool functions are plain coroutines, so they are awaited directly with
every argument passed explicitly.
"""

import asyncio
import json

import pytest

pytest.importorskip("mcp")

from ownerpay.mcp.server import (  # noqa: E402
    corporate_tax,
    cpp_contribution,
    gross_from_net,
    list_years_resource,
    marginal_tax_rate,
)


@pytest.fixture(autouse=True)
def config_dir(tmp_path, monkeypatch):
    """Isolate settings.json so defaults are the built-in ones."""
    path = tmp_path / "config"
    monkeypatch.setenv("OWNER_PAY_CONFIG_PATH", str(path))
    return path


def run(coro):
    return asyncio.run(coro)


class TestMarginalTaxRate:

    def test_explicit_inputs(self):
        result = run(marginal_tax_rate(annual_income=75000, province="on", year="2024"))

        assert result["federal_rate"] == 0.205
        assert result["provincial_rate"] == 0.0915
        assert result["province"] == "ON"
        assert result["applied_province"] == "ON"

    def test_defaults_from_settings(self, config_dir):
        config_dir.mkdir()
        (config_dir / "settings.json").write_text(json.dumps({"annual_income": 75000, "province": "BC"}))

        result = run(marginal_tax_rate(annual_income=None, province=None, year=None))

        assert result["annual_income"] == 75000
        assert result["applied_province"] == "BC"

    def test_unknown_province_reports_fallback(self):
        result = run(marginal_tax_rate(annual_income=50000, province="QC", year="2024"))

        assert result["province"] == "QC"
        assert result["applied_province"] == "ON"

    def test_negative_income_returns_error(self):
        result = run(marginal_tax_rate(annual_income=-1, province="ON", year="2024"))

        assert result == {"error": "annual_income must be >= 0, got -1.0"}

    def test_unknown_year_returns_error(self):
        result = run(marginal_tax_rate(annual_income=50000, province="ON", year="1999"))

        assert "error" in result
        assert "1999" in result["error"]

    def test_bad_settings_file_returns_error(self, config_dir):
        config_dir.mkdir()
        (config_dir / "settings.json").write_text(json.dumps({"annual_income": "abc"}))

        result = run(marginal_tax_rate(annual_income=None, province=None, year=None))

        assert "annual_income must be a number" in result["error"]


class TestCppContribution:

    def test_self_employed(self):
        result = run(cpp_contribution(income=68500, is_self_employed=True, year="2024"))

        assert result["contribution"] == pytest.approx(65000 * 0.119)
        assert result["year"] == "2024"

    def test_nan_income_returns_error(self):
        result = run(cpp_contribution(income=float("nan"), is_self_employed=True, year="2024"))

        assert "finite" in result["error"]


class TestGrossFromNet:

    def test_scenario(self):
        result = run(gross_from_net(net_amount=1000, annual_income=50000, province="ON", year="2024"))

        assert result["gross_amount"] == pytest.approx(1470.87, abs=0.01)
        assert result["province"] == "ON"
        assert result["year"] == "2024"

    def test_zero_net_returns_error(self):
        result = run(gross_from_net(net_amount=0, annual_income=50000, province="ON", year="2024"))

        assert result == {"error": "net_amount must be > 0, got 0"}


class TestCorporateTax:

    def test_income_less_salary(self):
        result = run(corporate_tax(total_income=100000, total_owner_salary=40000, year="2024"))

        assert result["taxable_income"] == 60000
        assert result["total_corporate_tax"] == pytest.approx(10920)

    def test_negative_income_returns_error(self):
        result = run(corporate_tax(total_income=-5, total_owner_salary=0, year="2024"))

        assert "total_income must be >= 0" in result["error"]


class TestResources:

    def test_years(self):
        assert "2024" in list_years_resource().splitlines()
