"""Owner Pay MCP Server - FastMCP implementation for tax calculation tools."""

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from ownerpay.sdk import (
    calculate_corporate_tax,
    calculate_cpp_contribution,
    calculate_gross_from_net,
    calculate_marginal_tax_rate,
    get_available_years,
    get_bracket_table,
    load_tax_rules,
    resolve_calculation_inputs,
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("owner-pay")


# --- Tools ---

@mcp.tool()
async def marginal_tax_rate(
    annual_income: float | None = Field(default=None, description="Projected annual income (default: from settings)"),
    province: str | None = Field(default=None, description="Two-letter province code, e.g. 'ON' (default: from settings)"),
    year: str | None = Field(default=None, description="Tax rules year, e.g. '2024' (default: from settings)"),
) -> dict[str, Any]:
    """Get marginal and effective federal/provincial tax rates for an annual income. Provinces without a table use Ontario."""
    try:
        inputs = resolve_calculation_inputs(annual_income, province, year)
        rules = load_tax_rules(inputs["year"])
        applied, _ = get_bracket_table(rules, inputs["province"])
        result = calculate_marginal_tax_rate(inputs["annual_income"], inputs["province"], rules=rules)
        return {**inputs, "applied_province": applied, **result.model_dump()}

    except Exception as e:
        logger.error(f"Error calculating marginal tax rate: {e}")
        return {"error": str(e)}


@mcp.tool()
async def cpp_contribution(
    income: float = Field(description="Annual income"),
    is_self_employed: bool = Field(default=True, description="Pay both employee and employer portions"),
    year: str | None = Field(default=None, description="Tax rules year (default: from settings)"),
) -> dict[str, Any]:
    """Calculate CPP contribution on pensionable earnings (exemption floor and earnings ceiling applied)."""
    try:
        inputs = resolve_calculation_inputs(None, None, year)
        rules = load_tax_rules(inputs["year"])
        contribution = calculate_cpp_contribution(income, is_self_employed, rules=rules)
        return {
            "income": income,
            "is_self_employed": is_self_employed,
            "year": inputs["year"],
            "contribution": contribution,
        }

    except Exception as e:
        logger.error(f"Error calculating CPP contribution: {e}")
        return {"error": str(e)}


@mcp.tool()
async def gross_from_net(
    net_amount: float = Field(description="Desired take-home amount"),
    annual_income: float | None = Field(default=None, description="Projected annual income (default: from settings)"),
    province: str | None = Field(default=None, description="Two-letter province code (default: from settings)"),
    year: str | None = Field(default=None, description="Tax rules year (default: from settings)"),
) -> dict[str, Any]:
    """Calculate the gross salary needed to take home net_amount, with federal tax, provincial tax and CPP breakdown."""
    try:
        inputs = resolve_calculation_inputs(annual_income, province, year)
        rules = load_tax_rules(inputs["year"])
        result = calculate_gross_from_net(
            net_amount, inputs["annual_income"], inputs["province"], rules=rules
        )
        return {"year": inputs["year"], **result.model_dump()}

    except Exception as e:
        logger.error(f"Error calculating gross from net: {e}")
        return {"error": str(e)}


@mcp.tool()
async def corporate_tax(
    total_income: float = Field(description="Total client income"),
    total_owner_salary: float = Field(description="Total gross owner salary paid"),
    year: str | None = Field(default=None, description="Tax rules year (default: from settings)"),
) -> dict[str, Any]:
    """Estimate small business corporate tax on client income after owner salary."""
    try:
        inputs = resolve_calculation_inputs(None, None, year)
        rules = load_tax_rules(inputs["year"])
        result = calculate_corporate_tax(total_income, total_owner_salary, rules=rules)
        return {"year": inputs["year"], **result.model_dump()}

    except Exception as e:
        logger.error(f"Error calculating corporate tax: {e}")
        return {"error": str(e)}


# --- Resources ---

@mcp.resource("tax-rules://years")
def list_years_resource() -> str:
    """Tax years with bracket tables available."""
    return "\n".join(get_available_years())


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
