"""Nencho MCP Server - FastMCP implementation for year-end adjustment tools."""

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field, ValidationError

from nencho.sdk import (
    DeductionEvidence,
    DependentCounts,
    build_deductions,
    calc_dependent_deduction,
    calc_employment_income,
    calc_spouse_deduction,
    input_from_mapping,
    reconcile,
    reconcile_checked,
    to_reconciliation_input,
)
from nencho.sdk.taxes import find_capped_deductions

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("nencho")


# --- Tools ---

@mcp.tool()
async def reconcile_year_end(
    employee: dict[str, Any] = Field(
        description=(
            "Reconciliation input: employee_id, year, annual_gross_pay, annual_bonuses, "
            "withheld_income_tax, and a deductions mapping (basic, spouse, spouse_special, "
            "dependent, dependent_count, life_insurance, earthquake_insurance, social_insurance, "
            "housing_loan, medical_expense, other). Instead of deductions, an evidence mapping "
            "(spouse, dependents, social_insurance, life_insurance, ...) may be given and "
            "deductions are derived from it. Amounts in whole yen."
        ),
    ),
    strict: bool = Field(default=False, description="Reject negative amounts instead of computing with them"),
) -> dict[str, Any]:
    """Run the year-end adjustment for one employee. Returns taxable income, annual tax and refund/additional payment."""
    try:
        record = input_from_mapping(employee)
    except ValidationError as e:
        return {"error": str(e), "result": None}

    params = to_reconciliation_input(record)
    warnings = [
        f"{name} {value} exceeds cap {cap}; {cap} used"
        for name, (value, cap) in find_capped_deductions(params.deductions).items()
    ]

    try:
        if strict:
            outcome = reconcile_checked(record)
            if not outcome.ok:
                return {
                    "error": "Invalid input",
                    "issues": [i.model_dump() for i in outcome.issues],
                    "result": None,
                }
            result = outcome.result
        else:
            result = reconcile(params)
    except Exception as e:
        logger.error(f"Error reconciling {params.employee_id}: {e}")
        return {"error": str(e), "result": None}

    return {"result": result.model_dump(), "warnings": warnings}


@mcp.tool()
async def deductions_from_evidence(
    evidence: dict[str, Any] = Field(
        description=(
            "Raw evidence: spouse {income, age}, dependents {general, specified, elderly, "
            "elderly_living}, disability, social_insurance, life_insurance {general, medical, "
            "pension}, earthquake_insurance, mutual_aid, housing_loan {loan_balance, rate, "
            "max_credit}, medical_expense, personal_status {widow, single_parent, working_student}"
        ),
    ),
    total_income: int = Field(description="Annual base plus bonus compensation in yen"),
) -> dict[str, Any]:
    """Derive every deduction amount from raw evidence for one employee-year."""
    try:
        parsed = DeductionEvidence.model_validate(evidence)
    except ValidationError as e:
        return {"error": str(e), "deductions": None}

    return {
        "employment_income": calc_employment_income(total_income),
        "deductions": build_deductions(parsed, total_income).model_dump(),
    }


@mcp.tool()
async def spouse_deduction(
    employee_income: int = Field(description="The employee's own income in yen"),
    spouse_income: int = Field(description="The spouse's income in yen"),
    elderly: bool = Field(default=False, description="Spouse is 70 or older"),
) -> dict[str, Any]:
    """Compute spouse deduction and spouse special deduction (mutually exclusive)."""
    return calc_spouse_deduction(employee_income, spouse_income, elderly=elderly).model_dump()


@mcp.tool()
async def dependent_deduction(
    general: int = Field(default=0, description="General dependents"),
    specified: int = Field(default=0, description="Specified dependents (age 19-22)"),
    elderly: int = Field(default=0, description="Elderly dependents (age 70+)"),
    elderly_living: int = Field(default=0, description="Co-residing elderly parents"),
) -> dict[str, Any]:
    """Compute the dependent deduction from head counts by category."""
    counts = DependentCounts(
        general=general,
        specified=specified,
        elderly=elderly,
        elderly_living=elderly_living,
    )
    return {"counts": counts.model_dump(), "dependent_deduction": calc_dependent_deduction(counts)}


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
