"""Year-end adjustment: compose the tax units into one reconciliation.

reconcile() is the permissive path and performs no validation, so stored
results from earlier runs stay reproducible. reconcile_checked() rejects
negative inputs before any bracket lookup runs.
"""

import logging
from typing import Iterable

from .declarations import InputRecord, to_reconciliation_input
from .schemas import (
    EvidenceInput,
    ReconciliationDetails,
    ReconciliationInput,
    ReconciliationResult,
)
from .taxes import (
    aggregate_deductions,
    apply_housing_loan_credit,
    calc_employment_income_deduction,
    calc_progressive_tax,
    resolve_adjustment,
)
from .validation import (
    ReconciliationOutcome,
    validate_evidence_input,
    validate_reconciliation_input,
)

logger = logging.getLogger(__name__)


def reconcile(params: ReconciliationInput) -> ReconciliationResult:
    """Run the year-end adjustment for one employee.

    Steps:
    1. Total income = base + bonus
    2. Employment income deduction (bracket lookup, floored)
    3. Aggregate income deductions (with caps)
    4. Taxable income = max(0, income after deduction - deductions)
    5. Progressive tax (bracket lookup, floored)
    6. Housing loan credit, floored at zero
    7. Refund or additional payment against withheld tax

    Args:
        params: Annual totals and deductions for one employee-year

    Returns:
        ReconciliationResult
    """
    total_income = params.total_income
    employment_deduction = calc_employment_income_deduction(total_income)
    income_after_deduction = total_income - employment_deduction
    logger.debug(
        f"{params.employee_id}/{params.year}: income {total_income} - "
        f"employment deduction {employment_deduction} = {income_after_deduction}"
    )

    total_deductions = aggregate_deductions(params.deductions)
    taxable_income = max(0, income_after_deduction - total_deductions)
    logger.debug(
        f"{params.employee_id}/{params.year}: deductions {total_deductions}, "
        f"taxable {taxable_income}"
    )

    tax_before_credit = calc_progressive_tax(taxable_income)
    final_tax = apply_housing_loan_credit(tax_before_credit, params.deductions.housing_loan)
    adjustment = resolve_adjustment(params.withheld_income_tax, final_tax)
    logger.debug(
        f"{params.employee_id}/{params.year}: tax {tax_before_credit} -> {final_tax} "
        f"after credit, withheld {params.withheld_income_tax}, "
        f"{'refund' if adjustment.is_refund else 'additional payment'} {adjustment.amount}"
    )

    return ReconciliationResult(
        employee_id=params.employee_id,
        year=params.year,
        total_income=total_income,
        employment_income_deduction=employment_deduction,
        income_after_employment_deduction=income_after_deduction,
        total_deductions=total_deductions,
        taxable_income=taxable_income,
        annual_tax_amount=final_tax,
        adjustment_amount=adjustment.amount,
        is_refund=adjustment.is_refund,
        details=ReconciliationDetails(
            calculated_tax=final_tax,
            withheld_tax=params.withheld_income_tax,
            difference=adjustment.difference,
            tax_before_credit=tax_before_credit,
            housing_loan_credit_applied=tax_before_credit - final_tax,
        ),
    )


def reconcile_checked(params: InputRecord) -> ReconciliationOutcome:
    """Validate inputs, then reconcile.

    Accepts precomputed deductions or raw evidence. Evidence is checked
    field by field before deductions are derived from it.

    Returns:
        ReconciliationOutcome with either a result or the rejected fields.
        Call .unwrap() to get the result or raise InvalidInputError.
    """
    if isinstance(params, EvidenceInput):
        issues = validate_evidence_input(params)
    else:
        issues = validate_reconciliation_input(params)
    if issues:
        logger.warning(
            f"{params.employee_id}/{params.year}: rejected "
            f"{', '.join(issue.field for issue in issues)}"
        )
        return ReconciliationOutcome(ok=False, issues=issues)
    return ReconciliationOutcome(ok=True, result=reconcile(to_reconciliation_input(params)))


def reconcile_many(inputs: Iterable[InputRecord]) -> list[ReconciliationResult]:
    """Reconcile a batch of employees. Results are returned in input order.

    Evidence records are converted to Deductions first.
    """
    return [reconcile(to_reconciliation_input(params)) for params in inputs]
