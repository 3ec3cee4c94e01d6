"""Derive Deductions from raw evidence.

An EvidenceInput carries what the employee actually declared (premiums,
head counts, spouse income and age, loan balance). build_deductions() runs
the evidence calculators and fills in every Deductions field, so the
result feeds reconcile() exactly like a precomputed ReconciliationInput.

Basic, spouse and spouse special deductions are income-dependent. They are
evaluated against employment income: total pay minus the employment income
deduction.

Fields with no dedicated Deductions slot (disability, small business mutual
aid, widow / single parent / working student) are summed into `other`.
"""

import logging
from typing import Union

from .schemas import (
    DeductionEvidence,
    Deductions,
    EvidenceInput,
    ReconciliationInput,
    SpouseDeductionResult,
)
from .taxes import (
    calc_basic_deduction,
    calc_dependent_deduction,
    calc_disability_deduction,
    calc_earthquake_insurance_deduction,
    calc_employment_income_deduction,
    calc_housing_loan_credit,
    calc_life_insurance_deduction,
    calc_personal_status_deduction,
    calc_small_business_mutual_aid_deduction,
    calc_social_insurance_deduction,
    calc_spouse_deduction,
)
from .taxes.deductions import SPOUSE_ELDERLY_AGE

logger = logging.getLogger(__name__)

InputRecord = Union[ReconciliationInput, EvidenceInput]


def calc_employment_income(total_income: int) -> int:
    """Total pay minus the employment income deduction (給与所得)."""
    return total_income - calc_employment_income_deduction(total_income)


def build_deductions(evidence: DeductionEvidence, total_income: int) -> Deductions:
    """Compute every deduction from EVIDENCE for an employee paid TOTAL_INCOME.

    Args:
        evidence: Declarations for one employee-year
        total_income: Base plus bonus compensation

    Returns:
        Deductions ready for reconcile()
    """
    employment_income = calc_employment_income(total_income)

    if evidence.spouse is None:
        spouse = SpouseDeductionResult()
    else:
        spouse = calc_spouse_deduction(
            employment_income,
            evidence.spouse.income,
            elderly=evidence.spouse.age >= SPOUSE_ELDERLY_AGE,
        )

    housing_loan = 0
    if evidence.housing_loan is not None:
        loan = evidence.housing_loan
        housing_loan = calc_housing_loan_credit(loan.loan_balance, loan.rate, loan.max_credit)

    dependents = evidence.dependents
    other = (
        calc_disability_deduction(**evidence.disability.model_dump())
        + calc_small_business_mutual_aid_deduction(**evidence.mutual_aid.model_dump())
        + calc_personal_status_deduction(**evidence.personal_status.model_dump())
    )

    deductions = Deductions(
        basic=calc_basic_deduction(employment_income),
        spouse=spouse.spouse_deduction,
        spouse_special=spouse.spouse_special_deduction,
        dependent=calc_dependent_deduction(dependents),
        dependent_count=sum(count for _, count in dependents),
        life_insurance=calc_life_insurance_deduction(**evidence.life_insurance.model_dump()),
        earthquake_insurance=calc_earthquake_insurance_deduction(
            **evidence.earthquake_insurance.model_dump()
        ),
        social_insurance=calc_social_insurance_deduction(**evidence.social_insurance.model_dump()),
        housing_loan=housing_loan,
        medical_expense=evidence.medical_expense,
        other=other,
    )
    logger.debug(f"Deductions from evidence at employment income {employment_income}: {deductions}")
    return deductions


def build_reconciliation_input(declaration: EvidenceInput) -> ReconciliationInput:
    """Replace the evidence on DECLARATION with derived Deductions."""
    return ReconciliationInput(
        employee_id=declaration.employee_id,
        year=declaration.year,
        annual_gross_pay=declaration.annual_gross_pay,
        annual_bonuses=declaration.annual_bonuses,
        withheld_income_tax=declaration.withheld_income_tax,
        deductions=build_deductions(declaration.evidence, declaration.total_income),
    )


def to_reconciliation_input(record: InputRecord) -> ReconciliationInput:
    if isinstance(record, EvidenceInput):
        return build_reconciliation_input(record)
    return record
