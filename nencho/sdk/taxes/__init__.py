"""taxes - Year-end adjustment calculation units.

Scope:
- Employment income deduction and progressive tax brackets (brackets.py)
- Income deduction aggregation, dependent and spouse deductions (deductions.py)
- Housing loan credit and refund/additional payment resolution (adjustment.py)
- Deduction amounts from raw evidence: insurance premiums, loan balances,
  disability counts (evidence.py)

Constraints:
- Pure calculation - no I/O, no clock reads, no shared mutable state
- Receives plain integers or frozen schemas, returns integers or frozen schemas
- Bracket tables are module-level constants validated at import

Usage:
    from nencho.sdk.taxes import calc_employment_income_deduction, calc_spouse_deduction

    deduction = calc_employment_income_deduction(7_000_000)   # 1_800_000
    spouse = calc_spouse_deduction(9_600_000, 0)              # (130_000, 0)
"""

from .brackets import (
    BracketTable,
    BracketTableExhaustedError,
    EmploymentDeductionBracket,
    TaxRateBracket,
    EMPLOYMENT_INCOME_DEDUCTION_TABLE,
    TAX_RATE_TABLE,
    calc_employment_income_deduction,
    calc_progressive_tax,
)

from .deductions import (
    aggregate_deductions,
    find_capped_deductions,
    calc_dependent_deduction,
    calc_spouse_deduction,
    DEDUCTION_CAPS,
)

from .adjustment import (
    Adjustment,
    apply_housing_loan_credit,
    resolve_adjustment,
)

from .evidence import (
    calc_life_insurance_deduction,
    calc_earthquake_insurance_deduction,
    calc_housing_loan_credit,
    calc_disability_deduction,
    calc_social_insurance_deduction,
    calc_small_business_mutual_aid_deduction,
    calc_personal_status_deduction,
    calc_basic_deduction,
    calc_reconstruction_tax,
)

__all__ = [
    # Brackets
    "BracketTable",
    "BracketTableExhaustedError",
    "EmploymentDeductionBracket",
    "TaxRateBracket",
    "EMPLOYMENT_INCOME_DEDUCTION_TABLE",
    "TAX_RATE_TABLE",
    "calc_employment_income_deduction",
    "calc_progressive_tax",
    # Deductions
    "aggregate_deductions",
    "find_capped_deductions",
    "calc_dependent_deduction",
    "calc_spouse_deduction",
    "DEDUCTION_CAPS",
    # Adjustment
    "Adjustment",
    "apply_housing_loan_credit",
    "resolve_adjustment",
    # Evidence
    "calc_life_insurance_deduction",
    "calc_earthquake_insurance_deduction",
    "calc_housing_loan_credit",
    "calc_disability_deduction",
    "calc_social_insurance_deduction",
    "calc_small_business_mutual_aid_deduction",
    "calc_personal_status_deduction",
    "calc_basic_deduction",
    "calc_reconstruction_tax",
]
