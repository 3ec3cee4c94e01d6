"""Income deduction aggregation and the dependent/spouse statutory utilities.

The spouse calculator replicates the portal's historical rules literally,
including two quirks that are flagged for tax-law review:

- Employee-income adjustments are sequential overwrites, not an else-if
  chain: the last matching threshold wins.
- The spouse special deduction multiplier is 0.33 above 9,000,000 but 0.67
  above 9,500,000, i.e. it phases out less for the higher tier.
"""

import math
from typing import Optional, Sequence

from ..schemas import Deductions, DependentCounts, SpouseDeductionResult


# Statutory caps applied before summation. Over-cap values are truncated.
LIFE_INSURANCE_CAP = 120_000
EARTHQUAKE_INSURANCE_CAP = 50_000
MEDICAL_EXPENSE_CAP = 2_000_000

DEDUCTION_CAPS = {
    "life_insurance": LIFE_INSURANCE_CAP,
    "earthquake_insurance": EARTHQUAKE_INSURANCE_CAP,
    "medical_expense": MEDICAL_EXPENSE_CAP,
}

# Per-person dependent amounts
DEPENDENT_GENERAL = 380_000
DEPENDENT_SPECIFIED = 630_000
DEPENDENT_ELDERLY = 480_000
DEPENDENT_ELDERLY_LIVING = 580_000

# Spouse deduction thresholds
EMPLOYEE_INCOME_LIMIT = 10_000_000
SPOUSE_DEDUCTION_INCOME_LIMIT = 480_000
SPOUSE_SPECIAL_INCOME_LIMIT = 1_330_000
SPOUSE_DEDUCTION_BASE = 380_000
SPOUSE_DEDUCTION_ELDERLY_BASE = 480_000
SPOUSE_ELDERLY_AGE = 70

# (employee_income_over, value) - evaluated in order, last match wins
SPOUSE_DEDUCTION_OVERRIDES = (
    (9_000_000, 260_000),
    (9_500_000, 130_000),
)
SPOUSE_DEDUCTION_ELDERLY_OVERRIDES = (
    (9_000_000, 320_000),
    (9_500_000, 160_000),
)
SPOUSE_SPECIAL_MULTIPLIERS = (
    (9_000_000, 0.33),
    (9_500_000, 0.67),
)

# (spouse_income_up_to, base) - first match wins
SPOUSE_SPECIAL_SCHEDULE = (
    (950_000, 380_000),
    (1_000_000, 360_000),
    (1_050_000, 310_000),
    (1_100_000, 260_000),
    (1_150_000, 210_000),
    (1_200_000, 160_000),
    (1_250_000, 110_000),
    (1_300_000, 60_000),
    (1_330_000, 30_000),
)


def aggregate_deductions(deductions: Deductions) -> int:
    """Sum income deductions, truncating capped categories.

    The housing loan credit is not an income deduction and is excluded.
    dependent_count is informational and excluded.
    """
    return (
        deductions.basic
        + deductions.spouse
        + deductions.spouse_special
        + deductions.dependent
        + min(deductions.life_insurance, LIFE_INSURANCE_CAP)
        + min(deductions.earthquake_insurance, EARTHQUAKE_INSURANCE_CAP)
        + deductions.social_insurance
        + min(deductions.medical_expense, MEDICAL_EXPENSE_CAP)
        + deductions.other
    )


def find_capped_deductions(deductions: Deductions) -> dict[str, tuple[int, int]]:
    """Report capped categories whose value exceeds the cap.

    Returns:
        Dict of field name -> (submitted value, cap). Empty when nothing
        would be truncated by aggregate_deductions().
    """
    capped = {}
    for name, cap in DEDUCTION_CAPS.items():
        value = getattr(deductions, name)
        if value > cap:
            capped[name] = (value, cap)
    return capped


def calc_dependent_deduction(counts: DependentCounts) -> int:
    """Dependent deduction from head counts. No caps, no cross-checks."""
    return (
        counts.general * DEPENDENT_GENERAL
        + counts.specified * DEPENDENT_SPECIFIED
        + counts.elderly * DEPENDENT_ELDERLY
        + counts.elderly_living * DEPENDENT_ELDERLY_LIVING
    )


def _last_matching(income: int, overrides: Sequence[tuple], default=None):
    """Return the value of the last (threshold, value) pair with income > threshold."""
    value = default
    for threshold, candidate in overrides:
        if income > threshold:
            value = candidate
    return value


def _spouse_special_base(spouse_income: int) -> int:
    for upper, amount in SPOUSE_SPECIAL_SCHEDULE:
        if spouse_income <= upper:
            return amount
    return 0


def calc_spouse_deduction(
    employee_income: int,
    spouse_income: int,
    elderly: bool = False,
) -> SpouseDeductionResult:
    """Spouse deduction and spouse special deduction.

    Args:
        employee_income: The employee's own income
        spouse_income: The spouse's income
        elderly: Spouse is 70 or older (老人控除対象配偶者); raises the
            spouse deduction only, never the special deduction

    Returns:
        SpouseDeductionResult; at most one of the two amounts is non-zero.
    """
    if employee_income > EMPLOYEE_INCOME_LIMIT:
        return SpouseDeductionResult()

    if spouse_income <= SPOUSE_DEDUCTION_INCOME_LIMIT:
        if elderly:
            amount = _last_matching(
                employee_income, SPOUSE_DEDUCTION_ELDERLY_OVERRIDES, SPOUSE_DEDUCTION_ELDERLY_BASE
            )
        else:
            amount = _last_matching(employee_income, SPOUSE_DEDUCTION_OVERRIDES, SPOUSE_DEDUCTION_BASE)
        return SpouseDeductionResult(spouse_deduction=amount)

    if spouse_income <= SPOUSE_SPECIAL_INCOME_LIMIT:
        amount = _spouse_special_base(spouse_income)
        multiplier: Optional[float] = _last_matching(employee_income, SPOUSE_SPECIAL_MULTIPLIERS)
        if multiplier is not None:
            amount = math.floor(amount * multiplier)
        return SpouseDeductionResult(spouse_special_deduction=amount)

    return SpouseDeductionResult()
