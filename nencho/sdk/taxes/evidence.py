"""Deduction amounts derived from raw evidence.

These run upstream of reconcile(): they turn premiums paid, loan balances
and head counts into the figures that populate Deductions. Each function
is pure and floors intermediate products to whole yen.
"""

import math


LIFE_INSURANCE_CATEGORY_CAP = 40_000
LIFE_INSURANCE_TOTAL_CAP = 120_000

EARTHQUAKE_PREMIUM_CAP = 50_000
LONG_TERM_DAMAGE_CAP = 15_000
EARTHQUAKE_TOTAL_CAP = 50_000

HOUSING_LOAN_RATE = 0.01
HOUSING_LOAN_MAX_CREDIT = 400_000

DISABILITY_GENERAL = 270_000
DISABILITY_SPECIAL = 400_000
DISABILITY_SPECIAL_LIVING_TOGETHER = 750_000

# (income_up_to, deduction) - first match wins, 0 above the last tier
BASIC_DEDUCTION_SCHEDULE = (
    (24_000_000, 480_000),
    (24_500_000, 320_000),
    (25_000_000, 160_000),
)

RECONSTRUCTION_TAX_RATE = 0.021


def _life_insurance_category(premium: int) -> int:
    """New-system (post-2012 contracts) deduction for one premium category."""
    if premium <= 20_000:
        return premium
    if premium <= 40_000:
        return math.floor(premium * 0.5 + 10_000)
    if premium <= 80_000:
        return math.floor(premium * 0.25 + 20_000)
    return LIFE_INSURANCE_CATEGORY_CAP


def calc_life_insurance_deduction(general: int = 0, medical: int = 0, pension: int = 0) -> int:
    """Life insurance deduction across general, medical-care and pension premiums.

    Each category is capped at 40,000 and the total at 120,000.
    """
    total = (
        _life_insurance_category(general)
        + _life_insurance_category(medical)
        + _life_insurance_category(pension)
    )
    return min(total, LIFE_INSURANCE_TOTAL_CAP)


def calc_earthquake_insurance_deduction(earthquake: int = 0, long_term_damage: int = 0) -> int:
    """Earthquake insurance deduction, including legacy long-term damage policies."""
    earthquake_part = min(earthquake, EARTHQUAKE_PREMIUM_CAP)

    if long_term_damage <= 10_000:
        long_term_part = long_term_damage
    elif long_term_damage <= 20_000:
        long_term_part = math.floor(long_term_damage * 0.5 + 5_000)
    else:
        long_term_part = LONG_TERM_DAMAGE_CAP

    return min(earthquake_part + long_term_part, EARTHQUAKE_TOTAL_CAP)


def calc_housing_loan_credit(
    loan_balance: int,
    rate: float = HOUSING_LOAN_RATE,
    max_credit: int = HOUSING_LOAN_MAX_CREDIT,
) -> int:
    """Housing loan credit from the year-end loan balance.

    The credit is not limited by tax owed here; reconcile() floors the
    final tax at zero.
    """
    return min(math.floor(loan_balance * rate), max_credit)


def calc_disability_deduction(general: int = 0, special: int = 0, special_living_together: int = 0) -> int:
    return (
        general * DISABILITY_GENERAL
        + special * DISABILITY_SPECIAL
        + special_living_together * DISABILITY_SPECIAL_LIVING_TOGETHER
    )


def calc_social_insurance_deduction(
    health: int = 0,
    pension: int = 0,
    employment: int = 0,
    national_pension: int = 0,
    other: int = 0,
) -> int:
    """Social insurance premiums are deductible in full."""
    return health + pension + employment + national_pension + other


def calc_small_business_mutual_aid_deduction(ideco: int = 0, mutual_aid: int = 0) -> int:
    return ideco + mutual_aid


def calc_personal_status_deduction(widow: int = 0, single_parent: int = 0, working_student: int = 0) -> int:
    """Widow, single parent and working student amounts, taken as declared."""
    return widow + single_parent + working_student


def calc_basic_deduction(income: int) -> int:
    """Basic deduction, phased out above 24,000,000 of income."""
    for upper, amount in BASIC_DEDUCTION_SCHEDULE:
        if income <= upper:
            return amount
    return 0


def calc_reconstruction_tax(base_tax: int) -> int:
    """Special income tax for reconstruction (復興特別所得税), 2.1% of base tax."""
    return math.floor(base_tax * RECONSTRUCTION_TAX_RATE)
