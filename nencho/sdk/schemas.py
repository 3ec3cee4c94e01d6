"""Pydantic schemas for reconciliation inputs and results.

All schemas use extra='forbid' so typos in input files cause clear errors
rather than silently dropping a deduction. Models are frozen: a record is
built once per calculation and never mutated.

Monetary fields are whole yen. Non-negativity is NOT enforced here; see
nencho.sdk.validation for the checked entry point.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Reconciliation Input
# =============================================================================


class Deductions(BaseModel):
    """Itemized deduction amounts for one employee-year."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    basic: int = Field(default=0, description="Basic deduction (基礎控除)")
    spouse: int = Field(default=0, description="Spouse deduction (配偶者控除)")
    spouse_special: int = Field(default=0, description="Spouse special deduction (配偶者特別控除)")
    dependent: int = Field(default=0, description="Dependent deduction (扶養控除)")
    dependent_count: int = Field(default=0, description="Number of dependents (informational only)")
    life_insurance: int = Field(default=0, description="Life insurance deduction, capped at 120,000")
    earthquake_insurance: int = Field(default=0, description="Earthquake insurance deduction, capped at 50,000")
    social_insurance: int = Field(default=0, description="Social insurance premiums (uncapped)")
    housing_loan: int = Field(
        default=0,
        description=(
            "Housing loan special credit (住宅借入金等特別控除). "
            "Applied against computed tax, not against income."
        ),
    )
    medical_expense: int = Field(default=0, description="Medical expense deduction, capped at 2,000,000")
    other: int = Field(default=0, description="Other income deductions (widow, single parent, etc.)")


class ReconciliationInput(BaseModel):
    """Annual totals for one employee, as supplied by the records layer."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    employee_id: str = Field(..., description="Employee identifier")
    year: int = Field(..., description="Tax year")
    annual_gross_pay: int = Field(..., description="Annual base compensation")
    annual_bonuses: int = Field(default=0, description="Annual bonus compensation")
    withheld_income_tax: int = Field(..., description="Income tax withheld during the year")
    deductions: Deductions = Field(default_factory=Deductions)

    @property
    def total_income(self) -> int:
        """Base plus bonus compensation."""
        return self.annual_gross_pay + self.annual_bonuses


# =============================================================================
# Reconciliation Result
# =============================================================================


class ReconciliationDetails(BaseModel):
    """Raw figures behind the adjustment."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    calculated_tax: int = Field(..., description="Final annual tax that was compared to withholding")
    withheld_tax: int = Field(..., description="Tax withheld during the year")
    difference: int = Field(..., description="withheld_tax - calculated_tax (signed)")
    tax_before_credit: int = Field(..., description="Progressive tax before the housing loan credit")
    housing_loan_credit_applied: int = Field(
        ..., description="Portion of the housing loan credit actually consumed"
    )


class ReconciliationResult(BaseModel):
    """Outcome of one year-end adjustment.

    adjustment_amount is always a magnitude; is_refund gives the direction.
    A zero difference is reported as is_refund=False.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    employee_id: str
    year: int
    total_income: int = Field(..., description="Base plus bonus compensation")
    employment_income_deduction: int
    income_after_employment_deduction: int
    total_deductions: int = Field(..., description="Aggregated income deductions after caps")
    taxable_income: int = Field(..., description="Taxable income, floored at zero")
    annual_tax_amount: int = Field(..., description="Tax after housing loan credit, floored at zero")
    adjustment_amount: int = Field(..., description="Refund or additional payment magnitude")
    is_refund: bool
    details: ReconciliationDetails


# =============================================================================
# Standalone utility schemas
# =============================================================================


class DependentCounts(BaseModel):
    """Dependent head counts by category."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    general: int = Field(default=0, description="General dependents (一般扶養親族)")
    specified: int = Field(default=0, description="Specified dependents aged 19-22 (特定扶養親族)")
    elderly: int = Field(default=0, description="Elderly dependents aged 70+ (老人扶養親族)")
    elderly_living: int = Field(
        default=0, description="Co-residing elderly parents (同居老親等)"
    )


class SpouseDeductionResult(BaseModel):
    """Spouse deduction pair. At most one side is non-zero."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    spouse_deduction: int = 0
    spouse_special_deduction: int = 0

    def as_tuple(self) -> tuple[int, int]:
        return (self.spouse_deduction, self.spouse_special_deduction)


class InputIssue(BaseModel):
    """A single rejected input value."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    field: str = Field(..., description="Dotted field path (e.g., 'deductions.basic')")
    value: Optional[Union[int, float]] = Field(default=None, description="Offending value")
    message: str


# =============================================================================
# Deduction evidence (raw declarations submitted by the employee)
# =============================================================================


class LifeInsurancePremiums(BaseModel):
    """Annual premiums paid under new-system life insurance contracts."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    general: int = Field(default=0, description="General life insurance premiums (一般生命保険料)")
    medical: int = Field(default=0, description="Medical-care insurance premiums (介護医療保険料)")
    pension: int = Field(default=0, description="Individual pension premiums (個人年金保険料)")


class EarthquakePremiums(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    earthquake: int = Field(default=0, description="Earthquake insurance premiums (地震保険料)")
    long_term_damage: int = Field(default=0, description="Legacy long-term damage premiums (旧長期損害保険料)")


class SpouseDeclaration(BaseModel):
    """Spouse details from the spouse deduction declaration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    income: int = Field(default=0, description="Spouse's income (所得), not gross pay")
    age: int = Field(default=0, description="Spouse's age at year end; 70+ qualifies as elderly")


class DisabilityCounts(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    general: int = Field(default=0, description="General disability (一般障害者)")
    special: int = Field(default=0, description="Special disability (特別障害者)")
    special_living_together: int = Field(
        default=0, description="Co-residing special disability (同居特別障害者)"
    )


class SocialInsurancePremiums(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    health: int = Field(default=0, description="Health insurance (健康保険)")
    pension: int = Field(default=0, description="Employees' pension (厚生年金)")
    employment: int = Field(default=0, description="Employment insurance (雇用保険)")
    national_pension: int = Field(default=0, description="National pension (国民年金)")
    other: int = Field(default=0, description="Other social insurance premiums")


class MutualAidContributions(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    ideco: int = Field(default=0, description="iDeCo contributions")
    mutual_aid: int = Field(default=0, description="Small business mutual aid (小規模企業共済)")


class HousingLoanDeclaration(BaseModel):
    """Year-end housing loan balance and the credit terms that apply to it."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    loan_balance: int = Field(..., description="Loan balance at year end")
    rate: float = Field(default=0.01, description="Credit rate applied to the balance")
    max_credit: int = Field(default=400_000, description="Annual credit ceiling")


class PersonalStatusDeductions(BaseModel):
    """Widow, single parent and working student amounts, as declared."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    widow: int = Field(default=0, description="Widow deduction (寡婦控除)")
    single_parent: int = Field(default=0, description="Single parent deduction (ひとり親控除)")
    working_student: int = Field(default=0, description="Working student deduction (勤労学生控除)")


class DeductionEvidence(BaseModel):
    """Everything needed to derive Deductions for one employee-year.

    Omitted sections contribute nothing. spouse=None means no spouse.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    spouse: Optional[SpouseDeclaration] = None
    dependents: DependentCounts = Field(default_factory=DependentCounts)
    disability: DisabilityCounts = Field(default_factory=DisabilityCounts)
    social_insurance: SocialInsurancePremiums = Field(default_factory=SocialInsurancePremiums)
    life_insurance: LifeInsurancePremiums = Field(default_factory=LifeInsurancePremiums)
    earthquake_insurance: EarthquakePremiums = Field(default_factory=EarthquakePremiums)
    mutual_aid: MutualAidContributions = Field(default_factory=MutualAidContributions)
    housing_loan: Optional[HousingLoanDeclaration] = None
    medical_expense: int = Field(default=0, description="Medical expense deduction, as computed by the employee")
    personal_status: PersonalStatusDeductions = Field(default_factory=PersonalStatusDeductions)


class EvidenceInput(BaseModel):
    """Annual totals with raw evidence in place of precomputed deductions."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    employee_id: str = Field(..., description="Employee identifier")
    year: int = Field(..., description="Tax year")
    annual_gross_pay: int = Field(..., description="Annual base compensation")
    annual_bonuses: int = Field(default=0, description="Annual bonus compensation")
    withheld_income_tax: int = Field(..., description="Income tax withheld during the year")
    evidence: DeductionEvidence = Field(default_factory=DeductionEvidence)

    @property
    def total_income(self) -> int:
        return self.annual_gross_pay + self.annual_bonuses
