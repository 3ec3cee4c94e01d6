"""Tests for the composed year-end adjustment.

Covers the reference refund scenario, the housing loan credit floor,
refund/additional-payment classification and the checked entry point.
"""

import pytest

from nencho.sdk import (
    InvalidInputError,
    ReconciliationInput,
    reconcile,
    reconcile_checked,
    reconcile_many,
    validate_dependent_counts,
    validate_reconciliation_input,
    DependentCounts,
)
from nencho.sdk.taxes import apply_housing_loan_credit, resolve_adjustment


def make_input(data: dict, **overrides) -> ReconciliationInput:
    """Build an input from fixture data with top-level or deduction overrides."""
    data = dict(data)
    deductions = dict(data["deductions"])
    for key, value in overrides.items():
        if key in deductions:
            deductions[key] = value
        else:
            data[key] = value
    data["deductions"] = deductions
    return ReconciliationInput.model_validate(data)


class TestScenario:
    """7,000,000 income, 700,000 withheld, life insurance over cap."""

    def test_every_step(self, scenario_data):
        result = reconcile(make_input(scenario_data))

        assert result.employee_id == "emp-001"
        assert result.year == 2025
        assert result.total_income == 7_000_000
        assert result.employment_income_deduction == 1_800_000
        assert result.income_after_employment_deduction == 5_200_000
        assert result.total_deductions == 1_980_000
        assert result.taxable_income == 3_220_000
        assert result.annual_tax_amount == 224_500
        assert result.is_refund is True
        assert result.adjustment_amount == 475_500

    def test_details(self, scenario_data):
        details = reconcile(make_input(scenario_data)).details

        assert details.calculated_tax == 224_500
        assert details.withheld_tax == 700_000
        assert details.difference == 475_500
        assert details.tax_before_credit == 224_500
        assert details.housing_loan_credit_applied == 0

    def test_idempotent(self, scenario_data):
        params = make_input(scenario_data)
        assert reconcile(params) == reconcile(params)
        assert reconcile(params).model_dump() == reconcile(params).model_dump()


class TestHousingLoanCredit:

    def test_credit_reduces_tax(self, scenario_data):
        result = reconcile(make_input(scenario_data, housing_loan=100_000))

        assert result.annual_tax_amount == 124_500
        assert result.details.tax_before_credit == 224_500
        assert result.details.housing_loan_credit_applied == 100_000
        assert result.adjustment_amount == 575_500
        assert result.is_refund is True

    def test_credit_larger_than_tax_floors_at_zero(self, scenario_data):
        result = reconcile(make_input(scenario_data, housing_loan=300_000))

        assert result.annual_tax_amount == 0
        assert result.details.housing_loan_credit_applied == 224_500
        # Refund is limited to what was withheld
        assert result.adjustment_amount == 700_000

    def test_apply_credit_directly(self):
        assert apply_housing_loan_credit(100, 30) == 70
        assert apply_housing_loan_credit(100, 500) == 0


class TestAdjustmentDirection:

    def test_additional_payment(self, scenario_data):
        result = reconcile(make_input(scenario_data, withheld_income_tax=100_000))

        assert result.is_refund is False
        assert result.adjustment_amount == 124_500
        assert result.details.difference == -124_500

    def test_balanced_is_not_a_refund(self, scenario_data):
        result = reconcile(make_input(scenario_data, withheld_income_tax=224_500))

        assert result.is_refund is False
        assert result.adjustment_amount == 0
        assert result.details.difference == 0

    def test_resolve_adjustment(self):
        assert resolve_adjustment(10, 3) == (7, 7, True)
        assert resolve_adjustment(3, 10) == (-7, 7, False)
        assert resolve_adjustment(5, 5) == (0, 0, False)


class TestNonNegativity:

    def test_deductions_exceeding_income_floor_taxable_at_zero(self, scenario_data):
        result = reconcile(make_input(
            scenario_data,
            annual_gross_pay=1_000_000,
            annual_bonuses=0,
            withheld_income_tax=30_000,
            social_insurance=150_000,
        ))

        assert result.income_after_employment_deduction == 450_000
        assert result.taxable_income == 0
        assert result.annual_tax_amount == 0
        assert result.is_refund is True
        assert result.adjustment_amount == 30_000

    @pytest.mark.parametrize("gross", [0, 1_500_000, 4_000_000, 12_000_000, 60_000_000])
    def test_taxable_and_tax_never_negative(self, scenario_data, gross):
        result = reconcile(make_input(scenario_data, annual_gross_pay=gross, housing_loan=5_000_000))
        assert result.taxable_income >= 0
        assert result.annual_tax_amount >= 0
        assert result.adjustment_amount >= 0


class TestPermissivePath:

    def test_negative_deduction_flows_through(self, scenario_data):
        """No validation on the default path; negative amounts raise taxable income."""
        result = reconcile(make_input(scenario_data, other=-1_000_000))
        assert result.total_deductions == 980_000
        assert result.taxable_income == 4_220_000


class TestCheckedEntryPoint:

    def test_valid_input_matches_permissive_path(self, scenario_data):
        params = make_input(scenario_data)
        outcome = reconcile_checked(params)

        assert outcome.ok is True
        assert outcome.issues == []
        assert outcome.unwrap() == reconcile(params)

    def test_negative_deduction_rejected(self, scenario_data):
        outcome = reconcile_checked(make_input(scenario_data, basic=-1))

        assert outcome.ok is False
        assert outcome.result is None
        assert [i.field for i in outcome.issues] == ["deductions.basic"]
        assert outcome.issues[0].value == -1

    def test_unwrap_raises(self, scenario_data):
        outcome = reconcile_checked(make_input(scenario_data, withheld_income_tax=-5))

        with pytest.raises(InvalidInputError, match="withheld_income_tax") as exc_info:
            outcome.unwrap()
        assert exc_info.value.issues == outcome.issues

    def test_negative_total_income_reported_once(self, scenario_data):
        issues = validate_reconciliation_input(make_input(
            scenario_data, annual_gross_pay=-2_000_000, annual_bonuses=0,
        ))
        assert [i.field for i in issues] == ["annual_gross_pay"]

    def test_negative_total_with_positive_bonus(self, scenario_data):
        issues = validate_reconciliation_input(make_input(
            scenario_data, annual_gross_pay=-2_000_000, annual_bonuses=1_000_000,
        ))
        assert [i.field for i in issues] == ["annual_gross_pay"]

    def test_negative_component_with_positive_total(self, scenario_data):
        issues = validate_reconciliation_input(make_input(scenario_data, annual_bonuses=-100))
        assert [i.field for i in issues] == ["annual_bonuses"]

    def test_dependent_counts(self):
        assert validate_dependent_counts(DependentCounts(general=2)) == []
        issues = validate_dependent_counts(DependentCounts(general=1, elderly=-1))
        assert [i.field for i in issues] == ["dependents.elderly"]


class TestBatch:

    def test_results_in_input_order(self, scenario_data):
        inputs = [
            make_input(scenario_data, employee_id="a"),
            make_input(scenario_data, employee_id="b", withheld_income_tax=0),
        ]
        results = reconcile_many(inputs)

        assert [r.employee_id for r in results] == ["a", "b"]
        assert results[0].is_refund is True
        assert results[1].is_refund is False
        assert results[1].adjustment_amount == 224_500

    def test_empty_batch(self):
        assert reconcile_many([]) == []
