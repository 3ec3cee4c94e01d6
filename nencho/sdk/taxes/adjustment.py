"""Housing loan credit and refund / additional-payment resolution."""

from typing import NamedTuple


class Adjustment(NamedTuple):
    """Signed difference between withholding and final tax.

    difference > 0 means the employee overpaid and is refunded. Zero is
    classified with additional payments (is_refund=False, amount=0).
    """
    difference: int
    amount: int
    is_refund: bool


def apply_housing_loan_credit(tax: int, credit: int) -> int:
    """Final tax after the housing loan credit, floored at zero.

    A credit larger than the tax erases it but never creates a refund.
    """
    return max(0, tax - credit)


def resolve_adjustment(withheld_tax: int, final_tax: int) -> Adjustment:
    difference = withheld_tax - final_tax
    return Adjustment(
        difference=difference,
        amount=abs(difference),
        is_refund=difference > 0,
    )
