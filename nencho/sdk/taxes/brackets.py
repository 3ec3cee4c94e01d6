"""Bracket tables for the employment income deduction and progressive tax.

Both tables are half-open ranges [lower, upper) covering [0, inf) with no
gaps. Tables are validated once at import; a broken table or a lookup miss
raises BracketTableExhaustedError.

Arithmetic is plain float64 followed by math.floor, which reproduces
previously stored results exactly.
"""

import math
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar


class BracketTableExhaustedError(RuntimeError):
    """Raised when a bracket table fails to match an amount.

    Indicates a broken table construction, not bad caller input.
    """
    pass


@dataclass(frozen=True)
class EmploymentDeductionBracket:
    """Employment income deduction tier: amount * rate + offset.

    Flat tiers use rate 0.
    """
    lower: float
    upper: float
    rate: float
    offset: float

    def apply(self, income: float) -> int:
        return math.floor(income * self.rate + self.offset)


@dataclass(frozen=True)
class TaxRateBracket:
    """Progressive tax tier: taxable * rate - subtracted."""
    lower: float
    upper: float
    rate: float
    subtracted: float

    def apply(self, taxable_income: float) -> int:
        return math.floor(taxable_income * self.rate - self.subtracted)


B = TypeVar("B", EmploymentDeductionBracket, TaxRateBracket)


class BracketTable(Generic[B]):
    """Ordered, exhaustive sequence of half-open brackets."""

    def __init__(self, name: str, brackets: Sequence[B]):
        self.name = name
        self.brackets: tuple = tuple(brackets)
        self._check_coverage()

    def _check_coverage(self) -> None:
        if not self.brackets:
            raise BracketTableExhaustedError(f"{self.name}: table is empty")
        if self.brackets[0].lower != 0:
            raise BracketTableExhaustedError(
                f"{self.name}: first bracket starts at {self.brackets[0].lower}, expected 0"
            )
        for prev, cur in zip(self.brackets, self.brackets[1:]):
            if prev.upper != cur.lower:
                raise BracketTableExhaustedError(
                    f"{self.name}: gap or overlap between {prev.upper} and {cur.lower}"
                )
        if self.brackets[-1].upper != math.inf:
            raise BracketTableExhaustedError(
                f"{self.name}: last bracket ends at {self.brackets[-1].upper}, expected inf"
            )

    def lookup(self, amount: float) -> B:
        """Return the bracket with lower <= amount < upper.

        Amounts below zero resolve to the top bracket, as the historical
        find-then-fallback lookup did.

        Raises:
            BracketTableExhaustedError: No bracket matched (e.g. NaN input)
        """
        if amount < self.brackets[0].lower:
            return self.brackets[-1]
        for bracket in self.brackets:
            if bracket.lower <= amount < bracket.upper:
                return bracket
        raise BracketTableExhaustedError(f"{self.name}: no bracket matches {amount!r}")

    def __iter__(self):
        return iter(self.brackets)

    def __len__(self) -> int:
        return len(self.brackets)


# 給与所得控除 (2020 onward)
EMPLOYMENT_INCOME_DEDUCTION_TABLE = BracketTable(
    "employment_income_deduction",
    [
        EmploymentDeductionBracket(0, 1_625_000, 0.0, 550_000),
        EmploymentDeductionBracket(1_625_000, 1_800_000, 0.4, -100_000),
        EmploymentDeductionBracket(1_800_000, 3_600_000, 0.3, 80_000),
        EmploymentDeductionBracket(3_600_000, 6_600_000, 0.2, 440_000),
        EmploymentDeductionBracket(6_600_000, 8_500_000, 0.1, 1_100_000),
        EmploymentDeductionBracket(8_500_000, math.inf, 0.0, 1_950_000),
    ],
)

# 所得税の速算表
TAX_RATE_TABLE = BracketTable(
    "income_tax_rate",
    [
        TaxRateBracket(0, 1_950_000, 0.05, 0),
        TaxRateBracket(1_950_000, 3_300_000, 0.10, 97_500),
        TaxRateBracket(3_300_000, 6_950_000, 0.20, 427_500),
        TaxRateBracket(6_950_000, 9_000_000, 0.23, 636_000),
        TaxRateBracket(9_000_000, 18_000_000, 0.33, 1_536_000),
        TaxRateBracket(18_000_000, 40_000_000, 0.40, 2_796_000),
        TaxRateBracket(40_000_000, math.inf, 0.45, 4_796_000),
    ],
)


def calc_employment_income_deduction(total_income: int) -> int:
    """Employment income deduction for annual gross compensation (floored)."""
    return EMPLOYMENT_INCOME_DEDUCTION_TABLE.lookup(total_income).apply(total_income)


def calc_progressive_tax(taxable_income: int) -> int:
    """Annual income tax for taxable income using the quick-calculation table."""
    return TAX_RATE_TABLE.lookup(taxable_income).apply(taxable_income)
