"""Input validation for the checked reconciliation entry point."""

from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel

from .schemas import (
    DependentCounts,
    EvidenceInput,
    InputIssue,
    ReconciliationInput,
    ReconciliationResult,
)


class InvalidInputError(ValueError):
    """Raised when reconciliation input contains negative amounts or counts."""

    def __init__(self, issues: list[InputIssue]):
        self.issues = issues
        detail = "; ".join(f"{i.field}: {i.message}" for i in issues)
        super().__init__(f"Invalid reconciliation input: {detail}")


@dataclass
class ReconciliationOutcome:
    """Result of reconcile_checked()."""

    ok: bool
    result: Optional[ReconciliationResult] = None
    issues: list[InputIssue] = field(default_factory=list)

    def unwrap(self) -> ReconciliationResult:
        """Return the result, or raise InvalidInputError if input was rejected."""
        if not self.ok:
            raise InvalidInputError(self.issues)
        return self.result


_MONEY_FIELDS = ("annual_gross_pay", "annual_bonuses", "withheld_income_tax")


def _negative(path: str, value: int) -> InputIssue:
    return InputIssue(field=path, value=value, message=f"must be non-negative, got {value}")


def validate_reconciliation_input(params: ReconciliationInput) -> list[InputIssue]:
    """Check every amount and count for negativity.

    A negative total income always has a negative base or bonus behind it,
    so it is reported through that component rather than a second time.

    Returns:
        List of issues (empty if valid)
    """
    issues = []

    for name in _MONEY_FIELDS:
        value = getattr(params, name)
        if value < 0:
            issues.append(_negative(name, value))

    for name, value in params.deductions:
        if value < 0:
            issues.append(_negative(f"deductions.{name}", value))

    return issues


def validate_dependent_counts(counts: DependentCounts) -> list[InputIssue]:
    return [_negative(f"dependents.{name}", value) for name, value in counts if value < 0]


def _negative_fields(model: BaseModel, prefix: str) -> list[InputIssue]:
    issues = []
    for name, value in model:
        path = f"{prefix}.{name}"
        if isinstance(value, BaseModel):
            issues.extend(_negative_fields(value, path))
        elif isinstance(value, bool) or value is None:
            continue
        elif value < 0:
            issues.append(_negative(path, value))
    return issues


def validate_evidence_input(declaration: EvidenceInput) -> list[InputIssue]:
    """Check pay, withholding and every evidence value for negativity.

    Evidence is checked before any calculator runs: a negative premium in
    one category could otherwise hide behind a positive one in the derived
    total.
    """
    issues = [
        _negative(name, getattr(declaration, name))
        for name in _MONEY_FIELDS
        if getattr(declaration, name) < 0
    ]
    issues.extend(_negative_fields(declaration.evidence, "evidence"))
    return issues
