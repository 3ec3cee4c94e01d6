"""Nencho SDK - Year-end tax reconciliation engine."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    unset_setting,
    get_output_format,
    configure_logging,
    normalize_setting,
    SettingsError,
    KNOWN_SETTINGS,
    SETTING_DEFAULTS,
)

from .schemas import (
    Deductions,
    ReconciliationInput,
    ReconciliationDetails,
    ReconciliationResult,
    DependentCounts,
    SpouseDeductionResult,
    InputIssue,
    DeductionEvidence,
    EvidenceInput,
    LifeInsurancePremiums,
    EarthquakePremiums,
    SpouseDeclaration,
    DisabilityCounts,
    SocialInsurancePremiums,
    MutualAidContributions,
    HousingLoanDeclaration,
    PersonalStatusDeductions,
)

from .declarations import (
    build_deductions,
    build_reconciliation_input,
    calc_employment_income,
    to_reconciliation_input,
    InputRecord,
)

from .reconcile import (
    reconcile,
    reconcile_checked,
    reconcile_many,
)

from .validation import (
    InvalidInputError,
    ReconciliationOutcome,
    validate_reconciliation_input,
    validate_dependent_counts,
    validate_evidence_input,
)

from .inputs import (
    load_inputs,
    parse_inputs,
    input_from_mapping,
    InputFileError,
)

from .taxes import (
    BracketTableExhaustedError,
    calc_dependent_deduction,
    calc_spouse_deduction,
    calc_employment_income_deduction,
    calc_progressive_tax,
)

from . import taxes

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "unset_setting",
    "get_output_format",
    "configure_logging",
    "normalize_setting",
    "SettingsError",
    "KNOWN_SETTINGS",
    "SETTING_DEFAULTS",
    # Schemas
    "Deductions",
    "ReconciliationInput",
    "ReconciliationDetails",
    "ReconciliationResult",
    "DependentCounts",
    "SpouseDeductionResult",
    "InputIssue",
    "DeductionEvidence",
    "EvidenceInput",
    "LifeInsurancePremiums",
    "EarthquakePremiums",
    "SpouseDeclaration",
    "DisabilityCounts",
    "SocialInsurancePremiums",
    "MutualAidContributions",
    "HousingLoanDeclaration",
    "PersonalStatusDeductions",
    # Evidence
    "build_deductions",
    "build_reconciliation_input",
    "calc_employment_income",
    "to_reconciliation_input",
    "InputRecord",
    # Reconciliation
    "reconcile",
    "reconcile_checked",
    "reconcile_many",
    # Validation
    "InvalidInputError",
    "ReconciliationOutcome",
    "validate_reconciliation_input",
    "validate_dependent_counts",
    "validate_evidence_input",
    # Input files
    "load_inputs",
    "parse_inputs",
    "input_from_mapping",
    "InputFileError",
    # Standalone utilities
    "BracketTableExhaustedError",
    "calc_dependent_deduction",
    "calc_spouse_deduction",
    "calc_employment_income_deduction",
    "calc_progressive_tax",
    # Taxes module
    "taxes",
]
