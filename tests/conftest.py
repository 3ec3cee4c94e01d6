"""Shared fixtures for reconciliation tests."""

import pytest


@pytest.fixture
def scenario_data():
    """Employee with 7,000,000 income and 700,000 withheld (refund case)."""
    return {
        "employee_id": "emp-001",
        "year": 2025,
        "annual_gross_pay": 6_000_000,
        "annual_bonuses": 1_000_000,
        "withheld_income_tax": 700_000,
        "deductions": {
            "basic": 480_000,
            "spouse": 380_000,
            "spouse_special": 0,
            "dependent": 0,
            "dependent_count": 0,
            "life_insurance": 150_000,
            "earthquake_insurance": 0,
            "social_insurance": 1_000_000,
            "housing_loan": 0,
            "medical_expense": 0,
            "other": 0,
        },
    }


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point settings at an empty temporary config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("NENCHO_CONFIG_PATH", str(config_dir))
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    return config_dir


@pytest.fixture
def evidence_data():
    """Same pay as scenario_data, with deductions declared as raw evidence.

    Employment income is 5,200,000. Derived deductions total 2,643,000 and
    the housing loan credit is 100,000.
    """
    return {
        "employee_id": "emp-101",
        "year": 2025,
        "annual_gross_pay": 6_000_000,
        "annual_bonuses": 1_000_000,
        "withheld_income_tax": 700_000,
        "evidence": {
            "spouse": {"income": 0, "age": 45},
            "dependents": {"general": 1},
            "social_insurance": {"health": 350_000, "pension": 640_000, "employment": 42_000},
            "life_insurance": {"general": 100_000, "medical": 30_000},
            "earthquake_insurance": {"earthquake": 30_000},
            "mutual_aid": {"ideco": 276_000},
            "housing_loan": {"loan_balance": 10_000_000},
        },
    }
