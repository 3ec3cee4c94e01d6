"""Nencho - Year-end tax reconciliation (年末調整) engine."""

__version__ = "0.1.0"
