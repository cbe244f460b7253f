"""Utility functions and helpers."""

from control_workbench.utils.validators import (
    validate_finite,
    validate_positive,
    validate_non_negative,
    validate_sequence,
    validate_coefficients,
)

__all__ = [
    "validate_finite",
    "validate_positive",
    "validate_non_negative",
    "validate_sequence",
    "validate_coefficients",
]
