"""
Validation utilities for parameter checking.
Provides robust input validation with clear error messages.
"""

from typing import Any, Sequence
import math
import numbers

import numpy as np

from control_workbench.core.errors import InvalidParameter


def validate_finite(value: Any, name: str) -> float:
    """
    Validate that a value is a finite real number.

    Args:
        value: The value to validate
        name: Parameter name for error messages

    Returns:
        The validated value as float

    Raises:
        InvalidParameter: If value is not a finite real number
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameter(f"{name} must be a real number, got {type(value).__name__}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidParameter(f"{name} must be finite, got {value}")
    return value


def validate_positive(value: Any, name: str) -> float:
    """
    Validate that a value is finite and strictly positive.

    Args:
        value: The value to validate
        name: Parameter name for error messages

    Returns:
        The validated value

    Raises:
        InvalidParameter: If value is not positive
    """
    value = validate_finite(value, name)
    if value <= 0:
        raise InvalidParameter(f"{name} must be positive, got {value}")
    return value


def validate_non_negative(value: Any, name: str) -> float:
    """
    Validate that a value is finite and non-negative (>= 0).

    Args:
        value: The value to validate
        name: Parameter name for error messages

    Returns:
        The validated value

    Raises:
        InvalidParameter: If value is negative
    """
    value = validate_finite(value, name)
    if value < 0:
        raise InvalidParameter(f"{name} must be non-negative, got {value}")
    return value


def validate_sequence(
    value: Any,
    name: str,
    min_length: int = 0
) -> np.ndarray:
    """
    Validate a one-dimensional sequence of finite real numbers.

    Args:
        value: The sequence to validate
        name: Parameter name for error messages
        min_length: Minimum required length

    Returns:
        The sequence as a float numpy array

    Raises:
        InvalidParameter: If value is not a sequence of finite numbers
            or is too short
    """
    if isinstance(value, (str, bytes)) or isinstance(value, numbers.Number):
        raise InvalidParameter(f"{name} must be a sequence of numbers, got {type(value).__name__}")
    try:
        length = len(value)
    except TypeError:
        raise InvalidParameter(
            f"{name} must be array-like (have length), got {type(value).__name__}"
        ) from None

    if length < min_length:
        raise InvalidParameter(f"{name} must have at least {min_length} elements, got {length}")

    for i, item in enumerate(value):
        if isinstance(item, bool) or not isinstance(item, numbers.Real):
            raise InvalidParameter(
                f"{name}[{i}] must be a real number, got {type(item).__name__}"
            )

    arr = np.asarray(value, dtype=float).reshape(-1)
    if not np.all(np.isfinite(arr)):
        raise InvalidParameter(f"{name} must contain only finite values")
    return arr


def validate_coefficients(value: Sequence[float], name: str) -> np.ndarray:
    """Validate a non-empty polynomial coefficient sequence."""
    return validate_sequence(value, name, min_length=1)
