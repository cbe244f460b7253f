"""
Polynomial coefficient helpers shared by the recursion and the
frequency-response analyzer.
"""

from typing import Sequence, Tuple
import logging

import numpy as np

from control_workbench.core.complex_number import ComplexNumber
from control_workbench.utils.validators import validate_coefficients

logger = logging.getLogger(__name__)


def as_coefficients(values: Sequence[float], name: str) -> np.ndarray:
    """
    Validate and convert a coefficient sequence.

    Args:
        values: Coefficients (non-empty, finite)
        name: Parameter name for error messages

    Returns:
        Coefficients as a float array
    """
    return validate_coefficients(values, name)


def is_degenerate(coefficients: Sequence[float]) -> bool:
    """True when the leading coefficient is exactly zero."""
    return len(coefficients) == 0 or float(coefficients[0]) == 0.0


def normalize_leading(coefficients: np.ndarray, name: str = "denominator") -> Tuple[np.ndarray, bool]:
    """
    Apply the degeneracy policy to a leading coefficient.

    A leading coefficient of exactly zero is replaced by 1.

    Args:
        coefficients: Validated coefficient array
        name: Name used in the log message

    Returns:
        Tuple of (coefficients with policy applied, whether it was applied)
    """
    if not is_degenerate(coefficients):
        return coefficients, False

    logger.warning(f"Leading {name} coefficient is zero; treating it as 1")
    adjusted = np.array(coefficients, dtype=float, copy=True)
    adjusted[0] = 1.0
    return adjusted, True


def evaluate_polynomial(coefficients: Sequence[float], s: ComplexNumber) -> ComplexNumber:
    """
    Evaluate P(s) = sum(c[i] * s**(k - i)), c[0] being the highest power.

    Powers are formed by repeated complex multiplication.
    """
    degree = len(coefficients) - 1
    total = ComplexNumber(0.0, 0.0)
    for i, coeff in enumerate(coefficients):
        total = total + s.power(degree - i).scale(float(coeff))
    return total
