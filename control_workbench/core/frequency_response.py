"""
Frequency-response analysis.

Evaluates the numerator and denominator polynomials at s = j*2*pi*f for
each requested frequency. This is the continuous-domain substitution; it
is not reconciled with the discrete recursion in ``transfer_function``.
"""

from typing import Dict, Any, List, Optional, Sequence
from dataclasses import dataclass
import math

import numpy as np

from control_workbench.core.complex_number import ComplexNumber
from control_workbench.core.errors import InvalidParameter, NumericDegenerate
from control_workbench.core.polynomial import as_coefficients, evaluate_polynomial
from control_workbench.utils.validators import validate_positive, validate_sequence


@dataclass(frozen=True)
class FrequencyPoint:
    """Response at a single frequency."""
    frequency: float
    magnitude_db: float
    phase_deg: float
    error: Optional[str] = None

    @property
    def degenerate(self) -> bool:
        """True when the denominator vanished at this frequency."""
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'frequency': self.frequency,
            'magnitude_db': self.magnitude_db,
            'phase_deg': self.phase_deg,
        }
        if self.error is not None:
            data['error'] = self.error
        return data


def _magnitude_db(magnitude: float) -> float:
    if magnitude == 0:
        return -math.inf
    return 20.0 * math.log10(magnitude)


def evaluate_at(
    numerator: Sequence[float],
    denominator: Sequence[float],
    frequency: float
) -> FrequencyPoint:
    """
    Evaluate N(s)/D(s) at s = j*2*pi*frequency.

    A denominator of zero magnitude yields a point with +inf magnitude,
    NaN phase and an error message instead of raising.
    """
    s = ComplexNumber(0.0, 2.0 * math.pi * frequency)
    num = evaluate_polynomial(numerator, s)
    den = evaluate_polynomial(denominator, s)

    try:
        quotient = num.divide(den)
    except NumericDegenerate as e:
        return FrequencyPoint(
            frequency=frequency,
            magnitude_db=math.inf,
            phase_deg=math.nan,
            error=f"{e} at frequency {frequency} Hz"
        )

    return FrequencyPoint(
        frequency=frequency,
        magnitude_db=_magnitude_db(quotient.magnitude),
        phase_deg=math.degrees(quotient.argument)
    )


def frequency_response(
    numerator: Sequence[float],
    denominator: Sequence[float],
    frequencies: Sequence[float]
) -> List[FrequencyPoint]:
    """
    Sweep the transfer function over a set of frequencies.

    Args:
        numerator: Coefficients, index 0 = highest power of s
        denominator: Coefficients, index 0 = highest power of s
        frequencies: Frequencies in Hz

    Returns:
        One FrequencyPoint per requested frequency, in request order.
        Frequencies where the denominator vanishes are reported per point;
        the sweep is never aborted.

    Raises:
        InvalidParameter: If a coefficient sequence is empty or a value is
            not finite
    """
    b = as_coefficients(numerator, "numerator")
    a = as_coefficients(denominator, "denominator")
    freqs = validate_sequence(frequencies, "frequencies")

    return [evaluate_at(b, a, float(f)) for f in freqs]


def frequency_grid(f_min: float, f_max: float, num_points: int = 100) -> np.ndarray:
    """
    Logarithmically spaced sweep frequencies.

    Args:
        f_min: Lowest frequency in Hz (> 0)
        f_max: Highest frequency in Hz (> f_min)
        num_points: Number of frequencies (>= 2)

    Returns:
        Array of frequencies in Hz
    """
    f_min = validate_positive(f_min, "f_min")
    f_max = validate_positive(f_max, "f_max")
    if f_max <= f_min:
        raise InvalidParameter(f"f_max must be greater than f_min, got {f_min}..{f_max}")
    if int(num_points) != num_points or num_points < 2:
        raise InvalidParameter(f"num_points must be an integer >= 2, got {num_points}")

    return np.logspace(np.log10(f_min), np.log10(f_max), int(num_points))
