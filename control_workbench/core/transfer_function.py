"""
Discrete transfer-function evaluation.

Coefficient arrays are taken as already defining a digital recursion:

    y[i] = (sum_j b[j] x[i-j] - sum_{j>=1} a[j] y[i-j]) / a0

with zero initial conditions. Uses scipy.signal.lfilter for the
direct-form recursion.
"""

from typing import Sequence, Tuple, Union
import math

import numpy as np
from numpy.typing import ArrayLike
from scipy import signal

from control_workbench.core.polynomial import as_coefficients, normalize_leading
from control_workbench.utils.validators import validate_finite, validate_sequence
from control_workbench.core.errors import InvalidParameter


def evaluate(
    numerator: Sequence[float],
    denominator: Sequence[float],
    input_signal: ArrayLike,
    return_degenerate: bool = False
) -> Union[np.ndarray, Tuple[np.ndarray, bool]]:
    """
    Run the causal IIR recursion over an input sequence.

    Args:
        numerator: b[0..m], b[0] multiplies the current input sample
        denominator: a[0..n], a[0] scales the current output sample;
            a zero a[0] is treated as 1
        input_signal: x[0..N-1]
        return_degenerate: Also return whether a zero a[0] was replaced

    Returns:
        y[0..N-1], same length as the input, or (y, degenerate) when
        ``return_degenerate`` is set

    Raises:
        InvalidParameter: If a coefficient sequence is empty or any value
            is not finite
    """
    b = as_coefficients(numerator, "numerator")
    a = as_coefficients(denominator, "denominator")
    x = validate_sequence(input_signal, "input")

    a, degenerate = normalize_leading(a, "denominator")

    if len(x) == 0:
        y = np.zeros(0)
    else:
        y = signal.lfilter(b, a, x)

    if return_degenerate:
        return y, degenerate
    return y


# Largest step response that will be allocated
MAX_STEP_SAMPLES = 10_000_000


def step_input_length(duration: float, sample_time: float) -> int:
    """
    Number of samples in a step response: floor(duration / sample_time).

    Raises:
        InvalidParameter: If the count is not finite or exceeds MAX_STEP_SAMPLES
    """
    ratio = duration / sample_time
    if not math.isfinite(ratio) or ratio > MAX_STEP_SAMPLES:
        raise InvalidParameter(
            f"duration / sample_time = {ratio} exceeds the maximum of "
            f"{MAX_STEP_SAMPLES} samples"
        )
    return int(math.floor(ratio))


def step_response(
    numerator: Sequence[float],
    denominator: Sequence[float],
    amplitude: float,
    duration: float,
    sample_time: float,
    return_degenerate: bool = False
) -> Union[np.ndarray, Tuple[np.ndarray, bool]]:
    """
    Response of the recursion to a constant input.

    Args:
        numerator: Numerator coefficients
        denominator: Denominator coefficients
        amplitude: Step amplitude
        duration: Length of the response in seconds
        sample_time: Sample time in seconds
        return_degenerate: Also return whether a zero leading denominator
            coefficient was replaced

    Returns:
        Output sequence of floor(duration / sample_time) samples

    Raises:
        InvalidParameter: If duration or sample_time is not positive, or
            the sample count is too large
    """
    amplitude = validate_finite(amplitude, "amplitude")
    duration = validate_finite(duration, "duration")
    sample_time = validate_finite(sample_time, "sample_time")
    if sample_time <= 0:
        raise InvalidParameter(f"sample_time must be positive, got {sample_time}")
    if duration <= 0:
        raise InvalidParameter(f"duration must be positive, got {duration}")

    num_samples = step_input_length(duration, sample_time)
    return evaluate(
        numerator, denominator, np.full(num_samples, amplitude),
        return_degenerate=return_degenerate
    )
