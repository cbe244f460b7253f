"""Core numeric calculators."""

from control_workbench.core.errors import (
    ComputationError,
    InvalidParameter,
    NumericDegenerate,
    ComputationFailure,
)
from control_workbench.core.complex_number import ComplexNumber
from control_workbench.core.pid_calculator import PIDState, PIDResult, calculate_pid
from control_workbench.core.polynomial import is_degenerate
from control_workbench.core.transfer_function import evaluate, step_response, MAX_STEP_SAMPLES
from control_workbench.core.frequency_response import (
    FrequencyPoint,
    frequency_response,
    frequency_grid,
)

__all__ = [
    "ComputationError",
    "InvalidParameter",
    "NumericDegenerate",
    "ComputationFailure",
    "ComplexNumber",
    "PIDState",
    "PIDResult",
    "calculate_pid",
    "is_degenerate",
    "evaluate",
    "step_response",
    "MAX_STEP_SAMPLES",
    "FrequencyPoint",
    "frequency_response",
    "frequency_grid",
]
