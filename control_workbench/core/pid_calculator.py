"""
Stateless PID calculation.

The calculator maps gains and the carried error state to a control output.
It owns no state: the caller persists ``PIDResult.next_state()`` and feeds
it back on the following step.
"""

from typing import Dict, Any
from dataclasses import dataclass
import math

from control_workbench.core.errors import NumericDegenerate
from control_workbench.utils.validators import validate_finite, validate_positive


@dataclass(frozen=True)
class PIDState:
    """Error state carried between successive PID calculations of one run."""
    previous_error: float = 0.0
    integral: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            'previous_error': self.previous_error,
            'integral': self.integral,
        }


@dataclass(frozen=True)
class PIDResult:
    """Result of a single PID calculation."""
    output: float
    error: float
    integral: float
    derivative: float

    def next_state(self) -> PIDState:
        """State to pass into the next calculation."""
        return PIDState(previous_error=self.error, integral=self.integral)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'output': self.output,
            'error': self.error,
            'integral': self.integral,
            'derivative': self.derivative,
        }


def calculate_pid(
    kp: float,
    ki: float,
    kd: float,
    setpoint: float,
    process_value: float,
    dt: float,
    previous_error: float = 0.0,
    integral: float = 0.0
) -> PIDResult:
    """
    Compute one PID step.

    error = setpoint - process_value
    integral' = integral + error * dt
    derivative = (error - previous_error) / dt
    output = kp * error + ki * integral' + kd * derivative

    Args:
        kp: Proportional gain
        ki: Integral gain
        kd: Derivative gain
        setpoint: Desired value
        process_value: Measured value
        dt: Time step in seconds, must be positive
        previous_error: Error of the previous step
        integral: Integral accumulator of the previous step

    Returns:
        PIDResult with output, error, updated integral and derivative

    Raises:
        InvalidParameter: If dt <= 0 or any input is not finite
        NumericDegenerate: If the result overflows to a non-finite value

    Example:
        >>> calculate_pid(1.0, 0.0, 0.0, 1.0, 0.5, 0.01).output
        0.5
    """
    kp = validate_finite(kp, "kp")
    ki = validate_finite(ki, "ki")
    kd = validate_finite(kd, "kd")
    setpoint = validate_finite(setpoint, "setpoint")
    process_value = validate_finite(process_value, "process_value")
    dt = validate_positive(dt, "dt")
    previous_error = validate_finite(previous_error, "previous_error")
    integral = validate_finite(integral, "integral")

    error = setpoint - process_value
    new_integral = integral + error * dt
    derivative = (error - previous_error) / dt
    output = kp * error + ki * new_integral + kd * derivative

    for name, value in (('error', error), ('integral', new_integral),
                        ('derivative', derivative), ('output', output)):
        if not math.isfinite(value):
            raise NumericDegenerate(f"PID {name} is not finite ({value})")

    return PIDResult(
        output=output,
        error=error,
        integral=new_integral,
        derivative=derivative
    )
