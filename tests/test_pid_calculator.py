"""
Unit tests for the PID calculator.
"""

import math
import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from control_workbench.core.pid_calculator import PIDState, PIDResult, calculate_pid
from control_workbench.core.errors import InvalidParameter, NumericDegenerate


class TestCalculatePID:
    """Test suite for calculate_pid."""

    def test_proportional_reference_values(self):
        """Reference case: P-only with a fresh state."""
        result = calculate_pid(
            kp=1.0, ki=0.0, kd=0.0,
            setpoint=1.0, process_value=0.5, dt=0.01,
            previous_error=0.0, integral=0.0
        )
        assert result.output == pytest.approx(0.5)
        assert result.error == pytest.approx(0.5)
        assert result.integral == pytest.approx(0.005)
        assert result.derivative == pytest.approx(50.0)

    def test_all_terms(self):
        """Output combines all three terms with the updated integral."""
        # error = 2, integral' = 1 + 2*0.1 = 1.2, derivative = (2-1)/0.1 = 10
        result = calculate_pid(
            kp=2.0, ki=0.5, kd=0.1,
            setpoint=5.0, process_value=3.0, dt=0.1,
            previous_error=1.0, integral=1.0
        )
        assert result.error == pytest.approx(2.0)
        assert result.integral == pytest.approx(1.2)
        assert result.derivative == pytest.approx(10.0)
        assert result.output == pytest.approx(2.0 * 2.0 + 0.5 * 1.2 + 0.1 * 10.0)

    def test_negative_error(self):
        """Process value above setpoint gives negative error."""
        result = calculate_pid(1.0, 0.0, 0.0, setpoint=0.0, process_value=2.0, dt=0.5)
        assert result.error == -2.0
        assert result.output == -2.0

    @pytest.mark.parametrize("dt", [0.0, -0.01])
    def test_non_positive_dt_rejected(self, dt):
        """dt <= 0 is rejected before computation."""
        with pytest.raises(InvalidParameter):
            calculate_pid(1.0, 0.0, 0.0, 1.0, 0.5, dt)

    @pytest.mark.parametrize("name", ["kp", "setpoint", "process_value", "integral"])
    def test_non_finite_input_rejected(self, name):
        """NaN/inf inputs are rejected."""
        kwargs = dict(kp=1.0, ki=0.0, kd=0.0, setpoint=1.0, process_value=0.5, dt=0.01)
        kwargs[name] = math.nan if name != "kp" else math.inf
        with pytest.raises(InvalidParameter):
            calculate_pid(**kwargs)

    def test_non_numeric_rejected(self):
        """Strings are not silently coerced."""
        with pytest.raises(InvalidParameter):
            calculate_pid("1", 0.0, 0.0, 1.0, 0.5, 0.01)

    def test_overflow_reported(self):
        """A result that overflows never escapes as infinity."""
        with pytest.raises(NumericDegenerate):
            calculate_pid(1e308, 0.0, 0.0, setpoint=1e308, process_value=-1e308, dt=1.0)

    def test_pure_function(self):
        """Identical inputs always yield identical outputs."""
        args = (1.5, 0.3, 0.2, 2.0, 1.0, 0.01, 0.4, 0.7)
        assert calculate_pid(*args) == calculate_pid(*args)

    def test_output_finite_over_range(self):
        """Output stays finite for valid dt and finite inputs."""
        rng = np.random.default_rng(42)
        for _ in range(200):
            kp, ki, kd = rng.uniform(-100, 100, size=3)
            setpoint, pv, prev_err, integral = rng.uniform(-1e3, 1e3, size=4)
            dt = rng.uniform(1e-6, 10.0)
            result = calculate_pid(kp, ki, kd, setpoint, pv, dt, prev_err, integral)
            assert math.isfinite(result.output)
            assert math.isfinite(result.derivative)

    def test_state_carried_between_calls(self):
        """Feeding back next_state accumulates the integral."""
        state = PIDState()
        for _ in range(10):
            result = calculate_pid(
                0.0, 1.0, 0.0, setpoint=10.0, process_value=0.0, dt=0.1,
                previous_error=state.previous_error, integral=state.integral
            )
            state = result.next_state()

        assert state.integral == pytest.approx(10.0)
        assert state.previous_error == 10.0
        # Constant error: derivative is zero after the first step
        assert result.derivative == 0.0


class TestPIDResult:
    """Test suite for PIDResult and PIDState."""

    def test_next_state(self):
        result = PIDResult(output=1.0, error=0.5, integral=0.2, derivative=3.0)
        assert result.next_state() == PIDState(previous_error=0.5, integral=0.2)

    def test_to_dict(self):
        result = PIDResult(output=1.0, error=0.5, integral=0.2, derivative=3.0)
        assert result.to_dict() == {
            'output': 1.0, 'error': 0.5, 'integral': 0.2, 'derivative': 3.0
        }

    def test_default_state(self):
        assert PIDState().to_dict() == {'previous_error': 0.0, 'integral': 0.0}

    def test_immutable(self):
        state = PIDState()
        with pytest.raises(Exception):
            state.integral = 1.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
