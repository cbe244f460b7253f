"""
Control system analysis utilities using python-control library.
Provides reference frequency responses, poles and stability checks for
the coefficient lists used by the workbench blocks.
"""

from typing import Dict, Any, Optional, Sequence, Tuple
import numpy as np
import control as ct

from control_workbench.core.polynomial import as_coefficients


class ControlSystemAnalyzer:
    """Analyze block transfer functions using python-control library."""

    @staticmethod
    def transfer_function(
        numerator: Sequence[float],
        denominator: Sequence[float],
        dt: Optional[float] = None
    ) -> ct.TransferFunction:
        """
        Build a transfer function from coefficient lists.

        Args:
            numerator: Coefficients, highest power first
            denominator: Coefficients, highest power first
            dt: Sample time for a discrete system, None for continuous
        """
        num = as_coefficients(numerator, "numerator")
        den = as_coefficients(denominator, "denominator")
        if dt is None:
            return ct.TransferFunction(num, den)
        return ct.TransferFunction(num, den, dt)

    @staticmethod
    def bode_data(
        numerator: Sequence[float],
        denominator: Sequence[float],
        frequencies_hz: Sequence[float]
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Continuous-time Bode data at the given frequencies.

        Returns:
            (frequencies in Hz, magnitude in dB, phase in degrees)
        """
        sys = ControlSystemAnalyzer.transfer_function(numerator, denominator)
        freqs = np.asarray(frequencies_hz, dtype=float)
        omega = 2.0 * np.pi * freqs
        response = sys(1j * omega)
        response = np.asarray(response, dtype=complex).reshape(-1)
        with np.errstate(divide='ignore'):
            mag_db = 20 * np.log10(np.abs(response))
        phase_deg = np.angle(response, deg=True)
        return freqs, mag_db, phase_deg

    @staticmethod
    def poles(
        numerator: Sequence[float],
        denominator: Sequence[float],
        dt: Optional[float] = None
    ) -> np.ndarray:
        """Poles of the system."""
        return ct.poles(ControlSystemAnalyzer.transfer_function(numerator, denominator, dt))

    @staticmethod
    def is_stable(
        numerator: Sequence[float],
        denominator: Sequence[float],
        dt: Optional[float] = None
    ) -> bool:
        """
        Check stability.

        Continuous: all poles in the left half-plane.
        Discrete: all poles inside the unit circle.
        """
        poles = ControlSystemAnalyzer.poles(numerator, denominator, dt)
        if dt is None:
            return bool(np.all(np.real(poles) < 0))
        return bool(np.all(np.abs(poles) < 1))

    @staticmethod
    def dc_gain(
        numerator: Sequence[float],
        denominator: Sequence[float],
        dt: Optional[float] = None
    ) -> float:
        """DC gain of the system."""
        return float(np.real(ct.dcgain(
            ControlSystemAnalyzer.transfer_function(numerator, denominator, dt)
        )))

    @staticmethod
    def summary(
        numerator: Sequence[float],
        denominator: Sequence[float],
        dt: Optional[float] = None
    ) -> Dict[str, Any]:
        """Poles, stability and DC gain in one dictionary."""
        analyzer = ControlSystemAnalyzer
        return {
            'poles': analyzer.poles(numerator, denominator, dt),
            'is_stable': analyzer.is_stable(numerator, denominator, dt),
            'dc_gain': analyzer.dc_gain(numerator, denominator, dt),
        }
