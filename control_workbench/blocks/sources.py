"""
Signal sources and the gain block, evaluated directly by the driver.
"""

import math


def step_input(amplitude: float, step_time: float, t: float) -> float:
    """Amplitude once t has reached step_time, zero before."""
    return amplitude if t >= step_time else 0.0


def sine_wave(amplitude: float, frequency: float, phase: float, t: float) -> float:
    """amplitude * sin(2*pi*frequency*t + phase)."""
    return amplitude * math.sin(2.0 * math.pi * frequency * t + phase)


def apply_gain(gain: float, value: float) -> float:
    return gain * value
