"""
Simulation state owned by the driver: clock, per-block time series,
carried PID state and the run generation.
"""

from typing import Dict, Iterator, List, Optional
from dataclasses import dataclass, field

import numpy as np

from control_workbench.core.pid_calculator import PIDState
from control_workbench.utils.validators import validate_positive


class SimulationClock:
    """
    Discrete simulation time.

    Example:
        >>> clock = SimulationClock(sample_time=0.5, duration=1.0)
        >>> clock.advance()
        0.5
        >>> clock.finished
        False
    """

    def __init__(self, sample_time: float, duration: float):
        self._sample_time = validate_positive(sample_time, "sample_time")
        self._duration = validate_positive(duration, "duration")
        self._current_time: float = 0.0

    @property
    def current_time(self) -> float:
        return self._current_time

    @property
    def sample_time(self) -> float:
        return self._sample_time

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def finished(self) -> bool:
        return self._current_time >= self._duration

    def advance(self) -> float:
        """Advance by one sample time and return the new time."""
        self._current_time += self._sample_time
        return self._current_time

    def reset(self) -> None:
        self._current_time = 0.0

    def __repr__(self) -> str:
        return (
            f"SimulationClock(t={self._current_time:.4f}, Ts={self._sample_time}, "
            f"T={self._duration})"
        )


class TimeSeries:
    """Append-only sample sequence of one block."""

    def __init__(self):
        self._values: List[float] = []

    def append(self, value: float) -> None:
        self._values.append(float(value))

    def clear(self) -> None:
        self._values.clear()

    @property
    def values(self) -> List[float]:
        """Copy of the samples."""
        return list(self._values)

    @property
    def last(self) -> Optional[float]:
        return self._values[-1] if self._values else None

    def to_array(self) -> np.ndarray:
        return np.asarray(self._values, dtype=float)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[float]:
        return iter(list(self._values))

    def __repr__(self) -> str:
        return f"TimeSeries(n={len(self._values)})"


@dataclass
class SimulationContext:
    """
    Everything a run carries between steps.

    The driver is the only writer; calculators receive values copied out of
    the context and never see the context itself.
    """
    clock: SimulationClock
    series: Dict[str, TimeSeries] = field(default_factory=dict)
    pid_states: Dict[str, PIDState] = field(default_factory=dict)
    generation: int = 0
    running: bool = False

    def start(self, block_ids: List[str]) -> int:
        """
        Begin a new run.

        Resets the clock, clears every series, resets PID state and bumps the
        generation so responses from an earlier run cannot be applied.

        Returns:
            The new run generation
        """
        self.clock.reset()
        self.series = {block_id: TimeSeries() for block_id in block_ids}
        self.pid_states = {}
        self.generation += 1
        self.running = True
        return self.generation

    def stop(self) -> None:
        """Stop the run and invalidate everything still in flight."""
        if self.running:
            self.generation += 1
        self.running = False

    def pid_state(self, block_id: str) -> PIDState:
        return self.pid_states.get(block_id, PIDState())

    def data(self) -> Dict[str, np.ndarray]:
        """Samples of every block as arrays."""
        return {block_id: ts.to_array() for block_id, ts in self.series.items()}
