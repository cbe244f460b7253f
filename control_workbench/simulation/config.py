"""
Simulation run configuration.
Encapsulates run settings in a validated, immutable-friendly structure.
"""

from dataclasses import dataclass, asdict, fields
from typing import Dict, Any
import json

from control_workbench.core.errors import InvalidParameter
from control_workbench.utils.validators import validate_finite, validate_positive


@dataclass
class SimulationConfig:
    """
    Simulation run settings.

    Placeholder values stand in for signals that would otherwise arrive
    through diagram connections.
    """

    sample_time: float = 0.01  # Clock step in seconds
    duration: float = 10.0  # Run length in seconds

    # Seconds to wait for outstanding calculation responses in one step
    response_timeout: float = 5.0

    # Inputs fed to blocks in place of connected signals
    placeholder_setpoint: float = 1.0
    placeholder_process_value: float = 0.5
    placeholder_input: float = 1.0

    def __post_init__(self):
        """Validate parameters after initialization."""
        self._validate()

    def _validate(self) -> None:
        self.sample_time = validate_positive(self.sample_time, "sample_time")
        self.duration = validate_positive(self.duration, "duration")
        self.response_timeout = validate_positive(self.response_timeout, "response_timeout")
        self.placeholder_setpoint = validate_finite(
            self.placeholder_setpoint, "placeholder_setpoint"
        )
        self.placeholder_process_value = validate_finite(
            self.placeholder_process_value, "placeholder_process_value"
        )
        self.placeholder_input = validate_finite(self.placeholder_input, "placeholder_input")

    def copy(self, **changes) -> 'SimulationConfig':
        """Create a copy with optional parameter changes."""
        params = self.to_dict()
        params.update(changes)
        return SimulationConfig.from_dict(params)

    @property
    def num_steps(self) -> int:
        """Approximate number of clock ticks in a full run."""
        return int(self.duration / self.sample_time)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimulationConfig':
        allowed = {f.name for f in fields(cls)}
        unknown = set(data) - allowed
        if unknown:
            raise InvalidParameter(f"Unknown configuration key(s): {', '.join(sorted(unknown))}")
        return cls(**data)

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> 'SimulationConfig':
        """Create from JSON string."""
        return cls.from_dict(json.loads(json_str))

    def __str__(self) -> str:
        return (
            f"SimulationConfig(Ts={self.sample_time:.4f}s, T={self.duration:.2f}s, "
            f"timeout={self.response_timeout:.1f}s)"
        )
