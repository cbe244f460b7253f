"""
Block descriptors and per-kind parameter records.

Each block kind has its own closed parameter dataclass; the kind
discriminator selects which one applies.
"""

from dataclasses import dataclass, fields, asdict
from typing import ClassVar, Dict, Any, Tuple, Type, Union
from enum import Enum
import json

from control_workbench.core.errors import InvalidParameter
from control_workbench.utils.validators import (
    validate_finite,
    validate_positive,
    validate_coefficients,
)


class BlockKind(Enum):
    """Block kinds available on the diagram."""
    PID_CONTROLLER = "pid-controller"
    TRANSFER_FUNCTION = "transfer-function"
    GAIN = "gain-block"
    STEP_INPUT = "step-input"
    SINE_WAVE = "sine-wave"


class _BlockParamsMixin:
    """Shared copy/serialization helpers for parameter dataclasses."""

    kind: ClassVar[BlockKind]

    def copy(self, **changes):
        """
        Create a copy with optional parameter changes.

        Args:
            **changes: Parameters to override

        Returns:
            New parameter instance
        """
        data = self.to_dict()
        data.update(changes)
        return type(self).from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, tuple):
                data[key] = list(value)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """
        Create from dictionary.

        Unknown keys are rejected.
        """
        allowed = {f.name for f in fields(cls)}
        unknown = set(data) - allowed
        if unknown:
            raise InvalidParameter(
                f"Unknown parameter(s) for {cls.kind.value}: {', '.join(sorted(unknown))}"
            )
        return cls(**data)


@dataclass(frozen=True)
class PIDBlockParams(_BlockParamsMixin):
    """PID controller gains and its own sample time."""
    kind: ClassVar[BlockKind] = BlockKind.PID_CONTROLLER

    kp: float = 1.0
    ki: float = 0.1
    kd: float = 0.05
    sample_time: float = 0.01

    def __post_init__(self):
        object.__setattr__(self, 'kp', validate_finite(self.kp, "kp"))
        object.__setattr__(self, 'ki', validate_finite(self.ki, "ki"))
        object.__setattr__(self, 'kd', validate_finite(self.kd, "kd"))
        object.__setattr__(
            self, 'sample_time', validate_positive(self.sample_time, "sample_time")
        )

    def __str__(self) -> str:
        return (
            f"PIDBlockParams(Kp={self.kp:.4f}, Ki={self.ki:.4f}, Kd={self.kd:.4f}, "
            f"Ts={self.sample_time:.4f}s)"
        )


@dataclass(frozen=True)
class TransferFunctionParams(_BlockParamsMixin):
    """Numerator/denominator coefficients of a transfer-function block."""
    kind: ClassVar[BlockKind] = BlockKind.TRANSFER_FUNCTION

    numerator: Tuple[float, ...] = (1.0,)
    denominator: Tuple[float, ...] = (1.0, 2.0, 1.0)

    def __post_init__(self):
        object.__setattr__(
            self, 'numerator',
            tuple(float(c) for c in validate_coefficients(self.numerator, "numerator"))
        )
        object.__setattr__(
            self, 'denominator',
            tuple(float(c) for c in validate_coefficients(self.denominator, "denominator"))
        )

    def __str__(self) -> str:
        return f"TransferFunctionParams({list(self.numerator)} / {list(self.denominator)})"


@dataclass(frozen=True)
class GainParams(_BlockParamsMixin):
    kind: ClassVar[BlockKind] = BlockKind.GAIN

    gain: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, 'gain', validate_finite(self.gain, "gain"))


@dataclass(frozen=True)
class StepParams(_BlockParamsMixin):
    kind: ClassVar[BlockKind] = BlockKind.STEP_INPUT

    amplitude: float = 1.0
    step_time: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'amplitude', validate_finite(self.amplitude, "amplitude"))
        object.__setattr__(self, 'step_time', validate_finite(self.step_time, "step_time"))


@dataclass(frozen=True)
class SineParams(_BlockParamsMixin):
    kind: ClassVar[BlockKind] = BlockKind.SINE_WAVE

    amplitude: float = 1.0
    frequency: float = 1.0  # Hz
    phase: float = 0.0  # rad

    def __post_init__(self):
        object.__setattr__(self, 'amplitude', validate_finite(self.amplitude, "amplitude"))
        object.__setattr__(self, 'frequency', validate_finite(self.frequency, "frequency"))
        object.__setattr__(self, 'phase', validate_finite(self.phase, "phase"))


BlockParams = Union[PIDBlockParams, TransferFunctionParams, GainParams, StepParams, SineParams]

PARAMS_BY_KIND: Dict[BlockKind, Type] = {
    BlockKind.PID_CONTROLLER: PIDBlockParams,
    BlockKind.TRANSFER_FUNCTION: TransferFunctionParams,
    BlockKind.GAIN: GainParams,
    BlockKind.STEP_INPUT: StepParams,
    BlockKind.SINE_WAVE: SineParams,
}


def _as_kind(kind: Union[BlockKind, str]) -> BlockKind:
    if isinstance(kind, BlockKind):
        return kind
    try:
        return BlockKind(kind)
    except ValueError:
        raise InvalidParameter(f"Unknown block kind: {kind}") from None


def default_params(kind: Union[BlockKind, str]) -> BlockParams:
    """Default parameters for a newly placed block of the given kind."""
    return PARAMS_BY_KIND[_as_kind(kind)]()


def params_from_dict(kind: Union[BlockKind, str], data: Dict[str, Any]) -> BlockParams:
    """Build the parameter record for ``kind`` from a plain dictionary."""
    return PARAMS_BY_KIND[_as_kind(kind)].from_dict(data)


@dataclass(frozen=True)
class Block:
    """
    Block descriptor supplied by the diagram.

    Example:
        >>> block = Block("pid1", BlockKind.PID_CONTROLLER, PIDBlockParams(kp=2.0))
        >>> block.params.kp
        2.0
    """
    id: str
    kind: BlockKind
    params: BlockParams

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise InvalidParameter("block id must be a non-empty string")
        kind = _as_kind(self.kind)
        object.__setattr__(self, 'kind', kind)
        expected = PARAMS_BY_KIND[kind]
        if not isinstance(self.params, expected):
            raise InvalidParameter(
                f"block {self.id!r} of kind {kind.value} requires {expected.__name__}, "
                f"got {type(self.params).__name__}"
            )

    @classmethod
    def create(cls, block_id: str, kind: Union[BlockKind, str], **params) -> 'Block':
        """Create a block, filling unspecified parameters with defaults."""
        kind = _as_kind(kind)
        return cls(block_id, kind, default_params(kind).copy(**params))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'kind': self.kind.value,
            'params': self.params.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Block':
        try:
            block_id = data['id']
            kind = _as_kind(data['kind'])
        except KeyError as e:
            raise InvalidParameter(f"block descriptor is missing {e}") from None
        return cls(block_id, kind, params_from_dict(kind, data.get('params', {})))

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> 'Block':
        """Create from JSON string."""
        return cls.from_dict(json.loads(json_str))
