"""
Calculation request/response messages and the dispatcher.

A request names a calculation kind and its parameter record; ``dispatch``
returns exactly one response per request and never raises. Failures are
reported through the response's ``error`` string.
"""

from typing import Dict, Any, Callable, FrozenSet, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum
import logging
import uuid

from control_workbench.core.errors import ComputationError, ComputationFailure, InvalidParameter
from control_workbench.core.pid_calculator import calculate_pid
from control_workbench.core.transfer_function import evaluate, step_response
from control_workbench.core.frequency_response import frequency_response

logger = logging.getLogger(__name__)


class CalculationKind(Enum):
    """Calculations available across the computation boundary."""
    PID = "pid"
    TRANSFER_FUNCTION = "transfer_function"
    STEP_RESPONSE = "step_response"
    FREQUENCY_RESPONSE = "frequency_response"


# kind -> (required keys, optional keys)
PARAMETER_SCHEMA: Dict[CalculationKind, Tuple[FrozenSet[str], FrozenSet[str]]] = {
    CalculationKind.PID: (
        frozenset({'kp', 'ki', 'kd', 'setpoint', 'process_value', 'dt'}),
        frozenset({'previous_error', 'integral'}),
    ),
    CalculationKind.TRANSFER_FUNCTION: (
        frozenset({'numerator', 'denominator', 'input'}),
        frozenset({'sample_time'}),
    ),
    CalculationKind.STEP_RESPONSE: (
        frozenset({'numerator', 'denominator', 'amplitude', 'duration', 'sample_time'}),
        frozenset(),
    ),
    CalculationKind.FREQUENCY_RESPONSE: (
        frozenset({'numerator', 'denominator', 'frequencies'}),
        frozenset(),
    ),
}


def new_request_id() -> str:
    """Opaque, unique correlation token."""
    return f"calc_{uuid.uuid4().hex}"


def _as_kind(kind: Any) -> CalculationKind:
    if isinstance(kind, CalculationKind):
        return kind
    try:
        return CalculationKind(kind)
    except ValueError:
        raise InvalidParameter(f"Unknown calculation type: {kind}") from None


@dataclass(frozen=True)
class CalculationRequest:
    """
    A single calculation request.

    Attributes:
        id: Correlation token echoed by the response
        kind: Calculation kind
        parameters: Kind-specific parameter record
        generation: Run generation the request belongs to
    """
    id: str
    kind: CalculationKind
    parameters: Dict[str, Any] = field(default_factory=dict)
    generation: int = 0

    def __post_init__(self):
        # Unknown kinds are kept as given and reported by dispatch
        if not isinstance(self.kind, CalculationKind):
            try:
                object.__setattr__(self, 'kind', CalculationKind(self.kind))
            except ValueError:
                pass

    @classmethod
    def create(
        cls,
        kind: Any,
        parameters: Dict[str, Any],
        generation: int = 0
    ) -> 'CalculationRequest':
        """Create a request with a fresh correlation token."""
        return cls(new_request_id(), _as_kind(kind), dict(parameters), generation)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'kind': _kind_name(self.kind),
            'parameters': dict(self.parameters),
            'generation': self.generation,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CalculationRequest':
        return cls(
            id=data['id'],
            kind=data['kind'],
            parameters=dict(data.get('parameters', {})),
            generation=int(data.get('generation', 0)),
        )


@dataclass(frozen=True)
class CalculationResponse:
    """
    Answer to a CalculationRequest, matched by ``id``.

    ``warnings`` carries non-fatal conditions of a successful calculation,
    such as a zero leading denominator coefficient treated as 1.
    """
    id: str
    kind: str
    result: Any = None
    error: Optional[str] = None
    generation: int = 0
    warnings: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'kind': self.kind,
            'result': self.result,
            'generation': self.generation,
        }
        if self.error is not None:
            data['error'] = self.error
        if self.warnings:
            data['warnings'] = list(self.warnings)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CalculationResponse':
        return cls(
            id=data['id'],
            kind=data['kind'],
            result=data.get('result'),
            error=data.get('error'),
            generation=int(data.get('generation', 0)),
            warnings=tuple(data.get('warnings', ())),
        )


def check_parameters(kind: CalculationKind, parameters: Dict[str, Any]) -> None:
    """
    Check a parameter record against the closed schema of its kind.

    Raises:
        InvalidParameter: On missing or unknown keys
    """
    if not isinstance(parameters, dict):
        raise InvalidParameter(
            f"parameters must be a mapping, got {type(parameters).__name__}"
        )
    required, optional = PARAMETER_SCHEMA[kind]
    missing = required - set(parameters)
    if missing:
        raise InvalidParameter(
            f"Missing parameter(s) for {kind.value}: {', '.join(sorted(missing))}"
        )
    unknown = set(parameters) - required - optional
    if unknown:
        raise InvalidParameter(
            f"Unknown parameter(s) for {kind.value}: {', '.join(sorted(unknown))}"
        )


DEGENERATE_DENOMINATOR = "Leading denominator coefficient is zero; treated as 1"

# Calculators return (result, warnings)
CalculatorResult = Tuple[Any, Tuple[str, ...]]


def _degeneracy_warnings(degenerate: bool) -> Tuple[str, ...]:
    return (DEGENERATE_DENOMINATOR,) if degenerate else ()


def _run_pid(p: Dict[str, Any]) -> CalculatorResult:
    result = calculate_pid(
        p['kp'], p['ki'], p['kd'], p['setpoint'], p['process_value'], p['dt'],
        previous_error=p.get('previous_error', 0.0),
        integral=p.get('integral', 0.0),
    )
    return result.to_dict(), ()


def _run_transfer_function(p: Dict[str, Any]) -> CalculatorResult:
    y, degenerate = evaluate(
        p['numerator'], p['denominator'], p['input'], return_degenerate=True
    )
    return y.tolist(), _degeneracy_warnings(degenerate)


def _run_step_response(p: Dict[str, Any]) -> CalculatorResult:
    y, degenerate = step_response(
        p['numerator'], p['denominator'], p['amplitude'], p['duration'], p['sample_time'],
        return_degenerate=True
    )
    return y.tolist(), _degeneracy_warnings(degenerate)


def _run_frequency_response(p: Dict[str, Any]) -> CalculatorResult:
    points = frequency_response(p['numerator'], p['denominator'], p['frequencies'])
    return [point.to_dict() for point in points], ()


CALCULATORS: Dict[CalculationKind, Callable[[Dict[str, Any]], CalculatorResult]] = {
    CalculationKind.PID: _run_pid,
    CalculationKind.TRANSFER_FUNCTION: _run_transfer_function,
    CalculationKind.STEP_RESPONSE: _run_step_response,
    CalculationKind.FREQUENCY_RESPONSE: _run_frequency_response,
}

# Result carried by a failed response of each kind
EMPTY_RESULTS: Dict[CalculationKind, Any] = {
    CalculationKind.PID: None,
    CalculationKind.TRANSFER_FUNCTION: [],
    CalculationKind.STEP_RESPONSE: [],
    CalculationKind.FREQUENCY_RESPONSE: [],
}


def _kind_name(kind: Any) -> str:
    return kind.value if isinstance(kind, CalculationKind) else str(kind)


def dispatch(request: CalculationRequest) -> CalculationResponse:
    """
    Run the calculator matching the request kind.

    Args:
        request: Calculation request

    Returns:
        Response echoing the request id, kind and generation. Any failure
        is converted into the ``error`` field.
    """
    kind_name = _kind_name(request.kind)
    kind = None
    try:
        kind = _as_kind(request.kind)
        check_parameters(kind, request.parameters)
        result, warnings = CALCULATORS[kind](request.parameters)
    except ComputationError as e:
        return CalculationResponse(
            id=request.id,
            kind=kind_name,
            result=EMPTY_RESULTS.get(kind),
            error=str(e),
            generation=request.generation,
        )
    except Exception as e:
        logger.exception(f"Unexpected failure in {kind_name} calculation {request.id}")
        failure = ComputationFailure(f"{type(e).__name__}: {e}")
        return CalculationResponse(
            id=request.id,
            kind=kind_name,
            result=EMPTY_RESULTS.get(kind),
            error=str(failure),
            generation=request.generation,
        )

    return CalculationResponse(
        id=request.id,
        kind=kind_name,
        result=result,
        generation=request.generation,
        warnings=warnings,
    )
