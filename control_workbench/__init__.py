"""
Control Workbench Simulation Engine
===================================

Numeric core of a block-diagram control workbench:
- Stateless PID calculation
- Discrete transfer-function (IIR) evaluation and step responses
- Frequency-response sweeps using complex polynomial evaluation
- Simulation driver with a request/response calculation boundary
"""

from control_workbench.core import (
    calculate_pid,
    evaluate,
    step_response,
    frequency_response,
    InvalidParameter,
    NumericDegenerate,
    ComputationFailure,
)
from control_workbench.blocks import Block, BlockKind
from control_workbench.simulation import (
    SimulationConfig,
    SimulationDriver,
    CalculationRequest,
    CalculationResponse,
    dispatch,
)

__version__ = "1.0.0"
__all__ = [
    "calculate_pid",
    "evaluate",
    "step_response",
    "frequency_response",
    "InvalidParameter",
    "NumericDegenerate",
    "ComputationFailure",
    "Block",
    "BlockKind",
    "SimulationConfig",
    "SimulationDriver",
    "CalculationRequest",
    "CalculationResponse",
    "dispatch",
]
