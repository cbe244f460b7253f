"""Simulation driver, run state and the calculation boundary."""

from control_workbench.simulation.config import SimulationConfig
from control_workbench.simulation.context import SimulationClock, SimulationContext, TimeSeries
from control_workbench.simulation.messages import (
    CalculationKind,
    CalculationRequest,
    CalculationResponse,
    dispatch,
)
from control_workbench.simulation.channels import (
    CalculationChannel,
    InProcessChannel,
    WorkerChannel,
)
from control_workbench.simulation.driver import SimulationDriver, StepReport

__all__ = [
    "SimulationConfig",
    "SimulationClock",
    "SimulationContext",
    "TimeSeries",
    "CalculationKind",
    "CalculationRequest",
    "CalculationResponse",
    "dispatch",
    "CalculationChannel",
    "InProcessChannel",
    "WorkerChannel",
    "SimulationDriver",
    "StepReport",
]
