"""Block kinds, parameter records and source calculators."""

from control_workbench.blocks.block_params import (
    BlockKind,
    Block,
    BlockParams,
    PIDBlockParams,
    TransferFunctionParams,
    GainParams,
    StepParams,
    SineParams,
    default_params,
    params_from_dict,
)
from control_workbench.blocks.sources import step_input, sine_wave, apply_gain

__all__ = [
    "BlockKind",
    "Block",
    "BlockParams",
    "PIDBlockParams",
    "TransferFunctionParams",
    "GainParams",
    "StepParams",
    "SineParams",
    "default_params",
    "params_from_dict",
    "step_input",
    "sine_wave",
    "apply_gain",
]
