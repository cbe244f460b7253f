"""
Simulation Driver.

Steps the simulation clock and, for every block on the diagram, runs the
calculator matching its kind and appends the result to that block's time
series. Calculator-backed blocks (PID, transfer function) go through a
CalculationChannel; sources and gains are evaluated in place.
"""

from typing import Dict, Any, List, Optional, Sequence
from dataclasses import dataclass, field
import logging
import time

import numpy as np

from control_workbench.blocks.block_params import Block, BlockKind
from control_workbench.blocks.sources import step_input, sine_wave, apply_gain
from control_workbench.core.errors import ComputationError, ComputationFailure, InvalidParameter
from control_workbench.core.pid_calculator import PIDState
from control_workbench.logging.csv_logger import CSVLogger, EventBuffer
from control_workbench.simulation.channels import CalculationChannel, InProcessChannel
from control_workbench.simulation.config import SimulationConfig
from control_workbench.simulation.context import SimulationClock, SimulationContext, TimeSeries
from control_workbench.simulation.messages import (
    CalculationKind,
    CalculationRequest,
    CalculationResponse,
)

logger = logging.getLogger(__name__)


@dataclass
class StepReport:
    """Outcome of a single simulation step."""
    time: float
    samples: Dict[str, float] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)
    warnings: Dict[str, List[str]] = field(default_factory=dict)
    discarded: int = 0
    finished: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors


class SimulationDriver:
    """
    Cooperative stepping loop over a block diagram.

    The caller schedules ``step()`` once per refresh tick, or calls
    ``run()`` to drive a whole run. The driver owns the clock, every time
    series and the PID state; calculators receive plain values.

    Example:
        >>> blocks = [Block.create("pid1", BlockKind.PID_CONTROLLER, kp=1.0)]
        >>> driver = SimulationDriver(blocks, SimulationConfig(duration=1.0))
        >>> data = driver.run()
        >>> len(data["pid1"]) > 0
        True
    """

    def __init__(
        self,
        blocks: Sequence[Block],
        config: Optional[SimulationConfig] = None,
        channel: Optional[CalculationChannel] = None,
        csv_path: Optional[str] = None
    ):
        """
        Initialize driver.

        Args:
            blocks: Blocks on the diagram
            config: Run configuration (defaults if None)
            channel: Channel to the calculators (in-process if None)
            csv_path: Path for CSV export of each run (no export if None)
        """
        self._blocks: List[Block] = list(blocks)
        ids = [block.id for block in self._blocks]
        if len(set(ids)) != len(ids):
            raise InvalidParameter("block ids must be unique")

        self._config = config if config is not None else SimulationConfig()
        self._owns_channel = channel is None
        self._channel = channel if channel is not None else InProcessChannel()
        self._csv_path = csv_path
        self._csv_logger: Optional[CSVLogger] = None

        self._context = SimulationContext(
            clock=SimulationClock(self._config.sample_time, self._config.duration)
        )
        self._events = EventBuffer(
            max_size=1000,
            columns=['generation', 'time', 'block_id', 'error']
        )

    @property
    def blocks(self) -> List[Block]:
        return list(self._blocks)

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def context(self) -> SimulationContext:
        return self._context

    @property
    def is_running(self) -> bool:
        return self._context.running

    @property
    def current_time(self) -> float:
        return self._context.clock.current_time

    @property
    def generation(self) -> int:
        return self._context.generation

    @property
    def events(self) -> EventBuffer:
        """Recent block failures."""
        return self._events

    def series(self, block_id: str) -> TimeSeries:
        """Time series of one block."""
        if block_id not in self._context.series:
            raise KeyError(f"No time series for block {block_id!r}")
        return self._context.series[block_id]

    @property
    def data(self) -> Dict[str, np.ndarray]:
        """Samples of every block as arrays."""
        return self._context.data()

    def start(self) -> int:
        """
        Start (or restart) a run.

        Clears every time series, resets PID state and stamps a new run
        generation.

        Returns:
            The run generation
        """
        if self._context.running:
            self.stop()

        # Config is mutable; pick up sample_time and duration edits
        self._context.clock = SimulationClock(self._config.sample_time, self._config.duration)
        generation = self._context.start([block.id for block in self._blocks])
        self._events.clear()

        if self._csv_path is not None:
            self._csv_logger = CSVLogger(
                self._csv_path,
                columns=['time'] + [block.id for block in self._blocks]
            )

        logger.info(
            f"Simulation started: {len(self._blocks)} blocks, {self._config} "
            f"(generation {generation})"
        )
        return generation

    def stop(self) -> None:
        """Stop the run; responses still in flight will be discarded."""
        was_running = self._context.running
        self._context.stop()
        if self._csv_logger is not None:
            self._csv_logger.close()
            self._csv_logger = None
        if was_running:
            logger.info(f"Simulation stopped at t={self.current_time:.4f}s")

    cancel = stop

    def step(self) -> Optional[StepReport]:
        """
        Advance the clock by one sample time and process every block.

        Returns:
            StepReport for the step, or None when no run is active
        """
        if not self._context.running:
            return None

        t = self._context.clock.advance()
        if self._context.clock.finished:
            self.stop()
            return StepReport(time=t, finished=True)

        report = StepReport(time=t)
        pending: Dict[str, Block] = {}

        for block in self._blocks:
            try:
                if block.kind in (BlockKind.PID_CONTROLLER, BlockKind.TRANSFER_FUNCTION):
                    request = self._build_request(block)
                    self._channel.submit(request)
                    pending[request.id] = block
                else:
                    self._append(block, self._evaluate_local(block, t), report)
            except ComputationError as e:
                self._record_failure(block, str(e), report)
            except Exception as e:
                logger.exception(f"Unexpected failure in block {block.id} at t={t:.4f}s")
                failure = ComputationFailure(f"{type(e).__name__}: {e}")
                self._record_failure(block, str(failure), report)

        self._collect(pending, report)

        if self._csv_logger is not None:
            self._csv_logger.log({'time': t, **report.samples})

        return report

    def run(self, max_steps: Optional[int] = None) -> Dict[str, np.ndarray]:
        """
        Run to completion (or for at most ``max_steps`` steps).

        Starts a new run unless one is already active.

        Returns:
            Samples of every block
        """
        if not self._context.running:
            self.start()

        steps = 0
        while self._context.running:
            if max_steps is not None and steps >= max_steps:
                break
            self.step()
            steps += 1

        return self.data

    def close(self) -> None:
        """Stop the run and close the channel if the driver created it."""
        self.stop()
        if self._owns_channel:
            self._channel.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False

    def _evaluate_local(self, block: Block, t: float) -> float:
        params = block.params
        if block.kind == BlockKind.STEP_INPUT:
            return step_input(params.amplitude, params.step_time, t)
        if block.kind == BlockKind.SINE_WAVE:
            return sine_wave(params.amplitude, params.frequency, params.phase, t)
        if block.kind == BlockKind.GAIN:
            return apply_gain(params.gain, self._config.placeholder_input)
        raise ComputationFailure(f"No calculator for block kind {block.kind.value}")

    def _build_request(self, block: Block) -> CalculationRequest:
        params = block.params
        if block.kind == BlockKind.PID_CONTROLLER:
            state = self._context.pid_state(block.id)
            return CalculationRequest.create(
                CalculationKind.PID,
                {
                    'kp': params.kp,
                    'ki': params.ki,
                    'kd': params.kd,
                    'setpoint': self._config.placeholder_setpoint,
                    'process_value': self._config.placeholder_process_value,
                    'dt': params.sample_time,
                    'previous_error': state.previous_error,
                    'integral': state.integral,
                },
                generation=self._context.generation
            )

        return CalculationRequest.create(
            CalculationKind.TRANSFER_FUNCTION,
            {
                'numerator': list(params.numerator),
                'denominator': list(params.denominator),
                'input': [self._config.placeholder_input],
                'sample_time': self._context.clock.sample_time,
            },
            generation=self._context.generation
        )

    def _collect(self, pending: Dict[str, Block], report: StepReport) -> None:
        """Wait for the responses of this step, matching them by id."""
        deadline = time.monotonic() + self._config.response_timeout

        while pending:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            response = self._channel.receive(timeout=remaining)
            if response is None:
                break

            if response.generation != self._context.generation:
                report.discarded += 1
                logger.debug(
                    f"Discarded response {response.id} from generation {response.generation}"
                )
                continue

            block = pending.pop(response.id, None)
            if block is None:
                report.discarded += 1
                logger.debug(f"Discarded response {response.id} with unknown id")
                continue

            self._apply(block, response, report)

        for block in pending.values():
            self._record_failure(
                block,
                f"no response within {self._config.response_timeout}s",
                report
            )

    def _apply(self, block: Block, response: CalculationResponse, report: StepReport) -> None:
        if not response.ok:
            self._record_failure(block, response.error, report)
            return

        try:
            if block.kind == BlockKind.PID_CONTROLLER:
                result = response.result
                value = float(result['output'])
                next_state = PIDState(
                    previous_error=float(result['error']),
                    integral=float(result['integral'])
                )
            else:
                value = float(response.result[0]) if response.result else 0.0
                next_state = None
        except (KeyError, IndexError, TypeError, ValueError) as e:
            self._record_failure(block, f"malformed result: {e}", report)
            return

        if response.warnings:
            report.warnings[block.id] = list(response.warnings)
        if next_state is not None:
            self._context.pid_states[block.id] = next_state
        self._append(block, value, report)

    def _append(self, block: Block, value: float, report: StepReport) -> None:
        self._context.series[block.id].append(value)
        report.samples[block.id] = value

    def _record_failure(self, block: Block, message: str, report: StepReport) -> None:
        report.errors[block.id] = message
        self._events.append({
            'generation': self._context.generation,
            'time': report.time,
            'block_id': block.id,
            'error': message,
        })
        logger.warning(f"Block {block.id} ({block.kind.value}) failed at t={report.time:.4f}s: {message}")
