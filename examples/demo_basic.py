#!/usr/bin/env python3
"""
Basic Simulation Demo

Demonstrates:
- Building a block set
- Running the simulation driver on a worker pool
- CSV export
- Plotting block outputs
"""

import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from control_workbench.blocks.block_params import Block, BlockKind
from control_workbench.simulation.config import SimulationConfig
from control_workbench.simulation.channels import WorkerChannel
from control_workbench.simulation.driver import SimulationDriver
from control_workbench.analyzer.plots import WorkbenchPlotter
from control_workbench.logging.log_config import configure_logging


def main():
    configure_logging("INFO")

    print("=" * 60)
    print("Basic Simulation Demo")
    print("=" * 60)

    blocks = [
        Block.create("setpoint", BlockKind.STEP_INPUT, amplitude=1.0, step_time=1.0),
        Block.create("wave", BlockKind.SINE_WAVE, amplitude=0.5, frequency=0.5),
        Block.create("pid", BlockKind.PID_CONTROLLER, kp=1.2, ki=0.4, kd=0.01),
        Block.create("plant", BlockKind.TRANSFER_FUNCTION,
                     numerator=[0.05], denominator=[1.0, -0.95]),
        Block.create("amp", BlockKind.GAIN, gain=2.5),
    ]

    config = SimulationConfig(sample_time=0.01, duration=5.0)
    print(f"\n{config}")
    for block in blocks:
        print(f"  {block.id:10s} {block.kind.value:18s} {block.params.to_dict()}")

    with WorkerChannel(num_workers=2) as channel:
        with SimulationDriver(blocks, config, channel=channel,
                              csv_path="output/basic_demo.csv") as driver:
            data = driver.run()
            failures = driver.events.get_all()

    print(f"\nSimulated {len(data['pid'])} steps")
    for block_id, samples in data.items():
        print(f"  {block_id:10s} final = {samples[-1]:.4f}")
    print(f"Failures: {len(failures)}")

    print("\nGenerating plots...")
    plotter = WorkbenchPlotter()
    plotter.plot_time_series(data, config.sample_time, title="Block Outputs")

    print("\nClose plot window to exit.")
    WorkbenchPlotter.show()


if __name__ == "__main__":
    # Create output directory
    Path("output").mkdir(exist_ok=True)
    main()
