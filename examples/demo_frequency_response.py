#!/usr/bin/env python3
"""
Frequency Response Demo

Demonstrates:
- Frequency sweeps through the calculation boundary
- Degenerate points where the denominator vanishes
- Comparison against python-control
- Step response of the same coefficients
"""

import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from control_workbench.core.frequency_response import FrequencyPoint, frequency_grid
from control_workbench.simulation.messages import CalculationRequest, dispatch
from control_workbench.analyzer.control_analysis import ControlSystemAnalyzer
from control_workbench.analyzer.plots import WorkbenchPlotter


def main():
    print("=" * 60)
    print("Frequency Response Demo")
    print("=" * 60)

    numerator = [1.0]
    denominator = [1.0, 0.2, 0.0]

    freqs = [0.0] + list(frequency_grid(0.01, 10.0, 200))
    response = dispatch(CalculationRequest.create("frequency_response", {
        'numerator': numerator,
        'denominator': denominator,
        'frequencies': freqs,
    }))
    if not response.ok:
        print(f"Sweep failed: {response.error}")
        return

    points = [FrequencyPoint(**p) for p in response.result]
    degenerate = [p for p in points if p.degenerate]
    print(f"\nEvaluated {len(points)} frequencies, {len(degenerate)} degenerate")
    for p in degenerate:
        print(f"  f = {p.frequency:g} Hz: {p.error}")

    summary = ControlSystemAnalyzer.summary(numerator, denominator)
    print(f"\nPoles: {summary['poles']}")
    print(f"Stable: {summary['is_stable']}")

    step = dispatch(CalculationRequest.create("step_response", {
        'numerator': [0.1], 'denominator': [1.0, -0.9],
        'amplitude': 1.0, 'duration': 1.0, 'sample_time': 0.01,
    }))
    print(f"\nDiscrete step response: {len(step.result)} samples, "
          f"final = {step.result[-1]:.4f}")

    plotter = WorkbenchPlotter()
    reference = ControlSystemAnalyzer.bode_data(numerator, denominator, freqs[1:])
    plotter.plot_bode(points, title="Frequency Response", reference=reference)
    plotter.plot_time_series({'step': step.result}, 0.01, title="Step Response")

    print("\nClose plot windows to exit.")
    WorkbenchPlotter.show()


if __name__ == "__main__":
    main()
