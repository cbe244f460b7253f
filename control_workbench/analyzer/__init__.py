"""Analysis and visualization components."""

from control_workbench.analyzer.control_analysis import ControlSystemAnalyzer
from control_workbench.analyzer.plots import WorkbenchPlotter

__all__ = [
    "ControlSystemAnalyzer",
    "WorkbenchPlotter",
]
