"""Logging setup and CSV export of simulation data."""

from control_workbench.logging.csv_logger import CSVLogger, EventBuffer
from control_workbench.logging.log_config import configure_logging

__all__ = [
    "CSVLogger",
    "EventBuffer",
    "configure_logging",
]
