"""
Plotting utilities for simulation output and frequency responses.
"""

from typing import Dict, List, Optional, Sequence, Tuple
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from control_workbench.core.frequency_response import FrequencyPoint


class WorkbenchPlotter:
    """
    Plotting for the data produced by the simulation engine.

    Provides an oscilloscope-style view of block time series and Bode-style
    plots of frequency sweeps.
    """

    def __init__(self, style: str = 'seaborn-v0_8-whitegrid'):
        """
        Initialize plotter.

        Args:
            style: Matplotlib style to use
        """
        if style in plt.style.available:
            plt.style.use(style)

        self._colors = [
            '#3498db', '#e74c3c', '#2ecc71', '#9b59b6',
            '#f39c12', '#1abc9c', '#e67e22', '#7f8c8d',
        ]

    def plot_time_series(
        self,
        data: Dict[str, Sequence[float]],
        sample_time: float,
        title: str = "Block Outputs",
        figsize: Tuple[int, int] = (12, 6)
    ) -> Figure:
        """
        Plot every block's samples against simulation time.

        The first sample of each series is taken at t = sample_time.

        Args:
            data: Block id -> samples
            sample_time: Clock step in seconds
            title: Plot title
            figsize: Figure size

        Returns:
            Matplotlib Figure
        """
        fig, ax = plt.subplots(figsize=figsize)

        for i, (block_id, samples) in enumerate(data.items()):
            values = np.asarray(samples, dtype=float)
            if len(values) == 0:
                continue
            t = sample_time * np.arange(1, len(values) + 1)
            ax.plot(t, values, '-', color=self._colors[i % len(self._colors)],
                    linewidth=1.5, label=block_id)

        ax.set_xlabel('Time (s)', fontsize=12)
        ax.set_ylabel('Output', fontsize=12)
        ax.set_title(title, fontsize=14, fontweight='bold')
        if ax.get_legend_handles_labels()[0]:
            ax.legend(loc='best')
        ax.grid(True, alpha=0.3)

        fig.tight_layout()
        return fig

    def plot_bode(
        self,
        points: List[FrequencyPoint],
        title: str = "Frequency Response",
        figsize: Tuple[int, int] = (10, 8),
        reference: Optional[Tuple[np.ndarray, np.ndarray, np.ndarray]] = None
    ) -> Figure:
        """
        Bode magnitude and phase plots.

        Degenerate points (vanishing denominator) are marked on the
        frequency axis instead of plotted.

        Args:
            points: Frequency sweep result
            title: Overall title
            figsize: Figure size
            reference: Optional (freq, mag_db, phase_deg) overlay

        Returns:
            Matplotlib Figure
        """
        fig, (ax_mag, ax_phase) = plt.subplots(2, 1, figsize=figsize, sharex=True)
        fig.suptitle(title, fontsize=14, fontweight='bold')

        valid = [p for p in points if not p.degenerate]
        freqs = np.array([p.frequency for p in valid])
        mags = np.array([p.magnitude_db for p in valid])
        phases = np.array([p.phase_deg for p in valid])

        use_log = len(freqs) > 0 and np.all(freqs > 0)
        plot = ax_mag.semilogx if use_log else ax_mag.plot
        plot(freqs, mags, '-', color=self._colors[0], linewidth=1.5, label='Magnitude')
        plot = ax_phase.semilogx if use_log else ax_phase.plot
        plot(freqs, phases, '-', color=self._colors[1], linewidth=1.5, label='Phase')

        if reference is not None:
            ref_f, ref_mag, ref_phase = reference
            ax_mag.plot(ref_f, ref_mag, '--', color=self._colors[7], label='Reference')
            ax_phase.plot(ref_f, ref_phase, '--', color=self._colors[7], label='Reference')

        for p in points:
            if p.degenerate:
                ax_mag.axvline(p.frequency, color=self._colors[1], linestyle=':', alpha=0.6)

        ax_mag.set_ylabel('Magnitude (dB)', fontsize=12)
        ax_mag.grid(True, which='both', alpha=0.3)
        ax_mag.legend(loc='best')
        ax_phase.set_xlabel('Frequency (Hz)', fontsize=12)
        ax_phase.set_ylabel('Phase (deg)', fontsize=12)
        ax_phase.grid(True, which='both', alpha=0.3)

        fig.tight_layout()
        return fig

    @staticmethod
    def show():
        """Display all plots."""
        plt.show()

    @staticmethod
    def close_all():
        plt.close('all')
