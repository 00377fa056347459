"""
chebflow Post-Processing Toolkit
================================

A modular post-processing and visualisation toolkit for chebflow simulation output.

Modules:
    io: Reading snapshot and diagnostics files
    visualisation: Plotting functions for time series, snapshots, and profiles
    analysis: Analysis utilities (statistics, averages, Nusselt convergence)
"""

__version__ = "0.1.0"

from . import io
from . import visualisation
from . import analysis

__all__ = ["io", "visualisation", "analysis"]
