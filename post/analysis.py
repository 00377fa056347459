"""
Analysis utilities for chebflow simulation output.

This module provides functions for statistical analysis and derived quantities:
- Time averaging and statistics of diagnostic series
- Horizontal averages of snapshot fields (mean temperature profile)
- Convergence of the Nusselt number estimates
"""

import numpy as np

from chebflow.bases import Chebyshev


# Reductions reported by compute_statistics_summary, applied along time
STATISTICS = {
    "mean": np.mean,
    "std": np.std,
    "min": np.min,
    "max": np.max,
    "median": np.median,
}


def _time_mask(times, t_start, t_end):
    t_start = times[0] if t_start is None else t_start
    t_end = times[-1] if t_end is None else t_end

    mask = (times >= t_start) & (times <= t_end)
    if not np.any(mask):
        raise ValueError(f"No data points in time range [{t_start}, {t_end}]")
    return mask


def _reduce(times, series, reducer, t_start, t_end):
    """Apply *reducer* along time to the samples inside [t_start, t_end]."""
    window = np.asarray(series)[_time_mask(times, t_start, t_end)]
    return reducer(window, axis=0)


def time_average(times, series, t_start=None, t_end=None):
    """
    Mean of a diagnostic series over [t_start, t_end] (whole run by default).

    A 2-D series (N, M) is averaged per column.
    """
    return _reduce(times, series, np.mean, t_start, t_end)


def time_std(times, series, t_start=None, t_end=None):
    """Standard deviation counterpart of time_average."""
    return _reduce(times, series, np.std, t_start, t_end)


def moving_average(array, window_size):
    """
    Running mean over *window_size* consecutive samples.

    Only complete windows are returned, so the result has
    len(array) - window_size + 1 entries.
    """
    if window_size < 1:
        raise ValueError("Window size must be at least 1")
    csum = np.cumsum(np.concatenate(([0.0], np.asarray(array, dtype=float))))
    return (csum[window_size:] - csum[:-window_size]) / window_size


def compute_statistics_summary(times, series_dict, t_start=None, t_end=None):
    """
    Every entry of STATISTICS for every diagnostic series.

    Returns:
        dict: {name: {"mean": ..., "std": ..., "min": ..., "max": ..., "median": ...}}
    """
    mask = _time_mask(times, t_start, t_end)
    return {
        name: {stat: reducer(np.asarray(series)[mask], axis=0)
               for stat, reducer in STATISTICS.items()}
        for name, series in series_dict.items()
    }


def horizontal_mean(field):
    """
    Average a (nx, ny) field over the periodic x direction.

    Args:
        field (ndarray): Field on an equispaced x grid

    Returns:
        ndarray: Profile along y (ny,)
    """
    return np.mean(field, axis=0)


def volume_mean(field, y):
    """
    Volume average of a (nx, ny) field over a periodic x and a Chebyshev y grid.

    The y integral uses the Clenshaw-Curtis weights of the Gauss-Lobatto
    nodes, the same quadrature as Field.average.

    Args:
        field (ndarray): Field (nx, ny)
        y (ndarray): Gauss-Lobatto coordinates (ny,), possibly shifted and scaled

    Returns:
        float: Volume average

    Raises:
        ValueError: If y is not a Chebyshev Gauss-Lobatto grid
    """
    y = np.asarray(y, dtype=float)
    cheby = Chebyshev(len(y))
    nodes = y[0] + (cheby.coords() + 1.0) * (y[-1] - y[0]) / 2.0
    if not np.allclose(y, nodes, rtol=0.0, atol=1e-10 * max(abs(y[-1] - y[0]), 1.0)):
        raise ValueError("volume_mean needs y on Chebyshev Gauss-Lobatto nodes")
    profile = horizontal_mean(field)
    return float(np.sum(cheby.quadrature_weights() * profile) / 2.0)


def nusselt_mismatch(times, series_dict, t_start=None, t_end=None):
    """
    Relative difference between plate and volume Nusselt numbers.

    In a statistically steady state both estimates agree, so the mismatch
    measures convergence of the run.

    Args:
        times (ndarray): Time values (N,)
        series_dict (dict): Must contain 'nu' and 'nuvol'
        t_start (float or None): Start time of the average
        t_end (float or None): End time of the average

    Returns:
        float: |<Nu> - <Nuvol>| / |<Nu>|
    """
    if "nu" not in series_dict or "nuvol" not in series_dict:
        raise KeyError("Required 'nu' and 'nuvol' not in series_dict")

    nu_mean = time_average(times, series_dict["nu"], t_start, t_end)
    nuvol_mean = time_average(times, series_dict["nuvol"], t_start, t_end)
    if nu_mean == 0:
        raise ValueError("Mean Nusselt number is zero")
    return float(abs(nu_mean - nuvol_mean) / abs(nu_mean))
