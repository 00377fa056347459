"""
Data loading and file I/O utilities for chebflow post-processing.

This module provides functions to read simulation output files:
- Snapshot fields from flow{time}.h5
- Diagnostic time series from diagnostics.h5
"""

import re
import pathlib
import h5py
import numpy as np

SNAPSHOT_PATTERN = re.compile(r"flow(-?[0-9]+\.[0-9]+)\.h5$")

# Fields stored in every snapshot (group name -> datasets v, vhat)
SNAPSHOT_FIELDS = ("temp", "ux", "uy", "pres")
SNAPSHOT_SCALARS = ("time", "ra", "pr", "nu", "kappa")


def snapshot_time(path):
    """
    Parse the simulation time from a snapshot file name.

    Args:
        path (str or Path): Snapshot path, e.g. data/flow12.500.h5

    Returns:
        float: Simulation time encoded in the name

    Raises:
        ValueError: If the name does not follow the flow{time}.h5 pattern
    """
    m = SNAPSHOT_PATTERN.search(pathlib.Path(path).name)
    if not m:
        raise ValueError(f"Not a snapshot file name: {path}")
    return float(m.group(1))


def list_snapshots(rundir):
    """
    List snapshot files of a run directory sorted by simulation time.

    Args:
        rundir (str or Path): Directory containing flow*.h5 files

    Returns:
        list: Sorted list of Path objects

    Raises:
        FileNotFoundError: If no snapshot files are found
    """
    rundir = pathlib.Path(rundir)
    files = [p for p in rundir.glob("flow*.h5") if SNAPSHOT_PATTERN.search(p.name)]
    if not files:
        raise FileNotFoundError(f"No snapshot files found in {rundir}")
    return sorted(files, key=snapshot_time)


def read_snapshot(snapshot_path, fields=SNAPSHOT_FIELDS):
    """
    Read physical-space fields, coordinates and scalars from a snapshot.

    Args:
        snapshot_path (str or Path): Path to snapshot HDF5 file
        fields (sequence): Field groups to read

    Returns:
        dict: {"x": (nx,), "y": (ny,), <field>: (nx, ny) array, <scalar>: float}

    Raises:
        KeyError: If a requested field is missing
    """
    data = {}
    with h5py.File(snapshot_path, "r") as f:
        for name in fields:
            if f"{name}/v" not in f:
                raise KeyError(f"Field '{name}' not found in {snapshot_path}")
            data[name] = np.array(f[f"{name}/v"])
        for axis in ("x", "y"):
            if axis in f:
                data[axis] = np.array(f[axis])
        for name in SNAPSHOT_SCALARS:
            if name in f:
                data[name] = float(f[name][()])
    return data


def read_diagnostics(diagnostics_path):
    """
    Read the diagnostic time series written during a run.

    Args:
        diagnostics_path (str or Path): Path to diagnostics.h5

    Returns:
        tuple: (times, series_dict)
            - times: (N,) array of simulation times
            - series_dict: {"nu": ..., "nuvol": ..., "re": ...}, each (N,)

    Raises:
        KeyError: If the time series are missing
    """
    with h5py.File(diagnostics_path, "r") as f:
        if "time" not in f:
            raise KeyError(f"No 'time' dataset in {diagnostics_path}")
        times = np.array(f["time"])
        series_dict = {k: np.array(f[k]) for k in f.keys() if k != "time"}

    # Sort by time
    order = np.argsort(times)
    times = times[order]
    for k in series_dict:
        series_dict[k] = series_dict[k][order]

    return times, series_dict
