"""
Visualisation functions for chebflow simulation output.

This module provides plotting functions for:
- Diagnostic time series (Nusselt and Reynolds numbers)
- 2D field snapshots (temperature, velocity, pressure)
- Horizontally averaged profiles
"""

import pathlib
import numpy as np
import matplotlib
import matplotlib.pyplot as plt

from . import analysis

# Use non-interactive backend by default for batch processing
matplotlib.use("Agg")


def set_style(style="default"):
    """
    Set matplotlib style for plots.

    Args:
        style (str): Style name ("default", "paper", "presentation")
    """
    if style == "paper":
        plt.rcParams.update({"font.size": 10, "figure.dpi": 150})
    elif style == "presentation":
        plt.rcParams.update({"font.size": 14, "figure.dpi": 100, "lines.linewidth": 2})
    else:
        plt.style.use("default")


def plot_time_series(times, series_dict, outdir=".", dpi=300):
    """
    Plot diagnostic time series.

    Args:
        times (ndarray): Time values (N,)
        series_dict (dict): Dictionary of scalar arrays {name: (N,) array}
        outdir (str or Path): Output directory for figures
        dpi (int): Figure DPI

    Generates:
        - nusselt.png (if 'nu' or 'nuvol' present)
        - re.png (if present)

    Returns:
        list: Paths of the written figures
    """
    outdir = pathlib.Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    written = []

    labels = {"nu": "Nu (plates)", "nuvol": "Nu (volume)"}
    if any(k in series_dict for k in labels):
        plt.figure(figsize=(8, 4.5))
        for key, label in labels.items():
            if key in series_dict:
                plt.plot(times, series_dict[key], linewidth=1.5, label=label)
        plt.xlabel("Time t")
        plt.ylabel("Nu")
        plt.title("Nusselt Number vs Time")
        plt.grid(True, alpha=0.3, linestyle="--")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / "nusselt.png", dpi=dpi, bbox_inches="tight")
        plt.close()
        written.append(outdir / "nusselt.png")

    if "re" in series_dict:
        plt.figure(figsize=(8, 4.5))
        plt.plot(times, series_dict["re"], linewidth=1.5)
        plt.xlabel("Time t")
        plt.ylabel("Re")
        plt.title("Reynolds Number vs Time")
        plt.grid(True, alpha=0.3, linestyle="--")
        plt.tight_layout()
        plt.savefig(outdir / "re.png", dpi=dpi, bbox_inches="tight")
        plt.close()
        written.append(outdir / "re.png")

    return written


def plot_snapshot(snapshot, outdir=".", fields=("temp", "ux", "uy", "pres"),
                  dpi=200, name=None):
    """
    Plot fields of a snapshot side by side.

    Args:
        snapshot (dict): Output of post.io.read_snapshot
        outdir (str or Path): Output directory
        fields (sequence): Field names to plot
        dpi (int): Figure DPI
        name (str or None): File name (default: snapshot_t{time:.3f}.png)

    Returns:
        Path: Path of the written figure
    """
    outdir = pathlib.Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    fields = [f for f in fields if f in snapshot]
    if not fields:
        raise ValueError("No fields to plot in snapshot")

    x, y = snapshot["x"], snapshot["y"]
    fig, axes = plt.subplots(1, len(fields), figsize=(4 * len(fields), 3.5), squeeze=False)
    for ax, key in zip(axes[0], fields):
        data = snapshot[key]
        abs_max = float(np.nanmax(np.abs(data))) if np.any(np.isfinite(data)) else 0.0
        mesh = ax.pcolormesh(x, y, data.T, shading="auto", cmap="RdBu_r",
                             vmin=-abs_max, vmax=abs_max)
        fig.colorbar(mesh, ax=ax, shrink=0.8)
        ax.set_title(key)
        ax.set_xlabel("x")
        ax.set_ylabel("y")
        ax.set_aspect("equal", adjustable="box")

    time = snapshot.get("time")
    if time is not None:
        fig.suptitle(f"t = {time:.3f}")
    fig.tight_layout()

    savename = name or (f"snapshot_t{time:.3f}.png" if time is not None else "snapshot.png")
    fig.savefig(outdir / savename, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return outdir / savename


def plot_mean_profile(snapshot, field="temp", outdir=".", dpi=200):
    """
    Plot the horizontally averaged profile of a field against y.

    Returns:
        Path: Path of the written figure
    """
    outdir = pathlib.Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    profile = analysis.horizontal_mean(snapshot[field])
    plt.figure(figsize=(4, 5))
    plt.plot(profile, snapshot["y"], linewidth=1.5)
    plt.xlabel(f"<{field}>_x")
    plt.ylabel("y")
    plt.grid(True, alpha=0.3, linestyle="--")
    plt.tight_layout()
    path = outdir / f"profile_{field}.png"
    plt.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close()
    return path
