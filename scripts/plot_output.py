#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Plot chebflow simulation output: diagnostics, snapshots and mean profiles.

This script provides a simple interface to visualise all output of a single
run directory. It automatically detects available data and generates plots.

Usage:
    python plot_output.py --rundir data --outdir ./figures

    python plot_output.py --rundir data --outdir ./my_plots --dpi 150 --snap_stride 10

For help:
    python plot_output.py --help
"""

import argparse
import pathlib
import sys

# Add parent directory to path to import post-processing module
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

from tqdm import tqdm

from post import io, visualisation, analysis


def get_args():
    """Parse command-line arguments."""
    ap = argparse.ArgumentParser(
        description="Plot diagnostics and snapshots of a single chebflow run.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # Required arguments
    ap.add_argument("--rundir", type=str, required=True,
                   help="Run directory containing 'flow*.h5' and 'diagnostics.h5'")

    # Output
    ap.add_argument("--outdir", type=str, default="./figures",
                   help="Output directory for generated figures")
    ap.add_argument("--dpi", type=int, default=300,
                   help="Figure DPI (resolution)")

    # What to plot
    ap.add_argument("--no_diagnostics", action="store_true",
                   help="Skip diagnostic time-series plots")
    ap.add_argument("--no_snapshots", action="store_true",
                   help="Skip snapshot frame generation")

    # Snapshot selection
    ap.add_argument("--snap_start", type=int, default=0,
                   help="Index of the first snapshot to plot")
    ap.add_argument("--snap_count", type=int, default=0,
                   help="Number of snapshots to plot (0 = all)")
    ap.add_argument("--snap_stride", type=int, default=1,
                   help="Stride between snapshots")

    # Statistics window
    ap.add_argument("--t_start", type=float, default=None,
                   help="Start time of the statistics window")

    return ap.parse_args()


def main():
    """Main execution function."""
    args = get_args()

    rundir = pathlib.Path(args.rundir).resolve()
    out_root = pathlib.Path(args.outdir).resolve()
    out_root.mkdir(parents=True, exist_ok=True)

    print("=" * 70)
    print("chebflow Output Plotting")
    print("=" * 70)
    print(f"Run directory: {rundir}")
    print(f"Output directory: {out_root}")
    print(f"DPI: {args.dpi}")
    print("=" * 70)

    # 1) Diagnostic time series
    if not args.no_diagnostics:
        print("\n[1/2] Plotting diagnostics...")
        diag_path = rundir / "diagnostics.h5"

        if not diag_path.exists():
            print(f"  Warning: No diagnostics file found at {diag_path}")
        else:
            try:
                times, series_dict = io.read_diagnostics(diag_path)
                print(f"  Loaded {len(times)} time points")
                print(f"  Available series: {', '.join(series_dict.keys())}")

                visualisation.plot_time_series(
                    times, series_dict,
                    outdir=out_root / "diagnostics",
                    dpi=args.dpi
                )
                print(f"  Saved to {out_root / 'diagnostics'}")

                # Compute and print statistics
                stats = analysis.compute_statistics_summary(times, series_dict, t_start=args.t_start)
                print("\n  Statistics:")
                for name, stat in stats.items():
                    print(f"    {name:8s}: mean={stat['mean']:10.3e}, "
                          f"std={stat['std']:10.3e}")
                if "nu" in series_dict and "nuvol" in series_dict:
                    mismatch = analysis.nusselt_mismatch(times, series_dict, t_start=args.t_start)
                    print(f"    Nu/Nuvol mismatch: {mismatch:.3e}")

            except (OSError, KeyError, ValueError) as e:
                print(f"  Error plotting diagnostics: {e}")

    # 2) Snapshots
    if not args.no_snapshots:
        print("\n[2/2] Plotting snapshot frames...")
        try:
            snap_files = io.list_snapshots(rundir)
        except FileNotFoundError as e:
            print(f"  Warning: {e}")
            snap_files = []

        if snap_files:
            stride = max(1, args.snap_stride)
            start = min(max(0, args.snap_start), len(snap_files) - 1)
            selected = snap_files[start::stride]
            if args.snap_count > 0:
                selected = selected[:args.snap_count]
            print(f"  Found {len(snap_files)} snapshot file(s), plotting {len(selected)}")

            subdir = out_root / "snapshots"
            for pos, snap_h5 in enumerate(tqdm(selected, desc="Plotting snapshots"), start=1):
                try:
                    snapshot = io.read_snapshot(snap_h5)
                    visualisation.plot_snapshot(snapshot, outdir=subdir, dpi=args.dpi)
                    if pos == len(selected):
                        visualisation.plot_mean_profile(snapshot, "temp", outdir=subdir, dpi=args.dpi)
                except (OSError, KeyError, ValueError) as e:
                    print(f"  Error plotting {snap_h5.name}: {e}")
            print(f"    Saved to {subdir}")

    print("\n" + "=" * 70)
    print("Plotting complete!")
    print(f"All figures saved to: {out_root}")
    print("=" * 70)


if __name__ == "__main__":
    main()
