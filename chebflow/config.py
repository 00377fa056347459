"""
Configuration and command-line argument parsing for chebflow simulations.

This module handles all command-line arguments and parameter validation
for the Rayleigh-Benard convection solver.
"""

import argparse


def get_args(argv=None):
    """
    Parse command-line arguments for a chebflow simulation.

    Args:
        argv (list, optional): Argument list (defaults to sys.argv[1:])

    Returns:
        argparse.Namespace: Parsed command-line arguments containing all
            simulation parameters (resolution, physics parameters, time
            integration and output settings)
    """
    ap = argparse.ArgumentParser(
        description="2D Rayleigh-Benard convection, periodic in x (Fourier-Chebyshev spectral method)",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # Domain / resolution parameters
    domain_group = ap.add_argument_group('Domain and Resolution')
    domain_group.add_argument(
        "--nx", type=int, default=64,
        help="Number of Fourier points in x direction"
    )
    domain_group.add_argument(
        "--ny", type=int, default=64,
        help="Number of Chebyshev points in y direction"
    )
    domain_group.add_argument(
        "--aspect", type=float, default=1.0,
        help="Horizontal scale of the cell (x spans 2*pi*aspect, y spans [-1, 1])"
    )

    # Physics parameters
    physics_group = ap.add_argument_group('Physical Parameters')
    physics_group.add_argument(
        "--ra", type=float, default=1e5,
        help="Rayleigh number"
    )
    physics_group.add_argument(
        "--pr", type=float, default=1.0,
        help="Prandtl number"
    )

    # Time integration
    time_group = ap.add_argument_group('Time Integration')
    time_group.add_argument(
        "--dt", type=float, default=0.01,
        help="Timestep"
    )
    time_group.add_argument(
        "--max_time", type=float, default=100.0,
        help="Total simulation time"
    )
    time_group.add_argument(
        "--save_intervall", type=float, default=1.0,
        help="Snapshot and diagnostics output interval"
    )
    time_group.add_argument(
        "--max_walltime", type=float, default=None,
        help="Optional wall-clock limit in seconds"
    )

    # Initial conditions
    ic_group = ap.add_argument_group('Initial Conditions')
    ic_group.add_argument(
        "--amp", type=float, default=0.2,
        help="Amplitude of the initial convection roll"
    )
    ic_group.add_argument(
        "--restart", type=str, default=None,
        help="Optional snapshot file to restart from"
    )

    # Output and runtime
    misc_group = ap.add_argument_group('Miscellaneous')
    misc_group.add_argument(
        "--outdir", type=str, default="data",
        help="Output directory for snapshots and diagnostics"
    )
    misc_group.add_argument(
        "--workers", type=int, default=1,
        help="Threads used for the per-mode banded solves"
    )
    misc_group.add_argument(
        "--log_level", type=str, default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )

    return ap.parse_args(argv)


def validate_args(args):
    """
    Validate command-line arguments for consistency.

    Args:
        args: Parsed arguments from get_args()

    Raises:
        ValueError: If arguments are inconsistent or invalid
    """
    # Check resolution
    if args.nx < 2:
        raise ValueError("Number of Fourier points nx must be at least 2")

    if args.ny < 4:
        raise ValueError("Number of Chebyshev points ny must be at least 4")

    if args.aspect <= 0:
        raise ValueError("Aspect ratio must be positive")

    # Check physics parameters
    if args.ra <= 0 or args.pr <= 0:
        raise ValueError("Rayleigh and Prandtl numbers must be positive")

    # Check time parameters
    if args.dt <= 0:
        raise ValueError("Timestep dt must be positive")

    if args.max_time <= 0:
        raise ValueError("Total simulation time max_time must be positive")

    if args.save_intervall is not None and args.save_intervall < args.dt:
        raise ValueError("save_intervall must be at least one timestep")

    if args.max_walltime is not None and args.max_walltime <= 0:
        raise ValueError("max_walltime must be positive when specified")

    if args.workers < 1:
        raise ValueError("Number of workers must be at least 1")
