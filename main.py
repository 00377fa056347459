#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
chebflow: 2D Rayleigh-Benard Convection Solver
==============================================

Rayleigh-Benard convection in a horizontally periodic cell, solved with a
Fourier-Chebyshev spectral method.

Usage:
    python main.py --nx 64 --ny 64 --ra 1e5 --pr 1 --dt 0.01 --max_time 100

    # Restart from a snapshot
    python main.py --restart data/flow100.000.h5 --max_time 200

For help:
    python main.py --help
"""

import logging
import sys

from chebflow import config
from chebflow.integrate import integrate
from chebflow.navier import Navier2DPeriodic


def main(argv=None):
    """
    Main entry point for chebflow simulations.

    Parses command-line arguments, validates configuration, sets up logging,
    and runs the time integration.
    """
    # Parse arguments
    args = config.get_args(argv)

    # Setup logging
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger = logging.getLogger(__name__)

    # Validate arguments
    try:
        config.validate_args(args)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    # Log configuration
    logger.info("=" * 70)
    logger.info("chebflow: 2D Rayleigh-Benard Convection Solver")
    logger.info("=" * 70)
    logger.info("Grid: %dx%d, aspect=%.2f", args.nx, args.ny, args.aspect)
    logger.info("Physics: Ra=%.2e, Pr=%.2f", args.ra, args.pr)
    logger.info("Time: dt=%.2e, max_time=%.2f, save_intervall=%s",
                args.dt, args.max_time, args.save_intervall)
    logger.info("Workers: %d", args.workers)
    logger.info("Output directory: %s", args.outdir)
    logger.info("=" * 70)

    navier = Navier2DPeriodic(
        args.nx, args.ny, args.ra, args.pr, args.dt,
        aspect=args.aspect, workers=args.workers,
    )
    navier.set_velocity(args.amp, 2.0, 1.0)
    navier.write_intervall = args.save_intervall
    if args.restart is not None:
        navier.read(args.restart)

    navier.outdir = args.outdir
    navier.write()

    try:
        reason = integrate(
            navier, args.max_time,
            save_intervall=args.save_intervall,
            max_walltime=args.max_walltime,
        )
    except Exception:
        logger.exception("Exception in main loop")
        raise

    logger.info("=" * 70)
    logger.info("Simulation finished (%s) at t = %.3f", reason, navier.get_time())
    logger.info("=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
