"""
Fixed-step time loop for integrable problems.

Any object providing update(), get_time(), get_dt(), write() and exit() can
be integrated. The loop stops on the first of:

    - time limit reached
    - timestep limit reached
    - wall-time limit reached
    - pde.exit() returning True (e.g. NaN in the divergence)
"""

import logging
import time

logger = logging.getLogger(__name__)

MAX_TIMESTEP = 10_000_000


def is_save_time(t, save_intervall, dt):
    """True if t lies within half a timestep of a multiple of save_intervall."""
    rem = t % save_intervall
    return rem < dt / 2.0 or rem > save_intervall - dt / 2.0


def integrate(pde, max_time, save_intervall=None, max_walltime=None,
              max_timestep=MAX_TIMESTEP):
    """
    Advance *pde* until a stop criterion is met.

    Args:
        pde: Object implementing the integrable interface
        max_time (float): Simulation time at which to stop
        save_intervall (float, optional): Call pde.write() at multiples of
            this simulation time interval
        max_walltime (float, optional): Wall-clock limit in seconds
        max_timestep (int): Maximum number of timesteps

    Returns:
        str: Stop reason, one of "time", "timestep", "walltime", "exit"
    """
    if max_time < 0:
        raise ValueError(f"max_time must be non-negative, got {max_time}")
    if save_intervall is not None and save_intervall <= 0:
        raise ValueError(f"save_intervall must be positive, got {save_intervall}")

    timestep = 0
    eps_dt = pde.get_dt() * 1e-4
    wall_start = time.time()
    logger.info("Starting time integration up to t = %.3f", max_time)

    while True:
        pde.update()
        timestep += 1

        if save_intervall is not None and is_save_time(pde.get_time(), save_intervall, pde.get_dt()):
            pde.write()

        if pde.get_time() + eps_dt >= max_time:
            logger.info("Time limit reached: %.3f", pde.get_time())
            return "time"
        if timestep >= max_timestep:
            logger.info("Timestep limit reached: %d", timestep)
            return "timestep"
        if max_walltime is not None and time.time() - wall_start >= max_walltime:
            logger.info("Wall-time limit reached after %d timesteps", timestep)
            return "walltime"
        if pde.exit():
            logger.warning("Break criterion triggered at t = %.3f", pde.get_time())
            return "exit"
