"""Derived diagnostic quantities for an advected state.

Pure numpy; called at most once per step by the solver and freely by
drivers between steps.
"""

from __future__ import annotations

import numpy as np

from smokeadvect.core.bases import FluidState


def max_speed(state: FluidState) -> float:
    """Largest absolute velocity component on any face."""
    return float(max(np.max(np.abs(state.u)), np.max(np.abs(state.v))))


def cfl_number(state: FluidState, dt: float) -> float:
    """Advective CFL number ``dt * max|u| / h`` on the finer of the two grids.

    Args:
        state: Current fields.
        dt: Timestep.

    Returns:
        Courant number; explicit Eulerian schemes need it below ~1.
    """
    return dt * max_speed(state) * max(state.n, state.cn)


def total_concentration(state: FluidState) -> float:
    """Integral of concentration over the unit domain (cell area 1/cn^2)."""
    return float(np.sum(state.c)) / state.cn**2


def is_finite(state: FluidState) -> bool:
    """True if no NaN or inf appears in u, v or c."""
    return bool(
        np.all(np.isfinite(state.u))
        and np.all(np.isfinite(state.v))
        and np.all(np.isfinite(state.c))
    )
