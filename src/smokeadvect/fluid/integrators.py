"""Explicit time integrators for the Eulerian advection derivative.

Each integrator takes a right-hand-side callable ``rhs(fields, out)`` that
writes dU/dt of ``fields`` into the ``StageFields`` ``out``, and advances the
caller's state in place:

    Forward Euler:   U += dt * k0
    Modified Euler:  k1 = f(U + dt*k0);  U += dt/2 * (k0 + k1)
    RK4:             k1 = f(U + dt/2*k0), k2 = f(U + dt/2*k1), k3 = f(U + dt*k2)
                     U += dt/6 * (k0 + 2*k1 + 2*k2 + k3)

Stage states are built in ``scratch.tmp``; stage derivatives in ``scratch.k``.
"""

from __future__ import annotations

from typing import Callable

from smokeadvect.config import TimeIntegrator
from smokeadvect.core.bases import FluidState, StageFields
from smokeadvect.core.grid import op2d
from smokeadvect.core.scratch import ScratchBuffers

RhsFn = Callable[[object, StageFields], None]

# Weight of the current concentration in every stage state (velocity uses 1.0).
# Stage concentration is therefore 0.5*c + coef*dt*k, not c + coef*dt*k.
# This only affects the concentration derivative through c itself and is
# kept deliberately; see DESIGN.md before changing it.
CONCENTRATION_STAGE_WEIGHT = 0.5


def _stage_state(
    tmp: StageFields, state: FluidState, k: StageFields, coef: float, dt: float,
) -> StageFields:
    op2d(tmp.u, state.u, k.u, 1.0, coef * dt)
    op2d(tmp.v, state.v, k.v, 1.0, coef * dt)
    op2d(tmp.c, state.c, k.c, CONCENTRATION_STAGE_WEIGHT, coef * dt)
    return tmp


def _accumulate(state: FluidState, k: StageFields, weight: float) -> None:
    op2d(state.u, state.u, k.u, 1.0, weight)
    op2d(state.v, state.v, k.v, 1.0, weight)
    op2d(state.c, state.c, k.c, 1.0, weight)


def forward_euler(rhs: RhsFn, state: FluidState, dt: float, scratch: ScratchBuffers) -> None:
    k0 = scratch.k[0]
    rhs(state, k0)
    _accumulate(state, k0, dt)


def modified_euler(rhs: RhsFn, state: FluidState, dt: float, scratch: ScratchBuffers) -> None:
    """Two-stage Heun method."""
    k0, k1 = scratch.k[0], scratch.k[1]

    rhs(state, k0)
    rhs(_stage_state(scratch.tmp, state, k0, 1.0, dt), k1)

    _accumulate(state, k0, 0.5 * dt)
    _accumulate(state, k1, 0.5 * dt)


def rk4(rhs: RhsFn, state: FluidState, dt: float, scratch: ScratchBuffers) -> None:
    """Classical four-stage Runge-Kutta."""
    k0, k1, k2, k3 = scratch.k[:4]
    tmp = scratch.tmp

    rhs(state, k0)
    rhs(_stage_state(tmp, state, k0, 0.5, dt), k1)
    rhs(_stage_state(tmp, state, k1, 0.5, dt), k2)
    rhs(_stage_state(tmp, state, k2, 1.0, dt), k3)

    _accumulate(state, k0, dt / 6.0)
    _accumulate(state, k1, dt / 3.0)
    _accumulate(state, k2, dt / 3.0)
    _accumulate(state, k3, dt / 6.0)


INTEGRATORS: dict[TimeIntegrator, Callable[[RhsFn, FluidState, float, ScratchBuffers], None]] = {
    TimeIntegrator.forward_euler: forward_euler,
    TimeIntegrator.modified_euler: modified_euler,
    TimeIntegrator.rk4: rk4,
}
