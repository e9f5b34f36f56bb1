"""Advection step for a staggered-grid smoke simulator.

Advects the MAC-grid velocity (u on x-faces, v on y-faces) and an
independently resolved cell-centred concentration field by one timestep:

- Eulerian schemes (Upwind, WENO5, QUICK) produce dU/dt, which the selected
  explicit integrator (Forward Euler, Modified Euler, RK4) blends.
- Semi-Lagrangian and MacCormack backtrace with the selected interpolation
  kernel; their single evaluation is the full step and is copied into the
  state directly, whatever integrator is configured.

Pressure projection, boundary conditions and the simulation loop belong to
the caller. No CFL limit is enforced; exceeding ``cfl_warning`` is only
logged.
"""

from __future__ import annotations

import logging

import numpy as np

from smokeadvect.config import (
    AdvectionConfig,
    AdvectionMethod,
    InterpolationKind,
    TimeIntegrator,
)
from smokeadvect.core.bases import FluidState, StageFields
from smokeadvect.core.grid import copy2d
from smokeadvect.core.scratch import ScratchBuffers, ScratchPool
from smokeadvect.diagnostics.derived import cfl_number, is_finite
from smokeadvect.fluid.eulerian import advect_derivative
from smokeadvect.fluid.integrators import INTEGRATORS
from smokeadvect.fluid.semi_lagrangian import advect_backtrace

logger = logging.getLogger(__name__)


class AdvectionSolver:
    """Owns strategy selection and scratch storage; advances states in place.

    Args:
        config: Strategy selection. Defaults to ``AdvectionConfig()``.
        **overrides: Individual ``AdvectionConfig`` fields, applied on top of
            ``config`` (e.g. ``method="maccormack"``).

    One solver must not be stepped from several threads at once: the scratch
    buffers are shared between calls. Separate solvers are independent.
    """

    def __init__(self, config: AdvectionConfig | None = None, **overrides) -> None:
        base = config if config is not None else AdvectionConfig()
        if overrides:
            base = AdvectionConfig(**{**base.model_dump(), **overrides})
        self.config = base
        self.scratch = ScratchPool()

        logger.info(
            "AdvectionSolver initialized: method=%s, interpolation=%s, integrator=%s",
            self.method.label, self.interpolation.label, self.integrator.label,
        )

    @property
    def method(self) -> AdvectionMethod:
        return self.config.method

    @property
    def interpolation(self) -> InterpolationKind:
        return self.config.interpolation

    @property
    def integrator(self) -> TimeIntegrator:
        return self.config.integrator

    def _evaluate(self, fields, out: StageFields, dt: float, buffers: ScratchBuffers) -> None:
        """One advection evaluation of ``fields`` into ``out``."""
        if self.method.produces_derivative:
            advect_derivative(
                self.method.code,
                fields.u, fields.v, fields.c,
                out.u, out.v, out.c,
                buffers.up,
            )
        else:
            advect_backtrace(
                self.method.order,
                self.interpolation.code,
                fields.u, fields.v, fields.c,
                out.u, out.v, out.c,
                buffers.ux, buffers.uy, buffers.up, buffers.uc,
                dt,
            )

    def step(self, state: FluidState, dt: float) -> FluidState:
        """Advance ``state`` by ``dt`` in place.

        Args:
            state: Caller-owned fields; overwritten with the advected values.
            dt: Timestep. Not clamped; stability is the caller's concern.

        Returns:
            ``state``, for chaining.
        """
        buffers = self.scratch.get(state.n, state.cn)

        if self.method.produces_derivative:
            cfl = cfl_number(state, dt)
            if cfl > self.config.cfl_warning:
                logger.warning(
                    "%s step with CFL %.3f exceeds %.3f; results may be unstable",
                    self.method.label, cfl, self.config.cfl_warning,
                )

            def rhs(fields, out: StageFields) -> None:
                self._evaluate(fields, out, dt, buffers)

            INTEGRATORS[self.integrator](rhs, state, dt, buffers)
        else:
            result = buffers.k[0]
            self._evaluate(state, result, dt, buffers)
            copy2d(state.u, result.u)
            copy2d(state.v, result.v)
            copy2d(state.c, result.c)

        if self.config.warn_non_finite and not is_finite(state):
            logger.warning("Non-finite values after %s advection step (dt=%.3e)",
                           self.method.label, dt)

        logger.debug("Advected n=%d, cn=%d by dt=%.3e", state.n, state.cn, dt)
        return state


def advect(
    method: AdvectionMethod | str,
    interpolation: InterpolationKind | str,
    integrator: TimeIntegrator | str,
    u: np.ndarray,
    v: np.ndarray,
    c: np.ndarray,
    dt: float,
    solver: AdvectionSolver | None = None,
) -> None:
    """Advect raw arrays ``u``, ``v``, ``c`` in place by one timestep.

    Args:
        method: Spatial scheme.
        interpolation: Interpolation kernel.
        integrator: Time integrator.
        u: x-velocity, shape (n+1, n).
        v: y-velocity, shape (n, n+1).
        c: Concentration, shape (cn, cn).
        dt: Timestep.
        solver: Reused for its scratch buffers when its selection matches;
            otherwise a new solver is built for this call.
    """
    config = AdvectionConfig(method=method, interpolation=interpolation, integrator=integrator)
    if solver is None or (
        solver.method, solver.interpolation, solver.integrator
    ) != (config.method, config.interpolation, config.integrator):
        solver = AdvectionSolver(config)
    solver.step(FluidState(u=u, v=v, c=c), dt)
