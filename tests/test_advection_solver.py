"""End-to-end tests for the advection timestep."""

from __future__ import annotations

import itertools
import logging

import numpy as np
import pytest

from smokeadvect import (
    AdvectionConfig,
    AdvectionMethod,
    AdvectionSolver,
    FluidState,
    InterpolationKind,
    TimeIntegrator,
    advect,
)
from smokeadvect.diagnostics import is_finite

ALL_COMBINATIONS = list(
    itertools.product(AdvectionMethod, InterpolationKind, TimeIntegrator)
)


class TestZeroVelocity:
    """A still fluid leaves both fields unchanged."""

    @pytest.mark.parametrize(("method", "interp", "integrator"), ALL_COMBINATIONS)
    @pytest.mark.parametrize("dt", [0.01, 3.0])
    def test_fields_unchanged(self, method, interp, integrator, dt, zero_velocity_state):
        c0 = zero_velocity_state.c.copy()
        solver = AdvectionSolver(method=method, interpolation=interp, integrator=integrator)
        solver.step(zero_velocity_state, dt)
        np.testing.assert_allclose(zero_velocity_state.c, c0, atol=1e-12)
        np.testing.assert_allclose(zero_velocity_state.u, 0.0, atol=1e-12)
        np.testing.assert_allclose(zero_velocity_state.v, 0.0, atol=1e-12)


class TestScenarios:
    """Small worked cases."""

    def test_upwind_moves_seed_downstream(self):
        state = FluidState.zeros(4, 4)
        state.u[:] = 1.0
        state.c[1, 2] = 1.0
        solver = AdvectionSolver(method="upwind", integrator="forward_euler")
        solver.step(state, 0.1)

        assert state.c[1, 2] < 1.0
        assert state.c[2, 2] > 0.0
        np.testing.assert_allclose(state.c[1, 2], 0.6)
        np.testing.assert_allclose(state.c[2, 2], 0.4)
        assert state.c.min() >= 0.0 and state.c.max() <= 1.0
        np.testing.assert_allclose(state.u, 1.0)

    @pytest.mark.parametrize("method", list(AdvectionMethod))
    def test_mismatched_resolution_long_run(self, method, vortex_factory):
        state = vortex_factory(8, 16)
        solver = AdvectionSolver(method=method, integrator="rk4", interpolation="monotonic_cubic")
        for _ in range(100):
            solver.step(state, 0.01)
        assert state.u.shape == (9, 8)
        assert state.v.shape == (8, 9)
        assert state.c.shape == (16, 16)
        assert is_finite(state)

    @pytest.mark.parametrize("integrator", list(TimeIntegrator))
    def test_backtrace_methods_bypass_integrator(self, integrator, vortex_factory):
        reference = vortex_factory(8, 12)
        AdvectionSolver(method="maccormack", integrator="forward_euler").step(reference, 0.02)
        state = vortex_factory(8, 12)
        AdvectionSolver(method="maccormack", integrator=integrator).step(state, 0.02)
        np.testing.assert_array_equal(state.c, reference.c)
        np.testing.assert_array_equal(state.u, reference.u)

    def test_rk4_velocity_close_to_euler_for_small_dt(self, vortex_factory):
        euler = vortex_factory(8, 8)
        runge = vortex_factory(8, 8)
        AdvectionSolver(method="upwind", integrator="forward_euler").step(euler, 1e-4)
        AdvectionSolver(method="upwind", integrator="rk4").step(runge, 1e-4)
        np.testing.assert_allclose(runge.u, euler.u, atol=1e-5)
        np.testing.assert_allclose(runge.v, euler.v, atol=1e-5)


class TestSolverState:
    """Ownership of caller arrays and scratch storage."""

    def test_step_is_in_place(self, vortex_state):
        u, v, c = vortex_state.u, vortex_state.v, vortex_state.c
        c0 = c.copy()
        returned = AdvectionSolver(method="weno5").step(vortex_state, 0.01)
        assert returned is vortex_state
        assert vortex_state.u is u and vortex_state.v is v and vortex_state.c is c
        assert not np.array_equal(c, c0)

    def test_scratch_reused_then_reallocated(self, vortex_factory):
        solver = AdvectionSolver(method="quick")
        state = vortex_factory(8, 16)
        solver.step(state, 0.01)
        solver.step(state, 0.01)
        assert solver.scratch.allocations == 1
        assert solver.scratch.key == (8, 16)

        solver.step(vortex_factory(6, 6), 0.01)
        assert solver.scratch.allocations == 2
        assert solver.scratch.key == (6, 6)

    def test_overrides_apply_on_top_of_config(self):
        config = AdvectionConfig(method="quick", integrator="modified_euler")
        solver = AdvectionSolver(config, integrator="rk4")
        assert solver.method is AdvectionMethod.quick
        assert solver.integrator is TimeIntegrator.rk4

    def test_functional_entry_point(self):
        n, cn = 4, 4
        u = np.ones((n + 1, n))
        v = np.zeros((n, n + 1))
        c = np.zeros((cn, cn))
        c[1, 2] = 1.0
        advect("upwind", "linear", "forward_euler", u, v, c, 0.1)
        np.testing.assert_allclose(c[1, 2], 0.6)
        np.testing.assert_allclose(c[2, 2], 0.4)

    def test_functional_entry_point_reuses_matching_solver(self):
        solver = AdvectionSolver(method="upwind", interpolation="linear", integrator="rk4")
        state = FluidState.zeros(4, 4)
        advect("upwind", "linear", "rk4", state.u, state.v, state.c, 0.1, solver=solver)
        advect("upwind", "linear", "rk4", state.u, state.v, state.c, 0.1, solver=solver)
        assert solver.scratch.allocations == 1

    def test_rejects_mismatched_shapes(self):
        with pytest.raises(ValueError, match="v must have shape"):
            FluidState(u=np.zeros((5, 4)), v=np.zeros((5, 5)), c=np.zeros((4, 4)))
        with pytest.raises(ValueError, match="square"):
            FluidState(u=np.zeros((5, 4)), v=np.zeros((4, 5)), c=np.zeros((4, 3)))
        with pytest.raises(ValueError, match="floating-point"):
            FluidState(u=np.zeros((5, 4), dtype=int), v=np.zeros((4, 5)), c=np.zeros((4, 4)))


class TestLogging:
    """Diagnostics are reported through the module logger only."""

    def test_cfl_warning(self, caplog):
        state = FluidState.zeros(8, 8)
        state.u[:] = 4.0
        solver = AdvectionSolver(method="upwind", integrator="forward_euler")
        with caplog.at_level(logging.WARNING, logger="smokeadvect.fluid.advection_solver"):
            solver.step(state, 0.1)
        assert "exceeds" in caplog.text

    def test_no_cfl_warning_for_backtrace(self, caplog):
        state = FluidState.zeros(8, 8)
        state.u[:] = 4.0
        solver = AdvectionSolver(method="semi_lagrangian")
        with caplog.at_level(logging.WARNING, logger="smokeadvect.fluid.advection_solver"):
            solver.step(state, 0.1)
        assert "exceeds" not in caplog.text

    def test_non_finite_warning(self, caplog):
        state = FluidState.zeros(4, 4)
        state.c[2, 2] = np.nan
        solver = AdvectionSolver(method="upwind", warn_non_finite=True)
        with caplog.at_level(logging.WARNING, logger="smokeadvect.fluid.advection_solver"):
            solver.step(state, 0.1)
        assert "Non-finite" in caplog.text
