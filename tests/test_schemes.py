"""Tests for the 1D Upwind, WENO5 and QUICK advective terms."""

from __future__ import annotations

import numpy as np
import pytest

from smokeadvect.fluid.schemes import (
    SCHEME_QUICK,
    SCHEME_UPWIND,
    SCHEME_WENO5,
    WENO_D0,
    WENO_D1,
    WENO_D2,
    advdiff,
    weno5,
    weno5_weights,
)

EULERIAN = [SCHEME_UPWIND, SCHEME_WENO5, SCHEME_QUICK]


def _linear_stencil(slope: float, offset: float = 0.0) -> list[float]:
    return [offset + slope * k for k in range(-3, 4)]


class TestWENO5Weights:
    """Nonlinear weights form a convex combination."""

    def test_weights_are_convex(self, rng):
        for scale in (1e-3, 1.0, 1e3, 1e80, 1e150):
            for v in rng.normal(size=(200, 5)) * scale:
                w = weno5_weights(*v)
                assert min(w) >= 0.0
                assert sum(w) == pytest.approx(1.0, abs=1e-12)

    def test_oscillating_extreme_stencil_stays_convex(self):
        for scale in (1e80, 1e150, 1e200):
            w = weno5_weights(*(np.array([1.0, -1.0, 1.0, -1.0, 1.0]) * scale))
            assert min(w) >= 0.0
            assert sum(w) == pytest.approx(1.0, abs=1e-12)

    def test_extreme_stencil_term_is_finite(self):
        stencil = [(-1.0) ** k * 1e80 for k in range(7)]
        for vel in (-1.0, 1.0):
            assert np.isfinite(advdiff(SCHEME_WENO5, vel, *stencil))

    def test_smooth_data_recovers_ideal_weights(self):
        w = weno5_weights(2.0, 2.0, 2.0, 2.0, 2.0)
        np.testing.assert_allclose(w, [WENO_D0, WENO_D1, WENO_D2], atol=1e-12)

    def test_discontinuity_suppresses_its_substencil(self):
        # Jump inside the first sub-stencil only
        w = weno5_weights(100.0, 0.0, 0.0, 0.0, 0.0)
        assert w[0] < 1e-6
        assert w[1] + w[2] == pytest.approx(1.0, abs=1e-6)


class TestEulerianTerms:
    """Behaviour of each scheme through the ``advdiff`` dispatcher."""

    @pytest.mark.parametrize("method", EULERIAN)
    def test_uniform_field_has_zero_term(self, method):
        stencil = [3.0] * 7
        for vel in (-2.0, -0.5, 0.5, 2.0):
            assert advdiff(method, vel, *stencil) == 0.0

    @pytest.mark.parametrize("method", EULERIAN)
    def test_zero_velocity_has_zero_term(self, method, rng):
        assert advdiff(method, 0.0, *rng.normal(size=7)) == 0.0

    @pytest.mark.parametrize("method", EULERIAN)
    @pytest.mark.parametrize("vel", [-1.3, 0.8])
    def test_linear_profile_is_exact(self, method, vel):
        stencil = _linear_stencil(slope=2.0, offset=5.0)
        assert advdiff(method, vel, *stencil) == pytest.approx(-vel * 2.0, rel=1e-9)

    def test_unknown_method_contributes_nothing(self, rng):
        assert advdiff(7, 1.0, *rng.normal(size=7)) == 0.0

    def test_upwind_picks_face_by_sign(self):
        stencil = [0.0, 0.0, 1.0, 3.0, 7.0, 0.0, 0.0]
        # vel > 0 uses f(i) - f(i-1) = 2, vel < 0 uses f(i+1) - f(i) = 4
        assert advdiff(SCHEME_UPWIND, 1.0, *stencil) == -2.0
        assert advdiff(SCHEME_UPWIND, -1.0, *stencil) == 4.0

    def test_weno5_stencil_is_upwind_biased(self, rng):
        stencil = list(rng.normal(size=7))
        base_pos = weno5(1.0, *stencil)
        base_neg = weno5(-1.0, *stencil)
        changed = list(stencil)
        changed[6] += 10.0
        assert weno5(1.0, *changed) == base_pos
        changed = list(stencil)
        changed[0] += 10.0
        assert weno5(-1.0, *changed) == base_neg

    def test_quick_ignores_outer_points(self, rng):
        stencil = list(rng.normal(size=7))
        changed = list(stencil)
        changed[0] += 5.0
        changed[6] -= 5.0
        for vel in (-1.0, 1.0):
            assert advdiff(SCHEME_QUICK, vel, *changed) == advdiff(SCHEME_QUICK, vel, *stencil)

    def test_quick_quadratic_correction(self):
        stencil = [float(k * k) for k in range(-3, 4)]
        # f = k^2 at i = 0: centre difference 0, third differences vanish
        assert advdiff(SCHEME_QUICK, 1.0, *stencil) == pytest.approx(0.0, abs=1e-12)
        assert advdiff(SCHEME_QUICK, -1.0, *stencil) == pytest.approx(0.0, abs=1e-12)

    @pytest.mark.parametrize("method", [SCHEME_WENO5, SCHEME_QUICK])
    def test_higher_order_beats_upwind_on_smooth_data(self, method):
        h = 0.05
        stencil = [np.sin(1.0 + k * h) for k in range(-3, 4)]
        exact = -1.0 * np.cos(1.0) * h
        err_up = abs(advdiff(SCHEME_UPWIND, 1.0, *stencil) - exact)
        err_hi = abs(advdiff(method, 1.0, *stencil) - exact)
        assert err_hi < err_up
