"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from smokeadvect.core.bases import FluidState


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def zero_velocity_state(rng):
    """Still fluid carrying a random concentration field."""
    state = FluidState.zeros(8, 12)
    state.c[:] = rng.random((12, 12))
    return state


def make_vortex_state(n: int, cn: int, amplitude: float = 1.0) -> FluidState:
    """Smooth rotating flow with a Gaussian blob of concentration."""
    state = FluidState.zeros(n, cn)
    # x-faces sit at (i/n, (j+0.5)/n), y-faces at ((i+0.5)/n, j/n)
    xu = np.arange(n + 1)[:, None] / n
    yu = (np.arange(n)[None, :] + 0.5) / n
    xv = (np.arange(n)[:, None] + 0.5) / n
    yv = np.arange(n + 1)[None, :] / n
    state.u[:] = -amplitude * np.sin(np.pi * xu) * np.cos(np.pi * yu) * np.ones_like(xu * yu)
    state.v[:] = amplitude * np.cos(np.pi * xv) * np.sin(np.pi * yv) * np.ones_like(xv * yv)

    xc = (np.arange(cn)[:, None] + 0.5) / cn
    yc = (np.arange(cn)[None, :] + 0.5) / cn
    state.c[:] = np.exp(-((xc - 0.5) ** 2 + (yc - 0.35) ** 2) / 0.02)
    return state


@pytest.fixture
def vortex_state():
    """Smooth test flow on an 8x8 velocity grid and 16x16 concentration grid."""
    return make_vortex_state(8, 16)


@pytest.fixture
def vortex_factory():
    """Build ``make_vortex_state(n, cn, amplitude)`` states on demand."""
    return make_vortex_state
