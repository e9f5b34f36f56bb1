"""Interpolation kernels for sampling a grid at fractional coordinates.

Three kernels, selected by integer code (see ``InterpolationKind.code``):

- 0: bilinear on the 2x2 cell enclosing the point
- 1: natural cubic spline through a 4x4 neighbourhood, clamped per segment
- 2: monotone cubic Hermite through a 4x4 neighbourhood

Coordinates are in grid units (sample (i, j) sits at (i, j)) and are clamped
to [0, w-1] x [0, h-1] before sampling. The cubic kernels gather the 4x4
neighbourhood with every index clamped into the grid, interpolate each of the
four rows along x, then interpolate the four row results along y.
"""

from __future__ import annotations

import numpy as np
from numba import njit

from smokeadvect.fluid.sampler import clamp_index

KERNEL_LINEAR = 0
KERNEL_SPLINE = 1
KERNEL_MONOTONIC = 2


@njit(cache=True)
def clamp_coord(x: float, hi: float) -> float:
    if x < 0.0:
        return 0.0
    if x > hi:
        return hi
    return x


@njit(cache=True)
def linear_interpolate(d: np.ndarray, x: float, y: float) -> float:
    """Bilinear sample of ``d`` at (x, y)."""
    w, h = d.shape
    x = clamp_coord(x, w - 1.0)
    y = clamp_coord(y, h - 1.0)
    i = min(int(x), max(w - 2, 0))
    j = min(int(y), max(h - 2, 0))
    i1 = min(i + 1, w - 1)
    j1 = min(j + 1, h - 1)
    fx = x - i
    fy = y - j
    return (
        ((1.0 - fx) * d[i, j] + fx * d[i1, j]) * (1.0 - fy)
        + ((1.0 - fx) * d[i, j1] + fx * d[i1, j1]) * fy
    )


# ============================================================
# 1D four-point kernels on the interval between a1 and a2
# ============================================================

@njit(cache=True)
def spline_cubic_4(a0: float, a1: float, a2: float, a3: float, t: float) -> float:
    """Natural cubic spline through four unit-spaced samples, evaluated at a1 + t.

    The two interior second-derivative coefficients come from Thomas
    elimination of the tridiagonal system; the end ones are zero. The
    result is clamped to [min(a1, a2), max(a1, a2)].
    """
    alpha1 = 3.0 * (a2 - a1) - 3.0 * (a1 - a0)
    alpha2 = 3.0 * (a3 - a2) - 3.0 * (a2 - a1)

    # Forward sweep
    l1 = 4.0
    mu1 = 1.0 / l1
    z1 = alpha1 / l1
    l2 = 4.0 - mu1
    z2 = (alpha2 - z1) / l2

    # Back substitution (c3 = 0)
    c2 = z2
    c1 = z1 - mu1 * c2
    b1 = a2 - a1 - (c2 + 2.0 * c1) / 3.0
    d1 = (c2 - c1) / 3.0

    value = a1 + b1 * t + c1 * t * t + d1 * t * t * t
    lo = min(a1, a2)
    hi = max(a1, a2)
    return min(hi, max(lo, value))


@njit(cache=True)
def _limited_slope(side: float, centre: float) -> float:
    """Node slope from the neighbouring difference, zero on a sign change."""
    if side * centre <= 0.0:
        return 0.0
    slope = 0.5 * (side + centre)
    cap = 3.0 * centre
    if abs(slope) > abs(cap):
        slope = cap
    return slope


@njit(cache=True)
def monotonic_cubic_4(a0: float, a1: float, a2: float, a3: float, t: float) -> float:
    """Monotone cubic Hermite between a1 and a2, evaluated at a1 + t.

    A flat central interval gets zero slopes at both ends. Slopes are kept
    within [0, 3] times the central difference so the segment never leaves
    [min(a1, a2), max(a1, a2)].
    """
    d0 = a1 - a0
    d1 = a2 - a1
    d2 = a3 - a2

    if d1 == 0.0:
        m0 = 0.0
        m1 = 0.0
    else:
        m0 = _limited_slope(d0, d1)
        m1 = _limited_slope(d2, d1)

    c3 = m0 + m1 - 2.0 * d1
    c2 = 3.0 * d1 - 2.0 * m0 - m1
    return a1 + m0 * t + c2 * t * t + c3 * t * t * t


@njit(cache=True)
def _cubic_4(kind: int, a0: float, a1: float, a2: float, a3: float, t: float) -> float:
    if kind == KERNEL_SPLINE:
        return spline_cubic_4(a0, a1, a2, a3, t)
    return monotonic_cubic_4(a0, a1, a2, a3, t)


@njit(cache=True)
def _cubic_row(kind: int, d: np.ndarray, ix: int, jv: int, t: float) -> float:
    w = d.shape[0]
    return _cubic_4(
        kind,
        d[clamp_index(ix - 1, 0, w - 1), jv],
        d[clamp_index(ix, 0, w - 1), jv],
        d[clamp_index(ix + 1, 0, w - 1), jv],
        d[clamp_index(ix + 2, 0, w - 1), jv],
        t,
    )


@njit(cache=True)
def _cubic_interpolate(kind: int, d: np.ndarray, x: float, y: float) -> float:
    w, h = d.shape
    x = clamp_coord(x, w - 1.0)
    y = clamp_coord(y, h - 1.0)
    ix = int(x)
    iy = int(y)
    fx = x - ix
    fy = y - iy
    r0 = _cubic_row(kind, d, ix, clamp_index(iy - 1, 0, h - 1), fx)
    r1 = _cubic_row(kind, d, ix, clamp_index(iy, 0, h - 1), fx)
    r2 = _cubic_row(kind, d, ix, clamp_index(iy + 1, 0, h - 1), fx)
    r3 = _cubic_row(kind, d, ix, clamp_index(iy + 2, 0, h - 1), fx)
    return _cubic_4(kind, r0, r1, r2, r3, fy)


@njit(cache=True)
def spline_interpolate(d: np.ndarray, x: float, y: float) -> float:
    """Clamped cubic spline sample of ``d`` at (x, y)."""
    return _cubic_interpolate(KERNEL_SPLINE, d, x, y)


@njit(cache=True)
def monotonic_cubic(d: np.ndarray, x: float, y: float) -> float:
    """Monotone cubic sample of ``d`` at (x, y)."""
    return _cubic_interpolate(KERNEL_MONOTONIC, d, x, y)


@njit(cache=True)
def interpolate(kind: int, d: np.ndarray, x: float, y: float) -> float:
    """Sample ``d`` at (x, y) with the kernel selected by ``kind``.

    Codes other than linear and spline use the monotone cubic.
    """
    if kind == KERNEL_LINEAR:
        return linear_interpolate(d, x, y)
    if kind == KERNEL_SPLINE:
        return spline_interpolate(d, x, y)
    return monotonic_cubic(d, x, y)
