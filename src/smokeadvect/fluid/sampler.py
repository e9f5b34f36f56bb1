"""Boundary-aware sample fetches on the MAC grid.

Velocity fetches clamp out-of-range indices to the nearest stored face;
concentration fetches return exactly zero outside the grid (open domain).

Layout: ``u`` has shape (n+1, n), ``v`` has shape (n, n+1), ``c`` has
shape (cn, cn), all indexed ``[i, j]`` with i along x.
"""

from __future__ import annotations

import numpy as np
from numba import njit, prange


@njit(cache=True)
def clamp_index(i: int, lo: int, hi: int) -> int:
    if i < lo:
        return lo
    if i > hi:
        return hi
    return i


@njit(cache=True)
def u_ref(u: np.ndarray, v: np.ndarray, axis: int, i: int, j: int) -> float:
    """Velocity component ``axis`` at face (i, j), index-clamped.

    axis 0 clamps to [0, n] x [0, n-1]; axis 1 clamps to [0, n-1] x [0, n].
    """
    # prange indices arrive unsigned; offsets from them arrive as floats
    i = np.int64(i)
    j = np.int64(j)
    n = v.shape[0]
    if axis == 0:
        return u[clamp_index(i, 0, n), clamp_index(j, 0, n - 1)]
    return v[clamp_index(i, 0, n - 1), clamp_index(j, 0, n)]


@njit(cache=True)
def c_ref(c: np.ndarray, i: int, j: int) -> float:
    """Concentration at cell (i, j); zero outside [0, cn-1]^2."""
    i = np.int64(i)
    j = np.int64(j)
    cn = c.shape[0]
    if i < 0 or i > cn - 1 or j < 0 or j > cn - 1:
        return 0.0
    return c[i, j]


# ============================================================
# Transport velocity at staggered locations
# ============================================================

@njit(cache=True)
def y_velocity_at_x_face(u: np.ndarray, v: np.ndarray, i: int, j: int) -> float:
    """Mean of the four y-faces surrounding x-face (i, j)."""
    return (
        u_ref(u, v, 1, i - 1, j) + u_ref(u, v, 1, i, j)
        + u_ref(u, v, 1, i - 1, j + 1) + u_ref(u, v, 1, i, j + 1)
    ) / 4.0


@njit(cache=True)
def x_velocity_at_y_face(u: np.ndarray, v: np.ndarray, i: int, j: int) -> float:
    """Mean of the four x-faces surrounding y-face (i, j)."""
    return (
        u_ref(u, v, 0, i, j - 1) + u_ref(u, v, 0, i, j)
        + u_ref(u, v, 0, i + 1, j) + u_ref(u, v, 0, i + 1, j - 1)
    ) / 4.0


@njit(cache=True, parallel=True)
def project_to_faces(u: np.ndarray, v: np.ndarray, ux: np.ndarray, uy: np.ndarray) -> None:
    """Fill full (x, y) velocity at every x-face (``ux``) and y-face (``uy``)."""
    n = v.shape[0]
    for i in prange(n + 1):
        for j in range(n):
            ux[0, i, j] = u[i, j]
            ux[1, i, j] = y_velocity_at_x_face(u, v, i, j)
    for i in prange(n):
        for j in range(n + 1):
            uy[0, i, j] = x_velocity_at_y_face(u, v, i, j)
            uy[1, i, j] = v[i, j]


@njit(cache=True, parallel=True)
def project_to_cells(u: np.ndarray, v: np.ndarray, up: np.ndarray) -> None:
    """Average opposite faces to get (x, y) velocity at each cell centre."""
    n = v.shape[0]
    for i in prange(n):
        for j in range(n):
            up[0, i, j] = 0.5 * u[i, j] + 0.5 * u[i + 1, j]
            up[1, i, j] = 0.5 * v[i, j] + 0.5 * v[i, j + 1]
