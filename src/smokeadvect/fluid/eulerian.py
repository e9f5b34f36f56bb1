"""Eulerian advection derivative (Upwind / WENO5 / QUICK).

For every stored sample of u, v and c, evaluates the 1D advective term along
x and along y with the transport velocity interpolated to that sample's
location, sums the two, and scales by the field's resolution (grid spacing
1/n for velocity, 1/cn for concentration). The result is dU/dt; the caller's
integrator decides how to blend it.
"""

from __future__ import annotations

import numpy as np
from numba import njit, prange

from smokeadvect.fluid.interpolation import linear_interpolate
from smokeadvect.fluid.sampler import (
    c_ref,
    project_to_cells,
    u_ref,
    x_velocity_at_y_face,
    y_velocity_at_x_face,
)
from smokeadvect.fluid.schemes import advdiff


@njit(cache=True)
def _velocity_term(
    method: int, u: np.ndarray, v: np.ndarray, axis: int,
    i: int, j: int, vx: float, vy: float,
) -> float:
    # Along x
    dx_term = advdiff(
        method, vx,
        u_ref(u, v, axis, i - 3, j), u_ref(u, v, axis, i - 2, j), u_ref(u, v, axis, i - 1, j),
        u_ref(u, v, axis, i, j),
        u_ref(u, v, axis, i + 1, j), u_ref(u, v, axis, i + 2, j), u_ref(u, v, axis, i + 3, j),
    )
    # Along y
    dy_term = advdiff(
        method, vy,
        u_ref(u, v, axis, i, j - 3), u_ref(u, v, axis, i, j - 2), u_ref(u, v, axis, i, j - 1),
        u_ref(u, v, axis, i, j),
        u_ref(u, v, axis, i, j + 1), u_ref(u, v, axis, i, j + 2), u_ref(u, v, axis, i, j + 3),
    )
    return dx_term + dy_term


@njit(cache=True)
def _concentration_term(
    method: int, c: np.ndarray, i: int, j: int, vx: float, vy: float,
) -> float:
    dx_term = advdiff(
        method, vx,
        c_ref(c, i - 3, j), c_ref(c, i - 2, j), c_ref(c, i - 1, j), c_ref(c, i, j),
        c_ref(c, i + 1, j), c_ref(c, i + 2, j), c_ref(c, i + 3, j),
    )
    dy_term = advdiff(
        method, vy,
        c_ref(c, i, j - 3), c_ref(c, i, j - 2), c_ref(c, i, j - 1), c_ref(c, i, j),
        c_ref(c, i, j + 1), c_ref(c, i, j + 2), c_ref(c, i, j + 3),
    )
    return dx_term + dy_term


@njit(cache=True, parallel=True)
def _velocity_derivative(
    method: int, u: np.ndarray, v: np.ndarray, out_u: np.ndarray, out_v: np.ndarray,
) -> None:
    n = v.shape[0]
    for i in prange(n + 1):
        for j in range(n):
            vy = y_velocity_at_x_face(u, v, i, j)
            out_u[i, j] = _velocity_term(method, u, v, 0, i, j, u[i, j], vy) * n
    for i in prange(n):
        for j in range(n + 1):
            vx = x_velocity_at_y_face(u, v, i, j)
            out_v[i, j] = _velocity_term(method, u, v, 1, i, j, vx, v[i, j]) * n


@njit(cache=True, parallel=True)
def _concentration_derivative(
    method: int, c: np.ndarray, up: np.ndarray, out_c: np.ndarray,
) -> None:
    n = up.shape[1]
    cn = c.shape[0]
    for i in prange(cn):
        for j in range(cn):
            x = i * n / cn
            y = j * n / cn
            vx = linear_interpolate(up[0], x, y)
            vy = linear_interpolate(up[1], x, y)
            out_c[i, j] = _concentration_term(method, c, i, j, vx, vy) * cn


def advect_derivative(
    method: int,
    u: np.ndarray,
    v: np.ndarray,
    c: np.ndarray,
    out_u: np.ndarray,
    out_v: np.ndarray,
    out_c: np.ndarray,
    up: np.ndarray,
) -> None:
    """Write dU/dt for u, v and c into ``out_u``, ``out_v``, ``out_c``.

    Args:
        method: Scheme code (0 upwind, 1 WENO5, 2 QUICK).
        u: x-velocity, shape (n+1, n).
        v: y-velocity, shape (n, n+1).
        c: Concentration, shape (cn, cn).
        out_u: Output for du/dt, shape of ``u``.
        out_v: Output for dv/dt, shape of ``v``.
        out_c: Output for dc/dt, shape of ``c``.
        up: Scratch for cell-centred velocity, shape (2, n, n).

    Inputs are only read; every output sample is overwritten. Each kernel
    call completes before the next starts, so later loops see finished data.
    """
    _velocity_derivative(method, u, v, out_u, out_v)
    project_to_cells(u, v, up)
    _concentration_derivative(method, c, up, out_c)
