"""Semi-Lagrangian and MacCormack advection.

Both trace each sample backward through the flow and read the previous
field there, so one evaluation is already the full-step result, not a
derivative. MacCormack adds a forward re-trace to estimate the truncation
error, corrects by half of it, and limits the corrected value to the four
grid samples around the departure point.

Trace distances are ``dt * res * velocity`` in grid units, where ``res`` is
the resolution of the field being advected.
"""

from __future__ import annotations

import numpy as np
from numba import njit, prange

from smokeadvect.fluid.interpolation import clamp_coord, interpolate
from smokeadvect.fluid.sampler import project_to_cells, project_to_faces


@njit(cache=True, parallel=True)
def semi_lagrangian(
    kind: int, d: np.ndarray, d0: np.ndarray, vel: np.ndarray, res: int, dt: float,
) -> None:
    """First-order backtrace: ``d[i, j] = d0(departure point)``.

    Args:
        kind: Interpolation kernel code.
        d: Output field, same shape as ``d0``.
        d0: Field at the start of the step.
        vel: (x, y) velocity at each sample of ``d0``, shape (2,) + d0.shape.
        res: Resolution that converts velocity to grid units per time.
        dt: Timestep.
    """
    width, height = d0.shape
    for i in prange(width):
        for j in range(height):
            x = i - res * vel[0, i, j] * dt
            y = j - res * vel[1, i, j] * dt
            d[i, j] = interpolate(kind, d0, x, y)


@njit(cache=True, parallel=True)
def maccormack(
    kind: int, d: np.ndarray, d0: np.ndarray, vel: np.ndarray, res: int, dt: float,
) -> None:
    """Second-order MacCormack backtrace with a neighbourhood clamp.

    Arguments as for ``semi_lagrangian``.
    """
    width, height = d0.shape
    for i in prange(width):
        for j in range(height):
            x = clamp_coord(i - dt * res * vel[0, i, j], width - 1.0)
            y = clamp_coord(j - dt * res * vel[1, i, j], height - 1.0)

            i0 = max(0, min(width - 2, int(x)))
            j0 = max(0, min(height - 2, int(y)))
            i1 = min(i0 + 1, width - 1)
            j1 = min(j0 + 1, height - 1)

            # Predictor: backward trace
            phi_n_1_hat = interpolate(kind, d0, x, y)
            u_hat = interpolate(kind, vel[0], x, y)
            v_hat = interpolate(kind, vel[1], x, y)

            # Corrector: trace forward again from the departure point
            x += dt * res * u_hat
            y += dt * res * v_hat
            phi_n_hat = interpolate(kind, d0, x, y)

            min_phi = min(min(min(d0[i0, j0], d0[i1, j0]), d0[i0, j1]), d0[i1, j1])
            max_phi = max(max(max(d0[i0, j0], d0[i1, j0]), d0[i0, j1]), d0[i1, j1])
            r = phi_n_1_hat + 0.5 * (d0[i, j] - phi_n_hat)

            d[i, j] = max(min(r, max_phi), min_phi)


@njit(cache=True, parallel=True)
def _project_to_concentration(kind: int, up: np.ndarray, uc: np.ndarray) -> None:
    n = up.shape[1]
    cn = uc.shape[1]
    for i in prange(cn):
        for j in range(cn):
            x = i * n / cn
            y = j * n / cn
            uc[0, i, j] = interpolate(kind, up[0], x, y)
            uc[1, i, j] = interpolate(kind, up[1], x, y)


def advect_backtrace(
    order: int,
    kind: int,
    u: np.ndarray,
    v: np.ndarray,
    c: np.ndarray,
    out_u: np.ndarray,
    out_v: np.ndarray,
    out_c: np.ndarray,
    ux: np.ndarray,
    uy: np.ndarray,
    up: np.ndarray,
    uc: np.ndarray,
    dt: float,
) -> None:
    """Advance u, v and c by ``dt`` into the ``out_*`` arrays.

    Args:
        order: 1 for Semi-Lagrangian, 2 for MacCormack.
        kind: Interpolation kernel code.
        u, v, c: Fields at the start of the step (read only).
        out_u, out_v, out_c: Advanced fields, shaped like the inputs.
        ux, uy, up, uc: Velocity projection scratch (see ``ScratchBuffers``).
        dt: Timestep.
    """
    n = v.shape[0]
    cn = c.shape[0]

    project_to_faces(u, v, ux, uy)
    project_to_cells(u, v, up)
    _project_to_concentration(kind, up, uc)

    if order == 1:
        semi_lagrangian(kind, out_u, u, ux, n, dt)
        semi_lagrangian(kind, out_v, v, uy, n, dt)
        semi_lagrangian(kind, out_c, c, uc, cn, dt)
    elif order == 2:
        maccormack(kind, out_u, u, ux, n, dt)
        maccormack(kind, out_v, v, uy, n, dt)
        maccormack(kind, out_c, c, uc, cn, dt)
