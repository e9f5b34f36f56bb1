"""One-dimensional advective terms for the Eulerian schemes.

Every operator takes the transport velocity ``vel`` and the seven-point
stencil ``d0..d6`` = f(i-3) .. f(i+3) around the evaluation point i, and
returns the signed advective term ``-vel * df/dx`` in grid units (spacing 1).
Callers multiply by the resolution to get physical units.

No stability check is made here: explicit use needs dt * |vel| * n below
the scheme's CFL limit.
"""

from __future__ import annotations

import math

from numba import njit

SCHEME_UPWIND = 0
SCHEME_WENO5 = 1
SCHEME_QUICK = 2

# WENO5 smoothness regularization and linear (ideal) weights
WENO_EPS = 1.0e-6
WENO_D0 = 0.1
WENO_D1 = 0.6
WENO_D2 = 0.3


@njit(cache=True)
def upwind(vel: float, d2: float, d3: float, d4: float) -> float:
    """First-order one-sided difference, d2..d4 = f(i-1), f(i), f(i+1)."""
    if vel > 0.0:
        return -vel * (d3 - d2)
    if vel < 0.0:
        return -vel * (d4 - d3)
    return 0.0


# ============================================================
# WENO5
# ============================================================

@njit(cache=True)
def weno5_weights(
    v1: float, v2: float, v3: float, v4: float, v5: float,
) -> tuple[float, float, float]:
    """Nonlinear WENO5 weights for the three sub-stencils; they sum to 1.

    Alphas are scaled by the smallest ``eps + beta`` so large stencils do
    not overflow. If the indicators themselves overflow, the ideal weights
    are returned.
    """
    beta0 = (13.0 / 12.0) * (v1 - 2.0 * v2 + v3) ** 2 + 0.25 * (v1 - 4.0 * v2 + 3.0 * v3) ** 2
    beta1 = (13.0 / 12.0) * (v2 - 2.0 * v3 + v4) ** 2 + 0.25 * (v2 - v4) ** 2
    beta2 = (13.0 / 12.0) * (v3 - 2.0 * v4 + v5) ** 2 + 0.25 * (3.0 * v3 - 4.0 * v4 + v5) ** 2

    b0 = WENO_EPS + beta0
    b1 = WENO_EPS + beta1
    b2 = WENO_EPS + beta2
    b_min = min(b0, min(b1, b2))

    alpha0 = WENO_D0 * (b_min / b0) ** 2
    alpha1 = WENO_D1 * (b_min / b1) ** 2
    alpha2 = WENO_D2 * (b_min / b2) ** 2
    alpha_sum = alpha0 + alpha1 + alpha2
    if not math.isfinite(alpha_sum):
        return WENO_D0, WENO_D1, WENO_D2

    return alpha0 / alpha_sum, alpha1 / alpha_sum, alpha2 / alpha_sum


@njit(cache=True)
def weno5_reconstruct(v1: float, v2: float, v3: float, v4: float, v5: float) -> float:
    """Blend the three third-order candidates with the nonlinear weights."""
    w0, w1, w2 = weno5_weights(v1, v2, v3, v4, v5)
    p0 = (2.0 * v1 - 7.0 * v2 + 11.0 * v3) / 6.0
    p1 = (-v2 + 5.0 * v3 + 2.0 * v4) / 6.0
    p2 = (2.0 * v3 + 5.0 * v4 - v5) / 6.0
    return w0 * p0 + w1 * p1 + w2 * p2


@njit(cache=True)
def weno5(
    vel: float,
    d0: float, d1: float, d2: float, d3: float, d4: float, d5: float, d6: float,
) -> float:
    """WENO5 derivative reconstructed from first differences, upwinded by sign."""
    if vel > 0.0:
        return -vel * weno5_reconstruct(d1 - d0, d2 - d1, d3 - d2, d4 - d3, d5 - d4)
    if vel < 0.0:
        return -vel * weno5_reconstruct(d6 - d5, d5 - d4, d4 - d3, d3 - d2, d2 - d1)
    return 0.0


# ============================================================
# QUICK
# ============================================================

@njit(cache=True)
def quick(vel: float, d1: float, d2: float, d3: float, d4: float, d5: float) -> float:
    """Third-order upwind-biased term on f(i-2) .. f(i+2)."""
    centre = 0.5 * (d4 - d2)
    if vel > 0.0:
        return -vel * (centre + (d5 - 3.0 * d4 + 3.0 * d3 - d2) / 8.0)
    if vel < 0.0:
        return -vel * (centre + (d4 - 3.0 * d3 + 3.0 * d2 - d1) / 8.0)
    return -vel * centre


@njit(cache=True)
def advdiff(
    method: int,
    vel: float,
    d0: float, d1: float, d2: float, d3: float, d4: float, d5: float, d6: float,
) -> float:
    """Advective term for ``method`` on the stencil f(i-3) .. f(i+3).

    Unknown method codes contribute zero.
    """
    if method == SCHEME_UPWIND:
        return upwind(vel, d2, d3, d4)
    if method == SCHEME_WENO5:
        return weno5(vel, d0, d1, d2, d3, d4, d5, d6)
    if method == SCHEME_QUICK:
        return quick(vel, d1, d2, d3, d4, d5)
    return 0.0
