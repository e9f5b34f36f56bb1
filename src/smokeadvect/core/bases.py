"""Core data structures shared by the advection kernels.

- ``FluidState``: caller-owned MAC-grid velocity plus concentration
- ``StageFields``: per-stage derivative or full-step result, shaped like a state
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from smokeadvect.core.grid import alloc2d


def _check_shapes(u: np.ndarray, v: np.ndarray, c: np.ndarray) -> tuple[int, int]:
    if u.ndim != 2 or v.ndim != 2 or c.ndim != 2:
        raise ValueError("u, v and c must be 2D arrays")
    if not all(np.issubdtype(a.dtype, np.floating) for a in (u, v, c)):
        raise ValueError("u, v and c must be floating-point arrays (they are updated in place)")
    n = u.shape[1]
    if n < 1:
        raise ValueError(f"velocity resolution must be >= 1, got {n}")
    if u.shape != (n + 1, n):
        raise ValueError(f"u must have shape (n+1, n), got {u.shape}")
    if v.shape != (n, n + 1):
        raise ValueError(f"v must have shape {(n, n + 1)} to match u, got {v.shape}")
    cn = c.shape[0]
    if cn < 1 or c.shape != (cn, cn):
        raise ValueError(f"c must be square with side >= 1, got {c.shape}")
    return n, cn


@dataclass
class FluidState:
    """Staggered velocity and cell-centred concentration at one instant.

    Attributes:
        u: x-velocity on vertical faces, shape (n+1, n).
        v: y-velocity on horizontal faces, shape (n, n+1).
        c: Concentration at cell centres, shape (cn, cn).

    The arrays are updated in place by the solver; they are never replaced.
    """

    u: np.ndarray
    v: np.ndarray
    c: np.ndarray

    def __post_init__(self) -> None:
        _check_shapes(self.u, self.v, self.c)

    @property
    def n(self) -> int:
        """Velocity grid resolution."""
        return self.u.shape[1]

    @property
    def cn(self) -> int:
        """Concentration grid resolution."""
        return self.c.shape[0]

    @classmethod
    def zeros(cls, n: int, cn: int) -> FluidState:
        return cls(
            u=alloc2d(n + 1, n),
            v=alloc2d(n, n + 1),
            c=alloc2d(cn, cn),
        )

    def copy(self) -> FluidState:
        return FluidState(u=self.u.copy(), v=self.v.copy(), c=self.c.copy())


@dataclass
class StageFields:
    """Three grids shaped like a ``FluidState``.

    Holds dU/dt for the Eulerian schemes, or the fully advanced fields
    for Semi-Lagrangian / MacCormack. Which one is implied by the method.
    """

    u: np.ndarray
    v: np.ndarray
    c: np.ndarray

    @classmethod
    def zeros(cls, n: int, cn: int) -> StageFields:
        return cls(
            u=alloc2d(n + 1, n),
            v=alloc2d(n, n + 1),
            c=alloc2d(cn, cn),
        )

    def arrays(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        return self.u, self.v, self.c
