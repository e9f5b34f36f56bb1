"""Scratch storage for the advection step.

Buffers are allocated once per ``(n, cn)`` pair and reused across steps.
A request for a different pair drops the old buffers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from smokeadvect.config import TimeIntegrator
from smokeadvect.core.bases import StageFields

logger = logging.getLogger(__name__)

# Stage derivatives needed by the widest integrator
MAX_STAGES = max(t.stages for t in TimeIntegrator)


@dataclass
class ScratchBuffers:
    """Per-resolution working arrays.

    Attributes:
        n: Velocity resolution.
        cn: Concentration resolution.
        k: Stage results, one ``StageFields`` per integrator stage.
        tmp: Intermediate integrator state.
        ux: Velocity (x, y) sampled at x-faces, shape (2, n+1, n).
        uy: Velocity (x, y) sampled at y-faces, shape (2, n, n+1).
        up: Velocity (x, y) at velocity-grid cell centres, shape (2, n, n).
        uc: Velocity (x, y) at concentration cell centres, shape (2, cn, cn).
    """

    n: int
    cn: int
    k: list[StageFields] = field(default_factory=list)
    tmp: StageFields | None = None
    ux: np.ndarray | None = None
    uy: np.ndarray | None = None
    up: np.ndarray | None = None
    uc: np.ndarray | None = None

    @classmethod
    def allocate(cls, n: int, cn: int) -> ScratchBuffers:
        return cls(
            n=n,
            cn=cn,
            k=[StageFields.zeros(n, cn) for _ in range(MAX_STAGES)],
            tmp=StageFields.zeros(n, cn),
            ux=np.zeros((2, n + 1, n)),
            uy=np.zeros((2, n, n + 1)),
            up=np.zeros((2, n, n)),
            uc=np.zeros((2, cn, cn)),
        )

    def nbytes(self) -> int:
        total = sum(a.nbytes for s in self.k for a in s.arrays())
        total += sum(a.nbytes for a in self.tmp.arrays())
        total += self.ux.nbytes + self.uy.nbytes + self.up.nbytes + self.uc.nbytes
        return total


class ScratchPool:
    """Owns the scratch buffers of one solver, keyed by resolution."""

    def __init__(self) -> None:
        self._key: tuple[int, int] | None = None
        self._buffers: ScratchBuffers | None = None
        self.allocations = 0

    def get(self, n: int, cn: int) -> ScratchBuffers:
        """Return buffers for ``(n, cn)``, reallocating if the resolution changed."""
        key = (n, cn)
        if self._buffers is None or self._key != key:
            if self._key is not None:
                logger.debug("Resolution changed %s -> %s, reallocating scratch", self._key, key)
            self._buffers = ScratchBuffers.allocate(n, cn)
            self._key = key
            self.allocations += 1
            logger.debug(
                "Allocated scratch for n=%d, cn=%d (%.1f KiB)",
                n, cn, self._buffers.nbytes() / 1024.0,
            )
        return self._buffers

    @property
    def key(self) -> tuple[int, int] | None:
        return self._key

    def reset(self) -> None:
        """Drop all buffers; the next ``get`` allocates."""
        self._key = None
        self._buffers = None
