"""Elementwise grid helpers: allocate, copy, and blend 2D arrays in place."""

from __future__ import annotations

import numpy as np


def alloc2d(width: int, height: int) -> np.ndarray:
    """Zeroed ``(width, height)`` float64 grid."""
    return np.zeros((width, height))


def copy2d(dst: np.ndarray, src: np.ndarray) -> np.ndarray:
    """Copy ``src`` into ``dst`` in place and return ``dst``."""
    np.copyto(dst, src)
    return dst


def op2d(
    out: np.ndarray,
    src0: np.ndarray,
    src1: np.ndarray,
    a: float,
    b: float,
) -> np.ndarray:
    """Compute ``out = a*src0 + b*src1`` elementwise, in place.

    ``out`` may alias ``src0``. It must not alias ``src1``.

    Args:
        out: Destination grid.
        src0: First operand, same shape as ``out``.
        src1: Second operand, same shape as ``out``.
        a: Weight of ``src0``.
        b: Weight of ``src1``.

    Returns:
        ``out``.
    """
    if a == 1.0:
        if out is not src0:
            np.copyto(out, src0)
    else:
        np.multiply(src0, a, out=out)
    out += b * src1
    return out
