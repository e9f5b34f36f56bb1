"""Diagnostics computed from an advected state."""

from smokeadvect.diagnostics.derived import (
    cfl_number,
    is_finite,
    max_speed,
    total_concentration,
)

__all__ = [
    "cfl_number",
    "is_finite",
    "max_speed",
    "total_concentration",
]
