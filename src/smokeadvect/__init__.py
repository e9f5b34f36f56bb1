"""Transport step of a staggered-grid 2D smoke simulator."""

from smokeadvect.config import (
    AdvectionConfig,
    AdvectionMethod,
    InterpolationKind,
    TimeIntegrator,
)
from smokeadvect.core.bases import FluidState, StageFields
from smokeadvect.fluid.advection_solver import AdvectionSolver, advect

__all__ = [
    "AdvectionConfig",
    "AdvectionMethod",
    "AdvectionSolver",
    "FluidState",
    "InterpolationKind",
    "StageFields",
    "TimeIntegrator",
    "advect",
]
