"""Pydantic v2 configuration for the advection step.

Provides the three strategy selectors (spatial method, interpolation kernel,
time integrator) as string enums, plus a validated ``AdvectionConfig`` with
JSON I/O.
"""

from __future__ import annotations

import enum
import json
from pathlib import Path

from pydantic import BaseModel, Field


class AdvectionMethod(str, enum.Enum):
    """Spatial discretization scheme."""

    upwind = "upwind"
    weno5 = "weno5"
    quick = "quick"
    semi_lagrangian = "semi_lagrangian"
    maccormack = "maccormack"

    @property
    def code(self) -> int:
        """Integer id understood by the compiled kernels."""
        return _METHOD_CODES[self]

    @property
    def label(self) -> str:
        return _METHOD_LABELS[self]

    @property
    def produces_derivative(self) -> bool:
        """True if one evaluation yields d/dt (Eulerian), False if it yields the advanced field."""
        return self in (AdvectionMethod.upwind, AdvectionMethod.weno5, AdvectionMethod.quick)

    @property
    def order(self) -> int:
        """Backtrace order of the Semi-Lagrangian family (0 for Eulerian methods)."""
        if self is AdvectionMethod.semi_lagrangian:
            return 1
        if self is AdvectionMethod.maccormack:
            return 2
        return 0


class InterpolationKind(str, enum.Enum):
    """Kernel used to sample a grid at fractional coordinates."""

    linear = "linear"
    spline = "spline"
    monotonic_cubic = "monotonic_cubic"

    @property
    def code(self) -> int:
        return _INTERP_CODES[self]

    @property
    def label(self) -> str:
        return _INTERP_LABELS[self]


class TimeIntegrator(str, enum.Enum):
    """Explicit integrator blending Eulerian stage derivatives."""

    forward_euler = "forward_euler"
    modified_euler = "modified_euler"
    rk4 = "rk4"

    @property
    def label(self) -> str:
        return _INTEGRATOR_LABELS[self]

    @property
    def stages(self) -> int:
        return _INTEGRATOR_STAGES[self]


_METHOD_CODES = {
    AdvectionMethod.upwind: 0,
    AdvectionMethod.weno5: 1,
    AdvectionMethod.quick: 2,
    AdvectionMethod.semi_lagrangian: 3,
    AdvectionMethod.maccormack: 4,
}

_METHOD_LABELS = {
    AdvectionMethod.upwind: "Upwind",
    AdvectionMethod.weno5: "WENO5",
    AdvectionMethod.quick: "QUICK",
    AdvectionMethod.semi_lagrangian: "Semi-Lagrangian",
    AdvectionMethod.maccormack: "MacCormack",
}

_INTERP_CODES = {
    InterpolationKind.linear: 0,
    InterpolationKind.spline: 1,
    InterpolationKind.monotonic_cubic: 2,
}

_INTERP_LABELS = {
    InterpolationKind.linear: "Linear",
    InterpolationKind.spline: "Clamped Cubic Spline",
    InterpolationKind.monotonic_cubic: "Monotonic Cubic",
}

_INTEGRATOR_LABELS = {
    TimeIntegrator.forward_euler: "1st Order Euler",
    TimeIntegrator.modified_euler: "2nd Order Modified Euler",
    TimeIntegrator.rk4: "4th Order Runge-Kutta",
}

_INTEGRATOR_STAGES = {
    TimeIntegrator.forward_euler: 1,
    TimeIntegrator.modified_euler: 2,
    TimeIntegrator.rk4: 4,
}


class AdvectionConfig(BaseModel):
    """Strategy selection and diagnostics thresholds for one advection solver."""

    method: AdvectionMethod = Field(AdvectionMethod.weno5, description="Spatial scheme")
    interpolation: InterpolationKind = Field(
        InterpolationKind.linear,
        description="Interpolation kernel for Semi-Lagrangian / MacCormack backtraces",
    )
    integrator: TimeIntegrator = Field(
        TimeIntegrator.rk4,
        description="Time integrator (ignored by Semi-Lagrangian / MacCormack)",
    )
    cfl_warning: float = Field(
        1.0, gt=0,
        description="Log a warning when an Eulerian step exceeds this CFL number",
    )
    warn_non_finite: bool = Field(
        False, description="Scan results for NaN/inf after each step and log a warning",
    )

    @staticmethod
    def choices() -> dict[str, list[str]]:
        """Human-readable labels for every selector, in menu order."""
        return {
            "method": [m.label for m in AdvectionMethod],
            "interpolation": [k.label for k in InterpolationKind],
            "integrator": [t.label for t in TimeIntegrator],
        }

    # --- I/O helpers ---

    @classmethod
    def from_file(cls, path: str | Path) -> AdvectionConfig:
        """Load configuration from a JSON file."""
        path = Path(path)
        with path.open() as f:
            data = json.load(f)
        return cls(**data)

    def to_json(self, path: str | Path | None = None) -> str:
        """Serialize to JSON string, optionally writing to file."""
        out = self.model_dump_json(indent=2)
        if path is not None:
            Path(path).write_text(out)
        return out
