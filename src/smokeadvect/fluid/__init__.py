"""Advection kernels: samplers, interpolation, schemes, integrators, solver."""
