from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from sphfluid.core.errors import ConfigurationError
from sphfluid.core.params import SimParams


@dataclass(frozen=True)
class SmoothingKernels:
    """
    2-D smoothing kernels (Mueller et al. style) with cached normalization.

    Density (poly6), cutoff H:
        W(r) = 4 / (pi H^8) * (H^2 - r^2)^3                  for r < H
    Pressure gradient (spiky), cutoff h_f, magnitude only:
        |grad W(r)| = 10 / (pi h_f^5) * (h_f - r)^2          for r < h_f
    Viscosity Laplacian, cutoff h_f:
        lap W(r) = 40 / (pi h_f^5) * (h_f - r)               for r < h_f

    Every kernel is exactly zero at and beyond its cutoff, and each polynomial
    vanishes at the cutoff, so there is no jump there.
    """

    h: float
    h_force: float

    poly6_const: float
    spiky_grad_const: float
    visc_lap_const: float

    @classmethod
    def from_support(cls, h: float, h_force: float | None = None) -> "SmoothingKernels":
        h = float(h)
        h_force = h if h_force is None else float(h_force)
        if h <= 0.0 or h_force <= 0.0:
            raise ConfigurationError("kernel supports must be > 0")

        return cls(
            h=h,
            h_force=h_force,
            poly6_const=4.0 / (np.pi * h ** 8),
            spiky_grad_const=10.0 / (np.pi * h_force ** 5),
            visc_lap_const=40.0 / (np.pi * h_force ** 5),
        )

    @classmethod
    def from_params(cls, params: SimParams) -> "SmoothingKernels":
        return cls.from_support(h=params.smoothing_length, h_force=params.force_radius)

    @property
    def self_density_weight(self) -> float:
        """W(0), the weight of a particle's own mass in its density."""
        return float(self.poly6_const * self.h ** 6)

    def density_weight(self, r2):
        """Poly6 weight from the squared distance r2 (scalar or array)."""
        h2 = self.h * self.h
        r2 = np.asarray(r2, dtype=np.float64)
        diff = np.where(r2 < h2, h2 - r2, 0.0)
        w = self.poly6_const * diff ** 3
        return float(w) if w.ndim == 0 else w

    def spiky_gradient(self, r):
        """Magnitude of the spiky kernel gradient at distance r."""
        r = np.asarray(r, dtype=np.float64)
        diff = np.where(r < self.h_force, self.h_force - r, 0.0)
        g = self.spiky_grad_const * diff ** 2
        return float(g) if g.ndim == 0 else g

    def viscosity_laplacian(self, r):
        """Viscosity kernel Laplacian at distance r."""
        r = np.asarray(r, dtype=np.float64)
        diff = np.where(r < self.h_force, self.h_force - r, 0.0)
        lap = self.visc_lap_const * diff
        return float(lap) if lap.ndim == 0 else lap
