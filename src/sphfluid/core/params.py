from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from sphfluid.core.errors import ConfigurationError


INTEGRATORS = ("symplectic_euler", "explicit_euler")
NEIGHBOR_SEARCHES = ("spatial_hash", "brute_force")


@dataclass(frozen=True)
class SimParams:
    """
    Immutable configuration shared by every component of the 2-D SPH core.

    Built once, validated in __post_init__, then passed by reference to the
    kernels, neighbor search, force solver, integrator and transform export.
    Defaults describe the reference scene: R = 0.005 in a unit box, mass
    rest_density * (2R)^2 so a packing at spacing 2R sits near rest density.

    Kernel cutoffs:
      - smoothing_length (H) bounds the density summation, default 4 R.
      - force_radius bounds the pairwise pressure/viscosity terms, default 2 R.
    """

    # Particles
    radius: float = 0.005
    mass: float = 0.1

    # Kernel supports (None -> derived from radius)
    smoothing_length: float | None = None
    force_radius: float | None = None

    # Material / equation of state: p = stiffness * (rho - rest_density)
    rest_density: float = 1000.0
    stiffness: float = 200.0
    viscosity: float = 0.2
    clamp_negative_pressure: bool = True

    # External acceleration, applied as (0, gravity)
    gravity: float = -9.8

    # Domain [0, width] x [0, height]
    width: float = 1.0
    height: float = 1.0
    boundary_damping: float = -0.5

    # Time stepping
    dt: float = 0.001
    integrator: str = "symplectic_euler"

    neighbor_search: str = "spatial_hash"

    # Multiplier on the exported per-particle render scale
    render_scale: float = 1.0

    def __post_init__(self) -> None:
        if self.smoothing_length is None:
            object.__setattr__(self, "smoothing_length", 4.0 * float(self.radius))
        if self.force_radius is None:
            object.__setattr__(self, "force_radius", 2.0 * float(self.radius))
        self._validate()

    def _validate(self) -> None:
        numeric = {
            "radius": self.radius,
            "mass": self.mass,
            "smoothing_length": self.smoothing_length,
            "force_radius": self.force_radius,
            "rest_density": self.rest_density,
            "stiffness": self.stiffness,
            "viscosity": self.viscosity,
            "gravity": self.gravity,
            "width": self.width,
            "height": self.height,
            "boundary_damping": self.boundary_damping,
            "dt": self.dt,
            "render_scale": self.render_scale,
        }
        for name, value in numeric.items():
            if not math.isfinite(float(value)):
                raise ConfigurationError(f"{name} must be finite, got {value!r}")

        for name in ("radius", "mass", "dt", "smoothing_length", "force_radius", "width", "height", "render_scale"):
            if float(numeric[name]) <= 0.0:
                raise ConfigurationError(f"{name} must be > 0, got {numeric[name]!r}")

        for name in ("rest_density", "stiffness", "viscosity"):
            if float(numeric[name]) < 0.0:
                raise ConfigurationError(f"{name} must be >= 0, got {numeric[name]!r}")

        if not -1.0 <= float(self.boundary_damping) <= 0.0:
            raise ConfigurationError(
                f"boundary_damping must lie in [-1, 0] (reverse and attenuate), got {self.boundary_damping!r}"
            )

        if float(self.width) < 2.0 * float(self.radius) or float(self.height) < 2.0 * float(self.radius):
            raise ConfigurationError("domain must be at least one particle diameter wide and high")

        if self.integrator not in INTEGRATORS:
            raise ConfigurationError(f"unknown integrator {self.integrator!r}; expected one of {INTEGRATORS}")

        if self.neighbor_search not in NEIGHBOR_SEARCHES:
            raise ConfigurationError(
                f"unknown neighbor search {self.neighbor_search!r}; expected one of {NEIGHBOR_SEARCHES}"
            )

    @property
    def gravity_vector(self) -> np.ndarray:
        return np.array([0.0, float(self.gravity)], dtype=np.float64)

    @property
    def extent(self) -> np.ndarray:
        """Domain upper corner (width, height)."""
        return np.array([float(self.width), float(self.height)], dtype=np.float64)

    @property
    def interaction_radius(self) -> float:
        """Largest cutoff any kernel uses; the neighbor search is built with it."""
        return max(float(self.smoothing_length), float(self.force_radius))

    @classmethod
    def from_scene(cls, scene: dict) -> "SimParams":
        """
        Map a JSON scene dict onto SimParams.

        Missing sections/keys fall back to the dataclass defaults. See
        scenes/reference.json for the full schema.
        """
        domain = scene.get("domain", {})
        particles = scene.get("particles", {})
        kernel = scene.get("kernel", {})
        material = scene.get("material", {})
        forces = scene.get("forces", {})
        time_cfg = scene.get("time", {})
        neighbors = scene.get("neighbors", {})
        render = scene.get("render", {})

        defaults = cls.__dataclass_fields__
        kwargs = {
            "radius": particles.get("radius", defaults["radius"].default),
            "mass": particles.get("mass", defaults["mass"].default),
            "smoothing_length": kernel.get("smoothing_length"),
            "force_radius": kernel.get("force_radius"),
            "rest_density": material.get("rest_density", defaults["rest_density"].default),
            "stiffness": material.get("stiffness", defaults["stiffness"].default),
            "viscosity": material.get("viscosity", defaults["viscosity"].default),
            "clamp_negative_pressure": material.get(
                "clamp_negative_pressure", defaults["clamp_negative_pressure"].default
            ),
            "gravity": forces.get("gravity", defaults["gravity"].default),
            "width": domain.get("width", defaults["width"].default),
            "height": domain.get("height", defaults["height"].default),
            "boundary_damping": domain.get("boundary_damping", defaults["boundary_damping"].default),
            "dt": time_cfg.get("dt", defaults["dt"].default),
            "integrator": str(time_cfg.get("integrator", defaults["integrator"].default)).lower(),
            "neighbor_search": str(neighbors.get("type", defaults["neighbor_search"].default)).lower(),
            "render_scale": render.get("scale", defaults["render_scale"].default),
        }

        try:
            for name in ("radius", "mass", "rest_density", "stiffness", "viscosity", "gravity",
                         "width", "height", "boundary_damping", "dt", "render_scale"):
                kwargs[name] = float(kwargs[name])
            for name in ("smoothing_length", "force_radius"):
                if kwargs[name] is not None:
                    kwargs[name] = float(kwargs[name])
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"invalid numeric value in scene: {exc}") from exc

        kwargs["clamp_negative_pressure"] = bool(kwargs["clamp_negative_pressure"])
        return cls(**kwargs)
