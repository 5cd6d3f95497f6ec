from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from sphfluid.core.errors import ConfigurationError


@dataclass(slots=True)
class ParticleState:
    """
    Struct-of-arrays particle storage for the 2-D fluid.

    A particle's identity is its row index, fixed for the lifetime of the
    simulation. rho, p and force are derived each step by the force solver
    and are not carried over as inputs to the next step.
    """

    pos: np.ndarray    # (N, 2)
    vel: np.ndarray    # (N, 2)
    mass: np.ndarray   # (N,)
    rho: np.ndarray    # (N,)
    p: np.ndarray      # (N,)
    force: np.ndarray  # (N, 2)

    dim: int = 2

    @classmethod
    def from_positions(
        cls,
        pos: np.ndarray,
        mass: float | np.ndarray,
        vel: np.ndarray | None = None,
    ) -> "ParticleState":
        """Allocate a state with zeroed derived fields."""
        pos = np.array(pos, dtype=np.float64).reshape(-1, 2)
        n = pos.shape[0]

        if vel is None:
            vel = np.zeros((n, 2), dtype=np.float64)
        else:
            vel = np.array(vel, dtype=np.float64).reshape(-1, 2)

        mass_arr = np.broadcast_to(np.asarray(mass, dtype=np.float64), (n,)).copy()

        return cls(
            pos=pos,
            vel=vel,
            mass=mass_arr,
            rho=np.zeros((n,), dtype=np.float64),
            p=np.zeros((n,), dtype=np.float64),
            force=np.zeros((n, 2), dtype=np.float64),
        )

    @property
    def n(self) -> int:
        return int(self.pos.shape[0])

    def copy(self) -> "ParticleState":
        return ParticleState(
            pos=self.pos.copy(),
            vel=self.vel.copy(),
            mass=self.mass.copy(),
            rho=self.rho.copy(),
            p=self.p.copy(),
            force=self.force.copy(),
            dim=self.dim,
        )

    def non_finite_indices(self) -> np.ndarray:
        """Indices of particles whose position or velocity holds NaN/Inf."""
        bad = ~(np.isfinite(self.pos).all(axis=1) & np.isfinite(self.vel).all(axis=1))
        return np.where(bad)[0]

    def validate(self) -> None:
        n = self.n
        if self.dim != 2:
            raise ConfigurationError(f"only 2-D states are supported, got dim={self.dim}")
        if self.pos.shape != (n, 2):
            raise ConfigurationError(f"pos shape {self.pos.shape} != (N, 2) = ({n},2)")

        for name, arr, shape in [
            ("vel", self.vel, (n, 2)),
            ("mass", self.mass, (n,)),
            ("rho", self.rho, (n,)),
            ("p", self.p, (n,)),
            ("force", self.force, (n, 2)),
        ]:
            if arr.shape != shape:
                raise ConfigurationError(f"{name} shape {arr.shape} != {shape}")

        if n == 0:
            raise ConfigurationError("particle set is empty")

        if self.non_finite_indices().size:
            raise ConfigurationError("pos/vel contains NaN/Inf")

        if not (np.isfinite(self.mass).all() and (self.mass > 0.0).all()):
            raise ConfigurationError("every particle mass must be finite and > 0")
