from __future__ import annotations

from typing import Sequence

import numpy as np

from sphfluid.core.errors import ConfigurationError
from sphfluid.core.params import SimParams
from sphfluid.core.state import ParticleState


def _grid_points_2d(params: SimParams, per_row: int) -> np.ndarray:
    """
    per_row x per_row lattice covering the central half of the domain.

    Starts a quarter of the way in on each axis with spacing (extent/2)/per_row,
    x-major order (all y for the first column, then the next column).
    """
    w = float(params.width)
    h = float(params.height)
    dx = (w / 2.0) / per_row
    dy = (h / 2.0) / per_row

    xs = w / 4.0 + dx * np.arange(per_row, dtype=np.float64)
    ys = h / 4.0 + dy * np.arange(per_row, dtype=np.float64)
    X, Y = np.meshgrid(xs, ys, indexing="ij")
    return np.stack([X.ravel(), Y.ravel()], axis=1)


def _as_array(value, name: str, ndim: int) -> np.ndarray:
    try:
        arr = np.array(value, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be numeric: {exc}") from exc
    if ndim == 2 and arr.size == 0:
        return arr.reshape(0, 2)
    if ndim == 2 and (arr.ndim != 2 or arr.shape[1] != 2):
        raise ConfigurationError(f"{name} must have shape (N, 2), got {arr.shape}")
    if ndim == 1 and arr.ndim != 1:
        raise ConfigurationError(f"{name} must be a flat list, got shape {arr.shape}")
    return arr


def _scalar(value, name: str, kind: type):
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    try:
        return kind(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from exc


def _check_inside(pos: np.ndarray, params: SimParams) -> None:
    r = float(params.radius)
    extent = params.extent
    outside = np.any((pos < r) | (pos > extent[None, :] - r), axis=1)
    if np.any(outside):
        idx = np.where(outside)[0][:8].tolist()
        raise ConfigurationError(f"particles {idx} start outside the domain margin [R, extent - R]")


def _finish(state: ParticleState, params: SimParams) -> ParticleState:
    state.validate()
    _check_inside(state.pos, params)
    return state


def build_grid_state(
    params: SimParams,
    per_row: int,
    jitter: float = 0.0,
    seed: int | None = None,
    extra_positions: Sequence[Sequence[float]] = (),
) -> ParticleState:
    """
    Regular block of per_row^2 particles, optionally jittered along x.

    jitter is the half-width of a uniform x offset drawn from
    np.random.default_rng(seed); a fixed seed gives a reproducible layout.
    extra_positions are appended after the lattice.
    """
    per_row = _scalar(per_row, "per_row", int)
    if per_row <= 0:
        raise ConfigurationError("per_row must be > 0")
    jitter = _scalar(jitter, "jitter", float)
    if not np.isfinite(jitter) or jitter < 0.0:
        raise ConfigurationError("jitter must be finite and >= 0")

    pos = _grid_points_2d(params, per_row)

    if jitter > 0.0:
        rng = np.random.default_rng(seed)
        pos[:, 0] += rng.uniform(-jitter, jitter, size=pos.shape[0])

    extra = _as_array(extra_positions, "extra", ndim=2)
    if extra.shape[0]:
        pos = np.concatenate([pos, extra], axis=0)

    state = ParticleState.from_positions(pos, mass=params.mass)
    return _finish(state, params)


def build_explicit_state(
    params: SimParams,
    positions: Sequence[Sequence[float]],
    velocities: Sequence[Sequence[float]] | None = None,
    masses: Sequence[float] | None = None,
) -> ParticleState:
    """Particles from an explicit seed list (masses default to params.mass)."""
    pos = _as_array(positions, "positions", ndim=2)

    vel = None
    if velocities is not None:
        vel = _as_array(velocities, "velocities", ndim=2)
        if vel.shape != pos.shape:
            raise ConfigurationError(f"velocities shape {vel.shape} != positions shape {pos.shape}")

    mass = params.mass
    if masses is not None:
        mass = _as_array(masses, "masses", ndim=1)
        if mass.shape != (pos.shape[0],):
            raise ConfigurationError(f"masses shape {mass.shape} != ({pos.shape[0]},)")

    state = ParticleState.from_positions(pos, mass=mass, vel=vel)
    return _finish(state, params)


def build_scene_state(scene: dict, params: SimParams) -> ParticleState:
    """
    Build the initial particle set from the scene's particles.layout block:

      {"type": "grid", "per_row": 10, "extra": [[x, y], ...]}
      {"type": "jittered_grid", "per_row": 10, "jitter": 0.02, "seed": 0}
      {"type": "explicit", "positions": [...], "velocities": [...], "masses": [...]}
    """
    layout = scene.get("particles", {}).get("layout", {"type": "grid", "per_row": 10})
    kind = str(layout.get("type", "grid")).lower()

    if kind in ("grid", "jittered_grid"):
        default_jitter = 0.02 if kind == "jittered_grid" else 0.0
        seed = layout.get("seed")
        return build_grid_state(
            params,
            per_row=layout.get("per_row", 10),
            jitter=layout.get("jitter", default_jitter),
            seed=None if seed is None else _scalar(seed, "seed", int),
            extra_positions=layout.get("extra", ()),
        )

    if kind == "explicit":
        if "positions" not in layout:
            raise ConfigurationError("explicit layout requires 'positions'")
        return build_explicit_state(
            params,
            positions=layout["positions"],
            velocities=layout.get("velocities"),
            masses=layout.get("masses"),
        )

    raise ConfigurationError(f"unsupported layout type: {kind!r}")
