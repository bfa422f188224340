from __future__ import annotations

import math
import zlib
from dataclasses import dataclass

import numpy as np

from .rotation import homogeneous
from .settings import DEFAULT_SETTINGS, SceneSettings


@dataclass(frozen=True)
class DepthCue:
    """Visual attributes derived from an item's world-space depth."""

    world_z: float
    scale_factor: float
    opacity: float
    blur: float
    z_index: int
    hit_testable: bool


def world_depth(rotation: np.ndarray, position: np.ndarray | tuple[float, float, float]) -> float:
    """Z of `position` after the world rotation (no translation).

    Works with either the 3x3 or the 4x4 matrix; only the third row is read.
    """

    m = np.asarray(rotation, dtype=np.float64)
    p = np.asarray(position, dtype=np.float64).reshape(3)
    return float(m[2, :3] @ p)


def depth_cue(world_z: float, radius: float, settings: SceneSettings = DEFAULT_SETTINGS) -> DepthCue:
    z = float(world_z)
    t = settings.depth_threshold
    front = z > t

    if front:
        blur = 0.0
        opacity = 1.0
    else:
        blur = min(settings.max_blur, abs(z - t) / 50.0)
        if radius > 0.0:
            opacity = max(settings.min_back_opacity, 1.0 - abs(z) / (1.5 * float(radius)))
        else:
            opacity = settings.min_back_opacity

    return DepthCue(
        world_z=z,
        scale_factor=max(0.5, 1.0 + z / 2000.0),
        opacity=float(opacity),
        blur=float(blur),
        z_index=int(math.floor(z)) + int(settings.z_index_offset),
        hit_testable=front,
    )


def rotation_x(deg: float) -> np.ndarray:
    a = math.radians(deg)
    c, s = math.cos(a), math.sin(a)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]], dtype=np.float64)


def rotation_y(deg: float) -> np.ndarray:
    a = math.radians(deg)
    c, s = math.cos(a), math.sin(a)
    return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]], dtype=np.float64)


def local_spin_matrix(rotate_x: float, rotate_y: float) -> np.ndarray:
    # Same order as the renderer's `rotateY(...) rotateX(...)` transform.
    return rotation_y(rotate_y) @ rotation_x(rotate_x)


def orb_orientation(billboard: np.ndarray, rotate_x: float = 0.0, rotate_y: float = 0.0) -> np.ndarray:
    """Full 4x4 orientation of one orb: counter-rotation first, local spin on top.

    Composed with the world rotation, the spin part is all that remains, so the
    image plane faces the viewer whatever the world orientation is.
    """

    b = np.asarray(billboard, dtype=np.float64)[:3, :3]
    return homogeneous(b @ local_spin_matrix(rotate_x, rotate_y))


def drift_amplitudes(key: str, amplitude: float = 10.0) -> tuple[float, float]:
    """Per-orb drift amplitudes in [-amplitude, amplitude], stable for a given key."""
    h = zlib.crc32(key.encode("utf-8"))
    ax = ((h & 0xFFFF) / 0xFFFF) * 2.0 - 1.0
    ay = (((h >> 16) & 0xFFFF) / 0xFFFF) * 2.0 - 1.0
    return ax * amplitude, ay * amplitude


def drift_offset(drift_speed: float, elapsed: float, amplitudes: tuple[float, float]) -> tuple[float, float]:
    """Ambient float of an orb around its resting place, in px. Zero at elapsed == 0.

    One loop lasts 15 s at drift_speed 1; the y loop runs 1.3x slower.
    """

    speed = max(1e-3, float(drift_speed))
    phase = 2.0 * math.pi * float(elapsed) * speed / 15.0
    return (
        amplitudes[0] * math.sin(phase),
        amplitudes[1] * math.sin(phase / 1.3),
    )
