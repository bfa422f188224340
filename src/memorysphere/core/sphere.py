from __future__ import annotations

import numpy as np

from .coordinates import to_cartesian
from .memory import Memory
from .orb_layout import OrbLayout
from .projection import depth_cue, drift_amplitudes, drift_offset, world_depth
from .settings import DEFAULT_SETTINGS, SceneSettings

_IDENTITY3 = np.eye(3, dtype=np.float64)


def compute_sphere_layout(
    memory: Memory,
    radius: float,
    hovered: bool = False,
    dragging: bool = False,
    *,
    rotation: np.ndarray | None = None,
    spin: tuple[float, float] = (0.0, 0.0),
    elapsed: float | None = None,
    settings: SceneSettings = DEFAULT_SETTINGS,
) -> OrbLayout:
    """Sphere placement of one memory.

    `x, y, z` are local (pre-rotation) coordinates; the renderer applies the world
    rotation to the whole sphere. Depth cues are computed from the rotated position.
    `rotate_x/rotate_y` carry the item's local spin, applied on top of the billboard.
    """

    x, y, z = to_cartesian(memory.theta, memory.phi, max(0.0, float(radius)))
    rot = _IDENTITY3 if rotation is None else rotation
    cue = depth_cue(world_depth(rot, (x, y, z)), radius, settings)

    base = float(memory.scale)
    if hovered or dragging:
        base *= settings.hover_scale
    elif elapsed is not None:
        amplitudes = drift_amplitudes(memory.id, settings.drift_amplitude)
        dx, dy = drift_offset(memory.drift_speed, elapsed, amplitudes)
        x += dx
        y += dy

    return OrbLayout(
        x=x,
        y=y,
        z=z,
        rotate_x=float(spin[0]),
        rotate_y=float(spin[1]),
        scale=base * cue.scale_factor,
        opacity=cue.opacity,
        z_index=cue.z_index,
        blur=cue.blur,
        is_active=(hovered or dragging) and not memory.is_analyzing,
        hit_testable=cue.hit_testable,
    )
