from __future__ import annotations

import math

from .orb_layout import OrbLayout
from .settings import DEFAULT_SETTINGS, SceneSettings


def ring_point(index: int, settings: SceneSettings = DEFAULT_SETTINGS) -> tuple[float, float]:
    theta = int(index) * settings.golden_angle
    r = settings.gallery_spiral_radius
    return math.cos(theta) * r, math.sin(theta) * r


def gallery_scale(offset: int) -> float:
    if offset == 0:
        return 1.4
    return max(0.6, 1.2 - abs(offset) * 0.1)


def gallery_opacity(offset: int) -> float:
    # Newer items (offset < 0) pass behind the camera and fade fast; older ones recede slowly.
    if offset < 0:
        return max(0.0, 1.0 + offset * 0.4)
    return max(0.0, 1.0 - offset * 0.15)


def compute_gallery_layout(index: int, focused_index: int, settings: SceneSettings = DEFAULT_SETTINGS) -> OrbLayout:
    """Spiral/tunnel placement of item `index` (0 = newest) around the focused item.

    Pure in (index, focused_index): the focused item always sits at the planar origin.
    """

    i = int(index)
    offset = i - int(focused_index)

    ring_x, ring_y = ring_point(i, settings)
    focus_x, focus_y = ring_point(int(focused_index), settings)
    x = ring_x - focus_x
    y = ring_y - focus_y
    z = -offset * settings.gallery_z_spacing

    blur = abs(offset) * 2.0
    opacity = gallery_opacity(offset)
    is_active = offset == 0

    return OrbLayout(
        x=x,
        y=y,
        z=float(z),
        rotate_x=0.0,
        rotate_y=0.0,
        scale=gallery_scale(offset),
        opacity=opacity,
        z_index=10000 if is_active else int(1000 - blur * 10),
        blur=blur,
        is_active=is_active,
        hit_testable=opacity > 0.0,
        side="right" if x > 0 else "left",
    )
