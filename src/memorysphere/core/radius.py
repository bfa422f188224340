from __future__ import annotations

import math

from .settings import DEFAULT_SETTINGS, SceneSettings


def compute_radius(
    item_count: int,
    *,
    viewport: tuple[float, float] | None = None,
    settings: SceneSettings = DEFAULT_SETTINGS,
) -> float:
    """Sphere radius that keeps the apparent orb density roughly constant.

    radius = k * sqrt(n), clamped to [min_radius, max_radius]. A viewport further caps the
    radius at a fraction of its short side, never below `min_radius`.
    """

    n = max(1, int(item_count))
    upper = settings.max_radius
    if viewport is not None:
        w, h = float(viewport[0]), float(viewport[1])
        if w > 0.0 and h > 0.0:
            upper = min(upper, max(settings.min_radius, settings.viewport_radius_fraction * min(w, h)))
    r = settings.radius_k * math.sqrt(n)
    return float(min(upper, max(settings.min_radius, r)))
