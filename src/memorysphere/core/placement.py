from __future__ import annotations

import math

from .coordinates import clamp_phi
from .settings import DEFAULT_SETTINGS, SceneSettings

# Great-circle distance may exceed the planar spread radius slightly because of curvature.
SPREAD_CURVATURE_TOLERANCE = 1.1


def upload_position(
    center: tuple[float, float],
    insertion_index: int,
    settings: SceneSettings = DEFAULT_SETTINGS,
) -> tuple[float, float]:
    """(theta, phi) for item `insertion_index` of an upload batch seeded around `center`.

    Items fan out on a golden-angle spiral whose radius grows with sqrt(index), so a
    multi-file upload does not stack on a single point.
    """

    c_theta, c_phi = float(center[0]), float(center[1])
    i = max(0, int(insertion_index))
    r = settings.upload_spread * math.sqrt(i)
    a = i * settings.golden_angle

    phi = clamp_phi(c_phi + r * math.cos(a), settings.pole_epsilon)
    # Longitude steps shrink towards the poles; widen them to keep the on-sphere spacing.
    theta = c_theta + r * math.sin(a) / math.sin(phi)
    return theta, phi


def upload_positions(
    center: tuple[float, float],
    count: int,
    settings: SceneSettings = DEFAULT_SETTINGS,
) -> list[tuple[float, float]]:
    return [upload_position(center, i, settings) for i in range(max(0, int(count)))]


def spread_bound(count: int, settings: SceneSettings = DEFAULT_SETTINGS) -> float:
    """Upper bound on the angular distance between any batch item and the batch center."""
    return settings.upload_spread * math.sqrt(max(0, int(count) - 1)) * SPREAD_CURVATURE_TOLERANCE
