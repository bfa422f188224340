from __future__ import annotations

import math
import os
from dataclasses import dataclass, fields
from typing import Any


GOLDEN_ANGLE = 2.39996


@dataclass(frozen=True)
class SceneSettings:
    """Tunable constants of the layout and interaction engine.

    Notes:
    - Angles on the sphere are radians; per-item spin is in degrees (it feeds CSS-like transforms).
    - `perspective` is the renderer's camera distance; the sphere must stay in front of it.
    """

    # Coordinates
    pole_epsilon: float = 0.15

    # World rotation
    drag_sensitivity: float = 0.005  # rad per px of drag magnitude
    inertia_friction: float = 4.0  # 1/s exponential decay; 0 disables inertia
    inertia_stop_speed: float = 5.0  # px/s

    # Projection
    depth_threshold: float = -50.0
    max_blur: float = 8.0
    min_back_opacity: float = 0.3
    hover_scale: float = 1.2
    perspective: float = 1200.0
    z_index_offset: int = 2000
    drift_amplitude: float = 10.0

    # Radius
    radius_k: float = 80.0
    min_radius: float = 200.0
    max_radius: float = 1000.0
    viewport_radius_fraction: float = 0.48

    # Gallery
    golden_angle: float = GOLDEN_ANGLE
    gallery_z_spacing: float = 800.0
    gallery_spiral_radius: float = 380.0

    # Interaction
    zoom_min: float = 0.2
    zoom_max: float = 5.0
    zoom_sensitivity: float = 0.001
    initial_zoom: float = 1.0
    spin_sensitivity: float = 1.2  # deg per px
    spring_stiffness: float = 200.0
    spring_damping: float = 25.0
    spring_mass: float = 1.0

    # Upload placement
    upload_spread: float = 0.35

    def __post_init__(self) -> None:
        if not (0.0 < self.pole_epsilon < math.pi / 2):
            raise ValueError("pole_epsilon must be in (0, pi/2)")
        if self.min_radius <= 0.0 or self.min_radius > self.max_radius:
            raise ValueError("radius bounds must satisfy 0 < min_radius <= max_radius")
        if self.max_radius >= self.perspective:
            raise ValueError("max_radius must stay below the perspective distance")
        if self.zoom_min <= 0.0 or self.zoom_min > self.zoom_max:
            raise ValueError("zoom bounds must satisfy 0 < zoom_min <= zoom_max")
        if not (self.zoom_min <= self.initial_zoom <= self.zoom_max):
            raise ValueError("initial_zoom must lie within the zoom bounds")
        if self.spring_stiffness <= 0.0 or self.spring_mass <= 0.0 or self.spring_damping < 0.0:
            raise ValueError("spring constants must be positive")
        if self.inertia_friction < 0.0:
            raise ValueError("inertia_friction must be >= 0")

    @classmethod
    def from_env(cls, prefix: str = "MEMORYSPHERE_", **overrides: Any) -> "SceneSettings":
        """Build settings from `MEMORYSPHERE_<FIELD>` environment variables.

        Example: `MEMORYSPHERE_MAX_RADIUS=900`. Explicit keyword overrides win over the environment.
        """

        values: dict[str, Any] = {}
        for f in fields(cls):
            raw = os.getenv(prefix + f.name.upper())
            if raw is None:
                continue
            try:
                values[f.name] = int(raw) if f.type in ("int", int) else float(raw)
            except ValueError as ex:
                raise ValueError(f"Invalid value for {prefix}{f.name.upper()}: {raw!r}") from ex
        values.update(overrides)
        return cls(**values)


DEFAULT_SETTINGS = SceneSettings()
