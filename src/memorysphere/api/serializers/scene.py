from __future__ import annotations

from typing import Any

from ...core.memory import Memory
from ...core.orb_layout import OrbLayout, orb_layout_to_dict
from ...core.scene import Scene


def memory_to_dict(m: Memory) -> dict[str, Any]:
    return {
        "id": m.id,
        "url": m.url,
        "description": m.description,
        "timestamp": float(m.timestamp),
        "theta": float(m.theta),
        "phi": float(m.phi),
        "scale": float(m.scale),
        "rotation": float(m.rotation),
        "driftSpeed": float(m.drift_speed),
        "isAnalyzing": bool(m.is_analyzing),
    }


def rotation_to_dict(scene: Scene) -> dict[str, Any]:
    theta, phi = scene.current_front_facing_spherical_point()
    return {
        "quaternion": [float(v) for v in scene.orientation()],
        "matrix": scene.world_rotation_matrix().tolist(),
        "billboard": scene.billboard_matrix().tolist(),
        "frontFacing": {"theta": float(theta), "phi": float(phi)},
        "velocity": [float(v) for v in scene.rotation.velocity],
    }


def layouts_to_list(items: list[tuple[Memory, OrbLayout]]) -> list[dict[str, Any]]:
    return [{"id": m.id, **orb_layout_to_dict(layout)} for m, layout in items]


def scene_to_dict(scene: Scene) -> dict[str, Any]:
    c = scene.controller
    viewport = scene.viewport
    return {
        "globalRevision": scene.global_revision(),
        "mode": scene.mode.value,
        "zoom": float(c.zoom),
        "focusedIndex": int(c.focused_index),
        "gravityMode": bool(c.gravity_mode),
        "hoveredId": c.hovered_id,
        "draggingId": c.dragging_id,
        "radius": float(scene.radius()),
        "viewport": None if viewport is None else {"width": viewport[0], "height": viewport[1]},
        "count": scene.count(),
    }
