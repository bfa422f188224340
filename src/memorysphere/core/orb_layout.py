from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

Side = Literal["left", "right"]


@dataclass(frozen=True)
class OrbLayout:
    """Per-frame placement of one orb. Derived state, never stored."""

    x: float
    y: float
    z: float
    rotate_x: float
    rotate_y: float
    scale: float
    opacity: float
    z_index: int
    blur: float
    is_active: bool
    hit_testable: bool = True
    side: Side | None = None


def orb_layout_to_dict(layout: OrbLayout) -> dict[str, Any]:
    out: dict[str, Any] = {
        "x": float(layout.x),
        "y": float(layout.y),
        "z": float(layout.z),
        "rotateX": float(layout.rotate_x),
        "rotateY": float(layout.rotate_y),
        "scale": float(layout.scale),
        "opacity": float(layout.opacity),
        "zIndex": int(layout.z_index),
        "blur": float(layout.blur),
        "isActive": bool(layout.is_active),
        "hitTestable": bool(layout.hit_testable),
    }
    if layout.side is not None:
        out["side"] = layout.side
    return out
