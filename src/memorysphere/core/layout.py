from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

import numpy as np

from .gallery import compute_gallery_layout
from .memory import Memory
from .orb_layout import OrbLayout
from .settings import DEFAULT_SETTINGS, SceneSettings
from .sphere import compute_sphere_layout


class ViewMode(str, Enum):
    SPHERE = "sphere"
    GALLERY = "gallery"

    @classmethod
    def from_any(cls, value: object) -> "ViewMode":
        if isinstance(value, cls):
            return value
        v = str(value).strip().lower()
        for mode in cls:
            if mode.value == v:
                return mode
        raise ValueError(f"Unsupported view mode: {value!r}. Use 'sphere' or 'gallery'.")


@dataclass(frozen=True)
class ModeContext:
    """Everything a layout strategy may read besides the memory itself."""

    settings: SceneSettings = DEFAULT_SETTINGS
    # sphere
    radius: float = 0.0
    rotation: np.ndarray = field(default_factory=lambda: np.eye(3, dtype=np.float64))
    hovered_id: str | None = None
    dragging_id: str | None = None
    spins: dict[str, tuple[float, float]] = field(default_factory=dict)
    elapsed: float | None = None
    # gallery
    index_of: dict[str, int] = field(default_factory=dict)
    focused_index: int = 0


LayoutStrategy = Callable[[Memory, ModeContext], OrbLayout]


def sphere_strategy(memory: Memory, ctx: ModeContext) -> OrbLayout:
    return compute_sphere_layout(
        memory,
        ctx.radius,
        hovered=ctx.hovered_id == memory.id,
        dragging=ctx.dragging_id == memory.id,
        rotation=ctx.rotation,
        spin=ctx.spins.get(memory.id, (0.0, 0.0)),
        elapsed=ctx.elapsed,
        settings=ctx.settings,
    )


def gallery_strategy(memory: Memory, ctx: ModeContext) -> OrbLayout:
    index = ctx.index_of.get(memory.id)
    if index is None:
        raise KeyError(memory.id)
    return compute_gallery_layout(index, ctx.focused_index, ctx.settings)


STRATEGIES: dict[ViewMode, LayoutStrategy] = {
    ViewMode.SPHERE: sphere_strategy,
    ViewMode.GALLERY: gallery_strategy,
}


def layout_for(mode: ViewMode, memory: Memory, ctx: ModeContext) -> OrbLayout:
    return STRATEGIES[mode](memory, ctx)
