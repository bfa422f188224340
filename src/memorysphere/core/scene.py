from __future__ import annotations

import logging
import random
import threading
import time
import uuid
from dataclasses import replace

import numpy as np

from .captioning import CaptionDispatcher, Captioner, FallbackCaptioner
from .gallery import compute_gallery_layout
from .interaction import Direction, InputEvent, InteractionController
from .layout import ModeContext, ViewMode, layout_for
from .memory import Memory, MemoryUpload, sort_newest_first
from .orb_layout import OrbLayout
from .placement import upload_position
from .radius import compute_radius
from .rotation import RotationEngine
from .seed import seed_memories
from .settings import SceneSettings
from .sphere import compute_sphere_layout

logger = logging.getLogger(__name__)


class Scene:
    """The single owner of all mutable state: memories, world orientation, interaction.

    Every mutation runs under one re-entrant lock, so HTTP worker threads and caption
    worker threads never interleave. Renderers poll `global_revision()` and re-read the
    layout when it changes; `tick(dt)` advances inertia, springs and ambient drift.
    """

    def __init__(
        self,
        settings: SceneSettings | None = None,
        *,
        memories: list[Memory] | None = None,
        captioner: Captioner | None = None,
        dispatch_captions: bool = True,
        ambient_drift: bool = True,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings or SceneSettings()
        self._lock = threading.RLock()
        self._rng = rng or random.Random()
        self._memories: dict[str, Memory] = {}
        for m in memories or []:
            self._memories[m.id] = m
        self._global_revision = 0
        self._viewport: tuple[float, float] | None = None
        self._elapsed = 0.0
        self._ambient_drift = bool(ambient_drift)

        s = self.settings
        self.rotation = RotationEngine(
            s.drag_sensitivity,
            inertia_friction=s.inertia_friction,
            inertia_stop_speed=s.inertia_stop_speed,
        )
        self.controller = InteractionController(
            self.rotation,
            count=self.count,
            index_of=self.index_of,
            settings=s,
        )

        self._dispatcher: CaptionDispatcher | None = None
        if dispatch_captions:
            self._dispatcher = CaptionDispatcher(captioner or FallbackCaptioner(), self.apply_caption)

    @classmethod
    def with_seed(cls, settings: SceneSettings | None = None, **kwargs) -> "Scene":
        rng = kwargs.get("rng")
        return cls(settings, memories=seed_memories(rng=rng), **kwargs)

    # -- bookkeeping -----------------------------------------------------

    def global_revision(self) -> int:
        with self._lock:
            return self._global_revision

    def _bump_locked(self) -> int:
        self._global_revision += 1
        return self._global_revision

    @property
    def dispatcher(self) -> CaptionDispatcher | None:
        return self._dispatcher

    def close(self) -> None:
        if self._dispatcher is not None:
            self._dispatcher.shutdown()

    # -- memories --------------------------------------------------------

    def count(self) -> int:
        with self._lock:
            return len(self._memories)

    def list_memories(self) -> list[Memory]:
        """Memories in insertion order."""
        with self._lock:
            return list(self._memories.values())

    def sorted_memories(self) -> list[Memory]:
        """Memories newest first (gallery order)."""
        with self._lock:
            return sort_newest_first(list(self._memories.values()))

    def get_memory(self, memory_id: str) -> Memory | None:
        with self._lock:
            return self._memories.get(memory_id)

    def index_of(self, memory_id: str) -> int | None:
        with self._lock:
            for i, m in enumerate(sort_newest_first(list(self._memories.values()))):
                if m.id == memory_id:
                    return i
            return None

    def ingest(self, uploads: list[MemoryUpload | str]) -> list[Memory]:
        """Add a batch of uploads around the point currently facing the viewer.

        Each new memory starts with `is_analyzing=True` and gets one caption request.
        """

        items = [MemoryUpload(url=u) if isinstance(u, str) else u for u in uploads]
        for u in items:
            if not str(u.url).strip():
                raise ValueError("url cannot be empty")
            if u.scale is not None and not (np.isfinite(u.scale) and u.scale > 0.0):
                raise ValueError("scale must be a finite positive number")
            if u.timestamp is not None and not np.isfinite(u.timestamp):
                raise ValueError("timestamp must be finite")

        created: list[Memory] = []
        with self._lock:
            center = self.rotation.front_facing_point(self.settings.pole_epsilon)
            now = time.time()
            for i, u in enumerate(items):
                theta, phi = upload_position(center, i, self.settings)
                mem = Memory(
                    id=uuid.uuid4().hex,
                    url=str(u.url),
                    description=u.description,
                    timestamp=float(u.timestamp) if u.timestamp is not None else now,
                    theta=theta,
                    phi=phi,
                    scale=float(u.scale) if u.scale is not None else 0.9 + self._rng.random() * 0.3,
                    rotation=float(u.rotation) if u.rotation is not None else self._rng.random() * 30.0 - 15.0,
                    drift_speed=0.8 + self._rng.random() * 0.4,
                    is_analyzing=True,
                )
                self._memories[mem.id] = mem
                created.append(mem)
            if created:
                if self.controller.mode == ViewMode.GALLERY:
                    self.controller.reset_focus()
                self._bump_locked()

        logger.info(f"Ingested {len(created)} memories around theta={center[0]:.3f}, phi={center[1]:.3f}")
        if self._dispatcher is not None:
            for mem in created:
                self._dispatcher.submit(mem)
        return created

    def apply_caption(self, memory_id: str, description: str) -> bool:
        """Resolve a caption. A no-op (False) when the memory no longer exists."""
        with self._lock:
            mem = self._memories.get(memory_id)
            if mem is None:
                return False
            self._memories[memory_id] = replace(mem, description=str(description), is_analyzing=False)
            self._bump_locked()
            return True

    def remove_memory(self, memory_id: str) -> bool:
        with self._lock:
            if self._memories.pop(memory_id, None) is None:
                return False
            self.controller.forget(memory_id)
            self.controller.clamp_focus()
            self._bump_locked()
        logger.info(f"Removed memory {memory_id}")
        return True

    # -- viewer parameters -----------------------------------------------

    @property
    def viewport(self) -> tuple[float, float] | None:
        return self._viewport

    def set_viewport(self, width: float, height: float) -> float:
        w, h = float(width), float(height)
        if not (np.isfinite(w) and np.isfinite(h)) or w <= 0.0 or h <= 0.0:
            raise ValueError("viewport width and height must be finite and > 0")
        with self._lock:
            self._viewport = (w, h)
            self._bump_locked()
            return self.radius()

    def radius(self) -> float:
        with self._lock:
            return compute_radius(len(self._memories), viewport=self._viewport, settings=self.settings)

    # -- mode / interaction ------------------------------------------------

    @property
    def mode(self) -> ViewMode:
        return self.controller.mode

    def set_mode(self, mode: ViewMode | str) -> ViewMode:
        with self._lock:
            before = self.controller.mode
            self.controller.set_mode(mode)
            if self.controller.mode != before:
                self._bump_locked()
            return self.controller.mode

    def toggle_view_mode(self) -> ViewMode:
        with self._lock:
            mode = self.controller.toggle_view_mode()
            self._bump_locked()
            return mode

    def apply_drag(self, dx: float, dy: float) -> bool:
        with self._lock:
            changed = self.controller.apply_drag(dx, dy)
            if changed:
                self._bump_locked()
            return changed

    def set_zoom(self, delta: float) -> float:
        with self._lock:
            before = self.controller.zoom
            zoom = self.controller.set_zoom(delta)
            if zoom != before:
                self._bump_locked()
            return zoom

    def navigate(self, direction: Direction | str) -> int:
        with self._lock:
            before = self.controller.focused_index
            idx = self.controller.navigate(direction)
            if idx != before:
                self._bump_locked()
            return idx

    def set_focused_index(self, index: int) -> int:
        with self._lock:
            before = self.controller.focused_index
            idx = self.controller.set_focused_index(index)
            if idx != before:
                self._bump_locked()
            return idx

    def toggle_gravity_mode(self) -> bool:
        with self._lock:
            on = self.controller.toggle_gravity_mode()
            self._bump_locked()
            return on

    def handle_event(self, event: InputEvent) -> bool:
        with self._lock:
            changed = self.controller.handle_event(event)
            if changed:
                self._bump_locked()
            return changed

    def tick(self, dt: float) -> bool:
        """Advance animations by dt seconds. Returns True while anything is still moving."""
        d = float(dt)
        if not np.isfinite(d) or d <= 0.0:
            return False
        with self._lock:
            self._elapsed += d
            animating = self.controller.tick(d)
            if animating or self._ambient_drift:
                self._bump_locked()
            return animating

    # -- geometry ----------------------------------------------------------

    def orientation(self) -> tuple[float, float, float, float]:
        with self._lock:
            return self.rotation.quaternion

    def world_rotation_matrix(self) -> np.ndarray:
        with self._lock:
            return self.rotation.rotation_matrix()

    def billboard_matrix(self) -> np.ndarray:
        with self._lock:
            return self.rotation.billboard_matrix()

    def current_front_facing_spherical_point(self) -> tuple[float, float]:
        with self._lock:
            return self.rotation.front_facing_point(self.settings.pole_epsilon)

    def compute_sphere_layout(self, memory: Memory, radius: float, hovered: bool = False, dragging: bool = False) -> OrbLayout:
        with self._lock:
            return compute_sphere_layout(
                memory,
                radius,
                hovered,
                dragging,
                rotation=self.rotation.rotation3(),
                spin=self.controller.spin_angles().get(memory.id, (0.0, 0.0)),
                settings=self.settings,
            )

    def compute_gallery_layout(self, index: int, focused_index: int) -> OrbLayout:
        return compute_gallery_layout(index, focused_index, self.settings)

    def mode_context(self) -> ModeContext:
        with self._lock:
            ordered = sort_newest_first(list(self._memories.values()))
            return ModeContext(
                settings=self.settings,
                radius=self.radius(),
                rotation=self.rotation.rotation3(),
                hovered_id=self.controller.hovered_id,
                dragging_id=self.controller.dragging_id,
                spins=self.controller.spin_angles(),
                elapsed=self._elapsed if self._ambient_drift else None,
                index_of={m.id: i for i, m in enumerate(ordered)},
                focused_index=self.controller.focused_index,
            )

    def layouts(self) -> list[tuple[Memory, OrbLayout]]:
        """Layout of every memory for the current mode.

        Sphere mode keeps insertion order; gallery mode returns newest first.
        """

        with self._lock:
            mode = self.controller.mode
            ctx = self.mode_context()
            memories = self.sorted_memories() if mode == ViewMode.GALLERY else self.list_memories()
            return [(m, layout_for(mode, m, ctx)) for m in memories]
