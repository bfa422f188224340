"""Interaction controller - turns raw input into scene state changes."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Literal

from .layout import ViewMode
from .rotation import RotationEngine
from .settings import DEFAULT_SETTINGS, SceneSettings
from .spring import Spring, snap_to_balance

logger = logging.getLogger(__name__)

EventType = Literal["pointerdown", "pointermove", "pointerup", "pointerleave", "pointerenter", "wheel", "keydown"]
Direction = Literal["next", "prev"]

_EVENT_TYPES = {"pointerdown", "pointermove", "pointerup", "pointerleave", "pointerenter", "wheel", "keydown"}
_PREV_KEYS = {"ArrowUp", "ArrowLeft"}
_NEXT_KEYS = {"ArrowDown", "ArrowRight"}

# A pause longer than this before release means the pointer came to rest: no coasting.
_RELEASE_IDLE_S = 0.1


@dataclass(frozen=True)
class InputEvent:
    """One raw input event from the renderer.

    `target_id` names the orb under the pointer (None for the background), `over_chrome`
    marks buttons/inputs that must not start a world drag.
    """

    type: EventType
    x: float = 0.0
    y: float = 0.0
    target_id: str | None = None
    over_chrome: bool = False
    delta_y: float = 0.0
    key: str | None = None
    timestamp: float | None = None


def input_event_from_dict(body: dict[str, Any]) -> InputEvent:
    etype = str(body.get("type", "")).strip().lower()
    if etype not in _EVENT_TYPES:
        raise ValueError(f"Unsupported event type: {body.get('type')!r}")
    try:
        x = float(body.get("x", 0.0))
        y = float(body.get("y", 0.0))
        delta_y = float(body.get("deltaY", 0.0))
        ts = body.get("timestamp")
        ts_v = float(ts) if ts is not None else None
    except (TypeError, ValueError) as ex:
        raise ValueError("Invalid numeric field in input event") from ex
    target = body.get("targetId")
    key = body.get("key")
    return InputEvent(
        type=etype,  # type: ignore[arg-type]
        x=x,
        y=y,
        target_id=str(target) if target is not None else None,
        over_chrome=bool(body.get("overChrome", False)),
        delta_y=delta_y,
        key=str(key) if key is not None else None,
        timestamp=ts_v,
    )


@dataclass
class OrbSpin:
    """Local two-axis spin of one orb (degrees), layered on top of its billboard."""

    x: Spring
    y: Spring

    @property
    def angles(self) -> tuple[float, float]:
        return self.x.value, self.y.value

    def stop(self) -> None:
        for s in (self.x, self.y):
            s.target = s.value
            s.velocity = 0.0

    def snap(self) -> None:
        self.x.target = snap_to_balance(self.x.value)
        self.y.target = snap_to_balance(self.y.value)

    def step(self, dt: float) -> bool:
        moving_x = self.x.step(dt)
        moving_y = self.y.step(dt)
        return moving_x or moving_y


class InteractionController:
    """
    Mode state machine and input translation.

    Responsible for:
    - Sphere/Gallery mode switching (orientation + focus resets on entering Gallery).
    - World drag -> RotationEngine, with release inertia.
    - Per-orb spin and gravity snap-to-upright.
    - Wheel zoom, gallery navigation (buttons, arrow keys, click-to-focus).

    Item count and ordering come from callables so the controller never holds a copy
    of the memory list.
    """

    def __init__(
        self,
        rotation: RotationEngine,
        *,
        count: Callable[[], int],
        index_of: Callable[[str], int | None],
        settings: SceneSettings = DEFAULT_SETTINGS,
    ) -> None:
        self.rotation = rotation
        self.settings = settings
        self._count = count
        self._index_of = index_of

        self._mode: ViewMode = ViewMode.SPHERE
        self._zoom: float = settings.initial_zoom
        self._focused_index: int = 0
        self._gravity: bool = False

        self._spins: dict[str, OrbSpin] = {}
        self._hovered_id: str | None = None
        self._dragging_id: str | None = None

        self._world_dragging = False
        self._last_pos: tuple[float, float] | None = None
        self._last_move_t: float | None = None
        self._velocity: tuple[float, float] = (0.0, 0.0)

        self._on_mode_changed_callbacks: list[Callable[[ViewMode, ViewMode], None]] = []

    # -- state -----------------------------------------------------------

    @property
    def mode(self) -> ViewMode:
        return self._mode

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def focused_index(self) -> int:
        return self._focused_index

    @property
    def gravity_mode(self) -> bool:
        return self._gravity

    @property
    def hovered_id(self) -> str | None:
        return self._hovered_id

    @property
    def dragging_id(self) -> str | None:
        return self._dragging_id

    @property
    def is_world_dragging(self) -> bool:
        return self._world_dragging

    def spin_angles(self) -> dict[str, tuple[float, float]]:
        return {mid: spin.angles for mid, spin in self._spins.items()}

    # -- modes -----------------------------------------------------------

    def set_mode(self, mode: ViewMode | str) -> None:
        new_mode = ViewMode.from_any(mode)
        if new_mode == self._mode:
            return
        old_mode = self._mode
        self._end_drags()
        self._mode = new_mode

        if new_mode == ViewMode.GALLERY:
            self.rotation.reset()
            self._focused_index = 0
            self._spins.clear()
            self._hovered_id = None

        logger.info(f"View mode changed from {old_mode.value} -> {new_mode.value}")
        self._notify_mode_changed(old_mode, new_mode)

    def toggle_view_mode(self) -> ViewMode:
        self.set_mode(ViewMode.GALLERY if self._mode == ViewMode.SPHERE else ViewMode.SPHERE)
        return self._mode

    def add_mode_changed_callback(self, callback: Callable[[ViewMode, ViewMode], None]) -> None:
        """
        Add a callback for view mode changes.

        Callback signature: callback(old_mode: ViewMode, new_mode: ViewMode) -> None
        """
        self._on_mode_changed_callbacks.append(callback)

    def _notify_mode_changed(self, old_mode: ViewMode, new_mode: ViewMode) -> None:
        for callback in self._on_mode_changed_callbacks:
            try:
                callback(old_mode, new_mode)
            except Exception:
                logger.exception("Error in mode changed callback")

    # -- world rotation --------------------------------------------------

    def apply_drag(self, dx: float, dy: float) -> bool:
        if self._mode != ViewMode.SPHERE:
            return False
        return self.rotation.apply_drag(dx, dy)

    # -- zoom ------------------------------------------------------------

    def set_zoom(self, delta: float) -> float:
        """Wheel zoom: scroll down (positive delta) zooms out."""
        s = self.settings
        try:
            d = float(delta)
        except (TypeError, ValueError):
            return self._zoom
        if d != d:  # NaN
            return self._zoom
        self._zoom = min(s.zoom_max, max(s.zoom_min, self._zoom - d * s.zoom_sensitivity))
        return self._zoom

    # -- gallery focus ---------------------------------------------------

    def _clamp_index(self, index: int) -> int:
        n = int(self._count())
        if n <= 0:
            return 0
        return min(n - 1, max(0, int(index)))

    def navigate(self, direction: Direction | str) -> int:
        d = str(direction).strip().lower()
        if d == "next":
            self._focused_index = self._clamp_index(self._focused_index + 1)
        elif d == "prev":
            self._focused_index = self._clamp_index(self._focused_index - 1)
        else:
            raise ValueError(f"Unsupported direction: {direction!r}. Use 'next' or 'prev'.")
        return self._focused_index

    def set_focused_index(self, index: int) -> int:
        self._focused_index = self._clamp_index(index)
        return self._focused_index

    def reset_focus(self) -> None:
        self._focused_index = 0

    def clamp_focus(self) -> None:
        self._focused_index = self._clamp_index(self._focused_index)

    # -- gravity ---------------------------------------------------------

    def toggle_gravity_mode(self) -> bool:
        self._gravity = not self._gravity
        if self._gravity:
            for mid, spin in self._spins.items():
                if mid != self._dragging_id:
                    spin.snap()
        logger.info(f"Gravity mode {'on' if self._gravity else 'off'}")
        return self._gravity

    def _spin_for(self, memory_id: str) -> OrbSpin:
        spin = self._spins.get(memory_id)
        if spin is None:
            s = self.settings
            spin = OrbSpin(
                x=Spring(0.0, 0.0, stiffness=s.spring_stiffness, damping=s.spring_damping, mass=s.spring_mass),
                y=Spring(0.0, 0.0, stiffness=s.spring_stiffness, damping=s.spring_damping, mass=s.spring_mass),
            )
            self._spins[memory_id] = spin
        return spin

    def spin_item(self, memory_id: str, dx: float, dy: float) -> tuple[float, float]:
        """Free-spin one orb by a pointer delta (sphere mode only)."""
        if self._mode != ViewMode.SPHERE:
            spin = self._spins.get(memory_id)
            return spin.angles if spin is not None else (0.0, 0.0)
        spin = self._spin_for(memory_id)
        k = self.settings.spin_sensitivity
        spin.y.value -= float(dx) * k
        spin.x.value -= float(dy) * k
        spin.stop()
        return spin.angles

    def release_item(self, memory_id: str) -> None:
        spin = self._spins.get(memory_id)
        if spin is not None and self._gravity:
            spin.snap()

    def forget(self, memory_id: str) -> None:
        """Drop per-item interaction state of a removed memory."""
        self._spins.pop(memory_id, None)
        if self._hovered_id == memory_id:
            self._hovered_id = None
        if self._dragging_id == memory_id:
            self._dragging_id = None

    # -- raw events ------------------------------------------------------

    def handle_event(self, event: InputEvent) -> bool:
        """Apply one raw input event. Returns True when scene state changed."""
        logger.debug(f"Input event: {event.type} target={event.target_id}")
        if event.type == "wheel":
            before = self._zoom
            return self.set_zoom(event.delta_y) != before
        if event.type == "keydown":
            return self._handle_key(event.key)
        if self._mode == ViewMode.GALLERY:
            return self._handle_gallery_pointer(event)
        return self._handle_sphere_pointer(event)

    def _handle_key(self, key: str | None) -> bool:
        if self._mode != ViewMode.GALLERY or key is None:
            return False
        before = self._focused_index
        if key in _PREV_KEYS:
            self.navigate("prev")
        elif key in _NEXT_KEYS:
            self.navigate("next")
        return self._focused_index != before

    def _handle_gallery_pointer(self, event: InputEvent) -> bool:
        if event.type != "pointerup" or event.target_id is None:
            return False
        index = self._index_of(event.target_id)
        if index is None:
            return False
        before = self._focused_index
        self.set_focused_index(index)
        return self._focused_index != before

    def _handle_sphere_pointer(self, event: InputEvent) -> bool:
        now = event.timestamp if event.timestamp is not None else time.monotonic()
        if event.target_id is not None and self._index_of(event.target_id) is None:
            # Unknown ids never get per-item state.
            if event.type in ("pointerenter", "pointerdown", "pointerleave"):
                return False

        if event.type == "pointerenter":
            if event.target_id is not None and self._hovered_id != event.target_id:
                self._hovered_id = event.target_id
                return True
            return False

        if event.type == "pointerdown":
            if event.target_id is not None:
                self._dragging_id = event.target_id
                self._hovered_id = event.target_id
                self._spin_for(event.target_id).stop()
                self._last_pos = (event.x, event.y)
                return True
            if event.over_chrome:
                return False
            self._world_dragging = True
            self.rotation.grab()
            self._last_pos = (event.x, event.y)
            self._last_move_t = now
            self._velocity = (0.0, 0.0)
            return True

        if event.type == "pointermove":
            if self._last_pos is None:
                return False
            dx = event.x - self._last_pos[0]
            dy = event.y - self._last_pos[1]
            self._last_pos = (event.x, event.y)
            if self._dragging_id is not None:
                self.spin_item(self._dragging_id, dx, dy)
                return True
            if self._world_dragging:
                if self._last_move_t is not None and now > self._last_move_t:
                    elapsed = now - self._last_move_t
                    self._velocity = (dx / elapsed, dy / elapsed)
                self._last_move_t = now
                return self.rotation.apply_drag(dx, dy)
            return False

        if event.type == "pointerup":
            return self._release(now, keep_hover=True)

        if event.type == "pointerleave":
            if event.target_id is not None:
                # Leaving an orb: keep the hover while it is being dragged.
                if self._hovered_id == event.target_id and self._dragging_id != event.target_id:
                    self._hovered_id = None
                    return True
                return False
            return self._release(now, keep_hover=False)

        return False

    def _release(self, now: float, *, keep_hover: bool) -> bool:
        changed = False
        if self._dragging_id is not None:
            self.release_item(self._dragging_id)
            if not keep_hover:
                self._hovered_id = None
            self._dragging_id = None
            changed = True
        if self._world_dragging:
            idle = self._last_move_t is None or now - self._last_move_t > _RELEASE_IDLE_S
            vx, vy = (0.0, 0.0) if idle else self._velocity
            self.rotation.release(vx, vy)
            self._world_dragging = False
            changed = True
        self._last_pos = None
        self._last_move_t = None
        return changed

    def _end_drags(self) -> None:
        self._dragging_id = None
        self._world_dragging = False
        self._last_pos = None
        self._last_move_t = None
        self._velocity = (0.0, 0.0)
        self.rotation.grab()

    # -- animation -------------------------------------------------------

    def tick(self, dt: float) -> bool:
        """Advance inertia and spin springs. Returns True while anything is animating."""
        animating = False
        if not self._world_dragging and self._mode == ViewMode.SPHERE:
            animating = self.rotation.step(dt) or animating
        for mid, spin in self._spins.items():
            if mid == self._dragging_id:
                continue
            animating = spin.step(dt) or animating
        return animating
