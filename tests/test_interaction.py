from __future__ import annotations

import pytest

from memorysphere.core.interaction import InputEvent, InteractionController, input_event_from_dict
from memorysphere.core.layout import ViewMode
from memorysphere.core.rotation import RotationEngine
from memorysphere.core.settings import SceneSettings

IDENTITY = (0.0, 0.0, 0.0, 1.0)


def _controller(count: int = 3, settings: SceneSettings | None = None) -> InteractionController:
    order = {f"m{i}": i for i in range(count)}
    return InteractionController(
        RotationEngine(),
        count=lambda: count,
        index_of=order.get,
        settings=settings or SceneSettings(),
    )


def _settle(c: InteractionController) -> None:
    for _ in range(2000):
        if not c.tick(1.0 / 60.0):
            return
    raise AssertionError("animation did not settle")


def test_zoom_scenario() -> None:
    c = _controller(settings=SceneSettings(initial_zoom=1.8))
    z = c.set_zoom(-1000.0)
    assert z > 1.8
    for _ in range(10):
        z = c.set_zoom(-1000.0)
    assert z == 5.0

    assert c.set_zoom(10000.0) == 0.2


def test_zoom_ignores_nan() -> None:
    c = _controller()
    assert c.set_zoom(float("nan")) == 1.0


def test_navigate_clamps_at_boundaries() -> None:
    c = _controller(count=3)
    assert c.navigate("prev") == 0
    assert c.navigate("next") == 1
    assert c.navigate("next") == 2
    assert c.navigate("next") == 2
    assert c.navigate("prev") == 1

    with pytest.raises(ValueError):
        c.navigate("sideways")


def test_set_focused_index_clamps() -> None:
    c = _controller(count=3)
    assert c.set_focused_index(10) == 2
    assert c.set_focused_index(-5) == 0
    assert _controller(count=0).set_focused_index(4) == 0


def test_entering_gallery_resets_orientation_and_focus() -> None:
    c = _controller()
    c.apply_drag(120.0, 40.0)
    c.set_focused_index(2)
    c.spin_item("m1", 10.0, 0.0)
    assert c.rotation.quaternion != IDENTITY

    c.set_mode("gallery")
    assert c.mode == ViewMode.GALLERY
    assert c.rotation.quaternion == IDENTITY
    assert c.focused_index == 0
    assert c.spin_angles() == {}

    # World rotation is disabled while in the gallery.
    assert c.apply_drag(50.0, 0.0) is False
    assert c.rotation.quaternion == IDENTITY

    assert c.toggle_view_mode() == ViewMode.SPHERE
    assert c.apply_drag(50.0, 0.0) is True


def test_mode_change_callbacks() -> None:
    c = _controller()
    seen: list[tuple[ViewMode, ViewMode]] = []

    def boom(old: ViewMode, new: ViewMode) -> None:
        raise RuntimeError("callback failure")

    c.add_mode_changed_callback(boom)
    c.add_mode_changed_callback(lambda old, new: seen.append((old, new)))

    c.set_mode(ViewMode.GALLERY)
    c.set_mode(ViewMode.GALLERY)
    assert seen == [(ViewMode.SPHERE, ViewMode.GALLERY)]

    with pytest.raises(ValueError):
        c.set_mode("carousel")


def test_arrow_keys_navigate_only_in_gallery() -> None:
    c = _controller(count=3)
    assert c.handle_event(InputEvent(type="keydown", key="ArrowRight")) is False
    assert c.focused_index == 0

    c.set_mode("gallery")
    assert c.handle_event(InputEvent(type="keydown", key="ArrowDown")) is True
    assert c.handle_event(InputEvent(type="keydown", key="ArrowRight")) is True
    assert c.focused_index == 2
    assert c.handle_event(InputEvent(type="keydown", key="ArrowDown")) is False
    c.handle_event(InputEvent(type="keydown", key="ArrowUp"))
    c.handle_event(InputEvent(type="keydown", key="ArrowLeft"))
    assert c.focused_index == 0
    assert c.handle_event(InputEvent(type="keydown", key="Enter")) is False


def test_click_to_focus_in_gallery() -> None:
    c = _controller(count=3)
    c.set_mode("gallery")
    assert c.handle_event(InputEvent(type="pointerup", target_id="m2")) is True
    assert c.focused_index == 2
    assert c.handle_event(InputEvent(type="pointerup", target_id="unknown")) is False
    assert c.focused_index == 2


def test_wheel_event_zooms() -> None:
    c = _controller()
    assert c.handle_event(InputEvent(type="wheel", delta_y=-500.0)) is True
    assert c.zoom == pytest.approx(1.5)


def test_world_drag_with_release_inertia() -> None:
    c = _controller()
    assert c.handle_event(InputEvent(type="pointerdown", x=0.0, y=0.0, timestamp=0.0)) is True
    assert c.is_world_dragging

    assert c.handle_event(InputEvent(type="pointermove", x=50.0, y=0.0, timestamp=0.016)) is True
    moved = c.rotation.quaternion
    assert moved != IDENTITY

    c.handle_event(InputEvent(type="pointerup", x=50.0, y=0.0, timestamp=0.02))
    assert not c.is_world_dragging
    assert c.rotation.is_coasting

    assert c.tick(1.0 / 60.0) is True
    assert c.rotation.quaternion != moved
    _settle(c)
    assert not c.rotation.is_coasting


def test_release_after_pause_does_not_coast() -> None:
    c = _controller()
    c.handle_event(InputEvent(type="pointerdown", x=0.0, y=0.0, timestamp=0.0))
    c.handle_event(InputEvent(type="pointermove", x=50.0, y=0.0, timestamp=0.016))
    c.handle_event(InputEvent(type="pointerup", x=50.0, y=0.0, timestamp=0.6))
    assert not c.rotation.is_coasting


def test_pointerdown_over_chrome_is_ignored() -> None:
    c = _controller()
    assert c.handle_event(InputEvent(type="pointerdown", over_chrome=True)) is False
    assert not c.is_world_dragging
    assert c.handle_event(InputEvent(type="pointermove", x=30.0, y=30.0)) is False
    assert c.rotation.quaternion == IDENTITY


def test_item_spin_without_gravity_keeps_angle() -> None:
    c = _controller()
    c.handle_event(InputEvent(type="pointerdown", x=0.0, y=0.0, target_id="m1"))
    assert c.dragging_id == "m1"
    c.handle_event(InputEvent(type="pointermove", x=10.0, y=5.0, target_id="m1"))
    # World orientation is untouched by an item drag.
    assert c.rotation.quaternion == IDENTITY
    assert c.spin_angles()["m1"] == (-6.0, -12.0)

    c.handle_event(InputEvent(type="pointerup", x=10.0, y=5.0, target_id="m1"))
    assert c.dragging_id is None
    _settle(c)
    assert c.spin_angles()["m1"] == (-6.0, -12.0)


def test_gravity_snaps_spin_back_upright() -> None:
    c = _controller()
    assert c.toggle_gravity_mode() is True

    c.handle_event(InputEvent(type="pointerdown", x=0.0, y=0.0, target_id="m0"))
    c.handle_event(InputEvent(type="pointermove", x=-250.0, y=0.0, target_id="m0"))
    assert c.spin_angles()["m0"] == (0.0, 300.0)
    c.handle_event(InputEvent(type="pointerup", x=-250.0, y=0.0, target_id="m0"))

    # Snapping animates instead of jumping.
    c.tick(1.0 / 60.0)
    _, y = c.spin_angles()["m0"]
    assert 300.0 < y < 360.0

    _settle(c)
    assert c.spin_angles()["m0"] == (0.0, 360.0)


def test_enabling_gravity_snaps_idle_items() -> None:
    c = _controller()
    c.spin_item("m2", 0.0, 20.0)
    assert c.spin_angles()["m2"] == (-24.0, 0.0)

    c.toggle_gravity_mode()
    _settle(c)
    assert c.spin_angles()["m2"] == (0.0, 0.0)


def test_hover_tracking() -> None:
    c = _controller()
    assert c.handle_event(InputEvent(type="pointerenter", target_id="m1")) is True
    assert c.hovered_id == "m1"
    assert c.handle_event(InputEvent(type="pointerleave", target_id="m1")) is True
    assert c.hovered_id is None

    # Hover survives leaving the orb while it is being dragged.
    c.handle_event(InputEvent(type="pointerdown", target_id="m1"))
    c.handle_event(InputEvent(type="pointerleave", target_id="m1"))
    assert c.hovered_id == "m1"
    c.handle_event(InputEvent(type="pointerleave"))
    assert c.dragging_id is None
    assert c.hovered_id is None


def test_forget_drops_item_state() -> None:
    c = _controller()
    c.handle_event(InputEvent(type="pointerdown", target_id="m1"))
    c.handle_event(InputEvent(type="pointermove", x=5.0, target_id="m1"))
    c.forget("m1")
    assert c.hovered_id is None
    assert c.dragging_id is None
    assert "m1" not in c.spin_angles()


def test_input_event_from_dict() -> None:
    ev = input_event_from_dict({"type": "pointerDown", "x": "12", "y": 4, "targetId": "m1", "overChrome": False})
    assert ev == InputEvent(type="pointerdown", x=12.0, y=4.0, target_id="m1")

    wheel = input_event_from_dict({"type": "wheel", "deltaY": -120})
    assert wheel.delta_y == -120.0

    with pytest.raises(ValueError):
        input_event_from_dict({"type": "doubleclick"})
    with pytest.raises(ValueError):
        input_event_from_dict({"type": "pointermove", "x": "left"})


def test_unknown_targets_leave_no_item_state() -> None:
    c = _controller(count=1)
    for i in range(50):
        assert c.handle_event(InputEvent(type="pointerenter", target_id=f"ghost{i}")) is False
        assert c.handle_event(InputEvent(type="pointerdown", target_id=f"ghost{i}")) is False
        c.handle_event(InputEvent(type="pointerup", target_id=f"ghost{i}"))

    assert c.spin_angles() == {}
    assert c.hovered_id is None
    assert c.dragging_id is None
    assert not c.is_world_dragging


def test_spin_item_is_ignored_in_gallery() -> None:
    c = _controller()
    c.set_mode(ViewMode.GALLERY)
    assert c.spin_item("m1", 10.0, 10.0) == (0.0, 0.0)
    assert "m1" not in c.spin_angles()
