from __future__ import annotations

import numpy as np

from memorysphere.core.gallery import compute_gallery_layout, gallery_opacity, ring_point


def test_focused_item_is_active_and_centered() -> None:
    for i in (0, 1, 7, 32, 120):
        layout = compute_gallery_layout(i, i)
        assert layout.scale == 1.4
        assert layout.is_active is True
        assert np.isclose(layout.x, 0.0)
        assert np.isclose(layout.y, 0.0)
        assert layout.z == 0.0
        assert layout.blur == 0.0
        assert layout.z_index == 10000


def test_three_item_scenario() -> None:
    layouts = [compute_gallery_layout(i, 1) for i in range(3)]
    newer, focused, older = layouts

    assert focused.is_active and focused.scale == 1.4
    assert not newer.is_active and not older.is_active

    # Newer item is ahead of focus (behind the camera) and fades fast.
    assert np.isclose(newer.opacity, 0.6)
    assert newer.z == 800.0
    # Older item recedes into the distance and fades slowly.
    assert np.isclose(older.opacity, 0.85)
    assert older.z == -800.0

    assert np.isclose(newer.scale, 1.1)
    assert np.isclose(older.scale, 1.1)
    assert newer.blur == 2.0 and older.blur == 2.0
    assert focused.z_index > max(newer.z_index, older.z_index)


def test_ring_is_recentred_on_focus() -> None:
    fx, fy = ring_point(4)
    ix, iy = ring_point(9)
    layout = compute_gallery_layout(9, 4)
    assert np.isclose(layout.x, ix - fx)
    assert np.isclose(layout.y, iy - fy)
    assert layout.side == ("right" if layout.x > 0 else "left")


def test_scale_floor_and_opacity_cutoff() -> None:
    assert compute_gallery_layout(20, 0).scale == 0.6
    assert gallery_opacity(-3) == 0.0
    assert gallery_opacity(10) == 0.0

    hidden = compute_gallery_layout(0, 3)
    assert hidden.opacity == 0.0
    assert hidden.hit_testable is False


def test_layout_is_pure() -> None:
    assert compute_gallery_layout(5, 2) == compute_gallery_layout(5, 2)
