from __future__ import annotations

import math

import numpy as np

from memorysphere.core.rotation import (
    RotationEngine,
    drag_quaternion,
    quat_from_axis_angle,
    quat_multiply,
    quat_xyzw_to_matrix,
)


def test_zero_drag_leaves_orientation_unchanged() -> None:
    eng = RotationEngine()
    eng.apply_drag(30.0, -12.0)
    before = eng.quaternion

    assert eng.apply_drag(0.0, 0.0) is False
    assert eng.quaternion == before


def test_quaternion_stays_unit_after_many_drags() -> None:
    rng = np.random.default_rng(0)
    eng = RotationEngine()
    for dx, dy in rng.uniform(-200.0, 200.0, size=(500, 2)):
        eng.apply_drag(float(dx), float(dy))
        assert abs(float(np.linalg.norm(eng.quaternion)) - 1.0) < 1e-6


def test_billboard_cancels_world_rotation() -> None:
    eng = RotationEngine()
    eng.apply_drag(120.0, 45.0)
    eng.apply_drag(-30.0, 80.0)

    m = eng.rotation_matrix()
    b = eng.billboard_matrix()
    assert m.shape == (4, 4)
    assert np.allclose(m @ b, np.eye(4), atol=1e-9)
    assert np.allclose(b, m.T, atol=1e-12)


def test_horizontal_drag_spins_around_screen_vertical() -> None:
    eng = RotationEngine(sensitivity=0.005)
    eng.apply_drag(100.0, 0.0)

    r = eng.rotation3()
    assert np.allclose(r @ np.array([0.0, 1.0, 0.0]), [0.0, 1.0, 0.0], atol=1e-9)
    # 100 px * 0.005 rad/px
    assert np.isclose(math.acos((np.trace(r) - 1.0) / 2.0), 0.5)


def test_drags_compose_in_world_space() -> None:
    eng = RotationEngine()
    eng.apply_drag(0.0, 50.0)
    eng.apply_drag(80.0, 0.0)

    expected = quat_multiply(drag_quaternion(80.0, 0.0, 0.005), drag_quaternion(0.0, 50.0, 0.005))
    assert np.allclose(eng.quaternion, expected / np.linalg.norm(expected), atol=1e-12)


def test_front_facing_point_at_identity() -> None:
    eng = RotationEngine()
    theta, phi = eng.front_facing_point()
    assert np.isclose(theta, math.pi / 2)
    assert np.isclose(phi, math.pi / 2)


def test_front_facing_point_follows_rotation() -> None:
    eng = RotationEngine()
    eng.set_quaternion(quat_from_axis_angle((0.0, 1.0, 0.0), math.pi / 2))

    theta, phi = eng.front_facing_point()
    # The point that now faces +Z must land on +Z after the rotation.
    local = np.array([math.sin(phi) * math.cos(theta), math.cos(phi), math.sin(phi) * math.sin(theta)])
    assert np.allclose(eng.rotation3() @ local, [0.0, 0.0, 1.0], atol=1e-9)


def test_matrix_of_identity_quaternion() -> None:
    assert np.allclose(quat_xyzw_to_matrix((0.0, 0.0, 0.0, 1.0)), np.eye(3))
    # Degenerate input falls back to identity instead of raising.
    assert np.allclose(quat_xyzw_to_matrix((0.0, 0.0, 0.0, 0.0)), np.eye(3))


def test_inertia_decays_to_rest() -> None:
    eng = RotationEngine()
    eng.release(500.0, 0.0)
    assert eng.is_coasting

    steps = 0
    while eng.step(1.0 / 60.0):
        steps += 1
        assert steps < 1000

    assert not eng.is_coasting
    assert eng.velocity == (0.0, 0.0)
    assert not np.allclose(eng.quaternion, (0.0, 0.0, 0.0, 1.0))


def test_slow_release_does_not_coast() -> None:
    eng = RotationEngine(inertia_stop_speed=5.0)
    eng.release(1.0, 1.0)
    assert not eng.is_coasting
    assert eng.step(0.1) is False


def test_reset_restores_identity() -> None:
    eng = RotationEngine()
    eng.apply_drag(40.0, 40.0)
    eng.release(300.0, 0.0)
    eng.reset()
    assert eng.quaternion == (0.0, 0.0, 0.0, 1.0)
    assert not eng.is_coasting
