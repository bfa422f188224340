"""World orientation of the sphere.

Convention (fixed end to end):
- Quaternions are stored as (x, y, z, w).
- Matrices act on column vectors: `world = M @ local`. The world-space depth of a
  local position p is therefore `M[2, :3] @ p` (third row).
- Screen axes: +x right, +y down, +z towards the viewer.
"""
from __future__ import annotations

import math

import numpy as np

from .coordinates import DEFAULT_POLE_EPSILON, clamp_phi, to_spherical

IDENTITY_XYZW = (0.0, 0.0, 0.0, 1.0)
_DRAG_EPSILON = 1e-6


def normalized_vec3(v: np.ndarray | tuple[float, float, float] | list[float], fallback: tuple[float, float, float]) -> np.ndarray:
    out = np.asarray(v, dtype=np.float64).reshape(3)
    n = float(np.linalg.norm(out))
    if n < 1e-12:
        out = np.asarray(fallback, dtype=np.float64).reshape(3)
        n = float(np.linalg.norm(out))
        if n < 1e-12:
            return np.array([0.0, 0.0, 1.0], dtype=np.float64)
    return out / n


def quat_normalize(q: np.ndarray | tuple[float, float, float, float] | list[float]) -> np.ndarray:
    out = np.asarray(q, dtype=np.float64).reshape(4)
    n = float(np.linalg.norm(out))
    if n < 1e-12 or not np.isfinite(n):
        return np.asarray(IDENTITY_XYZW, dtype=np.float64)
    return out / n


def quat_multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Hamilton product a * b (apply b first, then a)."""
    ax, ay, az, aw = np.asarray(a, dtype=np.float64).reshape(4).tolist()
    bx, by, bz, bw = np.asarray(b, dtype=np.float64).reshape(4).tolist()
    return np.array(
        [
            aw * bx + ax * bw + ay * bz - az * by,
            aw * by - ax * bz + ay * bw + az * bx,
            aw * bz + ax * by - ay * bx + az * bw,
            aw * bw - ax * bx - ay * by - az * bz,
        ],
        dtype=np.float64,
    )


def quat_from_axis_angle(axis: np.ndarray | tuple[float, float, float], angle: float) -> np.ndarray:
    a = normalized_vec3(axis, (0.0, 1.0, 0.0))
    half = 0.5 * float(angle)
    s = math.sin(half)
    return np.array([a[0] * s, a[1] * s, a[2] * s, math.cos(half)], dtype=np.float64)


def quat_xyzw_to_matrix(
    q_xyzw: tuple[float, float, float, float] | list[float] | np.ndarray,
) -> np.ndarray:
    """3x3 rotation matrix of a quaternion (column-vector convention)."""
    x, y, z, w = quat_normalize(q_xyzw).tolist()
    xx, yy, zz = x * x, y * y, z * z
    xy, xz, yz = x * y, x * z, y * z
    wx, wy, wz = w * x, w * y, w * z
    return np.array(
        [
            [1.0 - 2.0 * (yy + zz), 2.0 * (xy - wz), 2.0 * (xz + wy)],
            [2.0 * (xy + wz), 1.0 - 2.0 * (xx + zz), 2.0 * (yz - wx)],
            [2.0 * (xz - wy), 2.0 * (yz + wx), 1.0 - 2.0 * (xx + yy)],
        ],
        dtype=np.float64,
    )


def homogeneous(rot3: np.ndarray) -> np.ndarray:
    t = np.eye(4, dtype=np.float64)
    t[:3, :3] = np.asarray(rot3, dtype=np.float64).reshape(3, 3)
    return t


def drag_quaternion(dx: float, dy: float, sensitivity: float) -> np.ndarray | None:
    """Delta rotation for a screen-space drag, or None when the drag is degenerate.

    The axis is perpendicular to the drag in the screen plane: (dy, -dx, 0).
    """

    magnitude = math.hypot(float(dx), float(dy))
    if magnitude < _DRAG_EPSILON or not math.isfinite(magnitude):
        return None
    axis = (float(dy) / magnitude, -float(dx) / magnitude, 0.0)
    return quat_from_axis_angle(axis, magnitude * float(sensitivity))


class RotationEngine:
    """Accumulates the world orientation from pointer drags.

    Drags are pre-multiplied (`q = delta * q`), i.e. applied in world space, so a
    horizontal drag always spins around the screen's vertical axis regardless of
    the current orientation.

    After release the last drag velocity keeps turning the sphere and decays
    exponentially (`inertia_friction` per second).
    """

    def __init__(self, sensitivity: float = 0.005, *, inertia_friction: float = 4.0, inertia_stop_speed: float = 5.0) -> None:
        self._q = np.asarray(IDENTITY_XYZW, dtype=np.float64)
        self.sensitivity = float(sensitivity)
        self.inertia_friction = float(inertia_friction)
        self.inertia_stop_speed = float(inertia_stop_speed)
        self._velocity = np.zeros(2, dtype=np.float64)

    @property
    def quaternion(self) -> tuple[float, float, float, float]:
        x, y, z, w = self._q.tolist()
        return (x, y, z, w)

    @property
    def velocity(self) -> tuple[float, float]:
        return float(self._velocity[0]), float(self._velocity[1])

    @property
    def is_coasting(self) -> bool:
        return bool(np.any(self._velocity != 0.0))

    def apply_drag(self, dx: float, dy: float) -> bool:
        """Rotate by a drag of (dx, dy) px. Returns False when the drag was skipped."""
        delta = drag_quaternion(dx, dy, self.sensitivity)
        if delta is None:
            return False
        self._q = quat_normalize(quat_multiply(delta, self._q))
        return True

    def set_quaternion(self, q_xyzw: tuple[float, float, float, float] | list[float] | np.ndarray) -> None:
        self._q = quat_normalize(q_xyzw)

    def reset(self) -> None:
        self._q = np.asarray(IDENTITY_XYZW, dtype=np.float64)
        self._velocity[:] = 0.0

    # -- inertia ---------------------------------------------------------

    def grab(self) -> None:
        self._velocity[:] = 0.0

    def release(self, vx: float, vy: float) -> None:
        """Hand over a drag velocity (px/s) for coasting."""
        v = np.array([float(vx), float(vy)], dtype=np.float64)
        if self.inertia_friction <= 0.0 or not np.all(np.isfinite(v)) or float(np.linalg.norm(v)) < self.inertia_stop_speed:
            self._velocity[:] = 0.0
            return
        self._velocity = v

    def step(self, dt: float) -> bool:
        """Advance inertia by dt seconds. Returns True while the sphere is still coasting."""
        if not self.is_coasting or dt <= 0.0:
            return False
        dx, dy = (self._velocity * dt).tolist()
        self.apply_drag(dx, dy)
        self._velocity *= math.exp(-self.inertia_friction * dt)
        if float(np.linalg.norm(self._velocity)) < self.inertia_stop_speed:
            self._velocity[:] = 0.0
        return self.is_coasting

    # -- matrices --------------------------------------------------------

    def rotation3(self) -> np.ndarray:
        return quat_xyzw_to_matrix(self._q)

    def rotation_matrix(self) -> np.ndarray:
        """4x4 homogeneous world rotation (no translation)."""
        return homogeneous(self.rotation3())

    def billboard_matrix(self) -> np.ndarray:
        """Inverse world rotation: transpose of the 3x3 block, translation left as identity."""
        return homogeneous(self.rotation3().T)

    def front_facing_point(self, pole_epsilon: float = DEFAULT_POLE_EPSILON) -> tuple[float, float]:
        """(theta, phi) of the sphere point currently facing the viewer, phi kept off the poles."""
        local = self.rotation3().T @ np.array([0.0, 0.0, 1.0], dtype=np.float64)
        theta, phi = to_spherical(float(local[0]), float(local[1]), float(local[2]))
        return theta, clamp_phi(phi, pole_epsilon)
