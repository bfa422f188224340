from __future__ import annotations

import math

import numpy as np

DEFAULT_POLE_EPSILON = 0.15


def clamp_phi(phi: float, eps: float = DEFAULT_POLE_EPSILON) -> float:
    """Keep a polar angle away from the poles, where longitude is degenerate."""
    return float(min(math.pi - eps, max(eps, float(phi))))


def to_cartesian(theta: float, phi: float, radius: float) -> tuple[float, float, float]:
    """Spherical -> cartesian with y as the polar axis.

    x = r sin(phi) cos(theta), y = r cos(phi), z = r sin(phi) sin(theta)
    """

    s = math.sin(phi)
    r = float(radius)
    return (r * s * math.cos(theta), r * math.cos(phi), r * s * math.sin(theta))


def to_spherical(x: float, y: float, z: float) -> tuple[float, float]:
    """Cartesian -> (theta, phi). Inverse of `to_cartesian` up to the radius.

    A zero-length vector maps to the equator point (0, pi/2).
    """

    r = math.sqrt(x * x + y * y + z * z)
    if r < 1e-12:
        return 0.0, math.pi / 2
    phi = math.acos(min(1.0, max(-1.0, y / r)))
    theta = math.atan2(z, x)
    return theta, phi


def unit_vector(theta: float, phi: float) -> np.ndarray:
    return np.asarray(to_cartesian(theta, phi, 1.0), dtype=np.float64)


def angular_distance(a: tuple[float, float], b: tuple[float, float]) -> float:
    """Great-circle distance in radians between two (theta, phi) points."""
    d = float(np.dot(unit_vector(*a), unit_vector(*b)))
    return math.acos(min(1.0, max(-1.0, d)))


def wrap_angle(theta: float) -> float:
    """Map an angle into [0, 2pi)."""
    t = math.fmod(float(theta), 2.0 * math.pi)
    return t + 2.0 * math.pi if t < 0.0 else t


def fibonacci_sphere_position(index: int, total: int, eps: float = DEFAULT_POLE_EPSILON) -> tuple[float, float]:
    """Evenly spread `total` points on the sphere; returns (theta, phi) of point `index`."""
    n = max(1, int(total))
    phi = math.acos(1.0 - 2.0 * (int(index) + 0.5) / n)
    theta = math.pi * (1.0 + math.sqrt(5.0)) * int(index)
    return theta, clamp_phi(phi, eps)
