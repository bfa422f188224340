from __future__ import annotations

import math
from dataclasses import dataclass

_MAX_SUBSTEP = 1.0 / 240.0


def snap_to_balance(value: float) -> float:
    """Nearest upright rest angle (multiple of 360 degrees)."""
    return float(round(float(value) / 360.0) * 360.0)


@dataclass
class Spring:
    """Damped spring driving one scalar towards `target`.

    Integrated with semi-implicit Euler in small substeps; once both the distance and the
    speed fall under `rest_delta` it lands exactly on the target.
    """

    value: float
    target: float
    stiffness: float = 200.0
    damping: float = 25.0
    mass: float = 1.0
    velocity: float = 0.0
    rest_delta: float = 0.01

    @property
    def at_rest(self) -> bool:
        return self.value == self.target and self.velocity == 0.0

    def step(self, dt: float) -> bool:
        """Advance by dt seconds. Returns True while still moving."""
        if self.at_rest or dt <= 0.0:
            return not self.at_rest
        steps = max(1, int(math.ceil(dt / _MAX_SUBSTEP)))
        h = dt / steps
        for _ in range(steps):
            force = -self.stiffness * (self.value - self.target) - self.damping * self.velocity
            self.velocity += (force / self.mass) * h
            self.value += self.velocity * h
        if abs(self.value - self.target) < self.rest_delta and abs(self.velocity) < self.rest_delta:
            self.value = self.target
            self.velocity = 0.0
        return not self.at_rest
