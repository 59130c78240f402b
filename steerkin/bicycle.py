"""Rear-wheel bicycle kinematics and its numerical propagation.

The model::

    dx/dt     = v * cos(theta)
    dy/dt     = v * sin(theta)
    dtheta/dt = v / L * tan(delta)

State is ``(x, y, theta)``. Control input is ``(v, delta)``: the speed and
the steering angle of the front wheel.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, MutableSequence, Sequence

from steerkin.integrators import RK4


@dataclass
class ControlInput:
    """Speed ``v`` and front wheel steering angle ``delta``."""

    v: float = 0.0
    delta: float = 0.0


class BicycleKinematics:
    """Derivative function of the bicycle model for a fixed control input."""

    def __init__(self, u: ControlInput, wheelbase: float) -> None:
        self.u = u
        self.wheelbase = wheelbase

    def __call__(self, x: Sequence[float], xd: MutableSequence[float], t: float) -> None:
        v = self.u.v
        xd[0] = v * math.cos(x[2])
        xd[1] = v * math.sin(x[2])
        xd[2] = v / self.wheelbase * math.tan(self.u.delta)


class SystemPropagator:
    """Integrates the bicycle model with a fourth order Runge-Kutta scheme."""

    def __init__(self, wheelbase: float) -> None:
        self.wheelbase = wheelbase
        self._integrator = RK4()

    def propagate(
        self,
        init_state: Sequence[float],
        u: ControlInput,
        t0: float,
        tf: float,
        dt: float,
    ) -> List[float]:
        """Step the model from ``t0`` while the time does not exceed ``tf``."""
        if dt <= 0:
            raise ValueError(f"time step must be positive, got {dt}")
        system = BicycleKinematics(u, self.wheelbase)
        x = list(init_state)
        t = t0
        while t <= tf:
            t = self._integrator.step(system, x, t, dt)
        return x