"""Ackermann steering geometry: inner wheel and central steering angles."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

STEER_ANGLE_TOLERANCE = 0.005  # about 0.287 degrees


@dataclass
class SteeringGeometry:
    """Wheelbase, track and steering limits of a car-like vehicle."""

    wheelbase: float
    track: float
    max_steer_angle_central: float = 0.0
    max_steer_angle: float = 0.0

    def central_to_inner(self, angle: float) -> float:
        """Inner wheel angle for a central (virtual middle wheel) angle."""
        if abs(angle) <= STEER_ANGLE_TOLERANCE:
            return 0.0
        sign = 1.0 if angle > 0 else -1.0
        phi = abs(angle)
        l, w = self.wheelbase, self.track
        inner = math.atan(2 * l * math.sin(phi) / (2 * l * math.cos(phi) - w * math.sin(phi)))
        return sign * inner

    def inner_to_central(self, angle: float) -> float:
        """Central angle for an inner wheel angle."""
        if abs(angle) <= STEER_ANGLE_TOLERANCE:
            return 0.0
        sign = 1.0 if angle > 0 else -1.0
        radius = self.wheelbase / math.tan(abs(angle)) + self.track / 2
        return sign * math.atan(self.wheelbase / radius)

    def twist_to_steering(self, linear: float, angular: float) -> Tuple[float, Optional[float]]:
        """Inner steering angle and turning radius for a velocity command.

        The radius is ``None`` when there is no rotation. Radii shorter than
        the wheelbase give the maximum steering angle.
        """
        if angular == 0:
            return 0.0, None
        radius = abs(linear) / abs(angular)
        k = 1.0 if angular > 0 else -1.0
        if radius - self.wheelbase < 0:
            return k * self.max_steer_angle, radius
        inner = math.atan(self.wheelbase / (radius - self.track / 2))
        if linear < 0:
            inner = -inner
        return k * inner, radius