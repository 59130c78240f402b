"""Dead-reckoning odometry of a car-like vehicle from speed and steering angle."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Tuple

from steerkin.bicycle import ControlInput, SystemPropagator
from steerkin.steering import SteeringGeometry

COVARIANCE: Tuple[float, ...] = (
    0.001, 0.0, 0.0, 0.0, 0.0, 0.0,
    0.0, 0.001, 0.0, 0.0, 0.0, 0.0,
    0.0, 0.0, 1000000.0, 0.0, 0.0, 0.0,
    0.0, 0.0, 0.0, 1000000.0, 0.0, 0.0,
    0.0, 0.0, 0.0, 0.0, 1000000.0, 0.0,
    0.0, 0.0, 0.0, 0.0, 0.0, 1000.0,
)

Quaternion = Tuple[float, float, float, float]


def yaw_to_quaternion(yaw: float) -> Quaternion:
    """Quaternion ``(x, y, z, w)`` of a pure rotation about the vertical axis."""
    half = 0.5 * yaw
    return (0.0, 0.0, math.sin(half), math.cos(half))


@dataclass
class Odometry:
    """Pose and velocity estimate in the odometry frame."""

    frame_id: str
    child_frame_id: str
    x: float
    y: float
    theta: float
    orientation: Quaternion
    linear_x: float
    linear_y: float
    angular_z: float
    pose_covariance: Tuple[float, ...] = field(default=COVARIANCE)
    twist_covariance: Tuple[float, ...] = field(default=COVARIANCE)


class OdometryEstimator:
    """Integrates the bicycle model over measured speed and inner steering angle."""

    def __init__(
        self,
        geometry: SteeringGeometry,
        odom_frame: str = "odom",
        base_frame: str = "base_link",
    ) -> None:
        self.geometry = geometry
        self.odom_frame = odom_frame
        self.base_frame = base_frame
        self.x = 0.0
        self.y = 0.0
        self.theta = 0.0
        self._model = SystemPropagator(geometry.wheelbase)

    def update(self, linear_velocity: float, inner_steering_angle: float, dt: float) -> Odometry:
        """Advance the pose estimate by ``dt`` seconds and return it."""
        if dt <= 0:
            raise ValueError(f"time step must be positive, got {dt}")
        steering = self.geometry.inner_to_central(inner_steering_angle)
        self.x, self.y, self.theta = self._model.propagate(
            [self.x, self.y, self.theta],
            ControlInput(linear_velocity, steering),
            0.0,
            dt,
            dt / 100,
        )
        return Odometry(
            frame_id=self.odom_frame,
            child_frame_id=self.base_frame,
            x=self.x,
            y=self.y,
            theta=self.theta,
            orientation=yaw_to_quaternion(self.theta),
            linear_x=linear_velocity,
            linear_y=0.0,
            angular_z=linear_velocity / self.geometry.wheelbase * math.tan(steering),
        )