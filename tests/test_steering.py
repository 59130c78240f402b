import math

import pytest

from steerkin.steering import STEER_ANGLE_TOLERANCE, SteeringGeometry


@pytest.fixture
def geometry():
    return SteeringGeometry(wheelbase=0.65, track=0.6, max_steer_angle=0.58)


@pytest.mark.parametrize("angle", [0.0, STEER_ANGLE_TOLERANCE, -STEER_ANGLE_TOLERANCE, 0.001])
def test_small_angles_are_zeroed(geometry, angle):
    assert geometry.inner_to_central(angle) == 0.0
    assert geometry.central_to_inner(angle) == 0.0


@pytest.mark.parametrize("angle", [0.05, 0.2, 0.4, -0.1, -0.35])
def test_round_trip(geometry, angle):
    central = geometry.inner_to_central(angle)
    assert geometry.central_to_inner(central) == pytest.approx(angle, rel=1e-12)


@pytest.mark.parametrize("angle", [0.1, 0.3, 0.5])
def test_inner_wheel_turns_more_than_centre(geometry, angle):
    central = geometry.inner_to_central(angle)
    assert 0 < central < angle


@pytest.mark.parametrize("angle", [0.1, 0.3])
def test_sign_symmetry(geometry, angle):
    assert geometry.inner_to_central(-angle) == pytest.approx(-geometry.inner_to_central(angle))
    assert geometry.central_to_inner(-angle) == pytest.approx(-geometry.central_to_inner(angle))


def test_zero_track_makes_angles_equal():
    g = SteeringGeometry(wheelbase=1.0, track=0.0)
    assert g.inner_to_central(0.3) == pytest.approx(0.3)


def test_twist_without_rotation(geometry):
    assert geometry.twist_to_steering(1.0, 0.0) == (0.0, None)


def test_twist_tight_turn_saturates(geometry):
    angle, radius = geometry.twist_to_steering(0.1, 1.0)
    assert radius == pytest.approx(0.1)
    assert angle == pytest.approx(0.58)
    angle, _ = geometry.twist_to_steering(0.1, -1.0)
    assert angle == pytest.approx(-0.58)


def test_twist_matches_turning_radius():
    g = SteeringGeometry(wheelbase=1.0, track=0.0, max_steer_angle=0.6)
    angle, radius = g.twist_to_steering(1.0, 0.5)
    assert radius == pytest.approx(2.0)
    assert math.tan(angle) == pytest.approx(1.0 / radius)


def test_twist_reversing_flips_sign(geometry):
    forward, _ = geometry.twist_to_steering(2.0, 0.5)
    backward, _ = geometry.twist_to_steering(-2.0, 0.5)
    assert forward > 0
    assert backward == pytest.approx(-forward)