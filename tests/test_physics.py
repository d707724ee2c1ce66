import math

import pytest

from worldcore.constants import TAU
from worldcore.data_models import CelestialObject, Orbit, Rain, Water
from worldcore.errors import OrbitTargetError, ShapeMismatchError
from worldcore.geometry import Circle, Ellipse, circle_point
from worldcore.physics import advance_celestial_objects, integrate_rain, wrap_angle
from worldcore.vector_utils import vec_add, vec_len


@pytest.mark.parametrize("angle", [0.0, 1.0, TAU - 1e-9, TAU, 7.0, -0.1, -1e-20, -50.0, 1e6])
def test_wrap_angle_range(angle):
    wrapped = wrap_angle(angle)
    assert 0.0 <= wrapped < TAU
    assert math.cos(wrapped) == pytest.approx(math.cos(angle), abs=1e-6)


def test_wrap_angle_keeps_angles_in_range():
    assert wrap_angle(1.25) == 1.25
    assert wrap_angle(-0.5) == pytest.approx(TAU - 0.5)


def test_kinematics_places_satellites_after_their_target(planet):
    planet.orbit = None
    mid = CelestialObject("Mid", Circle(1.0), orbit=Orbit(target=planet, shape=Circle(10.0), rotational_velocity=0.1))
    leaf = CelestialObject("Leaf", Circle(0.1), orbit=Orbit(target=mid, shape=Circle(2.0), rotational_velocity=0.3))

    advance_celestial_objects([planet, mid, leaf], 1.0)

    assert mid.location == pytest.approx(circle_point(10.0, 0.1))
    assert leaf.location == pytest.approx(vec_add(mid.location, circle_point(2.0, 0.3)))


def test_kinematics_spins_and_wraps(planet, sun):
    planet.rotation = TAU - 0.01
    advance_celestial_objects([planet, sun], 1000.0)
    assert 0.0 <= planet.rotation < TAU
    assert planet.rotation == pytest.approx(wrap_angle(TAU - 0.01 + planet.rotational_velocity * 1000.0))
    assert sun.orbit.rotation == pytest.approx(TAU / 2)
    assert sun.location == pytest.approx((-175.0, 0.0), abs=1e-9)


def test_zero_elapsed_leaves_locations_untouched(planet, sun, make_cloud):
    cloud = make_cloud(1, 2.0)
    before = (planet.location, sun.location, cloud.location)
    advance_celestial_objects([planet, sun, cloud], 0.0)
    assert (planet.location, sun.location, cloud.location) == before


def test_kinematics_rejects_self_orbit(planet):
    moon = CelestialObject("Moon", Circle(0.5), orbit=Orbit(target=planet, shape=Circle(5.0)))
    moon.orbit = Orbit(target=moon, shape=Circle(5.0))
    with pytest.raises(OrbitTargetError):
        advance_celestial_objects([planet, moon], 1.0)


def test_rain_accelerates_toward_planet(planet):
    water = Water(rain=[Rain(location=(0.0, 5.0), velocity=(0.0, 0.0))])
    landed = integrate_rain(water, planet, 0.5, gravity=0.1, max_velocity=0.1, drop_mass=0.1)
    assert landed == 0
    drop = water.rain[0]
    assert drop.velocity == pytest.approx((0.0, -0.05))
    assert drop.location == pytest.approx((0.0, 4.975))


def test_rain_speed_is_clipped(planet):
    water = Water(rain=[Rain(location=(6.0, 0.0), velocity=(0.0, 3.0))])
    integrate_rain(water, planet, 1.0, gravity=0.1, max_velocity=0.1, drop_mass=0.1)
    assert vec_len(water.rain[0].velocity) <= 0.1 + 1e-12


def test_rain_lands_and_feeds_ground(planet):
    water = Water(rain=[Rain(location=(0.0, 3.05), velocity=(0.0, 0.0))])
    landed = integrate_rain(water, planet, 1.0, gravity=0.1, max_velocity=0.1, drop_mass=0.1)
    assert landed == 1
    assert water.rain == []
    assert water.ground == pytest.approx(0.1)


def test_rain_at_planet_center_is_removed(planet):
    water = Water(rain=[Rain(location=(0.0, 0.0), velocity=(0.0, 0.0))])
    assert integrate_rain(water, planet, 1.0, gravity=0.1, max_velocity=0.1, drop_mass=0.1) == 1
    assert water.rain == []


def test_rain_needs_round_planet(planet):
    planet.shape = Ellipse(3.0, 2.0)
    water = Water(rain=[Rain(location=(0.0, 5.0), velocity=(0.0, 0.0))])
    with pytest.raises(ShapeMismatchError):
        integrate_rain(water, planet, 1.0, gravity=0.1, max_velocity=0.1, drop_mass=0.1)


def test_rain_does_not_move_when_no_time_passes(planet):
    water = Water(rain=[Rain(location=(1.0, 5.0), velocity=(0.01, -0.02))])
    integrate_rain(water, planet, 0.0, gravity=0.1, max_velocity=0.1, drop_mass=0.1)
    assert water.rain[0].location == (1.0, 5.0)
    assert water.rain[0].velocity == (0.01, -0.02)


def test_falling_rain_eventually_lands(planet):
    water = Water(rain=[Rain(location=(4.0, 8.0), velocity=(0.1, 0.0))])
    for _ in range(200):
        integrate_rain(water, planet, 1.0, gravity=0.1, max_velocity=0.1, drop_mass=0.1)
        if not water.rain:
            break
    assert water.rain == []
    assert water.ground == pytest.approx(0.1)
