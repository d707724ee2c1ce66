import math

import pytest

from worldcore.data_models import CelestialObject, Cloud, Orbit, WorldSettings, WorldState
from worldcore.geometry import Circle, Ellipse


class ScriptedRandom:
    """Random source that replays queued values, then keeps returning a default."""

    def __init__(self, values=(), default=0.5):
        self.values = list(values)
        self.default = default
        self.calls = 0

    def random(self):
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return self.default


@pytest.fixture
def scripted_random():
    return ScriptedRandom


@pytest.fixture
def planet():
    return CelestialObject(
        name="Planet",
        shape=Circle(3.0),
        rotational_velocity=2 * math.pi / 10000,
    )


@pytest.fixture
def sun(planet):
    body = CelestialObject(
        name="Sun",
        shape=Circle(20.0),
        orbit=Orbit(target=planet, shape=Ellipse(175.0, 200.0), rotational_velocity=2 * math.pi / 2000),
    )
    body.location = body.orbit_location()
    return body


@pytest.fixture
def make_cloud(planet):
    def _make(cloud_id, rotation, radius=7.0, velocity=0.004, silhouette=(0.6, 0.4), mass=5.0):
        cloud = Cloud(
            name=f"Cloud {cloud_id}",
            shape=Ellipse(*silhouette),
            orbit=Orbit(target=planet, shape=Circle(radius), rotation=rotation, rotational_velocity=velocity),
            cloud_id=cloud_id,
            mass=mass,
        )
        cloud.location = cloud.orbit_location()
        return cloud
    return _make


@pytest.fixture
def empty_world(planet, sun):
    return WorldState(planet=planet, sun=sun, next_cloud_id=100)


@pytest.fixture
def quiet_settings():
    """Settings for a world that starts without clouds and never spawns any."""
    return WorldSettings(initial_cloud_count=0, cloud_target_count=0)
