#!/usr/bin/env python3
"""
World construction: the fixed planet and sun, randomized clouds and starter plants.

Every call builds fresh objects, so two worlds never share mutable state.
"""
import logging
import math
import random
from typing import Optional

from .constants import (
    CLOUD_HEIGHT_SPREAD,
    CLOUD_MIN_HEIGHT,
    CLOUD_MIN_WIDTH,
    CLOUD_PERIOD_MIN,
    CLOUD_PERIOD_SPREAD,
    CLOUD_SIZE_SPREAD,
    MIN_CLOUD_HEIGHT,
    TAU,
)
from .data_models import (
    CelestialObject,
    Cloud,
    Orbit,
    Plant,
    PlantPart,
    WorldSettings,
    WorldState,
)
from .geometry import Circle, Ellipse, require_circle

logger = logging.getLogger(__name__)


def create_random_cloud(planet: CelestialObject, cloud_id: int, rng,
                        settings: Optional[WorldSettings] = None) -> Cloud:
    """
    A floating cloud on a random circular orbit a little above the planet.

    The cloud circles in the same direction the planet spins.
    """
    settings = settings or WorldSettings()
    planet_radius = require_circle(planet.shape, "Cloud anchor planet").radius

    initial_rotation = rng.random() * TAU
    orbital_radius = planet_radius * 2 + MIN_CLOUD_HEIGHT + rng.random() * CLOUD_HEIGHT_SPREAD
    direction = 1 if planet.rotational_velocity > 0 else -1
    period = rng.random() * CLOUD_PERIOD_SPREAD + CLOUD_PERIOD_MIN
    silhouette = Ellipse(
        CLOUD_MIN_WIDTH + rng.random() * CLOUD_SIZE_SPREAD,
        CLOUD_MIN_HEIGHT + rng.random() * CLOUD_SIZE_SPREAD,
    )

    cloud = Cloud(
        name=f"Cloud {cloud_id}",
        shape=silhouette,
        orbit=Orbit(
            target=planet,
            shape=Circle(orbital_radius),
            rotation=initial_rotation,
            rotational_velocity=direction * TAU / period,
        ),
        cloud_id=cloud_id,
        mass=settings.cloud_initial_mass,
    )
    cloud.location = cloud.orbit_location()
    return cloud


def create_plant(rotation: float = math.pi / 4) -> Plant:
    """A single upright trunk segment one unit above the surface."""
    return Plant(rotation=rotation, trunk=PlantPart(extent=((0.0, 1.0), (0.0, 2.0))))


def create_initial_world_state(settings: Optional[WorldSettings] = None, rng=None) -> WorldState:
    """
    Build a new world: a spinning planet at the origin, the sun on its elliptical
    orbit around the planet, and the initial cloud population.

    Args:
        settings: World parameters; defaults to WorldSettings()
        rng: Random source exposing random(); defaults to an unseeded random.Random
    """
    settings = settings or WorldSettings()
    rng = rng or random.Random()

    planet = CelestialObject(
        name="Planet",
        shape=Circle(settings.planet_radius),
        rotational_velocity=settings.planet_rotational_velocity,
    )
    sun = CelestialObject(
        name="Sun",
        shape=Circle(settings.sun_radius),
        orbit=Orbit(
            target=planet,
            shape=Ellipse(*settings.sun_orbit_axes),
            rotational_velocity=settings.sun_orbital_velocity,
        ),
    )
    sun.location = sun.orbit_location()

    world = WorldState(planet=planet, sun=sun)
    for _ in range(settings.initial_cloud_count):
        world.water.clouds.append(create_random_cloud(planet, world.allocate_cloud_id(), rng, settings))
    for i in range(settings.plant_count):
        world.plants.append(create_plant(math.pi / 4 + i * TAU / settings.plant_count))

    logger.debug("Created world with %d clouds and %d plants",
                 len(world.water.clouds), len(world.plants))
    return world
