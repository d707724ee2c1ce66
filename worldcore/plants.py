#!/usr/bin/env python3
"""
Plant growth for Tiny World.

Plants are rooted on the planet surface and turn with it. Their segments are
stored in plant-local coordinates (origin at the root, +y pointing away from the
planet); growth happens in world coordinates, where the sun is.
"""
import math
from typing import Tuple

from .data_models import Plant, PlantPart, WorldState
from .errors import WorldInvariantError
from .geometry import circle_point, require_circle
from .physics import wrap_angle
from .vector_utils import Vector2d, vec_add, vec_len, vec_rotate, vec_scale, vec_sub, vec_unit

Extent = Tuple[Vector2d, Vector2d]


def plant_root_location(world: WorldState, plant: Plant) -> Vector2d:
    planet = world.planet
    radius = require_circle(planet.shape, "Planet").radius
    return vec_add(planet.location, circle_point(radius, planet.rotation + plant.rotation))


def plant_to_world(world: WorldState, plant: Plant, extent: Extent) -> Extent:
    root = plant_root_location(world, plant)
    angle = world.planet.rotation + plant.rotation - math.pi / 2
    start, end = (vec_add(vec_rotate(p, angle), root) for p in extent)
    return (start, end)


def world_to_plant(world: WorldState, plant: Plant, extent: Extent) -> Extent:
    root = plant_root_location(world, plant)
    angle = -(world.planet.rotation + plant.rotation) + math.pi / 2
    start, end = (vec_rotate(vec_sub(p, root), angle) for p in extent)
    return (start, end)


def is_in_shadow(world: WorldState, plant: Plant) -> bool:
    """True when the sun's orbital phase is more than a quarter turn from the plant's."""
    sun_orbit = world.sun.orbit
    if sun_orbit is None:
        raise WorldInvariantError("The sun must orbit the planet for plants to grow")
    distance = abs(wrap_angle(sun_orbit.rotation) - wrap_angle(world.planet.rotation + plant.rotation))
    return distance > math.pi / 2


def grow_toward(point: Vector2d, target: Vector2d, step: float) -> Vector2d:
    direction = vec_sub(target, point)
    if vec_len(direction) == 0.0:
        return point
    return vec_add(point, vec_scale(vec_unit(direction), step))


def grow_part(world: WorldState, plant: Plant, part: PlantPart, step: float) -> None:
    """Grow children first, then pull both ends of this segment toward the sun."""
    if is_in_shadow(world, plant):
        return

    for child in part.children:
        grow_part(world, plant, child, step)

    sun_location = world.sun.location
    start, end = plant_to_world(world, plant, part.extent)
    part.extent = world_to_plant(world, plant, (
        grow_toward(start, sun_location, step),
        grow_toward(end, sun_location, step),
    ))


def grow_plants(world: WorldState, elapsed: float, growth_rate: float) -> None:
    if elapsed <= 0:
        return
    for plant in world.plants:
        grow_part(world, plant, plant.trunk, growth_rate * elapsed)
