#!/usr/bin/env python3
"""
Read-only copies of the world state for rendering and the UI.

A snapshot holds only frozen dataclasses and tuples, so it can be read outside the
controller lock while the engine keeps mutating the live WorldState.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from .data_models import CelestialObject, CloudState, WorldState
from .geometry import Ellipse, Shape
from .plants import plant_root_location, plant_to_world
from .vector_utils import Vector2d

Segment = Tuple[Vector2d, Vector2d]


@dataclass(frozen=True)
class BodySnapshot:
    name: str
    location: Vector2d
    rotation: float
    shape: Shape
    orbit_rotation: Optional[float]


@dataclass(frozen=True)
class CloudSnapshot:
    cloud_id: int
    location: Vector2d
    shape: Ellipse
    orbit_rotation: float
    mass: float
    state: CloudState
    friend_ids: Tuple[int, ...]


@dataclass(frozen=True)
class RainSnapshot:
    location: Vector2d
    velocity: Vector2d


@dataclass(frozen=True)
class PlantSnapshot:
    root: Vector2d
    segments: Tuple[Segment, ...]  # world coordinates


@dataclass(frozen=True)
class WorldSnapshot:
    tick: int
    planet: BodySnapshot
    sun: BodySnapshot
    clouds: Tuple[CloudSnapshot, ...]
    rain: Tuple[RainSnapshot, ...]
    plants: Tuple[PlantSnapshot, ...]
    ground: float

    @property
    def raining_cloud_count(self) -> int:
        return sum(1 for cloud in self.clouds if cloud.state is CloudState.RAINING)


def _body(body: CelestialObject) -> BodySnapshot:
    return BodySnapshot(
        name=body.name,
        location=body.location,
        rotation=body.rotation,
        shape=body.shape,
        orbit_rotation=body.orbit.rotation if body.orbit is not None else None,
    )


def take_snapshot(world: WorldState) -> WorldSnapshot:
    clouds = tuple(
        CloudSnapshot(
            cloud_id=cloud.cloud_id,
            location=cloud.location,
            shape=cloud.shape,
            orbit_rotation=cloud.orbit.rotation,
            mass=cloud.mass,
            state=cloud.state,
            friend_ids=tuple(sorted(cloud.friends)),
        )
        for cloud in world.water.clouds
    )
    plants = tuple(
        PlantSnapshot(
            root=plant_root_location(world, plant),
            segments=tuple(plant_to_world(world, plant, part.extent) for part in plant.trunk.iter_parts()),
        )
        for plant in world.plants
    )
    return WorldSnapshot(
        tick=world.tick,
        planet=_body(world.planet),
        sun=_body(world.sun),
        clouds=clouds,
        rain=tuple(RainSnapshot(drop.location, drop.velocity) for drop in world.water.rain),
        plants=plants,
        ground=world.water.ground,
    )
