#!/usr/bin/env python3
"""
Data models for Tiny World.

This module defines the world state shared between the engine, the controller and
the renderer, plus the WorldSettings that parameterise world creation and ticking.

Units and usage
- Positions and sizes are in world units; the compact world fits in [-10, 10] x [-10, 10]
  apart from the sun, whose orbit is much wider.
- Angles are radians. Every rotation is kept in [0, 2*pi) by the engine.
- Velocities are per world-time unit; one wall-clock millisecond is TIME_PER_MS units.
- The engine owns every object here. An Orbit's target is a borrowed reference into the
  same WorldState, and cloud friendships are sets of cloud ids rather than object links.
- Access from several threads is coordinated by SimulationController using a lock.
"""
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from . import constants as C
from .errors import OrbitTargetError, WorldInvariantError
from .geometry import Shape, require_circle, require_ellipse, shape_point
from .vector_utils import Vector2d, vec_add


@dataclass
class WorldSettings:
    """Tunable parameters for world creation and ticking. Defaults come from constants."""
    planet_radius: float = C.PLANET_RADIUS
    planet_rotational_velocity: float = C.TAU / C.TICKS_IN_A_DAY
    sun_radius: float = C.SUN_RADIUS
    sun_orbit_axes: Tuple[float, float] = C.SUN_ORBIT_AXES
    sun_orbital_velocity: float = C.TAU / C.TICKS_IN_A_YEAR
    initial_cloud_count: int = C.INITIAL_CLOUD_COUNT
    cloud_target_count: int = C.CLOUD_TARGET_COUNT
    cloud_initial_mass: float = C.CLOUD_INITIAL_MASS
    cloud_spawn_probability: float = C.CLOUD_SPAWN_PROBABILITY
    rain_threshold: float = C.RAIN_THRESHOLD
    rain_drop_mass: float = C.RAIN_DROP_MASS
    gravity: float = C.GRAVITY
    max_rain_velocity: float = C.MAX_RAIN_VELOCITY
    plant_count: int = 0
    plant_growth_rate: float = C.PLANT_GROWTH_RATE
    time_per_ms: float = C.TIME_PER_MS


class CloudState(Enum):
    FLOATING = "floating"
    RAINING = "raining"


@dataclass
class Orbit:
    """
    Motion of one body around a target body along a fixed-shape path.

    Fields:
    - target: The body being orbited (borrowed, never owned)
    - shape: Path of the orbit; Circle or Ellipse
    - rotation: Current phase angle in radians
    - rotational_velocity: Radians per world-time unit, sign gives direction
    """
    target: "CelestialObject"
    shape: Shape
    rotation: float = 0.0
    rotational_velocity: float = 0.0

    def __post_init__(self):
        if self.target is None:
            raise OrbitTargetError("Orbit requires a target body")

    def relative_location(self) -> Vector2d:
        return shape_point(self.shape, self.rotation)


@dataclass(eq=False)
class CelestialObject:
    """
    Any body in the world: the planet, the sun, or a cloud.

    Fields:
    - name: Identifier used in logs and the UI
    - shape: Own silhouette (size), independent of the orbit path
    - location: World position; derived from the orbit when there is one
    - rotation: Own spin phase in radians
    - rotational_velocity: Spin rate in radians per world-time unit
    - orbit: Optional Orbit; the root body has none
    """
    name: str
    shape: Shape
    location: Vector2d = (0.0, 0.0)
    rotation: float = 0.0
    rotational_velocity: float = 0.0
    orbit: Optional[Orbit] = None

    def __post_init__(self):
        self.check_orbit()

    def check_orbit(self) -> None:
        """Raise OrbitTargetError if following orbit targets from here leads back to a visited body."""
        seen = {id(self)}
        body = self
        while body.orbit is not None:
            target = body.orbit.target
            if target is None:
                raise OrbitTargetError(f"{body.name} has an orbit without a target")
            if id(target) in seen:
                raise OrbitTargetError(f"{self.name} orbits itself through {body.name}")
            seen.add(id(target))
            body = target

    def orbit_location(self) -> Vector2d:
        """Location implied by the orbit's current phase and the target's location."""
        if self.orbit is None:
            return self.location
        return vec_add(self.orbit.relative_location(), self.orbit.target.location)


@dataclass(eq=False)
class Cloud(CelestialObject):
    """
    A cloud drifting around the planet.

    The silhouette is always an Ellipse and the orbit path always a Circle.
    state only ever moves from FLOATING to RAINING. friends holds the ids of
    clouds found close by during the current tick and is rebuilt every tick.
    """
    cloud_id: int = 0
    mass: float = C.CLOUD_INITIAL_MASS
    state: CloudState = CloudState.FLOATING
    friends: Set[int] = field(default_factory=set)

    def __post_init__(self):
        super().__post_init__()
        require_ellipse(self.shape, "Cloud silhouette")
        if self.orbit is None:
            raise WorldInvariantError(f"{self.name} must orbit the planet")
        require_circle(self.orbit.shape, "Cloud orbit path")

    @property
    def orbit_radius(self) -> float:
        return require_circle(self.orbit.shape, "Cloud orbit path").radius

    @property
    def is_raining(self) -> bool:
        return self.state is CloudState.RAINING

    def start_raining(self) -> None:
        self.state = CloudState.RAINING


@dataclass
class Rain:
    location: Vector2d
    velocity: Vector2d


@dataclass
class PlantPart:
    """
    One branch segment of a plant.

    extent holds the segment's two endpoints in plant-local coordinates: relative to
    the plant's root on the planet surface, with +y pointing away from the planet.
    """
    extent: Tuple[Vector2d, Vector2d]
    children: List["PlantPart"] = field(default_factory=list)
    depth: int = 0

    def iter_parts(self):
        yield self
        for child in self.children:
            yield from child.iter_parts()


@dataclass
class Plant:
    rotation: float  # position on the planet surface, radians relative to the planet's spin
    trunk: PlantPart


@dataclass
class Water:
    clouds: List[Cloud] = field(default_factory=list)
    rain: List[Rain] = field(default_factory=list)
    ground: float = 0.0  # mass of rain that has landed


@dataclass
class WorldState:
    """
    The aggregate root owning every object in the world.

    Fields:
    - planet: Root body; has no orbit
    - sun: Orbits the planet on an elliptical path
    - water: Clouds, falling rain and landed water
    - plants: Plants rooted on the planet surface
    - tick: Number of engine ticks applied so far
    - last_tick_timestamp: time.monotonic() value at the last tick (or creation)
    """
    planet: CelestialObject
    sun: CelestialObject
    water: Water = field(default_factory=Water)
    plants: List[Plant] = field(default_factory=list)
    tick: int = 0
    last_tick_timestamp: float = field(default_factory=time.monotonic)
    next_cloud_id: int = 0

    def allocate_cloud_id(self) -> int:
        cloud_id = self.next_cloud_id
        self.next_cloud_id += 1
        return cloud_id

    def celestial_objects(self) -> List[CelestialObject]:
        """All bodies ordered root to leaf: planet, then sun, then clouds."""
        return [self.planet, self.sun, *self.water.clouds]

    def cloud_index(self) -> Dict[int, Cloud]:
        return {cloud.cloud_id: cloud for cloud in self.water.clouds}
