#!/usr/bin/env python3
"""
Motion passes of the Tiny World engine.

Responsibilities
- Kinematics: advance every body's spin and orbital phase, wrap both into [0, 2*pi)
  and recompute orbiting bodies' locations from their orbit shape and target.
- Rain: pull each drop toward the planet centre, clamp its speed, move it, and
  remove drops that have reached the planet surface.

Numerical notes
- Orbits are closed-form (phase -> point on the path), so there is no integration
  drift for bodies. Rain uses explicit Euler: velocity first, then position with
  the updated velocity.
- Gravity is a single simplified attractor: constant magnitude toward the planet
  centre, independent of distance. The speed clamp keeps drops from tunnelling far
  past the surface in one step.

Threading
- Pure compute over the WorldState passed in. The controller holds its lock around
  the whole tick.
"""
import math
from typing import Iterable

from .constants import TAU
from .data_models import CelestialObject, Water
from .errors import OrbitTargetError
from .geometry import require_circle
from .vector_utils import vec_add, vec_clip, vec_len, vec_scale, vec_sub, vec_unit


def wrap_angle(angle: float) -> float:
    """Wrap an angle into [0, 2*pi)."""
    wrapped = math.fmod(angle, TAU)
    if wrapped < 0.0:
        wrapped += TAU
    if wrapped >= TAU:
        # fmod of a tiny negative angle can round up to exactly TAU
        wrapped = 0.0
    return wrapped


def advance_celestial_objects(bodies: Iterable[CelestialObject], elapsed: float) -> None:
    """
    Advance spin and orbit of each body by elapsed world time.

    Bodies must be ordered root to leaf so that each orbit target already holds
    its location for this tick when its satellites are placed.

    Args:
        bodies: Bodies to update (modified in place)
        elapsed: World-time delta (>= 0)
    """
    for body in bodies:
        body.rotation = wrap_angle(body.rotation + body.rotational_velocity * elapsed)
        orbit = body.orbit
        if orbit is not None:
            if orbit.target is None or orbit.target is body:
                raise OrbitTargetError(f"{body.name} has no valid orbit target")
            orbit.rotation = wrap_angle(orbit.rotation + orbit.rotational_velocity * elapsed)
            body.location = body.orbit_location()


def integrate_rain(water: Water, planet: CelestialObject, elapsed: float,
                   gravity: float, max_velocity: float, drop_mass: float) -> int:
    """
    Move every rain drop toward the planet and drop those that have landed.

    Args:
        water: Water state whose rain list is replaced by the surviving drops
        planet: Body the rain falls toward; its shape must be a Circle
        elapsed: World-time delta (>= 0)
        gravity: Acceleration toward the planet centre per world-time unit
        max_velocity: Speed limit for a drop
        drop_mass: Mass added to water.ground for each landed drop

    Returns:
        Number of drops that landed this tick
    """
    planet_radius = require_circle(planet.shape, "Planet").radius
    retained = []
    landed = 0

    for drop in water.rain:
        to_center = vec_sub(planet.location, drop.location)
        if vec_len(to_center) > 0.0:
            pull = vec_scale(vec_unit(to_center), gravity * elapsed)
            drop.velocity = vec_clip(vec_add(drop.velocity, pull), max_velocity)
            drop.location = vec_add(drop.location, vec_scale(drop.velocity, elapsed))

        distance = vec_len(vec_sub(drop.location, planet.location))
        if distance > planet_radius:
            retained.append(drop)
        else:
            landed += 1

    water.rain = retained
    water.ground += landed * drop_mass
    return landed
