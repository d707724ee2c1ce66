#!/usr/bin/env python3
"""
Tiny World simulation engine.

Responsibilities
- Advance a WorldState by an elapsed world-time delta in four ordered passes:
  1) kinematics: spins, orbital phases and orbit-derived locations (planet, sun, clouds)
  2) clouds: clustering, raining, emission, depletion and spawning
  3) rain: fall toward the planet, land and despawn
  4) plants: grow sunlit segments toward the sun
  Rain falls toward the planet's updated location and clouds cluster on their
  updated positions, so the order is fixed.
- Track tick count and the timestamp of the last tick; optionally derive the elapsed
  time from that timestamp (advance).

Units and conventions
- elapsed is world time; one wall-clock millisecond is settings.time_per_ms units.
- Timestamps are time.monotonic() seconds, so derived elapsed time never runs backwards.

Threading
- tick is not re-entrant. SimulationController serialises ticks and snapshot reads
  with its lock.
"""
import math
import random
import time
from typing import Optional

from .clouds import update_clouds
from .data_models import WorldSettings, WorldState
from .physics import advance_celestial_objects, integrate_rain
from .plants import grow_plants


class WorldEngine:
    """
    Owns the settings and random source used to advance worlds.

    The random source only needs a random() method returning floats in [0, 1);
    tests pass scripted sources to pin down emission and spawning.
    """

    def __init__(self, settings: Optional[WorldSettings] = None, rng=None):
        self.settings = settings or WorldSettings()
        self.rng = rng or random.Random()
        self.last_event_msg: Optional[str] = None

    def tick(self, world: WorldState, elapsed: float, now: Optional[float] = None) -> None:
        """
        Advance world by elapsed world time. Mutates world in place.

        Args:
            world: World to advance
            elapsed: World-time delta (finite, >= 0); zero leaves positions, masses
                and populations untouched
            now: Monotonic timestamp recorded as the world's last tick time
        """
        if not math.isfinite(elapsed) or elapsed < 0:
            raise ValueError(f"elapsed must be a finite non-negative number, got {elapsed!r}")

        settings = self.settings
        world.last_tick_timestamp = time.monotonic() if now is None else now
        world.tick += 1

        advance_celestial_objects(world.celestial_objects(), elapsed)

        msg = update_clouds(world, elapsed, self.rng, settings)
        if msg:
            self.last_event_msg = msg

        integrate_rain(world.water, world.planet, elapsed,
                       settings.gravity, settings.max_rain_velocity, settings.rain_drop_mass)

        grow_plants(world, elapsed, settings.plant_growth_rate)

    def elapsed_since_last_tick(self, world: WorldState, now: float, time_scale: float = 1.0) -> float:
        """World time between the world's last tick and now, scaled by time_scale."""
        real_ms = max(0.0, now - world.last_tick_timestamp) * 1000.0
        return real_ms * self.settings.time_per_ms * max(0.0, time_scale)

    def advance(self, world: WorldState, now: Optional[float] = None, time_scale: float = 1.0) -> float:
        """
        Tick world by the wall-clock time since its last tick.

        Returns:
            The elapsed world time that was applied
        """
        now = time.monotonic() if now is None else now
        elapsed = self.elapsed_since_last_tick(world, now, time_scale)
        self.tick(world, elapsed, now)
        return elapsed


def tick_world(world: WorldState, elapsed: float, rng=None,
               settings: Optional[WorldSettings] = None, now: Optional[float] = None) -> None:
    """Advance world by elapsed world time with a one-off engine."""
    WorldEngine(settings, rng).tick(world, elapsed, now)
