#!/usr/bin/env python3
"""
Shared simulation state between the tick thread, the renderer and the UI.

Threading model
- TickLoop runs in a background thread and advances the world at a fixed rate.
- The renderer and the UI read the world only through snapshot(), taken under the
  same re-entrant lock that guards every tick, so they never see a half-updated world.
"""
import logging
import threading
import time
from typing import Optional

from .constants import TICK_RATE_HZ
from .data_models import WorldSettings
from .engine import WorldEngine
from .errors import WorldInvariantError
from .snapshot import WorldSnapshot, take_snapshot
from .world_factory import create_initial_world_state

logger = logging.getLogger(__name__)


class SimulationController:
    """
    Owns the world and the engine. All methods are lock-protected.
    """
    def __init__(self, settings: Optional[WorldSettings] = None, rng=None):
        self.lock = threading.RLock()
        self.engine = WorldEngine(settings, rng)
        self.world = create_initial_world_state(self.engine.settings, self.engine.rng)
        self.running = True  # app running
        self.playing = True  # simulation running
        self.time_scale = 1.0  # x real-time
        self.preset_name = "Default"
        self.last_event_msg: Optional[str] = None

    @property
    def settings(self) -> WorldSettings:
        return self.engine.settings

    def set_time_scale(self, s: float) -> None:
        with self.lock:
            self.time_scale = max(0.0, float(s))

    def set_playing(self, playing: bool) -> None:
        with self.lock:
            self.playing = bool(playing)

    def toggle_play(self) -> bool:
        with self.lock:
            self.playing = not self.playing
            return self.playing

    def set_cloud_target(self, n: int) -> None:
        with self.lock:
            self.engine.settings.cloud_target_count = max(0, int(n))

    def reset_world(self, settings: Optional[WorldSettings] = None, preset_name: Optional[str] = None) -> None:
        """Replace the world with a freshly created one, optionally with new settings."""
        with self.lock:
            if settings is not None:
                self.engine.settings = settings
            if preset_name is not None:
                self.preset_name = preset_name
            self.world = create_initial_world_state(self.engine.settings, self.engine.rng)
            self.engine.last_event_msg = None
            self.last_event_msg = f"Loaded {self.preset_name}"
            logger.info("World reset (%s)", self.preset_name)

    def step(self, dt_real_seconds: float) -> float:
        """
        Advance the world by dt_real_seconds of wall-clock time, scaled by time_scale.

        Returns:
            The elapsed world time applied (0 when paused)
        """
        with self.lock:
            if not self.playing:
                return 0.0
            real_ms = max(0.0, dt_real_seconds) * 1000.0
            elapsed = real_ms * self.engine.settings.time_per_ms * self.time_scale
            self.engine.tick(self.world, elapsed)
            if self.engine.last_event_msg:
                self.last_event_msg = self.engine.last_event_msg
                self.engine.last_event_msg = None
            return elapsed

    def snapshot(self) -> WorldSnapshot:
        with self.lock:
            return take_snapshot(self.world)

    def pop_event_msg(self) -> Optional[str]:
        with self.lock:
            msg = self.last_event_msg
            self.last_event_msg = None
            return msg


class TickLoop(threading.Thread):
    """
    Fixed-rate tick driver, independent of the render frame rate.
    """
    def __init__(self, sim: SimulationController, rate_hz: float = TICK_RATE_HZ, clock=time.perf_counter):
        super().__init__(daemon=True)
        self.sim = sim
        self.period = 1.0 / rate_hz
        self.clock = clock
        self.running = True

    def run(self):
        last_time = self.clock()
        while self.running and self.sim.running:
            now = self.clock()
            real_dt = now - last_time
            last_time = now
            try:
                self.sim.step(real_dt)
            except WorldInvariantError:
                logger.exception("World invariant violated, stopping the simulation")
                self.sim.running = False
                raise
            time.sleep(max(0.0, self.period - (self.clock() - now)))

    def stop(self) -> None:
        self.running = False
