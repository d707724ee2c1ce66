#!/usr/bin/env python3
"""
Tiny World application entry point and UI/renderer coordination.

What this module does
- Starts three loops: a fixed-rate tick thread advancing the world, a Pygame rendering
  thread (viewport), and the Dear PyGui UI (running on the main thread).
- Maintains a shared SimulationController that owns the world and the engine; all access
  is guarded by a re-entrant lock for thread-safety.
- Provides JSON world presets, camera handling and a Dear PyGui-based UI for controlling
  the simulation and watching its statistics.

Threading model
- TickLoop ticks the world at TICK_RATE_HZ; PygameRenderer draws at FRAME_RATE. The two
  cadences are independent and meet only at the controller lock.
- PygameRenderer handles viewport input and draws from a snapshot taken under the lock.
- The UI class runs in the main thread via Dear PyGui. It updates controls on a periodic
  frame callback and invokes SimulationController methods as needed; these are lock-protected.

Units and conventions
- World units throughout; the compact world fits in [-10, 10] x [-10, 10]. The camera
  stores world units per pixel.
- Colors are RGB(A) tuples in 0..255.

Running
1) Install dependencies: `pip install -e .`
2) Run this module: `python world_sim.py [--preset garden.json] [--log-level DEBUG]`

Windows/OS notes
- Two windows will open: the viewport (Pygame) and the controls (Dear PyGui). Closing either
  will shut down the application cleanly.
"""

import argparse
import functools
import logging
import math
import sys
import time
import threading
from typing import Optional

# GUI and Rendering libs
import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from worldcore.camera import Camera2D
from worldcore.constants import (
    BACKGROUND_COLOR,
    CLOUD_COLOR,
    DEFAULT_VIEW_EXTENT,
    FRAME_RATE,
    PLANET_COLOR,
    PLANET_LIT_COLOR,
    PLANT_COLOR,
    RAIN_COLOR,
    RAIN_DRAW_RADIUS,
    RAINING_CLOUD_COLOR,
    SAFE_COORD_LIMIT,
    SUN_COLOR,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from worldcore.controller import SimulationController, TickLoop
from worldcore.data_models import CloudState
from worldcore.geometry import Circle, ellipse_point
from worldcore.presets_loader import list_presets, load_preset
from worldcore.snapshot import BodySnapshot, CloudSnapshot, WorldSnapshot
from worldcore.utils import try_float
from worldcore.vector_utils import vec_add, vec_len, vec_rotate, vec_scale, vec_sub

logger = logging.getLogger("world_sim")

CLOUD_OUTLINE_POINTS = 24
PLANET_GRADIENT_STEPS = 12
WHEEL_ZOOM = 1.1

# Arrow key -> pan_pixels direction
KEY_PAN_DIRECTIONS = {
    pygame.K_LEFT: (1, 0),
    pygame.K_RIGHT: (-1, 0),
    pygame.K_UP: (0, 1),
    pygame.K_DOWN: (0, -1),
}

# ============================================================
# Pygame Renderer Thread
# ============================================================

class PygameRenderer(threading.Thread):
    """
    Pygame loop: draws rain, clouds, plants, the sun and the planet.
    Handles camera panning and zoom; Space toggles play/pause, R resets the world.
    """
    def __init__(self, sim: SimulationController, extent: float = DEFAULT_VIEW_EXTENT):
        super().__init__(daemon=True)
        self.sim = sim
        self.camera = Camera2D(center=(0.0, 0.0), extent=extent)
        self.extent = extent
        self.surface = None
        self.clock = None
        self.drag_anchor = None  # pointer position while a mouse button is held
        self.pan_speed_keys = 600  # pixels per second
        self.running = True

    def frame_camera(self, extent: Optional[float] = None):
        """Center the camera on the planet and fit the given world extent."""
        if extent is not None:
            self.extent = extent
        self.camera.center = [0.0, 0.0]
        self.camera.fit_extent(self.extent)

    def run(self):
        pygame.init()
        pygame.display.set_caption("Tiny World - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
        self.frame_camera()
        self.clock = pygame.time.Clock()

        last_time = time.perf_counter()
        while self.running and self.sim.running:
            now = time.perf_counter()
            real_dt = now - last_time
            last_time = now

            self.handle_events(real_dt)
            self.draw(self.sim.snapshot())

            # Limit FPS
            self.clock.tick(FRAME_RATE)

        pygame.quit()

    def handle_events(self, real_dt):
        keys = pygame.key.get_pressed()
        step = self.pan_speed_keys * real_dt
        for key, (dx, dy) in KEY_PAN_DIRECTIONS.items():
            if keys[key]:
                self.camera.pan_pixels(dx * step, dy * step)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.sim.running = False
                self.running = False
            elif event.type == pygame.VIDEORESIZE:
                self.resize(event.w, event.h)
            elif event.type == pygame.MOUSEWHEEL:
                self.camera.zoom(WHEEL_ZOOM if event.y > 0 else 1.0 / WHEEL_ZOOM, pygame.mouse.get_pos())
            elif event.type == pygame.KEYDOWN:
                action = self.key_actions().get(event.key)
                if action is not None:
                    action()
            elif event.type in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP, pygame.MOUSEMOTION):
                self.drag(event)

    def key_actions(self):
        return {
            pygame.K_SPACE: self.sim.toggle_play,
            pygame.K_r: self.sim.reset_world,
            pygame.K_f: self.frame_camera,
        }

    def resize(self, w: int, h: int):
        self.surface = pygame.display.set_mode((w, h), pygame.RESIZABLE)
        self.camera.set_viewport_size(w, h)
        self.camera.fit_extent(self.extent)

    def drag(self, event):
        """Any mouse button drags the view; the world follows the pointer."""
        if event.type == pygame.MOUSEMOTION:
            if self.drag_anchor is not None:
                self.camera.pan_pixels(event.pos[0] - self.drag_anchor[0], event.pos[1] - self.drag_anchor[1])
                self.drag_anchor = event.pos
        elif event.button in (1, 2, 3):
            self.drag_anchor = event.pos if event.type == pygame.MOUSEBUTTONDOWN else None

    def _pixels(self, size: float, cap: int = SAFE_COORD_LIMIT) -> int:
        return int(min(max(1.0, self.camera.size_to_pixels(size)), cap))

    def draw_cloud(self, surf, cloud: CloudSnapshot):
        # Long axis runs along the orbit
        angle = cloud.orbit_rotation - math.pi / 2
        pts = []
        for i in range(CLOUD_OUTLINE_POINTS):
            t = 2 * math.pi * i / CLOUD_OUTLINE_POINTS
            outline = vec_rotate(ellipse_point(cloud.shape.a, cloud.shape.b, t), angle)
            sp = _safe_point(self.camera.world_to_screen(vec_add(cloud.location, outline)))
            if sp is None:
                return
            pts.append(sp)
        color = RAINING_CLOUD_COLOR if cloud.state is CloudState.RAINING else CLOUD_COLOR
        gfxdraw.filled_polygon(surf, pts, color)
        gfxdraw.aapolygon(surf, pts, color)

    def draw_body(self, surf, body: BodySnapshot, color):
        if not isinstance(body.shape, Circle):
            return
        center = _safe_point(self.camera.world_to_screen(body.location))
        if center:
            r = self._pixels(body.shape.radius)
            gfxdraw.filled_circle(surf, center[0], center[1], r, color)
            gfxdraw.aacircle(surf, center[0], center[1], r, color)

    def draw_planet(self, surf, planet: BodySnapshot, sun: BodySnapshot):
        """Planet shaded from beige on the sunlit side to midnight blue."""
        radius = planet.shape.radius
        to_sun = vec_sub(sun.location, planet.location)
        if vec_len(to_sun) == 0:
            self.draw_body(surf, planet, PLANET_COLOR)
            return
        lit = vec_add(planet.location, vec_scale(vec_scale(to_sun, 1.0 / vec_len(to_sun)), radius * 3 / 4))
        for step in range(PLANET_GRADIENT_STEPS, 0, -1):
            k = step / PLANET_GRADIENT_STEPS
            # Inner circles shrink toward the lit point
            center_world = vec_add(vec_scale(planet.location, k), vec_scale(lit, 1 - k))
            color = tuple(int(PLANET_LIT_COLOR[c] + (PLANET_COLOR[c] - PLANET_LIT_COLOR[c]) * k) for c in range(3))
            center = _safe_point(self.camera.world_to_screen(center_world))
            if center:
                r = self._pixels(radius * k)
                gfxdraw.filled_circle(surf, center[0], center[1], r, color)

    def draw_plants(self, surf, snap: WorldSnapshot):
        width = max(2, self._pixels(0.15, cap=20))
        for plant in snap.plants:
            for start, end in plant.segments:
                a = _safe_point(self.camera.world_to_screen(start))
                b = _safe_point(self.camera.world_to_screen(end))
                if a and b:
                    pygame.draw.line(surf, PLANT_COLOR, a, b, width)

    def draw(self, snap: WorldSnapshot):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)

        rain_r = self._pixels(RAIN_DRAW_RADIUS)
        for drop in snap.rain:
            sp = _safe_point(self.camera.world_to_screen(drop.location))
            if sp:
                gfxdraw.filled_circle(surf, sp[0], sp[1], rain_r, RAIN_COLOR)

        for cloud in snap.clouds:
            self.draw_cloud(surf, cloud)

        self.draw_plants(surf, snap)
        self.draw_body(surf, snap.sun, SUN_COLOR)
        self.draw_planet(surf, snap.planet, snap.sun)

        # HUD text
        draw_text(surf, "Drag: pan | Wheel: zoom | Arrows: pan | Space: Pause/Play | R: reset | F: fit", 10, 10, (200, 200, 200))
        with self.sim.lock:
            ts = self.sim.time_scale
            playing = self.sim.playing
        draw_text(surf, f"Speed: {ts:.1f}x  [{'Playing' if playing else 'Paused'}]  tick {snap.tick}", 10, 30, (200, 200, 200))

        pygame.display.flip()

def draw_text(surface, text, x, y, color):
    surface.blit(_hud_font().render(text, True, color), (x, y))


@functools.lru_cache(maxsize=1)
def _hud_font():
    pygame.font.init()
    return pygame.font.SysFont("consolas", 16)


def _safe_point(pt):
    """Integer pixel for pt, or None when it is not finite or too far off-screen for pygame."""
    x, y = pt
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    if max(abs(x), abs(y)) > SAFE_COORD_LIMIT:
        return None
    return (int(x), int(y))


# ============================================================
# Dear PyGui UI
# ============================================================

class UI:
    """
    Dear PyGui interface: presets, simulation controls and live world statistics.
    """
    def __init__(self, sim: SimulationController, renderer: PygameRenderer):
        self.sim = sim
        self.renderer = renderer

        self._preset_map = {}
        self.status_msg_id = None
        self.play_button_id = None
        self.speed_id = None
        self.cloud_target_id = None
        self.stats_ids = {}

        self._build_ui()
        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic sync callback using frame callbacks (approx ~10Hz)."""
        current = dpg.get_frame_count()
        # schedule next sync ~ every 6 frames (~100ms at 60 FPS)
        dpg.set_frame_callback(current + 6, self._sync_ui_with_sim)

    # -----------------------
    # UI Construction
    # -----------------------

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Tiny World - Controls', width=420, height=460)

        with dpg.window(label="Controls", width=400, height=440, pos=(10, 10), tag="main_window"):
            with dpg.group(horizontal=True):
                dpg.add_text("Preset:")
                for fn, display in list_presets():
                    self._preset_map[display] = fn
                preset_items = list(self._preset_map.keys())
                dpg.add_combo(preset_items,
                              default_value=self.sim.preset_name if self.sim.preset_name in self._preset_map
                              else (preset_items[0] if preset_items else ""),
                              width=180,
                              tag="preset_combo")
                dpg.add_button(label="Load", callback=lambda: self.load_preset(dpg.get_value("preset_combo")))

            dpg.add_separator()

            with dpg.group(horizontal=True):
                self.play_button_id = dpg.add_button(label="Pause", width=80, callback=self._toggle_play)
                dpg.add_button(label="Reset world", callback=lambda: self.sim.reset_world())
                dpg.add_button(label="Fit camera", callback=lambda: self.renderer.frame_camera())

            self.speed_id = dpg.add_slider_float(label="Speed (x)", default_value=self.sim.time_scale,
                                                 min_value=0.0, max_value=20.0, width=220,
                                                 callback=lambda s, a, u: self._set_speed(a))
            self.cloud_target_id = dpg.add_slider_int(label="Cloud target", default_value=self.sim.settings.cloud_target_count,
                                                      min_value=0, max_value=80, width=220,
                                                      callback=lambda s, a, u: self.sim.set_cloud_target(a))

            dpg.add_separator()
            dpg.add_text("World")
            for key in ("tick", "clouds", "raining", "rain", "ground", "sun"):
                self.stats_ids[key] = dpg.add_text("")

            dpg.add_separator()
            self.status_msg_id = dpg.add_text("")

        dpg.setup_dearpygui()
        dpg.show_viewport()

    # -----------------------
    # Callbacks
    # -----------------------

    def _set_status(self, msg: str):
        dpg.set_value(self.status_msg_id, msg)

    def _set_speed(self, value):
        speed = try_float(value)
        if speed is not None:
            self.sim.set_time_scale(speed)

    def _toggle_play(self):
        playing = self.sim.toggle_play()
        dpg.configure_item(self.play_button_id, label="Pause" if playing else "Play")

    def load_preset(self, display_name: str):
        fn = self._preset_map.get(display_name)
        if fn is None:
            self._set_status(f"Unknown preset: {display_name}")
            return
        apply_preset(self.sim, fn, self.renderer)
        dpg.set_value(self.speed_id, self.sim.time_scale)
        dpg.set_value(self.cloud_target_id, self.sim.settings.cloud_target_count)

    def _sync_ui_with_sim(self):
        snap = self.sim.snapshot()
        dpg.set_value(self.stats_ids["tick"], f"Tick: {snap.tick}")
        dpg.set_value(self.stats_ids["clouds"], f"Clouds: {len(snap.clouds)}")
        dpg.set_value(self.stats_ids["raining"], f"Raining clouds: {snap.raining_cloud_count}")
        dpg.set_value(self.stats_ids["rain"], f"Falling drops: {len(snap.rain)}")
        dpg.set_value(self.stats_ids["ground"], f"Ground water: {snap.ground:.1f}")
        sun_phase = snap.sun.orbit_rotation or 0.0
        dpg.set_value(self.stats_ids["sun"], f"Sun phase: {math.degrees(sun_phase):.0f} deg")
        dpg.configure_item(self.play_button_id, label="Pause" if self.sim.playing else "Play")
        msg = self.sim.pop_event_msg()
        if msg:
            self._set_status(msg)
        if not self.sim.running:
            dpg.stop_dearpygui()
            return
        self._schedule_sync()

# ============================================================
# Presets and Application Entry
# ============================================================

def apply_preset(sim: SimulationController, file_name: str, renderer: Optional[PygameRenderer] = None):
    settings, time_scale, view_extent, display_name = load_preset(file_name)
    sim.reset_world(settings, preset_name=display_name)
    if time_scale is not None:
        sim.set_time_scale(time_scale)
    if renderer is not None:
        renderer.frame_camera(view_extent)
    return view_extent

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Tiny World: a sun, a planet, clouds and rain.")
    parser.add_argument("--preset", default="default.json", help="preset file name in presets/")
    parser.add_argument("--time-scale", type=float, default=None, help="override the preset's speed")
    parser.add_argument("--log-level", default="INFO", help="logging level (DEBUG, INFO, WARNING, ...)")
    return parser.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    sim = SimulationController()
    view_extent = apply_preset(sim, args.preset) or DEFAULT_VIEW_EXTENT
    if args.time_scale is not None:
        sim.set_time_scale(args.time_scale)

    renderer = PygameRenderer(sim, extent=view_extent)
    ticker = TickLoop(sim)

    renderer.start()
    ticker.start()

    UI(sim, renderer)

    # Run Dear PyGui event loop
    try:
        dpg.start_dearpygui()
    finally:
        # Stop simulation and renderer
        sim.running = False
        renderer.running = False
        ticker.stop()
        renderer.join(timeout=2.0)
        ticker.join(timeout=2.0)
        dpg.destroy_context()
    return 0

if __name__ == "__main__":
    sys.exit(main())
