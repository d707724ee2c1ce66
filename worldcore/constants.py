#!/usr/bin/env python3
"""
Shared constants for the Tiny World simulation (world units unless stated otherwise).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier. WorldSettings copies these as its defaults.
"""
import math

TAU = 2.0 * math.pi

# Time
TICKS_IN_A_DAY = 10000  # world-time units per planet spin
TICKS_IN_A_YEAR = 2000  # world-time units per sun orbit
TIME_PER_MS = 1 / 10  # world-time units per wall-clock millisecond

# Planet and sun
PLANET_RADIUS = 3.0
SUN_RADIUS = 20.0
SUN_ORBIT_AXES = (175.0, 200.0)

# Clouds
INITIAL_CLOUD_COUNT = 20
CLOUD_TARGET_COUNT = 20
CLOUD_INITIAL_MASS = 5.0
MIN_CLOUD_HEIGHT = 1.0
CLOUD_HEIGHT_SPREAD = 1.0
CLOUD_MIN_WIDTH = 0.6
CLOUD_MIN_HEIGHT = 0.4
CLOUD_SIZE_SPREAD = 0.2
CLOUD_PERIOD_MIN = 800.0  # world-time units per cloud orbit, lower bound
CLOUD_PERIOD_SPREAD = 700.0
CLOUD_SPAWN_PROBABILITY = 0.05  # per tick, while below target population
CLOUD_SECTOR_COUNT = 10

# Rain
RAIN_THRESHOLD = 30.0  # collective mass above which a cloud group starts raining
RAIN_DROP_MASS = 0.1
RAIN_BASE_RATE = 0.1
RAIN_MAX_PROBABILITY = 0.2
RAIN_MIN_ADJUSTMENT = 0.2
RAIN_JITTER = (1.0, 0.3)
GRAVITY = 0.1
MAX_RAIN_VELOCITY = 0.1

# Plants
PLANT_GROWTH_RATE = 0.005

# Rendering (viewport)
VIEW_WIDTH = 900
VIEW_HEIGHT = 900
DEFAULT_VIEW_EXTENT = 10.0  # half-width of the world square fitted to the viewport
MIN_UNITS_PER_PIXEL = 1e-3
MAX_UNITS_PER_PIXEL = 10.0
BACKGROUND_COLOR = (0, 0, 0)
SUN_COLOR = (255, 255, 255)
PLANET_COLOR = (25, 25, 112)  # midnightblue
PLANET_LIT_COLOR = (245, 245, 220)  # beige
CLOUD_COLOR = (255, 255, 255, 119)
RAINING_CLOUD_COLOR = (200, 200, 215, 150)
RAIN_COLOR = (173, 216, 230)  # lightblue
PLANT_COLOR = (0, 128, 0)
RAIN_DRAW_RADIUS = 0.1

# Driver cadence
TICK_RATE_HZ = 120
FRAME_RATE = 60

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
