#!/usr/bin/env python3
"""
World preset JSON loading utilities.

Schema
======
Preset JSON (presets/*.json):
{
  "name": "Human-friendly preset name",
  "description": "Optional description",
  "time_scale": 1.0,                 # optional, default None
  "view_extent": 10.0,               # optional, default None
  "world": {                         # optional; keys are WorldSettings field names
    "planet_radius": 3.0,
    "sun_orbit_axes": [175.0, 200.0],
    "initial_cloud_count": 20,
    "plant_count": 1
  }
}

Unknown keys are ignored and bad values fall back to the WorldSettings default.
Users can add their own JSON files into the folder and they'll be picked up by the loader.
"""
import dataclasses
import json
import logging
import math
import os
from typing import List, Optional, Tuple
from .data_models import WorldSettings
from .utils import try_float

logger = logging.getLogger(__name__)

PRESETS_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "presets")

# Settings that must stay strictly positive: sizes, rates and the mass a drop removes from its cloud
POSITIVE_FIELDS = {
  "planet_radius", "sun_radius", "cloud_initial_mass", "time_per_ms",
  "rain_drop_mass", "max_rain_velocity", "gravity",
}


def _read_json(path: str) -> Optional[dict]:
  try:
    with open(path, "r", encoding="utf-8") as f:
      data = json.load(f)
  except (OSError, ValueError) as exc:
    logger.warning("Skipping preset %s: %s", path, exc)
    return None
  if not isinstance(data, dict):
    logger.warning("Skipping preset %s: top level must be an object", path)
    return None
  return data


def _coerce(value, default):
  """Convert value to the type of default, or return None if it does not fit."""
  if isinstance(default, tuple):
    if not isinstance(value, (list, tuple)) or len(value) != len(default):
      return None
    items = [try_float(v) for v in value]
    if any(v is None or not math.isfinite(v) or v <= 0 for v in items):
      return None
    return tuple(items)
  if isinstance(default, bool):
    return value if isinstance(value, bool) else None
  if isinstance(default, int):
    number = try_float(value)
    if number is None or not math.isfinite(number) or number < 0 or number != int(number):
      return None
    return int(number)
  number = try_float(value)
  if number is None or not math.isfinite(number):
    return None
  return number


def settings_from_dict(world: dict) -> WorldSettings:
  """Build WorldSettings from a preset's "world" object."""
  settings = WorldSettings()
  for f in dataclasses.fields(WorldSettings):
    if f.name not in world:
      continue
    default = getattr(settings, f.name)
    value = _coerce(world[f.name], default)
    if value is not None and f.name in POSITIVE_FIELDS and value <= 0:
      value = None
    if value is None:
      logger.warning("Ignoring invalid value for %s: %r", f.name, world[f.name])
      continue
    setattr(settings, f.name, value)
  return settings


def list_presets() -> List[Tuple[str, str]]:
  """Return list of (file_name, display_name) for available presets."""
  items: List[Tuple[str, str]] = []
  if not os.path.isdir(PRESETS_DIR):
    return items
  for fn in sorted(os.listdir(PRESETS_DIR)):
    if not fn.lower().endswith(".json"):
      continue
    path = os.path.join(PRESETS_DIR, fn)
    data = _read_json(path) or {}
    display = data.get("name") or os.path.splitext(fn)[0]
    items.append((fn, display))
  return items


def load_preset(file_name: str) -> Tuple[WorldSettings, Optional[float], Optional[float], str]:
  """
  Load a preset JSON by file name.
  Returns (settings, time_scale, view_extent, display_name)
  """
  path = os.path.join(PRESETS_DIR, file_name)
  data = _read_json(path) or {}
  display_name = data.get("name") or os.path.splitext(file_name)[0]
  world = data.get("world")
  if not isinstance(world, dict):
    world = {}
  time_scale = try_float(data.get("time_scale"))
  view_extent = try_float(data.get("view_extent"))
  if view_extent is not None and view_extent <= 0:
    view_extent = None
  return settings_from_dict(world), time_scale, view_extent, display_name
