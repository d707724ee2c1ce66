#!/usr/bin/env python3
"""
Vector helper functions for 2D operations.

These are small, fast functions for vector math used throughout the app.
Vectors are plain (x, y) tuples. Nothing here validates its input: dividing
by zero or normalising a zero-length vector raises ZeroDivisionError, so
callers guard where degenerate vectors are possible.
"""
import math
from typing import Tuple

Vector2d = Tuple[float, float]


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def vec_add(a: Vector2d, b: Vector2d) -> Vector2d:
    return (a[0] + b[0], a[1] + b[1])


def vec_sub(a: Vector2d, b: Vector2d) -> Vector2d:
    return (a[0] - b[0], a[1] - b[1])


def vec_scale(a: Vector2d, s: float) -> Vector2d:
    return (a[0] * s, a[1] * s)


def vec_div(a: Vector2d, s: float) -> Vector2d:
    return (a[0] / s, a[1] / s)


def vec_len(a: Vector2d) -> float:
    return math.hypot(a[0], a[1])


def vec_unit(a: Vector2d) -> Vector2d:
    """Unit vector in the direction of a. Raises ZeroDivisionError for (0, 0)."""
    return vec_div(a, vec_len(a))


def vec_clip(a: Vector2d, max_len: float) -> Vector2d:
    """Return a unchanged if it is no longer than max_len, else rescale it to max_len."""
    if vec_len(a) > max_len:
        return vec_scale(vec_unit(a), max_len)
    return a


def vec_rotate(a: Vector2d, angle: float) -> Vector2d:
    """Rotate a counter-clockwise by angle radians about the origin."""
    c = math.cos(angle)
    s = math.sin(angle)
    return (a[0] * c - a[1] * s, a[0] * s + a[1] * c)
