#!/usr/bin/env python3
"""
Orbital geometry for Tiny World.

Responsibilities
- Define the two shape variants: Circle (single radius) and Ellipse (two semi-axes).
  A shape describes either an object's silhouette or the path of its orbit.
- Evaluate the point on a circle or ellipse at a given phase angle.
- Convert an angular velocity to an instantaneous linear velocity for an object
  orbiting on a circle.
- Approximate an ellipse's circumference (utility only, not used per tick).

Numerical notes
- angular_to_linear_velocity is a first-order finite difference: the chord between
  the circle points at angle and angle + angular_velocity. It is not the exact
  tangential derivative. Rain spawned by clouds inherits this velocity.
- ellipse_circumference uses the Gauss-Kummer series
      C = pi (a + b) * sum_n binom(1/2, n)^2 h^n,   h = (a - b)^2 / (a + b)^2
  whose coefficients are built as a running product of odd numbers.
"""
import math
from dataclasses import dataclass
from typing import Union

from .errors import ShapeMismatchError
from .vector_utils import Vector2d, vec_sub


@dataclass(frozen=True)
class Circle:
    radius: float

    def __post_init__(self):
        if not self.radius > 0:
            raise ShapeMismatchError(f"Circle radius must be positive, got {self.radius!r}")

    @property
    def smallest_extent(self) -> float:
        return self.radius


@dataclass(frozen=True)
class Ellipse:
    a: float
    b: float

    def __post_init__(self):
        if not (self.a > 0 and self.b > 0):
            raise ShapeMismatchError(f"Ellipse semi-axes must be positive, got ({self.a!r}, {self.b!r})")

    @property
    def smallest_extent(self) -> float:
        return min(self.a, self.b)


Shape = Union[Circle, Ellipse]


def circle_point(radius: float, angle: float) -> Vector2d:
    return (radius * math.cos(angle), radius * math.sin(angle))


def ellipse_point(a: float, b: float, angle: float) -> Vector2d:
    return (a * math.cos(angle), b * math.sin(angle))


def shape_point(shape: Shape, angle: float) -> Vector2d:
    """Point on the shape's outline at the given phase angle, relative to its centre."""
    if isinstance(shape, Circle):
        return circle_point(shape.radius, angle)
    if isinstance(shape, Ellipse):
        return ellipse_point(shape.a, shape.b, angle)
    raise ShapeMismatchError(f"Unknown shape variant: {shape!r}")


def require_circle(shape: Shape, what: str) -> Circle:
    if not isinstance(shape, Circle):
        raise ShapeMismatchError(f"{what} must be a Circle, got {shape!r}")
    return shape


def require_ellipse(shape: Shape, what: str) -> Ellipse:
    if not isinstance(shape, Ellipse):
        raise ShapeMismatchError(f"{what} must be an Ellipse, got {shape!r}")
    return shape


def angular_to_linear_velocity(radius: float, angle: float, angular_velocity: float) -> Vector2d:
    """
    Approximate the linear velocity of a body orbiting on a circle.

    Args:
        radius: Orbit radius in world units
        angle: Current orbital phase in radians
        angular_velocity: Radians per world-time unit (sign gives direction)

    Returns:
        (vx, vy) in world units per world-time unit
    """
    return vec_sub(
        circle_point(radius, angle + angular_velocity),
        circle_point(radius, angle),
    )


def ellipse_circumference(a: float, b: float, precision: int = 1000) -> float:
    """
    Approximate the circumference of an ellipse with semi-axes a and b.

    Args:
        a, b: Semi-axes (>= 0, not both zero)
        precision: Maximum number of series terms after the leading 1

    Returns:
        Circumference in the same units as a and b
    """
    h = ((a - b) / (a + b)) ** 2
    total = 1.0
    coefficient = 1.0
    h_power = 1.0
    for n in range(1, precision + 1):
        # |binom(1/2, n)| = |binom(1/2, n-1)| * |2n - 3| / (2n)
        coefficient *= abs(2 * n - 3) / (2 * n)
        h_power *= h
        term = coefficient * coefficient * h_power
        if term == 0.0:
            break
        total += term
    return math.pi * (a + b) * total
