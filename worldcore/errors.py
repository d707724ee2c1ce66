#!/usr/bin/env python3
"""
Exceptions raised when the world state breaks one of its structural invariants.

These indicate a corrupted world, not a transient condition: they abort the
current tick and are only caught at the thread/process boundary.
"""


class WorldInvariantError(RuntimeError):
    """Base class for world-state invariant violations."""


class ShapeMismatchError(WorldInvariantError):
    """A circle was required where an ellipse is stored, or the other way round."""


class OrbitTargetError(WorldInvariantError):
    """An orbit has no target, or an object orbits itself."""
