#!/usr/bin/env python3
"""
Camera utilities for 2D world-to-screen transforms.

World y points up, screen y points down.
"""
from typing import Optional, Tuple
from .constants import (
    DEFAULT_VIEW_EXTENT,
    MIN_UNITS_PER_PIXEL,
    MAX_UNITS_PER_PIXEL,
    VIEW_WIDTH,
    VIEW_HEIGHT,
)
from .vector_utils import clamp, vec_sub


class Camera2D:
    """
    Simple 2D camera that maps world coordinates to screen pixels.
    """

    def __init__(self, center=(0.0, 0.0), extent: float = DEFAULT_VIEW_EXTENT):
        self.center = [center[0], center[1]]
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)
        self.upp = 1.0
        self.fit_extent(extent)

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    def fit_extent(self, extent: float) -> None:
        """Fit the square [-extent, extent]^2 around the center into the shorter viewport side."""
        shortest = max(min(self.viewport_size), 1)
        self.upp = clamp(2.0 * extent / shortest, MIN_UNITS_PER_PIXEL, MAX_UNITS_PER_PIXEL)

    def world_to_screen(self, pos: Tuple[float, float]) -> Tuple[int, int]:
        cx, cy = self.center
        upp = self.upp
        px = (pos[0] - cx) / upp + self.viewport_size[0] / 2
        py = self.viewport_size[1] / 2 - (pos[1] - cy) / upp
        return (int(px), int(py))

    def screen_to_world(self, screen: Tuple[int, int]) -> Tuple[float, float]:
        cx, cy = self.center
        upp = self.upp
        wx = (screen[0] - self.viewport_size[0] / 2) * upp + cx
        wy = (self.viewport_size[1] / 2 - screen[1]) * upp + cy
        return (wx, wy)

    def size_to_pixels(self, size: float) -> float:
        return size / self.upp

    def zoom(self, factor, pivot_screen: Optional[Tuple[int, int]] = None):
        """Scale the view by factor (>1 zooms in), keeping the world point under pivot_screen in place."""
        if pivot_screen is None:
            pivot_screen = (self.viewport_size[0] / 2, self.viewport_size[1] / 2)
        anchor = self.screen_to_world(pivot_screen)
        self.upp = clamp(self.upp / clamp(factor, 0.05, 20.0), MIN_UNITS_PER_PIXEL, MAX_UNITS_PER_PIXEL)
        dx, dy = vec_sub(anchor, self.screen_to_world(pivot_screen))
        self.center = [self.center[0] + dx, self.center[1] + dy]

    def pan_pixels(self, dx_pixels, dy_pixels):
        self.center[0] -= dx_pixels * self.upp
        self.center[1] += dy_pixels * self.upp
