"""
FILE: lanes/dnd/geometry.py
PURPOSE: Points and rectangles in the shared screen coordinate space
EXPORTS:
  - Point (dataclass)
  - Rect (dataclass)
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance."""
        return math.hypot(other.x - self.x, other.y - self.y)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned bounding box, as reported by a layout measurement."""

    x: float
    y: float
    width: float
    height: float

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2

    def contains(self, x: float, y: float) -> bool:
        # Edges count as inside
        return (
            self.x <= x <= self.x + self.width
            and self.y <= y <= self.y + self.height
        )
