"""
Shared data types for the sketch engine.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List


@dataclass(frozen=True)
class Point:
    """A recorded pointer sample in canvas space."""

    x: float
    y: float
    t: int  # ms since session origin
    p: float  # pressure, 0-1

    def shifted(self, dx: float = 0, dy: float = 0) -> "Point":
        return Point(self.x + dx, self.y + dy, self.t, self.p)


Stroke = List[Point]


@dataclass(frozen=True)
class CanvasExtent:
    """Canvas size in canvas units. Always a whole number of tiles."""

    width: int
    height: int


@dataclass(frozen=True)
class Viewport:
    """Visible rectangle in canvas units, plus the visual zoom of the host."""

    x: float
    y: float
    width: float
    height: float
    scale: float = 1.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


class Edge(Enum):
    """Canvas edges that can grow."""

    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"

    @property
    def is_leading(self) -> bool:
        """Leading edges grow toward negative coordinates and need a remap."""
        return self in (Edge.TOP, Edge.LEFT)


__all__ = ['Point', 'Stroke', 'CanvasExtent', 'Viewport', 'Edge']
