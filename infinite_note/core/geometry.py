"""
Geometry helpers for stroke analysis.

Provides functions for:
- Splitting a path into line segments
- Strict segment crossing tests and crossing counts
- Bounding boxes, centroids and path length
- Point-to-segment distance for hit testing

All functions are pure and work on anything with ``x`` and ``y`` attributes.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from .types import Point


Segment = Tuple[Point, Point]


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box. Containment is half-open on the max side."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x < self.max_x and self.min_y <= y < self.max_y

    def expanded(self, padding: float) -> "BoundingBox":
        return BoundingBox(
            self.min_x - padding,
            self.min_y - padding,
            self.max_x + padding,
            self.max_y + padding,
        )


def path_to_segments(path: Sequence[Point]) -> List[Segment]:
    """Consecutive point pairs of a path. Fewer than two points gives no segments."""
    return [(path[i], path[i + 1]) for i in range(len(path) - 1)]


def _side(a0: Point, a1: Point, q: Point) -> float:
    """Signed area of (a1 - a0) x (q - a0), up to sign convention."""
    return (a0.x - a1.x) * (q.y - a0.y) + (a0.y - a1.y) * (a0.x - q.x)


def segments_cross(a: Segment, b: Segment) -> bool:
    """
    Check whether two segments properly cross.

    Each segment's endpoints must lie strictly on opposite sides of the
    other segment's line. Touching and collinear cases do not count.
    """
    a0, a1 = a
    b0, b1 = b
    return (
        _side(a0, a1, b0) * _side(a0, a1, b1) < 0
        and _side(b0, b1, a0) * _side(b0, b1, a1) < 0
    )


def count_crossings(path: Sequence[Point], other: Sequence[Point]) -> int:
    """Number of (segment of path, segment of other) pairs that cross."""
    other_segments = path_to_segments(other)
    count = 0
    for a in path_to_segments(path):
        for b in other_segments:
            if segments_cross(a, b):
                count += 1
    return count


def bounding_box(points: Iterable[Point]) -> BoundingBox:
    """
    Bounding box of a non-empty collection of points.

    Raises:
        ValueError: If there are no points
    """
    min_x = min_y = math.inf
    max_x = max_y = -math.inf
    for point in points:
        min_x = min(min_x, point.x)
        min_y = min(min_y, point.y)
        max_x = max(max_x, point.x)
        max_y = max(max_y, point.y)

    if min_x == math.inf:
        raise ValueError("Cannot compute bounding box of no points")
    return BoundingBox(min_x, min_y, max_x, max_y)


def centroid(points: Sequence[Point]) -> Tuple[float, float]:
    """Arithmetic mean of the points (not the area centroid)."""
    if not points:
        raise ValueError("Cannot compute centroid of no points")
    n = len(points)
    return (
        sum(point.x for point in points) / n,
        sum(point.y for point in points) / n,
    )


def path_length(path: Sequence[Point]) -> float:
    """Total polyline length."""
    return sum(
        math.hypot(b.x - a.x, b.y - a.y)
        for a, b in path_to_segments(path)
    )


def distance_to_segment(x: float, y: float, segment: Segment) -> float:
    """Shortest distance from (x, y) to a segment."""
    a, b = segment
    dx = b.x - a.x
    dy = b.y - a.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(x - a.x, y - a.y)

    t = ((x - a.x) * dx + (y - a.y) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(x - (a.x + t * dx), y - (a.y + t * dy))


def distance_to_path(x: float, y: float, path: Sequence[Point]) -> float:
    """Shortest distance from (x, y) to a polyline. A single point counts as a dot."""
    if not path:
        return math.inf
    if len(path) == 1:
        return math.hypot(x - path[0].x, y - path[0].y)
    return min(distance_to_segment(x, y, segment) for segment in path_to_segments(path))


__all__ = [
    'BoundingBox',
    'Segment',
    'path_to_segments',
    'segments_cross',
    'count_crossings',
    'bounding_box',
    'centroid',
    'path_length',
    'distance_to_segment',
    'distance_to_path',
]
