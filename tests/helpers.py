"""Stroke builders shared by the tests."""

from infinite_note.core.types import Point


def make_stroke(coords, t=0, p=0.5):
    """Build a stroke from (x, y) pairs."""
    return [Point(x, y, t, p) for x, y in coords]


# Square with a repeated closing point; centroid (40, 40)
SQUARE = [(0, 0), (100, 0), (100, 100), (0, 100), (0, 0)]

# Crosses the square's left and right sides four times each
ZIGZAG = [(-10, 10), (110, 20), (-10, 30), (110, 40), (-10, 50)]
