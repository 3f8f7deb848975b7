"""
Stroke serialization

Strokes are stored as a JSON array of arrays of ``{"x", "y", "t", "p"}``
objects. Floats go through ``json`` unchanged, so a save/load round trip
reproduces every point exactly.
"""

import json
import math
from numbers import Real
from typing import Any, Dict, List, Sequence

from .errors import CorruptSessionError
from .types import Point, Stroke


PATHS_KEY = 'paths'


def point_to_dict(point: Point) -> Dict[str, Any]:
    return {'x': point.x, 'y': point.y, 't': point.t, 'p': point.p}


def point_from_dict(data: Any) -> Point:
    """
    Build a Point from its stored form.

    Raises:
        CorruptSessionError: If a field is missing or not a finite number
    """
    if not isinstance(data, dict):
        raise CorruptSessionError(PATHS_KEY, f"point is {type(data).__name__}, expected object")

    values = []
    for field in ('x', 'y', 't', 'p'):
        value = data.get(field)
        if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
            raise CorruptSessionError(PATHS_KEY, f"point field '{field}' is {value!r}")
        values.append(value)
    return Point(*values)


def dumps_paths(strokes: Sequence[Sequence[Point]]) -> str:
    """Serialize strokes to the stored JSON text."""
    return json.dumps(
        [[point_to_dict(point) for point in stroke] for stroke in strokes],
        separators=(',', ':'),
    )


def _reject_constant(name: str):
    raise CorruptSessionError(PATHS_KEY, f"non-finite number {name}")


def loads_paths(text: str) -> List[Stroke]:
    """
    Parse stored JSON text back into strokes.

    Raises:
        CorruptSessionError: If the text is not valid JSON or has the wrong shape
    """
    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise CorruptSessionError(PATHS_KEY, f"invalid JSON ({e})") from e

    if not isinstance(data, list):
        raise CorruptSessionError(PATHS_KEY, "expected an array of strokes")

    strokes: List[Stroke] = []
    for stroke_data in data:
        if not isinstance(stroke_data, list) or not stroke_data:
            raise CorruptSessionError(PATHS_KEY, "stroke must be a non-empty array")
        strokes.append([point_from_dict(point) for point in stroke_data])
    return strokes


__all__ = [
    'PATHS_KEY',
    'point_to_dict',
    'point_from_dict',
    'dumps_paths',
    'loads_paths',
]
