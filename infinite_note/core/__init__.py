"""Sketch engine for Infinite Note"""

from .types import Point, Stroke, CanvasExtent, Viewport, Edge
from .errors import (
    InfiniteNoteError,
    InitializationError,
    CorruptSessionError,
    ExportError,
    ShareRejected,
)
from .path_store import PathStore
from .erasers import EraseOutcome, ErasePolicy, LassoEraser, HoldEraser, create_erase_policy
from .input_capture import InputCapture
from .momentum import MomentumScroller
from .tile_canvas import TileCanvasManager

__all__ = [
    'Point', 'Stroke', 'CanvasExtent', 'Viewport', 'Edge',
    'InfiniteNoteError', 'InitializationError', 'CorruptSessionError',
    'ExportError', 'ShareRejected',
    'PathStore',
    'EraseOutcome', 'ErasePolicy', 'LassoEraser', 'HoldEraser', 'create_erase_policy',
    'InputCapture',
    'MomentumScroller',
    'TileCanvasManager',
]
