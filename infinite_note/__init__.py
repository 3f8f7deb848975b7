"""
Infinite Note

A freehand sketchpad on a canvas that grows in every direction.
"""

__version__ = "1.0.0"
__author__ = "InfiniteNote"

from .config import Config, SketchConfig
from .events.event_bus import EventBus

__all__ = [
    'Config',
    'SketchConfig',
    'EventBus',
]
