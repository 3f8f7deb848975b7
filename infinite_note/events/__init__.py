"""Event system for Infinite Note"""

from .event_bus import EventBus

__all__ = ['EventBus']
