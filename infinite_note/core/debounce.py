"""
Debouncer - schedule-or-reset single-shot timer

Coalesces bursts of triggers into one callback after a quiet period.
"""

from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer


class Debouncer(QObject):
    """
    Runs a callback once after ``interval_ms`` without further triggers.

    Usage:
        debouncer = Debouncer(100, self._save)
        debouncer.trigger()   # schedules
        debouncer.trigger()   # resets the timer, still one call
    """

    def __init__(self, interval_ms: int, callback: Callable[[], None],
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._callback = callback
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._fire)

    @property
    def interval(self) -> int:
        return self._timer.interval()

    @property
    def is_pending(self) -> bool:
        return self._timer.isActive()

    def trigger(self):
        """Schedule the callback, restarting the timer if already scheduled."""
        self._timer.start()

    def cancel(self):
        """Drop a pending callback without running it."""
        self._timer.stop()

    def flush(self):
        """Run a pending callback immediately. No-op when nothing is pending."""
        if self._timer.isActive():
            self._timer.stop()
            self._fire()

    def _fire(self):
        self._callback()


__all__ = ['Debouncer']
