"""
MomentumScroller - inertial auto-scroll

Drawing in the half of the viewport ahead of the writing direction builds
up velocity; a fixed-rate tick scrolls by the whole-unit part of it and lets
it decay, so the canvas glides along and slows down smoothly.
"""

import math
from typing import Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal


class MomentumScroller(QObject):
    """
    Scalar velocity accumulator with sub-unit carry.

    Each tick:
        remainder += velocity
        step = floor(remainder)   -> scrolled now
        remainder -= step         -> carried to the next tick
        velocity *= decay
    """

    # Signals
    scroll_requested = pyqtSignal(int, int)  # dx, dy

    def __init__(self, decay: float = 64 / 65, sensitivity: float = 1 / 16,
                 tick_ms: int = 16, parent: Optional[QObject] = None):
        super().__init__(parent)
        if not 0 < decay < 1:
            raise ValueError(f"Decay must be in (0, 1): {decay}")

        self._decay = decay
        self._sensitivity = sensitivity
        self._velocity = 0.0
        self._remainder = 0.0

        self._timer = QTimer(self)
        self._timer.setInterval(tick_ms)
        self._timer.timeout.connect(self.tick)

    # ==================== Properties ====================

    @property
    def velocity(self) -> float:
        return self._velocity

    @property
    def remainder(self) -> float:
        return self._remainder

    @property
    def decay(self) -> float:
        return self._decay

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    # ==================== Control ====================

    def start(self):
        self._timer.start()

    def stop(self):
        self._timer.stop()

    def reset(self):
        self._velocity = 0.0
        self._remainder = 0.0

    # ==================== Physics ====================

    def feed(self, feedback: float, distance: float, scale: float = 1.0) -> float:
        """
        Add drag feedback.

        Args:
            feedback: Pointer position across the viewport, 0 (start) to 1 (end)
            distance: Distance moved since the previous sample
            scale: Visual zoom of the viewport; larger zoom damps the push

        Returns:
            The velocity added (0 when the pointer is in the trailing half)
        """
        if feedback < 0.5:
            return 0.0

        push = (feedback - 0.5) * (distance / math.sqrt(scale)) * self._sensitivity
        self._velocity += push
        return push

    def add_velocity(self, amount: float):
        self._velocity += amount

    def tick(self) -> int:
        """
        Advance one frame.

        Returns:
            The whole-unit scroll applied this frame
        """
        self._remainder += self._velocity
        step = math.floor(self._remainder)
        self._remainder -= step
        if step:
            self.scroll_requested.emit(step, 0)

        self._velocity *= self._decay
        return step


def ticks_to_settle(velocity: float, decay: float) -> int:
    """Ticks until |velocity| * decay**n drops below one unit."""
    magnitude = abs(velocity)
    if magnitude < 1:
        return 0
    return math.ceil(math.log(1 / magnitude) / math.log(decay))


__all__ = ['MomentumScroller', 'ticks_to_settle']
