"""
InputCapture - pointer events to strokes

Enforces single-active-pointer semantics: the first pointer down owns the
stroke until it is released or cancelled, and every other pointer is
ignored in the meantime. Coordinates arrive already in canvas space.
"""

import logging
from typing import Callable, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from .erasers import EraseOutcome, ErasePolicy
from .momentum import MomentumScroller
from .path_store import PathStore
from .types import Point, Viewport


logger = logging.getLogger(__name__)


class InputCapture(QObject):
    """
    Translates pointer events into PathStore edits.

    Signals:
        stroke_finished(EraseOutcome): pointer-up handled by the erase policy
        stroke_cancelled(): active stroke dropped by pointer-cancel or reset
    """

    stroke_finished = pyqtSignal(object)
    stroke_cancelled = pyqtSignal()

    def __init__(
        self,
        store: PathStore,
        erase_policy: ErasePolicy,
        momentum: Optional[MomentumScroller] = None,
        viewport_provider: Optional[Callable[[], Optional[Viewport]]] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._store = store
        self._erase_policy = erase_policy
        self._momentum = momentum
        self._viewport_provider = viewport_provider
        self._active_pointer: Optional[int] = None

    @property
    def active_pointer(self) -> Optional[int]:
        return self._active_pointer

    @property
    def is_drawing(self) -> bool:
        return self._active_pointer is not None

    @property
    def erase_policy(self) -> ErasePolicy:
        return self._erase_policy

    # ==================== Pointer Events ====================

    def on_pointer_down(self, pointer_id: int, point: Point) -> bool:
        """
        Start a stroke unless another pointer is already drawing.

        Returns:
            True if the event was accepted
        """
        if self._active_pointer is not None:
            return False

        self._store.begin_stroke(point)
        self._active_pointer = pointer_id
        return True

    def on_pointer_move(self, pointer_id: int, point: Point) -> bool:
        if pointer_id != self._active_pointer:
            return False

        previous = self._store.last_stroke()[-1]
        self._store.append_point(point)
        self._feed_momentum(previous, point)
        return True

    def on_pointer_up(self, pointer_id: int, point: Point) -> Optional[EraseOutcome]:
        """
        Append the final point and let the erase policy finish the stroke.

        Returns:
            The outcome, or None if the event was ignored
        """
        if pointer_id != self._active_pointer:
            return None

        self._store.append_point(point)
        outcome = self._erase_policy.finish_stroke(self._store)
        self._active_pointer = None
        self.stroke_finished.emit(outcome)
        return outcome

    def on_pointer_cancel(self, pointer_id: int) -> bool:
        if pointer_id != self._active_pointer:
            return False

        self._store.discard_last()
        logger.debug(f"Stroke from pointer {pointer_id} cancelled")
        self._active_pointer = None
        self.stroke_cancelled.emit()
        return True

    def reset(self):
        """Forget the active pointer, discarding its unfinished stroke."""
        if self._active_pointer is not None:
            self.on_pointer_cancel(self._active_pointer)

    # ==================== Momentum Feedback ====================

    def _feed_momentum(self, previous: Point, current: Point):
        if self._momentum is None or self._viewport_provider is None:
            return

        viewport = self._viewport_provider()
        if viewport is None or viewport.width <= 0:
            return

        feedback = (current.x - viewport.x) / viewport.width
        distance = abs(current.y - previous.y)
        self._momentum.feed(feedback, distance, viewport.scale)


__all__ = ['InputCapture']
