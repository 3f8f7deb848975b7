"""
Erase policies

Two interchangeable ways of deleting strokes:
- LassoEraser: a finished stroke that scribbles over an existing stroke
  enough times becomes an eraser for everything inside its bounding box
- HoldEraser: pressing and holding on a committed stroke deletes it

Only one policy is active per session. The input layer calls
``finish_stroke`` on pointer-up and the policy decides what happens to the
stroke that was just drawn.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

from PyQt6.QtCore import QObject, pyqtSignal

from ..config import ERASE_MODE_HOLD, ERASE_MODE_LASSO, SketchConfig
from .debounce import Debouncer
from .geometry import bounding_box, centroid, count_crossings, distance_to_path
from .path_store import PathStore
from .types import Point, Stroke

if TYPE_CHECKING:
    from .input_capture import InputCapture


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EraseOutcome:
    """What happened to a finished stroke."""

    committed: bool
    erased: int = 0


class ErasePolicy:
    """Base class for erase strategies."""

    mode: str = ''

    def finish_stroke(self, store: PathStore) -> EraseOutcome:
        """
        Decide the fate of the last stroke in ``store``.

        Called once per pointer-up, after the final point was appended.
        """
        raise NotImplementedError


# ==================== Lasso ====================

class LassoEraser(ErasePolicy):
    """
    Closed-loop / scribble eraser.

    The finished stroke is compared against every existing stroke. If it
    crosses any single one of them at least ``threshold`` times it is treated
    as an erase gesture: strokes whose centroid falls in its bounding box are
    removed and the gesture itself is discarded.
    """

    mode = ERASE_MODE_LASSO

    def __init__(self, threshold: int = 8):
        self._threshold = threshold

    @property
    def threshold(self) -> int:
        return self._threshold

    def max_crossings(self, stroke: Sequence[Point], existing: Sequence[Sequence[Point]]) -> int:
        """Highest crossing count against any one existing stroke (not the sum)."""
        return max((count_crossings(other, stroke) for other in existing), default=0)

    def is_erase_gesture(self, stroke: Sequence[Point], existing: Sequence[Sequence[Point]]) -> bool:
        return self.max_crossings(stroke, existing) >= self._threshold

    @staticmethod
    def is_enclosed(target: Sequence[Point], eraser: Sequence[Point]) -> bool:
        """Whether target's centroid lies in eraser's half-open bounding box."""
        cx, cy = centroid(target)
        return bounding_box(eraser).contains(cx, cy)

    def finish_stroke(self, store: PathStore) -> EraseOutcome:
        stroke = store.last_stroke()
        if stroke is None:
            return EraseOutcome(committed=False)

        existing = store.strokes[:-1]
        if not self.is_erase_gesture(stroke, existing):
            return EraseOutcome(committed=True)

        store.discard_last()
        erased = store.remove_where(lambda other: self.is_enclosed(other, stroke))
        logger.debug(f"Lasso erase removed {erased} stroke(s)")
        return EraseOutcome(committed=False, erased=erased)


# ==================== Hold ====================

class HoldEraser(QObject, ErasePolicy):
    """
    Long-press eraser.

    Each committed stroke has an invisible hit region ``hit_width`` around
    its polyline. Pressing inside it starts a timer; if the timer fires the
    stroke is deleted and pointer tracking is reset. Releasing, cancelling
    or moving out of the region first aborts the hold.
    """

    mode = ERASE_MODE_HOLD

    # Signals
    hold_started = pyqtSignal()
    hold_cancelled = pyqtSignal()
    stroke_erased = pyqtSignal()

    def __init__(self, store: PathStore, hold_duration_ms: int = 500,
                 hit_width: float = 80.0, parent: Optional[QObject] = None):
        QObject.__init__(self, parent)
        self._store = store
        self._hit_width = hit_width
        self._input: Optional['InputCapture'] = None

        self._target: Optional[Stroke] = None
        self._pointer_id: Optional[int] = None
        self._timer = Debouncer(hold_duration_ms, self._on_hold_elapsed, self)

    def bind_input(self, input_capture: 'InputCapture'):
        """Attach the input layer so a completed hold can reset its tracking."""
        self._input = input_capture

    @property
    def is_holding(self) -> bool:
        return self._timer.is_pending

    @property
    def target(self) -> Optional[Stroke]:
        return self._target

    def finish_stroke(self, store: PathStore) -> EraseOutcome:
        return EraseOutcome(committed=store.last_stroke() is not None)

    # ==================== Hit Regions ====================

    def _in_progress(self) -> Optional[Stroke]:
        if self._input is not None and self._input.is_drawing:
            return self._store.last_stroke()
        return None

    def hit_test(self, x: float, y: float) -> Optional[Stroke]:
        """Topmost committed stroke whose hit region contains (x, y)."""
        in_progress = self._in_progress()
        for stroke in reversed(self._store.strokes):
            if stroke is in_progress:
                continue
            if distance_to_path(x, y, stroke) <= self._hit_width:
                return stroke
        return None

    # ==================== Pointer Events ====================

    def press(self, pointer_id: int, x: float, y: float) -> bool:
        """
        Start a hold if (x, y) is on a stroke.

        Returns:
            True if a hold timer was started
        """
        if self._timer.is_pending:
            return False

        stroke = self.hit_test(x, y)
        if stroke is None:
            return False

        self._target = stroke
        self._pointer_id = pointer_id
        self._timer.trigger()
        self.hold_started.emit()
        return True

    def move(self, pointer_id: int, x: float, y: float):
        """Abort the hold when the pointer leaves the target's hit region."""
        if not self._timer.is_pending or pointer_id != self._pointer_id:
            return
        if distance_to_path(x, y, self._target) > self._hit_width:
            self._abort()

    def release(self, pointer_id: int):
        if self._timer.is_pending and pointer_id == self._pointer_id:
            self._abort()

    def cancel(self, pointer_id: int):
        self.release(pointer_id)

    def stop(self):
        """Drop any pending hold without erasing."""
        self._timer.cancel()
        self._target = None
        self._pointer_id = None

    def _abort(self):
        self.stop()
        self.hold_cancelled.emit()

    def _on_hold_elapsed(self):
        target = self._target
        self._target = None
        self._pointer_id = None

        if self._input is not None:
            self._input.reset()
        if target is not None and self._store.remove_stroke(target):
            logger.debug("Hold erase removed 1 stroke")
            self.stroke_erased.emit()


def create_erase_policy(config: SketchConfig, store: PathStore) -> ErasePolicy:
    """Build the erase policy selected by the config."""
    if config.erase_mode == ERASE_MODE_HOLD:
        return HoldEraser(store, config.hold_duration_ms, config.hold_hit_width)
    return LassoEraser(config.intersection_threshold)


__all__ = [
    'EraseOutcome',
    'ErasePolicy',
    'LassoEraser',
    'HoldEraser',
    'create_erase_policy',
]
