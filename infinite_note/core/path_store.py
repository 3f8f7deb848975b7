"""
PathStore - owner of the drawing

Holds the ordered list of strokes. While a pointer is active the last
stroke is the in-progress one; everything before it is committed.
"""

from typing import Callable, List, Optional, Sequence

from PyQt6.QtCore import QObject, pyqtSignal

from .types import Point, Stroke


class PathStore(QObject):
    """
    Ordered stroke collection with change notification.

    Insertion order is z-order for rendering and erase precedence.
    """

    # Signals
    paths_changed = pyqtSignal()
    stroke_started = pyqtSignal()
    stroke_discarded = pyqtSignal()
    strokes_removed = pyqtSignal(int)  # number of strokes removed

    def __init__(self, strokes: Optional[Sequence[Sequence[Point]]] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._strokes: List[Stroke] = [list(s) for s in strokes or []]

    # ==================== Queries ====================

    @property
    def strokes(self) -> List[Stroke]:
        """Live stroke list. Treat as read-only; use snapshot() to keep a copy."""
        return self._strokes

    def snapshot(self) -> List[Stroke]:
        """Copy of the stroke list safe to hold across later edits."""
        return [list(stroke) for stroke in self._strokes]

    def last_stroke(self) -> Optional[Stroke]:
        return self._strokes[-1] if self._strokes else None

    def point_count(self) -> int:
        return sum(len(stroke) for stroke in self._strokes)

    def __len__(self) -> int:
        return len(self._strokes)

    # ==================== Stroke Building ====================

    def begin_stroke(self, point: Point):
        """Append a new singleton stroke."""
        self._strokes.append([point])
        self.stroke_started.emit()
        self.paths_changed.emit()

    def append_point(self, point: Point):
        """Append a point to the last stroke."""
        if not self._strokes:
            raise IndexError("No stroke to append to")
        self._strokes[-1].append(point)
        self.paths_changed.emit()

    def discard_last(self) -> Optional[Stroke]:
        """Remove and return the last stroke."""
        if not self._strokes:
            return None
        stroke = self._strokes.pop()
        self.stroke_discarded.emit()
        self.paths_changed.emit()
        return stroke

    # ==================== Bulk Edits ====================

    def remove_where(self, predicate: Callable[[Stroke], bool],
                     candidates: Optional[int] = None) -> int:
        """
        Remove strokes matching predicate.

        Args:
            predicate: Returns True for strokes to remove
            candidates: Only consider the first N strokes (None = all)

        Returns:
            Number of strokes removed
        """
        limit = len(self._strokes) if candidates is None else candidates
        kept = [
            stroke for index, stroke in enumerate(self._strokes)
            if index >= limit or not predicate(stroke)
        ]
        removed = len(self._strokes) - len(kept)
        if removed:
            self._strokes = kept
            self.strokes_removed.emit(removed)
            self.paths_changed.emit()
        return removed

    def remove_stroke(self, stroke: Stroke) -> bool:
        """Remove a specific stroke object (identity match)."""
        for index, existing in enumerate(self._strokes):
            if existing is stroke:
                del self._strokes[index]
                self.strokes_removed.emit(1)
                self.paths_changed.emit()
                return True
        return False

    def shift(self, dx: float = 0, dy: float = 0):
        """Translate every point of every stroke."""
        if not dx and not dy:
            return
        for stroke in self._strokes:
            stroke[:] = [point.shifted(dx, dy) for point in stroke]
        self.paths_changed.emit()

    def replace_all(self, strokes: Sequence[Sequence[Point]]):
        self._strokes = [list(s) for s in strokes]
        self.paths_changed.emit()

    def clear(self):
        self._strokes = []
        self.paths_changed.emit()


__all__ = ['PathStore']
