"""
SessionStorage - durable key/value storage for the sketch session

Handles:
- Loading canvas extent, session origin and strokes (with caller defaults)
- Immediate writes for extent and origin
- Debounced writes for strokes
- Clearing every persisted key

Values are kept as strings under four keys, so the on-disk record looks the
same as a browser's local storage for the same drawing.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from PyQt6.QtCore import QObject, QSettings, pyqtSignal

from ..config import Config
from ..core.debounce import Debouncer
from ..core.errors import CorruptSessionError
from ..core.serialization import PATHS_KEY, dumps_paths, loads_paths
from ..core.types import CanvasExtent, Point, Stroke


logger = logging.getLogger(__name__)


CANVAS_WIDTH_KEY = 'canvasWidth'
CANVAS_HEIGHT_KEY = 'canvasHeight'
MOUNTED_TIME_KEY = 'mountedTime'
SESSION_KEYS = (CANVAS_WIDTH_KEY, CANVAS_HEIGHT_KEY, MOUNTED_TIME_KEY, PATHS_KEY)


@dataclass
class SessionState:
    """Everything a session restores on load."""

    extent: CanvasExtent
    origin: int  # epoch ms
    drawing: List[Stroke] = field(default_factory=list)


class SessionStorage(QObject):
    """
    QSettings-backed persistence for one sketch session.

    Args:
        settings: Settings store to use. Defaults to the per-user
            application settings; tests pass an INI file instead.
        save_debounce_ms: Quiet period before strokes are written
    """

    # Signals
    drawing_saved = pyqtSignal(int)  # stroke count
    cleared = pyqtSignal()

    def __init__(self, settings: Optional[QSettings] = None,
                 save_debounce_ms: int = Config.SAVE_DEBOUNCE_MS,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._settings = settings or QSettings(Config.APP_AUTHOR, Config.APP_NAME)
        self._pending: Optional[List[Stroke]] = None
        self._save_debouncer = Debouncer(save_debounce_ms, self._write_drawing, self)

    @property
    def settings(self) -> QSettings:
        return self._settings

    @property
    def has_pending_save(self) -> bool:
        return self._save_debouncer.is_pending

    # ==================== Load ====================

    def _read_int(self, key: str) -> Optional[int]:
        if not self._settings.contains(key):
            return None
        raw = self._settings.value(key, '', type=str)
        try:
            return int(raw)
        except ValueError as e:
            raise CorruptSessionError(key, f"not an integer: {raw!r}") from e

    def load(self, default_extent: CanvasExtent, default_origin: int) -> SessionState:
        """
        Load persisted state, using the defaults for missing keys.

        Raises:
            CorruptSessionError: If a stored value cannot be parsed
        """
        width = self._read_int(CANVAS_WIDTH_KEY)
        height = self._read_int(CANVAS_HEIGHT_KEY)
        origin = self._read_int(MOUNTED_TIME_KEY)

        for key, value in ((CANVAS_WIDTH_KEY, width), (CANVAS_HEIGHT_KEY, height)):
            if value is not None and value <= 0:
                raise CorruptSessionError(key, f"must be positive, got {value}")

        drawing: List[Stroke] = []
        if self._settings.contains(PATHS_KEY):
            drawing = loads_paths(self._settings.value(PATHS_KEY, '', type=str))

        state = SessionState(
            extent=CanvasExtent(
                width if width is not None else default_extent.width,
                height if height is not None else default_extent.height,
            ),
            origin=origin if origin is not None else default_origin,
            drawing=drawing,
        )
        logger.info(
            f"Loaded session: {len(drawing)} stroke(s), "
            f"canvas {state.extent.width}x{state.extent.height}"
        )
        return state

    # ==================== Save ====================

    def save_extent(self, extent: CanvasExtent):
        self._settings.setValue(CANVAS_WIDTH_KEY, str(extent.width))
        self._settings.setValue(CANVAS_HEIGHT_KEY, str(extent.height))
        self._settings.sync()

    def save_origin(self, origin: int):
        self._settings.setValue(MOUNTED_TIME_KEY, str(origin))
        self._settings.sync()

    def save_drawing(self, strokes: Sequence[Sequence[Point]]):
        """Write strokes now, superseding any pending debounced save."""
        self._save_debouncer.cancel()
        self._pending = [list(stroke) for stroke in strokes]
        self._write_drawing()

    def schedule_save_drawing(self, strokes: Sequence[Sequence[Point]]):
        """Write strokes after the debounce window; later calls replace earlier ones."""
        self._pending = [list(stroke) for stroke in strokes]
        self._save_debouncer.trigger()

    def flush(self):
        """Write a pending debounced save immediately."""
        self._save_debouncer.flush()

    def _write_drawing(self):
        if self._pending is None:
            return
        strokes, self._pending = self._pending, None
        self._settings.setValue(PATHS_KEY, dumps_paths(strokes))
        self._settings.sync()
        self.drawing_saved.emit(len(strokes))

    # ==================== Clear ====================

    def clear(self):
        """Remove every persisted key and drop any pending save."""
        self._save_debouncer.cancel()
        self._pending = None
        for key in SESSION_KEYS:
            self._settings.remove(key)
        self._settings.sync()
        logger.info("Session storage cleared")
        self.cleared.emit()

    def has_session(self) -> bool:
        return any(self._settings.contains(key) for key in SESSION_KEYS)


__all__ = [
    'SessionState',
    'SessionStorage',
    'SESSION_KEYS',
    'CANVAS_WIDTH_KEY',
    'CANVAS_HEIGHT_KEY',
    'MOUNTED_TIME_KEY',
]
