"""
SketchSession - the session state container

Owns every piece of per-session state (strokes, canvas extent, origin,
velocity) and wires the engine components together. There is no global
state: the shell constructs a session, calls ``load()``, and after
``clear()`` throws it away and constructs a fresh one.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from ..config import Config, SketchConfig
from ..services.export_service import ExportResult, ExportService, ShareTarget
from ..services.session_storage import SessionStorage
from .erasers import EraseOutcome, ErasePolicy, HoldEraser, create_erase_policy
from .input_capture import InputCapture
from .momentum import MomentumScroller
from .path_store import PathStore
from .tile_canvas import TileCanvasManager, default_extent
from .types import CanvasExtent, Point, Viewport


logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class SketchSession(QObject):
    """
    One mounted sketchpad session.

    Lifecycle:
        session = SketchSession(config, storage)
        session.load(viewport_width_px, viewport_height_px)
        ...pointer / viewport events...
        session.clear()   # emits remount_requested; discard this session

    Signals:
        remount_requested(): storage was cleared, build a fresh session
        scroll_requested(dx, dy): view should scroll by canvas units
    """

    remount_requested = pyqtSignal()
    scroll_requested = pyqtSignal(int, int)

    def __init__(
        self,
        config: SketchConfig,
        storage: SessionStorage,
        share_target: Optional[ShareTarget] = None,
        download_dir: Optional[Path] = None,
        clock: Callable[[], int] = _now_ms,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._config = config
        self._storage = storage
        self._clock = clock
        self._origin: Optional[int] = None
        self._wired = False
        self._viewport: Optional[Viewport] = None

        self.store = PathStore(parent=self)
        self.momentum = MomentumScroller(
            decay=config.momentum_decay,
            sensitivity=config.sensitivity,
            tick_ms=Config.SCROLL_TICK_MS,
            parent=self,
        )
        self.erase_policy: ErasePolicy = create_erase_policy(config, self.store)
        self.input = InputCapture(
            self.store,
            self.erase_policy,
            momentum=self.momentum,
            viewport_provider=lambda: self._viewport,
            parent=self,
        )
        if isinstance(self.erase_policy, HoldEraser):
            self.erase_policy.setParent(self)
            self.erase_policy.bind_input(self.input)

        self.tiles: Optional[TileCanvasManager] = None
        self.exporter = ExportService(
            share_target=share_target,
            download_dir=download_dir,
            noise_length=config.noise_length_threshold,
        )

        self.momentum.scroll_requested.connect(self.scroll_requested)

    # ==================== Properties ====================

    @property
    def config(self) -> SketchConfig:
        return self._config

    @property
    def storage(self) -> SessionStorage:
        return self._storage

    @property
    def origin(self) -> int:
        if self._origin is None:
            raise RuntimeError("Session is not loaded")
        return self._origin

    @property
    def extent(self) -> CanvasExtent:
        if self.tiles is None:
            raise RuntimeError("Session is not loaded")
        return self.tiles.extent

    @property
    def is_loaded(self) -> bool:
        return self.tiles is not None

    @property
    def hold_eraser(self) -> Optional[HoldEraser]:
        return self.erase_policy if isinstance(self.erase_policy, HoldEraser) else None

    # ==================== Init / Teardown ====================

    def load(self, viewport_width: float, viewport_height: float):
        """
        Restore persisted state or start a new session sized to the viewport.

        Args:
            viewport_width: Initial viewport width in canvas units
            viewport_height: Initial viewport height in canvas units

        Raises:
            CorruptSessionError: If persisted state is malformed
        """
        if self.is_loaded:
            raise RuntimeError("Session is already loaded")

        defaults = default_extent(
            viewport_width, viewport_height,
            self._config.tile_size, Config.INITIAL_TILE_MARGIN,
        )
        state = self._storage.load(defaults, self._clock())

        self._origin = state.origin
        self.store.replace_all(state.drawing)
        self.tiles = TileCanvasManager(
            self.store, state.extent, self._config.tile_size,
            debounce_ms=Config.EDGE_GROWTH_DEBOUNCE_MS, parent=self,
        )

        self._storage.save_origin(state.origin)
        self._storage.save_extent(state.extent)

        self.tiles.extent_changed.connect(self._on_extent_changed)
        self.tiles.scroll_requested.connect(self.scroll_requested)
        self.store.paths_changed.connect(self._on_paths_changed)
        self._wired = True
        self.momentum.start()

    def clear(self):
        """Erase all persisted state and ask the shell to remount."""
        self.shutdown(flush=False)
        self._storage.clear()
        self.remount_requested.emit()

    def shutdown(self, flush: bool = True):
        """Stop timers; optionally write pending strokes first."""
        self.momentum.stop()
        if self.tiles is not None:
            self.tiles.stop()
        hold = self.hold_eraser
        if hold is not None:
            hold.stop()
        if flush:
            self._storage.flush()
        if self._wired:
            self.store.paths_changed.disconnect(self._on_paths_changed)
            self._wired = False

    # ==================== Persistence Wiring ====================

    def _on_extent_changed(self, width: int, height: int):
        self._storage.save_extent(CanvasExtent(width, height))

    def _on_paths_changed(self):
        self._storage.schedule_save_drawing(self.store.strokes)

    # ==================== Pointer Events ====================

    def make_point(self, x: float, y: float, pressure: float) -> Point:
        """Stamp a canvas-space sample with the session-relative time."""
        return Point(x, y, self._clock() - self.origin, pressure)

    def pointer_down(self, pointer_id: int, x: float, y: float, pressure: float) -> bool:
        hold = self.hold_eraser
        if hold is not None:
            hold.press(pointer_id, x, y)
        return self.input.on_pointer_down(pointer_id, self.make_point(x, y, pressure))

    def pointer_move(self, pointer_id: int, x: float, y: float, pressure: float) -> bool:
        hold = self.hold_eraser
        if hold is not None:
            hold.move(pointer_id, x, y)
        return self.input.on_pointer_move(pointer_id, self.make_point(x, y, pressure))

    def pointer_up(self, pointer_id: int, x: float, y: float,
                   pressure: float) -> Optional[EraseOutcome]:
        """Finish the stroke; None when the pointer was not the active one."""
        hold = self.hold_eraser
        if hold is not None:
            hold.release(pointer_id)
        return self.input.on_pointer_up(pointer_id, self.make_point(x, y, pressure))

    def pointer_cancel(self, pointer_id: int) -> bool:
        hold = self.hold_eraser
        if hold is not None:
            hold.cancel(pointer_id)
        return self.input.on_pointer_cancel(pointer_id)

    # ==================== Viewport ====================

    def update_viewport(self, viewport: Viewport):
        """Host reports the visible rectangle after a scroll or resize."""
        self._viewport = viewport
        if self.tiles is not None:
            self.tiles.update_viewport(viewport)

    # ==================== Export ====================

    def export(self) -> ExportResult:
        """
        Export a snapshot of the current drawing.

        Raises:
            ExportError: If the image cannot be produced
        """
        return self.exporter.export(self.store.snapshot())


__all__ = ['SketchSession']
