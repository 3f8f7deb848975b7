"""
MainWindow - Main application window

Hosts the sketch canvas with a small Share / Clear toolbar. Clearing throws
the session away and mounts a brand new one.
"""

import logging
from typing import Optional

from PyQt6.QtCore import QSettings
from PyQt6.QtGui import QAction, QCloseEvent, QGuiApplication
from PyQt6.QtWidgets import QMainWindow, QMessageBox, QStatusBar, QToolBar

from ..config import Config, SketchConfig
from ..core.errors import CorruptSessionError, ExportError
from ..core.session import SketchSession
from ..events.event_bus import EventBus
from ..services.export_service import ClipboardShareTarget, ShareTarget
from ..services.session_storage import SessionStorage
from .sketch_canvas import SketchCanvas


logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    Main application window

    Layout:
        +------------------------------------------+
        |  Toolbar: Share | Clear                  |
        +------------------------------------------+
        |  SketchCanvas                            |
        +------------------------------------------+
        |  StatusBar                               |
        +------------------------------------------+
    """

    def __init__(self, parent=None, sketch_config: Optional[SketchConfig] = None,
                 settings: Optional[QSettings] = None, event_bus: Optional[EventBus] = None,
                 share_target: Optional[ShareTarget] = None, confirm_dialogs: bool = True):
        super().__init__(parent)

        # Injectable for testing
        self._sketch_config = sketch_config or Config.load_sketch_config()
        self._settings = settings or QSettings(Config.APP_AUTHOR, Config.APP_NAME)
        self._event_bus = event_bus or EventBus(self)
        self._share_target = share_target or ClipboardShareTarget(QGuiApplication.clipboard())
        self._confirm_dialogs = confirm_dialogs

        self._storage = SessionStorage(self._settings, parent=self)
        self._session: Optional[SketchSession] = None
        self._canvas: Optional[SketchCanvas] = None

        self._setup_window()
        self._create_widgets()
        self._connect_signals()
        self._load_settings()

    def _setup_window(self):
        """Configure window properties"""
        self.setWindowTitle(f"{Config.APP_NAME} {Config.APP_VERSION}")
        self.setGeometry(100, 100, Config.DEFAULT_WINDOW_WIDTH, Config.DEFAULT_WINDOW_HEIGHT)

    def _create_widgets(self):
        """Create toolbar and status bar"""
        toolbar = QToolBar("Sketch", self)
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self._share_action = QAction("Share", self)
        self._clear_action = QAction("Clear", self)
        toolbar.addAction(self._share_action)
        toolbar.addAction(self._clear_action)

        self._status_bar = QStatusBar()
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage("Ready")

    def _connect_signals(self):
        self._share_action.triggered.connect(self.share)
        self._clear_action.triggered.connect(self.clear)
        self._event_bus.error_occurred.connect(self._on_error)
        self._event_bus.export_finished.connect(self._on_export_finished)
        self._event_bus.session_cleared.connect(lambda: self._status_bar.showMessage("Cleared."))

    # ==================== Session ====================

    @property
    def session(self) -> Optional[SketchSession]:
        return self._session

    @property
    def canvas(self) -> Optional[SketchCanvas]:
        return self._canvas

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    def mount_session(self):
        """
        Build a session and canvas and load persisted state.

        Call after the window is shown so the canvas knows its size.
        Corrupt state is reported, wiped, and replaced by a fresh session.
        """
        try:
            self._mount()
        except CorruptSessionError as e:
            logger.error(f"Discarding corrupt session: {e}")
            self._teardown_session()
            self._storage.clear()
            self._event_bus.report_error(
                "session", "Saved drawing could not be read and was discarded."
            )
            self._mount()

        self._event_bus.session_mounted.emit(len(self._session.store))

    def _mount(self):
        session = SketchSession(self._sketch_config, self._storage,
                                share_target=self._share_target, parent=self)
        canvas = SketchCanvas(session, self)
        self._session = session
        self._canvas = canvas
        self.setCentralWidget(canvas)
        # Lay out now so the canvas has its real size before picking an extent
        self.layout().activate()

        canvas.mount()
        session.remount_requested.connect(self._on_remount_requested)
        logger.info(f"Mounted session with {len(session.store)} stroke(s)")

    def _teardown_session(self):
        if self._session is not None:
            self._session.shutdown(flush=False)
            self._session.deleteLater()
        if self._canvas is not None:
            self._canvas.deleteLater()
        self._session = None
        self._canvas = None

    def _on_remount_requested(self):
        self._teardown_session()
        self.mount_session()
        self._event_bus.session_cleared.emit()
        if self._confirm_dialogs:
            QMessageBox.information(self, Config.APP_NAME, "Cleared.")

    # ==================== Actions ====================

    def share(self):
        """Export the drawing through the share target or as a download."""
        if self._session is None:
            return
        self._event_bus.export_started.emit()
        try:
            result = self._session.export()
        except ExportError as e:
            logger.warning(f"Export failed: {e}")
            self._event_bus.report_error("export", str(e))
            return
        self._event_bus.export_finished.emit(result.method, str(result.path or ''))

    def clear(self):
        """Erase everything persisted and start over."""
        if self._session is not None:
            self._session.clear()

    def _on_export_finished(self, method: str, path: str):
        if method == 'share':
            self._status_bar.showMessage("Copied drawing to clipboard")
        elif method == 'download':
            self._status_bar.showMessage(f"Saved {path}")
        else:
            self._status_bar.showMessage("Share cancelled")

    def _on_error(self, error_type: str, message: str):
        self._status_bar.showMessage(message)
        if self._confirm_dialogs:
            QMessageBox.warning(self, f"{Config.APP_NAME} - {error_type}", message)

    # ==================== Settings ====================

    def _load_settings(self):
        geometry = self._settings.value("window/geometry")
        if geometry:
            self.restoreGeometry(geometry)

    def _save_settings(self):
        self._settings.setValue("window/geometry", self.saveGeometry())

    def closeEvent(self, event: QCloseEvent):
        """Handle window close"""
        if self._session is not None:
            self._session.shutdown()
        self._save_settings()
        event.accept()


__all__ = ['MainWindow']
