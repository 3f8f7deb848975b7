"""
SketchCanvas - QGraphicsView host for a SketchSession

Renders strokes as round-capped polylines over a dotted grid, converts
mouse and tablet input into canvas-space pointer events, and reports the
visible rectangle back to the session so the canvas can grow.
"""

import logging
from typing import List, Optional

from PyQt6.QtCore import QEvent, QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QPainter, QPainterPath, QPen, QTabletEvent
from PyQt6.QtWidgets import QGraphicsPathItem, QGraphicsScene, QGraphicsView, QWidget

from ..config import Config
from ..core.errors import InitializationError
from ..core.geometry import path_length
from ..core.session import SketchSession
from ..core.types import Stroke, Viewport


logger = logging.getLogger(__name__)


def _rgba(values: tuple) -> QColor:
    r, g, b, a = values
    color = QColor(r, g, b)
    color.setAlphaF(a)
    return color


def is_dot(stroke: Stroke) -> bool:
    """A tap: every point sits at the same spot."""
    return bool(stroke) and path_length(stroke) == 0


def stroke_to_painter_path(stroke: Stroke, dot_radius: float = Config.VIEWPORT_ZOOM / 2) -> QPainterPath:
    """
    Polyline through the stroke's points.

    Qt drops zero-length segments, so a tap becomes a circle of
    ``dot_radius`` that the caller fills instead of stroking.
    """
    path = QPainterPath()
    if not stroke:
        return path
    if is_dot(stroke):
        path.addEllipse(QPointF(stroke[0].x, stroke[0].y), dot_radius, dot_radius)
        return path
    path.moveTo(stroke[0].x, stroke[0].y)
    for point in stroke[1:]:
        path.lineTo(point.x, point.y)
    return path


class SketchCanvas(QGraphicsView):
    """
    Infinite canvas view.

    The scene spans the canvas plus half a tile of sentinel margin on every
    side. One screen pixel shows ``Config.VIEWPORT_ZOOM`` canvas units.
    """

    def __init__(self, session: SketchSession, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self._session = session
        self._scene = QGraphicsScene(self)
        self._items: List[QGraphicsPathItem] = []
        self._pen = QPen(_rgba(Config.TEXT_COLOR), Config.VIEWPORT_ZOOM)
        self._pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        self._pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
        self._tablet_down = False
        self._carry_x = 0.0
        self._carry_y = 0.0

        self._setup_view()

        session.store.paths_changed.connect(self._sync_items)
        session.scroll_requested.connect(self.scroll_canvas)

    def _setup_view(self):
        """Configure the graphics view."""
        if self.viewport() is None:
            raise InitializationError("Canvas viewport is not available")

        self.setScene(self._scene)
        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setViewportUpdateMode(QGraphicsView.ViewportUpdateMode.MinimalViewportUpdate)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setFrameShape(QGraphicsView.Shape.NoFrame)
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.NoAnchor)
        self.setBackgroundBrush(QBrush(QColor(Config.BACKGROUND_COLOR)))
        self.setContextMenuPolicy(Qt.ContextMenuPolicy.PreventContextMenu)
        self.setAttribute(Qt.WidgetAttribute.WA_TabletTracking, True)

        scale = 1 / Config.VIEWPORT_ZOOM
        self.scale(scale, scale)

    @property
    def session(self) -> SketchSession:
        return self._session

    # ==================== Mounting ====================

    def mount(self):
        """
        Load the session sized to this view and scroll to the start position.

        The view must already be laid out; its viewport size picks the
        default canvas extent.
        """
        zoom = Config.VIEWPORT_ZOOM
        size = self.viewport().size()
        self._session.load(size.width() * zoom, size.height() * zoom)
        self._session.tiles.extent_changed.connect(self._update_scene_rect)
        self._update_scene_rect()
        self._sync_items()

        start = Config.INITIAL_SCROLL_TILES * self._session.config.tile_size
        self.scroll_to(start, start)

    def _update_scene_rect(self, *_):
        extent = self._session.extent
        margin = self._session.tiles.sentinel_size
        self._scene.setSceneRect(QRectF(
            -margin, -margin,
            extent.width + 2 * margin,
            extent.height + 2 * margin,
        ))

    # ==================== Scrolling ====================

    def visible_canvas_rect(self) -> QRectF:
        return self.mapToScene(self.viewport().rect()).boundingRect()

    def scroll_to(self, x: float, y: float):
        """Put canvas point (x, y) at the top-left corner of the view."""
        rect = self.visible_canvas_rect()
        self.centerOn(x + rect.width() / 2, y + rect.height() / 2)
        self._report_viewport()

    def scroll_canvas(self, dx: float, dy: float):
        """Scroll by canvas units, carrying sub-pixel amounts to the next call."""
        zoom = Config.VIEWPORT_ZOOM
        self._carry_x += dx / zoom
        self._carry_y += dy / zoom
        px = int(self._carry_x)
        py = int(self._carry_y)
        self._carry_x -= px
        self._carry_y -= py

        if px:
            bar = self.horizontalScrollBar()
            bar.setValue(bar.value() + px)
        if py:
            bar = self.verticalScrollBar()
            bar.setValue(bar.value() + py)

    def scrollContentsBy(self, dx: int, dy: int):
        super().scrollContentsBy(dx, dy)
        self._report_viewport()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        if self._session.is_loaded:
            self._report_viewport()

    def wheelEvent(self, event):
        delta = event.pixelDelta()
        if delta.isNull():
            delta = event.angleDelta() / 8
        zoom = Config.VIEWPORT_ZOOM
        self.scroll_canvas(-delta.x() * zoom, -delta.y() * zoom)
        event.accept()

    def _report_viewport(self):
        if not self._session.is_loaded:
            return
        rect = self.visible_canvas_rect()
        self._session.update_viewport(Viewport(rect.x(), rect.y(), rect.width(), rect.height()))

    # ==================== Rendering ====================

    def _sync_items(self):
        strokes = self._session.store.strokes
        while len(self._items) > len(strokes):
            self._scene.removeItem(self._items.pop())
        while len(self._items) < len(strokes):
            item = QGraphicsPathItem()
            self._scene.addItem(item)
            self._items.append(item)
        for item, stroke in zip(self._items, strokes):
            if is_dot(stroke):
                item.setPen(QPen(Qt.PenStyle.NoPen))
                item.setBrush(self._pen.brush())
            else:
                item.setPen(self._pen)
                item.setBrush(QBrush(Qt.BrushStyle.NoBrush))
            item.setPath(stroke_to_painter_path(stroke, self._pen.widthF() / 2))

    def drawBackground(self, painter: QPainter, rect: QRectF):
        """Dotted grid; dots on tile corners are darker."""
        super().drawBackground(painter, rect)
        if not self._session.is_loaded:
            return

        extent = self._session.extent
        grid = Config.GRID_SIZE
        tile = self._session.config.tile_size
        radius = Config.VIEWPORT_ZOOM
        left = max(0, int(rect.left() // grid))
        top = max(0, int(rect.top() // grid))
        right = min(extent.width // grid, int(rect.right() // grid) + 1)
        bottom = min(extent.height // grid, int(rect.bottom() // grid) + 1)

        painter.setPen(Qt.PenStyle.NoPen)
        grid_brush = QBrush(_rgba(Config.GRID_DOT_COLOR))
        tile_brush = QBrush(_rgba(Config.TILE_DOT_COLOR))
        for gy in range(top, bottom):
            for gx in range(left, right):
                cx, cy = gx * grid, gy * grid
                on_tile = cx % tile == 0 and cy % tile == 0
                painter.setBrush(tile_brush if on_tile else grid_brush)
                painter.drawEllipse(QPointF(cx, cy), radius, radius)

    # ==================== Input ====================

    def _canvas_pos(self, pos) -> QPointF:
        return self.mapToScene(pos.toPoint())

    def viewportEvent(self, event):
        """Route tablet events before Qt synthesizes mouse events from them."""
        if event.type() in (QEvent.Type.TabletPress, QEvent.Type.TabletMove,
                            QEvent.Type.TabletRelease):
            self._handle_tablet_event(event)
            return True
        return super().viewportEvent(event)

    def _handle_tablet_event(self, event: QTabletEvent):
        pointer_id = Config.TABLET_POINTER_ID
        pos = self._canvas_pos(event.position())
        pressure = event.pressure()
        event_type = event.type()

        if event_type == QEvent.Type.TabletPress:
            self._tablet_down = True
            self._session.pointer_down(pointer_id, pos.x(), pos.y(), pressure)
        elif event_type == QEvent.Type.TabletMove:
            if self._tablet_down:
                self._session.pointer_move(pointer_id, pos.x(), pos.y(), pressure)
        elif event_type == QEvent.Type.TabletRelease:
            self._tablet_down = False
            self._session.pointer_up(pointer_id, pos.x(), pos.y(), pressure)
        event.accept()

    def mousePressEvent(self, event):
        if self._tablet_down or event.button() != Qt.MouseButton.LeftButton:
            event.ignore()
            return
        pos = self._canvas_pos(event.position())
        self._session.pointer_down(Config.MOUSE_POINTER_ID, pos.x(), pos.y(), Config.MOUSE_PRESSURE)
        event.accept()

    def mouseMoveEvent(self, event):
        if self._tablet_down:
            event.ignore()
            return
        pos = self._canvas_pos(event.position())
        self._session.pointer_move(Config.MOUSE_POINTER_ID, pos.x(), pos.y(), Config.MOUSE_PRESSURE)
        event.accept()

    def mouseReleaseEvent(self, event):
        if self._tablet_down or event.button() != Qt.MouseButton.LeftButton:
            event.ignore()
            return
        pos = self._canvas_pos(event.position())
        self._session.pointer_up(Config.MOUSE_POINTER_ID, pos.x(), pos.y(), Config.MOUSE_PRESSURE)
        event.accept()

    def focusOutEvent(self, event):
        self._session.pointer_cancel(Config.MOUSE_POINTER_ID)
        self._session.pointer_cancel(Config.TABLET_POINTER_ID)
        self._tablet_down = False
        super().focusOutEvent(event)


__all__ = ['SketchCanvas', 'stroke_to_painter_path', 'is_dot']
