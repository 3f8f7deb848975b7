"""
Export Service - rasterize the drawing to a shareable PNG

Pipeline:
1. Drop noise strokes shorter than the configured length
2. Compute the padded union bounding box of what remains
3. Paint the strokes onto a QImage scaled by the export zoom
4. Encode PNG and hand it to a share target, or save it as a download
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from PyQt6.QtCore import QBuffer, QByteArray, QIODevice, QPointF, Qt
from PyQt6.QtGui import QColor, QImage, QPainter, QPainterPath, QPen

from ..config import Config
from ..core.errors import ExportError, ShareRejected
from ..core.geometry import BoundingBox, bounding_box, path_length
from ..core.types import Point, Stroke


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SharePayload:
    """One image file offered to a share target."""

    filename: str
    mime_type: str
    data: bytes


class ShareTarget:
    """
    Platform share capability.

    Implementations raise ShareRejected when the user dismisses the share
    sheet or the platform refuses it.
    """

    def can_share(self, payload: SharePayload) -> bool:
        raise NotImplementedError

    def share(self, payload: SharePayload):
        raise NotImplementedError


class ClipboardShareTarget(ShareTarget):
    """Shares the image by placing it on the system clipboard."""

    def __init__(self, clipboard):
        self._clipboard = clipboard

    def can_share(self, payload: SharePayload) -> bool:
        return self._clipboard is not None and payload.mime_type == 'image/png'

    def share(self, payload: SharePayload):
        image = QImage()
        if not image.loadFromData(payload.data, 'PNG'):
            raise ShareRejected("Clipboard could not decode the exported image")
        self._clipboard.setImage(image)


@dataclass(frozen=True)
class ExportResult:
    """How the export was delivered."""

    method: str  # 'share', 'share-rejected' or 'download'
    width: int
    height: int
    path: Optional[Path] = None


def filter_noise(strokes: Sequence[Stroke], min_length: float) -> List[Stroke]:
    """Keep strokes at least ``min_length`` long. 0 keeps everything."""
    if min_length <= 0:
        return list(strokes)
    return [stroke for stroke in strokes if path_length(stroke) >= min_length]


def export_bounds(strokes: Sequence[Stroke], padding: float) -> BoundingBox:
    """
    Padded union bounding box of all points.

    Raises:
        ExportError: If there are no points to export
    """
    points = [point for stroke in strokes for point in stroke]
    if not points:
        raise ExportError("Nothing to export")
    return bounding_box(points).expanded(padding)


def _rgba(values: tuple) -> QColor:
    r, g, b, a = values
    color = QColor(r, g, b)
    color.setAlphaF(a)
    return color


class ExportService:
    """
    Renders drawings to PNG and delivers them.

    Args:
        share_target: Optional platform share capability
        download_dir: Where to save when sharing is unavailable
        noise_length: Minimum stroke length to include (0 = no filter)
    """

    def __init__(
        self,
        share_target: Optional[ShareTarget] = None,
        download_dir: Optional[Path] = None,
        noise_length: float = 8.0,
        padding: float = Config.EXPORT_PADDING,
        zoom: float = Config.EXPORT_ZOOM,
        line_width: float = Config.VIEWPORT_ZOOM,
    ):
        self._share_target = share_target
        self._download_dir = download_dir
        self._noise_length = noise_length
        self._padding = padding
        self._zoom = zoom
        self._line_width = line_width

    # ==================== Rendering ====================

    def render(self, strokes: Sequence[Stroke]) -> QImage:
        """
        Paint the noise-filtered strokes onto a new image.

        Raises:
            ExportError: If there is nothing to draw or painting fails
        """
        kept = filter_noise(strokes, self._noise_length)
        box = export_bounds(kept, self._padding)
        zoom = self._zoom

        width = math.ceil(box.width * zoom)
        height = math.ceil(box.height * zoom)
        image = QImage(width, height, QImage.Format.Format_ARGB32)
        if image.isNull():
            raise ExportError(f"Could not allocate a {width}x{height} image")

        image.fill(QColor(Config.BACKGROUND_COLOR))

        painter = QPainter()
        if not painter.begin(image):
            raise ExportError("Couldn't get a painter for the export image")

        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            pen = QPen(_rgba(Config.TEXT_COLOR), self._line_width * zoom)
            pen.setCapStyle(Qt.PenCapStyle.RoundCap)
            pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
            painter.setPen(pen)

            dot_brush = pen.brush()
            for stroke in kept:
                if path_length(stroke) == 0:
                    painter.fillPath(self._dot_path(stroke[0], box), dot_brush)
                else:
                    painter.drawPath(self._stroke_path(stroke, box))
        finally:
            painter.end()

        return image

    def _stroke_path(self, stroke: Sequence[Point], box: BoundingBox) -> QPainterPath:
        zoom = self._zoom
        mapped = [
            QPointF((point.x - box.min_x) * zoom, (point.y - box.min_y) * zoom)
            for point in stroke
        ]
        path = QPainterPath()
        path.moveTo(mapped[0])
        for point in mapped[1:]:
            path.lineTo(point)
        return path

    def _dot_path(self, point: Point, box: BoundingBox) -> QPainterPath:
        """Filled circle for a tap; Qt would drop its zero-length segment."""
        zoom = self._zoom
        radius = self._line_width * zoom / 2
        path = QPainterPath()
        path.addEllipse(
            QPointF((point.x - box.min_x) * zoom, (point.y - box.min_y) * zoom),
            radius, radius,
        )
        return path

    @staticmethod
    def encode_png(image: QImage) -> bytes:
        """
        Encode an image as PNG bytes.

        Raises:
            ExportError: If encoding fails
        """
        data = QByteArray()
        buffer = QBuffer(data)
        if not buffer.open(QIODevice.OpenModeFlag.WriteOnly):
            raise ExportError("Could not open buffer for PNG data")
        try:
            if not image.save(buffer, 'PNG'):
                raise ExportError("PNG encoding failed")
        finally:
            buffer.close()

        png = data.data()
        if not png:
            raise ExportError("PNG encoding produced no data")
        return png

    # ==================== Delivery ====================

    def export(self, strokes: Sequence[Stroke]) -> ExportResult:
        """
        Render, encode and deliver the drawing.

        Share rejection is logged and swallowed without falling back to a
        download.

        Raises:
            ExportError: If rendering or encoding fails
        """
        image = self.render(strokes)
        payload = SharePayload(Config.EXPORT_FILENAME, 'image/png', self.encode_png(image))

        if self._share_target is not None and self._share_target.can_share(payload):
            try:
                self._share_target.share(payload)
            except ShareRejected as e:
                logger.info(f"Share rejected: {e}")
                return ExportResult('share-rejected', image.width(), image.height())
            logger.info(f"Shared {payload.filename} ({image.width()}x{image.height()})")
            return ExportResult('share', image.width(), image.height())

        path = self._write_download(payload)
        return ExportResult('download', image.width(), image.height(), path)

    def _write_download(self, payload: SharePayload) -> Path:
        download_dir = self._download_dir or Config.get_download_dir()
        try:
            download_dir.mkdir(parents=True, exist_ok=True)
            path = download_dir / payload.filename
            path.write_bytes(payload.data)
        except OSError as e:
            raise ExportError(f"Could not save {payload.filename}: {e}") from e

        logger.info(f"Saved export to {path}")
        return path


__all__ = [
    'ExportService',
    'ExportResult',
    'ShareTarget',
    'SharePayload',
    'ClipboardShareTarget',
    'filter_noise',
    'export_bounds',
]
