"""Tests for PNG export."""

import pytest
from PyQt6.QtGui import QColor

from infinite_note.config import Config
from infinite_note.core.errors import ExportError, ShareRejected
from infinite_note.core.geometry import BoundingBox
from infinite_note.services.export_service import (
    ExportService,
    ShareTarget,
    export_bounds,
    filter_noise,
)

from .helpers import make_stroke


PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
DIAGONAL = make_stroke([(10, 20), (50, 80)])


class RecordingShareTarget(ShareTarget):

    def __init__(self, available=True, reject=False):
        self.available = available
        self.reject = reject
        self.payloads = []

    def can_share(self, payload):
        return self.available

    def share(self, payload):
        if self.reject:
            raise ShareRejected("dismissed")
        self.payloads.append(payload)


def test_export_bounds_are_padded():
    assert export_bounds([DIAGONAL], 8) == BoundingBox(2, 12, 58, 88)


def test_export_bounds_of_nothing():
    with pytest.raises(ExportError):
        export_bounds([], 8)


def test_filter_noise():
    dot = make_stroke([(0, 0)])
    short = make_stroke([(0, 0), (3, 4)])
    assert filter_noise([dot, short, DIAGONAL], 8) == [DIAGONAL]
    assert filter_noise([dot, short], 0) == [dot, short]


def test_render_size_and_pixels():
    image = ExportService().render([DIAGONAL])

    assert (image.width(), image.height()) == (448, 608)
    assert image.pixelColor(0, 0) == QColor(Config.BACKGROUND_COLOR)
    # Midpoint (30, 50) lands at ((30 - 2) * 8, (50 - 12) * 8)
    assert image.pixelColor(224, 304).red() < 100


def test_render_only_noise_raises():
    with pytest.raises(ExportError):
        ExportService(noise_length=8).render([make_stroke([(0, 0), (1, 1)])])


@pytest.mark.parametrize("coords", [[(0, 0)], [(0, 0), (0, 0)]])
def test_render_paints_taps_as_dots(coords):
    image = ExportService(noise_length=0).render([make_stroke(coords)])

    assert (image.width(), image.height()) == (128, 128)
    assert image.pixelColor(64, 64).red() < 100
    assert image.pixelColor(0, 0) == QColor(Config.BACKGROUND_COLOR)


def test_encode_png():
    png = ExportService.encode_png(ExportService().render([DIAGONAL]))
    assert png.startswith(PNG_SIGNATURE)


def test_export_downloads_without_share_target(tmp_path):
    result = ExportService(download_dir=tmp_path).export([DIAGONAL])

    assert result.method == "download"
    assert result.path == tmp_path / "note.png"
    assert result.path.read_bytes().startswith(PNG_SIGNATURE)
    assert (result.width, result.height) == (448, 608)


def test_export_shares_when_possible(tmp_path):
    target = RecordingShareTarget()
    result = ExportService(share_target=target, download_dir=tmp_path).export([DIAGONAL])

    assert result.method == "share"
    assert result.path is None
    payload = target.payloads[0]
    assert payload.filename == "note.png"
    assert payload.mime_type == "image/png"
    assert payload.data.startswith(PNG_SIGNATURE)
    assert not (tmp_path / "note.png").exists()


def test_rejected_share_does_not_download(tmp_path):
    target = RecordingShareTarget(reject=True)
    result = ExportService(share_target=target, download_dir=tmp_path).export([DIAGONAL])

    assert result.method == "share-rejected"
    assert not (tmp_path / "note.png").exists()


def test_unavailable_share_falls_back_to_download(tmp_path):
    target = RecordingShareTarget(available=False)
    result = ExportService(share_target=target, download_dir=tmp_path).export([DIAGONAL])

    assert result.method == "download"
    assert target.payloads == []


def test_empty_drawing_raises(tmp_path):
    with pytest.raises(ExportError, match="Nothing to export"):
        ExportService(download_dir=tmp_path).export([])
