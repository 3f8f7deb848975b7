"""Tests for SketchSession wiring."""

import pytest

from infinite_note.config import Config, SketchConfig
from infinite_note.core.errors import CorruptSessionError
from infinite_note.core.erasers import HoldEraser, LassoEraser
from infinite_note.core.session import SketchSession
from infinite_note.core.types import CanvasExtent, Viewport
from infinite_note.services.session_storage import SessionStorage

from .helpers import SQUARE, ZIGZAG


class FakeClock:

    def __init__(self, now=1000):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def storage(settings):
    return SessionStorage(settings)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session(storage, clock):
    session = SketchSession(SketchConfig(), storage, clock=clock)
    session.load(1000, 500)
    yield session
    session.shutdown(flush=False)


def draw(session, coords, pointer_id=1):
    (x, y), rest = coords[0], coords[1:-1]
    session.pointer_down(pointer_id, x, y, 0.5)
    for x, y in rest:
        session.pointer_move(pointer_id, x, y, 0.5)
    x, y = coords[-1]
    return session.pointer_up(pointer_id, x, y, 0.5)


def test_first_load_saves_defaults(session, settings):
    assert session.extent == CanvasExtent(6400, 6400)
    assert session.origin == 1000
    assert settings.value("canvasWidth") == "6400"
    assert settings.value("mountedTime") == "1000"


def test_reload_keeps_origin_and_strokes(session, storage, settings):
    draw(session, SQUARE)
    storage.flush()
    session.shutdown()

    later = SketchSession(SketchConfig(), SessionStorage(settings), clock=FakeClock(9000))
    later.load(1000, 500)

    assert later.origin == 1000
    assert len(later.store) == 1
    later.shutdown(flush=False)


def test_point_times_are_relative_to_origin(session, clock):
    session.pointer_down(1, 0, 0, 0.5)
    clock.now = 1250
    session.pointer_up(1, 5, 5, 0.5)

    assert [p.t for p in session.store.strokes[0]] == [0, 250]


def test_strokes_are_saved_after_debounce(session, storage):
    draw(session, SQUARE)
    assert storage.has_pending_save

    storage.flush()
    assert len(storage.load(CanvasExtent(1280, 1280), 0).drawing) == 1


def test_lasso_variant_erases(session):
    assert isinstance(session.erase_policy, LassoEraser)
    draw(session, SQUARE)
    outcome = draw(session, ZIGZAG)

    assert outcome.erased == 1
    assert len(session.store) == 0


def test_growth_is_persisted_and_scrolls(session, settings):
    scrolls = []
    session.scroll_requested.connect(lambda dx, dy: scrolls.append((dx, dy)))
    draw(session, SQUARE)

    session.update_viewport(Viewport(1000, -100, 2000, 1000))
    session.tiles.flush()

    assert session.extent == CanvasExtent(6400, 7680)
    assert settings.value("canvasHeight") == "7680"
    assert session.store.strokes[0][0].y == 1280
    assert scrolls == [(0, 1280)]


def test_clear_wipes_storage_and_requests_remount(session, storage):
    remounts = []
    session.remount_requested.connect(lambda: remounts.append(True))
    draw(session, SQUARE)

    session.clear()

    assert remounts == [True]
    assert not storage.has_session()
    assert not storage.has_pending_save


def test_load_twice_is_an_error(session):
    with pytest.raises(RuntimeError):
        session.load(1000, 500)


def test_corrupt_storage_fails_load(storage, settings, clock):
    settings.setValue("paths", "[[")
    session = SketchSession(SketchConfig(), storage, clock=clock)

    with pytest.raises(CorruptSessionError):
        session.load(1000, 500)
    assert not session.is_loaded


def test_hold_variant(storage, clock):
    session = SketchSession(Config.VARIANTS["hold"], storage, clock=clock)

    assert isinstance(session.erase_policy, HoldEraser)
    assert session.hold_eraser is session.erase_policy
    session.shutdown(flush=False)


def test_export_downloads_drawing(storage, clock, tmp_path):
    session = SketchSession(SketchConfig(), storage, download_dir=tmp_path, clock=clock)
    session.load(1000, 500)
    draw(session, SQUARE)

    result = session.export()

    assert result.method == "download"
    assert (tmp_path / "note.png").exists()
    session.shutdown(flush=False)


def test_pointer_routing_reports_acceptance(session):
    assert session.pointer_down(1, 0, 0, 0.5)
    assert not session.pointer_down(2, 10, 10, 0.5)
    assert session.pointer_move(1, 5, 0, 0.5)
    assert not session.pointer_move(2, 5, 0, 0.5)
    assert session.pointer_up(2, 5, 0, 0.5) is None
    assert session.pointer_up(1, 10, 0, 0.5).committed
    assert not session.pointer_cancel(1)


def test_shutdown_unwires_saving_once(session, storage):
    session.shutdown()
    session.shutdown()
    session.store.replace_all([])

    assert not storage.has_pending_save


def test_shutdown_before_load(storage, clock):
    session = SketchSession(SketchConfig(), storage, clock=clock)
    session.shutdown()
    assert not session.is_loaded
