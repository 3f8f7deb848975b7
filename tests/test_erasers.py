"""Tests for the lasso and hold erase policies."""

import pytest
from PyQt6.QtTest import QTest

from infinite_note.config import ERASE_MODE_HOLD, SketchConfig
from infinite_note.core.erasers import HoldEraser, LassoEraser, create_erase_policy
from infinite_note.core.input_capture import InputCapture
from infinite_note.core.path_store import PathStore
from infinite_note.core.types import Point

from .helpers import SQUARE, ZIGZAG, make_stroke


# ==================== Lasso ====================

class TestLassoEraser:

    def test_scribble_erases_enclosed_strokes(self):
        far_away = make_stroke([(500, 500), (600, 600)])
        dot = make_stroke([(50, 30)])
        store = PathStore([make_stroke(SQUARE), far_away, dot, make_stroke(ZIGZAG)])

        outcome = LassoEraser(8).finish_stroke(store)

        assert not outcome.committed
        assert outcome.erased == 2
        assert store.strokes == [far_away]

    def test_below_threshold_commits(self):
        store = PathStore([make_stroke(SQUARE), make_stroke(ZIGZAG[:4])])

        outcome = LassoEraser(8).finish_stroke(store)

        assert outcome.committed
        assert outcome.erased == 0
        assert len(store) == 2

    def test_crossings_are_not_summed_across_strokes(self):
        line_a = make_stroke([(0, -100), (0, 200)])
        line_b = make_stroke([(200, -100), (200, 200)])
        # Five crossings over line A, then five over line B
        scribble = make_stroke([
            (-10, 0), (10, 10), (-10, 20), (10, 30), (-10, 40), (10, 50),
            (190, 60), (210, 70), (190, 80), (210, 90), (190, 100), (210, 110),
        ])
        eraser = LassoEraser(8)
        store = PathStore([line_a, line_b, scribble])

        assert eraser.max_crossings(scribble, [line_a, line_b]) == 5
        assert eraser.finish_stroke(store).committed
        assert len(store) == 3

    def test_first_stroke_always_commits(self):
        store = PathStore([make_stroke(ZIGZAG)])
        assert LassoEraser(8).finish_stroke(store).committed

    def test_enclosure_uses_half_open_box(self):
        eraser = make_stroke([(0, 0), (10, 10)])
        on_min_corner = make_stroke([(0, 0)])
        on_max_corner = make_stroke([(10, 10)])

        assert LassoEraser.is_enclosed(on_min_corner, eraser)
        assert not LassoEraser.is_enclosed(on_max_corner, eraser)

    def test_empty_store(self):
        assert not LassoEraser(8).finish_stroke(PathStore()).committed


# ==================== Hold ====================

HOLD_MS = 20


@pytest.fixture
def line_store():
    return PathStore([make_stroke([(0, 0), (1000, 0)])])


@pytest.fixture
def hold_setup(line_store):
    eraser = HoldEraser(line_store, hold_duration_ms=HOLD_MS, hit_width=80)
    capture = InputCapture(line_store, eraser)
    eraser.bind_input(capture)
    return eraser, capture


def wait_for_hold():
    QTest.qWait(HOLD_MS * 5)


class TestHoldEraser:

    def test_hold_on_stroke_erases_it_and_drops_in_progress_stroke(self, hold_setup, line_store):
        eraser, capture = hold_setup
        erased = []
        eraser.stroke_erased.connect(lambda: erased.append(True))

        assert eraser.press(1, 500, 50)
        capture.on_pointer_down(1, Point(500, 50, 0, 0.5))
        assert eraser.is_holding

        wait_for_hold()

        assert len(line_store) == 0
        assert not capture.is_drawing
        assert erased == [True]

    def test_press_off_stroke_does_nothing(self, hold_setup):
        eraser, _ = hold_setup
        assert not eraser.press(1, 500, 200)
        assert not eraser.is_holding

    def test_release_before_timeout_keeps_stroke(self, hold_setup, line_store):
        eraser, _ = hold_setup
        cancelled = []
        eraser.hold_cancelled.connect(lambda: cancelled.append(True))

        eraser.press(1, 500, 0)
        eraser.release(1)
        wait_for_hold()

        assert len(line_store) == 1
        assert cancelled == [True]

    def test_moving_out_of_hit_region_aborts(self, hold_setup, line_store):
        eraser, _ = hold_setup
        eraser.press(1, 500, 0)
        eraser.move(1, 520, 40)
        assert eraser.is_holding

        eraser.move(1, 500, 300)
        assert not eraser.is_holding
        wait_for_hold()
        assert len(line_store) == 1

    def test_other_pointer_does_not_abort(self, hold_setup):
        eraser, _ = hold_setup
        eraser.press(1, 500, 0)
        eraser.release(2)
        assert eraser.is_holding
        eraser.stop()

    def test_hit_test_prefers_topmost(self, line_store):
        upper = make_stroke([(0, 10), (1000, 10)])
        line_store.replace_all(line_store.strokes + [upper])
        eraser = HoldEraser(line_store, HOLD_MS, 80)

        assert eraser.hit_test(500, 5) is line_store.strokes[1]

    def test_hit_test_skips_in_progress_stroke(self, hold_setup, line_store):
        eraser, capture = hold_setup
        capture.on_pointer_down(1, Point(0, 5000, 0, 0.5))

        assert eraser.hit_test(0, 5000) is None
        assert eraser.hit_test(0, 0) is line_store.strokes[0]

    def test_finish_stroke_always_commits(self, line_store):
        eraser = HoldEraser(line_store)
        assert eraser.finish_stroke(line_store).committed


def test_create_erase_policy_follows_config():
    store = PathStore()
    assert isinstance(create_erase_policy(SketchConfig(), store), LassoEraser)
    hold = create_erase_policy(SketchConfig(erase_mode=ERASE_MODE_HOLD), store)
    assert isinstance(hold, HoldEraser)
