"""Tests for the pan and screen-edge pan recognizers."""

import pytest

from touchgestures.config import GestureConfig
from touchgestures.errors import ConfigurationError
from touchgestures.pan import PanRecognizer, RectEdge, ScreenEdgePanRecognizer, touch_direction
from touchgestures.recognizer import State


@pytest.fixture
def pan(scheduler):
    return PanRecognizer(scheduler, tag="pan")


class TestTouchDirection:
    def test_directions(self):
        assert touch_direction(0, 0, 10, 2) is RectEdge.LEFT
        assert touch_direction(10, 0, 0, 2) is RectEdge.RIGHT
        assert touch_direction(0, 0, 2, 10) is RectEdge.TOP
        assert touch_direction(0, 10, 2, 0) is RectEdge.BOTTOM
        assert touch_direction(3, 3, 3, 3) is RectEdge.NONE


class TestPan:
    def test_drag(self, pan, scheduler, touch_script, observe):
        seen = observe(pan)
        touches = touch_script(pan)
        touches.down(0, 0, 0)
        touches.move(10, (5, 0))
        assert pan.state is State.POSSIBLE

        touches.move(20, (20, 0))
        assert pan.state is State.BEGAN
        assert pan.translation == (20, 0)

        touches.move(30, (30, 5))
        assert pan.state is State.CHANGED
        assert pan.translation == (30, 5)
        assert pan.scroll_x == 10
        assert pan.x_velocity > 0

        touches.up(40)
        assert seen.actions == [State.BEGAN, State.CHANGED, State.ENDED]

        scheduler.run_pending()
        assert pan.state is State.POSSIBLE

    def test_every_move_reports_changed(self, pan, touch_script, observe):
        seen = observe(pan)
        touches = touch_script(pan)
        touches.down(0, 0, 0)
        for i in range(1, 6):
            touches.move(i * 10, (i * 20, 0))
        assert seen.actions == [State.BEGAN] + [State.CHANGED] * 4

    def test_stationary_touch_never_begins(self, pan, scheduler, touch_script, observe):
        seen = observe(pan)
        touches = touch_script(pan)
        touches.down(0, 0, 0)
        touches.move(100, (2, 2))
        touches.up(200)
        scheduler.run_pending()
        assert seen.actions == []
        assert pan.state is State.POSSIBLE

    def test_translation_resets_on_down(self, pan, touch_script):
        touches = touch_script(pan)
        touches.down(0, 0, 0)
        touches.move(10, (50, 0))
        touches.up(20)
        touches.down(0, 0, 100)
        assert pan.translation == (0, 0)

    def test_too_few_fingers(self, pan, touch_script):
        pan.minimum_number_of_touches = 2
        touches = touch_script(pan)
        touches.down(0, 0, 0)
        touches.move(10, (30, 0))
        assert pan.state is State.FAILED

    def test_two_finger_pan(self, pan, touch_script):
        pan.minimum_number_of_touches = 2
        touches = touch_script(pan)
        touches.down(0, 0, 0)
        touches.pointer_down(40, 0, 5)
        touches.move(20, (0, 30), (40, 30))
        assert pan.state is State.BEGAN
        assert pan.translation == (0, 30)

    def test_too_many_fingers(self, pan, touch_script):
        pan.maximum_number_of_touches = 1
        touches = touch_script(pan)
        touches.down(0, 0, 0)
        touches.pointer_down(40, 0, 5)
        assert pan.state is State.FAILED

    def test_lifting_below_minimum_fails(self, pan, touch_script):
        pan.minimum_number_of_touches = 2
        touches = touch_script(pan)
        touches.down(0, 0, 0)
        touches.pointer_down(40, 0, 5)
        touches.pointer_up(10)
        assert pan.state is State.FAILED

    def test_maximum_below_minimum_rejected(self, pan):
        pan.minimum_number_of_touches = 2
        with pytest.raises(ConfigurationError):
            pan.maximum_number_of_touches = 1

    def test_cancel_mid_drag(self, pan, touch_script, observe):
        seen = observe(pan)
        touches = touch_script(pan)
        touches.down(0, 0, 0)
        touches.move(10, (30, 0))
        touches.cancel(20)
        assert pan.state is State.CANCELLED
        assert seen.actions == [State.BEGAN]


class TestScreenEdgePan:
    def test_left_edge(self, scheduler, touch_script, observe):
        pan = ScreenEdgePanRecognizer(scheduler)
        seen = observe(pan)
        touches = touch_script(pan)
        touches.down(5, 100, 0)
        touches.move(10, (30, 100))
        assert pan.state is State.BEGAN
        assert seen.actions == [State.BEGAN]

    def test_touch_away_from_edge_fails(self, scheduler, touch_script):
        pan = ScreenEdgePanRecognizer(scheduler)
        touches = touch_script(pan)
        touches.down(100, 100, 0)
        assert pan.state is State.FAILED

    def test_wrong_direction_fails(self, scheduler, touch_script):
        pan = ScreenEdgePanRecognizer(scheduler)
        touches = touch_script(pan)
        touches.down(5, 100, 0)
        touches.move(10, (5, 130))
        assert pan.state is State.FAILED

    def test_top_edge(self, scheduler, touch_script):
        pan = ScreenEdgePanRecognizer(scheduler)
        pan.edge = RectEdge.TOP
        touches = touch_script(pan)
        touches.down(200, 10, 0)
        touches.move(10, (200, 40))
        assert pan.state is State.BEGAN

    def test_right_edge_uses_surface_width(self, scheduler, touch_script):
        config = GestureConfig(surface_width=400, edge_margin=10)
        pan = ScreenEdgePanRecognizer(scheduler, config)
        pan.edge = RectEdge.RIGHT
        touches = touch_script(pan)
        touches.down(395, 100, 0)
        touches.move(10, (370, 100))
        assert pan.state is State.BEGAN

    def test_bottom_edge_without_surface_size(self, scheduler, touch_script, caplog):
        pan = ScreenEdgePanRecognizer(scheduler)
        pan.edge = RectEdge.BOTTOM
        touches = touch_script(pan)
        touches.down(100, 995, 0)
        assert pan.state is State.FAILED
        assert "surface_height" in caplog.text
