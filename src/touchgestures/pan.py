"""Pan and screen-edge pan recognizers (continuous).

A pan begins once the focal point travels beyond the touch slop with an
acceptable number of fingers down. Every later move reports CHANGED with
the accumulated translation and the current velocity; lifting the last
finger ends it.

The screen-edge variant additionally requires the first touch to land
within ``edge_margin`` of the configured edge and the initial motion to
head away from that edge.
"""

from __future__ import annotations

import logging
import sys
from enum import Enum

from touchgestures.recognizer import Recognizer, State
from touchgestures.samples import TouchAction, TouchSample
from touchgestures.velocity import VelocityTracker, clear_if_pointers_oppose

logger = logging.getLogger("touchgestures.pan")


class RectEdge(Enum):
    NONE = "none"
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"


def touch_direction(x1: float, y1: float, x2: float, y2: float) -> RectEdge:
    """Edge a motion from (x1, y1) to (x2, y2) moves away from."""
    dx = x2 - x1
    dy = y2 - y1
    if abs(dx) > abs(dy):
        return RectEdge.LEFT if dx > 0 else RectEdge.RIGHT
    if abs(dy) > 0:
        return RectEdge.TOP if dy > 0 else RectEdge.BOTTOM
    return RectEdge.NONE


class PanRecognizer(Recognizer):
    kind = "pan"
    continuous = True

    def __init__(self, scheduler=None, config=None, tag=None):
        super().__init__(scheduler, config, tag)
        self._minimum_number_of_touches = 1
        self._maximum_number_of_touches = sys.maxsize
        self._tracker = VelocityTracker()
        self._last_focus = (0.0, 0.0)
        self._down_focus = (0.0, 0.0)
        self._scroll = (0.0, 0.0)
        self.translation_x = 0.0
        self.translation_y = 0.0
        self.x_velocity = 0.0
        self.y_velocity = 0.0

    @property
    def minimum_number_of_touches(self) -> int:
        return self._minimum_number_of_touches

    @minimum_number_of_touches.setter
    def minimum_number_of_touches(self, value: int):
        self._minimum_number_of_touches = int(self._check_config("minimum_number_of_touches", value, 1))

    @property
    def maximum_number_of_touches(self) -> int:
        return self._maximum_number_of_touches

    @maximum_number_of_touches.setter
    def maximum_number_of_touches(self, value: int):
        self._maximum_number_of_touches = int(
            self._check_config("maximum_number_of_touches", value, self._minimum_number_of_touches)
        )

    @property
    def scroll_x(self) -> float:
        """Focal point delta along x since the previous move."""
        return -self._scroll[0]

    @property
    def scroll_y(self) -> float:
        return -self._scroll[1]

    @property
    def translation(self) -> tuple[float, float]:
        return self.translation_x, self.translation_y

    @property
    def velocity(self) -> tuple[float, float]:
        return self.x_velocity, self.y_velocity

    def _accepts_down(self, sample: TouchSample) -> bool:
        return True

    def _accepts_direction(self, focus: tuple[float, float]) -> bool:
        return True

    def _on_touch(self, sample: TouchSample) -> bool:
        focus = self._location
        count = sample.pointer_count
        action = sample.action
        max_velocity = self.config.maximum_fling_velocity
        self._number_of_touches = count

        if action == TouchAction.POINTER_DOWN:
            self._last_focus = self._down_focus = focus
            self._tracker.add_movement(sample)
            if self._state is State.POSSIBLE and count > self._maximum_number_of_touches:
                self.set_state(State.FAILED)
                self._messages.cancel(self.MSG_RESET)

        elif action == TouchAction.POINTER_UP:
            self._last_focus = self._down_focus = focus
            self._number_of_touches = count - 1
            clear_if_pointers_oppose(self._tracker, sample, max_velocity)
            if self._state is State.POSSIBLE and count - 1 < self._minimum_number_of_touches:
                self.set_state(State.FAILED)
                self._messages.cancel(self.MSG_RESET)

        elif action == TouchAction.DOWN:
            self._last_focus = self._down_focus = focus
            self._tracker.clear()
            self._tracker.add_movement(sample)
            self._started = False
            self.translation_x = self.translation_y = 0.0
            self.x_velocity = self.y_velocity = 0.0

            self._stop_listening_for_dependency()
            self._messages.cancel(self.MSG_RESET)

            if self._accepts_down(sample):
                self.set_state(State.POSSIBLE)
            else:
                self.set_state(State.FAILED)
            self._began_firing_events = False

        elif action == TouchAction.MOVE:
            self._scroll = (self._last_focus[0] - focus[0], self._last_focus[1] - focus[1])
            self._tracker.add_movement(sample)

            if self._state is State.POSSIBLE and not self._started:
                dx = focus[0] - self._down_focus[0]
                dy = focus[1] - self._down_focus[1]
                if dx * dx + dy * dy > self.config.touch_slop_square:
                    self._tracker.compute_current_velocity(1000.0, max_velocity)
                    self.x_velocity = self._tracker.x_velocity()
                    self.y_velocity = self._tracker.y_velocity()
                    self.translation_x -= self._scroll[0]
                    self.translation_y -= self._scroll[1]
                    self._last_focus = focus
                    self._started = True

                    if (
                        self._minimum_number_of_touches <= count <= self._maximum_number_of_touches
                        and self._accepts_direction(focus)
                    ):
                        self._try_recognize(State.BEGAN)
                    else:
                        self.set_state(State.FAILED)

            elif self.in_state(State.BEGAN, State.CHANGED):
                self.translation_x -= self._scroll[0]
                self.translation_y -= self._scroll[1]

                self._tracker.compute_current_velocity(1000.0, max_velocity)
                primary = sample.pointers[0].id if sample.pointers else None
                self.x_velocity = self._tracker.x_velocity(primary)
                self.y_velocity = self._tracker.y_velocity(primary)

                if self.began_firing_events:
                    self.set_state(State.CHANGED)
                    self.fire_action_event()

                self._last_focus = focus

        elif action == TouchAction.UP:
            if self.in_state(State.BEGAN, State.CHANGED):
                began = self.began_firing_events
                self.set_state(State.ENDED)
                if began:
                    self.fire_action_event()

            if self._state is State.POSSIBLE or not self._started:
                self.x_velocity = self.y_velocity = 0.0

            self._tracker.clear()
            self._post_reset()

        return self.cancels_touches_in_view

    def _on_cancel(self):
        self._tracker.clear()


class ScreenEdgePanRecognizer(PanRecognizer):
    """Pan that must start at one edge of the touch surface."""

    kind = "screen_edge_pan"

    def __init__(self, scheduler=None, config=None, tag=None):
        super().__init__(scheduler, config, tag)
        self.edge = RectEdge.LEFT
        self._edge_margin = self.config.edge_margin
        self.surface_width = self.config.surface_width
        self.surface_height = self.config.surface_height

    @property
    def edge_margin(self) -> float:
        return self._edge_margin

    @edge_margin.setter
    def edge_margin(self, value: float):
        self._edge_margin = self._check_config("edge_margin", value, 0)

    def _accepts_down(self, sample: TouchSample) -> bool:
        if not sample.pointers:
            return False
        x, y = sample.pointers[0].x, sample.pointers[0].y
        margin = self._edge_margin

        if self.edge is RectEdge.LEFT:
            return x <= margin
        if self.edge is RectEdge.TOP:
            return y <= margin
        if self.edge is RectEdge.RIGHT:
            if self.surface_width is None:
                logger.warning("%r has no surface_width; right edge cannot match", self)
                return False
            return x >= self.surface_width - margin
        if self.edge is RectEdge.BOTTOM:
            if self.surface_height is None:
                logger.warning("%r has no surface_height; bottom edge cannot match", self)
                return False
            return y >= self.surface_height - margin
        return False

    def _accepts_direction(self, focus: tuple[float, float]) -> bool:
        return touch_direction(self._down_focus[0], self._down_focus[1], focus[0], focus[1]) is self.edge
