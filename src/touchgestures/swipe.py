"""Swipe recognizer: a discrete, directional flick.

The required number of fingers must leave the touch slop within
``max_slop_time`` of touching down, heading in an allowed direction, and
then cover ``distance_threshold`` faster than ``velocity_threshold`` before
``max_duration`` has passed. The action fires once, on the qualifying move.
"""

from __future__ import annotations

import logging
from enum import IntFlag
from typing import Optional

from touchgestures.recognizer import Recognizer, Resolution, State
from touchgestures.samples import TouchAction, TouchSample
from touchgestures.velocity import VelocityTracker, clear_if_pointers_oppose

logger = logging.getLogger("touchgestures.swipe")


class SwipeDirection(IntFlag):
    RIGHT = 1 << 1
    LEFT = 1 << 2
    UP = 1 << 3
    DOWN = 1 << 4


class SwipeRecognizer(Recognizer):
    kind = "swipe"
    continuous = False

    def __init__(self, scheduler=None, config=None, tag=None):
        super().__init__(scheduler, config, tag)
        self.direction = SwipeDirection.RIGHT
        self._touches_required = 1
        self._distance_threshold = self.config.swipe_distance_threshold
        self._velocity_threshold = self.config.swipe_velocity_threshold
        self._max_slop_time = self.config.swipe_max_slop_time
        self._max_duration = self.config.swipe_max_duration

        self._tracker = VelocityTracker()
        self._down = False
        self._last_focus = (0.0, 0.0)
        self._down_focus = (0.0, 0.0)
        self._scroll = (0.0, 0.0)
        self.recognized_direction: Optional[SwipeDirection] = None
        self.translation_x = 0.0
        self.translation_y = 0.0
        self.x_velocity = 0.0
        self.y_velocity = 0.0

    @property
    def touches_required(self) -> int:
        return self._touches_required

    @touches_required.setter
    def touches_required(self, value: int):
        self._touches_required = int(self._check_config("touches_required", value, 1))

    @property
    def distance_threshold(self) -> float:
        return self._distance_threshold

    @distance_threshold.setter
    def distance_threshold(self, value: float):
        self._distance_threshold = self._check_config("distance_threshold", value, 0)

    @property
    def velocity_threshold(self) -> float:
        return self._velocity_threshold

    @velocity_threshold.setter
    def velocity_threshold(self, value: float):
        self._velocity_threshold = self._check_config("velocity_threshold", value, 0)

    @property
    def max_slop_time(self) -> float:
        return self._max_slop_time

    @max_slop_time.setter
    def max_slop_time(self, value: float):
        self._max_slop_time = self._check_config("max_slop_time", value, 0, inclusive=False)

    @property
    def max_duration(self) -> float:
        return self._max_duration

    @max_duration.setter
    def max_duration(self, value: float):
        self._max_duration = self._check_config("max_duration", value, 0, inclusive=False)

    @property
    def scroll_x(self) -> float:
        return -self._scroll[0]

    @property
    def scroll_y(self) -> float:
        return -self._scroll[1]

    def _on_dependency_failed(self):
        self._messages.cancel_all()
        if not self._down:
            self._started = False
            self.set_state(State.POSSIBLE)

    @staticmethod
    def _dominant_direction(dx: float, dy: float) -> Optional[SwipeDirection]:
        if abs(dx) > abs(dy):
            return SwipeDirection.RIGHT if dx > 0 else SwipeDirection.LEFT
        if dy != 0:
            return SwipeDirection.DOWN if dy > 0 else SwipeDirection.UP
        return None

    def _touch_direction(self, focus: tuple[float, float]) -> Optional[SwipeDirection]:
        dx = focus[0] - self._down_focus[0]
        dy = focus[1] - self._down_focus[1]
        logger.debug("%r diff %.1fx%.1f velocity %.1fx%.1f", self, dx, dy, self.x_velocity, self.y_velocity)

        direction = self._dominant_direction(dx, dy)
        if direction is None:
            return None
        if direction & (SwipeDirection.RIGHT | SwipeDirection.LEFT):
            distance, speed = abs(dx), abs(self.x_velocity)
        else:
            distance, speed = abs(dy), abs(self.y_velocity)
        if distance > self._distance_threshold and speed > self._velocity_threshold:
            return direction
        return None

    def _update_velocity(self, sample: TouchSample, focus: tuple[float, float]):
        max_velocity = self.config.maximum_fling_velocity
        self._tracker.compute_current_velocity(1000.0, max_velocity)
        if self._tracker.has_velocity():
            self.x_velocity = self._tracker.x_velocity()
            self.y_velocity = self._tracker.y_velocity()
            return

        # Nothing recent enough to fit: average over the whole gesture
        elapsed = sample.event_time - sample.down_time
        if elapsed <= 0:
            self.x_velocity = self.y_velocity = 0.0
            return
        vx = (focus[0] - self._down_focus[0]) * 1000.0 / elapsed
        vy = (focus[1] - self._down_focus[1]) * 1000.0 / elapsed
        self.x_velocity = max(-max_velocity, min(max_velocity, vx))
        self.y_velocity = max(-max_velocity, min(max_velocity, vy))

    def _fail(self):
        self._started = False
        self._began_firing_events = False
        self.set_state(State.FAILED)

    def _on_touch(self, sample: TouchSample) -> bool:
        focus = self._location
        count = sample.pointer_count
        action = sample.action

        self._tracker.add_movement(sample)
        self._number_of_touches = count - 1 if sample.is_pointer_up else count

        if action == TouchAction.POINTER_DOWN:
            self._last_focus = focus
            if self._state is State.POSSIBLE and not self._started and count > self._touches_required:
                self.set_state(State.FAILED)
                self._messages.cancel(self.MSG_RESET)

        elif action == TouchAction.POINTER_UP:
            self._last_focus = focus
            clear_if_pointers_oppose(self._tracker, sample, self.config.maximum_fling_velocity)
            if self._state is State.POSSIBLE and not self._started and count - 1 < self._touches_required:
                self.set_state(State.FAILED)
                self._messages.cancel(self.MSG_RESET)

        elif action == TouchAction.DOWN:
            self._started = False
            self._down = True
            self._last_focus = self._down_focus = focus
            self.translation_x = self.translation_y = 0.0
            self.x_velocity = self.y_velocity = 0.0
            self.recognized_direction = None

            self._stop_listening_for_dependency()
            self._began_firing_events = False
            self._messages.cancel(self.MSG_RESET)
            self.set_state(State.POSSIBLE)

        elif action == TouchAction.MOVE:
            self._scroll = (self._last_focus[0] - focus[0], self._last_focus[1] - focus[1])
            if self._state is State.POSSIBLE:
                self._on_move(sample, focus, count)

        elif action == TouchAction.UP:
            self._tracker.clear()
            self._down = False
            self._messages.cancel(self.MSG_RESET)
            if self.in_state(State.ENDED, State.FAILED) and not self.is_waiting_for_dependency:
                self._post_reset()

        return self.cancels_touches_in_view

    def _on_move(self, sample: TouchSample, focus: tuple[float, float], count: int):
        elapsed = sample.event_time - sample.down_time

        if not self._started:
            dx = focus[0] - self._down_focus[0]
            dy = focus[1] - self._down_focus[1]
            if dx * dx + dy * dy <= self.config.touch_slop_square:
                return

            self._update_velocity(sample, focus)
            self.translation_x -= self._scroll[0]
            self.translation_y -= self._scroll[1]
            self._last_focus = focus
            self._started = True

            if count != self._touches_required:
                self._fail()
                return
            if elapsed > self._max_slop_time:
                logger.debug("%r left the slop too late: %.0fms", self, elapsed)
                self._fail()
                return
            direction = self._dominant_direction(dx, dy)
            if direction is None or not (self.direction & direction):
                self._fail()
                return

        # Tracking: the same move that left the slop may already qualify
        self._update_velocity(sample, focus)
        if elapsed > self._max_duration:
            logger.debug("%r took too long: %.0fms", self, elapsed)
            self._fail()
            return

        direction = self._touch_direction(focus)
        if direction is None:
            return
        if not (self.direction & direction):
            self._fail()
            return

        self.recognized_direction = direction
        if self._try_recognize(State.ENDED) is Resolution.FAILED:
            self._started = False
            self._began_firing_events = False

    def _on_cancel(self):
        self._tracker.clear()
        self._down = False
