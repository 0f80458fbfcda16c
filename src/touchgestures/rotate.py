"""Rotation recognizer: a continuous two-finger gesture.

Tracks the line through two pointers. Once the line turns by more than
``rotation_threshold`` radians between consecutive moves the gesture
begins; every following move with both fingers down reports CHANGED, and
lifting either finger ends it.

Angles follow the surface's coordinate system: on a y-down surface a
positive rotation is clockwise.
"""

from __future__ import annotations

import logging
import math

from touchgestures.recognizer import Recognizer, State
from touchgestures.samples import TouchAction, TouchSample

logger = logging.getLogger("touchgestures.rotate")

INVALID_POINTER_ID = -1


def angle_between_lines(
    x1: float, y1: float, x2: float, y2: float,
    nx1: float, ny1: float, nx2: float, ny2: float,
) -> float:
    """Signed angle from line (x1,y1)-(x2,y2) to line (nx1,ny1)-(nx2,ny2).

    The result is wrapped into [-pi, pi].
    """
    before = math.atan2(y2 - y1, x2 - x1)
    after = math.atan2(ny2 - ny1, nx2 - nx1)
    delta = after - before
    if delta > math.pi:
        delta -= 2 * math.pi
    elif delta < -math.pi:
        delta += 2 * math.pi
    return delta


def normalize_degrees(radians: float) -> float:
    """Convert to degrees folded into [-180, 180]."""
    angle = math.degrees(radians) % 360.0
    if angle > 180.0:
        angle -= 360.0
    return angle


class RotateRecognizer(Recognizer):
    kind = "rotate"
    continuous = True

    def __init__(self, scheduler=None, config=None, tag=None):
        super().__init__(scheduler, config, tag)
        self._rotation_threshold = self.config.rotation_threshold
        self.rotation_in_radians = 0.0
        self.cumulative_rotation = 0.0
        self.velocity = 0.0
        self._ptr1 = INVALID_POINTER_ID
        self._ptr2 = INVALID_POINTER_ID
        self._line = (0.0, 0.0, 0.0, 0.0)
        self._valid = False
        self._previous_time = None

    @property
    def rotation_threshold(self) -> float:
        """Minimum turn in radians between two moves to begin."""
        return self._rotation_threshold

    @rotation_threshold.setter
    def rotation_threshold(self, value: float):
        self._rotation_threshold = self._check_config("rotation_threshold", value, 0)

    @property
    def rotation_in_degrees(self) -> float:
        return normalize_degrees(self.rotation_in_radians)

    def _capture_line(self, sample: TouchSample):
        p1 = sample.pointer(self._ptr1)
        p2 = sample.pointer(self._ptr2)
        self._line = (p1.x, p1.y, p2.x, p2.y)

    def _clear_motion(self):
        self._valid = False
        self._started = False
        self.velocity = 0.0
        self._previous_time = None

    def _on_touch(self, sample: TouchSample) -> bool:
        action = sample.action
        count = sample.pointer_count
        self._number_of_touches = count - 1 if sample.is_pointer_up else count

        if action == TouchAction.DOWN:
            self._clear_motion()
            self.rotation_in_radians = 0.0
            self.cumulative_rotation = 0.0
            self._stop_listening_for_dependency()
            self.set_state(State.POSSIBLE)
            self._began_firing_events = False

        elif action == TouchAction.POINTER_DOWN:
            if count == 2 and self._state is not State.FAILED:
                self._ptr1 = sample.pointers[0].id
                self._ptr2 = sample.pointers[1].id
                self._capture_line(sample)
                self._valid = True
            else:
                self._valid = False
            self._previous_time = sample.event_time

        elif action == TouchAction.POINTER_UP:
            remaining = [p for i, p in enumerate(sample.pointers) if i != sample.action_index]

            if self.in_state(State.BEGAN, State.CHANGED) and len(remaining) < 2:
                self._end()
            elif len(remaining) == 2 and self._state is not State.FAILED:
                self._ptr1 = remaining[0].id
                self._ptr2 = remaining[1].id
                self._capture_line(sample)
                self._valid = True
            else:
                self._valid = False
            self._previous_time = sample.event_time

        elif action == TouchAction.UP:
            self._clear_motion()
            if self.in_state(State.BEGAN, State.CHANGED):
                self._end()

        elif action == TouchAction.MOVE:
            if self._valid and self._state is not State.FAILED:
                self._on_move(sample)

        return self.cancels_touches_in_view

    def _end(self):
        began = self.began_firing_events
        self.set_state(State.ENDED)
        if began:
            self.fire_action_event()
        self._clear_motion()
        self._post_reset()

    def _on_move(self, sample: TouchSample):
        if sample.pointer(self._ptr1) is None or sample.pointer(self._ptr2) is None:
            self._valid = False
            return

        x1, y1, x2, y2 = self._line
        self._capture_line(sample)
        nx1, ny1, nx2, ny2 = self._line

        self.rotation_in_radians = angle_between_lines(x1, y1, x2, y2, nx1, ny1, nx2, ny2)

        if self._previous_time is not None:
            elapsed = sample.event_time - self._previous_time
            self.velocity = self.rotation_in_radians * 1000.0 / elapsed if elapsed > 0 else 0.0
        self._previous_time = sample.event_time

        if not self._started:
            if abs(self.rotation_in_radians) > self._rotation_threshold:
                self._started = True
                self.cumulative_rotation = self.rotation_in_radians
                logger.debug("%r rotation %.4f over threshold", self, self.rotation_in_radians)
                self._try_recognize(State.BEGAN)
        else:
            self.cumulative_rotation += self.rotation_in_radians
            if self._state is State.BEGAN:
                if self.began_firing_events:
                    self.set_state(State.CHANGED)
                    self.fire_action_event()
            elif self._state is State.CHANGED:
                self.set_state(State.CHANGED)
                self.fire_action_event()

    def _on_cancel(self):
        self._clear_motion()
        self._ptr1 = self._ptr2 = INVALID_POINTER_ID
