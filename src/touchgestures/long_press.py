"""Long-press recognizer: a continuous gesture.

The required number of fingers must press and stay within the allowable
movement for ``minimum_press_duration``. The gesture then begins; moving
beyond the touch slop afterwards produces CHANGED updates, and lifting the
fingers ends it. With ``taps_required > 0`` the press must follow that many
quick taps.
"""

from __future__ import annotations

import logging

from touchgestures.recognizer import Recognizer, Resolution, State
from touchgestures.samples import TouchAction, TouchSample
from touchgestures.scheduler import Message

logger = logging.getLogger("touchgestures.long_press")


class LongPressRecognizer(Recognizer):
    kind = "long_press"
    continuous = True

    MSG_FAILED = 2
    MSG_POINTER_UP = 3
    MSG_LONG_PRESS = 4

    def __init__(self, scheduler=None, config=None, tag=None):
        super().__init__(scheduler, config, tag)
        self._touches_required = 1
        self._taps_required = 0
        self._minimum_press_duration = self.config.tap_timeout + self.config.long_press_timeout
        self._allowable_movement = self.config.touch_slop
        self._num_taps = 0
        self._always_in_tap_region = False
        self._moved = False
        self._down_focus = (0.0, 0.0)

    @property
    def touches_required(self) -> int:
        return self._touches_required

    @touches_required.setter
    def touches_required(self, value: int):
        self._touches_required = int(self._check_config("touches_required", value, 1))

    @property
    def taps_required(self) -> int:
        """Quick taps that must precede the press. Default 0."""
        return self._taps_required

    @taps_required.setter
    def taps_required(self, value: int):
        self._taps_required = int(self._check_config("taps_required", value, 0))

    @property
    def minimum_press_duration(self) -> float:
        return self._minimum_press_duration

    @minimum_press_duration.setter
    def minimum_press_duration(self, value: float):
        self._minimum_press_duration = self._check_config("minimum_press_duration", value, 0, inclusive=False)

    @property
    def allowable_movement(self) -> float:
        """Maximum finger travel before the press begins."""
        return self._allowable_movement

    @allowable_movement.setter
    def allowable_movement(self, value: float):
        self._allowable_movement = self._check_config("allowable_movement", value, 0)

    def handle_message(self, message: Message):
        logger.debug("%r handle_message(%d)", self, message.what)
        if message.what == self.MSG_RESET:
            self._handle_reset()
        elif message.what == self.MSG_FAILED:
            self._handle_failed()
        elif message.what == self.MSG_POINTER_UP:
            self._number_of_touches = message.arg
        elif message.what == self.MSG_LONG_PRESS:
            self._handle_long_press()

    def _on_dependency_failed(self):
        if self._moved and self.began_firing_events:
            self.set_state(State.CHANGED)

    def _on_dependency_succeeded(self):
        self._num_taps = 0

    def _distance_from_down(self, focus: tuple[float, float]) -> float:
        dx = focus[0] - self._down_focus[0]
        dy = focus[1] - self._down_focus[1]
        return dx * dx + dy * dy

    def _on_touch(self, sample: TouchSample) -> bool:
        focus = self._location
        count = sample.pointer_count
        action = sample.action

        if action == TouchAction.DOWN:
            self._messages.cancel_all()
            self._always_in_tap_region = True
            self._number_of_touches = count
            self._moved = False

            if not self._started:
                self._stop_listening_for_dependency()
                self.set_state(State.POSSIBLE)
                self._began_firing_events = False
                self._num_taps = 0
                self._started = True
            else:
                self._num_taps += 1

            if self._num_taps == self._taps_required:
                self._messages.send_at(self.MSG_LONG_PRESS, sample.down_time + self._minimum_press_duration)
            else:
                timeout = min(self.config.long_press_timeout, self._minimum_press_duration - 1)
                self._messages.send(self.MSG_FAILED, timeout)

            self._down_focus = focus

        elif action == TouchAction.POINTER_DOWN:
            if self._state is State.POSSIBLE and self._started:
                self._messages.cancel(self.MSG_POINTER_UP)
                self._number_of_touches = count
                if count > self._touches_required:
                    self._messages.cancel_all()
                    self.set_state(State.FAILED)
                self._down_focus = focus
            elif self.in_state(State.BEGAN, State.CHANGED) and self._started:
                self._number_of_touches = count

        elif action == TouchAction.POINTER_UP:
            if self._state is State.POSSIBLE and self._started:
                self._messages.cancel(self.MSG_POINTER_UP)
                self._down_focus = focus
                self._messages.send(
                    self.MSG_POINTER_UP, self.config.tap_timeout, arg=self._number_of_touches - 1
                )
            elif self.in_state(State.BEGAN, State.CHANGED):
                if self._number_of_touches - 1 < self._touches_required:
                    began = self.began_firing_events
                    self.set_state(State.ENDED)
                    if began:
                        self.fire_action_event()
                    self._began_firing_events = False

        elif action == TouchAction.MOVE:
            if self._state is State.POSSIBLE and self._started:
                if self._always_in_tap_region:
                    distance = self._distance_from_down(focus)
                    if distance > self._allowable_movement ** 2:
                        logger.debug("%r moved too much: %.1f", self, distance)
                        self._always_in_tap_region = False
                        self._messages.cancel_all()
                        self.set_state(State.FAILED)
            elif self._state is State.BEGAN:
                if not self._moved and self._distance_from_down(focus) > self.config.touch_slop_square:
                    self._moved = True
                    if self.began_firing_events:
                        self.set_state(State.CHANGED)
                        self.fire_action_event()
            elif self._state is State.CHANGED:
                self.set_state(State.CHANGED)
                if self.began_firing_events:
                    self.fire_action_event()

        elif action == TouchAction.UP:
            self._messages.cancel(self.MSG_RESET, self.MSG_POINTER_UP, self.MSG_LONG_PRESS)

            if self._state is State.POSSIBLE and self._started:
                if self._number_of_touches != self._touches_required:
                    self._started = False
                    self._messages.cancel_all()
                    self.set_state(State.FAILED)
                    self._post_reset()
                elif self._num_taps < self._taps_required:
                    self._messages.cancel(self.MSG_FAILED)
                    self._messages.send(self.MSG_FAILED, self.config.double_tap_timeout)
                else:
                    # released before the press was long enough
                    self._num_taps = 0
                    self._started = False
                    self._messages.cancel_all()
                    self.set_state(State.FAILED)
                    self._post_reset()
            elif self.in_state(State.BEGAN, State.CHANGED):
                self._num_taps = 0
                self._started = False
                began = self.began_firing_events
                self.set_state(State.ENDED)
                if began:
                    self.fire_action_event()
                self._post_reset()
            else:
                self._started = False
                self._post_reset()
            self._began_firing_events = False

        return self.cancels_touches_in_view

    def _on_cancel(self):
        self._num_taps = 0

    def _handle_failed(self):
        self._messages.cancel_all()
        self.set_state(State.FAILED)
        self._began_firing_events = False
        self._started = False

    def _handle_long_press(self):
        logger.debug("%r long press timeout", self)
        self._messages.cancel(self.MSG_FAILED)

        if self._state is not State.POSSIBLE or not self._started:
            return

        if self._number_of_touches != self._touches_required:
            resolution = Resolution.FAILED
            self.set_state(State.FAILED)
            self._began_firing_events = False
        else:
            resolution = self._try_recognize(State.BEGAN)

        if resolution is Resolution.FAILED:
            self._started = False
            self._num_taps = 0
