"""Tap recognizer: a discrete gesture for single or multiple taps.

The required number of fingers must touch down together, stay inside the
tap slop, and lift before the tap timeout, the required number of times,
with each tap following the previous one within the double-tap timeout.
"""

from __future__ import annotations

import logging

from touchgestures.recognizer import Recognizer, Resolution, State
from touchgestures.samples import TouchAction, TouchSample
from touchgestures.scheduler import Message

logger = logging.getLogger("touchgestures.tap")


class TapRecognizer(Recognizer):
    kind = "tap"
    continuous = False

    MSG_FAILED = 2
    # POINTER_UP is applied late so UP still sees how many fingers were down
    MSG_POINTER_UP = 3
    # holding too long turns the tap into a long press and fails it
    MSG_LONG_PRESS = 4

    def __init__(self, scheduler=None, config=None, tag=None):
        super().__init__(scheduler, config, tag)
        self._touches_required = 1
        self._taps_required = 1
        self._maximum_press_duration = self.config.long_press_timeout
        self._num_taps = 0
        self._always_in_tap_region = False
        self._down_focus = (0.0, 0.0)

    @property
    def touches_required(self) -> int:
        return self._touches_required

    @touches_required.setter
    def touches_required(self, value: int):
        self._touches_required = int(self._check_config("touches_required", value, 1))

    @property
    def taps_required(self) -> int:
        return self._taps_required

    @taps_required.setter
    def taps_required(self, value: int):
        self._taps_required = int(self._check_config("taps_required", value, 1))

    @property
    def maximum_press_duration(self) -> float:
        """Longest a tap may be held down, in milliseconds.

        Defaults to ``config.long_press_timeout``. Unrelated to
        ``config.tap_timeout``, which delays the multi-finger lift check.
        """
        return self._maximum_press_duration

    @maximum_press_duration.setter
    def maximum_press_duration(self, value: float):
        self._maximum_press_duration = self._check_config("maximum_press_duration", value, 0, inclusive=False)

    @property
    def number_of_taps(self) -> int:
        return self._num_taps

    def handle_message(self, message: Message):
        logger.debug("%r handle_message(%d)", self, message.what)
        if message.what == self.MSG_RESET:
            self._handle_reset()
        elif message.what == self.MSG_FAILED:
            self._handle_failed()
        elif message.what == self.MSG_POINTER_UP:
            self._number_of_touches = message.arg
        elif message.what == self.MSG_LONG_PRESS:
            self._handle_failed()

    def _on_dependency_failed(self):
        self._post_reset()

    def _on_touch(self, sample: TouchSample) -> bool:
        focus = self._location
        count = sample.pointer_count
        action = sample.action

        if action == TouchAction.DOWN:
            self._messages.cancel_all()
            self._always_in_tap_region = True
            self._number_of_touches = count

            self.set_state(State.POSSIBLE)
            self._began_firing_events = False

            if not self._started:
                self._stop_listening_for_dependency()
                self._num_taps = 0
                self._started = True

            self._messages.send(self.MSG_LONG_PRESS, self._maximum_press_duration)

            self._num_taps += 1
            self._down_focus = focus

        elif action == TouchAction.POINTER_DOWN:
            if self._state is State.POSSIBLE and self._started:
                self._messages.cancel(self.MSG_POINTER_UP)
                self._number_of_touches = count
                if count > self._touches_required:
                    self._handle_failed()
                self._down_focus = focus

        elif action == TouchAction.POINTER_UP:
            if self._state is State.POSSIBLE and self._started:
                self._messages.cancel(self.MSG_FAILED, self.MSG_RESET, self.MSG_POINTER_UP)
                self._down_focus = focus
                self._messages.send(
                    self.MSG_POINTER_UP, self.config.tap_timeout, arg=self._number_of_touches - 1
                )

        elif action == TouchAction.MOVE:
            if self._state is State.POSSIBLE and self._started and self._always_in_tap_region:
                dx = focus[0] - self._down_focus[0]
                dy = focus[1] - self._down_focus[1]
                distance = dx * dx + dy * dy
                if self._taps_required > 1:
                    slop = self.config.double_tap_touch_slop_square
                else:
                    slop = self.config.touch_slop_square

                if distance > slop:
                    logger.debug("%r moved too much: %.1f", self, distance)
                    self._always_in_tap_region = False
                    self._messages.cancel_all()
                    self.set_state(State.FAILED)

        elif action == TouchAction.UP:
            self._messages.cancel(self.MSG_RESET, self.MSG_POINTER_UP, self.MSG_LONG_PRESS)

            if self._state is State.POSSIBLE and self._started:
                if self._number_of_touches != self._touches_required:
                    self._handle_failed()
                elif self._num_taps < self._taps_required:
                    self._messages.send(self.MSG_FAILED, self.config.double_tap_timeout)
                else:
                    resolution = self._try_recognize(State.ENDED)
                    if resolution is Resolution.PROCEED:
                        self._post_reset()
                    self._started = False
            else:
                self._handle_reset()

        return self.cancels_touches_in_view

    def _on_cancel(self):
        self._num_taps = 0

    def _handle_failed(self):
        self.set_state(State.FAILED)
        self._began_firing_events = False
        self._messages.cancel_all()
        self._started = False
