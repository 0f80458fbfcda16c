"""Shared fixtures: a scripted touch stream on a virtual clock."""

import pytest

from touchgestures.recognizer import State
from touchgestures.samples import Pointer, TouchAction, TouchSample
from touchgestures.scheduler import ManualScheduler


class TouchScript:
    """Builds a consistent multi-touch sample stream and feeds it to a target.

    Pointers keep the order they went down in; ids are assigned from 0.
    """

    def __init__(self, target):
        self.target = target
        self.samples: list[TouchSample] = []
        self._pointers: list[Pointer] = []
        self._next_id = 0
        self._down_time = 0.0

    def _emit(self, action, t, action_index=0):
        sample = TouchSample(
            action=action,
            pointers=list(self._pointers),
            event_time=float(t),
            down_time=self._down_time,
            action_index=action_index,
        )
        self.samples.append(sample)
        return self.target.process_sample(sample)

    def down(self, x, y, t=0):
        self._next_id = 0
        self._down_time = float(t)
        self._pointers = [Pointer(self._next_id, x, y)]
        self._next_id += 1
        return self._emit(TouchAction.DOWN, t)

    def pointer_down(self, x, y, t):
        self._pointers.append(Pointer(self._next_id, x, y))
        self._next_id += 1
        return self._emit(TouchAction.POINTER_DOWN, t, len(self._pointers) - 1)

    def move(self, t, *positions):
        """Move pointers to ``positions``, in pointer order."""
        self._pointers = [
            Pointer(p.id, x, y) for p, (x, y) in zip(self._pointers, positions)
        ] + self._pointers[len(positions):]
        return self._emit(TouchAction.MOVE, t)

    def pointer_up(self, t, index=-1):
        index = index % len(self._pointers)
        handled = self._emit(TouchAction.POINTER_UP, t, index)
        del self._pointers[index]
        return handled

    def up(self, t):
        handled = self._emit(TouchAction.UP, t)
        self._pointers = []
        return handled

    def cancel(self, t):
        handled = self._emit(TouchAction.CANCEL, t)
        self._pointers = []
        return handled


class Observer:
    """Collects state transitions and action firings of one recognizer."""

    def __init__(self, recognizer):
        self.states: list[State] = []
        self.actions: list[State] = []
        recognizer.add_state_listener(lambda r: self.states.append(r.state))
        recognizer.set_action_listener(lambda r: self.actions.append(r.state))


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def touch_script():
    return TouchScript


@pytest.fixture
def observe():
    return Observer
