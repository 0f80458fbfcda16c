"""Shared recognizer state machine.

Every gesture recognizer starts in ``State.POSSIBLE`` and moves through

    continuous:  POSSIBLE -> BEGAN -> CHANGED* -> ENDED | FAILED | CANCELLED
    discrete:    POSSIBLE -> ENDED | FAILED | CANCELLED

Terminal states last until a deferred reset (a MSG_RESET message) brings
the recognizer back to POSSIBLE. All transitions go through ``set_state``,
which notifies state listeners synchronously; entering CHANGED always
notifies, even from CHANGED.

A recognizer may require the failure of one other recognizer. When it is
ready to leave POSSIBLE it checks that dependency: a failed dependency lets
it proceed, a succeeding one makes it fail, and an undecided one makes it
subscribe to the dependency's transitions and wait.
"""

from __future__ import annotations

import itertools
import logging
from enum import Enum
from typing import Any, Callable, Optional

from touchgestures.config import GestureConfig
from touchgestures.errors import ConfigurationError, DependencyCycleError
from touchgestures.samples import TouchAction, TouchSample
from touchgestures.scheduler import ManualScheduler, Message, MessageQueue

logger = logging.getLogger("touchgestures.recognizer")

_ids = itertools.count()


def next_recognizer_id() -> int:
    """Process-wide monotonically increasing recognizer id."""
    return next(_ids)


def set_log_enabled(enabled: bool):
    """Turn verbose transition logging on or off for the whole package."""
    logging.getLogger("touchgestures").setLevel(logging.DEBUG if enabled else logging.WARNING)


class State(Enum):
    POSSIBLE = "possible"
    BEGAN = "began"
    CHANGED = "changed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    ENDED = "ended"


class Resolution(Enum):
    """Outcome of trying to leave POSSIBLE."""
    PROCEED = "proceed"
    WAITING = "waiting"
    FAILED = "failed"


StateListener = Callable[["Recognizer"], None]
ActionListener = Callable[["Recognizer"], None]


class Recognizer:
    """Base class for all gesture recognizers.

    Subclasses implement ``_on_touch`` and ``handle_message``. They never
    assign ``_state`` directly.
    """

    kind: str = "recognizer"
    continuous: bool = False

    MSG_RESET = 1

    def __init__(
        self,
        scheduler=None,
        config: Optional[GestureConfig] = None,
        tag: Any = None,
    ):
        self.id = next_recognizer_id()
        self.config = config or GestureConfig()
        self._scheduler = scheduler if scheduler is not None else ManualScheduler()
        self._messages = MessageQueue(self._scheduler, self.handle_message)

        self._state = State.POSSIBLE
        self.enabled = True
        self.cancels_touches_in_view = True
        self.tag = tag
        self.delegate = None  # owning RecognizerSet, assigned on add
        self.last_sample: Optional[TouchSample] = None

        self._require_failure: Optional[Recognizer] = None
        self._state_listeners: list[StateListener] = []
        self._action_listener: Optional[ActionListener] = None
        self._began_firing_events = False
        self._started = False
        self._number_of_touches = 0
        self._location = (0.0, 0.0)

    # -- state -----------------------------------------------------------

    @property
    def state(self) -> State:
        return self._state

    def set_state(self, state: State):
        """The only way to change state. Notifies listeners on change."""
        logger.debug("%r set_state: %s", self, state.name)
        changed = self._state is not state or state is State.CHANGED
        self._state = state
        if changed:
            for listener in list(self._state_listeners):
                listener(self)

    def in_state(self, *states: State) -> bool:
        return self._state in states

    @property
    def scheduler(self):
        return self._scheduler

    @property
    def number_of_touches(self) -> int:
        return self._number_of_touches

    @property
    def current_location(self) -> tuple[float, float]:
        """Focal point of the last processed sample."""
        return self._location

    @property
    def began_firing_events(self) -> bool:
        if self.continuous:
            return self._began_firing_events and self.in_state(State.BEGAN, State.CHANGED)
        return self._began_firing_events and self.in_state(State.ENDED)

    # -- listeners -------------------------------------------------------

    def set_action_listener(self, listener: Optional[ActionListener]):
        """Install the single callback invoked whenever the action fires."""
        self._action_listener = listener

    def add_state_listener(self, listener: StateListener):
        if listener not in self._state_listeners:
            self._state_listeners.append(listener)

    def remove_state_listener(self, listener: StateListener) -> bool:
        if listener in self._state_listeners:
            self._state_listeners.remove(listener)
            return True
        return False

    def has_state_listener(self, listener: StateListener) -> bool:
        return listener in self._state_listeners

    def clear_state_listeners(self):
        self._state_listeners.clear()

    def fire_action_event(self):
        logger.debug("%r fire_action_event", self)
        if self._action_listener is not None:
            self._action_listener(self)

    # -- dependency ------------------------------------------------------

    @property
    def require_failure(self) -> Optional[Recognizer]:
        return self._require_failure

    def require_failure_of(self, other: Optional[Recognizer]):
        """Succeed only after ``other`` fails. Replaces any previous edge."""
        node = other
        while node is not None:
            if node is self:
                raise DependencyCycleError(
                    f"{self!r} cannot require failure of {other!r}: cycle"
                )
            node = node._require_failure

        if self._require_failure is not None:
            self._require_failure.remove_state_listener(self.on_state_changed)
        self._require_failure = other

    @property
    def is_waiting_for_dependency(self) -> bool:
        return (
            self._require_failure is not None
            and self._require_failure.has_state_listener(self.on_state_changed)
        )

    def _listen_for_dependency(self):
        if self._require_failure is not None:
            self._require_failure.add_state_listener(self.on_state_changed)

    def _stop_listening_for_dependency(self):
        if self._require_failure is not None:
            self._require_failure.remove_state_listener(self.on_state_changed)

    @property
    def _waiting_state(self) -> State:
        return State.BEGAN if self.continuous else State.ENDED

    def on_state_changed(self, other: Recognizer):
        """Called by the dependency while this recognizer waits on it."""
        logger.debug("%r on_state_changed(%r)", self, other)
        waiting = self._waiting_state

        if other.state is State.FAILED and self._state is waiting:
            self._stop_listening_for_dependency()
            self._fire_action_if_simultaneous()
            self._on_dependency_failed()
        elif other.in_state(State.BEGAN, State.CHANGED, State.ENDED) and self.in_state(State.POSSIBLE, waiting):
            self._stop_listening_for_dependency()
            self._messages.cancel_all()
            self.set_state(State.FAILED)
            self._began_firing_events = False
            self._started = False
            self._on_dependency_succeeded()

    def _on_dependency_failed(self):
        pass

    def _on_dependency_succeeded(self):
        pass

    # -- arbitration -----------------------------------------------------

    def _should_begin(self) -> bool:
        return self.delegate is None or self.delegate.should_begin(self)

    def _should_recognize_simultaneously(self) -> bool:
        return self.delegate is None or self.delegate.should_recognize_simultaneously(self)

    def _fire_action_if_simultaneous(self):
        if self.continuous and self.in_state(State.CHANGED, State.ENDED):
            allowed = True
        else:
            allowed = self._should_recognize_simultaneously()
        if allowed:
            self._began_firing_events = True
            self.fire_action_event()

    def _try_recognize(self, state: State) -> Resolution:
        """Leave POSSIBLE for ``state`` unless vetoed or blocked."""
        if not self._should_begin():
            self.set_state(State.FAILED)
            self._began_firing_events = False
            return Resolution.FAILED

        dependency = self._require_failure

        # Listeners must never see ``state`` when the dependency already won
        if dependency is not None and dependency.in_state(State.BEGAN, State.CHANGED, State.ENDED):
            self.set_state(State.FAILED)
            self._began_firing_events = False
            return Resolution.FAILED

        if dependency is not None and dependency.state is not State.FAILED:
            self._listen_for_dependency()
            self.set_state(state)
            self._began_firing_events = False
            logger.debug("%r waiting for %r", self, dependency)
            return Resolution.WAITING

        self.set_state(state)
        self._fire_action_if_simultaneous()
        return Resolution.PROCEED

    # -- touch & timers --------------------------------------------------

    def process_sample(self, sample: TouchSample) -> bool:
        """Feed one touch sample. Returns True when the touch is consumed."""
        self._messages.advance_to(sample.event_time)
        self.last_sample = sample.copy()

        if not self.enabled:
            return False

        self._location = sample.focal_point()

        if sample.action == TouchAction.CANCEL:
            self._messages.cancel_all()
            self._started = False
            self._on_cancel()
            self.set_state(State.CANCELLED)
            self._began_firing_events = False
            self._post_reset()
            return self.cancels_touches_in_view

        return self._on_touch(sample)

    def _on_touch(self, sample: TouchSample) -> bool:
        raise NotImplementedError

    def _on_cancel(self):
        pass

    def handle_message(self, message: Message):
        if message.what == self.MSG_RESET:
            self._handle_reset()

    def _post_reset(self):
        self._messages.cancel(self.MSG_RESET)
        self._messages.send(self.MSG_RESET)

    def _handle_reset(self):
        logger.debug("%r reset", self)
        self._messages.cancel_all()
        self._stop_listening_for_dependency()
        self._started = False
        self.set_state(State.POSSIBLE)
        self._began_firing_events = False

    def reset(self):
        """Drop any gesture in progress and return to POSSIBLE."""
        self._handle_reset()

    # -- configuration ---------------------------------------------------

    def _check_config(self, name: str, value: float, minimum: float = 0, inclusive: bool = True):
        ok = value >= minimum if inclusive else value > minimum
        if not ok:
            bound = f">= {minimum}" if inclusive else f"> {minimum}"
            logger.warning("%r rejected %s=%r", self, name, value)
            raise ConfigurationError(f"{type(self).__name__}.{name} must be {bound}, got {value!r}")
        return value

    def __repr__(self) -> str:
        return f"{type(self).__name__}[id={self.id}, state={self._state.name}, tag={self.tag!r}]"
