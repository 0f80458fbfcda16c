"""Tests for the shared recognizer state machine and failure dependencies."""

import logging

import pytest

from touchgestures.errors import ConfigurationError, DependencyCycleError
from touchgestures.recognizer import Recognizer, Resolution, State, next_recognizer_id, set_log_enabled
from touchgestures.samples import Pointer, TouchAction, TouchSample


class StubRecognizer(Recognizer):
    """Recognizer whose decisions are made by the test."""

    kind = "stub"

    def __init__(self, scheduler, continuous=False):
        super().__init__(scheduler)
        self.continuous = continuous
        self.touches = []
        self.actions = 0
        self.set_action_listener(self._count)

    def _count(self, recognizer):
        self.actions += 1

    def _on_touch(self, sample):
        self.touches.append(sample.action)
        return self.cancels_touches_in_view


def sample(action, t=0.0):
    return TouchSample(action, [Pointer(0, 10, 20)], event_time=t)


class TestStateSetter:
    def test_notifies_on_change_only(self, scheduler):
        r = StubRecognizer(scheduler)
        seen = []
        r.add_state_listener(lambda rec: seen.append(rec.state))
        r.set_state(State.BEGAN)
        r.set_state(State.BEGAN)
        r.set_state(State.FAILED)
        assert seen == [State.BEGAN, State.FAILED]

    def test_changed_always_notifies(self, scheduler):
        r = StubRecognizer(scheduler)
        seen = []
        r.add_state_listener(lambda rec: seen.append(rec.state))
        r.set_state(State.CHANGED)
        r.set_state(State.CHANGED)
        r.set_state(State.CHANGED)
        assert seen == [State.CHANGED] * 3

    def test_listener_registration(self, scheduler):
        r = StubRecognizer(scheduler)
        seen = []
        listener = seen.append
        r.add_state_listener(listener)
        r.add_state_listener(listener)
        assert r.has_state_listener(listener)
        r.set_state(State.ENDED)
        assert len(seen) == 1

        assert r.remove_state_listener(listener)
        assert not r.remove_state_listener(listener)
        r.set_state(State.POSSIBLE)
        assert len(seen) == 1

    def test_state_is_read_only(self, scheduler):
        r = StubRecognizer(scheduler)
        with pytest.raises(AttributeError):
            r.state = State.ENDED

    def test_ids_increase(self, scheduler):
        a = StubRecognizer(scheduler)
        b = StubRecognizer(scheduler)
        assert b.id > a.id
        assert next_recognizer_id() > b.id


class TestProcessSample:
    def test_records_last_sample_as_copy(self, scheduler):
        r = StubRecognizer(scheduler)
        s = sample(TouchAction.DOWN, 5)
        r.process_sample(s)
        s.pointers.append(Pointer(1, 0, 0))
        assert r.last_sample.pointer_count == 1
        assert r.current_location == (10, 20)

    def test_disabled_still_records_last_sample(self, scheduler):
        r = StubRecognizer(scheduler)
        r.enabled = False
        assert r.process_sample(sample(TouchAction.DOWN)) is False
        assert r.last_sample is not None
        assert r.touches == []

    def test_handled_mirrors_cancels_touches(self, scheduler):
        r = StubRecognizer(scheduler)
        assert r.process_sample(sample(TouchAction.DOWN)) is True
        r.cancels_touches_in_view = False
        assert r.process_sample(sample(TouchAction.MOVE)) is False

    def test_advances_timers_before_delivery(self, scheduler):
        r = StubRecognizer(scheduler)
        r.set_state(State.FAILED)
        r._post_reset()
        r.process_sample(sample(TouchAction.DOWN, 1))
        assert r.state is State.POSSIBLE


class TestCancel:
    @pytest.mark.parametrize("start", [State.POSSIBLE, State.BEGAN, State.CHANGED, State.ENDED, State.FAILED])
    def test_cancel_from_any_state(self, scheduler, start):
        r = StubRecognizer(scheduler, continuous=True)
        r.set_state(start)
        r.process_sample(sample(TouchAction.CANCEL, 10))
        assert r.state is State.CANCELLED
        assert r.touches == []

    def test_cancel_clears_timers_and_resets(self, scheduler):
        r = StubRecognizer(scheduler)
        r._messages.send(9, 50)
        r.process_sample(sample(TouchAction.CANCEL, 10))
        assert not r._messages.has_pending(9)
        assert r._messages.has_pending(r.MSG_RESET)
        scheduler.advance_to(100)
        assert r.state is State.POSSIBLE

    def test_cancel_twice(self, scheduler):
        r = StubRecognizer(scheduler)
        seen = []
        r.add_state_listener(lambda rec: seen.append(rec.state))
        r.process_sample(sample(TouchAction.CANCEL, 10))
        r.process_sample(sample(TouchAction.CANCEL, 10))
        assert r.state is State.CANCELLED
        assert seen.count(State.CANCELLED) == 2
        assert scheduler.pending == 1


class TestDependency:
    def test_proceeds_without_dependency(self, scheduler):
        a = StubRecognizer(scheduler)
        assert a._try_recognize(State.ENDED) is Resolution.PROCEED
        assert a.state is State.ENDED
        assert a.actions == 1
        assert a.began_firing_events

    def test_proceeds_when_dependency_failed(self, scheduler):
        a, b = StubRecognizer(scheduler), StubRecognizer(scheduler)
        a.require_failure_of(b)
        b.set_state(State.FAILED)
        assert a._try_recognize(State.ENDED) is Resolution.PROCEED
        assert a.actions == 1

    @pytest.mark.parametrize("dependency_state", [State.BEGAN, State.CHANGED, State.ENDED])
    def test_fails_when_dependency_succeeded(self, scheduler, dependency_state):
        a, b = StubRecognizer(scheduler), StubRecognizer(scheduler, continuous=True)
        a.require_failure_of(b)
        b.set_state(dependency_state)
        assert a._try_recognize(State.ENDED) is Resolution.FAILED
        assert a.state is State.FAILED
        assert a.actions == 0

    def test_listeners_see_only_failure_when_dependency_succeeded(self, scheduler, observe):
        a, b = StubRecognizer(scheduler), StubRecognizer(scheduler, continuous=True)
        a.require_failure_of(b)
        b.set_state(State.BEGAN)
        seen = observe(a)

        a._try_recognize(State.ENDED)
        assert seen.states == [State.FAILED]
        assert seen.actions == []
        assert not a.is_waiting_for_dependency

    def test_waits_then_fires_when_dependency_fails(self, scheduler):
        a, b = StubRecognizer(scheduler), StubRecognizer(scheduler)
        a.require_failure_of(b)

        assert a._try_recognize(State.ENDED) is Resolution.WAITING
        assert a.state is State.ENDED
        assert a.is_waiting_for_dependency
        assert not a.began_firing_events
        assert a.actions == 0

        b.set_state(State.FAILED)
        assert not a.is_waiting_for_dependency
        assert a.began_firing_events
        assert a.actions == 1

    def test_waiting_fails_when_dependency_succeeds(self, scheduler):
        a, b = StubRecognizer(scheduler), StubRecognizer(scheduler)
        a.require_failure_of(b)
        a._try_recognize(State.ENDED)

        b.set_state(State.ENDED)
        assert a.state is State.FAILED
        assert a.actions == 0
        assert not a.is_waiting_for_dependency

    def test_continuous_waits_in_began(self, scheduler):
        a, b = StubRecognizer(scheduler, continuous=True), StubRecognizer(scheduler)
        a.require_failure_of(b)
        assert a._try_recognize(State.BEGAN) is Resolution.WAITING
        assert a.state is State.BEGAN
        assert not a.began_firing_events

        b.set_state(State.FAILED)
        assert a.state is State.BEGAN
        assert a.began_firing_events
        assert a.actions == 1

    def test_not_subscribed_until_recognizing(self, scheduler):
        a, b = StubRecognizer(scheduler), StubRecognizer(scheduler)
        a.require_failure_of(b)
        b.set_state(State.FAILED)
        assert a.state is State.POSSIBLE
        assert a.actions == 0

    def test_replacing_dependency_unsubscribes(self, scheduler):
        a, b, c = (StubRecognizer(scheduler) for _ in range(3))
        a.require_failure_of(b)
        a._try_recognize(State.ENDED)
        a.require_failure_of(c)
        assert not b.has_state_listener(a.on_state_changed)
        assert a.require_failure is c

    def test_clear_dependency(self, scheduler):
        a, b = StubRecognizer(scheduler), StubRecognizer(scheduler)
        a.require_failure_of(b)
        a.require_failure_of(None)
        assert a.require_failure is None

    def test_reset_stops_waiting(self, scheduler):
        a, b = StubRecognizer(scheduler), StubRecognizer(scheduler)
        a.require_failure_of(b)
        a._try_recognize(State.ENDED)
        a.reset()
        assert a.state is State.POSSIBLE
        assert not a.is_waiting_for_dependency


class TestDependencyCycles:
    def test_self_dependency(self, scheduler):
        a = StubRecognizer(scheduler)
        with pytest.raises(DependencyCycleError):
            a.require_failure_of(a)

    def test_two_node_cycle(self, scheduler):
        a, b = StubRecognizer(scheduler), StubRecognizer(scheduler)
        a.require_failure_of(b)
        with pytest.raises(DependencyCycleError):
            b.require_failure_of(a)
        assert b.require_failure is None

    def test_long_cycle(self, scheduler):
        a, b, c = (StubRecognizer(scheduler) for _ in range(3))
        a.require_failure_of(b)
        b.require_failure_of(c)
        with pytest.raises(DependencyCycleError):
            c.require_failure_of(a)

    def test_chain_is_allowed(self, scheduler):
        a, b, c = (StubRecognizer(scheduler) for _ in range(3))
        a.require_failure_of(b)
        b.require_failure_of(c)
        a.require_failure_of(c)
        assert a.require_failure is c


class TestConfigChecks:
    def test_check_config_raises_and_logs(self, scheduler, caplog):
        r = StubRecognizer(scheduler)
        with caplog.at_level(logging.WARNING, logger="touchgestures.recognizer"):
            with pytest.raises(ConfigurationError):
                r._check_config("taps_required", 0, 1)
        assert "taps_required" in caplog.text

    def test_check_config_exclusive(self, scheduler):
        r = StubRecognizer(scheduler)
        assert r._check_config("timeout", 0, 0) == 0
        with pytest.raises(ConfigurationError):
            r._check_config("timeout", 0, 0, inclusive=False)

    def test_set_log_enabled(self):
        set_log_enabled(True)
        assert logging.getLogger("touchgestures").level == logging.DEBUG
        set_log_enabled(False)
        assert logging.getLogger("touchgestures").level == logging.WARNING
        logging.getLogger("touchgestures").setLevel(logging.NOTSET)
