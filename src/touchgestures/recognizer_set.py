"""Recognizer set: fans one touch stream out to many recognizers.

Usage:
    scheduler = ManualScheduler()
    gestures = RecognizerSet(scheduler=scheduler, delegate=MyDelegate())
    gestures.add(TapRecognizer(scheduler))
    gestures.add(PanRecognizer(scheduler))

    # Once per native touch event, in order:
    consumed = gestures.process_sample(sample)

The delegate arbitrates between members: whether one may begin, whether it
may fire while another is already firing, and whether it sees a touch at
all. Without a delegate every question is answered "yes".
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from touchgestures.recognizer import Recognizer
from touchgestures.samples import TouchSample
from touchgestures.scheduler import ManualScheduler

logger = logging.getLogger("touchgestures.recognizer_set")


class GestureDelegate:
    """Arbiter consulted by a RecognizerSet. Override what you need."""

    def should_begin(self, recognizer: Recognizer) -> bool:
        """May ``recognizer`` leave POSSIBLE and begin interpreting touches?"""
        return True

    def should_recognize_simultaneously(self, recognizer: Recognizer, other: Recognizer) -> bool:
        """May ``recognizer`` fire while ``other`` is already firing?"""
        return True

    def should_receive_touch(self, recognizer: Recognizer) -> bool:
        """Should the current touch sample reach ``recognizer``?"""
        return True


class RecognizerSet:
    """Insertion-ordered, duplicate-free collection of recognizers."""

    def __init__(self, scheduler=None, delegate: Optional[GestureDelegate] = None):
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.delegate = delegate
        self.enabled = True
        self._members: dict[int, Recognizer] = {}
        self._dispatching = False

    def add(self, recognizer: Recognizer):
        """Add ``recognizer``; adding it twice has no effect."""
        self._check_not_dispatching("add")
        if id(recognizer) in self._members:
            return
        if recognizer.scheduler is not self.scheduler:
            logger.warning("%r uses a different scheduler than its set; timers may interleave out of order", recognizer)
        recognizer.delegate = self
        self._members[id(recognizer)] = recognizer
        logger.info("Added recognizer %r", recognizer)

    def remove(self, recognizer: Recognizer) -> bool:
        """Detach ``recognizer``. Returns False if it was not a member."""
        self._check_not_dispatching("remove")
        if self._members.pop(id(recognizer), None) is None:
            return False
        recognizer.delegate = None
        recognizer.clear_state_listeners()
        logger.info("Removed recognizer %r", recognizer)
        return True

    def clear(self):
        """Detach every recognizer."""
        self._check_not_dispatching("clear")
        for recognizer in self._members.values():
            recognizer.delegate = None
            recognizer.clear_state_listeners()
        self._members.clear()

    def _check_not_dispatching(self, op: str):
        if self._dispatching:
            raise RuntimeError(f"Cannot {op} recognizers while a touch sample is being dispatched")

    def __contains__(self, recognizer: Recognizer) -> bool:
        return id(recognizer) in self._members

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Recognizer]:
        return iter(list(self._members.values()))

    def find(self, tag) -> Optional[Recognizer]:
        """First member whose tag equals ``tag``."""
        for recognizer in self._members.values():
            if recognizer.tag == tag:
                return recognizer
        return None

    # -- dispatch --------------------------------------------------------

    def process_sample(self, sample: TouchSample) -> bool:
        """Deliver ``sample`` to every member. Returns True if any consumed it.

        Timers due before the sample fire first, so each recognizer sees
        timeouts and touches in time order.
        """
        if not self.enabled:
            return False

        self.scheduler.advance_to(sample.event_time)

        handled = False
        self._dispatching = True
        try:
            for recognizer in list(self._members.values()):
                if not self.should_receive_touch(recognizer):
                    logger.debug("%r skipped by should_receive_touch", recognizer)
                    continue
                handled = recognizer.process_sample(sample) or handled
        finally:
            self._dispatching = False
        return handled

    def advance_to(self, when: float) -> int:
        """Fire timers due at or before ``when`` without a touch sample."""
        return self.scheduler.advance_to(when)

    # -- arbitration -----------------------------------------------------

    def should_begin(self, recognizer: Recognizer) -> bool:
        return self.delegate is None or self.delegate.should_begin(recognizer)

    def should_receive_touch(self, recognizer: Recognizer) -> bool:
        return self.delegate is None or self.delegate.should_receive_touch(recognizer)

    def should_recognize_simultaneously(self, recognizer: Recognizer) -> bool:
        """AND of the delegate's answer for every other member already firing."""
        if len(self._members) == 1:
            return True

        result = True
        for other in self._members.values():
            if other is recognizer or not other.began_firing_events:
                continue
            allowed = self.delegate is None or self.delegate.should_recognize_simultaneously(recognizer, other)
            logger.debug("%r simultaneous with %r: %s", recognizer, other, allowed)
            result = result and allowed
        return result
