"""Deferred, ordered message delivery for recognizers.

Recognizers never sleep or spawn threads. Timeouts are posted as tagged
messages on a MessageQueue, which sits on a scheduler shared by every
recognizer fed from the same touch source:

    scheduler = ManualScheduler()
    queue = MessageQueue(scheduler, recognizer.handle_message)
    queue.send(MSG_RESET)                 # runs on the next advance
    queue.send_at(MSG_LONG_PRESS, 600.0)  # absolute time, milliseconds
    scheduler.advance_to(650.0)           # fires both, in order

ManualScheduler keeps a virtual clock driven by touch sample timestamps,
so replays and tests are fully deterministic. AsyncioScheduler posts the
same messages onto a running asyncio loop.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass
class Message:
    """A fired timer message."""
    what: int
    when: float
    arg: Any = None


class _Entry:
    __slots__ = ("when", "seq", "callback", "cancelled")

    def __init__(self, when: float, seq: int, callback: Callable[[], None]):
        self.when = when
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def __lt__(self, other: _Entry) -> bool:
        return (self.when, self.seq) < (other.when, other.seq)


class ManualScheduler:
    """Single-threaded delay queue on a virtual millisecond clock.

    Time only moves forward through ``advance_to``. Entries fire in
    (time, insertion) order; an entry scheduled in the past fires on the
    next advance. Callbacks may schedule further entries, which fire within
    the same advance when they are already due.
    """

    def __init__(self, start_time: float = 0.0):
        self._now = start_time
        self._queue: list[_Entry] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    def call_at(self, when: float, callback: Callable[[], None]) -> _Entry:
        entry = _Entry(when, next(self._seq), callback)
        heapq.heappush(self._queue, entry)
        return entry

    def call_later(self, delay: float, callback: Callable[[], None]) -> _Entry:
        return self.call_at(self._now + delay, callback)

    def advance_to(self, when: float) -> int:
        """Run every entry due at or before ``when``. Returns the number run."""
        ran = 0
        while self._queue and self._queue[0].when <= when:
            entry = heapq.heappop(self._queue)
            if entry.cancelled:
                continue
            self._now = max(self._now, entry.when)
            entry.callback()
            ran += 1
        self._now = max(self._now, when)
        return ran

    def advance_by(self, delta: float) -> int:
        return self.advance_to(self._now + delta)

    def run_pending(self) -> int:
        """Fire everything already due without moving the clock."""
        return self.advance_to(self._now)

    def run_all(self) -> int:
        """Drain the queue, jumping the clock to each entry in turn."""
        ran = 0
        while self._queue:
            ran += self.advance_to(self._queue[0].when)
        return ran

    @property
    def pending(self) -> int:
        return sum(1 for e in self._queue if not e.cancelled)


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop.

    Sample timestamps must come from the same clock as ``loop.time()``
    (scaled to milliseconds) for absolute deadlines to line up.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    @property
    def now(self) -> float:
        return self.loop.time() * 1000.0

    def call_at(self, when: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_at(when / 1000.0, callback)

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay / 1000.0, callback)

    def advance_to(self, when: float) -> int:
        # The loop drives time; nothing to do.
        return 0


class MessageQueue:
    """Tagged messages for one recognizer on a shared scheduler."""

    def __init__(self, scheduler, handler: Callable[[Message], None]):
        self._scheduler = scheduler
        self._handler = handler
        self._pending: dict[int, list] = {}

    @property
    def scheduler(self):
        return self._scheduler

    def send(self, what: int, delay: float = 0.0, arg: Any = None):
        """Post ``what`` to fire ``delay`` milliseconds from now."""
        self.send_at(what, self._scheduler.now + delay, arg)

    def send_at(self, what: int, when: float, arg: Any = None):
        """Post ``what`` to fire at absolute time ``when``."""
        message = Message(what=what, when=when, arg=arg)
        handles = self._pending.setdefault(what, [])
        holder: list = []

        def fire():
            slot = self._pending.get(what)
            if slot is not None and holder[0] in slot:
                slot.remove(holder[0])
                if not slot:
                    del self._pending[what]
            self._handler(message)

        holder.append(self._scheduler.call_at(when, fire))
        handles.append(holder[0])

    def cancel(self, *whats: int):
        for what in whats:
            for handle in self._pending.pop(what, []):
                handle.cancel()

    def cancel_all(self):
        self.cancel(*list(self._pending))

    def has_pending(self, *whats: int) -> bool:
        return any(self._pending.get(what) for what in whats)

    def advance_to(self, when: float):
        self._scheduler.advance_to(when)
