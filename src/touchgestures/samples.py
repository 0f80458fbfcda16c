"""Neutral touch sample model fed to every recognizer.

The embedding layer translates native pointer events into TouchSample
objects and hands them to a RecognizerSet, one per native event, in order.
Times are milliseconds on a single monotonic clock.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class TouchAction(Enum):
    DOWN = "down"
    POINTER_DOWN = "pointer_down"
    MOVE = "move"
    POINTER_UP = "pointer_up"
    UP = "up"
    CANCEL = "cancel"


@dataclass(frozen=True)
class Pointer:
    """One active contact."""
    id: int
    x: float
    y: float


@dataclass
class TouchSample:
    """A single touch event with every pointer active at that moment.

    For POINTER_DOWN/POINTER_UP, ``action_index`` is the index in
    ``pointers`` of the contact that just went down or up. On POINTER_UP
    the lifted pointer is still listed.
    """

    action: TouchAction
    pointers: list[Pointer] = field(default_factory=list)
    event_time: float = 0.0
    down_time: float = 0.0
    action_index: int = 0

    @property
    def pointer_count(self) -> int:
        return len(self.pointers)

    @property
    def is_pointer_up(self) -> bool:
        return self.action == TouchAction.POINTER_UP

    def find_pointer_index(self, pointer_id: int) -> int:
        """Index of the pointer with ``pointer_id``, or -1."""
        for index, p in enumerate(self.pointers):
            if p.id == pointer_id:
                return index
        return -1

    def pointer(self, pointer_id: int) -> Optional[Pointer]:
        index = self.find_pointer_index(pointer_id)
        return self.pointers[index] if index >= 0 else None

    def focal_point(self) -> tuple[float, float]:
        """Centroid of the active pointers, ignoring the one lifting."""
        skip = self.action_index if self.is_pointer_up else -1
        sum_x = sum_y = 0.0
        n = 0
        for index, p in enumerate(self.pointers):
            if index == skip:
                continue
            sum_x += p.x
            sum_y += p.y
            n += 1
        if n == 0:
            return 0.0, 0.0
        return sum_x / n, sum_y / n

    def copy(self) -> TouchSample:
        return TouchSample(
            action=self.action,
            pointers=list(self.pointers),
            event_time=self.event_time,
            down_time=self.down_time,
            action_index=self.action_index,
        )

    def to_dict(self) -> dict:
        return {
            "action": self.action.value,
            "pointers": [[p.id, p.x, p.y] for p in self.pointers],
            "event_time": self.event_time,
            "down_time": self.down_time,
            "action_index": self.action_index,
        }

    @classmethod
    def from_dict(cls, data: dict) -> TouchSample:
        return cls(
            action=TouchAction(data["action"]),
            pointers=[Pointer(int(pid), float(x), float(y)) for pid, x, y in data.get("pointers", [])],
            event_time=float(data.get("event_time", 0.0)),
            down_time=float(data.get("down_time", 0.0)),
            action_index=int(data.get("action_index", 0)),
        )
