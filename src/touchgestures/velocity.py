"""Pointer velocity estimation.

Keeps a short per-pointer history and fits a straight line through the
recent positions; the slope is the velocity. Only samples inside a 100 ms
horizon of the newest one are used, matching what touch frameworks do to
forget stale motion after a pause.
"""

from __future__ import annotations

from collections import deque
from typing import Optional

import numpy as np

from touchgestures.samples import TouchAction, TouchSample

HORIZON_MS = 100.0
HISTORY_SIZE = 20


class VelocityTracker:
    """Least-squares velocity estimate per pointer id."""

    def __init__(self, horizon: float = HORIZON_MS, history_size: int = HISTORY_SIZE):
        self.horizon = horizon
        self.history_size = history_size
        self._history: dict[int, deque] = {}
        self._velocities: dict[int, tuple[float, float]] = {}
        self._primary_id: Optional[int] = None

    def clear(self):
        self._history.clear()
        self._velocities.clear()
        self._primary_id = None

    def add_movement(self, sample: TouchSample):
        """Record every pointer position in ``sample``."""
        if sample.action == TouchAction.DOWN:
            self.clear()
        elif sample.action == TouchAction.MOVE:
            active = {p.id for p in sample.pointers}
            for stale in [pid for pid in self._history if pid not in active]:
                del self._history[stale]
        if sample.pointers:
            self._primary_id = sample.pointers[0].id
        for p in sample.pointers:
            history = self._history.get(p.id)
            if history is None:
                history = deque(maxlen=self.history_size)
                self._history[p.id] = history
            history.append((sample.event_time, p.x, p.y))

    def compute_current_velocity(self, units: float = 1000.0, max_velocity: float = float("inf")):
        """Refresh velocities in pixels per ``units`` milliseconds.

        Pointers with fewer than two positions inside the horizon get no
        estimate; see :meth:`has_velocity`.
        """
        self._velocities.clear()
        for pointer_id, history in self._history.items():
            slope = self._estimate(history)
            if slope is None:
                continue
            vx = float(np.clip(slope[0] * units, -max_velocity, max_velocity))
            vy = float(np.clip(slope[1] * units, -max_velocity, max_velocity))
            self._velocities[pointer_id] = (vx, vy)

    def _estimate(self, history: deque) -> Optional[tuple[float, float]]:
        if len(history) < 2:
            return None
        data = np.array(history, dtype=np.float64)
        newest = data[-1, 0]
        data = data[data[:, 0] >= newest - self.horizon]
        if len(data) < 2:
            return None

        t = data[:, 0] - newest
        if np.ptp(t) <= 0:
            return None

        # Slope of x(t) and y(t) through the windowed points
        design = np.vstack([t, np.ones_like(t)]).T
        coeffs, *_ = np.linalg.lstsq(design, data[:, 1:3], rcond=None)
        return float(coeffs[0, 0]), float(coeffs[0, 1])

    def has_velocity(self, pointer_id: Optional[int] = None) -> bool:
        """True if the last computation produced an estimate for the pointer."""
        if pointer_id is None:
            pointer_id = self._primary_id
        return pointer_id in self._velocities

    def x_velocity(self, pointer_id: Optional[int] = None) -> float:
        return self._velocity(pointer_id)[0]

    def y_velocity(self, pointer_id: Optional[int] = None) -> float:
        return self._velocity(pointer_id)[1]

    def _velocity(self, pointer_id: Optional[int]) -> tuple[float, float]:
        if pointer_id is None:
            pointer_id = self._primary_id
        return self._velocities.get(pointer_id, (0.0, 0.0))


def clear_if_pointers_oppose(tracker: VelocityTracker, sample: TouchSample, max_velocity: float):
    """Reset ``tracker`` when the lifting pointer moved against another one.

    Called on POINTER_UP: once fingers diverge the remaining history no
    longer describes a single coherent motion.
    """
    tracker.compute_current_velocity(1000.0, max_velocity)
    up_index = sample.action_index
    if up_index >= sample.pointer_count:
        return
    up_id = sample.pointers[up_index].id
    x1 = tracker.x_velocity(up_id)
    y1 = tracker.y_velocity(up_id)
    for index, p in enumerate(sample.pointers):
        if index == up_index:
            continue
        dot = x1 * tracker.x_velocity(p.id) + y1 * tracker.y_velocity(p.id)
        if dot < 0:
            tracker.clear()
            break
