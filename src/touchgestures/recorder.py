"""Touch recording and replay: capture sample streams to disk.

Record real touch sessions for:
- Reproducible tests of recognizer behavior
- Debugging a misrecognized gesture after the fact
- Feeding the same input to different recognizer configurations
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator, Optional

from touchgestures.samples import TouchSample

logger = logging.getLogger("touchgestures.recorder")

FORMAT_VERSION = 1


class TouchRecorder:
    """Records touch samples to a file.

    Usage:
        recorder = TouchRecorder()
        recorder.start()
        # For each native touch event:
        recorder.add_sample(sample)
        # When done:
        recorder.save("session.json")
    """

    def __init__(self):
        self._samples: list[TouchSample] = []
        self._recording = False

    def start(self):
        """Begin a new recording session."""
        self._samples = []
        self._recording = True

    def stop(self) -> int:
        """Stop recording. Returns number of samples captured."""
        self._recording = False
        return len(self._samples)

    @property
    def is_recording(self) -> bool:
        return self._recording

    @property
    def sample_count(self) -> int:
        return len(self._samples)

    @property
    def duration(self) -> float:
        """Milliseconds between the first and last sample."""
        if not self._samples:
            return 0.0
        return self._samples[-1].event_time - self._samples[0].event_time

    def add_sample(self, sample: TouchSample):
        if not self._recording:
            return
        self._samples.append(sample.copy())

    def save(self, path: str | Path):
        """Save recording to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "version": FORMAT_VERSION,
            "sample_count": len(self._samples),
            "duration": self.duration,
            "samples": [s.to_dict() for s in self._samples],
        }

        with open(path, "w") as f:
            json.dump(data, f)
        logger.info("Saved %d samples to %s", len(self._samples), path)


class TouchPlayer:
    """Replays a recorded touch session.

    Usage:
        player = TouchPlayer.load("session.json")
        player.replay(recognizer_set)
    """

    def __init__(self, samples: list[TouchSample]):
        self._samples = samples

    @classmethod
    def load(cls, path: str | Path) -> TouchPlayer:
        """Load recording from JSON file."""
        with open(path) as f:
            data = json.load(f)

        version = data.get("version", FORMAT_VERSION)
        if version > FORMAT_VERSION:
            raise ValueError(f"Unsupported recording version {version} in {path}")

        return cls([TouchSample.from_dict(s) for s in data["samples"]])

    @property
    def sample_count(self) -> int:
        return len(self._samples)

    @property
    def duration(self) -> float:
        if not self._samples:
            return 0.0
        return self._samples[-1].event_time - self._samples[0].event_time

    def samples(self) -> Iterator[TouchSample]:
        """Iterate copies of the recorded samples, in order."""
        for sample in self._samples:
            yield sample.copy()

    def get_sample(self, index: int) -> Optional[TouchSample]:
        if 0 <= index < len(self._samples):
            return self._samples[index].copy()
        return None

    def replay(self, recognizer_set) -> int:
        """Feed every sample to ``recognizer_set``, then drain its timers.

        Returns the number of samples the set consumed.
        """
        consumed = 0
        for sample in self.samples():
            if recognizer_set.process_sample(sample):
                consumed += 1

        # Pending timeouts (double-tap windows, resets) still decide outcomes
        drain = getattr(recognizer_set.scheduler, "run_all", None)
        if drain is not None:
            drain()
        logger.info("Replayed %d samples, %d consumed", len(self._samples), consumed)
        return consumed
