"""Build recognizer sets from YAML documents.

    config:
      touch_slop: 10
    recognizers:
      - type: tap
        tag: double_tap
        taps_required: 2
      - type: tap
        tag: single_tap
        require_failure_of: double_tap
      - type: swipe
        tag: swipe
        direction: [left, right]

Every key other than ``type``, ``tag`` and ``require_failure_of`` must name
a configurable attribute of the recognizer type.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from touchgestures.config import GestureConfig
from touchgestures.errors import ConfigurationError
from touchgestures.long_press import LongPressRecognizer
from touchgestures.pan import PanRecognizer, RectEdge, ScreenEdgePanRecognizer
from touchgestures.recognizer import Recognizer
from touchgestures.recognizer_set import GestureDelegate, RecognizerSet
from touchgestures.rotate import RotateRecognizer
from touchgestures.scheduler import ManualScheduler
from touchgestures.swipe import SwipeDirection, SwipeRecognizer
from touchgestures.tap import TapRecognizer

logger = logging.getLogger("touchgestures.factory")

RECOGNIZER_TYPES: dict[str, type[Recognizer]] = {
    TapRecognizer.kind: TapRecognizer,
    LongPressRecognizer.kind: LongPressRecognizer,
    PanRecognizer.kind: PanRecognizer,
    ScreenEdgePanRecognizer.kind: ScreenEdgePanRecognizer,
    SwipeRecognizer.kind: SwipeRecognizer,
    RotateRecognizer.kind: RotateRecognizer,
}

DEFAULT_DOCUMENT = {
    "recognizers": [
        {"type": "tap", "tag": "double_tap", "taps_required": 2},
        {"type": "tap", "tag": "tap", "require_failure_of": "double_tap"},
        {"type": "long_press", "tag": "long_press"},
        {"type": "swipe", "tag": "swipe", "direction": ["left", "right", "up", "down"]},
        {"type": "pan", "tag": "pan", "require_failure_of": "swipe"},
        {"type": "rotate", "tag": "rotate"},
    ],
}


def _parse_direction(value: Any) -> SwipeDirection:
    names = value if isinstance(value, list) else str(value).split("|")
    direction = SwipeDirection(0)
    for name in names:
        try:
            direction |= SwipeDirection[str(name).strip().upper()]
        except KeyError:
            raise ConfigurationError(f"Unknown swipe direction: {name!r}") from None
    return direction


def _parse_edge(value: Any) -> RectEdge:
    try:
        return RectEdge(str(value).lower())
    except ValueError:
        raise ConfigurationError(f"Unknown screen edge: {value!r}") from None


_CONVERTERS = {
    "direction": _parse_direction,
    "edge": _parse_edge,
}


def create_recognizer(entry: dict, scheduler, config: GestureConfig) -> Recognizer:
    """Instantiate and configure one recognizer from a document entry."""
    kind = entry.get("type")
    cls = RECOGNIZER_TYPES.get(kind)
    if cls is None:
        raise ConfigurationError(f"Unknown recognizer type: {kind!r}")

    recognizer = cls(scheduler, config, tag=entry.get("tag", kind))
    for key, value in entry.items():
        if key in ("type", "tag", "require_failure_of"):
            continue
        if key.startswith("_") or not hasattr(recognizer, key):
            raise ConfigurationError(f"{cls.__name__} has no option {key!r}")
        convert = _CONVERTERS.get(key)
        setattr(recognizer, key, convert(value) if convert else value)
    return recognizer


def build_recognizer_set(
    document: Optional[dict] = None,
    scheduler=None,
    delegate: Optional[GestureDelegate] = None,
) -> RecognizerSet:
    """Create a RecognizerSet with its members and failure dependencies."""
    document = document if document is not None else DEFAULT_DOCUMENT
    scheduler = scheduler if scheduler is not None else ManualScheduler()
    config = GestureConfig.from_dict(document.get("config") or {})

    recognizer_set = RecognizerSet(scheduler=scheduler, delegate=delegate)
    entries = document.get("recognizers", [])
    by_tag: dict[Any, Recognizer] = {}

    for entry in entries:
        recognizer = create_recognizer(entry, scheduler, config)
        if recognizer.tag in by_tag:
            raise ConfigurationError(f"Duplicate recognizer tag: {recognizer.tag!r}")
        by_tag[recognizer.tag] = recognizer
        recognizer_set.add(recognizer)

    for entry in entries:
        target = entry.get("require_failure_of")
        if target is None:
            continue
        if target not in by_tag:
            raise ConfigurationError(f"require_failure_of refers to unknown tag {target!r}")
        by_tag[entry.get("tag", entry.get("type"))].require_failure_of(by_tag[target])

    return recognizer_set


def load_recognizer_set(
    path: str | Path,
    scheduler=None,
    delegate: Optional[GestureDelegate] = None,
) -> RecognizerSet:
    """Load a YAML document and build its RecognizerSet."""
    with open(path) as f:
        document = yaml.safe_load(f) or {}
    logger.info("Loaded recognizer document from %s", path)
    return build_recognizer_set(document, scheduler, delegate)
