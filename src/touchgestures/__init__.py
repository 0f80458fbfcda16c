"""touchgestures - Touch gesture recognizers driven by raw touch samples."""

__version__ = "0.1.0"

from touchgestures.config import GestureConfig
from touchgestures.errors import ConfigurationError, DependencyCycleError, GestureError
from touchgestures.samples import Pointer, TouchAction, TouchSample
from touchgestures.scheduler import AsyncioScheduler, ManualScheduler, Message, MessageQueue
from touchgestures.velocity import VelocityTracker
from touchgestures.recognizer import Recognizer, State, set_log_enabled
from touchgestures.tap import TapRecognizer
from touchgestures.long_press import LongPressRecognizer
from touchgestures.pan import PanRecognizer, RectEdge, ScreenEdgePanRecognizer
from touchgestures.swipe import SwipeDirection, SwipeRecognizer
from touchgestures.rotate import RotateRecognizer
from touchgestures.recognizer_set import GestureDelegate, RecognizerSet
from touchgestures.factory import build_recognizer_set, load_recognizer_set
from touchgestures.recorder import TouchPlayer, TouchRecorder
