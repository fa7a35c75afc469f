"""
Gesture recognition classes that convert hand landmark samples into
navigation intents.
"""
import logging
import math
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Tuple

from .types import GestureSample, NavigationIntent, IntentSource, IntentSinkProto
from .config import Cfg

logger = logging.getLogger(__name__)


@dataclass
class GestureState:
    """Tracking state shared by the swipe and pinch detectors."""
    swipe_baseline: Optional[float] = None
    last_pinch_time: Optional[float] = None

    @property
    def tracking(self) -> bool:
        return self.swipe_baseline is not None


class IntentQueue:
    """FIFO channel between the gesture interpreter and navigation."""

    def __init__(self):
        self._items: Deque[Tuple[NavigationIntent, IntentSource]] = deque()

    def put(self, intent: NavigationIntent, source: IntentSource) -> None:
        self._items.append((intent, source))

    def get(self) -> Optional[Tuple[NavigationIntent, IntentSource]]:
        if not self._items:
            return None
        return self._items.popleft()

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)


class SwipeGesture:
    """
    Turns horizontal wrist travel into advance/retreat intents.

    The first wrist position seen after the hand (re)appears becomes the
    baseline. Once the wrist has travelled more than the threshold from the
    baseline an intent fires and the baseline moves to the current position.
    Losing the hand clears the baseline, so travel is never carried across
    a gap.
    """

    def __init__(self, cfg: Cfg, state: GestureState):
        self.cfg = cfg
        self.state = state

    def update(self, sample: Optional[GestureSample]) -> Optional[NavigationIntent]:
        if sample is None:
            self.state.swipe_baseline = None
            return None

        wrist_x = sample.wrist.x
        if self.state.swipe_baseline is None:
            self.state.swipe_baseline = wrist_x
            return None

        threshold = self.cfg.gestures.swipe.threshold
        delta = wrist_x - self.state.swipe_baseline
        if delta > threshold:
            self.state.swipe_baseline = wrist_x
            return NavigationIntent.ADVANCE
        if delta < -threshold:
            self.state.swipe_baseline = wrist_x
            return NavigationIntent.RETREAT
        return None


class PinchGesture:
    """Fires an advance intent when thumb and index tips touch, debounced."""

    def __init__(self, cfg: Cfg, state: GestureState):
        self.cfg = cfg
        self.state = state

    def update(self, sample: Optional[GestureSample], t_now: float) -> Optional[NavigationIntent]:
        """
        Args:
            sample: Landmarks of the detected hand (None if no hand detected)
            t_now: Monotonic timestamp in seconds

        Returns:
            NavigationIntent.ADVANCE for an accepted pinch, None otherwise
        """
        if sample is None:
            return None

        if pinch_distance(sample) >= self.cfg.gestures.pinch.threshold:
            return None

        last = self.state.last_pinch_time
        debounce_s = self.cfg.gestures.pinch.debounce_ms / 1000.0
        if last is not None and t_now - last <= debounce_s:
            return None

        self.state.last_pinch_time = t_now
        return NavigationIntent.ADVANCE


def pinch_distance(sample: GestureSample) -> float:
    """Euclidean distance between thumb tip and index tip."""
    return math.hypot(sample.thumb_tip.x - sample.index_tip.x,
                      sample.thumb_tip.y - sample.index_tip.y)


class GestureInterpreter:
    """
    Main gesture processor that coordinates swipe and pinch detection.

    Both detectors see every frame; a single frame may produce a swipe
    intent and a pinch intent, which are delivered in that order.
    """

    def __init__(self, cfg: Cfg, sink: Optional[IntentSinkProto] = None):
        """Initialize gesture processor with configuration."""
        self.cfg = cfg
        self.sink = sink
        self.state = GestureState()
        self.swipe_gesture = SwipeGesture(cfg, self.state)
        self.pinch_gesture = PinchGesture(cfg, self.state)

    def process_frame(self, sample: Optional[GestureSample], t_now: float) -> List[NavigationIntent]:
        """
        Process one camera frame's landmarks.

        Args:
            sample: Landmarks of the detected hand (None if no hand detected)
            t_now: Monotonic timestamp in seconds

        Returns:
            Intents emitted for this frame, in delivery order
        """
        emitted: List[Tuple[NavigationIntent, IntentSource]] = []

        swipe = self.swipe_gesture.update(sample)
        if swipe is not None:
            emitted.append((swipe, IntentSource.SWIPE))

        pinch = self.pinch_gesture.update(sample, t_now)
        if pinch is not None:
            emitted.append((pinch, IntentSource.PINCH))

        for intent, source in emitted:
            logger.info(f"Gesture {source.value} -> {intent.name.lower()}")
            if self.sink is not None:
                self.sink.put(intent, source)

        return [intent for intent, _ in emitted]

    def reset(self) -> None:
        """Forget all tracking state, e.g. after the detector restarts."""
        self.state.swipe_baseline = None
        self.state.last_pinch_time = None
