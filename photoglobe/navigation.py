"""
Navigation controller binding gesture intents and UI triggers to the
photo timeline cursor.
"""
import logging
from typing import Optional, Sequence

from .collection import PhotoCollection
from .config import Cfg
from .gestures import GestureInterpreter, IntentQueue
from .types import GestureSample, IntentSource, NavigationIntent, Photo

logger = logging.getLogger(__name__)


class NavigationController:
    """
    Applies navigation intents to a PhotoCollection.

    Intents are queued and applied strictly in arrival order, one cursor
    step per intent. Rapid identical intents are never merged.
    """

    def __init__(self, cfg: Cfg, collection: PhotoCollection):
        self.collection = collection
        self.queue = IntentQueue()
        self.interpreter = GestureInterpreter(cfg, sink=self.queue)

    def submit(self, intent: NavigationIntent, source: IntentSource = IntentSource.KEYBOARD) -> None:
        self.queue.put(intent, source)

    def drain(self) -> int:
        """Apply every pending intent. Returns the number applied."""
        applied = 0
        while True:
            item = self.queue.get()
            if item is None:
                break
            intent, source = item
            self.collection.step(intent.step)
            applied += 1
            logger.debug(f"Applied {intent.name.lower()} from {source.value}, cursor={self.collection.current_index}")
        return applied

    # Host-facing API

    def current_photo(self) -> Optional[Photo]:
        return self.collection.current()

    def step_photo(self, delta: int) -> None:
        self.collection.step(delta)

    def next_photo(self) -> None:
        self.submit(NavigationIntent.ADVANCE)
        self.drain()

    def previous_photo(self) -> None:
        self.submit(NavigationIntent.RETREAT)
        self.drain()

    def on_collection_changed(self, photos: Sequence[Photo]) -> None:
        self.collection.set_all(photos)

    def on_upload_complete(self, photos: Sequence[Photo], uploaded_id: Optional[str] = None) -> None:
        """
        Replace the collection and show the uploaded photo.

        The backend orders by photo time, so an upload is not necessarily
        last. Without an id, or if the id is missing from the refreshed
        list, the newest photo is shown.
        """
        self.collection.set_all(photos)
        if uploaded_id is None or not self.collection.select_photo(uploaded_id):
            self.collection.select_last()

    def on_gesture_frame(self, sample: Optional[GestureSample], t_now: float) -> int:
        """
        Interpret one camera frame and apply the resulting intents.

        Args:
            sample: Landmarks of the detected hand, or None when no hand is visible
            t_now: Monotonic timestamp in seconds

        Returns:
            Number of cursor steps applied
        """
        self.interpreter.process_frame(sample, t_now)
        return self.drain()

    def reset_gestures(self) -> None:
        self.interpreter.reset()
