"""
Ordered photo timeline with a current-photo cursor.
"""
import logging
from typing import Callable, List, Optional, Sequence

from .types import Photo

logger = logging.getLogger(__name__)

CollectionListener = Callable[["PhotoCollection"], None]


class PhotoCollection:
    """
    Time-ordered photos plus the index of the photo being shown.

    The order given to set_all() is trusted as is. The cursor is None while
    the collection is empty and always within [0, len) otherwise. Every
    successful mutation notifies subscribers synchronously so that scene
    objects and the info panel are rebuilt before the next frame is drawn.
    """

    def __init__(self, photos: Optional[Sequence[Photo]] = None):
        self._photos: List[Photo] = []
        self._current_index: Optional[int] = None
        self._listeners: List[CollectionListener] = []
        if photos:
            self._photos = list(photos)
            self._current_index = 0

    def __len__(self) -> int:
        return len(self._photos)

    def __iter__(self):
        return iter(self._photos)

    @property
    def photos(self) -> List[Photo]:
        return list(self._photos)

    @property
    def current_index(self) -> Optional[int]:
        return self._current_index

    def subscribe(self, listener: CollectionListener) -> None:
        """Register a callback run after every successful change."""
        self._listeners.append(listener)

    def set_all(self, photos: Sequence[Photo]) -> None:
        """Replace the whole collection, keeping the cursor where possible."""
        self._photos = list(photos)
        if not self._photos:
            self._current_index = None
        else:
            self._current_index = min(self._current_index or 0, len(self._photos) - 1)
        logger.debug(f"Collection replaced: {len(self._photos)} photos, cursor={self._current_index}")
        self._notify()

    def step(self, delta: int) -> None:
        """Move the cursor by delta, wrapping around both ends."""
        if not self._photos:
            return
        length = len(self._photos)
        self._current_index = (self._current_index + delta + length) % length
        logger.debug(f"Cursor stepped by {delta} to {self._current_index}")
        self._notify()

    def select_last(self) -> None:
        """Point the cursor at the newest photo."""
        if not self._photos:
            return
        self._current_index = len(self._photos) - 1
        self._notify()

    def select_photo(self, photo_id: str) -> bool:
        """Point the cursor at the photo with this id. Returns False if it is not here."""
        idx = self.index_of(photo_id)
        if idx is None:
            return False
        self._current_index = idx
        self._notify()
        return True

    def current(self) -> Optional[Photo]:
        if self._current_index is None:
            return None
        return self._photos[self._current_index]

    def index_of(self, photo_id: str) -> Optional[int]:
        for idx, photo in enumerate(self._photos):
            if photo.id == photo_id:
                return idx
        return None

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self)
