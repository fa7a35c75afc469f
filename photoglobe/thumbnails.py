"""
Decoded photo images for the photo card, fetched from the backend and kept
in a small cache keyed by photo id.
"""
import logging
from collections import OrderedDict
from typing import Optional, Set

import cv2
import numpy as np

from .backend import PhotoBackendClient
from .errors import BackendError
from .types import Photo

logger = logging.getLogger(__name__)


def decode_thumbnail(data: bytes, width: int) -> np.ndarray:
    """
    Decode image bytes into a BGR array no wider than width.

    Raises:
        BackendError: if the bytes are not an image OpenCV can read
    """
    image = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_COLOR)
    if image is None:
        raise BackendError("Photo file is not a readable image")

    h, w = image.shape[:2]
    if w > width:
        image = cv2.resize(image, (width, max(1, int(h * width / w))), interpolation=cv2.INTER_AREA)
    return image


class ThumbnailCache:
    """
    Card images by photo id.

    fetch() does the blocking download and decode and touches no cache state,
    so it can run in a worker thread; put() and mark_failed() are called from
    the event loop with the result. Photos whose image failed are not fetched
    again until forget_failures().
    """

    def __init__(self, client: PhotoBackendClient, width: int = 240, max_entries: int = 32):
        self.client = client
        self.width = width
        self.max_entries = max_entries
        self._images: "OrderedDict[str, np.ndarray]" = OrderedDict()
        self._failed: Set[str] = set()

    def __contains__(self, photo_id: str) -> bool:
        return photo_id in self._images

    def __len__(self) -> int:
        return len(self._images)

    def get(self, photo_id: Optional[str]) -> Optional[np.ndarray]:
        if photo_id is None or photo_id not in self._images:
            return None
        self._images.move_to_end(photo_id)
        return self._images[photo_id]

    def wanted(self, photo: Photo) -> bool:
        """True if the photo has an image that is neither cached nor known to fail."""
        return bool(photo.file_ref) and photo.id not in self._images and photo.id not in self._failed

    def fetch(self, photo: Photo) -> np.ndarray:
        data = self.client.fetch_image(photo)
        return decode_thumbnail(data, self.width)

    def put(self, photo_id: str, image: np.ndarray) -> None:
        self._images[photo_id] = image
        self._images.move_to_end(photo_id)
        while len(self._images) > self.max_entries:
            evicted, _ = self._images.popitem(last=False)
            logger.debug(f"Evicted card image {evicted}")

    def mark_failed(self, photo_id: str) -> None:
        self._failed.add(photo_id)

    def forget_failures(self) -> None:
        self._failed.clear()
