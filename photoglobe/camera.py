"""
Webcam session with scoped acquisition.
"""
import logging
from typing import Optional

import cv2
import numpy as np

from .config import CameraConfig
from .errors import CameraUnavailableError

logger = logging.getLogger(__name__)


class CameraSession:
    """
    Owns the cv2.VideoCapture used for gesture input.

    The camera is only opened by an explicit start(). If it cannot be opened
    or does not deliver a first frame it is released again and
    CameraUnavailableError is raised, so start() can simply be retried.
    """

    def __init__(self, cfg: CameraConfig):
        self.cfg = cfg
        self.cap: Optional[cv2.VideoCapture] = None

    @property
    def running(self) -> bool:
        return self.cap is not None

    def start(self) -> None:
        if self.running:
            return

        cap = cv2.VideoCapture(self.cfg.index)
        try:
            if not cap.isOpened():
                raise CameraUnavailableError(f"Failed to open camera {self.cfg.index}")

            cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.cfg.width)
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.cfg.height)
            cap.set(cv2.CAP_PROP_FPS, self.cfg.fps)

            ok, _ = cap.read()
            if not ok:
                raise CameraUnavailableError(f"Camera {self.cfg.index} delivered no frames")
        except CameraUnavailableError:
            cap.release()
            raise

        self.cap = cap
        logger.info(f"Camera {self.cfg.index} started ({self.cfg.width}x{self.cfg.height})")

    def read(self) -> Optional[np.ndarray]:
        """Return the next mirrored frame, or None if none is available."""
        if self.cap is None:
            return None
        ok, frame = self.cap.read()
        if not ok:
            logger.warning("Failed to read frame from camera")
            return None
        return cv2.flip(frame, 1)

    def stop(self) -> None:
        if self.cap is not None:
            self.cap.release()
            self.cap = None
            logger.info("Camera stopped")

    def __enter__(self) -> "CameraSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
