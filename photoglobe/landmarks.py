"""
Hand landmark detection using MediaPipe.
"""
import cv2
import numpy as np
from typing import Optional, List, Tuple

from .types import GestureSample, Point2D

WRIST = 0
THUMB_TIP = 4
INDEX_TIP = 8


class HandsTracker:
    """Hand landmark tracker using MediaPipe Hands."""

    def __init__(self, max_num_hands: int = 1, model_complexity: int = 1,
                 min_detection_conf: float = 0.75, min_tracking_conf: float = 0.7):
        """
        Initialize the hands tracker.

        Args:
            max_num_hands: Maximum number of hands to detect
            model_complexity: MediaPipe model complexity (0 or 1)
            min_detection_conf: Minimum confidence for hand detection
            min_tracking_conf: Minimum confidence for hand tracking
        """
        import mediapipe as mp

        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=max_num_hands,
            model_complexity=model_complexity,
            min_detection_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf
        )

    def process(self, frame_bgr: np.ndarray) -> Optional[List[Tuple[float, float]]]:
        """
        Process a frame and return hand landmarks.

        Args:
            frame_bgr: Input frame in BGR format

        Returns:
            List of 21 (x, y) coordinates in [0..1] range, or None if no hand detected
        """
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self.hands.process(frame_rgb)

        if results.multi_hand_landmarks:
            hand_landmarks = results.multi_hand_landmarks[0]
            return [(landmark.x, landmark.y) for landmark in hand_landmarks.landmark]

        return None

    def close(self) -> None:
        self.hands.close()


def sample_from_landmarks(landmarks: Optional[List[Tuple[float, float]]]) -> Optional[GestureSample]:
    """
    Pick the landmarks the gesture logic uses.

    Args:
        landmarks: List of 21 hand landmarks, or None if no hand detected

    Returns:
        GestureSample with wrist, thumb tip and index tip, or None
    """
    if not landmarks:
        return None
    return GestureSample(
        wrist=Point2D(*landmarks[WRIST]),
        thumb_tip=Point2D(*landmarks[THUMB_TIP]),
        index_tip=Point2D(*landmarks[INDEX_TIP])
    )


def draw_landmarks(frame: np.ndarray, landmarks: List[Tuple[float, float]]) -> np.ndarray:
    """
    Draw hand landmarks on the frame, highlighting the pinch pair.

    Args:
        frame: Input frame
        landmarks: List of (x, y) coordinates in [0..1] range

    Returns:
        Frame with landmarks drawn
    """
    height, width = frame.shape[:2]

    for i, (x, y) in enumerate(landmarks):
        px = int(x * width)
        py = int(y * height)
        color = (0, 255, 255) if i in (THUMB_TIP, INDEX_TIP) else (0, 255, 0)
        cv2.circle(frame, (px, py), 3, color, -1)

    thumb = landmarks[THUMB_TIP]
    index = landmarks[INDEX_TIP]
    cv2.line(frame,
             (int(thumb[0] * width), int(thumb[1] * height)),
             (int(index[0] * width), int(index[1] * height)),
             (0, 255, 255), 1)

    return frame
