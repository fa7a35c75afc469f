"""
OpenCV canvas renderer for the photo globe and the per-frame animation loop.
"""
import logging
import math
from typing import List, Mapping, Optional

import cv2
import numpy as np

from .config import RenderConfig
from .panel import InfoPanel
from .scene import (Marker, Trail, PointCloud, Polyline, BAND_TILT,
                    LAYER_WORLD, LAYER_GLOBE, LAYER_SHELL, LAYER_BAND, LAYER_STARS)

logger = logging.getLogger(__name__)

BACKGROUND = (21, 6, 2)  # BGR
TEXT_COLOR = (255, 255, 255)
NEAR_PLANE = 0.1


def rot_x(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[1, 0, 0], [0, c, -s], [0, s, c]])


def rot_y(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, 0, s], [0, 1, 0], [-s, 0, c]])


def rot_z(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s, 0], [s, c, 0], [0, 0, 1]])


def shade(color, opacity: float):
    """Fake transparency by darkening toward the background."""
    return tuple(int(bg + (c - bg) * opacity) for c, bg in zip(color, BACKGROUND))


class CanvasEngine:
    """
    Graphics engine that keeps scene objects and draws them onto a numpy
    image with a perspective camera looking at the origin.
    """

    def __init__(self, cfg: RenderConfig):
        self.cfg = cfg
        self.objects: List[object] = []
        self.panel: Optional[InfoPanel] = None
        self.notice: Optional[str] = None
        # Card images by photo id, e.g. a ThumbnailCache
        self.thumbnails: Optional[Mapping[str, np.ndarray]] = None

        # Cosmetic animation state, advanced by RenderLoop
        self.angles = {LAYER_WORLD: 0.0, LAYER_GLOBE: 0.0, LAYER_SHELL: 0.0,
                       LAYER_BAND: 0.0, LAYER_STARS: 0.0}
        self.bob = 0.0

        self._focal = (cfg.height / 2) / math.tan(math.radians(cfg.fov_deg) / 2)
        self._eye = np.array([0.0, cfg.camera_height, cfg.camera_distance])
        forward = -self._eye / np.linalg.norm(self._eye)
        right = np.cross(forward, np.array([0.0, 1.0, 0.0]))
        right /= np.linalg.norm(right)
        up = np.cross(right, forward)
        self._view = np.stack([right, up, forward])

    def add(self, obj: object) -> None:
        self.objects.append(obj)

    def remove(self, obj: object) -> None:
        self.objects.remove(obj)

    def count(self, kind: type) -> int:
        return sum(1 for obj in self.objects if isinstance(obj, kind))

    def layer_transform(self, points: np.ndarray, layer: str) -> np.ndarray:
        world_yaw = rot_y(self.angles[LAYER_WORLD])
        if layer == LAYER_STARS:
            return points @ (world_yaw @ rot_y(self.angles[LAYER_STARS])).T

        if layer == LAYER_GLOBE or layer == LAYER_SHELL:
            local = rot_y(self.angles[layer])
        elif layer == LAYER_BAND:
            local = rot_x(BAND_TILT) @ rot_z(self.angles[LAYER_BAND])
        else:
            local = np.eye(3)

        moved = points @ (world_yaw @ local).T
        moved[:, 1] += self.bob
        return moved

    def project(self, points: np.ndarray):
        """
        Project world points to pixels.

        Returns:
            (pixels as int (N, 2), depth (N,), visible mask (N,))
        """
        cam = (points - self._eye) @ self._view.T
        depth = cam[:, 2]
        visible = depth > NEAR_PLANE
        safe = np.where(visible, depth, 1.0)
        u = self.cfg.width / 2 + self._focal * cam[:, 0] / safe
        v = self.cfg.height / 2 - self._focal * cam[:, 1] / safe
        pixels = np.clip(np.stack([u, v], axis=-1), -1e6, 1e6)
        return pixels.astype(np.int32), depth, visible

    def render(self, preview: Optional[np.ndarray] = None) -> np.ndarray:
        frame = np.empty((self.cfg.height, self.cfg.width, 3), dtype=np.uint8)
        frame[:] = BACKGROUND

        # Back to front by kind; markers last so they stay readable
        order = (PointCloud, Polyline, Trail, Marker)
        for kind in order:
            for obj in self.objects:
                if isinstance(obj, kind):
                    self._draw(frame, obj)

        if self.panel is not None:
            self._draw_panel(frame, self.panel)
        if self.notice:
            cv2.putText(frame, self.notice, (10, 58), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (80, 80, 255), 1)
        if preview is not None:
            self._draw_preview(frame, preview)
        return frame

    def _draw(self, frame: np.ndarray, obj) -> None:
        if isinstance(obj, Marker):
            pts = self.layer_transform(obj.position[np.newaxis, :], obj.layer)
            pixels, depth, visible = self.project(pts)
            if visible[0]:
                radius = max(2, int(obj.size * self._focal / depth[0]))
                cv2.circle(frame, tuple(int(c) for c in pixels[0]), radius,
                           shade(obj.color, obj.opacity), -1, cv2.LINE_AA)
        elif isinstance(obj, (Trail, Polyline)):
            pts = self.layer_transform(obj.points, obj.layer)
            pixels, _, visible = self.project(pts)
            if visible.all():
                closed = isinstance(obj, Polyline) and obj.closed
                cv2.polylines(frame, [pixels.reshape(-1, 1, 2)], closed,
                              shade(obj.color, obj.opacity), 1, cv2.LINE_AA)
        elif isinstance(obj, PointCloud):
            pts = self.layer_transform(obj.points, obj.layer)
            pixels, _, visible = self.project(pts)
            h, w = frame.shape[:2]
            inside = visible & (pixels[:, 0] >= 0) & (pixels[:, 0] < w) & (pixels[:, 1] >= 0) & (pixels[:, 1] < h)
            pixels = pixels[inside]
            frame[pixels[:, 1], pixels[:, 0]] = shade(obj.color, obj.opacity)

    def _draw_panel(self, frame: np.ndarray, panel: InfoPanel) -> None:
        cv2.putText(frame, panel.status, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, TEXT_COLOR, 2)
        if not panel.card:
            return

        line_height = 24
        top = frame.shape[0] - 20 - line_height * len(panel.card)
        self._draw_card_image(frame, panel.photo_id, top - 20)
        cv2.rectangle(frame, (0, top - 10), (380, frame.shape[0]), (40, 20, 10), -1)
        for i, line in enumerate(panel.card):
            scale, thickness = (0.7, 2) if i == 0 else (0.5, 1)
            cv2.putText(frame, line, (10, top + 14 + i * line_height),
                        cv2.FONT_HERSHEY_SIMPLEX, scale, TEXT_COLOR, thickness)

    def _draw_card_image(self, frame: np.ndarray, photo_id: Optional[str], bottom: int) -> None:
        if self.thumbnails is None or photo_id is None:
            return
        image = self.thumbnails.get(photo_id)
        if image is None:
            return

        h, w = image.shape[:2]
        top = bottom - h
        # Never cover the status line
        if top < 40 or w + 10 > frame.shape[1]:
            return
        frame[top:bottom, 10:10 + w] = image

    def _draw_preview(self, frame: np.ndarray, preview: np.ndarray) -> None:
        width = self.cfg.width // 4
        height = int(preview.shape[0] * width / preview.shape[1])
        if height + 20 > frame.shape[0]:
            return
        thumb = cv2.resize(preview, (width, height))
        frame[10:10 + height, -width - 10:-10] = thumb


class RenderLoop:
    """
    Advances the cosmetic animation once per display frame and draws.

    Never touches the photo cursor; scene objects are rebuilt elsewhere
    before the next tick reads them.
    """

    def __init__(self, engine: CanvasEngine, cfg: RenderConfig):
        self.engine = engine
        self.cfg = cfg
        self.frames = 0

    def tick(self, now: float, preview: Optional[np.ndarray] = None) -> np.ndarray:
        angles = self.engine.angles
        angles[LAYER_GLOBE] += self.cfg.globe_spin
        angles[LAYER_SHELL] += self.cfg.shell_spin
        angles[LAYER_BAND] += self.cfg.band_spin
        angles[LAYER_STARS] += self.cfg.star_spin
        angles[LAYER_WORLD] += self.cfg.auto_rotate
        self.engine.bob = math.sin(now * self.cfg.bob_frequency) * self.cfg.bob_amplitude

        self.frames += 1
        return self.engine.render(preview)
