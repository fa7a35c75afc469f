"""
Scene objects for the photo globe and the builder that keeps them in sync
with the photo collection.
"""
import logging
import math
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .collection import PhotoCollection
from .config import SceneConfig, Color
from .geo import to_vector, ring_point, lerp_path
from .types import SceneEngineProto

logger = logging.getLogger(__name__)

GLOBE_PARTICLES = 6000
SHELL_SEGMENTS = 36
BAND_TILT = math.pi / 2.2

# Layers get their own cosmetic rotation in the render loop
LAYER_WORLD = "world"
LAYER_GLOBE = "globe"
LAYER_SHELL = "shell"
LAYER_BAND = "band"
LAYER_STARS = "stars"


@dataclass(eq=False)
class Marker:
    """Point marking where a photo was taken."""
    photo_id: str
    position: np.ndarray
    size: float
    color: Color
    opacity: float
    active: bool
    layer: str = LAYER_WORLD


@dataclass(eq=False)
class Trail:
    """Line from a marker out to the timeline ring."""
    photo_id: str
    points: np.ndarray  # (N, 3)
    color: Color
    opacity: float
    active: bool
    layer: str = LAYER_WORLD


@dataclass(eq=False)
class PointCloud:
    name: str
    points: np.ndarray  # (N, 3)
    size: float
    color: Color
    opacity: float
    layer: str


@dataclass(eq=False)
class Polyline:
    name: str
    points: np.ndarray  # (N, 3)
    color: Color
    opacity: float
    layer: str
    closed: bool = False


def fibonacci_sphere(n: int, radius: float) -> np.ndarray:
    """Evenly spread n points over a sphere."""
    golden = np.pi * (3 - np.sqrt(5))
    i = np.arange(n)
    y = 1 - (i / float(n - 1)) * 2
    r = np.sqrt(1 - y * y)
    theta = golden * i
    return np.column_stack([np.cos(theta) * r, y, np.sin(theta) * r]) * radius


def circle(radius: float, segments: int) -> np.ndarray:
    angles = np.linspace(0.0, 2 * np.pi, segments, endpoint=False)
    return np.column_stack([np.cos(angles) * radius, np.sin(angles) * radius, np.zeros(segments)])


def build_decor(cfg: SceneConfig, seed: Optional[int] = None) -> List[object]:
    """
    Create the static backdrop: particle globe, wire shell, timeline band
    and starfield.
    """
    rng = np.random.default_rng(seed)
    objects: List[object] = []

    objects.append(PointCloud(
        name="globe",
        points=fibonacci_sphere(GLOBE_PARTICLES, cfg.globe_radius),
        size=0.019, color=(255, 232, 150), opacity=0.95, layer=LAYER_GLOBE
    ))

    # Wire shell: parallels and meridians
    for k in range(1, SHELL_SEGMENTS // 4):
        lat = -90 + k * 180 / (SHELL_SEGMENTS // 4)
        ring = np.array([to_vector(lat, lon, cfg.shell_radius)
                         for lon in np.linspace(-180, 180, SHELL_SEGMENTS, endpoint=False)])
        objects.append(Polyline(name="shell", points=ring, color=(255, 219, 120),
                                opacity=0.2, layer=LAYER_SHELL, closed=True))
    for lon in np.linspace(-180, 180, SHELL_SEGMENTS // 3, endpoint=False):
        meridian = np.array([to_vector(lat, lon, cfg.shell_radius)
                             for lat in np.linspace(-90, 90, SHELL_SEGMENTS // 2 + 1)])
        objects.append(Polyline(name="shell", points=meridian, color=(255, 219, 120),
                                opacity=0.2, layer=LAYER_SHELL))

    objects.append(Polyline(
        name="band", points=circle(cfg.ring_radius, 180), color=(255, 122, 143),
        opacity=0.35, layer=LAYER_BAND, closed=True
    ))

    stars = (rng.random((cfg.star_count, 3)) - 0.5) * np.array([120.0, 80.0, 120.0])
    objects.append(PointCloud(name="stars", points=stars, size=0.07,
                              color=(255, 206, 140), opacity=0.8, layer=LAYER_STARS))
    return objects


class SceneObjectBuilder:
    """
    Builds one marker and one trail per photo.

    Every rebuild discards the objects of the previous build first, so
    repeated rebuilds never accumulate objects in the engine.
    """

    def __init__(self, engine: SceneEngineProto, cfg: SceneConfig):
        self.engine = engine
        self.cfg = cfg
        self.markers: List[Marker] = []
        self.trails: List[Trail] = []

    def clear(self) -> None:
        """Remove all markers and trails from the engine."""
        for marker in self.markers:
            self.engine.remove(marker)
        for trail in self.trails:
            self.engine.remove(trail)
        self.markers = []
        self.trails = []

    def rebuild(self, collection: PhotoCollection) -> None:
        self.clear()

        current_index = collection.current_index
        for idx, photo in enumerate(collection):
            is_active = idx == current_index
            style = self.cfg.active_marker if is_active else self.cfg.idle_marker
            trail_style = self.cfg.active_trail if is_active else self.cfg.idle_trail

            position = to_vector(photo.lat, photo.lon, self.cfg.marker_radius)
            marker = Marker(
                photo_id=photo.id,
                position=position,
                size=style.size,
                color=style.color,
                opacity=style.opacity,
                active=is_active
            )
            self.markers.append(marker)
            self.engine.add(marker)

            points = lerp_path(position, ring_point(position, self.cfg.ring_radius), self.cfg.trail_steps)
            trail = Trail(
                photo_id=photo.id,
                points=points,
                color=trail_style.color,
                opacity=trail_style.opacity,
                active=is_active
            )
            self.trails.append(trail)
            self.engine.add(trail)

        logger.debug(f"Rebuilt {len(self.markers)} markers and {len(self.trails)} trails")
