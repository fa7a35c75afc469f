"""
Configuration management for the photo globe.
"""
import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any, Tuple
from dataclasses import dataclass

from dotenv import load_dotenv


BACKEND_URL_ENV = "PHOTOGLOBE_BACKEND_URL"

Color = Tuple[int, int, int]  # BGR, as OpenCV draws


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int
    fps: int


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands configuration settings."""
    max_num_hands: int
    model_complexity: int
    min_detection_confidence: float
    min_tracking_confidence: float


@dataclass
class SwipeConfig:
    """Swipe gesture configuration."""
    threshold: float  # horizontal wrist travel, normalized units


@dataclass
class PinchConfig:
    """Pinch gesture configuration."""
    threshold: float  # thumb-index distance, normalized units
    debounce_ms: int


@dataclass
class GesturesConfig:
    """Gesture recognition configuration."""
    swipe: SwipeConfig
    pinch: PinchConfig


@dataclass
class MarkerStyle:
    size: float
    color: Color
    opacity: float


@dataclass
class TrailStyle:
    color: Color
    opacity: float


@dataclass
class SceneConfig:
    """Radii, resolution and look of the globe and photo markers."""
    marker_radius: float
    ring_radius: float
    trail_steps: int
    globe_radius: float
    shell_radius: float
    star_count: int
    active_marker: MarkerStyle
    idle_marker: MarkerStyle
    active_trail: TrailStyle
    idle_trail: TrailStyle


@dataclass
class RenderConfig:
    """Projection and cosmetic animation settings."""
    width: int
    height: int
    fov_deg: float
    camera_distance: float
    camera_height: float
    fps: int
    globe_spin: float
    shell_spin: float
    band_spin: float
    star_spin: float
    auto_rotate: float
    bob_amplitude: float
    bob_frequency: float


@dataclass
class BackendConfig:
    """Photo backend connection settings."""
    base_url: str
    timeout_s: float


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    window_name: str
    show_landmarks: bool
    show_camera_preview: bool
    photo_width: int  # card image width in pixels


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    mediapipe: MediaPipeConfig
    gestures: GesturesConfig
    scene: SceneConfig
    render: RenderConfig
    backend: BackendConfig
    display: DisplayConfig
    log_level: str


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    The backend URL may be overridden through the PHOTOGLOBE_BACKEND_URL
    environment variable (a local .env file is honoured).

    Args:
        path: Path to config file. If None, uses the packaged config.default.yaml

    Returns:
        Configuration object with all settings
    """
    if path is None:
        path = Path(__file__).parent / "config.default.yaml"

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    cfg = _dict_to_config(data)

    load_dotenv()
    backend_url = os.getenv(BACKEND_URL_ENV)
    if backend_url:
        cfg.backend.base_url = backend_url

    return cfg


def _color(value) -> Color:
    b, g, r = value
    return (int(b), int(g), int(r))


def _marker_style(data: Dict[str, Any]) -> MarkerStyle:
    return MarkerStyle(size=data['size'], color=_color(data['color']), opacity=data['opacity'])


def _trail_style(data: Dict[str, Any]) -> TrailStyle:
    return TrailStyle(color=_color(data['color']), opacity=data['opacity'])


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    camera_data = data['camera']
    camera = CameraConfig(
        index=camera_data['index'],
        width=camera_data['width'],
        height=camera_data['height'],
        fps=camera_data['fps']
    )

    mp_data = data['mediapipe']
    mediapipe = MediaPipeConfig(
        max_num_hands=mp_data['max_num_hands'],
        model_complexity=mp_data['model_complexity'],
        min_detection_confidence=mp_data['min_detection_confidence'],
        min_tracking_confidence=mp_data['min_tracking_confidence']
    )

    gestures_data = data['gestures']
    swipe = SwipeConfig(threshold=gestures_data['swipe']['threshold'])
    pinch = PinchConfig(
        threshold=gestures_data['pinch']['threshold'],
        debounce_ms=gestures_data['pinch']['debounce_ms']
    )
    gestures = GesturesConfig(swipe=swipe, pinch=pinch)

    scene_data = data['scene']
    scene = SceneConfig(
        marker_radius=scene_data['marker_radius'],
        ring_radius=scene_data['ring_radius'],
        trail_steps=scene_data['trail_steps'],
        globe_radius=scene_data['globe_radius'],
        shell_radius=scene_data['shell_radius'],
        star_count=scene_data['star_count'],
        active_marker=_marker_style(scene_data['active_marker']),
        idle_marker=_marker_style(scene_data['idle_marker']),
        active_trail=_trail_style(scene_data['active_trail']),
        idle_trail=_trail_style(scene_data['idle_trail'])
    )

    render_data = data['render']
    render = RenderConfig(
        width=render_data['width'],
        height=render_data['height'],
        fov_deg=render_data['fov_deg'],
        camera_distance=render_data['camera_distance'],
        camera_height=render_data['camera_height'],
        fps=render_data['fps'],
        globe_spin=render_data['globe_spin'],
        shell_spin=render_data['shell_spin'],
        band_spin=render_data['band_spin'],
        star_spin=render_data['star_spin'],
        auto_rotate=render_data['auto_rotate'],
        bob_amplitude=render_data['bob_amplitude'],
        bob_frequency=render_data['bob_frequency']
    )

    backend_data = data['backend']
    backend = BackendConfig(
        base_url=backend_data['base_url'],
        timeout_s=backend_data['timeout_s']
    )

    display_data = data['display']
    display = DisplayConfig(
        window_name=display_data['window_name'],
        show_landmarks=display_data['show_landmarks'],
        show_camera_preview=display_data['show_camera_preview'],
        photo_width=display_data.get('photo_width', 240)
    )

    return Cfg(
        camera=camera,
        mediapipe=mediapipe,
        gestures=gestures,
        scene=scene,
        render=render,
        backend=backend,
        display=display,
        log_level=data.get('logging', {}).get('level', 'INFO')
    )
