"""
Particle Album photo globe

Renders geotagged photos as markers on a rotating particle globe and steps
through them in time order with hand gestures (swipe, pinch) read from a
webcam through MediaPipe.
"""

__version__ = "0.1.0"

from .types import Photo, Point2D, GestureSample, NavigationIntent, IntentSource, SceneEngineProto
from .config import load_config, Cfg
from .geo import to_vector
from .collection import PhotoCollection
from .scene import SceneObjectBuilder, Marker, Trail
from .gestures import GestureInterpreter, GestureState, IntentQueue
from .navigation import NavigationController
from .engine_mock import MockSceneEngine

__all__ = [
    "Photo",
    "Point2D",
    "GestureSample",
    "NavigationIntent",
    "IntentSource",
    "SceneEngineProto",
    "load_config",
    "Cfg",
    "to_vector",
    "PhotoCollection",
    "SceneObjectBuilder",
    "Marker",
    "Trail",
    "GestureInterpreter",
    "GestureState",
    "IntentQueue",
    "NavigationController",
    "MockSceneEngine",
]
