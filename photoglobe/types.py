"""
Type definitions for the photo globe: photos, gesture samples and intents.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


class Photo(BaseModel):
    """A geotagged photo record as served by the photo backend."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str = "Untitled"
    lat: float
    lon: float
    time: Union[str, float]  # ISO string or epoch milliseconds, used for ordering
    notes: str = ""
    file_ref: str = Field(default="", alias="file")


@dataclass(frozen=True)
class Point2D:
    """A point in normalized camera-frame coordinates [0..1]."""
    x: float
    y: float


@dataclass(frozen=True)
class GestureSample:
    """The landmarks of one detected hand that gesture logic looks at."""
    wrist: Point2D
    thumb_tip: Point2D
    index_tip: Point2D


class NavigationIntent(Enum):
    """Discrete navigation request produced by a gesture or a key press."""
    ADVANCE = 1
    RETREAT = -1

    @property
    def step(self) -> int:
        return self.value


class IntentSource(Enum):
    SWIPE = "swipe"
    PINCH = "pinch"
    KEYBOARD = "keyboard"


@runtime_checkable
class SceneEngineProto(Protocol):
    """Abstract protocol for graphics engines that hold scene objects."""

    def add(self, obj: object) -> None:
        """Make an object part of the rendered scene."""
        ...

    def remove(self, obj: object) -> None:
        """Drop an object from the rendered scene."""
        ...


@runtime_checkable
class IntentSinkProto(Protocol):
    """Anything that accepts navigation intents in arrival order."""

    def put(self, intent: NavigationIntent, source: IntentSource) -> None:
        ...
