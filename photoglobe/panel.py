"""
Text for the status line and the photo card.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Union

from .collection import PhotoCollection
from .types import Photo

EMPTY_STATUS = "Waiting for the first travel photo..."
NO_NOTES = "No notes"


@dataclass
class InfoPanel:
    status: str
    card: Optional[List[str]] = None  # None hides the card
    photo_id: Optional[str] = None  # whose image goes above the card


def parse_time(value: Union[str, float]) -> Optional[datetime]:
    """
    Parse an ISO string (trailing Z accepted) or a number of epoch
    milliseconds. Returns None when the value cannot be read as a time.
    """
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_date(value: Union[str, float]) -> str:
    parsed = parse_time(value)
    return parsed.date().isoformat() if parsed else str(value)


def format_datetime(value: Union[str, float]) -> str:
    parsed = parse_time(value)
    return parsed.strftime("%Y-%m-%d %H:%M") if parsed else str(value)


def photo_card(photo: Photo) -> List[str]:
    return [
        photo.title,
        format_datetime(photo.time),
        f"{photo.lat:.4f}, {photo.lon:.4f}",
        photo.notes or NO_NOTES,
    ]


def build_panel(collection: PhotoCollection) -> InfoPanel:
    photo = collection.current()
    if photo is None:
        return InfoPanel(status=EMPTY_STATUS)

    status = f"Timeline {collection.current_index + 1}/{len(collection)} - {format_date(photo.time)}"
    return InfoPanel(status=status, card=photo_card(photo), photo_id=photo.id)
