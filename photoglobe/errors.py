"""
Exceptions raised by the photo globe collaborators.

Transient absence (no hand in frame, empty photo collection) is a normal
state and never raises.
"""
from typing import Optional


class PhotoGlobeError(Exception):
    """Base class for all photo globe errors."""


class BackendError(PhotoGlobeError):
    """The photo backend could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UploadRejectedError(BackendError):
    """The backend refused an upload (missing file or coordinates)."""


class PhotoNotFoundError(BackendError):
    """The backend has no photo with the requested id."""


class CameraUnavailableError(PhotoGlobeError, RuntimeError):
    """The camera could not be opened or produced no frame."""
