"""
Client for the photo backend's REST API, plus an offline photo source.
"""
import json
import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests
from pydantic import ValidationError

from .errors import BackendError, UploadRejectedError, PhotoNotFoundError
from .panel import parse_time
from .types import Photo

logger = logging.getLogger(__name__)


class PhotoBackendClient:
    """
    Talks to the photo backend.

    Endpoints:
        GET    /api/photos       -> photos ordered by time
        POST   /api/photos       -> multipart upload, returns the created photo
        DELETE /api/photos/{id}
    """

    def __init__(self, base_url: str, timeout_s: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.session = session or requests.Session()

    def list_photos(self) -> List[Photo]:
        response = self._request("GET", "/api/photos")
        try:
            records = response.json()
        except ValueError as e:
            raise BackendError(f"Photo list is not valid JSON: {e}") from e
        photos = [self._parse_photo(item) for item in records]
        logger.info(f"Fetched {len(photos)} photos from {self.base_url}")
        return photos

    def upload_photo(self, path: Union[str, Path], lat: float, lon: float, time: str,
                     title: str = "", notes: str = "") -> Photo:
        """
        Upload an image file with its metadata.

        Raises:
            UploadRejectedError: if the backend rejects the upload
            BackendError: on transport failure or any other error status
        """
        path = Path(path)
        mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        data = {"title": title, "lat": str(lat), "lon": str(lon), "time": time, "notes": notes}

        with open(path, "rb") as f:
            response = self._request(
                "POST", "/api/photos",
                data=data,
                files={"photo": (path.name, f, mime_type)}
            )

        photo = self._parse_photo(response.json())
        logger.info(f"Uploaded {path.name} as photo {photo.id}")
        return photo

    def delete_photo(self, photo_id: str) -> None:
        self._request("DELETE", f"/api/photos/{photo_id}")
        logger.info(f"Deleted photo {photo_id}")

    def image_url(self, photo: Photo) -> str:
        if photo.file_ref.startswith(("http://", "https://")):
            return photo.file_ref
        return f"{self.base_url}/{photo.file_ref.lstrip('/')}"

    def fetch_image(self, photo: Photo) -> bytes:
        """Download the image file of a photo."""
        if not photo.file_ref:
            raise PhotoNotFoundError(f"Photo {photo.id} has no image file")
        response = self._send("GET", self.image_url(photo))
        return response.content

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        return self._send(method, f"{self.base_url}{path}", **kwargs)

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            response = self.session.request(method, url, timeout=self.timeout_s, **kwargs)
        except requests.exceptions.RequestException as e:
            raise BackendError(f"{method} {url} failed: {e}") from e

        if response.status_code == 400:
            raise UploadRejectedError(_error_message(response), status_code=400)
        if response.status_code == 404:
            raise PhotoNotFoundError(_error_message(response), status_code=404)
        if not response.ok:
            raise BackendError(f"{method} {url} returned {response.status_code}: {_error_message(response)}",
                               status_code=response.status_code)
        return response

    @staticmethod
    def _parse_photo(item: Dict[str, Any]) -> Photo:
        try:
            return Photo.model_validate(item)
        except ValidationError as e:
            raise BackendError(f"Malformed photo record: {e}") from e


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and "error" in body:
        return str(body["error"])
    return response.text


def _sort_key(photo: Photo):
    parsed = parse_time(photo.time)
    return parsed.timestamp() if parsed else float("inf")


def load_photos_file(path: Union[str, Path]) -> List[Photo]:
    """
    Load photos from a local photos.json in the backend's storage format,
    ordered by time the way the backend serves them.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Photo file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        records = json.load(f)

    photos = [Photo.model_validate(item) for item in records]
    return sorted(photos, key=_sort_key)
