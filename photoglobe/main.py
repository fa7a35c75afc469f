"""
Main application for the gesture-driven photo globe.
"""
import argparse
import cv2
import asyncio
import logging
import time
from typing import List, Optional, Sequence, Set, Tuple

import numpy as np

from .backend import PhotoBackendClient, load_photos_file
from .camera import CameraSession
from .collection import PhotoCollection
from .config import load_config
from .errors import BackendError, CameraUnavailableError
from .landmarks import HandsTracker, sample_from_landmarks, draw_landmarks
from .navigation import NavigationController
from .panel import build_panel
from .render import CanvasEngine, RenderLoop
from .scene import SceneObjectBuilder, build_decor
from .thumbnails import ThumbnailCache
from .types import Photo

logger = logging.getLogger(__name__)

KEY_ESC = 27
KEY_LEFT = 81
KEY_RIGHT = 83


class PhotoGlobeApp:
    """Main application class for the photo globe."""

    def __init__(self, config_path: Optional[str] = None, offline_path: Optional[str] = None):
        """Initialize the application with configuration."""
        self.config = load_config(config_path)
        self.offline_path = offline_path

        self.backend = PhotoBackendClient(self.config.backend.base_url, self.config.backend.timeout_s)
        self.thumbnails = ThumbnailCache(self.backend, width=self.config.display.photo_width)
        self._thumbnails_pending: Set[str] = set()

        self.collection = PhotoCollection()
        self.engine = CanvasEngine(self.config.render)
        self.engine.thumbnails = self.thumbnails
        for obj in build_decor(self.config.scene):
            self.engine.add(obj)
        self.builder = SceneObjectBuilder(self.engine, self.config.scene)
        self.collection.subscribe(self._on_collection_update)
        self.engine.panel = build_panel(self.collection)

        self.controller = NavigationController(self.config, self.collection)
        self.render_loop = RenderLoop(self.engine, self.config.render)

        self.camera = CameraSession(self.config.camera)
        self.tracker: Optional[HandsTracker] = None
        self.preview: Optional[np.ndarray] = None

        self.running = False
        self._stop_camera_requested = False
        self._camera_starting = False
        self._camera_start_task: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()

    def _on_collection_update(self, collection: PhotoCollection) -> None:
        # Runs synchronously inside every cursor/collection change
        self.builder.rebuild(collection)
        self.engine.panel = build_panel(collection)
        self._request_thumbnail(collection.current())

    def _request_thumbnail(self, photo: Optional[Photo]) -> None:
        if photo is None or photo.id in self._thumbnails_pending or not self.thumbnails.wanted(photo):
            return
        self._thumbnails_pending.add(photo.id)
        self._spawn(self._load_thumbnail(photo))

    async def _load_thumbnail(self, photo: Photo) -> None:
        try:
            image = await asyncio.to_thread(self.thumbnails.fetch, photo)
        except BackendError as e:
            logger.warning(f"No image for photo {photo.id}: {e}")
            self.thumbnails.mark_failed(photo.id)
            return
        finally:
            self._thumbnails_pending.discard(photo.id)

        self.thumbnails.put(photo.id, image)

    def _fetch_photos(self) -> List[Photo]:
        if self.offline_path:
            return load_photos_file(self.offline_path)
        return self.backend.list_photos()

    async def reload_photos(self) -> None:
        """Fetch the photo list and replace the collection with it."""
        try:
            photos = await asyncio.to_thread(self._fetch_photos)
        except (BackendError, FileNotFoundError, ValueError) as e:
            logger.error(f"Could not load photos: {e}")
            self.engine.notice = "Photo backend unavailable - press 'r' to retry"
            return

        self.engine.notice = None
        self.thumbnails.forget_failures()
        self.controller.on_collection_changed(photos)
        logger.info(f"Loaded {len(photos)} photos")

    def upload(self, path: str, lat: float, lon: float, time_str: str, title: str = "", notes: str = "") -> Photo:
        """Upload a photo, then show the refreshed timeline at the uploaded entry."""
        photo = self.backend.upload_photo(path, lat, lon, time_str, title=title, notes=notes)
        self.controller.on_upload_complete(self.backend.list_photos(), uploaded_id=photo.id)
        return photo

    async def start_camera(self) -> None:
        """Acquire the camera on user request; failures leave the app ready to retry."""
        if self.camera.running or self._camera_starting:
            return

        self._camera_starting = True
        self.engine.notice = "Starting gesture recognition..."
        try:
            await asyncio.to_thread(self.camera.start)
            if self.tracker is None:
                mp_cfg = self.config.mediapipe
                self.tracker = HandsTracker(
                    max_num_hands=mp_cfg.max_num_hands,
                    model_complexity=mp_cfg.model_complexity,
                    min_detection_conf=mp_cfg.min_detection_confidence,
                    min_tracking_conf=mp_cfg.min_tracking_confidence
                )
        except (CameraUnavailableError, RuntimeError, ImportError) as e:
            self.camera.stop()
            logger.error(f"Cannot start gesture recognition: {e}")
            self.engine.notice = "Camera unavailable - check permissions and press 'c' to retry"
            return
        finally:
            self._camera_starting = False

        self.controller.reset_gestures()
        self.engine.notice = None
        logger.info("🖐️  Gesture recognition running")

    def request_camera_stop(self) -> None:
        self._stop_camera_requested = True

    def _detect(self) -> Tuple[Optional[np.ndarray], Optional[List[Tuple[float, float]]]]:
        """Grab one frame and find the hand. Runs off the event loop; touches no shared state."""
        frame = self.camera.read()
        if frame is None:
            return None, None

        landmarks = self.tracker.process(frame)
        if landmarks and self.config.display.show_landmarks:
            frame = draw_landmarks(frame, landmarks)
        return frame, landmarks

    async def camera_loop(self) -> None:
        while self.running:
            if self._stop_camera_requested:
                self._stop_camera_requested = False
                self.camera.stop()
                self.preview = None
                self.controller.reset_gestures()

            if not self.camera.running or self.tracker is None:
                await asyncio.sleep(0.05)
                continue

            frame, landmarks = await asyncio.to_thread(self._detect)
            if frame is None:
                await asyncio.sleep(0.01)
                continue

            if self.config.display.show_camera_preview:
                self.preview = frame

            # Gesture state and the cursor are only mutated here, on the loop
            self.controller.on_gesture_frame(sample_from_landmarks(landmarks), time.monotonic())

    async def render_forever(self) -> None:
        interval = 1.0 / self.config.render.fps
        window_name = self.config.display.window_name

        while self.running:
            started = time.monotonic()
            frame = self.render_loop.tick(started, self.preview)
            cv2.imshow(window_name, frame)

            key = cv2.waitKey(1) & 0xFF
            if key != 0xFF:
                self.handle_key(key)

            elapsed = time.monotonic() - started
            await asyncio.sleep(max(0.0, interval - elapsed))

    def handle_key(self, key: int) -> None:
        if key in (ord('q'), KEY_ESC):
            logger.info("User requested quit")
            self.running = False
        elif key in (ord('n'), KEY_RIGHT):
            self.controller.next_photo()
        elif key in (ord('p'), KEY_LEFT):
            self.controller.previous_photo()
        elif key == ord('c'):
            if self.camera.running:
                self.request_camera_stop()
            else:
                self._camera_start_task = self._spawn(self.start_camera())
        elif key == ord('r'):
            self._spawn(self.reload_photos())

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _settle_tasks(self) -> None:
        """
        Finish background work before resources are released.

        A camera start is awaited, not cancelled: its worker thread would
        still open the capture after a cancel and nothing would release it.
        """
        for task in list(self._tasks):
            if task is not self._camera_start_task:
                task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)

    async def run(self, start_camera: bool = False) -> None:
        """Run the render loop and the camera loop until the user quits."""
        logger.info(f"Starting {self.config.display.window_name}")
        logger.info("🎯 Controls: swipe left/right or pinch to browse, "
                    "n/p keys, 'c' camera, 'r' reload, 'q' quit")

        self.running = True
        await self.reload_photos()
        if start_camera:
            await self.start_camera()

        loops = [asyncio.create_task(self.render_forever()), asyncio.create_task(self.camera_loop())]
        try:
            await asyncio.wait(loops, return_when=asyncio.FIRST_EXCEPTION)
        finally:
            self.running = False
            # Both loops exit on their own once running is False; an in-flight
            # frame read completes before the camera is released below
            await asyncio.gather(*loops, return_exceptions=True)
            await self._settle_tasks()
            self.camera.stop()
            if self.tracker is not None:
                self.tracker.close()
            cv2.destroyAllWindows()
            logger.info("Cleanup completed")

        for task in loops:
            task.result()


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Particle Album: a photo globe browsed with hand gestures")
    parser.add_argument("--config", help="Path to a YAML config file (default: packaged config.default.yaml)")
    parser.add_argument("--offline", metavar="PHOTOS_JSON",
                        help="Read photos from a local photos.json instead of the backend")
    parser.add_argument("--camera", action="store_true", help="Start gesture recognition right away")

    upload = parser.add_argument_group("upload", "Upload a photo before the globe opens")
    upload.add_argument("--upload", metavar="IMAGE", help="Image file to upload")
    upload.add_argument("--lat", type=float, help="Latitude of the photo")
    upload.add_argument("--lon", type=float, help="Longitude of the photo")
    upload.add_argument("--time", help="When the photo was taken, ISO 8601")
    upload.add_argument("--title", default="", help="Photo title")
    upload.add_argument("--notes", default="", help="Free-text notes")

    args = parser.parse_args(argv)
    if args.upload and (args.lat is None or args.lon is None or not args.time):
        parser.error("--upload needs --lat, --lon and --time")
    return args


async def main(argv: Optional[Sequence[str]] = None):
    """Entry point for the application."""
    args = parse_args(argv)

    app = PhotoGlobeApp(config_path=args.config, offline_path=args.offline)
    logging.basicConfig(
        level=getattr(logging, app.config.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    if args.upload:
        try:
            photo = app.upload(args.upload, lat=args.lat, lon=args.lon, time_str=args.time,
                               title=args.title, notes=args.notes)
            logger.info(f"Uploaded '{photo.title}' ({photo.id})")
        except (BackendError, OSError) as e:
            logger.error(f"Upload failed, check the parameters: {e}")
            return

    try:
        await app.run(start_camera=args.camera)
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
