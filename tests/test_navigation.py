"""
Test cases for the navigation controller and the info panel.
"""
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from photoglobe.collection import PhotoCollection
from photoglobe.config import load_config
from photoglobe.navigation import NavigationController
from photoglobe.panel import build_panel, EMPTY_STATUS, NO_NOTES
from photoglobe.types import GestureSample, Point2D, NavigationIntent, IntentSource, Photo


def make_photos(count: int):
    return [
        Photo(id=f"p{i}", title=f"Stop {i}", lat=48.8584, lon=2.2945,
              time=f"2024-05-{i + 1:02d}T10:30:00Z", file=f"/uploads/{i}.jpg")
        for i in range(count)
    ]


def hand(wrist_x: float) -> GestureSample:
    return GestureSample(wrist=Point2D(wrist_x, 0.8), thumb_tip=Point2D(0.2, 0.2), index_tip=Point2D(0.5, 0.5))


class TestNavigationController(unittest.TestCase):
    """Test intent serialization onto the cursor."""

    def setUp(self):
        """Set up test configuration."""
        self.cfg = load_config()
        self.collection = PhotoCollection(make_photos(5))
        self.controller = NavigationController(self.cfg, self.collection)
        self.moves = []
        self.collection.subscribe(lambda c: self.moves.append(c.current_index))

    def test_intents_applied_in_arrival_order(self):
        for intent in (NavigationIntent.ADVANCE, NavigationIntent.ADVANCE,
                       NavigationIntent.RETREAT, NavigationIntent.ADVANCE):
            self.controller.submit(intent, IntentSource.SWIPE)

        applied = self.controller.drain()

        self.assertEqual(applied, 4)
        self.assertEqual(self.moves, [1, 2, 1, 2])
        self.assertEqual(len(self.controller.queue), 0)

    def test_identical_intents_are_not_collapsed(self):
        for _ in range(3):
            self.controller.submit(NavigationIntent.ADVANCE, IntentSource.PINCH)
        self.controller.drain()
        self.assertEqual(self.moves, [1, 2, 3])

    def test_drain_with_nothing_pending(self):
        self.assertEqual(self.controller.drain(), 0)
        self.assertEqual(self.moves, [])

    def test_ui_triggers_wrap(self):
        self.controller.previous_photo()
        self.assertEqual(self.controller.current_photo().id, "p4")
        self.controller.next_photo()
        self.assertEqual(self.controller.current_photo().id, "p0")

    def test_step_photo(self):
        self.controller.step_photo(-2)
        self.assertEqual(self.collection.current_index, 3)

    def test_gesture_frames_move_cursor(self):
        self.assertEqual(self.controller.on_gesture_frame(hand(0.40), 0.0), 0)
        self.assertEqual(self.controller.on_gesture_frame(hand(0.55), 0.03), 1)
        self.assertEqual(self.controller.on_gesture_frame(None, 0.06), 0)
        self.assertEqual(self.controller.on_gesture_frame(hand(0.30), 0.09), 0)
        self.assertEqual(self.controller.on_gesture_frame(hand(0.15), 0.12), 1)
        self.assertEqual(self.moves, [1, 0])

    def test_gestures_on_empty_collection(self):
        self.controller.on_collection_changed([])
        self.controller.on_gesture_frame(hand(0.40), 0.0)
        self.controller.on_gesture_frame(hand(0.60), 0.03)
        self.assertIsNone(self.controller.current_photo())
        self.assertEqual(len(self.controller.queue), 0)

    def test_collection_changes(self):
        self.controller.step_photo(4)
        self.controller.on_collection_changed(make_photos(2))
        self.assertEqual(self.controller.current_photo().id, "p1")

    def test_upload_selects_newest(self):
        self.controller.on_upload_complete(make_photos(7))
        self.assertEqual(self.controller.current_photo().id, "p6")

    def test_upload_selects_uploaded_photo_by_id(self):
        # An upload dated in the past lands mid-timeline
        self.controller.on_upload_complete(make_photos(7), uploaded_id="p2")
        self.assertEqual(self.controller.current_photo().id, "p2")

    def test_upload_with_unknown_id_selects_newest(self):
        self.controller.on_upload_complete(make_photos(4), uploaded_id="gone")
        self.assertEqual(self.controller.current_photo().id, "p3")

    def test_reset_gestures(self):
        self.controller.on_gesture_frame(hand(0.40), 0.0)
        self.controller.reset_gestures()
        self.assertIsNone(self.controller.interpreter.state.swipe_baseline)


class TestInfoPanel(unittest.TestCase):
    """Test the status line and photo card text."""

    def test_empty_collection_shows_placeholder(self):
        panel = build_panel(PhotoCollection())
        self.assertEqual(panel.status, EMPTY_STATUS)
        self.assertIsNone(panel.card)

    def test_status_and_card(self):
        collection = PhotoCollection(make_photos(3))
        collection.step(1)
        panel = build_panel(collection)

        self.assertEqual(panel.status, "Timeline 2/3 - 2024-05-02")
        self.assertEqual(panel.card, ["Stop 1", "2024-05-02 10:30", "48.8584, 2.2945", NO_NOTES])

    def test_notes_and_unparseable_time(self):
        photo = Photo(id="x", title="Harbour", lat=-33.85678, lon=151.21529,
                      time="last summer", notes="Ferry ride", file="/uploads/x.jpg")
        panel = build_panel(PhotoCollection([photo]))

        self.assertEqual(panel.status, "Timeline 1/1 - last summer")
        self.assertEqual(panel.card, ["Harbour", "last summer", "-33.8568, 151.2153", "Ferry ride"])

    def test_epoch_time(self):
        # 1714557000000 ms is 2024-05-01 09:50 UTC
        photo = Photo(id="e", title="Ferry", lat=1.0, lon=2.0, time=1714557000000, file="/uploads/e.jpg")
        panel = build_panel(PhotoCollection([photo]))

        self.assertEqual(panel.status, "Timeline 1/1 - 2024-05-01")
        self.assertEqual(panel.card[1], "2024-05-01 09:50")
        self.assertEqual(panel.photo_id, "e")

    def test_unreadable_epoch_shown_verbatim(self):
        photo = Photo(id="e", lat=1.0, lon=2.0, time=1e30, file="")
        panel = build_panel(PhotoCollection([photo]))
        self.assertEqual(panel.card[1], "1e+30")


if __name__ == '__main__':
    unittest.main()
