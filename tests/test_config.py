"""
Test cases for configuration loading.
"""
import os
import tempfile
import unittest
import sys
from pathlib import Path
from unittest.mock import patch

import yaml

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from photoglobe.config import load_config, BACKEND_URL_ENV, Cfg

DEFAULT_CONFIG = Path(__file__).parent.parent / "photoglobe" / "config.default.yaml"


class TestLoadConfig(unittest.TestCase):
    """Test YAML configuration loading."""

    def test_defaults(self):
        cfg = load_config()
        self.assertIsInstance(cfg, Cfg)
        self.assertEqual(cfg.gestures.swipe.threshold, 0.11)
        self.assertEqual(cfg.gestures.pinch.threshold, 0.03)
        self.assertEqual(cfg.gestures.pinch.debounce_ms, 900)
        self.assertEqual(cfg.scene.marker_radius, 1.25)
        self.assertEqual(cfg.scene.ring_radius, 1.78)
        self.assertEqual(cfg.scene.trail_steps, 25)
        self.assertEqual(cfg.mediapipe.max_num_hands, 1)
        self.assertEqual(cfg.log_level, "INFO")

    def test_colors_are_bgr_tuples(self):
        cfg = load_config()
        self.assertEqual(cfg.scene.active_marker.color, (200, 124, 255))
        self.assertIsInstance(cfg.scene.idle_trail.color, tuple)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_config("/nonexistent/photoglobe.yaml")

    def test_custom_file(self):
        with open(DEFAULT_CONFIG) as f:
            data = yaml.safe_load(f)
        data['gestures']['swipe']['threshold'] = 0.2
        data['gestures']['pinch']['debounce_ms'] = 400
        del data['logging']

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "custom.yaml"
            with open(path, 'w') as f:
                yaml.safe_dump(data, f)
            cfg = load_config(str(path))

        self.assertEqual(cfg.gestures.swipe.threshold, 0.2)
        self.assertEqual(cfg.gestures.pinch.debounce_ms, 400)
        self.assertEqual(cfg.log_level, "INFO")

    def test_backend_url_from_environment(self):
        with patch.dict(os.environ, {BACKEND_URL_ENV: "http://photos.local:9000"}):
            cfg = load_config()
        self.assertEqual(cfg.backend.base_url, "http://photos.local:9000")


if __name__ == '__main__':
    unittest.main()
