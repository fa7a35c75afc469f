"""
Integration test to verify all components can be imported and work together.
"""
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from photoglobe.types import Photo, GestureSample, Point2D, NavigationIntent, SceneEngineProto
from photoglobe.config import load_config
from photoglobe.collection import PhotoCollection
from photoglobe.engine_mock import MockSceneEngine
from photoglobe.navigation import NavigationController
from photoglobe.panel import build_panel
from photoglobe.render import CanvasEngine, RenderLoop
from photoglobe.scene import SceneObjectBuilder, Marker, Trail, build_decor


def hand(wrist_x: float, pinched: bool = False) -> GestureSample:
    thumb = Point2D(0.50, 0.50) if pinched else Point2D(0.20, 0.20)
    return GestureSample(wrist=Point2D(wrist_x, 0.8), thumb_tip=thumb, index_tip=Point2D(0.51, 0.50))


def test_integration():
    """Test that all components can be imported and used together."""
    print("Testing integration of photo globe components...")

    # 1. Configuration
    config = load_config()
    print(f"✓ Config loaded: swipe={config.gestures.swipe.threshold}, "
          f"pinch={config.gestures.pinch.threshold}/{config.gestures.pinch.debounce_ms}ms")

    # 2. Collection wired to scene building and the info panel
    photos = [
        Photo(id="tokyo", title="Tokyo", lat=35.6762, lon=139.6503, time="2024-04-01T08:00:00Z", file="/uploads/t.jpg"),
        Photo(id="kyoto", title="Kyoto", lat=35.0116, lon=135.7681, time="2024-04-03T08:00:00Z", file="/uploads/k.jpg"),
        Photo(id="osaka", title="Osaka", lat=34.6937, lon=135.5023, time="2024-04-05T08:00:00Z", file="/uploads/o.jpg"),
    ]
    engine = MockSceneEngine()
    assert isinstance(engine, SceneEngineProto)
    builder = SceneObjectBuilder(engine, config.scene)
    collection = PhotoCollection()
    panels = []
    collection.subscribe(builder.rebuild)
    collection.subscribe(lambda c: panels.append(build_panel(c)))

    controller = NavigationController(config, collection)
    controller.on_collection_changed(photos)
    assert len(engine.of_type(Marker)) == 3
    print(f"✓ Scene built: {len(engine.of_type(Marker))} markers, {len(engine.of_type(Trail))} trails")

    # 3. Gestures drive the cursor: swipe right, pinch, swipe left
    t = 0.0
    for sample in (hand(0.30), hand(0.45), hand(0.45, pinched=True), None, hand(0.60), hand(0.40)):
        controller.on_gesture_frame(sample, t)
        t += 1 / 30
    assert controller.current_photo().id == "kyoto", controller.current_photo().id
    assert len(engine.of_type(Marker)) == 3
    print(f"✓ Gestures navigated to: {panels[-1].status}")

    # 4. Keyboard navigation wraps around
    controller.next_photo()
    controller.next_photo()
    assert controller.current_photo().id == "tokyo"
    assert controller.current_photo() is collection.current()
    print("✓ Keyboard navigation wraps around")

    # 5. Canvas render of the full scene
    canvas = CanvasEngine(config.render)
    for obj in build_decor(config.scene, seed=0):
        canvas.add(obj)
    canvas_builder = SceneObjectBuilder(canvas, config.scene)
    canvas_builder.rebuild(collection)
    canvas.panel = build_panel(collection)
    frame = RenderLoop(canvas, config.render).tick(0.0)
    assert frame.shape == (config.render.height, config.render.width, 3)
    print(f"✓ Rendered frame {frame.shape[1]}x{frame.shape[0]}")

    assert NavigationIntent.RETREAT.step == -1
    print("\n🎉 All integration tests passed!")


if __name__ == "__main__":
    test_integration()
    print("\nNext steps:")
    print("1. Install dependencies: pip install -e .")
    print("2. Run the application: python -m photoglobe.main [--offline photos.json] [--camera]")
    print("3. Press 'c' to start gesture recognition and 'q' to quit")
