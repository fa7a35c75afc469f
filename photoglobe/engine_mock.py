"""
Mock graphics engine for exercising scene building without a display.
"""
from typing import List


class MockSceneEngine:
    """Mock engine that records scene objects instead of drawing them."""

    def __init__(self):
        """Initialize the mock engine."""
        self.objects: List[object] = []
        self.add_count = 0
        self.remove_count = 0

    def add(self, obj: object) -> None:
        self.add_count += 1
        self.objects.append(obj)

    def remove(self, obj: object) -> None:
        """Drop an object; removing something never added is an error."""
        self.remove_count += 1
        self.objects.remove(obj)

    def of_type(self, kind: type) -> List[object]:
        return [obj for obj in self.objects if isinstance(obj, kind)]

    def reset_counters(self) -> None:
        """Reset action counters for testing."""
        self.add_count = 0
        self.remove_count = 0
