"""
Geographic to scene-space mapping.
"""
import math

import numpy as np


def to_vector(lat: float, lon: float, radius: float) -> np.ndarray:
    """
    Convert latitude/longitude to a point on a sphere.

    Longitude is offset by 180 degrees so that markers line up with the
    globe's particle/texture convention. Values outside the nominal ranges
    wrap through the trigonometric functions.

    Args:
        lat: Latitude in degrees
        lon: Longitude in degrees
        radius: Sphere radius

    Returns:
        3D point (x, y, z)
    """
    phi = math.radians(90.0 - lat)
    theta = math.radians(lon + 180.0)

    x = -radius * math.sin(phi) * math.cos(theta)
    y = radius * math.cos(phi)
    z = radius * math.sin(phi) * math.sin(theta)

    return np.array([x, y, z])


def ring_point(position: np.ndarray, ring_radius: float) -> np.ndarray:
    """Project a position outward along its direction from the origin."""
    norm = np.linalg.norm(position)
    if norm == 0:
        return np.zeros(3)
    return position / norm * ring_radius


def lerp_path(start: np.ndarray, end: np.ndarray, steps: int) -> np.ndarray:
    """
    Linearly interpolate from start to end.

    Returns an array of shape (steps + 1, 3); the first row is start and
    the last row is end.
    """
    t = np.linspace(0.0, 1.0, steps + 1)[:, np.newaxis]
    return start + (end - start) * t
