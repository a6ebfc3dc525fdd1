"""
Utility functions for game mechanics
"""

from __future__ import annotations
import math
from typing import Tuple

Vec2 = Tuple[float, float]


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def distance(a: Vec2, b: Vec2) -> float:
    """Euclidean distance between two points"""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def normalize(x: float, y: float, eps: float = 1e-8) -> Tuple[float, float]:
    """Normalize a vector to unit length"""
    l = math.hypot(x, y)
    if l < eps:
        return 0.0, 0.0
    return x / l, y / l


def rotate(x: float, y: float, degrees: float) -> Tuple[float, float]:
    """Rotate a vector counter-clockwise by the given angle"""
    rad = math.radians(degrees)
    c, s = math.cos(rad), math.sin(rad)
    return x * c - y * s, x * s + y * c


def angle_deg(x: float, y: float) -> float:
    """Heading of a vector in degrees"""
    return math.degrees(math.atan2(y, x))


def round_half_up(x: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)"""
    return int(math.floor(x + 0.5))


def circle_collide(x1, y1, r1, x2, y2, r2) -> bool:
    """Check if two circles collide"""
    dx = x1 - x2
    dy = y1 - y2
    rr = r1 + r2
    return (dx * dx + dy * dy) <= (rr * rr)

