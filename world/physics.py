"""
vehicle_sim module: world/physics.py

Top-down 2D physics for two-wheeled vehicles:
- differential-drive integration (exact arc, not an Euler step)
- inverse-linear signal falloff
- arcade-style world wrap

Screen coordinates: y grows downward and a body's forward axis is (0, -1)
rotated by its heading.
"""

from __future__ import annotations
import math
from typing import Tuple

from pygame.math import Vector2

STRAIGHT_EPS = 1e-9


def differential_drive(d_left: float, d_right: float, wheel_separation: float) -> Tuple[Vector2, float]:
    """
    d_left/d_right: distance rolled by each wheel this tick
    wheel_separation: distance between the wheels

    Returns:
        (displacement in the body frame, heading change in radians)
    """
    d_avg = (d_left + d_right) / 2.0
    if wheel_separation <= 0.0:
        theta = 0.0
    else:
        theta = (d_left - d_right) / wheel_separation

    if abs(theta) < STRAIGHT_EPS:
        return Vector2(0.0, -d_avg), 0.0

    # travel along an arc of radius r; the chord is the translation
    r = d_avg / theta
    return Vector2(r * (1.0 - math.cos(theta)), -r * math.sin(theta)), theta


def falloff(intensity: float, distance: float, radius: float) -> float:
    """
    Inverse-linear falloff: full intensity at the source, zero at the radius.
    """
    if radius <= 0.0 or distance >= radius:
        return 0.0
    return intensity * (1.0 - distance / radius)


def wrap_point(p: Vector2, w: float, h: float, margin: float = 0.0) -> bool:
    """
    Wrap ``p`` in place to the opposite edge once it leaves the margin.
    Returns True if it wrapped.
    """
    wrapped = False
    if p.x < -margin:
        p.x = w + margin
        wrapped = True
    elif p.x > w + margin:
        p.x = -margin
        wrapped = True

    if p.y < -margin:
        p.y = h + margin
        wrapped = True
    elif p.y > h + margin:
        p.y = -margin
        wrapped = True
    return wrapped
