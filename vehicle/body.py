"""
vehicle_sim module: vehicle/body.py

Rigid body of a vehicle: pivot (midpoint of the wheel axle), heading, size and mass.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple

from pygame.math import Vector2

from world.physics import wrap_point


@dataclass
class Body:
    pivot: Vector2
    width: float
    height: float
    angle: float = 0.0
    axis_offset_x: float = 0.0
    axis_offset_y: float = 0.0
    mass: float = 1.0
    bounds: Optional[Tuple[float, float]] = None  # (w, h) to wrap inside, None = unbounded
    position: Vector2 = field(init=False)

    def __post_init__(self) -> None:
        self.pivot = Vector2(self.pivot)
        self.update_position()

    @property
    def axis_offset(self) -> Vector2:
        return Vector2(self.axis_offset_x, self.axis_offset_y)

    def to_world(self, local: Vector2) -> Vector2:
        """Body-frame point -> world point (rotated by heading, translated by pivot)."""
        return Vector2(local).rotate_rad(self.angle) + self.pivot

    def update_position(self) -> None:
        self.position = self.to_world(self.axis_offset)

    def borders(self, margin: float = 0.0) -> None:
        if self.bounds is None:
            return
        if wrap_point(self.pivot, self.bounds[0], self.bounds[1], margin=margin):
            self.update_position()
