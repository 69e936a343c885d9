"""
vehicle_sim module: world/signals.py

Detectable entities in the environment:
- SignalSource: a fixed, consumable source (food, hazard, light)
- SignalReading / EmitterReading: frozen copies taken at the start of a tick,
  so sensing never sees another vehicle's post-tick state
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from pygame.math import Vector2


class SignalKind(Enum):
    LIGHT = 0
    FOOD = 1
    HAZARD = 2


EDIBLE = (SignalKind.FOOD, SignalKind.HAZARD)


@dataclass
class SignalSource:
    kind: SignalKind
    position: Vector2
    radius: float = 50.0
    intensity: float = 1.0
    consumed_by: Optional[int] = None  # vehicle id

    @property
    def consumed(self) -> bool:
        return self.consumed_by is not None

    def consume(self, vehicle_id: int) -> None:
        self.consumed_by = vehicle_id


@dataclass(frozen=True)
class SignalReading:
    kind: SignalKind
    position: Tuple[float, float]
    radius: float
    intensity: float


@dataclass(frozen=True)
class EmitterReading:
    owner_id: int
    kind: SignalKind
    position: Tuple[float, float]
    radius: float
    intensity: float


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the environment as it was before this tick moved anything."""
    signals: Tuple[SignalReading, ...] = ()
    emitters: Tuple[EmitterReading, ...] = ()
