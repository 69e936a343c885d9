"""
vehicle_sim module: vehicle/devices.py

Terminal devices mounted on a vehicle body (offsets are in the body frame):
- Sensor: reads signals of one kind, activation falls off linearly with distance
- Effector: a motorized wheel, velocity driven by its neuron with momentum + friction
- SignalEmitter: lets other vehicles' sensors detect this one

Devices refer to their neuron by id; the vehicle owns the circuit.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pygame.math import Vector2

import config
from vehicle.body import Body
from world.physics import falloff
from world.signals import SignalKind, Snapshot


class Side(Enum):
    LEFT = "LEFT"
    RIGHT = "RIGHT"


@dataclass
class Sensor:
    kind: SignalKind
    x: float
    y: float
    side: Side = Side.LEFT
    angle: float = 0.0  # display only
    neuron_id: Optional[int] = None

    def world_position(self, body: Body) -> Vector2:
        return body.to_world(Vector2(self.x, self.y))

    def sense(self, snapshot: Snapshot, body: Body, owner_id: Optional[int] = None) -> float:
        """
        Sum the falloff contribution of every matching source and every other
        vehicle's matching emitter.
        """
        here = self.world_position(body)
        a = 0.0

        for s in snapshot.signals:
            if s.kind != self.kind:
                continue
            a += falloff(
                s.intensity * config.SIGNAL_INTENSITY,
                here.distance_to(s.position),
                s.radius * config.SIGNAL_RADIUS,
            )

        for e in snapshot.emitters:
            if e.owner_id == owner_id or e.kind != self.kind:
                continue
            a += falloff(
                e.intensity * config.SIGNAL_INTENSITY,
                here.distance_to(e.position),
                e.radius * config.SIGNAL_RADIUS,
            )

        return a


@dataclass
class Effector:
    x: float
    y: float = 0.0
    side: Side = Side.LEFT
    neuron_id: Optional[int] = None
    velocity: float = 0.0

    def update(self, activation: float, mass: float, dt: float) -> None:
        # first-order damped motor; a massless body gets no thrust, only friction
        inertia = mass * config.MASS_SCALE
        if inertia > 0.0:
            self.velocity += config.MOTOR_SPEED * activation * dt / inertia
        self.velocity -= self.velocity * config.MOTOR_FRICTION


@dataclass
class SignalEmitter:
    kind: SignalKind
    x: float = 0.0
    y: float = 0.0
    radius: float = 60.0
    intensity: float = 1.0

    def world_position(self, body: Body) -> Vector2:
        return body.to_world(Vector2(self.x, self.y))
