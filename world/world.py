"""
vehicle_sim module: world/world.py

World state container (signal sources, populations, random source) and the tick.

One tick runs to completion for everyone before the next begins:
    sense all -> think all -> drive all -> score all
Sensing reads a frozen snapshot, so nobody sees another vehicle's post-tick state.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import random
from typing import Iterator, List, Optional

import config
from evolution.fitness import fitness_delta
from evolution.population import Population, Tag
from vehicle.vehicle import Vehicle
from world.signals import EmitterReading, SignalReading, SignalSource, Snapshot


@dataclass
class World:
    w: int
    h: int
    signals: List[SignalSource] = field(default_factory=list)
    populations: List[Population] = field(default_factory=list)
    seed: Optional[int] = None
    dt: float = config.DELTA_T
    ticks: int = 0
    rng: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.rng = random.Random(self.seed)

    def vehicles(self) -> Iterator[Vehicle]:
        for p in self.populations:
            yield from p.vehicles

    def populations_tagged(self, tag: Tag) -> List[Population]:
        return [p for p in self.populations if p.tag == tag]

    def snapshot(self) -> Snapshot:
        signals = tuple(
            SignalReading(s.kind, (s.position.x, s.position.y), s.radius, s.intensity)
            for s in self.signals
            if not s.consumed
        )
        emitters = []
        for v in self.vehicles():
            if v.signal is None:
                continue
            pos = v.signal.world_position(v.body)
            emitters.append(EmitterReading(v.id, v.signal.kind, (pos.x, pos.y), v.signal.radius, v.signal.intensity))
        return Snapshot(signals=signals, emitters=tuple(emitters))

    def tick(self) -> None:
        snap = self.snapshot()
        vehicles = list(self.vehicles())

        for v in vehicles:
            v.sense(snap)
        for v in vehicles:
            v.think(self.dt)
        for v in vehicles:
            v.drive(self.dt, self.rng)
        for v in vehicles:
            v.fitness_score += fitness_delta(v, self)

        self.signals = [s for s in self.signals if not s.consumed]
        self.ticks += 1

    def run(self, ticks: int) -> None:
        for _ in range(ticks):
            self.tick()
