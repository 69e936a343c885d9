"""
vehicle_sim module: evolution/fitness.py

Per-tick fitness deltas, one scoring function per population tag.
Deltas are added to Vehicle.fitness_score every tick and never decay.
"""

from __future__ import annotations
import math
from typing import Callable, Dict, TYPE_CHECKING

import config
from evolution.population import Tag

if TYPE_CHECKING:
    from vehicle.vehicle import Vehicle
    from world.world import World


def movement_reward(tag: Tag, d_avg: float, theta: float) -> float:
    """
    Shaping term from the latest drive: traffic likes straight forward motion,
    foragers/predators/prey are rewarded for moving conservatively.
    """
    if tag == Tag.TRAFFIC:
        return d_avg - abs(theta) if d_avg > 0.0 else 0.0
    if tag in (Tag.FOOD, Tag.PREY, Tag.PREDATOR):
        return 1.0 - abs(d_avg)
    return 0.0


def traffic_fitness(vehicle: "Vehicle", world: "World") -> float:
    hits = sum(1 for v in vehicle.population.vehicles if v is not vehicle and vehicle.collides_with(v))
    return -config.COLLISION_PENALTY * hits


def food_fitness(vehicle: "Vehicle", world: "World") -> float:
    return vehicle.eat(world.signals)


def prey_fitness(vehicle: "Vehicle", world: "World") -> float:
    delta = 0.0
    for p in world.populations_tagged(Tag.PREDATOR):
        if not p.vehicles:
            continue
        closest = math.inf
        for predator in p.vehicles:
            d = vehicle.distance_to(predator)
            closest = min(closest, d)
            if vehicle.collides_with(predator):
                delta -= config.COLLISION_PENALTY
        delta += closest / 2.0
    return delta


def predator_fitness(vehicle: "Vehicle", world: "World") -> float:
    delta = 0.0
    for p in world.populations_tagged(Tag.PREY):
        for prey in p.vehicles:
            if vehicle.collides_with(prey):
                delta += config.CATCH_REWARD
    return delta


def cluster_fitness(vehicle: "Vehicle", world: "World") -> float:
    peers = [v for v in vehicle.population.vehicles if v is not vehicle]
    if not peers:
        return 0.0
    closest = min(vehicle.distance_to(v) for v in peers)
    return config.CLUSTER_SCALE / max(closest, config.MIN_CLUSTER_DISTANCE)


TAG_FITNESS: Dict[Tag, Callable[["Vehicle", "World"], float]] = {
    Tag.TRAFFIC: traffic_fitness,
    Tag.FOOD: food_fitness,
    Tag.PREY: prey_fitness,
    Tag.PREDATOR: predator_fitness,
    Tag.CLUSTER: cluster_fitness,
}


def fitness_delta(vehicle: "Vehicle", world: "World") -> float:
    tag = vehicle.population.tag
    d_avg, theta = vehicle.last_move
    return movement_reward(tag, d_avg, theta) + TAG_FITNESS[tag](vehicle, world)
