"""
vehicle_sim module: evolution/population.py

A population: its fitness objective (tag), body/sensor layout, mutation rates
and the gene pool its members share.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, TYPE_CHECKING

import config
from evolution.gene_pool import GenePool
from world.signals import SignalKind

if TYPE_CHECKING:
    from vehicle.vehicle import Vehicle


class Tag(str, Enum):
    TRAFFIC = "traffic"
    FOOD = "food"
    PREY = "prey"
    PREDATOR = "predator"
    CLUSTER = "cluster"


EFFECTORS_PER_VEHICLE = 2


@dataclass
class Population:
    tag: Tag
    sensor_types: List[SignalKind] = field(default_factory=list)
    signal: Optional[SignalKind] = None  # what members emit, if anything
    agent_size: float = config.AGENT_SIZE
    bounds: Optional[Tuple[float, float]] = (config.WORLD_W, config.WORLD_H)

    new_synapse_mutation_rate: float = config.NEW_SYNAPSE_MUTATION_RATE
    new_neuron_mutation_rate: float = config.NEW_NEURON_MUTATION_RATE
    random_weight_mutation_rate: float = config.RANDOM_WEIGHT_MUTATION_RATE
    random_bias_mutation_rate: float = config.RANDOM_BIAS_MUTATION_RATE
    random_threshold_mutation_rate: float = config.RANDOM_THRESHOLD_MUTATION_RATE

    vehicles: List["Vehicle"] = field(default_factory=list)
    gene_pool: GenePool = field(init=False)

    def __post_init__(self) -> None:
        self.tag = Tag(self.tag)  # ValueError on unknown tags
        # one left + one right sensor per sensor type
        self.gene_pool = GenePool(2 * len(self.sensor_types), EFFECTORS_PER_VEHICLE)

    def add(self, vehicle: "Vehicle") -> None:
        self.vehicles.append(vehicle)

    def balance(self) -> None:
        for v in self.vehicles:
            v.balance_nc()
