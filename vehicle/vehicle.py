"""
vehicle_sim module: vehicle/vehicle.py

A vehicle is an abstraction of some generic creature: a body with sensors and
two wheel effectors, wired together by a neural circuit built from its genome.
"""

from __future__ import annotations
from itertools import count
import logging
import math
import random
from typing import Iterable, List, Optional, Tuple, TYPE_CHECKING

from pygame.math import Vector2

import config
from neural.circuit import NeuralCircuit
from vehicle.body import Body
from vehicle.devices import Effector, Sensor, Side, SignalEmitter
from world.physics import differential_drive
from world.signals import EDIBLE, SignalKind, SignalSource, Snapshot

if TYPE_CHECKING:
    from evolution.population import Population

logger = logging.getLogger(__name__)

_vehicle_ids = count(1)


class Vehicle:
    def __init__(self, x: float, y: float, population: "Population", rng=random):
        self.population = population
        self.id = next(_vehicle_ids)
        self.genome = population.gene_pool.new_genome()
        self.fitness_score = 0.0
        self.last_move: Tuple[float, float] = (0.0, 0.0)  # (d_avg, theta) of the latest drive

        width = population.agent_size
        height = 1.5 * population.agent_size
        self.body = Body(
            pivot=Vector2(x, y),
            width=width,
            height=height,
            angle=rng.uniform(0.0, 2.0 * math.pi),
            axis_offset_y=config.MOTOR_FRONT_BACK_PLACEMENT * height,
            mass=width * height,
            bounds=population.bounds,
        )

        # two sensors (left + right) per sensor type
        self.sensors: List[Sensor] = []
        n = len(population.sensor_types)
        sensor_y = self.body.axis_offset_y - height * config.SENSOR_FRONT_BACK_PLACEMENT
        for i, kind in enumerate(population.sensor_types):
            spread = (math.pi / 6 * (n - 1)) * (-math.pi / 4 + 2 * i / n)
            self.sensors.append(Sensor(kind, x=-width * config.SENSOR_SEPARATION, y=sensor_y, side=Side.LEFT, angle=spread))
            self.sensors.append(Sensor(kind, x=width * config.SENSOR_SEPARATION, y=sensor_y, side=Side.RIGHT, angle=-spread))

        self.effectors: List[Effector] = [
            Effector(x=-config.MOTOR_SEPARATION * width, side=Side.LEFT),
            Effector(x=config.MOTOR_SEPARATION * width, side=Side.RIGHT),
        ]

        self.signal: Optional[SignalEmitter] = None
        if population.signal is not None:
            self.signal = SignalEmitter(population.signal, x=self.body.axis_offset_x, y=self.body.axis_offset_y)

        self.circuit = NeuralCircuit()

    def __repr__(self) -> str:
        return f"Vehicle(id={self.id}, tag={self.population.tag.value}, fitness={self.fitness_score:.2f})"

    # ---- neural circuit ----

    def connect_neural_circuit(self) -> NeuralCircuit:
        """
        (Re)build the circuit from the genome and bind sensors/effectors to
        their neurons in declared order.
        """
        g = self.genome
        if len(g.input_neuron_genes) != len(self.sensors):
            raise ValueError(
                f"Genome has {len(g.input_neuron_genes)} input genes for {len(self.sensors)} sensors"
            )
        if len(g.output_neuron_genes) != len(self.effectors):
            raise ValueError(
                f"Genome has {len(g.output_neuron_genes)} output genes for {len(self.effectors)} effectors"
            )

        circuit = NeuralCircuit.from_genome(g, self.population.gene_pool.layer_count)

        for sensor, gene in zip(self.sensors, g.input_neuron_genes):
            sensor.neuron_id = gene.id
            n = circuit.neurons[gene.id]
            n.x, n.y = sensor.x, sensor.y

        for effector, gene in zip(self.effectors, g.output_neuron_genes):
            effector.neuron_id = gene.id
            n = circuit.neurons[gene.id]
            n.x, n.y = effector.x, effector.y

        circuit.layout_hidden(self.body.width)
        self.circuit = circuit
        return circuit

    def balance_nc(self) -> int:
        """
        Re-bucket neurons after other members' mutations grew the shared layer schema.
        """
        schema = self.population.gene_pool.layer_count
        if len(self.circuit.layers) == schema:
            return 0
        moved = self.circuit.balance(self.genome, schema)
        if moved:
            self.circuit.layout_hidden(self.body.width)
        logger.debug("vehicle %d rebalanced %d neurons to %d layers", self.id, moved, schema)
        return moved

    def _bound_neuron(self, neuron_id: Optional[int]):
        n = self.circuit.get_neuron_by_id(neuron_id) if neuron_id is not None else None
        if n is None:
            raise RuntimeError(f"Vehicle {self.id} has no neural circuit connected")
        return n

    # ---- tick phases ----

    def sense(self, snapshot: Snapshot) -> None:
        for sensor in self.sensors:
            self._bound_neuron(sensor.neuron_id).activation = sensor.sense(snapshot, self.body, self.id)

    def think(self, dt: float) -> None:
        self.circuit.process()
        for effector in self.effectors:
            effector.update(self._bound_neuron(effector.neuron_id).activation, self.body.mass, dt)

    def drive(self, dt: float, rng=random) -> Tuple[float, float]:
        """
        Move the body by the distance each wheel rolled this tick.
        Returns (d_avg, theta).
        """
        left, right = self.effectors

        d_left = left.velocity * dt * (1.0 + config.ENVIRONMENT_NOISE * rng.gauss(0.0, 1.0))
        d_right = right.velocity * dt * (1.0 + config.ENVIRONMENT_NOISE * rng.gauss(0.0, 1.0))

        local, theta = differential_drive(d_left, d_right, abs(left.x) + abs(right.x))

        # translate along the chord (old heading), then turn
        self.body.pivot += local.rotate_rad(self.body.angle)
        self.body.angle += theta
        self.body.update_position()
        self.body.borders()

        self.last_move = ((d_left + d_right) / 2.0, theta)
        return self.last_move

    def eat(self, signals: Iterable[SignalSource]) -> float:
        """
        Consume food/hazard sources within reach; returns the fitness change.
        """
        delta = 0.0
        for s in signals:
            if s.consumed or s.kind not in EDIBLE:
                continue
            if self.body.position.distance_to(s.position) < self.body.width:
                s.consume(self.id)
                if s.kind == SignalKind.FOOD:
                    delta += config.FOOD_REWARD
                else:
                    delta -= config.HAZARD_PENALTY
        return delta

    def distance_to(self, other: "Vehicle") -> float:
        return self.body.position.distance_to(other.body.position)

    def collides_with(self, other: "Vehicle") -> bool:
        return self.distance_to(other) < 2.0 * self.body.width
