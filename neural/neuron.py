"""
vehicle_sim module: neural/neuron.py

Runtime neuron variants. Each variant exposes the same compute_activation()
so the circuit can evaluate layers without caring what it is looking at.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import ClassVar

from vehicle.genome import NeuronGene, NeuronKind


def gate(x: float, threshold: float) -> float:
    # rectified threshold: pass the signal through once it clears the threshold
    return x if x >= threshold else 0.0


@dataclass
class Neuron:
    id: int
    layer: int
    bias: float = 0.0
    threshold: float = 0.0
    activation: float = 0.0

    # display position relative to the body (not used by the simulation)
    x: float = 0.0
    y: float = 0.0

    kind: ClassVar[NeuronKind]

    def compute_activation(self, net_input: float) -> float:
        self.activation = gate(net_input + self.bias, self.threshold)
        return self.activation


@dataclass
class SensorNeuron(Neuron):
    """Activation is written by the bound sensor; net input is ignored."""
    kind: ClassVar[NeuronKind] = NeuronKind.INPUT

    def compute_activation(self, net_input: float) -> float:
        return self.activation


@dataclass
class HiddenNeuron(Neuron):
    kind: ClassVar[NeuronKind] = NeuronKind.HIDDEN


@dataclass
class EffectorNeuron(Neuron):
    """Activation drives the bound effector."""
    kind: ClassVar[NeuronKind] = NeuronKind.OUTPUT


NEURON_CLASSES = {
    NeuronKind.INPUT: SensorNeuron,
    NeuronKind.HIDDEN: HiddenNeuron,
    NeuronKind.OUTPUT: EffectorNeuron,
}


def neuron_from_gene(gene: NeuronGene) -> Neuron:
    return NEURON_CLASSES[gene.kind](id=gene.id, layer=gene.layer)
