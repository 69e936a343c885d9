"""
vehicle_sim module: neural/circuit.py

Layered neural circuit instantiated from a genome:
- sensor neurons hold externally-set activations (layer 0)
- hidden + effector neurons are evaluated in ascending layer order
- synapses only point forward in layer order, so one pass per tick is enough
"""

from __future__ import annotations
from dataclasses import dataclass, field
from itertools import chain
from typing import Dict, List, Optional
import logging

from neural.neuron import Neuron, neuron_from_gene
from neural.synapse import Synapse
from vehicle.genome import Genome, NeuronKind

logger = logging.getLogger(__name__)


@dataclass
class NeuralCircuit:
    layers: List[List[Neuron]] = field(default_factory=list)
    synapses: List[Synapse] = field(default_factory=list)

    # lookups: neuron id -> neuron, neuron id -> synapses ending there
    neurons: Dict[int, Neuron] = field(default_factory=dict)
    incoming: Dict[int, List[Synapse]] = field(default_factory=dict)

    @staticmethod
    def from_genome(genome: Genome, layer_count: int) -> "NeuralCircuit":
        """
        One runtime neuron per neuron gene and one runtime synapse per synapse gene.
        Raises KeyError if a synapse gene references a neuron gene the genome lacks.
        """
        circuit = NeuralCircuit(layers=[[] for _ in range(layer_count)])
        for gene in genome.all_neuron_genes():
            circuit.add_neuron(neuron_from_gene(gene))
        for sg in genome.synapse_genes:
            circuit.add_synapse(Synapse(id=sg.id, src=sg.src, dst=sg.dst, enabled=sg.enabled))
        logger.debug(
            "built circuit: %d neurons, %d synapses, %d layers",
            len(circuit.neurons), len(circuit.synapses), len(circuit.layers),
        )
        return circuit

    def add_neuron(self, neuron: Neuron) -> None:
        if neuron.layer >= len(self.layers):
            logger.warning(
                "neuron %d is in layer %d but the circuit has %d layers; extending",
                neuron.id, neuron.layer, len(self.layers),
            )
            self._ensure_layers(neuron.layer + 1)
        self.layers[neuron.layer].append(neuron)
        self.neurons[neuron.id] = neuron

    def add_synapse(self, synapse: Synapse) -> None:
        for end in (synapse.src, synapse.dst):
            if end not in self.neurons:
                raise KeyError(f"Synapse {synapse.id} references missing neuron {end}")
        self.synapses.append(synapse)
        self.incoming.setdefault(synapse.dst, []).append(synapse)

    def _ensure_layers(self, count: int) -> None:
        while len(self.layers) < count:
            self.layers.append([])

    def get_neuron_by_id(self, neuron_id: int) -> Optional[Neuron]:
        return self.neurons.get(neuron_id)

    def get_synapse_by_id(self, synapse_id: int) -> Optional[Synapse]:
        for s in self.synapses:
            if s.id == synapse_id:
                return s
        return None

    def non_sensor_neurons(self) -> List[Neuron]:
        return [n for layer in self.layers for n in layer if n.kind != NeuronKind.INPUT]

    def process(self) -> None:
        # sensor activations must already be set for this tick
        for layer in self.layers:
            for n in layer:
                if n.kind == NeuronKind.INPUT:
                    continue
                net = 0.0
                for s in self.incoming.get(n.id, ()):
                    if s.enabled:
                        net += s.weight * self.neurons[s.src].activation
                n.compute_activation(net)

    def layout_hidden(self, width: float) -> None:
        """
        Spread hidden neurons between the input and output rows (display only).
        """
        if len(self.layers) < 3:
            return
        first = self.layers[0][0] if self.layers[0] else None
        last = self.layers[-1][0] if self.layers[-1] else None
        y0 = first.y if first is not None else 0.0
        y1 = last.y if last is not None else y0
        span = len(self.layers) - 1

        for bucket in self.layers[1:-1]:
            for i, n in enumerate(bucket):
                n.y = y0 - (y0 - y1) * n.layer / span
                n.x = -width * (-1 + 2 * ((i + 1) / (len(bucket) + 1)))

    def balance(self, genome: Genome, layer_count: int) -> int:
        """
        Move neurons whose gene layer changed (a peer's mutation grew the
        layer schema) into the matching bucket. Returns how many moved.
        """
        self._ensure_layers(layer_count)
        moved = 0
        for gene in chain(genome.neuron_genes, genome.output_neuron_genes):
            n = self.neurons.get(gene.id)
            if n is None or n.layer == gene.layer:
                continue
            self._ensure_layers(gene.layer + 1)
            bucket = self.layers[n.layer]
            bucket[:] = [m for m in bucket if m is not n]
            self.layers[gene.layer].append(n)
            logger.debug("moved neuron %d from layer %d to %d", n.id, n.layer, gene.layer)
            n.layer = gene.layer
            moved += 1
        return moved
