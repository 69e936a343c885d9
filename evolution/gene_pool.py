"""
vehicle_sim module: evolution/gene_pool.py

Population-wide gene identity registry and layer schema.

- Every structural element gets a stable id the first time it appears, so
  homologous genes line up across genomes during crossover.
- Connections are keyed by (src, dst); splitting the same synapse twice yields
  the same hidden neuron.
- The pool owns the neuron genes and the layer schema. Inserting a layer shifts
  every gene at or above it, which keeps outputs in the last layer.
"""

from __future__ import annotations
import logging
import random
from typing import Dict, List, Tuple

from vehicle.genome import Genome, NeuronGene, NeuronKind, SynapseGene

logger = logging.getLogger(__name__)


class GenePool:
    def __init__(self, n_inputs: int, n_outputs: int):
        if n_inputs < 0 or n_outputs <= 0:
            raise ValueError("GenePool needs at least one output gene")

        self.next_id = 0
        self.neurons: Dict[int, NeuronGene] = {}
        self.connections: Dict[Tuple[int, int], int] = {}
        self.splits: Dict[int, NeuronGene] = {}  # synapse gene id -> hidden neuron gene

        self.input_genes = [self._new_neuron(NeuronKind.INPUT, 0) for _ in range(n_inputs)]
        self.output_genes = [self._new_neuron(NeuronKind.OUTPUT, 1) for _ in range(n_outputs)]
        self.layers: List[List[NeuronGene]] = [list(self.input_genes), list(self.output_genes)]

    @property
    def layer_count(self) -> int:
        return len(self.layers)

    def _allocate_id(self) -> int:
        gid = self.next_id
        self.next_id += 1
        return gid

    def _new_neuron(self, kind: NeuronKind, layer: int) -> NeuronGene:
        gene = NeuronGene(id=self._allocate_id(), kind=kind, layer=layer)
        self.neurons[gene.id] = gene
        return gene

    def new_genome(self) -> Genome:
        return Genome.empty(self.input_genes, self.output_genes)

    def get_neuron_gene(self, gene_id: int) -> NeuronGene:
        gene = self.neurons.get(gene_id)
        if gene is None:
            raise KeyError(f"Neuron gene {gene_id} not registered")
        return gene

    def synapse_id(self, src_id: int, dst_id: int) -> int:
        key = (src_id, dst_id)
        sid = self.connections.get(key)
        if sid is None:
            sid = self._allocate_id()
            self.connections[key] = sid
            logger.debug("new synapse gene %d: %d -> %d", sid, src_id, dst_id)
        return sid

    def synapse_gene(self, src_id: int, dst_id: int) -> SynapseGene:
        return SynapseGene(id=self.synapse_id(src_id, dst_id), src=src_id, dst=dst_id)

    def insert_layer(self, index: int) -> None:
        """
        Insert an empty layer at ``index``; genes at or above it move up one layer.
        """
        if index <= 0 or index >= len(self.layers):
            raise ValueError(f"Cannot insert a layer at {index} (schema has {len(self.layers)})")
        for layer in self.layers[index:]:
            for gene in layer:
                gene.layer += 1
        self.layers.insert(index, [])
        logger.info("gene pool grew to %d layers (inserted at %d)", len(self.layers), index)

    def split_neuron(self, synapse: SynapseGene, rng=random) -> NeuronGene:
        """
        Hidden neuron gene that sits between the endpoints of ``synapse``.
        """
        existing = self.splits.get(synapse.id)
        if existing is not None:
            return existing

        src = self.get_neuron_gene(synapse.src)
        dst = self.get_neuron_gene(synapse.dst)

        if dst.layer - src.layer >= 2:
            layer = rng.randint(src.layer + 1, dst.layer - 1)
        else:
            layer = dst.layer
            self.insert_layer(layer)

        gene = self._new_neuron(NeuronKind.HIDDEN, layer)
        self.layers[layer].append(gene)
        self.splits[synapse.id] = gene
        logger.debug("split synapse gene %d with neuron gene %d (layer %d)", synapse.id, gene.id, layer)
        return gene
