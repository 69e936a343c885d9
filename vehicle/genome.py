"""
vehicle_sim module: vehicle/genome.py

Genome for the neural circuit.

Design goals:
- Neuron genes are owned by the population's gene pool and shared by reference,
  so a layer shift in the pool is seen by every genome at once
- Synapse genes are small immutable values keyed by a stable id
- A genome only ever holds one copy of a given synapse gene id
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterator, List, Optional


class NeuronKind(Enum):
    INPUT = 0
    HIDDEN = 1
    OUTPUT = 2


@dataclass(eq=False)
class NeuronGene:
    id: int
    kind: NeuronKind
    layer: int = 0


@dataclass(frozen=True)
class SynapseGene:
    """
    Directed connection gene between two neuron genes (by id).
    """
    id: int
    src: int
    dst: int
    enabled: bool = True


@dataclass
class Genome:
    input_neuron_genes: List[NeuronGene] = field(default_factory=list)
    output_neuron_genes: List[NeuronGene] = field(default_factory=list)
    neuron_genes: List[NeuronGene] = field(default_factory=list)  # hidden only
    synapse_genes: List[SynapseGene] = field(default_factory=list)

    @staticmethod
    def empty(input_genes: List[NeuronGene], output_genes: List[NeuronGene]) -> "Genome":
        """
        Genome with the given input/output genes and no hidden structure.
        """
        return Genome(input_neuron_genes=list(input_genes), output_neuron_genes=list(output_genes))

    def clone(self) -> "Genome":
        # gene objects are shared with the gene pool; only the lists are copied
        return Genome(
            input_neuron_genes=list(self.input_neuron_genes),
            output_neuron_genes=list(self.output_neuron_genes),
            neuron_genes=list(self.neuron_genes),
            synapse_genes=list(self.synapse_genes),
        )

    def all_neuron_genes(self) -> Iterator[NeuronGene]:
        yield from self.input_neuron_genes
        yield from self.neuron_genes
        yield from self.output_neuron_genes

    def get_neuron_gene_by_id(self, gene_id: int) -> Optional[NeuronGene]:
        for g in self.all_neuron_genes():
            if g.id == gene_id:
                return g
        return None

    def get_synapse_gene_by_id(self, gene_id: int) -> Optional[SynapseGene]:
        for g in self.synapse_genes:
            if g.id == gene_id:
                return g
        return None

    def has_connection(self, src_id: int, dst_id: int) -> bool:
        return any(g.src == src_id and g.dst == dst_id for g in self.synapse_genes)

    def add_neuron_gene(self, gene: NeuronGene) -> bool:
        """
        Add a hidden neuron gene unless one with the same id is present.
        Input/output genes are fixed at construction and are never re-added.
        """
        if self.get_neuron_gene_by_id(gene.id) is not None:
            return False
        if gene.kind != NeuronKind.HIDDEN:
            raise ValueError(f"Cannot add {gene.kind.name} neuron gene {gene.id} to a genome")
        self.neuron_genes.append(gene)
        return True

    def add_synapse_gene(self, gene: SynapseGene) -> bool:
        if self.get_synapse_gene_by_id(gene.id) is not None:
            return False
        self.synapse_genes.append(gene)
        return True

    def disable_synapse_gene(self, gene_id: int) -> None:
        for i, g in enumerate(self.synapse_genes):
            if g.id == gene_id:
                self.synapse_genes[i] = replace(g, enabled=False)
                return
        raise KeyError(f"Synapse gene {gene_id} not found")

    def validate(self) -> None:
        """
        Raise ValueError if any genome invariant is broken:
          - duplicate neuron or synapse gene ids
          - synapse endpoints that don't resolve to a neuron gene
          - synapses that don't point strictly forward in layer order
        """
        neurons: Dict[int, NeuronGene] = {}
        for g in self.all_neuron_genes():
            if g.id in neurons:
                raise ValueError(f"Duplicate neuron gene id {g.id}")
            neurons[g.id] = g

        seen = set()
        for s in self.synapse_genes:
            if s.id in seen:
                raise ValueError(f"Duplicate synapse gene id {s.id}")
            seen.add(s.id)

            src = neurons.get(s.src)
            dst = neurons.get(s.dst)
            if src is None or dst is None:
                raise ValueError(f"Synapse gene {s.id} has a dangling endpoint ({s.src} -> {s.dst})")
            if src.layer >= dst.layer:
                raise ValueError(
                    f"Synapse gene {s.id} goes from layer {src.layer} to layer {dst.layer}"
                )
