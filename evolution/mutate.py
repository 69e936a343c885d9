"""
vehicle_sim module: evolution/mutate.py

Mutation operators:
- structural: add a synapse gene, or split a synapse gene with a new neuron gene
- parametric: re-roll synapse weights and neuron biases/thresholds of a built circuit
"""

from __future__ import annotations
import logging
import random
from typing import Optional

from evolution.gene_pool import GenePool
from neural.circuit import NeuralCircuit
from vehicle.genome import Genome, NeuronGene, NeuronKind, SynapseGene

logger = logging.getLogger(__name__)


def random_weight(rng=random) -> float:
    return rng.uniform(-1.0, 1.0)


def random_bias(rng=random) -> float:
    return rng.uniform(-1.0, 1.0)


def random_threshold(rng=random) -> float:
    return rng.random()


def add_synapse_gene(genome: Genome, pool: GenePool, rng=random) -> Optional[SynapseGene]:
    """
    Connect two unconnected neuron genes that are in forward layer order.
    Returns the new gene, or None if the genome is already fully connected.
    """
    genes = list(genome.all_neuron_genes())
    candidates = [
        (a, b)
        for a in genes
        for b in genes
        if a.layer < b.layer and b.kind != NeuronKind.INPUT and not genome.has_connection(a.id, b.id)
    ]
    if not candidates:
        return None

    a, b = rng.choice(candidates)
    gene = pool.synapse_gene(a.id, b.id)
    genome.add_synapse_gene(gene)
    logger.debug("add synapse gene %d (%d -> %d)", gene.id, a.id, b.id)
    return gene


def add_neuron_gene(genome: Genome, pool: GenePool, rng=random) -> Optional[NeuronGene]:
    """
    Split an enabled synapse gene: disable it and route src -> new -> dst instead.
    """
    enabled = [g for g in genome.synapse_genes if g.enabled]
    if not enabled:
        return None

    target = rng.choice(enabled)
    neuron = pool.split_neuron(target, rng)

    genome.disable_synapse_gene(target.id)
    genome.add_neuron_gene(neuron)
    genome.add_synapse_gene(pool.synapse_gene(target.src, neuron.id))
    genome.add_synapse_gene(pool.synapse_gene(neuron.id, target.dst))
    logger.debug("split synapse gene %d with neuron gene %d", target.id, neuron.id)
    return neuron


def mutate_structure(
    genome: Genome,
    pool: GenePool,
    p_synapse: float = 0.2,
    p_neuron: float = 0.05,
    rng=random,
) -> None:
    """
    Mutate in-place:
      - With probability p_synapse, add one synapse gene.
      - With probability p_neuron, add one neuron gene by splitting a synapse gene.
    """
    if rng.random() < p_synapse:
        add_synapse_gene(genome, pool, rng)
    if rng.random() < p_neuron:
        add_neuron_gene(genome, pool, rng)


def mutate_circuit_params(
    circuit: NeuralCircuit,
    p_weight: float = 0.10,
    p_bias: float = 0.05,
    p_threshold: float = 0.05,
    rng=random,
) -> None:
    """
    Mutate in-place:
      - With probability p_weight per synapse, re-roll its weight.
      - With probability p_bias / p_threshold per non-sensor neuron, re-roll
        its bias / threshold (independently).
    """
    for s in circuit.synapses:
        if rng.random() < p_weight:
            s.weight = random_weight(rng)

    for n in circuit.non_sensor_neurons():
        if rng.random() < p_bias:
            n.bias = random_bias(rng)
        if rng.random() < p_threshold:
            n.threshold = random_threshold(rng)
