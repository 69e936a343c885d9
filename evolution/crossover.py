"""
vehicle_sim module: evolution/crossover.py

Sexual reproduction: align two parent genomes by synapse gene id, then mutate
and wire up the child.
"""

from __future__ import annotations
import logging
import random
from typing import Dict, Tuple

from evolution.mutate import (
    mutate_circuit_params,
    mutate_structure,
    random_bias,
    random_threshold,
    random_weight,
)
from vehicle.genome import Genome, NeuronKind, SynapseGene
from vehicle.vehicle import Vehicle

logger = logging.getLogger(__name__)

PARENT_A = 0
PARENT_B = 1


def crossover_genomes(a: Genome, b: Genome, rng=random) -> Tuple[Genome, Dict[int, int]]:
    """
    Combine two genomes of the same gene pool.

    - matching synapse genes (id in both): one coin flip picks which copy
    - disjoint/excess genes (id in one): inherited from their only owner
    - every inherited synapse gene brings its endpoint neuron genes

    Returns:
        (child genome, {synapse gene id: PARENT_A or PARENT_B})
    """
    if [g.id for g in a.input_neuron_genes] != [g.id for g in b.input_neuron_genes] or [
        g.id for g in a.output_neuron_genes
    ] != [g.id for g in b.output_neuron_genes]:
        raise ValueError("Parents do not share input/output neuron genes")

    child = Genome.empty(a.input_neuron_genes, a.output_neuron_genes)
    origins: Dict[int, int] = {}
    parents = (a, b)

    def inherit(gene: SynapseGene, which: int) -> None:
        if not child.add_synapse_gene(gene):
            return
        parent = parents[which]
        for end in (gene.src, gene.dst):
            ng = parent.get_neuron_gene_by_id(end)
            if ng is None:
                raise ValueError(f"Parent synapse gene {gene.id} has a dangling endpoint {end}")
            if ng.kind == NeuronKind.HIDDEN:
                child.add_neuron_gene(ng)
        origins[gene.id] = which

    b_genes = {g.id: g for g in b.synapse_genes}
    for ga in a.synapse_genes:
        gb = b_genes.get(ga.id)
        if gb is not None and rng.random() < 0.5:
            inherit(gb, PARENT_B)
        else:
            inherit(ga, PARENT_A)

    a_ids = {g.id for g in a.synapse_genes}
    for gb in b.synapse_genes:
        if gb.id not in a_ids:
            inherit(gb, PARENT_B)

    return child, origins


def crossover(p1: Vehicle, p2: Vehicle, rng=random) -> Vehicle:
    """
    New vehicle in p1's population whose genome combines p1's and p2's.
    Neither parent is modified.
    """
    pop = p1.population
    if pop.bounds is not None:
        x, y = rng.uniform(0.0, pop.bounds[0]), rng.uniform(0.0, pop.bounds[1])
    else:
        x, y = p1.body.pivot.x, p1.body.pivot.y
    child = Vehicle(x, y, pop, rng)

    genome, origins = crossover_genomes(p1.genome, p2.genome, rng)

    # random structural mutations
    mutate_structure(
        genome,
        pop.gene_pool,
        p_synapse=pop.new_synapse_mutation_rate,
        p_neuron=pop.new_neuron_mutation_rate,
        rng=rng,
    )
    genome.validate()

    child.genome = genome
    child.connect_neural_circuit()

    # inherit weights, biases and thresholds
    parents = (p1, p2)
    for s in child.circuit.synapses:
        post = child.circuit.neurons[s.dst]
        which = origins.get(s.id)
        donor = parents[which] if which is not None else None
        inherited = donor.circuit.get_synapse_by_id(s.id) if donor is not None else None

        if inherited is not None:
            s.weight = inherited.weight
            donor_post = donor.circuit.get_neuron_by_id(inherited.dst)
            post.threshold = donor_post.threshold
            post.bias = donor_post.bias
        else:
            s.weight = random_weight(rng)
            post.threshold = random_threshold(rng)
            post.bias = random_bias(rng)

    mutate_circuit_params(
        child.circuit,
        p_weight=pop.random_weight_mutation_rate,
        p_bias=pop.random_bias_mutation_rate,
        p_threshold=pop.random_threshold_mutation_rate,
        rng=rng,
    )

    logger.debug(
        "crossover %d x %d -> %d (%d synapse genes, %d hidden)",
        p1.id, p2.id, child.id, len(genome.synapse_genes), len(genome.neuron_genes),
    )
    return child
