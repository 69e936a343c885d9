"""
Tests for neural circuit construction, execution and layer balancing.
"""

import logging
import random

import pytest

from evolution.gene_pool import GenePool
from evolution.mutate import add_neuron_gene
from neural.circuit import NeuralCircuit
from neural.neuron import EffectorNeuron, HiddenNeuron, SensorNeuron, gate
from vehicle.genome import SynapseGene


def _connect(vehicle, pairs, weight=1.0):
    """Add synapse genes (src_id, dst_id) to the vehicle's genome and rebuild."""
    pool = vehicle.population.gene_pool
    for src, dst in pairs:
        vehicle.genome.add_synapse_gene(pool.synapse_gene(src, dst))
    circuit = vehicle.connect_neural_circuit()
    for s in circuit.synapses:
        s.weight = weight
    return circuit


def _assert_buckets_consistent(circuit):
    for i, layer in enumerate(circuit.layers):
        for n in layer:
            assert n.layer == i


class TestConstruction:
    def test_one_runtime_element_per_gene(self, light_population, make_vehicle):
        v = make_vehicle(light_population)
        ins = [g.id for g in v.genome.input_neuron_genes]
        outs = [g.id for g in v.genome.output_neuron_genes]

        circuit = _connect(v, [(ins[0], outs[0]), (ins[1], outs[1])])

        assert len(circuit.neurons) == 4
        assert len(circuit.synapses) == 2
        assert len(circuit.layers) == light_population.gene_pool.layer_count
        assert all(isinstance(n, SensorNeuron) for n in circuit.layers[0])
        assert all(isinstance(n, EffectorNeuron) for n in circuit.layers[-1])
        _assert_buckets_consistent(circuit)

    def test_devices_bound_in_declared_order(self, light_population, make_vehicle):
        v = make_vehicle(light_population)

        assert [s.neuron_id for s in v.sensors] == [g.id for g in v.genome.input_neuron_genes]
        assert [e.neuron_id for e in v.effectors] == [g.id for g in v.genome.output_neuron_genes]
        left_neuron = v.circuit.neurons[v.sensors[0].neuron_id]
        assert (left_neuron.x, left_neuron.y) == (v.sensors[0].x, v.sensors[0].y)

    def test_dangling_synapse_gene_fails_fast(self, light_population, make_vehicle):
        v = make_vehicle(light_population, connect=False)
        v.genome.synapse_genes.append(SynapseGene(id=999, src=v.genome.input_neuron_genes[0].id, dst=4242))

        with pytest.raises(KeyError):
            v.connect_neural_circuit()

    def test_gene_count_mismatch_raises(self, light_population, make_vehicle):
        v = make_vehicle(light_population, connect=False)
        v.genome.input_neuron_genes.pop()

        with pytest.raises(ValueError):
            v.connect_neural_circuit()

    def test_hidden_neurons_laid_out_between_io_rows(self, light_population, make_vehicle):
        v = make_vehicle(light_population)
        ins = [g.id for g in v.genome.input_neuron_genes]
        outs = [g.id for g in v.genome.output_neuron_genes]
        _connect(v, [(ins[0], outs[0])])
        add_neuron_gene(v.genome, light_population.gene_pool, random.Random(0))

        circuit = v.connect_neural_circuit()

        hidden = circuit.layers[1][0]
        assert isinstance(hidden, HiddenNeuron)
        y_in, y_out = circuit.layers[0][0].y, circuit.layers[-1][0].y
        assert hidden.y == pytest.approx(y_in - (y_in - y_out) / 2)
        assert hidden.x == pytest.approx(0.0)

    def test_short_layer_list_is_extended_with_warning(self, caplog):
        pool = GenePool(2, 2)
        pool.split_neuron(pool.synapse_gene(pool.input_genes[0].id, pool.output_genes[0].id), random.Random(0))
        genome = pool.new_genome()

        with caplog.at_level(logging.WARNING, logger="neural.circuit"):
            circuit = NeuralCircuit.from_genome(genome, layer_count=2)

        assert len(circuit.layers) == pool.layer_count == 3
        assert circuit.layers[1] == []
        assert {n.id for n in circuit.layers[2]} == {g.id for g in pool.output_genes}
        assert any("extending" in r.getMessage() for r in caplog.records)
        _assert_buckets_consistent(circuit)

    def test_layout_tolerates_empty_layers(self):
        circuit = NeuralCircuit(layers=[[], [], [], []])
        circuit.layout_hidden(10.0)
        circuit.process()


class TestProcess:
    def test_weighted_sum_plus_bias(self, light_population, make_vehicle):
        v = make_vehicle(light_population)
        ins = [g.id for g in v.genome.input_neuron_genes]
        outs = [g.id for g in v.genome.output_neuron_genes]
        circuit = _connect(v, [(ins[0], outs[0]), (ins[1], outs[0])], weight=0.5)
        circuit.neurons[ins[0]].activation = 1.0
        circuit.neurons[ins[1]].activation = 3.0
        circuit.neurons[outs[0]].bias = 0.25

        circuit.process()

        assert circuit.neurons[outs[0]].activation == pytest.approx(2.25)
        assert circuit.neurons[outs[1]].activation == 0.0
        assert circuit.neurons[ins[1]].activation == 3.0

    def test_threshold_gates_output(self, light_population, make_vehicle):
        v = make_vehicle(light_population)
        ins = [g.id for g in v.genome.input_neuron_genes]
        outs = [g.id for g in v.genome.output_neuron_genes]
        circuit = _connect(v, [(ins[0], outs[0])])
        circuit.neurons[ins[0]].activation = 0.4
        circuit.neurons[outs[0]].threshold = 0.5

        circuit.process()
        assert circuit.neurons[outs[0]].activation == 0.0

        circuit.neurons[ins[0]].activation = 0.6
        circuit.process()
        assert circuit.neurons[outs[0]].activation == pytest.approx(0.6)

    def test_disabled_synapse_is_ignored(self, light_population, make_vehicle):
        v = make_vehicle(light_population)
        ins = [g.id for g in v.genome.input_neuron_genes]
        outs = [g.id for g in v.genome.output_neuron_genes]
        circuit = _connect(v, [(ins[0], outs[0])])
        circuit.synapses[0].enabled = False
        circuit.neurons[ins[0]].activation = 1.0

        circuit.process()

        assert circuit.neurons[outs[0]].activation == 0.0

    def test_hidden_layer_feeds_output_in_one_pass(self, light_population, make_vehicle):
        v = make_vehicle(light_population)
        ins = [g.id for g in v.genome.input_neuron_genes]
        outs = [g.id for g in v.genome.output_neuron_genes]
        _connect(v, [(ins[0], outs[0])])
        hidden = add_neuron_gene(v.genome, light_population.gene_pool, random.Random(0))
        circuit = v.connect_neural_circuit()
        for s in circuit.synapses:
            s.weight = 2.0
        circuit.neurons[ins[0]].activation = 1.5

        circuit.process()

        assert circuit.neurons[hidden.id].activation == pytest.approx(3.0)
        assert circuit.neurons[outs[0]].activation == pytest.approx(6.0)

    def test_repeated_runs_are_identical(self, light_population, make_vehicle):
        v = make_vehicle(light_population)
        ins = [g.id for g in v.genome.input_neuron_genes]
        outs = [g.id for g in v.genome.output_neuron_genes]
        circuit = _connect(v, [(i, o) for i in ins for o in outs])
        weights = iter([0.3, -0.7, 0.9, 0.1])
        for s in circuit.synapses:
            s.weight = next(weights)

        results = []
        for _ in range(3):
            circuit.neurons[ins[0]].activation = 0.8
            circuit.neurons[ins[1]].activation = 0.2
            circuit.process()
            results.append([circuit.neurons[o].activation for o in outs])

        assert results[0] == results[1] == results[2]


class TestBalance:
    def test_peer_mutation_relocates_outputs(self, light_population, make_vehicle):
        pool = light_population.gene_pool
        a = make_vehicle(light_population)
        b = make_vehicle(light_population)
        ins = [g.id for g in a.genome.input_neuron_genes]
        outs = [g.id for g in a.genome.output_neuron_genes]
        _connect(a, [(ins[0], outs[0])])
        _connect(b, [(ins[1], outs[1])])
        assert len(a.circuit.layers) == 2

        # b's split grows the shared schema; a's circuit is now stale
        add_neuron_gene(b.genome, pool, random.Random(0))
        assert pool.layer_count == 3

        moved = a.balance_nc()

        assert moved == 2
        assert len(a.circuit.layers) == 3
        assert a.circuit.layers[1] == []
        assert {n.id for n in a.circuit.layers[2]} == set(outs)
        _assert_buckets_consistent(a.circuit)
        a.circuit.process()

    def test_hidden_neuron_follows_layer_insertion(self, light_population, make_vehicle):
        pool = light_population.gene_pool
        a = make_vehicle(light_population)
        ins = [g.id for g in a.genome.input_neuron_genes]
        outs = [g.id for g in a.genome.output_neuron_genes]
        _connect(a, [(ins[0], outs[0])])
        h1 = add_neuron_gene(a.genome, pool, random.Random(0))
        a.connect_neural_circuit()
        assert a.circuit.layers[1][0].id == h1.id

        # splitting input -> h1 inserts a layer at 1 and pushes h1 up
        pool.split_neuron(pool.synapse_gene(ins[0], h1.id), random.Random(0))
        assert h1.layer == 2

        moved = a.balance_nc()

        assert moved == 3
        assert len(a.circuit.layers) == 4
        assert a.circuit.layers[1] == []
        assert [n.id for n in a.circuit.layers[2]] == [h1.id]
        assert {n.id for n in a.circuit.layers[3]} == set(outs)
        _assert_buckets_consistent(a.circuit)

    def test_moved_hidden_neuron_is_laid_out_again(self, light_population, make_vehicle):
        pool = light_population.gene_pool
        a = make_vehicle(light_population)
        ins = [g.id for g in a.genome.input_neuron_genes]
        outs = [g.id for g in a.genome.output_neuron_genes]
        _connect(a, [(ins[0], outs[0])])
        h1 = add_neuron_gene(a.genome, pool, random.Random(0))
        a.connect_neural_circuit()
        pool.split_neuron(pool.synapse_gene(ins[0], h1.id), random.Random(0))

        a.balance_nc()

        hidden = a.circuit.neurons[h1.id]
        y_in, y_out = a.circuit.layers[0][0].y, a.circuit.layers[-1][0].y
        assert hidden.y == pytest.approx(y_in - (y_in - y_out) * 2 / 3)

    def test_balanced_circuit_is_left_alone(self, light_population, make_vehicle):
        a = make_vehicle(light_population)
        assert a.balance_nc() == 0

    def test_population_balance_reaches_every_member(self, light_population, make_vehicle):
        pool = light_population.gene_pool
        vehicles = [make_vehicle(light_population) for _ in range(3)]
        syn = pool.synapse_gene(pool.input_genes[0].id, pool.output_genes[0].id)
        pool.split_neuron(syn, random.Random(0))

        light_population.balance()

        for v in vehicles:
            assert len(v.circuit.layers) == pool.layer_count
            _assert_buckets_consistent(v.circuit)


def test_gate():
    assert gate(0.5, 0.5) == 0.5
    assert gate(0.49, 0.5) == 0.0
    assert gate(-2.0, -3.0) == -2.0
