"""
Shared pytest fixtures for the test suite.
Provides populations, vehicles and seeded random sources.
"""

import os

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import random

import pytest

import config
from evolution.population import Population, Tag
from vehicle.vehicle import Vehicle
from world.signals import SignalKind


class CountingRandom(random.Random):
    """Seeded random source that counts calls to random()."""

    def __init__(self, seed=0):
        super().__init__(seed)
        self.calls = 0

    def random(self):
        self.calls += 1
        return super().random()


class FixedRandom(random.Random):
    """random() always returns the same value (forces every coin flip one way)."""

    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


# ===== Random Fixtures =====

@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def no_noise(monkeypatch):
    """Disable wheel noise so drive() is exact."""
    monkeypatch.setattr(config, "ENVIRONMENT_NOISE", 0.0)


# ===== Population / Vehicle Fixtures =====

@pytest.fixture
def light_population():
    """Unbounded traffic population with one LIGHT sensor pair (2 inputs, 2 outputs)."""
    return Population(tag=Tag.TRAFFIC, sensor_types=[SignalKind.LIGHT], bounds=None)


@pytest.fixture
def make_vehicle():
    """Factory: vehicle at (x, y) facing ``angle``, added to its population."""

    def _make(population, x=0.0, y=0.0, angle=0.0, connect=True):
        v = Vehicle(x, y, population, random.Random(0))
        v.body.angle = angle
        v.body.update_position()
        if connect:
            v.connect_neural_circuit()
        population.add(v)
        return v

    return _make
