"""
vehicle_sim module: neural/synapse.py

Weighted directed connection between neurons (by neuron id).
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass
class Synapse:
    id: int
    src: int
    dst: int
    weight: float = 0.0
    enabled: bool = True
