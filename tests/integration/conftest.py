"""
Shared fixtures for integration tests.
"""

import random

import numpy as np
import pytest

from evoneat.run.config import Config


@pytest.fixture
def seeded_rng():
    """Random source shared by population creation and training, for reproducibility."""
    return random.Random(42)


@pytest.fixture
def xor_inputs():
    """XOR inputs (numpy array format)."""
    return np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])


@pytest.fixture
def xor_outputs():
    """XOR expected outputs (numpy array format)."""
    return np.array([[0.0], [1.0], [1.0], [0.0]])


@pytest.fixture
def xor_config():
    """Config tuned for quick XOR runs."""
    config = Config()
    config.max_species = 10
    config.compatibility_threshold = 1.0
    config.add_node_prob = 0.05
    config.add_link_prob = 0.1
    config.chance_add_node = 0.5
    config.chance_add_link = 0.5
    config.mutation_rate = 0.5
    return config
