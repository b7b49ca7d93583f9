"""Pytest configuration and shared fixtures."""

import pytest
import random
import sys
from pathlib import Path

# Add the source directory to the Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))


@pytest.fixture
def rng():
    """A seeded random source, so every stochastic path is reproducible."""
    return random.Random(42)


@pytest.fixture
def config():
    """A default configuration, with the stochastic gates of structural mutations always open."""
    from evoneat.run.config import Config
    config = Config()
    config.chance_add_node = 1.0
    config.chance_add_link = 1.0
    config.chance_add_recurrent_link = 0.0
    return config


@pytest.fixture
def tracker():
    """Innovation tracker for genomes with 2 inputs and 1 output."""
    from evoneat.genotype.innovation_tracker import InnovationTracker
    return InnovationTracker(2, 1)
