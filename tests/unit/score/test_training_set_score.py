"""
Unit tests for TrainingSetScore class.
"""

import numpy as np
import pytest
from unittest.mock import Mock

from evoneat.genotype import LinkGene, NEATGenome
from evoneat.score import TrainingSetScore


class TestTrainingSetScore:
    """Test the mean squared error score."""

    def test_perfect_network_scores_zero(self):
        score = TrainingSetScore([[0.0], [1.0]], [[0.0], [1.0]])
        network = Mock()
        network.compute.return_value = np.array([[0.0], [1.0]])
        assert score(network) == 0.0

    def test_mean_squared_error(self):
        score = TrainingSetScore([[0.0, 0.0], [1.0, 1.0]], [[1.0], [0.0]])
        network = Mock()
        network.compute.return_value = np.array([[0.5], [0.5]])
        assert score(network) == pytest.approx(0.25)
        np.testing.assert_array_equal(network.compute.call_args[0][0], [[0.0, 0.0], [1.0, 1.0]])

    def test_real_network(self, config):
        config.activation = "identity"
        genome = NEATGenome(config, 2, 1, 1, link_genes=[LinkGene(0, 1, 3, 1.0), LinkGene(1, 2, 3, 1.0)])
        score = TrainingSetScore([[0, 0], [0, 1], [1, 0], [1, 1]], [[0], [1], [1], [2]])
        assert score(genome.decode()) == pytest.approx(0.0)

    def test_mismatched_rows(self):
        with pytest.raises(ValueError):
            TrainingSetScore([[0.0], [1.0]], [[0.0]])

    def test_should_minimize(self):
        assert TrainingSetScore([[0.0]], [[0.0]]).should_minimize
