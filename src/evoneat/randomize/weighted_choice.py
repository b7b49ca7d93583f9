"""
NEAT Weighted Choice Module

This module implements the WeightedChoice class, used to draw an index
with probability proportional to a list of weights.

Classes:
    WeightedChoice: Weighted random index generator
"""

import random
from typing import Sequence

from evoneat.errors import ConfigurationError

class WeightedChoice:
    """
    Draws indices with probability proportional to a list of non-negative weights.

    The weights need not sum to one, they are normalized on construction.
    If all weights are zero every index is equally likely.

    The random source is passed to each draw, so callers control determinism.

    Public Attributes:
        probabilities: The normalized probabilities, one per index

    Public Methods:
        generate(rng): Draw an index
    """

    def __init__(self, weights: Sequence[float]):
        """
        Parameters:
            weights: one non-negative weight per index

        Raises:
            ConfigurationError: if 'weights' is empty or contains a negative weight
        """
        if len(weights) == 0:
            raise ConfigurationError("WeightedChoice needs at least one weight")
        if any(w < 0 for w in weights):
            raise ConfigurationError(f"Weights must be non-negative, got {list(weights)}")

        total = float(sum(weights))

        # All-zero weights: fall back to a uniform draw
        if total == 0.0:
            self.probabilities: list[float] = [1.0 / len(weights)] * len(weights)
        else:
            self.probabilities: list[float] = [w / total for w in weights]

    def __len__(self):
        return len(self.probabilities)

    def generate(self, rng: random.Random) -> int:
        """
        Draw an index with probability proportional to its weight.

        Parameters:
            rng: the random source

        Returns:
            the selected index
        """
        r = rng.random()
        cumulative = 0.0
        for index, prob in enumerate(self.probabilities):
            cumulative += prob
            if r < cumulative:
                return index

        # Rounding may leave 'cumulative' a hair below 'r', pick the last non-zero entry
        return self._last_nonzero()

    def _last_nonzero(self) -> int:
        for index in range(len(self.probabilities) - 1, -1, -1):
            if self.probabilities[index] > 0.0:
                return index
        return len(self.probabilities) - 1

    def __repr__(self):
        return f"WeightedChoice(probabilities={self.probabilities})"
