"""
NEAT Operation List Module

This module implements a table of evolutionary operators, each tagged
with the probability of being selected.

Classes:
    EvolutionaryOperator: Abstract base class for operators held in the table
    OperationHolder:      An operator together with its selection probability
    OperationList:        The table itself, backed by a WeightedChoice
"""

import random
from abc    import ABC, abstractmethod
from typing import Any

from evoneat.errors                    import ConfigurationError
from evoneat.randomize.weighted_choice import WeightedChoice

class EvolutionaryOperator(ABC):
    """
    An operator that can be picked from an OperationList.

    Subclasses implement 'perform', which acts on a single genome in place.
    """

    @abstractmethod
    def perform(self, genome: Any, rng: random.Random) -> None:
        """
        Apply the operator.

        Parameters:
            genome: the genome the operator acts on (modified in place)
            rng:    the random source
        """
        pass

class OperationHolder:
    """
    Pairs an operator with the probability of choosing it.
    """

    def __init__(self, operator: EvolutionaryOperator, probability: float):
        self.operator   : EvolutionaryOperator = operator
        self.probability: float                = probability

    def __repr__(self):
        return f"OperationHolder(operator={self.operator!r}, probability={self.probability})"

class OperationList:
    """
    A list of operators, from which one is drawn with probability
    proportional to its weight.

    Operators are registered with 'add'; once all of them are in place,
    'finalize_structure' must be called to build the underlying chooser.

    Public Methods:
        add(probability, operator): Register an operator
        finalize_structure():       Build the weighted chooser
        pick_operator(rng):         Draw an operator
    """

    def __init__(self):
        self._holders: list[OperationHolder]   = []
        self._chooser: WeightedChoice | None   = None

    def add(self, probability: float, operator: EvolutionaryOperator) -> None:
        """
        Register an operator. Invalidates any previously built chooser.
        """
        self._holders.append(OperationHolder(operator, probability))
        self._chooser = None

    def finalize_structure(self) -> None:
        """
        Build the weighted chooser from the registered probabilities.
        """
        self._chooser = WeightedChoice([holder.probability for holder in self._holders])

    def pick_operator(self, rng: random.Random) -> EvolutionaryOperator:
        """
        Draw an operator with probability proportional to its weight.

        Raises:
            ConfigurationError: if 'finalize_structure' has not been called
        """
        if self._chooser is None:
            raise ConfigurationError("OperationList.finalize_structure() must be called before picking")
        return self._holders[self._chooser.generate(rng)].operator

    @property
    def operators(self) -> list[EvolutionaryOperator]:
        return [holder.operator for holder in self._holders]

    def __len__(self):
        return len(self._holders)

    def __iter__(self):
        return iter(self._holders)
