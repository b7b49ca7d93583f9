"""
Genome Base Module

This module defines the capability interface shared by all genome kinds
understood by the trainer.

Classes:
    GenomeKind: Closed enumeration of the genome encodings
    GenomeBase: Abstract base class declaring the genome capabilities
"""

import random
from abc    import ABC, abstractmethod
from enum   import Enum
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from evoneat.genotype.innovation_tracker import InnovationTracker

class GenomeKind(Enum):
    """
    The genome encodings the trainer knows how to evolve.
    """
    NEAT = "neat"

class GenomeBase(ABC):
    """
    The capabilities a genome must offer to be evolved by the trainer.

    Besides its genetic material, every genome carries the bookkeeping
    filled in by the trainer during a generation.

    Public Attributes:
        kind:            The encoding of this genome
        genome_id:       Identifier assigned by the population (-1 until assigned)
        score:           Raw score returned by the score function
        adjusted_score:  Score after age bonus/penalty and fitness sharing
        amount_to_spawn: Offspring share of this genome (adjusted score / average adjusted score)
        species_id:      ID of the species the genome was assigned to (None if unassigned)
        organism:        The last decoded network (None until decoded)

    Abstract Methods:
        mutate_weights(rng):                  Perturb or replace link weights
        add_neuron(rng, tracker):             Split a link with a new neuron
        add_link(rng, tracker):               Link two unlinked neurons
        remove_link(rng):                     Remove a link
        get_compatibility_score(other):       Structural distance to another genome
        decode():                             Build the network this genome encodes
        clone(genome_id):                     Deep copy with a new identifier
    """

    kind: GenomeKind

    def __init__(self, genome_id: int = -1):
        self.genome_id      : int         = genome_id
        self.score          : float       = 0.0
        self.adjusted_score : float       = 0.0
        self.amount_to_spawn: float       = 0.0
        self.species_id     : int | None  = None
        self.organism       : Any         = None

    @property
    @abstractmethod
    def input_count(self) -> int:
        pass

    @property
    @abstractmethod
    def output_count(self) -> int:
        pass

    @abstractmethod
    def mutate_weights(self, rng: random.Random) -> None:
        pass

    @abstractmethod
    def add_neuron(self, rng: random.Random, tracker: 'InnovationTracker') -> None:
        pass

    @abstractmethod
    def add_link(self, rng: random.Random, tracker: 'InnovationTracker') -> None:
        pass

    @abstractmethod
    def remove_link(self, rng: random.Random) -> None:
        pass

    @abstractmethod
    def get_compatibility_score(self, other: 'GenomeBase') -> float:
        pass

    @abstractmethod
    def decode(self) -> Any:
        pass

    @abstractmethod
    def clone(self, genome_id: int) -> 'GenomeBase':
        pass
