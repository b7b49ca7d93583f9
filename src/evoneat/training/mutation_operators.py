"""
NEAT Mutation Operators Module

The mutations a genome can undergo, wrapped as operators so that they can
be placed in an OperationList and drawn by weight.

Classes:
    MutateWeights: Perturb or replace link weights
    AddNeuron:     Split a link with a new neuron
    AddLink:       Link two neurons
    AdjustCurve:   Placeholder for adjusting activation responses (does nothing)
    RemoveLink:    Remove a link
"""

import random
from typing import TYPE_CHECKING

from evoneat.randomize.operation_list import EvolutionaryOperator

if TYPE_CHECKING:
    from evoneat.genotype import GenomeBase, InnovationTracker

class MutateWeights(EvolutionaryOperator):
    def perform(self, genome: 'GenomeBase', rng: random.Random) -> None:
        genome.mutate_weights(rng)

class AddNeuron(EvolutionaryOperator):
    def __init__(self, tracker: 'InnovationTracker'):
        self._tracker = tracker

    def perform(self, genome: 'GenomeBase', rng: random.Random) -> None:
        genome.add_neuron(rng, self._tracker)

class AddLink(EvolutionaryOperator):
    def __init__(self, tracker: 'InnovationTracker'):
        self._tracker = tracker

    def perform(self, genome: 'GenomeBase', rng: random.Random) -> None:
        genome.add_link(rng, self._tracker)

class AdjustCurve(EvolutionaryOperator):
    """
    Adjusting the activation response of neurons is not implemented:
    drawing this operator leaves the genome unchanged. Its default
    weight is 0, so it is only drawn if configured otherwise.
    """

    def perform(self, genome: 'GenomeBase', rng: random.Random) -> None:
        pass

class RemoveLink(EvolutionaryOperator):
    def perform(self, genome: 'GenomeBase', rng: random.Random) -> None:
        genome.remove_link(rng)
