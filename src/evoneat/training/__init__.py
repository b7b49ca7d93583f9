"""
NEAT Training Package

The evolutionary trainer and the mutation operators it draws from.

Modules:
    neat_training:      NEATTraining class
    mutation_operators: Operators wrapping the genome mutations

Exported Classes:
    NEATTraining:  Evolves a population of NEAT genomes, one generation per iteration
    MutateWeights: Perturb or replace link weights
    AddNeuron:     Split a link with a new neuron
    AddLink:       Link two neurons
    AdjustCurve:   Placeholder mutation that leaves the genome unchanged
    RemoveLink:    Remove a link
"""

from evoneat.training.mutation_operators import MutateWeights, AddNeuron, AddLink, AdjustCurve, RemoveLink
from evoneat.training.neat_training      import NEATTraining

__all__ = ['NEATTraining',
           'MutateWeights',
           'AddNeuron',
           'AddLink',
           'AdjustCurve',
           'RemoveLink']
