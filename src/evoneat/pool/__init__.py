"""
NEAT Pool Package

This package contains classes for managing populations and species in the NEAT
(NeuroEvolution of Augmenting Topologies) algorithm.

The pool package holds the evolving genomes, organized into species based
on genetic similarity.

Modules:
    species:    Species representation and parent selection
    population: Genomes, species, ID counters and innovation ledger

Exported Classes:
    Species:    A cluster of genetically similar genomes
    Population: Container of all genomes and species of a run
"""

from evoneat.pool.species    import Species
from evoneat.pool.population import Population

__all__ = [
    'Species',
    'Population',
]
