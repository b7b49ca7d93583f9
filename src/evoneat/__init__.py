"""
evoneat - NEAT (NeuroEvolution of Augmenting Topologies) training in Python.

This package evolves the topology and the weights of neural networks. A population
of genomes is split into species by structural similarity, and each generation is
bred from the previous one through score-weighted selection, crossover aligned by
innovation numbers, and mutation.

Main components:
- randomize:   Weighted random choice and operator tables
- genotype:    Genetic encoding (genomes, genes, innovation tracking)
- phenotype:   Networks decoded from genomes
- pool:        Population and species
- score:       Comparators and score functions
- training:    The evolutionary trainer
- run:         Configuration
- activations: Activation functions for neural networks

Example:
    >>> from evoneat import Config, NEATTraining
    >>> config = Config("config.ini")
    >>> def score(network):
    ...     return float(network.compute([1.0, 0.0])[0])
    >>> train = NEATTraining.with_new_population(score, 2, 1, 150, config)
    >>> train.iterations(100)
    >>> train.best_score
"""

__version__ = "0.1.0"

# Import main classes for convenient access
from evoneat.errors import TrainingError, ConfigurationError, UnsupportedOperationError
from evoneat.run.config import Config
from evoneat.genotype.innovation_tracker import InnovationTracker
from evoneat.genotype.neat_genome import NEATGenome
from evoneat.phenotype.neat_network import NEATNetwork
from evoneat.pool.population import Population
from evoneat.pool.species import Species
from evoneat.score.training_set_score import TrainingSetScore
from evoneat.training.neat_training import NEATTraining

__all__ = [
    "TrainingError",
    "ConfigurationError",
    "UnsupportedOperationError",
    "Config",
    "InnovationTracker",
    "NEATGenome",
    "NEATNetwork",
    "Population",
    "Species",
    "TrainingSetScore",
    "NEATTraining",
]
