"""
NEAT Phenotype Package

This package implements the phenotype representation for the NEAT (NeuroEvolution
of Augmenting Topologies) algorithm: the networks genomes decode into.

The phenotype layer transforms the genetic representation (genotype) into functioning
neural networks that can process inputs and produce outputs, and on which the
score function is evaluated.

Modules:
    network_base: Abstract base class for network implementations
    neat_network: Network with feed-forward and recurrent links

Exported Classes:
    NetworkBase: Abstract base class for network implementations
    NEATNetwork: Network decoded from a NEATGenome
"""

from evoneat.phenotype.network_base import NetworkBase
from evoneat.phenotype.neat_network import NEATNetwork

__all__ = ['NetworkBase',
           'NEATNetwork']
