"""
NEAT Genotype Package

This package implements the genotype representation for the NEAT (NeuroEvolution of
Augmenting Topologies) algorithm. It provides classes for encoding neural network
structures and parameters at the genetic level.

The NEAT genotype consists of two types of genes:
- Node genes: Encode individual neurons (bias, input, hidden, output)
- Link genes: Encode weighted links between neurons with innovation numbers

Modules:
    node_gene:          NodeType enumeration and NodeGene class
    link_gene:          LinkGene class
    innovation_tracker: InnovationType, InnovationRecord and InnovationTracker classes
    genome_base:        GenomeKind enumeration and GenomeBase class
    neat_genome:        NEATGenome class

Exported Classes:
    NodeType:          Enumeration for node types (BIAS, INPUT, HIDDEN, OUTPUT)
    NodeGene:          Gene encoding a single network neuron
    LinkGene:          Gene encoding a weighted link between neurons
    InnovationType:    Enumeration for the kinds of structural innovation
    InnovationRecord:  One entry of the innovation ledger
    InnovationTracker: Tracker for innovation numbers and node IDs
    GenomeKind:        Enumeration of the genome encodings
    GenomeBase:        Capability interface of evolvable genomes
    NEATGenome:        Complete genome representing a neural network
"""

from evoneat.genotype.node_gene          import NodeType, NodeGene
from evoneat.genotype.link_gene          import LinkGene
from evoneat.genotype.innovation_tracker import InnovationType, InnovationRecord, InnovationTracker
from evoneat.genotype.genome_base        import GenomeKind, GenomeBase
from evoneat.genotype.neat_genome        import NEATGenome

__all__ = ['NodeType',
           'NodeGene',
           'LinkGene',
           'InnovationType',
           'InnovationRecord',
           'InnovationTracker',
           'GenomeKind',
           'GenomeBase',
           'NEATGenome']
