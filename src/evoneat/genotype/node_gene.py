"""
NEAT Node Gene Module.

This module implements the NodeGene class and NodeType enumeration
for the NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    NodeType: Enumeration for node types (BIAS, INPUT, HIDDEN, OUTPUT)
    NodeGene: Gene encoding a single network neuron
"""

from enum import Enum

class NodeType(Enum):
    """
    Nodes come in four types: bias, input, hidden, output.
    """
    BIAS   = "B"
    INPUT  = "I"
    HIDDEN = "H"
    OUTPUT = "O"

class NodeGene:
    """
    A gene describing a neuron in a Neural Network.

    Node genes are identified by a node ID which is stable across structural
    mutations and crossover: the same ID always denotes the same neuron,
    in every genome of the population.

    The neuron computes its output as: activation(activation_response * weighted_input)
    Bias and input neurons do not compute anything, they hold a value
    (1.0 for the bias neuron, the network input for input neurons).

    Public Attributes:
        id:                  Unique identifier for this neuron
        type:                Type of neuron (BIAS, INPUT, HIDDEN or OUTPUT)
        activation_response: Slope multiplier applied to the weighted input
    """

    def __init__(self,
                 node_id            : int,
                 node_type          : NodeType,
                 activation_response: float = 1.0):
        """
        Parameters:
            node_id:             Unique identifier for this neuron
            node_type:           Type of neuron
            activation_response: Slope multiplier applied to the weighted input
        """
        self.id                 : int      = node_id
        self.type               : NodeType = node_type
        self.activation_response: float    = activation_response

    @property
    def is_permanent(self) -> bool:
        """Whether every genome carries this neuron (bias, input and output neurons do)."""
        return self.type != NodeType.HIDDEN

    def copy(self) -> 'NodeGene':
        return NodeGene(self.id, self.type, self.activation_response)

    def __eq__(self, other):
        if not isinstance(other, NodeGene):
            return NotImplemented
        return (self.id, self.type, self.activation_response) == \
               (other.id, other.type, other.activation_response)

    def __hash__(self):
        return hash((self.id, self.type))

    def __repr__(self):
        return (f"NodeGene(node_id={self.id:03d}, node_type=NodeType.{self.type.name:6s},"
                f"activation_response={self.activation_response})")

    def __str__(self):
        return f"[{self.type.value}{self.id}]"
