"""
NEAT Link Gene Module

This module implements the LinkGene class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    LinkGene: Gene encoding a weighted link between two neurons
"""

import random

class LinkGene:
    """
    A gene describing a weighted link between two neurons in a Neural Network.

    Each link gene represents a directed edge in the neural network graph,
    from a source neuron to a target neuron, with an associated weight.
    Link genes are uniquely identified by their innovation number, which
    serves as a historical marker enabling gene alignment during crossover.

    Links can be disabled: the gene is kept (and inherited), but the link
    plays no part in the decoded network.

    Public Attributes:
        innovation: Global innovation number uniquely identifying this link
        from_id:    ID of the source neuron
        to_id:      ID of the target neuron
        weight:     Weight of the link
        enabled:    Whether this link is active in the network
        recurrent:  Whether this link closes a cycle (feeds back a previous activation)

    Public Methods:
        mutate(rng, replace_prob, max_perturbation, min_weight, max_weight):
            Replace or perturb the weight
    """

    def __init__(self,
                 innovation: int,
                 from_id   : int,
                 to_id     : int,
                 weight    : float,
                 enabled   : bool = True,
                 recurrent : bool = False):
        """
        Parameters:
            innovation: Number uniquely and globally identifying this link
            from_id:    ID of the source neuron
            to_id:      ID of the target neuron
            weight:     Weight of the link
            enabled:    Whether this link is active in the network
            recurrent:  Whether this link closes a cycle
        """
        self.innovation: int   = innovation
        self.from_id   : int   = from_id
        self.to_id     : int   = to_id
        self.weight    : float = weight
        self.enabled   : bool  = enabled
        self.recurrent : bool  = recurrent

    def mutate(self,
               rng             : random.Random,
               replace_prob    : float,
               max_perturbation: float,
               min_weight      : float,
               max_weight      : float) -> None:
        """
        Mutate the weight of the link.

        The weight is either replaced by a fresh value drawn uniformly from
        [min_weight, max_weight] (with probability 'replace_prob'), or
        perturbed by a value drawn uniformly from [-max_perturbation, +max_perturbation].
        """
        if rng.random() < replace_prob:
            self.weight = rng.uniform(min_weight, max_weight)
        else:
            self.weight += rng.uniform(-1.0, 1.0) * max_perturbation

    def copy(self) -> 'LinkGene':
        return LinkGene(self.innovation, self.from_id, self.to_id,
                        self.weight, self.enabled, self.recurrent)

    def __eq__(self, other):
        if not isinstance(other, LinkGene):
            return NotImplemented
        return (self.innovation, self.from_id, self.to_id, self.weight, self.enabled, self.recurrent) == \
               (other.innovation, other.from_id, other.to_id, other.weight, other.enabled, other.recurrent)

    def __hash__(self):
        return hash(self.innovation)

    def __repr__(self):
        return (f"LinkGene(innovation={self.innovation:03d}, from_id={self.from_id:03d}, to_id={self.to_id:03d},"
                f"weight={self.weight:+.6f}, enabled={self.enabled}, recurrent={self.recurrent})")

    def __str__(self):
        s  = f"[{self.innovation:03d},{'E' if self.enabled else 'D'}{'R' if self.recurrent else ''},"
        s += f"{self.from_id:02d}=>{self.to_id:02d},{self.weight:+.02f}]"
        return s
