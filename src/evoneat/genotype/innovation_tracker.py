"""
NEAT Innovation Tracker Module

This module implements the InnovationTracker class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    InnovationType:    Enumeration for the kinds of structural innovation
    InnovationRecord:  One entry of the innovation ledger
    InnovationTracker: Tracker for innovation numbers and node IDs
"""

import logging
from enum      import Enum
from itertools import count
from typing    import Iterator

from evoneat.genotype.node_gene import NodeGene, NodeType
from evoneat.genotype.link_gene import LinkGene

logger = logging.getLogger(__name__)

class InnovationType(Enum):
    NEW_LINK = "link"
    NEW_NODE = "node"

class InnovationRecord:
    """
    A structural change, as recorded in the innovation ledger.

    Public Attributes:
        innovation_id: The innovation number assigned to the change
        from_id:       Source neuron of the new link, or of the link that was split
        to_id:         Target neuron of the new link, or of the link that was split
        type:          NEW_LINK or NEW_NODE
        node_id:       ID of the neuron created by a NEW_NODE innovation (None for links)
    """

    def __init__(self,
                 innovation_id: int,
                 from_id      : int,
                 to_id        : int,
                 innovation_type: InnovationType,
                 node_id      : int | None = None):
        self.innovation_id: int            = innovation_id
        self.from_id      : int            = from_id
        self.to_id        : int            = to_id
        self.type         : InnovationType = innovation_type
        self.node_id      : int | None     = node_id

    def __repr__(self):
        return (f"InnovationRecord(innovation_id={self.innovation_id}, from_id={self.from_id}, "
                f"to_id={self.to_id}, type={self.type.name}, node_id={self.node_id})")

class InnovationTracker:
    """
    Tracks structural changes across all genomes of a population.
    Ensures the same structural change gets the same innovation
    number (for links) and the same ID (for nodes), so that crossover
    can align the genes of genomes from different lineages.

    A tracker is owned by a Population and handed to the genomes that
    need it; it is never global state.

    Node numbering convention:
        - Bias node:    0
        - Input nodes:  [1, num_inputs]
        - Output nodes: [num_inputs + 1, num_inputs + num_outputs]
        - Hidden nodes: (num_inputs + num_outputs, ...)

    Public Properties:
        bias_id:    ID of the bias node
        input_ids:  IDs of the input nodes
        output_ids: IDs of the output nodes
        records:    The ledger, in order of creation

    Public Methods:
        record_new_link(from_id, to_id):  Innovation number for a link
        record_new_node(split_link):      Node ID and innovation number for splitting a link
        get_split_ids(split_link):        Node ID and the innovation numbers of the two new links
        create_neuron_from_id(node_id):   Rebuild the node gene for a given node ID
    """

    BIAS_ID = 0

    def __init__(self, input_count: int, output_count: int):
        """
        Parameters:
            input_count:  number of input neurons of every genome
            output_count: number of output neurons of every genome
        """
        self.input_count : int = input_count
        self.output_count: int = output_count

        self._next_innovation_number = count(0)
        self._next_node_id           = count(input_count + output_count + 1)

        self._records: list[InnovationRecord] = []

        # For each link ever created, map its endpoints to its innovation number
        self._link_innovations: dict[tuple[int, int], int] = {}    # (from_id, to_id) -> innovation number

        # When a link is split, track the record of the node that was created
        self._node_innovations: dict[int, InnovationRecord] = {}   # split link innovation -> record

        # Every hidden node ever created
        self._hidden_node_ids: set[int] = set()

    @property
    def bias_id(self) -> int:
        return self.BIAS_ID

    @property
    def input_ids(self) -> range:
        return range(1, self.input_count + 1)

    @property
    def output_ids(self) -> range:
        return range(self.input_count + 1, self.input_count + self.output_count + 1)

    @property
    def permanent_ids(self) -> range:
        """The IDs of the bias, input and output neurons (carried by every genome)."""
        return range(0, self.input_count + self.output_count + 1)

    @property
    def records(self) -> list[InnovationRecord]:
        return list(self._records)

    def record_new_link(self, from_id: int, to_id: int) -> int:
        """
        Get the innovation number for a link, identified by its endpoints.
        Returns the existing innovation number if this link was created
        before, otherwise assigns a new innovation number.

        Parameters:
            from_id: node ID of the source of the link
            to_id:   node ID of the target of the link

        Returns:
            link ID (a.k.a. innovation number)
        """
        key = (from_id, to_id)

        # This is a new link
        if key not in self._link_innovations:
            innovation = next(self._next_innovation_number)
            self._link_innovations[key] = innovation
            self._records.append(InnovationRecord(innovation, from_id, to_id, InnovationType.NEW_LINK))
            logger.debug(f"new link innovation {innovation}: {from_id} -> {to_id}")

        return self._link_innovations[key]

    def record_new_node(self, split_link: LinkGene) -> tuple[int, int]:
        """
        Get the node ID and innovation number for splitting a link.
        If this exact link has been split before, returns the same
        values, otherwise creates new ones.

        Parameters:
            split_link: the link being split

        Returns:
            2-tuple: (new_node_id, innovation number of the split)
        """
        key = split_link.innovation

        # This link hasn't been split before
        if key not in self._node_innovations:
            node_id    = next(self._next_node_id)
            innovation = next(self._next_innovation_number)
            record     = InnovationRecord(innovation, split_link.from_id, split_link.to_id,
                                          InnovationType.NEW_NODE, node_id)
            self._node_innovations[key] = record
            self._hidden_node_ids.add(node_id)
            self._records.append(record)
            logger.debug(f"new node innovation {innovation}: node {node_id} splits link {key}")

        record = self._node_innovations[key]
        return record.node_id, record.innovation_id

    def get_split_ids(self, split_link: LinkGene) -> tuple[int, int, int]:
        """
        Get the node ID and the link innovation numbers for splitting a link.

        Parameters:
            split_link: the link being split

        Returns:
            3-tuple: (new_node_id, innovation1, innovation2)
            innovation1 is for the link from the source of 'split_link' to the new node
            innovation2 is for the link from the new node to the target of 'split_link'
        """
        new_node_id, _ = self.record_new_node(split_link)

        # First new link: original source -> new node
        innov1 = self.record_new_link(split_link.from_id, new_node_id)

        # Second new link: new node -> original target
        innov2 = self.record_new_link(new_node_id, split_link.to_id)

        return new_node_id, innov1, innov2

    def create_neuron_from_id(self, node_id: int) -> NodeGene:
        """
        Build a node gene for a given node ID.

        Raises:
            KeyError: if no node with this ID exists
        """
        if node_id == self.BIAS_ID:
            return NodeGene(node_id, NodeType.BIAS)
        if node_id in self.input_ids:
            return NodeGene(node_id, NodeType.INPUT)
        if node_id in self.output_ids:
            return NodeGene(node_id, NodeType.OUTPUT)
        if node_id in self._hidden_node_ids:
            return NodeGene(node_id, NodeType.HIDDEN)
        raise KeyError(f"Node with ID {node_id} was never created")

    def __len__(self):
        return len(self._records)

    def __iter__(self) -> Iterator[InnovationRecord]:
        return iter(self._records)
