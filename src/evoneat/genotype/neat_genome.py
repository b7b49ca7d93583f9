"""
NEAT Genome Module

This module implements the NEATGenome class for the NEAT
(NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    NEATGenome: Complete genome representing a neural network structure
"""

import logging
import math
import random
from typing import Iterable, TYPE_CHECKING

from evoneat.activations              import activations
from evoneat.genotype.genome_base     import GenomeBase, GenomeKind
from evoneat.genotype.link_gene       import LinkGene
from evoneat.genotype.node_gene       import NodeGene, NodeType
from evoneat.run.config               import Config

if TYPE_CHECKING:
    from evoneat.genotype.innovation_tracker import InnovationTracker
    from evoneat.phenotype.neat_network      import NEATNetwork

logger = logging.getLogger(__name__)

class NEATGenome(GenomeBase):
    """
    A NEAT genome representing a neural network as a list of node genes and a list of link genes.

    In the NEAT (NeuroEvolution of Augmenting Topologies) algorithm, a genome encodes
    the structure and parameters of a neural network at the genotype level. It consists of:
    - Node genes: describe network neurons (bias, input, hidden, output)
    - Link genes: describe weighted links between neurons, each with a unique
      innovation number for tracking historical markings during crossover

    A minimal genome contains only the bias, input and output neurons and no links.
    Via mutation operations, genomes grow by adding neurons and links. Links that
    close a cycle are flagged as recurrent: they feed back the previous activation
    of their source neuron.

    Node numbering convention:
        - Bias node:    0
        - Input nodes:  [1, input_count]
        - Output nodes: [input_count + 1, input_count + output_count]
        - Hidden nodes: (input_count + output_count, ...)

    Both gene lists are kept sorted: node genes by ID, link genes by innovation number.

    Public Attributes:
        node_genes: List of NodeGene objects, sorted by node ID
        link_genes: List of LinkGene objects, sorted by innovation number

    Public Properties:
        bias_node:    The bias node gene
        input_nodes:  List of all input node genes
        output_nodes: List of all output node genes
        hidden_nodes: List of all hidden node genes

    Public Methods:
        mutate_weights(rng):            Perturb or replace link weights
        add_neuron(rng, tracker):       Split a link with a new hidden neuron
        add_link(rng, tracker):         Add a link between two neurons
        remove_link(rng):               Remove a link, keeping hidden neurons connected
        get_compatibility_score(other): Calculate the genetic distance to another genome
        decode():                       Build the NEATNetwork this genome describes
        clone(genome_id):               Deep copy with a new ID
    """

    kind = GenomeKind.NEAT

    # Genomes with fewer links than 'input_count + output_count + OLD_LINK_MARGIN'
    # prefer splitting older links when adding a neuron
    OLD_LINK_MARGIN = 5

    def __init__(self,
                 config      : Config,
                 input_count : int,
                 output_count: int,
                 genome_id   : int = -1,
                 node_genes  : Iterable[NodeGene] | None = None,
                 link_genes  : Iterable[LinkGene] | None = None):
        """
        Initialize a genome.

        If no node genes are supplied, a minimal genome is created: a genome that
        describes the smallest possible network, consisting of only the bias, input
        and output neurons and having no links.

        Parameters:
            config:       Stores configuration parameters
            input_count:  Number of input neurons
            output_count: Number of output neurons
            genome_id:    Identifier assigned by the population
            node_genes:   The node genes (default: bias, input and output neurons)
            link_genes:   The link genes (default: none)
        """
        super().__init__(genome_id)
        self._config       = config
        self._input_count  = input_count
        self._output_count = output_count

        if node_genes is None:
            node_genes = [NodeGene(0, NodeType.BIAS)]
            node_genes += [NodeGene(i, NodeType.INPUT) for i in range(1, input_count + 1)]
            node_genes += [NodeGene(input_count + i, NodeType.OUTPUT) for i in range(1, output_count + 1)]

        self.node_genes: list[NodeGene] = list(node_genes)
        self.link_genes: list[LinkGene] = list(link_genes) if link_genes is not None else []
        self.sort_genes()

    @property
    def input_count(self) -> int:
        return self._input_count

    @property
    def output_count(self) -> int:
        return self._output_count

    @property
    def config(self) -> Config:
        return self._config

    @property
    def bias_node(self) -> NodeGene:
        return self.node_genes[0]

    @property
    def input_nodes(self) -> list[NodeGene]:
        return [node for node in self.node_genes if node.type == NodeType.INPUT]

    @property
    def output_nodes(self) -> list[NodeGene]:
        return [node for node in self.node_genes if node.type == NodeType.OUTPUT]

    @property
    def hidden_nodes(self) -> list[NodeGene]:
        return [node for node in self.node_genes if node.type == NodeType.HIDDEN]

    @property
    def num_genes(self) -> int:
        """The number of link genes (the chromosome length used by crossover and distance)."""
        return len(self.link_genes)

    def sort_genes(self) -> None:
        """
        Restore the ordering of both gene lists.
        """
        self.node_genes.sort(key=lambda node: node.id)
        self.link_genes.sort(key=lambda link: link.innovation)

    def get_node(self, node_id: int) -> NodeGene | None:
        for node in self.node_genes:
            if node.id == node_id:
                return node
        return None

    def find_link(self, from_id: int, to_id: int) -> LinkGene | None:
        for link in self.link_genes:
            if link.from_id == from_id and link.to_id == to_id:
                return link
        return None

    def has_link_innovation(self, innovation: int) -> bool:
        return any(link.innovation == innovation for link in self.link_genes)

    def clone(self, genome_id: int) -> 'NEATGenome':
        """
        Create a deep copy of this genome with a new ID.
        Scores and species bookkeeping are copied too, the decoded network is not.
        """
        twin = NEATGenome(self._config, self._input_count, self._output_count, genome_id,
                          [node.copy() for node in self.node_genes],
                          [link.copy() for link in self.link_genes])
        twin.score           = self.score
        twin.adjusted_score  = self.adjusted_score
        twin.amount_to_spawn = self.amount_to_spawn
        twin.species_id      = self.species_id
        return twin

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def mutate_weights(self, rng: random.Random) -> None:
        """
        Mutate the link weights.
        Each link is mutated with probability 'mutation_rate'; a mutated weight is
        either replaced by a fresh value or perturbed (see LinkGene.mutate).
        """
        for link in self.link_genes:
            if rng.random() < self._config.mutation_rate:
                link.mutate(rng,
                            self._config.weight_replace_prob,
                            self._config.max_weight_perturbation,
                            self._config.min_weight,
                            self._config.max_weight)

    def add_neuron(self, rng: random.Random, tracker: 'InnovationTracker') -> None:
        """
        Split an existing link by adding a new hidden neuron.

        Since we are at the genotype level, 'splitting a link' means modifying
        the genome such that it describes the new network structure: the split
        link is disabled, and two links are added, from the old source to the
        new neuron (weight 1.0) and from the new neuron to the old target
        (carrying the old weight).

        Only enabled, non-recurrent links not starting at the bias neuron are split.
        Small genomes prefer older links (low innovation numbers), so that the
        basic structure is explored before the network grows complex.

        Nothing happens if:
            + the 'chance_add_node' draw fails
            + the genome already has 'max_permitted_neurons' neurons
            + no link can be split
        """
        if rng.random() > self._config.chance_add_node:
            return
        if len(self.node_genes) >= self._config.max_permitted_neurons:
            return
        if not self.link_genes:
            return

        split_link = None

        # Small genome: try a bounded number of times to find one of the older links
        size_threshold = self._input_count + self._output_count + self.OLD_LINK_MARGIN
        if len(self.link_genes) < size_threshold:
            upper = max(0, len(self.link_genes) - 1 - math.isqrt(len(self.link_genes)))
            for _ in range(self._config.num_tries_to_find_old_link):
                link = self.link_genes[rng.randint(0, upper)]
                if self._is_splittable(link):
                    split_link = link
                    break

        # Fall back to any eligible link
        if split_link is None:
            candidates = [link for link in self.link_genes if self._is_splittable(link)]
            if not candidates:
                return
            split_link = rng.choice(candidates)

        # The link being split must be disabled
        split_link.enabled = False

        # From the innovation tracker, get the ID for the new neuron and the
        # innovation numbers (link IDs) for the two new links
        new_node_id, innov1, innov2 = tracker.get_split_ids(split_link)

        # The link may have been split before in this lineage, and then disabled
        # again: re-enable the genes instead of duplicating them
        link1 = self._get_link_by_innovation(innov1)
        link2 = self._get_link_by_innovation(innov2)
        if self.get_node(new_node_id) is not None and link1 is not None and link2 is not None:
            link1.enabled = True
            link2.enabled = True
            logger.debug(f"genome {self.genome_id}: re-enabled split of link {split_link.innovation} (node {new_node_id})")
            return

        if self.get_node(new_node_id) is None:
            self.node_genes.append(tracker.create_neuron_from_id(new_node_id))

        # First new link: old source -> new neuron (weight = 1.0)
        if link1 is None:
            self.link_genes.append(LinkGene(innov1, split_link.from_id, new_node_id, 1.0))
        else:
            link1.enabled = True

        # Second new link: new neuron -> old target (weight = old weight)
        if link2 is None:
            self.link_genes.append(LinkGene(innov2, new_node_id, split_link.to_id, split_link.weight))
        else:
            link2.enabled = True

        self.sort_genes()
        logger.debug(f"genome {self.genome_id}: node {new_node_id} splits link {split_link.innovation}")

    def add_link(self, rng: random.Random, tracker: 'InnovationTracker') -> None:
        """
        Add a new link between two existing neurons.

        If recurrent links are allowed, with probability 'chance_add_recurrent_link'
        a looped link (from a hidden or output neuron to itself) is attempted.
        Otherwise the two ends of the new link are selected at random, however we
        cannot add a link:
         + ending at a BIAS or INPUT neuron
         + between two neurons already linked by a direct link
         + which would close a cycle, unless recurrent links are allowed (the
           new link is then flagged as recurrent)

        Note that the method does NOT add a new link if it fails to do so due to the
        constraints listed above more than a maximum number of times.
        """
        if rng.random() > self._config.chance_add_link:
            return

        from_id   = None
        to_id     = None
        recurrent = False

        targets = [node for node in self.node_genes if node.type in (NodeType.HIDDEN, NodeType.OUTPUT)]
        if not targets:
            return

        if self._config.allow_recurrent and rng.random() < self._config.chance_add_recurrent_link:

            # Looped link
            for _ in range(self._config.num_tries_to_find_looped_link):
                node = rng.choice(targets)
                if self.find_link(node.id, node.id) is None:
                    from_id, to_id, recurrent = node.id, node.id, True
                    break

        else:
            for _ in range(self._config.num_add_link_attempts):
                source = rng.choice(self.node_genes)
                target = rng.choice(targets)

                # Carry out quick checks first
                if source.id == target.id:
                    continue
                if self.find_link(source.id, target.id) is not None:
                    continue

                # Carry out expensive check last
                closes_cycle = self._would_create_cycle(source.id, target.id)
                if closes_cycle and not self._config.allow_recurrent:
                    continue

                from_id, to_id, recurrent = source.id, target.id, closes_cycle
                break

        if from_id is None:
            return

        # Success - add link gene to the genome
        innovation = tracker.record_new_link(from_id, to_id)
        weight     = rng.uniform(self._config.min_weight, self._config.max_weight)
        self.link_genes.append(LinkGene(innovation, from_id, to_id, weight, recurrent=recurrent))
        self.sort_genes()
        logger.debug(f"genome {self.genome_id}: new link {innovation} ({from_id} -> {to_id}, recurrent={recurrent})")

    def remove_link(self, rng: random.Random) -> None:
        """
        Remove one enabled link, chosen at random.

        A link can only be removed if afterwards each of its hidden endpoints
        keeps at least one enabled incoming and one enabled outgoing link.
        If no link qualifies, the genome is left unchanged.
        """
        removable = [link for link in self.link_genes if link.enabled and self._is_removable(link)]
        if not removable:
            return

        link = rng.choice(removable)
        self.link_genes.remove(link)
        logger.debug(f"genome {self.genome_id}: removed link {link.innovation}")

    def _is_splittable(self, link: LinkGene) -> bool:
        return link.enabled and not link.recurrent and link.from_id != self.bias_node.id

    def _is_removable(self, link: LinkGene) -> bool:
        others = [other for other in self.link_genes if other is not link and other.enabled]

        source = self.get_node(link.from_id)
        if source is not None and source.type == NodeType.HIDDEN:
            if not any(other.from_id == link.from_id and other.to_id != link.from_id for other in others):
                return False

        target = self.get_node(link.to_id)
        if target is not None and target.type == NodeType.HIDDEN:
            if not any(other.to_id == link.to_id and other.from_id != link.to_id for other in others):
                return False

        return True

    def _get_link_by_innovation(self, innovation: int) -> LinkGene | None:
        for link in self.link_genes:
            if link.innovation == innovation:
                return link
        return None

    def _would_create_cycle(self, from_node: int, to_node: int) -> bool:
        """
        Check if adding a link from_node -> to_node would close a cycle.
        Uses DFS to check if there's already a path from 'to_node' back to 'from_node'.
        Considers all non-recurrent links (both enabled and disabled), so that
        re-enabling a link never breaks the feed-forward structure.

        Parameters:
            from_node: proposed start of the new link
            to_node:   proposed end   of the new link

        Returns:
            whether adding the new link would close a cycle in the network
        """
        if from_node == to_node:
            return True

        # If we can reach 'from_node' starting at 'to_node', then adding a
        # link 'from_node' -> 'to_node' would close a cycle
        visited = set()
        stack = [to_node]

        while stack:

            current = stack.pop()
            if current == from_node:
                return True
            if current in visited:
                continue
            visited.add(current)

            for link in self.link_genes:
                if link.from_id == current and not link.recurrent:
                    stack.append(link.to_id)

        return False

    # ------------------------------------------------------------------
    # Distance & decoding
    # ------------------------------------------------------------------

    def get_compatibility_score(self, other: 'NEATGenome') -> float:
        """
        Calculate genetic distance between this genome and another using the NEAT formula.

           distance = (c1 * E / N) + (c2 * D / N) + c3 * W̄

        Where:
        - E = number of excess link genes
        - D = number of disjoint link genes
        - N = number of link genes in larger genome
        - W̄ = average weight difference of matching link genes
        - c1, c2, c3 = weight of various terms (from configuration file)

        Both link lists are walked together in innovation order.

        Parameters:
            other: the genome relative to which we are calculating the distance

        Returns:
            the distance between this genome and 'other'
        """
        num_disjoint = 0
        num_excess   = 0
        num_matched  = 0
        weight_diff  = 0.0

        genes1 = self.link_genes
        genes2 = other.link_genes
        i, j   = 0, 0

        while i < len(genes1) or j < len(genes2):

            # One genome ran out of genes: the rest of the other one are excess genes
            if i >= len(genes1):
                num_excess += len(genes2) - j
                break
            if j >= len(genes2):
                num_excess += len(genes1) - i
                break

            innov1 = genes1[i].innovation
            innov2 = genes2[j].innovation

            if innov1 == innov2:
                num_matched += 1
                weight_diff += abs(genes1[i].weight - genes2[j].weight)
                i += 1
                j += 1
            elif innov1 < innov2:
                num_disjoint += 1
                i += 1
            else:
                num_disjoint += 1
                j += 1

        N = max(len(genes1), len(genes2))
        if N == 0:
            return 0.0

        avg_weight_diff = weight_diff / num_matched if num_matched > 0 else 0.0

        return (self._config.distance_excess_coeff   * num_excess   / N +
                self._config.distance_disjoint_coeff * num_disjoint / N +
                self._config.distance_matched_coeff  * avg_weight_diff)

    def decode(self) -> 'NEATNetwork':
        """
        Build the network described by this genome.
        The network is also kept as this genome's 'organism'.
        """
        # Import here to avoid circular import
        from evoneat.phenotype.neat_network import NEATNetwork

        self.organism = NEATNetwork(self, activations[self._config.activation], self._config.snapshot)
        return self.organism

    def __str__(self):
        node_genes_str = ''.join(str(node) for node in self.node_genes)
        link_genes_str = ''.join(str(link) for link in self.link_genes)
        return f"Genome {self.genome_id}\nNodes: {node_genes_str}\nLinks: {link_genes_str}"

    def __repr__(self):
        return (f"NEATGenome(genome_id={self.genome_id}, nodes={len(self.node_genes)}, "
                f"links={len(self.link_genes)}, score={self.score})")
