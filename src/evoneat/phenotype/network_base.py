"""
NEAT Network Base Module

This module defines the abstract base class for networks decoded from genomes.
It provides a common interface and shared functionality (introspection,
ordering of the neurons, visualization).

Classes:
    NetworkBase: Abstract base class defining the network interface
"""

from abc         import ABC, abstractmethod
from collections import deque, defaultdict
from typing      import Any, TYPE_CHECKING
import graphviz  # type: ignore

from evoneat.genotype.node_gene import NodeType

if TYPE_CHECKING:
    from evoneat.genotype import NEATGenome

class NetworkBase(ABC):
    """
    Abstract base class for networks decoded from NEAT genomes.

    The base class provides:
        - Common initialization
        - Topological sort algorithm
        - Standard network introspection properties
        - Network visualization

    Public Properties (available to all subclasses):
        genome:               The genome this network was decoded from
        number_nodes:         Total number of neurons in the network
        number_nodes_hidden:  Number of hidden neurons in the network
        number_links:         Total number of links in the network
        number_links_enabled: Number of enabled links in the network

    Public Methods (must be implemented by subclasses):
        compute(inputs):  Process inputs through the network and return outputs
        clear_context():  Forget any state carried between calls
    """

    def __init__(self, genome: 'NEATGenome'):
        """
        Initialize common network attributes from genome.

        Parameters:
            genome: The genome encoding the network structure
        """
        self._genome       = genome
        self._bias_id      = genome.bias_node.id
        self._input_ids    = [gene.id for gene in genome.input_nodes]
        self._output_ids   = [gene.id for gene in genome.output_nodes]
        self._sorted_nodes = self._topological_sort(genome)

    @property
    def genome(self) -> 'NEATGenome':
        return self._genome

    @property
    def input_count(self) -> int:
        return len(self._input_ids)

    @property
    def output_count(self) -> int:
        return len(self._output_ids)

    @property
    def number_nodes(self) -> int:
        """Total number of neurons in the network (bias included)."""
        return len(self._genome.node_genes)

    @property
    def number_nodes_hidden(self) -> int:
        """Number of hidden neurons in the network."""
        return len(self._genome.hidden_nodes)

    @property
    def number_links(self) -> int:
        """Total number of links in the network."""
        return len(self._genome.link_genes)

    @property
    def number_links_enabled(self) -> int:
        """Number of enabled links in the network."""
        return sum(1 for link in self._genome.link_genes if link.enabled)

    @abstractmethod
    def compute(self, inputs: Any) -> Any:
        """
        Process inputs through the network.

        Parameters:
            inputs: Network inputs (implementation-specific type)

        Returns:
            Network outputs (implementation-specific type)
        """
        pass

    @abstractmethod
    def clear_context(self) -> None:
        pass

    @staticmethod
    def _topological_sort(genome: 'NEATGenome') -> list[int]:
        """
        Perform topological sort using Kahn's algorithm.

        Sorts the neurons in topological order, ensuring that all
        dependencies (incoming feed-forward links) are processed before
        each neuron. Recurrent links are ignored: they read the previous
        activation of their source, so they impose no ordering.

        Neurons caught in a cycle of feed-forward links (which crossover
        can produce, by combining links from different lineages) cannot
        be ordered; they are appended at the end, by ID.

        Parameters:
            genome: The genome containing node and link genes

        Returns:
            List of node IDs in topological order
        """
        node_ids = [node.id for node in genome.node_genes]

        adjacency = defaultdict(list)
        in_degree = {node_id: 0 for node_id in node_ids}

        # Build graph from enabled feed-forward links only
        for link in genome.link_genes:
            if link.enabled and not link.recurrent:
                adjacency[link.from_id].append(link.to_id)
                in_degree[link.to_id] += 1

        # Start with neurons that have no incoming edges
        queue = deque([node_id for node_id in node_ids if in_degree[node_id] == 0])
        result = []

        while queue:
            node_id = queue.popleft()
            result.append(node_id)

            # Process all outgoing edges
            for neighbor in adjacency[node_id]:
                in_degree[neighbor] -= 1
                if in_degree[neighbor] == 0:
                    queue.append(neighbor)

        # Neurons left over are part of a cycle
        if len(result) < len(node_ids):
            ordered = set(result)
            result.extend(node_id for node_id in node_ids if node_id not in ordered)

        return result

    # Fill colors of the neuron types in 'visualize'
    FILL_COLORS = {
        NodeType.BIAS  : 'khaki',
        NodeType.INPUT : 'lightgrey',
        NodeType.HIDDEN: 'lightblue',
        NodeType.OUTPUT: 'white',
    }

    def visualize(self, view: bool = True) -> graphviz.Digraph:
        """
        Draw the network with Graphviz.

        Bias and input neurons are placed on the left, output neurons on the
        right, hidden neurons in between. Disabled links are drawn in light
        gray and recurrent links dashed.

        Parameters:
            view: If True, render the graph and open it in a viewer

        Returns:
            the graphviz.Digraph describing the network
        """
        dot = graphviz.Digraph()
        dot.attr(rankdir='LR', labelloc='t')

        self._add_cluster(dot, 'cluster_input' , 'source', [self._genome.bias_node] + self._genome.input_nodes)
        if self._genome.hidden_nodes:
            self._add_cluster(dot, 'cluster_hidden', 'same', self._genome.hidden_nodes)
        self._add_cluster(dot, 'cluster_output', 'sink', self._genome.output_nodes)

        for link in self._genome.link_genes:
            dot.edge(str(link.from_id), str(link.to_id),
                     label      = f"i={link.innovation},w={link.weight:.2f}",
                     color      = 'black' if link.enabled else 'lightgray',
                     style      = 'dashed' if link.recurrent else 'solid',
                     fontsize   = '5',
                     penwidth   = '0.5',
                     arrowsize  = '0.5',
                     labelfloat = 'false')

        if view:
            dot.view(cleanup=True)

        return dot

    def _add_cluster(self, dot: graphviz.Digraph, name: str, rank: str, nodes: list) -> None:
        with dot.subgraph(name=name) as cluster:
            cluster.attr(rank=rank, style='invisible')
            for node in nodes:
                label = f"id={node.id}"
                if node.type in (NodeType.HIDDEN, NodeType.OUTPUT):
                    label += f"\\nresp={node.activation_response:.2f}"
                cluster.node(str(node.id), label=label, shape='circle', style='filled',
                             fillcolor=self.FILL_COLORS[node.type], color='black', penwidth='0.5',
                             fontsize='5', width='0.5', height='0.5', fixedsize='true')
