"""
NEAT Network Module

This module implements the network decoded from a NEATGenome.

Classes:
    NEATNetwork: Neural network with feed-forward and recurrent links
"""

import numpy as np
from collections import defaultdict
from typing import Callable, TYPE_CHECKING

from evoneat.phenotype.network_base import NetworkBase

if TYPE_CHECKING:
    from evoneat.genotype import NEATGenome

class NEATNetwork(NetworkBase):
    """
    Neural network decoded from a NEATGenome.

    Neurons are evaluated in topological order. A link reads the value its
    source neuron produced during the current pass if the source has already
    been evaluated, and the value it produced during the previous pass otherwise
    (recurrent links always read the previous value). The bias neuron always
    outputs 1.0.

    Neuron values persist between calls to 'compute', which is how recurrent
    links carry state; 'clear_context' resets them.

    In snapshot mode each 'compute' call relaxes the network 'depth' times,
    so that signals have time to propagate through all layers.

    Public Properties:
        depth:    Number of neuron layers along the longest feed-forward path
        snapshot: Whether snapshot mode is on

    Public Methods:
        compute(inputs):  Process one input vector (or a 2D batch, row by row)
        clear_context():  Reset all neuron values
    """

    def __init__(self,
                 genome             : 'NEATGenome',
                 activation_function: Callable,
                 snapshot           : bool = False):
        """
        Build the network from a genome.

        Parameters:
            genome:              The genome encoding the network structure
            activation_function: Activation of hidden and output neurons
            snapshot:            Whether to relax the network 'depth' times per call
        """
        super().__init__(genome)

        self._activation = activation_function
        self._snapshot   = snapshot

        # Create "node ID => array index" mapping
        self._node_id_to_idx = {node.id: idx for idx, node in enumerate(genome.node_genes)}
        self._num_nodes      = len(genome.node_genes)

        self._bias_index     = self._node_id_to_idx[self._bias_id]
        self._input_indices  = np.array([self._node_id_to_idx[i] for i in self._input_ids] , dtype=np.int64)
        self._output_indices = np.array([self._node_id_to_idx[i] for i in self._output_ids], dtype=np.int64)
        self._responses      = np.array([node.activation_response for node in genome.node_genes], dtype=np.float64)

        position = {node_id: pos for pos, node_id in enumerate(self._sorted_nodes)}

        # For each computing neuron: the incoming links, split by whether
        # they read the current or the previous value of their source
        fixed = {self._bias_id, *self._input_ids}
        self._compute_order: list[int] = []
        self._incoming: dict[int, tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]] = {}

        current_sources  = defaultdict(list)
        current_weights  = defaultdict(list)
        previous_sources = defaultdict(list)
        previous_weights = defaultdict(list)
        for link in genome.link_genes:
            if not link.enabled:
                continue
            target = link.to_id
            if not link.recurrent and position[link.from_id] < position[target]:
                current_sources [target].append(self._node_id_to_idx[link.from_id])
                current_weights [target].append(link.weight)
            else:
                previous_sources[target].append(self._node_id_to_idx[link.from_id])
                previous_weights[target].append(link.weight)

        for node_id in self._sorted_nodes:
            if node_id in fixed:
                continue
            self._compute_order.append(node_id)
            self._incoming[node_id] = (np.array(current_sources [node_id], dtype=np.int64),
                                       np.array(current_weights [node_id], dtype=np.float64),
                                       np.array(previous_sources[node_id], dtype=np.int64),
                                       np.array(previous_weights[node_id], dtype=np.float64))

        self._depth = self._calculate_depth(current_sources)

        self._values = np.zeros(self._num_nodes, dtype=np.float64)
        self.clear_context()

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def snapshot(self) -> bool:
        return self._snapshot

    def _calculate_depth(self, current_sources: dict[int, list[int]]) -> int:
        """
        Length (in neurons) of the longest feed-forward path ending in an output neuron.
        A network whose outputs are only fed by inputs has depth 1.
        """
        idx_to_node_id = {idx: node_id for node_id, idx in self._node_id_to_idx.items()}

        layer = {node_id: 0 for node_id in self._sorted_nodes}
        for node_id in self._compute_order:
            sources = current_sources[node_id]
            if sources:
                layer[node_id] = 1 + max(layer[idx_to_node_id[idx]] for idx in sources)
            else:
                layer[node_id] = 1

        return max([1] + [layer[node_id] for node_id in self._output_ids])

    def clear_context(self) -> None:
        """
        Reset all neuron values, forgetting the state carried by recurrent links.
        """
        self._values.fill(0.0)
        self._values[self._bias_index] = 1.0

    def compute(self, inputs) -> np.ndarray:
        """
        Process inputs through the network.

        Parameters:
            inputs: Input values, shape (num_inputs,) or (batch_size, num_inputs).
                    Batches are processed row by row, in order.

        Returns:
            Output values, shape (num_outputs,) or (batch_size, num_outputs)
        """
        inputs = np.asarray(inputs, dtype=np.float64)
        if inputs.ndim == 2:
            return np.vstack([self.compute(row) for row in inputs])
        if inputs.ndim != 1:
            raise ValueError(f"Input must be 1D or 2D array, got {inputs.ndim}D")
        if inputs.shape[0] != len(self._input_indices):
            raise ValueError(f"Expected {len(self._input_indices)} inputs, got {inputs.shape[0]}")

        values = self._values
        values[self._input_indices] = inputs
        values[self._bias_index]    = 1.0

        passes = self._depth if self._snapshot else 1
        for _ in range(passes):
            previous = values.copy()
            for node_id in self._compute_order:
                cur_src, cur_w, prev_src, prev_w = self._incoming[node_id]
                weighted_sum = np.dot(values[cur_src], cur_w) + np.dot(previous[prev_src], prev_w)
                idx = self._node_id_to_idx[node_id]
                values[idx] = self._activation(self._responses[idx] * weighted_sum)

        return values[self._output_indices].copy()

    def __str__(self):
        node_info = []
        for node_id in self._sorted_nodes:
            gene = self._genome.get_node(node_id)
            node_info.append(f"  Node {node_id} ({gene.type.name}): response={gene.activation_response:.2f}")

        link_info = []
        for link in self._genome.link_genes:
            if link.enabled:
                kind = "R" if link.recurrent else " "
                link_info.append(f"  [{link.innovation:03d}]{kind} {link.from_id:02d}=>{link.to_id:02d}, w={link.weight:+.2f}")

        return "\n".join(node_info) + "\n\n" + "\n".join(link_info)

    def __repr__(self):
        return (f"NEATNetwork(nodes={self._num_nodes}, "
                f"hidden={self.number_nodes_hidden}, "
                f"links={self.number_links_enabled}/{self.number_links}, "
                f"depth={self._depth})")
