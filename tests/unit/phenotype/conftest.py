"""Fixtures shared by the phenotype tests."""

import pytest

from evoneat.genotype import LinkGene, NEATGenome, NodeGene, NodeType


def build_genome(config, links, hidden=(), recurrent=(), disabled=()):
    """
    A 2-input 1-output genome (bias 0, inputs 1-2, output 3).

    'links' lists (from_id, to_id, weight); innovation numbers follow list order.
    'recurrent' and 'disabled' list the (from_id, to_id) pairs to flag.
    """
    nodes  = [NodeGene(0, NodeType.BIAS), NodeGene(1, NodeType.INPUT),
              NodeGene(2, NodeType.INPUT), NodeGene(3, NodeType.OUTPUT)]
    nodes += [NodeGene(node_id, NodeType.HIDDEN) for node_id in hidden]
    genes  = []
    for innovation, (from_id, to_id, weight) in enumerate(links):
        genes.append(LinkGene(innovation, from_id, to_id, weight,
                              enabled=(from_id, to_id) not in disabled,
                              recurrent=(from_id, to_id) in recurrent))
    return NEATGenome(config, 2, 1, 1, nodes, genes)


@pytest.fixture
def genome_builder(config):
    config.activation = "identity"
    return lambda *args, **kwargs: build_genome(config, *args, **kwargs)
