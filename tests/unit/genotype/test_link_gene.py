"""
Unit tests for LinkGene class.
"""

import pytest

from evoneat.genotype.link_gene import LinkGene


# ============================================================================
# Test: Initialization
# ============================================================================

class TestLinkGeneInit:
    """Test LinkGene construction."""

    def test_init_defaults(self):
        link = LinkGene(4, 1, 3, 0.5)
        assert link.innovation == 4
        assert link.from_id == 1
        assert link.to_id == 3
        assert link.weight == 0.5
        assert link.enabled is True
        assert link.recurrent is False

    def test_copy_is_independent(self):
        link = LinkGene(4, 1, 3, 0.5, enabled=False, recurrent=True)
        twin = link.copy()
        assert twin == link
        twin.weight = -1.0
        assert link.weight == 0.5

    def test_hash_uses_innovation(self):
        assert hash(LinkGene(4, 1, 3, 0.5)) == hash(LinkGene(4, 1, 3, -0.5))

    def test_str_shows_state(self):
        assert str(LinkGene(1, 2, 3, 0.5, enabled=False)) == "[001,D,02=>03,+0.50]"
        assert str(LinkGene(1, 3, 3, -0.5, recurrent=True)) == "[001,ER,03=>03,-0.50]"


# ============================================================================
# Test: Weight mutation
# ============================================================================

class TestLinkGeneMutate:
    """Test LinkGene.mutate."""

    def test_replace_draws_within_bounds(self, rng):
        for _ in range(100):
            link = LinkGene(0, 1, 3, 100.0)
            link.mutate(rng, replace_prob=1.0, max_perturbation=0.5, min_weight=-1.0, max_weight=1.0)
            assert -1.0 <= link.weight <= 1.0

    def test_perturbation_is_bounded(self, rng):
        for _ in range(100):
            link = LinkGene(0, 1, 3, 0.0)
            link.mutate(rng, replace_prob=0.0, max_perturbation=0.5, min_weight=-1.0, max_weight=1.0)
            assert -0.5 <= link.weight <= 0.5

    def test_perturbation_changes_weight(self, rng):
        link = LinkGene(0, 1, 3, 0.25)
        link.mutate(rng, replace_prob=0.0, max_perturbation=0.5, min_weight=-1.0, max_weight=1.0)
        assert link.weight != 0.25
