"""
Unit tests for NEATTraining class.

Tests cover construction and validation, the generation loop,
reset-and-kill, scoring and recording, speciation, threshold
adjustment, score adjustment, parent favoring and crossover.
"""

import logging
import random

import pytest
from unittest.mock import Mock

from evoneat.errors import ConfigurationError, UnsupportedOperationError
from evoneat.genotype import LinkGene, NEATGenome, NodeType
from evoneat.pool.population import Population
from evoneat.run.config import Config
from evoneat.score.training_set_score import TrainingSetScore
from evoneat.training.mutation_operators import (AddLink, AddNeuron, AdjustCurve,
                                                 MutateWeights, RemoveLink)
from evoneat.training.neat_training import NEATTraining


# ============================================================================
# Test Fixtures
# ============================================================================

def constant_score(value):
    return lambda network: value

def first_output_score(network):
    """Score a network by its output for inputs (1, 1): differs between genomes."""
    return float(network.compute([1.0, 1.0])[0])

@pytest.fixture
def train_config():
    config = Config()
    config.activation = "identity"
    return config

@pytest.fixture
def make_trainer(train_config):
    def _make(score=None, size=10, minimize=False, seed=1):
        score = score if score is not None else first_output_score
        return NEATTraining.with_new_population(score, 2, 1, size, train_config,
                                                random.Random(seed), minimize)
    return _make


# ============================================================================
# Test: Construction
# ============================================================================

class TestNEATTrainingInit:
    """Test construction and validation."""

    def test_with_new_population(self, make_trainer):
        trainer = make_trainer(size=12)
        assert len(trainer.population) == 12
        assert trainer.input_count == 2
        assert trainer.output_count == 1
        assert trainer.iteration_number == 0
        assert trainer.innovations is trainer.population.innovations
        assert len(trainer.population.species) >= 1

    def test_existing_population(self, train_config, rng):
        population = Population(2, 1, 5, train_config, rng)
        trainer = NEATTraining(constant_score(1.0), population, rng)
        assert trainer.population is population
        assert trainer.best_score == 1.0

    def test_empty_population(self):
        with pytest.raises(ConfigurationError):
            NEATTraining(constant_score(1.0), Population(2, 1))

    def test_mismatched_arity(self, train_config):
        population = Population(2, 1, config=train_config)
        population.add(NEATGenome(train_config, 2, 1, 1))
        population.add(NEATGenome(train_config, 3, 1, 2))
        with pytest.raises(ConfigurationError):
            NEATTraining(constant_score(1.0), population)

    def test_wrong_genome_kind(self, train_config):
        population = Population(2, 1, config=train_config)
        population.add(NEATGenome(train_config, 2, 1, 1))
        population.add(object())
        with pytest.raises(ConfigurationError):
            NEATTraining(constant_score(1.0), population)

    def test_minimize_defaults_to_config(self, train_config, rng):
        train_config.minimize_score = True
        trainer = NEATTraining.with_new_population(constant_score(1.0), 2, 1, 4, train_config, rng)
        assert trainer.best_comparator.should_minimize()
        assert trainer.selection_comparator.should_minimize()

    def test_minimize_taken_from_score_function(self, rng):
        score = TrainingSetScore([[0, 0], [0, 1], [1, 0], [1, 1]], [[0], [1], [1], [0]])
        trainer = NEATTraining.with_new_population(score, 2, 1, 30, Config(), rng)

        assert trainer.best_comparator.should_minimize()
        assert trainer.best_score == min(genome.score for genome in trainer.population)
        assert trainer.population[0].score == trainer.best_score

    def test_explicit_minimize_overrides_score_function(self, rng):
        score = TrainingSetScore([[0, 0], [1, 1]], [[0], [1]])
        trainer = NEATTraining.with_new_population(score, 2, 1, 10, Config(), rng, minimize=False)

        assert not trainer.best_comparator.should_minimize()
        assert trainer.best_score == max(genome.score for genome in trainer.population)

    def test_mutation_tables(self, make_trainer):
        trainer = make_trainer()
        general = [type(op) for op in trainer._mutate_choices.operators]
        additive = [type(op) for op in trainer._mutate_add_choices.operators]
        assert general == [MutateWeights, AddNeuron, AddLink, AdjustCurve, RemoveLink]
        assert additive == [MutateWeights, AddNeuron, AddLink, AdjustCurve]


# ============================================================================
# Test: Unsupported operations and accessors
# ============================================================================

class TestNEATTrainingSurface:
    """Test the generic training surface."""

    def test_unsupported_operations(self, make_trainer):
        trainer = make_trainer()
        with pytest.raises(UnsupportedOperationError):
            trainer.add_strategy(Mock())
        with pytest.raises(UnsupportedOperationError):
            trainer.pause()
        with pytest.raises(UnsupportedOperationError):
            trainer.resume(Mock())

    def test_flags(self, make_trainer):
        trainer = make_trainer()
        assert not trainer.can_continue
        assert not trainer.is_training_done

    def test_snapshot_writes_config(self, make_trainer, train_config):
        trainer = make_trainer()
        assert not trainer.snapshot
        trainer.snapshot = True
        assert train_config.snapshot
        assert trainer.population[0].decode().snapshot

    def test_error_is_best_score(self, make_trainer):
        trainer = make_trainer()
        assert trainer.error == trainer.best_score


# ============================================================================
# Test: Scoring and recording
# ============================================================================

class TestNEATTrainingSortAndRecord:
    """Test sort_and_record."""

    def test_identical_genomes_minimize(self, train_config, rng):
        train_config.initial_cxn_policy = "none"
        train_config.connect_bias = False
        trainer = NEATTraining.with_new_population(constant_score(5.0), 2, 1, 10,
                                                   train_config, rng, minimize=True)

        # Construction already scored and sorted the population once
        assert trainer.best_score == 5.0
        assert trainer.best_network is trainer.population[0].organism

    def test_population_sorted_best_first(self, make_trainer):
        trainer = make_trainer(size=20)
        scores = [genome.score for genome in trainer.population]
        assert scores == sorted(scores, reverse=True)
        assert trainer.best_score == scores[0]
        assert trainer.best_network is trainer.population[0].organism

    def test_population_sorted_minimize(self, make_trainer):
        trainer = make_trainer(size=20, minimize=True)
        scores = [genome.score for genome in trainer.population]
        assert scores == sorted(scores)
        assert trainer.best_score == scores[0]

    def test_every_genome_decoded(self, make_trainer):
        trainer = make_trainer()
        assert all(genome.organism is not None for genome in trainer.population)

    def test_best_score_never_worsens(self, make_trainer):
        trainer = make_trainer(size=20)
        history = [trainer.best_score]
        for _ in range(5):
            trainer.iteration()
            history.append(trainer.best_score)
        assert history == sorted(history)


# ============================================================================
# Test: Generation loop
# ============================================================================

class TestNEATTrainingIteration:
    """Test iteration and iterations."""

    @pytest.mark.parametrize("minimize", [False, True])
    def test_population_size_is_kept(self, make_trainer, minimize):
        trainer = make_trainer(size=15, minimize=minimize)
        for _ in range(5):
            trainer.iteration()
            assert len(trainer.population) == 15

    def test_genome_ids_are_unique(self, make_trainer):
        trainer = make_trainer(size=15)
        trainer.iterations(4)
        ids = [genome.genome_id for genome in trainer.population]
        assert len(ids) == len(set(ids))

    def test_iteration_number(self, make_trainer):
        trainer = make_trainer()
        trainer.iteration()
        assert trainer.iteration_number == 1
        trainer.iterations(3)
        assert trainer.iteration_number == 4

    def test_leader_survives_unchanged(self, make_trainer, train_config):
        train_config.compatibility_threshold = 1000.0
        trainer = make_trainer()
        leader = trainer.population.species[0].leader
        weights = [link.weight for link in leader.link_genes]

        trainer.iteration()
        assert trainer.population.get(leader.genome_id) is leader
        assert [link.weight for link in leader.link_genes] == weights

    def test_each_bred_offspring_mutated_once(self, make_trainer, train_config):
        train_config.crossover_rate = 0.5
        trainer = make_trainer(size=20)

        mutated = []
        tournament_ids = set()
        original_mutate = trainer.mutate
        original_tournament = trainer.tournament_selection

        def counting_mutate(genome, allow_removal=True):
            mutated.append(genome.genome_id)
            original_mutate(genome, allow_removal)

        def recording_tournament(num_comparisons):
            winner = original_tournament(num_comparisons)
            tournament_ids.add(winner.genome_id)
            return winner

        trainer.mutate = counting_mutate
        trainer.tournament_selection = recording_tournament

        for _ in range(3):
            previous_ids = {genome.genome_id for genome in trainer.population}
            mutated.clear()
            tournament_ids.clear()

            trainer.iteration()

            bred_ids = {genome.genome_id for genome in trainer.population
                        if genome.genome_id not in previous_ids} - tournament_ids
            assert len(mutated) == len(set(mutated))
            assert set(mutated) == bred_ids

            # Carried-over leaders are never mutated
            assert not previous_ids & set(mutated)

    def test_zero_average_fills_by_tournament(self, make_trainer, caplog):
        with caplog.at_level(logging.WARNING, logger="evoneat.training.neat_training"):
            trainer = make_trainer(score=constant_score(0.0))
            assert all(genome.amount_to_spawn == 0.0 for genome in trainer.population)
            trainer.iteration()
        assert len(trainer.population) == 10
        assert "no genome is entitled to offspring" in caplog.text
        assert "filled by tournament selection" in caplog.text

    def test_no_duplicate_innovations(self, make_trainer, train_config):
        train_config.add_node_prob = 0.3
        train_config.add_link_prob = 0.3
        trainer = make_trainer(size=20)
        trainer.iterations(5)
        for genome in trainer.population:
            innovations = [link.innovation for link in genome.link_genes]
            assert len(innovations) == len(set(innovations))
            assert innovations == sorted(innovations)


# ============================================================================
# Test: Tournament selection and mutation
# ============================================================================

class TestNEATTrainingSelection:
    """Test tournament_selection and mutate."""

    def test_tournament_returns_clone_of_winner(self, make_trainer):
        trainer = make_trainer()
        ids = {genome.genome_id for genome in trainer.population}
        winner = trainer.tournament_selection(200)
        assert winner.genome_id not in ids
        assert winner.score == trainer.population[0].score

    def test_mutate_without_removal(self, make_trainer, train_config):
        train_config.mutate_weights_prob = 0.0
        train_config.add_node_prob = 0.0
        train_config.add_link_prob = 0.0
        train_config.adjust_curve_prob = 1.0
        train_config.remove_link_prob = 1.0
        trainer = make_trainer()
        genome = trainer.population[0].clone(999)
        for _ in range(50):
            trainer.mutate(genome, allow_removal=False)
        assert len(genome.link_genes) == 3

    def test_mutate_with_removal(self, make_trainer, train_config):
        train_config.mutate_weights_prob = 0.0
        train_config.add_node_prob = 0.0
        train_config.add_link_prob = 0.0
        train_config.adjust_curve_prob = 0.0
        train_config.remove_link_prob = 1.0
        trainer = make_trainer()
        genome = trainer.population[0].clone(999)
        trainer.mutate(genome)
        assert len(genome.link_genes) == 2


# ============================================================================
# Test: Reset and kill
# ============================================================================

class TestNEATTrainingResetAndKill:
    """Test reset_and_kill."""

    def test_species_with_dead_leader_removed(self, make_trainer, train_config):
        train_config.compatibility_threshold = 1000.0
        trainer = make_trainer()
        species = trainer.population.species[0]
        trainer.population.genomes.remove(species.leader)

        trainer.reset_and_kill()
        assert species not in trainer.population.species

    def test_stagnant_species_removed(self, make_trainer, train_config):
        train_config.compatibility_threshold = 1000.0
        trainer = make_trainer(score=constant_score(1.0))
        species = trainer.population.species[0]
        species.best_score = 0.5
        species.gens_no_improvement = train_config.max_gens_no_improvement

        trainer.reset_and_kill()
        assert trainer.population.species == []

    def test_stagnant_species_holding_best_score_kept(self, make_trainer, train_config):
        train_config.compatibility_threshold = 1000.0
        trainer = make_trainer(score=constant_score(1.0))
        species = trainer.population.species[0]
        species.gens_no_improvement = train_config.max_gens_no_improvement + 5

        trainer.reset_and_kill()
        assert trainer.population.species == [species]
        assert len(species) == 1
        assert species.age == 1


# ============================================================================
# Test: Speciation
# ============================================================================

class TestNEATTrainingSpeciation:
    """Test speciate_and_calculate_spawn_levels and its helpers."""

    def test_single_species_when_all_compatible(self, make_trainer, train_config):
        train_config.compatibility_threshold = 1000.0
        trainer = make_trainer()
        assert len(trainer.population.species) == 1
        assert len(trainer.population.species[0]) == 10

    def test_single_species_regardless_of_order(self, make_trainer, train_config):
        train_config.compatibility_threshold = 1000.0
        trainer = make_trainer()
        random.Random(3).shuffle(trainer.population.genomes)
        trainer.population.species = []
        trainer.speciate_and_calculate_spawn_levels()
        assert len(trainer.population.species) == 1

    def test_zero_threshold_separates_different_genomes(self, make_trainer, train_config):
        train_config.compatibility_threshold = 0.0
        trainer = make_trainer(size=5)
        # All genomes share the same links but differ in weights
        assert len(trainer.population.species) == 5

    def test_every_genome_in_exactly_one_species(self, make_trainer):
        trainer = make_trainer(size=30)
        trainer.iterations(3)
        seen = [genome_id for species in trainer.population.species for genome_id in species.members]
        assert sorted(seen) == sorted(genome.genome_id for genome in trainer.population)

    def test_spawn_amounts(self, make_trainer, train_config):
        train_config.compatibility_threshold = 1000.0
        trainer = make_trainer(score=constant_score(1.0))
        species = trainer.population.species[0]
        assert all(genome.amount_to_spawn == pytest.approx(1.0) for genome in trainer.population)
        assert species.spawn_count == 10

    @pytest.mark.parametrize("num_species,change", [
        (15,  0.01),
        (11,  0.01),
        (1 , -0.01),
        (0 , -0.01),
        (2 ,  0.0),
        (5 ,  0.0),
        (10,  0.0),
    ])
    def test_threshold_adjustment(self, make_trainer, train_config, num_species, change):
        train_config.max_species = 10
        trainer = make_trainer()
        trainer.population.species = [Mock() for _ in range(num_species)]
        before = train_config.compatibility_threshold

        trainer.adjust_compatibility_threshold()
        assert train_config.compatibility_threshold == pytest.approx(before + change)

    def test_threshold_adjustment_disabled(self, make_trainer, train_config):
        train_config.max_species = 0
        trainer = make_trainer()
        trainer.population.species = [Mock() for _ in range(15)]
        before = train_config.compatibility_threshold
        trainer.adjust_compatibility_threshold()
        assert train_config.compatibility_threshold == before


class TestNEATTrainingAdjustSpeciesScore:
    """Test adjust_species_score."""

    @pytest.fixture
    def one_species_trainer(self, make_trainer, train_config):
        train_config.compatibility_threshold = 1000.0
        def _make(minimize):
            return make_trainer(score=constant_score(1.0), minimize=minimize)
        return _make

    def test_young_bonus_maximize(self, one_species_trainer):
        trainer = one_species_trainer(minimize=False)
        assert all(genome.adjusted_score == pytest.approx(1.3 / 10) for genome in trainer.population)

    def test_young_bonus_minimize(self, one_species_trainer):
        trainer = one_species_trainer(minimize=True)
        assert all(genome.adjusted_score == pytest.approx(0.7 / 10) for genome in trainer.population)

    def test_old_penalty(self, one_species_trainer, train_config):
        trainer = one_species_trainer(minimize=False)
        trainer.population.species[0].age = train_config.old_age_threshold + 1
        trainer.adjust_species_score()
        assert all(genome.adjusted_score == pytest.approx(0.7 / 10) for genome in trainer.population)

    def test_middle_age_unchanged(self, one_species_trainer, train_config):
        trainer = one_species_trainer(minimize=False)
        trainer.population.species[0].age = train_config.young_age_threshold
        trainer.adjust_species_score()
        assert all(genome.adjusted_score == pytest.approx(1.0 / 10) for genome in trainer.population)


# ============================================================================
# Test: Crossover
# ============================================================================

class TestNEATTrainingCrossover:
    """Test favor_parent and crossover."""

    @pytest.fixture
    def trainer(self, make_trainer):
        return make_trainer()

    @staticmethod
    def parent(trainer, genome_id, links, score=0.0, adjusted_score=0.0):
        genome = NEATGenome(trainer.population.config, 2, 1, genome_id, link_genes=links)
        genome.score = score
        genome.adjusted_score = adjusted_score
        return genome

    def test_favor_better_parent(self, trainer):
        mom = self.parent(trainer, 1, [], score=2.0, adjusted_score=2.0)
        dad = self.parent(trainer, 2, [], score=1.0, adjusted_score=1.0)
        assert trainer.favor_parent(mom, dad) is mom
        assert trainer.favor_parent(dad, mom) is mom

    def test_favor_fewer_genes_on_tie(self, trainer):
        mom = self.parent(trainer, 1, [LinkGene(0, 1, 3, 0.1)], score=1.0)
        dad = self.parent(trainer, 2, [], score=1.0)
        assert trainer.favor_parent(mom, dad) is dad

    def test_coin_flip_on_full_tie(self, trainer):
        mom = self.parent(trainer, 1, [], score=1.0)
        dad = self.parent(trainer, 2, [], score=1.0)
        picks = [trainer.favor_parent(mom, dad) for _ in range(200)]
        assert mom in picks and dad in picks

    def test_favored_mom_and_empty_dad(self, trainer):
        mom = trainer.population[0]
        mom.adjusted_score, mom.score = 2.0, 2.0
        dad = self.parent(trainer, 999, [], score=1.0, adjusted_score=1.0)

        child = trainer.crossover(mom, dad)
        assert child.link_genes == mom.link_genes
        assert all(c is not m for c, m in zip(child.link_genes, mom.link_genes))
        assert [node.id for node in child.node_genes] == [0, 1, 2, 3]

    def test_favored_empty_dad(self, trainer):
        mom = trainer.population[0]
        mom.adjusted_score, mom.score = 1.0, 1.0
        dad = self.parent(trainer, 999, [], score=2.0, adjusted_score=2.0)

        child = trainer.crossover(mom, dad)
        assert child.link_genes == []
        assert [node.type for node in child.node_genes] == \
               [NodeType.BIAS, NodeType.INPUT, NodeType.INPUT, NodeType.OUTPUT]

    def test_matching_gene_from_either_parent(self, trainer):
        mom = self.parent(trainer, 1, [LinkGene(5, 1, 3, 1.0)], score=1.0)
        dad = self.parent(trainer, 2, [LinkGene(5, 1, 3, -1.0)], score=1.0)

        weights = []
        for _ in range(1000):
            child = trainer.crossover(mom, dad)
            assert [link.innovation for link in child.link_genes] == [5]
            weights.append(child.link_genes[0].weight)

        assert set(weights) == {1.0, -1.0}
        assert 400 < weights.count(1.0) < 600

    def test_duplicates_are_dropped(self, trainer):
        links = [LinkGene(0, 1, 3, 0.5), LinkGene(0, 1, 3, 0.7), LinkGene(1, 2, 3, 0.1)]
        mom = self.parent(trainer, 1, links, score=2.0, adjusted_score=2.0)
        dad = self.parent(trainer, 2, [], score=1.0, adjusted_score=1.0)

        child = trainer.crossover(mom, dad)
        assert [link.innovation for link in child.link_genes] == [0, 1]

    def test_disjoint_and_excess_from_favored_parent(self, trainer):
        mom = self.parent(trainer, 1, [LinkGene(0, 1, 3, 0.5), LinkGene(2, 2, 3, 0.5)],
                          score=2.0, adjusted_score=2.0)
        dad = self.parent(trainer, 2, [LinkGene(0, 1, 3, 0.5), LinkGene(1, 0, 3, 0.5), LinkGene(3, 0, 3, 0.5)],
                          score=1.0, adjusted_score=1.0)
        child = trainer.crossover(mom, dad)
        assert [link.innovation for link in child.link_genes] == [0, 2]

    def test_child_inherits_hidden_neurons(self, trainer, train_config):
        train_config.chance_add_node = 1.0
        mom = trainer.population[0].clone(500)
        mom.add_neuron(random.Random(0), trainer.innovations)
        mom.score = mom.adjusted_score = 10.0
        dad = trainer.population[1].clone(501)
        dad.score = dad.adjusted_score = 0.0

        child = trainer.crossover(mom, dad)
        assert [node.id for node in child.hidden_nodes] == [node.id for node in mom.hidden_nodes]
        assert child.genome_id not in (500, 501)
        assert child.genome_id > 0
