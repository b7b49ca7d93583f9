"""
NEAT Training Module

This module implements the evolutionary trainer: the generational loop of the
NEAT algorithm, from scoring and speciation to breeding the next generation.

Classes:
    NEATTraining: Evolves a population of NEAT genomes, one generation per iteration
"""

import logging
import random
from typing import Any, Callable

from evoneat.errors                     import ConfigurationError, UnsupportedOperationError
from evoneat.genotype.genome_base       import GenomeBase, GenomeKind
from evoneat.genotype.neat_genome       import NEATGenome
from evoneat.pool.population            import Population
from evoneat.pool.species               import Species
from evoneat.randomize.operation_list   import OperationList
from evoneat.run.config                 import Config
from evoneat.score.comparators          import comparators_for
from evoneat.training.mutation_operators import (MutateWeights,
                                                 AddNeuron,
                                                 AddLink,
                                                 AdjustCurve,
                                                 RemoveLink)

logger = logging.getLogger(__name__)

# Average adjusted scores closer to zero than this cannot be used to share out offspring
ZERO_AVERAGE_TOLERANCE = 1e-12

class NEATTraining:
    """
    Trainer evolving a population of NEAT genomes.

    Each call to 'iteration' runs one full generation:

    1. Breeding: every species, in population order, spawns its share of the
       next generation. The first offspring is the species leader itself,
       carried over unchanged (elitism); every other offspring is a mutated
       clone of a parent or the mutated child of two parents (crossover).
    2. Replacement: if breeding comes up short, tournament selection fills the
       remaining places; the new generation then replaces the old one.
    3. Reset and kill: species whose leader died, or which stagnated while being
       worse than the best score ever seen, are removed.
    4. Scoring: every genome is decoded and scored, the population is sorted
       and the best genome ever seen is recorded.
    5. Speciation: genomes are assigned to species, scores are adjusted (age
       bonus or penalty, fitness sharing) and offspring shares calculated.

    Steps 3 to 5 also run once on construction, so the first iteration
    starts from a scored and speciated population.

    Training never terminates by itself: the caller decides how many
    iterations to run.

    Public Properties:
        population:           The evolving population
        best_score:           Best raw score seen so far
        best_network:         Network of the best genome seen so far
        iteration_number:     Number of generations bred so far
        input_count:          Number of network inputs
        output_count:         Number of network outputs
        innovations:          The innovation tracker of the population
        snapshot:             Whether decoded networks run in snapshot mode
        best_comparator:      Ranks genomes by raw score
        selection_comparator: Ranks genomes by adjusted score

    Public Methods:
        iteration():          Run one generation
        iterations(count):    Run several generations
        crossover(mom, dad):  Create a child from two parents
        mutate(genome):       Apply one mutation, drawn by weight
    """

    def __init__(self,
                 score     : Callable[[Any], float],
                 population: Population,
                 rng       : random.Random | None = None,
                 minimize  : bool | None = None):
        """
        Create a trainer for an existing population.

        Parameters:
            score:      Score function, called with each decoded network
            population: The population to evolve (its config drives training)
            rng:        The random source for every stochastic decision
            minimize:   Whether lower scores are better (default: the 'should_minimize'
                        attribute of the score function if it has one, otherwise
                        the 'minimize_score' config value)

        Raises:
            ConfigurationError: if the population is empty, contains genomes that
                                are not NEAT genomes, or genomes whose number of
                                inputs or outputs differ
        """
        if len(population) < 1:
            raise ConfigurationError("Population can not be empty.")

        for genome in population:
            if not isinstance(genome, GenomeBase) or genome.kind != GenomeKind.NEAT:
                raise ConfigurationError("Population can only contain NEAT genomes.")

        self._input_count : int = population[0].input_count
        self._output_count: int = population[0].output_count

        for genome in population:
            if genome.input_count != self._input_count or genome.output_count != self._output_count:
                raise ConfigurationError("All genomes must have the same input and output sizes.")

        self._score      = score
        self._population = population
        self._config     = population.config
        self._rng        = rng if rng is not None else random.Random()

        # The number of genomes every generation is refilled to
        self._population_size = len(population)

        # Direction: explicit argument, then the score function's own, then the config
        if minimize is None:
            minimize = getattr(score, 'should_minimize', None)
        if minimize is None:
            minimize = self._config.minimize_score
        self.best_comparator, self.selection_comparator = comparators_for(minimize)

        self._best_ever_score  : float = self.best_comparator.worst_score()
        self._best_ever_network: Any   = None
        self._iteration        : int   = 0

        self._total_fit_adjustment  : float = 0.0
        self._average_fit_adjustment: float = 0.0

        # Mutation tables: one for general mutation and one that never removes structure
        self._mutate_choices = self._build_mutation_table(include_removal=True)
        self._mutate_add_choices = self._build_mutation_table(include_removal=False)

        self.reset_and_kill()
        self.sort_and_record()
        self.speciate_and_calculate_spawn_levels()

    @classmethod
    def with_new_population(cls,
                            score          : Callable[[Any], float],
                            input_count    : int,
                            output_count   : int,
                            population_size: int,
                            config         : Config | None = None,
                            rng            : random.Random | None = None,
                            minimize       : bool | None = None) -> 'NEATTraining':
        """
        Create a trainer together with a new population.

        Parameters:
            score:           Score function, called with each decoded network
            input_count:     Number of network inputs
            output_count:    Number of network outputs
            population_size: Number of genomes in every generation
            config:          Stores configuration parameters (default: Config())
            rng:             The random source for every stochastic decision
            minimize:        Whether lower scores are better

        Returns:
            the new trainer
        """
        rng        = rng if rng is not None else random.Random()
        population = Population(input_count, output_count, population_size, config, rng)
        return cls(score, population, rng, minimize)

    def _build_mutation_table(self, include_removal: bool) -> OperationList:
        tracker = self._population.innovations

        table = OperationList()
        table.add(self._config.mutate_weights_prob, MutateWeights())
        table.add(self._config.add_node_prob      , AddNeuron(tracker))
        table.add(self._config.add_link_prob      , AddLink(tracker))
        table.add(self._config.adjust_curve_prob  , AdjustCurve())
        if include_removal:
            table.add(self._config.remove_link_prob, RemoveLink())
        table.finalize_structure()
        return table

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def population(self) -> Population:
        return self._population

    @property
    def best_score(self) -> float:
        return self._best_ever_score

    @property
    def error(self) -> float:
        """Same as 'best_score', for callers that think in terms of training error."""
        return self._best_ever_score

    @property
    def best_network(self) -> Any:
        return self._best_ever_network

    @property
    def iteration_number(self) -> int:
        return self._iteration

    @property
    def input_count(self) -> int:
        return self._input_count

    @property
    def output_count(self) -> int:
        return self._output_count

    @property
    def innovations(self):
        return self._population.innovations

    @property
    def snapshot(self) -> bool:
        return self._config.snapshot

    @snapshot.setter
    def snapshot(self, value: bool) -> None:
        self._config.snapshot = value

    @property
    def can_continue(self) -> bool:
        """Training cannot be paused and resumed."""
        return False

    @property
    def is_training_done(self) -> bool:
        """There is no built-in convergence criterion."""
        return False

    def add_strategy(self, strategy: Any) -> None:
        raise UnsupportedOperationError("Strategies are not supported by this training method.")

    def pause(self) -> Any:
        raise UnsupportedOperationError("Pausing is not supported by this training method.")

    def resume(self, state: Any) -> None:
        raise UnsupportedOperationError("Resuming is not supported by this training method.")

    # ------------------------------------------------------------------
    # Generation loop
    # ------------------------------------------------------------------

    def iteration(self) -> None:
        """
        Run one generation: breed the next generation, replace the
        population with it, then score and speciate it.
        """
        self._iteration += 1
        new_population: list[GenomeBase] = []

        for species in self._population.species:
            if len(new_population) >= self._population_size:
                break

            num_to_spawn    = species.spawn_count
            chosen_best_yet = False

            while num_to_spawn > 0 and len(new_population) < self._population_size:
                num_to_spawn -= 1

                # The leader is carried over unchanged
                if not chosen_best_yet:
                    baby = species.leader
                    chosen_best_yet = True
                else:
                    baby = self._breed(species)

                new_population.append(baby)

        # Breeding came up short: fill the remaining places by tournament
        shortfall = self._population_size - len(new_population)
        if shortfall > 0:
            logger.warning(f"Generation {self._iteration}: breeding produced {len(new_population)} of "
                           f"{self._population_size} genomes, {shortfall} filled by tournament selection")
            num_comparisons = max(1, int(self._population_size * self._config.tournament_fraction))
            while len(new_population) < self._population_size:
                new_population.append(self.tournament_selection(num_comparisons))

        self._population.clear()
        self._population.add_all(new_population)

        self.reset_and_kill()
        self.sort_and_record()
        self.speciate_and_calculate_spawn_levels()

        logger.info(f"Generation {self._iteration}: best score {self._best_ever_score}, "
                    f"{len(self._population.species)} species, "
                    f"compatibility threshold {self._config.compatibility_threshold:.3f}")

    def iterations(self, count: int) -> None:
        """
        Run 'count' generations.
        """
        for _ in range(count):
            self.iteration()

    def _breed(self, species: Species) -> GenomeBase:
        """
        Create one (non-leader) offspring of a species.

        A species with a single member can only clone it. Otherwise, with
        probability 'crossover_rate', two distinct parents are crossed over;
        if no second parent distinct from the first is found, or crossover is
        not drawn, a parent is cloned. Either way the offspring is mutated once.
        """
        if len(species.members) == 1:
            baby = species.choose_parent(self._rng, self.selection_comparator).clone(self._population.assign_genome_id())

        else:
            mom = species.choose_parent(self._rng, self.selection_comparator)
            baby = None

            if self._rng.random() < self._config.crossover_rate:
                dad = species.choose_parent(self._rng, self.selection_comparator)

                num_attempts = self._config.crossover_attempts
                while dad.genome_id == mom.genome_id and num_attempts > 0:
                    dad = species.choose_parent(self._rng, self.selection_comparator)
                    num_attempts -= 1

                if dad.genome_id != mom.genome_id:
                    baby = self.crossover(mom, dad)

            if baby is None:
                baby = mom.clone(self._population.assign_genome_id())

        self.mutate(baby)
        baby.sort_genes()
        return baby

    def mutate(self, genome: GenomeBase, allow_removal: bool = True) -> None:
        """
        Apply one mutation to a genome, drawn by weight from the mutation table.

        Parameters:
            genome:        the genome to mutate (in place)
            allow_removal: whether the mutation may remove a link
        """
        table = self._mutate_choices if allow_removal else self._mutate_add_choices
        table.pick_operator(self._rng).perform(genome, self._rng)

    def tournament_selection(self, num_comparisons: int) -> GenomeBase:
        """
        Select a genome by tournament and return a clone of it with a new ID.

        'num_comparisons' genomes are sampled at random (with replacement);
        the first one seeds the tournament and is replaced by any sample
        with a strictly better raw score.

        Parameters:
            num_comparisons: number of genomes sampled

        Returns:
            a clone of the winner
        """
        winner = None
        for _ in range(max(1, num_comparisons)):
            candidate = self._rng.choice(self._population.genomes)
            if winner is None or self.best_comparator.is_better_than(candidate.score, winner.score):
                winner = candidate

        return winner.clone(self._population.assign_genome_id())

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def reset_and_kill(self) -> None:
        """
        Purge every species and remove the species that are finished: those
        whose leader is no longer part of the population, and those that
        went too long without improving while being worse than the best
        score ever seen.
        """
        self._total_fit_adjustment   = 0.0
        self._average_fit_adjustment = 0.0

        for species in list(self._population.species):
            species.purge(self._population)

            # Did the leader die? If so, disband the species
            if not self._population.contains(species.leader_id):
                self._population.species.remove(species)
                logger.debug(f"species {species.id} removed: leader {species.leader_id} died")

            elif (species.gens_no_improvement > self._config.max_gens_no_improvement and
                  self.best_comparator.is_better_than(self._best_ever_score, species.best_score)):
                self._population.species.remove(species)
                logger.debug(f"species {species.id} removed: no improvement in "
                             f"{species.gens_no_improvement} generations")

    def sort_and_record(self) -> None:
        """
        Decode and score every genome, sort the population (best first)
        and record the best genome ever seen.
        """
        for genome in self._population:
            network = genome.decode()
            network.clear_context()
            genome.score = float(self._score(network))

        self._population.sort(self.best_comparator)

        best = self._population[0]
        if self.best_comparator.is_better_than(best.score, self._best_ever_score):
            self._best_ever_score   = best.score
            self._best_ever_network = best.organism
            logger.info(f"New best score: {self._best_ever_score} (genome {best.genome_id})")

    def speciate_and_calculate_spawn_levels(self) -> None:
        """
        Assign the genomes to species, adjust their scores and calculate
        how many offspring each genome and each species is entitled to.

        Each genome joins the first species (in population order) whose leader
        is within the compatibility threshold, or founds a new species.
        Leaders of surviving species stay in their own species.

        Amounts to spawn are proportional to the adjusted score whatever the
        direction. When minimizing, genomes with higher (worse) scores are
        entitled to more offspring, and the youth bonus shrinks a young
        species' share; elitism, parent selection and the tournament still
        follow the comparators.
        """
        self.adjust_compatibility_threshold()

        leader_ids = {species.leader_id for species in self._population.species}
        threshold  = self._config.compatibility_threshold

        for genome in self._population:
            if genome.genome_id in leader_ids:
                continue

            for species in self._population.species:
                if genome.get_compatibility_score(species.leader) <= threshold:
                    species.add_member(genome, self.best_comparator)
                    break
            else:
                species = Species(self._population.assign_species_id(), genome, self._config)
                self._population.species.append(species)

        self.adjust_species_score()

        self._total_fit_adjustment   = sum(genome.adjusted_score for genome in self._population)
        self._average_fit_adjustment = self._total_fit_adjustment / len(self._population)

        if abs(self._average_fit_adjustment) < ZERO_AVERAGE_TOLERANCE:
            logger.warning(f"Average adjusted score is {self._average_fit_adjustment}: "
                           f"no genome is entitled to offspring")
            for genome in self._population:
                genome.amount_to_spawn = 0.0
        else:
            for genome in self._population:
                genome.amount_to_spawn = genome.adjusted_score / self._average_fit_adjustment

        for species in self._population.species:
            species.calculate_spawn_amount()
            logger.debug(f"species {species.id}: {len(species)} members, "
                         f"{species.spawns_required:.3f} spawns required")

    def adjust_compatibility_threshold(self) -> None:
        """
        Nudge the compatibility threshold towards a number of species between
        2 and 'max_species': raise it when there are too many species, lower
        it when there are fewer than two. Disabled when 'max_species' < 1.
        """
        if self._config.max_species < 1:
            return

        num_species = len(self._population.species)
        if num_species > self._config.max_species:
            self._config.compatibility_threshold += self._config.threshold_increment
        elif num_species < 2:
            self._config.compatibility_threshold -= self._config.threshold_increment
        else:
            return

        logger.debug(f"compatibility threshold now {self._config.compatibility_threshold:.3f} "
                     f"({num_species} species)")

    def adjust_species_score(self) -> None:
        """
        Calculate the adjusted score of every genome: young species receive
        a bonus, old species a penalty, then the score is shared among all
        members of the species.
        """
        for species in self._population.species:
            for member in species.members.values():
                score = member.score

                # Apply a youth bonus
                if species.age < self._population.young_bonus_age_threshold:
                    score = self.selection_comparator.apply_bonus(score, self._population.young_score_bonus)

                # Apply an old age penalty
                if species.age > self._population.old_age_threshold:
                    score = self.selection_comparator.apply_penalty(score, self._population.old_age_penalty)

                member.adjusted_score = score / len(species.members)

    # ------------------------------------------------------------------
    # Crossover
    # ------------------------------------------------------------------

    def favor_parent(self, mom: NEATGenome, dad: NEATGenome) -> NEATGenome:
        """
        Decide which parent contributes its disjoint and excess genes.

        The parent with the better score is favored. On equal scores the parent
        with fewer genes is favored, and if the gene counts are equal too,
        a fair coin decides.

        Returns:
            either 'mom' or 'dad'
        """
        if mom.score == dad.score:
            if mom.num_genes == dad.num_genes:
                return mom if self._rng.random() < 0.5 else dad
            return mom if mom.num_genes < dad.num_genes else dad

        # Which score is better depends on the comparator: it could be the lower one
        return mom if self.selection_comparator.compare(mom, dad) < 0 else dad

    def crossover(self, mom: NEATGenome, dad: NEATGenome) -> NEATGenome:
        """
        Perform NEAT crossover between two genomes to create offspring.

        The link genes of both parents are walked together in innovation order:
        - matching genes are inherited from either parent, 50/50
        - disjoint and excess genes are inherited only from the favored parent
        The child never carries two genes with the same innovation number.

        The child's neurons are the bias, input and output neurons, plus every
        neuron referenced by an inherited link.

        Parameters:
            mom: the first parent
            dad: the second parent

        Returns:
            the child, with a new genome ID
        """
        best = self.favor_parent(mom, dad)

        baby_links = []

        # The bias, input and output neurons are always present
        node_ids = set(range(self._input_count + self._output_count + 1))

        mom_genes = mom.link_genes
        dad_genes = dad.link_genes
        cur_mom, cur_dad = 0, 0

        while cur_mom < len(mom_genes) or cur_dad < len(dad_genes):
            mom_gene = mom_genes[cur_mom] if cur_mom < len(mom_genes) else None
            dad_gene = dad_genes[cur_dad] if cur_dad < len(dad_genes) else None
            selected = None

            if mom_gene is None:
                if best is dad:
                    selected = dad_gene
                cur_dad += 1
            elif dad_gene is None:
                if best is mom:
                    selected = mom_gene
                cur_mom += 1
            elif mom_gene.innovation < dad_gene.innovation:
                if best is mom:
                    selected = mom_gene
                cur_mom += 1
            elif dad_gene.innovation < mom_gene.innovation:
                if best is dad:
                    selected = dad_gene
                cur_dad += 1
            else:
                selected = mom_gene if self._rng.random() < 0.5 else dad_gene
                cur_mom += 1
                cur_dad += 1

            if selected is None:
                continue

            if not baby_links or baby_links[-1].innovation != selected.innovation:
                baby_links.append(selected.copy())

            node_ids.add(selected.from_id)
            node_ids.add(selected.to_id)

        tracker     = self._population.innovations
        baby_nodes  = [tracker.create_neuron_from_id(node_id) for node_id in sorted(node_ids)]

        return NEATGenome(self._config, self._input_count, self._output_count,
                          self._population.assign_genome_id(), baby_nodes, baby_links)
