"""
NEAT Species Module

This module implements the Species class for the NEAT algorithm.
A species represents a cluster of genetically similar genomes
that compete primarily within their own niche.

Classes:
    Species: Represents a single species with members and score tracking
"""

import math
import random
from functools import cmp_to_key
from typing    import TYPE_CHECKING

from evoneat.run.config import Config

if TYPE_CHECKING:
    from evoneat.genotype import GenomeBase
    from evoneat.pool.population import Population
    from evoneat.score import GenomeComparator

class Species:
    """
    A species representing a cluster of genetically similar genomes in NEAT.

    In NEAT, the population is divided into species based on genetic similarity,
    allowing different evolutionary niches to develop independently. This protects
    innovative structures from being eliminated by competition with more mature
    solutions, as genomes only compete for offspring within their own species.

    Each species has a leader, its best member, used for compatibility calculations
    during speciation. The leader is not held separately: it is the member stored
    under 'leader_id', so checking whether the leader is still alive is a simple
    lookup in the population.

    Public Attributes:
        id:                  Unique species identifier
        leader_id:           Genome ID of the leader (a key of 'members')
        members:             The genomes that are part of this species: genome ID => genome
        age:                 Number of generations this species has existed
        best_score:          Best raw score ever achieved by the species
        gens_no_improvement: Generations since 'best_score' last improved
        spawns_required:     Sum of the members' amounts to spawn

    Public Properties:
        leader:      The leader genome (None if it is no longer a member)
        spawn_count: Number of offspring to breed ('spawns_required', rounded)

    Public Methods:
        purge(population):              Start a new generation, keeping only a surviving leader
        add_member(genome, comparator): Add a genome, possibly promoting it to leader
        calculate_spawn_amount():       Sum the members' amounts to spawn
        choose_parent(rng, comparator): Select a member to breed from

    Life Cycle:
    1. Created when a genome doesn't fit into existing species
    2. Accumulates members during speciation based on compatibility
    3. Spawns offspring proportional to the adjusted scores of its members
    4. Its leader survives into the next generation unchanged
    5. Removed when its leader dies or it stagnates
    """

    def __init__(self, species_id: int, leader: 'GenomeBase', config: Config):
        """
        Initialize a new species.

        Parameters:
            species_id: unique species identifier
            leader:     the first member, which leads the species
            config:     stores configuration parameters
        """
        self._config: Config = config

        self.id       : int = species_id
        self.leader_id: int = leader.genome_id

        self.members: dict[int, 'GenomeBase'] = {leader.genome_id: leader}
        leader.species_id = species_id

        self.age                : int   = 0
        self.best_score         : float = leader.score
        self.gens_no_improvement: int   = 0
        self.spawns_required    : float = 0.0

    @property
    def leader(self) -> 'GenomeBase | None':
        return self.members.get(self.leader_id)

    @property
    def spawn_count(self) -> int:
        """The number of offspring to breed: 'spawns_required' rounded half up."""
        return int(math.floor(self.spawns_required + 0.5))

    def purge(self, population: 'Population') -> None:
        """
        Prepare the species for a new generation.

        Members that are no longer part of the population are dropped. Apart from
        a surviving leader, all other members are released too: every genome is
        re-assigned to a species during speciation. The species ages by one
        generation, and so does its stagnation counter.

        Parameters:
            population: the population the members must belong to
        """
        leader = self.leader
        if leader is not None and population.contains(self.leader_id):
            self.members = {self.leader_id: leader}
        else:
            self.members = {}

        self.age                 += 1
        self.gens_no_improvement += 1
        self.spawns_required      = 0.0

    def add_member(self, genome: 'GenomeBase', comparator: 'GenomeComparator') -> None:
        """
        Add a genome to the species.

        If the genome is better than the current leader it becomes the new leader.
        If it is better than the best score ever seen in the species, the best
        score is updated and the stagnation counter reset.

        Parameters:
            genome:     the new member
            comparator: decides which of two genomes is better
        """
        leader = self.leader
        if leader is None or comparator.compare(genome, leader) < 0:
            self.leader_id = genome.genome_id

        if comparator.is_better_than(genome.score, self.best_score):
            self.best_score          = genome.score
            self.gens_no_improvement = 0

        self.members[genome.genome_id] = genome
        genome.species_id = self.id

    def calculate_spawn_amount(self) -> int:
        """
        Calculate how many offspring the species breeds in the next generation.
        Each member contributes its amount to spawn (its adjusted score
        divided by the average adjusted score of the population).

        Returns:
            the number of offspring (the sum of the amounts, rounded half up)
        """
        self.spawns_required = sum(member.amount_to_spawn for member in self.members.values())
        return self.spawn_count

    def choose_parent(self, rng: random.Random, comparator: 'GenomeComparator') -> 'GenomeBase':
        """
        Select a member to breed from.

        Truncation selection: members are ranked with 'comparator' and
        the parent is chosen uniformly among the top 'survival_rate'
        fraction of the species (always at least the best member).

        Parameters:
            rng:        the random source
            comparator: ranks the members

        Returns:
            the selected parent
        """
        ranked = sorted(self.members.values(), key=cmp_to_key(comparator.compare))
        if len(ranked) == 1:
            return ranked[0]

        num_parents = min(len(ranked), int(self._config.survival_rate * len(ranked)) + 1)
        return rng.choice(ranked[:num_parents])

    def __len__(self):
        return len(self.members)

    def __repr__(self):
        return (f"Species(id={self.id}, leader_id={self.leader_id}, members={len(self.members)}, "
                f"age={self.age}, best_score={self.best_score}, "
                f"gens_no_improvement={self.gens_no_improvement}, spawns_required={self.spawns_required:.3f})")
