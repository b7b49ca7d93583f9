"""
NEAT Population Module

This module implements the Population class, the container for the genomes
and species evolved by the trainer.

Classes:
    Population: Genomes, species, ID counters and innovation ledger of a run
"""

import logging
import random
from functools import cmp_to_key
from itertools import count
from typing    import Iterable, Iterator, TYPE_CHECKING

from evoneat.errors                      import ConfigurationError
from evoneat.genotype.innovation_tracker import InnovationTracker
from evoneat.genotype.link_gene          import LinkGene
from evoneat.genotype.neat_genome        import NEATGenome
from evoneat.run.config                  import Config

if TYPE_CHECKING:
    from evoneat.genotype import GenomeBase
    from evoneat.pool.species import Species
    from evoneat.score import GenomeComparator

logger = logging.getLogger(__name__)

class Population:
    """
    A population of evolving genomes in the NEAT algorithm.

    The Population owns all genomes and species of a run, hands out genome and
    species IDs, and owns the innovation tracker shared by all its genomes.
    Genomes migrate between species without changing population ownership.

    Public Attributes:
        genomes:     List of all genomes in the current generation
        species:     List of all species
        innovations: The innovation tracker shared by all genomes

    Public Properties:
        config:                   Configuration parameters
        input_count:              Number of input neurons of every genome
        output_count:             Number of output neurons of every genome
        young_bonus_age_threshold: Species younger than this receive a score bonus
        young_score_bonus:        Fractional bonus for young species
        old_age_threshold:        Species older than this receive a score penalty
        old_age_penalty:          Fractional penalty for old species
        max_species:              Target maximum number of species

    Public Methods:
        assign_genome_id():   Next unused genome ID
        assign_species_id():  Next unused species ID
        sort(comparator):     Sort the genomes, best first
        contains(genome_id):  Whether a genome with this ID is in the population
        get(genome_id):       The genome with this ID
        add(genome), add_all(genomes), clear()
    """

    def __init__(self,
                 input_count    : int,
                 output_count   : int,
                 population_size: int = 0,
                 config         : Config | None = None,
                 rng            : random.Random | None = None):
        """
        Initialize the population, creating 'population_size' genomes.

        The genomes consist of the bias, input and output neurons. They are
        then linked according to the initial connection policy of the config.

        Parameters:
            input_count:     Number of input neurons of every genome
            output_count:    Number of output neurons of every genome
            population_size: Number of genomes to create (0 for an empty population)
            config:          Stores configuration parameters (default: Config())
            rng:             The random source used to create links and weights
        """
        self._config       = config if config is not None else Config()
        self._input_count  = input_count
        self._output_count = output_count

        self._next_genome_id  = count(1)
        self._next_species_id = count(1)

        self.genomes    : list['GenomeBase'] = []
        self.species    : list['Species']    = []
        self.innovations: InnovationTracker  = InnovationTracker(input_count, output_count)

        rng = rng if rng is not None else random.Random()

        # Step 1: create a number of identical genomes, each describing a
        # network consisting only of unconnected bias, input and output neurons.
        for _ in range(population_size):
            genome = NEATGenome(self._config, input_count, output_count, self.assign_genome_id())
            self.genomes.append(genome)

        # Step 2: add links to each genome.
        # The manner in which this is done depends on the initialization policy.
        policy = self._config.initial_cxn_policy
        for genome in self.genomes:
            if policy == "none":
                continue  # already unlinked
            elif policy == "one-input":
                self._connect_one_input(genome, rng)
            elif policy == "partial":
                self._connect_partial(genome, rng)
            elif policy == "full":
                self._connect_full(genome, rng)
            else:
                raise ConfigurationError(f"bad initial connection policy '{policy}'")

            if self._config.connect_bias:
                for output_node in genome.output_nodes:
                    self._link(genome, genome.bias_node.id, output_node.id, rng)
            genome.sort_genes()

        if population_size > 0:
            logger.debug(f"created {population_size} genomes ({input_count} inputs, {output_count} outputs, policy '{policy}')")

    def _link(self, genome: NEATGenome, from_id: int, to_id: int, rng: random.Random) -> None:
        innovation = self.innovations.record_new_link(from_id, to_id)
        weight     = rng.uniform(self._config.min_weight, self._config.max_weight)
        genome.link_genes.append(LinkGene(innovation, from_id, to_id, weight))

    def _connect_one_input(self, genome: NEATGenome, rng: random.Random) -> None:
        """
        Connect one random input neuron to all output neurons.
        """
        input_node = rng.choice(genome.input_nodes)
        for output_node in genome.output_nodes:
            self._link(genome, input_node.id, output_node.id, rng)

    def _connect_partial(self, genome: NEATGenome, rng: random.Random) -> None:
        """
        Connect a fraction of all possible input-output pairs, chosen at random.
        """
        all_pairs  = [(inp.id, out.id) for inp in genome.input_nodes for out in genome.output_nodes]
        num_links  = int(len(all_pairs) * self._config.initial_cxn_fraction)
        make_pairs = rng.sample(all_pairs, num_links)

        # Create the links in a stable order, so innovation numbers do not depend on the draw
        for input_id, output_id in sorted(make_pairs):
            self._link(genome, input_id, output_id, rng)

    def _connect_full(self, genome: NEATGenome, rng: random.Random) -> None:
        """
        Connect all input neurons to all output neurons.
        """
        for input_node in genome.input_nodes:
            for output_node in genome.output_nodes:
                self._link(genome, input_node.id, output_node.id, rng)

    @property
    def config(self) -> Config:
        return self._config

    @property
    def input_count(self) -> int:
        return self._input_count

    @property
    def output_count(self) -> int:
        return self._output_count

    @property
    def young_bonus_age_threshold(self) -> int:
        return self._config.young_age_threshold

    @property
    def young_score_bonus(self) -> float:
        return self._config.young_score_bonus

    @property
    def old_age_threshold(self) -> int:
        return self._config.old_age_threshold

    @property
    def old_age_penalty(self) -> float:
        return self._config.old_age_penalty

    @property
    def max_species(self) -> int:
        return self._config.max_species

    def assign_genome_id(self) -> int:
        return next(self._next_genome_id)

    def assign_species_id(self) -> int:
        return next(self._next_species_id)

    def sort(self, comparator: 'GenomeComparator') -> None:
        """
        Sort the genomes, best first. The sort is stable.
        """
        self.genomes.sort(key=cmp_to_key(comparator.compare))

    def contains(self, genome_id: int) -> bool:
        return any(genome.genome_id == genome_id for genome in self.genomes)

    def get(self, genome_id: int) -> 'GenomeBase':
        """
        Raises:
            KeyError: if no genome has this ID
        """
        for genome in self.genomes:
            if genome.genome_id == genome_id:
                return genome
        raise KeyError(f"Genome with ID {genome_id} is not part of the population")

    def add(self, genome: 'GenomeBase') -> None:
        self.genomes.append(genome)

    def add_all(self, genomes: Iterable['GenomeBase']) -> None:
        self.genomes.extend(genomes)

    def clear(self) -> None:
        """
        Remove all genomes. Species are kept: they are purged by the trainer.
        """
        self.genomes = []

    def __len__(self):
        return len(self.genomes)

    def __iter__(self) -> Iterator['GenomeBase']:
        return iter(self.genomes)

    def __getitem__(self, index: int) -> 'GenomeBase':
        return self.genomes[index]

    def __str__(self):
        return '\n'.join(str(genome) for genome in self.genomes)
