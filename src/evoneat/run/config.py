import configparser
import os

from evoneat.activations import activations
from evoneat.errors      import ConfigurationError

class Config:
    """
    NEAT training parameters.

    Values are read from an INI file; 'Config()' without a file yields
    a fully defaulted object, convenient for tests and programmatic setup.
    """

    # Allowed values for 'initial_cxn_policy'
    CXN_POLICIES = ("none", "one-input", "partial", "full")

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a default Config.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, every parameter takes its default value.
        """
        parser = configparser.ConfigParser()

        if config_file is not None:
            if not os.path.exists(config_file):
                raise FileNotFoundError(f"Configuration file '{config_file}' not found")
            parser.read(config_file)

        # Helper function to safely parse values, falling back to the default
        def get_value(section, key, value_type, default):
            try:
                raw_value = parser.get(section, key)
            except (configparser.NoSectionError, configparser.NoOptionError):
                return default
            if raw_value.lower() == 'none':
                return None
            if value_type == int:
                return parser.getint(section, key)
            elif value_type == float:
                return parser.getfloat(section, key)
            elif value_type == bool:
                return parser.getboolean(section, key)
            return raw_value

        # [POPULATION]

        # The number of genomes in each generation.
        self.population_size = get_value('POPULATION', 'population_size', int, 150)

        # The number of input neurons, through which the network receives inputs.
        self.num_inputs = get_value('POPULATION', 'num_inputs', int, 2)

        # The number of output neurons, to which the network delivers outputs.
        self.num_outputs = get_value('POPULATION', 'num_outputs', int, 1)

        # Specifies the initial connectivity of newly-created genomes.
        # Allowed values:
        #   "none"      - no links are initially present
        #   "one-input" - one random input neuron is linked to all output neurons
        #   "partial"   - a fraction of all possible input->output links is created
        #   "full"      - link all input neurons to all output neurons
        self.initial_cxn_policy = get_value('POPULATION', 'initial_cxn_policy', str, "full")

        # The fraction of links to create (only applicable if the policy is "partial").
        self.initial_cxn_fraction = get_value('POPULATION', 'initial_cxn_fraction', float, None)

        # Whether the bias neuron starts out linked to every output neuron.
        self.connect_bias = get_value('POPULATION', 'connect_bias', bool, True)

        # [SPECIATION]

        # Genomes whose compatibility score is at most this
        # threshold are considered to be in the same species.
        # Tuned at run time, see 'max_species'.
        self.compatibility_threshold = get_value('SPECIATION', 'compatibility_threshold', float, 0.26)

        # Target maximum number of species. When exceeded the compatibility
        # threshold is raised, when fewer than two species exist it is lowered.
        # Values below 1 disable the adjustment.
        self.max_species = get_value('SPECIATION', 'max_species', int, 0)

        # The step by which the compatibility threshold is adjusted.
        self.threshold_increment = get_value('SPECIATION', 'threshold_increment', float, 0.01)

        # Coefficients of the excess, disjoint and matched-weight
        # terms of the compatibility score.
        self.distance_excess_coeff   = get_value('SPECIATION', 'distance_excess_coeff'  , float, 1.0)
        self.distance_disjoint_coeff = get_value('SPECIATION', 'distance_disjoint_coeff', float, 1.0)
        self.distance_matched_coeff  = get_value('SPECIATION', 'distance_matched_coeff' , float, 0.4)

        # [SPECIES_AGE]

        # Species younger than this receive a score bonus.
        self.young_age_threshold = get_value('SPECIES_AGE', 'young_age_threshold', int, 10)

        # The fractional bonus applied to the scores of young species.
        self.young_score_bonus = get_value('SPECIES_AGE', 'young_score_bonus', float, 0.3)

        # Species older than this receive a score penalty.
        self.old_age_threshold = get_value('SPECIES_AGE', 'old_age_threshold', int, 50)

        # The fractional penalty applied to the scores of old species.
        self.old_age_penalty = get_value('SPECIES_AGE', 'old_age_penalty', float, 0.3)

        # The fraction of each species (its best members) eligible to become parents.
        self.survival_rate = get_value('SPECIES_AGE', 'survival_rate', float, 0.2)

        # Species that go this many generations without improving, while being worse
        # than the best score ever seen, are removed.
        self.max_gens_no_improvement = get_value('SPECIES_AGE', 'max_gens_no_improvement', int, 15)

        # [REPRODUCTION]

        # The probability that an offspring is produced by crossover (vs. cloning).
        self.crossover_rate = get_value('REPRODUCTION', 'crossover_rate', float, 0.7)

        # How many times to look for a second parent distinct from the first.
        self.crossover_attempts = get_value('REPRODUCTION', 'crossover_attempts', int, 5)

        # The fraction of the population sampled by each tournament used
        # to top up the next generation when breeding comes up short.
        self.tournament_fraction = get_value('REPRODUCTION', 'tournament_fraction', float, 0.2)

        # [MUTATION]

        # Relative weights of the mutation operators. Exactly one operator
        # is applied each time a genome is mutated.
        self.mutate_weights_prob = get_value('MUTATION', 'mutate_weights_prob', float, 0.988)
        self.add_node_prob       = get_value('MUTATION', 'add_node_prob'      , float, 0.001)
        self.add_link_prob       = get_value('MUTATION', 'add_link_prob'      , float, 0.01)
        self.adjust_curve_prob   = get_value('MUTATION', 'adjust_curve_prob'  , float, 0.0)
        self.remove_link_prob    = get_value('MUTATION', 'remove_link_prob'   , float, 0.001)

        # The probability that each link weight is mutated by the weight mutation.
        self.mutation_rate = get_value('MUTATION', 'mutation_rate', float, 0.2)

        # The probability that a mutated weight is replaced by a fresh random
        # value (rather than perturbed).
        self.weight_replace_prob = get_value('MUTATION', 'weight_replace_prob', float, 0.1)

        # Perturbations are drawn uniformly from [-max, +max].
        self.max_weight_perturbation = get_value('MUTATION', 'max_weight_perturbation', float, 0.5)

        # Range from which fresh weights are drawn.
        self.min_weight = get_value('MUTATION', 'min_weight', float, -1.0)
        self.max_weight = get_value('MUTATION', 'max_weight', float,  1.0)

        # [STRUCTURAL_MUTATIONS]

        # The probability that a selected add-node / add-link mutation actually fires.
        self.chance_add_node = get_value('STRUCTURAL_MUTATIONS', 'chance_add_node', float, 0.04)
        self.chance_add_link = get_value('STRUCTURAL_MUTATIONS', 'chance_add_link', float, 0.07)

        # The probability that an add-link mutation tries to add a looped
        # (self-recurrent) link. Only applicable if 'allow_recurrent' is True.
        self.chance_add_recurrent_link = get_value('STRUCTURAL_MUTATIONS', 'chance_add_recurrent_link', float, 0.05)

        # Whether links forming cycles may be added. If False networks stay feed-forward.
        self.allow_recurrent = get_value('STRUCTURAL_MUTATIONS', 'allow_recurrent', bool, True)

        # Bounded numbers of attempts used by the structural mutations.
        self.num_tries_to_find_old_link    = get_value('STRUCTURAL_MUTATIONS', 'num_tries_to_find_old_link'   , int, 5)
        self.num_tries_to_find_looped_link = get_value('STRUCTURAL_MUTATIONS', 'num_tries_to_find_looped_link', int, 5)
        self.num_add_link_attempts         = get_value('STRUCTURAL_MUTATIONS', 'num_add_link_attempts'        , int, 5)

        # Genomes with this many neurons (or more) no longer grow new ones.
        self.max_permitted_neurons = get_value('STRUCTURAL_MUTATIONS', 'max_permitted_neurons', int, 100)

        # [NETWORK]

        # Activation function of hidden and output neurons (see 'basic_activations.py').
        self.activation = get_value('NETWORK', 'activation', str, "steepened_sigmoid")

        # If True each 'compute' relaxes the network once per layer of depth,
        # otherwise a single pass is made and recurrent state carries over.
        self.snapshot = get_value('NETWORK', 'snapshot', bool, False)

        # Whether lower scores are better.
        self.minimize_score = get_value('NETWORK', 'minimize_score', bool, False)

        self._validate()

    def _validate(self):
        """
        Reject values that cannot be used.
        """
        if self.initial_cxn_policy not in self.CXN_POLICIES:
            raise ConfigurationError(f"bad initial connection policy '{self.initial_cxn_policy}'")
        if self.initial_cxn_policy == "partial":
            if self.initial_cxn_fraction is None or not 0.0 <= self.initial_cxn_fraction <= 1.0:
                raise ConfigurationError("'partial' connection policy needs initial_cxn_fraction in [0, 1]")
        if self.activation not in activations:
            raise ConfigurationError(f"Invalid activation function '{self.activation}'")
        if self.min_weight > self.max_weight:
            raise ConfigurationError("min_weight must not exceed max_weight")
