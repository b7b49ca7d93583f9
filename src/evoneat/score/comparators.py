"""
Genome Comparators Module

Comparators define what 'better' means: minimization and maximization
problems use the same trainer, with different comparators plugged in.

Classes:
    GenomeComparator:          Abstract base class of all comparators
    MinimizeScoreComp:         Lower raw score is better
    MaximizeScoreComp:         Higher raw score is better
    MinimizeAdjustedScoreComp: Lower adjusted score is better
    MaximizeAdjustedScoreComp: Higher adjusted score is better

Functions:
    comparators_for(minimize): The (best, selection) comparator pair for a problem
"""

import math
from abc import ABC, abstractmethod

from evoneat.genotype.genome_base import GenomeBase

class GenomeComparator(ABC):
    """
    Total ordering over genomes, plus the score transforms that depend on
    the direction of optimization.

    'compare(a, b)' is negative when 'a' is better than 'b', so sorting a list
    with it (via functools.cmp_to_key) puts the best genome first.

    Public Methods:
        compare(a, b):           Negative, zero or positive, like a classic cmp
        is_better_than(a, b):    Whether score 'a' is strictly better than score 'b'
        apply_bonus(value, b):   Improve a score by a fraction 'b'
        apply_penalty(value, p): Worsen a score by a fraction 'p'
        worst_score():           A score every real score is better than
        should_minimize():       Direction of optimization
    """

    @abstractmethod
    def get_value(self, genome: GenomeBase) -> float:
        """The score of 'genome' this comparator looks at."""
        pass

    @abstractmethod
    def should_minimize(self) -> bool:
        pass

    def compare(self, a: GenomeBase, b: GenomeBase) -> int:
        value_a = self.get_value(a)
        value_b = self.get_value(b)
        if value_a == value_b:
            return 0
        return -1 if self.is_better_than(value_a, value_b) else 1

    def is_better_than(self, a: float, b: float) -> bool:
        if self.should_minimize():
            return a < b
        return a > b

    def apply_bonus(self, value: float, bonus: float) -> float:
        if self.should_minimize():
            return value - value * bonus
        return value + value * bonus

    def apply_penalty(self, value: float, penalty: float) -> float:
        if self.should_minimize():
            return value + value * penalty
        return value - value * penalty

    def worst_score(self) -> float:
        return math.inf if self.should_minimize() else -math.inf

    def __repr__(self):
        return f"{type(self).__name__}()"

class MinimizeScoreComp(GenomeComparator):
    def get_value(self, genome: GenomeBase) -> float:
        return genome.score

    def should_minimize(self) -> bool:
        return True

class MaximizeScoreComp(GenomeComparator):
    def get_value(self, genome: GenomeBase) -> float:
        return genome.score

    def should_minimize(self) -> bool:
        return False

class MinimizeAdjustedScoreComp(GenomeComparator):
    def get_value(self, genome: GenomeBase) -> float:
        return genome.adjusted_score

    def should_minimize(self) -> bool:
        return True

class MaximizeAdjustedScoreComp(GenomeComparator):
    def get_value(self, genome: GenomeBase) -> float:
        return genome.adjusted_score

    def should_minimize(self) -> bool:
        return False

def comparators_for(minimize: bool) -> tuple[GenomeComparator, GenomeComparator]:
    """
    Get the comparators for a problem.

    Parameters:
        minimize: whether lower scores are better

    Returns:
        2-tuple: (best comparator, selection comparator)
        The best comparator ranks genomes by raw score, the
        selection comparator ranks them by adjusted score.
    """
    if minimize:
        return MinimizeScoreComp(), MinimizeAdjustedScoreComp()
    return MaximizeScoreComp(), MaximizeAdjustedScoreComp()
