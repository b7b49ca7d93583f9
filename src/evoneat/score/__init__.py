"""
NEAT Score Package

What 'better' means, and how networks are scored.

Modules:
    comparators:        Comparator strategies for minimization and maximization
    training_set_score: Mean squared error over a data set

Exported Classes:
    GenomeComparator:          Abstract base class of all comparators
    MinimizeScoreComp:         Lower raw score is better
    MaximizeScoreComp:         Higher raw score is better
    MinimizeAdjustedScoreComp: Lower adjusted score is better
    MaximizeAdjustedScoreComp: Higher adjusted score is better
    TrainingSetScore:          Scores a network by its error over a data set

Exported Functions:
    comparators_for: The (best, selection) comparator pair for a problem
"""

from evoneat.score.comparators        import (GenomeComparator,
                                              MinimizeScoreComp,
                                              MaximizeScoreComp,
                                              MinimizeAdjustedScoreComp,
                                              MaximizeAdjustedScoreComp,
                                              comparators_for)
from evoneat.score.training_set_score import TrainingSetScore

__all__ = ['GenomeComparator',
           'MinimizeScoreComp',
           'MaximizeScoreComp',
           'MinimizeAdjustedScoreComp',
           'MaximizeAdjustedScoreComp',
           'TrainingSetScore',
           'comparators_for']
