"""
NEAT Randomize Package

Random selection helpers shared by the mutation dispatch and operator selection.

Modules:
    weighted_choice: WeightedChoice class
    operation_list:  EvolutionaryOperator, OperationHolder and OperationList classes

Exported Classes:
    WeightedChoice:       Draws an index with probability proportional to its weight
    EvolutionaryOperator: Abstract operator that can be held in an OperationList
    OperationHolder:      An operator paired with its selection probability
    OperationList:        Probability-weighted table of operators
"""

from evoneat.randomize.weighted_choice import WeightedChoice
from evoneat.randomize.operation_list  import EvolutionaryOperator, OperationHolder, OperationList

__all__ = ['WeightedChoice',
           'EvolutionaryOperator',
           'OperationHolder',
           'OperationList']
