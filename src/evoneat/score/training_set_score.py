"""
Training Set Score Module

Classes:
    TrainingSetScore: Scores a network by its error over a data set
"""

import numpy as np

from evoneat.phenotype.network_base import NetworkBase

class TrainingSetScore:
    """
    Score function returning the mean squared error of a network over
    a supervised data set. Lower is better, which 'should_minimize'
    tells the trainer.

    Instances are callables, usable wherever a score function is expected.

    Public Attributes:
        inputs: Input vectors,    shape (num_samples, num_inputs)
        ideal:  Expected outputs, shape (num_samples, num_outputs)
    """

    def __init__(self, inputs, ideal):
        """
        Parameters:
            inputs: Input vectors, one row per sample
            ideal:  Expected outputs, one row per sample

        Raises:
            ValueError: if the two arrays do not describe the same number of samples
        """
        self.inputs = np.atleast_2d(np.asarray(inputs, dtype=np.float64))
        self.ideal  = np.atleast_2d(np.asarray(ideal , dtype=np.float64))
        if self.inputs.shape[0] != self.ideal.shape[0]:
            raise ValueError(f"{self.inputs.shape[0]} input rows but {self.ideal.shape[0]} ideal rows")

    def __call__(self, network: NetworkBase) -> float:
        outputs = network.compute(self.inputs)
        return float(np.mean((outputs - self.ideal) ** 2))

    @property
    def should_minimize(self) -> bool:
        return True

    def __repr__(self):
        return f"TrainingSetScore(samples={self.inputs.shape[0]})"
