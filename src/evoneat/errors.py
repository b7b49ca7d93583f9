"""
NEAT Errors Module

This module defines the exceptions raised by the NEAT training core.

Classes:
    TrainingError:             Base class for all training related errors
    ConfigurationError:        Invalid setup detected before any evolution takes place
    UnsupportedOperationError: Feature requested that this NEAT trainer does not implement
"""

class TrainingError(Exception):
    """
    Base class for the errors raised while setting up or running NEAT training.
    """

class ConfigurationError(TrainingError):
    """
    Raised when the trainer, population or one of its helpers is constructed
    from inconsistent inputs: an empty population, genomes of the wrong kind,
    genomes whose input/output counts disagree, or invalid parameter values.
    """

class UnsupportedOperationError(TrainingError):
    """
    Raised when calling a generic training feature (strategies, pause/resume)
    which NEAT training does not support.
    """
