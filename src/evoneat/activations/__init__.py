"""
Activations Package

This package provides the activation functions applied by decoded NEAT networks.

Exported:
    activations:      Dictionary mapping activation function names to functions
    activation_codes: Dictionary mapping activation function names to 3-letter codes
    Individual activation functions: identity_activation, clamped_activation,
                                     relu_activation, sigmoid_activation,
                                     steepened_sigmoid_activation, tanh_activation,
                                     sin_activation, gaussian_activation, abs_activation
"""

from evoneat.activations.basic_activations import (
    activations,
    activation_codes,
    identity_activation,
    clamped_activation,
    relu_activation,
    sigmoid_activation,
    steepened_sigmoid_activation,
    tanh_activation,
    sin_activation,
    gaussian_activation,
    abs_activation
)

__all__ = [
    'activations',
    'activation_codes',
    'identity_activation',
    'clamped_activation',
    'relu_activation',
    'sigmoid_activation',
    'steepened_sigmoid_activation',
    'tanh_activation',
    'sin_activation',
    'gaussian_activation',
    'abs_activation'
]
