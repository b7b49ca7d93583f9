import numpy as np

def identity_activation(z):
    return z

def clamped_activation(z):
    return np.clip(z, -1.0, 1.0)

def relu_activation(z):
    return np.maximum(0.0, z)

def sigmoid_activation(z):
    z = np.clip(z, -100, 100)   # to prevent under/overflow when calculating exp
    return 1.0 / (1.0 + np.exp(-z))

def steepened_sigmoid_activation(z):
    # The slope used by the original NEAT experiments
    z = np.clip(4.924273 * z, -100, 100)
    return 1.0 / (1.0 + np.exp(-z))

def tanh_activation(z):
    return np.tanh(z)

def sin_activation(z):
    return np.sin(z)

def gaussian_activation(z):
    z = np.clip(z, -10, 10)
    return np.exp(-z ** 2)

def abs_activation(z):
    return np.abs(z)

activations = {
    "identity"         : identity_activation,
    "clamped"          : clamped_activation,
    "relu"             : relu_activation,
    "sigmoid"          : sigmoid_activation,
    "steepened_sigmoid": steepened_sigmoid_activation,
    "tanh"             : tanh_activation,
    "sin"              : sin_activation,
    "gaussian"         : gaussian_activation,
    "abs"              : abs_activation
    }

# 3-letter identifiers for each activation function
activation_codes = {
    "identity"         : "IDN",
    "clamped"          : "CLP",
    "relu"             : "RLU",
    "sigmoid"          : "SIG",
    "steepened_sigmoid": "SSG",
    "tanh"             : "TNH",
    "sin"              : "SIN",
    "gaussian"         : "GAU",
    "abs"              : "ABS"
    }
