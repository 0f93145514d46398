# Single hidden layer network built from scratch
# The engine implements full-batch backpropagation with a pluggable activation

from .activations import ActivationFunction, SIGMOID, sigmoid, sigmoid_prime
from .exceptions import NeuralNetError, DimensionMismatch, UntrainedModel, InvalidAxis
from .network import NetworkConfig, NeuralNetwork, train, predict
from .utils import sum_along_axis, apply_elementwise
