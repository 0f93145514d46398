"""
Errors raised by the network engine.

Every error derives from NeuralNetError so callers can catch the whole
family at once, and from the closest builtin so plain `except ValueError`
still works.
"""


class NeuralNetError(Exception):
    """Base class for all network engine errors."""


class DimensionMismatch(NeuralNetError, ValueError):
    """ Raised when matrix shapes are incompatible with each other or with
    the network configuration
    """


class UntrainedModel(NeuralNetError, RuntimeError):
    """ Raised when trying to predict with a network that has not been
    trained
    """


class InvalidAxis(NeuralNetError, ValueError):
    """ Raised when reducing a matrix along an axis other than 0 or 1
    """
