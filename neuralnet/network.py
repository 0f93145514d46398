"""
Single Hidden Layer Network from Scratch

This module implements:
- NetworkConfig: layer sizes and learning parameters
- NeuralNetwork: full-batch backpropagation training and inference

Architecture:

    X (N, input) ──► [X @ W_hidden + b_hidden] ──► f ──► H (N, hidden)
                                                          │
    output (N, out) ◄── f ◄── [H @ W_out + b_out] ◄───────┘

Where f is the activation function (sigmoid by default).

Training minimizes the squared error 1/2 * ||Y - output||^2 with plain
full-batch gradient steps. Every epoch uses the whole dataset, there is no
shuffling and no early stopping.
"""

import logging
from dataclasses import dataclass, field

import numpy as np

from .activations import SIGMOID, ActivationFunction
from .exceptions import DimensionMismatch, UntrainedModel
from .utils import apply_elementwise, as_matrix, sum_along_axis

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NetworkConfig:
    """
    Network architecture and learning parameters. Immutable.

    Attributes:
        input_neurons: Number of input features (columns of X)
        hidden_neurons: Width of the hidden layer
        output_neurons: Number of outputs (columns of Y, one per class)
        num_epochs: Number of full forward/backward/update iterations
        learning_rate: Scale applied to every gradient step
        activation: (primary, derivative-of-output) pair
    """
    input_neurons: int
    hidden_neurons: int
    output_neurons: int
    num_epochs: int
    learning_rate: float
    activation: ActivationFunction = field(default=SIGMOID)

    def __post_init__(self):
        for name in ("input_neurons", "hidden_neurons", "output_neurons"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

        if isinstance(self.num_epochs, bool) or not isinstance(self.num_epochs, (int, np.integer)) \
                or self.num_epochs < 0:
            raise ValueError(f"num_epochs must be a non-negative integer, got {self.num_epochs!r}")

        if not self.learning_rate > 0:
            raise ValueError(f"learning_rate must be positive, got {self.learning_rate!r}")

        if not isinstance(self.activation, ActivationFunction):
            raise TypeError("activation must be an ActivationFunction")

    @classmethod
    def from_dict(cls, config, activation=SIGMOID):
        """Build a NetworkConfig from a CONFIG-style dictionary."""
        return cls(
            input_neurons=config["input_neurons"],
            hidden_neurons=config["hidden_neurons"],
            output_neurons=config["output_neurons"],
            num_epochs=config["num_epochs"],
            learning_rate=config["learning_rate"],
            activation=activation,
        )


class NeuralNetwork:
    """
    Single hidden layer network trained with backpropagation.

    Parameters (None until `train` completes):
        w_hidden: (input_neurons, hidden_neurons), w_hidden[i, j] = weight
                  from input i to hidden unit j
        b_hidden: (1, hidden_neurons)
        w_out:    (hidden_neurons, output_neurons)
        b_out:    (1, output_neurons)

    The four tensors are only ever replaced together. A failed `train` call
    leaves the previous parameters in place. Instances are not thread-safe;
    do not train or predict concurrently on the same network.
    """

    def __init__(self, config):
        """
        Args:
            config: NetworkConfig
        """
        self.config = config

        self.w_hidden = None
        self.b_hidden = None
        self.w_out = None
        self.b_out = None

    def __repr__(self):
        c = self.config
        return "<NeuralNetwork %d-%d-%d, %s, %s>" % (
            c.input_neurons, c.hidden_neurons, c.output_neurons,
            c.activation.name, "trained" if self.is_trained else "untrained")

    @property
    def is_trained(self):
        return not any(p is None for p in self.get_params())

    def get_params(self):
        """Return the parameters as [w_hidden, b_hidden, w_out, b_out]."""
        return [self.w_hidden, self.b_hidden, self.w_out, self.b_out]

    def count_parameters(self):
        """Total number of learned scalars."""
        c = self.config
        return (c.input_neurons * c.hidden_neurons + c.hidden_neurons
                + c.hidden_neurons * c.output_neurons + c.output_neurons)

    # =========================================================================
    # INITIALIZATION
    # =========================================================================

    def init_params(self, rng=None):
        """
        Draw a fresh set of parameters from uniform [0, 1).

        Draw order is w_hidden, b_hidden, w_out, b_out, each filled in
        row-major order, so a seeded generator always yields the same
        parameters.

        Args:
            rng: numpy.random.Generator or seed. None gives an
                 entropy-seeded generator.

        Returns:
            [w_hidden, b_hidden, w_out, b_out] (not installed on the network)
        """
        rng = np.random.default_rng(rng)
        c = self.config

        w_hidden = rng.random((c.input_neurons, c.hidden_neurons))
        b_hidden = rng.random((1, c.hidden_neurons))
        w_out = rng.random((c.hidden_neurons, c.output_neurons))
        b_out = rng.random((1, c.output_neurons))

        return [w_hidden, b_hidden, w_out, b_out]

    # =========================================================================
    # FORWARD PASS
    # =========================================================================

    def _forward(self, x, params, hidden_act=None, output=None):
        """
        Compute hidden activations and network output.

        Args:
            x: Input, shape (N, input_neurons)
            params: [w_hidden, b_hidden, w_out, b_out]
            hidden_act, output: Optional preallocated destinations of shape
                                (N, hidden_neurons) and (N, output_neurons)

        Returns:
            (hidden_act, output)
        """
        w_hidden, b_hidden, w_out, b_out = params
        primary = self.config.activation.primary

        # Bias (1, hidden) broadcasts over every sample row
        hidden_input = x @ w_hidden
        hidden_input += b_hidden
        hidden_act = apply_elementwise(primary, hidden_input, out=hidden_act)

        output_input = hidden_act @ w_out
        output_input += b_out
        output = apply_elementwise(primary, output_input, out=output)

        return hidden_act, output

    # =========================================================================
    # TRAINING
    # =========================================================================

    def _check_inputs(self, x):
        x = as_matrix(x, "inputs")
        if x.shape[1] != self.config.input_neurons:
            raise DimensionMismatch(
                "inputs have %d columns, network expects %d input neurons"
                % (x.shape[1], self.config.input_neurons))
        return x

    def _check_labels(self, x, y):
        y = as_matrix(y, "labels")
        if y.shape[1] != self.config.output_neurons:
            raise DimensionMismatch(
                "labels have %d columns, network expects %d output neurons"
                % (y.shape[1], self.config.output_neurons))
        if y.shape[0] != x.shape[0]:
            raise DimensionMismatch(
                "inputs have %d rows but labels have %d rows"
                % (x.shape[0], y.shape[0]))
        return y

    def train(self, x, y, rng=None, log_every=0):
        """
        Train the network with full-batch backpropagation.

        Each epoch:
            1. Forward pass:  H = f(X @ W_h + b_h),  O = f(H @ W_o + b_o)
            2. Error:         E = Y - O
            3. Output delta:  dO = E * f'(O)
            4. Hidden delta:  dH = (dO @ W_o^T) * f'(H)
            5. Update:        W_o += lr * H^T @ dO     b_o += lr * sum(dO)
                              W_h += lr * X^T @ dH     b_h += lr * sum(dH)

        Both deltas are computed before any parameter is written, so every
        epoch works from a single consistent snapshot of the parameters.

        Args:
            x: Inputs, shape (N, input_neurons). Not modified.
            y: One-hot labels, shape (N, output_neurons). Not modified.
            rng: numpy.random.Generator or seed for initialization
            log_every: Log the mean squared error every `log_every` epochs
                       at DEBUG level (0 disables)

        Returns:
            self, with the trained parameters installed

        Raises:
            DimensionMismatch: if x or y do not fit the configuration
        """
        x = self._check_inputs(x)
        y = self._check_labels(x, y)

        c = self.config
        derivative = c.activation.derivative
        lr = c.learning_rate

        w_hidden, b_hidden, w_out, b_out = self.init_params(rng)

        logger.debug("Training %r (%d parameters) on %d samples for %d epochs (lr=%g)",
                     self, self.count_parameters(), x.shape[0], c.num_epochs, lr)

        # Reused across epochs, overwritten by each forward pass
        hidden_act = np.empty((x.shape[0], c.hidden_neurons))
        output = np.empty((x.shape[0], c.output_neurons))

        for epoch in range(c.num_epochs):
            # =================================================================
            # Forward pass
            # =================================================================
            self._forward(x, [w_hidden, b_hidden, w_out, b_out],
                          hidden_act=hidden_act, output=output)

            # =================================================================
            # Backward pass
            # =================================================================
            # Positive where the label exceeds the prediction
            network_error = y - output

            # derivative() takes the activation OUTPUT
            slope_output = apply_elementwise(derivative, output)
            slope_hidden = apply_elementwise(derivative, hidden_act)

            d_output = network_error * slope_output

            error_at_hidden = d_output @ w_out.T
            d_hidden = error_at_hidden * slope_hidden

            if log_every and (epoch % log_every == 0 or epoch == c.num_epochs - 1):
                logger.debug("Epoch %d/%d  |  MSE: %.6f",
                             epoch, c.num_epochs, np.mean(network_error ** 2))

            # =================================================================
            # Parameter update
            # =================================================================
            w_out += lr * (hidden_act.T @ d_output)
            b_out += lr * sum_along_axis(0, d_output)

            # No activation on the input layer, so X itself is the "activation"
            w_hidden += lr * (x.T @ d_hidden)
            b_hidden += lr * sum_along_axis(0, d_hidden)

        # Install all four together
        self.w_hidden = w_hidden
        self.b_hidden = b_hidden
        self.w_out = w_out
        self.b_out = b_out

        return self

    # =========================================================================
    # INFERENCE
    # =========================================================================

    def predict(self, x):
        """
        Run the forward pass with the trained parameters.

        Args:
            x: Inputs, shape (M, input_neurons)

        Returns:
            Outputs, shape (M, output_neurons). Each entry lies in the range
            of the activation (0, 1) for sigmoid. Rows are NOT normalized;
            take the arg-max of a row for a class decision.

        Raises:
            UntrainedModel: if `train` has not completed on this network
            DimensionMismatch: if x does not have input_neurons columns
        """
        if not self.is_trained:
            raise UntrainedModel("network weights and biases are empty, train the network first")

        x = self._check_inputs(x)
        _, output = self._forward(x, self.get_params())
        return output


def train(config, x, y, rng=None, log_every=0):
    """Build a network for `config` and train it on (x, y)."""
    return NeuralNetwork(config).train(x, y, rng=rng, log_every=log_every)


def predict(network, x):
    """Predict outputs for `x` with a trained network."""
    return network.predict(x)
