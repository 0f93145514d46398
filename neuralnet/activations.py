"""
Activation Functions from Scratch

This module implements the activation function used by the network together
with the derivative needed for backpropagation.

Key Concepts:
- Primary function: compute the activation from a pre-activation value
- Derivative: compute the local slope used by the backward pass
- Chain rule: if y = f(x) and L is loss, then dL/dx = dL/dy * dy/dx

The derivative here follows the "derivative-of-output" convention: it is
called with the activation's OUTPUT y = f(x), not with the pre-activation x.
"""

import numpy as np

from .utils import apply_elementwise


class ActivationFunction:
    """
    A pluggable (primary, derivative) pair.

    Contract:
        primary(x)         -> y = f(x), applied element-wise
        derivative(y)      -> f'(x) expressed in terms of y = f(x)

    The backward pass caches the forward outputs and feeds THOSE to
    `derivative`. For sigmoid this is exact, because
        sigmoid'(x) = sigmoid(x) * (1 - sigmoid(x)) = y * (1 - y)

    Substituting an activation whose derivative is normally written in terms
    of the input x (e.g. passing cos as the derivative of sin) silently
    corrupts every gradient. Any replacement must express its derivative
    through the output, e.g. tanh: derivative(y) = 1 - y**2.

    Both functions are scalar-to-scalar. The engine applies them to every
    entry of a matrix; array-aware versions (built on np.exp) are called once
    per matrix, scalar-only ones (built on math.exp) once per entry.
    """

    def __init__(self, primary, derivative, name=None):
        """
        Args:
            primary: Activation, maps pre-activation values to outputs
            derivative: Derivative-of-output, maps outputs to local slopes
            name: Optional label used in repr and log lines
        """
        if not callable(primary) or not callable(derivative):
            raise TypeError("primary and derivative must both be callable")

        self.primary = primary
        self.derivative = derivative
        self.name = name or getattr(primary, "__name__", "activation")

    def __repr__(self):
        return "<ActivationFunction %s>" % self.name


def sigmoid(x):
    """Sigmoid activation: f(x) = 1 / (1 + e^(-x)); range (0, 1)"""
    return 1.0 / (1.0 + np.exp(-x))


def sigmoid_prime(output):
    """
    Derivative of sigmoid, given the sigmoid OUTPUT.

    Args:
        output: y = sigmoid(x), NOT x itself

    Returns:
        y * (1 - y), which equals sigmoid'(x)
    """
    return output * (1.0 - output)


SIGMOID = ActivationFunction(sigmoid, sigmoid_prime, name="sigmoid")


# =============================================================================
# GRADIENT VERIFICATION UTILITIES
# =============================================================================

def numerical_gradient(func, x, eps=1e-5):
    """
    Compute numerical gradient using central difference.

    This is used to verify our analytical gradients are correct.
    The numerical gradient is an approximation:
        df/dx ~= (f(x + eps) - f(x - eps)) / (2 * eps)

    Args:
        func: Function that takes x and returns a scalar
        x: Point at which to compute gradient (modified temporarily, restored)
        eps: Small perturbation size

    Returns:
        Numerical gradient, same shape as x
    """
    grad = np.zeros_like(x)

    it = np.nditer(x, flags=['multi_index'], op_flags=['readwrite'])
    while not it.finished:
        idx = it.multi_index
        original = x[idx]

        x[idx] = original + eps
        f_plus = func(x)

        x[idx] = original - eps
        f_minus = func(x)

        grad[idx] = (f_plus - f_minus) / (2 * eps)

        # Restore original value
        x[idx] = original

        it.iternext()

    return grad


def check_derivative(activation, x, eps=1e-5, tolerance=1e-6):
    """
    Verify that `activation.derivative(primary(x))` matches the numerical
    slope of `primary` at `x`.

    Args:
        activation: ActivationFunction to check
        x: 1-D array of sample pre-activation points
        eps: Perturbation size for the central difference
        tolerance: Maximum allowed absolute difference

    Returns:
        True if the derivative-of-output convention holds at every point
    """
    x = np.asarray(x, dtype=np.float64)
    def primary(v):
        return apply_elementwise(activation.primary, v)

    analytical = apply_elementwise(activation.derivative, primary(x))
    numerical = (primary(x + eps) - primary(x - eps)) / (2 * eps)
    return bool(np.max(np.abs(analytical - numerical)) < tolerance)


if __name__ == "__main__":
    print("Testing sigmoid...")
    x = np.array([-2, -1, 0, 1, 2], dtype=np.float64)
    print(f"  Input:  {x}")
    print(f"  Output: {sigmoid(x)}")
    print(f"  Derivative check: {check_derivative(SIGMOID, x)}")
