"""
Training and Evaluation Utilities

This module implements:
- Metrics: mean squared error, accuracy, confusion matrix
- Hold-out runs: train on one dataset, score on another
- Parameter report: printable dump of a trained network

The network produces one sigmoid score per class. The predicted class of a
sample is the column with the highest score, compared against the hot column
of its one-hot label.
"""

import logging

import numpy as np

from neuralnet import NeuralNetwork, UntrainedModel

logger = logging.getLogger(__name__)


# =============================================================================
# METRICS
# =============================================================================

def mean_squared_error(output, labels):
    """Mean of (labels - output)^2 over every entry."""
    output = np.asarray(output, dtype=np.float64)
    labels = np.asarray(labels, dtype=np.float64)
    if output.shape != labels.shape:
        raise ValueError(f"shape mismatch: output {output.shape} vs labels {labels.shape}")
    return float(np.mean((labels - output) ** 2))


def predicted_classes(predictions):
    """Index of the highest-scoring column of each row."""
    return np.argmax(predictions, axis=1)


def accuracy(predictions, labels):
    """
    Fraction of samples whose arg-max prediction equals the labelled class.

    Args:
        predictions: Network outputs, shape (N, n_classes)
        labels: One-hot labels, shape (N, n_classes)

    Returns:
        Accuracy in [0, 1]
    """
    predictions = np.asarray(predictions)
    labels = np.asarray(labels)
    if predictions.shape != labels.shape:
        raise ValueError(f"shape mismatch: predictions {predictions.shape} vs labels {labels.shape}")
    if len(labels) == 0:
        raise ValueError("cannot score an empty dataset")

    true_classes = np.argmax(labels, axis=1)
    correct = np.sum(predicted_classes(predictions) == true_classes)
    return correct / len(labels)


def confusion_matrix(predictions, labels):
    """
    Count (true class, predicted class) pairs.

    Returns:
        Integer array of shape (n_classes, n_classes); entry [i, j] is the
        number of samples of class i predicted as class j
    """
    predictions = np.asarray(predictions)
    labels = np.asarray(labels)
    if predictions.shape != labels.shape:
        raise ValueError(f"shape mismatch: predictions {predictions.shape} vs labels {labels.shape}")

    n_classes = labels.shape[1]
    matrix = np.zeros((n_classes, n_classes), dtype=int)
    np.add.at(matrix, (np.argmax(labels, axis=1), predicted_classes(predictions)), 1)
    return matrix


# =============================================================================
# HOLD-OUT RUNS
# =============================================================================

def hold_out_run(config, train_data, valid_data, rng=None, log_every=0):
    """
    Train one network on `train_data` and score it on `valid_data`.

    Args:
        config: NetworkConfig
        train_data: (inputs, labels) used for training
        valid_data: (inputs, labels) used for scoring
        rng: numpy.random.Generator or seed for initialization

    Returns:
        (network, accuracy)
    """
    network = NeuralNetwork(config).train(*train_data, rng=rng, log_every=log_every)

    valid_inputs, valid_labels = valid_data
    predictions = network.predict(valid_inputs)
    return network, accuracy(predictions, valid_labels)


def average_hold_out_run(config, train_data, valid_data, num_runs, rng=None, log_every=0):
    """
    Average hold-out accuracy over `num_runs` independently trained networks.

    A single generator is shared across runs, so each network starts from
    different parameters while the whole sequence stays reproducible for a
    fixed seed.

    Returns:
        (last network, mean accuracy)
    """
    if num_runs < 1:
        raise ValueError(f"num_runs must be at least 1, got {num_runs}")

    rng = np.random.default_rng(rng)
    total = 0.0
    network = None

    for run in range(num_runs):
        network, run_accuracy = hold_out_run(config, train_data, valid_data,
                                             rng=rng, log_every=log_every)
        logger.debug("Run %d/%d  |  Accuracy: %.4f", run + 1, num_runs, run_accuracy)
        total += run_accuracy

    return network, total / num_runs


# =============================================================================
# REPORTING
# =============================================================================

def format_parameters(network):
    """Return the trained weights and biases as printable text."""
    if not network.is_trained:
        raise UntrainedModel("network has no trained parameters to report")

    names = ["w_hidden", "b_hidden", "w_out", "b_out"]
    blocks = []
    with np.printoptions(precision=4, suppress=True):
        for name, param in zip(names, network.get_params()):
            blocks.append(f"{name} =\n{param}")
    return "\n\n".join(blocks)
