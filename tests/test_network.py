import dataclasses
import logging
import math

import numpy as np
import pytest

from neuralnet import (
    ActivationFunction, DimensionMismatch, NetworkConfig, NeuralNetwork,
    UntrainedModel, predict, sigmoid, train)
from neuralnet.activations import numerical_gradient
from utils.data import TOY_INPUTS, TOY_LABELS, one_hot


def make_config(**overrides):
    params = dict(input_neurons=4, hidden_neurons=3, output_neurons=3,
                  num_epochs=200, learning_rate=0.1)
    params.update(overrides)
    return NetworkConfig(**params)


@pytest.fixture
def dataset():
    random_state = np.random.default_rng(1234)
    x = random_state.random((12, 4))
    y = one_hot(random_state.integers(0, 3, size=12), 3)
    return x, y


def forward(x, w_hidden, b_hidden, w_out, b_out):
    hidden = sigmoid(x @ w_hidden + b_hidden)
    return sigmoid(hidden @ w_out + b_out)


# =============================================================================
# CONFIG
# =============================================================================

@pytest.mark.parametrize("field,value", [
    ("input_neurons", 0),
    ("hidden_neurons", -1),
    ("output_neurons", 2.5),
    ("num_epochs", -1),
    ("learning_rate", 0.0),
    ("learning_rate", -0.3),
])
def test_config_rejects_bad_values(field, value):
    with pytest.raises(ValueError):
        make_config(**{field: value})


def test_config_allows_zero_epochs():
    assert make_config(num_epochs=0).num_epochs == 0


def test_config_is_immutable():
    config = make_config()
    with pytest.raises(AttributeError):
        config.learning_rate = 1.0


def test_config_from_dict():
    from config import CONFIG

    config = NetworkConfig.from_dict(CONFIG)
    assert config.input_neurons == CONFIG["input_neurons"]
    assert config.num_epochs == CONFIG["num_epochs"]
    assert config.activation.name == "sigmoid"


# =============================================================================
# UNTRAINED GUARD
# =============================================================================

def test_new_network_is_untrained():
    network = NeuralNetwork(make_config())
    assert not network.is_trained
    assert network.get_params() == [None, None, None, None]
    assert "untrained" in repr(network)


@pytest.mark.parametrize("x", [np.zeros((2, 4)), np.zeros((5, 7)), None])
def test_predict_untrained(x):
    with pytest.raises(UntrainedModel):
        NeuralNetwork(make_config()).predict(x)


# =============================================================================
# SHAPES
# =============================================================================

def test_init_param_shapes():
    params = NeuralNetwork(make_config(hidden_neurons=5)).init_params(0)
    assert [p.shape for p in params] == [(4, 5), (1, 5), (5, 3), (1, 3)]
    for p in params:
        assert np.all((p >= 0) & (p < 1))


@pytest.mark.parametrize("hidden,rows", [(1, 1), (3, 7), (8, 20)])
def test_predict_shape_and_range(dataset, hidden, rows):
    x, y = dataset
    network = NeuralNetwork(make_config(hidden_neurons=hidden)).train(x, y, rng=0)

    output = network.predict(np.random.default_rng(5).random((rows, 4)))

    assert output.shape == (rows, 3)
    assert np.all((output > 0) & (output < 1))


def test_trained_param_shapes(dataset):
    network = NeuralNetwork(make_config()).train(*dataset, rng=0)
    assert network.is_trained
    assert network.w_hidden.shape == (4, 3)
    assert network.b_hidden.shape == (1, 3)
    assert network.w_out.shape == (3, 3)
    assert network.b_out.shape == (1, 3)
    assert network.count_parameters() == 4 * 3 + 3 + 3 * 3 + 3


# =============================================================================
# DIMENSION GUARD
# =============================================================================

@pytest.mark.parametrize("x_shape,y_shape", [
    ((6, 5), (6, 3)),   # too many input columns
    ((6, 3), (6, 3)),   # too few input columns
    ((6, 4), (6, 2)),   # wrong label columns
    ((6, 4), (5, 3)),   # row count mismatch
])
def test_train_dimension_mismatch(x_shape, y_shape):
    network = NeuralNetwork(make_config())
    with pytest.raises(DimensionMismatch):
        network.train(np.zeros(x_shape), np.zeros(y_shape))
    assert not network.is_trained


def test_train_rejects_vectors():
    with pytest.raises(DimensionMismatch):
        NeuralNetwork(make_config(output_neurons=1)).train(np.zeros((3, 4)), np.zeros(3))


def test_failed_train_keeps_previous_parameters(dataset):
    network = NeuralNetwork(make_config()).train(*dataset, rng=0)
    before = [p.copy() for p in network.get_params()]

    with pytest.raises(DimensionMismatch):
        network.train(np.zeros((4, 4)), np.zeros((3, 3)))

    for old, new in zip(before, network.get_params()):
        np.testing.assert_array_equal(old, new)


def test_predict_dimension_mismatch(dataset):
    network = NeuralNetwork(make_config()).train(*dataset, rng=0)
    with pytest.raises(DimensionMismatch):
        network.predict(np.zeros((2, 5)))


# =============================================================================
# TRAINING BEHAVIOUR
# =============================================================================

def test_zero_epochs_keeps_initial_parameters(dataset):
    x, y = dataset
    network = NeuralNetwork(make_config(num_epochs=0)).train(x, y, rng=np.random.default_rng(7))

    # Same seed, same draws
    expected = NeuralNetwork(make_config()).init_params(np.random.default_rng(7))
    for param, init in zip(network.get_params(), expected):
        np.testing.assert_array_equal(param, init)

    np.testing.assert_allclose(network.predict(x), forward(x, *expected))


def test_training_reduces_error_on_toy_data():
    config = make_config(input_neurons=4, hidden_neurons=3, output_neurons=1,
                         num_epochs=5000, learning_rate=0.3)

    improved = 0
    for seed in range(5):
        initial = NeuralNetwork(config).init_params(seed)
        before = np.mean((TOY_LABELS - forward(TOY_INPUTS, *initial)) ** 2)

        network = NeuralNetwork(config).train(TOY_INPUTS, TOY_LABELS, rng=seed)
        after = np.mean((TOY_LABELS - network.predict(TOY_INPUTS)) ** 2)

        improved += after < before

    assert improved >= 4


def test_seeded_training_is_reproducible(dataset):
    x, y = dataset
    config = make_config()

    first = NeuralNetwork(config).train(x, y, rng=np.random.default_rng(42))
    second = NeuralNetwork(config).train(x, y, rng=np.random.default_rng(42))

    for a, b in zip(first.get_params(), second.get_params()):
        np.testing.assert_array_equal(a, b)
    np.testing.assert_array_equal(first.predict(x), second.predict(x))


def test_different_seeds_differ(dataset):
    x, y = dataset
    first = NeuralNetwork(make_config()).train(x, y, rng=1)
    second = NeuralNetwork(make_config()).train(x, y, rng=2)
    assert not np.array_equal(first.w_hidden, second.w_hidden)


def test_training_does_not_modify_data(dataset):
    x, y = dataset
    x_copy, y_copy = x.copy(), y.copy()

    network = NeuralNetwork(make_config()).train(x, y, rng=0)
    network.predict(x)

    np.testing.assert_array_equal(x, x_copy)
    np.testing.assert_array_equal(y, y_copy)


def test_single_epoch_matches_numerical_gradient(dataset):
    """One update must be a step of -lr * grad of 1/2 * ||Y - output||^2."""
    x, y = dataset
    lr = 0.05
    config = make_config(num_epochs=1, learning_rate=lr)

    initial = NeuralNetwork(config).init_params(3)
    trained = NeuralNetwork(config).train(x, y, rng=3).get_params()

    for i in range(4):
        params = [p.copy() for p in initial]

        def loss(value):
            params[i] = value
            return 0.5 * np.sum((y - forward(x, *params)) ** 2)

        grad = numerical_gradient(loss, initial[i].copy())
        step = (initial[i] - trained[i]) / lr

        np.testing.assert_allclose(step, grad, atol=1e-6)


def test_pluggable_activation(dataset):
    x, y = dataset
    tanh = ActivationFunction(np.tanh, lambda out: 1.0 - out ** 2, name="tanh")
    network = NeuralNetwork(make_config(activation=tanh)).train(x, y, rng=0)

    output = network.predict(x)
    assert np.all(np.abs(output) < 1)
    assert "tanh" in repr(network)


def test_integer_inputs_are_accepted():
    labels = np.array([[1], [1], [0]])
    network = NeuralNetwork(make_config(output_neurons=1, num_epochs=10))
    network.train(TOY_INPUTS.astype(int), labels, rng=0)
    assert network.predict(TOY_INPUTS.astype(int)).shape == (3, 1)


def test_progress_is_logged(dataset, caplog):
    with caplog.at_level(logging.DEBUG, logger="neuralnet.network"):
        NeuralNetwork(make_config(num_epochs=10)).train(*dataset, rng=0, log_every=5)

    epochs = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Epoch")]
    # Epochs 0 and 5, plus the final epoch
    assert len(epochs) == 3
    assert epochs[-1].startswith("Epoch 9/10")


def test_module_level_train_and_predict(dataset):
    x, y = dataset
    network = train(make_config(), x, y, rng=0)

    assert isinstance(network, NeuralNetwork)
    np.testing.assert_array_equal(predict(network, x), network.predict(x))


def test_scalar_only_activation_matches_numpy_sigmoid():
    scalar_sigmoid = ActivationFunction(lambda v: 1.0 / (1.0 + math.exp(-v)),
                                        lambda y: y * (1.0 - y), name="math-sigmoid")
    config = make_config(output_neurons=1, num_epochs=200, learning_rate=0.3)

    scalar_net = NeuralNetwork(dataclasses.replace(config, activation=scalar_sigmoid))
    scalar_net.train(TOY_INPUTS, TOY_LABELS, rng=0)
    numpy_net = NeuralNetwork(config).train(TOY_INPUTS, TOY_LABELS, rng=0)

    for a, b in zip(scalar_net.get_params(), numpy_net.get_params()):
        np.testing.assert_allclose(a, b, rtol=1e-9, atol=1e-12)
    np.testing.assert_allclose(scalar_net.predict(TOY_INPUTS),
                               numpy_net.predict(TOY_INPUTS), rtol=1e-9)


def test_parameter_count_is_logged(dataset, caplog):
    network = NeuralNetwork(make_config(num_epochs=1))
    with caplog.at_level(logging.DEBUG, logger="neuralnet.network"):
        network.train(*dataset, rng=0)

    assert any("(%d parameters)" % network.count_parameters() in r.getMessage()
               for r in caplog.records)
