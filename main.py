#!/usr/bin/env python3
"""
Single Hidden Layer Network - Main Entry Point

Two modes:

1. Toy run (no --train given): fit the 3-sample toy dataset and report the
   learned parameters plus the squared error before and after training.

2. Hold-out run (--train and --test given): train on one CSV, score on the
   other, report accuracy and a confusion matrix.

Usage:
    python main.py
    python main.py --train data/train.csv --test data/test.csv --runs 10
"""

import argparse
import copy
import dataclasses
import logging
import sys

import numpy as np

from config import CONFIG
from neuralnet import NetworkConfig, NeuralNetError, NeuralNetwork
from train import average_hold_out_run, confusion_matrix, format_parameters, mean_squared_error
from utils.data import TOY_INPUTS, TOY_LABELS, load_csv
from utils.logger import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Train a single hidden layer network with backpropagation.")
    parser.add_argument("--train", help="training CSV (header row, features then one-hot labels)")
    parser.add_argument("--test", help="validation CSV, same layout as --train")
    parser.add_argument("--inputs", type=int, default=CONFIG["input_neurons"],
                        help="number of feature columns")
    parser.add_argument("--outputs", type=int, default=CONFIG["output_neurons"],
                        help="number of one-hot label columns")
    parser.add_argument("--hidden", type=int, default=CONFIG["hidden_neurons"],
                        help="hidden layer width")
    parser.add_argument("--epochs", type=int, default=CONFIG["num_epochs"])
    parser.add_argument("--learning-rate", type=float, default=CONFIG["learning_rate"])
    parser.add_argument("--runs", type=int, default=CONFIG["num_runs"],
                        help="hold-out runs to average accuracy over")
    parser.add_argument("--seed", type=int, default=CONFIG["seed"])
    parser.add_argument("--log-level", default=CONFIG["log_level"], type=str.upper,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-every", type=int, default=CONFIG["log_every"])
    parser.add_argument("--show-params", action="store_true",
                        help="log the trained weights and biases")
    args = parser.parse_args(argv)

    if (args.train is None) != (args.test is None):
        parser.error("--train and --test must be given together")

    return args


def build_config(args, **overrides):
    """Apply command-line values on top of CONFIG."""
    config = CONFIG.copy()
    config["input_neurons"] = args.inputs
    config["output_neurons"] = args.outputs
    config["hidden_neurons"] = args.hidden
    config["num_epochs"] = args.epochs
    config["learning_rate"] = args.learning_rate
    config.update(overrides)
    return NetworkConfig.from_dict(config)


def run_toy(args):
    """Fit the toy dataset and compare squared error before and after."""
    config = build_config(args, input_neurons=TOY_INPUTS.shape[1],
                          output_neurons=TOY_LABELS.shape[1])
    rng = np.random.default_rng(args.seed)

    # Same draws, no epochs: the network as it was before training
    initial = NeuralNetwork(dataclasses.replace(config, num_epochs=0))
    initial.train(TOY_INPUTS, TOY_LABELS, rng=copy.deepcopy(rng))

    network = NeuralNetwork(config).train(TOY_INPUTS, TOY_LABELS, rng=rng,
                                          log_every=args.log_every)

    before = mean_squared_error(initial.predict(TOY_INPUTS), TOY_LABELS)
    after = mean_squared_error(network.predict(TOY_INPUTS), TOY_LABELS)

    logger.info("Trained %r for %d epochs", network, config.num_epochs)
    logger.info("MSE before training: %.6f", before)
    logger.info("MSE after training:  %.6f", after)
    logger.info("Parameters:\n%s", format_parameters(network))


def run_hold_out(args):
    """Train on --train, score on --test."""
    config = build_config(args)

    train_data = load_csv(args.train, n_inputs=config.input_neurons,
                          n_outputs=config.output_neurons)
    valid_data = load_csv(args.test, n_inputs=config.input_neurons,
                          n_outputs=config.output_neurons)
    logger.info("Loaded %d training and %d validation samples",
                len(train_data[0]), len(valid_data[0]))

    network, mean_accuracy = average_hold_out_run(
        config, train_data, valid_data, args.runs, rng=args.seed,
        log_every=args.log_every)

    logger.info("Accuracy = %0.2f (%d run%s)", mean_accuracy, args.runs,
                "" if args.runs == 1 else "s")
    logger.info("Confusion matrix of last run (rows = true, cols = predicted):\n%s",
                confusion_matrix(network.predict(valid_data[0]), valid_data[1]))

    if args.show_params:
        logger.info("Parameters:\n%s", format_parameters(network))


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        if args.train is None:
            run_toy(args)
        else:
            run_hold_out(args)
    except (NeuralNetError, ValueError, OSError) as e:
        logger.error("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
