"""
Configuration for the single hidden layer network.

Defaults match the iris-style datasets this project trains on: 4 numeric
features and 3 one-hot encoded classes.
"""

CONFIG = {
    # ==========================================================================
    # MODEL ARCHITECTURE
    # ==========================================================================

    # Number of input features (columns of the input matrix)
    "input_neurons": 4,

    # Width of the single hidden layer
    # Too few = underfitting, too many = slower and easier to overfit
    "hidden_neurons": 3,

    # Number of outputs, one per class in the one-hot labels
    "output_neurons": 3,

    # ==========================================================================
    # TRAINING HYPERPARAMETERS
    # ==========================================================================

    # Full passes over the training data
    # There is no early stopping, every epoch is always run
    "num_epochs": 5000,

    # Scale of each gradient step
    # Too high = oscillation, too low = slow convergence
    "learning_rate": 0.3,

    # ==========================================================================
    # REPRODUCIBILITY
    # ==========================================================================

    # Seed for parameter initialization
    # None = seeded from OS entropy, runs differ from each other
    "seed": None,

    # ==========================================================================
    # EVALUATION
    # ==========================================================================

    # Number of independently trained networks to average accuracy over
    "num_runs": 1,

    # ==========================================================================
    # LOGGING
    # ==========================================================================

    "log_level": "INFO",

    # Epochs between training progress lines (logged at DEBUG), 0 disables
    "log_every": 500,
}
