"""
Data Utilities for Network Training

This module handles:
- Loading CSV datasets into input and one-hot label matrices
- One-hot encoding of class indices
- A tiny toy dataset for smoke runs

CSV layout: one header row, then one record per sample. The first
`n_inputs` fields are numeric features, the remaining `n_outputs` fields are
the one-hot encoded class, e.g. for iris:

    sepal_length,sepal_width,petal_length,petal_width,setosa,virginica,versicolor
    0.30,0.58,0.08,0.04,1.0,0.0,0.0
"""

import csv
import logging

import numpy as np

logger = logging.getLogger(__name__)


# =============================================================================
# TOY DATA
# =============================================================================
# Three samples with four binary features. The first two share a label, so a
# small network can fit this in a few thousand epochs.

TOY_INPUTS = np.array([
    [1.0, 0.0, 1.0, 0.0],
    [1.0, 0.0, 1.0, 1.0],
    [0.0, 1.0, 0.0, 1.0],
])

TOY_LABELS = np.array([
    [1.0],
    [1.0],
    [0.0],
])


def one_hot(indices, n_classes):
    """
    Convert class indices to one-hot rows.

    Args:
        indices: Sequence of integer class indices in [0, n_classes)
        n_classes: Number of columns

    Returns:
        Array of shape (len(indices), n_classes)
    """
    indices = np.asarray(indices, dtype=int)
    if indices.size and (indices.min() < 0 or indices.max() >= n_classes):
        raise ValueError(f"class indices must lie in [0, {n_classes})")

    labels = np.zeros((len(indices), n_classes))
    labels[np.arange(len(indices)), indices] = 1.0
    return labels


# =============================================================================
# CSV LOADING
# =============================================================================

def load_csv(path, n_inputs=4, n_outputs=3, skip_header=True):
    """
    Load a CSV dataset into input and label matrices.

    Args:
        path: Path to the CSV file
        n_inputs: Number of leading feature columns
        n_outputs: Number of trailing one-hot label columns
        skip_header: Whether the first row is a header

    Returns:
        inputs: Array of shape (num_samples, n_inputs)
        labels: Array of shape (num_samples, n_outputs)

    Raises:
        ValueError: on a record with the wrong number of fields, a
                    non-numeric field, or a file with no data rows
    """
    n_fields = n_inputs + n_outputs
    rows = []

    with open(path, newline='') as f:
        reader = csv.reader(f)
        for record in reader:
            if skip_header and reader.line_num == 1:
                continue
            # Tolerate blank lines, e.g. a trailing newline
            if not record:
                continue

            if len(record) != n_fields:
                raise ValueError(
                    f"{path}:{reader.line_num}: expected {n_fields} fields, got {len(record)}")
            try:
                rows.append([float(val) for val in record])
            except ValueError as e:
                raise ValueError(f"{path}:{reader.line_num}: {e}") from e

    if not rows:
        raise ValueError(f"{path}: no data rows")

    data = np.array(rows)
    inputs = data[:, :n_inputs]
    labels = data[:, n_inputs:]

    logger.debug("Loaded %d samples from %s", len(rows), path)

    return inputs, labels
