# Data loading and logging helpers used around the network engine

from .data import TOY_INPUTS, TOY_LABELS, load_csv, one_hot
from .logger import setup_logging
