"""
N-gram Language Model Package

A trie-backed n-gram language model with recursive linear interpolation
smoothing across n-gram orders.
"""

from .trie import FrequencyNode, discriminator
from .counter import SequenceCounter
from .model import LanguageModel
from .smoothing import LogTransform
from .corpus import split_statement, read_statements

__version__ = "0.1.0"
__all__ = [
    "FrequencyNode", "SequenceCounter", "LanguageModel", "LogTransform",
    "discriminator", "split_statement", "read_statements",
]
