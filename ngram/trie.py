"""
Frequency Trie Nodes

This module contains the trie vertex used by the sequence counter. Each
node keeps how many times the word sequence ending at it was inserted and
owns the nodes for every one-word extension of that sequence.
"""

import unicodedata
from typing import Dict


# Key of the root shared by words that do not start with a letter or digit
DEFAULT_DISCRIMINATOR = -1


def discriminator(word: str) -> int:
    """
    Map a word to the key of the sub-trie that stores sequences starting with it.

    ASCII digits map to their value (0-9), ASCII letters map to 10-35
    regardless of case, other decimal digits map to their digit value and
    everything else shares the default key.

    Args:
        word: First word of a sequence

    Returns:
        Integer discriminator key
    """
    if not word:
        return DEFAULT_DISCRIMINATOR

    ch = word[0]
    if ch.isascii() and ch.isalpha():
        return ord(ch.lower()) - ord('a') + 10

    return unicodedata.digit(ch, DEFAULT_DISCRIMINATOR)


class FrequencyNode:
    """
    A single trie vertex.

    Attributes:
        count: Number of insertions that ended at or passed through this node
        children: Next word -> child node
    """

    __slots__ = ("count", "children")

    def __init__(self, count: int = 0):
        self.count = count
        self.children: Dict[str, 'FrequencyNode'] = {}

    def set_count(self, count: int) -> None:
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        self.count = count

    def context_count(self) -> int:
        """
        Sum of the counts of all direct children.

        This is the total number of one-word continuations observed after
        the sequence ending at this node. A leaf has a context count of 0.
        """
        return sum(child.count for child in self.children.values())

    def num_following(self) -> int:
        """Number of distinct words observed after this node."""
        return len(self.children)

    def is_leaf(self) -> bool:
        return not self.children

    def __repr__(self) -> str:
        return f"FrequencyNode(count={self.count}, children={len(self.children)})"
