"""
Word Sequence Counter

This module contains the SequenceCounter class, a forest of frequency tries
used to count word sequences. Sequences are sharded into sub-tries by the
first character of their first word, which bounds the fan-out of any single
root without changing lookup semantics.
"""

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from .trie import DEFAULT_DISCRIMINATOR, FrequencyNode, discriminator


logger = logging.getLogger(__name__)


class SequenceCounter:
    """
    Frequency trie forest for word sequences.

    Attributes:
        max_length: Longest sequence the counter is meant to hold
            (informational, lookups are not capped by it)
        roots: Discriminator key -> sub-trie root
    """

    def __init__(self, max_length: int):
        """
        Initialize an empty counter.

        Args:
            max_length: Longest sequence the counter is meant to hold
        """
        self.max_length = max_length
        self.roots: Dict[int, FrequencyNode] = {DEFAULT_DISCRIMINATOR: FrequencyNode()}

    def _root(self, word: str, create: bool = False) -> Optional[FrequencyNode]:
        key = discriminator(word)
        root = self.roots.get(key)
        if root is None and create:
            root = FrequencyNode()
            self.roots[key] = root
            logger.debug("Created root for discriminator %d", key)
        return root

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------
    def insert(self, sequence: Sequence[str], increment: int = 1) -> None:
        """
        Add a word sequence to the trie.

        Every node along the path gets its count raised by `increment`;
        nodes that do not exist yet are created with that count.

        Args:
            sequence: Words to insert
            increment: Amount to add to each node on the path
        """
        if len(sequence) == 0:
            raise ValueError("Cannot insert an empty sequence")
        if increment < 0:
            raise ValueError(f"increment must be non-negative, got {increment}")

        node = self._root(sequence[0], create=True)
        for word in sequence:
            child = node.children.get(word)
            if child is None:
                child = FrequencyNode(increment)
                node.children[word] = child
            else:
                child.set_count(child.count + increment)
            node = child

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def navigate(self, sequence: Sequence[str]) -> Optional[FrequencyNode]:
        """
        Follow the exact path of a sequence.

        Args:
            sequence: Words to look up

        Returns:
            The node the sequence ends at, or None if the path does not exist
        """
        if len(sequence) == 0:
            return None

        node = self._root(sequence[0])
        if node is None:
            return None

        for word in sequence:
            node = node.children.get(word)
            if node is None:
                return None
        return node

    @staticmethod
    def check_range(sequence: Sequence[str], start: int, end: int) -> None:
        """
        Validate a [start, end) range over a sequence.

        Raises:
            IndexError: If end < start, or start/end fall outside the sequence
        """
        length = len(sequence)
        if end < start:
            raise IndexError(f"End must be >= start. Found start={start} end={end}")
        if start >= 0 and end <= length:
            return
        if start < 0 or start >= length:
            raise IndexError(
                f"Start must be between 0 and the length of the sequence. "
                f"Found start={start} length={length}"
            )
        if end < 0 or end > length:
            raise IndexError(
                f"End must be between 0 and the length of the sequence. "
                f"Found end={end} length={length}"
            )

    def _range(self, sequence: Sequence[str], start: Optional[int],
               end: Optional[int]) -> Tuple[int, int]:
        start = 0 if start is None else start
        end = len(sequence) if end is None else end
        self.check_range(sequence, start, end)
        return start, end

    def _probe(self, sequence: Sequence[str], start: Optional[int],
               end: Optional[int]) -> Optional[FrequencyNode]:
        # An empty range probes the single word at `start`
        start, end = self._range(sequence, start, end)
        if start == end:
            return self.navigate(sequence[start:start + 1])
        return self.navigate(sequence[start:end])

    def count(self, sequence: Sequence[str], start: Optional[int] = None,
              end: Optional[int] = None) -> int:
        """
        Number of times the sequence (or its [start, end) slice) was inserted.

        Returns 0 for sequences that were never seen.
        """
        start, end = self._range(sequence, start, end)
        node = self.navigate(sequence[start:end])
        return node.count if node is not None else 0

    def context_count(self, sequence: Sequence[str], start: Optional[int] = None,
                      end: Optional[int] = None) -> int:
        """
        Total number of one-word continuations observed after a prefix.

        When start == end the single word at `start` is used as the prefix.

        Args:
            sequence: Sequence of words
            start: Start position of the prefix
            end: End position of the prefix (exclusive)

        Returns:
            Sum of the counts of the prefix node's children, 0 if unseen
        """
        node = self._probe(sequence, start, end)
        return node.context_count() if node is not None else 0

    def num_following(self, sequence: Sequence[str], start: Optional[int] = None,
                      end: Optional[int] = None) -> int:
        """
        Number of distinct words observed after a prefix.

        Uses the same prefix rule as `context_count`.
        """
        node = self._probe(sequence, start, end)
        return node.num_following() if node is not None else 0

    def extension_count(self, sequence: Sequence[str], start: Optional[int] = None,
                        end: Optional[int] = None) -> int:
        """Sum of the counts of all one-word extensions of the exact slice."""
        start, end = self._range(sequence, start, end)
        node = self.navigate(sequence[start:end])
        return node.context_count() if node is not None else 0

    def following(self, sequence: Sequence[str]) -> Set[str]:
        """
        Words observed directly after a sequence.

        Args:
            sequence: Sequence of words

        Returns:
            Set of following words, empty if the sequence was seen but never
            continued

        Raises:
            ValueError: If the sequence was never inserted
        """
        node = self.navigate(sequence)
        if node is None:
            raise ValueError(f"Sequence not found: {' '.join(sequence)!r}")
        return set(node.children)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def iter_nodes(self) -> Iterator[FrequencyNode]:
        """Iterate over every non-root node in the forest."""
        stack: List[FrequencyNode] = list(self.roots.values())
        while stack:
            node = stack.pop()
            for child in node.children.values():
                yield child
                stack.append(child)

    def node_count(self) -> int:
        return sum(1 for _ in self.iter_nodes())

    def total_count(self) -> int:
        """Sum of the counts of every first word, i.e. total insertions."""
        return sum(root.context_count() for root in self.roots.values())

    def stats(self) -> Dict:
        return {
            'roots': len(self.roots),
            'first_words': len(self),
            'nodes': self.node_count(),
            'total_sequences': self.total_count(),
        }

    def __len__(self) -> int:
        return sum(len(root.children) for root in self.roots.values())

    def __eq__(self, other) -> bool:
        if not isinstance(other, SequenceCounter):
            return NotImplemented
        if self.max_length != other.max_length or self.roots.keys() != other.roots.keys():
            return False
        pairs = [(self.roots[key], other.roots[key]) for key in self.roots]
        while pairs:
            left, right = pairs.pop()
            if left.count != right.count or left.children.keys() != right.children.keys():
                return False
            pairs.extend((left.children[w], right.children[w]) for w in left.children)
        return True
