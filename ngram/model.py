"""
N-gram Language Model Implementation

This module contains the LanguageModel class: it counts trained word
sequences in a SequenceCounter and estimates smoothed next-word scores by
recursive linear interpolation across n-gram orders 1..N.
"""

import json
import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union
from pathlib import Path

from .counter import SequenceCounter
from .corpus import split_statement
from .smoothing import LogTransform, get_log_transform, interpolation_weight, interpolate, to_log_domain
from . import snapshot


logger = logging.getLogger(__name__)

DEFAULT_SEQUENCE_LENGTH = 15

Statement = Union[str, Sequence[str]]


class LanguageModel:
    """
    Interpolated N-gram Language Model

    Training pushes word sequences into a frequency trie forest; estimation
    blends the evidence of every usable context length, starting from a
    uniform floor and weighting each order by how much data backs it.

    Attributes:
        counter: Trie forest holding the trained sequence counts
        log_transform: Transform used to turn conditional estimates into
            log-domain scores
    """

    def __init__(self, ngram_order: int = 3, lambda_factor: Optional[float] = None,
                 sequence_length: int = DEFAULT_SEQUENCE_LENGTH,
                 log_transform: Union[str, LogTransform] = LogTransform.LOG2):
        """
        Initialize the language model.

        Args:
            ngram_order: N, the longest sequence (context + word) considered
            lambda_factor: Smoothing strength (default: ngram_order)
            sequence_length: Assumed sequence length; the uniform floor
                estimate is 1 / sequence_length
            log_transform: Log-domain transform for conditional estimates
        """
        if ngram_order < 1:
            raise ValueError("ngram_order must be at least 1")

        self._ngram_order = ngram_order
        self._lambda_factor = float(ngram_order if lambda_factor is None else lambda_factor)
        if self._lambda_factor < 0:
            raise ValueError("lambda_factor must be non-negative")

        self.log_transform = get_log_transform(log_transform)
        self.counter = SequenceCounter(ngram_order)

        self._sequence_length = DEFAULT_SEQUENCE_LENGTH
        self._uniform_estimate = 1.0 / DEFAULT_SEQUENCE_LENGTH
        self.sequence_length = sequence_length

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    @property
    def ngram_order(self) -> int:
        return self._ngram_order

    @property
    def lambda_factor(self) -> float:
        return self._lambda_factor

    @property
    def sequence_length(self) -> int:
        return self._sequence_length

    @sequence_length.setter
    def sequence_length(self, value: int) -> None:
        if value < 1:
            raise ValueError(f"sequence_length must be at least 1, got {value}")
        self._sequence_length = value
        self._uniform_estimate = 1.0 / value

    @property
    def uniform_estimate(self) -> float:
        """Probability floor used when a context has no training data."""
        return self._uniform_estimate

    @uniform_estimate.setter
    def uniform_estimate(self, value: float) -> None:
        if not 0.0 < value <= 1.0:
            raise ValueError(f"uniform_estimate must be in (0, 1], got {value}")
        self._uniform_estimate = value

    @property
    def is_trained(self) -> bool:
        return len(self.counter) > 0

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------
    def train(self, statement: Statement, increment: int = 1, windowed: bool = False) -> int:
        """
        Train the model on a single statement.

        Only the full sequence is inserted, so prefix counts are relative to
        the statement's first word. With `windowed`, every window of at most
        N words starting after the first word is inserted as well.

        Args:
            statement: Raw text (split on whitespace) or a sequence of words
            increment: Amount added to every count along the inserted paths
            windowed: Also insert the N-word windows of the statement

        Returns:
            Number of sequences inserted
        """
        if isinstance(statement, str):
            sequence = split_statement(statement)
        else:
            sequence = list(statement)

        if not sequence:
            logger.debug("Skipping empty statement")
            return 0

        self.counter.insert(sequence, increment)
        inserted = 1

        if windowed:
            for i in range(1, len(sequence)):
                self.counter.insert(sequence[i:i + self._ngram_order], increment)
                inserted += 1

        logger.debug("Trained %r (+%d, %d sequences)", " ".join(sequence), increment, inserted)
        return inserted

    def train_many(self, statements: Iterable[Statement], increment: int = 1,
                   windowed: bool = False,
                   progress_callback: Optional[Callable[[int, int], None]] = None) -> int:
        """
        Train the model on many statements.

        Args:
            statements: Raw texts or word sequences
            increment: Amount added per statement
            windowed: Also insert the N-word windows of each statement
            progress_callback: Optional callback(current, total) for progress

        Returns:
            Number of sequences inserted
        """
        statements = list(statements)
        total = len(statements)
        inserted = 0

        for idx, statement in enumerate(statements):
            inserted += self.train(statement, increment=increment, windowed=windowed)

            if progress_callback and (idx + 1) % 100 == 0:
                progress_callback(idx + 1, total)

        if progress_callback:
            progress_callback(total, total)

        logger.info("Trained %d statements (%d sequences inserted)", total, inserted)
        return inserted

    # ------------------------------------------------------------------
    # Estimation
    # ------------------------------------------------------------------
    def probability(self, context: Sequence[str], word: str) -> float:
        """
        Score of `word` following `context`.

        This is a log-domain score (the ML estimate of the extended
        sequence), not a probability in [0, 1].
        """
        return self.ml_estimate(list(context) + [word])

    def ml_estimate(self, sequence: Sequence[str], start: int = 0,
                    end: Optional[int] = None) -> float:
        """
        Log-domain joint estimate of a word sequence.

        Summing log estimates replaces the product of the per-position
        conditional estimates, which would underflow on long sequences:
        p1 * p2 * p3 -> log p1 + log p2 + log p3

        Args:
            sequence: Sequence of words
            start: Start position in the sequence
            end: End position in the sequence (default: its length)

        Returns:
            Sum of the log conditional estimates of positions start+1..end
        """
        if end is None:
            end = len(sequence)
        self.counter.check_range(sequence, start, end)

        total = 0.0
        for i in range(start + 1, end + 1):
            total += self.log2_conditional_estimate(sequence, start, i)
        return total

    def log2_conditional_estimate(self, sequence: Sequence[str], start: int, end: int) -> float:
        """Log-domain conditional estimate of the word at end - 1."""
        return to_log_domain(self.conditional_estimate(sequence, start, end), self.log_transform)

    def conditional_estimate(self, sequence: Sequence[str], start: int, end: int,
                             max_order: Optional[int] = None,
                             lambda_factor: Optional[float] = None) -> float:
        """
        Smoothed estimate of the word at end - 1 given the words before it.

        Starts from the uniform floor and, from the shortest context to the
        longest one allowed by the order, interpolates the relative
        frequency of each context with the running estimate. Orders whose
        context was never observed leave the estimate unchanged.

        Args:
            sequence: Sequence of words
            start: Start position in the sequence
            end: End position in the sequence (the word at end - 1 is estimated)
            max_order: Cap on the n-gram order (default: ngram_order)
            lambda_factor: Smoothing strength (default: the model's)

        Returns:
            Conditional estimate, 0.0 for an empty range
        """
        if end < start:
            raise ValueError(f"Conditional estimates require end >= start, got start={start} end={end}")
        if end == start:
            return 0.0

        if max_order is None:
            max_order = self._ngram_order
        if lambda_factor is None:
            lambda_factor = self._lambda_factor
        elif lambda_factor < 0:
            raise ValueError(f"lambda_factor must be non-negative, got {lambda_factor}")

        order = min(max_order, self._ngram_order)
        context_start = max(start, end - order)
        context_end = end - 1

        estimate = self._uniform_estimate

        for cursor in range(context_end, context_start - 1, -1):
            context_count = self.counter.context_count(sequence, cursor, context_end)
            if context_count == 0:
                continue

            # Distinct continuations of the whole queried range, for every order
            context_size = self.counter.num_following(sequence, start, end)
            count = self.counter.count(sequence, cursor, end)

            weight = interpolation_weight(context_count, context_size, lambda_factor)
            estimate = interpolate(count, context_count, weight, estimate)

            logger.debug(
                "[%s] count=%d context_count=%d size=%d lambda=%.4f estimate=%.6f",
                " ".join(sequence[cursor:end]), count, context_count,
                context_size, weight, estimate
            )

        return estimate

    def simple_estimate(self, sequence: Sequence[str]) -> float:
        """
        Unsmoothed estimate: continuations observed after the sequence
        relative to how often the sequence itself was seen.
        """
        count = self.counter.count(sequence)
        if count == 0:
            return 0.0
        return self.counter.extension_count(sequence) / count

    def most_probable(self, context: Sequence[str],
                      top_k: Optional[int] = None) -> List[Tuple[str, float]]:
        """
        Rank the words observed after a context.

        Args:
            context: Sequence of preceding words
            top_k: Number of top words to return (default: all)

        Returns:
            List of (word, score) tuples, highest score first, ties broken
            alphabetically; empty if the context was never trained
        """
        context = list(context)
        if self.counter.navigate(context) is None:
            return []

        scored = []
        for word in self.counter.following(context):
            score = self.probability(context, word)
            logger.debug("word: %s, score: %.6f", word, score)
            scored.append((word, score))

        scored.sort(key=lambda x: (-x[1], x[0]))
        if top_k is not None:
            scored = scored[:top_k]
        return scored

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def stats(self) -> Dict:
        counter_stats = self.counter.stats()
        return {
            'n': self._ngram_order,
            'lambda_factor': self._lambda_factor,
            'sequence_length': self._sequence_length,
            'uniform_estimate': self._uniform_estimate,
            'log_transform': self.log_transform.value,
            'roots': counter_stats['roots'],
            'nodes': counter_stats['nodes'],
            'total_sequences': counter_stats['total_sequences'],
        }

    def __repr__(self) -> str:
        return (f"LanguageModel(ngram_order={self._ngram_order}, "
                f"lambda_factor={self._lambda_factor}, "
                f"sequence_length={self._sequence_length})")

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict:
        """Encode the model as a versioned snapshot document."""
        config = {
            'ngram_order': self._ngram_order,
            'lambda_factor': self._lambda_factor,
            'sequence_length': self._sequence_length,
            'uniform_estimate': self._uniform_estimate,
            'log_transform': self.log_transform.value,
        }
        return snapshot.encode(config, self.counter)

    @classmethod
    def from_dict(cls, data: Dict) -> 'LanguageModel':
        """Rebuild a model from a snapshot document."""
        config, counter = snapshot.decode(data)

        model = cls(
            ngram_order=config['ngram_order'],
            lambda_factor=config['lambda_factor'],
            sequence_length=config['sequence_length'],
            log_transform=config['log_transform']
        )
        model.uniform_estimate = config['uniform_estimate']
        model.counter = counter
        return model

    def save(self, path: Union[str, Path]) -> None:
        """Save the model to a JSON file."""
        path = Path(path)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, ensure_ascii=False)

        logger.info("Saved model to %s", path)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'LanguageModel':
        """Load a model from a JSON file written by `save`."""
        path = Path(path)

        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        model = cls.from_dict(data)
        logger.info("Loaded model from %s", path)
        return model
