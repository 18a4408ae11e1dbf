"""
Statement Loading

This module turns raw statements into word sequences for training. The
model does no normalization of its own: a statement is split on whitespace
and every token is kept as-is.
"""

from pathlib import Path
from typing import Iterator, List, Union


# Small demo corpus used when no corpus file is given
SAMPLE_STATEMENTS = [
    "I am a super hero",
    "I am not stupid",
    "He is not stupid",
    "She is not stupid clever",
    "She is stupid",
    "She is stupid but clever",
    "She is x but stupid",
    "She is smart stupid but clever",
    "She is x stupid but clever",
    "She is y stupid but clever",
    "She may be stupid but clever",
    "is y dont know but clever",
    "is stupid but who",
]


def split_statement(statement: str) -> List[str]:
    """Split a raw statement into words on whitespace."""
    return statement.split()


def read_statements(path: Union[str, Path], encoding: str = "utf-8") -> Iterator[List[str]]:
    """
    Read a corpus file with one statement per line.

    Args:
        path: Path to a text file
        encoding: File encoding

    Yields:
        Word sequences, skipping blank lines
    """
    path = Path(path)

    with open(path, 'r', encoding=encoding) as f:
        for line in f:
            words = split_statement(line)
            if words:
                yield words


def sample_sequences() -> List[List[str]]:
    """Return the built-in sample statements as word sequences."""
    return [split_statement(s) for s in SAMPLE_STATEMENTS]
