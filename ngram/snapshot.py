"""
Model Snapshots

Encodes a trained model (its configuration scalars and its trie forest) as
a plain, versioned document that can be written as JSON, and decodes it
back. Each sub-trie is stored as a flat node table: the root is entry 0
and every node lists its count and the indices of its children.
"""

from typing import Any, Dict, List, Tuple

from .counter import SequenceCounter
from .trie import FrequencyNode


FORMAT_NAME = "ngram-trie"
FORMAT_VERSION = 1

CONFIG_KEYS = ('ngram_order', 'lambda_factor', 'sequence_length',
               'uniform_estimate', 'log_transform')

CONFIG_TYPES = {
    'ngram_order': int,
    'lambda_factor': (int, float),
    'sequence_length': int,
    'uniform_estimate': (int, float),
    'log_transform': str,
}


def encode_trie(root: FrequencyNode) -> List[list]:
    """
    Flatten a sub-trie into a node table.

    Returns:
        List of [count, {word: child_index}] entries, root first
    """
    table: List[list] = [[root.count, {}]]
    stack = [(root, 0)]

    while stack:
        node, index = stack.pop()
        links = table[index][1]
        for word, child in node.children.items():
            links[word] = len(table)
            table.append([child.count, {}])
            stack.append((child, links[word]))

    return table


def decode_trie(table: List[list]) -> FrequencyNode:
    """Rebuild a sub-trie from a node table written by `encode_trie`."""
    if not table:
        raise ValueError("Empty node table")

    if not isinstance(table, list):
        raise ValueError(f"Node table must be a list, got {type(table).__name__}")

    nodes = [FrequencyNode() for _ in table]
    claimed = set()

    for index, (node, entry) in enumerate(zip(nodes, table)):
        try:
            count, links = entry
        except (TypeError, ValueError):
            raise ValueError(f"Malformed node entry: {entry!r}") from None
        if not isinstance(count, int) or isinstance(count, bool):
            raise ValueError(f"Node count must be an integer, got {count!r}")
        if not isinstance(links, dict):
            raise ValueError(f"Node links must be a mapping, got {links!r}")
        node.set_count(count)

        # Children always come after their parent and have exactly one parent
        for word, child_index in links.items():
            if not isinstance(child_index, int) or isinstance(child_index, bool):
                raise ValueError(f"Child index must be an integer, got {child_index!r}")
            if not index < child_index < len(nodes):
                raise ValueError(f"Child index out of range: {child_index}")
            if child_index in claimed:
                raise ValueError(f"Node {child_index} has more than one parent")
            claimed.add(child_index)
            node.children[word] = nodes[child_index]

    return nodes[0]


def encode(config: Dict[str, Any], counter: SequenceCounter) -> Dict[str, Any]:
    """
    Encode model configuration and counts as a snapshot document.

    Args:
        config: Model configuration scalars
        counter: The model's sequence counter

    Returns:
        JSON-serializable snapshot
    """
    return {
        'format': FORMAT_NAME,
        'version': FORMAT_VERSION,
        'config': {key: config[key] for key in CONFIG_KEYS},
        'max_length': counter.max_length,
        'forest': {str(key): encode_trie(root) for key, root in sorted(counter.roots.items())},
    }


def decode(data: Dict[str, Any]) -> Tuple[Dict[str, Any], SequenceCounter]:
    """
    Decode a snapshot document.

    Args:
        data: Snapshot written by `encode`

    Returns:
        Tuple of (configuration scalars, sequence counter)

    Raises:
        ValueError: If the document is not a supported snapshot
    """
    if not isinstance(data, dict) or data.get('format') != FORMAT_NAME:
        raise ValueError("Not an n-gram model snapshot")

    version = data.get('version')
    if not isinstance(version, int) or version > FORMAT_VERSION:
        raise ValueError(f"Unsupported snapshot version: {version!r}")

    try:
        config = {key: data['config'][key] for key in CONFIG_KEYS}
        forest = data['forest']
    except KeyError as e:
        raise ValueError(f"Snapshot is missing {e}") from None
    except TypeError:
        raise ValueError("Snapshot config must be a mapping") from None

    for key, expected in CONFIG_TYPES.items():
        value = config[key]
        if not isinstance(value, expected) or isinstance(value, bool):
            raise ValueError(f"Snapshot config {key!r} has the wrong type: {value!r}")

    max_length = data.get('max_length', config['ngram_order'])
    if not isinstance(max_length, int) or isinstance(max_length, bool):
        raise ValueError(f"Snapshot max_length must be an integer, got {max_length!r}")
    if not isinstance(forest, dict):
        raise ValueError("Snapshot forest must be a mapping")

    counter = SequenceCounter(max_length)
    roots = {}
    for key, table in forest.items():
        try:
            roots[int(key)] = decode_trie(table)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Bad sub-trie {key!r}: {e}") from None
    counter.roots = roots
    return config, counter
