import pytest

from ngram.trie import DEFAULT_DISCRIMINATOR, FrequencyNode, discriminator


def test_new_node_is_leaf():
    node = FrequencyNode()
    assert node.count == 0
    assert node.is_leaf()
    assert node.context_count() == 0
    assert node.num_following() == 0


def test_context_count_sums_children():
    node = FrequencyNode(5)
    node.children["not"] = FrequencyNode(2)
    node.children["stupid"] = FrequencyNode(3)
    assert not node.is_leaf()
    assert node.context_count() == 5
    assert node.num_following() == 2


def test_set_count():
    node = FrequencyNode()
    node.set_count(7)
    assert node.count == 7
    with pytest.raises(ValueError):
        node.set_count(-1)


def test_discriminator_letters_are_case_insensitive():
    assert discriminator("apple") == 10
    assert discriminator("Avocado") == 10
    assert discriminator("Hello") == 17
    assert discriminator("zebra") == 35


def test_discriminator_digits_and_others():
    assert discriminator("7up") == 7
    assert discriminator("0") == 0
    assert discriminator("") == DEFAULT_DISCRIMINATOR
    assert discriminator(" ") == DEFAULT_DISCRIMINATOR
    assert discriminator("!bang") == DEFAULT_DISCRIMINATOR
    assert discriminator("élan") == DEFAULT_DISCRIMINATOR
