import math

import pytest

from ngram.model import LanguageModel
from ngram.smoothing import LogTransform, interpolation_weight, to_log_domain, get_log_transform


@pytest.fixture
def model():
    m = LanguageModel(3)
    m.train(["She", "is", "not", "stupid"])
    m.train(["She", "is", "stupid"])
    m.train(["She", "is", "stupid", "but"])
    return m


def test_defaults():
    m = LanguageModel(4)
    assert m.ngram_order == 4
    assert m.lambda_factor == 4.0
    assert m.sequence_length == 15
    assert m.uniform_estimate == pytest.approx(1 / 15)
    assert m.log_transform == LogTransform.LOG2
    assert not m.is_trained


def test_configuration_validation():
    with pytest.raises(ValueError):
        LanguageModel(0)
    with pytest.raises(ValueError):
        LanguageModel(3, lambda_factor=-1)
    with pytest.raises(ValueError):
        LanguageModel(3, log_transform="natural")

    m = LanguageModel(3)
    with pytest.raises(AttributeError):
        m.ngram_order = 5
    with pytest.raises(ValueError):
        m.sequence_length = 0
    with pytest.raises(ValueError):
        m.uniform_estimate = 0.0


def test_sequence_length_sets_uniform_estimate():
    m = LanguageModel(3, sequence_length=20)
    assert m.uniform_estimate == pytest.approx(0.05)
    m.sequence_length = 4
    assert m.uniform_estimate == pytest.approx(0.25)
    m.uniform_estimate = 0.5
    assert m.sequence_length == 4
    assert m.uniform_estimate == 0.5


def test_train_text_splits_on_whitespace():
    m = LanguageModel(3)
    assert m.train("I  am\ta super hero") == 1
    assert m.is_trained
    assert m.counter.count(["I", "am", "a", "super", "hero"]) == 1
    assert m.counter.count(["I", "am"]) == 1


def test_train_empty_statement_is_skipped():
    m = LanguageModel(3)
    assert m.train("   ") == 0
    assert not m.is_trained


def test_train_twice():
    m = LanguageModel(3)
    m.train("He is not stupid")
    m.train(["He", "is", "not", "stupid"])
    assert m.counter.count(["He", "is", "not", "stupid"]) == 2


def test_train_inserts_only_full_sequence():
    m = LanguageModel(2)
    m.train("the cat sat")
    assert m.counter.count(["cat", "sat"]) == 0


def test_windowed_training():
    m = LanguageModel(2)
    assert m.train("the cat sat", windowed=True) == 3
    assert m.counter.count(["the", "cat", "sat"]) == 1
    assert m.counter.count(["cat", "sat"]) == 1
    assert m.counter.count(["sat"]) == 1


def test_train_many():
    m = LanguageModel(3)
    calls = []
    inserted = m.train_many(
        ["a b c", "", ["a", "b"]],
        increment=2,
        progress_callback=lambda current, total: calls.append((current, total))
    )
    assert inserted == 2
    assert m.counter.count(["a", "b"]) == 4
    assert calls == [(3, 3)]


def test_uniform_floor_without_data():
    m = LanguageModel(3)
    seq = ["Unseen", "words", "here"]
    assert m.conditional_estimate(seq, 0, 3) == m.uniform_estimate
    assert m.conditional_estimate(seq, 1, 2) == m.uniform_estimate
    assert m.counter.count(["Unseen", "Words"]) == 0


def test_conditional_estimate_boundaries(model):
    seq = ["She", "is", "stupid"]
    assert model.conditional_estimate(seq, 0, 0) == 0.0
    assert model.conditional_estimate(seq, 2, 2) == 0.0
    with pytest.raises(ValueError):
        model.conditional_estimate(seq, 2, 1)
    with pytest.raises(IndexError):
        model.conditional_estimate(seq, 0, 5)


def test_conditional_estimate_interpolates(model):
    seq = ["She", "is", "stupid"]
    # context "She is": count 3 over {not: 1, stupid: 2}; "She is stupid" has 1 continuation
    # lambda = 3 / (3 + 3 * 1) = 0.5
    assert model.conditional_estimate(seq, 0, 3) == pytest.approx(0.5 * 2 / 3 + 0.5 / 15)
    assert model.conditional_estimate(seq, 0, 1) == pytest.approx(16 / 30)
    assert model.conditional_estimate(seq, 0, 2) == pytest.approx(17 / 45)


def test_conditional_estimate_without_continuations():
    m = LanguageModel(3)
    m.train(["She", "is", "not", "stupid"])
    m.train(["She", "is", "stupid"])
    # "She is stupid" has no continuations, so lambda is 1
    assert m.conditional_estimate(["She", "is", "stupid"], 0, 3) == pytest.approx(0.5)


def test_conditional_estimate_overrides(model):
    seq = ["She", "is", "stupid"]
    assert model.conditional_estimate(seq, 0, 3, max_order=2) == pytest.approx(1 / 15)
    assert model.conditional_estimate(seq, 0, 3, lambda_factor=0) == pytest.approx(2 / 3)


def test_ml_estimate_sums_log_estimates(model):
    seq = ["She", "is", "stupid"]
    expected = math.log2(16 / 30) + math.log2(17 / 45) + math.log2(11 / 30)
    assert model.ml_estimate(seq) == pytest.approx(expected)
    assert model.probability(["She", "is"], "stupid") == pytest.approx(expected)
    assert model.ml_estimate(seq, 0, 0) == 0.0


def test_scaled_log_transform():
    m = LanguageModel(3, log_transform="scaled")
    m.train(["She", "is", "not", "stupid"])
    m.train(["She", "is", "stupid"])
    m.train(["She", "is", "stupid", "but"])
    expected = (16 / 30 + 17 / 45 + 11 / 30) / math.log(2.0)
    assert m.ml_estimate(["She", "is", "stupid"]) == pytest.approx(expected)


def test_simple_estimate(model):
    assert model.simple_estimate(["She", "is"]) == pytest.approx(1.0)
    assert model.simple_estimate(["She", "is", "stupid"]) == pytest.approx(0.5)
    assert model.simple_estimate(["Nobody"]) == 0.0


def test_most_probable_ranks_by_score(model):
    ranked = model.most_probable(["She", "is"])
    assert [w for w, _ in ranked] == ["stupid", "not"]
    assert ranked[0][1] > ranked[1][1]
    assert ranked[0][1] == pytest.approx(model.probability(["She", "is"], "stupid"))

    assert model.most_probable(["She", "is"], top_k=1) == ranked[:1]


def test_most_probable_ties_are_alphabetical():
    m = LanguageModel(2)
    m.train("a y")
    m.train("a x")
    ranked = m.most_probable(["a"])
    assert [w for w, _ in ranked] == ["x", "y"]
    assert ranked[0][1] == ranked[1][1]


def test_most_probable_unseen_context(model):
    assert model.most_probable(["He", "was"]) == []
    assert model.most_probable(["She", "is", "not", "stupid"]) == []


def test_stats(model):
    stats = model.stats()
    assert stats['n'] == 3
    assert stats['total_sequences'] == 3
    assert stats['nodes'] == 6
    assert stats['log_transform'] == "log2"


def test_smoothing_helpers():
    assert interpolation_weight(3, 1, 3) == pytest.approx(0.5)
    assert interpolation_weight(2, 0, 3) == 1.0
    assert to_log_domain(0.25) == pytest.approx(-2.0)
    assert to_log_domain(0.0) == float('-inf')
    assert to_log_domain(1.0, LogTransform.SCALED) == pytest.approx(1 / math.log(2.0))
    assert get_log_transform("LOG2") == LogTransform.LOG2


def test_ml_estimate_rejects_bad_ranges(model):
    seq = ["She", "is", "stupid"]
    with pytest.raises(IndexError):
        model.ml_estimate(seq, 2, 1)
    with pytest.raises(IndexError):
        model.ml_estimate(seq, 0, 9)
    with pytest.raises(IndexError):
        model.ml_estimate(seq, -1)
    assert model.ml_estimate(seq, 3, 3) == 0.0
    assert model.ml_estimate([]) == 0.0


def test_conditional_estimate_rejects_negative_lambda(model):
    with pytest.raises(ValueError):
        model.conditional_estimate(["She", "is", "stupid"], 0, 3, lambda_factor=-1.0)
