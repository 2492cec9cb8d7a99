import pytest
import numpy as np
from unittest.mock import MagicMock
from kgram_text.models.frequency_model import FrequencyModel, build, ASCII_ALPHABET_SIZE

FISH = "one fish two fish red fish blue fish"


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing"""
    return MagicMock()


@pytest.fixture
def banana(mock_logger):
    return FrequencyModel("banana", 2, logger=mock_logger)


@pytest.fixture
def fish(mock_logger):
    return FrequencyModel(FISH, 4, logger=mock_logger)


@pytest.fixture
def rng():
    return np.random.default_rng(20240601)


# -------------------------------
# Construction
# -------------------------------

def test_banana_counts(banana):
    """
    The circular text "banana" + "ba" yields ba->n, an->a, na->n, an->a,
    na->b, ab->a.
    """
    assert banana.frequency("an", "a") == 2
    assert banana.frequency("na", "b") == 1
    assert banana.frequency("na", "a") == 0
    assert banana.frequency("na") == 2
    assert banana.frequency("ab") == 1
    assert banana.frequency("ab", "a") == 1
    assert banana.frequency("ba", "n") == 1


def test_fish_counts(fish):
    assert fish.frequency("ish ", "r") == 1
    assert fish.frequency("ish ", "x") == 0
    assert fish.frequency("ish ") == 3
    assert fish.frequency("tuna") == 0


def test_wraparound_kgrams_are_counted(fish):
    # Last "fish" wraps into "one"
    assert fish.frequency("isho") == 1
    assert fish.frequency("isho", "n") == 1
    assert fish.frequency("shon", "e") == 1


def test_order_is_fixed(banana, fish):
    assert banana.order == 2
    assert fish.order == 4
    assert banana.alphabet_size == ASCII_ALPHABET_SIZE


def test_total_observations_equal_text_length():
    for text, order in [("banana", 1), ("banana", 5), (FISH, 4), ("abcabcabd", 3), ("aa", 1)]:
        model = FrequencyModel(text, order)
        assert model.total_observations() == len(text)


def test_totals_match_successor_sums(fish):
    for kgram in fish.kgrams():
        by_char = sum(fish.frequency(kgram, chr(code)) for code in range(ASCII_ALPHABET_SIZE))
        assert fish.frequency(kgram) == by_char
        assert int(fish.successor_counts(kgram).sum()) == fish.frequency(kgram)


def test_overlapping_occurrences_accumulate():
    model = FrequencyModel("aaaa", 2)
    assert model.kgrams() == ["aa"]
    assert model.frequency("aa") == 4
    assert model.frequency("aa", "a") == 4


def test_build_function_returns_model(mock_logger):
    model = build("banana", 2, logger=mock_logger)
    assert isinstance(model, FrequencyModel)
    assert model.frequency("na") == 2


def test_build_logs_metrics(mock_logger):
    FrequencyModel("banana", 2, logger=mock_logger)
    mock_logger.info.assert_called_once()
    args, kwargs = mock_logger.info.call_args
    assert args[0] == "FrequencyModel built"
    metrics = kwargs["extra"]["metrics"]
    assert metrics["order"] == 2
    assert metrics["text_length"] == 6
    assert metrics["distinct_kgrams"] == 4


@pytest.mark.parametrize("order", [0, -1, 6, 10])
def test_invalid_order_raises(order):
    with pytest.raises(ValueError):
        FrequencyModel("banana", order)


def test_non_integer_order_raises():
    with pytest.raises(ValueError):
        FrequencyModel("banana", 2.0)


def test_character_outside_alphabet_raises():
    with pytest.raises(ValueError, match="outside the alphabet"):
        FrequencyModel("café au lait", 2)


def test_wider_alphabet_accepts_latin1():
    model = FrequencyModel("café café", 2, alphabet_size=256)
    assert model.frequency("af", "é") == 2
    assert model.frequency("fé") == 2


def test_model_is_read_only(banana):
    counts = banana.successor_counts("na")
    with pytest.raises(ValueError):
        counts[ord("x")] = 5


# -------------------------------
# Queries
# -------------------------------

def test_absent_kgram_frequency_is_zero(fish):
    assert fish.frequency("zzzz") == 0
    assert fish.frequency("zzzz", "a") == 0


@pytest.mark.parametrize("kgram", ["", "i", "ish", "ish  ", "one fish"])
def test_wrong_length_kgram_raises(fish, kgram, rng):
    with pytest.raises(ValueError, match="wrong length"):
        fish.frequency(kgram)
    with pytest.raises(ValueError, match="wrong length"):
        fish.frequency(kgram, "a")
    with pytest.raises(ValueError, match="wrong length"):
        fish.sample(kgram, rng=rng)


@pytest.mark.parametrize("c", ["é", "ab", "", 97])
def test_invalid_successor_character_raises(fish, c):
    with pytest.raises(ValueError):
        fish.frequency("ish ", c)


def test_sample_returns_observed_successor(fish, rng):
    for _ in range(200):
        assert fish.sample("ish ", rng=rng) in {"t", "r", "b"}


def test_sample_single_successor_is_deterministic(banana, rng):
    assert banana.sample("ab", rng=rng) == "a"
    assert banana.sample("ba", rng=rng) == "n"


def test_sample_unknown_kgram_raises(fish, rng):
    with pytest.raises(ValueError, match="kgram not found"):
        fish.sample("tuna", rng=rng)


def test_sample_distribution_converges(rng):
    # "ab" is followed by c five times, d three times and e twice
    text = "abc" * 5 + "abd" * 3 + "abe" * 2
    model = FrequencyModel(text, 2)
    draws = 100_000
    counts = {"c": 0, "d": 0, "e": 0}
    for _ in range(draws):
        counts[model.sample("ab", rng=rng)] += 1

    assert counts["c"] / draws == pytest.approx(0.5, abs=0.01)
    assert counts["d"] / draws == pytest.approx(0.3, abs=0.01)
    assert counts["e"] / draws == pytest.approx(0.2, abs=0.01)


def test_same_seed_same_samples(fish):
    first = [fish.sample("ish ", rng=np.random.default_rng(7)) for _ in range(5)]
    second = [fish.sample("ish ", rng=np.random.default_rng(7)) for _ in range(5)]
    assert first == second


# -------------------------------
# Container helpers and rendering
# -------------------------------

def test_kgrams_sorted_and_membership(banana):
    assert banana.kgrams() == ["ab", "an", "ba", "na"]
    assert len(banana) == 4
    assert "na" in banana
    assert "nb" not in banana


def test_successor_counts_unknown_kgram_raises(banana):
    with pytest.raises(ValueError, match="kgram not found"):
        banana.successor_counts("zz")


def test_string_rendering(banana):
    assert str(banana) == "ab: a 1\nan: a 2\nba: n 1\nna: b 1 n 1"


def test_repr(banana):
    assert repr(banana) == "FrequencyModel(order=2, alphabet_size=128, kgrams=4)"
