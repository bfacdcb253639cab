from __future__ import annotations

import random
from collections import Counter

import pytest

from deck import Card, Deck, Suit, Value, create_deck, riffle_shuffle_once
from deck_types import ShuffleRules, rules_from_dict


class _ScriptedRandom(random.Random):
    """Returns queued ``randrange`` results and records every bound asked for."""

    def __init__(self, values: list[int]) -> None:
        super().__init__(0)
        self._values = list(values)
        self.calls: list[int] = []

    def randrange(self, start, stop=None, step=1):  # type: ignore[override]
        self.calls.append(start if stop is None else stop)
        return self._values.pop(0)


class _TopRandom(random.Random):
    """Always picks the largest value in range."""

    def randrange(self, start, stop=None, step=1):  # type: ignore[override]
        upper = start if stop is None else stop
        return upper - 1


def test_empty_sequence_returns_empty_without_drawing():
    rng = _ScriptedRandom([])
    assert riffle_shuffle_once([], rng) == []
    assert rng.calls == []


def test_interleaves_chunks_in_pop_order():
    cards = list("abcdef")
    # split offset 0, then (left=1, right=2, left first), a skipped (0, 0)
    # round, then (left=2, right=1, right first).
    rng = _ScriptedRandom([2, 1, 2, 0, 0, 0, 2, 1, 1])
    assert riffle_shuffle_once(cards, rng) == list("adefbc")
    assert rng.calls == [5, 3, 3, 2, 3, 3, 3, 3, 2]
    assert cards == list("abcdef")


def test_split_is_clamped_to_keep_right_half():
    rng = _ScriptedRandom([4, 2, 2, 0])
    assert riffle_shuffle_once(["x"], rng) == ["x"]

    rng = _ScriptedRandom([0, 0, 2, 1])
    # size 2 with offset -2 clamps to 0: everything sits in the right half
    assert riffle_shuffle_once(["x", "y"], rng) == ["x", "y"]


def test_short_chunk_takes_what_is_left():
    rng = _ScriptedRandom([2, 2, 2, 0, 2, 2, 1])
    # split at 2: left [a, b], right [c, d, e]
    assert riffle_shuffle_once(list("abcde"), rng) == list("abcde")


@pytest.mark.parametrize("size", [0, 1, 2, 3, 7, 26, 51, 52])
def test_riffle_conserves_cards(size: int):
    cards = create_deck()[:size]
    rng = random.Random(size)
    for _ in range(5):
        shuffled = riffle_shuffle_once(cards, rng)
        assert len(shuffled) == size
        assert Counter(shuffled) == Counter(cards)
        cards = shuffled


def test_custom_rules_conserve_cards():
    rules = ShuffleRules(split_window=11, chunk_range=6, passes=3)
    deck = Deck(rng=random.Random(5), rules=rules)
    deck.shuffle()
    assert sorted(deck.cards(), key=str) == sorted(create_deck(), key=str)


def test_full_shuffle_golden_value_with_top_random():
    # Every pass splits at 28 and drops two cards per hand, right first.
    deck = Deck(rng=_TopRandom())
    deck.shuffle()
    assert deck.deal() == Card(Value.SEVEN, Suit.HEARTS)


def test_same_seed_gives_same_order():
    first = Deck(seed=1234)
    second = Deck(rng=random.Random(1234))
    first.shuffle()
    second.shuffle()
    assert first.cards() == second.cards()


def test_different_seeds_usually_differ():
    orders = set()
    for seed in range(5):
        deck = Deck(seed=seed)
        deck.shuffle()
        orders.add(deck.cards())
    assert len(orders) > 1


def test_zero_passes_leaves_deck_ordered():
    deck = Deck(seed=3, rules=ShuffleRules(passes=0))
    deck.shuffle()
    assert list(deck.cards()) == create_deck()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"split_window": 0},
        {"chunk_range": 1},
        {"passes": -1},
    ],
)
def test_invalid_rules_are_rejected(kwargs):
    with pytest.raises(ValueError):
        ShuffleRules(**kwargs)


def test_rules_from_dict_converts_loose_values():
    rules = rules_from_dict({"passes": "4", "split_window": 3.0})
    assert rules == ShuffleRules(split_window=3, chunk_range=3, passes=4)
    assert rules_from_dict({}) == ShuffleRules()


@pytest.mark.parametrize(
    "config",
    [
        {"passes": True},
        {"passes": 2.9},
        {"chunk_range": "many"},
        {"split_window": None},
        {"speed": 3},
    ],
)
def test_rules_from_dict_rejects_bad_values(config):
    with pytest.raises(ValueError):
        rules_from_dict(config)
