"""Utilities for working with a standard 52-card deck and riffle shuffling it."""

from __future__ import annotations

import random
import sys
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Iterable, Iterator, List, Optional, Sequence, TextIO, Tuple

from deck_types import DEFAULT_RULES, ShuffleRules


class Value(str, Enum):
    """Face values, in rank order."""

    ACE = "Ace"
    TWO = "Two"
    THREE = "Three"
    FOUR = "Four"
    FIVE = "Five"
    SIX = "Six"
    SEVEN = "Seven"
    EIGHT = "Eight"
    NINE = "Nine"
    TEN = "Ten"
    JACK = "Jack"
    QUEEN = "Queen"
    KING = "King"


class Suit(str, Enum):
    CLUBS = "Clubs"
    DIAMONDS = "Diamonds"
    HEARTS = "Hearts"
    SPADES = "Spades"


DECK_SIZE = len(Value) * len(Suit)
EMPTY_MESSAGE = "Deck is empty."


@dataclass(frozen=True)
class Card:
    """Representation of a single playing card."""

    value: Value
    suit: Suit

    def __str__(self) -> str:
        return f"{self.value.value} of {self.suit.value}"


def card_to_str(card: Card) -> str:
    return str(card)


def card_from_str(text: str) -> Card:
    """Create a :class:`Card` from its ``"<Value> of <Suit>"`` name."""

    parts = text.strip().split()
    if len(parts) != 3 or parts[1].lower() != "of":
        raise ValueError(f"Card name must look like 'Ace of Spades', got {text!r}")
    value_name, suit_name = parts[0].capitalize(), parts[2].capitalize()
    try:
        return Card(Value(value_name), Suit(suit_name))
    except ValueError as exc:
        raise ValueError(f"Unknown card: {text!r}") from exc


def cards_to_str(cards: Iterable[Card]) -> List[str]:
    """Convert cards to their canonical names."""

    return [str(card) for card in cards]


def create_deck() -> List[Card]:
    """Return a fresh deck in suit-major, value-minor order."""

    return [Card(value, suit) for suit in Suit for value in Value]


def _take_chunk(size: int, hand: Deque[Card]) -> List[Card]:
    chunk: List[Card] = []
    while hand and size > 0:
        chunk.append(hand.popleft())
        size -= 1
    return chunk


def riffle_shuffle_once(
    cards: Sequence[Card],
    rng: random.Random,
    rules: ShuffleRules = DEFAULT_RULES,
) -> List[Card]:
    """Run one riffle pass over ``cards`` and return the mixed sequence.

    The sequence is split near the middle, offset by a random amount within
    ``rules.split_window``, and the two halves are interleaved in chunks of
    ``0..rules.chunk_range - 1`` cards. Which half drops its chunk first is a
    coin flip each round. ``cards`` itself is left untouched.
    """

    size = len(cards)
    shuffled: List[Card] = []
    if size == 0:
        return shuffled

    split = size // 2 - rules.split_window // 2 + rng.randrange(rules.split_window)
    split = min(max(split, 0), size - 1)
    left: Deque[Card] = deque(cards[:split])
    right: Deque[Card] = deque(cards[split:])

    while left or right:
        left_chunk = rng.randrange(rules.chunk_range)
        right_chunk = rng.randrange(rules.chunk_range)
        if left_chunk == 0 and right_chunk == 0:
            continue
        if rng.randrange(2) == 0:
            shuffled.extend(_take_chunk(left_chunk, left))
            shuffled.extend(_take_chunk(right_chunk, right))
        else:
            shuffled.extend(_take_chunk(right_chunk, right))
            shuffled.extend(_take_chunk(left_chunk, left))
    return shuffled


class Deck:
    """A standard 52-card deck dealt from the top after riffle shuffling.

    Pass either ``rng`` or ``seed``, not both; with neither a freshly seeded
    ``random.Random`` is used. The deck is not thread-safe; callers sharing
    one across threads must hold a single lock around every call.
    """

    def __init__(
        self,
        *,
        rng: Optional[random.Random] = None,
        rules: Optional[ShuffleRules] = None,
        seed: Optional[int] = None,
    ) -> None:
        if rng is not None and seed is not None:
            raise ValueError("Pass either rng or seed, not both")
        self._rng = rng if rng is not None else random.Random(seed)
        self.rules = rules or DEFAULT_RULES
        self._cards: List[Card] = []
        self.reset()

    @property
    def rng(self) -> random.Random:
        return self._rng

    def reset(self) -> None:
        """Reset the deck to an ordered set of 52 cards."""

        self._cards = create_deck()

    def shuffle_once(self) -> None:
        self._cards = riffle_shuffle_once(self._cards, self._rng, self.rules)

    def shuffle(self) -> None:
        """Shuffle the remaining cards with ``rules.passes`` riffle passes."""

        for _ in range(self.rules.passes):
            self.shuffle_once()

    def deal(self) -> Optional[Card]:
        """Remove and return the top card, or ``None`` once the deck is empty."""

        if not self._cards:
            return None
        return self._cards.pop(0)

    def deal_all(self) -> Iterator[Card]:
        """Deal cards until the deck is exhausted."""

        card = self.deal()
        while card is not None:
            yield card
            card = self.deal()

    def remaining(self) -> int:
        """Return the number of cards left in the deck."""

        return len(self._cards)

    def is_empty(self) -> bool:
        return not self._cards

    def cards(self) -> Tuple[Card, ...]:
        """Snapshot of the current order, top card first."""

        return tuple(self._cards)

    def __len__(self) -> int:
        return self.remaining()


def print_deck(deck: Deck, stream: Optional[TextIO] = None) -> List[Card]:
    """Deal every remaining card to ``stream``, one name per line."""

    out = stream if stream is not None else sys.stdout
    dealt: List[Card] = []
    for card in deck.deal_all():
        dealt.append(card)
        print(card_to_str(card), file=out)
    print(EMPTY_MESSAGE, file=out)
    return dealt


__all__ = [
    "Card",
    "DECK_SIZE",
    "Deck",
    "EMPTY_MESSAGE",
    "Suit",
    "Value",
    "card_from_str",
    "card_to_str",
    "cards_to_str",
    "create_deck",
    "print_deck",
    "riffle_shuffle_once",
]
