"""Statistical checks on how well the riffle shuffle mixes a deck."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from deck import DECK_SIZE, Card, Deck
from deck_types import DEFAULT_RULES, ShuffleRules


@dataclass
class MixingReport:
    card: Card
    trials: int
    buckets: int
    observed: List[int]
    statistic: float

    @property
    def degrees_of_freedom(self) -> int:
        return self.buckets - 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "card": str(self.card),
            "trials": self.trials,
            "buckets": self.buckets,
            "observed": list(self.observed),
            "chi_squared": self.statistic,
            "degrees_of_freedom": self.degrees_of_freedom,
        }


def position_counts(
    card: Card,
    trials: int,
    *,
    rng: random.Random,
    rules: ShuffleRules = DEFAULT_RULES,
) -> List[int]:
    """Count where ``card`` lands after shuffling a fresh deck ``trials`` times."""

    if trials <= 0:
        raise ValueError("trials must be positive")
    counts = [0] * DECK_SIZE
    for _ in range(trials):
        deck = Deck(rng=rng, rules=rules)
        deck.shuffle()
        counts[deck.cards().index(card)] += 1
    return counts


def bucket_counts(counts: Sequence[int], buckets: int) -> List[int]:
    """Fold per-position counts into ``buckets`` contiguous groups."""

    if buckets <= 0 or len(counts) % buckets:
        raise ValueError(f"Cannot split {len(counts)} positions into {buckets} buckets")
    width = len(counts) // buckets
    return [sum(counts[start : start + width]) for start in range(0, len(counts), width)]


def chi_squared(observed: Sequence[int]) -> float:
    """Pearson chi-squared statistic against a uniform expectation."""

    total = sum(observed)
    if not observed or total == 0:
        raise ValueError("observed counts must contain at least one sample")
    expected = total / len(observed)
    return sum((count - expected) ** 2 / expected for count in observed)


def measure_mixing(
    card: Card,
    trials: int,
    *,
    buckets: int = 4,
    rng: random.Random,
    rules: ShuffleRules = DEFAULT_RULES,
) -> MixingReport:
    counts = position_counts(card, trials, rng=rng, rules=rules)
    observed = bucket_counts(counts, buckets)
    return MixingReport(
        card=card,
        trials=trials,
        buckets=buckets,
        observed=observed,
        statistic=chi_squared(observed),
    )


__all__ = [
    "MixingReport",
    "bucket_counts",
    "chi_squared",
    "measure_mixing",
    "position_counts",
]
