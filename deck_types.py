"""Shared dataclasses describing shuffle configuration and deal outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:  # pragma: no cover
    from deck import Card


@dataclass(frozen=True)
class ShuffleRules:
    """Tunable constants of the riffle shuffle.

    ``split_window`` is the number of possible split offsets centred on the
    midpoint (5 gives -2..2), ``chunk_range`` bounds each interleaved chunk to
    ``[0, chunk_range)`` cards and ``passes`` is the number of riffles applied
    by a full shuffle. Seven passes follow the usual rule of thumb for mixing a
    52-card deck.
    """

    split_window: int = 5
    chunk_range: int = 3
    passes: int = 7

    def __post_init__(self) -> None:
        if self.split_window < 1:
            raise ValueError("split_window must be at least 1")
        if self.chunk_range < 2:
            raise ValueError("chunk_range must be at least 2")
        if self.passes < 0:
            raise ValueError("passes must be non-negative")

    def to_dict(self) -> Dict[str, int]:
        return {
            "split_window": self.split_window,
            "chunk_range": self.chunk_range,
            "passes": self.passes,
        }


DEFAULT_RULES = ShuffleRules()


def as_int(value: Any, name: str) -> int:
    """Convert a loosely typed config value to ``int``.

    Booleans and floats with a fractional part are rejected rather than
    silently coerced.
    """

    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{name} must be an integer, got {value!r}")
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def rules_from_dict(config: Dict[str, Any], base: ShuffleRules = DEFAULT_RULES) -> ShuffleRules:
    """Build :class:`ShuffleRules` from a loose mapping, falling back to ``base``."""

    unknown = set(config) - {"split_window", "chunk_range", "passes"}
    if unknown:
        raise ValueError(f"Unknown shuffle rule(s): {', '.join(sorted(unknown))}")
    return ShuffleRules(
        split_window=as_int(config.get("split_window", base.split_window), "split_window"),
        chunk_range=as_int(config.get("chunk_range", base.chunk_range), "chunk_range"),
        passes=as_int(config.get("passes", base.passes), "passes"),
    )


@dataclass
class DealRecord:
    """The order in which one shuffled deck was dealt."""

    deck_id: int
    rules: ShuffleRules
    seed: Optional[int] = None
    cards: List["Card"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "deck_id": self.deck_id,
            "seed": self.seed,
            "rules": self.rules.to_dict(),
            "cards": [str(card) for card in self.cards],
        }


__all__ = [
    "DEFAULT_RULES",
    "DealRecord",
    "ShuffleRules",
    "as_int",
    "rules_from_dict",
]
