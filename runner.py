"""Command-line interface for shuffling and dealing a 52-card deck."""

from __future__ import annotations

import argparse
import importlib.util
import json
import random
from typing import Any, Dict, List, Optional, TextIO

from analysis import measure_mixing
from deck import Deck, card_from_str, print_deck
from deck_types import DEFAULT_RULES, DealRecord, ShuffleRules, as_int, rules_from_dict
from logger import SUPPORTED_FORMATS, DealLogger


def _load_config(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as handle:
        if path.endswith((".yaml", ".yml")):
            spec = importlib.util.find_spec("yaml")
            if spec is None:
                raise RuntimeError("PyYAML is required to load YAML configurations")
            module = importlib.util.module_from_spec(spec)
            if spec.loader is None:  # pragma: no cover
                raise RuntimeError("Unable to import yaml module")
            spec.loader.exec_module(module)  # type: ignore[no-untyped-call]
            config = module.safe_load(handle)  # type: ignore[attr-defined]
        else:
            config = json.load(handle)
    if not isinstance(config, dict):
        raise ValueError(f"Configuration in {path} must be a mapping")
    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Riffle shuffle a standard deck and deal every card"
    )
    parser.add_argument("--seed", type=int, default=None, help="RNG seed")
    parser.add_argument("--decks", type=int, default=1, help="Number of decks to deal")
    parser.add_argument(
        "--passes",
        type=int,
        default=DEFAULT_RULES.passes,
        help="Riffle passes per shuffle",
    )
    parser.add_argument(
        "--split-window",
        type=int,
        default=DEFAULT_RULES.split_window,
        help="Number of possible split offsets around the middle of the deck",
    )
    parser.add_argument(
        "--chunk-range",
        type=int,
        default=DEFAULT_RULES.chunk_range,
        help="Chunks interleaved per round hold 0 to chunk-range - 1 cards",
    )
    parser.add_argument("--log", type=str, default=None, help="Path to write per-deck logs")
    parser.add_argument(
        "--log-format", choices=list(SUPPORTED_FORMATS), default="jsonl", help="Log format"
    )
    parser.add_argument(
        "--analyze",
        type=str,
        default=None,
        metavar="CARD",
        help="Report how evenly CARD (e.g. 'Ace of Spades') is spread instead of dealing",
    )
    parser.add_argument(
        "--trials", type=int, default=1000, help="Shuffles to sample with --analyze"
    )
    parser.add_argument(
        "--buckets", type=int, default=4, help="Position buckets used with --analyze"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Optional JSON or YAML configuration file",
    )
    return parser


INT_OPTIONS = ("decks", "trials", "buckets")


def rules_from_args(args: argparse.Namespace) -> ShuffleRules:
    return rules_from_dict(
        {
            "split_window": args.split_window,
            "chunk_range": args.chunk_range,
            "passes": args.passes,
        }
    )


def _coerce_options(args: argparse.Namespace) -> None:
    """Normalise values that may have come from a config file."""

    for name in INT_OPTIONS:
        setattr(args, name, as_int(getattr(args, name), name))
    if args.seed is not None:
        args.seed = as_int(args.seed, "seed")
    for name in ("log", "log_format", "analyze"):
        value = getattr(args, name)
        if value is not None and not isinstance(value, str):
            raise ValueError(f"{name} must be a string, got {value!r}")
    if args.log_format.lower() not in SUPPORTED_FORMATS:
        raise ValueError(f"Unsupported log format: {args.log_format}")


def deal_decks(
    count: int,
    rules: ShuffleRules,
    rng: random.Random,
    *,
    seed: Optional[int] = None,
    stream: Optional[TextIO] = None,
) -> List[DealRecord]:
    """Shuffle and fully deal ``count`` fresh decks, printing every card."""

    if count <= 0:
        raise ValueError("decks must be positive")
    records: List[DealRecord] = []
    for deck_id in range(1, count + 1):
        deck = Deck(rng=rng, rules=rules)
        deck.shuffle()
        dealt = print_deck(deck, stream)
        records.append(DealRecord(deck_id=deck_id, rules=rules, seed=seed, cards=dealt))
    return records


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    defaults = parser.parse_args([])
    args = parser.parse_args(argv)
    if args.config:
        config = _load_config(args.config)
        for key, value in config.items():
            key = key.replace("-", "_")
            if hasattr(args, key) and getattr(args, key) == getattr(defaults, key):
                setattr(args, key, value)

    _coerce_options(args)
    rules = rules_from_args(args)
    rng = random.Random(args.seed)

    if args.analyze:
        card = card_from_str(args.analyze)
        report = measure_mixing(
            card, args.trials, buckets=args.buckets, rng=rng, rules=rules
        )
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
        return

    records = deal_decks(args.decks, rules, rng, seed=args.seed)
    if args.log:
        with DealLogger(args.log, fmt=args.log_format) as logger:
            for record in records:
                logger.log(record)


if __name__ == "__main__":
    main()
