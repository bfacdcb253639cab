from __future__ import annotations

import csv
import json

import pytest

from deck import Card, Suit, Value
from deck_types import DealRecord, ShuffleRules
from logger import DealLogger


def _record(seed=None) -> DealRecord:
    return DealRecord(
        deck_id=1,
        rules=ShuffleRules(passes=3),
        seed=seed,
        cards=[Card(Value.ACE, Suit.SPADES), Card(Value.TWO, Suit.CLUBS)],
    )


def test_jsonl_log(tmp_path):
    path = tmp_path / "deals.jsonl"
    with DealLogger(str(path)) as logger:
        logger.log(_record(seed=9))
    row = json.loads(path.read_text(encoding="utf-8"))
    assert row == {
        "deck_id": 1,
        "seed": 9,
        "rules": {"split_window": 5, "chunk_range": 3, "passes": 3},
        "cards": ["Ace of Spades", "Two of Clubs"],
    }


def test_csv_log(tmp_path):
    path = tmp_path / "deals.csv"
    logger = DealLogger(str(path), fmt="CSV")
    logger.log(_record())
    logger.close()
    logger.close()
    with open(path, encoding="utf-8", newline="") as handle:
        rows = list(csv.DictReader(handle))
    assert rows == [
        {
            "deck_id": "1",
            "seed": "",
            "passes": "3",
            "split_window": "5",
            "chunk_range": "3",
            "cards": "Ace of Spades|Two of Clubs",
        }
    ]


def test_unknown_format_rejected(tmp_path):
    with pytest.raises(ValueError):
        DealLogger(str(tmp_path / "deals.xml"), fmt="xml")
