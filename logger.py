"""Structured logging helpers for dealt decks."""

from __future__ import annotations

import csv
import json
from typing import Optional

from deck_types import DealRecord

SUPPORTED_FORMATS = ("jsonl", "csv")


class DealLogger:
    def __init__(self, path: str, *, fmt: str = "jsonl") -> None:
        self.path = path
        self.format = fmt.lower()
        if self.format not in SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported log format: {fmt}")
        newline = "\n" if self.format == "csv" else ""
        self._handle = open(path, "w", encoding="utf-8", newline=newline)
        self._writer: Optional[csv.DictWriter] = None
        if self.format == "csv":
            fieldnames = ["deck_id", "seed", "passes", "split_window", "chunk_range", "cards"]
            self._writer = csv.DictWriter(self._handle, fieldnames=fieldnames)
            self._writer.writeheader()

    def __enter__(self) -> "DealLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def log(self, record: DealRecord) -> None:
        if self.format == "jsonl":
            json.dump(record.to_dict(), self._handle, ensure_ascii=False)
            self._handle.write("\n")
        else:
            assert self._writer is not None
            self._writer.writerow(self._as_csv_row(record))
        self._handle.flush()

    def close(self) -> None:
        if not self._handle.closed:
            self._handle.close()

    def _as_csv_row(self, record: DealRecord) -> dict:
        return {
            "deck_id": record.deck_id,
            "seed": "" if record.seed is None else record.seed,
            "passes": record.rules.passes,
            "split_window": record.rules.split_window,
            "chunk_range": record.rules.chunk_range,
            "cards": "|".join(str(card) for card in record.cards),
        }


__all__ = ["DealLogger", "SUPPORTED_FORMATS"]
