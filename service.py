"""Flask service exposing a REST API for shuffling and dealing decks."""

from __future__ import annotations

import os
import random
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List

from flask import Flask, abort, jsonify, request
from werkzeug.exceptions import HTTPException

from deck import Card, Deck, cards_to_str
from deck_types import ShuffleRules, as_int, rules_from_dict


@dataclass
class DeckSession:
    deck: Deck
    dealt: List[Card] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock)


SESSIONS: Dict[str, DeckSession] = {}
MAX_PASSES = 100
app = Flask(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_rng(payload: Dict[str, Any]) -> random.Random:
    seed = payload.get("seed")
    if seed is None:
        return random.Random()
    try:
        return random.Random(as_int(seed, "seed"))
    except ValueError as exc:
        abort(400, description=str(exc))


def _check_passes(passes: int) -> int:
    if passes < 0:
        raise ValueError("passes must be non-negative")
    if passes > MAX_PASSES:
        raise ValueError(f"passes must be at most {MAX_PASSES}")
    return passes


def _make_rules(payload: Dict[str, Any]) -> ShuffleRules:
    config = payload.get("rules")
    if config is None:
        config = {}
    if not isinstance(config, dict):
        abort(400, description="rules must be an object")
    try:
        rules = rules_from_dict(config)
        _check_passes(rules.passes)
    except ValueError as exc:
        abort(400, description=str(exc))
    return rules


def _serialize_session(deck_id: str, session: DeckSession) -> Dict[str, Any]:
    deck = session.deck
    return {
        "deck_id": deck_id,
        "remaining": deck.remaining(),
        "empty": deck.is_empty(),
        "rules": deck.rules.to_dict(),
        "cards": cards_to_str(deck.cards()),
        "dealt": cards_to_str(session.dealt),
    }


def _get_session(deck_id: str) -> DeckSession:
    session = SESSIONS.get(deck_id)
    if session is None:
        abort(404, description="Deck not found")
    return session


def _payload() -> Dict[str, Any]:
    payload = request.get_json(force=True, silent=True) or {}
    if not isinstance(payload, dict):
        abort(400, description="Request body must be a JSON object")
    return payload


@app.errorhandler(HTTPException)
def handle_http_error(exc: HTTPException):
    return jsonify({"error": exc.description}), exc.code


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.post("/api/decks")
def create_deck():
    payload = _payload()
    deck = Deck(rng=_make_rng(payload), rules=_make_rules(payload))
    deck_id = str(uuid.uuid4())
    session = DeckSession(deck=deck)
    SESSIONS[deck_id] = session
    return jsonify(_serialize_session(deck_id, session)), 201


@app.get("/api/decks/<deck_id>")
def get_deck(deck_id: str):
    session = _get_session(deck_id)
    with session.lock:
        return jsonify(_serialize_session(deck_id, session))


@app.post("/api/decks/<deck_id>/shuffle")
def shuffle_deck(deck_id: str):
    session = _get_session(deck_id)
    payload = _payload()
    passes = payload.get("passes")
    count = None
    if passes is not None:
        try:
            count = _check_passes(as_int(passes, "passes"))
        except ValueError as exc:
            abort(400, description=str(exc))
    with session.lock:
        deck = session.deck
        if count is None:
            deck.shuffle()
        else:
            for _ in range(count):
                deck.shuffle_once()
        return jsonify(_serialize_session(deck_id, session))


@app.post("/api/decks/<deck_id>/deal")
def deal_card(deck_id: str):
    session = _get_session(deck_id)
    with session.lock:
        card = session.deck.deal()
        if card is not None:
            session.dealt.append(card)
        state = _serialize_session(deck_id, session)
    state["card"] = str(card) if card is not None else None
    return jsonify(state)


@app.post("/api/decks/<deck_id>/reset")
def reset_deck(deck_id: str):
    session = _get_session(deck_id)
    payload = _payload()
    with session.lock:
        if payload.get("seed") is not None:
            session.deck = Deck(rng=_make_rng(payload), rules=session.deck.rules)
        else:
            session.deck.reset()
        session.dealt.clear()
        return jsonify(_serialize_session(deck_id, session))


@app.delete("/api/decks/<deck_id>")
def delete_deck(deck_id: str):
    _get_session(deck_id)
    SESSIONS.pop(deck_id, None)
    return "", 204


if __name__ == "__main__":  # pragma: no cover
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 8000)))
