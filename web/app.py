"""Wordplay web application: Flask backend."""
from __future__ import annotations

import logging
import os
import sys
import threading
import time
from functools import lru_cache, partial
from pathlib import Path

# Ensure project root is on sys.path so `wordplay.*` imports work
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from flask import Flask, jsonify, request

from wordplay.abbreviations import Abbreviations, load_abbreviations
from wordplay.constants import MAX_TRANSFORM_LETTERS, TRANSFORM_TIMEOUT
from wordplay.indicators import load_default_indicators, load_indicators
from wordplay.lexicon import Lexicon
from wordplay.nlp import Token, tokenize
from wordplay.orchestrator import MatchOrchestrator, MatchWorker
from wordplay.pipeline import PipelineContext, build_wordset
from wordplay.wordset import WordDerivation, WordsetConfig

logger = logging.getLogger(__name__)

app = Flask(__name__)

MAX_LIMIT = 500

# Shared match worker, started on first use
_worker: MatchWorker | None = None
_worker_lock = threading.Lock()
_next_request_id = 0

# Worker output per request id; messages without an id update _status
_mailboxes: dict[int, list[dict]] = {}
_status: dict = {"ready": False, "error": None}
_mailbox_lock = threading.Lock()


def _indicator_loader():
    path = os.environ.get("WORDPLAY_INDICATORS")
    return partial(load_indicators, path) if path else load_default_indicators


def deliver(message: dict) -> None:
    """Route one worker message to its request's mailbox."""
    request_id = message.get("request_id")
    with _mailbox_lock:
        if request_id is None:
            if message["type"] == "ready":
                _status.update(ready=True, error=None)
            elif message["type"] == "error":
                _status["error"] = message["error"]
            return
        mailbox = _mailboxes.get(request_id)
        if mailbox is not None:
            mailbox.append(message)


def _finished(mailbox: list[dict]) -> bool:
    return any(m["type"] in ("end", "error") for m in mailbox)


def get_worker() -> MatchWorker:
    """Start the match worker and queue the indicator download once."""
    global _worker
    with _worker_lock:
        if _worker is None:
            _worker = MatchWorker(MatchOrchestrator(loader=_indicator_loader()), on_output=deliver)
            _worker.start()
            _worker.send({"type": "download"})
        return _worker


def open_request() -> int:
    """Allocate a request id and its mailbox.

    Unfinished older requests are about to be superseded, so their mailboxes
    are dropped; finished ones stay until polled.
    """
    global _next_request_id
    with _worker_lock:
        _next_request_id += 1
        request_id = _next_request_id
    with _mailbox_lock:
        for old_id in [i for i, box in _mailboxes.items() if not _finished(box)]:
            del _mailboxes[old_id]
        _mailboxes[request_id] = []
    return request_id


@lru_cache(maxsize=None)
def _load_lexicon(path: str) -> Lexicon:
    lexicon = Lexicon()
    lexicon.load(path)
    logger.info("Loaded %d words from %s", lexicon.word_count, path)
    return lexicon


@lru_cache(maxsize=None)
def _load_abbreviations(path: str) -> Abbreviations:
    return load_abbreviations(path)


def pipeline_context() -> PipelineContext:
    """Collaborators for one /transform request.

    Word list and abbreviations come from WORDPLAY_LEXICON and
    WORDPLAY_ABBREVIATIONS and are read once per path. Every request gets a
    fresh TRANSFORM_TIMEOUT deadline.
    """
    lexicon_path = os.environ.get("WORDPLAY_LEXICON")
    scorer = _load_lexicon(lexicon_path).score if lexicon_path else None
    abbreviations_path = os.environ.get("WORDPLAY_ABBREVIATIONS")
    abbreviations = _load_abbreviations(abbreviations_path) if abbreviations_path else None
    config = WordsetConfig(scorer=scorer, deadline=time.monotonic() + TRANSFORM_TIMEOUT)
    return PipelineContext(
        config=config,
        abbreviations=abbreviations,
        max_letters=MAX_TRANSFORM_LETTERS,
    )


def _parse_lines(data: dict | None) -> list[str] | None:
    """Clue lines from a request body: ``{"lines": [...]}`` or ``{"text": "..."}``."""
    if not isinstance(data, dict):
        return None
    if isinstance(data.get("text"), str):
        return data["text"].splitlines()
    lines = data.get("lines")
    if isinstance(lines, list) and all(isinstance(line, str) for line in lines):
        return lines
    return None


def tokens_to_json(tokens: list[Token]) -> list[dict]:
    return [{"text": t.text, "lemma": t.lemma} for t in tokens]


def derivation_to_json(derivation: WordDerivation, explain: bool = True) -> dict:
    if explain:
        return derivation.to_json()
    return {"words": list(derivation.words), "description": derivation.description}


@app.route("/")
def index():
    return jsonify({
        "routes": ["/submit", "/poll", "/abort", "/transform"],
    })


@app.route("/submit", methods=["POST"])
def submit():
    lines = _parse_lines(request.get_json(silent=True))
    if lines is None:
        return jsonify({"error": "Expected 'text' or a list of 'lines'"}), 400

    tokenized = [tokenize(line) for line in lines]
    worker = get_worker()
    request_id = open_request()
    worker.send({
        "type": "submit",
        "request_id": request_id,
        "lines": [[t.lemma for t in tokens] for tokens in tokenized],
    })
    return jsonify({
        "request_id": request_id,
        "tokens": [tokens_to_json(tokens) for tokens in tokenized],
    })


@app.route("/poll", methods=["GET"])
def poll():
    """Messages for one request since its last poll.

    The matcher runs one request at a time, so a newer /submit from any
    client supersedes an unfinished one. Polling a superseded, unknown or
    already collected request returns ``"expired": true``.
    """
    request_id = request.args.get("request_id", type=int)
    if request_id is None:
        return jsonify({"error": "Expected an integer 'request_id'"}), 400
    get_worker()

    with _mailbox_lock:
        mailbox = _mailboxes.get(request_id)
        messages = list(mailbox) if mailbox is not None else []
        if mailbox is not None:
            mailbox.clear()
            if _finished(messages):
                del _mailboxes[request_id]
        status = dict(_status)
    return jsonify({
        "request_id": request_id,
        "messages": messages,
        "expired": mailbox is None,
        "ready": status["ready"],
        "error": status["error"],
    })


@app.route("/abort", methods=["POST"])
def abort():
    data = request.get_json(silent=True)
    request_id = data.get("request_id") if isinstance(data, dict) else None
    if not isinstance(request_id, int) or isinstance(request_id, bool):
        return jsonify({"error": "Expected an integer 'request_id'"}), 400
    get_worker().send({"type": "abort", "request_id": request_id})
    return jsonify({"request_id": request_id})


@app.route("/transform", methods=["POST"])
def transform():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Expected a JSON object"}), 400
    limit = data.get("limit", 50)
    if not isinstance(limit, int) or isinstance(limit, bool) or not 0 < limit <= MAX_LIMIT:
        return jsonify({"error": f"'limit' must be an integer from 1 to {MAX_LIMIT}"}), 400
    explain = bool(data.get("explain", True))

    try:
        wordset = build_wordset(data.get("spec"), pipeline_context())
        derivations, timed_out = wordset.take_until_deadline(limit)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.exception("Transform failed")
        return jsonify({"error": f"Transform error: {e}"}), 500

    return jsonify({
        "count": len(derivations),
        "timed_out": timed_out,
        "derivations": [derivation_to_json(d, explain) for d in derivations],
    })


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True, port=5000)
