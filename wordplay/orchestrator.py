"""Time-sliced indicator matching for a batch of clue lines.

The orchestrator holds at most one live request. Each round pulls one match
at a time from every unfinished line, round-robin, until the time budget is
spent, then reports what it found. Newer requests replace older ones, and a
running request can be aborted; both are only noticed between rounds.

Input messages::

    {"type": "download"}
    {"type": "submit", "request_id": 3, "lines": [["break", "down"], ...]}
    {"type": "abort", "request_id": 3}

Output messages::

    {"type": "ready"}
    {"type": "error", "error": "..."}
    {"type": "error", "error": "...", "request_id": 3}   # the request is over
    {"type": "chunk", "request_id": 3, "per_line": [[match, ...], ...]}
    {"type": "end", "request_id": 3}
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Callable, Iterator
from typing import Any

from wordplay.constants import DEFAULT_ROUND_BUDGET
from wordplay.indicators import IndicatorMatch, IndicatorTrie, load_default_indicators

logger = logging.getLogger(__name__)

Message = dict[str, Any]


def _valid_lines(lines: Any) -> bool:
    return isinstance(lines, list) and all(
        isinstance(line, list) and all(isinstance(lemma, str) for lemma in line)
        for line in lines
    )


class MatchOrchestrator:
    """State machine behind the match worker. Not thread-safe; one owner."""

    def __init__(
        self,
        loader: Callable[[], IndicatorTrie] = load_default_indicators,
        budget: float = DEFAULT_ROUND_BUDGET,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.loader = loader
        self.budget = budget
        self.clock = clock
        self.trie: IndicatorTrie | None = None
        self.request_id: int | None = None
        self.last_request_id: int | None = None
        self._cursors: list[Iterator[IndicatorMatch] | None] = []

    @property
    def ready(self) -> bool:
        return self.trie is not None

    @property
    def running(self) -> bool:
        return self.request_id is not None

    def handle(self, message: Message) -> list[Message]:
        """Apply one input message and return any immediate output."""
        kind = message.get("type") if isinstance(message, dict) else None
        if kind == "download":
            return self._download()
        if kind not in ("submit", "abort"):
            logger.debug("Ignoring message: %r", message)
            return []
        request_id = message.get("request_id")
        valid_id = isinstance(request_id, int) and not isinstance(request_id, bool)
        if self.trie is None:
            error: Message = {"type": "error", "error": "Indicator matcher not ready"}
            if valid_id:
                error["request_id"] = request_id
            return [error]

        if not valid_id:
            logger.debug("Ignoring %s without a request id", kind)
            return []

        if kind == "abort":
            if request_id != self.request_id:
                return []
            logger.info("Request %d aborted", request_id)
            self.cancel()
            return [{"type": "end", "request_id": request_id}]

        lines = message.get("lines")
        if not _valid_lines(lines):
            logger.debug("Ignoring submit %d with malformed lines", request_id)
            return []
        if self.last_request_id is not None and request_id <= self.last_request_id:
            logger.debug("Ignoring stale request %d (last %d)", request_id, self.last_request_id)
            return []

        if self.request_id is not None:
            logger.info("Request %d superseded by %d", self.request_id, request_id)
        self.request_id = request_id
        self.last_request_id = request_id
        self._cursors = [self.trie.match(line) for line in lines]
        logger.debug("Request %d accepted with %d line(s)", request_id, len(lines))
        return []

    def _download(self) -> list[Message]:
        try:
            trie = self.loader()
        except Exception as e:
            logger.exception("Failed loading indicators")
            return [{"type": "error", "error": f"Failed loading indicators: {e}"}]
        self.trie = trie
        logger.info("Indicator matcher ready (%d nodes)", len(trie))
        return [{"type": "ready"}]

    def cancel(self) -> None:
        """Drop the live request without emitting anything."""
        self.request_id = None
        self._cursors = []

    def run_round(self) -> list[Message]:
        """Pull matches round-robin until the budget is spent or all lines end."""
        if self.request_id is None:
            return []
        request_id = self.request_id
        cursors = self._cursors
        chunk: list[list[IndicatorMatch]] = [[] for _ in cursors]
        start = self.clock()

        while True:
            for i, cursor in enumerate(cursors):
                if cursor is None:
                    continue
                match = next(cursor, None)
                if match is None:
                    cursors[i] = None
                else:
                    chunk[i].append(match)
            if all(cursor is None for cursor in cursors):
                break
            if self.clock() - start >= self.budget:
                break

        output: list[Message] = []
        if any(chunk):
            output.append({
                "type": "chunk",
                "request_id": request_id,
                "per_line": [[m.to_json() for m in line] for line in chunk],
            })
        if all(cursor is None for cursor in cursors):
            logger.debug("Request %d complete", request_id)
            output.append({"type": "end", "request_id": request_id})
            self.cancel()
        return output


class MatchWorker:
    """Runs a MatchOrchestrator on a background thread.

    Messages go in through ``send``; output lands on ``outbox`` (or is passed
    to *on_output*). While a request is running, every queued message is
    handled between rounds.
    """

    def __init__(
        self,
        orchestrator: MatchOrchestrator,
        on_output: Callable[[Message], None] | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.inbox: queue.Queue[Message | None] = queue.Queue()
        self.outbox: queue.Queue[Message] = queue.Queue()
        self._on_output = on_output or self.outbox.put
        self._thread = threading.Thread(target=self._run, name="match-worker", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def send(self, message: Message) -> None:
        self.inbox.put(message)

    def stop(self, timeout: float | None = None) -> None:
        """Finish the current round, then end the thread."""
        self.inbox.put(None)
        self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def drain(self) -> list[Message]:
        """Every output message produced so far."""
        messages: list[Message] = []
        try:
            while True:
                messages.append(self.outbox.get_nowait())
        except queue.Empty:
            pass
        return messages

    def _emit(self, messages: list[Message]) -> None:
        for message in messages:
            self._on_output(message)

    def _run(self) -> None:
        while True:
            if self.orchestrator.running:
                try:
                    message = self.inbox.get_nowait()
                except queue.Empty:
                    self._step(self.orchestrator.run_round)
                    continue
            else:
                message = self.inbox.get()
            if message is None:
                return
            self._step(lambda: self.orchestrator.handle(message))

    def _step(self, action: Callable[[], list[Message]]) -> None:
        try:
            self._emit(action())
        except Exception as e:
            logger.exception("Match worker step failed")
            error: Message = {"type": "error", "error": str(e)}
            if self.orchestrator.request_id is not None:
                error["request_id"] = self.orchestrator.request_id
            self.orchestrator.cancel()
            self._emit([error])
