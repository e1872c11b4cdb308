"""Trie of lemma phrases that signal wordplay, with its line-oriented file format.

Each line of the file is one trie node, written depth-first:

    lemma [scores] [>]

``scores`` is a run of ``<code><integer>`` pairs (see INDICATOR_CODES) sorted
by descending score. A trailing ``>`` opens the node's child block, which is
closed by a line holding only ``<``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import NamedTuple

from wordplay.constants import (
    CODE_TO_INDICATOR,
    INDICATOR_CODES,
    INDICATORS_FILE,
    IndicatorType,
)

_SCORES_PATTERN = re.compile(r"(?:[a-z]{1,2}\d+)+")
_SCORE_PAIR = re.compile(r"([a-z]{1,2})(\d+)")

OPEN_BLOCK = ">"
CLOSE_BLOCK = "<"


class IndicatorParseError(ValueError):
    """Raised for malformed indicator data. Carries the 1-based line number."""

    def __init__(self, message: str, line_number: int) -> None:
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


class IndicatorMatch(NamedTuple):
    """An indicator found in a lemma sequence; start and end are inclusive."""
    start: int
    end: int
    type: IndicatorType
    score: int

    def to_json(self) -> dict:
        return {
            "start": self.start,
            "end": self.end,
            "type": self.type.value,
            "score": self.score,
        }


class IndicatorNode:
    __slots__ = ("lemma", "children", "scores")

    def __init__(self, lemma: str) -> None:
        self.lemma = lemma
        self.children: dict[str, IndicatorNode] = {}
        self.scores: dict[IndicatorType, int] = {}

    def add_score(self, indicator_type: IndicatorType, score: int) -> None:
        self.scores[indicator_type] = self.scores.get(indicator_type, 0) + score

    def child(self, lemma: str) -> IndicatorNode:
        node = self.children.get(lemma)
        if node is None:
            node = IndicatorNode(lemma)
            self.children[lemma] = node
        return node

    def dump_scores(self) -> str:
        ranked = sorted(self.scores.items(), key=lambda item: -item[1])
        return "".join(f"{INDICATOR_CODES[t]}{score}" for t, score in ranked)

    def dump(self) -> Iterator[str]:
        parts = [self.lemma]
        if self.scores:
            parts.append(self.dump_scores())
        if self.children:
            parts.append(OPEN_BLOCK)
        yield " ".join(parts)
        for node in self.children.values():
            yield from node.dump()
        if self.children:
            yield CLOSE_BLOCK

    def follow(self, lemmas: Sequence[str], start: int, end: int) -> Iterator[IndicatorMatch]:
        node = self
        while True:
            for indicator_type, score in node.scores.items():
                yield IndicatorMatch(start, end, indicator_type, score)
            end += 1
            if end >= len(lemmas):
                return
            node = node.children.get(lemmas[end])
            if node is None:
                return


class IndicatorTrie:
    """Maps lemma phrases to scored indicator types. Append/merge only."""

    def __init__(self) -> None:
        self.children: dict[str, IndicatorNode] = {}

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> IndicatorTrie:
        trie = cls()
        trie.parse(lines)
        return trie

    def insert(self, lemmas: Sequence[str], indicator_type: IndicatorType, score: int) -> None:
        """Add *score* to *indicator_type* for the phrase *lemmas*."""
        if not lemmas:
            return
        for lemma in lemmas:
            if lemma in (OPEN_BLOCK, CLOSE_BLOCK):
                raise ValueError(f"{lemma!r} is reserved by the indicator file format")
        node = self.children.get(lemmas[0])
        if node is None:
            node = IndicatorNode(lemmas[0])
            self.children[lemmas[0]] = node
        for lemma in lemmas[1:]:
            node = node.child(lemma)
        node.add_score(indicator_type, score)

    def lookup(self, lemmas: Sequence[str]) -> dict[IndicatorType, int]:
        """Scores recorded for exactly this phrase (empty if none)."""
        if not lemmas:
            return {}
        node = self.children.get(lemmas[0])
        for lemma in lemmas[1:]:
            if node is None:
                return {}
            node = node.children.get(lemma)
        return dict(node.scores) if node is not None else {}

    def match(self, lemmas: Sequence[str]) -> Iterator[IndicatorMatch]:
        """Lazily yield every indicator phrase found anywhere in *lemmas*."""
        for start, lemma in enumerate(lemmas):
            node = self.children.get(lemma)
            if node is None:
                continue
            yield from node.follow(lemmas, start, start)

    def dump(self) -> list[str]:
        lines: list[str] = []
        for node in self.children.values():
            lines.extend(node.dump())
        return lines

    def parse(self, lines: Iterable[str]) -> None:
        """Merge serialized nodes into this trie.

        Raises IndicatorParseError on unknown codes, malformed scores,
        unmatched ``<`` or a block left open at end of input.
        """
        stack: list[IndicatorTrie | IndicatorNode] = [self]
        line_number = 0
        for line_number, raw in enumerate(lines, 1):
            line = raw.strip()
            if not line:
                continue
            if line == CLOSE_BLOCK:
                if len(stack) == 1:
                    raise IndicatorParseError("unmatched '<'", line_number)
                stack.pop()
                continue

            lemma, *parts = line.split(" ")
            if lemma in (OPEN_BLOCK, CLOSE_BLOCK):
                raise IndicatorParseError(f"reserved lemma {lemma!r}", line_number)
            opens = bool(parts) and parts[-1] == OPEN_BLOCK
            if opens:
                parts.pop()
            if len(parts) > 1:
                raise IndicatorParseError(f"unexpected fields: {' '.join(parts)!r}", line_number)

            parent = stack[-1]
            node = parent.children.get(lemma)
            if node is None:
                node = IndicatorNode(lemma)
                parent.children[lemma] = node
            if parts:
                for indicator_type, score in _parse_scores(parts[0], line_number):
                    node.add_score(indicator_type, score)
            if opens:
                stack.append(node)

        if len(stack) > 1:
            raise IndicatorParseError(
                f"{len(stack) - 1} block(s) not closed at end of input", line_number
            )

    def __len__(self) -> int:
        count = 0
        pending = list(self.children.values())
        while pending:
            node = pending.pop()
            count += 1
            pending.extend(node.children.values())
        return count


def _parse_scores(field: str, line_number: int) -> Iterator[tuple[IndicatorType, int]]:
    if not _SCORES_PATTERN.fullmatch(field):
        raise IndicatorParseError(f"malformed scores {field!r}", line_number)
    for code, digits in _SCORE_PAIR.findall(field):
        indicator_type = CODE_TO_INDICATOR.get(code)
        if indicator_type is None:
            raise IndicatorParseError(f"unknown indicator code {code!r}", line_number)
        yield indicator_type, int(digits)


def load_indicators(path: str | Path) -> IndicatorTrie:
    """Read an indicator file into a new trie."""
    with open(path, encoding="utf-8") as f:
        return IndicatorTrie.from_lines(f)


def load_default_indicators() -> IndicatorTrie:
    """Load the indicator trie from the data/ directory."""
    data_dir = Path(__file__).resolve().parent.parent / "data"
    path = data_dir / INDICATORS_FILE
    if not path.exists():
        raise FileNotFoundError(
            f"Indicator data not found at {path}. "
            f"Build or download {INDICATORS_FILE} and place it in data/"
        )
    return load_indicators(path)
