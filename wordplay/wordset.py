"""Wordsets: lazy sets of candidate letter strings and how each was derived.

A Wordset lets wordplay be applied to many possibilities at once. The clue
"Escort is tad confused about returning profit (6)" can be worked as:

    wordplay = Wordset.literal("tad").anagram().insert(
        Wordset.synonym("profit", means_like).reverse()
    )
    answers = Wordset.synonym("escort", means_like).intersect(wordplay).match(r"^.{6}$")

Every transformation is lazy and returns a new Wordset; nothing is computed
until the result is iterated, and each result is computed once no matter how
many times (or by how many consumers) it is iterated.
"""

from __future__ import annotations

import re
import time
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from itertools import islice
from typing import TYPE_CHECKING

from wordplay.combinatorics import (
    Replay,
    diagonalize,
    distinct_permutations,
    product,
    subsequence_embeddings,
)
from wordplay.nlp import slugify

if TYPE_CHECKING:
    from wordplay.abbreviations import Abbreviations

Scorer = Callable[[str], float]
Lookup = Callable[[str], Sequence[str]]


@dataclass(frozen=True)
class WordDerivation:
    """A candidate string and how it was produced.

    ``words`` holds uppercase A-Z tokens, read as space-separated words. Most
    wordplay ignores spacing, but some (first letters of each word, hidden
    words) depends on it.

    ``description`` uses clue-answer notation: ATD*, TEN<, AT(TEN)D, TH(-is).

    ``parents`` are the derivations this one was built from; empty for input.
    """
    words: tuple[str, ...]
    description: str
    parents: tuple[WordDerivation, ...] = ()

    @property
    def letters(self) -> str:
        return "".join(self.words)

    def to_json(self) -> dict:
        return {
            "words": list(self.words),
            "letters": self.letters,
            "description": self.description,
            "parents": [parent.to_json() for parent in self.parents],
        }


class WordsetTimeout(TimeoutError):
    """A Wordset was iterated past its configured deadline."""


@dataclass(frozen=True)
class WordsetConfig:
    """Collaborators shared by every Wordset derived from the same source.

    With a *deadline* (a *clock* reading), iterating any of those Wordsets
    raises WordsetTimeout once the clock passes it.
    """
    scorer: Scorer | None = None
    deadline: float | None = None
    clock: Callable[[], float] = time.monotonic

    def check_deadline(self) -> None:
        if self.deadline is not None and self.clock() >= self.deadline:
            raise WordsetTimeout("Wordset deadline passed")


DEFAULT_CONFIG = WordsetConfig()


def _mark_removed(letters: str, removed: set[int]) -> str:
    """Kept letters uppercase, removed runs as (-abc)."""
    out: list[str] = []
    run: list[str] = []
    for i, ch in enumerate(letters):
        if i in removed:
            run.append(ch.lower())
            continue
        if run:
            out.append(f"(-{''.join(run)})")
            run = []
        out.append(ch)
    if run:
        out.append(f"(-{''.join(run)})")
    return "".join(out)


def _mark_selected(letters: str, selected: set[int]) -> str:
    """Selected letters, with each run of skipped letters shown as _."""
    out: list[str] = []
    skipping = False
    for i, ch in enumerate(letters):
        if i in selected:
            out.append(ch)
            skipping = False
        elif not skipping:
            out.append("_")
            skipping = True
    return "".join(out)


def _resolve_indices(indices: Sequence[int], length: int) -> set[int] | None:
    """Map possibly negative indices into one word, or None if any is out of range."""
    positions: set[int] = set()
    for index in indices:
        position = index if index >= 0 else length + index
        if not 0 <= position < length:
            return None
        positions.add(position)
    return positions


def _word_boundaries(words: Sequence[str]) -> set[int]:
    boundaries: set[int] = set()
    offset = 0
    for word in words[:-1]:
        offset += len(word)
        boundaries.add(offset)
    return boundaries


class Wordset:
    """A lazily computed, replayable sequence of WordDerivations."""

    def __init__(self, items: Iterable[WordDerivation],
                 config: WordsetConfig | None = None) -> None:
        self.config = config or DEFAULT_CONFIG
        if isinstance(items, Replay):
            self._items: Replay[WordDerivation] = items
        else:
            check = self.config.check_deadline if self.config.deadline is not None else None
            self._items = Replay(items, on_pull=check)

    def __iter__(self) -> Iterator[WordDerivation]:
        return iter(self._items)

    def _derive(self, items: Iterable[WordDerivation]) -> Wordset:
        return Wordset(items, self.config)

    def take(self, limit: int) -> list[WordDerivation]:
        return list(islice(self, limit))

    def take_until_deadline(self, limit: int) -> tuple[list[WordDerivation], bool]:
        """Like take, but stop at the config deadline; the flag is True if it did."""
        found: list[WordDerivation] = []
        try:
            for derivation in islice(self, limit):
                found.append(derivation)
        except WordsetTimeout:
            return found, True
        return found, False

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    @classmethod
    def literal(cls, text: str, config: WordsetConfig | None = None) -> Wordset:
        words = tuple(w for w in (slugify(part) for part in text.split(" ")) if w)
        return cls([WordDerivation(words, f'literal "{text}"')], config)

    @classmethod
    def _lookup(cls, kind: str, phrase: str, lookup: Lookup,
                config: WordsetConfig | None) -> Wordset:
        def _items() -> Iterator[WordDerivation]:
            for candidate in lookup(phrase):
                words = tuple(w for w in (slugify(part) for part in candidate.split(" ")) if w)
                if words:
                    yield WordDerivation(words, f'{kind} "{phrase}"')

        return cls(_items(), config)

    @classmethod
    def synonym(cls, phrase: str, lookup: Lookup,
                config: WordsetConfig | None = None) -> Wordset:
        """Candidates from a synonym service; *lookup* runs on first iteration."""
        return cls._lookup("synonym", phrase, lookup, config)

    @classmethod
    def homophone(cls, phrase: str, lookup: Lookup,
                  config: WordsetConfig | None = None) -> Wordset:
        return cls._lookup("homophone", phrase, lookup, config)

    @classmethod
    def abbreviation(cls, lemma: str, table: Abbreviations,
                     config: WordsetConfig | None = None) -> Wordset:
        def _items() -> Iterator[WordDerivation]:
            for abbreviation, _score in table.get(lemma):
                letters = slugify(abbreviation)
                if letters:
                    yield WordDerivation((letters,), f'abbr "{lemma}"')

        return cls(_items(), config)

    @classmethod
    def union(cls, *wordsets: Wordset) -> Wordset:
        """Fairly interleave several wordsets, even infinite ones."""
        config = wordsets[0].config if wordsets else None
        return cls(diagonalize(wordsets), config)

    # ------------------------------------------------------------------
    # Wordplay
    # ------------------------------------------------------------------

    def anagram(self) -> Wordset:
        """Every distinct rearrangement of the letters."""
        def _items() -> Iterator[WordDerivation]:
            for item in self:
                if not item.letters:
                    continue
                for arrangement in distinct_permutations(item.letters):
                    yield WordDerivation((arrangement,), f"{arrangement}*", (item,))

        return self._derive(_items())

    def concat(self, other: Wordset) -> Wordset:
        """Charade: this followed by other, keeping word boundaries."""
        def _items() -> Iterator[WordDerivation]:
            for a, b in product(self, other):
                yield WordDerivation(
                    a.words + b.words, f"{a.letters}+{b.letters}", (a, b),
                )

        return self._derive(_items())

    def insert(self, other: Wordset) -> Wordset:
        """Containment: other placed strictly inside this."""
        def _items() -> Iterator[WordDerivation]:
            for a, b in product(self, other):
                container = a.letters
                content = b.letters
                for i in range(1, len(container)):
                    head, tail = container[:i], container[i:]
                    yield WordDerivation(
                        (head + content + tail,), f"{head}({content}){tail}", (a, b),
                    )

        return self._derive(_items())

    def delete(self, other: Wordset) -> Wordset:
        """Remove other's letters from this, as a (not necessarily contiguous)
        subsequence. One result per way of embedding other."""
        def _items() -> Iterator[WordDerivation]:
            for a, b in product(self, other):
                letters = a.letters
                if len(b.letters) >= len(letters):
                    continue
                for positions in subsequence_embeddings(letters, b.letters):
                    removed = set(positions)
                    kept = "".join(ch for i, ch in enumerate(letters) if i not in removed)
                    yield WordDerivation((kept,), _mark_removed(letters, removed), (a, b))

        return self._derive(_items())

    def delete_all(self, other: Wordset) -> Wordset:
        """Remove every contiguous, non-overlapping occurrence of other at once."""
        def _items() -> Iterator[WordDerivation]:
            for a, b in product(self, other):
                letters = a.letters
                pattern = b.letters
                if not pattern:
                    continue
                removed: set[int] = set()
                i = letters.find(pattern)
                while i != -1:
                    removed.update(range(i, i + len(pattern)))
                    i = letters.find(pattern, i + len(pattern))
                if not removed or len(removed) == len(letters):
                    continue
                kept = "".join(ch for k, ch in enumerate(letters) if k not in removed)
                yield WordDerivation((kept,), _mark_removed(letters, removed), (a, b))

        return self._derive(_items())

    def ends(self) -> Wordset:
        """Remove a strictly interior span, keeping both ends."""
        def _items() -> Iterator[WordDerivation]:
            for item in self:
                letters = item.letters
                n = len(letters)
                for start in range(1, n - 1):
                    for end in range(start + 1, n):
                        removed = set(range(start, end))
                        yield WordDerivation(
                            (letters[:start] + letters[end:],),
                            _mark_removed(letters, removed),
                            (item,),
                        )

        return self._derive(_items())

    def prefix(self) -> Wordset:
        """Every proper leading span, longest first."""
        def _items() -> Iterator[WordDerivation]:
            for item in self:
                letters = item.letters
                for end in range(len(letters) - 1, 0, -1):
                    yield WordDerivation((letters[:end],), f"{letters[:end]}_", (item,))

        return self._derive(_items())

    def suffix(self) -> Wordset:
        """Every proper trailing span, longest first."""
        def _items() -> Iterator[WordDerivation]:
            for item in self:
                letters = item.letters
                for start in range(1, len(letters)):
                    yield WordDerivation((letters[start:],), f"_{letters[start:]}", (item,))

        return self._derive(_items())

    def substring(self) -> Wordset:
        """Hidden words: every span of the letters, across word boundaries."""
        def _items() -> Iterator[WordDerivation]:
            for item in self:
                letters = item.letters
                n = len(letters)
                boundaries = _word_boundaries(item.words)
                for start in range(n):
                    for end in range(n, start, -1):
                        shown = "".join(
                            (" " + letters[k]) if k in boundaries and k != start else letters[k]
                            for k in range(start, end)
                        )
                        description = ("_" if start > 0 else "") + shown + ("_" if end < n else "")
                        yield WordDerivation((letters[start:end],), description, (item,))

        return self._derive(_items())

    def _per_word(self, indices: Sequence[int], keep_indexed: bool) -> Wordset:
        def _items() -> Iterator[WordDerivation]:
            for item in self:
                words: list[str] = []
                marks: list[str] = []
                for word in item.words:
                    positions = _resolve_indices(indices, len(word))
                    if positions is None:
                        break
                    if keep_indexed:
                        words.append("".join(word[i] for i in sorted(positions)))
                        marks.append(_mark_selected(word, positions))
                    else:
                        words.append("".join(ch for i, ch in enumerate(word) if i not in positions))
                        marks.append(_mark_removed(word, positions))
                else:
                    kept = tuple(w for w in words if w)
                    if kept:
                        yield WordDerivation(kept, " ".join(marks), (item,))

        return self._derive(_items())

    def select(self, indices: Sequence[int]) -> Wordset:
        """Keep the letters at *indices* of every word (negative counts from the end)."""
        return self._per_word(indices, keep_indexed=True)

    def remove(self, indices: Sequence[int]) -> Wordset:
        """Drop the letters at *indices* of every word (negative counts from the end)."""
        return self._per_word(indices, keep_indexed=False)

    def reverse(self) -> Wordset:
        def _items() -> Iterator[WordDerivation]:
            for item in self:
                reversed_letters = item.letters[::-1]
                yield WordDerivation((reversed_letters,), f"{reversed_letters}<", (item,))

        return self._derive(_items())

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def intersect(self, other: Wordset) -> Wordset:
        """Derivations of this whose letters also appear in other.

        Other is read in full on first iteration; for repeated letters the
        first derivation seen in other is the one paired.
        """
        def _items() -> Iterator[WordDerivation]:
            lookup: dict[str, WordDerivation] = {}
            for b in other:
                lookup.setdefault(b.letters, b)
            for a in self:
                b = lookup.get(a.letters)
                if b is not None:
                    yield WordDerivation(a.words, f"{a.description} = {b.description}", (a, b))

        return self._derive(_items())

    def match(self, pattern: str | re.Pattern[str]) -> Wordset:
        """Keep derivations whose letters contain a match for *pattern*."""
        compiled = re.compile(pattern)

        def _items() -> Iterator[WordDerivation]:
            for item in self:
                if compiled.search(item.letters):
                    yield item

        return self._derive(_items())

    def wordlike(self) -> Wordset:
        """Keep derivations the configured scorer rates at zero or above."""
        scorer = self.config.scorer
        if scorer is None:
            raise ValueError("wordlike() needs a Wordset configured with a scorer")

        def _items() -> Iterator[WordDerivation]:
            for item in self:
                if scorer(item.letters) >= 0:
                    yield item

        return self._derive(_items())
