"""Lazy combinatorial primitives shared by the wordset engine."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


def distinct_permutations(letters: str) -> Iterator[str]:
    """Yield each distinct arrangement of *letters* exactly once.

    The original order comes first, then every other arrangement in
    lexicographic order. Stepping the multiset to its next permutation never
    revisits an arrangement, so repeated letters cost nothing extra.
    """
    yield letters
    chars = sorted(letters)
    n = len(chars)
    while True:
        arrangement = "".join(chars)
        if arrangement != letters:
            yield arrangement
        # rightmost ascent; none left means the last arrangement was reached
        i = n - 2
        while i >= 0 and chars[i] >= chars[i + 1]:
            i -= 1
        if i < 0:
            return
        j = n - 1
        while chars[j] <= chars[i]:
            j -= 1
        chars[i], chars[j] = chars[j], chars[i]
        chars[i + 1:] = reversed(chars[i + 1:])


def subsequence_embeddings(word: str, pattern: str) -> Iterator[tuple[int, ...]]:
    """Yield the positions of *word* matched by every embedding of *pattern*.

    Depth-first: consuming the current letter is tried before skipping it, so
    embeddings that match early come first.
    """
    chosen: list[int] = []

    def _search(wi: int, pi: int) -> Iterator[tuple[int, ...]]:
        if pi == len(pattern):
            yield tuple(chosen)
            return
        if len(word) - wi < len(pattern) - pi:
            return
        if word[wi] == pattern[pi]:
            chosen.append(wi)
            yield from _search(wi + 1, pi + 1)
            chosen.pop()
        yield from _search(wi + 1, pi)

    if not pattern:
        return iter(())
    return _search(0, 0)


def product(a: Iterable[T], b: Iterable[U]) -> Iterator[tuple[T, U]]:
    """Cross product that works even when both inputs are infinite.

    Pulls alternately from each side and pairs every new element with all
    elements already seen on the other side. Everything pulled is kept in
    memory until the opposite side runs out.
    """
    a_iter = iter(a)
    b_iter = iter(b)
    a_seen: list[T] = []
    b_seen: list[U] = []
    a_done = False
    b_done = False

    while not a_done or not b_done:
        if not a_done:
            try:
                a_value = next(a_iter)
            except StopIteration:
                a_done = True
                # no later a_value will need these
                b_seen = []
            else:
                for b_value in b_seen:
                    yield a_value, b_value
                if not b_done:
                    a_seen.append(a_value)
        if not b_done:
            try:
                b_value = next(b_iter)
            except StopIteration:
                b_done = True
                a_seen = []
            else:
                for a_value in a_seen:
                    yield a_value, b_value
                if not a_done:
                    b_seen.append(b_value)


def chain(iterables: Iterable[Iterable[T]]) -> Iterator[T]:
    for iterable in iterables:
        yield from iterable


def diagonalize(iterables: Iterable[Iterable[T]]) -> Iterator[T]:
    """Interleave many (possibly infinite) iterables so each item is reached.

    Every time a new iterable is opened, one item is pulled from each open
    iterable, newest first.
    """
    open_iters: list[Iterator[T]] = []

    def _sweep() -> Iterator[T]:
        for i in range(len(open_iters) - 1, -1, -1):
            try:
                item = next(open_iters[i])
            except StopIteration:
                del open_iters[i]
            else:
                yield item

    for iterable in iterables:
        open_iters.append(iter(iterable))
        yield from _sweep()
    while open_iters:
        yield from _sweep()


class Replay(Generic[T]):
    """Memoized multicast view over a single-pass source.

    Each element is pulled from the source once, the first time any consumer
    reaches it, and replayed from the buffer for every other consumer. The
    source is not touched until the first element is requested.

    If the source raises, the error is kept and raised again for every
    consumer that reaches the same point. *on_pull* runs before each pull
    from the source and may raise to stop it.
    """

    __slots__ = ("_source", "_iterator", "_buffer", "_exhausted", "_error", "_on_pull")

    def __init__(self, source: Iterable[T],
                 on_pull: Callable[[], None] | None = None) -> None:
        self._source = source
        self._iterator: Iterator[T] | None = None
        self._buffer: list[T] = []
        self._exhausted = False
        self._error: Exception | None = None
        self._on_pull = on_pull

    def __iter__(self) -> Iterator[T]:
        i = 0
        while True:
            if i < len(self._buffer):
                yield self._buffer[i]
                i += 1
                continue
            if self._exhausted or not self._pull():
                return

    def _pull(self) -> bool:
        if self._error is not None:
            raise self._error
        try:
            if self._on_pull is not None:
                self._on_pull()
            if self._iterator is None:
                self._iterator = iter(self._source)
            item = next(self._iterator)
        except StopIteration:
            self._exhausted = True
            self._iterator = None
            return False
        except Exception as e:
            self._error = e
            self._iterator = None
            raise
        self._buffer.append(item)
        return True

    @property
    def buffered(self) -> int:
        """Number of elements pulled from the source so far."""
        return len(self._buffer)
