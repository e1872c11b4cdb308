"""Unit tests for the lazy combinatorial primitives."""

from __future__ import annotations

import time
from itertools import count, islice, permutations

import pytest

from wordplay.combinatorics import (
    Replay,
    chain,
    diagonalize,
    distinct_permutations,
    product,
    subsequence_embeddings,
)


class TestDistinctPermutations:
    def test_all_distinct_letters(self) -> None:
        result = list(distinct_permutations("ABC"))
        assert len(result) == 6
        assert set(result) == {"".join(p) for p in permutations("ABC")}

    def test_repeated_letters_once_each(self) -> None:
        result = list(distinct_permutations("SEE"))
        assert sorted(result) == ["EES", "ESE", "SEE"]

    def test_identity_first(self) -> None:
        assert next(distinct_permutations("TAD")) == "TAD"

    def test_single_letter(self) -> None:
        assert list(distinct_permutations("A")) == ["A"]

    def test_all_same(self) -> None:
        assert list(distinct_permutations("AAAA")) == ["AAAA"]

    def test_lazy_on_long_input(self) -> None:
        # 12! arrangements; only the first few are computed
        first = list(islice(distinct_permutations("ABCDEFGHIJKL"), 3))
        assert len(first) == 3

    def test_identity_then_lexicographic(self) -> None:
        assert list(distinct_permutations("TAD")) == ["TAD", "ADT", "ATD", "DAT", "DTA", "TDA"]

    def test_many_repeats_without_search(self) -> None:
        started = time.monotonic()
        result = list(distinct_permutations("AAAAAAAAAAAAB"))
        assert time.monotonic() - started < 1.0
        assert len(result) == 13
        assert len(set(result)) == 13
        assert result[0] == "AAAAAAAAAAAAB"


class TestSubsequenceEmbeddings:
    def test_single_embedding(self) -> None:
        assert list(subsequence_embeddings("THIS", "IS")) == [(2, 3)]

    def test_multiple_embeddings_early_first(self) -> None:
        assert list(subsequence_embeddings("ABB", "AB")) == [(0, 1), (0, 2)]

    def test_no_embedding(self) -> None:
        assert list(subsequence_embeddings("ABC", "CA")) == []

    def test_pattern_longer_than_word(self) -> None:
        assert list(subsequence_embeddings("AB", "ABC")) == []

    def test_empty_pattern(self) -> None:
        assert list(subsequence_embeddings("ABC", "")) == []


class TestProduct:
    def test_diagonal_order(self) -> None:
        result = list(product([1, 2, 3], [4, 5, 6, 7, 8]))
        assert result == [
            (1, 4), (2, 4), (1, 5), (2, 5), (3, 4), (3, 5),
            (1, 6), (2, 6), (3, 6),
            (1, 7), (2, 7), (3, 7),
            (1, 8), (2, 8), (3, 8),
        ]

    def test_every_pair_once(self) -> None:
        result = list(product("ab", range(4)))
        assert sorted(result) == sorted((a, b) for a in "ab" for b in range(4))

    def test_empty_side(self) -> None:
        assert list(product([], [1, 2])) == []
        assert list(product([1, 2], [])) == []

    def test_infinite_inputs(self) -> None:
        pairs = product(count(), count())
        assert next(pairs) == (0, 0)
        first = list(islice(pairs, 20))
        assert (1, 1) in first
        assert (2, 0) in first

    def test_infinite_with_finite(self) -> None:
        result = list(islice(product(count(), ["x"]), 5))
        assert result == [(0, "x"), (1, "x"), (2, "x"), (3, "x"), (4, "x")]


class TestChaining:
    def test_chain(self) -> None:
        assert list(chain([[1, 2], [], [3]])) == [1, 2, 3]

    def test_diagonalize_reaches_every_source(self) -> None:
        result = list(islice(diagonalize([count(0, 10), count(1, 10), count(2, 10)]), 9))
        assert {0, 1, 2} <= set(result)

    def test_diagonalize_finite(self) -> None:
        result = list(diagonalize([[1, 2, 3], ["a"], [], ["b", "c"]]))
        assert sorted(map(str, result)) == ["1", "2", "3", "a", "b", "c"]

    def test_diagonalize_newest_first(self) -> None:
        assert list(diagonalize([[1, 2], ["a", "b"]])) == [1, "a", 2, "b"]


class TestReplay:
    def test_source_pulled_once(self) -> None:
        pulls: list[int] = []

        def source():
            for i in range(3):
                pulls.append(i)
                yield i

        replay = Replay(source())
        assert list(replay) == [0, 1, 2]
        assert list(replay) == [0, 1, 2]
        assert pulls == [0, 1, 2]

    def test_not_started_until_iterated(self) -> None:
        pulls: list[int] = []

        def source():
            pulls.append(0)
            yield 0

        replay = Replay(source())
        assert pulls == []
        assert replay.buffered == 0
        next(iter(replay))
        assert pulls == [0]

    def test_interleaved_consumers(self) -> None:
        replay = Replay(iter("abc"))
        first, second = iter(replay), iter(replay)
        assert next(first) == "a"
        assert next(second) == "a"
        assert next(second) == "b"
        assert next(first) == "b"
        assert replay.buffered == 2

    def test_infinite_source(self) -> None:
        replay = Replay(count())
        assert list(islice(replay, 4)) == [0, 1, 2, 3]
        assert list(islice(replay, 2)) == [0, 1]

    def test_source_error_raised_for_every_consumer(self) -> None:
        def source():
            yield 1
            raise OSError("lookup failed")

        replay = Replay(source())
        first = iter(replay)
        assert next(first) == 1
        with pytest.raises(OSError, match="lookup failed"):
            next(first)
        with pytest.raises(OSError, match="lookup failed"):
            list(replay)
        assert replay.buffered == 1

    def test_on_pull_can_stop_source(self) -> None:
        pulls: list[int] = []

        def stop_after_two() -> None:
            if len(pulls) == 2:
                raise TimeoutError("too slow")

        def source():
            for i in count():
                pulls.append(i)
                yield i

        replay = Replay(source(), on_pull=stop_after_two)
        with pytest.raises(TimeoutError):
            list(replay)
        assert pulls == [0, 1]
        assert list(islice(replay, 2)) == [0, 1]
