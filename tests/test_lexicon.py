"""Unit tests for the lexicon trie and its plausibility score."""

from __future__ import annotations

from pathlib import Path

from wordplay.lexicon import Lexicon


class TestLexicon:
    def test_valid_word(self, small_lexicon: Lexicon) -> None:
        assert small_lexicon.is_valid_word("attend")
        assert not small_lexicon.is_valid_word("atten")

    def test_prefix(self, small_lexicon: Lexicon) -> None:
        assert small_lexicon.has_prefix("ATT")
        assert not small_lexicon.has_prefix("XQ")

    def test_add_normalizes(self) -> None:
        lexicon = Lexicon()
        lexicon.add("Café\n")
        lexicon.add("ice-cream")
        assert lexicon.is_valid_word("CAFE")
        assert lexicon.is_valid_word("ICECREAM")

    def test_duplicates_counted_once(self) -> None:
        lexicon = Lexicon()
        lexicon.add("test")
        lexicon.add("TEST")
        lexicon.add("   ")
        assert lexicon.word_count == 1

    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "words.txt"
        path.write_text("sea\nocean\n\n", encoding="utf-8")
        lexicon = Lexicon()
        lexicon.load(path)
        assert lexicon.word_count == 2
        assert lexicon.is_valid_word("OCEAN")


class TestScore:
    def test_listed_word(self, small_lexicon: Lexicon) -> None:
        assert small_lexicon.score("WORD") == 1

    def test_run_of_words(self, small_lexicon: Lexicon) -> None:
        assert small_lexicon.score("TESTWORD") == 0
        assert small_lexicon.score("WOWO") == 0

    def test_not_a_word(self, small_lexicon: Lexicon) -> None:
        assert small_lexicon.score("XYZ") == -1
        assert small_lexicon.score("TESTX") == -1

    def test_empty(self, small_lexicon: Lexicon) -> None:
        assert small_lexicon.score("") == -1
