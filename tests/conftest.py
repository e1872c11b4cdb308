"""Shared fixtures for wordplay tests."""

from __future__ import annotations

import pytest

from wordplay.abbreviations import Abbreviations
from wordplay.constants import IndicatorType
from wordplay.indicators import IndicatorTrie
from wordplay.lexicon import Lexicon


@pytest.fixture
def small_trie() -> IndicatorTrie:
    """A handful of indicators inserted directly. No file I/O."""
    trie = IndicatorTrie()
    trie.insert(["break"], IndicatorType.ANAGRAM, 50)
    trie.insert(["break", "down"], IndicatorType.ANAGRAM, 40)
    trie.insert(["down"], IndicatorType.REVERSAL, 30)
    trie.insert(["about"], IndicatorType.CONTAINER, 40)
    trie.insert(["about"], IndicatorType.REVERSAL, 35)
    trie.insert(["heard"], IndicatorType.HOMOPHONE, 60)
    return trie


@pytest.fixture
def small_lexicon() -> Lexicon:
    lexicon = Lexicon()
    for word in ["TEST", "WORD", "WO", "RD", "ATTEND", "ESCORT", "TAD", "NET", "TEN"]:
        lexicon.add(word)
    return lexicon


@pytest.fixture
def small_abbreviations() -> Abbreviations:
    abbreviations = Abbreviations()
    abbreviations.insert("river", "R", 8)
    abbreviations.insert("river", "DEE", 2)
    abbreviations.insert("note", "TE", 5)
    abbreviations.insert("note", "N", 3)
    return abbreviations
