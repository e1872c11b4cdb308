"""Trie-backed word list used to judge whether letters look like an answer."""

from __future__ import annotations

from pathlib import Path

from wordplay.nlp import slugify


class TrieNode:
    __slots__ = ("children", "is_word")

    def __init__(self) -> None:
        self.children: dict[str, TrieNode] = {}
        self.is_word: bool = False


class Lexicon:
    """Word list with prefix lookup and a plausibility score for candidates."""

    def __init__(self) -> None:
        self.root = TrieNode()
        self._word_count = 0

    def load(self, path: str | Path) -> None:
        """Load words from a file (one word or phrase per line)."""
        with open(path, encoding="utf-8") as f:
            for line in f:
                self.add(line)

    def add(self, word: str) -> None:
        letters = slugify(word)
        if not letters:
            return
        node = self.root
        for ch in letters:
            if ch not in node.children:
                node.children[ch] = TrieNode()
            node = node.children[ch]
        if not node.is_word:
            node.is_word = True
            self._word_count += 1

    def _walk(self, letters: str) -> TrieNode | None:
        node = self.root
        for ch in letters:
            node = node.children.get(ch)
            if node is None:
                return None
        return node

    def is_valid_word(self, word: str) -> bool:
        node = self._walk(word.upper())
        return node is not None and node.is_word

    def has_prefix(self, prefix: str) -> bool:
        return self._walk(prefix.upper()) is not None

    def _segments(self, letters: str) -> bool:
        """Can *letters* be split into two or more listed words?"""
        n = len(letters)
        # reachable[i]: letters[:i] splits into listed words
        reachable = [False] * (n + 1)
        reachable[0] = True
        for start in range(n):
            if not reachable[start]:
                continue
            node = self.root
            for end in range(start, n):
                node = node.children.get(letters[end])
                if node is None:
                    break
                if node.is_word and not (start == 0 and end == n - 1):
                    reachable[end + 1] = True
        return reachable[n]

    def score(self, letters: str) -> int:
        """1 for a listed word, 0 for a run of listed words, -1 otherwise."""
        letters = letters.upper()
        if not letters:
            return -1
        if self.is_valid_word(letters):
            return 1
        if self._segments(letters):
            return 0
        return -1

    @property
    def word_count(self) -> int:
        return self._word_count
