"""Text normalization: letter slugs for wordplay and lemma tokens for matching.

``tokenize`` is the default lemmatizer. Its lemma is the normalized word form;
callers that have a real lemmatizer can pass any ``str -> list[Token]``
callable wherever a lemmatizer is accepted.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Callable
from dataclasses import dataclass

WORD_PATTERN = re.compile(r"\w+(?:['’-]\w+)*")
NON_LETTERS = re.compile(r"[^A-Z]+")


@dataclass(frozen=True)
class Token:
    """One word of input text. Joining every ``text`` rebuilds the input."""
    text: str
    lemma: str


Lemmatizer = Callable[[str], list[Token]]


def slugify(text: str) -> str:
    """Uppercase A-Z letters of *text*, with diacritics folded away."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return NON_LETTERS.sub("", stripped.upper())


def normalize_lemma(word: str) -> str:
    return word.lower().replace("’", "'")


def tokenize(text: str) -> list[Token]:
    """Split *text* into word tokens, keeping surrounding punctuation in ``text``.

    Trailing punctuation and whitespace belong to the preceding word; anything
    before the first word is attached to it.
    """
    matches = list(WORD_PATTERN.finditer(text))
    tokens: list[Token] = []
    for i, m in enumerate(matches):
        start = 0 if i == 0 else m.start()
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        tokens.append(Token(text=text[start:end], lemma=normalize_lemma(m.group())))
    return tokens


def lemmas(text: str, lemmatizer: Lemmatizer = tokenize) -> list[str]:
    return [token.lemma for token in lemmatizer(text)]
