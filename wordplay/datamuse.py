"""Datamuse word-finding API client, used for synonym and homophone candidates.

Keyword names read as the relation they ask for, e.g. ``synonym_of=["ocean"]``
gives "sea", ``has_example=["gondola"]`` gives "boat".
"""

from __future__ import annotations

import json as _json
from collections.abc import Iterator
from typing import Any
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from wordplay.constants import DATAMUSE_TIMEOUT, DATAMUSE_URL

# Single-value constraints and hints
SCALAR_PARAMS: dict[str, str] = {
    "means_like": "ml",
    "sounds_like": "sl",
    "spelled_like": "sp",
    "left_context": "lc",
    "right_context": "rc",
    "query_echo": "qe",
}

# Related-word constraints; each accepts a list of words
RELATION_PARAMS: dict[str, str] = {
    "noun_after": "rel_jja",
    "adjective_before": "rel_jjb",
    "synonym_of": "rel_syn",
    "triggered_by": "rel_trg",
    "antonym_of": "rel_ant",
    "has_example": "rel_spc",
    "kind_of": "rel_gen",
    "part_of": "rel_com",
    "has_part": "rel_par",
    "comes_after": "rel_bga",
    "comes_before": "rel_bgb",
    "homophone_of": "rel_hom",
    "consonancy": "rel_cns",
}

METADATA_FLAGS: dict[str, str] = {
    "definitions": "d",
    "parts_of_speech": "p",
    "syllable_count": "s",
    "pronunciation_arpabet": "r",
    "pronunciation_ipa": "r",
    "word_frequency": "f",
}


def query_parts(**params: Any) -> Iterator[tuple[str, str]]:
    """Translate keyword parameters into Datamuse query pairs, in order."""
    for key, value in params.items():
        if key in SCALAR_PARAMS:
            yield SCALAR_PARAMS[key], str(value)
        elif key in RELATION_PARAMS:
            for word in value:
                yield RELATION_PARAMS[key], word
        elif key == "vocabulary":
            if value == "spanish":
                yield "v", "es"
        elif key == "topic_words":
            yield "topics", ",".join(value)
        elif key == "max_results":
            yield "max", str(int(value))
        elif key == "metadata":
            letters = []
            for item in value:
                if item not in METADATA_FLAGS:
                    raise ValueError(f"Unknown Datamuse metadata flag: {item}")
                letters.append(METADATA_FLAGS[item])
                if item == "pronunciation_ipa":
                    yield "ipa", "1"
            yield "md", "".join(letters)
        else:
            raise TypeError(f"Unknown Datamuse parameter: {key}")


def datamuse(timeout: float = DATAMUSE_TIMEOUT, **params: Any) -> list[dict]:
    """Query the Datamuse API. Network and decoding errors propagate."""
    url = f"{DATAMUSE_URL}?{urlencode(list(query_parts(**params)))}"
    req = Request(url, headers={"Accept": "application/json"})
    with urlopen(req, timeout=timeout) as resp:
        body = _json.loads(resp.read())
    if not isinstance(body, list):
        raise ValueError(f"Unexpected Datamuse response: {body!r}")
    return body


def _words(results: list[dict]) -> list[str]:
    return [r["word"].upper() for r in results if r.get("word")]


def means_like(phrase: str, max_results: int = 100) -> list[str]:
    """Ranked candidates meaning roughly *phrase*. Usable as a Wordset lookup."""
    return _words(datamuse(means_like=phrase, max_results=max_results))


def sounds_like(phrase: str, max_results: int = 100) -> list[str]:
    """Ranked candidates pronounced like *phrase*."""
    return _words(datamuse(sounds_like=phrase, max_results=max_results))
