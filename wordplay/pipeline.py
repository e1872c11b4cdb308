"""Build Wordset chains from plain data, as sent by the CLI and the web app.

A spec is a dict with one source key and an optional list of operations:

    {"text": "tad", "ops": [["anagram"], ["insert", {"text": "net", "ops": [["reverse"]]}]]}

Sources: ``text``, ``synonym``, ``homophone``, ``abbreviation``, or ``union``
(a list of specs). Each op is ``[name, *args]``; wordset arguments are specs.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from wordplay.abbreviations import Abbreviations
from wordplay.datamuse import means_like, sounds_like
from wordplay.nlp import slugify
from wordplay.wordset import Lookup, Wordset, WordsetConfig

NO_ARGUMENT_OPS = {"anagram", "ends", "prefix", "suffix", "substring", "reverse", "wordlike"}
WORDSET_OPS = {"concat", "insert", "delete", "delete_all", "intersect"}
INDEX_OPS = {"select", "remove"}
PATTERN_OPS = {"match"}


@dataclass
class PipelineContext:
    """Collaborators available to spec sources."""
    config: WordsetConfig = field(default_factory=WordsetConfig)
    synonyms: Lookup = means_like
    homophones: Lookup = sounds_like
    abbreviations: Abbreviations | None = None
    max_letters: int | None = None


def build_wordset(spec: Any, context: PipelineContext | None = None) -> Wordset:
    """Turn a spec into a lazy Wordset. Raises ValueError on a malformed spec."""
    context = context or PipelineContext()
    if not isinstance(spec, dict):
        raise ValueError(f"Wordset spec must be an object, got {type(spec).__name__}")

    wordset = _source(spec, context)
    ops = spec.get("ops", [])
    if not isinstance(ops, list):
        raise ValueError("'ops' must be a list")
    for op in ops:
        wordset = apply_op(wordset, op, context)
    return wordset


def _source(spec: dict, context: PipelineContext) -> Wordset:
    config = context.config
    if "text" in spec:
        text = _string(spec["text"], "text")
        if context.max_letters is not None and len(slugify(text)) > context.max_letters:
            raise ValueError(f"'text' is longer than {context.max_letters} letters")
        return Wordset.literal(text, config)
    if "synonym" in spec:
        return Wordset.synonym(_string(spec["synonym"], "synonym"), context.synonyms, config)
    if "homophone" in spec:
        return Wordset.homophone(_string(spec["homophone"], "homophone"), context.homophones, config)
    if "abbreviation" in spec:
        if context.abbreviations is None:
            raise ValueError("No abbreviation table loaded")
        return Wordset.abbreviation(
            _string(spec["abbreviation"], "abbreviation"), context.abbreviations, config,
        )
    if "union" in spec:
        parts = spec["union"]
        if not isinstance(parts, list) or not parts:
            raise ValueError("'union' must be a non-empty list of specs")
        return Wordset.union(*(build_wordset(part, context) for part in parts))
    raise ValueError("Wordset spec needs one of: text, synonym, homophone, abbreviation, union")


def _string(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string")
    return value


def apply_op(wordset: Wordset, op: Any, context: PipelineContext) -> Wordset:
    if isinstance(op, str):
        op = [op]
    if not isinstance(op, list) or not op or not isinstance(op[0], str):
        raise ValueError(f"Malformed operation: {op!r}")
    name, args = op[0], op[1:]

    if name in NO_ARGUMENT_OPS:
        _expect_args(name, args, 0)
        return getattr(wordset, name)()
    if name in WORDSET_OPS:
        _expect_args(name, args, 1)
        return getattr(wordset, name)(build_wordset(args[0], context))
    if name in INDEX_OPS:
        _expect_args(name, args, 1)
        indices = args[0]
        if not isinstance(indices, list) or not all(
            isinstance(i, int) and not isinstance(i, bool) for i in indices
        ):
            raise ValueError(f"'{name}' takes a list of integer indices")
        return getattr(wordset, name)(indices)
    if name in PATTERN_OPS:
        _expect_args(name, args, 1)
        try:
            pattern = re.compile(_string(args[0], name))
        except re.error as e:
            raise ValueError(f"Bad pattern for '{name}': {e}") from e
        return wordset.match(pattern)
    raise ValueError(f"Unknown operation: {name}")


def _expect_args(name: str, args: list, count: int) -> None:
    if len(args) != count:
        raise ValueError(f"'{name}' takes {count} argument(s), got {len(args)}")


def parse_op(text: str) -> list:
    """Parse a CLI op such as ``anagram``, ``select:0,-1`` or ``match:^.{6}$``.

    Wordset arguments are literal text: ``insert:net``.
    """
    name, _, arg = text.partition(":")
    name = name.strip().replace("-", "_")
    if name in NO_ARGUMENT_OPS:
        return [name]
    if name in WORDSET_OPS:
        return [name, {"text": arg}]
    if name in INDEX_OPS:
        try:
            return [name, [int(part) for part in arg.split(",") if part.strip()]]
        except ValueError as e:
            raise ValueError(f"Bad indices for '{name}': {arg}") from e
    if name in PATTERN_OPS:
        return [name, arg]
    raise ValueError(f"Unknown operation: {name}")
