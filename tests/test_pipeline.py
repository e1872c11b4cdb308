"""Tests for building Wordsets from plain-data specs."""

from __future__ import annotations

import pytest

from wordplay.abbreviations import Abbreviations
from wordplay.lexicon import Lexicon
from wordplay.pipeline import PipelineContext, apply_op, build_wordset, parse_op
from wordplay.wordset import Wordset, WordsetConfig


@pytest.fixture
def context(small_lexicon: Lexicon, small_abbreviations: Abbreviations) -> PipelineContext:
    return PipelineContext(
        config=WordsetConfig(scorer=small_lexicon.score),
        synonyms=lambda phrase: {"escort": ["attend", "usher"], "profit": ["net", "gain"]}[phrase],
        homophones=lambda phrase: ["night"],
        abbreviations=small_abbreviations,
    )


class TestBuildWordset:
    def test_text_with_ops(self, context: PipelineContext) -> None:
        spec = {"text": "this", "ops": [["prefix"], ["match", "^.{2}$"]]}
        assert [d.description for d in build_wordset(spec, context)] == ["TH_"]

    def test_nested_wordset_argument(self, context: PipelineContext) -> None:
        spec = {"synonym": "escort", "ops": [["intersect", {
            "text": "tad",
            "ops": ["anagram", ["insert", {"synonym": "profit", "ops": ["reverse"]}]],
        }]]}
        (answer,) = build_wordset(spec, context)
        assert answer.description == 'synonym "escort" = AT(TEN)D'

    def test_select(self, context: PipelineContext) -> None:
        spec = {"text": "hello world", "ops": [["select", [0, -1]]]}
        (d,) = build_wordset(spec, context)
        assert d.words == ("HO", "WD")

    def test_homophone_and_abbreviation(self, context: PipelineContext) -> None:
        assert [d.letters for d in build_wordset({"homophone": "knight"}, context)] == ["NIGHT"]
        assert [d.letters for d in build_wordset({"abbreviation": "river"}, context)] == ["R", "DEE"]

    def test_union(self, context: PipelineContext) -> None:
        spec = {"union": [{"text": "one"}, {"abbreviation": "note"}]}
        assert sorted(d.letters for d in build_wordset(spec, context)) == ["N", "ONE", "TE"]

    def test_wordlike_uses_context_scorer(self, context: PipelineContext) -> None:
        spec = {"text": "net", "ops": ["anagram", "wordlike"]}
        assert sorted(d.letters for d in build_wordset(spec, context)) == ["NET", "TEN"]

    def test_default_context(self) -> None:
        (d,) = build_wordset({"text": "abc", "ops": ["reverse"]})
        assert d.letters == "CBA"

    def test_no_abbreviation_table(self) -> None:
        with pytest.raises(ValueError, match="abbreviation"):
            build_wordset({"abbreviation": "river"}, PipelineContext())

    @pytest.mark.parametrize("spec", [
        "tad",
        {},
        {"text": 3},
        {"union": []},
        {"text": "tad", "ops": "anagram"},
        {"text": "tad", "ops": [["shuffle"]]},
        {"text": "tad", "ops": [["anagram", 1]]},
        {"text": "tad", "ops": [["insert"]]},
        {"text": "tad", "ops": [["insert", "net"]]},
        {"text": "tad", "ops": [["select", [0, "1"]]]},
        {"text": "tad", "ops": [["select", [True]]]},
        {"text": "tad", "ops": [["match", "("]]},
        {"text": "tad", "ops": [[]]},
        {"text": "tad", "ops": [[3]]},
    ])
    def test_malformed(self, spec) -> None:
        with pytest.raises(ValueError):
            build_wordset(spec)

    def test_text_letter_cap(self) -> None:
        capped = PipelineContext(max_letters=5)
        assert [d.letters for d in build_wordset({"text": "ab cde"}, capped)] == ["ABCDE"]
        with pytest.raises(ValueError, match="longer than 5 letters"):
            build_wordset({"text": "abc def"}, capped)

    def test_apply_op_string(self) -> None:
        wordset = apply_op(Wordset.literal("ab"), "reverse", PipelineContext())
        assert [d.letters for d in wordset] == ["BA"]


class TestParseOp:
    def test_no_argument(self) -> None:
        assert parse_op("anagram") == ["anagram"]

    def test_wordset_argument(self) -> None:
        assert parse_op("insert:net") == ["insert", {"text": "net"}]

    def test_hyphenated_name(self) -> None:
        assert parse_op("delete-all:a") == ["delete_all", {"text": "a"}]

    def test_indices(self) -> None:
        assert parse_op("select:0,-1") == ["select", [0, -1]]

    def test_pattern_keeps_colons(self) -> None:
        assert parse_op("match:^a:b$") == ["match", "^a:b$"]

    def test_bad_indices(self) -> None:
        with pytest.raises(ValueError, match="indices"):
            parse_op("select:first")

    def test_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unknown"):
            parse_op("shuffle")
