"""Unit tests for the abbreviation table."""

from __future__ import annotations

from pathlib import Path

import pytest

from wordplay.abbreviations import Abbreviations, load_abbreviations, load_default_abbreviations


class TestAbbreviations:
    def test_get_best_first(self, small_abbreviations: Abbreviations) -> None:
        assert small_abbreviations.get("river") == [("R", 8), ("DEE", 2)]

    def test_get_unknown(self, small_abbreviations: Abbreviations) -> None:
        assert small_abbreviations.get("ocean") == []

    def test_scores_add_up(self) -> None:
        abbreviations = Abbreviations()
        abbreviations.insert("love", "O", 3)
        abbreviations.insert("love", "O", 4)
        assert abbreviations.get("love") == [("O", 7)]

    def test_contains_and_len(self, small_abbreviations: Abbreviations) -> None:
        assert "note" in small_abbreviations
        assert "ocean" not in small_abbreviations
        assert len(small_abbreviations) == 2


class TestDumpParse:
    def test_dump_format(self, small_abbreviations: Abbreviations) -> None:
        assert small_abbreviations.dump() == ["river R 8 DEE 2", "note TE 5 N 3"]

    def test_round_trip(self, small_abbreviations: Abbreviations) -> None:
        copy = Abbreviations()
        copy.parse(small_abbreviations.dump())
        assert copy.data == small_abbreviations.data

    def test_parse_merges(self, small_abbreviations: Abbreviations) -> None:
        small_abbreviations.parse(["river R 1 PO 2", ""])
        assert small_abbreviations.get("river") == [("R", 9), ("DEE", 2), ("PO", 2)]

    def test_missing_score(self) -> None:
        with pytest.raises(ValueError, match="line 2"):
            Abbreviations().parse(["east E 10", "west W"])

    def test_bad_score(self) -> None:
        with pytest.raises(ValueError, match="bad score"):
            Abbreviations().parse(["east E ten"])


class TestLoading:
    def test_load_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "abbreviations.txt"
        path.write_text("king K 8 R 8\n", encoding="utf-8")
        assert load_abbreviations(path).get("king") == [("K", 8), ("R", 8)]

    def test_bundled_data_parses(self) -> None:
        abbreviations = load_default_abbreviations()
        assert ("O", 10) in abbreviations.get("love")
