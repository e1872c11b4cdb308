"""Cryptic abbreviation table: lemma -> weighted letter abbreviations."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from wordplay.constants import ABBREVIATIONS_FILE


class Abbreviations:
    """Additive abbreviation scores, one line per lemma when serialized:

        lemma ABBR score ABBR score ...
    """

    def __init__(self) -> None:
        self.data: dict[str, dict[str, int]] = {}

    def insert(self, lemma: str, abbreviation: str, score: int) -> None:
        table = self.data.setdefault(lemma, {})
        table[abbreviation] = table.get(abbreviation, 0) + score

    def get(self, lemma: str) -> list[tuple[str, int]]:
        """Abbreviations for *lemma*, best score first."""
        table = self.data.get(lemma, {})
        return sorted(table.items(), key=lambda item: -item[1])

    def dump(self) -> list[str]:
        lines: list[str] = []
        for lemma, table in self.data.items():
            parts = [lemma]
            for abbreviation, score in table.items():
                parts.extend((abbreviation, str(score)))
            lines.append(" ".join(parts))
        return lines

    def parse(self, lines: Iterable[str]) -> None:
        for line_number, raw in enumerate(lines, 1):
            line = raw.strip()
            if not line:
                continue
            lemma, *parts = line.split(" ")
            if len(parts) % 2:
                raise ValueError(f"line {line_number}: abbreviation without a score")
            for abbreviation, score in zip(parts[::2], parts[1::2]):
                if not score.isdigit():
                    raise ValueError(f"line {line_number}: bad score {score!r}")
                self.insert(lemma, abbreviation, int(score))

    def __contains__(self, lemma: str) -> bool:
        return lemma in self.data

    def __len__(self) -> int:
        return len(self.data)


def load_abbreviations(path: str | Path) -> Abbreviations:
    abbreviations = Abbreviations()
    with open(path, encoding="utf-8") as f:
        abbreviations.parse(f)
    return abbreviations


def load_default_abbreviations() -> Abbreviations:
    """Load the abbreviation table from the data/ directory."""
    data_dir = Path(__file__).resolve().parent.parent / "data"
    path = data_dir / ABBREVIATIONS_FILE
    if not path.exists():
        raise FileNotFoundError(
            f"Abbreviation data not found at {path}. "
            f"Build or download {ABBREVIATIONS_FILE} and place it in data/"
        )
    return load_abbreviations(path)
