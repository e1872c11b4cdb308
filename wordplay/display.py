"""Terminal rendering of indicator matches and derivation trees."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from wordplay.indicators import IndicatorMatch
from wordplay.nlp import Token
from wordplay.wordset import WordDerivation


def _as_match(match: IndicatorMatch | dict) -> tuple[int, int, str, int]:
    if isinstance(match, IndicatorMatch):
        return match.start, match.end, match.type.value, match.score
    return match["start"], match["end"], match["type"], match["score"]


def render_matches(tokens: Sequence[Token], matches: Iterable[IndicatorMatch | dict]) -> str:
    """One line per indicator found in a clue line, best score first."""
    rows = sorted((_as_match(m) for m in matches), key=lambda row: (-row[3], row[0], row[1]))
    if not rows:
        return "  (no indicators)"

    lines: list[str] = []
    for start, end, type_name, score in rows:
        text = "".join(token.text for token in tokens[start:end + 1]).strip()
        lines.append(f"  {text:<24s} {type_name:<13s} {score:>4d}")
    return "\n".join(lines)


def render_derivation(derivation: WordDerivation, depth: int = 0) -> str:
    """Indented provenance tree, the derivation itself on the first line."""
    lines = [f"{'  ' * depth}{' '.join(derivation.words):<16s} {derivation.description}"]
    for parent in derivation.parents:
        lines.append(render_derivation(parent, depth + 1))
    return "\n".join(lines)


def print_matches(line: str, tokens: Sequence[Token], matches: Iterable[IndicatorMatch | dict]) -> None:
    print(f"\n{line}")
    print(render_matches(tokens, matches))


def print_derivations(derivations: Sequence[WordDerivation], explain: bool = False) -> None:
    if not derivations:
        print("No candidates.")
        return

    print(f"\n{len(derivations)} candidate(s):")
    for d in derivations:
        if explain:
            print(render_derivation(d))
        else:
            print(f"  {' '.join(d.words):<16s} {d.description}")
