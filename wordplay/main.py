"""CLI entry point: find indicators in clues and run wordplay pipelines."""

from __future__ import annotations

import argparse
import logging
import sys
from functools import partial

from wordplay.constants import DEFAULT_ROUND_BUDGET
from wordplay.display import print_derivations, print_matches
from wordplay.indicators import load_default_indicators, load_indicators
from wordplay.lexicon import Lexicon
from wordplay.nlp import Token, tokenize
from wordplay.orchestrator import MatchOrchestrator
from wordplay.pipeline import PipelineContext, build_wordset, parse_op
from wordplay.wordset import WordsetConfig


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Cryptic crossword helper: indicators and wordplay candidates",
    )
    parser.add_argument(
        "--clue", "-c",
        action="append",
        default=[],
        help="Clue text to scan for indicators (repeatable)",
    )
    parser.add_argument(
        "--indicators",
        type=str,
        help="Indicator file (default: data/indicators.txt)",
    )
    parser.add_argument(
        "--budget", "-b",
        type=float,
        default=DEFAULT_ROUND_BUDGET,
        help=f"Seconds per matching round (default: {DEFAULT_ROUND_BUDGET})",
    )
    parser.add_argument(
        "--text", "-t",
        type=str,
        help='Clue fragment to transform, e.g. "tad"',
    )
    parser.add_argument(
        "--op", "-o",
        action="append",
        default=[],
        help='Operation to apply in order, e.g. "anagram", "insert:net", "select:0,-1", "match:^.{6}$"',
    )
    parser.add_argument(
        "--limit", "-n",
        type=int,
        default=50,
        help="Maximum candidates to show (default: 50)",
    )
    parser.add_argument(
        "--lexicon",
        type=str,
        help="Word list for the wordlike operation (one word per line)",
    )
    parser.add_argument(
        "--explain",
        action="store_true",
        help="Show how each candidate was derived",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log matcher progress",
    )
    return parser.parse_args(argv)


def find_indicators(
    clues: list[str],
    orchestrator: MatchOrchestrator,
) -> list[list[dict]]:
    """Run one matching request to completion and collect matches per clue."""
    results: list[list[dict]] = [[] for _ in clues]
    lines = [[token.lemma for token in tokenize(clue)] for clue in clues]
    request_id = (orchestrator.last_request_id or 0) + 1
    orchestrator.handle({"type": "submit", "request_id": request_id, "lines": lines})

    while orchestrator.running:
        for message in orchestrator.run_round():
            if message["type"] == "chunk":
                for i, chunk in enumerate(message["per_line"]):
                    results[i].extend(chunk)
    return results


def run_indicators(args: argparse.Namespace) -> int:
    loader = partial(load_indicators, args.indicators) if args.indicators else load_default_indicators
    orchestrator = MatchOrchestrator(loader=loader, budget=args.budget)
    for message in orchestrator.handle({"type": "download"}):
        if message["type"] == "error":
            print(message["error"])
            return 1

    results = find_indicators(args.clue, orchestrator)
    for clue, matches in zip(args.clue, results):
        tokens: list[Token] = tokenize(clue)
        print_matches(clue, tokens, matches)
    return 0


def run_pipeline(args: argparse.Namespace) -> int:
    config = WordsetConfig()
    if args.lexicon:
        lexicon = Lexicon()
        lexicon.load(args.lexicon)
        print(f"Loaded {lexicon.word_count} words.")
        config = WordsetConfig(scorer=lexicon.score)

    try:
        spec = {"text": args.text, "ops": [parse_op(op) for op in args.op]}
        wordset = build_wordset(spec, PipelineContext(config=config))
    except ValueError as e:
        print(f"Invalid pipeline: {e}")
        return 1

    print_derivations(wordset.take(args.limit), explain=args.explain)
    return 0


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.clue and not args.text:
        raw = input("Enter a clue: ").strip()
        if not raw:
            print("No clue entered.")
            sys.exit(1)
        args.clue = [raw]

    status = 0
    if args.clue:
        status = run_indicators(args)
    if args.text and status == 0:
        status = run_pipeline(args)
    sys.exit(status)


if __name__ == "__main__":
    main()
