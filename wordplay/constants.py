"""Wordplay constants: indicator types, their serialization codes, and defaults."""

from __future__ import annotations

from enum import Enum


class IndicatorType(Enum):
    # Regular, non-contiguous selection of letters
    ALTERNATION = "alternation"
    ODDLY = "oddly"
    EVENLY = "evenly"

    ANAGRAM = "anagram"
    ROTATION = "rotation"
    EXCHANGE = "exchange"

    # Generic containment; INSERTION is "X in Y", CONTAINER is "X around Y"
    CONTAINMENT = "containment"
    INSERTION = "insertion"
    CONTAINER = "container"

    # Generic deletion; EXPULSION is "X losing Y", DEPARTURE is "Y leaving X"
    DELETION = "deletion"
    EXPULSION = "expulsion"
    DEPARTURE = "departure"
    BEHEADING = "beheading"
    CURTAILING = "curtailing"
    TRIMMING = "trimming"
    EMPTYING = "emptying"

    HIDDEN = "hidden"

    HOMOPHONE = "homophone"

    REVERSAL = "reversal"

    # Selection takes a few letters, deletion takes most of them
    SELECTION = "selection"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    ENDS = "ends"
    CENTERS = "centers"

    SUBSTITUTION = "substitution"


# Serialization codes used by the indicator file format (1-2 lowercase letters)
INDICATOR_CODES: dict[IndicatorType, str] = {
    IndicatorType.ALTERNATION: "t",
    IndicatorType.ODDLY: "o",
    IndicatorType.EVENLY: "e",
    IndicatorType.ANAGRAM: "a",
    IndicatorType.ROTATION: "z",
    IndicatorType.EXCHANGE: "x",
    IndicatorType.CONTAINMENT: "c",
    IndicatorType.INSERTION: "i",
    IndicatorType.CONTAINER: "k",
    IndicatorType.DELETION: "d",
    IndicatorType.EXPULSION: "l",
    IndicatorType.DEPARTURE: "j",
    IndicatorType.BEHEADING: "b",
    IndicatorType.CURTAILING: "y",
    IndicatorType.TRIMMING: "w",
    IndicatorType.EMPTYING: "m",
    IndicatorType.HIDDEN: "h",
    IndicatorType.HOMOPHONE: "f",
    IndicatorType.REVERSAL: "r",
    IndicatorType.SELECTION: "v",
    IndicatorType.PREFIX: "p",
    IndicatorType.SUFFIX: "q",
    IndicatorType.ENDS: "n",
    IndicatorType.CENTERS: "u",
    IndicatorType.SUBSTITUTION: "s",
}


def build_code_index(codes: dict[IndicatorType, str]) -> dict[str, IndicatorType]:
    """Invert a type -> code table, failing on any code used twice."""
    index: dict[str, IndicatorType] = {}
    for indicator_type, code in codes.items():
        if code in index:
            raise ValueError(
                f"duplicate indicator code {code!r}: "
                f"{index[code].value} and {indicator_type.value}"
            )
        index[code] = indicator_type
    return index


CODE_TO_INDICATOR: dict[str, IndicatorType] = build_code_index(INDICATOR_CODES)

# Wall-clock budget for one orchestrator round, in seconds
DEFAULT_ROUND_BUDGET = 0.1

# Data files, relative to the repository's data/ directory
INDICATORS_FILE = "indicators.txt"
ABBREVIATIONS_FILE = "abbreviations.txt"

DATAMUSE_URL = "https://api.datamuse.com/words"
DATAMUSE_TIMEOUT = 10.0

# Wall-clock limit for one web transform request, in seconds
TRANSFORM_TIMEOUT = 5.0
# Longest text (in letters) a web transform accepts as a literal source
MAX_TRANSFORM_LETTERS = 30
