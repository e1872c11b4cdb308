"""Cryptic crossword helpers: indicator matching and wordplay transformations."""
