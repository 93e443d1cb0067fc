"""Public parsing API: module-level functions and the configurable parser."""

from .parser import SSMLParser, parse, parse_tree, tokenize

__all__ = [
    "SSMLParser",
    "parse",
    "parse_tree",
    "tokenize",
]
