"""SSML Tree Parser.

Converts speech-synthesis markup into an ordered tree of elements and text
runs without a general-purpose XML library. Malformed markup never raises;
problems are reported as diagnostics next to a best-effort tree.

Progressive API Disclosure:
- Level 1: Simple functions - parse_tree(), tokenize(), parse()
- Level 2: Configured parser - SSMLParser class with ParserConfig
"""

__version__ = "0.1.0"
__author__ = "SSML Tree Parser Team"

# Level 1: Simple functions
# Level 2: Configured parser
from .api import SSMLParser, parse, parse_tree, tokenize

# Configuration classes for advanced usage
from .shared.config import ParserConfig, TreeStrategy
from .shared.result import DiagnosticEntry, DiagnosticSeverity

# Core data structures
from .tokenization import Token, WordTokenizer
from .tree import ParseResult, SSMLAttribute, SSMLNode, SSMLTreeBuilder

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse_tree",
    "parse",
    "tokenize",

    # Level 2: Configured parser and its components
    "SSMLParser",
    "SSMLTreeBuilder",
    "WordTokenizer",

    # Result objects and data structures
    "ParseResult",
    "SSMLNode",
    "SSMLAttribute",
    "Token",
    "DiagnosticEntry",
    "DiagnosticSeverity",

    # Configuration
    "ParserConfig",
    "TreeStrategy",
]
