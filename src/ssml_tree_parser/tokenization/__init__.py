"""Tokenization engine for SSML tree parsing.

Key Components:
    WordTokenizer: Character-class scanner producing tag and text tokens
    Token: One whole tag or text run, with classification helpers
    TokenizationResult: Tokens plus the characters the scanner dropped
"""

from .tokenizer import (
    Token,
    TokenizationResult,
    WordTokenizer,
    extract_value,
    is_closing_tag,
    is_opening_tag,
    is_self_closing_tag,
    is_tag,
    normalize_markup,
    tokenize,
    tokenize_attributes,
)

__all__ = [
    "Token",
    "TokenizationResult",
    "WordTokenizer",
    "extract_value",
    "is_closing_tag",
    "is_opening_tag",
    "is_self_closing_tag",
    "is_tag",
    "normalize_markup",
    "tokenize",
    "tokenize_attributes",
]
