"""Command-line interface module for SSML Tree Parser.

Provides the ``ssml-tree`` tool for listing tokens and printing element trees.
"""

from .main import main

__all__ = ["main"]
