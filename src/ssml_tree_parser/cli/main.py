"""Main CLI entry point for the ssml-tree command-line tool.

Provides token listings and tree dumps of SSML documents read from files or
standard input.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from ssml_tree_parser import __version__
from ssml_tree_parser.api import SSMLParser
from ssml_tree_parser.shared.config import ConfigError, ParserConfig
from ssml_tree_parser.shared.logging import get_logger
from ssml_tree_parser.tree import ParseResult

STDIN_MARKER = "-"
OUTPUT_FORMATS = ("json", "text")

logger = get_logger(__name__, None, "cli")


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self) -> None:
        self.parser_config = ParserConfig.default()
        self.output_format = "text"
        self.show_diagnostics = False

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        The file holds :class:`ParserConfig` fields plus the optional CLI keys
        ``output_format`` and ``show_diagnostics``.

        Raises:
            ConfigError: If the file cannot be read or holds invalid settings
        """
        config = cls()
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not load config file {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must hold a JSON object")

        config.output_format = data.pop("output_format", config.output_format)
        if config.output_format not in OUTPUT_FORMATS:
            raise ConfigError(f"Unknown output_format: {config.output_format!r}")
        config.show_diagnostics = data.pop("show_diagnostics", config.show_diagnostics)
        if not isinstance(config.show_diagnostics, bool):
            raise ConfigError(
                f"show_diagnostics must be a boolean, got {config.show_diagnostics!r}"
            )
        config.parser_config = ParserConfig.from_dict(data)
        return config


def read_source(source: str) -> str:
    """Read markup from a file path, or from stdin when ``source`` is ``-``."""
    if source == STDIN_MARKER:
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="ssml-tree",
        description="Tokenize SSML documents and print their element trees"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Tokenize command
    tokenize_parser = subparsers.add_parser("tokenize", help="List the tokens of a document")
    tokenize_parser.add_argument(
        "source",
        help="SSML file to read, or '-' for standard input"
    )
    tokenize_parser.add_argument(
        "--format", "-f",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format (default: text)"
    )

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Print the element tree of a document")
    parse_parser.add_argument(
        "source",
        help="SSML file to read, or '-' for standard input"
    )
    parse_parser.add_argument(
        "--format", "-f",
        choices=OUTPUT_FORMATS,
        help="Output format (default: text)"
    )
    parse_parser.add_argument(
        "--strategy", "-s",
        choices=["stack", "recursive"],
        help="Tree construction strategy (default: stack)"
    )
    parse_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file"
    )
    parse_parser.add_argument(
        "--diagnostics", "-d",
        action="store_true",
        help="Also print diagnostics about malformed markup"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def format_tokens(parser: SSMLParser, markup: str, format_type: str) -> str:
    """Format the token listing of ``markup``."""
    tokens = parser.tokenize(markup)
    if format_type == "json":
        return json.dumps(
            [
                {"kind": token.kind, "value": token.value, "offset": token.offset}
                for token in tokens
            ],
            indent=2
        )
    return "\n".join(f"{token.kind:<12} {token.value!r}" for token in tokens)


def format_result(result: ParseResult, format_type: str, show_diagnostics: bool) -> str:
    """Format a parse result as JSON or as an indented tree."""
    if format_type == "json":
        data: Dict[str, Any] = result.to_dict()
        if not show_diagnostics:
            data.pop("diagnostics")
        return json.dumps(data, indent=2)

    lines: List[str] = []
    if result.root is not None:
        lines.append(result.root.render())
    if show_diagnostics:
        for diag in result.diagnostics:
            lines.append(f"{diag.severity.name}: {diag.message}")
    return "\n".join(lines)


def cmd_tokenize(args: argparse.Namespace) -> int:
    """Handle tokenize command."""
    try:
        markup = read_source(args.source)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading {args.source}: {e}", file=sys.stderr)
        return 1

    print(format_tokens(SSMLParser(), markup, args.format))
    return 0


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle parse command."""
    config = CLIConfig()
    try:
        if args.config:
            config = CLIConfig.from_file(args.config)
        if args.strategy:
            config.parser_config = config.parser_config.override(
                tree_strategy=args.strategy
            )
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.format:
        config.output_format = args.format
    if args.diagnostics:
        config.show_diagnostics = True

    try:
        markup = read_source(args.source)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading {args.source}: {e}", file=sys.stderr)
        return 1

    result = SSMLParser(config=config.parser_config).parse(markup)
    logger.debug("Parsed document", extra=result.summary())
    print(format_result(result, config.output_format, config.show_diagnostics))

    if result.root is None or not result.success:
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    try:
        if args.command == "tokenize":
            return cmd_tokenize(args)
        if args.command == "parse":
            return cmd_parse(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
