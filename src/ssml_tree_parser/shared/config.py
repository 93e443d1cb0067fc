"""Configuration objects for SSML tree parsing.

This module provides the immutable :class:`ParserConfig` consumed by the
tree builder and the parser API, together with JSON (de)serialization and a
couple of presets.
"""

import json
from dataclasses import dataclass, fields, replace
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class TreeStrategy(Enum):
    """Tree construction algorithm options."""

    STACK = auto()      # Explicit stack of open elements
    RECURSIVE = auto()  # Recursive descent with a shared high-water mark


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Configuration for the tokenizer, tree builder and parser API.

    Instances are frozen so a single configuration can be shared between
    parsers running in different threads.
    """

    tree_strategy: TreeStrategy = TreeStrategy.STACK
    collect_diagnostics: bool = True
    fallback_on_recursion_error: bool = True
    log_preview_length: int = 100

    def __post_init__(self) -> None:
        """Validate parser configuration."""
        if not isinstance(self.tree_strategy, TreeStrategy):
            raise ConfigValidationError(
                f"tree_strategy must be a TreeStrategy, got {self.tree_strategy!r}",
                field_name="tree_strategy",
                suggestions=[strategy.name for strategy in TreeStrategy],
            )
        for flag in ("collect_diagnostics", "fallback_on_recursion_error"):
            if not isinstance(getattr(self, flag), bool):
                raise ConfigValidationError(
                    f"{flag} must be a boolean, got {getattr(self, flag)!r}",
                    field_name=flag,
                    suggestions=["true", "false"],
                )
        if (
            not isinstance(self.log_preview_length, int)
            or isinstance(self.log_preview_length, bool)
        ):
            raise ConfigValidationError(
                f"log_preview_length must be an integer, got {self.log_preview_length!r}",
                field_name="log_preview_length",
            )
        if self.log_preview_length < 0:
            raise ConfigValidationError(
                "log_preview_length must be >= 0",
                field_name="log_preview_length",
            )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Strategy names are accepted in place of :class:`TreeStrategy` members.

        Example:
            >>> ParserConfig().override(tree_strategy="RECURSIVE").tree_strategy
            <TreeStrategy.RECURSIVE: 2>
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration field(s): {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )
        if "tree_strategy" in kwargs:
            kwargs["tree_strategy"] = _coerce_strategy(kwargs["tree_strategy"])
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {}
        for config_field in fields(self):
            value = getattr(self, config_field.name)
            result[config_field.name] = value.name if isinstance(value, Enum) else value
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Missing keys keep their defaults; unknown keys are rejected.
        """
        if not isinstance(data, dict):
            raise ConfigValidationError(
                f"Configuration must be a mapping, got {type(data).__name__}"
            )
        return cls().override(**data)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def default(cls) -> "ParserConfig":
        """Create the default configuration (stack strategy, diagnostics on)."""
        return cls()

    @classmethod
    def reference(cls) -> "ParserConfig":
        """Create configuration that builds trees with the recursive algorithm."""
        return cls(tree_strategy=TreeStrategy.RECURSIVE)


def _coerce_strategy(value: Any) -> TreeStrategy:
    if isinstance(value, TreeStrategy):
        return value
    if isinstance(value, str):
        try:
            return TreeStrategy[value.upper()]
        except KeyError:
            pass
    raise ConfigValidationError(
        f"Unknown tree strategy: {value!r}",
        field_name="tree_strategy",
        suggestions=[strategy.name for strategy in TreeStrategy],
    )
