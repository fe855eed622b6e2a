"""Public API functions for flatpath.

This module provides the user-facing functions: flatten, dumps, unflatten,
loads, validate and roundtrip. Each call creates a fresh PathEncoder and/or
TreeBuilder to guarantee zero shared state between calls.
"""

from __future__ import annotations

from flatpath.codec.builder import EntrySource, TreeBuilder
from flatpath.codec.config import CodecConfig
from flatpath.codec.encoder import PathEncoder
from flatpath.codec.entries import FlatEntry, dumps_entries
from flatpath.result import ValidationReport
from flatpath.tree.nodes import Node

__all__ = ["dumps", "flatten", "loads", "roundtrip", "unflatten", "validate"]


def flatten(root: Node, config: CodecConfig | None = None) -> list[FlatEntry]:
    """Flatten a tree into ``(path, value)`` entries.

    Args:
        root:   The document root. Never mutated.
        config: Codec parameters. Defaults to ``CodecConfig()`` when None.

    Returns:
        One entry per leaf text and per attribute, in document pre-order.
    """
    return PathEncoder(config=config).encode(root)


def dumps(root: Node, config: CodecConfig | None = None) -> str:
    """Flatten a tree into newline-terminated ``path|value`` text.

    Raises:
        FormatError: If a value contains a line break.
    """
    delimiter = config.delimiter if config is not None else CodecConfig().delimiter
    return dumps_entries(flatten(root, config=config), delimiter)


def unflatten(entries: EntrySource, config: CodecConfig | None = None) -> Node:
    """Rebuild a tree from entries or raw lines given in any order.

    Args:
        entries: Flat text, or an iterable of ``FlatEntry`` objects and/or
                 ``path|value`` lines.
        config:  Codec parameters. Defaults to ``CodecConfig()`` when None.

    Returns:
        The reconstructed root Node. Never a partial tree: invalid input
        raises a ``FlatPathError`` subclass instead.
    """
    return TreeBuilder(config=config).build(entries)


def loads(text: str, config: CodecConfig | None = None) -> Node:
    """Rebuild a tree from ``path|value`` text (blank lines are skipped)."""
    return unflatten(text, config=config)


def validate(entries: EntrySource, config: CodecConfig | None = None) -> ValidationReport:
    """Report every violation in ``entries`` without raising.

    Always collects all errors, whatever ``config.error_mode`` says, so
    bulk validation tooling sees the full picture in one pass.
    """
    return TreeBuilder(config=config).validate(entries)


def roundtrip(root: Node, config: CodecConfig | None = None) -> Node:
    """Return ``unflatten(flatten(root))``."""
    return unflatten(flatten(root, config=config), config=config)
