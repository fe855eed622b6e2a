"""flatpath - flatten labeled trees into structural-path lines and rebuild them."""

from __future__ import annotations

from flatpath.api import dumps, flatten, loads, roundtrip, unflatten, validate
from flatpath.codec.builder import TreeBuilder
from flatpath.codec.config import CodecConfig, ErrorMode
from flatpath.codec.encoder import PathEncoder
from flatpath.codec.entries import FlatEntry
from flatpath.errors import (
    ConflictError,
    DepthLimitError,
    EmptyInputError,
    FlatPathError,
    FormatError,
    ReconstructionError,
    StructureError,
)
from flatpath.result import ValidationReport
from flatpath.tree.nodes import Node, structurally_equal

__version__: str = "0.1.0"
__all__: list[str] = [
    "CodecConfig",
    "ConflictError",
    "DepthLimitError",
    "EmptyInputError",
    "ErrorMode",
    "FlatEntry",
    "FlatPathError",
    "FormatError",
    "Node",
    "PathEncoder",
    "ReconstructionError",
    "StructureError",
    "TreeBuilder",
    "ValidationReport",
    "dumps",
    "flatten",
    "loads",
    "roundtrip",
    "structurally_equal",
    "unflatten",
    "validate",
]
