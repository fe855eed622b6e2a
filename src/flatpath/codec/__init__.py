"""Codec subpackage: the flat-path encoder, the tree builder and their grammar.

Exports:
- PathEncoder: tree -> flat entries
- TreeBuilder: flat entries -> tree
- FlatEntry: one (path, value) pair and its line format
- CodecConfig / ErrorMode: codec parameters
- sibling_indices: the sibling-disambiguation helper
"""

from flatpath.codec.builder import TreeBuilder
from flatpath.codec.config import CodecConfig, ErrorMode
from flatpath.codec.encoder import PathEncoder
from flatpath.codec.entries import FlatEntry
from flatpath.codec.paths import Step, StructuralPath, parse_path, sibling_indices

__all__ = [
    "CodecConfig",
    "ErrorMode",
    "FlatEntry",
    "PathEncoder",
    "Step",
    "StructuralPath",
    "TreeBuilder",
    "parse_path",
    "sibling_indices",
]
