"""PathEncoder: flattens a Node tree into ``(structural path, value)`` entries.

One entry is emitted per leaf text and one per attribute, anywhere in the
tree. Containers produce no entry of their own; they are implied by the
paths of their descendants.

Traversal is depth-first pre-order over an explicit stack, so arbitrarily
deep trees cannot exhaust the interpreter's recursion limit.
"""

from __future__ import annotations

import logging

from flatpath.codec.config import CodecConfig
from flatpath.codec.entries import FlatEntry
from flatpath.codec.paths import (
    ATTRIBUTE_MARKER,
    STEP_SEPARATOR,
    Step,
    StructuralPath,
    sibling_indices,
)
from flatpath.errors import DepthLimitError
from flatpath.tree.nodes import Node

__all__ = ["PathEncoder"]

logger = logging.getLogger(__name__)


class PathEncoder:
    """Converts a Node tree into a list of FlatEntry values.

    A node emits a text entry only when it qualifies as a leaf: it carries
    non-whitespace text and none of its descendants does. This keeps a
    mixed-content ancestor from capturing text that its children already
    emit. Attributes are emitted for every node, the root included
    (``/Root/@id``).

    Example::

        encoder = PathEncoder()
        root = Node("Root", children=(Node("Item", text="foo"), Node("Item", text="bar")))
        [entry.path for entry in encoder.encode(root)]
        # ["/Root/Item[1]", "/Root/Item[2]"]
    """

    def __init__(self, config: CodecConfig | None = None) -> None:
        self._config = config if config is not None else CodecConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def encode(self, root: Node) -> list[FlatEntry]:
        """Flatten ``root`` into entries in document pre-order.

        Args:
            root: The document root. Never mutated.

        Returns:
            Entries in pre-order: a node's text entry, then its attribute
            entries, then its children's entries.

        Raises:
            TypeError: If ``root`` is not a Node.
            DepthLimitError: If the tree is deeper than ``config.max_depth``.
        """
        if not isinstance(root, Node):
            raise TypeError(f"Unsupported root type: {type(root)!r}")

        text_below = self._descendant_text_flags(root)
        max_depth = self._config.max_depth
        entries: list[FlatEntry] = []

        # (node, rendered path, depth)
        stack: list[tuple[Node, str, int]] = [(root, str(StructuralPath((Step(root.name),))), 1)]
        while stack:
            node, path, depth = stack.pop()
            if max_depth is not None and depth > max_depth:
                raise DepthLimitError(f"tree deeper than max_depth={max_depth}", path=path)

            if node.has_text and not text_below[id(node)]:
                entries.append(FlatEntry(path, node.text.strip()))  # type: ignore[union-attr]

            for name, value in node.attributes.items():
                entries.append(FlatEntry(f"{path}{STEP_SEPARATOR}{ATTRIBUTE_MARKER}{name}", value))

            if node.children:
                indices = sibling_indices([child.name for child in node.children])
                children = [
                    (child, f"{path}{STEP_SEPARATOR}{Step(child.name, index)}", depth + 1)
                    for child, index in zip(node.children, indices, strict=True)
                ]
                stack.extend(reversed(children))

        logger.debug("Encoded %r into %d entries", root.name, len(entries))
        return entries

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _descendant_text_flags(root: Node) -> dict[int, bool]:
        """Map id(node) to whether any strict descendant carries text.

        Computed bottom-up in one pass over the reversed pre-order, so the
        leaf test stays linear in the size of the tree.
        """
        flags: dict[int, bool] = {}
        for node in reversed(list(root.iter_depth_first())):
            flags[id(node)] = any(
                child.has_text or flags[id(child)] for child in node.children
            )
        return flags
