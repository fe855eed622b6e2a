"""TreeBuilder: rebuilds a Node tree from flat ``(path, value)`` entries.

Entries may arrive in any order. A single indexing pass numbers every
element node and groups entries by node, after which every node is assembled
with dictionary lookups only:

1. Parse each line and path (path steps are memoised per builder).
2. Index: walk each path from the root, registering unseen steps as new
   node ids; text and attributes are stored by node id. Containers without
   entries of their own are implied by their descendants.
3. Check the shape: text sits only on nodes with no text below them, a
   name is either always indexed or never, and its indices run 1..n
   without gaps.
4. Assemble bottom-up from a pre-order list of node ids; no recursion.

Children are ordered by first-seen name, then by index within a name.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from collections.abc import Iterable
from typing import Any

from flatpath.cache import StepCache
from flatpath.codec.config import CodecConfig, ErrorMode
from flatpath.codec.entries import FlatEntry, split_lines
from flatpath.codec.paths import Step, StructuralPath, parse_path
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
from flatpath.tree.nodes import Node, count_nodes

__all__ = ["EntrySource", "TreeBuilder"]

logger = logging.getLogger(__name__)

# Text is split into lines; other iterables may mix FlatEntry and raw lines.
EntrySource = str | Iterable[FlatEntry | str]


class _ErrorSink:
    """Raises immediately in FAIL_FAST, records in COLLECT."""

    def __init__(self, mode: ErrorMode) -> None:
        self._mode = mode
        self.errors: list[FlatPathError] = []

    def add(self, error: FlatPathError) -> None:
        if self._mode is ErrorMode.FAIL_FAST:
            raise error
        self.errors.append(error)


class _Index:
    """Lookup tables produced by the indexing pass of one build call.

    Element nodes are numbered in first-seen order, the root being 0, so every
    table is keyed by a small int rather than by a whole path. A lookup costs
    the same at any depth.
    """

    def __init__(self, root: Step) -> None:
        self.steps: list[Step] = [root]
        self.parents: list[int] = [-1]
        # node id -> {child step: child id}, in first-seen order
        self.children: list[dict[Step, int]] = [{}]
        self.texts: dict[int, FlatEntry] = {}
        self.attributes: dict[int, dict[str, FlatEntry]] = {}

    def child(self, node_id: int, step: Step) -> int:
        """Id of ``step`` under ``node_id``, registering it on first sight."""
        siblings = self.children[node_id]
        child_id = siblings.get(step)
        if child_id is None:
            child_id = len(self.steps)
            self.steps.append(step)
            self.parents.append(node_id)
            self.children.append({})
            siblings[step] = child_id
        return child_id

    def path_of(self, node_id: int) -> str:
        """Render the element path of ``node_id`` (used for diagnostics)."""
        steps: list[Step] = []
        while node_id >= 0:
            steps.append(self.steps[node_id])
            node_id = self.parents[node_id]
        return str(StructuralPath(tuple(reversed(steps))))


class TreeBuilder:
    """Rebuilds a Node tree from flat entries.

    Error reporting follows ``config.error_mode``: FAIL_FAST raises the first
    ``FlatPathError``; COLLECT raises one ``ReconstructionError`` listing
    every violation. A partial tree is never returned.

    Each builder owns a ``StepCache``; two builders never share state and a
    builder keeps nothing between ``build`` calls beyond that cache.

    Example::

        builder = TreeBuilder()
        root = builder.build(["/Root/Item[1]|foo", "/Root/Item[2]|bar"])
        [child.text for child in root.children]   # ["foo", "bar"]
    """

    def __init__(
        self,
        config: CodecConfig | None = None,
        max_cache_size: int = 1024,
    ) -> None:
        """Initialise the builder.

        Args:
            config: Codec parameters. Defaults to ``CodecConfig()``.
            max_cache_size: Maximum number of distinct path steps held in the
                per-instance parse cache. This is an infrastructure parameter;
                it is NOT part of ``CodecConfig``.
        """
        self._config = config if config is not None else CodecConfig()
        self._steps = StepCache(max_size=max_cache_size)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, entries: EntrySource) -> Node:
        """Rebuild the tree described by ``entries``.

        Args:
            entries: Flat text, or an iterable of ``FlatEntry`` objects and/or
                raw ``path|value`` lines, in any order.

        Returns:
            The reconstructed root Node.

        Raises:
            FormatError, StructureError, ConflictError, EmptyInputError,
            DepthLimitError: The first violation, in FAIL_FAST mode.
            ReconstructionError: Every violation, in COLLECT mode.
        """
        sink = _ErrorSink(self._config.error_mode)
        root, _ = self._rebuild(entries, sink)
        if root is None or sink.errors:
            raise ReconstructionError(sink.errors)
        return root

    def validate(self, entries: EntrySource) -> ValidationReport:
        """Check ``entries`` and report every violation without raising.

        Always collects, regardless of ``config.error_mode``.
        """
        t0 = time.perf_counter()
        sink = _ErrorSink(ErrorMode.COLLECT)
        root, entry_count = self._rebuild(entries, sink)
        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        return ValidationReport(
            errors=list(sink.errors),
            entry_count=entry_count,
            node_count=count_nodes([root]) if root is not None else 0,
            computation_time_ms=elapsed_ms,
        )

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _rebuild(self, entries: EntrySource, sink: _ErrorSink) -> tuple[Node | None, int]:
        """Run all passes; returns (root or None when errors exist, entry count)."""
        parsed = self._parse(entries, sink)
        if not parsed:
            if not sink.errors:
                sink.add(EmptyInputError("no entries to rebuild a tree from"))
            return None, 0

        index = self._index(parsed, sink)
        self._check_leaf_text(index, sink)
        order = self._order_children(index, sink)
        if sink.errors:
            return None, len(parsed)

        root = self._assemble(index, order)
        logger.debug(
            "Rebuilt %r from %d entries (step cache hits=%d misses=%d)",
            root.name,
            len(parsed),
            self._steps.hits,
            self._steps.misses,
        )
        return root, len(parsed)

    def _parse(
        self, entries: EntrySource, sink: _ErrorSink
    ) -> list[tuple[StructuralPath, FlatEntry]]:
        """Turn raw input into (parsed path, entry) pairs."""
        delimiter = self._config.delimiter
        if isinstance(entries, str):
            entries = split_lines(entries)
            skip_blank = True
        else:
            skip_blank = False

        parsed: list[tuple[StructuralPath, FlatEntry]] = []
        for number, item in enumerate(entries, start=1):
            if isinstance(item, str):
                if skip_blank and not item.strip():
                    continue
                try:
                    entry = FlatEntry.from_line(item, delimiter, number)
                except FormatError as exc:
                    sink.add(exc)
                    continue
            elif isinstance(item, FlatEntry):
                entry = item
            else:
                raise TypeError(f"Unsupported entry type: {type(item)!r}")

            try:
                path = parse_path(entry.path, self._steps.parse)
            except FormatError as exc:
                sink.add(FormatError(exc.message, path=entry.path, line_number=entry.line_number))
                continue
            parsed.append((path, entry))
        return parsed

    def _index(
        self, parsed: list[tuple[StructuralPath, FlatEntry]], sink: _ErrorSink
    ) -> _Index:
        """Single pass grouping entries by element node.

        The expected root is the most common first step (ties go to the one
        seen first), so a single stray line is what gets reported.
        """
        root = Counter(path.steps[0] for path, _ in parsed).most_common(1)[0][0]
        index = _Index(root)
        max_depth = self._config.max_depth

        for path, entry in parsed:
            steps = path.steps
            if steps[0].index is not None:
                sink.add(
                    StructureError(
                        "root step cannot carry a sibling index",
                        path=entry.path,
                        line_number=entry.line_number,
                    )
                )
                continue
            if steps[0] != root:
                sink.add(
                    StructureError(
                        f"root mismatch: expected /{index.steps[0]}, found /{steps[0]}",
                        path=entry.path,
                        line_number=entry.line_number,
                    )
                )
                continue
            if max_depth is not None and len(steps) > max_depth:
                sink.add(
                    DepthLimitError(
                        f"path deeper than max_depth={max_depth}",
                        path=entry.path,
                        line_number=entry.line_number,
                    )
                )
                continue

            node_id = 0
            for step in steps[1:]:
                node_id = index.child(node_id, step)

            if path.attribute is None:
                self._put_value(index.texts, node_id, entry, sink)
            else:
                owned = index.attributes.setdefault(node_id, {})
                self._put_value(owned, path.attribute, entry, sink)
        return index

    @staticmethod
    def _put_value(
        table: dict[Any, FlatEntry], key: Any, entry: FlatEntry, sink: _ErrorSink
    ) -> None:
        """Store ``entry`` under ``key``, collapsing exact duplicates."""
        existing = table.get(key)
        if existing is None:
            table[key] = entry
        elif existing.value != entry.value:
            sink.add(
                ConflictError(
                    entry.path, existing.value, entry.value, line_number=entry.line_number
                )
            )
        else:
            logger.warning("Duplicate entry collapsed: %s", entry.path)

    @staticmethod
    def _check_leaf_text(index: _Index, sink: _ErrorSink) -> None:
        """Reject text on a node that also has text somewhere below it.

        Only leaves carry text entries, so such text would be lost on the
        next encode. Text beside attribute-only children is fine.
        """
        has_text = [False] * len(index.steps)
        for node_id, entry in index.texts.items():
            has_text[node_id] = bool(entry.value.strip())

        # children always have larger ids than their parent
        text_below = [False] * len(index.steps)
        for node_id in range(len(index.steps) - 1, 0, -1):
            if has_text[node_id] or text_below[node_id]:
                text_below[index.parents[node_id]] = True

        for node_id, entry in index.texts.items():
            if has_text[node_id] and text_below[node_id]:
                sink.add(
                    StructureError(
                        "text on a node whose descendants also carry text",
                        path=index.path_of(node_id),
                        line_number=entry.line_number,
                    )
                )

    @staticmethod
    def _order_children(index: _Index, sink: _ErrorSink) -> list[list[int]]:
        """Validate each node's child steps and list child ids in output order."""
        order: list[list[int]] = []
        for node_id, children in enumerate(index.children):
            by_name: dict[str, list[Step]] = {}
            for step in children:
                by_name.setdefault(step.name, []).append(step)

            ordered: list[int] = []
            for name, group in by_name.items():
                indices = sorted(step.index for step in group if step.index is not None)
                if indices and len(indices) != len(group):
                    sink.add(
                        StructureError(
                            f"{name!r} appears both with and without a sibling index",
                            path=f"{index.path_of(node_id)}/{name}",
                        )
                    )
                    continue
                present = set(indices)
                missing = [k for k in range(1, len(indices) + 1) if k not in present]
                if missing:
                    sink.add(
                        StructureError(
                            f"sibling {name}[{missing[0]}] is never established "
                            f"but {name}[{indices[-1]}] is",
                            path=f"{index.path_of(node_id)}/{name}[{indices[-1]}]",
                        )
                    )
                    continue
                group.sort(key=lambda step: step.index or 0)
                ordered.extend(children[step] for step in group)
            order.append(ordered)
        return order

    @staticmethod
    def _assemble(index: _Index, order: list[list[int]]) -> Node:
        """Create nodes bottom-up from a pre-order list of node ids."""
        preorder: list[int] = []
        stack = [0]
        while stack:
            node_id = stack.pop()
            preorder.append(node_id)
            stack.extend(reversed(order[node_id]))

        built: dict[int, Node] = {}
        for node_id in reversed(preorder):
            text_entry = index.texts.get(node_id)
            text = text_entry.value if text_entry is not None and text_entry.value.strip() else None
            attrs = {name: entry.value for name, entry in index.attributes.get(node_id, {}).items()}
            children = tuple(built.pop(child) for child in order[node_id])
            built[node_id] = Node(index.steps[node_id].name, attrs, text, children)
        return built[0]
