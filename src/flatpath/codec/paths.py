"""Structural path grammar shared by the encoder and the tree builder.

A path is ``/Root/Child[2]/Leaf`` for an element and ``/Root/Child[2]/@id``
for an attribute. The ``[k]`` suffix is the 1-based position among
same-named siblings and only appears when the name occurs more than once
under that parent, which keeps paths minimal while staying unambiguous.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from flatpath.errors import FormatError

__all__ = [
    "ATTRIBUTE_MARKER",
    "DEFAULT_DELIMITER",
    "STEP_SEPARATOR",
    "Step",
    "StructuralPath",
    "parse_path",
    "parse_step",
    "sibling_indices",
]

STEP_SEPARATOR = "/"
ATTRIBUTE_MARKER = "@"
DEFAULT_DELIMITER = "|"

# name, then an optional positive index without leading zeros
_STEP = re.compile(r"^(?P<name>[^/@\[\]|\s]+)(?:\[(?P<index>[1-9][0-9]*)\])?$")
_ATTRIBUTE = re.compile(r"^@(?P<name>[^/@\[\]|\s]+)$")


@dataclass(frozen=True, slots=True)
class Step:
    """One element step of a structural path.

    Attributes:
        name:  Element name.
        index: 1-based position among same-named siblings, or None when the
               name is unique under its parent.
    """

    name: str
    index: int | None = None

    def __str__(self) -> str:
        if self.index is None:
            return self.name
        return f"{self.name}[{self.index}]"


@dataclass(frozen=True, slots=True)
class StructuralPath:
    """Root-to-node sequence of steps, optionally ending at an attribute."""

    steps: tuple[Step, ...]
    attribute: str | None = None

    def __str__(self) -> str:
        text = "".join(f"{STEP_SEPARATOR}{step}" for step in self.steps)
        if self.attribute is not None:
            text += f"{STEP_SEPARATOR}{ATTRIBUTE_MARKER}{self.attribute}"
        return text

    @property
    def is_attribute(self) -> bool:
        return self.attribute is not None

    @property
    def depth(self) -> int:
        """Number of element steps (the root element has depth 1)."""
        return len(self.steps)

    @property
    def element_path(self) -> StructuralPath:
        """The owning element's path (self for element paths)."""
        if self.attribute is None:
            return self
        return StructuralPath(self.steps)

    @property
    def parent(self) -> StructuralPath | None:
        """Path of the parent element, None for the root element."""
        if self.attribute is not None:
            return StructuralPath(self.steps)
        if len(self.steps) <= 1:
            return None
        return StructuralPath(self.steps[:-1])

    def child(self, step: Step) -> StructuralPath:
        return StructuralPath((*self.steps, step))

    def with_attribute(self, name: str) -> StructuralPath:
        return StructuralPath(self.steps, name)


def parse_step(text: str) -> Step:
    """Parse ``name`` or ``name[k]`` into a Step.

    Raises:
        FormatError: If the segment is empty, carries a reserved character,
            or has an index that is not a positive integer.
    """
    match = _STEP.fullmatch(text)
    if match is None:
        raise FormatError(f"invalid path step {text!r}")
    index = match.group("index")
    return Step(match.group("name"), int(index) if index is not None else None)


def parse_path(
    text: str, parse_segment: Callable[[str], Step] = parse_step
) -> StructuralPath:
    """Parse a structural path string.

    Args:
        text:          Path such as ``/Root/Item[2]`` or ``/Root/@id``.
        parse_segment: Step parser, replaceable with a cached one.

    Raises:
        FormatError: If the path does not start with ``/``, has an empty
            step, or has an attribute step anywhere but last.
    """
    if not text.startswith(STEP_SEPARATOR):
        raise FormatError("path must start with '/'", path=text)
    segments = text[1:].split(STEP_SEPARATOR)
    attribute = None
    if segments[-1].startswith(ATTRIBUTE_MARKER):
        match = _ATTRIBUTE.fullmatch(segments.pop())
        if match is None:
            raise FormatError("invalid attribute step", path=text)
        attribute = match.group("name")
    if not segments:
        raise FormatError("attribute path has no owning element", path=text)
    try:
        steps = tuple(parse_segment(segment) for segment in segments)
    except FormatError as exc:
        raise FormatError(exc.message, path=text) from exc
    return StructuralPath(steps, attribute)


def sibling_indices(names: Sequence[str]) -> list[int | None]:
    """Disambiguation index for each of a parent's children.

    Each child gets its 1-based position among same-named siblings, or None
    when no other sibling shares its name.

    Example::

        sibling_indices(["A", "A", "B"])   # [1, 2, None]
    """
    totals = Counter(names)
    seen: Counter[str] = Counter()
    indices: list[int | None] = []
    for name in names:
        seen[name] += 1
        indices.append(seen[name] if totals[name] > 1 else None)
    return indices

