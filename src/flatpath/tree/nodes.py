"""Node dataclass: the immutable ordered tree the codec flattens and rebuilds.

A node has a name, a mapping of attributes and either a text value (a leaf)
or a tuple of children (a container). Text alongside children is tolerated
so documents loaded from XML can be passed in unchanged; the encoder decides
which text qualifies as leaf text.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

__all__ = ["RESERVED_NAME_CHARS", "Node", "count_nodes", "structurally_equal"]

# Characters with a meaning in the structural path grammar.
RESERVED_NAME_CHARS = frozenset("/@[]|")


def _check_name(name: object, what: str) -> None:
    if not isinstance(name, str) or not name:
        msg = f"{what} must be a non-empty string, got {name!r}"
        raise ValueError(msg)
    if any(ch in RESERVED_NAME_CHARS or ch.isspace() for ch in name):
        msg = f"{what} {name!r} contains a reserved or whitespace character"
        raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Node:
    """An element in an ordered labeled tree.

    Attributes:
        name:       Element label. Non-empty, no whitespace, none of ``/@[]|``.
        attributes: Read-only mapping of attribute name to string value.
        text:       Direct text value, or None. Whitespace-only text counts as
                    absent everywhere in the codec.
        children:   Child nodes in document order.

    Example::

        root = Node("Root", {"id": "9"}, children=(Node("Leaf", text="x"),))
        root.children[0].is_leaf   # True
    """

    name: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    text: str | None = None
    children: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        _check_name(self.name, "node name")
        attrs = dict(self.attributes)
        for key, value in attrs.items():
            _check_name(key, "attribute name")
            if not isinstance(value, str):
                msg = f"attribute {key!r} on {self.name!r} must be str, got {type(value)!r}"
                raise ValueError(msg)
        if self.text is not None and not isinstance(self.text, str):
            msg = f"text of {self.name!r} must be str or None, got {type(self.text)!r}"
            raise ValueError(msg)
        children = tuple(self.children)
        for child in children:
            if not isinstance(child, Node):
                msg = f"children of {self.name!r} must be Node, got {type(child)!r}"
                raise ValueError(msg)
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "attributes", MappingProxyType(attrs))
        object.__setattr__(self, "children", children)

    def __hash__(self) -> int:
        return hash((self.name, frozenset(self.attributes.items()), self.text, self.children))

    @property
    def has_text(self) -> bool:
        """True when the node carries non-whitespace direct text."""
        return self.text is not None and bool(self.text.strip())

    @property
    def is_leaf(self) -> bool:
        """Non-whitespace text and no descendant that carries text itself."""
        if not self.has_text:
            return False
        return not any(node.has_text for node in self.iter_depth_first() if node is not self)

    @property
    def is_container(self) -> bool:
        return not self.has_text

    def iter_depth_first(self) -> Iterator[Node]:
        """Yield self then all descendants in document (pre-)order."""
        stack: list[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


def _text_key(node: Node) -> str | None:
    return node.text.strip() if node.has_text else None


def structurally_equal(a: Node, b: Node) -> bool:
    """Compare two trees the way a flat-path round trip preserves them.

    Names and child order must match, attributes compare as sets, and text
    compares after trimming with whitespace-only text treated as absent.
    """
    pairs: list[tuple[Node, Node]] = [(a, b)]
    while pairs:
        left, right = pairs.pop()
        if (
            left.name != right.name
            or dict(left.attributes) != dict(right.attributes)
            or _text_key(left) != _text_key(right)
            or len(left.children) != len(right.children)
        ):
            return False
        pairs.extend(zip(left.children, right.children, strict=True))
    return True


def count_nodes(nodes: Iterable[Node]) -> int:
    """Total number of nodes across the given trees."""
    return sum(1 for root in nodes for _ in root.iter_depth_first())
