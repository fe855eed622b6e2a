"""Conversion between ``xml.etree.ElementTree`` elements and Node trees.

Only the subset the codec supports survives conversion: element names,
attributes and direct text. Namespace URIs are dropped (``{uri}local``
becomes ``local``); comments, processing instructions and ``tail`` text are
ignored. Conversions walk the tree with explicit stacks so deep documents
do not hit the recursion limit.
"""

from __future__ import annotations

from xml.etree import ElementTree as ET

from flatpath.tree.nodes import Node

__all__ = ["from_element", "parse_xml", "to_element", "to_xml"]


def _local_name(tag: str) -> str:
    """Strip a ``{namespace}`` prefix and any ``prefix:`` qualifier."""
    if tag.startswith("{"):
        tag = tag.rsplit("}", 1)[1]
    return tag.rsplit(":", 1)[-1]


def _is_element(item: ET.Element) -> bool:
    # Comments and processing instructions carry a function as their tag.
    return isinstance(item.tag, str)


def from_element(element: ET.Element) -> Node:
    """Convert an ElementTree element (and its subtree) into a Node.

    Raises:
        TypeError: If ``element`` is not an Element.
        ValueError: If a local name is not a valid Node name.
    """
    if not isinstance(element, ET.Element):
        raise TypeError(f"Unsupported element type: {type(element)!r}")

    preorder: list[ET.Element] = []
    stack = [element]
    while stack:
        current = stack.pop()
        preorder.append(current)
        stack.extend(child for child in reversed(current) if _is_element(child))

    built: dict[int, Node] = {}
    for current in reversed(preorder):
        children = tuple(built.pop(id(child)) for child in current if _is_element(child))
        attributes = {_local_name(key): value for key, value in current.attrib.items()}
        built[id(current)] = Node(
            _local_name(current.tag),
            attributes,
            current.text if current.text and current.text.strip() else None,
            children,
        )
    return built[id(element)]


def to_element(node: Node) -> ET.Element:
    """Convert a Node tree into an ElementTree element."""
    root = ET.Element(node.name, dict(node.attributes))
    root.text = node.text
    stack: list[tuple[Node, ET.Element]] = [(node, root)]
    while stack:
        current, element = stack.pop()
        for child in current.children:
            sub = ET.SubElement(element, child.name, dict(child.attributes))
            sub.text = child.text
            stack.append((child, sub))
    return root


def parse_xml(text: str | bytes) -> Node:
    """Parse an XML document string into a Node tree."""
    return from_element(ET.fromstring(text))


def to_xml(node: Node, indent: bool = True) -> str:
    """Serialize a Node tree as an XML string (no XML declaration)."""
    element = to_element(node)
    if indent:
        ET.indent(element)
    return ET.tostring(element, encoding="unicode")
