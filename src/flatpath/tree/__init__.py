"""Tree subpackage: the Node data model and XML boundary conversion.

Re-exports the public API for the tree module:
- Node: frozen dataclass for one element of an ordered labeled tree
- structurally_equal: round-trip equality between two trees
- from_element / to_element: ElementTree <-> Node conversion
- parse_xml / to_xml: string-level convenience wrappers
"""

from flatpath.tree.nodes import Node, count_nodes, structurally_equal
from flatpath.tree.xml import from_element, parse_xml, to_element, to_xml

__all__ = [
    "Node",
    "count_nodes",
    "from_element",
    "parse_xml",
    "structurally_equal",
    "to_element",
    "to_xml",
]
