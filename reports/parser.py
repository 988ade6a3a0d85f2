"""
Parses DMARC report XML into a generic document tree.

Every element becomes either its text (leaf elements) or a mapping of child
tag -> list of child nodes, so repeated elements such as <record> are
always lists and any path can be followed without per-field checks.
"""
from typing import Optional, Union

import defusedxml.ElementTree as ET
from defusedxml.common import DefusedXmlException

from reports.errors import ParseError

Node = Union[str, dict]

ATTRIBUTES_KEY = "$"
TEXT_KEY = "_"


def _local_name(tag: str) -> str:
    # Drop the namespace URI: '{urn:ietf:params:xml:ns:dmarc-2.0}feedback' -> 'feedback'
    return tag.rsplit("}", 1)[-1]


def _element_to_node(element) -> Node:
    children = list(element)
    text = (element.text or "").strip()
    if not children and not element.attrib:
        return text

    node = {}
    if element.attrib:
        node[ATTRIBUTES_KEY] = {_local_name(k): v for k, v in element.attrib.items()}
    if text:
        node[TEXT_KEY] = text
    for child in children:
        node.setdefault(_local_name(child.tag), []).append(_element_to_node(child))
    return node


class DocumentNode:
    """Read-only view over one node of a parsed report tree."""

    def __init__(self, node: Optional[Node]) -> None:
        self._node = node

    def __repr__(self) -> str:
        return f"DocumentNode({self._node!r})"

    @property
    def raw(self) -> Optional[Node]:
        return self._node

    @property
    def is_empty(self) -> bool:
        return not self._node

    def has(self, name: str) -> bool:
        return isinstance(self._node, dict) and name in self._node

    def _walk(self, path: str) -> Optional[Node]:
        node = self._node
        for name in path.split("/"):
            if not isinstance(node, dict):
                return None
            children = node.get(name)
            if not children:
                return None
            node = children[0]
        return node

    def find(self, path: str) -> Optional["DocumentNode"]:
        """Returns the first node at `path`, or None if any step is missing."""
        node = self._walk(path)
        return None if node is None else DocumentNode(node)

    def find_all(self, path: str) -> list["DocumentNode"]:
        """Returns every node matching the last step of `path`."""
        parent_path, _, name = path.rpartition("/")
        parent = self._walk(parent_path) if parent_path else self._node
        if not isinstance(parent, dict):
            return []
        return [DocumentNode(child) for child in parent.get(name, [])]

    def get(self, path: str) -> Optional[str]:
        """
        Returns the text at `path` (e.g. 'row/policy_evaluated/dkim').

        Missing nodes at any depth yield None.
        """
        node = self._walk(path)
        if isinstance(node, dict):
            return node.get(TEXT_KEY)
        return node


def parse_report(xml_content: str) -> DocumentNode:
    """
    Parses report XML into a DocumentNode rooted above the document element.

    Args:
        xml_content: The decoded report text.

    Returns:
        A DocumentNode whose single key is the root tag, e.g. 'feedback'.
        Blank input yields an empty document.

    Raises:
        ParseError: If the XML is malformed or uses forbidden constructs
    """
    if not xml_content or not xml_content.strip():
        return DocumentNode({})
    try:
        root = ET.fromstring(xml_content)
    except ET.ParseError as e:
        raise ParseError(f"Invalid XML structure: {e}") from e
    except DefusedXmlException as e:
        raise ParseError(f"Forbidden XML construct: {e}") from e
    return DocumentNode({_local_name(root.tag): [_element_to_node(root)]})
