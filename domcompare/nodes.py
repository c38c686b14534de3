"""
Node model shared by the comparator, the path resolver and the canonizer.

Trees are built either directly through the ``Node`` builders or from
parsed markup through the lxml, expat and BeautifulSoup adapters at the
bottom of this module.
"""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Iterator
from xml.parsers import expat

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import CData, Comment, PreformattedString
from lxml import etree


class NodeType(IntEnum):
    """Node kinds understood by the comparator (DOM numeric codes)."""

    ELEMENT_NODE = 1
    ATTRIBUTE_NODE = 2
    TEXT_NODE = 3
    CDATA_SECTION_NODE = 4
    COMMENT_NODE = 8
    DOCUMENT_NODE = 9


# Human readable kind names used in difference messages
KIND_NAMES: dict[NodeType, str] = {
    NodeType.DOCUMENT_NODE: "document",
    NodeType.ELEMENT_NODE: "element",
    NodeType.ATTRIBUTE_NODE: "attribute",
    NodeType.TEXT_NODE: "text node",
    NodeType.CDATA_SECTION_NODE: "CDATA node",
    NodeType.COMMENT_NODE: "comment node",
}

TEXT_LIKE = frozenset(
    {NodeType.TEXT_NODE, NodeType.CDATA_SECTION_NODE, NodeType.COMMENT_NODE}
)


@dataclass(eq=False)
class Node:
    """A single node of a markup tree."""

    type: NodeType
    name: str
    value: str | None = None
    attributes: list[Node] = field(default_factory=list)  # Element only
    children: list[Node] = field(default_factory=list)  # Element / Document only
    _container: weakref.ReferenceType[Node] | None = field(default=None, repr=False)

    # -------------------------------------------------------------------------
    # Builders
    # -------------------------------------------------------------------------

    @classmethod
    def document(cls, *children: Node) -> Node:
        doc = cls(NodeType.DOCUMENT_NODE, "#document")
        for child in children:
            doc.append_child(child)
        return doc

    @classmethod
    def element(
        cls,
        name: str,
        attrs: dict[str, str] | Iterable[tuple[str, str]] | None = None,
        children: Iterable[Node | str] = (),
    ) -> Node:
        """Build an element; plain strings in ``children`` become text nodes."""
        elem = cls(NodeType.ELEMENT_NODE, name)
        items = attrs.items() if isinstance(attrs, dict) else (attrs or ())
        for attr_name, attr_value in items:
            elem.set_attribute(attr_name, attr_value)
        for child in children:
            elem.append_child(cls.text(child) if isinstance(child, str) else child)
        return elem

    @classmethod
    def attribute(cls, name: str, value: str) -> Node:
        return cls(NodeType.ATTRIBUTE_NODE, name, value)

    @classmethod
    def text(cls, value: str) -> Node:
        return cls(NodeType.TEXT_NODE, "#text", value)

    @classmethod
    def cdata(cls, value: str) -> Node:
        return cls(NodeType.CDATA_SECTION_NODE, "#cdata-section", value)

    @classmethod
    def comment(cls, value: str) -> Node:
        return cls(NodeType.COMMENT_NODE, "#comment", value)

    def append_child(self, child: Node) -> Node:
        if self.type not in (NodeType.ELEMENT_NODE, NodeType.DOCUMENT_NODE):
            raise TypeError(f"{KIND_NAMES[self.type]} nodes cannot have children")
        if child.type in (NodeType.ATTRIBUTE_NODE, NodeType.DOCUMENT_NODE):
            raise TypeError(f"{KIND_NAMES[child.type]} cannot be appended as a child")
        child._container = weakref.ref(self)
        self.children.append(child)
        return child

    def set_attribute(self, name: str, value: str) -> Node:
        """Add or replace an attribute, keeping document order for existing names."""
        if self.type is not NodeType.ELEMENT_NODE:
            raise TypeError("only elements carry attributes")
        attr = Node.attribute(name, value)
        attr._container = weakref.ref(self)
        for index, existing in enumerate(self.attributes):
            if existing.name == name:
                self.attributes[index] = attr
                break
        else:
            self.attributes.append(attr)
        return attr

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    @property
    def container(self) -> Node | None:
        """Owning element for an attribute, parent for anything else."""
        return self._container() if self._container is not None else None

    @property
    def document_element(self) -> Node | None:
        for child in self.children:
            if child.type is NodeType.ELEMENT_NODE:
                return child
        return None

    def get_attribute(self, name: str) -> str | None:
        for attr in self.attributes:
            if attr.name == name:
                return attr.value
        return None

    def iter(self) -> Iterator[Node]:
        """Iterate this node and its descendants in document order (attributes excluded)."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def __repr__(self) -> str:
        if self.type in TEXT_LIKE or self.type is NodeType.ATTRIBUTE_NODE:
            return f"<Node {self.type.name} {self.name}={self.value!r}>"
        return f"<Node {self.type.name} {self.name}>"


# =============================================================================
# Normalization
# =============================================================================


def normalized_value(node: Node, strip_spaces: bool) -> str:
    """Value used for equality checks; CDATA content is never trimmed."""
    value = "" if node.value is None else str(node.value)
    if strip_spaces and node.type is not NodeType.CDATA_SECTION_NODE:
        return value.strip()
    return value


def is_blank_text(node: Node) -> bool:
    return node.type is NodeType.TEXT_NODE and not (node.value or "").strip()


# =============================================================================
# lxml adapter
# =============================================================================

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


def _lxml_name(elem: etree._Element) -> str:
    qname = etree.QName(elem)
    if elem.prefix:
        return f"{elem.prefix}:{qname.localname}"
    return qname.localname


def _lxml_attr_name(elem: etree._Element, key: str) -> str:
    """Qualified attribute name; Clark notation when no prefix is in scope."""
    if not key.startswith("{"):
        return key
    qname = etree.QName(key)
    # The xml: prefix is bound implicitly and never shows up in nsmap
    if qname.namespace == XML_NAMESPACE:
        return f"xml:{qname.localname}"
    for prefix, uri in elem.nsmap.items():
        if uri == qname.namespace and prefix:
            return f"{prefix}:{qname.localname}"
    return key


def _from_lxml_element(elem: etree._Element) -> Node:
    if isinstance(elem, etree._Comment):
        return Node.comment(elem.text or "")

    node = Node(NodeType.ELEMENT_NODE, _lxml_name(elem))
    for key, value in elem.attrib.items():
        node.set_attribute(_lxml_attr_name(elem, key), value)
    if elem.text:
        node.append_child(Node.text(elem.text))
    for child in elem:
        # Processing instructions and entity references have no node kind here
        if isinstance(child, etree._Element) and not isinstance(
            child, (etree._ProcessingInstruction, etree._Entity)
        ):
            node.append_child(_from_lxml_element(child))
        if child.tail:
            node.append_child(Node.text(child.tail))
    return node


def from_lxml(obj: etree._ElementTree | etree._Element) -> Node:
    """Convert an lxml tree (or element) into a ``Node`` tree.

    An ``_ElementTree`` becomes a document node holding the top-level
    comments and the root element; a bare element converts to an element
    node with no container. lxml merges CDATA sections into the surrounding
    text, so trees converted here never contain CDATA nodes; use
    ``parse_xml`` when CDATA must stay distinct.
    """
    if isinstance(obj, etree._ElementTree):
        root = obj.getroot()
        doc = Node.document()
        for sibling in reversed(list(root.itersiblings(preceding=True))):
            if isinstance(sibling, etree._Comment):
                doc.append_child(Node.comment(sibling.text or ""))
        doc.append_child(_from_lxml_element(root))
        for sibling in root.itersiblings():
            if isinstance(sibling, etree._Comment):
                doc.append_child(Node.comment(sibling.text or ""))
        return doc
    if isinstance(obj, etree._Element):
        return _from_lxml_element(obj)
    raise TypeError(f"Unsupported lxml object: {type(obj).__name__}")


# =============================================================================
# XML text
# =============================================================================


class _ExpatTreeBuilder:
    """Build a document node from expat events, keeping CDATA sections apart.

    Names are kept as written (``x:a``, ``xml:lang``) and namespace
    declarations are ordinary attributes, as in the DOM.
    """

    def __init__(self) -> None:
        self.document = Node.document()
        self._open: list[Node] = [self.document]
        self._cdata: Node | None = None

        self._parser = expat.ParserCreate()
        self._parser.ordered_attributes = True
        self._parser.StartElementHandler = self.start_element
        self._parser.EndElementHandler = self.end_element
        self._parser.CharacterDataHandler = self.character_data
        self._parser.CommentHandler = self.comment
        self._parser.StartCdataSectionHandler = self.start_cdata
        self._parser.EndCdataSectionHandler = self.end_cdata

    def parse(self, markup: str | bytes) -> Node:
        self._parser.Parse(markup, True)
        return self.document

    def start_element(self, name: str, attrs: list[str]) -> None:
        elem = Node(NodeType.ELEMENT_NODE, name)
        for index in range(0, len(attrs), 2):
            elem.set_attribute(attrs[index], attrs[index + 1])
        self._open[-1].append_child(elem)
        self._open.append(elem)

    def end_element(self, name: str) -> None:
        self._open.pop()

    def character_data(self, data: str) -> None:
        if self._cdata is not None:
            self._cdata.value += data
            return
        parent = self._open[-1]
        if parent.type is NodeType.DOCUMENT_NODE:
            return  # whitespace around the root element
        # expat may split one run of text over several calls
        last = parent.children[-1] if parent.children else None
        if last is not None and last.type is NodeType.TEXT_NODE:
            last.value += data
        else:
            parent.append_child(Node.text(data))

    def comment(self, data: str) -> None:
        self._open[-1].append_child(Node.comment(data))

    def start_cdata(self) -> None:
        self._cdata = self._open[-1].append_child(Node.cdata(""))

    def end_cdata(self) -> None:
        self._cdata = None


def parse_xml(markup: str | bytes) -> Node:
    """Parse XML text into a document node.

    CDATA sections become CDATA nodes; processing instructions and the
    doctype are skipped. Malformed input raises ``xml.parsers.expat.ExpatError``.
    """
    return _ExpatTreeBuilder().parse(markup)


# =============================================================================
# BeautifulSoup adapter
# =============================================================================


def _soup_attr_value(value: object) -> str:
    # Multi-valued attributes (class, rel, ...) come back as lists
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _from_soup_children(target: Node, elem: Tag) -> None:
    for child in elem.children:
        if isinstance(child, CData):
            target.append_child(Node.cdata(str(child)))
        elif isinstance(child, Comment):
            target.append_child(Node.comment(str(child)))
        elif isinstance(child, PreformattedString):
            continue  # doctype, declarations, processing instructions
        elif isinstance(child, NavigableString):
            target.append_child(Node.text(str(child)))
        elif isinstance(child, Tag):
            target.append_child(_from_soup_tag(child))


def _from_soup_tag(tag: Tag) -> Node:
    node = Node(NodeType.ELEMENT_NODE, tag.prefix + ":" + tag.name if tag.prefix else tag.name)
    for key, value in tag.attrs.items():
        node.set_attribute(key, _soup_attr_value(value))
    _from_soup_children(node, tag)
    return node


def from_soup(obj: BeautifulSoup | Tag) -> Node:
    """Convert a BeautifulSoup document (or tag) into a ``Node`` tree."""
    if isinstance(obj, BeautifulSoup):
        doc = Node.document()
        _from_soup_children(doc, obj)
        return doc
    if isinstance(obj, Tag):
        return _from_soup_tag(obj)
    raise TypeError(f"Unsupported BeautifulSoup object: {type(obj).__name__}")


def parse_html(markup: str | bytes, parser: str = "html.parser") -> Node:
    """Parse HTML text with BeautifulSoup into a document node."""
    return from_soup(BeautifulSoup(markup, parser))
