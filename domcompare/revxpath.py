"""
Reverse XPath: describe where a node sits in its tree.
"""

from __future__ import annotations

from .nodes import Node, NodeType

_TEXT_STEP = {
    NodeType.TEXT_NODE: "text()",
    NodeType.CDATA_SECTION_NODE: "text()",
    NodeType.COMMENT_NODE: "comment()",
}


def _same_step(a: Node, b: Node) -> bool:
    if a.type is NodeType.ELEMENT_NODE:
        return b.type is NodeType.ELEMENT_NODE and a.name == b.name
    return _TEXT_STEP.get(b.type) == _TEXT_STEP[a.type]


def _step(node: Node) -> str:
    """One location step, with a 1-based position when the step is ambiguous."""
    label = node.name if node.type is NodeType.ELEMENT_NODE else _TEXT_STEP[node.type]
    parent = node.container
    if parent is None:
        return label

    siblings = [s for s in parent.children if _same_step(node, s)]
    if len(siblings) < 2:
        return label
    position = next(i for i, s in enumerate(siblings, 1) if s is node)
    return f"{label}[{position}]"


def locate(node: Node | None) -> str:
    """Return an XPath-like location such as ``/root/item[2]/@id``.

    Total over any node: ``None`` and documents locate to ``/``, and a
    detached subtree is located relative to its own root.
    """
    if node is None or node.type is NodeType.DOCUMENT_NODE:
        return "/"

    if node.type is NodeType.ATTRIBUTE_NODE:
        owner = node.container
        if owner is None:
            return f"@{node.name}"
        return f"{locate(owner).rstrip('/')}/@{node.name}"

    steps = []
    current: Node | None = node
    while current is not None and current.type is not NodeType.DOCUMENT_NODE:
        steps.append(_step(current))
        current = current.container
    return "/" + "/".join(reversed(steps))
