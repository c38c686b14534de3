"""
Canonical serialization of node trees.

The output is meant for humans reading assertion failures: attributes are
sorted, insignificant whitespace is dropped and every element starts on
its own line.
"""

from __future__ import annotations

import html

from .nodes import Node, NodeType, is_blank_text, normalized_value


def _escape_text(value: str) -> str:
    return html.escape(value, quote=False)


def _escape_attr(value: str) -> str:
    return html.escape(value, quote=True)


class XMLSerializer:
    """Serializer with comparison options bound at construction."""

    def __init__(
        self,
        compare_comments: bool = False,
        strip_spaces: bool = False,
        indent: str = "  ",
    ) -> None:
        self.compare_comments = compare_comments
        self.strip_spaces = strip_spaces
        self.indent = indent

    def serialize_to_string(self, node: Node) -> str:
        lines: list[str] = []
        # (node, depth, closing) work items; closing items emit end tags
        stack: list[tuple[Node, int, bool]] = [(node, 0, False)]
        while stack:
            current, depth, closing = stack.pop()
            pad = self.indent * depth
            if closing:
                lines.append(f"{pad}</{current.name}>")
                continue

            if current.type is NodeType.DOCUMENT_NODE:
                stack.extend((child, depth, False) for child in reversed(self._children(current)))
            elif current.type is NodeType.ELEMENT_NODE:
                children = self._children(current)
                start = f"<{current.name}{self._attributes(current)}"
                if not children:
                    lines.append(f"{pad}{start}/>")
                    continue
                lines.append(f"{pad}{start}>")
                stack.append((current, depth, True))
                stack.extend((child, depth + 1, False) for child in reversed(children))
            elif current.type is NodeType.ATTRIBUTE_NODE:
                lines.append(f'{pad}{current.name}="{_escape_attr(self._value(current))}"')
            else:
                lines.append(pad + self._leaf(current))
        return "\n".join(lines)

    def _children(self, node: Node) -> list[Node]:
        return [
            child
            for child in node.children
            if not is_blank_text(child)
            and (self.compare_comments or child.type is not NodeType.COMMENT_NODE)
        ]

    def _value(self, node: Node) -> str:
        return normalized_value(node, self.strip_spaces)

    def _attributes(self, node: Node) -> str:
        attrs = sorted(node.attributes, key=lambda attr: attr.name)
        return "".join(f' {attr.name}="{_escape_attr(self._value(attr))}"' for attr in attrs)

    def _leaf(self, node: Node) -> str:
        value = self._value(node)
        if node.type is NodeType.CDATA_SECTION_NODE:
            return f"<![CDATA[{value}]]>"
        if node.type is NodeType.COMMENT_NODE:
            return f"<!--{value}-->"
        return _escape_text(value)


def serialize(
    node: Node,
    *,
    compare_comments: bool = False,
    strip_spaces: bool = False,
    indent: str = "  ",
) -> str:
    """Render ``node`` in canonical form."""
    return XMLSerializer(compare_comments, strip_spaces, indent).serialize_to_string(node)
