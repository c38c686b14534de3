"""
Lock-step comparison of two node trees.

Each ``_visit`` frame is a generator: it yields a ``(expected, actual)``
pair whenever it needs a child subtree compared and receives the boolean
result back. ``_run`` drives those frames with an explicit stack, so the
depth of a document is not tied to the interpreter recursion limit.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import fields
from itertools import zip_longest
from typing import Any, Generator, Iterable

from .collector import Collector
from .errors import UnsupportedNodeType
from .nodes import Node, NodeType, is_blank_text, normalized_value
from .options import CompareOptions

logger = logging.getLogger(__name__)

# Frame type: yields node pairs to compare, receives their result, returns its own
Frame = Generator[tuple[Node, Node], bool, bool]


class Comparator:
    """Walk an expected and an actual tree and report mismatches to a collector."""

    def __init__(self, options: CompareOptions | None, collector: Collector) -> None:
        if collector is None:
            raise ValueError("Collector instance must be specified")
        self._options = options or CompareOptions()
        self._collector = collector

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    def compare_node(self, expected: Node, actual: Node) -> bool:
        """Compare two subtrees; ``False`` means the caller should stop its list."""
        return self._run(self._visit(expected, actual))

    def compare_children(self, expected: Iterable[Node], actual: Iterable[Node]) -> bool:
        return self._run(self._compare_children(expected, actual))

    def filter_nodes(self, nodes: Iterable[Node]) -> list[Node]:
        """Drop nodes that never take part in structural comparison.

        Comments are dropped unless ``compare_comments`` is set; blank text
        nodes are always dropped, whatever ``strip_spaces`` says.
        """
        compare_comments = self._options.compare_comments
        return [
            node
            for node in nodes
            if not (node.type is NodeType.COMMENT_NODE and not compare_comments)
            and not is_blank_text(node)
        ]

    def compare_attributes(
        self, expected: list[Node] | None, actual: list[Node] | None
    ) -> bool:
        """Compare two attribute sets by name, independent of their order.

        Shared names are checked first, then expected-only names are reported
        as missing and actual-only names as extra, each group in document
        order. The first ``False`` from the collector aborts the rest.
        """
        if expected is None and actual is None:
            return True

        expected_by_name = {attr.name: attr for attr in expected or ()}
        actual_by_name = {attr.name: attr for attr in actual or ()}
        collect = self._collector.collect_failure
        strip_spaces = self._options.strip_spaces

        for name, expected_attr in expected_by_name.items():
            actual_attr = actual_by_name.get(name)
            if actual_attr is None:
                continue
            if normalized_value(expected_attr, strip_spaces) != normalized_value(
                actual_attr, strip_spaces
            ) and not collect(expected_attr, actual_attr):
                return False

        for name, expected_attr in expected_by_name.items():
            if name not in actual_by_name and not collect(expected_attr, None):
                return False

        for name, actual_attr in actual_by_name.items():
            if name not in expected_by_name and not collect(None, actual_attr):
                return False

        return True

    # -------------------------------------------------------------------------
    # Walk
    # -------------------------------------------------------------------------

    def _run(self, frame: Frame) -> bool:
        stack = [frame]
        result: bool | None = None
        while stack:
            try:
                pair = stack[-1].send(result)
            except StopIteration as done:
                stack.pop()
                result = done.value
            else:
                stack.append(self._visit(*pair))
                result = None
        return bool(result)

    def _visit(self, expected: Node, actual: Node) -> Frame:
        if expected.name != actual.name or expected.type is not actual.type:
            return self._collector.collect_failure(expected, actual)

        node_type = expected.type
        if node_type is NodeType.DOCUMENT_NODE:
            expected_root = expected.document_element
            actual_root = actual.document_element
            if expected_root is None and actual_root is None:
                return True
            if expected_root is None or actual_root is None:
                return self._collector.collect_failure(expected_root, actual_root)
            return (yield expected_root, actual_root)

        if node_type is NodeType.ELEMENT_NODE:
            if not self.compare_attributes(expected.attributes, actual.attributes):
                return False
            return (yield from self._compare_children(expected.children, actual.children))

        if node_type in (NodeType.TEXT_NODE, NodeType.CDATA_SECTION_NODE):
            return self._compare_values(expected, actual)

        if node_type is NodeType.COMMENT_NODE:
            if not self._options.compare_comments:
                return True
            return self._compare_values(expected, actual)

        raise UnsupportedNodeType(node_type)

    def _compare_children(self, expected: Iterable[Node], actual: Iterable[Node]) -> Frame:
        # Positional: the first gap or failed pair ends the list
        for left, right in zip_longest(self.filter_nodes(expected), self.filter_nodes(actual)):
            if left is None or right is None:
                return self._collector.collect_failure(left, right)
            if not (yield left, right):
                return False
        return True

    def _compare_values(self, expected: Node, actual: Node) -> bool:
        strip_spaces = self._options.strip_spaces
        if normalized_value(expected, strip_spaces) == normalized_value(actual, strip_spaces):
            return True
        return self._collector.collect_failure(expected, actual)


# =============================================================================
# Entry point
# =============================================================================


def _build_options(
    options: CompareOptions | Mapping[str, Any] | None, overrides: dict[str, Any]
) -> CompareOptions:
    if isinstance(options, CompareOptions):
        if not overrides:
            return options
        current = {f.name: getattr(options, f.name) for f in fields(CompareOptions)}
        return CompareOptions.from_mapping({**current, **overrides})
    return CompareOptions.from_mapping({**(options or {}), **overrides})


def compare(
    expected: Node,
    actual: Node,
    options: CompareOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> Collector:
    """Compare ``expected`` against ``actual`` and return the filled collector.

    ``options`` may be a ``CompareOptions`` or a plain mapping (``camelCase``
    keys accepted); keyword arguments override individual options.
    """
    opts = _build_options(options, overrides)
    collector = Collector(opts)
    comparator = Comparator(opts, collector)

    logger.debug("Comparing %r against %r", expected, actual)
    comparator.compare_node(expected, actual)
    logger.debug("Comparison finished with %d difference(s)", len(collector))
    return collector
