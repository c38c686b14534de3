"""
domcompare: structural comparison of markup trees for test assertions.

    from domcompare import GroupingReporter, compare, parse_xml

    result = compare(parse_xml(expected_xml), parse_xml(actual_xml), strip_spaces=True)
    if not result.is_equal():
        print(GroupingReporter.report(result))
"""

from .canonizer import XMLSerializer, serialize
from .collector import Collector, DiffKind, Difference
from .comparator import Comparator, compare
from .errors import DomCompareError, InvariantViolation, UnsupportedNodeType
from .nodes import Node, NodeType, from_lxml, from_soup, parse_html, parse_xml
from .options import CompareOptions, Detailed, MessageOnly, Suppress
from .reporting import GroupingReporter, assert_equal, print_report
from .revxpath import locate

__version__ = "0.1.0"

__all__ = [
    # comparison
    "compare",
    "Comparator",
    "Collector",
    "CompareOptions",
    "DiffKind",
    "Difference",

    # hooks
    "Suppress",
    "MessageOnly",
    "Detailed",

    # nodes
    "Node",
    "NodeType",
    "from_lxml",
    "from_soup",
    "parse_xml",
    "parse_html",

    # collaborators
    "locate",
    "serialize",
    "XMLSerializer",
    "GroupingReporter",
    "print_report",
    "assert_equal",

    # errors
    "DomCompareError",
    "InvariantViolation",
    "UnsupportedNodeType",
]
