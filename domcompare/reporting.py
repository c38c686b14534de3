"""
Presentation of comparison results.

``GroupingReporter`` groups difference messages by location; the console
helpers print a colored summary; ``assert_equal`` turns a failed comparison
into an ``AssertionError`` for test suites.
"""

from __future__ import annotations

import difflib
import sys
from collections.abc import Mapping
from typing import Any

from .canonizer import serialize
from .collector import Collector, DiffKind, Difference
from .comparator import compare
from .nodes import Node, normalized_value
from .options import CompareOptions

# ANSI color codes for TTY output
IS_TTY = sys.stdout.isatty()
RED = "\033[91m" if IS_TTY else ""
GREEN = "\033[92m" if IS_TTY else ""
RESET = "\033[0m" if IS_TTY else ""
RED_BG = "\033[41m" if IS_TTY else ""
GREEN_BG = "\033[42m" if IS_TTY else ""
BOLD = "\033[1m" if IS_TTY else ""


def log(msg: str = "") -> None:
    """Print a message and flush stdout immediately."""
    print(msg, flush=True)


# =============================================================================
# Grouping
# =============================================================================


class GroupingReporter:
    """Group difference messages by the location they were found at."""

    @staticmethod
    def get_differences(result: Collector) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = {}
        for diff in result.get_differences():
            grouped.setdefault(diff.location, []).append(diff.message)
        return grouped

    @staticmethod
    def report(result: Collector) -> str:
        """One block per location: the path, then each message on a tab-indented line."""
        blocks = []
        for location, messages in GroupingReporter.get_differences(result).items():
            blocks.append(location + "\n\t" + "\n\t".join(messages))
        return "\n".join(blocks)


# =============================================================================
# Console output
# =============================================================================


def truncate(text: str, max_length: int = 200) -> str:
    if len(text) > max_length:
        return text[: max_length - 3] + "..."
    return text


def format_char_diff(old_str: str, new_str: str) -> tuple[str, str]:
    """Generate character-level diff highlighting for two strings."""
    matcher = difflib.SequenceMatcher(None, old_str, new_str)
    old_result = []
    new_result = []

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            old_result.append(old_str[i1:i2])
            new_result.append(new_str[j1:j2])
        elif tag == "replace":
            old_result.append(f"{RED_BG}{old_str[i1:i2]}{RESET}{RED}")
            new_result.append(f"{GREEN_BG}{new_str[j1:j2]}{RESET}{GREEN}")
        elif tag == "delete":
            old_result.append(f"{RED_BG}{old_str[i1:i2]}{RESET}{RED}")
        elif tag == "insert":
            new_result.append(f"{GREEN_BG}{new_str[j1:j2]}{RESET}{GREEN}")

    return "".join(old_result), "".join(new_result)


def format_node(node: Node | None, strip_spaces: bool = False, max_length: int = 200) -> str:
    """Format a node for display."""
    if node is None:
        return "(none)"
    return truncate(serialize(node, compare_comments=True, strip_spaces=strip_spaces, indent=""), max_length)


def print_difference(diff: Difference, verbose: bool = False, strip_spaces: bool = False) -> None:
    """Print a single difference, with a char diff of the values when verbose."""
    kind = f" [{diff.kind}]" if diff.kind else ""
    log(f"  {RED}{diff.message}{RESET}{kind}")

    if not verbose:
        return

    if diff.kind == DiffKind.DIFF_NODE_VALUE and diff.expected and diff.actual:
        old_diff, new_diff = format_char_diff(
            normalized_value(diff.expected, strip_spaces),
            normalized_value(diff.actual, strip_spaces),
        )
        log(f"    {RED}- {old_diff}{RESET}")
        log(f"    {GREEN}+ {new_diff}{RESET}")
    else:
        log(f"    expected: {format_node(diff.expected, strip_spaces)}")
        log(f"    actual:   {format_node(diff.actual, strip_spaces)}")


def print_report(result: Collector, verbose: bool = False) -> None:
    """Print all differences grouped by location, followed by a summary line."""
    if result.is_equal():
        log(f"{GREEN}Trees are equal{RESET}")
        return

    strip_spaces = result.options.strip_spaces
    by_location: dict[str, list[Difference]] = {}
    for diff in result.get_differences():
        by_location.setdefault(diff.location, []).append(diff)

    for location, diffs in by_location.items():
        log(f"{BOLD}{location}{RESET}")
        for diff in diffs:
            print_difference(diff, verbose, strip_spaces)

    log(f"\n{len(result)} difference(s), score {result.get_score():g}")


# =============================================================================
# Test assertions
# =============================================================================


def assert_equal(
    expected: Node,
    actual: Node,
    options: CompareOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> Collector:
    """Compare two trees and raise ``AssertionError`` with a grouped report on mismatch."""
    result = compare(expected, actual, options, **overrides)
    if not result.is_equal():
        raise AssertionError(
            f"Trees differ ({len(result)} difference(s)):\n{GroupingReporter.report(result)}"
        )
    return result
