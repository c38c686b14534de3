"""
Difference collection.

The collector is the single place where a raw mismatch between two nodes
turns into a recorded ``Difference``. Custom comparators registered in
``CompareOptions.comparators`` get the first say; otherwise a default
message is produced from the node kinds, names and values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, NamedTuple

from .errors import InvariantViolation
from .nodes import KIND_NAMES, TEXT_LIKE, Node, NodeType, normalized_value
from .options import CompareOptions, Detailed, MessageOnly, Suppress, coerce_hook_result
from .revxpath import locate

logger = logging.getLogger(__name__)


class DiffKind(str, Enum):
    """Built-in difference classifications (hooks may use any other string)."""

    MISSING_NODE = "MISSING_NODE"
    DIFF_TYPE = "DIFF_TYPE"
    DIFF_TAG = "DIFF_TAG"
    DIFF_NODE_VALUE = "DIFF_NODE_VALUE"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Difference:
    """One recorded mismatch between the expected and the actual tree."""

    location: str  # Path of the failing node's container
    message: str
    kind: DiffKind | str  # "" when a hook did not classify it
    expected: Node | None  # None when the node is extra
    actual: Node | None  # None when the node is missing
    score: float = 1


class _Failure(NamedTuple):
    message: str
    kind: DiffKind | str
    can_continue: bool


# =============================================================================
# Message formatting
# =============================================================================


def _title(text: str) -> str:
    return text[:1].upper() + text[1:]


def describe_node(node: Node, strip_spaces: bool) -> str:
    """Quoted value for text-like nodes, quoted name otherwise."""
    if node.type in TEXT_LIKE:
        value = node.value or ""
        return f"'{value.strip() if strip_spaces else value}'"
    return f"'{node.name}'"


def _type_label(node: Node) -> str:
    return f"{int(node.type)} ({KIND_NAMES[node.type]})"


def _value_message(expected: Node, v_expected: str, v_actual: str) -> str:
    if expected.type is NodeType.ATTRIBUTE_NODE:
        return f"Attribute '{expected.name}': expected value '{v_expected}' instead of '{v_actual}'"
    if expected.type is NodeType.COMMENT_NODE:
        return f"Expected comment value '{v_expected}' instead of '{v_actual}'"
    if expected.type is NodeType.CDATA_SECTION_NODE:
        return f"Expected CDATA value '{v_expected}' instead of '{v_actual}'"
    if expected.type is NodeType.TEXT_NODE:
        return f"Expected text '{v_expected}' instead of '{v_actual}'"
    raise InvariantViolation(
        f"Node values differ but {KIND_NAMES[expected.type]} nodes carry no value"
    )


# =============================================================================
# Collector
# =============================================================================


class Collector:
    """Ordered, append-only record of the differences of one comparison."""

    def __init__(self, options: CompareOptions | None = None) -> None:
        self._options = options or CompareOptions()
        self._differences: list[Difference] = []

    @property
    def options(self) -> CompareOptions:
        return self._options

    def get_differences(self) -> list[Difference]:
        return list(self._differences)

    def is_equal(self) -> bool:
        return not self._differences

    def get_score(self) -> float:
        """Sum of the scores of all recorded differences."""
        return sum(diff.score for diff in self._differences)

    def __len__(self) -> int:
        return len(self._differences)

    def __iter__(self) -> Iterator[Difference]:
        return iter(self._differences)

    def __bool__(self) -> bool:
        return self.is_equal()

    def collect_failure(self, expected: Node | None, actual: Node | None) -> bool:
        """Record a mismatch and tell the caller whether to keep comparing.

        Exactly one side may be ``None`` (a missing or extra node). Returns
        ``False`` when the rest of the current attribute set or child list
        should be skipped.
        """
        ref = expected if expected is not None else actual
        if ref is None:
            raise ValueError("collect_failure() needs at least one node")

        failure = self._run_hooks(ref, expected, actual)
        if failure is None:
            failure = self._default_failure(expected, actual)

        if failure.message:
            diff = Difference(
                location=locate(ref.container),
                message=failure.message,
                kind=failure.kind,
                expected=expected,
                actual=actual,
                score=self._options.score(failure.kind),
            )
            self._differences.append(diff)
            logger.debug("Recorded %s at %s: %s", diff.kind or "difference", diff.location, diff.message)

        return failure.can_continue

    def _run_hooks(self, ref: Node, expected: Node | None, actual: Node | None) -> _Failure | None:
        for hook in self._options.hooks_for(ref.type):
            result = coerce_hook_result(hook(expected, actual))
            if result is None:
                continue
            logger.debug(
                "Comparator %s handled %s mismatch: %r",
                getattr(hook, "__name__", hook), KIND_NAMES[ref.type], result,
            )
            if isinstance(result, Suppress):
                return _Failure("", "", True)
            if isinstance(result, MessageOnly):
                return _Failure(result.message, "", True)
            if isinstance(result, Detailed):
                return _Failure(result.message, result.kind, not result.stop)
        return None

    def _default_failure(self, expected: Node | None, actual: Node | None) -> _Failure:
        strip_spaces = self._options.strip_spaces

        if expected is not None and actual is None:
            kind_name = _title(KIND_NAMES[expected.type])
            return _Failure(
                f"{kind_name} {describe_node(expected, strip_spaces)} is missed",
                DiffKind.MISSING_NODE,
                True,
            )
        if expected is None and actual is not None:
            return _Failure(
                f"Extra {KIND_NAMES[actual.type]} {describe_node(actual, strip_spaces)}",
                DiffKind.MISSING_NODE,
                True,
            )
        if expected is None or actual is None:
            raise ValueError("collect_failure() needs at least one node")

        if expected.type is not actual.type:
            return _Failure(
                f"Expected node of type {_type_label(expected)} instead of {_type_label(actual)}",
                DiffKind.DIFF_TYPE,
                False,
            )

        if expected.name != actual.name:
            return _Failure(
                f"Expected {KIND_NAMES[expected.type]} '{expected.name}' instead of '{actual.name}'",
                DiffKind.DIFF_TAG,
                False,
            )

        v_expected = normalized_value(expected, strip_spaces)
        v_actual = normalized_value(actual, strip_spaces)
        if v_expected == v_actual:
            raise InvariantViolation("Nodes are considered equal but shouldn't")

        return _Failure(
            _value_message(expected, v_expected, v_actual),
            DiffKind.DIFF_NODE_VALUE,
            True,
        )
