"""Exceptions raised for internal invariant violations.

Data differences between trees are never raised; they are recorded by the
collector. These exceptions mean the comparison reached a state its own
preconditions forbid.
"""


class DomCompareError(Exception):
    """Base class for domcompare errors."""


class InvariantViolation(DomCompareError):
    """The comparison algorithm was asked to do something it must never do."""


class UnsupportedNodeType(InvariantViolation, NotImplementedError):
    """Dispatch reached a node kind with no comparison logic."""

    def __init__(self, node_type: object) -> None:
        super().__init__(f"Node type {node_type} comparison is not implemented")
        self.node_type = node_type
