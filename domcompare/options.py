"""
Comparison options and the custom comparator (hook) protocol.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Union

from .nodes import Node, NodeType

logger = logging.getLogger(__name__)


# =============================================================================
# Hook results
# =============================================================================


@dataclass(frozen=True)
class Suppress:
    """Treat the mismatch as equal; nothing is recorded."""


@dataclass(frozen=True)
class MessageOnly:
    """Record ``message`` and keep comparing."""

    message: str


@dataclass(frozen=True)
class Detailed:
    """Record ``message`` with ``kind``; ``stop`` aborts the current list."""

    message: str
    kind: str = ""
    stop: bool = False


HookResult = Union[Suppress, MessageOnly, Detailed, None]

# Hook type: takes (expected, actual), either side may be None
Hook = Callable[[Union[Node, None], Union[Node, None]], Any]


def coerce_hook_result(value: Any) -> HookResult:
    """Turn a hook return value into a ``HookResult``.

    Besides the result classes, hooks may return ``True`` (suppress), a
    message string, or a mapping with ``message``, ``kind`` (or ``type``)
    and ``stop`` keys. ``None``, ``False``, ``""`` and any other value fall
    through to the next hook and then to the default logic.
    """
    if value is None or value is False:
        return None
    if isinstance(value, (Suppress, MessageOnly, Detailed)):
        return value
    if value is True:
        return Suppress()
    if isinstance(value, str):
        return MessageOnly(value) if value else None
    if isinstance(value, Mapping):
        return Detailed(
            message=str(value.get("message") or ""),
            kind=str(value.get("kind", value.get("type")) or ""),
            stop=bool(value.get("stop", False)),
        )
    logger.debug("Ignoring unrecognized comparator result %r", value)
    return None


# =============================================================================
# Options
# =============================================================================

_KIND_ALIASES: dict[str, NodeType] = {
    "document": NodeType.DOCUMENT_NODE,
    "element": NodeType.ELEMENT_NODE,
    "attribute": NodeType.ATTRIBUTE_NODE,
    "text": NodeType.TEXT_NODE,
    "cdata": NodeType.CDATA_SECTION_NODE,
    "cdata_section": NodeType.CDATA_SECTION_NODE,
    "comment": NodeType.COMMENT_NODE,
}

_CAMEL_KEYS = {
    "stripSpaces": "strip_spaces",
    "compareComments": "compare_comments",
}


def _unit_score(kind: str) -> float:
    return 1


def resolve_node_type(key: NodeType | str | int) -> NodeType:
    """Map a comparator registry key to a ``NodeType``."""
    if isinstance(key, NodeType):
        return key
    if isinstance(key, int):
        return NodeType(key)
    name = key.strip()
    if name.upper() in NodeType.__members__:
        return NodeType[name.upper()]
    alias = name.lower().replace("-", "_").replace(" ", "_")
    alias = alias[: -len("_node")] if alias.endswith("_node") else alias
    if alias in _KIND_ALIASES:
        return _KIND_ALIASES[alias]
    raise ValueError(f"Unknown node kind for comparator: {key!r}")


@dataclass
class CompareOptions:
    """Configuration for one comparison run."""

    strip_spaces: bool = False  # Trim text/attribute/comment values (never CDATA)
    compare_comments: bool = False  # Comments are invisible unless set
    comparators: dict[NodeType, list[Hook]] = field(default_factory=dict)
    score: Callable[[str], float] = _unit_score

    def __post_init__(self) -> None:
        registry: dict[NodeType, list[Hook]] = {}
        for key, hooks in (self.comparators or {}).items():
            if callable(hooks):
                hooks = [hooks]
            registry.setdefault(resolve_node_type(key), []).extend(hooks)
        self.comparators = registry
        if self.score is None:
            self.score = _unit_score

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> CompareOptions:
        """Build options from a plain mapping, ignoring unrecognized keys."""
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in (mapping or {}).items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in known:
                logger.debug("Ignoring unrecognized compare option %r", key)
                continue
            kwargs[name] = value
        return cls(**kwargs)

    def hooks_for(self, node_type: NodeType) -> list[Hook]:
        return self.comparators.get(node_type, [])
