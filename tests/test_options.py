"""Tests for CompareOptions and hook result coercion."""

import logging

import pytest

from domcompare import CompareOptions, Detailed, MessageOnly, NodeType, Suppress
from domcompare.options import coerce_hook_result, resolve_node_type


def hook(expected, actual):
    return None


def test_defaults():
    options = CompareOptions()
    assert options.strip_spaces is False
    assert options.compare_comments is False
    assert options.comparators == {}
    assert options.score("MISSING_NODE") == 1


@pytest.mark.parametrize(
    "key, node_type",
    [
        (NodeType.TEXT_NODE, NodeType.TEXT_NODE),
        (3, NodeType.TEXT_NODE),
        ("ATTRIBUTE_NODE", NodeType.ATTRIBUTE_NODE),
        ("attribute", NodeType.ATTRIBUTE_NODE),
        ("Element", NodeType.ELEMENT_NODE),
        ("text node", NodeType.TEXT_NODE),
        ("cdata", NodeType.CDATA_SECTION_NODE),
        ("CDATA_SECTION_NODE", NodeType.CDATA_SECTION_NODE),
        ("comment", NodeType.COMMENT_NODE),
        ("document", NodeType.DOCUMENT_NODE),
    ],
)
def test_resolve_node_type(key, node_type):
    assert resolve_node_type(key) is node_type


def test_unknown_comparator_kind():
    with pytest.raises(ValueError, match="Unknown node kind"):
        CompareOptions(comparators={"processing-instruction": hook})


def test_comparators_normalized_to_lists():
    other = lambda e, a: None  # noqa: E731
    options = CompareOptions(comparators={"attribute": hook, "ATTRIBUTE_NODE": [other]})
    assert options.comparators == {NodeType.ATTRIBUTE_NODE: [hook, other]}
    assert options.hooks_for(NodeType.ATTRIBUTE_NODE) == [hook, other]
    assert options.hooks_for(NodeType.TEXT_NODE) == []


def test_from_mapping(caplog):
    with caplog.at_level(logging.DEBUG, logger="domcompare.options"):
        options = CompareOptions.from_mapping(
            {"stripSpaces": True, "compare_comments": True, "colour": "red"}
        )
    assert options.strip_spaces is True
    assert options.compare_comments is True
    assert "colour" in caplog.text


def test_from_mapping_none():
    assert CompareOptions.from_mapping(None) == CompareOptions()


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        (False, None),
        ("", None),
        (True, Suppress()),
        ("boom", MessageOnly("boom")),
        ({"message": "m", "stop": True}, Detailed("m", "", True)),
        ({"message": "m", "type": "CUSTOM"}, Detailed("m", "CUSTOM", False)),
        ({"message": "m", "kind": "K", "stop": False}, Detailed("m", "K", False)),
        (Detailed("d", stop=True), Detailed("d", "", True)),
        (Suppress(), Suppress()),
    ],
)
def test_coerce_hook_result(value, expected):
    assert coerce_hook_result(value) == expected


@pytest.mark.parametrize("value", [42, 1, 0.5, ["message"], object()])
def test_coerce_ignores_unrecognized_values(value):
    assert coerce_hook_result(value) is None
