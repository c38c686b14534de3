"""Tests for grouping, console output and assertions."""

import pytest

from domcompare import GroupingReporter, assert_equal, compare, parse_xml, print_report
from domcompare.reporting import format_char_diff, format_node, truncate

EXPECTED = '<a x="1"><b>old</b><c/></a>'
ACTUAL = '<a x="2"><b>new</b></a>'


@pytest.fixture
def result():
    return compare(parse_xml(EXPECTED), parse_xml(ACTUAL))


def test_get_differences_grouped_by_location(result):
    assert GroupingReporter.get_differences(result) == {
        "/a": ["Attribute 'x': expected value '1' instead of '2'", "Element 'c' is missed"],
        "/a/b": ["Expected text 'old' instead of 'new'"],
    }


def test_report(result):
    assert GroupingReporter.report(result) == (
        "/a\n"
        "\tAttribute 'x': expected value '1' instead of '2'\n"
        "\tElement 'c' is missed\n"
        "/a/b\n"
        "\tExpected text 'old' instead of 'new'"
    )


def test_report_empty_when_equal():
    result = compare(parse_xml(EXPECTED), parse_xml(EXPECTED))
    assert GroupingReporter.report(result) == ""
    assert GroupingReporter.get_differences(result) == {}


def test_print_report(result, capsys):
    print_report(result)
    out = capsys.readouterr().out
    assert "/a/b" in out
    assert "Element 'c' is missed [MISSING_NODE]" in out
    assert "3 difference(s), score 3" in out


def test_print_report_verbose(result, capsys):
    print_report(result, verbose=True)
    out = capsys.readouterr().out
    assert "- old" in out
    assert "+ new" in out
    assert "expected: <c/>" in out
    assert "actual:   (none)" in out


def test_print_report_equal(capsys):
    print_report(compare(parse_xml("<a/>"), parse_xml("<a/>")))
    assert "Trees are equal" in capsys.readouterr().out


def test_format_helpers():
    assert format_char_diff("abc", "abd") == ("abc", "abd")
    assert format_node(None) == "(none)"
    assert truncate("x" * 10, max_length=5) == "xx..."
    assert truncate("short") == "short"


def test_assert_equal_passes():
    result = assert_equal(parse_xml('<a x="1"/>'), parse_xml('<a  x="1" ></a>'))
    assert result.is_equal()


def test_assert_equal_fails_with_report():
    with pytest.raises(AssertionError) as excinfo:
        assert_equal(parse_xml(EXPECTED), parse_xml(ACTUAL))
    message = str(excinfo.value)
    assert message.startswith("Trees differ (3 difference(s)):")
    assert "\tElement 'c' is missed" in message


def test_assert_equal_forwards_options():
    assert_equal(parse_xml("<a> x </a>"), parse_xml("<a>x</a>"), {"stripSpaces": True})
    with pytest.raises(AssertionError):
        assert_equal(parse_xml("<a> x </a>"), parse_xml("<a>x</a>"))
