"""Tests for locate()."""

import pytest

from domcompare import Node, locate, parse_xml

DOC = parse_xml(
    "<root>"
    "<item id='1'/>"
    "<item id='2'>first<!--c1--><x/>second<!--c2--></item>"
    "<other>only</other>"
    "</root>"
)
ROOT = DOC.document_element
FIRST, SECOND, OTHER = ROOT.children
TEXT_1, COMMENT_1, X, TEXT_2, COMMENT_2 = SECOND.children


@pytest.mark.parametrize(
    "node, path",
    [
        pytest.param(None, "/", id="none"),
        pytest.param(DOC, "/", id="document"),
        pytest.param(ROOT, "/root", id="root element"),
        pytest.param(FIRST, "/root/item[1]", id="first of same name"),
        pytest.param(SECOND, "/root/item[2]", id="second of same name"),
        pytest.param(OTHER, "/root/other", id="unique name"),
        pytest.param(X, "/root/item[2]/x", id="nested"),
        pytest.param(TEXT_1, "/root/item[2]/text()[1]", id="first text"),
        pytest.param(TEXT_2, "/root/item[2]/text()[2]", id="second text"),
        pytest.param(COMMENT_2, "/root/item[2]/comment()[2]", id="second comment"),
        pytest.param(OTHER.children[0], "/root/other/text()", id="only text"),
        pytest.param(SECOND.attributes[0], "/root/item[2]/@id", id="attribute"),
    ],
)
def test_locate(node, path):
    assert locate(node) == path


def test_locate_detached_nodes():
    elem = Node.element("a", {"x": "1"}, [Node.element("b")])
    assert locate(elem) == "/a"
    assert locate(elem.children[0]) == "/a/b"
    assert locate(Node.attribute("x", "1")) == "@x"
    assert locate(Node.text("t")) == "/text()"
