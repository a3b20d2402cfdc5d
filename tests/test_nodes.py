from __future__ import annotations

from bs4 import BeautifulSoup
from bs4.element import NavigableString, Tag

from mdfilters.core.nodes import (
    NodeVerdict,
    create_image_node,
    create_text_node,
    document_of,
    gather_classes,
    is_text_node,
    parent_name,
    walk,
)


def test_is_text_node_excludes_non_text_strings() -> None:
    soup = BeautifulSoup(
        "<p>plain</p><!-- note --><script>var a = ':+1:';</script><style>p{}</style>",
        "html.parser",
    )
    strings = [node for node in soup.descendants if isinstance(node, NavigableString)]
    flags = {str(node): is_text_node(node) for node in strings}

    assert flags == {
        "plain": True,
        " note ": False,
        "var a = ':+1:';": False,
        "p{}": False,
    }
    assert not is_text_node(soup.p)
    assert not is_text_node("plain")


def test_parent_name_and_document() -> None:
    soup = BeautifulSoup("top<P>inner</P>", "html.parser")
    top, paragraph = soup.contents

    assert parent_name(top) is None
    assert parent_name(paragraph.contents[0]) == "p"
    assert document_of(paragraph.contents[0]) is soup
    assert document_of(create_text_node("loose")) is None


def test_create_image_node() -> None:
    image = create_image_node("data:image/png;base64,AA==", css_class="emoji", alt=":+1:")

    assert isinstance(image, Tag)
    assert image.name == "img"
    assert image["src"] == "data:image/png;base64,AA=="
    assert image["alt"] == ":+1:"
    assert gather_classes(image.get("class")) == ["emoji"]


def test_create_text_node_is_detached() -> None:
    node = create_text_node("hello")

    assert str(node) == "hello"
    assert node.parent is None
    assert is_text_node(node)


def test_gather_classes() -> None:
    assert gather_classes("a b") == ["a", "b"]
    assert gather_classes(["a", 1, "b"]) == ["a", "b"]
    assert gather_classes(None) == []


def test_walk_honours_verdicts() -> None:
    soup = BeautifulSoup(
        "<div>one<section>two<b>three</b></section><aside>four</aside></div>five",
        "html.parser",
    )

    def accept(node) -> NodeVerdict:
        if getattr(node, "name", None) == "aside":
            return NodeVerdict.REJECT
        if isinstance(node, NavigableString) and str(node) != "two":
            return NodeVerdict.ACCEPT
        return NodeVerdict.SKIP

    assert [str(node) for node in walk(soup, accept)] == ["one", "three", "five"]


def test_walk_does_not_offer_root() -> None:
    soup = BeautifulSoup("<p>text</p>", "html.parser")
    seen: list[object] = []

    def accept(node) -> NodeVerdict:
        seen.append(node)
        return NodeVerdict.ACCEPT

    list(walk(soup.p, accept))

    assert seen == [soup.p.contents[0]]
