"""CSS declaration container behaviour."""

from __future__ import annotations

import pytest

from edittree.plugins.css.declarations import DeclarationContainer, parse_from_position
from edittree.tree.base import NO_POSITION


def _pairs(container: DeclarationContainer) -> list[tuple[str, str]]:
    return [(item.name(), item.value()) for item in container.list()]


def _assert_consistent(container: DeclarationContainer) -> None:
    source = container.source
    assert container.name_range().substring(source) == container.name()
    for item in container.list():
        assert item.name_range().substring(source) == item.name()
        if item.has_value_token():
            assert item.value_range().substring(source) == item.value()


@pytest.fixture()
def rule() -> DeclarationContainer:
    return DeclarationContainer("div {\n\tcolor: red;\n\tmargin: 0 auto;\n}")


def test_bare_list_scenario() -> None:
    container = DeclarationContainer("a:1;b:2;c:3")
    first, second, third = container.list()
    positions = [(item.name_position(), item.value_position()) for item in container.list()]
    assert positions == [(0, 2), (4, 6), (8, 10)]

    first.value("100")
    assert container.source == "a:100;b:2;c:3"
    assert second.value_position() == 8
    assert third.value_position() == 12

    container.remove("b")
    assert container.source == "a:100;c:3"
    assert third.name_position() == 6
    _assert_consistent(container)


def test_rule_parsing(rule: DeclarationContainer) -> None:
    assert rule.name() == "div"
    assert rule.name_range().start == 0
    assert _pairs(rule) == [("color", "red"), ("margin", "0 auto")]
    assert rule.get("margin").terminated()
    _assert_consistent(rule)


def test_selector_rename_shifts_declarations(rule: DeclarationContainer) -> None:
    color_position = rule.get("color").name_position()
    rule.name("section.main")
    assert rule.source.startswith("section.main {\n")
    assert rule.get("color").name_position() == color_position + len("section.main") - len("div")
    _assert_consistent(rule)


def test_full_range_covers_indentation_and_terminator(rule: DeclarationContainer) -> None:
    color = rule.get("color")
    assert color.full_range().substring(rule.source) == "\n\tcolor: red;"
    assert color.range().substring(rule.source) == "color: r"


def test_add_copies_neighbour_formatting(rule: DeclarationContainer) -> None:
    added = rule.add("padding", "2px")
    assert rule.source == "div {\n\tcolor: red;\n\tmargin: 0 auto;\n\tpadding: 2px;\n}"
    assert rule.index_of(added) == 2
    _assert_consistent(rule)


def test_add_at_index(rule: DeclarationContainer) -> None:
    rule.add("display", "block", pos=0)
    assert rule.source == "div {\n\tdisplay: block;\n\tcolor: red;\n\tmargin: 0 auto;\n}"
    assert [item.name() for item in rule.list()] == ["display", "color", "margin"]
    _assert_consistent(rule)


def test_add_terminates_previous_declaration() -> None:
    container = DeclarationContainer("a:1;b:2")
    assert not container.get("b").terminated()
    container.add("c", "3")
    assert container.source == "a:1;b:2;c:3;"
    _assert_consistent(container)


def test_add_to_empty_rule_uses_options() -> None:
    container = DeclarationContainer("p {}", {"before": " ", "separator": ": "})
    container.add("color", "blue")
    assert container.source == "p { color: blue;}"
    assert container.content_start() == 3
    _assert_consistent(container)


def test_value_creates_missing_declaration() -> None:
    container = DeclarationContainer("a:1;")
    assert container.value("b", "2") == "2"
    assert container.source == "a:1;b:2;"


def test_declaration_without_value() -> None:
    container = DeclarationContainer("a;b:2")
    bare = container.get("a")
    assert bare.value_position() == NO_POSITION
    assert bare.value() == ""
    container.value("a", "1")
    assert container.source == "a:1;b:2"
    assert bare.value_position() == 2
    assert container.get("b").name_position() == 4
    _assert_consistent(container)


def test_empty_value_is_tracked() -> None:
    container = DeclarationContainer("a:;b:2")
    assert container.get("a").has_value_token()
    container.get("a").value("1")
    assert container.source == "a:1;b:2"
    _assert_consistent(container)


def test_remove_round_trip() -> None:
    container = DeclarationContainer("a:1; b:2; c:3")
    expected = [pair for pair in _pairs(container) if pair[0] != "b"]
    container.remove("b")
    assert container.source == "a:1; c:3"
    assert _pairs(DeclarationContainer(container.source)) == expected
    assert _pairs(container) == expected


def test_edit_sequence_matches_reparse(rule: DeclarationContainer) -> None:
    rule.get("color").value("rgb(0, 0, 0)")
    rule.add("border", "none", pos=1)
    rule.get("margin").name("padding")
    rule.remove(0)
    rule.name("a:hover")
    assert rule.source == "a:hover {\n\tborder: none;\n\tpadding: 0 auto;\n}"
    assert _pairs(DeclarationContainer(rule.source)) == _pairs(rule)
    _assert_consistent(rule)


def test_parse_from_position() -> None:
    document = "a { x: 1; }\nb { y: 2; z: 3 }"
    container = parse_from_position(document, document.index("y"))
    assert container is not None
    assert container.name() == "b"
    assert container.base_offset == document.index("b {")
    assert container.get("y").name_position(absolute=True) == document.index("y")
    assert container.item_from_position(document.index("z"), absolute=True).name() == "z"
    assert parse_from_position("  a { x: 1 }", 0) is None
    assert parse_from_position("a { x: 1 }  ", 11) is None


def test_semicolons_inside_strings_and_parentheses() -> None:
    container = DeclarationContainer('background: url("x;y.png"); content: "a;b"; color: red')
    assert _pairs(container) == [
        ("background", 'url("x;y.png")'),
        ("content", '"a;b"'),
        ("color", "red"),
    ]
    container.remove("background")
    assert container.source == ' content: "a;b"; color: red'
    assert _pairs(DeclarationContainer(container.source)) == _pairs(container)
    _assert_consistent(container)


def test_comments_are_skipped() -> None:
    container = DeclarationContainer("div {\n\t/* note */ color: red; /* b; c */ margin: 0;\n}")
    assert _pairs(container) == [("color", "red"), ("margin", "0")]
    container.get("color").value("blue")
    container.remove("margin")
    assert container.source == "div {\n\t/* note */ color: blue; /* b; c */\n}"
    _assert_consistent(container)


def test_add_at_start_of_bare_list_keeps_name_in_front() -> None:
    container = DeclarationContainer("a:1")
    container.add("b", "2", pos=0)
    assert container.source == "b:2;a:1"
    assert container.name_range().start == 0
    container.name("x")
    assert container.source == "xb:2;a:1"
    assert container.name_range().start == 0
    _assert_consistent(container)
