from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from foxhound.browser.locators import locators_from_snippet, parse_snippet, structural_path, synthesize_locators
from foxhound.errors import SnippetInvalid


def test_id_candidate_comes_first() -> None:
    candidates = locators_from_snippet('<input id="x" name="n" type="text">')
    assert candidates[0].kind == "id"
    assert candidates[0].value == "#x"
    assert candidates[0].priority == 0


def test_candidate_order_without_type_attribute() -> None:
    candidates = locators_from_snippet('<input id="q" name="search" class="box">')

    assert [c.kind for c in candidates] == ["id", "name", "structural_path", "class_list", "bare_tag"]
    assert [c.value for c in candidates] == [
        "#q",
        '[name="search"]',
        "/html/body/input",
        ".box",
        "input",
    ]
    assert [c.priority for c in candidates] == [0, 1, 2, 3, 4]


def test_type_attribute_replaces_bare_tag() -> None:
    candidates = locators_from_snippet('<input type="search">')

    kinds = [c.kind for c in candidates]
    assert kinds == ["structural_path", "tag_type"]
    assert candidates[-1].value == 'input[type="search"]'
    assert "bare_tag" not in kinds


def test_multiple_classes_form_compound_selector() -> None:
    candidates = locators_from_snippet('<textarea class="field  wide big"></textarea>')
    class_candidate = next(c for c in candidates if c.kind == "class_list")
    assert class_candidate.value == ".field.wide.big"


def test_name_value_quotes_are_escaped() -> None:
    candidates = locators_from_snippet('<input name=\'say "hi"\'>')
    assert candidates[0].value == '[name="say \\"hi\\""]'


@pytest.mark.parametrize(
    ("snippet", "expected"),
    [
        ('<input id="q">', "#q"),
        ('<input id="a.b">', "#a\\.b"),
        ('<input id="1st">', "#\\31 st"),
        ('<input id="-2x">', "#-\\32 x"),
        ('<input id="user:name">', "#user\\:name"),
    ],
)
def test_id_is_css_escaped(snippet: str, expected: str) -> None:
    assert locators_from_snippet(snippet)[0].value == expected


def test_class_tokens_are_css_escaped() -> None:
    candidates = locators_from_snippet('<input class="w-1/2 md:flex">')
    class_candidate = next(c for c in candidates if c.kind == "class_list")
    assert class_candidate.value == ".w-1\\/2.md\\:flex"


def test_selector_engine_prefix() -> None:
    candidates = locators_from_snippet('<input id="q">')
    by_kind = {c.kind: c for c in candidates}
    assert by_kind["id"].selector == "css=#q"
    assert by_kind["structural_path"].selector == "xpath=/html/body/input"


def test_root_element_path_is_its_tag() -> None:
    soup = BeautifulSoup("<HTML><body></body></HTML>", "lxml")
    assert structural_path(soup.find("html")) == "/html"


def test_path_adds_one_based_rank_among_same_tag_siblings() -> None:
    html = '<form><input name="a"><span></span><input name="b"><textarea></textarea></form>'
    soup = BeautifulSoup(html, "lxml")
    first, second = soup.find_all("input")

    assert structural_path(first) == "/html/body/form/input[1]"
    assert structural_path(second) == "/html/body/form/input[2]"
    assert structural_path(soup.find("textarea")) == "/html/body/form/textarea"


def test_path_ranks_apply_at_every_level() -> None:
    html = "<div><p>one</p></div><div><span><input></span></div>"
    element = parse_snippet(html)
    assert structural_path(element) == "/html/body/div[2]/span/input"


def test_identical_siblings_are_ranked_by_position() -> None:
    soup = BeautifulSoup("<div><input><input><input></div>", "lxml")
    third = soup.find_all("input")[2]
    assert structural_path(third) == "/html/body/div/input[3]"


def test_focal_element_is_first_input_like_element() -> None:
    element = parse_snippet('<div><textarea id="t"></textarea><input id="i"></div>')
    assert element.name == "textarea"
    assert synthesize_locators(element)[0].value == "#t"


def test_snippet_without_input_is_rejected() -> None:
    with pytest.raises(SnippetInvalid):
        parse_snippet("<div><button>Go</button></div>")


def test_empty_snippet_is_rejected() -> None:
    with pytest.raises(SnippetInvalid):
        locators_from_snippet("")
