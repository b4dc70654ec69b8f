from __future__ import annotations

import logging

from bs4 import BeautifulSoup, Tag

from ..errors import SnippetInvalid
from ..types import LocatorCandidate, LocatorKind

logger = logging.getLogger(__name__)

FOCAL_TAGS = ("input", "textarea")

# lxml wraps fragments in html/body the way a browser does, so structural
# paths computed here line up with the live DOM.
_SNIPPET_PARSER = "lxml"


def parse_snippet(html: str) -> Tag:
    """Parse ``html`` and return its focal element (first input or textarea)."""

    soup = BeautifulSoup(html or "", _SNIPPET_PARSER)
    element = soup.find(list(FOCAL_TAGS))
    if not isinstance(element, Tag):
        raise SnippetInvalid("No input or textarea element found in the provided HTML")
    return element


def _is_root(element: Tag) -> bool:
    parent = element.parent
    return parent is None or isinstance(parent, BeautifulSoup)


def structural_path(element: Tag) -> str:
    """Absolute XPath from the outermost element down to ``element``.

    A segment gets a ``[k]`` suffix (1-based, document order) only when its
    parent has more than one child with the same tag.
    """

    segments: list[str] = []
    current = element
    while True:
        tag = current.name.lower()
        if _is_root(current):
            segments.append(tag)
            break
        parent = current.parent
        siblings = parent.find_all(current.name, recursive=False)
        if len(siblings) == 1:
            segments.append(tag)
        else:
            rank = next(index for index, sibling in enumerate(siblings, start=1) if sibling is current)
            segments.append(f"{tag}[{rank}]")
        current = parent
    return "/" + "/".join(reversed(segments))


def _attr(element: Tag, name: str) -> str | None:
    value = element.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _css_escape(value: str) -> str:
    """Escape an identifier for use after ``#`` or ``.``, following ``CSS.escape()``."""

    out: list[str] = []
    for index, char in enumerate(value):
        code = ord(char)
        if code == 0:
            out.append("\ufffd")
        elif 0x01 <= code <= 0x1F or code == 0x7F:
            out.append(f"\\{code:x} ")
        elif "0" <= char <= "9" and (index == 0 or (index == 1 and value[0] == "-")):
            out.append(f"\\{code:x} ")
        elif char == "-" and len(value) == 1:
            out.append("\\-")
        elif code >= 0x80 or char in "-_" or char.isascii() and char.isalnum():
            out.append(char)
        else:
            out.append("\\" + char)
    return "".join(out)


def synthesize_locators(element: Tag) -> list[LocatorCandidate]:
    """Build candidates for ``element`` ordered by ascending priority."""

    drafts: list[tuple[LocatorKind, str]] = []

    element_id = _attr(element, "id")
    if element_id:
        drafts.append(("id", "#" + _css_escape(element_id)))

    name = _attr(element, "name")
    if name:
        drafts.append(("name", f'[name="{_quote(name)}"]'))

    drafts.append(("structural_path", structural_path(element)))

    classes = [token for token in (element.get("class") or []) if token.strip()]
    if classes:
        drafts.append(("class_list", "." + ".".join(_css_escape(token) for token in classes)))

    tag = element.name.lower()
    input_type = _attr(element, "type")
    if input_type:
        drafts.append(("tag_type", f'{tag}[type="{_quote(input_type)}"]'))
    else:
        drafts.append(("bare_tag", tag))

    candidates = [
        LocatorCandidate(kind=kind, value=value, priority=priority)
        for priority, (kind, value) in enumerate(drafts)
    ]
    logger.debug("Synthesized %d locator candidates", len(candidates), extra={"kinds": [c.kind for c in candidates]})
    return candidates


def locators_from_snippet(html: str) -> list[LocatorCandidate]:
    return synthesize_locators(parse_snippet(html))
