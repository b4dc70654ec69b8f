from __future__ import annotations

import logging
import re
import textwrap
from typing import Iterable

import markdownify
from bs4 import BeautifulSoup

from ..errors import ConversionFailure
from ..types import ConversionOptions

logger = logging.getLogger(__name__)

BASELINE_IGNORE = ("script", "style", "noscript")

_HEADING_STYLES = {"atx": markdownify.ATX, "setext": markdownify.SETEXT}
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


class _Converter(markdownify.MarkdownConverter):
    def __init__(self, code_block_style: str = "fenced", **options) -> None:
        super().__init__(**options)
        self._code_block_style = code_block_style

    def convert_pre(self, el, text, *args, **kwargs):
        if self._code_block_style != "indented" or not text:
            return super().convert_pre(el, text, *args, **kwargs)
        body = textwrap.indent(text.strip("\n"), "    ")
        return f"\n\n{body}\n\n"


def suppressed_tags(extra: Iterable[str] = ()) -> tuple[str, ...]:
    """Baseline tags followed by caller tags, lower-cased and de-duplicated."""

    tags = [*BASELINE_IGNORE, *(tag.strip().lower() for tag in extra if tag.strip())]
    return tuple(dict.fromkeys(tags))


class ContentExtractor:
    """HTML to Markdown conversion with element suppression."""

    def __init__(self, options: ConversionOptions | None = None) -> None:
        self._options = options or ConversionOptions()
        self._suppressed = suppressed_tags(self._options.ignore_elements)
        self._converter = _Converter(
            code_block_style=self._options.code_block_style,
            heading_style=_HEADING_STYLES[self._options.heading_style],
        )

    @property
    def options(self) -> ConversionOptions:
        return self._options

    @property
    def suppressed(self) -> tuple[str, ...]:
        return self._suppressed

    def convert(self, markup: str) -> str:
        try:
            soup = BeautifulSoup(markup or "", "html.parser")
            for element in soup.find_all(list(self._suppressed)):
                if not element.decomposed:
                    element.decompose()
            markdown = self._converter.convert_soup(soup)
        except Exception as exc:  # noqa: BLE001
            logger.warning("HTML to Markdown conversion failed", exc_info=True)
            raise ConversionFailure(f"HTML to Markdown conversion failed: {exc}") from exc
        return _EXCESS_NEWLINES.sub("\n\n", markdown).strip()


def html_to_markdown(markup: str, options: ConversionOptions | None = None) -> str:
    return ContentExtractor(options).convert(markup)
