from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from ..types import SearchEntry

LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
HEADING_MARKERS = ("# ", "## ")
DESCRIPTION_LIMIT = 200

SUMMARY_HEADER = "# Search Result Summary"
FULL_CONTENT_HEADER = "# Full Search Results"


@dataclass(slots=True)
class _OpenEntry:
    title: str
    url: str = ""
    description: str = ""

    def complete(self) -> bool:
        return bool(self.title and self.url)

    def add_description(self, text: str) -> None:
        # Whole lines only: once the cap is reached later lines are dropped.
        if len(self.description) >= DESCRIPTION_LIMIT:
            return
        self.description = f"{self.description} {text}" if self.description else text

    def to_entry(self) -> SearchEntry:
        return SearchEntry(title=self.title, url=self.url, description=self.description)


def parse_search_results(markdown: str) -> list[SearchEntry]:
    """Extract title/url/description entries from converted search Markdown.

    A ``# `` or ``## `` heading opens an entry, the first link line after it
    sets the url and other non-blank lines feed the description. Entries that
    never acquire a url are dropped.
    """

    entries: list[SearchEntry] = []
    current: _OpenEntry | None = None

    for raw_line in markdown.split("\n"):
        line = raw_line.rstrip("\r")
        if line.startswith(HEADING_MARKERS):
            if current is not None and current.complete():
                entries.append(current.to_entry())
            marker = "## " if line.startswith("## ") else "# "
            current = _OpenEntry(title=line[len(marker):].strip())
            continue

        if current is None:
            continue

        match = LINK_PATTERN.search(line)
        if match is not None:
            # Only the first link names the entry; later links are dropped.
            if not current.url:
                current.url = match.group(2)
            continue

        stripped = line.strip()
        if stripped:
            current.add_description(stripped)

    if current is not None and current.complete():
        entries.append(current.to_entry())
    return entries


def format_summary(entries: Iterable[SearchEntry]) -> str:
    sections = "\n".join(
        f"## {entry.title}\n- URL: {entry.url}\n- Summary: {entry.description}\n" for entry in entries
    )
    return f"{SUMMARY_HEADER}\n\n{sections}"


def compose_report(entries: Iterable[SearchEntry], markdown: str) -> str:
    """Summary section (one subsection per entry) followed by the raw Markdown."""

    return f"{format_summary(entries)}\n\n{FULL_CONTENT_HEADER}\n\n{markdown}"
