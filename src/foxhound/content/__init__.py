from __future__ import annotations

from .extractor import BASELINE_IGNORE, ContentExtractor, html_to_markdown
from .search import compose_report, parse_search_results

__all__ = [
	"BASELINE_IGNORE",
	"ContentExtractor",
	"html_to_markdown",
	"parse_search_results",
	"compose_report",
]
