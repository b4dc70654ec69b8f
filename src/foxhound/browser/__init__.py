from __future__ import annotations

from .locators import locators_from_snippet, parse_snippet, structural_path, synthesize_locators
from .resolver import resolve_element
from .session import BrowserSession, SessionSlot, session_scope

__all__ = [
	"BrowserSession",
	"SessionSlot",
	"session_scope",
	"parse_snippet",
	"structural_path",
	"synthesize_locators",
	"locators_from_snippet",
	"resolve_element",
]
