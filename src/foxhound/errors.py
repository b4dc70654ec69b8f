from __future__ import annotations


class ToolError(Exception):
    """Base class for tool failures; carries a machine-readable kind."""

    kind = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, str]:
        return {"kind": self.kind, "message": self.message}


class InvalidParams(ToolError):
    """Raised when a tool argument is missing or malformed."""

    kind = "invalid_params"


class UnknownTool(ToolError):
    kind = "unknown_tool"


class SnippetInvalid(ToolError):
    """Raised when an HTML snippet holds no input-like element."""

    kind = "snippet_invalid"


class ElementNotFound(ToolError):
    """Raised once every locator candidate failed to match a live element."""

    kind = "element_not_found"

    def __init__(self, message: str, last_error: Exception | None = None) -> None:
        super().__init__(message)
        self.last_error = last_error


class SessionNotActive(ToolError):
    kind = "session_not_active"


class SessionAlreadyActive(ToolError):
    kind = "session_already_active"


class ConversionFailure(ToolError):
    """Raised when HTML to Markdown conversion fails."""

    kind = "conversion_failure"


class BrowserError(ToolError):
    """Raised for Playwright automation failures."""

    kind = "browser_error"


class ElementLookupError(BrowserError):
    """Raised when a single selector does not resolve to a live element."""

    kind = "element_lookup_failed"
