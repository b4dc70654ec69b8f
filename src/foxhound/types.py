from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

LocatorKind = Literal[
    "id",
    "name",
    "structural_path",
    "class_list",
    "tag_type",
    "bare_tag",
]


class LocatorCandidate(BaseModel):
    """One strategy for finding the live counterpart of a snippet element."""

    kind: LocatorKind
    value: str = Field(..., min_length=1)
    priority: int = Field(..., ge=0)

    model_config = {"frozen": True}

    @property
    def selector(self) -> str:
        """Playwright selector with an explicit engine prefix."""

        if self.kind == "structural_path":
            return f"xpath={self.value}"
        return f"css={self.value}"


class SearchEntry(BaseModel):
    title: str = Field(..., min_length=1)
    url: str
    description: str = ""


class ConversionOptions(BaseModel):
    heading_style: Literal["atx", "setext"] = "atx"
    code_block_style: Literal["fenced", "indented"] = "fenced"
    ignore_elements: list[str] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


class ToolContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    content: list[ToolContent]
    needs_user_input: bool = False
    wait_for_response: bool = False

    @classmethod
    def text(cls, text: str) -> "ToolResponse":
        return cls(content=[ToolContent(text=text)])

    @classmethod
    def suspended(cls, text: str) -> "ToolResponse":
        """Response asking the caller to pause until a human acts, then resume."""

        return cls(content=[ToolContent(text=text)], needs_user_input=True, wait_for_response=True)

    @property
    def first_text(self) -> str:
        return self.content[0].text if self.content else ""


class ToolErrorPayload(BaseModel):
    kind: str
    message: str
