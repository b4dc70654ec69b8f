from __future__ import annotations

from pydantic import BaseModel, Field


class ToolDescriptor(BaseModel):
    name: str
    description: str
    required: list[str] = Field(default_factory=list)
    optional: list[str] = Field(default_factory=list)


class ToolList(BaseModel):
    tools: list[ToolDescriptor]
