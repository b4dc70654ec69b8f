from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from foxhound.browser.session import SessionSlot
from foxhound.config import Settings
from foxhound.errors import ElementLookupError
from foxhound.tools import BrowserToolkit


@dataclass
class FakeElement:
    selector: str
    calls: list[tuple[Any, ...]] = field(default_factory=list)

    async def clear(self) -> None:
        self.calls.append(("clear",))

    async def press_sequentially(self, text: str) -> None:
        self.calls.append(("press_sequentially", text))


class FakeSession:
    """Stands in for BrowserSession; records every driver call."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.page_title = "Example Domain"
        self.page_source = "<html><body><h1>Example</h1></body></html>"
        self.matches: dict[str, FakeElement] = {}
        self.captcha_checks: list[bool] = []
        self.started = False
        self.closed = False

    async def start(self) -> None:
        self.started = True

    async def close(self) -> None:
        self.closed = True

    async def navigate(self, url: str) -> None:
        self.calls.append(("navigate", url))

    async def title(self) -> str:
        return self.page_title

    async def source(self) -> str:
        return self.page_source

    async def find_element(self, selector: str) -> FakeElement:
        self.calls.append(("find_element", selector))
        if selector not in self.matches:
            raise ElementLookupError(f"No element matches {selector}")
        return self.matches[selector]

    async def has_captcha(self) -> bool:
        self.calls.append(("has_captcha",))
        if self.captcha_checks:
            return self.captcha_checks.pop(0)
        return False

    async def wait_for_load(self, ms: int) -> None:
        self.calls.append(("wait_for_load", ms))


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        downloads_dir=tmp_path / "downloads",
        log_dir=tmp_path / "logs",
        page_load_wait_ms=10,
        search_wait_ms=20,
        captcha_recheck_wait_ms=30,
    )


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def toolkit(settings: Settings, fake_session: FakeSession) -> BrowserToolkit:
    slot = SessionSlot(lambda: fake_session)  # type: ignore[arg-type, return-value]
    return BrowserToolkit(settings, slot=slot)
