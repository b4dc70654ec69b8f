from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Sequence

from dotenv import load_dotenv

load_dotenv()


BrowserEngine = Literal["firefox", "chromium", "webkit"]


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _split_csv(raw: str) -> tuple[str, ...]:
    return tuple(entry.strip().lower() for entry in raw.split(",") if entry.strip())


@dataclass(slots=True)
class Settings:
    """Application configuration loaded from environment variables.

    The ``*_wait_ms`` values are fixed pauses standing in for page readiness;
    nothing observes the page to decide when loading has finished.
    """

    browser: BrowserEngine = "firefox"
    browser_executable: Path | None = None
    headless: bool = True
    page_load_wait_ms: int = 2000
    search_wait_ms: int = 3000
    captcha_recheck_wait_ms: int = 2000
    downloads_dir: Path = Path("downloads")
    reader_base_url: str = "https://r.jina.ai"
    search_url: str = "https://www.google.com/search?q={query}"
    ignore_elements: tuple[str, ...] = field(default_factory=tuple)
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        browser_raw = os.getenv("BROWSER", "firefox").strip().lower()
        browser: BrowserEngine = (
            browser_raw if browser_raw in {"firefox", "chromium", "webkit"} else "firefox"  # type: ignore[assignment]
        )
        executable = os.getenv("BROWSER_EXECUTABLE")

        settings = cls(
            browser=browser,
            browser_executable=Path(executable).expanduser() if executable else None,
            headless=_bool_env("HEADLESS", True),
            page_load_wait_ms=int(os.getenv("PAGE_LOAD_WAIT_MS", "2000")),
            search_wait_ms=int(os.getenv("SEARCH_WAIT_MS", "3000")),
            captcha_recheck_wait_ms=int(os.getenv("CAPTCHA_RECHECK_WAIT_MS", "2000")),
            downloads_dir=Path(os.getenv("DOWNLOADS_DIR", "downloads")),
            reader_base_url=os.getenv("READER_BASE_URL", "https://r.jina.ai").rstrip("/"),
            search_url=os.getenv("SEARCH_URL", "https://www.google.com/search?q={query}"),
            ignore_elements=_split_csv(os.getenv("IGNORE_ELEMENTS", "")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=Path(os.getenv("LOG_DIR", "logs")),
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(os.getenv("PORT", "8000")),
        )
        return settings

    def ensure_directories(self) -> None:
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.downloads_dir.mkdir(parents=True, exist_ok=True)

    def update_ignore_elements(self, tags: Sequence[str]) -> None:
        cleaned = tuple(tag.strip().lower() for tag in tags if tag.strip())
        if cleaned:
            self.ignore_elements = cleaned
