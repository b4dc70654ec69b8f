from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Callable

from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Locator,
    Page,
    Playwright,
    async_playwright,
)

from ..config import Settings
from ..errors import BrowserError, ElementLookupError, SessionAlreadyActive, SessionNotActive

logger = logging.getLogger(__name__)

CAPTCHA_SELECTOR = 'form[action*="sorry"] iframe, #captcha-form'


class BrowserSession:
    """Single Playwright browser with one page."""

    def __init__(
        self,
        engine: str = "firefox",
        headless: bool = True,
        executable_path: Path | None = None,
    ) -> None:
        self._engine = engine
        self._headless = headless
        self._executable_path = executable_path
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "BrowserSession":
        return cls(
            engine=settings.browser,
            headless=settings.headless,
            executable_path=settings.browser_executable,
        )

    async def start(self) -> None:
        if self._page is not None:
            return
        playwright = await async_playwright().start()
        self._playwright = playwright
        launcher = getattr(playwright, self._engine)
        try:
            browser = await launcher.launch(
                headless=self._headless,
                executable_path=str(self._executable_path) if self._executable_path else None,
            )
            context = await browser.new_context()
            page = await context.new_page()
        except PlaywrightError as exc:
            await playwright.stop()
            self._playwright = None
            raise BrowserError(f"Failed to launch {self._engine}: {exc}") from exc

        self._browser = browser
        self._context = context
        self._page = page
        logger.info("Browser session started", extra={"engine": self._engine, "headless": self._headless})

    async def close(self) -> None:
        try:
            if self._context is not None:
                await self._context.close()
            if self._browser is not None:
                await self._browser.close()
        finally:
            if self._playwright is not None:
                await self._playwright.stop()
            self._page = None
            self._context = None
            self._browser = None
            self._playwright = None
        logger.info("Browser session closed")

    @property
    def page(self) -> Page:
        if self._page is None:
            raise BrowserError("Browser not started")
        return self._page

    async def navigate(self, url: str) -> None:
        try:
            await self.page.goto(url, wait_until="domcontentloaded")
        except PlaywrightError as exc:
            raise BrowserError(f"Navigation to {url} failed: {exc}") from exc

    async def title(self) -> str:
        try:
            return await self.page.title()
        except PlaywrightError as exc:
            raise BrowserError(f"Failed to read page title: {exc}") from exc

    async def source(self) -> str:
        try:
            return await self.page.content()
        except PlaywrightError as exc:
            raise BrowserError(f"Failed to read page source: {exc}") from exc

    async def find_element(self, selector: str) -> Locator:
        locator = self.page.locator(selector).first
        try:
            count = await locator.count()
        except PlaywrightError as exc:
            raise ElementLookupError(f"Lookup of {selector} failed: {exc}") from exc
        if count == 0:
            raise ElementLookupError(f"No element matches {selector}")
        return locator

    async def has_captcha(self) -> bool:
        try:
            return await self.page.locator(CAPTCHA_SELECTOR).count() > 0
        except PlaywrightError as exc:
            raise BrowserError(f"Captcha check failed: {exc}") from exc

    async def wait_for_load(self, ms: int) -> None:
        # Fixed pause; no readiness signal is observed.
        await asyncio.sleep(ms / 1000)


SessionFactory = Callable[[], BrowserSession]


class SessionSlot:
    """Process-wide table with room for exactly one live session."""

    def __init__(self, factory: SessionFactory) -> None:
        self._factory = factory
        self._session: BrowserSession | None = None
        self._starting = False

    @property
    def active(self) -> bool:
        return self._session is not None

    def get(self) -> BrowserSession:
        if self._session is None:
            raise SessionNotActive("No active browser session; call start_browser first")
        return self._session

    async def open(self) -> BrowserSession:
        if self._session is not None or self._starting:
            raise SessionAlreadyActive("A browser session is already running")
        # Reserved before awaiting so a concurrent open sees the slot as taken.
        self._starting = True
        try:
            session = self._factory()
            await session.start()
        finally:
            self._starting = False
        self._session = session
        return session

    async def close(self) -> None:
        session = self.get()
        self._session = None
        try:
            await session.close()
        except PlaywrightError as exc:
            raise BrowserError(f"Failed to close browser: {exc}") from exc

    async def release(self) -> None:
        """Best-effort teardown used on shutdown and abnormal exits."""

        session, self._session = self._session, None
        if session is None:
            return
        try:
            await session.close()
        except Exception:  # noqa: BLE001
            logger.exception("Failed to release browser session")


@asynccontextmanager
async def session_scope(slot: SessionSlot) -> AsyncIterator[BrowserSession]:
    session = await slot.open()
    try:
        yield session
    finally:
        await slot.release()
