from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable
from urllib.parse import quote

from playwright.async_api import Error as PlaywrightError, Locator

from .browser.locators import locators_from_snippet
from .browser.resolver import resolve_element
from .browser.session import BrowserSession, SessionSlot
from .config import Settings
from .content.extractor import ContentExtractor
from .content.search import compose_report, parse_search_results
from .errors import BrowserError, InvalidParams, ToolError, UnknownTool
from .logging import clear_tool_context, set_tool_context
from .types import ConversionOptions, ToolResponse
from .validation import validate_filename, validate_param, validate_url

logger = logging.getLogger(__name__)

CAPTCHA_PROMPT = (
    "Search verification detected. Ask the user to complete the challenge in the browser "
    'and reply "done" to continue.'
)
CAPTCHA_REMINDER = 'Complete the search verification in the browser, then reply "done" to continue.'


@dataclass(frozen=True, slots=True)
class ToolSpec:
    name: str
    description: str
    required: tuple[str, ...] = ()
    optional: tuple[str, ...] = ()


TOOL_SPECS: tuple[ToolSpec, ...] = (
    ToolSpec("start_browser", "Start a new headless browser session"),
    ToolSpec("navigate_to", "Navigate the session to a URL", required=("url",)),
    ToolSpec("get_page_title", "Return the title of the current page"),
    ToolSpec("get_page_source", "Return the source of the current page"),
    ToolSpec("download_page", "Save the current page source to the downloads directory", optional=("filename",)),
    ToolSpec("close_browser", "Close the browser session"),
    ToolSpec("visit_markdown_url", "Open a URL through the Markdown reader service", required=("url",)),
    ToolSpec("convert_to_markdown", "Open a URL and convert the page to Markdown", required=("url",)),
    ToolSpec("convert_current_to_markdown", "Convert the current page to Markdown"),
    ToolSpec("search_to_markdown", "Run a web search and return structured Markdown results", required=("keyword",)),
    ToolSpec(
        "text_input",
        "Type text into the page input matching an HTML snippet",
        required=("url", "html", "text"),
    ),
)


class BrowserToolkit:
    """Named tool operations over the single browser session."""

    def __init__(
        self,
        settings: Settings,
        slot: SessionSlot | None = None,
        extractor: ContentExtractor | None = None,
    ) -> None:
        self._settings = settings
        self._slot = slot or SessionSlot(lambda: BrowserSession.from_settings(settings))
        self._extractor = extractor or ContentExtractor(
            ConversionOptions(ignore_elements=list(settings.ignore_elements))
        )
        self._handlers: dict[str, Callable[..., Awaitable[ToolResponse]]] = {
            "start_browser": self.start_browser,
            "navigate_to": self.navigate_to,
            "get_page_title": self.get_page_title,
            "get_page_source": self.get_page_source,
            "download_page": self.download_page,
            "close_browser": self.close_browser,
            "visit_markdown_url": self.visit_markdown_url,
            "convert_to_markdown": self.convert_to_markdown,
            "convert_current_to_markdown": self.convert_current_to_markdown,
            "search_to_markdown": self.search_to_markdown,
            "text_input": self.text_input,
        }

    @property
    def slot(self) -> SessionSlot:
        return self._slot

    async def call(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResponse:
        spec = next((item for item in TOOL_SPECS if item.name == name), None)
        if spec is None:
            raise UnknownTool(f"Unknown tool: {name}")
        arguments = dict(arguments or {})
        unexpected = set(arguments) - set(spec.required) - set(spec.optional)
        if unexpected:
            raise InvalidParams(f"Unexpected arguments for {name}: {', '.join(sorted(unexpected))}")
        for key, value in arguments.items():
            if value is not None and not isinstance(value, str):
                raise InvalidParams(f"Parameter {key} must be a string")
        for key in spec.required:
            validate_param(arguments.get(key), key)

        set_tool_context(tool=name)
        try:
            logger.info("Tool call started")
            response = await self._handlers[name](**arguments)
            logger.info("Tool call finished", extra={"needs_user_input": response.needs_user_input})
            return response
        except ToolError:
            raise
        except Exception as exc:
            logger.exception("Tool call failed")
            raise ToolError(f"{name} failed: {exc}") from exc
        finally:
            clear_tool_context()

    async def resolve_and_fill_input(self, snippet: str, text: str) -> Locator:
        """Find the live counterpart of the snippet's input and type ``text`` into it."""

        candidates = locators_from_snippet(snippet)
        session = self._slot.get()
        element = await resolve_element(candidates, session)
        try:
            await element.clear()
            await element.press_sequentially(text)
        except PlaywrightError as exc:
            raise BrowserError(f"Failed to type into input: {exc}") from exc
        return element

    def structure_search_content(self, raw_markup: str) -> str:
        return self._structure(self._extractor.convert(raw_markup))

    def _structure(self, markdown: str) -> str:
        entries = parse_search_results(markdown)
        logger.info("Parsed search results", extra={"entries": len(entries)})
        return compose_report(entries, markdown)

    async def start_browser(self) -> ToolResponse:
        await self._slot.open()
        return ToolResponse.text(f"Headless {self._settings.browser} browser started")

    async def navigate_to(self, url: str) -> ToolResponse:
        validate_url(url)
        await self._slot.get().navigate(url)
        return ToolResponse.text(f"Navigated to: {url}")

    async def get_page_title(self) -> ToolResponse:
        title = await self._slot.get().title()
        return ToolResponse.text(f"Page title: {title}")

    async def get_page_source(self) -> ToolResponse:
        source = await self._slot.get().source()
        return ToolResponse.text(source)

    async def download_page(self, filename: str | None = None) -> ToolResponse:
        source = await self._slot.get().source()
        if filename:
            validate_filename(filename)
        else:
            timestamp = datetime.now().isoformat().replace(":", "-").replace(".", "-")
            filename = f"page-{timestamp}.html"
        target = self._settings.downloads_dir / filename
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(source, encoding="utf-8")
        logger.info("Saved page source", extra={"path": str(target)})
        return ToolResponse.text(f"Page saved to: {target.resolve()}")

    async def close_browser(self) -> ToolResponse:
        await self._slot.close()
        return ToolResponse.text("Browser session closed")

    async def visit_markdown_url(self, url: str) -> ToolResponse:
        validate_url(url)
        reader_url = f"{self._settings.reader_base_url}/{quote(url, safe='')}"
        await self._slot.get().navigate(reader_url)
        return ToolResponse.text(f"Opened Markdown reader page: {reader_url}")

    async def convert_to_markdown(self, url: str) -> ToolResponse:
        validate_url(url)
        session = self._slot.get()
        await session.navigate(url)
        await session.wait_for_load(self._settings.page_load_wait_ms)
        markdown = self._extractor.convert(await session.source())
        return ToolResponse.text(markdown)

    async def convert_current_to_markdown(self) -> ToolResponse:
        markdown = self._extractor.convert(await self._slot.get().source())
        return ToolResponse.text(markdown)

    async def search_to_markdown(self, keyword: str) -> ToolResponse:
        session = self._slot.get()
        search_url = self._settings.search_url.format(query=quote(keyword, safe=""))
        await session.navigate(search_url)
        await session.wait_for_load(self._settings.search_wait_ms)

        if await session.has_captcha():
            logger.warning("Captcha detected on search page")
            return ToolResponse.suspended(CAPTCHA_PROMPT)

        await session.wait_for_load(self._settings.captcha_recheck_wait_ms)
        if await session.has_captcha():
            logger.warning("Captcha detected on search page after recheck")
            return ToolResponse.suspended(CAPTCHA_REMINDER)

        markdown = self._extractor.convert(await session.source())
        if not markdown:
            return ToolResponse.suspended(CAPTCHA_REMINDER)
        return ToolResponse.text(self._structure(markdown))

    async def text_input(self, url: str, html: str, text: str) -> ToolResponse:
        validate_url(url)
        session = self._slot.get()
        await session.navigate(url)
        await session.wait_for_load(self._settings.page_load_wait_ms)
        await self.resolve_and_fill_input(html, text)
        return ToolResponse.text(f"Typed text into input: {text}")
