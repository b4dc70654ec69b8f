from __future__ import annotations

import asyncio
from typing import Optional

import typer
import uvicorn

from .browser.session import session_scope
from .config import Settings
from .errors import ToolError
from .logging import setup_logging
from .tools import BrowserToolkit
from .types import ToolResponse

app = typer.Typer(no_args_is_help=True)


def main() -> None:
    app()


def _load_settings(headful: bool, ignore: Optional[str] = None) -> Settings:
    settings = Settings.from_env()
    if headful:
        settings.headless = False
    if ignore:
        settings.update_ignore_elements(ignore.split(","))
    settings.ensure_directories()
    setup_logging(settings.log_level, settings.log_dir / "foxhound.log")
    return settings


async def _run_tool(settings: Settings, name: str, arguments: dict[str, str]) -> ToolResponse:
    toolkit = BrowserToolkit(settings)
    async with session_scope(toolkit.slot):
        return await toolkit.call(name, arguments)


def _emit(response: ToolResponse) -> None:
    for item in response.content:
        typer.echo(item.text)
    if response.needs_user_input:
        raise typer.Exit(code=2)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address override"),
    port: Optional[int] = typer.Option(None, help="Port override"),
) -> None:
    """Run the HTTP tool server."""

    settings = _load_settings(headful=False)
    uvicorn.run(
        "foxhound.server.app:app",
        host=host or settings.host,
        port=port or settings.port,
        log_config=None,
    )


@app.command()
def markdown(
    url: str = typer.Argument(..., help="Page to convert"),
    headful: bool = typer.Option(False, help="Run browser in headed mode"),
    ignore: Optional[str] = typer.Option(None, help="Comma separated extra tags to drop"),
) -> None:
    """Open a page and print it as Markdown."""

    settings = _load_settings(headful, ignore)
    try:
        response = asyncio.run(_run_tool(settings, "convert_to_markdown", {"url": url}))
    except ToolError as exc:
        typer.echo(f"Error [{exc.kind}]: {exc.message}", err=True)
        raise typer.Exit(code=1) from exc
    _emit(response)


@app.command()
def search(
    keyword: str = typer.Argument(..., help="Search keywords"),
    headful: bool = typer.Option(False, help="Run browser in headed mode"),
) -> None:
    """Search the web and print a structured Markdown report."""

    settings = _load_settings(headful)
    try:
        response = asyncio.run(_run_tool(settings, "search_to_markdown", {"keyword": keyword}))
    except ToolError as exc:
        typer.echo(f"Error [{exc.kind}]: {exc.message}", err=True)
        raise typer.Exit(code=1) from exc
    _emit(response)
