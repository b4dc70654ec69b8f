from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import Body, Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from ..config import Settings
from ..errors import ToolError
from ..logging import setup_logging
from ..tools import TOOL_SPECS, BrowserToolkit
from ..types import ToolErrorPayload, ToolResponse
from .schemas import ToolDescriptor, ToolList

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "invalid_params": 400,
    "snippet_invalid": 400,
    "session_not_active": 409,
    "session_already_active": 409,
    "element_not_found": 404,
    "unknown_tool": 404,
}


def get_settings() -> Settings:
    settings = Settings.from_env()
    settings.ensure_directories()
    return settings


def create_app(toolkit: BrowserToolkit | None = None, settings: Settings | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.toolkit is None:
            resolved = settings or get_settings()
            setup_logging(resolved.log_level, resolved.log_dir / "foxhound.log")
            app.state.toolkit = BrowserToolkit(resolved)
        try:
            yield
        finally:
            await app.state.toolkit.slot.release()

    app = FastAPI(title="Foxhound Browser Tools", lifespan=lifespan)
    app.state.toolkit = toolkit

    def current_toolkit(request: Request) -> BrowserToolkit:
        return request.app.state.toolkit

    @app.exception_handler(ToolError)
    async def tool_error_handler(request: Request, exc: ToolError) -> JSONResponse:
        status = STATUS_BY_KIND.get(exc.kind, 500)
        logger.warning("Tool call failed", extra={"kind": exc.kind, "detail": exc.message})
        payload = ToolErrorPayload(kind=exc.kind, message=exc.message)
        return JSONResponse(status_code=status, content=payload.model_dump())

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/tools")
    async def list_tools() -> ToolList:
        return ToolList(
            tools=[
                ToolDescriptor(
                    name=spec.name,
                    description=spec.description,
                    required=list(spec.required),
                    optional=list(spec.optional),
                )
                for spec in TOOL_SPECS
            ]
        )

    @app.post("/tools/{name}")
    async def call_tool(
        name: str,
        arguments: dict[str, Any] | None = Body(default=None),
        toolkit: BrowserToolkit = Depends(current_toolkit),
    ) -> ToolResponse:
        return await toolkit.call(name, arguments or {})

    return app


app = create_app()
