from __future__ import annotations

from fastapi import HTTPException, Request, status

from classsource_service.app.dispatcher import McpDispatcher
from classsource_service.app.settings import Settings, settings
from classsource_service.app.tools.registry import ToolRegistry


def get_settings(request: Request) -> Settings:
    configured = getattr(request.app.state, "settings", None)
    if isinstance(configured, Settings):
        return configured
    return settings


def get_dispatcher(request: Request) -> McpDispatcher:
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if not isinstance(dispatcher, McpDispatcher):
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="MCP dispatcher is not ready.")
    return dispatcher


def get_tool_registry(request: Request) -> ToolRegistry:
    return get_dispatcher(request).registry
