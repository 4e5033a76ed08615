from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from classsource_service.app.lookup import SourceLookupProvider
from classsource_service.app.settings import Settings
from classsource_service.bootstrap.container import build_runtime_components
from libs.common.logging import get_logger

logger = get_logger("classsource_service.lifespan")


def create_lifespan(settings: Settings, provider: SourceLookupProvider | None = None):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        runtime = await build_runtime_components(settings, provider)

        app.state.settings = settings
        app.state.dispatcher = runtime.dispatcher
        app.state.tool_registry = runtime.registry

        logger.info(
            "mcp_server_started",
            name=settings.server_name,
            version=settings.server_version,
            mcp_path=settings.mcp_path,
        )
        try:
            yield
        finally:
            app.state.dispatcher = None
            runtime.workers.shutdown()
            logger.info("mcp_server_stopped", name=settings.server_name)

    return lifespan
