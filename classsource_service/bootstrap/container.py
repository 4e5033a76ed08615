from __future__ import annotations

import asyncio
from dataclasses import dataclass

from classsource_service.app.dispatcher import McpDispatcher
from classsource_service.app.lookup import FileSystemSourceLookup, LookupWorkerPool, SourceLookupProvider
from classsource_service.app.mcp_protocol import McpServerInfo
from classsource_service.app.settings import Settings
from classsource_service.app.tools.defaults import build_default_tool_registry
from classsource_service.app.tools.registry import ToolRegistry
from libs.common.logging import get_logger

logger = get_logger("classsource_service.bootstrap")


@dataclass(slots=True)
class RuntimeComponents:
    provider: SourceLookupProvider
    workers: LookupWorkerPool
    registry: ToolRegistry
    dispatcher: McpDispatcher


async def build_runtime_components(
    settings: Settings,
    provider: SourceLookupProvider | None = None,
) -> RuntimeComponents:
    if provider is None:
        provider = FileSystemSourceLookup(
            project_roots=settings.project_roots,
            library_archives=settings.library_source_archives,
        )

    if settings.index_on_startup and isinstance(provider, FileSystemSourceLookup):
        index = await asyncio.to_thread(provider.refresh)
        logger.info("source_index_warmed", classes=len(index))

    workers = LookupWorkerPool(settings.lookup_workers)
    registry = build_default_tool_registry(
        provider=provider,
        default_line_limit=settings.default_line_limit,
        workers=workers,
    )
    dispatcher = McpDispatcher(
        registry=registry,
        server_info=McpServerInfo(name=settings.server_name, version=settings.server_version),
        tool_timeout_seconds=settings.tool_timeout_seconds,
    )
    logger.info("runtime_components_built", tools=registry.list_names())

    return RuntimeComponents(
        provider=provider,
        workers=workers,
        registry=registry,
        dispatcher=dispatcher,
    )
