from __future__ import annotations

from fastapi import APIRouter


def build_api_router(mcp_path: str = "/mcp") -> APIRouter:
    from classsource_service.app.routes import build_mcp_router
    from classsource_service.modules.health.api import router as health_router

    api_router = APIRouter()
    api_router.include_router(health_router)
    api_router.include_router(build_mcp_router(mcp_path))
    return api_router


__all__ = ["build_api_router"]
