from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

from classsource_service.modules.common.deps import get_tool_registry

router = APIRouter()


@router.get("/health/live")
async def health_live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
async def health_ready(request: Request) -> dict[str, Any]:
    registry = get_tool_registry(request)
    return {"status": "ok", "tools": len(registry)}
