from __future__ import annotations

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from classsource_service.modules.common.deps import get_dispatcher, get_settings
from libs.common.http_handlers import INTERNAL_ERROR_CODE
from libs.common.logging import get_logger

logger = get_logger("classsource_service.routes")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Credentials": "true",
}
PREFLIGHT_HEADERS = {
    **CORS_HEADERS,
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Max-Age": "3600",
}


def _transport_error(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "jsonrpc": "2.0",
            "id": None,
            "error": {"code": INTERNAL_ERROR_CODE, "message": message},
        },
        headers={**CORS_HEADERS, "Connection": "close"},
    )


async def server_info(request: Request) -> JSONResponse:
    app_settings = get_settings(request)
    return JSONResponse(
        content={
            "name": app_settings.server_name,
            "version": app_settings.server_version,
            "protocol": "MCP",
            "endpoints": {"mcp": app_settings.mcp_path},
        },
        headers=CORS_HEADERS,
    )


async def preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK, headers=PREFLIGHT_HEADERS)


async def mcp_endpoint(request: Request) -> Response:
    app_settings = get_settings(request)
    dispatcher = get_dispatcher(request)

    declared_length = request.headers.get("content-length", "")
    if declared_length.isdigit() and int(declared_length) > app_settings.max_body_bytes:
        return JSONResponse(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            content={"detail": "Request body is too large."},
            headers=CORS_HEADERS,
        )

    try:
        body = await request.body()
    except Exception as exc:
        logger.exception("mcp_body_read_failed", error=str(exc))
        return _transport_error(f"Internal server error: {exc}")

    if len(body) > app_settings.max_body_bytes:
        return JSONResponse(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            content={"detail": "Request body is too large."},
            headers=CORS_HEADERS,
        )

    logger.debug("mcp_body_received", size=len(body))
    payload = await dispatcher.handle_raw(body)
    if payload is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)

    try:
        return JSONResponse(content=payload, headers=CORS_HEADERS)
    except (TypeError, ValueError) as exc:
        logger.exception("mcp_response_encode_failed", error=str(exc))
        return _transport_error(f"Internal server error: {exc}")


def build_mcp_router(mcp_path: str = "/mcp") -> APIRouter:
    """MCP 엔드포인트를 ``/``와 `mcp_path` 두 경로에 모두 연결해요."""
    router = APIRouter()
    for path in dict.fromkeys(["/", mcp_path]):
        router.add_api_route(path, server_info, methods=["GET"], include_in_schema=False)
        router.add_api_route(path, mcp_endpoint, methods=["POST"], include_in_schema=False)
        router.add_api_route(path, preflight, methods=["OPTIONS"], include_in_schema=False)
    return router
