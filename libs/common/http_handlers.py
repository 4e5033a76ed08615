from __future__ import annotations

import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from libs.common.logging import get_logger

INTERNAL_ERROR_CODE = -32603


def register_exception_handlers(app: FastAPI, logger_name: str) -> None:
    logger = get_logger(logger_name)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        trace_id = str(uuid.uuid4())
        logger.exception(
            "unhandled_error",
            path=request.url.path,
            method=request.method,
            trace_id=trace_id,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={
                "jsonrpc": "2.0",
                "id": None,
                "error": {
                    "code": INTERNAL_ERROR_CODE,
                    "message": "Internal server error.",
                    "data": {"trace_id": trace_id},
                },
            },
            headers={"Connection": "close", "Access-Control-Allow-Origin": "*"},
        )
