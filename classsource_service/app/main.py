from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from classsource_service.app.lookup import SourceLookupProvider
from classsource_service.app.settings import Settings, settings
from classsource_service.bootstrap.lifespan import create_lifespan
from classsource_service.modules import build_api_router
from libs.common.http_handlers import register_exception_handlers
from libs.common.logging import configure_logging

configure_logging(settings.log_level, json_output=settings.log_json)


def create_app(
    app_settings: Settings | None = None,
    *,
    provider: SourceLookupProvider | None = None,
) -> FastAPI:
    """MCP 엔드포인트와 헬스 체크가 연결된 FastAPI 앱을 만들어요.

    `provider`를 넘기면 파일 시스템 조회 대신 그 조회기를 써요. 테스트에서
    고정된 소스를 돌려줄 때 써요.
    """
    resolved = app_settings or settings
    app = FastAPI(
        title=resolved.service_name,
        version=resolved.server_version,
        lifespan=create_lifespan(resolved, provider),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=resolved.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        max_age=3600,
    )
    app.include_router(build_api_router(resolved.mcp_path))
    register_exception_handlers(app, "classsource_service.errors")
    return app


app = create_app()
