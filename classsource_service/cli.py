from __future__ import annotations

import uvicorn

from classsource_service.app.settings import Settings
from classsource_service.server import McpHttpServer
from libs.common.logging import configure_logging


def main() -> None:
    app_settings = Settings()
    configure_logging(app_settings.log_level, json_output=app_settings.log_json)

    from classsource_service.app.main import create_app

    server = McpHttpServer(
        create_app(app_settings),
        host=app_settings.host,
        port=app_settings.port,
        shutdown_grace_seconds=app_settings.shutdown_grace_seconds,
        log_level=app_settings.log_level,
    )
    server.run()


def main_dev() -> None:
    app_settings = Settings()
    uvicorn.run(
        "classsource_service.app.main:app",
        host=app_settings.host,
        port=app_settings.port,
        reload=True,
        log_config=None,
    )
