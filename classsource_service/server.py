"""uvicorn 서버를 감싸 시작/정지를 직접 다루는 핸들이에요.

`run()`은 현재 스레드를 막고 돌고, `start()`/`stop()`은 백그라운드
스레드에서 돌려 테스트나 임베딩 환경에서 쓸 수 있어요.
"""

from __future__ import annotations

import threading
import time

import uvicorn
from fastapi import FastAPI

from libs.common.errors import ConfigurationError
from libs.common.logging import get_logger

logger = get_logger("classsource_service.server")


class McpHttpServer:
    def __init__(
        self,
        app: FastAPI,
        *,
        host: str = "127.0.0.1",
        port: int = 6699,
        shutdown_grace_seconds: float = 10.0,
        log_level: str = "info",
    ) -> None:
        self._host = host
        self._port = port
        config = uvicorn.Config(
            app,
            host=host,
            port=port,
            log_level=log_level.lower(),
            log_config=None,
            timeout_graceful_shutdown=max(int(shutdown_grace_seconds), 1),
        )
        self._server = uvicorn.Server(config)
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._server.started and not self._server.should_exit

    @property
    def bound_port(self) -> int:
        """실제로 열린 포트예요. `port=0`으로 띄웠을 때 쓸모 있어요."""
        for server in getattr(self._server, "servers", []):
            for sock in server.sockets:
                return sock.getsockname()[1]
        return self._port

    def run(self) -> None:
        logger.info("mcp_http_server_starting", host=self._host, port=self._port)
        self._server.run()
        logger.info("mcp_http_server_exited")

    def start(self, timeout: float = 10.0) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._thread = threading.Thread(target=self.run, name="mcp-http-server", daemon=True)
        self._thread.start()

        deadline = time.monotonic() + timeout
        while not self._server.started:
            if not self._thread.is_alive():
                raise ConfigurationError(f"MCP HTTP server failed to start on {self._host}:{self._port}")
            if time.monotonic() > deadline:
                self._server.should_exit = True
                raise ConfigurationError(f"MCP HTTP server did not start within {timeout:g} seconds")
            time.sleep(0.05)

    def stop(self, timeout: float = 10.0) -> None:
        self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("mcp_http_server_stop_timeout", timeout_seconds=timeout)
            self._thread = None
