from __future__ import annotations

from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _split_csv(value: object) -> object:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CLASSSOURCE_",
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    service_name: str = "classsource-mcp"
    server_name: str = "MCP Java Source Server"
    server_version: str = "1.0.3"
    host: str = "127.0.0.1"
    port: int = 6699
    mcp_path: str = "/mcp"
    log_level: str = "INFO"
    log_json: bool = True
    tool_timeout_seconds: float = 30.0
    lookup_workers: int = 4
    default_line_limit: int = 500
    max_body_bytes: int = 1_048_576
    shutdown_grace_seconds: float = 10.0
    index_on_startup: bool = False
    # CSV 문자열 또는 리스트 모두 허용해요
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])
    project_roots: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["."])
    library_source_archives: Annotated[list[str], NoDecode] = Field(default_factory=list)

    @field_validator("cors_allow_origins", "project_roots", "library_source_archives", mode="before")
    @classmethod
    def _parse_csv_lists(cls, value: object) -> object:
        """환경변수에서 CSV 문자열로 들어온 경우 리스트로 변환해요."""
        return _split_csv(value)

    @field_validator("mcp_path")
    @classmethod
    def _normalize_mcp_path(cls, value: str) -> str:
        path = "/" + value.strip().strip("/")
        return path if path != "/" else "/mcp"

    @model_validator(mode="after")
    def _check_limits(self) -> "Settings":
        """잘못된 한도 값은 기본값으로 되돌리고 경고를 남겨요."""
        import logging

        _log = logging.getLogger("classsource_service.settings")
        if self.tool_timeout_seconds <= 0:
            _log.warning("CLASSSOURCE_TOOL_TIMEOUT_SECONDS가 0 이하라서 30초로 되돌려요.")
            self.tool_timeout_seconds = 30.0
        if self.default_line_limit <= 0:
            _log.warning("CLASSSOURCE_DEFAULT_LINE_LIMIT가 0 이하라서 500줄로 되돌려요.")
            self.default_line_limit = 500
        if self.lookup_workers <= 0:
            _log.warning("CLASSSOURCE_LOOKUP_WORKERS가 0 이하라서 4개로 되돌려요.")
            self.lookup_workers = 4
        return self


settings = Settings()
