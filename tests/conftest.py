from __future__ import annotations

import time
from collections.abc import Callable

import pytest

from classsource_service.app.dispatcher import McpDispatcher
from classsource_service.app.lookup import (
    SourceAmbiguous,
    SourceLookupProvider,
    SourceLookupResult,
    SourceNotFound,
    SourceResolved,
)
from classsource_service.app.mcp_protocol import McpServerInfo
from classsource_service.app.tools.defaults import build_default_tool_registry

SAMPLE_SOURCE = "package com.example;\n\npublic class Foo {\n    int x;\n}\n"


class StubSourceLookup(SourceLookupProvider):
    """고정된 소스 표에서 클래스를 찾는 테스트용 조회기예요.

    짧은 이름은 정규화된 이름의 마지막 조각으로 찾아요.
    """

    def __init__(
        self,
        sources: dict[str, str] | None = None,
        *,
        on_lookup: Callable[[str], None] | None = None,
    ) -> None:
        self.sources = dict(sources or {})
        self.calls: list[str] = []
        self._on_lookup = on_lookup

    def lookup(self, class_name: str) -> SourceLookupResult:
        self.calls.append(class_name)
        if self._on_lookup is not None:
            self._on_lookup(class_name)
        if class_name in self.sources:
            return SourceResolved(qualified_name=class_name, text=self.sources[class_name])
        matches = sorted(name for name in self.sources if name.rsplit(".", 1)[-1] == class_name)
        if not matches:
            return SourceNotFound(class_name=class_name)
        if len(matches) > 1:
            return SourceAmbiguous(class_name=class_name, candidates=tuple(matches))
        return SourceResolved(qualified_name=matches[0], text=self.sources[matches[0]])


def sleeping_lookup(seconds: float) -> Callable[[str], None]:
    """조회마다 `seconds`초 동안 블로킹하는 훅을 만들어요."""

    def _hook(class_name: str) -> None:
        del class_name
        time.sleep(seconds)

    return _hook


def build_dispatcher(
    provider: SourceLookupProvider,
    *,
    tool_timeout_seconds: float = 30.0,
    default_line_limit: int = 500,
) -> McpDispatcher:
    return McpDispatcher(
        registry=build_default_tool_registry(provider=provider, default_line_limit=default_line_limit),
        server_info=McpServerInfo(name="MCP Java Source Server", version="1.0.3"),
        tool_timeout_seconds=tool_timeout_seconds,
    )


@pytest.fixture
def stub_lookup() -> StubSourceLookup:
    """`com.example.Foo` 하나만 들어 있는 조회기예요."""
    return StubSourceLookup({"com.example.Foo": SAMPLE_SOURCE})


@pytest.fixture
def dispatcher(stub_lookup: StubSourceLookup) -> McpDispatcher:
    return build_dispatcher(stub_lookup)
