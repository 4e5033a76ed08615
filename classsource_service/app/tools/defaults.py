"""기본 도구를 등록한 ToolRegistry를 생성하는 팩토리예요."""

from __future__ import annotations

from classsource_service.app.line_window import DEFAULT_LINE_LIMIT
from classsource_service.app.lookup.base import SourceLookupProvider
from classsource_service.app.lookup.workers import LookupWorkerPool
from classsource_service.app.tools.class_source import ClassSourceTool
from classsource_service.app.tools.registry import ToolRegistry


def build_default_tool_registry(
    *,
    provider: SourceLookupProvider,
    default_line_limit: int = DEFAULT_LINE_LIMIT,
    workers: LookupWorkerPool | None = None,
) -> ToolRegistry:
    """기본 도구가 모두 등록된 `ToolRegistry`를 생성해요.

    Args:
        provider: `class_source` 도구가 클래스 소스를 찾을 때 쓰는 조회기예요.
        default_line_limit: `lineLimit`이 없을 때 돌려줄 최대 줄 수예요.
        workers: 블로킹 조회를 돌릴 풀이에요. 없으면 도구가 직접 만들어요.

    Returns:
        `class_source` 도구가 등록된 `ToolRegistry` 인스턴스예요.
    """
    registry = ToolRegistry()
    registry.register(ClassSourceTool(provider=provider, default_line_limit=default_line_limit, workers=workers))
    return registry
