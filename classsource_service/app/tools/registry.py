"""도구를 등록하고 조회하는 레지스트리예요."""

from __future__ import annotations

import threading

from classsource_service.app.mcp_protocol import McpTool
from classsource_service.app.tools.base import BaseTool


class ToolRegistry:
    """도구를 이름으로 관리하는 중앙 레지스트리예요.

    등록은 보통 프로세스 시작 시 한 번만 일어나요. 실행 중에 등록하는
    경우를 위해 쓰기(등록/해제)는 하나의 락으로 직렬화하고, 읽기는
    락 없이 현재 테이블을 그대로 읽어요. 기술자는 등록 시점에 한 번
    만들어 두고 바꾸지 않아요.

    사용법::

        registry = ToolRegistry()
        registry.register(ClassSourceTool(provider=lookup))

        # tools/list 응답에 실을 기술자 목록 (등록 순서 유지)
        descriptors = registry.list()

        # 이름으로 도구 조회
        tool = registry.get("class_source")
    """

    def __init__(self) -> None:
        self._tools: dict[str, BaseTool] = {}
        self._descriptors: dict[str, McpTool] = {}
        self._write_lock = threading.Lock()

    def register(self, tool: BaseTool) -> None:
        """도구를 레지스트리에 등록해요.

        같은 이름이면 새 도구로 덮어씌우고, 목록에서의 위치는 처음 등록한
        자리를 그대로 유지해요.
        """
        descriptor = tool.describe()
        with self._write_lock:
            tools = dict(self._tools)
            descriptors = dict(self._descriptors)
            tools[descriptor.name] = tool
            descriptors[descriptor.name] = descriptor
            self._tools = tools
            self._descriptors = descriptors

    def unregister(self, name: str) -> bool:
        """도구를 레지스트리에서 제거해요. 제거 성공 시 True를 반환해요."""
        with self._write_lock:
            if name not in self._tools:
                return False
            tools = dict(self._tools)
            descriptors = dict(self._descriptors)
            del tools[name]
            del descriptors[name]
            self._tools = tools
            self._descriptors = descriptors
            return True

    def get(self, name: str) -> BaseTool | None:
        """이름으로 도구를 조회해요."""
        return self._tools.get(name)

    def list(self) -> list[McpTool]:
        """등록된 모든 도구 기술자를 등록 순서대로 반환해요."""
        return list(self._descriptors.values())

    def list_names(self) -> list[str]:
        """등록된 모든 도구 이름을 반환해요."""
        return list(self._tools.keys())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools
