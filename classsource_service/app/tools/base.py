"""MCP로 노출되는 도구의 추상 기반 클래스예요.

새 도구를 추가하려면 `BaseTool`을 상속하고 `name`, `description`,
`input_schema`, `execute`를 구현하면 돼요.
"""

from __future__ import annotations

import abc
from typing import Any

from classsource_service.app.mcp_protocol import McpTool


class BaseTool(abc.ABC):
    """모든 도구가 구현해야 하는 추상 클래스예요.

    확장 방법:
        1. `BaseTool`을 상속하는 클래스를 만들어요.
        2. `name`, `description`, `input_schema` 프로퍼티를 구현해요.
        3. `execute` 메서드에 실제 로직을 작성해요.
        4. `ToolRegistry.register()`로 등록하면 끝이에요.

    `execute`에서 던진 예외는 디스패처가 `isError=true` 결과로 바꿔요.
    프로토콜 오류로 번지지 않아요.
    """

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """도구의 고유 이름이에요. `tools/call`의 `name`과 맞춰져요."""

    @property
    @abc.abstractmethod
    def description(self) -> str:
        """도구가 무엇을 하는지 설명하는 문장이에요. 에이전트에게 전달돼요."""

    @property
    @abc.abstractmethod
    def input_schema(self) -> dict[str, Any]:
        """JSON Schema 형식의 입력 파라미터 정의예요.

        예시::

            {
                "type": "object",
                "properties": {
                    "className": {"type": "string", "description": "찾을 클래스 이름이에요."},
                },
                "required": ["className"],
            }
        """

    @abc.abstractmethod
    async def execute(self, arguments: dict[str, Any]) -> str:
        """도구를 실행하고 텍스트 결과를 반환해요.

        Args:
            arguments: `input_schema`에 정의된 형태의 파라미터 딕셔너리예요.

        Returns:
            에이전트에게 그대로 전달할 텍스트예요.
        """

    def describe(self) -> McpTool:
        """`tools/list`에 실을 도구 기술자를 생성해요."""
        return McpTool(
            name=self.name,
            description=self.description,
            input_schema=self.input_schema,
        )
