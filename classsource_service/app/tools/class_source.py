"""클래스 이름으로 Java 소스를 찾아 줄 범위만큼 돌려주는 도구예요."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from classsource_service.app.line_window import DEFAULT_LINE_LIMIT, compute_line_window
from classsource_service.app.lookup.base import (
    SourceAmbiguous,
    SourceLookupProvider,
    SourceNotFound,
)
from classsource_service.app.lookup.workers import LookupWorkerPool
from classsource_service.app.tools.base import BaseTool
from libs.common.errors import AmbiguousMatchError, NotFoundError, ValidationError
from libs.common.logging import get_logger

logger = get_logger("classsource_service.tools.class_source")


class ClassSourceArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    class_name: str = Field(default="", alias="className")
    line_offset: int = Field(default=0, alias="lineOffset")
    line_limit: int | None = Field(default=None, alias="lineLimit")


class ClassSourceTool(BaseTool):
    """짧은 이름이나 정규화된 이름으로 클래스 소스를 읽는 도구예요.

    찾지 못했거나 여러 클래스가 걸리면 도구 오류를 던지고, 디스패처가
    이를 `isError=true` 결과로 바꿔요. 범위를 벗어난 offset이나 잘린
    결과는 정상 결과예요.
    """

    def __init__(
        self,
        *,
        provider: SourceLookupProvider,
        default_line_limit: int = DEFAULT_LINE_LIMIT,
        workers: LookupWorkerPool | None = None,
    ) -> None:
        self._provider = provider
        self._default_line_limit = default_line_limit
        self._workers = workers if workers is not None else LookupWorkerPool()

    @property
    def name(self) -> str:
        return "class_source"

    @property
    def description(self) -> str:
        return (
            "Search for a Java class by name and return its source code. "
            "Short class names are supported; lineOffset and lineLimit select a window of lines."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "className": {
                    "type": "string",
                    "description": "Class name, short or fully qualified.",
                },
                "lineOffset": {
                    "type": "integer",
                    "description": "Zero-based line offset (default 0).",
                    "default": 0,
                },
                "lineLimit": {
                    "type": "integer",
                    "description": f"Maximum number of lines to return (default {self._default_line_limit}).",
                    "default": self._default_line_limit,
                },
            },
            "required": ["className"],
        }

    async def execute(self, arguments: dict[str, Any]) -> str:
        try:
            args = ClassSourceArguments.model_validate(arguments)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid arguments for class_source: {exc.errors()[0]['msg']}") from exc

        class_name = args.class_name.strip()
        if not class_name:
            raise ValidationError("Class name must not be empty")

        # 조회는 블로킹일 수 있어서 전용 워커 풀에서 돌려요
        result = await self._workers.lookup(self._provider, class_name)

        if isinstance(result, SourceNotFound):
            raise NotFoundError(f"Class not found: {class_name}")
        if isinstance(result, SourceAmbiguous):
            raise AmbiguousMatchError(
                list(result.candidates),
                f"Multiple classes match {class_name}: {', '.join(result.candidates)}",
            )

        line_limit = args.line_limit if args.line_limit is not None else self._default_line_limit
        window = compute_line_window(result.text, args.line_offset, line_limit)
        logger.info(
            "class_source_resolved",
            class_name=class_name,
            qualified_name=result.qualified_name,
            origin=result.origin,
            total_lines=window.total_lines,
            start=window.start,
            end=window.end,
            truncated=window.truncated,
            out_of_range=window.out_of_range,
        )
        return window.text
