"""MCP JSON-RPC 요청을 메서드별 핸들러로 보내는 디스패처예요.

요청 하나를 받아 응답 하나(또는 알림이면 응답 없음)를 만드는 호출 단위
라우팅 함수예요. 연결을 넘나드는 상태는 없고, 프로세스 시작 시 만든
`ToolRegistry`만 공유해요.

라우팅 규칙:
    - JSON 파싱 실패: ``id = null``, ``PARSE_ERROR``
    - 봉투 형식 오류: ``INVALID_REQUEST`` (읽을 수 있으면 id를 되돌려요)
    - ``id``가 없는 봉투: 아무것도 하지 않고 응답도 없어요
    - ``initialize`` / ``tools/list`` / ``tools/call`` / ``ping``: 각 핸들러
    - 그 외 메서드: ``METHOD_NOT_FOUND``
    - 핸들러 밖으로 새어 나온 예외: ``INTERNAL_ERROR``

도구 실행 중 실패는 프로토콜 오류가 아니라 ``isError=true`` 결과예요.
"""

from __future__ import annotations

import asyncio
import json
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from classsource_service.app.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcEnvelope,
    JsonRpcError,
    JsonRpcResponse,
    error_response,
    extract_request_id,
    success_response,
)
from classsource_service.app.lookup.base import FatalLookupError
from classsource_service.app.mcp_protocol import (
    MCP_PROTOCOL_VERSION,
    TOOL_NOT_FOUND,
    McpCallToolParams,
    McpCallToolResult,
    McpInitializeParams,
    McpInitializeResult,
    McpLoggingCapability,
    McpServerCapabilities,
    McpServerInfo,
    McpToolsCapability,
    McpToolsListResult,
    text_result,
)
from classsource_service.app.tools.base import BaseTool
from classsource_service.app.tools.registry import ToolRegistry
from libs.common.errors import DomainError
from libs.common.logging import get_logger

logger = get_logger("classsource_service.dispatcher")

NOTIFICATION_METHODS = frozenset({"notifications/cancelled", "notifications/initialized"})

JsonPayload = dict[str, Any] | list[dict[str, Any]]
_ParamsT = TypeVar("_ParamsT", bound=BaseModel)
_Handler = Callable[[Any], Awaitable[dict[str, Any]]]


class McpDispatcher:
    def __init__(
        self,
        *,
        registry: ToolRegistry,
        server_info: McpServerInfo,
        tool_timeout_seconds: float = 30.0,
    ) -> None:
        self._registry = registry
        self._server_info = server_info
        self._tool_timeout_seconds = tool_timeout_seconds
        self._handlers: dict[str, _Handler] = {
            "initialize": self._handle_initialize,
            "tools/list": self._handle_tools_list,
            "tools/call": self._handle_tools_call,
            "ping": self._handle_ping,
        }

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def handle_raw(self, body: bytes | str) -> JsonPayload | None:
        """HTTP 본문을 그대로 받아 응답 페이로드를 돌려줘요.

        알림만 들어 있으면 ``None``을 돌려줘요. 호출자는 이때 본문 없이
        응답해야 해요.
        """
        try:
            raw = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("mcp_parse_error", error=str(exc))
            return error_response(None, PARSE_ERROR, f"Parse error: {exc}").to_payload()

        if isinstance(raw, list):
            if not raw:
                return error_response(None, INVALID_REQUEST, "Invalid request: empty batch").to_payload()
            responses: list[dict[str, Any]] = []
            for item in raw:
                payload = await self.handle_message(item)
                if payload is not None:
                    responses.append(payload)
            return responses or None

        return await self.handle_message(raw)

    async def handle_message(self, raw: Any) -> dict[str, Any] | None:
        """디코딩된 JSON 값 하나를 처리해요."""
        try:
            envelope = JsonRpcEnvelope.model_validate(raw)
        except PydanticValidationError as exc:
            request_id = extract_request_id(raw)
            logger.warning("mcp_invalid_request", request_id=request_id, error=_first_error(exc))
            return error_response(
                request_id,
                INVALID_REQUEST,
                f"Invalid request: {_first_error(exc)}",
            ).to_payload()

        response = await self.dispatch(envelope)
        return None if response is None else response.to_payload()

    async def dispatch(self, envelope: JsonRpcEnvelope) -> JsonRpcResponse | None:
        if envelope.is_notification:
            logger.info("mcp_notification", method=envelope.method)
            return None

        started = time.perf_counter()
        with structlog.contextvars.bound_contextvars(method=envelope.method, request_id=envelope.id):
            try:
                response = await self._route(envelope)
            except JsonRpcError as exc:
                logger.warning("mcp_request_rejected", code=exc.code, message=exc.message)
                response = error_response(envelope.id, exc.code, exc.message, exc.data)
            except Exception as exc:
                logger.exception("mcp_request_failed", error=str(exc))
                response = error_response(envelope.id, INTERNAL_ERROR, f"Internal error: {exc}")

            logger.info(
                "mcp_request",
                ok=response.error is None,
                elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
            )
        return response

    async def _route(self, envelope: JsonRpcEnvelope) -> JsonRpcResponse:
        handler = self._handlers.get(envelope.method)
        if handler is not None:
            result = await handler(envelope.params_object())
            return success_response(envelope.id, result)
        if envelope.method in NOTIFICATION_METHODS:
            # id가 붙어 온 알림 메서드는 빈 결과로 확인만 해 줘요
            return success_response(envelope.id, {})
        raise JsonRpcError(METHOD_NOT_FOUND, f"Method not found: {envelope.method}")

    async def _handle_initialize(self, params: Any) -> dict[str, Any]:
        init = _parse_params(McpInitializeParams, params, "initialize")
        logger.info(
            "mcp_client_initialized",
            client_name=init.client_info.name,
            client_version=init.client_info.version,
            client_protocol_version=init.protocol_version,
        )
        result = McpInitializeResult(
            protocol_version=MCP_PROTOCOL_VERSION,
            capabilities=McpServerCapabilities(
                tools=McpToolsCapability(list_changed=True),
                logging=McpLoggingCapability(level="info"),
            ),
            server_info=self._server_info,
        )
        return result.to_wire()

    async def _handle_tools_list(self, params: Any) -> dict[str, Any]:
        del params
        return McpToolsListResult(tools=self._registry.list()).to_wire()

    async def _handle_tools_call(self, params: Any) -> dict[str, Any]:
        call = _parse_params(McpCallToolParams, params, "tools/call")
        tool = self._registry.get(call.name)
        if tool is None:
            raise JsonRpcError(TOOL_NOT_FOUND, f"Tool not found: {call.name}")
        result = await self._call_tool(tool, call.arguments or {})
        return result.to_wire()

    async def _handle_ping(self, params: Any) -> dict[str, Any]:
        del params
        return {}

    async def _call_tool(self, tool: BaseTool, arguments: dict[str, Any]) -> McpCallToolResult:
        """도구를 실행하고 실패를 `isError=true` 결과로 바꿔요.

        `FatalLookupError`만 예외로, 내부 오류 응답으로 올려보내요.
        """
        try:
            text = await asyncio.wait_for(tool.execute(arguments), timeout=self._tool_timeout_seconds)
        except FatalLookupError as exc:
            logger.error("tool_call_fatal", tool=tool.name, error=str(exc))
            raise JsonRpcError(INTERNAL_ERROR, f"Source lookup backend failed: {exc}") from exc
        except TimeoutError:
            logger.warning("tool_call_timeout", tool=tool.name, timeout_seconds=self._tool_timeout_seconds)
            return text_result(
                f"Tool {tool.name} timed out after {self._tool_timeout_seconds:g} seconds",
                is_error=True,
            )
        except DomainError as exc:
            log_level = logger.warning if exc.retryable else logger.info
            log_level("tool_call_failed", tool=tool.name, error_code=exc.error_code, message=exc.message)
            return text_result(exc.message, is_error=True)
        except Exception as exc:
            logger.exception("tool_call_crashed", tool=tool.name, error=str(exc))
            return text_result(f"Tool {tool.name} failed: {exc}", is_error=True)
        return text_result(text)


def _parse_params(model: type[_ParamsT], params: Any, method: str) -> _ParamsT:
    try:
        return model.model_validate(params)
    except PydanticValidationError as exc:
        raise JsonRpcError(INVALID_PARAMS, f"Invalid params for {method}: {_first_error(exc)}") from exc


def _first_error(exc: PydanticValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]
