"""JSON-RPC 2.0 봉투(envelope)와 오류 모델이에요.

요청은 `id` 키가 있는 봉투, 알림은 `id` 키가 없는 봉투예요.
응답에는 `result`와 `error` 중 정확히 하나만 들어가요.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr, model_validator

JSONRPC_VERSION = "2.0"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

RequestId = StrictInt | StrictStr | None


class JsonRpcError(Exception):
    """프로토콜 수준 오류예요. 디스패처가 `error` 응답으로 바꿔요."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


class ErrorInfo(BaseModel):
    code: int
    message: str
    data: Any = None


class JsonRpcEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    jsonrpc: Literal["2.0"]
    id: RequestId = None
    method: StrictStr
    params: Any = None

    @property
    def is_notification(self) -> bool:
        return "id" not in self.model_fields_set

    def params_object(self) -> Any:
        """`params`가 없으면 빈 객체로 취급해요."""
        return {} if self.params is None else self.params


class JsonRpcResponse(BaseModel):
    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId = None
    result: Any = None
    error: ErrorInfo | None = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> "JsonRpcResponse":
        if (self.result is None) == (self.error is None):
            raise ValueError("response must carry exactly one of result or error")
        return self

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.model_dump(exclude_none=True)
        else:
            payload["result"] = self.result
        return payload


def success_response(request_id: Any, result: Any) -> JsonRpcResponse:
    return JsonRpcResponse(id=request_id, result=result)


def error_response(request_id: Any, code: int, message: str, data: Any = None) -> JsonRpcResponse:
    return JsonRpcResponse(id=request_id, error=ErrorInfo(code=code, message=message, data=data))


def extract_request_id(raw: Any) -> int | str | None:
    """형식이 잘못된 봉투에서도 되돌려줄 수 있는 `id`를 꺼내요."""
    if not isinstance(raw, dict):
        return None
    value = raw.get("id")
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        return None
    return value
