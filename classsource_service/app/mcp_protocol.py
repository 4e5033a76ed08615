from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr

MCP_PROTOCOL_VERSION = "2024-11-05"

INVALID_PROTOCOL_VERSION = -32001
CAPABILITY_NOT_SUPPORTED = -32002
TOOL_NOT_FOUND = -32003
RESOURCE_NOT_FOUND = -32004
PROMPT_NOT_FOUND = -32005


class _McpModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class McpClientCapabilities(_McpModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    experimental: dict[str, Any] | None = None
    sampling: dict[str, Any] | None = None


class McpClientInfo(_McpModel):
    name: StrictStr
    version: StrictStr


class McpInitializeParams(_McpModel):
    protocol_version: StrictStr = Field(default=MCP_PROTOCOL_VERSION, alias="protocolVersion")
    capabilities: McpClientCapabilities
    client_info: McpClientInfo = Field(alias="clientInfo")


class McpToolsCapability(_McpModel):
    list_changed: bool = Field(default=False, alias="listChanged")


class McpResourcesCapability(_McpModel):
    subscribe: bool = False
    list_changed: bool = Field(default=False, alias="listChanged")


class McpPromptsCapability(_McpModel):
    list_changed: bool = Field(default=False, alias="listChanged")


class McpLoggingCapability(_McpModel):
    level: str = "info"


class McpServerCapabilities(_McpModel):
    tools: McpToolsCapability | None = None
    resources: McpResourcesCapability | None = None
    prompts: McpPromptsCapability | None = None
    logging: McpLoggingCapability | None = None


class McpServerInfo(_McpModel):
    name: str
    version: str


class McpInitializeResult(_McpModel):
    protocol_version: str = Field(alias="protocolVersion")
    capabilities: McpServerCapabilities
    server_info: McpServerInfo = Field(alias="serverInfo")


class McpTool(_McpModel):
    """`tools/list`로 노출되는 도구 기술자예요. 등록 후에는 바뀌지 않아요."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(alias="inputSchema")


class McpToolsListResult(_McpModel):
    tools: list[McpTool]


class McpCallToolParams(_McpModel):
    name: StrictStr
    arguments: dict[str, Any] | None = None


class McpContent(_McpModel):
    type: Literal["text", "image", "resource"]
    text: str | None = None
    data: str | None = None
    mime_type: str | None = Field(default=None, alias="mimeType")
    resource: dict[str, Any] | None = None


class McpCallToolResult(_McpModel):
    content: list[McpContent]
    is_error: bool = Field(default=False, alias="isError")


def text_result(text: str, *, is_error: bool = False) -> McpCallToolResult:
    return McpCallToolResult(content=[McpContent(type="text", text=text)], is_error=is_error)
