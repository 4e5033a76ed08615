from __future__ import annotations

from classsource_service.modules.common.deps import (
    get_dispatcher,
    get_settings,
    get_tool_registry,
)

__all__ = [
    "get_dispatcher",
    "get_settings",
    "get_tool_registry",
]
