from classsource_service.app.tools.base import BaseTool
from classsource_service.app.tools.registry import ToolRegistry

__all__ = [
    "BaseTool",
    "ToolRegistry",
]
