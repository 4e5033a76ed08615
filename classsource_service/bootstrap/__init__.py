from __future__ import annotations

from classsource_service.bootstrap.container import RuntimeComponents, build_runtime_components
from classsource_service.bootstrap.lifespan import create_lifespan

__all__ = [
    "RuntimeComponents",
    "build_runtime_components",
    "create_lifespan",
]
