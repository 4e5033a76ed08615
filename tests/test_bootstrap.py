from __future__ import annotations

from pathlib import Path

import pytest

from classsource_service.app.lookup import FileSystemSourceLookup
from classsource_service.app.settings import Settings
from classsource_service.bootstrap import build_runtime_components
from tests.conftest import StubSourceLookup


@pytest.mark.asyncio
async def test_runtime_uses_given_provider(stub_lookup: StubSourceLookup) -> None:
    runtime = await build_runtime_components(Settings(_env_file=None, project_roots=[]), stub_lookup)
    assert runtime.provider is stub_lookup
    assert runtime.registry.list_names() == ["class_source"]
    assert runtime.dispatcher.registry is runtime.registry
    assert runtime.workers.max_workers == 4
    runtime.workers.shutdown()


@pytest.mark.asyncio
async def test_runtime_builds_filesystem_lookup_from_settings(tmp_path: Path) -> None:
    source = tmp_path / "demo" / "Main.java"
    source.parent.mkdir()
    source.write_text("package demo;\nclass Main {}\n", encoding="utf-8")

    runtime = await build_runtime_components(
        Settings(_env_file=None, project_roots=[str(tmp_path)], index_on_startup=True)
    )
    assert isinstance(runtime.provider, FileSystemSourceLookup)
    assert runtime.provider.lookup("Main").qualified_name == "demo.Main"
    runtime.workers.shutdown()
