"""class_source 도구 테스트예요."""

from __future__ import annotations

import pytest

from classsource_service.app.tools.class_source import ClassSourceTool
from libs.common.errors import AmbiguousMatchError, NotFoundError, ValidationError
from tests.conftest import SAMPLE_SOURCE, StubSourceLookup


@pytest.mark.asyncio
async def test_returns_source_by_short_name(stub_lookup: StubSourceLookup) -> None:
    tool = ClassSourceTool(provider=stub_lookup)
    assert await tool.execute({"className": "Foo"}) == SAMPLE_SOURCE
    assert stub_lookup.calls == ["Foo"]


@pytest.mark.asyncio
async def test_returns_source_by_qualified_name(stub_lookup: StubSourceLookup) -> None:
    tool = ClassSourceTool(provider=stub_lookup)
    assert await tool.execute({"className": "com.example.Foo"}) == SAMPLE_SOURCE


@pytest.mark.asyncio
async def test_applies_line_window(stub_lookup: StubSourceLookup) -> None:
    tool = ClassSourceTool(provider=stub_lookup)
    result = await tool.execute({"className": "Foo", "lineOffset": 2, "lineLimit": 1})
    assert result == "public class Foo {\n\n// ... source truncated, showing lines 3-3 of 6 ..."


@pytest.mark.asyncio
async def test_offset_past_end_is_not_an_error(stub_lookup: StubSourceLookup) -> None:
    tool = ClassSourceTool(provider=stub_lookup)
    result = await tool.execute({"className": "Foo", "lineOffset": 100})
    assert result == "// Line offset 100 is out of range: the file has 6 lines"


@pytest.mark.asyncio
async def test_uses_configured_default_limit() -> None:
    source = "\n".join(f"// {n}" for n in range(10))
    tool = ClassSourceTool(provider=StubSourceLookup({"a.Big": source}), default_line_limit=4)
    result = await tool.execute({"className": "Big"})
    assert result.endswith("showing lines 1-4 of 10 ...")


@pytest.mark.asyncio
@pytest.mark.parametrize("arguments", [{}, {"className": ""}, {"className": "   "}])
async def test_blank_class_name_is_rejected(stub_lookup: StubSourceLookup, arguments: dict) -> None:
    tool = ClassSourceTool(provider=stub_lookup)
    with pytest.raises(ValidationError) as exc_info:
        await tool.execute(arguments)
    assert exc_info.value.message == "Class name must not be empty"
    assert stub_lookup.calls == []


@pytest.mark.asyncio
async def test_wrong_argument_type_is_rejected(stub_lookup: StubSourceLookup) -> None:
    tool = ClassSourceTool(provider=stub_lookup)
    with pytest.raises(ValidationError):
        await tool.execute({"className": "Foo", "lineOffset": "first"})


@pytest.mark.asyncio
async def test_unknown_class_raises_not_found(stub_lookup: StubSourceLookup) -> None:
    tool = ClassSourceTool(provider=stub_lookup)
    with pytest.raises(NotFoundError) as exc_info:
        await tool.execute({"className": "Missing"})
    assert exc_info.value.message == "Class not found: Missing"


@pytest.mark.asyncio
async def test_ambiguous_short_name_lists_candidates() -> None:
    provider = StubSourceLookup({"c.B": "class B {}", "a.B": "class B {}"})
    tool = ClassSourceTool(provider=provider)
    with pytest.raises(AmbiguousMatchError) as exc_info:
        await tool.execute({"className": "B"})
    assert exc_info.value.candidates == ["a.B", "c.B"]
    assert exc_info.value.message == "Multiple classes match B: a.B, c.B"
