"""파일 시스템 소스 조회 테스트예요."""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from classsource_service.app.lookup import (
    FatalLookupError,
    FileSystemSourceLookup,
    SourceAmbiguous,
    SourceNotFound,
    SourceResolved,
)
from classsource_service.app.lookup.filesystem import member_to_qualified_name, read_package_name
from libs.common.errors import UpstreamTransientError


def _write_source(root: Path, relative: str, package: str | None, class_name: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    header = f"package {package};\n\n" if package else ""
    path.write_text(f"{header}public class {class_name} {{\n    static class Inner {{}}\n}}\n", encoding="utf-8")
    return path


def _write_sources_jar(path: Path, members: dict[str, str]) -> Path:
    with zipfile.ZipFile(path, "w") as bundle:
        for name, text in members.items():
            bundle.writestr(name, text)
        bundle.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")
    return path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "src"
    _write_source(root, "com/example/Foo.java", "com.example", "Foo")
    _write_source(root, "com/example/util/Helper.java", "com.example.util", "Helper")
    _write_source(root, "org/other/Helper.java", "org.other", "Helper")
    _write_source(root, "Standalone.java", None, "Standalone")
    return root


def test_read_package_name() -> None:
    assert read_package_name("// header\npackage com.acme.core;\nclass A {}") == "com.acme.core"
    assert read_package_name("class A {}") == ""


def test_member_to_qualified_name() -> None:
    assert member_to_qualified_name("java/util/List.java") == "java.util.List"
    assert member_to_qualified_name("/Top.java") == "Top"


def test_short_name_resolves_unique_class(project: Path) -> None:
    lookup = FileSystemSourceLookup(project_roots=[project])
    result = lookup.lookup("Foo")
    assert isinstance(result, SourceResolved)
    assert result.qualified_name == "com.example.Foo"
    assert result.origin == "project"
    assert result.text.startswith("package com.example;")


def test_qualified_name_resolves_exactly(project: Path) -> None:
    lookup = FileSystemSourceLookup(project_roots=[project])
    result = lookup.lookup("org.other.Helper")
    assert isinstance(result, SourceResolved)
    assert result.qualified_name == "org.other.Helper"
    assert result.location.endswith("Helper.java")


def test_ambiguous_short_name_returns_sorted_candidates(project: Path) -> None:
    lookup = FileSystemSourceLookup(project_roots=[project])
    result = lookup.lookup("Helper")
    assert isinstance(result, SourceAmbiguous)
    assert result.candidates == ("com.example.util.Helper", "org.other.Helper")


def test_unknown_class_is_not_found(project: Path) -> None:
    lookup = FileSystemSourceLookup(project_roots=[project])
    assert isinstance(lookup.lookup("Nowhere"), SourceNotFound)
    assert isinstance(lookup.lookup("com.example.Nowhere"), SourceNotFound)


@pytest.mark.parametrize("name", ["com.example.Foo.Inner", "com.example.Foo$Inner", "Foo.Inner"])
def test_nested_class_resolves_to_outer_file(project: Path, name: str) -> None:
    lookup = FileSystemSourceLookup(project_roots=[project])
    result = lookup.lookup(name)
    assert isinstance(result, SourceResolved)
    assert result.qualified_name == "com.example.Foo.Inner"
    assert "static class Inner" in result.text


def test_default_package_class(project: Path) -> None:
    lookup = FileSystemSourceLookup(project_roots=[project])
    result = lookup.lookup("Standalone")
    assert isinstance(result, SourceResolved)
    assert result.qualified_name == "Standalone"


def test_library_archive_members_are_indexed(tmp_path: Path) -> None:
    jar = _write_sources_jar(
        tmp_path / "lib-sources.jar",
        {"java/util/List.java": "package java.util;\npublic interface List {}\n"},
    )
    lookup = FileSystemSourceLookup(library_archives=[jar])
    result = lookup.lookup("List")
    assert isinstance(result, SourceResolved)
    assert result.qualified_name == "java.util.List"
    assert result.origin == "library"
    assert result.location == f"{jar}!/java/util/List.java"


def test_project_source_wins_over_library(project: Path, tmp_path: Path) -> None:
    jar = _write_sources_jar(
        tmp_path / "shadow-sources.jar",
        {"com/example/Foo.java": "package com.example;\n// library copy\n"},
    )
    lookup = FileSystemSourceLookup(project_roots=[project], library_archives=[jar])
    result = lookup.lookup("com.example.Foo")
    assert isinstance(result, SourceResolved)
    assert result.origin == "project"
    assert "library copy" not in result.text


def test_missing_roots_are_skipped(tmp_path: Path) -> None:
    lookup = FileSystemSourceLookup(
        project_roots=[tmp_path / "absent"],
        library_archives=[tmp_path / "absent-sources.jar"],
    )
    assert isinstance(lookup.lookup("Anything"), SourceNotFound)
    assert len(lookup.refresh()) == 0


def test_corrupted_archive_is_fatal(tmp_path: Path) -> None:
    broken = tmp_path / "broken-sources.jar"
    broken.write_bytes(b"this is not a zip file")
    lookup = FileSystemSourceLookup(library_archives=[broken])
    with pytest.raises(FatalLookupError):
        lookup.lookup("Anything")


def test_class_added_after_first_lookup_is_found(project: Path) -> None:
    lookup = FileSystemSourceLookup(project_roots=[project])
    assert isinstance(lookup.lookup("Foo"), SourceResolved)
    _write_source(project, "com/example/Later.java", "com.example", "Later")
    result = lookup.lookup("Later")
    assert isinstance(result, SourceResolved)
    assert result.qualified_name == "com.example.Later"


def test_deleted_file_is_reported_not_found(project: Path) -> None:
    lookup = FileSystemSourceLookup(project_roots=[project])
    assert isinstance(lookup.lookup("Foo"), SourceResolved)
    (project / "com/example/Foo.java").unlink()
    assert isinstance(lookup.lookup("Foo"), SourceNotFound)
    assert isinstance(lookup.lookup("com.example.Foo"), SourceNotFound)


def test_renamed_file_resolves_under_new_location(project: Path) -> None:
    lookup = FileSystemSourceLookup(project_roots=[project])
    assert isinstance(lookup.lookup("Foo"), SourceResolved)
    target = project / "com/example/moved/Foo.java"
    target.parent.mkdir()
    (project / "com/example/Foo.java").rename(target)
    result = lookup.lookup("Foo")
    assert isinstance(result, SourceResolved)
    assert result.location == str(target)


def test_unreadable_file_error_hides_host_path(project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    lookup = FileSystemSourceLookup(project_roots=[project])
    lookup.refresh()

    def _deny(self: Path) -> bytes:
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "read_bytes", _deny)
    with pytest.raises(UpstreamTransientError) as exc_info:
        lookup.lookup("Foo")
    assert exc_info.value.message == "Failed to read source for com.example.Foo"
    assert str(project) not in exc_info.value.message
