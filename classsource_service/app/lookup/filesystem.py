"""파일 시스템과 소스 아카이브에서 Java 클래스 소스를 찾는 구현체예요.

검색 범위는 두 가지예요.

- 프로젝트 범위: 설정된 소스 디렉터리 아래의 ``*.java`` 파일이에요.
- 라이브러리 범위: ``*-sources.jar`` 같은 소스 첨부 아카이브예요.

정규화된 이름이 두 범위에 모두 있으면 프로젝트 범위가 이겨요.
"""

from __future__ import annotations

import re
import threading
import zipfile
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from classsource_service.app.lookup.base import (
    FatalLookupError,
    SourceAmbiguous,
    SourceLookupProvider,
    SourceLookupResult,
    SourceNotFound,
    SourceResolved,
)
from libs.common.errors import UpstreamTransientError
from libs.common.logging import get_logger

logger = get_logger("classsource_service.lookup.filesystem")

_PACKAGE_PATTERN = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.MULTILINE)
_PACKAGE_SCAN_BYTES = 16_384
_SOURCE_SUFFIX = ".java"


@dataclass(slots=True, frozen=True)
class SourceLocation:
    qualified_name: str
    origin: Literal["project", "library"]
    path: str
    member: str | None = None


@dataclass(slots=True)
class SourceIndex:
    """정규화된 이름과 짧은 이름으로 소스 위치를 찾는 읽기 전용 색인이에요."""

    by_qualified: dict[str, SourceLocation] = field(default_factory=dict)
    by_short: dict[str, list[str]] = field(default_factory=dict)

    def add(self, location: SourceLocation) -> None:
        # 먼저 등록된 위치(프로젝트 범위, 앞선 루트)가 우선이에요
        if location.qualified_name in self.by_qualified:
            return
        self.by_qualified[location.qualified_name] = location
        short_name = location.qualified_name.rsplit(".", 1)[-1]
        self.by_short.setdefault(short_name, []).append(location.qualified_name)

    def __len__(self) -> int:
        return len(self.by_qualified)


def read_package_name(source_head: str) -> str:
    match = _PACKAGE_PATTERN.search(source_head)
    return match.group(1) if match else ""


def member_to_qualified_name(member: str) -> str:
    stem = member[: -len(_SOURCE_SUFFIX)] if member.endswith(_SOURCE_SUFFIX) else member
    return stem.strip("/").replace("/", ".")


class FileSystemSourceLookup(SourceLookupProvider):
    """디렉터리와 소스 아카이브를 색인해 클래스 소스를 돌려줘요.

    색인은 첫 조회 때 만들어지고 `refresh()`로 다시 만들 수 있어요. 조회가
    색인에서 빗나가거나 색인된 파일이 사라졌으면 한 번 다시 훑은 뒤에
    결과를 정해요. 실행 중에 추가된 클래스도 그래서 보여요.
    색인 생성만 내부 락으로 직렬화하고, 조회는 만들어진 색인의
    스냅샷을 읽기만 해요.
    """

    def __init__(
        self,
        *,
        project_roots: Sequence[str | Path] = (),
        library_archives: Sequence[str | Path] = (),
    ) -> None:
        self._project_roots = [Path(root) for root in project_roots]
        self._library_archives = [Path(archive) for archive in library_archives]
        self._build_lock = threading.Lock()
        self._index: SourceIndex | None = None

    def refresh(self) -> SourceIndex:
        """소스 루트를 다시 훑어서 색인을 새로 만들어요."""
        with self._build_lock:
            self._index = self._build_index()
            return self._index

    def lookup(self, class_name: str) -> SourceLookupResult:
        normalized = class_name.strip().replace("$", ".")
        result = self._lookup_in(self._ensure_index(), class_name, normalized)
        if result is not None:
            return result

        # 색인에 없거나 파일이 사라졌으면 한 번만 다시 훑고 찾아요
        logger.info("source_index_miss", class_name=class_name)
        result = self._lookup_in(self.refresh(), class_name, normalized)
        return result if result is not None else SourceNotFound(class_name=class_name)

    def _lookup_in(self, index: SourceIndex, class_name: str, normalized: str) -> SourceLookupResult | None:
        """`index`에서 찾아요. 없거나 색인된 파일이 사라졌으면 ``None``이에요."""
        location = self._resolve_qualified(index, normalized)
        if location is not None:
            return self._load(location, requested=normalized)

        parts = normalized.split(".")
        candidates = index.by_short.get(parts[0], [])
        if len(parts) > 1:
            # Outer.Inner 형태는 바깥 클래스의 짧은 이름으로 찾아요
            nested_suffix = ".".join(parts[1:])
            candidates = [f"{name}.{nested_suffix}" for name in candidates]

        distinct = sorted(set(candidates))
        if not distinct:
            return None
        if len(distinct) > 1:
            return SourceAmbiguous(class_name=class_name, candidates=tuple(distinct))

        location = self._resolve_qualified(index, distinct[0])
        if location is None:
            return None
        return self._load(location, requested=distinct[0])

    def _ensure_index(self) -> SourceIndex:
        index = self._index
        if index is not None:
            return index
        with self._build_lock:
            if self._index is None:
                self._index = self._build_index()
            return self._index

    @staticmethod
    def _resolve_qualified(index: SourceIndex, name: str) -> SourceLocation | None:
        location = index.by_qualified.get(name)
        if location is not None:
            return location
        # 중첩 클래스는 가장 가까운 바깥 클래스 파일에 있어요
        parts = name.split(".")
        for cut in range(len(parts) - 1, 0, -1):
            location = index.by_qualified.get(".".join(parts[:cut]))
            if location is not None:
                return location
        return None

    def _build_index(self) -> SourceIndex:
        index = SourceIndex()
        for root in self._project_roots:
            self._index_directory(index, root)
        for archive in self._library_archives:
            self._index_archive(index, archive)
        logger.info(
            "source_index_built",
            classes=len(index),
            project_roots=len(self._project_roots),
            library_archives=len(self._library_archives),
        )
        return index

    def _index_directory(self, index: SourceIndex, root: Path) -> None:
        if not root.is_dir():
            logger.warning("source_root_missing", root=str(root))
            return
        for source_file in sorted(root.rglob(f"*{_SOURCE_SUFFIX}")):
            try:
                with source_file.open("rb") as handle:
                    head = handle.read(_PACKAGE_SCAN_BYTES).decode("utf-8", errors="replace")
            except OSError as exc:
                logger.warning("source_file_unreadable", path=str(source_file), error=str(exc))
                continue
            package = read_package_name(head)
            qualified_name = f"{package}.{source_file.stem}" if package else source_file.stem
            index.add(SourceLocation(qualified_name=qualified_name, origin="project", path=str(source_file)))

    def _index_archive(self, index: SourceIndex, archive: Path) -> None:
        if not archive.is_file():
            logger.warning("source_archive_missing", archive=str(archive))
            return
        try:
            with zipfile.ZipFile(archive) as bundle:
                members = [name for name in bundle.namelist() if name.endswith(_SOURCE_SUFFIX)]
        except zipfile.BadZipFile as exc:
            raise FatalLookupError(f"Source archive is corrupted: {archive}") from exc
        for member in sorted(members):
            index.add(
                SourceLocation(
                    qualified_name=member_to_qualified_name(member),
                    origin="library",
                    path=str(archive),
                    member=member,
                )
            )

    @staticmethod
    def _load(location: SourceLocation, *, requested: str) -> SourceResolved | None:
        display_location = location.path if location.member is None else f"{location.path}!/{location.member}"
        try:
            if location.member is None:
                raw = Path(location.path).read_bytes()
            else:
                with zipfile.ZipFile(location.path) as bundle:
                    raw = bundle.read(location.member)
        except (FileNotFoundError, KeyError):
            logger.info("source_location_gone", qualified_name=requested, location=display_location)
            return None
        except (OSError, zipfile.BadZipFile) as exc:
            logger.warning(
                "source_read_failed",
                qualified_name=requested,
                location=display_location,
                error=str(exc),
            )
            raise UpstreamTransientError(f"Failed to read source for {requested}") from exc

        return SourceResolved(
            qualified_name=requested,
            text=raw.decode("utf-8", errors="replace"),
            origin=location.origin,
            location=display_location,
        )
