"""클래스 이름으로 소스를 찾아주는 외부 협력자 인터페이스예요.

프로토콜 코어는 이 인터페이스만 알고, 실제 인덱스나 디컴파일러가
무엇인지는 몰라요. 구현체는 블로킹 호출이어도 괜찮아요.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Literal


@dataclass(slots=True, frozen=True)
class SourceResolved:
    qualified_name: str
    text: str
    origin: Literal["project", "library"] = "project"
    location: str = ""


@dataclass(slots=True, frozen=True)
class SourceAmbiguous:
    class_name: str
    candidates: tuple[str, ...] = field(default_factory=tuple)


@dataclass(slots=True, frozen=True)
class SourceNotFound:
    class_name: str


SourceLookupResult = SourceResolved | SourceAmbiguous | SourceNotFound


class FatalLookupError(Exception):
    """인덱스 손상처럼 복구할 수 없는 백엔드 오류예요.

    도구 결과(`isError`)로 낮추지 않고 프로토콜 내부 오류로 올려보내요.
    """


class SourceLookupProvider(abc.ABC):
    """클래스 이름(짧은 이름 또는 정규화된 이름)을 소스 텍스트로 바꿔요."""

    @abc.abstractmethod
    def lookup(self, class_name: str) -> SourceLookupResult:
        """찾은 결과를 세 가지 변형 중 하나로 반환해요.

        Raises:
            FatalLookupError: 백엔드가 더 이상 쓸 수 없는 상태일 때예요.
        """
