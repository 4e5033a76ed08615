"""긴 소스 텍스트에서 offset/limit 범위의 줄만 잘라내는 순수 함수예요.

결과 텍스트 끝에는 잘린 범위와 전체 줄 수를 알려주는 표식이 붙어요.
같은 입력에는 항상 같은 출력을 돌려줘요.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_LINE_LIMIT = 500


@dataclass(slots=True, frozen=True)
class LineWindow:
    """잘라낸 결과와 범위 정보를 함께 담아요."""

    text: str
    start: int
    end: int
    total_lines: int
    truncated: bool
    out_of_range: bool


def out_of_range_notice(offset: int, total_lines: int) -> str:
    return f"// Line offset {offset} is out of range: the file has {total_lines} lines"


def truncation_notice(start: int, end: int, total_lines: int) -> str:
    return f"// ... source truncated, showing lines {start + 1}-{end} of {total_lines} ..."


def compute_line_window(text: str, offset: int = 0, limit: int = DEFAULT_LINE_LIMIT) -> LineWindow:
    """`text`를 줄 단위로 나눠 `[offset, offset + limit)` 범위를 선택해요.

    Args:
        text: 전체 소스 텍스트예요. 개행 문자로 나누고 줄 끝의 ``\\r``은
            떼요. 끝의 개행 뒤 빈 조각도 한 줄로 세요.
        offset: 0부터 시작하는 시작 줄이에요. 음수면 0으로 맞춰요.
        limit: 가져올 최대 줄 수예요. 0 이하이면 기본값 500을 써요.

    Returns:
        선택한 텍스트와 범위 정보를 담은 `LineWindow`예요.
    """
    start = max(offset, 0)
    window_size = limit if limit > 0 else DEFAULT_LINE_LIMIT

    # CRLF 소스는 줄 끝의 \r을 떼고 세요
    lines = [line.removesuffix("\r") for line in text.split("\n")]
    total_lines = len(lines)

    if start >= total_lines:
        return LineWindow(
            text=out_of_range_notice(start, total_lines),
            start=start,
            end=start,
            total_lines=total_lines,
            truncated=False,
            out_of_range=True,
        )

    end = min(start + window_size, total_lines)
    selected = "\n".join(lines[start:end])
    truncated = end < total_lines
    if truncated:
        selected = f"{selected}\n\n{truncation_notice(start, end, total_lines)}"

    return LineWindow(
        text=selected,
        start=start,
        end=end,
        total_lines=total_lines,
        truncated=truncated,
        out_of_range=False,
    )


def apply_line_window(text: str, offset: int = 0, limit: int = DEFAULT_LINE_LIMIT) -> str:
    """`compute_line_window`의 텍스트 결과만 돌려줘요."""
    return compute_line_window(text, offset, limit).text
