"""
AI 응답 마크다운(부분집합) → Block 파서.

지원 범위 (시스템 프롬프트의 포맷 규칙과 1:1):
- 빈 줄("\\n\\n")로 구분된 세그먼트 단위 분류
- separator → blockquote → header → bullet → numbered → table → paragraph
  (고정 우선순위, 첫 매치 승리)
- 인라인: `code`, **bold** (중첩 없음)

CommonMark 호환, 중첩 블록, 스트리밍 파싱은 지원하지 않음.
어떤 문자열이 들어와도 예외 없이 결과를 반환한다 (최악의 경우 문단).
"""

import re
from collections.abc import Iterator

from src.domain.blocks import (
    Block,
    Blockquote,
    BoldText,
    BulletList,
    CodeSpan,
    Header,
    InlineSpan,
    NumberedItem,
    NumberedList,
    Paragraph,
    PlainText,
    Separator,
    Table,
    TableRow,
)

SEGMENT_DELIMITER = "\n\n"

_SEPARATOR_RE = re.compile(r"-{3,}")
_HEADER_RE = re.compile(r"#+\s")
_HEADER_PREFIX_RE = re.compile(r"^#+")
_BULLET_SPLIT_RE = re.compile(r"\n- |^- ")
_NUMBERED_DETECT_RE = re.compile(r"(?:^|\n)\d+\.")
_NUMBERED_LINE_RE = re.compile(r"^(\d+)\.\s*")
_TABLE_RULE_MARKER = "---"

# 캡처 그룹 1개 → split 결과의 홀수 인덱스가 구분자 매치
_INLINE_RE = re.compile(r"(`[^`]+`|\*\*[^*]+\*\*)")


# =============================================================================
# Inline Tokenizer
# =============================================================================


def tokenize_inline(text: str) -> list[InlineSpan]:
    """
    인라인 구간 분리.

    Args:
        text: 한 줄/셀/목록 항목 텍스트

    Returns:
        InlineSpan 목록 (원문 순서 유지, 빈 조각 제외)

    매치된 구간 내부는 다시 스캔하지 않는다.
    짝이 맞지 않는 백틱/별표는 PlainText로 남는다.
    """
    spans: list[InlineSpan] = []
    for i, part in enumerate(_INLINE_RE.split(text)):
        if not part:
            continue
        if i % 2 == 0:
            spans.append(PlainText(part))
        elif part.startswith("`"):
            spans.append(CodeSpan(part[1:-1]))
        else:
            spans.append(BoldText(part[2:-2]))
    return spans


# =============================================================================
# Segment Classification
# =============================================================================


def iter_segments(text: str) -> Iterator[str]:
    """빈 줄 기준 세그먼트 (앞뒤 개행 제거, 빈 세그먼트 제외)."""
    for raw in text.split(SEGMENT_DELIMITER):
        segment = raw.strip("\n")
        if segment.strip():
            yield segment


def _is_separator(segment: str) -> bool:
    return _SEPARATOR_RE.fullmatch(segment.strip()) is not None


def _is_bullet_list(segment: str) -> bool:
    return "\n- " in segment or segment.startswith("- ")


def _parse_blockquote(segment: str) -> Blockquote:
    return Blockquote(spans=tokenize_inline(segment[1:].strip()))


def _parse_header(segment: str) -> Header:
    prefix = _HEADER_PREFIX_RE.match(segment)
    level = len(prefix.group(0)) if prefix else 1
    text = _HEADER_PREFIX_RE.sub("", segment).strip()
    return Header(level=level, text=text, spans=tokenize_inline(text))


def _parse_bullet_list(segment: str) -> BulletList:
    items = [item.strip() for item in _BULLET_SPLIT_RE.split(segment)]
    return BulletList(items=[tokenize_inline(item) for item in items if item])


def _parse_numbered_list(segment: str) -> NumberedList:
    items: list[NumberedItem] = []
    for line in segment.split("\n"):
        stripped = line.strip()
        match = _NUMBERED_LINE_RE.match(stripped)
        if match is None:
            continue
        items.append(
            NumberedItem(
                index=int(match.group(1)),
                spans=tokenize_inline(stripped[match.end():]),
            )
        )
    return NumberedList(items=items)


def _parse_table_row(line: str) -> TableRow:
    cells = [cell.strip() for cell in line.split("|")]
    # 빈 셀은 모두 버림 (의도적으로 비워둔 셀도 포함)
    return [tokenize_inline(cell) for cell in cells if cell]


def _parse_table(segment: str) -> Table:
    header: TableRow | None = None
    rows: list[TableRow] = []

    for line in segment.split("\n"):
        if "|" not in line:
            continue
        if _TABLE_RULE_MARKER in line:
            # 첫 행 바로 다음의 구분 행 → 첫 행을 헤더로 승격
            if header is None and len(rows) == 1:
                header = rows.pop()
            continue
        row = _parse_table_row(line)
        if row:
            rows.append(row)

    return Table(header=header, rows=rows)


def classify_segment(segment: str) -> Block:
    """
    세그먼트 하나를 Block으로 분류.

    우선순위 (첫 매치 승리, 순서 변경 금지):
    separator → blockquote → header → bullet → numbered → table → paragraph
    """
    if _is_separator(segment):
        return Separator()
    if segment.startswith(">"):
        return _parse_blockquote(segment)
    if _HEADER_RE.match(segment):
        return _parse_header(segment)
    if _is_bullet_list(segment):
        return _parse_bullet_list(segment)
    if _NUMBERED_DETECT_RE.search(segment):
        return _parse_numbered_list(segment)
    if "|" in segment:
        return _parse_table(segment)
    return Paragraph(spans=tokenize_inline(segment))


def parse_document(text: str) -> list[Block]:
    """
    AI 응답 텍스트 → Block 목록.

    Args:
        text: 메시지 본문 전체

    Returns:
        Block 목록 (빈 입력이면 빈 리스트)
    """
    return [classify_segment(segment) for segment in iter_segments(text)]
