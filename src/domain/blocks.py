"""
Block / InlineSpan 데이터 모델.

AI 응답 텍스트를 파싱한 결과물:
- Document = list[Block] (순서 = 렌더링 순서)
- Block: Separator, Blockquote, Header, BulletList, NumberedList, Table, Paragraph
- InlineSpan: PlainText, CodeSpan, BoldText

모든 노드는 불변 (frozen). 렌더 호출마다 새로 생성된다.
"""

from dataclasses import dataclass, field
from typing import Any

# 헤더 스타일은 4단계까지만 정의됨 (h1~h4)
MAX_HEADER_STYLE_LEVEL = 4


# =============================================================================
# Inline Spans
# =============================================================================


@dataclass(frozen=True)
class PlainText:
    """서식 없는 텍스트 (공백 포함 원문 그대로)."""
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True)
class CodeSpan:
    """`code` 구간 (백틱 제거됨)."""
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "code", "text": self.text}


@dataclass(frozen=True)
class BoldText:
    """**bold** 구간 (별표 제거됨)."""
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "bold", "text": self.text}


InlineSpan = PlainText | CodeSpan | BoldText


def spans_to_dicts(spans: list[InlineSpan]) -> list[dict[str, Any]]:
    """InlineSpan 시퀀스 직렬화."""
    return [span.to_dict() for span in spans]


def spans_text(spans: list[InlineSpan]) -> str:
    """구분자를 제외한 텍스트 복원."""
    return "".join(span.text for span in spans)


# =============================================================================
# Blocks
# =============================================================================


@dataclass(frozen=True)
class Separator:
    """수평선 (---)."""

    def to_dict(self) -> dict[str, Any]:
        return {"type": "separator"}


@dataclass(frozen=True)
class Blockquote:
    """인용 블록 (> 요약)."""
    spans: list[InlineSpan] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"type": "blockquote", "spans": spans_to_dicts(self.spans)}


@dataclass(frozen=True)
class Header:
    """
    헤더.

    level은 선행 '#' 개수 그대로 저장.
    style_level은 1~4로 제한 (5단계 이상은 h4 스타일).
    """
    level: int
    text: str
    spans: list[InlineSpan] = field(default_factory=list)

    @property
    def style_level(self) -> int:
        return max(1, min(self.level, MAX_HEADER_STYLE_LEVEL))

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "header",
            "level": self.level,
            "style_level": self.style_level,
            "text": self.text,
            "spans": spans_to_dicts(self.spans),
        }


@dataclass(frozen=True)
class BulletList:
    """글머리 목록."""
    items: list[list[InlineSpan]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "bullet_list",
            "items": [spans_to_dicts(item) for item in self.items],
        }


@dataclass(frozen=True)
class NumberedItem:
    """번호 목록 항목 (index = 원문 번호, 재부여하지 않음)."""
    index: int
    spans: list[InlineSpan] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "spans": spans_to_dicts(self.spans)}


@dataclass(frozen=True)
class NumberedList:
    """번호 목록."""
    items: list[NumberedItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "numbered_list",
            "items": [item.to_dict() for item in self.items],
        }


TableRow = list[list[InlineSpan]]


@dataclass(frozen=True)
class Table:
    """
    표.

    header: '---' 구분 행 바로 앞의 행 (없으면 None)
    rows: 나머지 데이터 행
    """
    header: TableRow | None = None
    rows: list[TableRow] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "table",
            "header": (
                [spans_to_dicts(cell) for cell in self.header]
                if self.header is not None
                else None
            ),
            "rows": [[spans_to_dicts(cell) for cell in row] for row in self.rows],
        }


@dataclass(frozen=True)
class Paragraph:
    """일반 문단 (fallback)."""
    spans: list[InlineSpan] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"type": "paragraph", "spans": spans_to_dicts(self.spans)}


Block = Separator | Blockquote | Header | BulletList | NumberedList | Table | Paragraph


def document_to_dicts(blocks: list[Block]) -> list[dict[str, Any]]:
    """Document 직렬화 (JSON 응답용)."""
    return [block.to_dict() for block in blocks]
