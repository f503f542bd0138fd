"""
Block 렌더러: 파싱 결과 → 화면 요소.

파싱(src.render.markdown)과 렌더링을 분리:
- BlockRenderer: Block 종류별 메서드 1개씩
- HtmlBlockRenderer: 채팅 말풍선용 HTML (HTMX swap 대상)
"""

import html as html_escape_module
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from src.domain.blocks import (
    Block,
    Blockquote,
    BoldText,
    BulletList,
    CodeSpan,
    Header,
    InlineSpan,
    NumberedList,
    Paragraph,
    Separator,
    Table,
)
from src.render.markdown import parse_document

T = TypeVar("T")


def escape_html(text: str) -> str:
    """HTML 이스케이프."""
    return html_escape_module.escape(text)


class BlockRenderer(ABC, Generic[T]):
    """
    Block 렌더러 추상 인터페이스.

    Usage:
        renderer = HtmlBlockRenderer()
        parts = renderer.render_document(parse_document(text))
    """

    @abstractmethod
    def render_separator(self, block: Separator) -> T: ...

    @abstractmethod
    def render_blockquote(self, block: Blockquote) -> T: ...

    @abstractmethod
    def render_header(self, block: Header) -> T: ...

    @abstractmethod
    def render_bullet_list(self, block: BulletList) -> T: ...

    @abstractmethod
    def render_numbered_list(self, block: NumberedList) -> T: ...

    @abstractmethod
    def render_table(self, block: Table) -> T: ...

    @abstractmethod
    def render_paragraph(self, block: Paragraph) -> T: ...

    def render_block(self, block: Block) -> T:
        """Block 종류별 디스패치."""
        if isinstance(block, Separator):
            return self.render_separator(block)
        if isinstance(block, Blockquote):
            return self.render_blockquote(block)
        if isinstance(block, Header):
            return self.render_header(block)
        if isinstance(block, BulletList):
            return self.render_bullet_list(block)
        if isinstance(block, NumberedList):
            return self.render_numbered_list(block)
        if isinstance(block, Table):
            return self.render_table(block)
        return self.render_paragraph(block)

    def render_document(self, blocks: list[Block]) -> list[T]:
        """문서 순서대로 렌더링."""
        return [self.render_block(block) for block in blocks]


class HtmlBlockRenderer(BlockRenderer[str]):
    """
    채팅 UI용 HTML 렌더러.

    모든 텍스트는 escape 처리 (AI 응답을 신뢰하지 않음).
    CSS 클래스는 static/css/style.css 참조.
    """

    def render_spans(self, spans: list[InlineSpan]) -> str:
        parts: list[str] = []
        for span in spans:
            text = escape_html(span.text)
            if isinstance(span, CodeSpan):
                parts.append(f'<code class="inline-code">{text}</code>')
            elif isinstance(span, BoldText):
                parts.append(f"<strong>{text}</strong>")
            else:
                parts.append(text)
        return "".join(parts)

    def render_separator(self, block: Separator) -> str:
        return '<div class="md-separator"><hr></div>'

    def render_blockquote(self, block: Blockquote) -> str:
        return (
            f'<blockquote class="md-quote">{self.render_spans(block.spans)}'
            "</blockquote>"
        )

    def render_header(self, block: Header) -> str:
        level = block.style_level
        return (
            f'<h{level} class="md-header md-h{level}">'
            f"{self.render_spans(block.spans)}</h{level}>"
        )

    def render_bullet_list(self, block: BulletList) -> str:
        items = "".join(
            f'<li><span class="bullet"></span>{self.render_spans(item)}</li>'
            for item in block.items
        )
        return f'<ul class="md-list">{items}</ul>'

    def render_numbered_list(self, block: NumberedList) -> str:
        items = "".join(
            f'<li><span class="number">{item.index}.</span>'
            f"{self.render_spans(item.spans)}</li>"
            for item in block.items
        )
        return f'<ol class="md-list md-numbered">{items}</ol>'

    def render_table(self, block: Table) -> str:
        rows: list[str] = []
        if block.header is not None:
            cells = "".join(f"<th>{self.render_spans(c)}</th>" for c in block.header)
            rows.append(f"<thead><tr>{cells}</tr></thead>")
        body = "".join(
            "<tr>" + "".join(f"<td>{self.render_spans(c)}</td>" for c in row) + "</tr>"
            for row in block.rows
        )
        rows.append(f"<tbody>{body}</tbody>")
        return f'<div class="md-table"><table>{"".join(rows)}</table></div>'

    def render_paragraph(self, block: Paragraph) -> str:
        return f'<p class="md-paragraph">{self.render_spans(block.spans)}</p>'


def render_markdown_html(text: str) -> str:
    """AI 응답 텍스트 → HTML 조각 (간편 함수)."""
    renderer = HtmlBlockRenderer()
    return "\n".join(renderer.render_document(parse_document(text)))
