"""
Render layer: AI 응답/문서 출력 생성.

역할:
- markdown: AI 응답 텍스트 → Block 목록 (순수 함수)
- html: Block → 채팅 UI HTML
- pdf: RFI 데이터 → PDF (reportlab)
"""

from .html import BlockRenderer, HtmlBlockRenderer, render_markdown_html
from .markdown import classify_segment, parse_document, tokenize_inline
from .pdf import RfiDocument, RfiPdfRenderer, render_rfi_pdf

__all__ = [
    "parse_document",
    "classify_segment",
    "tokenize_inline",
    "BlockRenderer",
    "HtmlBlockRenderer",
    "render_markdown_html",
    "RfiDocument",
    "RfiPdfRenderer",
    "render_rfi_pdf",
]
