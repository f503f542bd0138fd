"""
RFI (Request For Information) PDF 렌더러: reportlab 기반.

고정 레이아웃 (A4, 여백 50pt):
- 헤더 박스: 제목 + RFI 번호
- 프로젝트/공종 (좌), 작성일/회신기한 (우)
- 요청자/우선순위 (Urgent는 빨간색)
- 제목, 요청 내용 (자동 줄바꿈 + 페이지 넘김)
- 회신란, 서명란
- 모든 페이지 하단: 프로젝트명 + 회신기한, "Page i of n"

좌표는 위에서부터의 거리(top 기준)로 계산하고 그릴 때만 reportlab 좌표로 변환.
"""

import io
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from src.domain.constants import RFI_PRIORITY_URGENT
from src.domain.errors import ErrorCodes, ServiceError

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 50
CONTENT_WIDTH = 495
RIGHT_COLUMN_X = 300
FOOTER_LINE_Y = 750
FOOTER_TEXT_Y = 760
CONTENT_BOTTOM = 730
LINE_HEIGHT = 14
RESPONSE_BOX_HEIGHT = 150

TEXT_COLOR = HexColor("#333333")
RULE_COLOR = HexColor("#CCCCCC")
HEADER_BG_COLOR = HexColor("#F5F5F5")
URGENT_COLOR = HexColor("#FF0000")


# =============================================================================
# RFI Data
# =============================================================================


@dataclass
class RfiDocument:
    """RFI 문서 데이터 (PDF 요청 본문)."""
    project_name: str
    date: str
    subject: str = ""
    description: str = ""
    discipline: str = ""
    requested_by: str = ""
    priority: str = "Normal"
    due_date: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "RfiDocument":
        """
        요청 JSON → RfiDocument.

        키는 클라이언트 폼 이름(camelCase) 그대로 받는다.

        Raises:
            ServiceError: INVALID_RFI (projectName/date 누락)
        """
        missing = [k for k in ("projectName", "date") if not payload.get(k)]
        if missing:
            raise ServiceError(ErrorCodes.INVALID_RFI, missing=missing)

        return cls(
            project_name=str(payload["projectName"]),
            date=str(payload["date"]),
            subject=str(payload.get("subject") or ""),
            description=str(payload.get("description") or ""),
            discipline=str(payload.get("discipline") or ""),
            requested_by=str(payload.get("requestedBy") or ""),
            priority=str(payload.get("priority") or "Normal"),
            due_date=str(payload.get("dueDate") or ""),
        )


def _parse_date(value: str) -> datetime | None:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def format_long_date(value: str) -> str:
    """'2025-01-05' → 'January 5, 2025' (해석 불가면 원문)."""
    parsed = _parse_date(value)
    if parsed is None:
        return value
    return f"{parsed.strftime('%B')} {parsed.day}, {parsed.year}"


def format_short_date(value: str) -> str:
    """'2025-01-05' → '1/5/2025' (해석 불가면 원문)."""
    parsed = _parse_date(value)
    if parsed is None:
        return value
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def generate_rfi_number() -> str:
    """밀리초 타임스탬프 끝 4자리."""
    return str(int(time.time() * 1000))[-4:]


# =============================================================================
# Canvas
# =============================================================================


class _FooterCanvas(canvas.Canvas):
    """
    페이지 상태를 모아두었다가 save() 시점에 "Page i of n" 푸터를 그리는 캔버스.

    전체 페이지 수는 본문을 다 그린 뒤에야 알 수 있으므로 지연 처리.
    """

    def __init__(self, *args: Any, footer_text: str = "", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._saved_page_states: list[dict[str, Any]] = []
        self._footer_text = footer_text

    def showPage(self) -> None:  # noqa: N802 (reportlab API)
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self) -> None:
        total = len(self._saved_page_states)
        for page_number, state in enumerate(self._saved_page_states, start=1):
            self.__dict__.update(state)
            self._draw_footer(page_number, total)
            super().showPage()
        super().save()

    def _draw_footer(self, page_number: int, total: int) -> None:
        self.setStrokeColor(RULE_COLOR)
        self.line(MARGIN, PAGE_HEIGHT - FOOTER_LINE_Y, MARGIN + CONTENT_WIDTH,
                  PAGE_HEIGHT - FOOTER_LINE_Y)
        self.setFillColor(TEXT_COLOR)
        self.setFont("Helvetica", 8)
        baseline = PAGE_HEIGHT - FOOTER_TEXT_Y - 8
        self.drawString(MARGIN, baseline, self._footer_text)
        self.drawRightString(
            MARGIN + CONTENT_WIDTH, baseline, f"Page {page_number} of {total}"
        )


# =============================================================================
# Renderer
# =============================================================================


class RfiPdfRenderer:
    """
    RFI PDF 렌더러.

    Usage:
        renderer = RfiPdfRenderer()
        pdf_bytes = renderer.render(rfi)
    """

    def __init__(self) -> None:
        self._canvas: _FooterCanvas | None = None
        self._y: float = MARGIN

    # --- drawing helpers (top 기준 좌표) ---

    @property
    def c(self) -> _FooterCanvas:
        if self._canvas is None:
            raise RuntimeError("Canvas is only available inside render()")
        return self._canvas

    def _text(
        self,
        x: float,
        y: float,
        text: str,
        font: str = "Helvetica",
        size: float = 11,
        align: str = "left",
    ) -> None:
        self.c.setFont(font, size)
        baseline = PAGE_HEIGHT - y - size
        if align == "center":
            self.c.drawCentredString(x + CONTENT_WIDTH / 2, baseline, text)
        else:
            self.c.drawString(x, baseline, text)

    def _rule(self, y: float) -> None:
        self.c.setStrokeColor(RULE_COLOR)
        self.c.line(MARGIN, PAGE_HEIGHT - y, MARGIN + CONTENT_WIDTH, PAGE_HEIGHT - y)

    def _ensure_space(self, needed: float) -> None:
        if self._y + needed > CONTENT_BOTTOM:
            self.c.showPage()
            self.c.setFillColor(TEXT_COLOR)
            self._y = MARGIN

    def _field(self, x: float, y: float, label: str, value: str) -> None:
        self._text(x, y, label, font="Helvetica-Bold", size=10)
        self._text(x, y + 15, value, size=11)

    def _paragraph(self, text: str, size: float = 11) -> None:
        for raw_line in text.split("\n"):
            lines = simpleSplit(raw_line, "Helvetica", size, CONTENT_WIDTH) or [""]
            for line in lines:
                self._ensure_space(LINE_HEIGHT)
                self._text(MARGIN, self._y, line, size=size)
                self._y += LINE_HEIGHT

    # --- sections ---

    def _draw_title(self, rfi_number: str) -> None:
        self.c.setFillColor(HEADER_BG_COLOR)
        self.c.rect(MARGIN, PAGE_HEIGHT - 110, CONTENT_WIDTH, 60, stroke=0, fill=1)
        self.c.setFillColor(TEXT_COLOR)
        self._text(MARGIN, 62, "REQUEST FOR INFORMATION",
                   font="Helvetica-Bold", size=24, align="center")
        self._text(MARGIN, 90, f"RFI #: {rfi_number}", size=12, align="center")

    def _draw_project_info(self, rfi: RfiDocument) -> None:
        top = 140
        self._field(MARGIN, top, "PROJECT", rfi.project_name)
        self._field(MARGIN, top + 40, "DISCIPLINE", rfi.discipline)
        self._field(RIGHT_COLUMN_X, top, "DATE", format_long_date(rfi.date))
        self._field(RIGHT_COLUMN_X, top + 40, "DUE DATE", format_long_date(rfi.due_date))
        self._rule(top + 80)

        top += 100
        self._field(MARGIN, top, "SUBMITTED BY", rfi.requested_by)
        self._text(RIGHT_COLUMN_X, top, "PRIORITY", font="Helvetica-Bold", size=10)
        if rfi.priority == RFI_PRIORITY_URGENT:
            self.c.setFillColor(URGENT_COLOR)
        self._text(RIGHT_COLUMN_X, top + 15, rfi.priority, size=11)
        self.c.setFillColor(TEXT_COLOR)
        self._rule(top + 40)
        self._y = top + 60

    def _draw_section(self, title: str, body: str) -> None:
        self._ensure_space(LINE_HEIGHT * 3)
        self._text(MARGIN, self._y, title, font="Helvetica-Bold", size=12)
        self._y += 20
        self._paragraph(body)
        self._y += 20

    def _draw_response_area(self) -> None:
        self._ensure_space(RESPONSE_BOX_HEIGHT + 20)
        self._text(MARGIN, self._y, "RESPONSE", font="Helvetica-Bold", size=12)
        self._y += 20
        self.c.setStrokeColor(RULE_COLOR)
        self.c.rect(MARGIN, PAGE_HEIGHT - self._y - RESPONSE_BOX_HEIGHT,
                    CONTENT_WIDTH, RESPONSE_BOX_HEIGHT, stroke=1, fill=0)
        self._y += RESPONSE_BOX_HEIGHT + 30

    def _draw_signatures(self) -> None:
        self._ensure_space(70)
        top = self._y
        for x, label, hint in (
            (MARGIN, "Responded By:", "Name & Title"),
            (RIGHT_COLUMN_X, "Date:", "MM/DD/YYYY"),
        ):
            self._text(x, top, label, size=10)
            self._text(x, top + 30, "_______________________", size=10)
            self._text(x, top + 45, hint, size=10)
        self._y = top + 60

    def render(self, rfi: RfiDocument, rfi_number: str | None = None) -> bytes:
        """
        RFI PDF 생성.

        Args:
            rfi: RFI 데이터
            rfi_number: 표시할 RFI 번호 (None이면 타임스탬프 기반)

        Returns:
            PDF 바이트

        Raises:
            ServiceError: RENDER_FAILED
        """
        buffer = io.BytesIO()
        footer = (
            f"{rfi.project_name} - RFI Response Required by "
            f"{format_short_date(rfi.due_date)}"
        )
        try:
            self._canvas = _FooterCanvas(buffer, pagesize=A4, footer_text=footer)
            self._canvas.setTitle(f"RFI - {rfi.project_name}")
            self._y = MARGIN

            self._draw_title(rfi_number or generate_rfi_number())
            self._draw_project_info(rfi)
            self._draw_section("SUBJECT", rfi.subject)
            self._draw_section("DESCRIPTION OF INFORMATION REQUIRED", rfi.description)
            self._draw_response_area()
            self._draw_signatures()

            self._canvas.showPage()
            self._canvas.save()
        except Exception as e:
            logger.error(f"RFI PDF rendering failed: {e}", exc_info=True)
            raise ServiceError(
                ErrorCodes.RENDER_FAILED,
                document="rfi",
                error=str(e),
            ) from e
        finally:
            self._canvas = None

        return buffer.getvalue()


def render_rfi_pdf(rfi: RfiDocument, rfi_number: str | None = None) -> bytes:
    """RFI PDF 생성 (간편 함수)."""
    return RfiPdfRenderer().render(rfi, rfi_number)
