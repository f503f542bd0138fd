"""
test_pdf.py - RFI PDF 렌더러 테스트

검증 범위:
- 요청 JSON → RfiDocument (필수 필드 누락 시 INVALID_RFI)
- 날짜 표기 변환
- PDF 바이트 생성 + 긴 본문 페이지 넘김
- 렌더링 실패 → RENDER_FAILED
"""

import re
from unittest.mock import patch

import pytest

from src.domain.errors import ErrorCodes, ServiceError
from src.render.pdf import (
    RfiDocument,
    RfiPdfRenderer,
    format_long_date,
    format_short_date,
    generate_rfi_number,
    render_rfi_pdf,
)

PAGE_RE = re.compile(rb"/Type /Page\b")


def count_pages(pdf_bytes: bytes) -> int:
    return len(PAGE_RE.findall(pdf_bytes))


@pytest.fixture
def rfi_payload() -> dict:
    return {
        "projectName": "Harbor Tower",
        "date": "2025-01-05",
        "subject": "Level 3 slab rebar spacing",
        "description": "Drawings S-301 and S-302 show different spacing.",
        "discipline": "Structural",
        "requestedBy": "Site Engineer",
        "priority": "Urgent",
        "dueDate": "2025-01-12",
    }


# =============================================================================
# RfiDocument
# =============================================================================


class TestRfiDocument:
    """요청 JSON 매핑."""

    def test_from_payload(self, rfi_payload):
        rfi = RfiDocument.from_payload(rfi_payload)

        assert rfi.project_name == "Harbor Tower"
        assert rfi.requested_by == "Site Engineer"
        assert rfi.due_date == "2025-01-12"
        assert rfi.priority == "Urgent"

    def test_defaults_for_optional_fields(self):
        rfi = RfiDocument.from_payload({"projectName": "P", "date": "2025-01-05"})

        assert rfi.priority == "Normal"
        assert rfi.subject == ""
        assert rfi.due_date == ""

    def test_missing_required_fields(self):
        with pytest.raises(ServiceError) as exc_info:
            RfiDocument.from_payload({"subject": "x"})

        assert exc_info.value.code == ErrorCodes.INVALID_RFI
        assert exc_info.value.context["missing"] == ["projectName", "date"]


# =============================================================================
# Date / Number Formatting
# =============================================================================


class TestFormatting:
    """날짜 표기 + RFI 번호."""

    def test_long_date(self):
        assert format_long_date("2025-01-05") == "January 5, 2025"

    def test_short_date(self):
        assert format_short_date("2025-01-05") == "1/5/2025"

    @pytest.mark.parametrize("value", ["", "next week"])
    def test_unparseable_date_returned_as_is(self, value):
        assert format_long_date(value) == value
        assert format_short_date(value) == value

    def test_rfi_number_is_four_digits(self):
        number = generate_rfi_number()
        assert len(number) == 4
        assert number.isdigit()


# =============================================================================
# Rendering
# =============================================================================


class TestRenderRfiPdf:
    """PDF 생성."""

    def test_produces_pdf(self, rfi_payload):
        pdf = render_rfi_pdf(RfiDocument.from_payload(rfi_payload), rfi_number="0042")

        assert pdf.startswith(b"%PDF")
        assert count_pages(pdf) == 1

    def test_long_description_flows_to_next_page(self, rfi_payload):
        rfi_payload["description"] = "\n".join(
            f"Line {i}: clarify embed plate location at gridline {i}." for i in range(120)
        )
        pdf = render_rfi_pdf(RfiDocument.from_payload(rfi_payload))

        assert count_pages(pdf) >= 2

    def test_renderer_reusable(self, rfi_payload):
        renderer = RfiPdfRenderer()
        rfi = RfiDocument.from_payload(rfi_payload)

        assert renderer.render(rfi).startswith(b"%PDF")
        assert renderer.render(rfi).startswith(b"%PDF")

    def test_failure_raises_render_failed(self, rfi_payload):
        rfi = RfiDocument.from_payload(rfi_payload)

        with patch.object(
            RfiPdfRenderer, "_draw_title", side_effect=RuntimeError("font missing")
        ):
            with pytest.raises(ServiceError) as exc_info:
                render_rfi_pdf(rfi)

        assert exc_info.value.code == ErrorCodes.RENDER_FAILED
        assert exc_info.value.context["document"] == "rfi"

    def test_canvas_unavailable_outside_render(self, rfi_payload):
        renderer = RfiPdfRenderer()
        renderer.render(RfiDocument.from_payload(rfi_payload))

        with pytest.raises(RuntimeError):
            renderer.c

    def test_empty_sections_render(self):
        pdf = render_rfi_pdf(RfiDocument(project_name="P", date="2025-01-05"))

        assert pdf.startswith(b"%PDF")
        assert count_pages(pdf) == 1
