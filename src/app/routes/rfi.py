"""
RFI API Routes.

- POST /api/generate-rfi → 비정형 질의를 RFI 초안으로 구조화
- POST /api/generate-pdf → RFI 폼 데이터 → PDF 다운로드
"""

import logging
import re
from typing import Any
from urllib.parse import quote

from fastapi import APIRouter, Body, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response

from src.app.dependencies import get_rfi_service
from src.app.providers.base import ProviderError
from src.domain.constants import rfi_pdf_filename
from src.domain.errors import ErrorCodes, ServiceError
from src.render.pdf import RfiDocument, render_rfi_pdf

logger = logging.getLogger(__name__)

api_router = APIRouter()

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")


def content_disposition(filename: str) -> str:
    """attachment 헤더 (비ASCII 파일명은 filename*로 전달, 제어 문자 제거)."""
    printable = _CONTROL_CHARS_RE.sub("", filename)
    ascii_name = printable.encode("ascii", "replace").decode("ascii").replace('"', "'")
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(printable)}"


@api_router.post("/generate-rfi")
async def generate_rfi(
    request: Request,
    payload: dict[str, Any] = Body(...),
) -> JSONResponse:
    """
    RFI 초안 생성.

    Body: {"query": "..."}

    Returns:
        {"projectName", "subject", "description"}
    """
    query = payload.get("query") or ""
    service = get_rfi_service(request)

    try:
        content = await service.draft(str(query))
    except ServiceError as e:
        if e.code == ErrorCodes.MISSING_QUERY:
            return JSONResponse(status_code=400, content={"message": "Query is required"})
        raise
    except ProviderError as e:
        logger.error(f"Error generating RFI content: {e}")
        return JSONResponse(
            status_code=500,
            content={"message": "Error generating RFI content", "details": e.message},
        )

    return JSONResponse(content=content.to_dict())


@api_router.post("/generate-pdf")
async def generate_pdf(payload: dict[str, Any] = Body(...)) -> Response:
    """
    RFI PDF 생성.

    Body: projectName, date, subject, description, discipline,
          requestedBy, priority, dueDate

    Returns:
        application/pdf (attachment: RFI-{projectName}-{date}.pdf)
    """
    try:
        rfi = RfiDocument.from_payload(payload)
    except ServiceError as e:
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid RFI data", "details": e.to_dict()},
        )

    try:
        pdf_bytes = await run_in_threadpool(render_rfi_pdf, rfi)
    except ServiceError as e:
        logger.error(f"Error generating PDF: {e}")
        return JSONResponse(status_code=500, content={"message": "Error generating PDF"})

    filename = rfi_pdf_filename(rfi.project_name, rfi.date)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(filename)},
    )
