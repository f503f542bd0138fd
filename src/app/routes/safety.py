"""
Safety API Routes.

- POST /api/generate-safety-response → 안전 질의 응답 (마크다운 + 메타데이터)
- POST /api/analyze-image → 현장 사진 안전 점검 리포트
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Request
from fastapi.responses import JSONResponse

from src.app.dependencies import get_safety_service
from src.app.providers.base import ProviderError
from src.domain.errors import ErrorCodes, ServiceError

logger = logging.getLogger(__name__)

api_router = APIRouter()

# 클라이언트 입력 오류로 보는 코드 (400)
_CLIENT_ERROR_CODES = {ErrorCodes.MISSING_QUERY, ErrorCodes.UNKNOWN_CATEGORY}


@api_router.post("/generate-safety-response")
async def generate_safety_response(
    request: Request,
    payload: dict[str, Any] = Body(...),
) -> JSONResponse:
    """
    안전 질의 응답.

    Body: {"query": "...", "category": "ppe" | null}

    Returns:
        {"response": markdown, "details": {...}, "markdown": true}
    """
    query = payload.get("query") or ""
    category = payload.get("category") or None
    service = get_safety_service(request)

    try:
        answer = await service.answer(str(query), category)
    except ServiceError as e:
        status = 400 if e.code in _CLIENT_ERROR_CODES else 500
        return JSONResponse(
            status_code=status,
            content={"error": "Invalid safety request", "details": e.to_dict()},
        )
    except ProviderError as e:
        logger.error(f"Error generating safety response: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Error generating safety response",
                "details": e.message,
            },
        )

    return JSONResponse(content=answer.to_response())


@api_router.post("/analyze-image")
async def analyze_image(
    request: Request,
    payload: dict[str, Any] = Body(...),
) -> JSONResponse:
    """
    현장 사진 안전 점검.

    Body: {"image": "<base64 jpeg>"}

    실패 시에도 {"content": ...} 형태 유지 (클라이언트가 그대로 채팅에 표시).
    """
    service = get_safety_service(request)
    image = payload.get("image") or ""

    try:
        if not image:
            raise ServiceError(ErrorCodes.MISSING_IMAGE)
        completion = await service.analyze_image(str(image))
    except ServiceError as e:
        logger.warning(f"Image analysis rejected: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "content": "Error analyzing image: No image data provided. Please try again."
            },
        )
    except ProviderError as e:
        logger.error(f"Image analysis failed: {e}")
        return JSONResponse(
            status_code=500,
            content={"content": f"Error analyzing image: {e.message}. Please try again."},
        )

    return JSONResponse(content={"content": completion.content})
