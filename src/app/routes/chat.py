"""
Chat Routes: 안전 상담 채팅 (메인 기능).

- GET /chat → 채팅 화면 (HTMX)
- POST /api/chat/message → 질문 전송, AI 응답을 Block 단위 HTML로 렌더링
- POST /api/chat/category → 카테고리 선택 안내 메시지
- POST /api/chat/render → AI 텍스트 → Block JSON (외부 UI용)

응답 텍스트는 render.markdown으로 파싱한 뒤 HtmlBlockRenderer로만 HTML화.
AI 응답 원문을 HTML로 그대로 내보내지 않는다.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Body, Form, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from src.app.dependencies import get_response_timeout, get_safety_service
from src.app.providers.base import ProviderError
from src.domain.blocks import document_to_dicts
from src.domain.constants import (
    ERROR_REPLY_MESSAGE,
    GREETING_MESSAGE,
    QUICK_TIPS,
    SAFETY_CATEGORIES,
    SafetyCategory,
    get_category,
)
from src.domain.errors import ServiceError
from src.render.html import escape_html, render_markdown_html
from src.render.markdown import parse_document

logger = logging.getLogger(__name__)

# Jinja2 템플릿 설정
_templates_dir = Path(__file__).parent.parent / "templates"
jinja_templates = (
    Jinja2Templates(directory=_templates_dir) if _templates_dir.exists() else None
)

# Routers
router = APIRouter()  # HTML pages
api_router = APIRouter()  # API endpoints

EMPTY_INPUT_MESSAGE = "Please type a safety question first. 📝"
TIMEOUT_MESSAGE = (
    "The AI service is taking too long to respond ⏱️ Please try again in a moment."
)


# =============================================================================
# HTML Generation Helpers
# =============================================================================


def build_category_badge_html(category: SafetyCategory | None) -> str:
    """카테고리 배지 (없으면 빈 문자열)."""
    if category is None:
        return ""
    return (
        f'<span class="category-badge" style="color: {category.color}; '
        f'background: {category.bg_color}">'
        f"{category.icon} {escape_html(category.name)}</span>"
    )


def build_user_message_html(content: str, category: SafetyCategory | None = None) -> str:
    """사용자 메시지 HTML 생성."""
    return (
        f'<div class="message user">{build_category_badge_html(category)}'
        f"{escape_html(content)}</div>"
    )


def build_assistant_message_html(
    body_html: str,
    category: SafetyCategory | None = None,
) -> str:
    """
    어시스턴트 메시지 HTML 생성.

    Args:
        body_html: 렌더링된 본문 (HtmlBlockRenderer 출력 또는 escape된 텍스트)
        category: 배지로 표시할 카테고리
    """
    return f"""<div class="message assistant">
        {build_category_badge_html(category)}<div class="message-body">{body_html}</div>
    </div>"""


def build_oob_category_input(category_id: str) -> str:
    """HTMX OOB 선택 카테고리 hidden input 생성."""
    return f'''<input type="hidden" name="category" id="selected-category"
           value="{escape_html(category_id)}" hx-swap-oob="true">'''


def _plain_reply(message: str) -> str:
    return build_assistant_message_html(f'<p class="md-paragraph">{escape_html(message)}</p>')


# =============================================================================
# Page Routes (HTML)
# =============================================================================


@router.get("/chat", response_class=HTMLResponse)
async def chat_page(request: Request) -> HTMLResponse:
    """
    채팅 화면.

    사이드바: 안전 카테고리 + Quick Tips
    본문: 인사 메시지 + 입력창
    """
    if jinja_templates:
        return jinja_templates.TemplateResponse(
            request,
            "chat.html",
            {
                "categories": SAFETY_CATEGORIES,
                "quick_tips": QUICK_TIPS,
                "greeting": GREETING_MESSAGE,
            },
        )

    # Fallback: Jinja2 템플릿이 없는 경우 기본 HTML
    return HTMLResponse(
        content=f"""
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Construction Safety Assistant</title>
    <script src="https://unpkg.com/htmx.org@1.9.10"></script>
</head>
<body>
    <h1>🛠️ Construction Safety Assistant</h1>
    <div id="chat-messages" class="messages">
        <div class="message assistant">{escape_html(GREETING_MESSAGE)}</div>
    </div>
    <form hx-post="/api/chat/message" hx-target="#chat-messages" hx-swap="beforeend">
        <input name="content" placeholder="Ask about safety guidelines...">
        <input type="hidden" name="category" id="selected-category" value="">
        <button type="submit">Send</button>
    </form>
</body>
</html>
    """
    )


# =============================================================================
# API Routes
# =============================================================================


@api_router.post("/message", response_class=HTMLResponse)
async def send_message(
    request: Request,
    content: str = Form(""),
    category: str | None = Form(None),
) -> HTMLResponse:
    """
    질문 전송 + AI 응답 렌더링.

    Returns:
        사용자 메시지 + 어시스턴트 메시지 HTML (HTMX beforeend swap용)
    """
    selected = get_category(category)

    if not content.strip():
        return HTMLResponse(content=_plain_reply(EMPTY_INPUT_MESSAGE))

    user_html = build_user_message_html(content.strip(), selected)
    service = get_safety_service(request)

    try:
        answer = await asyncio.wait_for(
            service.answer(content.strip(), selected.id if selected else None),
            timeout=get_response_timeout(request),
        )
    except TimeoutError:
        logger.warning("Safety answer timed out")
        return HTMLResponse(content=user_html + _plain_reply(TIMEOUT_MESSAGE))
    except (ProviderError, ServiceError) as e:
        logger.error(f"Safety answer failed: {e}")
        return HTMLResponse(content=user_html + _plain_reply(ERROR_REPLY_MESSAGE))

    assistant_html = build_assistant_message_html(
        render_markdown_html(answer.content), selected
    )
    return HTMLResponse(content=user_html + assistant_html)


@api_router.post("/category", response_class=HTMLResponse)
async def select_category(category: str = Form(...)) -> HTMLResponse:
    """
    카테고리 선택.

    Returns:
        안내 메시지 HTML + 선택 카테고리 OOB 업데이트
    """
    selected = get_category(category)
    if selected is None:
        raise HTTPException(
            status_code=400,
            detail={"code": "UNKNOWN_CATEGORY", "message": f"Unknown category '{category}'"},
        )

    message = (
        f"I'll help you with {selected.name} related questions. "
        "What would you like to know?"
    )
    body = f'<p class="md-paragraph">{escape_html(message)}</p>'
    return HTMLResponse(
        content=build_assistant_message_html(body, selected)
        + build_oob_category_input(selected.id)
    )


@api_router.post("/render")
async def render_blocks(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """
    AI 응답 텍스트 → Block 목록 (JSON).

    Body: {"content": "..."}
    """
    content = payload.get("content")
    if not isinstance(content, str):
        raise HTTPException(
            status_code=400,
            detail={"code": "INVALID_CONTENT", "message": "content must be a string"},
        )
    return {"blocks": document_to_dicts(parse_document(content))}
