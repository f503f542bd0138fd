"""
test_chat.py - Chat Routes 유닛 테스트

검증 포인트:
1. 말풍선 HTML 헬퍼 (escape, 카테고리 배지)
2. AI 응답 → Block HTML 렌더링
3. 게이트웨이 실패/타임아웃 시 안내 말풍선
4. 카테고리 선택 OOB 업데이트
"""

import asyncio
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.app.providers.base import CompletionError
from src.app.routes.chat import (
    EMPTY_INPUT_MESSAGE,
    TIMEOUT_MESSAGE,
    api_router,
    build_assistant_message_html,
    build_oob_category_input,
    build_user_message_html,
    router,
)
from src.domain.constants import ERROR_REPLY_MESSAGE, SAFETY_CATEGORIES_BY_ID
from src.render.html import escape_html

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def app(fake_provider) -> FastAPI:
    """테스트용 FastAPI 앱 (lifespan 없이 state 직접 설정)."""
    app = FastAPI()
    app.include_router(router)
    app.include_router(api_router, prefix="/api/chat")

    app.state.config = {"ai": {"response_timeout": 5.0}}
    app.state.provider = fake_provider
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


# =============================================================================
# HTML Helpers
# =============================================================================


class TestHtmlHelpers:
    """HTML 생성 헬퍼."""

    def test_escape_html_basic(self):
        assert escape_html("<b>\"x\" & 'y'</b>") == (
            "&lt;b&gt;&quot;x&quot; &amp; &#x27;y&#x27;&lt;/b&gt;"
        )

    def test_build_user_message_html_escapes(self):
        html = build_user_message_html("<img src=x onerror=alert(1)>")

        assert 'class="message user"' in html
        assert "<img" not in html

    def test_user_message_with_category_badge(self):
        html = build_user_message_html("q", SAFETY_CATEGORIES_BY_ID["ppe"])

        assert 'class="category-badge"' in html
        assert "Personal Protective Equipment" in html

    def test_build_assistant_message_html_without_category(self):
        html = build_assistant_message_html("<p>ok</p>")

        assert 'class="message assistant"' in html
        assert "category-badge" not in html
        assert "<p>ok</p>" in html

    def test_oob_category_input(self):
        html = build_oob_category_input("machinery")

        assert 'id="selected-category"' in html
        assert 'value="machinery"' in html
        assert 'hx-swap-oob="true"' in html


# =============================================================================
# POST /api/chat/message
# =============================================================================


class TestSendMessage:
    """메시지 전송."""

    def test_renders_blocks(self, client, fake_provider):
        response = client.post(
            "/api/chat/message", data={"content": "PPE for rebar?", "category": "ppe"}
        )

        assert response.status_code == 200
        assert 'class="message user"' in response.text
        assert '<blockquote class="md-quote">' in response.text
        assert '<h3 class="md-header md-h3">Required PPE</h3>' in response.text

        args = fake_provider.complete.await_args.args[0]
        assert "Personal Protective Equipment" in args[1].content

    def test_empty_content_skips_ai(self, client, fake_provider):
        response = client.post("/api/chat/message", data={"content": "   "})

        assert response.status_code == 200
        assert escape_html(EMPTY_INPUT_MESSAGE) in response.text
        fake_provider.complete.assert_not_awaited()

    def test_unknown_category_treated_as_general(self, client, fake_provider):
        response = client.post(
            "/api/chat/message", data={"content": "noise", "category": "welding"}
        )

        assert response.status_code == 200
        assert "category-badge" not in response.text

    def test_provider_error_renders_apology(self, client, fake_provider):
        fake_provider.complete.side_effect = CompletionError(
            "COMPLETION_FAILED", "Failed to get AI response: 500"
        )

        response = client.post("/api/chat/message", data={"content": "ladders"})

        assert response.status_code == 200
        assert escape_html(ERROR_REPLY_MESSAGE) in response.text

    def test_timeout_renders_notice(self, app, client, fake_provider):
        async def slow_complete(*args, **kwargs):
            await asyncio.sleep(1)

        app.state.config = {"ai": {"response_timeout": 0.05}}
        fake_provider.complete = AsyncMock(side_effect=slow_complete)

        response = client.post("/api/chat/message", data={"content": "ladders"})

        assert response.status_code == 200
        assert escape_html(TIMEOUT_MESSAGE) in response.text

    def test_ai_html_is_escaped(self, client, fake_provider):
        fake_provider.complete.return_value.content = "<script>alert(1)</script>"

        response = client.post("/api/chat/message", data={"content": "x"})

        assert "<script>" not in response.text


# =============================================================================
# POST /api/chat/category
# =============================================================================


class TestSelectCategory:
    """카테고리 선택."""

    def test_known_category(self, client):
        response = client.post("/api/chat/category", data={"category": "vehicles"})

        assert response.status_code == 200
        assert (
            "I&#x27;ll help you with Vehicles &amp; Equipment related questions."
            in response.text
        )
        assert 'value="vehicles"' in response.text

    def test_unknown_category(self, client):
        response = client.post("/api/chat/category", data={"category": "welding"})

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "UNKNOWN_CATEGORY"


# =============================================================================
# POST /api/chat/render
# =============================================================================


class TestRenderBlocks:
    """텍스트 → Block JSON."""

    def test_blocks_json(self, client):
        response = client.post(
            "/api/chat/render", json={"content": "---\n\n1. First\n2. Second"}
        )

        assert response.status_code == 200
        blocks = response.json()["blocks"]
        assert [b["type"] for b in blocks] == ["separator", "numbered_list"]
        assert blocks[1]["items"][1]["index"] == 2

    def test_content_must_be_string(self, client):
        response = client.post("/api/chat/render", json={"content": 3})

        assert response.status_code == 400
