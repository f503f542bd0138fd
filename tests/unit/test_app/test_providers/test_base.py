"""
test_base.py - Provider 기본 클래스 테스트

검증:
- AICompletion: 게이트웨이 메타데이터 누락 시 기본값
- ProviderError 계층
- LLMProvider 추상 인터페이스
"""

import pytest

from src.app.providers.base import (
    AICompletion,
    Attachment,
    AuthError,
    ChatMessage,
    CompletionError,
    LLMProvider,
    ProviderError,
)

# =============================================================================
# Request Data Classes
# =============================================================================


class TestRequestData:
    """요청 직렬화."""

    def test_chat_message_to_dict(self):
        assert ChatMessage("system", "rules").to_dict() == {
            "role": "system",
            "content": "rules",
        }

    def test_attachment_to_dict(self):
        assert Attachment("img", "image/jpeg", "AAAA").to_dict() == {
            "id": "img",
            "mime": "image/jpeg",
            "data": "AAAA",
        }


# =============================================================================
# AICompletion
# =============================================================================


class TestAICompletion:
    """AICompletion 데이터클래스 테스트."""

    def test_from_response(self):
        completion = AICompletion.from_response(
            {
                "content": "answer",
                "modelId": "CLAUDE_SONET_3_7_v1",
                "responseId": "resp-9",
                "outputTokens": 5,
                "promptTokens": 7,
                "totalTokens": 12,
            }
        )

        assert completion.content == "answer"
        assert completion.model_id == "CLAUDE_SONET_3_7_v1"
        assert completion.response_id == "resp-9"
        assert completion.token_usage() == {"output": 5, "prompt": 7, "total": 12}

    def test_missing_metadata_defaults(self):
        """메타데이터 누락 → "unknown" / 0."""
        completion = AICompletion.from_response({"content": "x"})

        assert completion.model_id == "unknown"
        assert completion.response_id == "unknown"
        assert completion.token_usage() == {"output": 0, "prompt": 0, "total": 0}

    def test_missing_content_is_empty(self):
        assert AICompletion.from_response({}).content == ""


# =============================================================================
# Exceptions
# =============================================================================


class TestProviderErrors:
    """ProviderError 계층."""

    def test_error_fields(self):
        error = CompletionError("COMPLETION_FAILED", "Failed to get AI response: 400", status=400)

        assert error.code == "COMPLETION_FAILED"
        assert error.message == "Failed to get AI response: 400"
        assert error.context == {"status": 400}
        assert str(error) == "[COMPLETION_FAILED] Failed to get AI response: 400"

    def test_hierarchy(self):
        assert issubclass(AuthError, ProviderError)
        assert issubclass(CompletionError, ProviderError)


# =============================================================================
# LLMProvider
# =============================================================================


class TestLLMProvider:
    """추상 인터페이스."""

    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            LLMProvider()

    @pytest.mark.asyncio
    async def test_subclass_complete(self):
        class EchoProvider(LLMProvider):
            async def complete(self, messages, attachments=None, custom_fields=None):
                return AICompletion(content=messages[-1].content)

        completion = await EchoProvider().complete([ChatMessage("user", "hello")])

        assert completion.content == "hello"
