"""
AI Provider 추상 인터페이스.

역할:
- 메시지 목록(+첨부) → 모델 응답 텍스트
- 응답 메타데이터(model_id, response_id, 토큰 수) 기록

Provider 추상화로 게이트웨이/모델 교체 가능.
모델명은 config만 SSOT.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

# =============================================================================
# Request / Result Data Classes
# =============================================================================


@dataclass
class ChatMessage:
    """
    모델에 보내는 메시지 1개.

    role: "system" | "user" | "file"
    role="file"이면 content는 첨부 ID.
    """
    role: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class Attachment:
    """요청 첨부 파일 (base64 데이터)."""
    id: str
    mime: str
    data: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "mime": self.mime, "data": self.data}


@dataclass
class AICompletion:
    """
    모델 응답.

    게이트웨이가 메타데이터를 누락하면 기본값("unknown", 0)으로 채운다.
    """
    content: str
    model_id: str = "unknown"
    response_id: str = "unknown"
    output_tokens: int = 0
    prompt_tokens: int = 0
    total_tokens: int = 0
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "AICompletion":
        return cls(
            content=str(data.get("content") or ""),
            model_id=data.get("modelId") or "unknown",
            response_id=data.get("responseId") or "unknown",
            output_tokens=data.get("outputTokens") or 0,
            prompt_tokens=data.get("promptTokens") or 0,
            total_tokens=data.get("totalTokens") or 0,
            raw=data,
        )

    def token_usage(self) -> dict[str, int]:
        return {
            "output": self.output_tokens,
            "prompt": self.prompt_tokens,
            "total": self.total_tokens,
        }


# =============================================================================
# Provider Exceptions
# =============================================================================

class ProviderError(Exception):
    """Provider 관련 에러."""

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")


class AuthError(ProviderError):
    """토큰 발급 관련 에러."""
    pass


class CompletionError(ProviderError):
    """모델 호출 관련 에러."""
    pass


# =============================================================================
# Abstract Provider
# =============================================================================

class LLMProvider(ABC):
    """
    LLM Provider 추상 인터페이스.

    역할: 메시지 전달 + 응답 텍스트 반환 (포맷 해석은 render 계층)
    """

    @abstractmethod
    async def complete(
        self,
        messages: list[ChatMessage],
        attachments: list[Attachment] | None = None,
        custom_fields: dict[str, Any] | None = None,
    ) -> AICompletion:
        """
        모델 호출.

        Args:
            messages: system/user/file 메시지 목록
            attachments: 첨부 파일 (이미지 분석 등)
            custom_fields: 모델별 추가 옵션 (예: stop_sequences)

        Returns:
            AICompletion

        Raises:
            AuthError: 토큰 발급 실패
            CompletionError: 호출 실패 또는 빈 응답
        """
        ...
