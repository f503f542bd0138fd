"""
Error definitions for the assistant.

규칙:
- 조용한 실패 금지 → ServiceError로 명시적 실패
- 마크다운 파서는 예외를 정의하지 않음 (항상 fallback 문단으로 처리)
"""

from typing import Any


class ServiceError(Exception):
    """
    서비스 계층에서 처리를 중단해야 할 때 발생하는 에러.

    사용 예:
    - RFI 입력 누락/형식 오류
    - PDF 렌더링 실패
    - 알 수 없는 안전 카테고리

    Usage:
        raise ServiceError("RENDER_FAILED", document="rfi", error=str(e))
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Input ===
    MISSING_QUERY = "MISSING_QUERY"
    MISSING_IMAGE = "MISSING_IMAGE"
    UNKNOWN_CATEGORY = "UNKNOWN_CATEGORY"
    INVALID_RFI = "INVALID_RFI"

    # === Auth ===
    CREDENTIALS_MISSING = "CREDENTIALS_MISSING"
    AUTH_FAILED = "AUTH_FAILED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # === AI Service ===
    COMPLETION_FAILED = "COMPLETION_FAILED"
    EMPTY_RESPONSE = "EMPTY_RESPONSE"

    # === Render ===
    RENDER_FAILED = "RENDER_FAILED"
