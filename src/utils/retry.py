"""
재시도 로직 유틸리티.

AI 게이트웨이 호출의 일시적 실패(연결 오류, 5xx, 429)만 재시도한다.
인증 실패/요청 오류는 재시도하지 않고 즉시 전파.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from src.domain.constants import DEFAULT_MAX_RETRIES

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryableError(Exception):
    """재시도 가능한 에러 (예: 게이트웨이 5xx)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


@dataclass(frozen=True)
class RetryPolicy:
    """
    재시도 정책.

    default.yaml의 ai.max_retries로 max_retries 조정.
    """
    max_retries: int = DEFAULT_MAX_RETRIES
    initial_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0

    @classmethod
    def from_config(cls, ai_config: dict[str, Any]) -> "RetryPolicy":
        return cls(
            max_retries=int(ai_config.get("max_retries", cls.max_retries)),
            initial_delay=float(ai_config.get("retry_initial_delay", cls.initial_delay)),
            max_delay=float(ai_config.get("retry_max_delay", cls.max_delay)),
        )


async def retry_with_exponential_backoff(
    func: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    exceptions: tuple[type[Exception], ...] = (RetryableError,),
) -> T:
    """
    지수 백오프를 사용한 재시도.

    Args:
        func: 재시도할 비동기 함수 (인자 없음)
        policy: 재시도 정책 (None이면 기본값)
        exceptions: 재시도할 예외 타입들

    Returns:
        func의 반환값

    Raises:
        마지막 시도에서 발생한 예외
    """
    policy = policy or RetryPolicy()
    delay = policy.initial_delay

    for attempt in range(policy.max_retries + 1):
        try:
            result = await func()
            if attempt > 0:
                logger.info(
                    f"Retry succeeded on attempt {attempt + 1}/{policy.max_retries + 1}"
                )
            return result

        except exceptions as e:
            if attempt == policy.max_retries:
                logger.error(
                    f"All {policy.max_retries + 1} attempts failed. Last error: {e}"
                )
                raise

            logger.warning(
                f"Attempt {attempt + 1}/{policy.max_retries + 1} failed: {e}. "
                f"Retrying in {delay:.1f}s..."
            )

            await asyncio.sleep(delay)
            delay = min(delay * policy.exponential_base, policy.max_delay)

    # Should never reach here
    msg = "Unexpected retry logic error"
    raise RuntimeError(msg)
