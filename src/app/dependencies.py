"""
라우트 공용 의존성.

Provider/TokenCache는 lifespan에서 app.state에 1회 생성.
테스트는 app.state.provider를 fake로 교체해서 사용.
"""

import httpx
from fastapi import Request

from src.app.providers import (
    AutodeskAIProvider,
    AutodeskAuthClient,
    AutodeskSettings,
    LLMProvider,
    TokenCache,
)
from src.app.services import RfiService, SafetyAssistantService
from src.utils.retry import RetryPolicy


def build_provider(
    config: dict,
    token_cache: TokenCache,
    http_client: httpx.AsyncClient | None = None,
) -> AutodeskAIProvider:
    """config + 환경변수 → AutodeskAIProvider."""
    settings = AutodeskSettings.from_config(config)
    auth = AutodeskAuthClient(settings, token_cache, http_client=http_client)
    return AutodeskAIProvider(
        settings,
        auth,
        http_client=http_client,
        retry_policy=RetryPolicy.from_config(config.get("ai", {}) or {}),
    )


def get_provider(request: Request) -> LLMProvider:
    """앱 인스턴스의 Provider (없으면 생성 후 캐시)."""
    state = request.app.state
    provider: LLMProvider | None = getattr(state, "provider", None)
    if provider is None:
        if getattr(state, "token_cache", None) is None:
            state.token_cache = TokenCache()
        provider = build_provider(getattr(state, "config", {}) or {}, state.token_cache)
        state.provider = provider
    return provider


def get_safety_service(request: Request) -> SafetyAssistantService:
    return SafetyAssistantService(get_provider(request))


def get_rfi_service(request: Request) -> RfiService:
    return RfiService(get_provider(request))


def get_response_timeout(request: Request, default: float = 90.0) -> float:
    """AI 응답 대기 상한 (ai.response_timeout)."""
    config = getattr(request.app.state, "config", {}) or {}
    return float((config.get("ai", {}) or {}).get("response_timeout", default))
