"""
Autodesk AI 게이트웨이 Provider.

흐름:
1. OAuth client-credentials로 access token 발급 (TokenCache에 만료시각과 함께 보관)
2. Bearer 토큰으로 model/invoke 호출 (targetModel은 config SSOT)

TokenCache는 앱 인스턴스당 1개 (app.state.token_cache), 모듈 전역 싱글턴 없음.
"""

import base64
import logging
import os
import time
from collections.abc import AsyncIterator, Callable, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import httpx

from src.domain.constants import (
    DEFAULT_AI_SERVICE_URL,
    DEFAULT_AUTH_URL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SCOPE,
    DEFAULT_TARGET_MODEL,
    DEFAULT_TOKEN_TTL,
)
from src.domain.errors import ErrorCodes
from src.utils.retry import RetryableError, RetryPolicy, retry_with_exponential_backoff

from .base import (
    AICompletion,
    Attachment,
    AuthError,
    ChatMessage,
    CompletionError,
    LLMProvider,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Settings
# =============================================================================


@dataclass(frozen=True)
class AutodeskSettings:
    """
    게이트웨이 접속 설정.

    우선순위: 환경변수 > default.yaml(ai.*) > 코드 기본값
    자격증명은 환경변수(.env)로만 받는다.
    """
    client_id: str | None = None
    client_secret: str | None = None
    auth_url: str = DEFAULT_AUTH_URL
    service_url: str = DEFAULT_AI_SERVICE_URL
    target_model: str = DEFAULT_TARGET_MODEL
    scope: str = DEFAULT_SCOPE
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    default_token_ttl: int = DEFAULT_TOKEN_TTL

    @classmethod
    def from_config(
        cls,
        config: dict[str, Any],
        env: Mapping[str, str] | None = None,
    ) -> "AutodeskSettings":
        env = os.environ if env is None else env
        ai = config.get("ai", {}) or {}
        return cls(
            client_id=env.get("AUTODESK_CLIENT_ID") or None,
            client_secret=env.get("AUTODESK_CLIENT_SECRET") or None,
            auth_url=env.get("AUTODESK_AUTH_URL") or ai.get("auth_url", DEFAULT_AUTH_URL),
            service_url=(
                env.get("AUTODESK_AI_SERVICE_URL")
                or ai.get("service_url", DEFAULT_AI_SERVICE_URL)
            ),
            target_model=ai.get("target_model", DEFAULT_TARGET_MODEL),
            scope=ai.get("scope", DEFAULT_SCOPE),
            request_timeout=float(ai.get("request_timeout", DEFAULT_REQUEST_TIMEOUT)),
            default_token_ttl=int(ai.get("default_token_ttl", DEFAULT_TOKEN_TTL)),
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)


# =============================================================================
# Token Cache
# =============================================================================


@dataclass
class TokenCache:
    """
    Access token + 만료 시각 (epoch 초).

    호출자가 소유하고 AutodeskAuthClient에 전달한다.
    """
    token: str | None = None
    expires_at: float | None = None

    def is_valid(self, now: float) -> bool:
        return bool(self.token) and self.expires_at is not None and now < self.expires_at

    def store(self, token: str, ttl: float, now: float) -> None:
        self.token = token
        self.expires_at = now + ttl

    def clear(self) -> None:
        self.token = None
        self.expires_at = None


@asynccontextmanager
async def _open_client(
    client: httpx.AsyncClient | None,
    timeout: float,
) -> AsyncIterator[httpx.AsyncClient]:
    """주입된 클라이언트가 있으면 재사용, 없으면 요청 단위로 생성."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=timeout) as new_client:
        yield new_client


# =============================================================================
# Auth Client
# =============================================================================


class AutodeskAuthClient:
    """
    OAuth client-credentials 토큰 발급기.

    Usage:
        auth = AutodeskAuthClient(settings, TokenCache())
        token = await auth.get_access_token()
    """

    def __init__(
        self,
        settings: AutodeskSettings,
        cache: TokenCache,
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        self.cache = cache
        self._http_client = http_client
        self._clock = clock

    def _basic_auth_header(self) -> str:
        raw = f"{self.settings.client_id}:{self.settings.client_secret}"
        return "Basic " + base64.b64encode(raw.encode()).decode()

    def _parse_ttl(self, expires_in: Any) -> float:
        """expires_in → 초 (누락/숫자 아님/0 이하면 default_token_ttl)."""
        try:
            ttl = float(expires_in)
        except (TypeError, ValueError):
            if expires_in is not None:
                logger.warning(f"Ignoring non-numeric expires_in: {expires_in!r}")
            return float(self.settings.default_token_ttl)
        return ttl if ttl > 0 else float(self.settings.default_token_ttl)

    async def get_access_token(self) -> str:
        """
        유효한 access token 반환 (캐시 우선).

        Raises:
            AuthError: CREDENTIALS_MISSING, AUTH_FAILED, INVALID_TOKEN
        """
        now = self._clock()
        if self.cache.is_valid(now) and self.cache.token:
            return self.cache.token

        if not self.settings.has_credentials:
            raise AuthError(
                ErrorCodes.CREDENTIALS_MISSING,
                "Autodesk credentials not configured. "
                "Set AUTODESK_CLIENT_ID and AUTODESK_CLIENT_SECRET.",
            )

        try:
            async with _open_client(
                self._http_client, self.settings.request_timeout
            ) as client:
                response = await client.post(
                    self.settings.auth_url,
                    headers={
                        "Authorization": self._basic_auth_header(),
                        "Accept": "application/json",
                    },
                    data={
                        "grant_type": "client_credentials",
                        "scope": self.settings.scope,
                    },
                )
        except httpx.HTTPError as e:
            logger.error(f"Token request failed: {e}")
            raise AuthError(ErrorCodes.AUTH_FAILED, "Authentication failed") from e

        if response.is_error:
            logger.error(
                f"Auth response error: status={response.status_code} "
                f"body={response.text[:200]!r}"
            )
            raise AuthError(
                ErrorCodes.AUTH_FAILED,
                f"Failed to get access token: {response.status_code}",
                status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise AuthError(
                ErrorCodes.INVALID_TOKEN, "Invalid access token received"
            ) from e

        token = data.get("access_token") if isinstance(data, dict) else None
        if not token or not isinstance(token, str):
            raise AuthError(ErrorCodes.INVALID_TOKEN, "Invalid access token received")

        ttl = self._parse_ttl(data.get("expires_in"))
        self.cache.store(token, ttl, now)
        logger.info(f"Access token issued (expires_in={ttl}s)")
        return token


# =============================================================================
# AI Provider
# =============================================================================


def build_invoke_body(
    target_model: str,
    messages: list[ChatMessage],
    attachments: list[Attachment] | None = None,
    custom_fields: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """model/invoke 요청 본문 구성."""
    parameters: dict[str, Any] = {"messages": [m.to_dict() for m in messages]}
    if custom_fields:
        parameters["customFields"] = custom_fields

    body: dict[str, Any] = {
        "requests": [{"targetModel": target_model, "parameters": parameters}],
    }
    if attachments:
        body["attachments"] = [a.to_dict() for a in attachments]
    return body


class AutodeskAIProvider(LLMProvider):
    """
    Autodesk AI 서비스 Provider.

    Usage:
        provider = AutodeskAIProvider(settings, auth)
        completion = await provider.complete([ChatMessage("user", "...")])
    """

    def __init__(
        self,
        settings: AutodeskSettings,
        auth: AutodeskAuthClient,
        http_client: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy | None = None,
    ):
        self.settings = settings
        self.auth = auth
        self._http_client = http_client
        self.retry_policy = retry_policy or RetryPolicy()

    async def complete(
        self,
        messages: list[ChatMessage],
        attachments: list[Attachment] | None = None,
        custom_fields: dict[str, Any] | None = None,
    ) -> AICompletion:
        """
        모델 호출.

        자동 재시도:
        - 연결 오류, 429, 5xx → 재시도 (지수 백오프)
        - 그 외 4xx → 즉시 CompletionError (401이면 토큰 캐시 폐기)
        """
        token = await self.auth.get_access_token()
        body = build_invoke_body(
            self.settings.target_model, messages, attachments, custom_fields
        )
        headers = {"Authorization": f"Bearer {token}"}

        async with _open_client(
            self._http_client, self.settings.request_timeout
        ) as client:

            async def _invoke() -> httpx.Response:
                response = await client.post(
                    self.settings.service_url, headers=headers, json=body
                )
                if response.status_code == 429 or response.status_code >= 500:
                    raise RetryableError(
                        f"AI service returned {response.status_code}",
                        status_code=response.status_code,
                    )
                return response

            try:
                response = await retry_with_exponential_backoff(
                    _invoke,
                    policy=self.retry_policy,
                    exceptions=(RetryableError, httpx.TransportError),
                )
            except (RetryableError, httpx.TransportError) as e:
                raise CompletionError(
                    ErrorCodes.COMPLETION_FAILED,
                    f"AI service unavailable: {e}",
                    status=getattr(e, "status_code", None),
                ) from e

        if response.is_error:
            logger.error(
                f"AI service error: status={response.status_code} "
                f"body={response.text[:200]!r}"
            )
            if response.status_code == 401:
                self.auth.cache.clear()
            raise CompletionError(
                ErrorCodes.COMPLETION_FAILED,
                f"Failed to get AI response: {response.status_code}",
                status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise CompletionError(
                ErrorCodes.COMPLETION_FAILED, "Invalid response format from AI service"
            ) from e

        completion = AICompletion.from_response(data if isinstance(data, dict) else {})
        if not completion.content:
            raise CompletionError(
                ErrorCodes.EMPTY_RESPONSE, "No content received from AI service"
            )

        logger.info(
            f"AI completion received: model={completion.model_id} "
            f"response_id={completion.response_id} tokens={completion.total_tokens}"
        )
        return completion
