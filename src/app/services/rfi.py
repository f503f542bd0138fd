"""
RFI Service: 비정형 질의 → RFI 초안 (projectName, subject, description).

LLM은 초안 제안만 한다.
응답 파싱 실패 시 예외 대신 기본값 초안을 반환 (사용자가 폼에서 수정).
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from src.app.providers.base import ChatMessage, LLMProvider
from src.domain.constants import RFI_DEFAULT_DESCRIPTION, RFI_DEFAULT_PROJECT_NAME
from src.domain.errors import ErrorCodes, ServiceError

logger = logging.getLogger(__name__)

RFI_SYSTEM_PROMPT = (
    "You are a professional construction project manager helping to draft RFIs "
    "(Request for Information). Convert informal queries into structured RFI "
    "content. Extract or infer the project name, subject, and description from "
    "the query. Keep the response in JSON format with the following fields: "
    "projectName, subject, description."
)


@dataclass
class RfiContent:
    """RFI 초안."""
    project_name: str
    subject: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {
            "projectName": self.project_name,
            "subject": self.subject,
            "description": self.description,
        }


def _extract_json(text: str) -> dict[str, Any]:
    """
    응답에서 JSON 객체 추출.

    ```json ... ``` 블록 우선, 없으면 첫 '{' ~ 마지막 '}'.
    """
    if "```json" in text:
        start = text.find("```json") + 7
        end = text.find("```", start)
        json_str = text[start:end].strip()
    elif "{" in text:
        start = text.find("{")
        end = text.rfind("}") + 1
        json_str = text[start:end]
    else:
        raise ValueError("No JSON found in response")

    data = json.loads(json_str)
    if not isinstance(data, dict):
        raise ValueError("RFI response is not a JSON object")
    return data


def parse_rfi_content(text: str, query: str) -> RfiContent:
    """
    AI 응답 → RfiContent (누락 필드는 기본값).

    파싱 자체가 실패하면 전체 기본값 초안.
    """
    try:
        data = _extract_json(text)
    except (json.JSONDecodeError, ValueError) as e:
        logger.warning(f"Failed to parse RFI response: {e}")
        data = {}

    return RfiContent(
        project_name=str(data.get("projectName") or RFI_DEFAULT_PROJECT_NAME),
        subject=str(data.get("subject") or query),
        description=str(data.get("description") or RFI_DEFAULT_DESCRIPTION),
    )


class RfiService:
    """
    RFI 초안 생성 서비스.

    Usage:
        service = RfiService(provider)
        content = await service.draft("level 3 slab rebar spacing conflicts")
    """

    def __init__(self, provider: LLMProvider):
        self.provider = provider

    async def draft(self, query: str) -> RfiContent:
        """
        Raises:
            ServiceError: MISSING_QUERY
            ProviderError: 토큰/모델 호출 실패
        """
        if not query or not query.strip():
            raise ServiceError(ErrorCodes.MISSING_QUERY)

        completion = await self.provider.complete(
            [
                ChatMessage("system", RFI_SYSTEM_PROMPT),
                ChatMessage("user", query),
            ]
        )
        return parse_rfi_content(completion.content, query)
