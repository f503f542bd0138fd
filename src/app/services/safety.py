"""
Safety Assistant Service: 안전 질의/이미지 → AI 응답.

역할:
- 카테고리별 프롬프트 구성 (Autodesk 도구 중심 가이드)
- 시스템 프롬프트로 응답 마크다운 포맷 강제 (render.markdown 지원 범위와 일치)
- 현장 사진 안전 점검 리포트 요청
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from src.app.providers.base import AICompletion, Attachment, ChatMessage, LLMProvider
from src.domain.constants import (
    GENERAL_CATEGORY,
    SAFETY_IMAGE_ATTACHMENT_ID,
    SUPPORTED_ELEMENTS,
    SafetyCategory,
    get_category,
)
from src.domain.errors import ErrorCodes, ServiceError

logger = logging.getLogger(__name__)

# =============================================================================
# Prompts
# =============================================================================

BASE_CONTEXT = """Using Autodesk Construction Cloud and BIM 360 tools for safety management. Consider features like:
- BIM 360 Field safety checklists
- Construction IQ risk analysis
- Autodesk Build safety workflows
- PlanGrid safety protocols
- Autodesk Takeoff safety markups"""

CATEGORY_FOCUS = """Focus on:
1. How to use Autodesk tools to implement these safety measures
2. Specific features in Autodesk Construction Cloud for monitoring and reporting
3. BIM 360 safety checklist items and documentation
4. Integration with Autodesk Build's safety workflows
5. Best practices using Autodesk's construction management tools"""

GENERAL_FOCUS = """Focus on:
1. Relevant Autodesk tools and features for this safety concern
2. How to document and track using Autodesk Construction Cloud
3. Safety checklist implementation in BIM 360
4. Autodesk Build safety workflow recommendations
5. Integration with existing Autodesk construction management processes"""

SAFETY_SYSTEM_PROMPT = """You are an Autodesk construction safety expert. Provide guidance focused on Autodesk construction tools and platforms for safety management.

IMPORTANT FORMATTING RULES:
1. Structure your response in clear sections using markdown
2. Start with a brief summary using > blockquote
3. Use ### for main sections
4. Use - for bullet points
5. Use `code` for tool names and technical terms
6. Use **bold** for emphasis
7. Use numbered lists for steps
8. Add a horizontal rule (---) between major sections
9. Keep paragraphs short and readable
10. Use tables where appropriate using | for columns
11. Separate every block with a blank line

Example Format:
> Brief summary of the response

### Main Section

- Key point using `tool name`
- Another point with **emphasis**

1. First step
2. Second step

---

### Next Section
etc."""

IMAGE_ANALYSIS_SYSTEM_PROMPT = """You are a construction safety expert. Analyze the image for safety compliance and provide a detailed report with the following structure:

1. Personal Protective Equipment (PPE)
- Compliant Items
- Critical Violations
- Recommendations

2. Equipment and Machinery Safety
- Safe Practices
- Safety Concerns
- Recommendations

3. Work Environment Safety
- Safe Conditions
- Hazardous Conditions
- Recommendations

4. Site Organization
- Positive Observations
- Areas for Improvement
- Recommendations

5. Emergency Preparedness
- Available Safety Measures
- Missing Safety Elements
- Recommendations

6. Priority Actions Required
- Immediate Actions (24 Hours)
- Short-term Actions (1 Week)
- Long-term Improvements (1 Month)

7. Training Requirements
- Required Training
- Recommended Training"""

IMAGE_ANALYSIS_USER_PROMPT = (
    "Analyze this construction site image for safety compliance and provide "
    "a detailed report following the exact structure specified."
)

IMAGE_STOP_SEQUENCES = ["color"]


def build_safety_prompt(query: str, category: SafetyCategory | None) -> str:
    """카테고리 유무에 따라 사용자 프롬프트 구성."""
    if category is not None:
        return (
            f"{BASE_CONTEXT}\n\n"
            "As a construction safety expert using Autodesk solutions, provide "
            f"detailed guidance about {category.name} regarding: {query}.\n"
            f"{CATEGORY_FOCUS}"
        )
    return (
        f"{BASE_CONTEXT}\n\n"
        "As a construction safety expert using Autodesk solutions, provide "
        f"detailed guidance about: {query}.\n"
        f"{GENERAL_FOCUS}"
    )


def strip_data_url(image: str) -> str:
    """'data:image/jpeg;base64,....' → base64 본문만."""
    if image.startswith("data:") and "," in image:
        return image.split(",", 1)[1]
    return image


# =============================================================================
# Result
# =============================================================================


@dataclass
class SafetyAnswer:
    """안전 질의 응답 (마크다운 본문 + 메타데이터)."""
    content: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_response(self) -> dict[str, Any]:
        return {
            "response": self.content,
            "details": self.details,
            "markdown": True,
        }


# =============================================================================
# Service
# =============================================================================


class SafetyAssistantService:
    """
    안전 상담 서비스.

    Usage:
        service = SafetyAssistantService(provider)
        answer = await service.answer("scaffold inspection", category="hazards")
    """

    def __init__(self, provider: LLMProvider):
        self.provider = provider

    def resolve_category(self, category_id: str | None) -> SafetyCategory | None:
        """
        카테고리 ID 검증.

        Raises:
            ServiceError: UNKNOWN_CATEGORY
        """
        if not category_id:
            return None
        category = get_category(category_id)
        if category is None:
            raise ServiceError(ErrorCodes.UNKNOWN_CATEGORY, category=category_id)
        return category

    async def answer(self, query: str, category_id: str | None = None) -> SafetyAnswer:
        """
        안전 질의 응답 생성.

        Args:
            query: 사용자 질문
            category_id: 선택된 카테고리 (None이면 일반 질의)

        Returns:
            SafetyAnswer

        Raises:
            ServiceError: MISSING_QUERY, UNKNOWN_CATEGORY
            ProviderError: 토큰/모델 호출 실패
        """
        if not query or not query.strip():
            raise ServiceError(ErrorCodes.MISSING_QUERY)

        category = self.resolve_category(category_id)
        messages = [
            ChatMessage("system", SAFETY_SYSTEM_PROMPT),
            ChatMessage("user", build_safety_prompt(query, category)),
        ]

        completion = await self.provider.complete(messages)
        logger.info(
            f"Safety answer generated: category={category_id or GENERAL_CATEGORY} "
            f"length={len(completion.content)}"
        )

        return SafetyAnswer(
            content=completion.content,
            details=self._build_details(completion, query, category_id),
        )

    def _build_details(
        self,
        completion: AICompletion,
        query: str,
        category_id: str | None,
    ) -> dict[str, Any]:
        return {
            "model": completion.model_id,
            "responseId": completion.response_id,
            "tokens": completion.token_usage(),
            "category": category_id or GENERAL_CATEGORY,
            "query": query,
            "timestamp": datetime.now(UTC).isoformat(),
            "format": {
                "markdown": True,
                "supportedElements": list(SUPPORTED_ELEMENTS),
            },
        }

    async def analyze_image(self, image_b64: str) -> AICompletion:
        """
        현장 사진 안전 점검.

        Args:
            image_b64: JPEG base64 (data URL 접두사 허용)

        Raises:
            ServiceError: MISSING_IMAGE
            ProviderError: 토큰/모델 호출 실패
        """
        if not image_b64:
            raise ServiceError(ErrorCodes.MISSING_IMAGE)

        messages = [
            ChatMessage("system", IMAGE_ANALYSIS_SYSTEM_PROMPT),
            ChatMessage("file", SAFETY_IMAGE_ATTACHMENT_ID),
            ChatMessage("user", IMAGE_ANALYSIS_USER_PROMPT),
        ]
        attachments = [
            Attachment(
                id=SAFETY_IMAGE_ATTACHMENT_ID,
                mime="image/jpeg",
                data=strip_data_url(image_b64),
            )
        ]
        return await self.provider.complete(
            messages,
            attachments=attachments,
            custom_fields={"stop_sequences": IMAGE_STOP_SEQUENCES},
        )
