"""
Domain Constants: 애플리케이션 전역 상수.

안전 카테고리, AI 게이트웨이 기본값, 출력 파일명 정책 등.
"""

from dataclasses import dataclass

# =============================================================================
# Safety Categories (사이드바 카테고리)
# =============================================================================


@dataclass(frozen=True)
class SafetyCategory:
    """안전 카테고리 정의."""
    id: str
    name: str
    icon: str
    color: str
    bg_color: str


SAFETY_CATEGORIES: tuple[SafetyCategory, ...] = (
    SafetyCategory("ppe", "Personal Protective Equipment", "🥽", "#3182ce", "#ebf8ff"),
    SafetyCategory("machinery", "Machinery & Tools", "⚙️", "#dd6b20", "#fffaf0"),
    SafetyCategory("vehicles", "Vehicles & Equipment", "🚛", "#38a169", "#f0fff4"),
    SafetyCategory("emergency", "Emergency Response", "🚨", "#e53e3e", "#fff5f5"),
    SafetyCategory("protocols", "Safety Protocols", "📋", "#805ad5", "#faf5ff"),
    SafetyCategory("hazards", "Hazard Identification", "⚠️", "#d69e2e", "#fffff0"),
)

SAFETY_CATEGORIES_BY_ID = {c.id: c for c in SAFETY_CATEGORIES}

# 카테고리 미선택 시 응답 details.category 값
GENERAL_CATEGORY = "general"

QUICK_TIPS = (
    "Always wear proper PPE",
    "Check equipment before use",
    "Report unsafe conditions",
)

GREETING_MESSAGE = (
    "Hello! I'm your Construction Safety Assistant. How can I help you today? "
    "You can ask me about PPE requirements, machinery safety, emergency "
    "procedures, and more."
)

ERROR_REPLY_MESSAGE = (
    "Sorry, I encountered an error while retrieving safety information. "
    "Please try again."
)


def get_category(category_id: str | None) -> SafetyCategory | None:
    """카테고리 ID로 조회 (없으면 None)."""
    if not category_id:
        return None
    return SAFETY_CATEGORIES_BY_ID.get(category_id)


# =============================================================================
# AI Gateway Defaults (default.yaml에서 오버라이드 가능)
# =============================================================================

DEFAULT_AUTH_URL = "https://developer.api.autodesk.com/authentication/v2/token"
DEFAULT_AI_SERVICE_URL = "https://developer.api.autodesk.com/aiservice/model/invoke"
DEFAULT_TARGET_MODEL = "CLAUDE_SONET_3_7_v1"
DEFAULT_SCOPE = "data:read data:write"
DEFAULT_TOKEN_TTL = 3600  # 초, expires_in 누락 시
DEFAULT_REQUEST_TIMEOUT = 60.0
DEFAULT_MAX_RETRIES = 2

# 이미지 분석 요청의 첨부 ID
SAFETY_IMAGE_ATTACHMENT_ID = "safety_image"

# 클라이언트에 알려주는 마크다운 요소 목록
SUPPORTED_ELEMENTS = (
    "summary-blockquote",
    "headers",
    "bullet-lists",
    "numbered-lists",
    "code-blocks",
    "inline-code",
    "bold",
    "tables",
    "horizontal-rules",
)

# =============================================================================
# RFI Defaults
# =============================================================================

RFI_DEFAULT_PROJECT_NAME = "Construction Project"
RFI_DEFAULT_DESCRIPTION = "Please provide clarification on the above query."
RFI_PRIORITY_URGENT = "Urgent"


def rfi_pdf_filename(project_name: str, date: str) -> str:
    """RFI PDF 다운로드 파일명."""
    return f"RFI-{project_name}-{date}.pdf"
