"""
Application Services.

역할:
- safety: 안전 질의/현장 사진 → AI 응답
- rfi: 비정형 질의 → RFI 초안
"""

from .rfi import RfiContent, RfiService
from .safety import SafetyAnswer, SafetyAssistantService

__all__ = [
    "SafetyAssistantService",
    "SafetyAnswer",
    "RfiService",
    "RfiContent",
]
