"""
AI Provider Abstraction.

게이트웨이/모델 교체 가능하게 설계.
모델명은 config만 SSOT.
"""

from .autodesk import (
    AutodeskAIProvider,
    AutodeskAuthClient,
    AutodeskSettings,
    TokenCache,
)
from .base import (
    AICompletion,
    Attachment,
    AuthError,
    ChatMessage,
    CompletionError,
    LLMProvider,
    ProviderError,
)

__all__ = [
    "LLMProvider",
    "AICompletion",
    "Attachment",
    "ChatMessage",
    "ProviderError",
    "AuthError",
    "CompletionError",
    "AutodeskAIProvider",
    "AutodeskAuthClient",
    "AutodeskSettings",
    "TokenCache",
]
