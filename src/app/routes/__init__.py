"""
FastAPI Routes.

페이지 라우트 (HTML) + API 라우트 (JSON)
"""

from . import chat, rfi, safety

__all__ = ["chat", "rfi", "safety"]
