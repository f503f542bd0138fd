"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uvicorn src.app.main:app --reload
- 프로덕션: uvicorn src.app.main:app
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import httpx
import yaml
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from src.app.dependencies import build_provider
from src.app.providers import TokenCache

# Routes
from src.app.routes import chat, rfi, safety
from src.domain.constants import DEFAULT_REQUEST_TIMEOUT

logger = logging.getLogger(__name__)

# .env (AUTODESK_CLIENT_ID / AUTODESK_CLIENT_SECRET)
load_dotenv()

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        # 프로젝트 루트의 default.yaml
        config_path = Path(__file__).parent.parent.parent / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] | None = yaml.safe_load(f)
        return data or {}


def setup_logging(config: dict) -> None:
    """루트 로거 설정 (logging.level, 기본 INFO)."""
    level_name = str((config.get("logging", {}) or {}).get("level", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: 설정 로드, 토큰 캐시 + 공유 HTTP 클라이언트 + Provider 생성
    종료 시: HTTP 클라이언트 종료
    """
    # Startup
    config = load_config()
    setup_logging(config)
    timeout = float((config.get("ai", {}) or {}).get("request_timeout", DEFAULT_REQUEST_TIMEOUT))

    app.state.config = config
    app.state.token_cache = TokenCache()
    app.state.http_client = httpx.AsyncClient(timeout=timeout)
    app.state.provider = build_provider(
        config, app.state.token_cache, http_client=app.state.http_client
    )
    logger.info("Construction Safety Assistant started")

    yield

    # Shutdown
    await app.state.http_client.aclose()


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="Construction Safety Assistant",
    description="건설 현장 안전 상담 채팅 + 사진 점검 + RFI 작성",
    version="0.1.0",
    lifespan=lifespan,
)

# Static files (CSS)
static_dir = Path(__file__).parent / "static"
if static_dir.exists():
    app.mount("/static", StaticFiles(directory=static_dir), name="static")


# =============================================================================
# Routes
# =============================================================================

# 페이지 라우트 (HTML)
app.include_router(chat.router, prefix="", tags=["Chat"])

# API 라우트
app.include_router(chat.api_router, prefix="/api/chat", tags=["Chat API"])
app.include_router(safety.api_router, prefix="/api", tags=["Safety API"])
app.include_router(rfi.api_router, prefix="/api", tags=["RFI API"])


# =============================================================================
# Root Endpoints
# =============================================================================


@app.get("/")
async def root() -> dict[str, Any]:
    """서비스 안내."""
    return {
        "message": "Construction Safety Assistant",
        "endpoints": {
            "chat": "/chat",
            "safety": "/api/generate-safety-response",
            "image": "/api/analyze-image",
            "rfi": "/api/generate-rfi",
            "pdf": "/api/generate-pdf",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
