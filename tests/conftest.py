"""
Pytest fixtures for the safety assistant tests.

테스트 구성:
- 정상 케이스, 입력 누락 케이스, 게이트웨이 실패 케이스 분리
- 실제 게이트웨이 호출 없음 (fake provider / httpx.MockTransport)
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import yaml

from src.app.providers.base import AICompletion, LLMProvider

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config_path(project_root: Path) -> Path:
    """default.yaml 경로."""
    return project_root / "default.yaml"


@pytest.fixture
def default_config(default_config_path: Path) -> dict:
    """기본 설정 로드."""
    with open(default_config_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


# =============================================================================
# AI Response Fixtures
# =============================================================================


SAMPLE_SAFETY_MARKDOWN = """> Hard hats and high-visibility vests are mandatory on site.

### Required PPE

- Hard hat rated to `ANSI Z89.1`
- **High-visibility** vest

1. Inspect PPE before each shift
2. Log defects in `BIM 360 Field`

---

| Item | Standard |
|---|---|
| Hard hat | ANSI Z89.1 |"""


def make_completion(
    content: str = SAMPLE_SAFETY_MARKDOWN,
    model_id: str = "CLAUDE_SONET_3_7_v1",
    response_id: str = "resp_test_default",
) -> AICompletion:
    """
    AICompletion factory.

    메타데이터를 명시적으로 채워서 MagicMock 자동 속성으로 인한 오판 방지.
    """
    return AICompletion(
        content=content,
        model_id=model_id,
        response_id=response_id,
        output_tokens=120,
        prompt_tokens=80,
        total_tokens=200,
    )


@pytest.fixture
def sample_safety_markdown() -> str:
    return SAMPLE_SAFETY_MARKDOWN


@pytest.fixture
def fake_provider() -> MagicMock:
    """complete()가 고정 응답을 돌려주는 Provider mock."""
    provider = MagicMock(spec=LLMProvider)
    provider.complete = AsyncMock(return_value=make_completion())
    return provider


# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture
def test_config() -> dict:
    """테스트용 설정 (재시도 지연 최소화)."""
    return {
        "ai": {
            "auth_url": "https://auth.test/token",
            "service_url": "https://ai.test/invoke",
            "target_model": "TEST_MODEL",
            "scope": "data:read",
            "request_timeout": 5,
            "default_token_ttl": 3600,
            "max_retries": 2,
            "retry_initial_delay": 0.01,
            "retry_max_delay": 0.02,
        },
        "logging": {"level": "DEBUG"},
    }
