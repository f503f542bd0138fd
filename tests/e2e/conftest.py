"""
E2E 테스트용 앱 클라이언트.

실제 lifespan(설정 로드, TokenCache, 공유 httpx 클라이언트)을 실행한 뒤
app.state.provider만 fake로 교체한다. 게이트웨이 네트워크 호출 없음.
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from src.app.main import app


@pytest.fixture
def client(fake_provider) -> Generator[TestClient, None, None]:
    """FastAPI TestClient (provider 교체)."""
    with TestClient(app) as client:
        original = app.state.provider
        app.state.provider = fake_provider
        yield client
        app.state.provider = original
