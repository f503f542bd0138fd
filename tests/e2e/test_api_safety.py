"""
test_api_safety.py - Safety API E2E 테스트

엔드포인트:
- POST /api/generate-safety-response
- POST /api/analyze-image
"""

import pytest

from src.app.providers.base import AICompletion, AuthError, CompletionError

pytestmark = pytest.mark.e2e


class TestGenerateSafetyResponse:
    """안전 질의 응답 API."""

    def test_success(self, client, sample_safety_markdown):
        response = client.post(
            "/api/generate-safety-response",
            json={"query": "PPE for rebar tying", "category": "ppe"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["response"] == sample_safety_markdown
        assert body["markdown"] is True
        assert body["details"]["category"] == "ppe"
        assert body["details"]["tokens"]["total"] == 200
        assert "tables" in body["details"]["format"]["supportedElements"]

    def test_without_category(self, client):
        response = client.post("/api/generate-safety-response", json={"query": "noise"})

        assert response.json()["details"]["category"] == "general"

    def test_missing_query(self, client, fake_provider):
        response = client.post("/api/generate-safety-response", json={"category": "ppe"})

        assert response.status_code == 400
        assert response.json()["details"]["code"] == "MISSING_QUERY"
        fake_provider.complete.assert_not_awaited()

    def test_unknown_category(self, client):
        response = client.post(
            "/api/generate-safety-response",
            json={"query": "q", "category": "welding"},
        )

        assert response.status_code == 400
        assert response.json()["details"]["code"] == "UNKNOWN_CATEGORY"

    def test_gateway_failure(self, client, fake_provider):
        fake_provider.complete.side_effect = AuthError(
            "AUTH_FAILED", "Failed to get access token: 401"
        )

        response = client.post("/api/generate-safety-response", json={"query": "q"})

        assert response.status_code == 500
        assert response.json() == {
            "error": "Error generating safety response",
            "details": "Failed to get access token: 401",
        }


class TestAnalyzeImage:
    """현장 사진 점검 API."""

    def test_success(self, client, fake_provider):
        fake_provider.complete.return_value = AICompletion(
            content="1. Personal Protective Equipment (PPE)\n- Compliant Items"
        )

        response = client.post("/api/analyze-image", json={"image": "QUJD"})

        assert response.status_code == 200
        assert response.json()["content"].startswith("1. Personal Protective")
        attachments = fake_provider.complete.await_args.kwargs["attachments"]
        assert attachments[0].data == "QUJD"

    def test_missing_image(self, client, fake_provider):
        response = client.post("/api/analyze-image", json={})

        assert response.status_code == 500
        assert response.json()["content"].startswith("Error analyzing image:")
        fake_provider.complete.assert_not_awaited()

    def test_gateway_failure(self, client, fake_provider):
        fake_provider.complete.side_effect = CompletionError(
            "COMPLETION_FAILED", "Failed to get AI response: 502"
        )

        response = client.post("/api/analyze-image", json={"image": "QUJD"})

        assert response.status_code == 500
        assert response.json() == {
            "content": "Error analyzing image: Failed to get AI response: 502. "
            "Please try again."
        }
