#!/usr/bin/env python
"""
AI 게이트웨이 연결 확인 스크립트.

실행:
    python scripts/check_gateway.py

.env의 AUTODESK_CLIENT_ID / AUTODESK_CLIENT_SECRET으로 토큰 발급 후
짧은 안전 질의 1건을 보내 응답 메타데이터를 출력한다.
"""

import asyncio
import sys
from pathlib import Path

# 프로젝트 루트를 path에 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

# .env 파일 로드
from dotenv import load_dotenv
load_dotenv()

from src.app.dependencies import build_provider  # noqa: E402
from src.app.main import load_config  # noqa: E402
from src.app.providers import ChatMessage, ProviderError, TokenCache  # noqa: E402


async def check_token(provider) -> bool:
    """토큰 발급 확인."""
    print("\n" + "=" * 60)
    print("🔑 토큰 발급 테스트")
    print("=" * 60)

    try:
        token = await provider.auth.get_access_token()
    except ProviderError as e:
        print(f"❌ 토큰 발급 실패: [{e.code}] {e.message}")
        return False

    print(f"✅ 토큰 발급 성공 (길이 {len(token)})")
    return True


async def check_completion(provider) -> bool:
    """모델 호출 확인."""
    print("\n" + "=" * 60)
    print("🧪 모델 호출 테스트")
    print("=" * 60)

    try:
        completion = await provider.complete(
            [ChatMessage("user", "Reply with one sentence about hard hat safety.")]
        )
    except ProviderError as e:
        print(f"❌ 모델 호출 실패: [{e.code}] {e.message}")
        return False

    print(f"📥 응답: {completion.content[:200]}")
    print(f"   모델: {completion.model_id}")
    print(f"   토큰: {completion.token_usage()}")
    print("✅ 게이트웨이 연결 성공!")
    return True


async def main() -> int:
    provider = build_provider(load_config(), TokenCache())
    print(f"🎯 대상 모델: {provider.settings.target_model}")
    print(f"🌐 서비스 URL: {provider.settings.service_url}")

    if not provider.settings.has_credentials:
        print("❌ AUTODESK_CLIENT_ID / AUTODESK_CLIENT_SECRET이 설정되지 않았습니다.")
        print("   .env.example을 참고해 .env 파일을 만드세요.")
        return 1

    if not await check_token(provider):
        return 1
    return 0 if await check_completion(provider) else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
