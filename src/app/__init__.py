"""
App layer: UI 서버 (FastAPI + HTMX).

역할:
- 안전 상담 채팅, 현장 사진 점검, RFI 초안/PDF
- AI 게이트웨이 호출 (providers), 응답 → Block 렌더링 (render)

주의: 폴더 구분
- src/app/templates/ → Jinja2 HTML (HTMX)
- src/app/static/ → CSS
"""
