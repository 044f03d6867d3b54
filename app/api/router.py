"""
API 라우터 설정 파일입니다.
각 기능별로 나누어진 API 주소들을 하나로 모으는 역할을 합니다.
"""

from fastapi import APIRouter

from app.api.endpoints import health, proposals, rfp, drive

# 메인 API 라우터 생성
api_router = APIRouter()

# 헬스 체크 엔드포인트: 서버 상태 확인용 (/health)
api_router.include_router(
    health.router,
    prefix="/health",
    tags=["health"]
)

# 제안서 워크플로우 엔드포인트: 요구사항 텍스트로 제안서 생성 (/proposals)
api_router.include_router(
    proposals.router,
    prefix="/proposals",
    tags=["proposals"]
)

# RFP 엔드포인트: PDF 업로드, 요구사항 추출, 진단 (/rfp)
api_router.include_router(
    rfp.router,
    prefix="/rfp",
    tags=["rfp"]
)

# Google Drive 엔드포인트: 파일 목록, Drive PDF 처리 (/drive)
api_router.include_router(
    drive.router,
    prefix="/drive",
    tags=["drive"]
)
