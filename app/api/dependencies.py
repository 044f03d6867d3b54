"""
API 공통 의존성입니다.
테스트에서는 app.dependency_overrides로 교체합니다.
"""

from typing import Optional

from fastapi import Header

from app.exceptions import AuthenticationError
from app.services import DriveClient

BEARER_PREFIX = "bearer "


def get_drive_client(authorization: Optional[str] = Header(None)) -> DriveClient:
    """
    Authorization 헤더의 Bearer 토큰으로 요청 단위 Drive 클라이언트를 만듭니다.
    OAuth 토큰 발급은 이 서버의 범위가 아니며, 프론트엔드가 access token을 전달합니다.
    """
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        raise AuthenticationError("Google Drive access token is required")

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthenticationError("Google Drive access token is required")

    return DriveClient(token)
