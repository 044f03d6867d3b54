"""Google Drive client for project document discovery.

google-api-python-client는 동기 방식이므로 모든 호출을 executor에서 실행합니다.
httplib2.Http 객체는 스레드 간에 공유할 수 없어서 호출마다 새 인증 Http를 만들고,
이 Http의 timeout이 Drive 호출 1회당 타임아웃 역할을 합니다.

OAuth 토큰 교환은 이 모듈의 범위가 아닙니다. 호출자가 access token을 넘겨줍니다.
"""

import asyncio
import functools
import io
import logging
from typing import Any, Callable, Optional

import google_auth_httplib2
import httplib2
from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseDownload

from app.config import Settings, get_settings
from app.exceptions import AuthenticationError, DocumentDownloadError, DocumentSearchError
from app.models import DriveFile, DriveFileList

logger = logging.getLogger(__name__)

FILE_FIELDS = "id, name, mimeType, size, createdTime, modifiedTime, webViewLink, thumbnailLink"

GOOGLE_DOC_MIME_TYPE = "application/vnd.google-apps.document"

# Drive 호출 중 발생할 수 있는 전송/응답 에러
DRIVE_ERRORS = (HttpError, httplib2.HttpLib2Error, OSError)


def escape_query_value(value: str) -> str:
    """Drive 검색 쿼리 문자열 리터럴 안에 넣을 수 있도록 \\ 와 ' 를 이스케이프합니다."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def _token_error(error: RefreshError) -> AuthenticationError:
    """만료되었거나 폐기된 access token은 401 응답용 인증 에러로 바꿉니다."""
    logger.warning(f"[Drive] access token 갱신 실패: {error}")
    return AuthenticationError("Google Drive access token is invalid or expired")


class DriveClient:
    """
    사용자 access token으로 동작하는 Google Drive v3 클라이언트.
    요청 단위로 생성되며 다른 사용자와 공유되지 않습니다.
    """

    def __init__(self, access_token: str, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self._credentials = Credentials(token=access_token)
        self._timeout = settings.drive_timeout_seconds
        self._page_size = settings.drive_page_size
        self._service = build(
            "drive", "v3", credentials=self._credentials, cache_discovery=False
        )

    def _authorized_http(self) -> google_auth_httplib2.AuthorizedHttp:
        return google_auth_httplib2.AuthorizedHttp(
            self._credentials, http=httplib2.Http(timeout=self._timeout)
        )

    async def _run(self, func: Callable[..., Any], *args: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args))

    # ========== 검색 ==========

    def _list_sync(self, query: Optional[str], page_token: Optional[str]) -> dict:
        params = {
            "pageSize": self._page_size,
            "fields": f"nextPageToken, files({FILE_FIELDS})",
            "orderBy": "modifiedTime desc",
        }
        if query:
            params["q"] = query
        if page_token:
            params["pageToken"] = page_token

        return self._service.files().list(**params).execute(http=self._authorized_http())

    async def search(self, query: Optional[str], page_token: Optional[str] = None) -> DriveFileList:
        """
        Drive 검색 쿼리 실행.

        Raises:
            DocumentSearchError: Drive API 호출 실패
        """
        try:
            data = await self._run(self._list_sync, query, page_token)
        except RefreshError as e:
            raise _token_error(e) from e
        except DRIVE_ERRORS as e:
            logger.error(f"[Drive] 검색 실패 (q={query!r}): {e}")
            raise DocumentSearchError(
                "Failed to list Drive files", details={"query": query}
            ) from e

        result = DriveFileList.model_validate(data)
        logger.debug(f"[Drive] 검색 결과 {len(result.files)}건 (q={query!r})")
        return result

    async def list_files(self, page_token: Optional[str] = None) -> DriveFileList:
        """최근 수정순으로 Drive 파일 목록을 가져옵니다."""
        return await self.search(None, page_token=page_token)

    async def search_pdf_files(self, search_term: Optional[str] = None) -> DriveFileList:
        """PDF 파일만 검색합니다. search_term이 있으면 파일명 조건을 추가합니다."""
        query = "mimeType='application/pdf'"
        if search_term:
            query += f" and name contains '{escape_query_value(search_term)}'"
        return await self.search(query)

    # ========== 파일 조회 / 다운로드 ==========

    def _get_metadata_sync(self, file_id: str) -> dict:
        return self._service.files().get(
            fileId=file_id, fields=f"{FILE_FIELDS}, parents"
        ).execute(http=self._authorized_http())

    async def get_file_metadata(self, file_id: str) -> DriveFile:
        try:
            data = await self._run(self._get_metadata_sync, file_id)
        except RefreshError as e:
            raise _token_error(e) from e
        except DRIVE_ERRORS as e:
            raise DocumentDownloadError(
                "Failed to get file metadata", details={"file_id": file_id}
            ) from e
        return DriveFile.model_validate(data)

    def _download_sync(self, file_id: str) -> bytes:
        request = self._service.files().get_media(fileId=file_id)
        request.http = self._authorized_http()

        buffer = io.BytesIO()
        downloader = MediaIoBaseDownload(buffer, request)
        done = False
        while not done:
            _, done = downloader.next_chunk()
        return buffer.getvalue()

    async def download(self, file_id: str) -> bytes:
        """
        파일 원본 바이트를 다운로드합니다.

        Raises:
            DocumentDownloadError: 다운로드 실패
        """
        try:
            data = await self._run(self._download_sync, file_id)
        except RefreshError as e:
            raise _token_error(e) from e
        except DRIVE_ERRORS as e:
            raise DocumentDownloadError(
                "Failed to download file", details={"file_id": file_id}
            ) from e

        logger.info(f"[Drive] 다운로드 완료: {file_id} ({len(data)} bytes)")
        return data

    def _export_sync(self, file_id: str) -> bytes:
        return self._service.files().export(
            fileId=file_id, mimeType="text/plain"
        ).execute(http=self._authorized_http())

    async def export_google_doc(self, file_id: str) -> bytes:
        """Google Docs 문서를 plain text로 내보냅니다."""
        try:
            data = await self._run(self._export_sync, file_id)
        except RefreshError as e:
            raise _token_error(e) from e
        except DRIVE_ERRORS as e:
            raise DocumentDownloadError(
                "Failed to export Google Doc", details={"file_id": file_id}
            ) from e

        if isinstance(data, str):
            return data.encode("utf-8")
        return data
