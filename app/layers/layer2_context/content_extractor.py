"""
Drive 문서 내용 추출기입니다.
MIME 타입에 따라 PDF / Google Docs / 텍스트 파일의 본문을 꺼냅니다.

추출 실패는 예외로 올리지 않고 "[... failed: ...]" 형태의 표시 문자열로 돌려줍니다.
배치 처리 중 한 문서의 실패가 나머지 문서 처리를 막지 않도록 하기 위함입니다.
"""

import logging

from app.exceptions import ProposalGeneratorError
from app.models import DOCUMENT_CONTENT_LIMIT, DriveFile
from app.services.drive_client import DriveClient, GOOGLE_DOC_MIME_TYPE
from app.services.pdf_service import PDFService

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"


class DocumentContentExtractor:
    """DriveFile 하나의 텍스트 내용을 추출합니다."""

    def __init__(self, drive_client: DriveClient, pdf_service: PDFService):
        self.drive_client = drive_client
        self.pdf_service = pdf_service

    async def extract(self, file: DriveFile) -> str:
        """
        파일 내용을 추출하여 DOCUMENT_CONTENT_LIMIT 글자로 잘라 반환합니다.

        MIME 타입별 처리:
        - application/pdf: 다운로드 → 상태 점검 → 텍스트 추출
        - Google Docs: text/plain으로 내보내기
        - text/*: 다운로드 후 UTF-8 디코딩
        - 그 외: 미지원 표시
        """
        logger.info(f"[ContentExtractor] 내용 추출: {file.name} ({file.mime_type})")

        try:
            if file.mime_type == PDF_MIME_TYPE:
                content = await self._extract_pdf(file)
            elif file.mime_type == GOOGLE_DOC_MIME_TYPE:
                content = await self._extract_google_doc(file)
            elif file.mime_type.startswith("text/"):
                data = await self.drive_client.download(file.id)
                content = data.decode("utf-8", errors="replace")
            else:
                content = f"[Unsupported file type: {file.mime_type}]"
        except ProposalGeneratorError as e:
            logger.error(f"[ContentExtractor] 추출 실패 {file.name}: {e}")
            return f"[Content extraction failed: {e.message}]"

        logger.info(f"[ContentExtractor] 추출 완료 {file.name}: {len(content)} chars")
        return content[:DOCUMENT_CONTENT_LIMIT]

    async def _extract_pdf(self, file: DriveFile) -> str:
        data = await self.drive_client.download(file.id)
        health = self.pdf_service.check_health(data)

        if not health.is_healthy:
            logger.warning(f"[ContentExtractor] PDF 상태 이상 {file.name}: {health.issues}")
            return f"[PDF extraction failed: {', '.join(health.issues)}]"

        return await self.pdf_service.extract_text(data)

    async def _extract_google_doc(self, file: DriveFile) -> str:
        try:
            data = await self.drive_client.export_google_doc(file.id)
        except ProposalGeneratorError as e:
            return f"[Google Doc extraction failed: {e.message}]"
        return data.decode("utf-8", errors="replace")
