"""
RFP PDF 처리 서비스입니다.
업로드 검증, 상태 점검, PyPDF2를 이용한 텍스트 추출, 요구사항 영역 정리를 담당합니다.
"""

import asyncio
import io
import logging
import re
from typing import Optional

from pydantic import BaseModel, Field
from PyPDF2 import PdfReader

from app.config import Settings, get_settings
from app.exceptions import InputValidationError, ParsingError
from app.utils.validation import (
    validate_content_type,
    validate_file_extension,
    validate_file_signature,
    validate_file_size,
    validate_filename,
)

logger = logging.getLogger(__name__)

# 요구사항이 주로 담겨있는 섹션 제목들
REQUIREMENT_SECTIONS = [
    "requirements",
    "scope of work",
    "project description",
    "deliverables",
    "specifications",
    "objectives",
    "goals",
    "expectations",
]

# 섹션 제목 이후로 잘라낼 글자 수
SECTION_WINDOW = 2000

MIN_PDF_SIZE = 100

CONTROL_CHARACTERS = re.compile(r"[\x00-\x1f\x7f]")


class PDFHealthReport(BaseModel):
    """PDF 기본 구조 점검 결과."""

    is_healthy: bool
    issues: list[str] = Field(default_factory=list)


class PDFService:
    """RFP PDF 검증 및 텍스트 추출."""

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self._requirements_limit = settings.requirements_text_limit

    def validate_upload(
        self,
        filename: str,
        content_type: Optional[str],
        content: bytes,
    ) -> str:
        """
        업로드된 파일이 PDF인지 확인합니다.

        Returns:
            정리된 안전한 파일명

        Raises:
            InputValidationError: 파일명/크기/형식/시그니처 검증 실패
        """
        safe_name = validate_filename(filename)
        extension = validate_file_extension(safe_name)
        validate_content_type(content_type)
        validate_file_size(len(content))
        validate_file_signature(content, extension)
        return safe_name

    def check_health(self, data: bytes) -> PDFHealthReport:
        """
        PDF 바이트 구조를 간단히 점검합니다.

        빈 파일, 너무 작은 파일, 잘못된 헤더는 즉시 실패로 판단하고,
        트레일러(%%EOF)나 객체 구조가 없으면 문제 목록에 추가합니다.
        """
        issues: list[str] = []

        if not data:
            return PDFHealthReport(is_healthy=False, issues=["Empty or null buffer"])

        if len(data) < MIN_PDF_SIZE:
            return PDFHealthReport(is_healthy=False, issues=["File too small to be a valid PDF"])

        if not data[:8].startswith(b"%PDF-"):
            return PDFHealthReport(is_healthy=False, issues=["Invalid PDF header"])

        if b"%%EOF" not in data[-50:]:
            issues.append("Missing or corrupted PDF trailer")

        if b"obj" not in data:
            issues.append("Missing PDF object structure")

        return PDFHealthReport(is_healthy=not issues, issues=issues)

    async def extract_text(self, data: bytes) -> str:
        """
        PDF에서 전체 텍스트를 추출합니다. (PyPDF2는 동기 방식이라 executor에서 실행)

        Raises:
            ParsingError: 손상/암호화/텍스트 없는 문서
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._extract_text_sync, data)

    def _extract_text_sync(self, data: bytes) -> str:
        last_error: Optional[Exception] = None

        # 1차: strict 모드, 2차: 손상된 구조를 허용하는 lenient 모드
        for strict in (True, False):
            try:
                text = self._read_pages(data, strict=strict)
            except Exception as e:
                logger.warning(f"[PDF] 파싱 실패 (strict={strict}): {type(e).__name__}: {e}")
                last_error = e
                continue

            if text.strip():
                return text
            last_error = ValueError("No text content found in PDF")

        raise ParsingError(
            "Failed to parse PDF document. The file may be corrupted, password-protected, "
            f"or in an unsupported format. Details: {last_error}",
            details={"error_type": type(last_error).__name__},
        ) from last_error

    def _read_pages(self, data: bytes, strict: bool) -> str:
        reader = PdfReader(io.BytesIO(data), strict=strict)
        if reader.is_encrypted:
            # 소유자 암호만 걸린 문서는 빈 사용자 암호로 열 수 있음
            reader.decrypt("")

        pages = [page.extract_text() or "" for page in reader.pages]
        logger.info(f"[PDF] {len(pages)} 페이지 추출")
        return "\n\n".join(pages)

    def extract_rfp_requirements(self, text: str) -> str:
        """
        추출된 PDF 텍스트에서 요구사항 관련 영역만 정리합니다.

        처리 순서:
        1. 공백 정리 및 제어 문자 제거
        2. 요구사항 섹션 제목마다 그 위치부터 SECTION_WINDOW 글자씩 수집
        3. 섹션이 하나도 없으면 전체 텍스트 사용
        4. requirements_text_limit 초과 시 잘라내고 "..." 추가
        """
        clean_text = re.sub(r"\s+", " ", text).strip()
        clean_text = CONTROL_CHARACTERS.sub(" ", clean_text)

        lower_text = clean_text.lower()
        sections = []
        for section in REQUIREMENT_SECTIONS:
            index = lower_text.find(section)
            if index != -1:
                sections.append(clean_text[index:index + SECTION_WINDOW])

        extracted = "\n\n".join(sections) if sections else clean_text

        if len(extracted) > self._requirements_limit:
            return extracted[:self._requirements_limit] + "..."
        return extracted

    async def extract_requirements_from_pdf(self, data: bytes) -> str:
        """
        PDF 바이트에서 RFP 요구사항 텍스트까지 한 번에 처리합니다.

        Raises:
            InputValidationError: 손상된 PDF이거나 읽을 수 있는 내용이 없는 경우
            ParsingError: 텍스트 추출 실패
        """
        health = self.check_health(data)
        if not health.is_healthy:
            logger.warning(f"[PDF] 상태 이상 감지: {health.issues}")
            raise InputValidationError(
                "PDF file appears to be corrupted or invalid",
                details={"issues": health.issues},
            )

        text = await self.extract_text(data)
        requirements = self.extract_rfp_requirements(text)

        if not requirements.strip():
            raise InputValidationError("No readable content found in the PDF")

        logger.info(f"[PDF] 요구사항 추출 완료: {len(requirements)} chars")
        return requirements


# Process-wide instance for dependency injection
_pdf_service: Optional[PDFService] = None


def get_pdf_service() -> PDFService:
    """Get or create the PDF service."""
    global _pdf_service
    if _pdf_service is None:
        _pdf_service = PDFService()
    return _pdf_service
