"""입력 유효성 검증 유틸리티.

RFP 파일 업로드 시 보안 및 무결성 검증을 수행합니다.
"""

import os
import re
from typing import Optional

from app.config import get_settings
from app.exceptions import InputValidationError


# 허용된 파일 확장자 목록 (RFP는 PDF만 받습니다)
ALLOWED_EXTENSIONS = {".pdf"}

# 허용된 MIME 타입
ALLOWED_CONTENT_TYPES = {"application/pdf"}

# 매직 넘버 기반 파일 시그니처 (확장자 → 시그니처 바이트)
FILE_SIGNATURES = {
    ".pdf": b"%PDF-",
}

# 위험한 파일명 패턴
DANGEROUS_PATTERNS = re.compile(r"[<>:\"|?*\x00-\x1f]")


def validate_filename(filename: str) -> str:
    """
    파일명 유효성 검증.

    - 경로 순회 공격 방지 (../, / 등)
    - 널 바이트 제거
    - 위험 문자 검사
    - 길이 제한

    Args:
        filename: 원본 파일명

    Returns:
        정리된 안전한 파일명

    Raises:
        InputValidationError: 유효하지 않은 파일명
    """
    settings = get_settings()

    if not filename or not filename.strip():
        raise InputValidationError("File name is empty")

    # 널 바이트 제거
    cleaned = filename.replace("\x00", "")

    # 경로 순회 방지
    basename = os.path.basename(cleaned)
    if basename != cleaned or ".." in cleaned:
        raise InputValidationError(
            "Invalid file name: path traversal detected",
            details={"filename": filename},
        )

    if DANGEROUS_PATTERNS.search(basename):
        raise InputValidationError(
            "File name contains characters that are not allowed",
            details={"filename": filename},
        )

    if len(basename) > settings.max_filename_length:
        raise InputValidationError(
            f"File name is too long (max {settings.max_filename_length} characters)",
            details={"filename": basename, "length": len(basename)},
        )

    return basename


def validate_file_size(file_size: int) -> None:
    """
    파일 크기 검증.

    Raises:
        InputValidationError: 비어있거나 크기 제한 초과
    """
    settings = get_settings()
    max_bytes = settings.max_file_size_mb * 1024 * 1024

    if file_size <= 0:
        raise InputValidationError("Uploaded file is empty")

    if file_size > max_bytes:
        raise InputValidationError(
            f"File is too large (max {settings.max_file_size_mb}MB)",
            details={
                "file_size_bytes": file_size,
                "max_size_bytes": max_bytes,
            },
        )


def validate_file_extension(filename: str) -> str:
    """
    파일 확장자 검증.

    Returns:
        소문자로 변환된 확장자 (예: ".pdf")

    Raises:
        InputValidationError: 허용되지 않는 확장자
    """
    ext = os.path.splitext(filename)[1].lower()

    if ext not in ALLOWED_EXTENSIONS:
        raise InputValidationError(
            "Invalid file type. Only PDF files are accepted.",
            details={
                "extension": ext or None,
                "allowed": sorted(ALLOWED_EXTENSIONS),
            },
        )

    return ext


def validate_content_type(content_type: Optional[str]) -> None:
    """
    업로드 MIME 타입 검증. 브라우저가 타입을 보내지 않은 경우는 건너뜁니다.
    """
    if not content_type:
        return

    if content_type.split(";")[0].strip().lower() not in ALLOWED_CONTENT_TYPES:
        raise InputValidationError(
            "Invalid file type. Only PDF files are accepted.",
            details={"content_type": content_type},
        )


def validate_file_signature(content: bytes, extension: str) -> None:
    """
    매직 넘버 기반 파일 내용 검증.

    파일의 처음 몇 바이트가 확장자에 맞는 시그니처인지 확인합니다.
    시그니처가 정의되지 않은 확장자는 검증을 건너뜁니다.

    Raises:
        InputValidationError: 시그니처 불일치
    """
    expected = FILE_SIGNATURES.get(extension)
    if expected is None:
        return

    if not content or len(content) < len(expected):
        raise InputValidationError(
            "File content is empty or corrupted",
            details={"extension": extension},
        )

    if not content.startswith(expected):
        raise InputValidationError(
            f"File content does not match its extension ({extension})",
            details={"extension": extension},
        )
