"""
제안서 생성 시스템 커스텀 예외 계층입니다.
각 레이어/서비스별 구조화된 에러 코드와 메시지를 제공합니다.
"""

from typing import Optional, Any


class ProposalGeneratorError(Exception):
    """제안서 생성 시스템 기본 예외 클래스."""

    def __init__(
        self,
        message: str,
        error_code: str = "ERR_UNKNOWN",
        details: Optional[Any] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class ParsingError(ProposalGeneratorError):
    """문서 텍스트 추출 에러 (손상/암호화/미지원 문서)."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_PARSE_001", details=details)


class DocumentSearchError(ProposalGeneratorError):
    """외부 문서 저장소(Google Drive) 검색 에러."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_SEARCH_001", details=details)


class DocumentDownloadError(ProposalGeneratorError):
    """외부 문서 저장소 다운로드/내보내기 에러."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_DOWNLOAD_001", details=details)


class ClaudeClientError(ProposalGeneratorError):
    """Claude AI 클라이언트 통신 에러."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_CLAUDE_001", details=details)


class WorkflowError(ProposalGeneratorError):
    """제안서 워크플로우 단계 실패. 실패한 단계 이름을 함께 기록합니다."""

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        details: Optional[Any] = None,
    ):
        self.stage = stage
        super().__init__(message, error_code="ERR_WORKFLOW_001", details=details)


class ProjectAnalysisError(ProposalGeneratorError):
    """프로젝트 컨텍스트 분석 실패."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_CONTEXT_001", details=details)


class AuthenticationError(ProposalGeneratorError):
    """Google 인증 정보 누락 (401 응답)."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_AUTH_001", details=details)


class InputValidationError(ProposalGeneratorError):
    """입력 유효성 검증 에러 (400 응답)."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_INPUT_001", details=details)
