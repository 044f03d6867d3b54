from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """
    애플리케이션의 설정을 관리하는 클래스입니다.
    환경 변수(.env 파일)에서 설정값을 읽어옵니다.
    """

    # API 설정: AI 모델 사용을 위한 키와 모델 이름
    anthropic_api_key: str = ""
    claude_model: str = "claude-sonnet-4-20250514"  # 사용할 Claude AI 모델 버전
    claude_timeout_seconds: int = 300  # CLI 호출 1회당 타임아웃
    claude_max_retries: int = 3
    claude_retry_delay: float = 2.0  # 첫 재시도 대기 시간(초), 이후 2배씩 증가

    # Google Drive 설정
    drive_timeout_seconds: int = 30  # Drive API 호출 1회당 타임아웃
    drive_page_size: int = 50

    # 프로젝트 컨텍스트 분석 설정
    context_max_concurrency: int = 4  # 문서 내용 추출 동시 실행 수
    requirements_text_limit: int = 10000  # RFP에서 추출한 요구사항 최대 글자 수
    fallback_without_context: bool = True  # 컨텍스트 분석 실패 시 RFP만으로 계속 진행

    # 업로드 검증 설정
    max_file_size_mb: int = 10
    max_filename_length: int = 255

    # 서버 설정: 서버가 실행될 주소와 포트 번호
    host: str = "0.0.0.0"  # 모든 외부 접속 허용
    port: int = 4000
    allowed_origins: list[str] = ["http://localhost:3000"]

    class Config:
        # 설정을 읽어올 파일 지정
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """
    설정을 가져오는 함수입니다.
    @lru_cache를 사용하여 한 번 읽은 설정은 메모리에 저장해두고 재사용합니다.
    """
    return Settings()
