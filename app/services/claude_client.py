"""Claude Code CLI client service for proposal generation.

Uses Claude CLI (claude -p) for all AI operations.

이 모듈은 Claude CLI를 래핑하여 비동기 AI 호출을 제공합니다.

주요 기능:
- complete(): 텍스트 응답 요청
- complete_json(): JSON 응답 요청 (자동 파싱)

실행 환경:
- Claude CLI가 PATH에 설치되어 있어야 함
- ThreadPoolExecutor를 사용하여 동기 CLI 호출을 비동기로 래핑

재시도 전략:
- 최대 claude_max_retries회 재시도 (기본 3회)
- 지수 백오프 (2초, 4초, 8초)
- 모든 예외에 대해 재시도 (타임아웃 포함)
"""

import subprocess
import os
import sys
import asyncio
import logging
from typing import Any, Optional
from datetime import datetime
from concurrent.futures import ThreadPoolExecutor

from app.config import Settings, get_settings
from app.exceptions import ClaudeClientError
from app.utils.json_parser import extract_json

# 로깅 설정
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class ClaudeClient:
    """
    Claude Code CLI 래퍼 클래스.

    Attributes:
        _model: 사용할 Claude 모델 이름
        _timeout: CLI 호출 1회당 타임아웃(초)
        _max_retries: 최대 재시도 횟수
        _retry_delay: 초기 재시도 대기 시간(초)
        _executor: CLI 실행용 ThreadPoolExecutor
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        ClaudeClient 초기화.

        ThreadPoolExecutor의 max_workers는 CPU 코어 수에 따라 동적 설정:
        - 최소: 2
        - 최대: 8
        여러 요청의 워크플로우가 동시에 실행될 수 있으므로 CLI 호출도 병렬로 처리합니다.
        """
        settings = settings or get_settings()
        self._model = settings.claude_model
        self._timeout = settings.claude_timeout_seconds
        self._max_retries = max(1, settings.claude_max_retries)
        self._retry_delay = settings.claude_retry_delay

        cpu_count = os.cpu_count() or 4
        max_workers = min(8, max(2, cpu_count))
        self._executor = ThreadPoolExecutor(max_workers=max_workers)

        logger.info(f"[ClaudeClient] CLI 모드 초기화 완료 (model={self._model}, workers={max_workers})")

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> str:
        """
        Send a completion request to Claude via CLI.

        Args:
            system_prompt: System-level instructions
            user_prompt: User message content
            max_tokens: Maximum tokens in response (not used in CLI mode)
            temperature: Sampling temperature (not used in CLI mode)

        Returns:
            Claude's response text

        Raises:
            ClaudeClientError: 모든 재시도가 실패한 경우
        """
        full_prompt = f"""{system_prompt}

---

{user_prompt}"""

        return await self._execute_claude_cli(full_prompt)

    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int = 4096,
        temperature: float = 0.2,
    ) -> Any:
        """
        Send a completion request expecting JSON response.

        Returns:
            Parsed JSON response

        Raises:
            ClaudeClientError: 호출 실패 또는 JSON 파싱 실패
        """
        full_prompt = f"""{system_prompt}

---

{user_prompt}

---

Response format: output valid JSON only. No explanations and no markdown code fences."""

        response = await self._execute_claude_cli(full_prompt)
        try:
            return extract_json(response)
        except ValueError as e:
            raise ClaudeClientError(
                "Claude returned a response that is not valid JSON",
                details={"response_preview": response[:500]},
            ) from e

    def _get_env(self) -> dict:
        """Get environment with proper PATH for Claude CLI."""
        env = os.environ.copy()

        if sys.platform == "win32":
            extra_paths = [
                os.path.expanduser("~\\AppData\\Roaming\\npm"),
            ]
            path_separator = ";"
        else:
            extra_paths = [
                os.path.expanduser("~/.npm-global/bin"),
                "/usr/local/bin",
                "/opt/homebrew/bin",
            ]
            path_separator = ":"

        env["PATH"] = path_separator.join(extra_paths) + path_separator + env.get("PATH", "")
        return env

    def _run_claude_sync(self, prompt: str) -> str:
        """Run Claude CLI synchronously."""
        env = self._get_env()

        logger.info(f"[CLI] 프롬프트 길이: {len(prompt)} chars")
        start_time = datetime.now()

        try:
            use_shell = sys.platform == "win32"
            result = subprocess.run(
                ["claude", "-p", prompt, "--model", self._model, "--output-format", "text"],
                capture_output=True,
                text=True,
                timeout=self._timeout,
                env=env,
                shell=use_shell,
                encoding='utf-8',
            )

            elapsed = (datetime.now() - start_time).total_seconds()
            logger.info(f"[CLI] 완료: {elapsed:.1f}초, returncode={result.returncode}")

            if result.returncode != 0:
                error_msg = result.stderr or "Unknown error"
                logger.error(f"[CLI] 에러: {error_msg}")
                raise RuntimeError(f"Claude CLI error: {error_msg}")

            logger.info(f"[CLI] 응답 길이: {len(result.stdout)} chars")
            return result.stdout.strip()

        except subprocess.TimeoutExpired:
            elapsed = (datetime.now() - start_time).total_seconds()
            logger.error(f"[CLI] 타임아웃! {elapsed:.1f}초")
            raise

    async def _execute_claude_cli(self, prompt: str) -> str:
        """
        Claude Code CLI를 비동기로 실행.

        지수 백오프(Exponential Backoff) 적용:
        - wait_time = _retry_delay * (2 ** attempt)

        Raises:
            ClaudeClientError: 마지막 시도까지 실패한 경우 (원인 예외 연결)
        """
        last_error: Optional[Exception] = None

        for attempt in range(self._max_retries):
            try:
                logger.info(f"[CLI] 시도 {attempt + 1}/{self._max_retries}")

                loop = asyncio.get_running_loop()
                result = await loop.run_in_executor(
                    self._executor, self._run_claude_sync, prompt
                )

                logger.info(f"[CLI] 시도 {attempt + 1} 성공")
                return result

            except Exception as e:
                last_error = e
                logger.error(f"[CLI] 시도 {attempt + 1} 실패: {type(e).__name__}: {e}")

                if attempt < self._max_retries - 1:
                    wait_time = self._retry_delay * (2 ** attempt)
                    logger.info(f"[CLI] {wait_time}초 후 재시도...")
                    await asyncio.sleep(wait_time)

        logger.error(f"[CLI] 모든 시도 실패: {last_error}")
        raise ClaudeClientError(
            f"Claude request failed after {self._max_retries} attempts: {last_error}",
            details={"error_type": type(last_error).__name__},
        ) from last_error


# Process-wide instance, handed to components through FastAPI dependencies
_claude_client: Optional[ClaudeClient] = None


def get_claude_client() -> ClaudeClient:
    """Get or create the process-wide Claude client."""
    global _claude_client
    if _claude_client is None:
        _claude_client = ClaudeClient()
    return _claude_client
