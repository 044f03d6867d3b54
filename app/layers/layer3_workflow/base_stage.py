"""Base stage class for the proposal workflow.

이 모듈은 분석, 목차, 생성, 검토, 최종화 단계가 공통으로 사용하는
기본 기능을 제공하는 추상 베이스 클래스를 정의합니다.

주요 기능:
- 템플릿 메서드 패턴을 통한 일관된 단계 실행 흐름
- 누적 상태를 프롬프트로 렌더링
- Claude 텍스트 호출 공통화
- 상태 필드 덮어쓰기 방지
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from app.exceptions import ClaudeClientError, WorkflowError
from app.models import ProposalState
from app.services import ClaudeClient, get_claude_client

from .prompts.workflow_prompts import render_state_sections

logger = logging.getLogger(__name__)


class BaseStage(ABC):
    """
    워크플로우 단계 추상 베이스 클래스.

    Template Method 패턴으로 모든 단계가 같은 흐름을 따릅니다:
    1. 출력 필드가 비어있는지 확인
    2. 시작 로깅
    3. 단계별 처리 (서브클래스에서 구현)
    4. 새 상태 반환 및 완료 로깅

    Attributes:
        name: 단계 이름 (로깅, 에러, 진행 이벤트에 사용)
        output_field: 이 단계가 기록하는 ProposalState 필드
        system_prompt: Claude 시스템 프롬프트
        prompt_template: {state_sections} 자리표시자를 가진 사용자 프롬프트
        temperature: 샘플링 온도

    Example:
        class MyStage(BaseStage):
            name = "my_stage"
            output_field = "outline"
            system_prompt = "..."
            prompt_template = "...{state_sections}..."

            async def _do_run(self, state):
                return await self._call_claude_text(self.build_prompt(state))
    """

    name: str = "base"
    output_field: str = ""
    system_prompt: str = ""
    prompt_template: str = "{state_sections}"
    temperature: float = 0.7
    max_tokens: int = 4096

    def __init__(self, claude_client: Optional[ClaudeClient] = None):
        self.claude_client = claude_client or get_claude_client()

    def build_prompt(self, state: ProposalState) -> str:
        """역할 지시문 사이에 지금까지 채워진 상태 필드를 그대로 넣어 프롬프트를 만듭니다."""
        return self.prompt_template.format(state_sections=render_state_sections(state))

    async def run(self, state: ProposalState) -> ProposalState:
        """
        단계 실행 템플릿 메서드.

        입력 상태는 변경하지 않고 output_field가 채워진 새 상태를 반환합니다.

        Raises:
            WorkflowError: output_field가 이미 채워져 있는 경우
            ClaudeClientError: Claude 호출 실패
        """
        if state.is_populated(self.output_field):
            raise WorkflowError(
                f"State field '{self.output_field}' is already populated",
                stage=self.name,
            )

        logger.info(f"[{self.name}] 단계 시작 (상태: {state.status.value})")
        start_time = datetime.now()

        try:
            value = await self._do_run(state)

        except Exception as e:
            elapsed = (datetime.now() - start_time).total_seconds()
            logger.error(f"[{self.name}] 단계 실패 ({elapsed:.1f}초): {e}")
            raise

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(f"[{self.name}] 단계 완료: {elapsed:.1f}초")

        return state.model_copy(update={self.output_field: value})

    @abstractmethod
    async def _do_run(self, state: ProposalState) -> Any:
        """output_field에 기록할 값을 만듭니다 (서브클래스에서 구현)."""
        pass

    async def _call_claude_text(self, user_prompt: str, strip: bool = True) -> str:
        """
        Claude 텍스트 호출 공통 메서드.

        실패는 그대로 전파합니다. 빈 응답(공백만 있는 응답 포함)도 실패로 처리합니다.
        strip=False이면 응답 원문을 가공 없이 반환합니다.
        """
        start = datetime.now()
        result = await self.claude_client.complete(
            system_prompt=self.system_prompt,
            user_prompt=user_prompt,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        elapsed = (datetime.now() - start).total_seconds()
        logger.debug(f"[{self.name}] Claude 텍스트 호출 완료: {elapsed:.1f}초")

        if not result or not result.strip():
            raise ClaudeClientError(f"Empty response from Claude in {self.name} stage")
        return result.strip() if strip else result
