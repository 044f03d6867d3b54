"""
Layer 3: 제안서 생성 워크플로우.

분석 → 목차 → 생성 → 검토 → 최종화의 5단계를 순서대로 실행합니다.
각 단계는 이전 단계까지 채워진 상태 전체를 입력으로 받으므로 병렬 실행할 수 없습니다.
단계 하나라도 실패하면 전체 실행이 실패하며, 중간 단계부터 재개하지 않습니다.
"""

import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional, Sequence

from app.exceptions import InputValidationError, WorkflowError
from app.models import ProposalState, WorkflowEvent
from app.services import ClaudeClient, get_claude_client

from .base_stage import BaseStage
from .stages import AnalyzeStage, FinalizeStage, GenerateStage, OutlineStage, ReviewStage

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[WorkflowEvent], Awaitable[None]]


def default_stages(claude_client: ClaudeClient) -> list[BaseStage]:
    return [
        AnalyzeStage(claude_client),
        OutlineStage(claude_client),
        GenerateStage(claude_client),
        ReviewStage(claude_client),
        FinalizeStage(claude_client),
    ]


class ProposalWorkflow:
    """
    5단계 제안서 생성 파이프라인.

    요청마다 새 ProposalState를 만들기 때문에 인스턴스를 여러 요청이 공유해도 안전합니다.
    """

    def __init__(
        self,
        claude_client: Optional[ClaudeClient] = None,
        stages: Optional[Sequence[BaseStage]] = None,
    ):
        self.claude_client = claude_client or get_claude_client()
        self.stages = list(stages) if stages is not None else default_stages(self.claude_client)

    async def run(
        self,
        requirements: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ProposalState:
        """
        요구사항 텍스트로 전체 워크플로우를 실행합니다.

        Args:
            requirements: RFP 요구사항 또는 컨텍스트가 추가된 확장 프롬프트
            on_progress: 단계 시작/완료/실패 시 호출되는 비동기 콜백

        Returns:
            모든 필드가 채워진 ProposalState (FINALIZED)

        Raises:
            InputValidationError: 요구사항이 비어있는 경우
            WorkflowError: 단계 실패 (stage 속성에 실패한 단계, __cause__에 원인 예외)
        """
        if not requirements or not requirements.strip():
            raise InputValidationError("Requirements text must not be empty")

        logger.info(
            f"[ProposalWorkflow] 워크플로우 시작: {len(requirements)} chars, "
            f"{len(requirements.split())} words"
        )
        start_time = datetime.now()

        state = ProposalState(requirements=requirements)
        total = len(self.stages)

        for index, stage in enumerate(self.stages):
            await self._emit_event(
                on_progress, "stage_start", stage.name,
                f"{stage.name} 단계 시작", int(index / total * 100),
            )

            try:
                state = await stage.run(state)

            except WorkflowError as e:
                await self._emit_event(on_progress, "error", stage.name, e.message, int(index / total * 100))
                raise

            except Exception as e:
                message = f"Proposal workflow failed at {stage.name} stage: {e}"
                await self._emit_event(on_progress, "error", stage.name, message, int(index / total * 100))
                raise WorkflowError(
                    message,
                    stage=stage.name,
                    details={"error_type": type(e).__name__},
                ) from e

            await self._emit_event(
                on_progress, "stage_complete", stage.name,
                f"{stage.name} 단계 완료", int((index + 1) / total * 100),
            )

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"[ProposalWorkflow] 워크플로우 완료 ({elapsed:.1f}초): "
            f"상태={state.status.value}, 목차 {len(state.outline)} chars, "
            f"초안 {len(state.full_proposal)} chars, 검토 {len(state.review)} chars, "
            f"최종 {len(state.final_proposal)} chars"
        )
        return state

    async def _emit_event(
        self,
        callback: Optional[ProgressCallback],
        event_type: str,
        stage: Optional[str],
        message: str,
        progress_percent: int,
    ):
        """진행 상황 알림 이벤트를 발생시키는 함수"""
        if callback:
            event = WorkflowEvent(
                event_type=event_type,
                stage=stage,
                message=message,
                progress_percent=progress_percent,
            )
            await callback(event)
