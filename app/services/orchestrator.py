"""
제안서 생성 전체 흐름을 관리하는 '지휘자' 역할을 하는 오케스트레이터입니다.

두 가지 경로를 제공합니다:
1. 기본 경로: 요구사항 텍스트 → 5단계 워크플로우
2. 확장 경로: 요구사항 텍스트 → 프로젝트 컨텍스트 분석 (Google Drive)
   → 확장 프롬프트 → 5단계 워크플로우
"""

import logging
from typing import Optional

from pydantic import ValidationError

from app.config import Settings, get_settings
from app.exceptions import ClaudeClientError, InputValidationError, ProjectAnalysisError
from app.models import (
    EnhancedProposalResult,
    ProjectContext,
    ProposalState,
    RequirementsSummary,
)
from app.services.claude_client import ClaudeClient, get_claude_client
from app.services.drive_client import DriveClient
from app.services.pdf_service import PDFService, get_pdf_service
# 순환 참조를 피하기 위해 레이어는 __init__ 안에서 import 합니다.

logger = logging.getLogger(__name__)


class ProposalOrchestrator:
    """
    프로젝트 컨텍스트 분석과 제안서 워크플로우를 조율하는 클래스입니다.
    Drive 클라이언트는 사용자 토큰마다 다르므로 호출할 때 전달받습니다.
    """

    def __init__(
        self,
        claude_client: Optional[ClaudeClient] = None,
        pdf_service: Optional[PDFService] = None,
        settings: Optional[Settings] = None,
        scorer=None,
    ):
        from app.layers.layer3_workflow import ProposalWorkflow

        self.claude_client = claude_client or get_claude_client()
        self.pdf_service = pdf_service or get_pdf_service()
        self.settings = settings or get_settings()
        self.scorer = scorer
        self.workflow = ProposalWorkflow(self.claude_client)

    async def run_proposal_workflow(self, requirements: str, on_progress=None) -> ProposalState:
        """
        요구사항으로 5단계 워크플로우를 실행합니다.

        Raises:
            WorkflowError: 실패한 단계와 원인 예외를 담은 에러
        """
        return await self.workflow.run(requirements, on_progress=on_progress)

    async def analyze_requirements(self, requirements: str) -> RequirementsSummary:
        """
        워크플로우 없이 Claude를 한 번 호출해 요구사항을 요약합니다.
        (키워드, 복잡도, 예상 예산, 일정)

        Raises:
            InputValidationError: 비어 있는 요구사항
            ClaudeClientError: 호출 실패 또는 응답 형식 오류
        """
        from app.layers.layer3_workflow.prompts.workflow_prompts import (
            REQUIREMENTS_SUMMARY_PROMPT,
            REQUIREMENTS_SUMMARY_SYSTEM_PROMPT,
        )

        if not requirements or not requirements.strip():
            raise InputValidationError("Requirements text is required")

        result = await self.claude_client.complete_json(
            system_prompt=REQUIREMENTS_SUMMARY_SYSTEM_PROMPT,
            user_prompt=REQUIREMENTS_SUMMARY_PROMPT.format(requirements=requirements),
            temperature=0.2,
        )

        if not isinstance(result, dict):
            raise ClaudeClientError(
                "Failed to analyze requirements",
                details={"response_type": type(result).__name__},
            )

        try:
            summary = RequirementsSummary.model_validate(result)
        except ValidationError as e:
            raise ClaudeClientError(
                "Failed to analyze requirements",
                details={"error": str(e)},
            ) from e

        logger.info(
            f"[ProposalOrchestrator] 요구사항 요약 완료: complexity={summary.complexity}, "
            f"{len(summary.keywords)} keywords"
        )
        return summary

    async def analyze_project_documents(
        self,
        rfp_text: str,
        drive_client: DriveClient,
        rfp_file_id: Optional[str] = None,
    ) -> ProjectContext:
        """
        RFP와 Drive 관련 문서로 프로젝트 컨텍스트를 만듭니다.

        Raises:
            ProjectAnalysisError: 분석 실패
        """
        from app.layers.layer2_context import ProjectAnalyzer

        analyzer = ProjectAnalyzer(
            self.claude_client,
            drive_client,
            pdf_service=self.pdf_service,
            scorer=self.scorer,
            settings=self.settings,
        )
        return await analyzer.analyze_project_documents(rfp_text, rfp_file_id)

    async def generate_enhanced_proposal(
        self,
        requirements: str,
        drive_client: DriveClient,
        rfp_file_id: Optional[str] = None,
        source_file_name: Optional[str] = None,
        on_progress=None,
    ) -> EnhancedProposalResult:
        """
        프로젝트 컨텍스트를 반영한 제안서를 생성합니다.

        컨텍스트 분석이 실패하면 fallback_without_context 설정에 따라
        원본 요구사항만으로 워크플로우를 실행하거나 에러를 그대로 전파합니다.
        """
        from app.layers.layer2_context.prompts.context_prompts import build_enhanced_prompt

        try:
            context = await self.analyze_project_documents(requirements, drive_client, rfp_file_id)

        except ProjectAnalysisError as e:
            if not self.settings.fallback_without_context:
                raise
            logger.warning(f"[ProposalOrchestrator] 컨텍스트 분석 실패, 원본 요구사항으로 진행: {e}")
            state = await self.run_proposal_workflow(requirements, on_progress=on_progress)
            return EnhancedProposalResult(context=None, context_error=e.message, state=state)

        enhanced_prompt = build_enhanced_prompt(context, requirements, source_file_name)
        logger.info(
            f"[ProposalOrchestrator] 확장 프롬프트 생성: {context.project_name}, "
            f"{len(enhanced_prompt.split())} words"
        )

        state = await self.run_proposal_workflow(enhanced_prompt, on_progress=on_progress)
        return EnhancedProposalResult(context=context, enhanced_prompt=enhanced_prompt, state=state)


# 싱글톤 인스턴스 (프로그램 전체에서 하나만 생성됨)
_orchestrator: Optional[ProposalOrchestrator] = None


def get_orchestrator() -> ProposalOrchestrator:
    """오케스트레이터 인스턴스를 가져오거나 생성하는 함수"""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = ProposalOrchestrator()
    return _orchestrator
