"""
제안서 생성 워크플로우 데이터 모델입니다.

ProposalState는 5단계 파이프라인(분석 → 목차 → 생성 → 검토 → 최종화)을
거치며 채워지는 누적 상태입니다. 각 필드는 정확히 한 단계에서 한 번만 기록됩니다.
"""

import math
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .project import ProjectContext


# 분석 결과의 고정 필드 12개 (LLM에 요청하는 JSON 구조와 동일)
ANALYSIS_FIELDS = (
    "project_overview",
    "key_objectives",
    "technical_requirements",
    "deliverables",
    "timeline_indicators",
    "budget_indicators",
    "complexity_level",
    "industry_sector",
    "stakeholders",
    "success_criteria",
    "risks_identified",
    "compliance_requirements",
)

_LIST_FIELDS = (
    "key_objectives",
    "technical_requirements",
    "deliverables",
    "stakeholders",
    "success_criteria",
    "risks_identified",
    "compliance_requirements",
)

_TEXT_FIELDS = tuple(name for name in ANALYSIS_FIELDS if name not in _LIST_FIELDS)


class AnalysisBase(BaseModel):
    """요구사항 분석 결과의 공통 필드."""

    model_config = ConfigDict(extra="ignore")

    project_overview: Optional[str] = None
    key_objectives: list[str] = Field(default_factory=list)
    technical_requirements: list[str] = Field(default_factory=list)
    deliverables: list[str] = Field(default_factory=list)
    timeline_indicators: Optional[str] = None
    budget_indicators: Optional[str] = None
    complexity_level: Optional[str] = None
    industry_sector: Optional[str] = None
    stakeholders: list[str] = Field(default_factory=list)
    success_criteria: list[str] = Field(default_factory=list)
    risks_identified: list[str] = Field(default_factory=list)
    compliance_requirements: list[str] = Field(default_factory=list)

    @field_validator(*_LIST_FIELDS, mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> Any:
        # LLM이 배열 대신 문자열 하나를 돌려주는 경우가 많음
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        if isinstance(value, list):
            return [item if isinstance(item, str) else str(item) for item in value]
        return value

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        if isinstance(value, list):
            return ", ".join(str(item) for item in value)
        if isinstance(value, (int, float)):
            return str(value)
        return value


class StructuredAnalysis(AnalysisBase):
    """LLM 응답을 JSON으로 정상 파싱한 분석 결과."""

    kind: Literal["structured"] = "structured"


class FallbackAnalysis(AnalysisBase):
    """
    LLM 응답 파싱에 실패했을 때 사용하는 기본 분석 결과.
    원본 응답은 raw_analysis에 그대로 보관하여 정보가 사라지지 않게 합니다.
    """

    kind: Literal["fallback"] = "fallback"
    raw_analysis: str = ""

    @classmethod
    def from_raw(cls, raw_text: str) -> "FallbackAnalysis":
        return cls(
            project_overview="Complex project requiring detailed analysis",
            key_objectives=[
                "Meet RFP requirements",
                "Deliver quality solution",
                "Ensure client satisfaction",
            ],
            technical_requirements=["Technical solution", "Implementation", "Testing"],
            deliverables=["Final product", "Documentation", "Support"],
            timeline_indicators="To be determined based on scope",
            budget_indicators="Competitive pricing",
            complexity_level="medium",
            industry_sector="general",
            stakeholders=["Client", "End users", "Technical team"],
            success_criteria=["On-time delivery", "Quality standards", "Client approval"],
            risks_identified=["Technical challenges", "Timeline constraints"],
            compliance_requirements=["Industry standards", "Best practices"],
            raw_analysis=raw_text,
        )


RequirementsAnalysis = Annotated[
    Union[StructuredAnalysis, FallbackAnalysis],
    Field(discriminator="kind"),
]


class WorkflowStatus(str, Enum):
    """
    워크플로우 진행 상태입니다. 순방향으로만 이동하며 FINALIZED가 유일한 종료 상태입니다.
    """

    START = "start"
    ANALYZED = "analyzed"
    OUTLINED = "outlined"
    GENERATED = "generated"
    REVIEWED = "reviewed"
    FINALIZED = "finalized"


# 상태 필드 기록 순서. 프롬프트에도 이 순서대로 렌더링됩니다.
STATE_FIELDS = (
    "requirements",
    "analysis",
    "outline",
    "full_proposal",
    "review",
    "final_proposal",
)


class ProposalState(BaseModel):
    """5단계 워크플로우를 따라 전달되는 누적 상태."""

    requirements: str
    analysis: Optional[RequirementsAnalysis] = None
    outline: str = ""
    full_proposal: str = ""
    review: str = ""
    final_proposal: str = ""

    def is_populated(self, field_name: str) -> bool:
        value = getattr(self, field_name)
        if isinstance(value, str):
            return bool(value)
        return value is not None

    @property
    def status(self) -> WorkflowStatus:
        """채워진 필드를 기준으로 현재 상태를 계산합니다."""
        progression = [
            ("final_proposal", WorkflowStatus.FINALIZED),
            ("review", WorkflowStatus.REVIEWED),
            ("full_proposal", WorkflowStatus.GENERATED),
            ("outline", WorkflowStatus.OUTLINED),
            ("analysis", WorkflowStatus.ANALYZED),
        ]
        for field_name, status in progression:
            if self.is_populated(field_name):
                return status
        return WorkflowStatus.START


class WorkflowEvent(BaseModel):
    """
    워크플로우 진행 상황 알림 이벤트입니다.
    """

    event_type: str = Field(
        ..., description="이벤트 종류: stage_start, stage_complete, error"
    )
    stage: Optional[str] = None
    message: str
    progress_percent: int = 0
    timestamp: datetime = Field(default_factory=datetime.now)


# 분당 읽기 속도 (단어)
READING_WORDS_PER_MINUTE = 200

# 페이지당 단어 수
WORDS_PER_PAGE = 250

PROCESSING_STEPS = ["analyze", "outline", "generate", "review", "finalize"]


def estimate_pages(text: str) -> int:
    """WORDS_PER_PAGE 기준 예상 페이지 수."""
    return math.ceil(len(text.split()) / WORDS_PER_PAGE)


class ProcessingInfo(BaseModel):
    """API 응답에 포함되는 처리 통계."""

    requirements_word_count: int
    enhanced_prompt_word_count: Optional[int] = None
    final_proposal_word_count: int
    final_proposal_length: int
    estimated_reading_time: str
    estimated_pages: int
    processing_steps: list[str] = Field(default_factory=lambda: list(PROCESSING_STEPS))
    status: WorkflowStatus
    enhanced_with_project_context: bool = False

    @classmethod
    def from_state(
        cls,
        state: ProposalState,
        requirements: str,
        enhanced_prompt: Optional[str] = None,
    ) -> "ProcessingInfo":
        words = len(state.final_proposal.split())
        minutes = math.ceil(words / READING_WORDS_PER_MINUTE)
        return cls(
            requirements_word_count=len(requirements.split()),
            enhanced_prompt_word_count=len(enhanced_prompt.split()) if enhanced_prompt else None,
            final_proposal_word_count=words,
            final_proposal_length=len(state.final_proposal),
            estimated_reading_time=f"{minutes} minutes",
            estimated_pages=estimate_pages(state.final_proposal),
            status=state.status,
            enhanced_with_project_context=enhanced_prompt is not None,
        )


class EnhancedProposalResult(BaseModel):
    """
    프로젝트 컨텍스트를 반영한 제안서 생성 결과.

    컨텍스트 분석에 실패하여 원본 요구사항만으로 생성한 경우
    context는 None이고 context_error에 실패 사유가 남습니다.
    """

    context: Optional[ProjectContext] = None
    context_error: Optional[str] = None
    enhanced_prompt: Optional[str] = None
    state: ProposalState


class RequirementsSummary(BaseModel):
    """
    워크플로우 없이 한 번의 호출로 얻는 요구사항 요약 분석.
    LLM은 camelCase 키(estimatedBudget)로 응답하므로 alias로 받습니다.
    """

    model_config = ConfigDict(populate_by_name=True)

    keywords: list[str] = Field(default_factory=list)
    complexity: str = Field("medium", description="low / medium / high")
    estimated_budget: str = Field("", alias="estimatedBudget")
    timeline: str = ""

    @field_validator("keywords", mode="before")
    @classmethod
    def _coerce_keywords(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [keyword.strip() for keyword in value.split(",") if keyword.strip()]
        if isinstance(value, list):
            return [item if isinstance(item, str) else str(item) for item in value]
        return value

    @field_validator("complexity", "estimated_budget", "timeline", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)):
            return str(value)
        return value
