"""
제안서 워크플로우의 5개 단계 구현입니다.

분석 단계만 응답을 JSON으로 파싱하며, 나머지 단계의 출력은
가공 없이 다음 단계로 전달되는 텍스트입니다.
"""

import logging

from app.models import (
    FallbackAnalysis,
    ProposalState,
    RequirementsAnalysis,
    StructuredAnalysis,
    estimate_pages,
)
from app.utils.json_parser import extract_json

from .base_stage import BaseStage
from .prompts.workflow_prompts import (
    ANALYZE_PROMPT,
    ANALYZE_SYSTEM_PROMPT,
    FINALIZE_PROMPT,
    FINALIZE_SYSTEM_PROMPT,
    GENERATE_PROMPT,
    GENERATE_SYSTEM_PROMPT,
    OUTLINE_PROMPT,
    OUTLINE_SYSTEM_PROMPT,
    REVIEW_PROMPT,
    REVIEW_SYSTEM_PROMPT,
)

logger = logging.getLogger(__name__)


class AnalyzeStage(BaseStage):
    """
    1단계: 요구사항 분석.

    12개 고정 필드의 JSON을 요청합니다. 응답을 파싱할 수 없으면
    기본 분석값과 원본 응답(raw_analysis)을 담은 FallbackAnalysis로 대체하여
    파이프라인이 멈추지 않게 합니다.
    """

    name = "analyze"
    output_field = "analysis"
    system_prompt = ANALYZE_SYSTEM_PROMPT
    prompt_template = ANALYZE_PROMPT
    temperature = 0.3

    async def _do_run(self, state: ProposalState) -> RequirementsAnalysis:
        raw = await self._call_claude_text(self.build_prompt(state), strip=False)
        return self.parse_analysis(raw)

    def parse_analysis(self, raw: str) -> RequirementsAnalysis:
        # pydantic ValidationError도 ValueError의 하위 클래스
        try:
            data = extract_json(raw)
            if not isinstance(data, dict):
                raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
            analysis = StructuredAnalysis.model_validate(data)

        except ValueError as e:
            logger.warning(f"[{self.name}] JSON 파싱 실패, 기본 분석 사용: {e}")
            return FallbackAnalysis.from_raw(raw)

        logger.info(f"[{self.name}] 분석 완료: 복잡도={analysis.complexity_level}")
        return analysis


class OutlineStage(BaseStage):
    """2단계: 10개 고정 섹션의 제안서 목차."""

    name = "outline"
    output_field = "outline"
    system_prompt = OUTLINE_SYSTEM_PROMPT
    prompt_template = OUTLINE_PROMPT

    async def _do_run(self, state: ProposalState) -> str:
        outline = await self._call_claude_text(self.build_prompt(state))
        logger.info(f"[{self.name}] 목차 길이: {len(outline)} chars")
        return outline


class GenerateStage(BaseStage):
    """3단계: 제안서 초안 (3000-5000 단어, 길이는 프롬프트로만 지시)."""

    name = "generate"
    output_field = "full_proposal"
    system_prompt = GENERATE_SYSTEM_PROMPT
    prompt_template = GENERATE_PROMPT
    max_tokens = 8192

    async def _do_run(self, state: ProposalState) -> str:
        proposal = await self._call_claude_text(self.build_prompt(state))
        logger.info(f"[{self.name}] 초안 길이: {len(proposal)} chars, {len(proposal.split())} words")
        return proposal


class ReviewStage(BaseStage):
    name = "review"
    output_field = "review"
    system_prompt = REVIEW_SYSTEM_PROMPT
    prompt_template = REVIEW_PROMPT
    temperature = 0.4

    async def _do_run(self, state: ProposalState) -> str:
        return await self._call_claude_text(self.build_prompt(state))


class FinalizeStage(BaseStage):
    """5단계: 검토 의견을 반영한 최종 제안서."""

    name = "finalize"
    output_field = "final_proposal"
    system_prompt = FINALIZE_SYSTEM_PROMPT
    prompt_template = FINALIZE_PROMPT
    max_tokens = 8192

    async def _do_run(self, state: ProposalState) -> str:
        final = await self._call_claude_text(self.build_prompt(state))
        word_count = len(final.split())
        logger.info(f"[{self.name}] 최종 제안서: {word_count} words, 약 {estimate_pages(final)} pages")
        return final
