"""
Layer 2: 프로젝트 컨텍스트 분석기.

RFP 텍스트를 기준으로 Google Drive의 관련 문서를 모아 ProjectContext를 만듭니다.

처리 흐름:
1. 프로젝트명 추출 (Claude, 실패 시 "Unknown Project")
2. Drive 관련 문서 검색 (5개 쿼리 병렬 실행)
3. 상위 10개 후보 문서의 내용 추출 / 분류 / 관련도 계산 (동시 실행 제한)
4. 관련도 내림차순 정렬
5. RFP 문서 객체 생성 (관련도 100)
6. 프로젝트 요약 생성 (Claude, 실패 시 고정 문구)
7. 요구사항 / 기술 명세 / 비즈니스 목표 / 제약조건 추출 (키워드 기반)
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from app.config import Settings, get_settings
from app.exceptions import ProjectAnalysisError
from app.models import MAX_RELATED_DOCUMENTS, DriveFile, ProjectContext, ProjectDocument
from app.services import ClaudeClient, DriveClient, PDFService, get_pdf_service

from .classifier import classify_document_type
from .content_extractor import DocumentContentExtractor
from .extractors import (
    extract_business_objectives,
    extract_constraints,
    extract_key_requirements,
    extract_technical_specifications,
)
from .finder import ProjectDocumentFinder
from .prompts.context_prompts import (
    PROJECT_NAME_SYSTEM_PROMPT,
    PROJECT_SUMMARY_SYSTEM_PROMPT,
    build_project_name_prompt,
    build_project_summary_prompt,
)
from .scorer import RelevanceScorer

logger = logging.getLogger(__name__)

UNKNOWN_PROJECT_NAME = "Unknown Project"
PROJECT_NAME_MAX_LENGTH = 100
PROJECT_SUMMARY_MAX_LENGTH = 2000

QUOTE_CHARACTERS = "\"'"


class ProjectAnalyzer:
    """
    RFP와 관련 문서를 분석하여 프로젝트 컨텍스트를 생성하는 분석기.

    Attributes:
        claude_client: 프로젝트명/요약 추출용 Claude 클라이언트
        finder: 관련 문서 검색기
        content_extractor: 문서 내용 추출기
        scorer: 관련도 계산기 (테스트에서는 시드 고정 RNG 주입)
    """

    def __init__(
        self,
        claude_client: ClaudeClient,
        drive_client: DriveClient,
        pdf_service: Optional[PDFService] = None,
        scorer: Optional[RelevanceScorer] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self.claude_client = claude_client
        self.finder = ProjectDocumentFinder(drive_client)
        self.content_extractor = DocumentContentExtractor(
            drive_client, pdf_service or get_pdf_service()
        )
        self.scorer = scorer or RelevanceScorer()
        self._max_concurrency = settings.context_max_concurrency

    async def extract_project_name(self, rfp_text: str) -> str:
        """
        RFP에서 프로젝트명을 추출합니다.

        앞뒤 공백과 따옴표를 제거하고 100자로 자릅니다.
        Claude 호출이 실패하거나 빈 응답이면 "Unknown Project"를 반환합니다.
        """
        try:
            response = await self.claude_client.complete(
                system_prompt=PROJECT_NAME_SYSTEM_PROMPT,
                user_prompt=build_project_name_prompt(rfp_text),
                max_tokens=100,
                temperature=0.1,
            )
        except Exception as e:
            logger.warning(f"[ProjectAnalyzer] 프로젝트명 추출 실패, 기본값 사용: {e}")
            return UNKNOWN_PROJECT_NAME

        name = response.strip()
        for quote in QUOTE_CHARACTERS:
            name = name.replace(quote, "")
        name = name.strip()[:PROJECT_NAME_MAX_LENGTH]

        if not name:
            logger.warning("[ProjectAnalyzer] 프로젝트명 응답이 비어있음, 기본값 사용")
            return UNKNOWN_PROJECT_NAME

        logger.info(f"[ProjectAnalyzer] 프로젝트명: {name}")
        return name

    async def generate_project_summary(
        self,
        project_name: str,
        rfp_text: str,
        documents: list[ProjectDocument],
    ) -> str:
        """프로젝트 요약을 생성합니다. 실패 시 문서 수를 담은 고정 문구를 반환합니다."""
        try:
            summary = await self.claude_client.complete(
                system_prompt=PROJECT_SUMMARY_SYSTEM_PROMPT,
                user_prompt=build_project_summary_prompt(project_name, rfp_text, documents),
                temperature=0.3,
            )
            return summary.strip()[:PROJECT_SUMMARY_MAX_LENGTH]

        except Exception as e:
            logger.warning(f"[ProjectAnalyzer] 요약 생성 실패, 기본 요약 사용: {e}")
            return f"Project: {project_name}. Analysis of {len(documents)} related documents completed."

    async def _process_document(
        self,
        file: DriveFile,
        project_name: str,
        semaphore: asyncio.Semaphore,
    ) -> ProjectDocument:
        async with semaphore:
            try:
                content = await self.content_extractor.extract(file)
            except Exception as e:
                logger.error(f"[ProjectAnalyzer] 문서 처리 실패 {file.name}: {e}")
                content = f"[Content extraction failed: {e}]"

        return ProjectDocument.from_drive_file(
            file,
            content=content,
            document_type=classify_document_type(file.name, content),
            relevance_score=self.scorer.score(project_name, file.name, content),
        )

    async def analyze_project_documents(
        self,
        rfp_text: str,
        rfp_file_id: Optional[str] = None,
    ) -> ProjectContext:
        """
        프로젝트 전체 컨텍스트를 분석합니다.

        Args:
            rfp_text: RFP 요구사항 텍스트
            rfp_file_id: Drive에서 가져온 RFP의 파일 ID (관련 문서 검색에서 제외)

        Returns:
            관련 문서와 추출 정보가 채워진 ProjectContext

        Raises:
            ProjectAnalysisError: 복구 불가능한 분석 실패 (원인 예외를 __cause__로 보존)
        """
        logger.info("[ProjectAnalyzer] 프로젝트 분석 시작")
        start_time = datetime.now()

        try:
            project_name = await self.extract_project_name(rfp_text)

            candidates = await self.finder.find(project_name, exclude_file_id=rfp_file_id)
            candidates = candidates[:MAX_RELATED_DOCUMENTS]

            semaphore = asyncio.Semaphore(self._max_concurrency)
            processed = await asyncio.gather(
                *[self._process_document(file, project_name, semaphore) for file in candidates]
            )
            documents = sorted(processed, key=lambda doc: doc.relevance_score, reverse=True)

            rfp_document = ProjectDocument.for_rfp(rfp_text, rfp_file_id)
            project_summary = await self.generate_project_summary(project_name, rfp_text, documents)

            context = ProjectContext(
                project_name=project_name,
                project_summary=project_summary,
                rfp_document=rfp_document,
                related_documents=documents,
                key_requirements=extract_key_requirements(documents),
                technical_specifications=extract_technical_specifications(documents),
                business_objectives=extract_business_objectives(documents),
                constraints=extract_constraints(documents),
            )

        except Exception as e:
            elapsed = (datetime.now() - start_time).total_seconds()
            logger.error(f"[ProjectAnalyzer] 프로젝트 분석 실패 ({elapsed:.1f}초): {e}")
            raise ProjectAnalysisError(
                "Failed to analyze project documents",
                details={"error_type": type(e).__name__, "reason": str(e)},
            ) from e

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"[ProjectAnalyzer] 분석 완료 ({elapsed:.1f}초): {context.project_name}, "
            f"관련 문서 {context.total_documents}건, 요구사항 {len(context.key_requirements)}건, "
            f"기술 명세 {len(context.technical_specifications)}건"
        )
        return context
