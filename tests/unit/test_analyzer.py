"""Unit tests for ProjectAnalyzer (project context aggregation)."""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from app.exceptions import ClaudeClientError, ProjectAnalysisError
from app.layers.layer2_context import ProjectAnalyzer
from app.layers.layer2_context.analyzer import UNKNOWN_PROJECT_NAME
from app.models import DocumentType, DriveFile, DriveFileList, MAX_RELATED_DOCUMENTS
from app.services import PDFHealthReport

RFP_TEXT = "Request for proposal: Patient Portal. Requirements: the portal must support scheduling."


@pytest.fixture
def pdf_service():
    service = MagicMock()
    service.check_health = MagicMock(return_value=PDFHealthReport(is_healthy=True))
    service.extract_text = AsyncMock(return_value="Technical specification: platform is AWS.\nThe system must encrypt data")
    return service


@pytest.fixture
def analyzer(mock_claude_client, mock_drive_client, pdf_service, seeded_scorer, settings):
    return ProjectAnalyzer(
        mock_claude_client,
        mock_drive_client,
        pdf_service=pdf_service,
        scorer=seeded_scorer,
        settings=settings,
    )


class TestExtractProjectName:
    async def test_strips_quotes_and_whitespace(self, analyzer, mock_claude_client):
        mock_claude_client.complete.return_value = '  "Patient Portal"  \n'
        assert await analyzer.extract_project_name(RFP_TEXT) == "Patient Portal"

    async def test_truncated_to_100_chars(self, analyzer, mock_claude_client):
        mock_claude_client.complete.return_value = "P" * 150
        assert len(await analyzer.extract_project_name(RFP_TEXT)) == 100

    async def test_failure_falls_back(self, analyzer, mock_claude_client):
        mock_claude_client.complete.side_effect = ClaudeClientError("timeout")
        assert await analyzer.extract_project_name(RFP_TEXT) == UNKNOWN_PROJECT_NAME

    async def test_empty_answer_falls_back(self, analyzer, mock_claude_client):
        mock_claude_client.complete.return_value = "''"
        assert await analyzer.extract_project_name(RFP_TEXT) == UNKNOWN_PROJECT_NAME

    async def test_prompt_uses_rfp_excerpt(self, analyzer, mock_claude_client):
        await analyzer.extract_project_name("x" * 5000)
        user_prompt = mock_claude_client.complete.await_args.kwargs["user_prompt"]
        assert "x" * 2000 + "..." in user_prompt
        assert "x" * 2001 not in user_prompt


class TestGenerateProjectSummary:
    async def test_truncated_to_2000_chars(self, analyzer, mock_claude_client):
        mock_claude_client.complete.return_value = "s" * 3000
        summary = await analyzer.generate_project_summary("Portal", RFP_TEXT, [])
        assert len(summary) == 2000

    async def test_failure_falls_back(self, analyzer, mock_claude_client):
        mock_claude_client.complete.side_effect = ClaudeClientError("rate limited")
        summary = await analyzer.generate_project_summary("Portal", RFP_TEXT, [])
        assert summary == "Project: Portal. Analysis of 0 related documents completed."


class TestAnalyzeProjectDocuments:
    async def test_builds_context(self, analyzer, mock_claude_client):
        mock_claude_client.complete.side_effect = ["Patient Portal", "A scheduling portal for clinics."]

        context = await analyzer.analyze_project_documents(RFP_TEXT, rfp_file_id="rfp-1")

        assert context.project_name == "Patient Portal"
        assert context.project_summary == "A scheduling portal for clinics."
        assert context.rfp_document.id == "rfp-1"
        assert context.rfp_document.relevance_score == 100
        assert context.rfp_document.document_type == DocumentType.RFP
        assert context.total_documents == 3
        assert "The system must encrypt data" in context.key_requirements
        assert "Budget constraint: under $200k" in context.constraints
        assert "Objective: HIPAA compliance" in context.business_objectives

    async def test_uploaded_rfp_id(self, analyzer, mock_claude_client):
        context = await analyzer.analyze_project_documents(RFP_TEXT)
        assert context.rfp_document.id == "uploaded-rfp"

    async def test_caps_candidates_and_sorts(self, analyzer, mock_drive_client):
        """15개 후보 중 최대 10개만 처리하고 관련도 내림차순으로 정렬해야 한다."""
        candidates = [
            DriveFile(id=f"f{i}", name=f"note {i}.txt", mime_type="text/plain") for i in range(15)
        ]
        mock_drive_client.search.side_effect = [
            DriveFileList(files=candidates), DriveFileList(), DriveFileList(),
            DriveFileList(), DriveFileList(),
        ]

        context = await analyzer.analyze_project_documents(RFP_TEXT)

        assert len(context.related_documents) <= MAX_RELATED_DOCUMENTS
        assert mock_drive_client.download.await_count == MAX_RELATED_DOCUMENTS
        assert {doc.id for doc in context.related_documents} == {f"f{i}" for i in range(10)}
        scores = [doc.relevance_score for doc in context.related_documents]
        assert scores == sorted(scores, reverse=True)

    async def test_document_processing_respects_concurrency_limit(self, analyzer, mock_drive_client, settings):
        """동시에 진행 중인 다운로드 수는 context_max_concurrency를 넘지 않아야 한다."""
        candidates = [
            DriveFile(id=f"f{i}", name=f"note {i}.txt", mime_type="text/plain") for i in range(6)
        ]
        mock_drive_client.search.return_value = DriveFileList(files=candidates)
        in_flight = 0
        peak = 0

        async def slow_download(file_id):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return b"budget notes"

        mock_drive_client.download.side_effect = slow_download

        context = await analyzer.analyze_project_documents(RFP_TEXT)

        assert context.total_documents == 6
        assert settings.context_max_concurrency == 2
        assert peak == 2

    async def test_document_failure_does_not_abort_batch(self, analyzer, mock_drive_client):
        mock_drive_client.download.side_effect = RuntimeError("socket closed")

        context = await analyzer.analyze_project_documents(RFP_TEXT)

        assert context.total_documents == 3
        pdf_doc = next(doc for doc in context.related_documents if doc.id == "file-spec")
        assert pdf_doc.content.startswith("[Content extraction failed:")

    async def test_name_failure_still_produces_context(self, analyzer, mock_claude_client):
        mock_claude_client.complete.side_effect = [ClaudeClientError("down"), "summary"]

        context = await analyzer.analyze_project_documents(RFP_TEXT)

        assert context.project_name == UNKNOWN_PROJECT_NAME

    async def test_unexpected_failure_is_wrapped(self, analyzer, mock_drive_client):
        analyzer.finder.find = AsyncMock(side_effect=KeyError("boom"))

        with pytest.raises(ProjectAnalysisError) as exc_info:
            await analyzer.analyze_project_documents(RFP_TEXT)

        assert exc_info.value.message == "Failed to analyze project documents"
        assert isinstance(exc_info.value.__cause__, KeyError)
