"""Unit tests for pydantic models."""

import pytest
from pydantic import ValidationError

from app.models import (
    DOCUMENT_CONTENT_LIMIT,
    MAX_CONSTRAINTS,
    DocumentType,
    DriveFile,
    FallbackAnalysis,
    ProcessingInfo,
    ProjectContext,
    ProjectDocument,
    ProposalState,
    StructuredAnalysis,
    WorkflowStatus,
    estimate_pages,
)


def make_doc(doc_id: str, score: float) -> ProjectDocument:
    return ProjectDocument(id=doc_id, name=doc_id, mime_type="text/plain", relevance_score=score)


class TestDriveFile:
    def test_camel_case_aliases(self):
        file = DriveFile.model_validate({
            "id": "f1", "name": "Spec.pdf", "mimeType": "application/pdf", "webViewLink": "https://x",
        })

        assert file.mime_type == "application/pdf"
        assert file.web_view_link == "https://x"

    def test_default_mime_type(self):
        assert DriveFile(id="f1", name="unknown").mime_type == "application/octet-stream"


class TestProjectDocument:
    def test_content_truncated(self):
        doc = ProjectDocument(id="d", name="d", mime_type="text/plain", content="a" * (DOCUMENT_CONTENT_LIMIT + 5))

        assert len(doc.content) == DOCUMENT_CONTENT_LIMIT

    @pytest.mark.parametrize("score", [-1, 100.5])
    def test_score_bounds(self, score):
        with pytest.raises(ValidationError):
            make_doc("d", score)

    def test_rfp_document(self):
        doc = ProjectDocument.for_rfp("RFP body", rfp_file_id="drive-1")

        assert doc.id == "drive-1"
        assert doc.document_type == DocumentType.RFP
        assert doc.relevance_score == 100.0


class TestProjectContext:
    def test_related_documents_sorted(self):
        context = ProjectContext(
            project_name="P",
            project_summary="S",
            rfp_document=ProjectDocument.for_rfp("rfp"),
            related_documents=[make_doc("low", 10), make_doc("high", 90), make_doc("mid", 50)],
        )

        assert [doc.id for doc in context.related_documents] == ["high", "mid", "low"]
        assert context.total_documents == 3
        assert context.model_dump()["total_documents"] == 3

    def test_frozen(self):
        context = ProjectContext(project_name="P", project_summary="S", rfp_document=ProjectDocument.for_rfp("rfp"))

        with pytest.raises(ValidationError):
            context.project_name = "Other"

    def test_list_caps(self):
        with pytest.raises(ValidationError):
            ProjectContext(
                project_name="P",
                project_summary="S",
                rfp_document=ProjectDocument.for_rfp("rfp"),
                constraints=[f"c{i}" for i in range(MAX_CONSTRAINTS + 1)],
            )


class TestAnalysis:
    def test_string_coerced_to_list(self):
        analysis = StructuredAnalysis.model_validate({"stakeholders": "Clinics", "complexity_level": ["high"]})

        assert analysis.stakeholders == ["Clinics"]
        assert analysis.complexity_level == "high"

    def test_state_discriminates_by_kind(self):
        state = ProposalState.model_validate({
            "requirements": "r",
            "analysis": FallbackAnalysis.from_raw("raw text").model_dump(),
        })

        assert isinstance(state.analysis, FallbackAnalysis)
        assert state.analysis.raw_analysis == "raw text"


class TestProposalState:
    def test_status_follows_populated_fields(self):
        state = ProposalState(requirements="r")
        assert state.status == WorkflowStatus.START

        state = state.model_copy(update={"analysis": StructuredAnalysis(), "outline": "o"})
        assert state.status == WorkflowStatus.OUTLINED

        state = state.model_copy(update={"full_proposal": "p", "review": "v", "final_proposal": "f"})
        assert state.status == WorkflowStatus.FINALIZED


class TestProcessingInfo:
    def test_from_state(self):
        state = ProposalState(requirements="r", final_proposal="word " * 401)

        info = ProcessingInfo.from_state(state, "one two three")

        assert info.requirements_word_count == 3
        assert info.final_proposal_word_count == 401
        assert info.estimated_reading_time == "3 minutes"
        assert info.estimated_pages == 2
        assert info.enhanced_prompt_word_count is None
        assert info.enhanced_with_project_context is False
        assert info.processing_steps == ["analyze", "outline", "generate", "review", "finalize"]

    def test_enhanced_prompt_counted(self):
        state = ProposalState(requirements="r", final_proposal="done")

        info = ProcessingInfo.from_state(state, "reqs", enhanced_prompt="a b c d")

        assert info.enhanced_prompt_word_count == 4
        assert info.enhanced_with_project_context is True


@pytest.mark.parametrize("words, pages", [(0, 0), (1, 1), (250, 1), (251, 2)])
def test_estimate_pages(words, pages):
    assert estimate_pages("word " * words) == pages
