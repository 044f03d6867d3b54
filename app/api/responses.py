"""제안서 API 응답 본문을 만드는 함수들입니다."""

from datetime import datetime
from typing import Optional

from app.models import EnhancedProposalResult, ProcessingInfo, ProjectContext, ProposalState

REQUIREMENTS_PREVIEW_LENGTH = 500
SECTION_PREVIEW_LENGTH = 1000


def _preview(text: str, length: int) -> str:
    return text[:length] + "..." if len(text) > length else text


def build_proposal_response(
    message: str,
    requirements: str,
    state: ProposalState,
    file_name: Optional[str] = None,
    enhanced_prompt: Optional[str] = None,
) -> dict:
    """워크플로우 결과를 API 응답 형식으로 변환합니다. 목차와 검토는 미리보기만 담습니다."""
    processing_info = ProcessingInfo.from_state(state, requirements, enhanced_prompt)

    response = {
        "message": message,
        "processing_info": processing_info.model_dump(mode="json"),
        "extracted_requirements": _preview(requirements, REQUIREMENTS_PREVIEW_LENGTH),
        "business_proposal": {
            "analysis": state.analysis.model_dump(mode="json") if state.analysis else None,
            "outline": _preview(state.outline, SECTION_PREVIEW_LENGTH),
            "full_proposal": state.full_proposal,
            "review": _preview(state.review, SECTION_PREVIEW_LENGTH),
            "final_proposal": state.final_proposal,
        },
    }
    if file_name:
        response["original_file_name"] = file_name
    return response


def build_project_context_summary(context: ProjectContext) -> dict:
    return {
        "project_name": context.project_name,
        "total_documents": context.total_documents,
        "documents_summary": [
            {
                "name": doc.name,
                "type": doc.document_type.value,
                "relevance_score": doc.relevance_score,
                "size": doc.metadata.size,
            }
            for doc in context.related_documents
        ],
        "project_summary": context.project_summary,
        "key_insights": {
            "requirements": len(context.key_requirements),
            "technical_specs": len(context.technical_specifications),
            "business_objectives": len(context.business_objectives),
            "constraints": len(context.constraints),
        },
    }


def build_enhanced_response(
    message: str,
    requirements: str,
    result: EnhancedProposalResult,
    file_name: Optional[str] = None,
) -> dict:
    """
    컨텍스트 확장 결과 응답.
    컨텍스트 분석에 실패한 경우 project_context는 None, context_error에 사유가 담깁니다.
    """
    response = build_proposal_response(
        message, requirements, result.state,
        file_name=file_name, enhanced_prompt=result.enhanced_prompt,
    )
    response["project_context"] = (
        build_project_context_summary(result.context) if result.context else None
    )
    response["context_error"] = result.context_error
    return response


DOCUMENT_FILE_NAME = "business-proposal.txt"


def build_document_header(generated_at: datetime) -> str:
    """다운로드용 제안서 문서 머리글."""
    return (
        "\nBUSINESS PROPOSAL DOCUMENT\n"
        f"Generated: {generated_at.strftime('%Y-%m-%d')}\n"
        "Project: RFP Response\n"
        f"{'=' * 50}\n\n"
    )


def build_document_response(
    requirements: str,
    state: ProposalState,
    generated_at: datetime,
) -> dict:
    """최종 제안서를 머리글과 문서 메타데이터(단어 수, 글자 수, 예상 페이지)와 함께 반환합니다."""
    processing_info = ProcessingInfo.from_state(state, requirements)

    return {
        "message": "Comprehensive business proposal document generated",
        "document": {
            "header": build_document_header(generated_at),
            "content": state.final_proposal,
            "metadata": {
                "generated_at": generated_at.isoformat(),
                "word_count": processing_info.final_proposal_word_count,
                "character_count": processing_info.final_proposal_length,
                "estimated_pages": processing_info.estimated_pages,
                "processing_steps": processing_info.processing_steps,
            },
            "analysis": state.analysis.model_dump(mode="json") if state.analysis else None,
            "outline": state.outline,
            "review": state.review,
        },
    }
