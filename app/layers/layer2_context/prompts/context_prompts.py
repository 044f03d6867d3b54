"""Prompts for project context analysis."""

from typing import Optional

from app.models import ProjectContext, ProjectDocument

RFP_EXCERPT_LENGTH = 2000
SUMMARY_DOCUMENT_COUNT = 5
SUMMARY_DOCUMENT_EXCERPT_LENGTH = 1000

PROJECT_NAME_SYSTEM_PROMPT = """You extract project names from RFP documents.
Return only the project name, nothing else."""

PROJECT_NAME_PROMPT = """Analyze this RFP document and extract the project name or title.
Return only the project name, nothing else.

RFP Content:
{rfp_excerpt}...

Project Name:"""

PROJECT_SUMMARY_SYSTEM_PROMPT = """You are a senior business analyst.
You summarize projects from RFPs and their supporting documents."""

PROJECT_SUMMARY_PROMPT = """Create a comprehensive project summary based on the RFP and related documents.

Project Name: {project_name}

RFP Content:
{rfp_excerpt}...

Related Documents:
{documents}

Generate a detailed project summary that includes:
1. Project overview and scope
2. Main objectives
3. Key stakeholders
4. Technology requirements
5. Timeline expectations
6. Budget considerations
7. Success criteria

Summary:"""


def build_project_name_prompt(rfp_text: str) -> str:
    return PROJECT_NAME_PROMPT.format(rfp_excerpt=rfp_text[:RFP_EXCERPT_LENGTH])


def build_project_summary_prompt(
    project_name: str,
    rfp_text: str,
    documents: list[ProjectDocument],
) -> str:
    """상위 5개 문서의 앞부분(1000자)을 포함한 요약 프롬프트를 만듭니다."""
    excerpts = "".join(
        f"Document: {doc.name}\n"
        f"Type: {doc.document_type.value}\n"
        f"{doc.content[:SUMMARY_DOCUMENT_EXCERPT_LENGTH]}...\n\n"
        for doc in documents[:SUMMARY_DOCUMENT_COUNT]
    )
    return PROJECT_SUMMARY_PROMPT.format(
        project_name=project_name,
        rfp_excerpt=rfp_text[:RFP_EXCERPT_LENGTH],
        documents=excerpts,
    )


def _bullets(items: list[str]) -> str:
    return "\n".join(f"• {item}" for item in items)


def build_enhanced_prompt(
    context: ProjectContext,
    requirements: str,
    source_file_name: Optional[str] = None,
) -> str:
    """
    프로젝트 컨텍스트와 원본 요구사항을 합쳐 워크플로우 입력 프롬프트를 만듭니다.

    Args:
        context: 분석된 프로젝트 컨텍스트
        requirements: 원본 RFP 요구사항 텍스트
        source_file_name: Drive에서 가져온 RFP 파일명 (업로드인 경우 None)
    """
    source = "the Google Drive RFP" if source_file_name else "the RFP"

    lines = [
        f"Based on {source} and comprehensive project analysis, generate a detailed business proposal.",
        "",
        "PROJECT CONTEXT:",
        f"- Project Name: {context.project_name}",
    ]
    if source_file_name:
        lines.append(f"- Source File: {source_file_name}")
    lines.extend([
        f"- Related Documents Analyzed: {context.total_documents}",
        f"- Project Summary: {context.project_summary}",
        "",
        "KEY REQUIREMENTS:",
        _bullets(context.key_requirements),
        "",
        "TECHNICAL SPECIFICATIONS:",
        _bullets(context.technical_specifications),
        "",
        "BUSINESS OBJECTIVES:",
        _bullets(context.business_objectives),
        "",
        "CONSTRAINTS:",
        _bullets(context.constraints),
        "",
        "RELATED DOCUMENTS ANALYZED:",
        "\n".join(
            f"- {doc.name} ({doc.document_type.value}) - Relevance: {doc.relevance_score:.1f}/100"
            for doc in context.related_documents
        ),
        "",
        "ORIGINAL RFP REQUIREMENTS:",
        requirements,
        "",
        "Generate a comprehensive business proposal that addresses all requirements "
        "and leverages insights from all project documents.",
    ])
    return "\n".join(lines)
