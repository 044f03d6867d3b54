"""
제안서 워크플로우 API입니다.
요구사항 텍스트를 받아 5단계 워크플로우를 실행하거나, 빠른 요구사항 분석을 수행합니다.
"""

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from app.api.responses import DOCUMENT_FILE_NAME, build_document_header, build_document_response
from app.models import ProcessingInfo
from app.services.orchestrator import ProposalOrchestrator, get_orchestrator

router = APIRouter()


class WorkflowRequest(BaseModel):
    """워크플로우 실행 요청"""
    requirements: str = Field(..., min_length=1, description="RFP 요구사항 텍스트")


class DocumentRequest(WorkflowRequest):
    """제안서 문서 생성 요청"""
    format: Literal["text", "json"] = Field("text", description="text: 다운로드용 텍스트, json: 메타데이터 포함")


@router.post("/workflow")
async def run_workflow(
    request: WorkflowRequest,
    orchestrator: ProposalOrchestrator = Depends(get_orchestrator),
) -> dict:
    """
    워크플로우 실행 API.
    분석 → 목차 → 생성 → 검토 → 최종화 결과 전체를 반환합니다.
    """
    state = await orchestrator.run_proposal_workflow(request.requirements)

    return {
        "message": "Proposal generated successfully",
        "state": state.model_dump(mode="json"),
        "status": state.status.value,
        "processing_info": ProcessingInfo.from_state(state, request.requirements).model_dump(mode="json"),
    }


@router.post("/analyze")
async def analyze_requirements(
    request: WorkflowRequest,
    orchestrator: ProposalOrchestrator = Depends(get_orchestrator),
) -> dict:
    """빠른 요구사항 분석 API. 키워드, 복잡도, 예상 예산, 일정을 반환합니다."""
    summary = await orchestrator.analyze_requirements(request.requirements)

    return {
        "message": "Requirements analyzed successfully",
        "analysis": summary.model_dump(mode="json"),
    }


@router.post("/document")
async def generate_document(
    request: DocumentRequest,
    orchestrator: ProposalOrchestrator = Depends(get_orchestrator),
):
    """
    제안서 문서 생성 API.
    format=text이면 머리글을 붙인 텍스트 파일로, json이면 문서 메타데이터와 함께 반환합니다.
    """
    state = await orchestrator.run_proposal_workflow(request.requirements)
    generated_at = datetime.now()

    if request.format == "text":
        return PlainTextResponse(
            build_document_header(generated_at) + state.final_proposal,
            headers={"Content-Disposition": f'attachment; filename="{DOCUMENT_FILE_NAME}"'},
        )

    return build_document_response(request.requirements, state, generated_at)
