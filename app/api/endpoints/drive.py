"""
Google Drive 연동 API입니다.
Authorization: Bearer <Google access token> 헤더로 사용자의 Drive에 접근합니다.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.api.dependencies import get_drive_client
from app.api.responses import build_enhanced_response, build_proposal_response
from app.exceptions import InputValidationError
from app.services import DriveClient, PDFService, get_pdf_service
from app.services.orchestrator import ProposalOrchestrator, get_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


class ProcessPdfRequest(BaseModel):
    """Drive PDF 처리 요청"""
    file_id: str = Field(..., min_length=1)
    enhanced: bool = Field(False, description="관련 문서로 프로젝트 컨텍스트를 분석할지 여부")


@router.get("/files")
async def list_files(
    page_token: Optional[str] = None,
    drive_client: DriveClient = Depends(get_drive_client),
) -> dict:
    """최근 수정순 Drive 파일 목록 API"""
    result = await drive_client.list_files(page_token=page_token)
    return result.model_dump(mode="json")


@router.get("/pdfs")
async def list_pdfs(
    search: Optional[str] = None,
    drive_client: DriveClient = Depends(get_drive_client),
) -> dict:
    """Drive PDF 검색 API"""
    result = await drive_client.search_pdf_files(search)
    return result.model_dump(mode="json")


@router.post("/process-pdf")
async def process_pdf(
    request: ProcessPdfRequest,
    drive_client: DriveClient = Depends(get_drive_client),
    pdf_service: PDFService = Depends(get_pdf_service),
    orchestrator: ProposalOrchestrator = Depends(get_orchestrator),
) -> dict:
    """
    Drive의 RFP PDF로 제안서를 생성하는 API.
    enhanced=true이면 같은 프로젝트의 다른 문서들을 분석하여 프롬프트를 확장합니다.
    """
    metadata = await drive_client.get_file_metadata(request.file_id)
    if metadata.mime_type != "application/pdf":
        raise InputValidationError(
            "Selected file is not a PDF",
            details={"file_id": request.file_id, "mime_type": metadata.mime_type},
        )

    data = await drive_client.download(request.file_id)
    requirements = await pdf_service.extract_requirements_from_pdf(data)
    logger.info(f"[Drive] RFP 처리 시작: {metadata.name} (enhanced={request.enhanced})")

    if request.enhanced:
        result = await orchestrator.generate_enhanced_proposal(
            requirements,
            drive_client,
            rfp_file_id=request.file_id,
            source_file_name=metadata.name,
        )
        return build_enhanced_response(
            "Enhanced business proposal generated from Google Drive",
            requirements, result, file_name=metadata.name,
        )

    state = await orchestrator.run_proposal_workflow(requirements)
    return build_proposal_response(
        "Business proposal generated from Google Drive PDF",
        requirements, state, file_name=metadata.name,
    )
